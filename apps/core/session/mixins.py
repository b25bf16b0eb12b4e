# ======================================================================
# PATH: apps/core/session/mixins.py
# ======================================================================
from __future__ import annotations

from .context import clear_current_session, session_from_user, set_current_session


class SessionContextMixin:
    """
    APIView mixin

    - initial(): 인증/권한 통과 후 SessionContext 생성 → self.session + contextvar
    - finalize_response(): 응답 종료 시 폐기 (401/403 포함)
    """

    session = None

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.session = session_from_user(request.user)
        set_current_session(self.session)

    def finalize_response(self, request, response, *args, **kwargs):
        try:
            return super().finalize_response(request, response, *args, **kwargs)
        finally:
            clear_current_session()
