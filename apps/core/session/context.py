# ======================================================================
# PATH: apps/core/session/context.py
# ======================================================================
from __future__ import annotations

from contextvars import ContextVar
from typing import Optional

from academy.application.ports.session import SessionContext
from academy.domain.assessment.roles import Role

_current_session: ContextVar[Optional[SessionContext]] = ContextVar("current_session", default=None)


def session_from_user(user) -> SessionContext:
    """인증된 User → SessionContext (요청 단위)."""
    return SessionContext(
        user_id=int(user.pk),
        role=Role.parse(getattr(user, "role", None)),
        college_id=getattr(user, "college_id", None),
    )


def set_current_session(session: SessionContext) -> None:
    _current_session.set(session)


def get_current_session() -> Optional[SessionContext]:
    return _current_session.get()


def clear_current_session() -> None:
    _current_session.set(None)
