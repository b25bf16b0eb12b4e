# apps/api/common/middleware.py
# 뷰에서 미처리 예외 발생 시 500 JSON 반환.
# process_exception 응답은 CorsMiddleware를 거치지 않으므로 여기서 CORS 헤더 추가.
from __future__ import annotations

import logging

from django.conf import settings
from django.http import JsonResponse

from apps.core.session.context import clear_current_session

logger = logging.getLogger(__name__)


def _add_cors_headers_to_response(request, response):
    origin = (request.META.get("HTTP_ORIGIN") or "").strip()
    allowed = getattr(settings, "CORS_ALLOWED_ORIGINS", []) or []
    if origin and (getattr(settings, "CORS_ALLOW_ALL_ORIGINS", False) or origin in allowed):
        response["Access-Control-Allow-Origin"] = origin
    if getattr(settings, "CORS_ALLOW_CREDENTIALS", False):
        response["Access-Control-Allow-Credentials"] = "true"
    return response


class UnhandledExceptionMiddleware:
    """
    미처리 예외를 500 JSON으로 변환.
    요청 세션 컨텍스트는 예외 경로에서도 폐기.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        try:
            return self.get_response(request)
        finally:
            clear_current_session()

    def process_exception(self, request, exception):
        logger.exception("UNHANDLED_EXCEPTION path=%s", request.path)
        body = {"detail": "Internal server error.", "code": "server_error"}
        if settings.DEBUG:
            body["error"] = str(exception)
        return _add_cors_headers_to_response(request, JsonResponse(body, status=500))
