"""
DRF 예외 핸들러 - Assessment 도메인 오류 → HTTP 매핑 (여기서만)

응답 body: {"detail": message, "code": code, ...details}
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from academy.domain.assessment.errors import (
    AssessmentError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidStateError, status.HTTP_409_CONFLICT),
)


def status_for(exc: AssessmentError) -> int:
    for klass, code in _STATUS_BY_ERROR:
        if isinstance(exc, klass):
            return code
    return status.HTTP_400_BAD_REQUEST


def assessment_exception_handler(exc, context):
    if not isinstance(exc, AssessmentError):
        return drf_exception_handler(exc, context)

    http_status = status_for(exc)
    view = context.get("view")
    logger.warning(
        "ASSESSMENT_ERROR view=%s status=%s code=%s detail=%s",
        view.__class__.__name__ if view is not None else "-",
        http_status, exc.code, exc.message,
    )

    body = dict(exc.details)
    body["detail"] = exc.message
    body["code"] = exc.code
    return Response(body, status=http_status)
