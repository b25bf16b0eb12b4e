"""
Assessment 도메인 오류 - 순수 파이썬

모든 오류는 code(기계 판독용) / message(표시용) / details(부가 정보)를 가진다.
HTTP 상태 매핑은 apps.api.common.exceptions 에서만 수행.
"""
from __future__ import annotations

from typing import Any, Optional


class AssessmentError(Exception):
    """Assessment 도메인 규칙 위반 공통 베이스."""

    default_code = "assessment_error"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = str(message)
        self.code = str(code or self.default_code)
        self.details = dict(details or {})


class ValidationError(AssessmentError):
    """입력 형식 오류 (이벤트 타입, 답안 형태, 음수 카운트 등)."""

    default_code = "validation_error"


class ConflictError(AssessmentError):
    """동시 Attempt 생성 경합. 호출부는 create 재시도 대신 resolve()를 다시 호출."""

    default_code = "attempt_conflict"


class InvalidStateError(AssessmentError):
    """종료/동결된 엔티티에 대한 조작 (제출 후 답안, finalize 후 이벤트 등)."""

    default_code = "invalid_state"


class NotFoundError(AssessmentError):
    """호출자 scope 안에 존재하지 않음 (타 학생 attempt 접근 포함)."""

    default_code = "not_found"
