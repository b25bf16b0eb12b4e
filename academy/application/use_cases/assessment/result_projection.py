"""
ResultProjection - Attempt + Exam + SessionReport → 조회용 Result (순수 함수, 저장 안 함)

- percentage = 100 * score / total_marks (total_marks == 0 이면 0)
- display_percentage 는 [0, 100] 으로 clamp (저장된 score 는 그대로)
- 리포트가 없으면 유효한 응시로 본다
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from academy.domain.assessment.entities import Attempt, Exam, Result, SessionReport


def _percentage(score: int, total_marks: int) -> float:
    if int(total_marks) <= 0:
        return 0.0
    return round(100.0 * int(score) / int(total_marks), 2)


def project(
    attempt: Attempt,
    exam: Exam,
    session_report: Optional[SessionReport] = None,
    *,
    now: Optional[datetime] = None,
) -> Result:
    percentage = _percentage(attempt.score, exam.total_marks)

    is_valid = True
    invalid_reason = None
    counters: dict[str, int] = {}
    if session_report is not None:
        counters = session_report.counters()
        if session_report.is_valid_test is not None:
            is_valid = bool(session_report.is_valid_test)
            invalid_reason = session_report.invalid_reason

    # 상태 판정 기준 시각: 없으면 제출 시각 (없으면 시작 시각)
    ref = now or attempt.submitted_at or attempt.started_at

    return Result(
        attempt_id=attempt.id,
        exam=exam,
        student_id=attempt.student_id,
        score=int(attempt.score),
        total_marks=int(exam.total_marks),
        percentage=percentage,
        display_percentage=min(max(percentage, 0.0), 100.0),
        submitted_at=attempt.submitted_at,
        attempt_number=attempt.attempt_number,
        is_valid_test=is_valid,
        completed=bool(attempt.completed),
        status=attempt.status_at(ref, exam),
        invalid_reason=invalid_reason,
        started_at=attempt.started_at,
        counters=counters,
    )
