"""
ProctoringAggregator - 감독 위반 이벤트 누적 + 제출 시 유효성 판정

record_event:
  1) 이벤트 타입 정규화 (모르는 타입 → ValidationError, 상태 변경 없음)
  2) 버퍼(Redis) 사용 가능 → 버퍼 증가 (Write-Behind)
     버퍼 미사용/장애 → DB 원자적 증가
  3) 실시간 카운터 반환 (DB + 버퍼 합산)

finalize (submit 트랜잭션 안에서 호출):
  버퍼 close → 남은 카운터 DB 반영 → row lock 상태 최종값으로 판정 → 동결
  이미 동결된 리포트는 그대로 반환 (멱등)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from academy.application.ports.clock import Clock
from academy.application.ports.counters import ProctoringCounterBuffer
from academy.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory
from academy.domain.assessment.entities import COUNTER_FIELDS, SessionReport
from academy.domain.assessment.errors import InvalidStateError, NotFoundError, ValidationError
from academy.domain.assessment.proctoring import ProctoringPolicy, judge_validity, parse_violation_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveCounters:
    attempt_id: int
    counters: dict[str, int] = field(default_factory=dict)
    max_violations: int = 10

    @property
    def total(self) -> int:
        return sum(self.counters.values())

    @property
    def max_violations_reached(self) -> bool:
        return self.total >= int(self.max_violations)


class ReportStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    # 감독 없는 시험
    NOT_APPLICABLE = "NOT_APPLICABLE"


@dataclass(frozen=True)
class SessionReportLookup:
    attempt_id: int
    status: ReportStatus
    report: Optional[SessionReport] = None


def _merge(base: Mapping[str, int], extra: Optional[Mapping[str, int]]) -> dict[str, int]:
    merged = {name: int(base.get(name, 0) or 0) for name in COUNTER_FIELDS}
    for name, n in (extra or {}).items():
        if name in merged:
            merged[name] += int(n or 0)
    return merged


def _parse_count(count: Any) -> int:
    if isinstance(count, bool):
        raise ValidationError("count must be a positive integer.", code="invalid_event_count")
    try:
        n = int(count)
    except (TypeError, ValueError):
        raise ValidationError("count must be a positive integer.", code="invalid_event_count")
    if n < 1:
        raise ValidationError(
            "count must be a positive integer.",
            code="invalid_event_count",
            details={"count": n},
        )
    return n


class ProctoringAggregator:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Clock,
        policy: Optional[ProctoringPolicy] = None,
        buffer: Optional[ProctoringCounterBuffer] = None,
    ):
        self._uow_factory = uow_factory
        self._clock = clock
        self._policy = policy or ProctoringPolicy()
        self._buffer = buffer

    @property
    def policy(self) -> ProctoringPolicy:
        return self._policy

    def record_event(self, attempt_id: int, event_type: Any, count: Any = 1) -> LiveCounters:
        violation = parse_violation_type(event_type)
        n = _parse_count(count)

        with self._uow_factory() as uow:
            attempt = uow.attempts.get(attempt_id)
            if attempt is None:
                raise NotFoundError("Attempt not found.", details={"attempt_id": attempt_id})

            exam = uow.exams.get(attempt.exam_id)
            if exam is None or not exam.proctored:
                raise ValidationError(
                    "This test is not proctored.",
                    code="not_proctored",
                    details={"attempt_id": attempt_id},
                )

            if attempt.completed:
                raise InvalidStateError(
                    "Proctoring session already ended.",
                    code="session_finalized",
                    details={"attempt_id": attempt_id},
                )

            buffered = None
            if self._buffer is not None:
                buffered = self._buffer.increment(attempt_id, violation.counter_field, n)

            if buffered is not None:
                base = uow.session_reports.get(attempt_id)
                counters = _merge(base.counters() if base else {}, buffered)
            else:
                report = uow.session_reports.increment(attempt_id, {violation.counter_field: n})
                counters = report.counters()

        live = LiveCounters(attempt_id=attempt_id, counters=counters, max_violations=exam.max_violations)

        logger.debug(
            "PROCTORING_EVENT attempt_id=%s type=%s count=%s total=%s buffered=%s",
            attempt_id, violation.value, n, live.total, buffered is not None,
        )
        if live.max_violations_reached:
            logger.warning(
                "PROCTORING_MAX_VIOLATIONS attempt_id=%s total=%s max=%s",
                attempt_id, live.total, exam.max_violations,
            )
        return live

    def finalize(self, attempt_id: int, *, uow: Optional[UnitOfWork] = None) -> SessionReport:
        if uow is None:
            with self._uow_factory() as own:
                return self._finalize(own, attempt_id)
        return self._finalize(uow, attempt_id)

    def _finalize(self, uow: UnitOfWork, attempt_id: int) -> SessionReport:
        existing = uow.session_reports.get(attempt_id)
        if existing is not None and existing.is_finalized:
            return existing

        if self._buffer is not None:
            drained = self._buffer.close(attempt_id)
            if drained is not None:
                # 제출이 rollback 되면 attempt 는 IN_PROGRESS 로 남으므로 버퍼도 되살린다
                buffer = self._buffer
                uow.on_rollback(lambda: buffer.reopen(attempt_id, drained))
            pending = {k: int(v) for k, v in (drained or {}).items() if k in COUNTER_FIELDS and int(v or 0) > 0}
            if pending:
                uow.session_reports.increment(attempt_id, pending)

        report = uow.session_reports.finalize(
            attempt_id,
            judge=lambda counters: judge_validity(counters, self._policy),
            now=self._clock.now(),
        )

        logger.info(
            "PROCTORING_FINALIZED attempt_id=%s valid=%s total=%s reason=%s",
            attempt_id, report.is_valid_test, report.total_violations, report.invalid_reason,
        )
        return report

    def get_report(self, attempt_id: int) -> SessionReportLookup:
        with self._uow_factory() as uow:
            attempt = uow.attempts.get(attempt_id)
            if attempt is None:
                raise NotFoundError("Attempt not found.", details={"attempt_id": attempt_id})

            exam = uow.exams.get(attempt.exam_id)
            if exam is None or not exam.proctored:
                return SessionReportLookup(attempt_id=attempt_id, status=ReportStatus.NOT_APPLICABLE)

            report = uow.session_reports.get(attempt_id) or SessionReport(attempt_id=attempt_id)

        if not report.is_finalized and self._buffer is not None:
            pending = self._buffer.snapshot(attempt_id)
            if pending:
                report = SessionReport(attempt_id=attempt_id, **_merge(report.counters(), pending))

        return SessionReportLookup(attempt_id=attempt_id, status=ReportStatus.AVAILABLE, report=report)
