"""
AttemptLedger - 응시 시작/재개/차단 판단 + 생성/제출 (도메인/포트만 사용)

resolve 우선순위 (고정):
1) 미완료 attempt 존재 → RESUME (기간 종료/횟수 제한보다 항상 우선)
2) 미공개 시험 → BLOCKED(not_published)        * 미리보기 권한이면 skip
3) 완료 attempt 수 >= max_attempts → BLOCKED(max_attempts_reached)
4) now < start_time → BLOCKED(not_yet_open)    * 미리보기 권한이면 skip
5) now > end_time → BLOCKED(window_closed)     * 미리보기 권한이면 skip
6) START_NEW

create 는 원자적 check-then-insert: 경합 패자는 ConflictError.
submit 은 멱등: 이미 제출된 attempt는 그대로 반환.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional

from academy.application.ports.clock import Clock
from academy.application.ports.unit_of_work import UnitOfWorkFactory
from academy.domain.assessment.entities import Attempt, Exam
from academy.domain.assessment.errors import ConflictError, InvalidStateError, NotFoundError
from academy.domain.assessment.scoring import compute_attempt_score

logger = logging.getLogger(__name__)


class Decision(str, Enum):
    RESUME = "RESUME"
    START_NEW = "START_NEW"
    BLOCKED = "BLOCKED"


class BlockReason(str, Enum):
    NOT_PUBLISHED = "not_published"
    MAX_ATTEMPTS_REACHED = "max_attempts_reached"
    NOT_YET_OPEN = "not_yet_open"
    WINDOW_CLOSED = "window_closed"


@dataclass(frozen=True)
class Resolution:
    decision: Decision
    attempt: Optional[Attempt] = None
    reason: Optional[BlockReason] = None
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def resume(cls, attempt: Attempt) -> "Resolution":
        return cls(Decision.RESUME, attempt=attempt, message="Resuming attempt in progress.")

    @classmethod
    def start_new(cls, attempt: Optional[Attempt] = None) -> "Resolution":
        return cls(Decision.START_NEW, attempt=attempt, message="Eligible to start a new attempt.")

    @classmethod
    def blocked(cls, reason: BlockReason, message: str, **details: Any) -> "Resolution":
        return cls(Decision.BLOCKED, reason=reason, message=message, details=details)


def resolve_attempt(
    exam: Exam,
    attempts: Iterable[Attempt],
    now: datetime,
    *,
    can_preview: bool = False,
) -> Resolution:
    attempts = list(attempts)

    active = next((a for a in attempts if not a.completed), None)
    if active is not None:
        return Resolution.resume(active)

    if not exam.published and not can_preview:
        return Resolution.blocked(
            BlockReason.NOT_PUBLISHED,
            "This test has not been published yet.",
        )

    used = sum(1 for a in attempts if a.completed)
    if used >= int(exam.max_attempts):
        return Resolution.blocked(
            BlockReason.MAX_ATTEMPTS_REACHED,
            f"Maximum attempts reached ({used}/{exam.max_attempts}).",
            used=used,
            max=int(exam.max_attempts),
        )

    if not can_preview:
        if now < exam.start_time:
            return Resolution.blocked(
                BlockReason.NOT_YET_OPEN,
                f"This test opens at {exam.start_time.isoformat()}.",
                start_time=exam.start_time.isoformat(),
            )
        if now > exam.end_time:
            return Resolution.blocked(
                BlockReason.WINDOW_CLOSED,
                f"This test closed at {exam.end_time.isoformat()}.",
                end_time=exam.end_time.isoformat(),
            )

    return Resolution.start_new()


class AttemptLedger:
    def __init__(self, uow_factory: UnitOfWorkFactory, clock: Clock, aggregator=None):
        self._uow_factory = uow_factory
        self._clock = clock
        # ProctoringAggregator (submit 시 finalize)
        self._aggregator = aggregator

    def resolve(self, exam_id: int, student_id: int, *, can_preview: bool = False) -> Resolution:
        with self._uow_factory() as uow:
            exam = uow.exams.get(exam_id)
            if exam is None:
                raise NotFoundError("Test not found.", details={"exam_id": exam_id})
            attempts = uow.attempts.list_for(exam_id, student_id)
        return resolve_attempt(exam, attempts, self._clock.now(), can_preview=can_preview)

    def create_attempt(self, exam_id: int, student_id: int) -> Attempt:
        now = self._clock.now()

        with self._uow_factory() as uow:
            # (exam, student) 단위 직렬화. 같은 시험의 다른 학생은 대기하지 않음
            uow.attempts.lock_slot(exam_id, student_id)
            exam = uow.exams.get(exam_id)
            if exam is None:
                raise NotFoundError("Test not found.", details={"exam_id": exam_id})

            attempts = uow.attempts.list_for(exam_id, student_id)

            active = next((a for a in attempts if not a.completed), None)
            if active is not None:
                raise ConflictError(
                    "Another attempt is already in progress for this test.",
                    details={"attempt_id": active.id},
                )

            if len(attempts) >= int(exam.max_attempts):
                raise InvalidStateError(
                    f"Maximum attempts reached ({len(attempts)}/{exam.max_attempts}).",
                    code="max_attempts_reached",
                    details={"used": len(attempts), "max": int(exam.max_attempts)},
                )

            attempt = uow.attempts.create(exam_id, student_id, len(attempts) + 1, now)

        logger.info(
            "ATTEMPT_STARTED attempt_id=%s exam_id=%s student_id=%s number=%s",
            attempt.id, exam_id, student_id, attempt.attempt_number,
        )
        return attempt

    def start_or_resume(self, exam_id: int, student_id: int, *, can_preview: bool = False) -> Resolution:
        resolution = self.resolve(exam_id, student_id, can_preview=can_preview)
        if resolution.decision != Decision.START_NEW:
            return resolution

        try:
            attempt = self.create_attempt(exam_id, student_id)
        except ConflictError:
            # 동시 생성 경합 패자: 승자의 attempt 를 RESUME
            logger.info("ATTEMPT_CREATE_RACE exam_id=%s student_id=%s re-resolving", exam_id, student_id)
            return self.resolve(exam_id, student_id, can_preview=can_preview)

        return Resolution.start_new(attempt)

    def submit(self, attempt_id: int, *, strict: bool = False) -> Attempt:
        now = self._clock.now()

        with self._uow_factory() as uow:
            attempt = uow.attempts.get_for_update(attempt_id)
            if attempt is None:
                raise NotFoundError("Attempt not found.", details={"attempt_id": attempt_id})

            if attempt.completed:
                if strict:
                    raise InvalidStateError(
                        "Attempt already submitted.",
                        code="already_submitted",
                        details={"attempt_id": attempt_id},
                    )
                logger.info("ATTEMPT_SUBMIT_SKIP attempt_id=%s reason=already_submitted", attempt_id)
                return attempt

            exam = uow.exams.get(attempt.exam_id)
            questions = uow.questions.list_for_exam(attempt.exam_id)
            answers = uow.answers.list_for_attempt(attempt_id)
            score = compute_attempt_score(questions, answers)

            submitted = uow.attempts.mark_submitted(attempt_id, score, now)

            if exam is not None and exam.proctored and self._aggregator is not None:
                self._aggregator.finalize(attempt_id, uow=uow)

        logger.info("ATTEMPT_SUBMITTED attempt_id=%s score=%s", attempt_id, submitted.score)
        return submitted
