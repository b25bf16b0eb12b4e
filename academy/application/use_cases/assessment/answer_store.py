"""
AnswerStore - 진행 중 attempt 의 문항별 답안 upsert

- 제출된 attempt 는 읽기 전용 (InvalidStateError)
- 문항은 attempt 의 시험 소속이어야 함 (아니면 NotFoundError)
- 답안 형태가 문항 유형과 다르면 ValidationError
- 응시 기간 종료 여부는 보지 않는다 (미완료 attempt 는 항상 재개 가능)
"""
from __future__ import annotations

import logging
from typing import Any

from academy.application.ports.clock import Clock
from academy.application.ports.unit_of_work import UnitOfWorkFactory
from academy.domain.assessment.answers import Answer, parse_answer_value
from academy.domain.assessment.errors import InvalidStateError, NotFoundError
from academy.domain.assessment.scoring import grade_answer

logger = logging.getLogger(__name__)


class AnswerStore:
    def __init__(self, uow_factory: UnitOfWorkFactory, clock: Clock):
        self._uow_factory = uow_factory
        self._clock = clock

    def set_answer(self, attempt_id: int, question_id: int, value: Any) -> Answer:
        now = self._clock.now()

        with self._uow_factory() as uow:
            # submit 과 직렬화 (제출 후 답안 변경 차단)
            attempt = uow.attempts.get_for_update(attempt_id)
            if attempt is None:
                raise NotFoundError("Attempt not found.", details={"attempt_id": attempt_id})

            if attempt.completed:
                raise InvalidStateError(
                    "Attempt already submitted; answers are read-only.",
                    code="attempt_submitted",
                    details={"attempt_id": attempt_id},
                )

            question = uow.questions.get(question_id)
            if question is None or question.exam_id != attempt.exam_id:
                raise NotFoundError(
                    "Question not found in this test.",
                    details={"question_id": question_id},
                )

            parsed = parse_answer_value(question, value)
            is_correct, _ = grade_answer(question, parsed)

            answer = uow.answers.upsert(
                Answer(attempt_id=attempt_id, question_id=question_id, value=parsed, updated_at=now),
                is_correct=is_correct,
            )
            uow.attempts.touch(attempt_id, now)

        logger.debug("ANSWER_SAVED attempt_id=%s question_id=%s", attempt_id, question_id)
        return answer

    def get_answers(self, attempt_id: int) -> list[Answer]:
        with self._uow_factory() as uow:
            if uow.attempts.get(attempt_id) is None:
                raise NotFoundError("Attempt not found.", details={"attempt_id": attempt_id})
            return uow.answers.list_for_attempt(attempt_id)
