"""
AssessmentService - 입력 표면 (HTTP 뷰는 이 facade 만 호출)

모든 연산은 SessionContext 를 명시적으로 받는다.
scope 밖(타 학생 attempt, 타 대학 시험 등)은 존재를 드러내지 않도록 NotFoundError.

권한 판단은 capabilities 만 사용 (역할 문자열 비교 금지):
- 본인 attempt: 항상 접근 가능
- can_view_all_results: 전체
- can_view_college_results: 소속 대학 시험
- can_view_own_test_results: 본인이 만든 시험
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from academy.application.ports.clock import Clock
from academy.application.ports.counters import ProctoringCounterBuffer
from academy.application.ports.session import SessionContext
from academy.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory
from academy.application.use_cases.assessment.answer_store import AnswerStore
from academy.application.use_cases.assessment.attempt_ledger import AttemptLedger, Resolution
from academy.application.use_cases.assessment.event_channel import ProctoringEvent, ProctoringEventChannel
from academy.application.use_cases.assessment.proctoring_aggregator import (
    LiveCounters,
    ProctoringAggregator,
    SessionReportLookup,
)
from academy.application.use_cases.assessment.result_projection import project
from academy.domain.assessment.answers import Answer
from academy.domain.assessment.entities import Attempt, Exam, Question, QuestionType, Result
from academy.domain.assessment.errors import NotFoundError
from academy.domain.assessment.proctoring import ProctoringPolicy, parse_violation_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuestionView:
    """학생용 문항 (정답 키 없음)."""
    id: int
    number: int
    type: QuestionType
    text: str
    marks: int
    negative_marks: int
    options: tuple[str, ...] = ()


def public_question(q: Question) -> QuestionView:
    return QuestionView(
        id=q.id,
        number=q.number,
        type=q.type,
        text=q.text,
        marks=int(q.marks),
        negative_marks=int(q.negative_marks),
        options=tuple(q.options),
    )


@dataclass(frozen=True)
class AttemptState:
    attempt: Attempt
    exam: Exam
    questions: list[QuestionView] = field(default_factory=list)
    # question_id → answer_text
    answers: dict[int, str] = field(default_factory=dict)


def _exam_in_scope(exam: Exam, session: SessionContext) -> bool:
    caps = session.capabilities
    if caps.can_view_all_results or caps.can_manage_colleges:
        return True
    if exam.college_id is None or exam.college_id == session.college_id:
        return True
    # 소속 대학이 달라도 본인이 만든 시험은 관리 가능 (시험 목록과 동일 기준)
    return caps.can_manage_tests and exam.created_by_id == session.user_id


def _can_oversee(exam: Exam, session: SessionContext) -> bool:
    caps = session.capabilities
    if caps.can_view_all_results:
        return True
    if caps.can_view_college_results:
        return exam.college_id is not None and exam.college_id == session.college_id
    if caps.can_view_own_test_results:
        return exam.created_by_id is not None and exam.created_by_id == session.user_id
    return False


class AssessmentService:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Clock,
        *,
        policy: Optional[ProctoringPolicy] = None,
        counter_buffer: Optional[ProctoringCounterBuffer] = None,
        event_channel: Optional[ProctoringEventChannel] = None,
    ):
        self._uow_factory = uow_factory
        self._clock = clock

        self.proctoring = ProctoringAggregator(uow_factory, clock, policy=policy, buffer=counter_buffer)
        self.ledger = AttemptLedger(uow_factory, clock, aggregator=self.proctoring)
        self.answers = AnswerStore(uow_factory, clock)
        self.event_channel = event_channel

    # ------------------------------------------------------------------
    # scope helpers
    # ------------------------------------------------------------------

    def _exam_or_404(self, uow: UnitOfWork, exam_id: int, session: SessionContext) -> Exam:
        exam = uow.exams.get(exam_id)
        if exam is None or not _exam_in_scope(exam, session):
            raise NotFoundError("Test not found.", details={"exam_id": exam_id})
        return exam

    def _attempt_or_404(
        self,
        uow: UnitOfWork,
        attempt_id: int,
        session: SessionContext,
        *,
        owner_only: bool = False,
        require_reports: bool = False,
    ) -> tuple[Attempt, Exam]:
        not_found = NotFoundError("Attempt not found.", details={"attempt_id": attempt_id})

        attempt = uow.attempts.get(attempt_id)
        if attempt is None:
            raise not_found
        exam = uow.exams.get(attempt.exam_id)
        if exam is None:
            raise not_found

        if attempt.student_id == session.user_id:
            return attempt, exam
        if owner_only or not _can_oversee(exam, session):
            raise not_found
        if require_reports and not session.capabilities.can_view_session_reports:
            raise not_found
        return attempt, exam

    def _check_owner(self, attempt_id: int, session: SessionContext) -> None:
        with self._uow_factory() as uow:
            self._attempt_or_404(uow, attempt_id, session, owner_only=True)

    # ------------------------------------------------------------------
    # 응시
    # ------------------------------------------------------------------

    def start_or_resume_test(self, exam_id: int, session: SessionContext) -> Resolution:
        caps = session.capabilities
        if not (caps.can_take_tests or caps.can_preview_tests):
            raise NotFoundError("Test not found.", details={"exam_id": exam_id})

        with self._uow_factory() as uow:
            self._exam_or_404(uow, exam_id, session)

        return self.ledger.start_or_resume(exam_id, session.user_id, can_preview=caps.can_preview_tests)

    def get_attempt_state(self, attempt_id: int, session: SessionContext) -> AttemptState:
        with self._uow_factory() as uow:
            attempt, exam = self._attempt_or_404(uow, attempt_id, session, owner_only=True)
            return self._build_state(uow, attempt, exam)

    def get_attempt_state_for_exam(self, exam_id: int, session: SessionContext) -> AttemptState:
        """진행 중 attempt 우선, 없으면 가장 최근 attempt."""
        with self._uow_factory() as uow:
            exam = self._exam_or_404(uow, exam_id, session)
            attempts = uow.attempts.list_for(exam_id, session.user_id)
            if not attempts:
                raise NotFoundError("No attempt for this test.", details={"exam_id": exam_id})
            active = [a for a in attempts if not a.completed]
            attempt = active[0] if active else max(attempts, key=lambda a: a.attempt_number)
            return self._build_state(uow, attempt, exam)

    def _build_state(self, uow: UnitOfWork, attempt: Attempt, exam: Exam) -> AttemptState:
        questions = [public_question(q) for q in uow.questions.list_for_exam(exam.id)]
        answers = {a.question_id: a.answer_text for a in uow.answers.list_for_attempt(attempt.id)}
        return AttemptState(attempt=attempt, exam=exam, questions=questions, answers=answers)

    def answer_question(self, attempt_id: int, question_id: int, value: Any, session: SessionContext) -> Answer:
        self._check_owner(attempt_id, session)
        return self.answers.set_answer(attempt_id, question_id, value)

    def report_proctoring_event(
        self,
        attempt_id: int,
        event_type: Any,
        session: SessionContext,
        count: Any = 1,
    ) -> LiveCounters:
        self._check_owner(attempt_id, session)
        return self.proctoring.record_event(attempt_id, event_type, count)

    def enqueue_proctoring_event(
        self,
        attempt_id: int,
        event_type: Any,
        session: SessionContext,
        count: int = 1,
    ) -> bool:
        """
        event_channel 경유 비동기 기록.
        타입 오류/권한 오류는 즉시 raise, 큐 포화 시 False.
        """
        if self.event_channel is None:
            raise RuntimeError("event_channel is not configured")
        self._check_owner(attempt_id, session)
        violation = parse_violation_type(event_type)
        return self.event_channel.offer(ProctoringEvent(attempt_id=attempt_id, event_type=violation, count=count))

    def submit_test(self, attempt_id: int, session: SessionContext) -> Result:
        self._check_owner(attempt_id, session)
        self.ledger.submit(attempt_id)
        return self.fetch_result(attempt_id, session)

    # ------------------------------------------------------------------
    # 결과
    # ------------------------------------------------------------------

    def fetch_result(self, attempt_id: int, session: SessionContext) -> Result:
        with self._uow_factory() as uow:
            attempt, exam = self._attempt_or_404(uow, attempt_id, session)
            report = uow.session_reports.get(attempt_id) if exam.proctored else None
        return project(attempt, exam, report, now=self._clock.now())

    def fetch_session_report(self, attempt_id: int, session: SessionContext) -> SessionReportLookup:
        with self._uow_factory() as uow:
            self._attempt_or_404(uow, attempt_id, session, require_reports=True)
        return self.proctoring.get_report(attempt_id)

    def list_results(self, session: SessionContext, exam_id: Optional[int] = None) -> list[Result]:
        caps = session.capabilities
        now = self._clock.now()

        with self._uow_factory() as uow:
            student_id: Optional[int] = None
            if caps.can_view_all_results:
                exam_ids = None
            elif caps.can_view_college_results:
                exam_ids = uow.exams.list_ids(college_id=session.college_id) if session.college_id else []
            elif caps.can_view_own_test_results:
                exam_ids = uow.exams.list_ids(created_by_id=session.user_id)
            else:
                exam_ids = None
                student_id = session.user_id

            if exam_id is not None:
                if exam_ids is not None and exam_id not in exam_ids:
                    return []
                exam_ids = [exam_id]

            attempts = uow.attempts.list(exam_ids=exam_ids, student_id=student_id)

            exams: dict[int, Exam] = {}
            results: list[Result] = []
            for attempt in attempts:
                exam = exams.get(attempt.exam_id)
                if exam is None:
                    exam = uow.exams.get(attempt.exam_id)
                    if exam is None:
                        continue
                    exams[exam.id] = exam
                report = uow.session_reports.get(attempt.id) if exam.proctored else None
                results.append(project(attempt, exam, report, now=now))

        return results

    def delete_result(self, attempt_id: int, session: SessionContext) -> None:
        caps = session.capabilities

        with self._uow_factory() as uow:
            attempt = uow.attempts.get(attempt_id)
            exam = uow.exams.get(attempt.exam_id) if attempt is not None else None

            allowed = exam is not None and caps.can_delete_results and (
                caps.can_view_all_results
                or (exam.college_id is not None and exam.college_id == session.college_id)
            )
            if not allowed:
                raise NotFoundError("Attempt not found.", details={"attempt_id": attempt_id})

            uow.attempts.delete(attempt_id)

        logger.info("RESULT_DELETED attempt_id=%s by user_id=%s", attempt_id, session.user_id)

    # ------------------------------------------------------------------
    # 문항 (question bank)
    # ------------------------------------------------------------------

    def list_questions(self, exam_id: int, session: SessionContext) -> list:
        """
        시험 관리자(can_manage_tests/preview + scope): 정답 키 포함 Question
        그 외: 공개된 시험만, 정답 키 없는 QuestionView
        """
        caps = session.capabilities
        with self._uow_factory() as uow:
            exam = self._exam_or_404(uow, exam_id, session)
            questions = uow.questions.list_for_exam(exam_id)

        if (caps.can_manage_tests or caps.can_preview_tests) and (
            caps.can_view_all_results or _can_oversee(exam, session) or caps.can_view_college_results
        ):
            return questions

        if not exam.published:
            raise NotFoundError("Test not found.", details={"exam_id": exam_id})
        return [public_question(q) for q in questions]
