"""
Assessment Repository - Django ORM 구현 (메서드 내부에서만 apps.domains.* import)

원자성:
- attempt 생성: 부분 unique 제약(uniq_active_exam_attempt) 위반 → ConflictError
- 감독 카운터: F() 증가 (read-modify-write 금지), finalize 이후 증가 차단
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Mapping, Optional, Tuple

from academy.domain.assessment.answers import Answer, decode_answer_value
from academy.domain.assessment.entities import (
    COUNTER_FIELDS,
    Attempt,
    Exam,
    Question,
    QuestionType,
    SessionReport,
)
from academy.domain.assessment.errors import ConflictError, InvalidStateError


# ---------------------------------------------------------------------
# model → entity
# ---------------------------------------------------------------------

def exam_to_entity(m) -> Optional[Exam]:
    if m is None:
        return None
    return Exam(
        id=m.id,
        title=m.title,
        total_marks=int(m.total_marks or 0),
        start_time=m.start_time,
        end_time=m.end_time,
        max_attempts=int(m.max_attempts or 1),
        duration_minutes=m.duration_minutes,
        proctored=bool(m.proctored),
        published=bool(m.published),
        max_violations=int(m.max_violations or 0),
        description=m.description or "",
        college_id=m.college_id,
        created_by_id=m.created_by_id,
    )


def question_to_entity(m) -> Optional[Question]:
    if m is None:
        return None
    qtype = QuestionType(m.question_type)
    options: tuple = ()
    if qtype in (QuestionType.SINGLE_CHOICE, QuestionType.MULTI_CHOICE):
        options = (m.option_a, m.option_b, m.option_c, m.option_d)
    correct_options = frozenset(
        p.strip().upper() for p in (m.correct_options or "").split(",") if p.strip()
    )
    return Question(
        id=m.id,
        exam_id=m.exam_id,
        type=qtype,
        marks=int(m.marks),
        negative_marks=int(m.negative_marks or 0),
        number=int(m.number or 0),
        text=m.text or "",
        options=options,
        correct_option=(m.correct_option or "").strip().upper() or None,
        correct_options=correct_options,
        reference_answer=m.reference_answer or None,
    )


def attempt_to_entity(m) -> Optional[Attempt]:
    if m is None:
        return None
    return Attempt(
        id=m.id,
        exam_id=m.exam_id,
        student_id=m.student_id,
        attempt_number=int(m.attempt_index),
        started_at=m.started_at,
        submitted_at=m.submitted_at,
        completed=bool(m.completed),
        score=int(m.score or 0),
        updated_at=getattr(m, "updated_at", None),
    )


def answer_to_entity(m) -> Answer:
    return Answer(
        attempt_id=m.attempt_id,
        question_id=m.question_id,
        value=decode_answer_value(QuestionType(m.question.question_type), m.answer_text),
        updated_at=getattr(m, "updated_at", None),
    )


def report_to_entity(m) -> Optional[SessionReport]:
    if m is None:
        return None
    return SessionReport(
        attempt_id=m.attempt_id,
        **{name: int(getattr(m, name) or 0) for name in COUNTER_FIELDS},
        is_valid_test=m.is_valid_test,
        invalid_reason=m.invalid_reason,
        finalized_at=m.finalized_at,
    )


# ---------------------------------------------------------------------
# repositories
# ---------------------------------------------------------------------

class DjangoExamRepository:
    def get(self, exam_id: int) -> Optional[Exam]:
        from apps.domains.exams.models import Exam as ExamModel
        return exam_to_entity(ExamModel.objects.filter(pk=exam_id).first())

    def list_ids(self, *, college_id: Optional[int] = None, created_by_id: Optional[int] = None) -> list[int]:
        from apps.domains.exams.models import Exam as ExamModel
        qs = ExamModel.objects.all()
        if college_id is not None:
            qs = qs.filter(college_id=college_id)
        if created_by_id is not None:
            qs = qs.filter(created_by_id=created_by_id)
        return list(qs.values_list("id", flat=True))


class DjangoQuestionRepository:
    def get(self, question_id: int) -> Optional[Question]:
        from apps.domains.exams.models import ExamQuestion
        return question_to_entity(ExamQuestion.objects.filter(pk=question_id).first())

    def list_for_exam(self, exam_id: int) -> list[Question]:
        from apps.domains.exams.models import ExamQuestion
        qs = ExamQuestion.objects.filter(exam_id=exam_id).order_by("number", "id")
        return [question_to_entity(m) for m in qs]


class DjangoAttemptRepository:
    def get(self, attempt_id: int) -> Optional[Attempt]:
        from apps.domains.results.models import ExamAttempt
        return attempt_to_entity(ExamAttempt.objects.filter(pk=attempt_id).first())

    def get_for_update(self, attempt_id: int) -> Optional[Attempt]:
        from apps.domains.results.models import ExamAttempt
        return attempt_to_entity(ExamAttempt.objects.select_for_update().filter(pk=attempt_id).first())

    def lock_slot(self, exam_id: int, student_id: int) -> None:
        """
        Postgres: (exam_id, student_id) 트랜잭션 advisory lock.
        그 외 DB: 부분 unique 제약(uniq_active_exam_attempt / uniq_exam_attempt_index)만으로 배타성 보장.
        """
        from django.db import connection

        if connection.vendor != "postgresql":
            return
        with connection.cursor() as cursor:
            cursor.execute("SELECT pg_advisory_xact_lock(%s, %s)", [int(exam_id), int(student_id)])

    def list_for(self, exam_id: int, student_id: int) -> list[Attempt]:
        from apps.domains.results.models import ExamAttempt
        qs = ExamAttempt.objects.filter(exam_id=exam_id, student_id=student_id).order_by("attempt_index")
        return [attempt_to_entity(m) for m in qs]

    def list(
        self,
        *,
        exam_ids: Optional[Iterable[int]] = None,
        student_id: Optional[int] = None,
    ) -> list[Attempt]:
        from apps.domains.results.models import ExamAttempt
        qs = ExamAttempt.objects.all()
        if exam_ids is not None:
            qs = qs.filter(exam_id__in=list(exam_ids))
        if student_id is not None:
            qs = qs.filter(student_id=student_id)
        return [attempt_to_entity(m) for m in qs]

    def create(self, exam_id: int, student_id: int, attempt_number: int, started_at: datetime) -> Attempt:
        from django.db import IntegrityError, transaction
        from apps.domains.results.models import ExamAttempt

        try:
            # savepoint: 실패해도 바깥 트랜잭션은 계속 사용 가능
            with transaction.atomic():
                m = ExamAttempt.objects.create(
                    exam_id=exam_id,
                    student_id=student_id,
                    attempt_index=attempt_number,
                    started_at=started_at,
                )
        except IntegrityError as e:
            raise ConflictError(
                "Another attempt is already in progress for this test.",
                details={"exam_id": exam_id, "student_id": student_id},
            ) from e
        return attempt_to_entity(m)

    def mark_submitted(self, attempt_id: int, score: int, submitted_at: datetime) -> Attempt:
        from apps.domains.results.models import ExamAttempt
        m = ExamAttempt.objects.select_for_update().get(pk=attempt_id)
        m.completed = True
        m.score = int(score)
        m.submitted_at = submitted_at
        m.save(update_fields=["completed", "score", "submitted_at", "updated_at"])
        return attempt_to_entity(m)

    def touch(self, attempt_id: int, now: datetime) -> None:
        from apps.domains.results.models import ExamAttempt
        ExamAttempt.objects.filter(pk=attempt_id).update(updated_at=now)

    def delete(self, attempt_id: int) -> bool:
        from apps.domains.results.models import ExamAttempt
        deleted, _ = ExamAttempt.objects.filter(pk=attempt_id).delete()
        return deleted > 0


class DjangoAnswerRepository:
    def upsert(self, answer: Answer, *, is_correct: Optional[bool] = None) -> Answer:
        from apps.domains.results.models import AttemptAnswer
        m, _ = AttemptAnswer.objects.update_or_create(
            attempt_id=answer.attempt_id,
            question_id=answer.question_id,
            defaults={
                "answer_text": answer.answer_text,
                "is_correct": is_correct,
            },
        )
        return Answer(
            attempt_id=answer.attempt_id,
            question_id=answer.question_id,
            value=answer.value,
            updated_at=m.updated_at,
        )

    def list_for_attempt(self, attempt_id: int) -> list[Answer]:
        from apps.domains.results.models import AttemptAnswer
        qs = (
            AttemptAnswer.objects.filter(attempt_id=attempt_id)
            .select_related("question")
            .order_by("question__number")
        )
        return [answer_to_entity(m) for m in qs]


class DjangoSessionReportRepository:
    def get(self, attempt_id: int) -> Optional[SessionReport]:
        from apps.domains.results.models import SessionReport as SessionReportModel
        return report_to_entity(SessionReportModel.objects.filter(attempt_id=attempt_id).first())

    def increment(self, attempt_id: int, counts: Mapping[str, int]) -> SessionReport:
        from django.db.models import F
        from django.utils import timezone
        from apps.domains.results.models import SessionReport as SessionReportModel

        deltas = {k: int(v) for k, v in counts.items() if k in COUNTER_FIELDS and int(v or 0) > 0}

        SessionReportModel.objects.get_or_create(attempt_id=attempt_id)

        if deltas:
            updated = SessionReportModel.objects.filter(
                attempt_id=attempt_id,
                finalized_at__isnull=True,
            ).update(
                updated_at=timezone.now(),
                **{k: F(k) + v for k, v in deltas.items()},
            )
            if updated == 0:
                raise InvalidStateError(
                    "Proctoring session already finalized.",
                    code="session_finalized",
                    details={"attempt_id": attempt_id},
                )

        return report_to_entity(SessionReportModel.objects.get(attempt_id=attempt_id))

    def finalize(
        self,
        attempt_id: int,
        *,
        judge: Callable[[Mapping[str, int]], Tuple[bool, Optional[str]]],
        now: datetime,
    ) -> SessionReport:
        from apps.domains.results.models import SessionReport as SessionReportModel

        SessionReportModel.objects.get_or_create(attempt_id=attempt_id)
        m = SessionReportModel.objects.select_for_update().get(attempt_id=attempt_id)
        if m.finalized_at is not None:
            return report_to_entity(m)

        is_valid, reason = judge({name: int(getattr(m, name) or 0) for name in COUNTER_FIELDS})
        m.is_valid_test = bool(is_valid)
        m.invalid_reason = reason
        m.finalized_at = now
        m.save(update_fields=["is_valid_test", "invalid_reason", "finalized_at", "updated_at"])
        return report_to_entity(m)
