"""
테스트용 도메인 객체 생성기 + 고정 시계
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from academy.application.ports.session import SessionContext
from academy.domain.assessment.entities import Attempt, Exam, Question, QuestionType
from academy.domain.assessment.roles import Role

BASE_TIME = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)

OPTIONS = ("Berlin", "Paris", "Rome", "Madrid")


class FixedClock:
    def __init__(self, now: datetime = BASE_TIME):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


def make_exam(id: int = 1, **overrides) -> Exam:
    data = dict(
        id=id,
        title="Midterm",
        total_marks=10,
        start_time=BASE_TIME - timedelta(hours=1),
        end_time=BASE_TIME + timedelta(hours=2),
        max_attempts=1,
        published=True,
    )
    data.update(overrides)
    return Exam(**data)


def single_choice(id: int, exam_id: int, *, number: int = 1, correct: str = "B",
                  marks: int = 4, negative_marks: int = 1) -> Question:
    return Question(
        id=id,
        exam_id=exam_id,
        type=QuestionType.SINGLE_CHOICE,
        number=number,
        text="Capital of France?",
        marks=marks,
        negative_marks=negative_marks,
        options=OPTIONS,
        correct_option=correct,
    )


def multi_choice(id: int, exam_id: int, *, number: int = 2, correct=("A", "C"),
                 marks: int = 4, negative_marks: int = 0) -> Question:
    return Question(
        id=id,
        exam_id=exam_id,
        type=QuestionType.MULTI_CHOICE,
        number=number,
        text="Pick the prime numbers.",
        marks=marks,
        negative_marks=negative_marks,
        options=("2", "4", "5", "9"),
        correct_options=frozenset(correct),
    )


def free_text(id: int, exam_id: int, *, number: int = 3, reference: str = "Paris",
              marks: int = 2, negative_marks: int = 0) -> Question:
    return Question(
        id=id,
        exam_id=exam_id,
        type=QuestionType.FREE_TEXT,
        number=number,
        text="Name the capital of France.",
        marks=marks,
        negative_marks=negative_marks,
        reference_answer=reference,
    )


def make_attempt(id: int = 1, exam_id: int = 1, student_id: int = 100, **overrides) -> Attempt:
    data = dict(
        id=id,
        exam_id=exam_id,
        student_id=student_id,
        attempt_number=1,
        started_at=BASE_TIME,
    )
    data.update(overrides)
    return Attempt(**data)


def session(user_id: int, role: Role = Role.STUDENT, college_id=None) -> SessionContext:
    return SessionContext(user_id=user_id, role=role, college_id=college_id)
