"""
Assessment 도메인 엔티티 - 순수 파이썬 (Django/ORM 미사용)

- Exam: 시험 정의 (응시 기간 / 최대 응시 횟수 / 감독 여부)
- Question: 문항 + 유형별 정답 키
- Attempt: 학생의 시험 1회 응시
- SessionReport: 감독(proctoring) 위반 카운터 + 유효성 판정
- Result: Attempt + SessionReport 로부터 파생되는 조회용 projection (저장 안 함)

불변식 위반은 생성 시점에 ValidationError.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from academy.domain.assessment.errors import ValidationError

OPTION_LETTERS = ("A", "B", "C", "D")


class QuestionType(str, Enum):
    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTI_CHOICE = "MULTI_CHOICE"
    FREE_TEXT = "FREE_TEXT"


class AttemptStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"
    # 명시적 제출 없이 방치된 attempt (표시용 파생 상태)
    ABANDONED = "ABANDONED"


@dataclass(frozen=True)
class Exam:
    id: int
    title: str
    total_marks: int
    start_time: datetime
    end_time: datetime
    max_attempts: int = 1
    duration_minutes: Optional[int] = None
    proctored: bool = False
    published: bool = False
    max_violations: int = 10
    description: str = ""
    college_id: Optional[int] = None
    created_by_id: Optional[int] = None

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise ValidationError(
                "start_time must be before end_time.",
                code="invalid_exam_window",
                details={"exam_id": self.id},
            )
        if int(self.max_attempts) < 1:
            raise ValidationError(
                "max_attempts must be at least 1.",
                code="invalid_max_attempts",
                details={"exam_id": self.id, "max_attempts": self.max_attempts},
            )
        if int(self.total_marks) < 0:
            raise ValidationError(
                "total_marks must not be negative.",
                code="invalid_total_marks",
                details={"exam_id": self.id},
            )

    def is_open_at(self, now: datetime) -> bool:
        return self.start_time <= now <= self.end_time


@dataclass(frozen=True)
class Question:
    """
    문항 + 정답 키.

    정답 키 필드(correct_option / correct_options / reference_answer)는
    학생에게 노출되는 응답에 절대 포함하지 않는다 (채점은 서버에서만).
    """
    id: int
    exam_id: int
    type: QuestionType
    marks: int = 1
    negative_marks: int = 0
    number: int = 0
    text: str = ""
    options: tuple[str, ...] = ()
    correct_option: Optional[str] = None
    correct_options: frozenset[str] = frozenset()
    reference_answer: Optional[str] = None

    def __post_init__(self):
        if int(self.negative_marks) < 0:
            raise ValidationError(
                "negative_marks must not be negative.",
                code="invalid_negative_marks",
                details={"question_id": self.id},
            )

        if self.type in (QuestionType.SINGLE_CHOICE, QuestionType.MULTI_CHOICE):
            if len(self.options) != len(OPTION_LETTERS) or any(
                not (o or "").strip() for o in self.options
            ):
                raise ValidationError(
                    "Choice questions require four non-empty options.",
                    code="invalid_options",
                    details={"question_id": self.id},
                )

        if self.type == QuestionType.SINGLE_CHOICE:
            if self.correct_option not in OPTION_LETTERS:
                raise ValidationError(
                    "correct_option must be one of A/B/C/D.",
                    code="invalid_answer_key",
                    details={"question_id": self.id},
                )
        elif self.type == QuestionType.MULTI_CHOICE:
            if not self.correct_options or not set(self.correct_options) <= set(OPTION_LETTERS):
                raise ValidationError(
                    "correct_options must be a non-empty subset of A/B/C/D.",
                    code="invalid_answer_key",
                    details={"question_id": self.id},
                )
        elif self.type == QuestionType.FREE_TEXT:
            if not (self.reference_answer or "").strip():
                raise ValidationError(
                    "reference_answer is required for free-text questions.",
                    code="invalid_answer_key",
                    details={"question_id": self.id},
                )


@dataclass(frozen=True)
class Attempt:
    id: int
    exam_id: int
    student_id: int
    attempt_number: int
    started_at: datetime
    submitted_at: Optional[datetime] = None
    completed: bool = False
    score: int = 0
    updated_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return bool(self.completed)

    def status_at(self, now: datetime, exam: Exam) -> AttemptStatus:
        """
        표시용 상태.
        미제출 attempt는 응시 기간 종료 또는 제한 시간 경과 시 ABANDONED 로 본다.
        (resolve() 는 이 값과 무관하게 미완료 attempt를 RESUME 시킨다)
        """
        if self.completed:
            return AttemptStatus.SUBMITTED
        if now > exam.end_time:
            return AttemptStatus.ABANDONED
        if exam.duration_minutes and now > self.started_at + timedelta(minutes=int(exam.duration_minutes)):
            return AttemptStatus.ABANDONED
        return AttemptStatus.IN_PROGRESS


COUNTER_FIELDS = (
    "heads_turned",
    "head_tilts",
    "look_aways",
    "face_visibility_issues",
    "multiple_people",
    "mobile_detected",
    "audio_incidents",
    "tab_switches",
    "window_switches",
)


@dataclass(frozen=True)
class SessionReport:
    attempt_id: int
    heads_turned: int = 0
    head_tilts: int = 0
    look_aways: int = 0
    face_visibility_issues: int = 0
    multiple_people: int = 0
    mobile_detected: int = 0
    audio_incidents: int = 0
    tab_switches: int = 0
    window_switches: int = 0
    is_valid_test: Optional[bool] = None
    invalid_reason: Optional[str] = None
    finalized_at: Optional[datetime] = None

    @property
    def is_finalized(self) -> bool:
        return self.finalized_at is not None

    def counters(self) -> dict[str, int]:
        return {name: int(getattr(self, name)) for name in COUNTER_FIELDS}

    @property
    def total_violations(self) -> int:
        return sum(self.counters().values())


@dataclass(frozen=True)
class Result:
    attempt_id: int
    exam: Exam
    student_id: int
    score: int
    total_marks: int
    percentage: float
    display_percentage: float
    submitted_at: Optional[datetime]
    attempt_number: int
    is_valid_test: bool
    completed: bool
    status: AttemptStatus
    invalid_reason: Optional[str] = None
    started_at: Optional[datetime] = None
    counters: dict[str, int] = field(default_factory=dict)
