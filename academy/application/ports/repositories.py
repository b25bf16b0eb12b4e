"""
Repository 포트 - Assessment 영속화 추상화 (Django/ORM 미사용)

원자성 보장은 어댑터 책임:
- AttemptRepository.create: (exam, student) 당 미완료 attempt 1개 (위반 시 ConflictError)
- SessionReportRepository.increment: 증가 유실 없음 (read-modify-write 금지)
"""
from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Callable, Iterable, Mapping, Optional, Protocol, Tuple

from academy.domain.assessment.answers import Answer
from academy.domain.assessment.entities import Attempt, Exam, Question, SessionReport


class ExamRepository(Protocol):
    @abstractmethod
    def get(self, exam_id: int) -> Optional[Exam]:
        ...

    @abstractmethod
    def list_ids(
        self,
        *,
        college_id: Optional[int] = None,
        created_by_id: Optional[int] = None,
    ) -> list[int]:
        ...


class QuestionRepository(Protocol):
    """문항 + 정답 키. 학생 응답용 마스킹은 호출부(serializer/state)에서."""

    @abstractmethod
    def get(self, question_id: int) -> Optional[Question]:
        ...

    @abstractmethod
    def list_for_exam(self, exam_id: int) -> list[Question]:
        """문항 번호 순."""
        ...


class AttemptRepository(Protocol):
    @abstractmethod
    def get(self, attempt_id: int) -> Optional[Attempt]:
        ...

    @abstractmethod
    def get_for_update(self, attempt_id: int) -> Optional[Attempt]:
        ...

    @abstractmethod
    def lock_slot(self, exam_id: int, student_id: int) -> None:
        """
        (exam, student) 단위 생성 락. UoW 종료 시 해제.
        다른 학생 / 다른 시험의 생성은 막지 않는다.
        """
        ...

    @abstractmethod
    def list_for(self, exam_id: int, student_id: int) -> list[Attempt]:
        """attempt_number 순."""
        ...

    @abstractmethod
    def list(
        self,
        *,
        exam_ids: Optional[Iterable[int]] = None,
        student_id: Optional[int] = None,
    ) -> list[Attempt]:
        ...

    @abstractmethod
    def create(self, exam_id: int, student_id: int, attempt_number: int, started_at: datetime) -> Attempt:
        """
        원자적 check-then-insert.
        이미 미완료 attempt가 있으면 ConflictError.
        """
        ...

    @abstractmethod
    def mark_submitted(self, attempt_id: int, score: int, submitted_at: datetime) -> Attempt:
        ...

    @abstractmethod
    def touch(self, attempt_id: int, now: datetime) -> None:
        """마지막 활동 시각 갱신."""
        ...

    @abstractmethod
    def delete(self, attempt_id: int) -> bool:
        """Answer / SessionReport 까지 cascade 삭제."""
        ...


class AnswerRepository(Protocol):
    @abstractmethod
    def upsert(self, answer: Answer, *, is_correct: Optional[bool] = None) -> Answer:
        """(attempt_id, question_id) 당 1건. 재호출 시 덮어쓰기."""
        ...

    @abstractmethod
    def list_for_attempt(self, attempt_id: int) -> list[Answer]:
        """문항 번호 순."""
        ...


class SessionReportRepository(Protocol):
    @abstractmethod
    def get(self, attempt_id: int) -> Optional[SessionReport]:
        ...

    @abstractmethod
    def increment(self, attempt_id: int, counts: Mapping[str, int]) -> SessionReport:
        """
        없으면 생성 후 원자적 증가.
        finalize 된 리포트면 InvalidStateError.
        """
        ...

    @abstractmethod
    def finalize(
        self,
        attempt_id: int,
        *,
        judge: Callable[[Mapping[str, int]], Tuple[bool, Optional[str]]],
        now: datetime,
    ) -> SessionReport:
        """
        row lock 상태의 최종 카운터로 judge 호출 후 동결.
        없으면 0 카운터로 생성. 이미 동결됐으면 기존 리포트 그대로 반환 (멱등).
        """
        ...
