"""
Unit of Work 포트 - 트랜잭션 경계 (Django 미사용)
"""
from __future__ import annotations

from typing import Callable, Protocol

from academy.application.ports.repositories import (
    AnswerRepository,
    AttemptRepository,
    ExamRepository,
    QuestionRepository,
    SessionReportRepository,
)


class UnitOfWork(Protocol):
    """트랜잭션 단위. __enter__에서 시작, __exit__에서 commit/rollback."""

    @property
    def exams(self) -> ExamRepository:
        ...

    @property
    def questions(self) -> QuestionRepository:
        ...

    @property
    def attempts(self) -> AttemptRepository:
        ...

    @property
    def answers(self) -> AnswerRepository:
        ...

    @property
    def session_reports(self) -> SessionReportRepository:
        ...

    def __enter__(self) -> "UnitOfWork":
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...

    def rollback(self) -> None:
        ...

    def on_rollback(self, callback: Callable[[], None]) -> None:
        """UoW 가 rollback 으로 끝나면 호출 (외부 부수효과 되돌리기용). commit 시 버림."""
        ...


UnitOfWorkFactory = Callable[[], UnitOfWork]
