from academy.application.ports.clock import Clock
from academy.application.ports.counters import ProctoringCounterBuffer
from academy.application.ports.repositories import (
    AnswerRepository,
    AttemptRepository,
    ExamRepository,
    QuestionRepository,
    SessionReportRepository,
)
from academy.application.ports.session import SessionContext
from academy.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "Clock",
    "ProctoringCounterBuffer",
    "ExamRepository",
    "QuestionRepository",
    "AttemptRepository",
    "AnswerRepository",
    "SessionReportRepository",
    "SessionContext",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
