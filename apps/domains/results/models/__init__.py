# apps/domains/results/models/__init__.py

from .exam_attempt import ExamAttempt
from .attempt_answer import AttemptAnswer
from .session_report import SessionReport

__all__ = [
    "ExamAttempt",
    "AttemptAnswer",
    "SessionReport",
]
