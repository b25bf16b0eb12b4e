"""
Django Unit of Work - transaction.atomic 래퍼 (lazy import)

on_rollback: 이 UoW 의 atomic 블록이 rollback 으로 끝날 때만 실행.
바깥 트랜잭션 안에 중첩된 경우(savepoint) 바깥의 rollback 은 감지하지 않는다.
"""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """Django transaction.atomic으로 트랜잭션 경계. 메서드 내부에서 Django import."""

    def __init__(self) -> None:
        self._atomic = None
        self._rollback_requested = False
        self._rollback_callbacks = []
        self._exams = None
        self._questions = None
        self._attempts = None
        self._answers = None
        self._session_reports = None

    @property
    def exams(self):
        from academy.adapters.db.django.repositories_assessment import DjangoExamRepository
        if self._exams is None:
            self._exams = DjangoExamRepository()
        return self._exams

    @property
    def questions(self):
        from academy.adapters.db.django.repositories_assessment import DjangoQuestionRepository
        if self._questions is None:
            self._questions = DjangoQuestionRepository()
        return self._questions

    @property
    def attempts(self):
        from academy.adapters.db.django.repositories_assessment import DjangoAttemptRepository
        if self._attempts is None:
            self._attempts = DjangoAttemptRepository()
        return self._attempts

    @property
    def answers(self):
        from academy.adapters.db.django.repositories_assessment import DjangoAnswerRepository
        if self._answers is None:
            self._answers = DjangoAnswerRepository()
        return self._answers

    @property
    def session_reports(self):
        from academy.adapters.db.django.repositories_assessment import DjangoSessionReportRepository
        if self._session_reports is None:
            self._session_reports = DjangoSessionReportRepository()
        return self._session_reports

    def __enter__(self) -> DjangoUnitOfWork:
        from django.db import transaction
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        failed = exc_type is not None or self._rollback_requested
        try:
            if self._atomic is not None:
                self._atomic.__exit__(exc_type, exc_val, exc_tb)
        except Exception:
            # commit 실패
            failed = True
            raise
        finally:
            self._atomic = None
            self._rollback_requested = False
            callbacks, self._rollback_callbacks = self._rollback_callbacks, []
            if failed:
                for callback in callbacks:
                    try:
                        callback()
                    except Exception:
                        logger.exception("UOW_ROLLBACK_CALLBACK_FAILED callback=%r", callback)

    def rollback(self) -> None:
        from django.db import transaction
        transaction.set_rollback(True)
        self._rollback_requested = True

    def on_rollback(self, callback) -> None:
        self._rollback_callbacks.append(callback)
