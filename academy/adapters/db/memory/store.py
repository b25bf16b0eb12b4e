"""
In-memory 저장소 + UoW - 테스트 / 로컬 실행용 (Django 미사용)

락 단위는 DB 어댑터와 같다 (UoW 종료까지 유지):
- attempt row: get_for_update / mark_submitted / delete → 답안 저장과 제출 직렬화
- session report row: increment / finalize → 감독 카운터 (attempt row 와 공유하지 않음)
- (exam, student) slot: lock_slot → attempt 생성

store.lock 은 dict 접근 순간에만 잡는다.
rollback: UoW 가 처음 쓴 키의 이전 값을 journal 에 남기고 역순 복원.
journal 의 키는 모두 이 UoW 가 row lock 을 잡은 행이다.
"""
from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple

from academy.domain.assessment.answers import Answer
from academy.domain.assessment.entities import COUNTER_FIELDS, Attempt, Exam, Question, SessionReport
from academy.domain.assessment.errors import ConflictError, InvalidStateError

logger = logging.getLogger(__name__)

_MISSING = object()


class InMemoryStore:
    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.exams: dict[int, Exam] = {}
        self.questions: dict[int, Question] = {}
        self.attempts: dict[int, Attempt] = {}
        self.answers: dict[Tuple[int, int], Answer] = {}
        self.answer_correct: dict[Tuple[int, int], Optional[bool]] = {}
        self.reports: dict[int, SessionReport] = {}
        self._row_locks: dict[tuple, threading.RLock] = {}
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        with self.lock:
            return next(self._ids)

    def row_lock(self, key: tuple) -> threading.RLock:
        with self.lock:
            return self._row_locks.setdefault(key, threading.RLock())

    def add_exam(self, exam: Exam) -> Exam:
        with self.lock:
            self.exams[exam.id] = exam
        return exam

    def add_question(self, question: Question) -> Question:
        with self.lock:
            self.questions[question.id] = question
        return question

    def uow_factory(self) -> "InMemoryUnitOfWork":
        return InMemoryUnitOfWork(self)


class InMemoryExamRepository:
    def __init__(self, store: InMemoryStore, uow: "InMemoryUnitOfWork"):
        self._s = store

    def get(self, exam_id: int) -> Optional[Exam]:
        return self._s.exams.get(exam_id)

    def list_ids(self, *, college_id: Optional[int] = None, created_by_id: Optional[int] = None) -> list[int]:
        with self._s.lock:
            exams = list(self._s.exams.values())
        out = []
        for e in exams:
            if college_id is not None and e.college_id != college_id:
                continue
            if created_by_id is not None and e.created_by_id != created_by_id:
                continue
            out.append(e.id)
        return sorted(out)


class InMemoryQuestionRepository:
    def __init__(self, store: InMemoryStore, uow: "InMemoryUnitOfWork"):
        self._s = store

    def get(self, question_id: int) -> Optional[Question]:
        return self._s.questions.get(question_id)

    def list_for_exam(self, exam_id: int) -> list[Question]:
        with self._s.lock:
            qs = [q for q in self._s.questions.values() if q.exam_id == exam_id]
        return sorted(qs, key=lambda q: (q.number, q.id))


class InMemoryAttemptRepository:
    def __init__(self, store: InMemoryStore, uow: "InMemoryUnitOfWork"):
        self._s = store
        self._uow = uow

    def get(self, attempt_id: int) -> Optional[Attempt]:
        return self._s.attempts.get(attempt_id)

    def get_for_update(self, attempt_id: int) -> Optional[Attempt]:
        self._uow.lock_row(("attempt", attempt_id))
        return self._s.attempts.get(attempt_id)

    def lock_slot(self, exam_id: int, student_id: int) -> None:
        self._uow.lock_row(("slot", exam_id, student_id))

    def list_for(self, exam_id: int, student_id: int) -> list[Attempt]:
        with self._s.lock:
            rows = [a for a in self._s.attempts.values() if a.exam_id == exam_id and a.student_id == student_id]
        return sorted(rows, key=lambda a: a.attempt_number)

    def list(self, *, exam_ids: Optional[Iterable[int]] = None, student_id: Optional[int] = None) -> list[Attempt]:
        ids = set(exam_ids) if exam_ids is not None else None
        with self._s.lock:
            rows = [
                a for a in self._s.attempts.values()
                if (ids is None or a.exam_id in ids) and (student_id is None or a.student_id == student_id)
            ]
        return sorted(rows, key=lambda a: (a.started_at, a.id), reverse=True)

    def create(self, exam_id: int, student_id: int, attempt_number: int, started_at: datetime) -> Attempt:
        # DB 의 부분 unique 제약 두 개와 같은 검사
        with self._s.lock:
            for a in self._s.attempts.values():
                if a.exam_id != exam_id or a.student_id != student_id:
                    continue
                if not a.completed or a.attempt_number == attempt_number:
                    raise ConflictError(
                        "Another attempt is already in progress for this test.",
                        details={"exam_id": exam_id, "student_id": student_id},
                    )
            attempt = Attempt(
                id=self._s.next_id(),
                exam_id=exam_id,
                student_id=student_id,
                attempt_number=attempt_number,
                started_at=started_at,
                updated_at=started_at,
            )
            self._uow.lock_row(("attempt", attempt.id))
            self._uow.write(self._s.attempts, attempt.id, attempt)
        return attempt

    def mark_submitted(self, attempt_id: int, score: int, submitted_at: datetime) -> Attempt:
        self._uow.lock_row(("attempt", attempt_id))
        with self._s.lock:
            attempt = replace(
                self._s.attempts[attempt_id],
                completed=True,
                score=int(score),
                submitted_at=submitted_at,
                updated_at=submitted_at,
            )
            self._uow.write(self._s.attempts, attempt_id, attempt)
        return attempt

    def touch(self, attempt_id: int, now: datetime) -> None:
        self._uow.lock_row(("attempt", attempt_id))
        with self._s.lock:
            attempt = self._s.attempts.get(attempt_id)
            if attempt is not None:
                self._uow.write(self._s.attempts, attempt_id, replace(attempt, updated_at=now))

    def delete(self, attempt_id: int) -> bool:
        self._uow.lock_row(("attempt", attempt_id))
        self._uow.lock_row(("report", attempt_id))
        with self._s.lock:
            if attempt_id not in self._s.attempts:
                return False
            self._uow.write(self._s.attempts, attempt_id, _MISSING)
            for key in [k for k in self._s.answers if k[0] == attempt_id]:
                self._uow.write(self._s.answers, key, _MISSING)
                self._uow.write(self._s.answer_correct, key, _MISSING)
            if attempt_id in self._s.reports:
                self._uow.write(self._s.reports, attempt_id, _MISSING)
        return True


class InMemoryAnswerRepository:
    """호출부가 attempt row lock 을 잡은 상태에서만 쓴다."""

    def __init__(self, store: InMemoryStore, uow: "InMemoryUnitOfWork"):
        self._s = store
        self._uow = uow

    def upsert(self, answer: Answer, *, is_correct: Optional[bool] = None) -> Answer:
        key = (answer.attempt_id, answer.question_id)
        with self._s.lock:
            self._uow.write(self._s.answers, key, answer)
            self._uow.write(self._s.answer_correct, key, is_correct)
        return answer

    def list_for_attempt(self, attempt_id: int) -> list[Answer]:
        with self._s.lock:
            rows = [a for (att, _), a in self._s.answers.items() if att == attempt_id]

        def _number(a: Answer) -> int:
            q = self._s.questions.get(a.question_id)
            return q.number if q is not None else 0

        return sorted(rows, key=_number)


class InMemorySessionReportRepository:
    def __init__(self, store: InMemoryStore, uow: "InMemoryUnitOfWork"):
        self._s = store
        self._uow = uow

    def get(self, attempt_id: int) -> Optional[SessionReport]:
        return self._s.reports.get(attempt_id)

    def increment(self, attempt_id: int, counts: Mapping[str, int]) -> SessionReport:
        self._uow.lock_row(("report", attempt_id))
        with self._s.lock:
            report = self._s.reports.get(attempt_id) or SessionReport(attempt_id=attempt_id)
            if report.is_finalized:
                raise InvalidStateError(
                    "Proctoring session already finalized.",
                    code="session_finalized",
                    details={"attempt_id": attempt_id},
                )
            changes = {
                k: getattr(report, k) + int(v)
                for k, v in counts.items()
                if k in COUNTER_FIELDS and int(v or 0) > 0
            }
            report = replace(report, **changes)
            self._uow.write(self._s.reports, attempt_id, report)
        return report

    def finalize(
        self,
        attempt_id: int,
        *,
        judge: Callable[[Mapping[str, int]], Tuple[bool, Optional[str]]],
        now: datetime,
    ) -> SessionReport:
        self._uow.lock_row(("report", attempt_id))
        with self._s.lock:
            report = self._s.reports.get(attempt_id) or SessionReport(attempt_id=attempt_id)
            if report.is_finalized:
                return report
            is_valid, reason = judge(report.counters())
            report = replace(report, is_valid_test=bool(is_valid), invalid_reason=reason, finalized_at=now)
            self._uow.write(self._s.reports, attempt_id, report)
        return report


class InMemoryUnitOfWork:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self._held: list[threading.RLock] = []
        self._held_keys: set[tuple] = set()
        self._journal: list[tuple[dict, Any, Any]] = []
        self._journaled: set[tuple] = set()
        self._rollback_callbacks: list[Callable[[], None]] = []
        self._rollback_requested = False
        self.exams = InMemoryExamRepository(store, self)
        self.questions = InMemoryQuestionRepository(store, self)
        self.attempts = InMemoryAttemptRepository(store, self)
        self.answers = InMemoryAnswerRepository(store, self)
        self.session_reports = InMemorySessionReportRepository(store, self)

    # --- repositories 전용 ------------------------------------------------

    def lock_row(self, key: tuple) -> None:
        if key in self._held_keys:
            return
        lock = self._store.row_lock(key)
        lock.acquire()
        self._held.append(lock)
        self._held_keys.add(key)

    def write(self, table: dict, key: Any, value: Any) -> None:
        """store.lock 안에서 호출. value 가 _MISSING 이면 삭제."""
        marker = (id(table), key)
        if marker not in self._journaled:
            self._journaled.add(marker)
            self._journal.append((table, key, table.get(key, _MISSING)))
        if value is _MISSING:
            table.pop(key, None)
        else:
            table[key] = value

    def _undo(self) -> None:
        with self._store.lock:
            for table, key, previous in reversed(self._journal):
                if previous is _MISSING:
                    table.pop(key, None)
                else:
                    table[key] = previous

    # --- UnitOfWork ---------------------------------------------------------

    def __enter__(self) -> "InMemoryUnitOfWork":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        failed = exc_type is not None or self._rollback_requested
        try:
            if failed:
                self._undo()
        finally:
            for lock in reversed(self._held):
                lock.release()
            self._held.clear()
            self._held_keys.clear()
            self._journal.clear()
            self._journaled.clear()
            self._rollback_requested = False
            callbacks, self._rollback_callbacks = self._rollback_callbacks, []

        if failed:
            for callback in callbacks:
                try:
                    callback()
                except Exception:
                    logger.exception("UOW_ROLLBACK_CALLBACK_FAILED callback=%r", callback)

    def rollback(self) -> None:
        self._rollback_requested = True

    def on_rollback(self, callback: Callable[[], None]) -> None:
        self._rollback_callbacks.append(callback)
