from __future__ import annotations

from datetime import timedelta

import pytest

from academy.adapters.db.memory import InMemoryStore
from academy.application.use_cases.assessment import AnswerStore, AttemptLedger, ProctoringAggregator
from academy.domain.assessment.proctoring import ProctoringPolicy
from academy.domain.assessment.roles import Role
from libs.redis.client import reset_redis_state
from tests.factories import FixedClock, free_text, make_exam, multi_choice, single_choice


@pytest.fixture(autouse=True)
def _redis_disabled(monkeypatch):
    # 모든 테스트는 Redis 없이 (DB/in-memory 직접 증가)
    monkeypatch.delenv("REDIS_HOST", raising=False)
    reset_redis_state()
    yield
    reset_redis_state()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def add_exam(store):
    def _add(**overrides):
        return store.add_exam(make_exam(id=store.next_id(), **overrides))
    return _add


@pytest.fixture
def add_questions(store):
    """단일(+4/-1) / 복수(+4) / 서술(+2) 3문항 → 만점 10"""
    def _add(exam):
        return (
            store.add_question(single_choice(store.next_id(), exam.id)),
            store.add_question(multi_choice(store.next_id(), exam.id)),
            store.add_question(free_text(store.next_id(), exam.id)),
        )
    return _add


@pytest.fixture
def aggregator(store, clock):
    return ProctoringAggregator(store.uow_factory, clock, policy=ProctoringPolicy())


@pytest.fixture
def ledger(store, clock, aggregator):
    return AttemptLedger(store.uow_factory, clock, aggregator=aggregator)


@pytest.fixture
def answer_store(store, clock):
    return AnswerStore(store.uow_factory, clock)


# ======================================================================
# Django (pytest-django) fixtures
# ======================================================================

@pytest.fixture
def college(db):
    from apps.core.models import College
    return College.objects.create(name="Engineering", code="ENG")


@pytest.fixture
def other_college(db):
    from apps.core.models import College
    return College.objects.create(name="Medicine", code="MED")


@pytest.fixture
def make_user(db, college):
    from django.contrib.auth import get_user_model

    def _make(username, role=Role.STUDENT, *, college=college):
        return get_user_model().objects.create_user(
            username=username,
            password="pw-1234",
            role=role.value,
            college=college,
        )
    return _make


@pytest.fixture
def faculty_user(make_user):
    return make_user("faculty", Role.FACULTY)


@pytest.fixture
def make_db_exam(db, college, faculty_user):
    """현재 시각 기준 열린 시험 + 3문항 (단일 B / 복수 A,C / 서술 Paris)"""
    from django.utils import timezone
    from apps.domains.exams.models import Exam, ExamQuestion

    def _make(**overrides):
        now = timezone.now()
        data = dict(
            title="Midterm",
            college=college,
            created_by=faculty_user,
            total_marks=10,
            start_time=now - timedelta(hours=1),
            end_time=now + timedelta(hours=2),
            max_attempts=1,
            published=True,
        )
        data.update(overrides)
        exam = Exam.objects.create(**data)

        options = dict(option_a="2", option_b="4", option_c="5", option_d="9")
        ExamQuestion.objects.create(
            exam=exam, number=1, question_type="SINGLE_CHOICE", text="Smallest prime?",
            marks=4, negative_marks=1, correct_option="A", **options,
        )
        ExamQuestion.objects.create(
            exam=exam, number=2, question_type="MULTI_CHOICE", text="Pick the primes.",
            marks=4, correct_options="A,C", **options,
        )
        ExamQuestion.objects.create(
            exam=exam, number=3, question_type="FREE_TEXT", text="Capital of France?",
            marks=2, reference_answer="Paris",
        )
        return exam
    return _make
