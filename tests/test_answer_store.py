import threading
from datetime import timedelta

import pytest

from academy.domain.assessment.answers import MultiChoice, SingleChoice
from academy.domain.assessment.errors import InvalidStateError, NotFoundError, ValidationError
from tests.factories import single_choice


class TestSetAnswer:
    def test_upsert_overwrites(self, answer_store, ledger, add_exam, add_questions):
        exam = add_exam()
        sc, _, _ = add_questions(exam)
        attempt = ledger.create_attempt(exam.id, 100)

        answer_store.set_answer(attempt.id, sc.id, "A")
        answer_store.set_answer(attempt.id, sc.id, "B")

        answers = answer_store.get_answers(attempt.id)
        assert [a.value for a in answers] == [SingleChoice("B")]

    def test_correctness_is_recorded(self, answer_store, ledger, add_exam, add_questions, store):
        exam = add_exam()
        sc, mc, _ = add_questions(exam)
        attempt = ledger.create_attempt(exam.id, 100)

        answer_store.set_answer(attempt.id, sc.id, "B")
        answer_store.set_answer(attempt.id, mc.id, "A")

        assert store.answer_correct[(attempt.id, sc.id)] is True
        assert store.answer_correct[(attempt.id, mc.id)] is False

    def test_answers_ordered_by_question_number(self, answer_store, ledger, add_exam, add_questions):
        exam = add_exam()
        sc, mc, ft = add_questions(exam)
        attempt = ledger.create_attempt(exam.id, 100)

        answer_store.set_answer(attempt.id, ft.id, "Paris")
        answer_store.set_answer(attempt.id, mc.id, "A,C")
        answer_store.set_answer(attempt.id, sc.id, "B")

        answers = answer_store.get_answers(attempt.id)
        assert [a.question_id for a in answers] == [sc.id, mc.id, ft.id]
        assert answers[1].value == MultiChoice(frozenset({"A", "C"}))

    def test_question_from_another_exam(self, answer_store, ledger, add_exam, store):
        exam = add_exam()
        other = add_exam(title="Other")
        foreign = store.add_question(single_choice(store.next_id(), other.id))
        attempt = ledger.create_attempt(exam.id, 100)

        with pytest.raises(NotFoundError):
            answer_store.set_answer(attempt.id, foreign.id, "B")

    def test_shape_mismatch_leaves_no_answer(self, answer_store, ledger, add_exam, add_questions):
        exam = add_exam()
        sc, _, _ = add_questions(exam)
        attempt = ledger.create_attempt(exam.id, 100)

        with pytest.raises(ValidationError):
            answer_store.set_answer(attempt.id, sc.id, ["A", "B"])
        assert answer_store.get_answers(attempt.id) == []

    def test_submitted_attempt_is_read_only(self, answer_store, ledger, add_exam, add_questions):
        exam = add_exam()
        sc, _, _ = add_questions(exam)
        attempt = ledger.create_attempt(exam.id, 100)
        answer_store.set_answer(attempt.id, sc.id, "B")
        ledger.submit(attempt.id)

        with pytest.raises(InvalidStateError) as e:
            answer_store.set_answer(attempt.id, sc.id, "C")
        assert e.value.code == "attempt_submitted"
        assert answer_store.get_answers(attempt.id)[0].value == SingleChoice("B")

    def test_answering_after_window_is_allowed(self, answer_store, ledger, add_exam, add_questions, clock):
        exam = add_exam()
        sc, _, _ = add_questions(exam)
        attempt = ledger.create_attempt(exam.id, 100)

        clock.advance(hours=6)
        answer = answer_store.set_answer(attempt.id, sc.id, "B")
        assert answer.updated_at == clock.now()

    def test_touches_attempt(self, answer_store, ledger, add_exam, add_questions, clock, store):
        exam = add_exam()
        sc, _, _ = add_questions(exam)
        attempt = ledger.create_attempt(exam.id, 100)

        clock.advance(minutes=3)
        answer_store.set_answer(attempt.id, sc.id, "B")
        assert store.attempts[attempt.id].updated_at == attempt.started_at + timedelta(minutes=3)

    def test_unknown_attempt(self, answer_store):
        with pytest.raises(NotFoundError):
            answer_store.set_answer(404, 1, "A")
        with pytest.raises(NotFoundError):
            answer_store.get_answers(404)

    def test_single_choice_selection_can_be_cleared(self, answer_store, ledger, add_exam, add_questions):
        exam = add_exam()
        sc, _, _ = add_questions(exam)
        attempt = ledger.create_attempt(exam.id, 100)

        answer_store.set_answer(attempt.id, sc.id, "C")
        answer_store.set_answer(attempt.id, sc.id, "")

        assert [a.value for a in answer_store.get_answers(attempt.id)] == [SingleChoice("")]
        assert ledger.submit(attempt.id).score == 0


class TestLocking:
    def test_answer_not_blocked_by_open_proctoring_unit(self, answer_store, ledger, add_exam, add_questions, store):
        exam = add_exam(proctored=True)
        sc, _, _ = add_questions(exam)
        attempt = ledger.create_attempt(exam.id, 100)
        holding, release, saved = threading.Event(), threading.Event(), threading.Event()

        def hold_report_row():
            with store.uow_factory() as uow:
                uow.session_reports.increment(attempt.id, {"tab_switches": 1})
                holding.set()
                release.wait(5)

        def answer():
            answer_store.set_answer(attempt.id, sc.id, "B")
            saved.set()

        holder = threading.Thread(target=hold_report_row)
        holder.start()
        assert holding.wait(5)

        writer = threading.Thread(target=answer)
        writer.start()
        try:
            assert saved.wait(2)
        finally:
            release.set()
            holder.join()
            writer.join()

        assert store.reports[attempt.id].tab_switches == 1

    def test_submit_waits_for_answer_unit_on_same_attempt(self, ledger, add_exam, add_questions, store):
        exam = add_exam()
        sc, _, _ = add_questions(exam)
        attempt = ledger.create_attempt(exam.id, 100)
        holding, release, submitted = threading.Event(), threading.Event(), threading.Event()

        def hold_attempt_row():
            with store.uow_factory() as uow:
                uow.attempts.get_for_update(attempt.id)
                holding.set()
                release.wait(5)

        def submit():
            ledger.submit(attempt.id)
            submitted.set()

        holder = threading.Thread(target=hold_attempt_row)
        holder.start()
        assert holding.wait(5)

        worker = threading.Thread(target=submit)
        worker.start()
        try:
            assert not submitted.wait(0.2)
        finally:
            release.set()
            holder.join()
            worker.join()

        assert submitted.is_set()
        assert store.attempts[attempt.id].completed
