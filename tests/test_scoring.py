import pytest

from academy.domain.assessment.answers import Answer, FreeText, MultiChoice, SingleChoice
from academy.domain.assessment.errors import ValidationError
from academy.domain.assessment.scoring import compute_attempt_score, grade_answer, normalize_free_text
from tests.factories import free_text, multi_choice, single_choice


class TestSingleChoice:
    def setup_method(self):
        self.q = single_choice(1, 1, correct="B", marks=4, negative_marks=1)

    def test_correct_awards_marks(self):
        assert grade_answer(self.q, SingleChoice("B")) == (True, 4)

    def test_wrong_deducts_negative_marks(self):
        assert grade_answer(self.q, SingleChoice("C")) == (False, -1)

    def test_unanswered_scores_zero(self):
        assert grade_answer(self.q, None) == (False, 0)
        assert grade_answer(self.q, SingleChoice("")) == (False, 0)

    def test_wrong_variant_is_rejected(self):
        with pytest.raises(ValidationError) as e:
            grade_answer(self.q, MultiChoice(frozenset({"B"})))
        assert e.value.code == "answer_shape_mismatch"


class TestMultiChoice:
    def test_exact_set_awards_marks(self):
        q = multi_choice(1, 1, correct=("A", "C"), marks=4)
        assert grade_answer(q, MultiChoice(frozenset({"C", "A"}))) == (True, 4)

    def test_partial_selection_gets_nothing(self):
        q = multi_choice(1, 1, correct=("A", "C"), marks=4, negative_marks=0)
        assert grade_answer(q, MultiChoice(frozenset({"A"}))) == (False, 0)

    def test_superset_is_wrong_and_penalized(self):
        q = multi_choice(1, 1, correct=("A", "C"), marks=4, negative_marks=2)
        assert grade_answer(q, MultiChoice(frozenset({"A", "B", "C"}))) == (False, -2)

    def test_empty_selection_is_unanswered(self):
        q = multi_choice(1, 1, negative_marks=2)
        assert grade_answer(q, MultiChoice(frozenset())) == (False, 0)


class TestFreeText:
    def test_normalization_ignores_case_spaces_dashes_underscores(self):
        q = free_text(1, 1, reference="Paris", marks=2)
        assert grade_answer(q, FreeText(" p-a_r i s ")) == (True, 2)

    def test_normalize_free_text(self):
        assert normalize_free_text("New-York_City ") == "newyorkcity"
        assert normalize_free_text(None) == ""

    def test_blank_text_is_unanswered(self):
        q = free_text(1, 1, negative_marks=1)
        assert grade_answer(q, FreeText("   ")) == (False, 0)

    def test_wrong_text_deducts(self):
        q = free_text(1, 1, negative_marks=1)
        assert grade_answer(q, FreeText("London")) == (False, -1)


class TestAttemptScore:
    def test_sums_question_scores(self):
        sc = single_choice(1, 1)
        mc = multi_choice(2, 1)
        ft = free_text(3, 1)
        answers = [
            Answer(attempt_id=1, question_id=1, value=SingleChoice("B")),
            Answer(attempt_id=1, question_id=2, value=MultiChoice(frozenset({"A", "C"}))),
            Answer(attempt_id=1, question_id=3, value=FreeText("Rome")),
        ]
        assert compute_attempt_score([sc, mc, ft], answers) == 8

    def test_total_is_floored_at_zero(self):
        sc = single_choice(1, 1, marks=1, negative_marks=5)
        answers = [Answer(attempt_id=1, question_id=1, value=SingleChoice("A"))]
        assert compute_attempt_score([sc], answers) == 0

    def test_no_answers_scores_zero(self):
        assert compute_attempt_score([single_choice(1, 1)], []) == 0
