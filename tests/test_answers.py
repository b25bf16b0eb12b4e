from datetime import timedelta

import pytest

from academy.domain.assessment.answers import (
    FreeText,
    MultiChoice,
    SingleChoice,
    decode_answer_value,
    encode_answer_value,
    parse_answer_value,
)
from academy.domain.assessment.entities import Question, QuestionType
from academy.domain.assessment.errors import ValidationError
from tests.factories import BASE_TIME, free_text, make_exam, multi_choice, single_choice


class TestParseAnswerValue:
    def test_single_choice_letter_is_normalized(self):
        assert parse_answer_value(single_choice(1, 1), " b ") == SingleChoice("B")

    def test_single_choice_rejects_a_list(self):
        with pytest.raises(ValidationError) as e:
            parse_answer_value(single_choice(1, 1), ["A", "B"])
        assert e.value.code == "answer_shape_mismatch"

    def test_single_choice_rejects_unknown_letter(self):
        with pytest.raises(ValidationError) as e:
            parse_answer_value(single_choice(1, 1), "E")
        assert e.value.code == "invalid_option_letter"

    def test_single_choice_can_be_cleared(self):
        q = single_choice(1, 1)
        assert parse_answer_value(q, "") == SingleChoice("")
        assert parse_answer_value(q, "  ") == SingleChoice("")

    def test_multi_choice_accepts_csv_and_list(self):
        q = multi_choice(1, 1)
        assert parse_answer_value(q, "a, c") == MultiChoice(frozenset({"A", "C"}))
        assert parse_answer_value(q, ["C", "A"]) == MultiChoice(frozenset({"A", "C"}))

    def test_multi_choice_rejects_scalar_and_unknown_letters(self):
        q = multi_choice(1, 1)
        with pytest.raises(ValidationError):
            parse_answer_value(q, 5)
        with pytest.raises(ValidationError) as e:
            parse_answer_value(q, ["A", "Z"])
        assert e.value.code == "invalid_option_letter"

    def test_free_text_keeps_raw_text(self):
        assert parse_answer_value(free_text(1, 1), " Paris ") == FreeText(" Paris ")

    def test_free_text_rejects_a_list(self):
        with pytest.raises(ValidationError):
            parse_answer_value(free_text(1, 1), ["Paris"])


class TestStorageFormat:
    def test_multi_choice_is_stored_sorted(self):
        assert encode_answer_value(MultiChoice(frozenset({"C", "A"}))) == "A,C"

    def test_decode_multi_choice(self):
        value = decode_answer_value(QuestionType.MULTI_CHOICE, "C, a")
        assert value == MultiChoice(frozenset({"A", "C"}))

    def test_decode_empty_single_choice(self):
        assert decode_answer_value(QuestionType.SINGLE_CHOICE, None) == SingleChoice("")


class TestQuestionInvariants:
    def test_choice_question_needs_four_options(self):
        with pytest.raises(ValidationError) as e:
            Question(id=1, exam_id=1, type=QuestionType.SINGLE_CHOICE,
                     options=("a", "b", "c"), correct_option="A")
        assert e.value.code == "invalid_options"

    def test_multi_choice_key_must_be_subset_of_letters(self):
        with pytest.raises(ValidationError) as e:
            Question(id=1, exam_id=1, type=QuestionType.MULTI_CHOICE,
                     options=("a", "b", "c", "d"), correct_options=frozenset({"A", "E"}))
        assert e.value.code == "invalid_answer_key"

    def test_free_text_requires_reference_answer(self):
        with pytest.raises(ValidationError):
            Question(id=1, exam_id=1, type=QuestionType.FREE_TEXT, reference_answer="  ")


class TestExamInvariants:
    def test_start_must_precede_end(self):
        with pytest.raises(ValidationError) as e:
            make_exam(start_time=BASE_TIME, end_time=BASE_TIME)
        assert e.value.code == "invalid_exam_window"

    def test_max_attempts_at_least_one(self):
        with pytest.raises(ValidationError) as e:
            make_exam(max_attempts=0)
        assert e.value.code == "invalid_max_attempts"

    def test_is_open_at_is_inclusive(self):
        exam = make_exam()
        assert exam.is_open_at(exam.start_time)
        assert exam.is_open_at(exam.end_time)
        assert not exam.is_open_at(exam.end_time + timedelta(seconds=1))
