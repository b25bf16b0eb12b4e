"""
채점 정책 (Assessment 도메인 책임)

문항 단위:
- SINGLE_CHOICE: 정답 +marks / 오답 -negative_marks / 미응답 0
- MULTI_CHOICE : 정답 집합과 완전히 일치할 때만 +marks (부분 점수 없음)
- FREE_TEXT    : 소문자화 + 공백/'-'/'_' 제거 후 완전 일치

Attempt 총점: 문항 점수 합, 0 미만이면 0.
"""
from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple

from academy.domain.assessment.answers import (
    Answer,
    AnswerValue,
    FreeText,
    MultiChoice,
    SingleChoice,
    validate_answer_value,
)
from academy.domain.assessment.entities import Question

_FREE_TEXT_STRIP = re.compile(r"[\s\-_]+")


def normalize_free_text(s: Optional[str]) -> str:
    return _FREE_TEXT_STRIP.sub("", (s or "").lower())


def is_attempted(value: Optional[AnswerValue]) -> bool:
    if value is None:
        return False
    if isinstance(value, SingleChoice):
        return bool(value.letter)
    if isinstance(value, MultiChoice):
        return bool(value.letters)
    if isinstance(value, FreeText):
        return bool(value.text.strip())
    raise TypeError(f"Unsupported answer value: {value!r}")


def _is_correct(question: Question, value: AnswerValue) -> bool:
    if isinstance(value, SingleChoice):
        return value.letter == question.correct_option
    if isinstance(value, MultiChoice):
        return set(value.letters) == set(question.correct_options)
    if isinstance(value, FreeText):
        expected = normalize_free_text(question.reference_answer)
        return expected != "" and normalize_free_text(value.text) == expected
    raise TypeError(f"Unsupported answer value: {value!r}")


def grade_answer(question: Question, value: Optional[AnswerValue]) -> Tuple[bool, int]:
    """
    Returns: (is_correct, awarded)
    미응답(빈 선택/빈 텍스트 포함)은 (False, 0).
    """
    if not is_attempted(value):
        return False, 0

    validate_answer_value(question, value)

    if _is_correct(question, value):
        return True, int(question.marks)
    return False, -int(question.negative_marks)


def compute_attempt_score(questions: Iterable[Question], answers: Iterable[Answer]) -> int:
    by_question = {a.question_id: a.value for a in answers}
    total = 0
    for q in questions:
        _, awarded = grade_answer(q, by_question.get(q.id))
        total += awarded
    return max(total, 0)
