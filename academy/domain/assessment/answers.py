"""
답안 값 - 문항 유형별 tagged variant

    AnswerValue = SingleChoice(letter) | MultiChoice(letters) | FreeText(text)

- parse_answer_value: wire 값(str / list / "A,C") → variant (유형 불일치 시 ValidationError)
- validate_answer_value: variant ↔ 문항 유형 정합성 검사
- encode/decode: 저장 포맷 answer_text ("B" / "A,C" / 자유 텍스트)
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from academy.domain.assessment.entities import OPTION_LETTERS, Question, QuestionType
from academy.domain.assessment.errors import ValidationError


@dataclass(frozen=True)
class SingleChoice:
    letter: str


@dataclass(frozen=True)
class MultiChoice:
    letters: frozenset[str]


@dataclass(frozen=True)
class FreeText:
    text: str


AnswerValue = Union[SingleChoice, MultiChoice, FreeText]

_EXPECTED_VARIANT = {
    QuestionType.SINGLE_CHOICE: SingleChoice,
    QuestionType.MULTI_CHOICE: MultiChoice,
    QuestionType.FREE_TEXT: FreeText,
}


@dataclass(frozen=True)
class Answer:
    attempt_id: int
    question_id: int
    value: AnswerValue
    updated_at: Optional[datetime] = None

    @property
    def answer_text(self) -> str:
        return encode_answer_value(self.value)


def _norm_letter(v: Any) -> str:
    return str(v or "").strip().upper()


def _shape_error(question: Question, got: str) -> ValidationError:
    return ValidationError(
        f"Answer shape {got} does not match question type {question.type.value}.",
        code="answer_shape_mismatch",
        details={"question_id": question.id, "question_type": question.type.value},
    )


def parse_answer_value(question: Question, raw: Any) -> AnswerValue:
    """wire 입력을 문항 유형에 맞는 variant로 변환."""
    if isinstance(raw, (SingleChoice, MultiChoice, FreeText)):
        validate_answer_value(question, raw)
        return raw

    if question.type == QuestionType.SINGLE_CHOICE:
        if not isinstance(raw, str):
            raise _shape_error(question, type(raw).__name__)
        value: AnswerValue = SingleChoice(_norm_letter(raw))

    elif question.type == QuestionType.MULTI_CHOICE:
        if isinstance(raw, str):
            parts = [p for p in raw.split(",")]
        elif isinstance(raw, (list, tuple, set, frozenset)):
            parts = list(raw)
        else:
            raise _shape_error(question, type(raw).__name__)
        letters = [_norm_letter(p) for p in parts]
        value = MultiChoice(frozenset(x for x in letters if x))

    else:
        if not isinstance(raw, str):
            raise _shape_error(question, type(raw).__name__)
        value = FreeText(raw)

    validate_answer_value(question, value)
    return value


def validate_answer_value(question: Question, value: AnswerValue) -> None:
    expected = _EXPECTED_VARIANT[question.type]
    if not isinstance(value, expected):
        raise _shape_error(question, type(value).__name__)

    if isinstance(value, SingleChoice):
        # "" == 미응답 (선택 해제)
        if value.letter and value.letter not in OPTION_LETTERS:
            raise ValidationError(
                f"Unknown option letter: {value.letter!r}.",
                code="invalid_option_letter",
                details={"question_id": question.id},
            )
    elif isinstance(value, MultiChoice):
        unknown = sorted(set(value.letters) - set(OPTION_LETTERS))
        if unknown:
            raise ValidationError(
                f"Unknown option letters: {', '.join(unknown)}.",
                code="invalid_option_letter",
                details={"question_id": question.id},
            )


def encode_answer_value(value: AnswerValue) -> str:
    if isinstance(value, SingleChoice):
        return value.letter
    if isinstance(value, MultiChoice):
        return ",".join(sorted(value.letters))
    if isinstance(value, FreeText):
        return value.text
    raise TypeError(f"Unsupported answer value: {value!r}")


def decode_answer_value(question_type: QuestionType, answer_text: Optional[str]) -> AnswerValue:
    text = answer_text or ""
    if question_type == QuestionType.SINGLE_CHOICE:
        return SingleChoice(_norm_letter(text))
    if question_type == QuestionType.MULTI_CHOICE:
        return MultiChoice(frozenset(x for x in (_norm_letter(p) for p in text.split(",")) if x))
    return FreeText(text)
