from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models

from academy.domain.assessment.entities import QuestionType
from academy.domain.assessment.errors import AssessmentError
from apps.api.common.models import BaseModel

from .exam import Exam


class ExamQuestion(BaseModel):
    """
    시험 문항 + 정답 키

    - SINGLE_CHOICE: 보기 4개 + correct_option ("A"~"D")
    - MULTI_CHOICE : 보기 4개 + correct_options ("A,C")
    - FREE_TEXT    : reference_answer

    응시(attempt)가 생긴 시험의 문항은 수정/추가/삭제 불가.
    """

    QUESTION_TYPE_CHOICES = [(t.value, t.value.replace("_", " ").title()) for t in QuestionType]

    exam = models.ForeignKey(
        Exam,
        on_delete=models.CASCADE,
        related_name="questions",
    )

    number = models.PositiveIntegerField()  # 1번, 2번 ...
    question_type = models.CharField(max_length=20, choices=QUESTION_TYPE_CHOICES)
    text = models.TextField(blank=True)

    marks = models.PositiveIntegerField(default=1)
    negative_marks = models.PositiveIntegerField(default=0)

    option_a = models.CharField(max_length=500, blank=True)
    option_b = models.CharField(max_length=500, blank=True)
    option_c = models.CharField(max_length=500, blank=True)
    option_d = models.CharField(max_length=500, blank=True)

    correct_option = models.CharField(max_length=1, blank=True)
    correct_options = models.CharField(max_length=16, blank=True, help_text='예: "A,C"')
    reference_answer = models.TextField(blank=True)

    class Meta:
        db_table = "exams_question"
        ordering = ["number"]
        constraints = [
            models.UniqueConstraint(fields=["exam", "number"], name="uniq_exam_question_number"),
        ]

    def __str__(self):
        return f"{self.exam} Q{self.number}"

    def clean(self):
        from academy.adapters.db.django.repositories_assessment import question_to_entity

        try:
            question_to_entity(self)
        except AssessmentError as e:
            raise DjangoValidationError(e.message, code=e.code)

    def _ensure_unlocked(self):
        if self.exam_id and self.exam.attempts.exists():
            raise DjangoValidationError(
                "Questions are locked once the test has attempts.",
                code="questions_locked",
            )

    def save(self, *args, **kwargs):
        self._ensure_unlocked()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        self._ensure_unlocked()
        return super().delete(*args, **kwargs)
