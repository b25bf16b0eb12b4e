# apps/domains/results/models/attempt_answer.py
from django.db import models

from apps.api.common.models import BaseModel


class AttemptAnswer(BaseModel):
    """
    attempt 의 문항별 답안 (attempt, question 당 1건, upsert)

    answer_text 저장 포맷:
    - SINGLE_CHOICE: "B"
    - MULTI_CHOICE : "A,C" (정렬)
    - FREE_TEXT    : 입력 그대로
    """

    attempt = models.ForeignKey(
        "results.ExamAttempt",
        on_delete=models.CASCADE,
        related_name="answers",
    )
    question = models.ForeignKey(
        "exams.ExamQuestion",
        on_delete=models.CASCADE,
        related_name="attempt_answers",
    )

    answer_text = models.TextField(blank=True)

    # 저장 시점 채점 결과 (관리자 조회용, 총점은 제출 시 재계산)
    is_correct = models.BooleanField(null=True, blank=True)

    class Meta:
        db_table = "results_attempt_answer"
        ordering = ["question__number"]
        constraints = [
            models.UniqueConstraint(
                fields=["attempt", "question"],
                name="uniq_attempt_answer_per_question",
            ),
        ]

    def __str__(self):
        return f"AttemptAnswer attempt={self.attempt_id} question={self.question_id}"
