# apps/domains/results/models/exam_attempt.py
from django.conf import settings
from django.db import models
from django.db.models import Q

from apps.api.common.models import BaseModel


class ExamAttempt(BaseModel):
    """
    학생의 '시험 1회 응시'

    ✅ 설계 고정 사항
    --------------------------------------------------
    1) (exam, student) 당 미완료(completed=False) attempt 는 최대 1개
       - 부분 unique 제약으로 DB 가 보장 (동시 생성 경합 시 IntegrityError)
    2) attempt_index 는 1부터 연속 (exam, student 단위)
    3) completed=True 이후 score / submitted_at 변경 없음
    4) 기간이 지나도 자동 제출하지 않음 (재개 우선)
    """

    exam = models.ForeignKey(
        "exams.Exam",
        on_delete=models.CASCADE,
        related_name="attempts",
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="exam_attempts",
    )

    # 1부터 시작 (시험 n번째 응시)
    attempt_index = models.PositiveIntegerField(help_text="1부터 시작")

    started_at = models.DateTimeField()
    submitted_at = models.DateTimeField(null=True, blank=True)

    completed = models.BooleanField(default=False)

    # 제출 시 확정 (0 미만 없음)
    score = models.IntegerField(default=0)

    class Meta:
        db_table = "results_exam_attempt"
        ordering = ["-started_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["exam", "student", "attempt_index"],
                name="uniq_exam_attempt_index",
            ),
            models.UniqueConstraint(
                fields=["exam", "student"],
                condition=Q(completed=False),
                name="uniq_active_exam_attempt",
            ),
        ]

    def __str__(self):
        return (
            f"ExamAttempt exam={self.exam_id} "
            f"student={self.student_id} "
            f"#{self.attempt_index}"
        )
