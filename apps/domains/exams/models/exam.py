from django.conf import settings
from django.db import models
from django.db.models import F, Q

from apps.api.common.models import BaseModel


class Exam(BaseModel):
    """
    시험 정의 (응시 정책 포함)

    - 응시 기간: start_time < end_time
    - max_attempts >= 1
    - proctored: 감독 이벤트 수집 + 제출 시 유효성 판정
    - published: 미공개 시험은 미리보기 권한자만 응시 가능
    """

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    college = models.ForeignKey(
        "core.College",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="exams",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_exams",
    )

    total_marks = models.PositiveIntegerField(default=0)

    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    duration_minutes = models.PositiveIntegerField(null=True, blank=True)

    max_attempts = models.PositiveIntegerField(default=1)

    proctored = models.BooleanField(default=False)
    published = models.BooleanField(default=False)

    # 실시간 경고 기준 (판정과 무관)
    max_violations = models.PositiveIntegerField(default=10)

    class Meta:
        db_table = "exams_exam"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(start_time__lt=F("end_time")),
                name="exam_start_before_end",
            ),
            models.CheckConstraint(
                condition=Q(max_attempts__gte=1),
                name="exam_max_attempts_gte_1",
            ),
        ]

    def __str__(self):
        return self.title
