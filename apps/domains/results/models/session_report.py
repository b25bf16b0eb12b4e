# apps/domains/results/models/session_report.py
from django.db import models

from apps.api.common.models import BaseModel


class SessionReport(BaseModel):
    """
    감독(proctoring) 세션 리포트 - 감독 시험 attempt 와 1:1

    - 첫 이벤트 시 생성 (lazy)
    - 카운터는 F() 로만 증가 (read-modify-write 금지)
    - finalized_at 이후 동결: 카운터/판정 변경 없음
    """

    attempt = models.OneToOneField(
        "results.ExamAttempt",
        on_delete=models.CASCADE,
        related_name="session_report",
    )

    heads_turned = models.PositiveIntegerField(default=0)
    head_tilts = models.PositiveIntegerField(default=0)
    look_aways = models.PositiveIntegerField(default=0)
    face_visibility_issues = models.PositiveIntegerField(default=0)
    multiple_people = models.PositiveIntegerField(default=0)
    mobile_detected = models.PositiveIntegerField(default=0)
    audio_incidents = models.PositiveIntegerField(default=0)
    tab_switches = models.PositiveIntegerField(default=0)
    window_switches = models.PositiveIntegerField(default=0)

    # 판정 (finalize 시 확정, 그 전에는 null)
    is_valid_test = models.BooleanField(null=True, blank=True)
    invalid_reason = models.TextField(null=True, blank=True)
    finalized_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "results_session_report"

    def __str__(self):
        return f"SessionReport attempt={self.attempt_id}"
