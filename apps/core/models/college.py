from django.db import models

from apps.api.common.models import BaseModel


class College(BaseModel):
    """
    대학(college) - 사용자/시험의 소속 단위
    대학 관리자(ADMIN)의 결과 조회/삭제 범위 기준.
    """

    name = models.CharField(max_length=255, unique=True)
    code = models.CharField(max_length=50, unique=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        app_label = "core"
        db_table = "core_college"
        ordering = ["name"]

    def __str__(self):
        return self.name
