# PATH: apps/api/common/models.py
"""
공통 추상 모델 (College / Exam / ExamQuestion / ExamAttempt / AttemptAnswer / SessionReport)

updated_at 은 도메인 Attempt.updated_at / Answer.updated_at 으로 노출된다 (재개 화면 "마지막 저장").
QuerySet.update() 경로는 auto_now 가 동작하지 않으므로 호출부에서 updated_at 을 직접 넣는다.
"""
from django.db import models


class BaseModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
