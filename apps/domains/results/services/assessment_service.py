# apps/domains/results/services/assessment_service.py
"""
AssessmentService 조립 (Django 어댑터 주입)

- UoW: DjangoUnitOfWork (transaction.atomic)
- Clock: timezone.now
- 감독 정책: settings.PROCTORING_POLICY
- 카운터 버퍼: Redis 사용 가능할 때만 (아니면 DB 직접 증가)
- 이벤트 채널: settings.PROCTORING_EVENT_CHANNEL_ENABLED 일 때 프로세스당 1개
  (worker 스레드는 요청 시그널이 없으므로 이벤트마다 DB 연결 정리)
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from django.conf import settings
from django.db import close_old_connections

from academy.adapters.cache.redis_proctoring_buffer import RedisProctoringCounterBuffer
from academy.adapters.clock.django_clock import DjangoClock
from academy.adapters.db.django.uow import DjangoUnitOfWork
from academy.application.use_cases.assessment import (
    AssessmentService,
    ProctoringAggregator,
    ProctoringEventChannel,
)
from academy.domain.assessment.proctoring import ProctoringPolicy
from libs.redis.client import is_redis_available

logger = logging.getLogger(__name__)

_channel: Optional[ProctoringEventChannel] = None
_channel_lock = threading.Lock()


def get_proctoring_policy() -> ProctoringPolicy:
    return ProctoringPolicy.from_mapping(getattr(settings, "PROCTORING_POLICY", None))


def _counter_buffer():
    if is_redis_available():
        return RedisProctoringCounterBuffer()
    return None


class ConnectionRecyclingAggregator:
    """채널 worker 용 record_event 래퍼: 앞뒤로 close_old_connections (끊긴 / 만료된 연결 폐기)."""

    def __init__(self, aggregator: ProctoringAggregator):
        self._aggregator = aggregator

    def record_event(self, attempt_id: int, event_type, count=1):
        close_old_connections()
        try:
            return self._aggregator.record_event(attempt_id, event_type, count)
        finally:
            close_old_connections()


def event_channel_enabled() -> bool:
    return bool(getattr(settings, "PROCTORING_EVENT_CHANNEL_ENABLED", False))


def get_event_channel() -> ProctoringEventChannel:
    """프로세스 단위 채널 (최초 호출 시 worker 시작)."""
    global _channel
    with _channel_lock:
        if _channel is None:
            aggregator = ProctoringAggregator(
                DjangoUnitOfWork,
                DjangoClock(),
                policy=get_proctoring_policy(),
                buffer=_counter_buffer(),
            )
            _channel = ProctoringEventChannel(
                ConnectionRecyclingAggregator(aggregator),
                maxsize=int(getattr(settings, "PROCTORING_EVENT_CHANNEL_MAXSIZE", 1000)),
            )
            _channel.start()
        return _channel


def get_assessment_service() -> AssessmentService:
    return AssessmentService(
        DjangoUnitOfWork,
        DjangoClock(),
        policy=get_proctoring_policy(),
        counter_buffer=_counter_buffer(),
        event_channel=get_event_channel() if event_channel_enabled() else None,
    )
