"""
RedisProctoringCounterBuffer - ProctoringCounterBuffer Port 구현체

HINCRBY 기반 Write-Behind. Redis 미사용/장애 시 None → aggregator 가 DB 증가로 fallback.
"""
from __future__ import annotations

import logging
from typing import Optional

from academy.domain.assessment.errors import InvalidStateError
from libs.redis.proctoring_buffer import (
    ProctoringBufferClosed,
    buffer_proctoring_event,
    close_proctoring_buffer,
    get_proctoring_buffer,
    reopen_proctoring_buffer,
)

logger = logging.getLogger(__name__)

LOG_BUFFER_FALLBACK = "PROCTORING_BUFFER_FALLBACK attempt_id=%s reason=redis_unavailable"
LOG_BUFFER_CLOSED = "PROCTORING_BUFFER_CLOSED attempt_id=%s drained=%s"
LOG_BUFFER_REOPENED = "PROCTORING_BUFFER_REOPENED attempt_id=%s restored=%s"
LOG_BUFFER_REOPEN_FAILED = "PROCTORING_BUFFER_REOPEN_FAILED attempt_id=%s lost=%s"


class RedisProctoringCounterBuffer:
    """ProctoringCounterBuffer 구현 (Redis Hash)"""

    def increment(self, attempt_id: int, field: str, count: int) -> Optional[dict[str, int]]:
        try:
            ok, counters = buffer_proctoring_event(attempt_id, field, count)
        except ProctoringBufferClosed:
            raise InvalidStateError(
                "Proctoring session already ended.",
                code="session_finalized",
                details={"attempt_id": attempt_id},
            )
        if not ok:
            logger.debug(LOG_BUFFER_FALLBACK, attempt_id)
            return None
        return counters

    def snapshot(self, attempt_id: int) -> Optional[dict[str, int]]:
        return get_proctoring_buffer(attempt_id)

    def close(self, attempt_id: int) -> Optional[dict[str, int]]:
        drained = close_proctoring_buffer(attempt_id)
        if drained is not None:
            logger.info(LOG_BUFFER_CLOSED, attempt_id, sum(drained.values()))
        return drained

    def reopen(self, attempt_id: int, counts: dict[str, int]) -> None:
        restored = sum(int(v or 0) for v in (counts or {}).values())
        if reopen_proctoring_buffer(attempt_id, counts):
            logger.info(LOG_BUFFER_REOPENED, attempt_id, restored)
        else:
            logger.warning(LOG_BUFFER_REOPEN_FAILED, attempt_id, restored)
