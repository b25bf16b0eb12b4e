"""
Redis 클라이언트 - 감독 카운터 write-behind 전용

REDIS_HOST 미설정 → "disabled" (카운터는 곧바로 DB F() 증가).
연결 실패 → "unavailable", 이후 프로세스 수명 동안 재시도하지 않음.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import redis

logger = logging.getLogger(__name__)

_redis_client: Optional[redis.Redis] = None
_redis_available: Optional[bool] = None


def _redis_config() -> Optional[dict]:
    host = os.getenv("REDIS_HOST")
    if not host:
        return None
    return {
        "host": host,
        "port": int(os.getenv("REDIS_PORT", "6379")),
        "password": os.getenv("REDIS_PASSWORD") or None,
        "db": int(os.getenv("REDIS_DB", "0")),
    }


def get_redis_client() -> Optional[redis.Redis]:
    """연결된 클라이언트. 비활성/장애 시 None."""
    global _redis_client, _redis_available

    if _redis_available is False:
        return None
    if _redis_client is not None:
        return _redis_client

    config = _redis_config()
    if config is None:
        logger.debug("REDIS_HOST not set, proctoring buffer disabled")
        _redis_available = False
        return None

    try:
        client = redis.Redis(
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
            **config,
        )
        client.ping()
    except redis.RedisError as e:
        logger.warning("REDIS_UNAVAILABLE host=%s err=%s (proctoring counters go to DB)", config["host"], e)
        _redis_available = False
        return None

    _redis_client = client
    _redis_available = True
    logger.info("REDIS_CONNECTED host=%s port=%s db=%s", config["host"], config["port"], config["db"])
    return client


def is_redis_available() -> bool:
    return get_redis_client() is not None


def redis_status() -> str:
    """헬스체크용: disabled | connected | unavailable"""
    if _redis_config() is None:
        return "disabled"
    return "connected" if is_redis_available() else "unavailable"


def reset_redis_state():
    """테스트용"""
    global _redis_client, _redis_available
    _redis_client = None
    _redis_available = None
