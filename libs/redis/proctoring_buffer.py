"""
감독(proctoring) 위반 카운터 버퍼링

- 고빈도 이벤트는 DB에 직접 쓰지 않고 Redis Hash 에 HINCRBY
- key: proctoring:{attempt_id}:counters (Hash, field=카운터 이름)
- 제출 시 close: closed 플래그 설정 + 버퍼 반환/삭제 (원자적, Lua)
- 제출 rollback 시 reopen: 꺼낸 카운터 복원 + closed 해제
- closed 이후 증가 요청은 거부
- DB에는 최종 카운터만 Write-Behind
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import redis

from libs.redis.client import get_redis_client

logger = logging.getLogger(__name__)

# 버퍼 TTL (제출 없이 방치된 attempt 대비)
COUNTER_BUFFER_TTL = 86400  # 24시간
CLOSED_TTL = 86400  # 24시간

# Lua: closed 체크 + 증가 (원자적). closed 면 -1
LUA_INCREMENT = """
local counters_key = KEYS[1]
local closed_key = KEYS[2]
local field = ARGV[1]
local amount = tonumber(ARGV[2])
local ttl = tonumber(ARGV[3])

if redis.call('EXISTS', closed_key) == 1 then
    return -1
end

redis.call('HINCRBY', counters_key, field, amount)
redis.call('EXPIRE', counters_key, ttl)
return redis.call('HGETALL', counters_key)
"""

# Lua: closed 설정 + 버퍼 반환 후 삭제 (원자적)
LUA_CLOSE = """
local counters_key = KEYS[1]
local closed_key = KEYS[2]
local ttl = tonumber(ARGV[1])

redis.call('SET', closed_key, '1', 'EX', ttl)
local data = redis.call('HGETALL', counters_key)
redis.call('DEL', counters_key)
return data
"""

# Lua: close 취소 (제출 트랜잭션 rollback). 꺼낸 카운터 복원 + closed 해제
LUA_REOPEN = """
local counters_key = KEYS[1]
local closed_key = KEYS[2]
local ttl = tonumber(ARGV[1])

for i = 2, #ARGV, 2 do
    redis.call('HINCRBY', counters_key, ARGV[i], tonumber(ARGV[i + 1]))
end
if #ARGV > 1 then
    redis.call('EXPIRE', counters_key, ttl)
end
redis.call('DEL', closed_key)
return 1
"""


class ProctoringBufferClosed(Exception):
    """close 이후 증가 요청."""


def _keys(attempt_id: int) -> Tuple[str, str]:
    return (
        f"proctoring:{attempt_id}:counters",
        f"proctoring:{attempt_id}:closed",
    )


def _pairs_to_dict(flat) -> dict:
    flat = list(flat or [])
    return {str(flat[i]): int(flat[i + 1]) for i in range(0, len(flat) - 1, 2)}


def buffer_proctoring_event(attempt_id: int, field: str, count: int = 1) -> Tuple[bool, dict]:
    """
    카운터 증가.
    Returns: (성공여부, 버퍼된 카운터). Redis 미사용/장애 시 (False, {}).
    Raises: ProctoringBufferClosed
    """
    client = get_redis_client()
    if not client:
        return False, {}

    counters_key, closed_key = _keys(attempt_id)
    try:
        result = client.eval(
            LUA_INCREMENT, 2, counters_key, closed_key,
            field, int(count), COUNTER_BUFFER_TTL,
        )
    except redis.RedisError as e:
        logger.warning("Redis proctoring buffer failed attempt_id=%s: %s", attempt_id, e)
        return False, {}

    if isinstance(result, int) and result == -1:
        raise ProctoringBufferClosed(f"proctoring buffer closed attempt_id={attempt_id}")
    return True, _pairs_to_dict(result)


def get_proctoring_buffer(attempt_id: int) -> Optional[dict]:
    """아직 flush 되지 않은 카운터. Redis 미사용/장애 시 None."""
    client = get_redis_client()
    if not client:
        return None

    counters_key, _ = _keys(attempt_id)
    try:
        data = client.hgetall(counters_key)
    except redis.RedisError as e:
        logger.warning("Redis proctoring buffer get failed attempt_id=%s: %s", attempt_id, e)
        return None
    return {str(k): int(v) for k, v in (data or {}).items()}


def close_proctoring_buffer(attempt_id: int) -> Optional[dict]:
    """
    제출 시 호출: 이후 증가 차단 + 버퍼 반환 후 삭제.
    Redis 미사용/장애 시 None.
    """
    client = get_redis_client()
    if not client:
        return None

    counters_key, closed_key = _keys(attempt_id)
    try:
        data = client.eval(LUA_CLOSE, 2, counters_key, closed_key, CLOSED_TTL)
    except redis.RedisError as e:
        logger.warning("Redis proctoring buffer close failed attempt_id=%s: %s", attempt_id, e)
        return None
    return _pairs_to_dict(data)


def reopen_proctoring_buffer(attempt_id: int, counts: dict) -> bool:
    """
    close 취소: 제출 트랜잭션이 rollback 된 경우.
    Returns: 성공 여부. Redis 미사용/장애 시 False.
    """
    client = get_redis_client()
    if not client:
        return False

    counters_key, closed_key = _keys(attempt_id)
    args = [COUNTER_BUFFER_TTL]
    for field, value in (counts or {}).items():
        if int(value or 0) > 0:
            args += [field, int(value)]

    try:
        client.eval(LUA_REOPEN, 2, counters_key, closed_key, *args)
    except redis.RedisError as e:
        logger.warning("Redis proctoring buffer reopen failed attempt_id=%s: %s", attempt_id, e)
        return False
    return True
