"""
감독(proctoring) 위반 카운터 write-behind 버퍼

이벤트 → Redis HINCRBY, 제출(finalize) 시 DB 로 flush.
Redis 미설정/장애 시 SessionReport F() 증가로 fallback.
"""

from libs.redis.client import get_redis_client, is_redis_available, redis_status

__all__ = [
    "get_redis_client",
    "is_redis_available",
    "redis_status",
]
