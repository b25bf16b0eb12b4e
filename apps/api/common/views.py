"""
헬스체크
"""
import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse

from libs.redis import redis_status

logger = logging.getLogger(__name__)


def health_check(request):
    """
    200: DB 정상 (redis 는 보조 버퍼라 unavailable 이어도 200)
    503: DB 연결 실패
    """
    body = {"service": "assessment-api", "redis": redis_status()}
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        logger.warning("HEALTH_DB_FAILED err=%s", e)
        body.update(status="unhealthy", database="disconnected", error=str(e))
        return JsonResponse(body, status=503)

    body.update(status="healthy", database="connected")
    return JsonResponse(body, status=200)
