"""
Clock 구현 - django.utils.timezone.now (aware datetime, USE_TZ=True 전제)
"""
from __future__ import annotations

from datetime import datetime


class DjangoClock:
    def now(self) -> datetime:
        from django.utils import timezone
        return timezone.now()
