"""
Clock 포트 - 현재 시각 (테스트에서 고정 시각 주입)
"""
from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    @abstractmethod
    def now(self) -> datetime:
        """timezone-aware 현재 시각."""
        ...
