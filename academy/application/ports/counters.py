"""
Proctoring 카운터 버퍼 포트 - 고빈도 이벤트 Write-Behind (redis 미사용 인터페이스)

버퍼 미사용/장애 시 None 반환 → 호출부는 DB 증가로 fallback.
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Optional, Protocol


class ProctoringCounterBuffer(Protocol):
    @abstractmethod
    def increment(self, attempt_id: int, field: str, count: int) -> Optional[dict[str, int]]:
        """
        원자적 증가 후 버퍼된 카운터 반환.
        이미 close 된 attempt면 InvalidStateError.
        """
        ...

    @abstractmethod
    def snapshot(self, attempt_id: int) -> Optional[dict[str, int]]:
        """아직 DB에 반영되지 않은 카운터."""
        ...

    @abstractmethod
    def close(self, attempt_id: int) -> Optional[dict[str, int]]:
        """이후 increment 차단 + 버퍼된 카운터 반환 후 삭제 (finalize 직전 flush)."""
        ...

    @abstractmethod
    def reopen(self, attempt_id: int, counts: dict[str, int]) -> None:
        """close 취소: 꺼낸 카운터를 되돌리고 increment 재허용 (제출 트랜잭션 rollback 시)."""
        ...
