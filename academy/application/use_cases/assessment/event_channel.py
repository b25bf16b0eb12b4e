"""
ProctoringEventChannel - 감독 이벤트 bounded 큐 + 단일 consumer

- offer() 는 절대 block 하지 않음: 큐가 가득 차면 새 이벤트를 버리고 dropped 증가
- worker 스레드(daemon) 또는 drain() 이 aggregator.record_event 호출
- 개별 이벤트의 도메인 오류는 로그만 남기고 skip (producer 로 전파 안 함)
- stop() 은 남은 이벤트를 모두 처리한 뒤 종료
"""
from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, Optional

from academy.domain.assessment.errors import AssessmentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProctoringEvent:
    attempt_id: int
    event_type: Any
    count: int = 1


class ProctoringEventChannel:
    def __init__(self, aggregator, maxsize: int = 1000) -> None:
        self._aggregator = aggregator
        self._queue: "queue.Queue[ProctoringEvent]" = queue.Queue(maxsize=max(1, int(maxsize)))
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._dropped = 0
        self._processed = 0

    @property
    def dropped(self) -> int:
        with self._lock:
            return self._dropped

    @property
    def processed(self) -> int:
        with self._lock:
            return self._processed

    def qsize(self) -> int:
        return self._queue.qsize()

    def offer(self, event: ProctoringEvent) -> bool:
        """Returns: 큐에 들어갔으면 True, 버려졌으면 False."""
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            with self._lock:
                self._dropped += 1
                dropped = self._dropped
            logger.warning(
                "PROCTORING_EVENT_DROPPED attempt_id=%s type=%s dropped_total=%s",
                event.attempt_id, event.event_type, dropped,
            )
            return False
        return True

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="proctoring-event-channel", daemon=True)
        self._thread.start()
        logger.info("Proctoring event channel started | maxsize=%s", self._queue.maxsize)

    def stop(self, timeout: float = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        # worker 종료 후 남은 이벤트 처리
        self.drain()
        logger.info("Proctoring event channel stopped | processed=%s dropped=%s", self.processed, self.dropped)

    def drain(self) -> int:
        """큐에 쌓인 이벤트를 호출 스레드에서 모두 처리. Returns: 처리 건수."""
        n = 0
        while True:
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                return n
            self._handle(event)
            n += 1

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                event = self._queue.get(timeout=0.2)
            except queue.Empty:
                continue
            self._handle(event)

    def _handle(self, event: ProctoringEvent) -> None:
        try:
            self._aggregator.record_event(event.attempt_id, event.event_type, event.count)
        except AssessmentError as e:
            logger.warning(
                "PROCTORING_EVENT_REJECTED attempt_id=%s type=%s code=%s err=%s",
                event.attempt_id, event.event_type, e.code, e.message,
            )
        except Exception:
            # consumer 스레드는 계속 동작해야 함
            logger.exception("PROCTORING_EVENT_FAILED attempt_id=%s type=%s", event.attempt_id, event.event_type)
        finally:
            with self._lock:
                self._processed += 1
            self._queue.task_done()
