"""Deferred delivery of cache events.

Events are handed to a single worker thread, so the observer never runs
inside the render call and always sees events in emission order. A slow or
failing observer cannot block or break rendering: its exceptions are logged
and dropped.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Optional

from rendervault.core.models import CacheEvent
from rendervault.shared.constants import EventConfig
from rendervault.shared.types import EventCallback

logger = logging.getLogger(__name__)


class EventSink:
    """Queue of cache events delivered to one observer on a later turn.

    Args:
        callback: Observer called with each CacheEvent; None disables delivery.
    """

    def __init__(self, callback: Optional[EventCallback] = None) -> None:
        self._callback = callback
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: set[Future[None]] = set()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def active(self) -> bool:
        return self._callback is not None and not self._closed

    def _ensure_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            # one worker keeps delivery in emission order
            self._executor = ThreadPoolExecutor(
                max_workers=1,
                thread_name_prefix=EventConfig.WORKER_THREAD_NAME,
            )
        return self._executor

    def _deliver(self, event: CacheEvent) -> None:
        callback = self._callback
        if callback is None:
            return
        try:
            callback(event)
        except Exception:  # pylint: disable=broad-exception-caught  # noqa: BLE001
            logger.exception(
                "Cache event observer failed for %s event of '%s'",
                event.kind,
                event.component_name,
                extra={"operation": "deliver_event"},
            )

    def emit(self, event: CacheEvent) -> None:
        """Queue ``event`` for delivery; never calls the observer inline."""
        if not self.active:
            return
        with self._lock:
            if self._closed:
                return
            future = self._ensure_executor().submit(self._deliver, event)
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def _forget(self, future: Future[None]) -> None:
        with self._lock:
            self._pending.discard(future)

    def flush(self, timeout: float | None = EventConfig.DEFAULT_FLUSH_TIMEOUT) -> bool:
        """Wait until every queued event has been delivered.

        Returns:
            True if the queue drained within ``timeout``.
        """
        with self._lock:
            pending = set(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def close(self, wait_for_pending: bool = True) -> None:
        """Stop accepting events and shut the worker down."""
        with self._lock:
            self._closed = True
            executor = self._executor
            self._executor = None
        if executor is not None:
            executor.shutdown(wait=wait_for_pending)
