"""Tests for deferred cache event delivery."""

from __future__ import annotations

import logging
import threading

import pytest

from rendervault.core.models import CacheEvent
from rendervault.services.events import EventSink


class TestEventSink:
    """Ordering, deferral and observer failures."""

    def test_events_delivered_in_emission_order(self) -> None:
        received: list[CacheEvent] = []
        sink = EventSink(received.append)
        for index in range(20):
            sink.emit(CacheEvent("miss", f"C{index}"))

        assert sink.flush()
        assert [event.component_name for event in received] == [f"C{i}" for i in range(20)]
        sink.close()

    def test_observer_runs_off_the_calling_thread(self) -> None:
        threads: list[threading.Thread] = []
        sink = EventSink(lambda event: threads.append(threading.current_thread()))
        sink.emit(CacheEvent("hit", "Greeter"))
        sink.flush()

        assert threads
        assert threads[0] is not threading.current_thread()
        sink.close()

    def test_failing_observer_is_logged_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        received: list[CacheEvent] = []

        def observer(event: CacheEvent) -> None:
            if event.is_hit:
                raise RuntimeError("observer broke")
            received.append(event)

        sink = EventSink(observer)
        with caplog.at_level(logging.ERROR, logger="rendervault.services.events"):
            sink.emit(CacheEvent("hit", "Greeter"))
            sink.emit(CacheEvent("miss", "Greeter"))
            sink.flush()

        assert [event.kind for event in received] == ["miss"]
        assert "observer failed" in caplog.text
        sink.close()

    def test_without_observer_nothing_is_queued(self) -> None:
        sink = EventSink()
        assert not sink.active
        sink.emit(CacheEvent("hit", "Greeter"))
        assert sink.flush(timeout=0)

    def test_closed_sink_drops_events(self) -> None:
        received: list[CacheEvent] = []
        sink = EventSink(received.append)
        sink.close()
        sink.emit(CacheEvent("hit", "Greeter"))
        assert sink.flush()
        assert received == []
