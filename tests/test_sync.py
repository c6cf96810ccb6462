"""Tests for the background cache synchronization worker."""

import threading
import time

import pytest

from huesync.cache import DeviceCache, MemoryCacheBackend, SyncEvent, SyncWorker
from huesync.exceptions import UnreachableError
from huesync.models import EntityKind


class RecordingObserver:
    """Collects sync events."""

    def __init__(self):
        self.events: list[tuple[SyncEvent, str, Exception | None]] = []
        self.succeeded = threading.Event()

    def on_sync_event(self, event, bridge_id, error=None):
        self.events.append((event, bridge_id, error))
        if event is SyncEvent.SYNC_SUCCEEDED:
            self.succeeded.set()


@pytest.fixture
def backend():
    return MemoryCacheBackend()


@pytest.fixture
def cache(transport, clock, backend):
    return DeviceCache(
        "office",
        lambda kind: transport.fetch_all(kind, timeout=1.0),
        clock=clock,
        backend=backend,
    )


@pytest.mark.unit
class TestSyncOnce:
    """Test a single synchronization cycle."""

    def test_success_refreshes_and_persists(self, cache, transport, backend):
        worker = SyncWorker(cache, interval=60)
        observer = RecordingObserver()
        worker.register_observer(observer)

        assert worker.sync_once() is True

        assert [e for e, _, _ in observer.events] == [SyncEvent.SYNC_STARTED, SyncEvent.SYNC_SUCCEEDED]
        assert all(bridge_id == "office" for _, bridge_id, _ in observer.events)
        assert len(cache.peek_all(EntityKind.LIGHTS)) == 4
        assert len(backend.load().lights) == 4

    def test_failure_notifies_and_keeps_cache(self, cache, transport, backend):
        worker = SyncWorker(cache, interval=60)
        observer = RecordingObserver()
        worker.register_observer(observer)
        worker.sync_once()

        for kind in EntityKind:
            transport.fetch_errors[kind] = TimeoutError("timed out")

        assert worker.sync_once() is False

        event, _, error = observer.events[-1]
        assert event is SyncEvent.SYNC_FAILED
        assert isinstance(error, UnreachableError)
        assert len(cache.peek_all(EntityKind.LIGHTS)) == 4

    def test_observer_error_does_not_break_cycle(self, cache):
        class Broken:
            def on_sync_event(self, event, bridge_id, error=None):
                raise RuntimeError("observer bug")

        worker = SyncWorker(cache, interval=60)
        worker.register_observer(Broken())
        good = RecordingObserver()
        worker.register_observer(good)

        assert worker.sync_once() is True
        assert good.succeeded.is_set()

    def test_unregister(self, cache):
        worker = SyncWorker(cache, interval=60)
        observer = RecordingObserver()
        worker.register_observer(observer)
        worker.unregister_observer(observer)

        worker.sync_once()
        assert observer.events == []


@pytest.mark.integration
class TestSyncLoop:
    """Test the background thread."""

    def test_loop_runs_and_stops(self, cache, transport):
        worker = SyncWorker(cache, interval=0.05)
        observer = RecordingObserver()
        worker.register_observer(observer)

        worker.start()
        try:
            assert worker.is_running
            assert observer.succeeded.wait(timeout=2.0)
        finally:
            worker.stop(timeout=1.0)

        assert not worker.is_running
        fetches = len(transport.fetch_calls)
        time.sleep(0.2)
        assert len(transport.fetch_calls) == fetches

    def test_loop_survives_failures(self, cache, transport):
        for kind in EntityKind:
            transport.fetch_errors[kind] = ConnectionError("refused")
        worker = SyncWorker(cache, interval=0.02)
        observer = RecordingObserver()
        worker.register_observer(observer)

        worker.start()
        try:
            time.sleep(0.2)
            transport.fetch_errors.clear()
            assert observer.succeeded.wait(timeout=2.0)
        finally:
            worker.stop()

        failed = [e for e, _, _ in observer.events if e is SyncEvent.SYNC_FAILED]
        assert len(failed) >= 1

    def test_start_twice_is_harmless(self, cache):
        worker = SyncWorker(cache, interval=60)
        worker.start()
        try:
            worker.start()
            assert worker.is_running
        finally:
            worker.stop()

    def test_stop_without_start(self, cache):
        SyncWorker(cache).stop()

    def test_stop_waits_for_cycle_and_skips_persist(self, cache, transport, backend):
        """Test that a cycle finishing after stop() does not write the backend."""
        transport.fetch_delay = 0.3
        worker = SyncWorker(cache, interval=0.02)
        observer = RecordingObserver()
        worker.register_observer(observer)

        worker.start()
        time.sleep(0.1)
        worker.stop(timeout=2.0)

        assert len(cache.peek_all(EntityKind.LIGHTS)) == 4
        assert backend.load() is None
        assert SyncEvent.SYNC_SUCCEEDED not in [e for e, _, _ in observer.events]
