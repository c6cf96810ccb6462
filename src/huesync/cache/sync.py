"""Background synchronization of a bridge cache."""

import logging
import threading
from typing import Optional

from huesync.exceptions import ErrorContext
from huesync.model_manager import ObserverManager

from .device_cache import DeviceCache
from .protocols import SyncEvent, SyncObserver

logger = logging.getLogger(__name__)


class SyncWorker:
    """
    Periodically refreshes one DeviceCache on a daemon thread.

    Each cycle refetches every entity kind, persists the cache on
    success, and notifies observers of the outcome. A failed cycle is
    logged and retried on the next interval; the loop never dies on a
    bridge error.
    """

    def __init__(self, cache: DeviceCache, interval: float = 60.0):
        """
        Args:
            cache: Cache to keep synchronized
            interval: Seconds between the end of one cycle and the start of the next
        """
        self.cache = cache
        self.interval = interval
        self._running = False
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._observers = ObserverManager[SyncObserver](observer_type_name="sync")

    @property
    def bridge_id(self) -> str:
        return self.cache.bridge_id

    @property
    def is_running(self) -> bool:
        return self._running

    def register_observer(self, observer: SyncObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: SyncObserver) -> None:
        self._observers.unregister(observer)

    def start(self) -> None:
        """Start the background loop."""
        if self._running:
            logger.warning(f"SyncWorker for {self.bridge_id} is already running")
            return

        self._running = True
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name=f"sync-{self.bridge_id}", daemon=True
        )
        self._thread.start()
        logger.debug(f"SyncWorker for {self.bridge_id} started (every {self.interval}s)")

    def stop(self, timeout: float = 1.0) -> None:
        """Stop the loop and wait up to `timeout` seconds for the thread to exit."""
        self._running = False
        self._stop_event.set()

        if self._thread and self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning(f"SyncWorker for {self.bridge_id} did not stop within {timeout}s")

        self._thread = None
        logger.debug(f"SyncWorker for {self.bridge_id} stopped")

    def sync_once(self) -> bool:
        """
        Run one synchronization cycle in the calling thread.

        Returns:
            True if every entity kind was refreshed
        """
        self._observers.notify("on_sync_event", SyncEvent.SYNC_STARTED, self.bridge_id)

        with ErrorContext(f"sync bridge {self.bridge_id}", logger_instance=logger, re_raise=False) as ctx:
            self.cache.refresh_all()

        if ctx.error is not None:
            self._observers.notify("on_sync_event", SyncEvent.SYNC_FAILED, self.bridge_id, ctx.error)
            return False

        if self._stop_event.is_set():
            logger.debug(f"SyncWorker for {self.bridge_id} stopped mid-cycle, skipping persist")
            return False

        with ErrorContext(f"persist cache for {self.bridge_id}", logger_instance=logger, re_raise=False):
            self.cache.persist()

        self._observers.notify("on_sync_event", SyncEvent.SYNC_SUCCEEDED, self.bridge_id)
        return True

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            if not self._running:
                break
            self.sync_once()
