"""A registered bridge: transport, cache and background sync."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Optional, TypeVar

from huesync.cache import CacheBackend, DeviceCache, SyncEvent, SyncWorker
from huesync.exceptions import (
    EntityNotFoundError,
    HueSyncError,
    StaleDataError,
    UnreachableError,
    wrap_transport_error,
)
from huesync.models import (
    BridgeConfig,
    BridgeInventory,
    BridgeStatus,
    CacheConfig,
    DeviceState,
    EntityKind,
    EntityRecord,
    GroupKind,
)

from .protocols import DeviceTransport

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Bridge:
    """
    One physical bridge and the resources it owns.

    Lifecycle:
        ``start()`` authenticates, restores the persisted cache, warms the
        cache (if configured) and starts the background sync. ``close()``
        stops the sync and flushes/releases the cache backend.

    Reads serve the cache. When a stale kind cannot be refetched the
    stale records are returned if ``allow_stale`` is set (the default);
    otherwise StaleDataError is raised.
    """

    def __init__(
        self,
        config: BridgeConfig,
        transport: DeviceTransport,
        cache_config: CacheConfig | None = None,
        backend: CacheBackend | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.transport = transport
        self.cache_config = cache_config or CacheConfig()
        self._clock = clock

        self.cache = DeviceCache(
            config.id,
            self._fetch,
            stale_after=self.cache_config.stale_after_seconds,
            clock=clock,
            backend=backend,
            wait_timeout=self.cache_config.request_timeout_seconds * 2,
        )
        self._status_lock = threading.Lock()
        self.connected = False
        self.last_seen: Optional[float] = None
        self.last_error: Optional[str] = None

        self.sync = SyncWorker(self.cache, interval=self.cache_config.sync_interval_seconds)
        self.sync.register_observer(self)

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.display_name

    @property
    def address(self) -> str:
        return self.config.address

    @property
    def credential(self) -> str:
        return self.config.credential

    @property
    def request_timeout(self) -> float:
        return self.cache_config.request_timeout_seconds

    def __repr__(self) -> str:
        return f"Bridge(id={self.id!r}, address={self.address!r}, connected={self.connected})"

    # ------------------------------------------------------------------
    # Lifecycle

    def start(self) -> None:
        """
        Bring the bridge up.

        Raises:
            UnreachableError: If the bridge cannot be reached
            HueSyncError: If authentication or cache warming fails
        """
        try:
            self.transport.authenticate(self.credential, timeout=self.request_timeout)
        except Exception as e:
            raise wrap_transport_error(e, self.id, "authenticate") from e
        self._mark_seen()

        self.cache.restore()

        if self.cache_config.warm_on_startup:
            self.cache.refresh_all()
            logger.info(f"Warmed cache for bridge {self.id}: {self.cache.stats().entries}")

        self.sync.start()
        logger.info(f"Bridge {self.id} ({self.address}) started")

    def close(self, flush: bool = True) -> None:
        """Stop the background sync and release the cache backend."""
        # An in-flight cycle may wait on a refetch for up to two request timeouts
        self.sync.stop(timeout=self.request_timeout * 2)
        self.sync.unregister_observer(self)
        with self._status_lock:
            self.connected = False
        if flush:
            self.cache.close()
        else:
            self.cache.discard()
        logger.info(f"Bridge {self.id} closed")

    # ------------------------------------------------------------------
    # Connectivity bookkeeping

    def _mark_seen(self) -> None:
        with self._status_lock:
            self.connected = True
            self.last_seen = self._clock()
            self.last_error = None

    def _mark_failure(self, error: Exception) -> None:
        with self._status_lock:
            self.last_error = getattr(error, "user_message", None) or str(error)
            if isinstance(error, UnreachableError):
                self.connected = False

    def on_sync_event(self, event: SyncEvent, bridge_id: str, error: Exception | None = None) -> None:
        if event is SyncEvent.SYNC_SUCCEEDED:
            self._mark_seen()
        elif event is SyncEvent.SYNC_FAILED and error is not None:
            self._mark_failure(error)

    def _fetch(self, kind: EntityKind) -> Sequence[EntityRecord | Mapping[str, Any]]:
        try:
            records = self.transport.fetch_all(kind, timeout=self.request_timeout)
        except Exception as e:
            error = wrap_transport_error(e, self.id, f"fetch {kind.value}")
            self._mark_failure(error)
            raise error from e
        self._mark_seen()
        return records

    # ------------------------------------------------------------------
    # Reads

    def _read(self, kind: EntityKind, fresh: Callable[[], R], cached: Callable[[], R], allow_stale: bool) -> R:
        try:
            return fresh()
        except HueSyncError as e:
            if self.cache.fetched_at(kind) is None:
                raise
            if not allow_stale:
                raise StaleDataError(self.id, kind.value, self.cache.age(kind)) from e
            logger.warning(f"Serving stale {kind.value} for bridge {self.id}: {e.user_message}")
            return cached()

    def get(self, kind: EntityKind, entity_id: str, allow_stale: bool = True) -> EntityRecord:
        """
        Return one cached entity.

        Raises:
            EntityNotFoundError: If the id is unknown on this bridge
            StaleDataError: If a refetch failed and `allow_stale` is False
            UnreachableError: If nothing was ever cached and the bridge is unreachable
        """
        record = self._read(
            kind,
            lambda: self.cache.get(kind, entity_id),
            lambda: self.cache.peek(kind, entity_id),
            allow_stale,
        )
        if record is None:
            raise EntityNotFoundError(kind.value, entity_id, self.id)
        return record

    def list(self, kind: EntityKind, allow_stale: bool = True) -> list[EntityRecord]:
        """Return every cached entity of a kind (see `get` for errors)."""
        return self._read(
            kind,
            lambda: self.cache.list(kind),
            lambda: self.cache.peek_all(kind),
            allow_stale,
        )

    # ------------------------------------------------------------------
    # Writes

    def set_state(
        self,
        kind: EntityKind,
        target_id: str,
        state: DeviceState,
        timeout: float | None = None,
    ) -> DeviceState:
        """
        Write a state to a light or group and patch the cache.

        Returns:
            The resolved payload that was sent to the bridge

        Raises:
            ValueError: If `kind` is not writable
            UnreachableError: If the write timed out or the connection failed
            HueSyncError: If the bridge rejected the write
        """
        if kind is EntityKind.SCENES:
            raise ValueError("Scenes cannot be written with a device state")

        payload = state.resolve_for_write()
        timeout = self.request_timeout if timeout is None else timeout
        operation = f"write {kind.value} {target_id}"

        try:
            self.transport.write(kind, target_id, payload, timeout=timeout)
        except Exception as e:
            error = wrap_transport_error(e, self.id, operation)
            self._mark_failure(error)
            raise error from e

        self._mark_seen()
        self.cache.optimistic_patch(kind, target_id, state)
        logger.debug(f"Bridge {self.id}: {operation} -> {payload.fields()}")
        return payload

    # ------------------------------------------------------------------
    # Reports

    def status(self) -> BridgeStatus:
        with self._status_lock:
            return BridgeStatus(
                id=self.id,
                name=self.name,
                address=self.address,
                connected=self.connected,
                last_seen=self.last_seen,
                last_error=self.last_error,
            )

    def inventory(self) -> BridgeInventory:
        """Entity counts from the cache as it stands (no refetch)."""
        lights = self.cache.peek_all(EntityKind.LIGHTS)
        groups = self.cache.peek_all(EntityKind.GROUPS)
        return BridgeInventory(
            bridge_id=self.id,
            bridge_name=self.name,
            lights=len(lights),
            rooms=sum(1 for g in groups if g.kind is GroupKind.ROOM),
            zones=sum(1 for g in groups if g.kind is GroupKind.ZONE),
            scenes=len(self.cache.peek_all(EntityKind.SCENES)),
            lights_on=sum(1 for light in lights if light.on),
            reachable_lights=sum(1 for light in lights if light.reachable),
        )
