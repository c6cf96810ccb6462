"""Per-bridge device cache.

The cache mirrors the lights, groups and scenes of one bridge. Each kind
is held as an immutable collection that is replaced as a whole:

```
refetch(kind) ──fetch──> validate records ──> build new map ──swap──> collection[kind]
optimistic_patch ──copy map──> replace one record ──swap──> collection[kind]
get / list ──freshness check──> read current collection (never partially replaced)
```

Freshness:
    A kind is stale once ``clock() - fetched_at > stale_after`` or when it
    has never been fetched. Reads through `get`/`list` refetch a stale kind
    synchronously before answering. `peek`/`peek_all` never refetch.

Optimistic patches merge a written state into the cached record right
after a successful write. They leave ``fetched_at`` untouched, so the
next refetch still confirms (or overwrites) the patched values.

Refetches of the same kind are deduplicated: a caller that finds a
refetch already running waits for it and shares its outcome.

A failed refetch leaves the cached collection untouched and raises; the
cache never substitutes empty or partial data.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from huesync.exceptions import (
    HueSyncError,
    PartialFailureError,
    UnreachableError,
    wrap_transport_error,
)
from huesync.models import (
    RECORD_TYPES,
    CacheEntry,
    CacheSnapshot,
    CacheStats,
    DeviceState,
    EntityKind,
    EntityRecord,
)
from huesync.utils import ReadWriteLock

from .protocols import CacheBackend

logger = logging.getLogger(__name__)

DEFAULT_STALE_AFTER = 300.0

Fetcher = Callable[[EntityKind], Iterable[EntityRecord | Mapping[str, Any]]]


@dataclass(frozen=True, slots=True)
class _Collection:
    entries: Mapping[str, CacheEntry] = field(default_factory=lambda: MappingProxyType({}))
    fetched_at: float | None = None


class DeviceCache:
    """
    In-memory mirror of one bridge's entities.

    Thread Safety:
        `get`/`list`/`peek` are readers; refetches and optimistic patches
        are writers. Writers never modify a collection that a reader may be
        holding; they build a new one and swap it in.
    """

    def __init__(
        self,
        bridge_id: str,
        fetcher: Fetcher,
        stale_after: float = DEFAULT_STALE_AFTER,
        clock: Callable[[], float] = time.time,
        backend: CacheBackend | None = None,
        wait_timeout: float | None = None,
    ):
        """
        Initialize an empty cache.

        Args:
            bridge_id: Bridge this cache mirrors (used in errors and logs)
            fetcher: Returns every record of a kind; raises on transport failure
            stale_after: Seconds after which a kind is refetched on read
            clock: Time source returning seconds
            backend: Optional persistence for `restore`/`persist`/`close`
            wait_timeout: How long a caller waits for another caller's
                in-flight refetch before giving up (None waits indefinitely)
        """
        self.bridge_id = bridge_id
        self.stale_after = stale_after
        self._fetcher = fetcher
        self._clock = clock
        self._backend = backend
        self._closed = False
        self._wait_timeout = wait_timeout

        self._lock = ReadWriteLock()
        self._collections: dict[EntityKind, _Collection] = {kind: _Collection() for kind in EntityKind}

        self._inflight: dict[EntityKind, Future] = {}
        self._inflight_lock = threading.Lock()

        self._stats_lock = threading.Lock()
        self._stats = CacheStats(bridge_id=bridge_id)

    # ------------------------------------------------------------------
    # Freshness

    def _collection(self, kind: EntityKind) -> _Collection:
        with self._lock.read():
            return self._collections[kind]

    def fetched_at(self, kind: EntityKind) -> float | None:
        """When `kind` was last fetched from the bridge (None if never)."""
        return self._collection(kind).fetched_at

    def age(self, kind: EntityKind) -> float | None:
        """Seconds since `kind` was last fetched (None if never)."""
        fetched_at = self.fetched_at(kind)
        if fetched_at is None:
            return None
        return self._clock() - fetched_at

    def is_stale(self, kind: EntityKind) -> bool:
        age = self.age(kind)
        return age is None or age > self.stale_after

    def _ensure_fresh(self, kind: EntityKind) -> None:
        if self.is_stale(kind):
            logger.debug(f"[{self.bridge_id}] {kind.value} stale (age={self.age(kind)}), refetching")
            self.refetch(kind)

    # ------------------------------------------------------------------
    # Readers

    def get(self, kind: EntityKind, entity_id: str) -> EntityRecord | None:
        """
        Return one record, refetching its kind first if stale.

        Raises:
            HueSyncError: If a needed refetch failed
        """
        self._ensure_fresh(kind)
        return self.peek(kind, entity_id)

    def list(self, kind: EntityKind) -> list[EntityRecord]:
        """
        Return every record of a kind, refetching first if stale.

        Raises:
            HueSyncError: If a needed refetch failed
        """
        self._ensure_fresh(kind)
        return self.peek_all(kind)

    def peek(self, kind: EntityKind, entity_id: str) -> EntityRecord | None:
        """Return one cached record without any freshness check."""
        entry = self._collection(kind).entries.get(entity_id)
        with self._stats_lock:
            if entry is None:
                self._stats.misses += 1
            else:
                self._stats.hits += 1
        return entry.record if entry is not None else None

    def peek_all(self, kind: EntityKind) -> list[EntityRecord]:
        """Return every cached record of a kind without any freshness check."""
        return [entry.record for entry in self._collection(kind).entries.values()]

    def entries(self, kind: EntityKind) -> Mapping[str, CacheEntry]:
        """Read-only view of the current entries of a kind."""
        return self._collection(kind).entries

    # ------------------------------------------------------------------
    # Writers

    def refetch(self, kind: EntityKind) -> int:
        """
        Fetch every record of `kind` from the bridge and swap the collection.

        If a refetch of the same kind is already running, wait for it and
        share its result instead of starting another one.

        Returns:
            Number of records now cached for `kind`

        Raises:
            UnreachableError: If the bridge could not be reached or the wait timed out
            HueSyncError: For any other fetch or validation failure
        """
        with self._inflight_lock:
            future = self._inflight.get(kind)
            owner = future is None
            if owner:
                future = Future()
                self._inflight[kind] = future

        if not owner:
            logger.debug(f"[{self.bridge_id}] Waiting for in-flight {kind.value} refetch")
            try:
                return future.result(timeout=self._wait_timeout)
            except TimeoutError as e:
                raise UnreachableError(
                    self.bridge_id, f"refresh {kind.value}", original_error="timed out waiting for refetch"
                ) from e

        try:
            count = self._fetch_and_swap(kind)
        except Exception as e:
            with self._stats_lock:
                self._stats.refresh_failures += 1
            future.set_exception(e)
            raise
        else:
            future.set_result(count)
            return count
        finally:
            with self._inflight_lock:
                self._inflight.pop(kind, None)

    def _fetch_and_swap(self, kind: EntityKind) -> int:
        try:
            raw = list(self._fetcher(kind))
        except Exception as e:
            logger.warning(f"[{self.bridge_id}] Failed to fetch {kind.value}: {e}")
            raise wrap_transport_error(e, self.bridge_id, f"fetch {kind.value}") from e

        records = self._validate(kind, raw)
        now = self._clock()
        entries = {record.id: CacheEntry(record=record, fetched_at=now) for record in records}

        with self._lock.write():
            self._collections[kind] = _Collection(MappingProxyType(entries), now)

        with self._stats_lock:
            self._stats.refreshes += 1
            self._stats.last_refresh = now

        logger.debug(f"[{self.bridge_id}] Cached {len(entries)} {kind.value}")
        return len(entries)

    def _validate(self, kind: EntityKind, raw: list) -> list[EntityRecord]:
        record_type = RECORD_TYPES[kind]
        try:
            return [item if isinstance(item, record_type) else record_type.model_validate(item) for item in raw]
        except ValidationError as e:
            raise HueSyncError(
                user_message=f"Bridge {self.bridge_id!r} returned malformed {kind.value}.",
                technical_message=f"Invalid {kind.value} payload from {self.bridge_id}: {e}",
            ) from e

    def refresh_all(self) -> None:
        """
        Refetch every kind in parallel.

        Kinds that fetch successfully are swapped in even when others fail.

        Raises:
            HueSyncError: The single error when every kind failed the same way
            PartialFailureError: When some kinds failed
        """
        kinds = list(EntityKind)
        failures: dict[str, Exception] = {}

        with ThreadPoolExecutor(max_workers=len(kinds), thread_name_prefix=f"refresh-{self.bridge_id}") as pool:
            futures = {kind: pool.submit(self.refetch, kind) for kind in kinds}
            for kind, future in futures.items():
                try:
                    future.result()
                except Exception as e:
                    failures[kind.value] = e

        if not failures:
            return

        if len(failures) == len(kinds):
            first = next(iter(failures.values()))
            if all(type(err) is type(first) for err in failures.values()):
                raise first

        raise PartialFailureError(f"refresh bridge {self.bridge_id}", failures, len(kinds))

    def optimistic_patch(self, kind: EntityKind, entity_id: str, state: DeviceState) -> bool:
        """
        Merge a just-written state into the cached record.

        ``fetched_at`` is left unchanged.

        Returns:
            True if a record was patched, False if it is not cached

        Raises:
            ValueError: If `kind` is not writable (scenes)
        """
        if kind is EntityKind.SCENES:
            raise ValueError("Scenes cannot be patched with a device state")

        with self._lock.write():
            collection = self._collections[kind]
            entry = collection.entries.get(entity_id)
            if entry is None:
                logger.debug(f"[{self.bridge_id}] No cached {kind.value} {entity_id} to patch")
                return False

            entries = dict(collection.entries)
            entries[entity_id] = CacheEntry(record=entry.record.apply_state(state), fetched_at=entry.fetched_at)
            self._collections[kind] = _Collection(MappingProxyType(entries), collection.fetched_at)

        with self._stats_lock:
            self._stats.optimistic_patches += 1

        logger.debug(f"[{self.bridge_id}] Patched {kind.value} {entity_id} with {state.fields()}")
        return True

    # ------------------------------------------------------------------
    # Snapshots and persistence

    def to_snapshot(self) -> CacheSnapshot:
        with self._lock.read():
            collections = dict(self._collections)

        def records(kind: EntityKind) -> list:
            return [entry.record for entry in collections[kind].entries.values()]

        return CacheSnapshot(
            bridge_id=self.bridge_id,
            saved_at=self._clock(),
            fetched_at={
                kind: c.fetched_at for kind, c in collections.items() if c.fetched_at is not None
            },
            lights=records(EntityKind.LIGHTS),
            groups=records(EntityKind.GROUPS),
            scenes=records(EntityKind.SCENES),
        )

    def load_snapshot(self, snapshot: CacheSnapshot) -> None:
        """Replace every collection with the contents of a snapshot."""
        collections: dict[EntityKind, _Collection] = {}
        for kind in EntityKind:
            fetched_at = snapshot.fetched_at.get(kind)
            stamp = fetched_at if fetched_at is not None else snapshot.saved_at
            entries = {
                record.id: CacheEntry(record=record, fetched_at=stamp) for record in snapshot.records_for(kind)
            }
            collections[kind] = _Collection(MappingProxyType(entries), fetched_at)

        with self._lock.write():
            self._collections = collections

    def restore(self) -> bool:
        """
        Load the backend's snapshot, if any.

        Returns:
            True if a snapshot was loaded
        """
        if self._backend is None:
            return False

        snapshot = self._backend.load()
        if snapshot is None:
            return False

        if snapshot.bridge_id != self.bridge_id:
            logger.warning(
                f"[{self.bridge_id}] Ignoring cache snapshot saved for bridge {snapshot.bridge_id!r}"
            )
            return False

        self.load_snapshot(snapshot)
        logger.info(f"[{self.bridge_id}] Restored cache snapshot from {snapshot.saved_at:.0f}")
        return True

    def persist(self) -> None:
        """Save the current contents to the backend (no-op without one or once closed)."""
        if self._backend is None:
            return
        if self._closed:
            logger.debug(f"[{self.bridge_id}] Cache is closed, not persisting")
            return
        self._backend.save(self.to_snapshot())

    def close(self) -> None:
        """Flush to the backend and release it."""
        if self._backend is None or self._closed:
            return
        try:
            self.persist()
        finally:
            self._closed = True
            self._backend.close()

    def discard(self) -> None:
        """Release the backend without saving (used when a bridge failed to start)."""
        if self._backend is not None and not self._closed:
            self._closed = True
            self._backend.close()

    # ------------------------------------------------------------------

    def stats(self) -> CacheStats:
        with self._lock.read():
            counts = {kind: len(c.entries) for kind, c in self._collections.items()}
        with self._stats_lock:
            return self._stats.model_copy(update={"entries": counts})
