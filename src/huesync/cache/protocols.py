"""Protocols and events for bridge caches.

- CacheBackend: optional persistence for a bridge cache
- SyncEvent: outcomes of a background synchronization
- SyncObserver: receives SyncEvent notifications
"""

from enum import Enum
from typing import Protocol, runtime_checkable

from huesync.models import CacheSnapshot


@runtime_checkable
class CacheBackend(Protocol):
    """
    Key-value style persistence for one bridge's cache.

    Implementations raise on failure; the cache logs and carries on with
    its in-memory state.
    """

    def load(self) -> CacheSnapshot | None:
        """Return the last saved snapshot, or None when nothing was saved."""
        ...

    def save(self, snapshot: CacheSnapshot) -> None:
        """Persist a snapshot, replacing the previous one."""
        ...

    def close(self) -> None:
        """Release any resources held by the backend."""
        ...


class SyncEvent(Enum):
    """Events from a bridge's background sync."""

    SYNC_STARTED = "sync_started"
    SYNC_SUCCEEDED = "sync_succeeded"
    SYNC_FAILED = "sync_failed"


@runtime_checkable
class SyncObserver(Protocol):
    """
    Observer that receives background sync events.

    Threading:
        Called from the sync worker's thread. Implementations should be
        thread-safe and return quickly.
    """

    def on_sync_event(self, event: SyncEvent, bridge_id: str, error: Exception | None = None) -> None:
        ...
