"""Per-bridge caching and background synchronization.

- **DeviceCache**: freshness-tracked mirror of a bridge's lights, groups and scenes
- **SyncWorker**: periodic background refresh of one cache
- **MemoryCacheBackend** / **JsonFileCacheBackend**: optional cache persistence
"""

from .backends import JsonFileCacheBackend, MemoryCacheBackend
from .device_cache import DEFAULT_STALE_AFTER, DeviceCache, Fetcher
from .protocols import CacheBackend, SyncEvent, SyncObserver
from .sync import SyncWorker

__all__ = [
    "DEFAULT_STALE_AFTER",
    "CacheBackend",
    "DeviceCache",
    "Fetcher",
    "JsonFileCacheBackend",
    "MemoryCacheBackend",
    "SyncEvent",
    "SyncObserver",
    "SyncWorker",
]
