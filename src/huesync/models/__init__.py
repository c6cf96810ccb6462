"""Data models for huesync."""

from .color import HSV, RGB, XY
from .config import AppConfig, BridgeConfig, CacheBackendType, CacheConfig
from .records import (
    RECORD_TYPES,
    CacheEntry,
    CacheSnapshot,
    CacheStats,
    EntityKind,
    EntityRecord,
    GroupKind,
    GroupRecord,
    LightRecord,
    SceneRecord,
)
from .results import AggregatedEntry, BridgeInventory, BridgeStatus, PerDeviceResult, VariationReport
from .state import DeviceState

__all__ = [
    # Colors
    "HSV",
    "RGB",
    "XY",
    # State
    "DeviceState",
    # Records
    "RECORD_TYPES",
    "CacheEntry",
    "CacheSnapshot",
    "CacheStats",
    "EntityKind",
    "EntityRecord",
    "GroupKind",
    "GroupRecord",
    "LightRecord",
    "SceneRecord",
    # Results
    "AggregatedEntry",
    "BridgeInventory",
    "BridgeStatus",
    "PerDeviceResult",
    "VariationReport",
    # Config
    "AppConfig",
    "BridgeConfig",
    "CacheBackendType",
    "CacheConfig",
]
