"""Bridges and the registry that owns them.

```
BridgeRegistry
├── Bridge "office"  ── DeviceTransport, DeviceCache, SyncWorker
└── Bridge "home"    ── DeviceTransport, DeviceCache, SyncWorker
```
"""

from .bridge import Bridge
from .protocols import BackendFactory, DeviceTransport, TransportFactory
from .registry import BridgeRegistry, default_backend_factory

__all__ = [
    "BackendFactory",
    "Bridge",
    "BridgeRegistry",
    "DeviceTransport",
    "TransportFactory",
    "default_backend_factory",
]
