"""Protocols for talking to a physical bridge.

The core never builds network requests itself. Each bridge gets a
DeviceTransport from a caller-supplied factory; an HTTP client, a
simulator or a test fake can all fill the role.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from huesync.cache import CacheBackend
from huesync.models import BridgeConfig, DeviceState, EntityKind, EntityRecord


@runtime_checkable
class DeviceTransport(Protocol):
    """
    Network access to one bridge.

    Every method receives a timeout in seconds and must give up once it
    expires, raising TimeoutError. Connection problems should surface as
    ConnectionError/OSError; they are reported as UnreachableError.
    """

    def authenticate(self, credential: str, timeout: float) -> None:
        """Verify the credential against the bridge; raise on rejection."""
        ...

    def fetch_all(self, kind: EntityKind, timeout: float) -> Sequence[EntityRecord | Mapping[str, Any]]:
        """Return every entity of a kind, as records or as raw mappings."""
        ...

    def write(self, kind: EntityKind, target_id: str, state: DeviceState, timeout: float) -> None:
        """Apply a (resolved) state to a light or group."""
        ...


TransportFactory = Callable[[BridgeConfig], DeviceTransport]
BackendFactory = Callable[[BridgeConfig], CacheBackend | None]
