"""Registry of bridges.

The registry owns every Bridge: it builds them from configuration,
picks a default, fans reads out across them, and tears them down.

Startup is best-effort per bridge. A bridge that fails any step (building
its transport, authenticating, warming its cache) is logged and left
out; startup fails only when no bridge comes up.

Iteration order is the order bridges were configured or added, so
`get_default` is deterministic across runs.
"""

import logging
import time
from collections.abc import Callable, Iterable
from typing import Optional

from huesync.cache import CacheBackend, JsonFileCacheBackend
from huesync.exceptions import (
    BridgeNotFoundError,
    ConfigValidationError,
    HueSyncError,
    NoBridgeAvailableError,
    NoUsableBridgesError,
    collect_errors,
)
from huesync.models import (
    AggregatedEntry,
    BridgeConfig,
    BridgeInventory,
    BridgeStatus,
    CacheBackendType,
    CacheConfig,
    DeviceState,
    EntityKind,
    EntityRecord,
    GroupKind,
)
from huesync.utils import ReadWriteLock

from .bridge import Bridge
from .protocols import BackendFactory, TransportFactory

logger = logging.getLogger(__name__)


def default_backend_factory(cache_config: CacheConfig) -> BackendFactory:
    """Backend factory matching `cache_config.backend` (None means in-memory only)."""

    def factory(config: BridgeConfig) -> Optional[CacheBackend]:
        if cache_config.backend is CacheBackendType.FILE:
            return JsonFileCacheBackend.for_bridge(cache_config.cache_directory(), config.id)
        return None

    return factory


class BridgeRegistry:
    """
    Owns the bridges and their lifecycles.

    Thread Safety:
        Adding and removing bridges takes an exclusive lock over the bridge
        map; lookups and aggregation take it shared. Network calls made
        while starting or closing a bridge happen outside the lock.
    """

    def __init__(
        self,
        transport_factory: TransportFactory,
        backend_factory: Optional[BackendFactory] = None,
        cache_config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            transport_factory: Builds the DeviceTransport for a bridge
            backend_factory: Builds the cache backend for a bridge
                (defaults to the backend named in `cache_config`)
            cache_config: Freshness, sync and timeout settings shared by all bridges
            clock: Time source passed to every cache
        """
        self.cache_config = cache_config or CacheConfig()
        self._transport_factory = transport_factory
        self._backend_factory = backend_factory or default_backend_factory(self.cache_config)
        self._clock = clock
        self._lock = ReadWriteLock()
        self._bridges: dict[str, Bridge] = {}

    # ------------------------------------------------------------------
    # Lifecycle

    def _start_bridge(self, config: BridgeConfig) -> Bridge:
        transport = self._transport_factory(config)
        backend = self._backend_factory(config)
        bridge = Bridge(config, transport, self.cache_config, backend=backend, clock=self._clock)
        try:
            bridge.start()
        except Exception:
            bridge.close(flush=False)
            raise
        return bridge

    def initialize(self, configs: Iterable[BridgeConfig]) -> list[str]:
        """
        Start every enabled bridge.

        Returns:
            Ids of the bridges that started, in configuration order

        Raises:
            NoUsableBridgesError: If no bridge could be started
        """
        pending: list[BridgeConfig] = []
        for config in configs:
            if not config.enabled:
                logger.debug(f"Bridge {config.id} is disabled, skipping")
            elif config.id in self or any(p.id == config.id for p in pending):
                logger.warning(f"Bridge {config.id} is already registered, skipping")
            else:
                pending.append(config)

        collector = collect_errors("start bridge")
        started: list[Bridge] = []
        for config in pending:
            with collector.try_operation(config.id):
                started.append(self._start_bridge(config))

        duplicates: list[Bridge] = []
        with self._lock.write():
            for bridge in started:
                if bridge.id in self._bridges:
                    duplicates.append(bridge)
                else:
                    self._bridges[bridge.id] = bridge

        # Registered concurrently by add_bridge while this one was starting
        for bridge in duplicates:
            logger.warning(f"Bridge {bridge.id} was registered while starting, closing the duplicate")
            started.remove(bridge)
            bridge.close(flush=False)

        if collector.has_errors:
            logger.warning(collector.get_summary())

        if len(self) == 0:
            raise NoUsableBridgesError(len(pending), collector.failures())

        logger.info(f"Registry initialized with {len(started)} of {len(pending)} bridge(s)")
        return [b.id for b in started]

    def add_bridge(self, config: BridgeConfig) -> Bridge:
        """
        Start and register one more bridge.

        Raises:
            ConfigValidationError: If a bridge with the same id is registered
            HueSyncError: If the bridge failed to start
        """
        if config.id in self:
            raise ConfigValidationError("bridges.id", config.id, f"bridge {config.id!r} is already registered")

        bridge = self._start_bridge(config)

        with self._lock.write():
            if config.id in self._bridges:
                duplicate = True
            else:
                duplicate = False
                self._bridges[config.id] = bridge

        if duplicate:
            bridge.close()
            raise ConfigValidationError("bridges.id", config.id, f"bridge {config.id!r} is already registered")

        logger.info(f"Added bridge {config.id}")
        return bridge

    def remove_bridge(self, bridge_id: str) -> None:
        """
        Unregister a bridge, stopping its sync and closing its cache.

        Raises:
            BridgeNotFoundError: If the id is not registered
        """
        with self._lock.write():
            bridge = self._bridges.pop(bridge_id, None)

        if bridge is None:
            raise BridgeNotFoundError(bridge_id)

        bridge.close()
        logger.info(f"Removed bridge {bridge_id}")

    def shutdown(self) -> None:
        """
        Close every bridge.

        Every bridge is attempted even if an earlier one fails.

        Raises:
            PartialFailureError: If at least one bridge failed to close cleanly
        """
        with self._lock.write():
            bridges = list(self._bridges.values())
            self._bridges.clear()

        collector = collect_errors("close bridge")
        for bridge in bridges:
            with collector.try_operation(bridge.id):
                bridge.close()

        if collector.has_errors:
            raise collector.to_partial_failure()

        logger.info(f"Registry shut down ({len(bridges)} bridge(s))")

    # ------------------------------------------------------------------
    # Lookup

    def get(self, bridge_id: str) -> Bridge:
        """
        Raises:
            BridgeNotFoundError: If the id is not registered
        """
        with self._lock.read():
            bridge = self._bridges.get(bridge_id)
        if bridge is None:
            raise BridgeNotFoundError(bridge_id)
        return bridge

    def get_default(self) -> Bridge:
        """
        First connected bridge in registration order.

        Raises:
            NoBridgeAvailableError: If no bridge is connected
        """
        for bridge in self.list_all():
            if bridge.connected:
                return bridge
        raise NoBridgeAvailableError()

    def resolve(self, bridge_id: Optional[str] = None) -> Bridge:
        """The named bridge, or the default one when no id is given."""
        return self.get(bridge_id) if bridge_id else self.get_default()

    def list_all(self) -> list[Bridge]:
        with self._lock.read():
            return list(self._bridges.values())

    def __contains__(self, bridge_id: object) -> bool:
        with self._lock.read():
            return bridge_id in self._bridges

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._bridges)

    # ------------------------------------------------------------------
    # Aggregated reads

    def _aggregate(
        self,
        kind: EntityKind,
        predicate: Optional[Callable[[EntityRecord], bool]] = None,
    ) -> list[AggregatedEntry]:
        entries: list[AggregatedEntry] = []
        for bridge in self.list_all():
            if not bridge.connected:
                logger.debug(f"Skipping disconnected bridge {bridge.id} while listing {kind.value}")
                continue
            try:
                records = bridge.list(kind)
            except HueSyncError as e:
                logger.warning(f"Skipping bridge {bridge.id} while listing {kind.value}: {e.user_message}")
                continue

            entries.extend(
                AggregatedEntry(bridge_id=bridge.id, bridge_name=bridge.name, record=record)
                for record in records
                if predicate is None or predicate(record)
            )
        return entries

    def list_lights(self) -> list[AggregatedEntry]:
        return self._aggregate(EntityKind.LIGHTS)

    def list_groups(self) -> list[AggregatedEntry]:
        return self._aggregate(EntityKind.GROUPS)

    def list_rooms(self) -> list[AggregatedEntry]:
        return self._aggregate(EntityKind.GROUPS, lambda g: g.kind is GroupKind.ROOM)

    def list_zones(self) -> list[AggregatedEntry]:
        return self._aggregate(EntityKind.GROUPS, lambda g: g.kind is GroupKind.ZONE)

    def list_scenes(self) -> list[AggregatedEntry]:
        return self._aggregate(EntityKind.SCENES)

    def status(self) -> list[BridgeStatus]:
        """Connection status of every registered bridge, connected or not."""
        return [bridge.status() for bridge in self.list_all()]

    def inventory(self) -> list[BridgeInventory]:
        """Entity counts for every connected bridge."""
        return [bridge.inventory() for bridge in self.list_all() if bridge.connected]

    # ------------------------------------------------------------------
    # Writes

    def set_state(
        self,
        kind: EntityKind,
        target_id: str,
        state: DeviceState,
        bridge_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> DeviceState:
        """
        Write a state to one light or group.

        Returns:
            The resolved payload sent to the bridge

        Raises:
            BridgeNotFoundError / NoBridgeAvailableError: If no bridge can be selected
            UnreachableError: If the write timed out or the connection failed
        """
        return self.resolve(bridge_id).set_state(kind, target_id, state, timeout=timeout)
