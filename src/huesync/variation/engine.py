"""Atmospheric per-device variation.

One base state fans out to many lights, each receiving its own slightly
perturbed copy so a room looks natural rather than uniform:

| Attribute      | Perturbation          | Clamp          |
|----------------|-----------------------|----------------|
| hue            | +/- 15 degrees        | [0, 360)       |
| saturation     | +/- 10 points         | [0, 100]       |
| brightness     | +/- 20 points         | [5, 100]       |
| color_temp     | +/- 50 mireds         | [153, 500]     |
| transition_ms  | + 0..1000 ms          | >= base        |

Each attribute of each device is drawn independently. Attributes absent
from the base state stay absent in every variant.

Writes are dispatched concurrently and their outcomes are returned as
data: one failing light never stops the others, and partial failure is
never raised.
"""

import logging
import math
import random
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from huesync.bridges import Bridge, BridgeRegistry
from huesync.colors import MAX_MIREDS, MIN_MIREDS, clamp
from huesync.exceptions import HueSyncError
from huesync.models import DeviceState, EntityKind, PerDeviceResult

logger = logging.getLogger(__name__)

HUE_JITTER = 15.0
SATURATION_JITTER = 10.0
BRIGHTNESS_JITTER = 20.0
COLOR_TEMP_JITTER = 50.0
TRANSITION_JITTER_MS = 1000

MIN_VISIBLE_BRIGHTNESS = 5.0

# One variant per device, in device order; never persisted
VariationPlan = list[DeviceState]

# Largest float below 360; hue 360 is not a valid value
_MAX_HUE = math.nextafter(360.0, 0.0)


class VariationEngine:
    """
    Produces and applies per-device variants of a base state.

    Args:
        registry: Registry used to resolve bridges and write states
        rng: Random source; pass a seeded ``random.Random`` for repeatable variants
        timeout: Per-write timeout in seconds (defaults to the registry's request timeout)
        max_workers: Upper bound on concurrent writes (defaults to one per device)
    """

    def __init__(
        self,
        registry: BridgeRegistry,
        rng: Optional[random.Random] = None,
        timeout: Optional[float] = None,
        max_workers: Optional[int] = None,
    ):
        self.registry = registry
        self.rng = rng or random.Random()
        self.timeout = timeout if timeout is not None else registry.cache_config.request_timeout_seconds
        self.max_workers = max_workers

    def vary(self, base: DeviceState) -> DeviceState:
        """Return one independently perturbed copy of `base`."""
        rng = self.rng
        update: dict = {}

        if base.hue is not None:
            update["hue"] = clamp(base.hue + rng.uniform(-HUE_JITTER, HUE_JITTER), 0.0, _MAX_HUE)
        if base.saturation is not None:
            update["saturation"] = clamp(
                base.saturation + rng.uniform(-SATURATION_JITTER, SATURATION_JITTER), 0.0, 100.0
            )
        if base.brightness is not None:
            update["brightness"] = clamp(
                base.brightness + rng.uniform(-BRIGHTNESS_JITTER, BRIGHTNESS_JITTER),
                MIN_VISIBLE_BRIGHTNESS,
                100.0,
            )
        if base.color_temp is not None:
            update["color_temp"] = int(
                clamp(round(base.color_temp + rng.uniform(-COLOR_TEMP_JITTER, COLOR_TEMP_JITTER)), MIN_MIREDS, MAX_MIREDS)
            )
        if base.transition_ms is not None:
            update["transition_ms"] = base.transition_ms + round(rng.uniform(0, TRANSITION_JITTER_MS))

        return base.model_copy(update=update)

    def plan(self, base: DeviceState, count: int) -> VariationPlan:
        """Variation plan: `count` variants of `base`, one per device, in order."""
        return [self.vary(base) for _ in range(count)]

    def apply_variation(
        self,
        base_state: DeviceState,
        device_ids: Sequence[str],
        bridge_id: Optional[str] = None,
    ) -> list[PerDeviceResult]:
        """
        Write a distinct variant of `base_state` to every light, concurrently.

        Never raises for device or bridge failures; they are reported in
        the returned list.

        Args:
            base_state: State every variant is derived from
            device_ids: Light ids; results come back in this order
            bridge_id: Bridge to write through (default bridge when None)

        Returns:
            One PerDeviceResult per device id
        """
        device_ids = list(device_ids)
        variants = self.plan(base_state, len(device_ids))
        if not device_ids:
            return []

        try:
            bridge = self.registry.resolve(bridge_id)
        except HueSyncError as e:
            logger.warning(f"Cannot apply variation: {e.user_message}")
            return [
                PerDeviceResult(device_id=d, applied_state=v, success=False, error=e)
                for d, v in zip(device_ids, variants)
            ]

        results = self._dispatch(bridge, device_ids, variants)

        failed = [r for r in results if not r.success]
        if failed:
            logger.warning(
                f"Variation on bridge {bridge.id}: {len(failed)} of {len(results)} device(s) failed "
                f"({', '.join(r.device_id for r in failed)})"
            )
        else:
            logger.debug(f"Variation on bridge {bridge.id} applied to {len(results)} device(s)")
        return results

    def _dispatch(
        self, bridge: Bridge, device_ids: list[str], variants: list[DeviceState]
    ) -> list[PerDeviceResult]:
        workers = self.max_workers or len(device_ids)
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"variation-{bridge.id}")
        try:
            futures = [
                pool.submit(bridge.set_state, EntityKind.LIGHTS, device_id, variant, self.timeout)
                for device_id, variant in zip(device_ids, variants)
            ]
            # Each write is bounded by its own transport timeout; one that expires
            # raises UnreachableError and is never patched into the cache
            results: list[PerDeviceResult] = []
            for device_id, variant, future in zip(device_ids, variants, futures):
                error: Optional[Exception] = None
                try:
                    future.result()
                except Exception as e:
                    error = e

                results.append(
                    PerDeviceResult(device_id=device_id, applied_state=variant, success=error is None, error=error)
                )
            return results
        finally:
            pool.shutdown(wait=True, cancel_futures=True)

    def apply_to_group(
        self,
        base_state: DeviceState,
        group_id: str,
        bridge_id: Optional[str] = None,
    ) -> list[PerDeviceResult]:
        """
        Apply a variation to every light of a group (room or zone).

        Raises:
            NotFoundError: If the bridge or group is unknown
            NoBridgeAvailableError: If no bridge is given and none is connected
        """
        bridge = self.registry.resolve(bridge_id)
        group = bridge.get(EntityKind.GROUPS, group_id)
        logger.debug(f"Varying {len(group.light_ids)} light(s) of group {group_id} on bridge {bridge.id}")
        return self.apply_variation(base_state, group.light_ids, bridge_id=bridge.id)
