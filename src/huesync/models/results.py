"""Result and report models returned by the registry and variation engine."""

from pydantic import BaseModel, ConfigDict, Field

from .records import GroupRecord, LightRecord, SceneRecord
from .state import DeviceState


class PerDeviceResult(BaseModel):
    """Outcome of writing one device's state."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    device_id: str
    applied_state: DeviceState
    success: bool
    error: Exception | None = Field(default=None, exclude=True)

    @property
    def error_message(self) -> str | None:
        """User-facing description of the failure, if any."""
        if self.error is None:
            return None
        return getattr(self.error, "user_message", None) or str(self.error) or type(self.error).__name__


class VariationReport(BaseModel):
    """Per-device results of one variation fan-out."""

    model_config = ConfigDict(frozen=True)

    results: list[PerDeviceResult] = Field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return all(r.success for r in self.results)

    @property
    def failed(self) -> list[PerDeviceResult]:
        return [r for r in self.results if not r.success]

    @property
    def succeeded(self) -> list[PerDeviceResult]:
        return [r for r in self.results if r.success]

    def summary(self) -> str:
        """One line per failure, naming the device and the reason."""
        total = len(self.results)
        if self.all_succeeded:
            return f"Applied variation to {total} device(s)"

        lines = [f"Applied variation to {len(self.succeeded)} of {total} device(s); failed:"]
        for result in self.failed:
            lines.append(f"  - {result.device_id}: {result.error_message}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.results)


class AggregatedEntry(BaseModel):
    """A record read from one bridge during a cross-bridge aggregation."""

    model_config = ConfigDict(frozen=True)

    bridge_id: str
    bridge_name: str
    record: LightRecord | GroupRecord | SceneRecord


class BridgeStatus(BaseModel):
    """Connection status of a registered bridge."""

    id: str
    name: str
    address: str
    connected: bool
    last_seen: float | None = None
    last_error: str | None = None


class BridgeInventory(BaseModel):
    """Entity counts for one bridge, taken from its cache."""

    bridge_id: str
    bridge_name: str
    lights: int = 0
    rooms: int = 0
    zones: int = 0
    scenes: int = 0
    lights_on: int = 0
    reachable_lights: int = 0
