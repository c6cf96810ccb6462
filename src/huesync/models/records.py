"""Cached bridge entities: lights, groups and scenes."""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .color import XY
from .state import DeviceState


class EntityKind(str, Enum):
    """Kinds of entity a bridge exposes."""

    LIGHTS = "lights"
    GROUPS = "groups"
    SCENES = "scenes"


class GroupKind(str, Enum):
    """What a group represents on the bridge."""

    ROOM = "room"
    ZONE = "zone"
    OTHER = "other"


# Fields of DeviceState a light remembers
_LIGHT_STATE_FIELDS = ("on", "brightness", "hue", "saturation", "color_temp", "xy")


class LightRecord(BaseModel):
    """A single light as last seen on the bridge."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    on: bool = False
    brightness: float | None = Field(default=None, ge=0, le=100)
    hue: float | None = Field(default=None, ge=0, le=360)
    saturation: float | None = Field(default=None, ge=0, le=100)
    color_temp: int | None = None
    xy: XY | None = None
    reachable: bool = True

    def apply_state(self, state: DeviceState) -> "LightRecord":
        """Return a copy with the fields present in `state` merged in."""
        update = {k: v for k, v in state.fields().items() if k in _LIGHT_STATE_FIELDS}
        return self.model_copy(update=update)


class GroupRecord(BaseModel):
    """A room, zone or other light group."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    kind: GroupKind = GroupKind.ROOM
    light_ids: tuple[str, ...] = ()
    any_on: bool = False
    all_on: bool = False
    brightness: float | None = Field(default=None, ge=0, le=100)

    def apply_state(self, state: DeviceState) -> "GroupRecord":
        """Return a copy with the fields present in `state` merged in.

        A group has no single on/off flag; writing `on` sets both
        `any_on` and `all_on`.
        """
        update: dict = {}
        if state.on is not None:
            update["any_on"] = state.on
            update["all_on"] = state.on
        if state.brightness is not None:
            update["brightness"] = state.brightness
        return self.model_copy(update=update)


class SceneRecord(BaseModel):
    """A stored scene."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    group_id: str | None = None
    light_ids: tuple[str, ...] = ()

    def apply_state(self, state: DeviceState) -> "SceneRecord":
        raise ValueError("Scenes cannot be patched with a device state")


EntityRecord = LightRecord | GroupRecord | SceneRecord

RECORD_TYPES: dict[EntityKind, type[EntityRecord]] = {
    EntityKind.LIGHTS: LightRecord,
    EntityKind.GROUPS: GroupRecord,
    EntityKind.SCENES: SceneRecord,
}

RecordT = TypeVar("RecordT", LightRecord, GroupRecord, SceneRecord)


class CacheEntry(BaseModel, Generic[RecordT]):
    """A cached record and the time its collection was fetched."""

    model_config = ConfigDict(frozen=True)

    record: RecordT
    fetched_at: float


class CacheSnapshot(BaseModel):
    """Serializable image of one bridge's cache, exchanged with backends."""

    bridge_id: str
    saved_at: float
    fetched_at: dict[EntityKind, float] = Field(default_factory=dict)
    lights: list[LightRecord] = Field(default_factory=list)
    groups: list[GroupRecord] = Field(default_factory=list)
    scenes: list[SceneRecord] = Field(default_factory=list)

    def records_for(self, kind: EntityKind) -> list[EntityRecord]:
        """Records of the given kind."""
        return list(getattr(self, kind.value))


class CacheStats(BaseModel):
    """Counters for one bridge cache."""

    bridge_id: str
    hits: int = 0
    misses: int = 0
    refreshes: int = 0
    refresh_failures: int = 0
    optimistic_patches: int = 0
    entries: dict[EntityKind, int] = Field(default_factory=dict)
    last_refresh: float | None = None

    @property
    def hit_rate(self) -> float:
        """Fraction of lookups answered from the cache (0.0 when unused)."""
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0
