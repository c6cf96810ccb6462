"""Partial device state model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .color import XY


class DeviceState(BaseModel):
    """
    Partial light/group state.

    Every field is optional: None means "leave unchanged". The model is
    frozen; derive new states with `model_copy(update=...)`.

    Color channels:
        `hue`/`saturation` express an HSV intent, `xy` is the bridge's
        native chromaticity. When both are given, `xy` wins at write
        time (see `resolve_for_write`).
    """

    model_config = ConfigDict(frozen=True)

    on: bool | None = None
    brightness: float | None = Field(default=None, ge=0, le=100, description="Brightness percent")
    hue: float | None = Field(default=None, ge=0, lt=360, description="Hue in degrees")
    saturation: float | None = Field(default=None, ge=0, le=100, description="Saturation percent")
    color_temp: int | None = Field(default=None, ge=153, le=500, description="Color temperature in mireds")
    xy: XY | None = None
    transition_ms: int | None = Field(default=None, ge=0, description="Transition duration in milliseconds")

    def present_fields(self) -> list[str]:
        """Names of the fields that carry a value, in declaration order."""
        return [name for name in type(self).model_fields if getattr(self, name) is not None]

    def fields(self) -> dict[str, Any]:
        """Return only the fields that are set."""
        return {name: getattr(self, name) for name in self.present_fields()}

    def is_empty(self) -> bool:
        """True when no field is set."""
        return not self.present_fields()

    @property
    def has_hsv(self) -> bool:
        """True when both hue and saturation are set."""
        return self.hue is not None and self.saturation is not None

    def resolve_for_write(self) -> "DeviceState":
        """
        Build the payload sent to a bridge.

        Precedence for the color channel:
            1. explicit `xy` (hue, saturation and color_temp are dropped)
            2. `color_temp` (an HSV intent alongside it is dropped)
            3. hue + saturation, converted to xy using `brightness`
               (default 100) as the HSV value

        Returns:
            A new DeviceState carrying at most one color channel
        """
        from huesync.colors import hsv_to_xy

        if self.xy is not None:
            return self.model_copy(update={"hue": None, "saturation": None, "color_temp": None})

        if self.color_temp is not None:
            return self.model_copy(update={"hue": None, "saturation": None})

        if self.has_hsv:
            value = self.brightness if self.brightness is not None else 100.0
            xy = hsv_to_xy(self.hue, self.saturation, value)
            return self.model_copy(update={"hue": None, "saturation": None, "xy": xy})

        return self
