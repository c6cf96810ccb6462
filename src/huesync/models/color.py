"""Color value models."""

from pydantic import BaseModel, ConfigDict, Field


class RGB(BaseModel):
    """Standard 8-bit RGB color.

    The model is frozen so values can be used as dict keys and shared
    between threads without copying.
    """

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255, description="Red (0-255)")
    g: int = Field(ge=0, le=255, description="Green (0-255)")
    b: int = Field(ge=0, le=255, description="Blue (0-255)")

    def to_rgb_tuple(self) -> tuple[int, int, int]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        """Convert to CSS hex color string (e.g., '#FF0000')."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


class HSV(BaseModel):
    """Hue in degrees, saturation and value in percent."""

    model_config = ConfigDict(frozen=True)

    h: float = Field(ge=0, le=360, description="Hue (0-360 degrees)")
    s: float = Field(ge=0, le=100, description="Saturation (0-100)")
    v: float = Field(ge=0, le=100, description="Value (0-100)")


class XY(BaseModel):
    """CIE 1931 chromaticity coordinates, the bridge's native color space."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(ge=0, le=1)
    y: float = Field(ge=0, le=1)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to an (x, y) tuple."""
        return (self.x, self.y)
