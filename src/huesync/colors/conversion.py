"""Deterministic color-space conversions.

All functions are total over their documented domains: out-of-range
inputs are clamped, never rejected.
"""

import math

from huesync.models.color import RGB, XY

# sRGB -> CIE XYZ using the Wide RGB D65 primaries the bridge expects
_WIDE_RGB_D65 = (
    (0.664511, 0.154324, 0.162028),
    (0.283881, 0.668433, 0.047685),
    (0.000088, 0.072310, 0.986039),
)

MIN_MIREDS = 153
MAX_MIREDS = 500


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into the closed interval [low, high]."""
    return max(low, min(high, value))


def _to_byte(channel: float) -> int:
    # Half-up rounding of a [0, 1] channel onto 0-255
    return int(math.floor(channel * 255 + 0.5))


def hsv_to_rgb(hue: float, saturation: float, value: float) -> RGB:
    """
    Convert HSV to 8-bit RGB.

    Args:
        hue: Hue in degrees (0-360)
        saturation: Saturation percent (0-100)
        value: Value/brightness percent (0-100)

    Returns:
        RGB with integer channels in 0-255

    Example:
        >>> hsv_to_rgb(0, 100, 100).to_rgb_tuple()
        (255, 0, 0)
    """
    h = clamp(hue, 0.0, 360.0) / 60.0
    s = clamp(saturation, 0.0, 100.0) / 100.0
    v = clamp(value, 0.0, 100.0) / 100.0

    i = math.floor(h)
    f = h - i
    p = v * (1 - s)
    q = v * (1 - f * s)
    t = v * (1 - (1 - f) * s)

    sector = i % 6
    if sector == 0:
        r, g, b = v, t, p
    elif sector == 1:
        r, g, b = q, v, p
    elif sector == 2:
        r, g, b = p, v, t
    elif sector == 3:
        r, g, b = p, q, v
    elif sector == 4:
        r, g, b = t, p, v
    else:
        r, g, b = v, p, q

    return RGB(r=_to_byte(r), g=_to_byte(g), b=_to_byte(b))


def _expand_gamma(channel: float) -> float:
    if channel > 0.04045:
        return ((channel + 0.055) / 1.055) ** 2.4
    return channel / 12.92


def rgb_to_xy(rgb: RGB) -> XY:
    """
    Convert 8-bit RGB to CIE xy chromaticity.

    Pure black has no chromaticity; it maps to (0, 0) instead of
    dividing by zero.

    Args:
        rgb: Color to convert

    Returns:
        XY coordinates, each in 0-1
    """
    red, green, blue = (_expand_gamma(c / 255.0) for c in rgb.to_rgb_tuple())

    X, Y, Z = (row[0] * red + row[1] * green + row[2] * blue for row in _WIDE_RGB_D65)

    total = X + Y + Z
    if total == 0:
        return XY(x=0.0, y=0.0)

    return XY(x=X / total, y=Y / total)


def hsv_to_xy(hue: float, saturation: float, value: float = 100.0) -> XY:
    """Convert HSV straight to xy (hsv -> rgb -> xy)."""
    return rgb_to_xy(hsv_to_rgb(hue, saturation, value))


def kelvin_to_mireds(kelvin: float) -> int:
    """Convert a Kelvin color temperature to mireds within the device range."""
    if kelvin <= 0:
        return MAX_MIREDS
    return int(clamp(round(1_000_000 / kelvin), MIN_MIREDS, MAX_MIREDS))


def mireds_to_kelvin(mireds: float) -> int:
    """Convert mireds to Kelvin, clamping mireds to the device range first."""
    return round(1_000_000 / clamp(mireds, MIN_MIREDS, MAX_MIREDS))
