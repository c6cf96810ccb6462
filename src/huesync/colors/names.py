"""Named colors and color temperatures.

Lookups run in two passes: a case-insensitive exact match, then a
substring match in both directions (the table key appears in the query,
or the query appears in the table key). The substring pass walks each
table in the order it is written below and the first hit wins, so the
order of entries is part of the lookup contract. Order beats
specificity: "thunderstormy sky" resolves to "stormy" because it is
listed before "sky".
"""

from collections.abc import Mapping
from typing import TypeVar

from huesync.models.color import HSV

V = TypeVar("V")

# Order matters, see module docstring
NAMED_COLORS: dict[str, HSV] = {
    # Basic colors
    "red": HSV(h=0, s=100, v=100),
    "orange": HSV(h=30, s=100, v=100),
    "yellow": HSV(h=60, s=100, v=100),
    "green": HSV(h=120, s=100, v=100),
    "cyan": HSV(h=180, s=100, v=100),
    "blue": HSV(h=240, s=100, v=100),
    "purple": HSV(h=270, s=100, v=100),
    "magenta": HSV(h=300, s=100, v=100),
    "pink": HSV(h=330, s=50, v=100),
    "white": HSV(h=0, s=0, v=100),
    # Atmospheric
    "sunrise": HSV(h=30, s=60, v=90),
    "sunset": HSV(h=15, s=80, v=85),
    "dusk": HSV(h=250, s=30, v=40),
    "dawn": HSV(h=200, s=20, v=70),
    "stormy": HSV(h=240, s=20, v=30),
    "stormy dusk": HSV(h=250, s=35, v=25),
    # Warm / cool
    "warm": HSV(h=30, s=40, v=90),
    "cool": HSV(h=200, s=30, v=90),
    "cold": HSV(h=200, s=50, v=80),
    # Nature
    "forest": HSV(h=120, s=60, v=40),
    "ocean": HSV(h=200, s=70, v=60),
    "sky": HSV(h=200, s=40, v=90),
    "fire": HSV(h=10, s=90, v=90),
    "ice": HSV(h=200, s=20, v=95),
}

# Mireds; order matters, see module docstring
NAMED_COLOR_TEMPS: dict[str, int] = {
    "candlelight": 500,  # 2000K
    "candle": 500,
    "warm white": 370,  # 2700K
    "warm": 370,
    "soft white": 323,  # 3100K
    "neutral": 250,  # 4000K
    "neutral white": 250,
    "cool white": 182,  # 5500K
    "cool": 182,
    "daylight": 153,  # 6500K
    "cold": 153,
}


def _lookup(table: Mapping[str, V], text: str) -> V | None:
    normalized = text.lower().strip()
    if not normalized:
        return None

    if normalized in table:
        return table[normalized]

    for key, value in table.items():
        if key in normalized or normalized in key:
            return value

    return None


def parse_named_color(text: str) -> HSV | None:
    """
    Look up a color by name or phrase.

    Args:
        text: Free text such as "red" or "make it stormy"

    Returns:
        The HSV of the first matching entry, or None
    """
    return _lookup(NAMED_COLORS, text)


def parse_named_color_temp(text: str) -> int | None:
    """
    Look up a color temperature by name or phrase.

    Args:
        text: Free text such as "warm white" or "daylight please"

    Returns:
        Color temperature in mireds, or None
    """
    return _lookup(NAMED_COLOR_TEMPS, text)
