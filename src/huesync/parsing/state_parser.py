"""Free text to DeviceState.

Rules are applied to the lower-cased phrase in a fixed order:

1. an "off" cue ends parsing with ``on=False`` and nothing else
2. an "on" cue sets ``on=True`` and parsing continues
3. brightness: a number ("50%", "brightness 50") beats "dim" (30) and "bright" (100)
4. a named color sets hue/saturation, and brightness from the color's
   value when it is below 100 and no brightness was found in step 3
5. a named color temperature sets ``color_temp`` independently of step 4
6. speed words set ``transition_ms``

On/off cues are matched as whole words, so "afternoon" or "office"
do not switch anything.
"""

import logging
import re

from huesync.colors import clamp, parse_named_color, parse_named_color_temp
from huesync.models import DeviceState

logger = logging.getLogger(__name__)

_OFF_CUE = re.compile(r"\boff\b")
_ON_CUE = re.compile(r"\bon\b")
_BRIGHTNESS = re.compile(r"(\d+)\s*%|brightness\s+(\d+)")

DIM_BRIGHTNESS = 30.0
BRIGHT_BRIGHTNESS = 100.0

# First match wins
TRANSITION_CUES: dict[str, int] = {
    "slowly": 3000,
    "gradually": 3000,
    "quickly": 200,
    "instantly": 0,
}

ATMOSPHERIC_KEYWORDS: tuple[str, ...] = (
    "stormy", "storm", "thunderstorm", "lightning",
    "sunset", "sunrise", "dawn", "dusk", "twilight",
    "fire", "fireplace", "campfire", "candle", "candlelight",
    "ocean", "forest", "nature", "atmospheric", "moody",
    "aurora", "galaxy", "cosmic", "dreamy",
    "evening", "night", "romantic", "cozy",
)


def _parse_brightness(text: str) -> float | None:
    match = _BRIGHTNESS.search(text)
    if match:
        return clamp(float(match.group(1) or match.group(2)), 0.0, 100.0)
    if "dim" in text:
        return DIM_BRIGHTNESS
    if "bright" in text:
        return BRIGHT_BRIGHTNESS
    return None


def _parse_transition(text: str) -> int | None:
    for cue, millis in TRANSITION_CUES.items():
        if cue in text:
            return millis
    return None


def parse(text: str) -> DeviceState:
    """
    Convert a phrase into a partial device state.

    Never raises: an unrecognized phrase yields an empty state.

    Args:
        text: Free text such as "dim the lights to warm white slowly"

    Returns:
        DeviceState with only the inferred fields set

    Example:
        >>> parse("turn off and make it red").fields()
        {'on': False}
    """
    lower = (text or "").lower()

    if _OFF_CUE.search(lower):
        return DeviceState(on=False)

    fields: dict = {}
    if _ON_CUE.search(lower):
        fields["on"] = True

    brightness = _parse_brightness(lower)
    if brightness is not None:
        fields["brightness"] = brightness

    color = parse_named_color(lower)
    if color is not None:
        fields["hue"] = color.h
        fields["saturation"] = color.s
        if "brightness" not in fields and color.v < 100:
            fields["brightness"] = color.v

    color_temp = parse_named_color_temp(lower)
    if color_temp is not None:
        fields["color_temp"] = color_temp

    transition = _parse_transition(lower)
    if transition is not None:
        fields["transition_ms"] = transition

    state = DeviceState(**fields)
    logger.debug(f"Parsed {text!r} -> {state.fields()}")
    return state


def is_atmospheric(text: str | None) -> bool:
    """True when the phrase describes a mood that suits per-light variation."""
    if not text:
        return False
    lower = text.lower()
    return any(keyword in lower for keyword in ATMOSPHERIC_KEYWORDS)
