"""Per-device atmospheric variation."""

from .engine import (
    BRIGHTNESS_JITTER,
    COLOR_TEMP_JITTER,
    HUE_JITTER,
    MIN_VISIBLE_BRIGHTNESS,
    SATURATION_JITTER,
    TRANSITION_JITTER_MS,
    VariationEngine,
    VariationPlan,
)

__all__ = [
    "BRIGHTNESS_JITTER",
    "COLOR_TEMP_JITTER",
    "HUE_JITTER",
    "MIN_VISIBLE_BRIGHTNESS",
    "SATURATION_JITTER",
    "TRANSITION_JITTER_MS",
    "VariationEngine",
    "VariationPlan",
]
