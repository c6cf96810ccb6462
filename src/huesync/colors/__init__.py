"""Color math for smart lights.

Three color representations are in play:

1. **HSV** (hue 0-360, saturation/value 0-100): what people and the
   named-color tables speak.
2. **8-bit RGB** (0-255): the intermediate step of every conversion.
3. **CIE xy** (0-1): what the bridge accepts natively.

```
"stormy" --parse_named_color--> HSV --hsv_to_rgb--> RGB --rgb_to_xy--> XY
```

Color temperature is expressed in mireds (1,000,000 / Kelvin), clamped to
the 153-500 range bridges accept.
"""

from .conversion import (
    MAX_MIREDS,
    MIN_MIREDS,
    clamp,
    hsv_to_rgb,
    hsv_to_xy,
    kelvin_to_mireds,
    mireds_to_kelvin,
    rgb_to_xy,
)
from .names import NAMED_COLOR_TEMPS, NAMED_COLORS, parse_named_color, parse_named_color_temp

__all__ = [
    "MAX_MIREDS",
    "MIN_MIREDS",
    "NAMED_COLORS",
    "NAMED_COLOR_TEMPS",
    "clamp",
    "hsv_to_rgb",
    "hsv_to_xy",
    "kelvin_to_mireds",
    "mireds_to_kelvin",
    "parse_named_color",
    "parse_named_color_temp",
    "rgb_to_xy",
]
