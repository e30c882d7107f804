"""
Color Parsing and Palette
=========================

Hex/named color parsing for geofence overlays, plus the alert-level palette.

Design:
- parse_color never raises: malformed strings yield FALLBACK_GRAY
- Accepts #RRGGBB, #AARRGGBB (alpha dropped) and a small set of names
- Colors are supervision.Color so they feed sv.draw_* directly
"""

import colorsys
import re
from typing import Any, Dict, Optional

import supervision as sv

from herd_map.logging import LogEvent, StructuredLogger
from herd_map.model.entities import AlertLevel

FALLBACK_GRAY = sv.Color(r=0x88, g=0x88, b=0x88)

_HEX_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

NAMED_COLORS: Dict[str, str] = {
    "black": "#000000",
    "darkgray": "#444444",
    "darkgrey": "#444444",
    "gray": "#888888",
    "grey": "#888888",
    "lightgray": "#CCCCCC",
    "lightgrey": "#CCCCCC",
    "white": "#FFFFFF",
    "red": "#FF0000",
    "green": "#00FF00",
    "blue": "#0000FF",
    "yellow": "#FFFF00",
    "cyan": "#00FFFF",
    "magenta": "#FF00FF",
    "aqua": "#00FFFF",
    "fuchsia": "#FF00FF",
    "lime": "#00FF00",
    "maroon": "#800000",
    "navy": "#000080",
    "olive": "#808000",
    "purple": "#800080",
    "silver": "#C0C0C0",
    "teal": "#008080",
}


def parse_color(color_string: Any, logger: Optional[StructuredLogger] = None) -> sv.Color:
    """
    Parse a color string.

    Args:
        color_string: "#RRGGBB", "#AARRGGBB" or a color name
        logger: Optional logger; fallbacks are reported at DEBUG

    Returns:
        Parsed color, or FALLBACK_GRAY for malformed input

    Example:
        >>> parse_color("#FF0000") == sv.Color(r=255, g=0, b=0)
        True
        >>> parse_color("not-a-color") == FALLBACK_GRAY
        True
    """
    if isinstance(color_string, str):
        named = NAMED_COLORS.get(color_string.lower())
        if named is not None:
            return sv.Color.from_hex(named)
        if _HEX_PATTERN.fullmatch(color_string):
            # #AARRGGBB: keep the RGB part
            return sv.Color.from_hex("#" + color_string[-6:])

    if logger is not None:
        logger.debug(
            event=LogEvent.COLOR_FALLBACK,
            message="Malformed color string, using fallback gray",
            metadata={'color': repr(color_string)},
        )
    return FALLBACK_GRAY


def hue_to_color(hue: float) -> sv.Color:
    """Fully saturated color for a marker hue in degrees [0, 360)."""
    r, g, b = colorsys.hsv_to_rgb((hue % 360.0) / 360.0, 1.0, 1.0)
    return sv.Color(r=round(r * 255), g=round(g * 255), b=round(b * 255))


# Marker hues (degrees), same values as the map SDK's default marker hues
HUE_RED = 0.0
HUE_ORANGE = 30.0
HUE_YELLOW = 60.0
HUE_GREEN = 120.0
HUE_BLUE = 240.0

CLUSTER_HUE = HUE_BLUE

ALERT_HUES: Dict[AlertLevel, float] = {
    AlertLevel.CRITICAL: HUE_RED,
    AlertLevel.WARNING: HUE_ORANGE,
    AlertLevel.INFO: HUE_YELLOW,
    AlertLevel.NONE: HUE_GREEN,
}

# Status dot colors in the animal list
ALERT_COLORS: Dict[AlertLevel, sv.Color] = {
    AlertLevel.CRITICAL: sv.Color(r=255, g=0, b=0),
    AlertLevel.WARNING: sv.Color(r=0xFF, g=0x98, b=0x00),
    AlertLevel.INFO: sv.Color(r=255, g=255, b=0),
    AlertLevel.NONE: sv.Color(r=0, g=255, b=0),
}
