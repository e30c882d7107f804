"""
Rendering Layer
===============

Bounded Context: Colors and offscreen drawing of map scenes.

Responsibilities:
- Parse geofence colors (fallback gray, never raise)
- Alert-level palette and marker hues
- Draw a MapScene onto a frame

Non-responsibilities:
- Clustering (handled by clustering)
- Hit tests (handled by geometry)

MapVisualizer is not re-exported here: it depends on herd_map.scene,
which itself uses this package's colors. Import it from
herd_map.rendering.visualizer or from herd_map.
"""

from herd_map.rendering.colors import (
    parse_color,
    hue_to_color,
    FALLBACK_GRAY,
    ALERT_COLORS,
    ALERT_HUES,
    CLUSTER_HUE,
)

__all__ = [
    "parse_color",
    "hue_to_color",
    "FALLBACK_GRAY",
    "ALERT_COLORS",
    "ALERT_HUES",
    "CLUSTER_HUE",
]
