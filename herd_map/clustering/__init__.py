"""
Clustering Layer
================

Bounded Context: Zoom-dependent grouping of map markers.

Responsibilities:
- Partition markers into ClusterGroups for a zoom level
- Pluggable zoom -> radius mapping (pixel radius, step table, any callable)
- Deterministic output for identical input
- NO drawing, NO geofences
"""

from herd_map.clustering.engine import (
    ClusteringEngine,
    cluster,
    ungrouped,
    cluster_spread_m,
    DEFAULT_MAX_ZOOM,
)
from herd_map.clustering.thresholds import PixelRadius, ZoomRadiusTable, RadiusFunction

__all__ = [
    "ClusteringEngine",
    "cluster",
    "ungrouped",
    "cluster_spread_m",
    "DEFAULT_MAX_ZOOM",
    "PixelRadius",
    "ZoomRadiusTable",
    "RadiusFunction",
]
