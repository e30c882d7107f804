"""
Model Layer
===========

Bounded Context: Map entities (immutable value objects) and scene loading.
"""

from herd_map.model.entities import (
    GeoPoint,
    AlertLevel,
    Marker,
    ClusterGroup,
    GeofencePolygon,
)
from herd_map.model.loader import SceneData, load_scene

__all__ = [
    "GeoPoint",
    "AlertLevel",
    "Marker",
    "ClusterGroup",
    "GeofencePolygon",
    "SceneData",
    "load_scene",
]
