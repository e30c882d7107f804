"""
Geometry Layer
==============

Bounded Context: Pure geometric queries over map coordinates.

Responsibilities:
- Geofence rings for rendering
- Point-in-polygon hit tests
- Distance metrics and pixel projection
- NO state, NO clustering, NO drawing
"""

from herd_map.geometry.shapes import to_renderable_polygon, point_in_polygon, contains_any
from herd_map.geometry.distance import DistanceMetric, haversine_m
from herd_map.geometry.projection import FrameProjection, degrees_per_pixel

__all__ = [
    "to_renderable_polygon",
    "point_in_polygon",
    "contains_any",
    "DistanceMetric",
    "haversine_m",
    "FrameProjection",
    "degrees_per_pixel",
]
