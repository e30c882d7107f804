"""
Geofence Polygon Utilities
==========================

Pure geometry over GeofencePolygon - NO state, NO side effects.

Design:
- Degenerate polygons (< 3 vertices) answer empty/False, never raise
- Planar ray casting (lon = x, lat = y); farm-scale fences make the
  small-area approximation acceptable
- Thread-safe (inputs are immutable)
"""

from typing import List

import numpy as np

from herd_map.model.entities import GeoPoint, GeofencePolygon


def to_renderable_polygon(fence: GeofencePolygon) -> List[GeoPoint]:
    """
    Vertices as a closed ring ready for drawing.

    The first vertex is repeated at the end unless the input ring is
    already closed; no other point is introduced.

    Returns:
        Closed ring, or [] for fewer than 3 vertices (caller skips rendering)
    """
    if fence.is_degenerate:
        return []

    ring = list(fence.vertices)
    if ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def point_in_polygon(point: GeoPoint, fence: GeofencePolygon) -> bool:
    """
    Ray-casting containment test.

    Casts a ray towards +longitude and counts edge crossings (even-odd rule).
    Points exactly on an edge may fall either side.

    Returns:
        True if inside, False for degenerate fences or invalid points
    """
    if fence.is_degenerate or not point.is_valid:
        return False

    lats = np.array([v.latitude for v in fence.vertices], dtype=float)
    lons = np.array([v.longitude for v in fence.vertices], dtype=float)
    next_lats = np.roll(lats, -1)
    next_lons = np.roll(lons, -1)

    px, py = point.longitude, point.latitude
    straddles = (lats > py) != (next_lats > py)

    # Horizontal edges never straddle, so their 0/0 is masked out below
    with np.errstate(divide='ignore', invalid='ignore'):
        x_cross = (next_lons - lons) * (py - lats) / (next_lats - lats) + lons

    crossings = np.count_nonzero(straddles & (px < x_cross))
    return bool(crossings % 2 == 1)


def contains_any(points, fence: GeofencePolygon) -> np.ndarray:
    """Boolean mask of which points fall inside the fence."""
    return np.array([point_in_polygon(p, fence) for p in points], dtype=bool)
