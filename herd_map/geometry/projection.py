"""
Web Mercator pixel projection.

Maps lat/lon to pixel coordinates of a frame centered on a coordinate at a
given zoom, with the same tile math as slippy-map providers: the whole world
is `tile_size * 2**zoom` pixels wide.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from herd_map.model.entities import GeoPoint

MAX_MERCATOR_LAT = 85.05112878


def world_size_px(zoom: float, tile_size: int = 256) -> float:
    return tile_size * (2.0 ** zoom)


def degrees_per_pixel(zoom: float, tile_size: int = 256) -> float:
    """Longitude span of one pixel at the equator."""
    return 360.0 / world_size_px(zoom, tile_size)


def _world_xy(lat: float, lon: float, zoom: float, tile_size: int) -> Tuple[float, float]:
    lat = min(max(lat, -MAX_MERCATOR_LAT), MAX_MERCATOR_LAT)
    size = world_size_px(zoom, tile_size)
    x = (lon + 180.0) / 360.0 * size
    sin_lat = math.sin(math.radians(lat))
    y = (0.5 - math.log((1.0 + sin_lat) / (1.0 - sin_lat)) / (4.0 * math.pi)) * size
    return x, y


@dataclass(frozen=True)
class FrameProjection:
    """
    Projects coordinates onto a (width, height) frame.

    Attributes:
        center: Coordinate at the frame center
        zoom: Map zoom level
        frame_resolution_wh: (width, height) in pixels
        tile_size: Tile edge in pixels
    """

    center: GeoPoint
    zoom: float
    frame_resolution_wh: Tuple[int, int]
    tile_size: int = 256

    def __post_init__(self):
        width, height = self.frame_resolution_wh
        if width <= 0 or height <= 0:
            raise ValueError(f"frame_resolution_wh must be positive, got {self.frame_resolution_wh}")
        if not self.center.is_valid:
            raise ValueError(f"Projection center is not a valid coordinate: {self.center}")

        cx, cy = _world_xy(self.center.latitude, self.center.longitude, self.zoom, self.tile_size)
        object.__setattr__(self, '_origin', (cx - width / 2.0, cy - height / 2.0))

    def to_pixel(self, point: GeoPoint) -> Tuple[int, int]:
        x, y = _world_xy(point.latitude, point.longitude, self.zoom, self.tile_size)
        ox, oy = self._origin
        return int(round(x - ox)), int(round(y - oy))

    def to_pixels(self, points) -> np.ndarray:
        """Nx2 int32 array, ready for supervision/cv2 polygon drawing."""
        return np.array([self.to_pixel(p) for p in points], dtype=np.int32).reshape(-1, 2)

    def contains_pixel(self, xy: Tuple[int, int]) -> bool:
        width, height = self.frame_resolution_wh
        return 0 <= xy[0] < width and 0 <= xy[1] < height
