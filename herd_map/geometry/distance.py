"""
Distance Metrics
================

Pairwise distances between coordinates, in degrees.

Both metrics return degrees so a single zoom -> radius mapping works for
either:

- planar: equirectangular approximation, longitude scaled by cos(mean lat)
- haversine: great-circle central angle

Arrays are (N, 2) of [lat, lon] in degrees.
"""

from enum import Enum
from typing import Callable, Dict

import numpy as np

EARTH_RADIUS_M = 6_371_000.0


class DistanceMetric(str, Enum):
    PLANAR = "planar"
    HAVERSINE = "haversine"


def planar_matrix(coords: np.ndarray) -> np.ndarray:
    """Equirectangular distance matrix in degrees."""
    lat = coords[:, 0]
    lon = coords[:, 1]
    mean_lat = np.radians((lat[:, None] + lat[None, :]) / 2.0)
    dlat = lat[:, None] - lat[None, :]
    dlon = (lon[:, None] - lon[None, :]) * np.cos(mean_lat)
    return np.hypot(dlat, dlon)


def haversine_matrix(coords: np.ndarray) -> np.ndarray:
    """Great-circle central angle matrix in degrees."""
    lat = np.radians(coords[:, 0])
    lon = np.radians(coords[:, 1])
    dlat = lat[:, None] - lat[None, :]
    dlon = lon[:, None] - lon[None, :]
    h = np.sin(dlat / 2.0) ** 2 + np.cos(lat[:, None]) * np.cos(lat[None, :]) * np.sin(dlon / 2.0) ** 2
    return np.degrees(2.0 * np.arcsin(np.sqrt(np.clip(h, 0.0, 1.0))))


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters."""
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    d_phi = np.radians(lat2 - lat1)
    d_lambda = np.radians(lon2 - lon1)
    a = np.sin(d_phi / 2.0) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2.0) ** 2
    return float(2.0 * EARTH_RADIUS_M * np.arcsin(np.sqrt(min(max(a, 0.0), 1.0))))


MATRIX_FUNCTIONS: Dict[DistanceMetric, Callable[[np.ndarray], np.ndarray]] = {
    DistanceMetric.PLANAR: planar_matrix,
    DistanceMetric.HAVERSINE: haversine_matrix,
}
