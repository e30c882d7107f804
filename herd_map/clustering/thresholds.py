"""
Zoom -> clustering radius mappings.

A radius function takes a zoom level and returns the merge distance in
degrees. Any callable with that shape works; these two cover the common
cases:

- PixelRadius: a fixed on-screen radius converted to degrees at each zoom
- ZoomRadiusTable: explicit {zoom: radius_deg} steps

Both shrink as zoom grows, so higher zoom never yields coarser groups.
"""

import math
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping

from herd_map.geometry.projection import degrees_per_pixel

RadiusFunction = Callable[[float], float]


@dataclass(frozen=True)
class PixelRadius:
    """
    Merge markers whose centroids are within `radius_px` screen pixels.

    At zoom z one pixel spans 360 / (tile_size * 2**z) degrees of longitude
    at the equator, so the radius halves with each zoom step.

    Attributes:
        radius_px: On-screen merge radius in pixels
        tile_size: Map tile edge in pixels
    """

    radius_px: float = 60.0
    tile_size: int = 256

    def __post_init__(self):
        if not self.radius_px > 0:
            raise ValueError(f"radius_px must be > 0, got {self.radius_px}")
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be > 0, got {self.tile_size}")

    def __call__(self, zoom: float) -> float:
        return self.radius_px * degrees_per_pixel(zoom, self.tile_size)


@dataclass(frozen=True)
class ZoomRadiusTable:
    """
    Step table of merge radii in degrees.

    Lookup uses the entry with the largest zoom <= requested zoom; zooms
    below the first entry use the first radius.

    Invariants:
        - at least one entry
        - radii are finite, >= 0 and non-increasing with zoom

    Example:
        >>> table = ZoomRadiusTable({5: 2.0, 10: 0.05, 15: 0.001})
        >>> table(12.5)
        0.05
    """

    radii: Mapping[float, float] = field(default_factory=dict)

    def __post_init__(self):
        if not self.radii:
            raise ValueError("ZoomRadiusTable needs at least one {zoom: radius} entry")

        items = sorted((float(z), float(r)) for z, r in self.radii.items())
        zooms = [z for z, _ in items]
        radii = [r for _, r in items]

        for zoom, radius in items:
            if not math.isfinite(radius) or radius < 0:
                raise ValueError(f"Radius at zoom {zoom} must be finite and >= 0, got {radius}")

        for (z_lo, r_lo), (z_hi, r_hi) in zip(items, items[1:]):
            if r_hi > r_lo:
                raise ValueError(
                    f"Radii must not grow with zoom: zoom {z_lo} -> {r_lo}, "
                    f"zoom {z_hi} -> {r_hi}"
                )

        object.__setattr__(self, '_zooms', zooms)
        object.__setattr__(self, '_radii', radii)

    def __call__(self, zoom: float) -> float:
        idx = bisect_right(self._zooms, zoom) - 1
        return self._radii[max(idx, 0)]

    @classmethod
    def from_dict(cls, data: Dict[Any, Any]) -> "ZoomRadiusTable":
        """Build from YAML data, where keys may arrive as strings.

        Raises:
            ValueError: If keys or values are not numeric
        """
        try:
            return cls({float(z): float(r) for z, r in data.items()})
        except (TypeError, AttributeError) as e:
            raise ValueError(f"Invalid zoom_radius_table: {e}")
