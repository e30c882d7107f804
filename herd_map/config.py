"""
Configuration schema for the herd map.

Defines the map view defaults, clustering tuning (zoom -> radius mapping,
distance metric) and offscreen rendering styles. Loaded from YAML and
validated at construction.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from herd_map.clustering.engine import ClusteringEngine, DEFAULT_MAX_ZOOM
from herd_map.clustering.thresholds import PixelRadius, ZoomRadiusTable, RadiusFunction
from herd_map.geometry.distance import DistanceMetric
from herd_map.logging import StructuredLogger
from herd_map.model.entities import GeoPoint

# Buenos Aires, used when no location is available
FALLBACK_POSITION = GeoPoint(-34.6037, -58.3758)
DEFAULT_ZOOM = 10.0


@dataclass(frozen=True)
class ClusteringConfig:
    """
    Clustering tuning.

    When zoom_radius_table is set it replaces the pixel radius mapping.
    """

    metric: str = DistanceMetric.PLANAR.value
    radius_px: float = 60.0
    tile_size: int = 256
    max_zoom: Optional[float] = DEFAULT_MAX_ZOOM
    zoom_radius_table: Optional[Dict[float, float]] = None

    def __post_init__(self):
        """Validate clustering configuration."""
        valid_metrics = {m.value for m in DistanceMetric}
        if self.metric not in valid_metrics:
            raise ValueError(
                f"Invalid metric: {self.metric}. "
                f"Must be one of {valid_metrics}"
            )

        if not self.radius_px > 0:
            raise ValueError(f"radius_px must be > 0, got {self.radius_px}")

        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be > 0, got {self.tile_size}")

        if self.max_zoom is not None and not 0 <= self.max_zoom <= 30:
            raise ValueError(f"max_zoom must be in [0, 30], got {self.max_zoom}")

        # Fail fast on a bad table rather than at first lookup
        self.radius_function()

    def radius_function(self) -> RadiusFunction:
        if self.zoom_radius_table:
            return ZoomRadiusTable.from_dict(self.zoom_radius_table)
        return PixelRadius(radius_px=self.radius_px, tile_size=self.tile_size)

    def create_engine(self, logger: Optional[StructuredLogger] = None) -> ClusteringEngine:
        return ClusteringEngine(
            radius_for_zoom=self.radius_function(),
            metric=DistanceMetric(self.metric),
            max_zoom=self.max_zoom,
            logger=logger,
        )


@dataclass(frozen=True)
class RenderingConfig:
    """Overlay styles for geofences and markers."""

    frame_resolution_wh: Tuple[int, int] = (1280, 720)
    stroke_width: int = 2
    fill_alpha: int = 50  # 0-255
    marker_radius_px: int = 8
    text_scale: float = 0.5

    def __post_init__(self):
        """Validate rendering configuration."""
        width, height = self.frame_resolution_wh
        if width <= 0 or height <= 0:
            raise ValueError(
                f"frame_resolution_wh must have positive dimensions, got {self.frame_resolution_wh}"
            )
        if width > 4096 or height > 4096:
            raise ValueError(
                f"frame_resolution_wh dimensions too large (max 4096x4096), got {self.frame_resolution_wh}"
            )

        if self.stroke_width <= 0:
            raise ValueError(f"stroke_width must be > 0, got {self.stroke_width}")

        if not 0 <= self.fill_alpha <= 255:
            raise ValueError(f"fill_alpha must be in [0, 255], got {self.fill_alpha}")

        if self.marker_radius_px <= 0:
            raise ValueError(f"marker_radius_px must be > 0, got {self.marker_radius_px}")

    @property
    def fill_opacity(self) -> float:
        return self.fill_alpha / 255.0


@dataclass(frozen=True)
class MapConfig:
    """
    Main configuration for the herd map.

    Immutable after construction (frozen dataclass).
    """

    initial_position: GeoPoint = FALLBACK_POSITION
    initial_zoom: float = DEFAULT_ZOOM
    show_clustering: bool = True
    low_data_mode: bool = False

    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    rendering: RenderingConfig = field(default_factory=RenderingConfig)

    def __post_init__(self):
        """Validate map configuration."""
        if not self.initial_position.is_valid:
            raise ValueError(
                f"initial_position must be a valid coordinate, got {self.initial_position}"
            )

        if not 0 <= self.initial_zoom <= 30:
            raise ValueError(
                f"initial_zoom must be in [0, 30], got {self.initial_zoom}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapConfig":
        """
        Build from parsed YAML.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        try:
            clustering_data = dict(data.get("clustering") or {})
            rendering_data = dict(data.get("rendering") or {})

            if "frame_resolution_wh" in rendering_data:
                rendering_data["frame_resolution_wh"] = tuple(rendering_data["frame_resolution_wh"])

            position_data = data.get("initial_position")
            initial_position = (
                GeoPoint.from_pair(position_data) if position_data is not None else FALLBACK_POSITION
            )

            return cls(
                initial_position=initial_position,
                initial_zoom=float(data.get("initial_zoom", DEFAULT_ZOOM)),
                show_clustering=bool(data.get("show_clustering", True)),
                low_data_mode=bool(data.get("low_data_mode", False)),
                clustering=ClusteringConfig(**clustering_data),
                rendering=RenderingConfig(**rendering_data),
            )
        except TypeError as e:
            raise ValueError(f"Invalid map configuration: {e}")

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "MapConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            initial_position: [-34.6037, -58.3758]
            initial_zoom: 10
            show_clustering: true
            low_data_mode: false

            clustering:
              metric: "planar"
              radius_px: 60
              max_zoom: 21
              zoom_radius_table:   # optional, overrides radius_px
                5: 1.0
                12: 0.01

            rendering:
              frame_resolution_wh: [1280, 720]
              stroke_width: 2
              fill_alpha: 50

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If YAML or values are invalid
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Config file {yaml_path} must contain a mapping")

        return cls.from_dict(data)
