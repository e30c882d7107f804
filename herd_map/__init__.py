"""
Herd Map v1.0
=============

Bounded Context: Livestock positions and geofences on a map.

Design Philosophy:
- Separation of Concerns: Model, Geometry, Clustering, Scene, Rendering
- Pure functions over plain data; the UI only consumes the outputs
- Sensor data is never fatal: invalid coordinates are dropped and logged
- Pragmatismo > Purismo: supervision for colors and drawing, numpy for math

Architecture:

    herd_map/
    ├── model/             # GeoPoint, Marker, ClusterGroup, GeofencePolygon
    │   └── loader.py      # YAML scene files
    │
    ├── geometry/          # Pure geometry (stateless)
    │   ├── shapes.py      # to_renderable_polygon, point_in_polygon
    │   ├── distance.py    # planar / haversine metrics
    │   └── projection.py  # Web Mercator frame projection
    │
    ├── clustering/        # Zoom-dependent marker grouping
    │   ├── engine.py      # ClusteringEngine (agglomerative)
    │   └── thresholds.py  # PixelRadius, ZoomRadiusTable
    │
    ├── rendering/         # Colors + offscreen drawing
    │   ├── colors.py      # parse_color, alert palette
    │   └── visualizer.py  # MapVisualizer
    │
    ├── logging/           # JSON structured logging
    ├── config.py          # MapConfig (YAML)
    └── scene.py           # SceneBuilder -> MapScene render plan

Usage:

    from herd_map import GeoPoint, Marker, GeofencePolygon, cluster

    groups = cluster(markers, zoom_level=12.0)

    from herd_map import SceneBuilder, MapConfig

    scene = (
        SceneBuilder()
        .with_config(MapConfig.from_yaml("map.yaml"))
        .with_animals(markers)
        .with_geofences(fences)
        .with_zoom(12.0)
        .build()
    )
    for marker in scene.markers:
        ...
"""

# Model
from herd_map.model.entities import (
    GeoPoint,
    AlertLevel,
    Marker,
    ClusterGroup,
    GeofencePolygon,
)
from herd_map.model.loader import SceneData, load_scene

# Geometry
from herd_map.geometry.shapes import to_renderable_polygon, point_in_polygon
from herd_map.geometry.projection import FrameProjection

# Clustering
from herd_map.clustering.engine import ClusteringEngine, cluster, ungrouped
from herd_map.clustering.thresholds import PixelRadius, ZoomRadiusTable

# Rendering
from herd_map.rendering.colors import parse_color, FALLBACK_GRAY

# Config and scene
from herd_map.config import MapConfig, ClusteringConfig, RenderingConfig
from herd_map.scene import SceneBuilder, MapScene, MarkerSpec, PolygonSpec, SceneStats, MapType, AnimalListEntry
from herd_map.rendering.visualizer import MapVisualizer

__all__ = [
    # Model
    "GeoPoint",
    "AlertLevel",
    "Marker",
    "ClusterGroup",
    "GeofencePolygon",
    "SceneData",
    "load_scene",
    # Geometry
    "to_renderable_polygon",
    "point_in_polygon",
    "FrameProjection",
    # Clustering
    "ClusteringEngine",
    "cluster",
    "ungrouped",
    "PixelRadius",
    "ZoomRadiusTable",
    # Rendering
    "parse_color",
    "FALLBACK_GRAY",
    "MapVisualizer",
    # Config and scene
    "MapConfig",
    "ClusteringConfig",
    "RenderingConfig",
    "SceneBuilder",
    "MapScene",
    "MarkerSpec",
    "PolygonSpec",
    "AnimalListEntry",
    "SceneStats",
    "MapType",
]

__version__ = "1.0.0"
