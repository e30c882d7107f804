"""
Map Scene Module
================

Bounded Context: Per-frame render plan for the herd map.

Turns animals, geofences and a zoom level into a presentation-agnostic
plan a UI (or MapVisualizer) can draw: marker specs, polygon specs and
overlay statistics, plus the click/hit-test and animal-list queries the
map screen needs.

Design:
- Builder pattern: fluent configuration, validation at build time
- MapScene is immutable and recomputed on every zoom or data change
- Degenerate geofences are skipped and logged, never fatal
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import supervision as sv

from herd_map.clustering.engine import ClusteringEngine, ungrouped
from herd_map.config import MapConfig
from herd_map.geometry.shapes import point_in_polygon, to_renderable_polygon
from herd_map.logging import LogEvent, StructuredLogger, create_logger
from herd_map.model.entities import AlertLevel, ClusterGroup, GeoPoint, GeofencePolygon, Marker
from herd_map.rendering.colors import (
    ALERT_COLORS,
    ALERT_HUES,
    CLUSTER_HUE,
    hue_to_color,
    parse_color,
)


class MapType(str, Enum):
    NORMAL = "normal"
    SATELLITE = "satellite"


@dataclass(frozen=True)
class MarkerSpec:
    """
    One marker to draw: a single animal or a cluster of them.

    Attributes:
        position: Animal position, or cluster centroid
        title: Animal title, or "Group of N animals"
        snippet: "ID: <id>" for single animals, None for clusters
        hue: Map marker hue in degrees
        color: Drawing color for offscreen rendering
        group: Source cluster group
    """

    position: GeoPoint
    title: str
    snippet: Optional[str]
    hue: float
    color: sv.Color
    group: ClusterGroup

    @property
    def is_cluster(self) -> bool:
        return not self.group.is_single

    @property
    def offline_count(self) -> int:
        return sum(1 for m in self.group.members if not m.is_online)

    @property
    def status_text(self) -> Optional[str]:
        """Offline marker text: "Offline", or "N offline" for a cluster."""
        offline = self.offline_count
        if not offline:
            return None
        if self.is_cluster:
            return f"{offline} offline"
        return "Offline"

    @property
    def animal(self) -> Optional[Marker]:
        """The animal behind a single marker; None for clusters."""
        return self.group.members[0] if self.group.is_single else None

    @classmethod
    def from_group(cls, group: ClusterGroup) -> "MarkerSpec":
        if group.is_single:
            animal = group.members[0]
            return cls(
                position=animal.position,
                title=animal.title,
                snippet=animal.snippet,
                hue=ALERT_HUES[animal.alert_level],
                color=ALERT_COLORS[animal.alert_level],
                group=group,
            )
        return cls(
            position=group.centroid,
            title=group.title,
            snippet=None,
            hue=CLUSTER_HUE,
            color=hue_to_color(CLUSTER_HUE),
            group=group,
        )


@dataclass(frozen=True)
class PolygonSpec:
    """One geofence overlay: closed ring, stroke and translucent fill."""

    geofence: GeofencePolygon
    ring: Tuple[GeoPoint, ...]
    stroke_color: sv.Color
    stroke_width: int
    fill_color: sv.Color
    fill_opacity: float

    def contains(self, point: GeoPoint) -> bool:
        """Click hit test for this geofence."""
        return point_in_polygon(point, self.geofence)


@dataclass(frozen=True)
class SceneStats:
    """
    Overlay statistics.

    The cluster count is only shown when clustering is on and actually
    merged something. animal_count includes markers the engine excluded
    for invalid coordinates.
    """

    animal_count: int
    geofence_count: int
    cluster_count: int
    show_cluster_count: bool

    def lines(self) -> List[str]:
        lines = [
            f"Animals: {self.animal_count}",
            f"Geofences: {self.geofence_count}",
        ]
        if self.show_cluster_count:
            lines.append(f"Clusters: {self.cluster_count}")
        return lines

    def __str__(self) -> str:
        return " | ".join(self.lines())


@dataclass(frozen=True)
class AnimalListEntry:
    """One row of the animal list: name, tag, alert dot and connectivity."""

    animal_id: str
    name: str
    alert_level: AlertLevel
    status_color: sv.Color
    status_text: Optional[str]

    @classmethod
    def from_marker(cls, marker: Marker) -> "AnimalListEntry":
        return cls(
            animal_id=marker.id,
            name=marker.display_name,
            alert_level=marker.alert_level,
            status_color=ALERT_COLORS[marker.alert_level],
            status_text=marker.status_text,
        )


@dataclass(frozen=True)
class MapScene:
    """Immutable render plan for one frame."""

    zoom: float
    map_type: MapType
    low_data_mode: bool
    show_clustering: bool
    animals: Tuple[Marker, ...]
    geofences: Tuple[GeofencePolygon, ...]
    clusters: Tuple[ClusterGroup, ...]
    markers: Tuple[MarkerSpec, ...]
    polygons: Tuple[PolygonSpec, ...]
    stats: SceneStats

    def geofences_at(self, point: GeoPoint) -> List[GeofencePolygon]:
        """Drawn geofences containing point, in draw order."""
        return [p.geofence for p in self.polygons if p.contains(point)]

    def animals_for_listing(self, selected: Optional[ClusterGroup] = None) -> List[Marker]:
        """Members of the selected cluster, or every animal."""
        if selected is not None:
            return list(selected.members)
        return list(self.animals)

    def listing_title(self, selected: Optional[ClusterGroup] = None) -> str:
        count = len(self.animals_for_listing(selected))
        if selected is not None:
            return f"Animals in group ({count})"
        return f"All animals ({count})"

    def listing_entries(self, selected: Optional[ClusterGroup] = None) -> List[AnimalListEntry]:
        """Rows of the animal list sheet, in listing order."""
        return [AnimalListEntry.from_marker(m) for m in self.animals_for_listing(selected)]


class SceneBuilder:
    """
    Builder for MapScene.

    Usage:
        scene = (
            SceneBuilder()
            .with_config(MapConfig.from_yaml("map.yaml"))
            .with_animals(animals)
            .with_geofences(fences)
            .with_zoom(12.0)
            .build()
        )
    """

    def __init__(self):
        self._config: MapConfig = MapConfig()
        self._animals: List[Marker] = []
        self._geofences: List[GeofencePolygon] = []
        self._zoom: float | None = None
        self._engine: ClusteringEngine | None = None
        self._show_clustering: bool | None = None
        self._low_data_mode: bool | None = None
        self._logger: StructuredLogger | None = None

    def with_config(self, config: MapConfig) -> "SceneBuilder":
        self._config = config
        return self

    def with_animals(self, animals: Sequence[Marker]) -> "SceneBuilder":
        self._animals = list(animals)
        return self

    def with_geofences(self, geofences: Sequence[GeofencePolygon]) -> "SceneBuilder":
        self._geofences = list(geofences)
        return self

    def with_zoom(self, zoom: float) -> "SceneBuilder":
        """Set zoom level (default: config initial_zoom)."""
        self._zoom = zoom
        return self

    def with_engine(self, engine: ClusteringEngine) -> "SceneBuilder":
        """Override the engine built from config.clustering."""
        self._engine = engine
        return self

    def with_clustering(self, enabled: bool) -> "SceneBuilder":
        self._show_clustering = enabled
        return self

    def with_low_data_mode(self, enabled: bool) -> "SceneBuilder":
        self._low_data_mode = enabled
        return self

    def with_logger(self, logger: StructuredLogger) -> "SceneBuilder":
        self._logger = logger
        return self

    def build(self) -> MapScene:
        """
        Build the render plan.

        Raises:
            ValueError: If zoom is negative
        """
        config = self._config
        zoom = config.initial_zoom if self._zoom is None else float(self._zoom)
        if zoom < 0:
            raise ValueError(f"zoom must be >= 0, got {zoom}")

        show_clustering = config.show_clustering if self._show_clustering is None else self._show_clustering
        low_data_mode = config.low_data_mode if self._low_data_mode is None else self._low_data_mode
        logger = self._logger or create_logger("scene")

        if show_clustering:
            engine = self._engine or config.clustering.create_engine(logger=logger)
            clusters = engine.cluster(self._animals, zoom)
        else:
            clusters = ungrouped(self._animals)

        clustered_count = sum(len(g.members) for g in clusters)
        polygons = tuple(self._polygon_specs(logger))
        stats = SceneStats(
            animal_count=len(self._animals),
            geofence_count=len(self._geofences),
            cluster_count=len(clusters),
            show_cluster_count=show_clustering and len(clusters) != clustered_count,
        )

        scene = MapScene(
            zoom=zoom,
            map_type=MapType.NORMAL if low_data_mode else MapType.SATELLITE,
            low_data_mode=low_data_mode,
            show_clustering=show_clustering,
            animals=tuple(self._animals),
            geofences=tuple(self._geofences),
            clusters=tuple(clusters),
            markers=tuple(MarkerSpec.from_group(g) for g in clusters),
            polygons=polygons,
            stats=stats,
        )

        logger.debug(
            event=LogEvent.SCENE_BUILT,
            message=str(stats),
            metadata={'zoom': zoom, 'markers': len(scene.markers), 'polygons': len(polygons)},
        )
        return scene

    def _polygon_specs(self, logger: StructuredLogger) -> List[PolygonSpec]:
        rendering = self._config.rendering
        specs = []
        for fence in self._geofences:
            ring = to_renderable_polygon(fence)
            if not ring:
                logger.warning(
                    event=LogEvent.GEOFENCE_DEGENERATE,
                    message=f"Geofence '{fence.id}' has fewer than 3 vertices, skipped",
                    metadata={'geofence_id': fence.id, 'vertices': len(fence.vertices)},
                )
                continue

            color = parse_color(fence.color, logger=logger)
            specs.append(PolygonSpec(
                geofence=fence,
                ring=tuple(ring),
                stroke_color=color,
                stroke_width=rendering.stroke_width,
                fill_color=color,
                fill_opacity=rendering.fill_opacity,
            ))
        return specs
