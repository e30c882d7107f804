"""
Clustering Engine Module
========================

Hierarchical (agglomerative) marker clustering by zoom level.

Algorithm:
1. Drop markers with NaN or out-of-range coordinates (logged, not raised)
2. Start with one group per marker
3. Repeatedly merge the two closest groups (centroid distance) while that
   distance is <= the radius for the zoom (inclusive)
4. After each merge the centroid is the arithmetic mean of member coordinates

Design:
- Stateless between calls; markers are read, never mutated or retained
- Ties go to the first (i, j) pair in input order (row-major argmin)
- Merge order depends only on the data, the radius only decides where to
  stop, so a larger radius never yields more groups
- Above max_zoom nothing merges

Complexity: O(n^2) memory for the distance matrix, O(n^2) per merge.
"""

import math
from typing import List, Optional, Sequence

import numpy as np

from herd_map.clustering.thresholds import PixelRadius, RadiusFunction
from herd_map.geometry.distance import DistanceMetric, MATRIX_FUNCTIONS, haversine_m
from herd_map.logging import LogEvent, StructuredLogger, create_logger
from herd_map.model.entities import ClusterGroup, GeoPoint, Marker

DEFAULT_MAX_ZOOM = 21.0


class ClusteringEngine:
    """
    Groups markers into ClusterGroups for a zoom level.

    Usage:
        engine = ClusteringEngine(radius_for_zoom=PixelRadius(radius_px=80))
        groups = engine.cluster(markers, zoom_level=12.0)

        # Tune with an explicit table instead
        engine = ClusteringEngine(ZoomRadiusTable({5: 1.0, 12: 0.01}))
    """

    def __init__(
        self,
        radius_for_zoom: Optional[RadiusFunction] = None,
        metric: DistanceMetric = DistanceMetric.PLANAR,
        max_zoom: Optional[float] = DEFAULT_MAX_ZOOM,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            radius_for_zoom: zoom -> merge radius in degrees (default: 60 px)
            metric: Centroid distance metric
            max_zoom: Above this zoom every marker is its own group (None: no cap)
            logger: Structured logger (default: "clustering" component)
        """
        self.radius_for_zoom = radius_for_zoom or PixelRadius()
        self.metric = DistanceMetric(metric)
        self.max_zoom = max_zoom
        self.logger = logger or create_logger("clustering")

    def threshold(self, zoom_level: float) -> float:
        """Merge radius in degrees for a zoom; 0 disables all but exact merges."""
        if self.max_zoom is not None and zoom_level > self.max_zoom:
            return 0.0
        radius = float(self.radius_for_zoom(zoom_level))
        if math.isnan(radius) or radius < 0:
            return 0.0
        return radius

    def cluster(self, markers: Sequence[Marker], zoom_level: float) -> List[ClusterGroup]:
        """
        Partition markers into cluster groups.

        Args:
            markers: Markers in any order (may be empty)
            zoom_level: Current map zoom

        Returns:
            Groups ordered by the input position of their first member,
            members in input order. Each valid marker appears exactly once.
        """
        valid = self._valid_markers(markers)
        if not valid:
            return []

        if self.max_zoom is not None and zoom_level > self.max_zoom:
            groups = ungrouped(valid)
        else:
            groups = self._agglomerate(valid, self.threshold(zoom_level))

        self.logger.debug(
            event=LogEvent.CLUSTER_COMPUTED,
            message=f"Clustered {len(valid)} markers into {len(groups)} groups",
            metadata={'zoom': zoom_level, 'markers': len(valid), 'groups': len(groups)},
        )
        return groups

    def _valid_markers(self, markers: Sequence[Marker]) -> List[Marker]:
        valid = [m for m in markers if m.position.is_valid]
        if len(valid) != len(markers):
            excluded = [m.id for m in markers if not m.position.is_valid]
            self.logger.warning(
                event=LogEvent.CLUSTER_MARKERS_EXCLUDED,
                message=f"Excluded {len(excluded)} markers with invalid coordinates",
                metadata={'excluded_ids': excluded},
            )
        return valid

    def _agglomerate(self, markers: List[Marker], threshold: float) -> List[ClusterGroup]:
        n = len(markers)
        distance_matrix = MATRIX_FUNCTIONS[self.metric]

        coords = np.array(
            [[m.position.latitude, m.position.longitude] for m in markers],
            dtype=float,
        )
        centroids = coords.copy()
        members: List[List[int]] = [[i] for i in range(n)]
        active = np.ones(n, dtype=bool)

        # Upper triangle only: dist[i, j] with i < j
        dist = distance_matrix(centroids)
        dist[np.tril_indices(n)] = np.inf

        while True:
            i, j = divmod(int(np.argmin(dist)), n)
            closest = dist[i, j]
            if not np.isfinite(closest) or closest > threshold:
                break

            # Group i absorbs j; i < j keeps group order tied to input order
            members[i] = sorted(members[i] + members[j])
            members[j] = []
            active[j] = False
            centroids[i] = coords[members[i]].mean(axis=0)
            dist[j, :] = np.inf
            dist[:, j] = np.inf

            others = np.flatnonzero(active)
            others = others[others != i]
            if others.size == 0:
                break

            d = distance_matrix(np.vstack([centroids[i][None, :], centroids[others]]))[0, 1:]
            before = others < i
            dist[others[before], i] = d[before]
            dist[i, others[~before]] = d[~before]

        return [
            ClusterGroup(
                centroid=GeoPoint(float(centroids[g][0]), float(centroids[g][1])),
                members=tuple(markers[k] for k in members[g]),
            )
            for g in np.flatnonzero(active)
        ]


def ungrouped(markers: Sequence[Marker]) -> List[ClusterGroup]:
    """One group per valid marker, positioned at the marker (clustering off)."""
    return [
        ClusterGroup(centroid=m.position, members=(m,))
        for m in markers
        if m.position.is_valid
    ]


def cluster_spread_m(group: ClusterGroup) -> float:
    """Largest great-circle distance in meters from centroid to a member."""
    c = group.centroid
    return max(
        haversine_m(c.latitude, c.longitude, m.position.latitude, m.position.longitude)
        for m in group.members
    )


_default_engine: Optional[ClusteringEngine] = None


def cluster(markers: Sequence[Marker], zoom_level: float) -> List[ClusterGroup]:
    """Cluster with the default engine (60 px radius, planar metric)."""
    global _default_engine
    if _default_engine is None:
        _default_engine = ClusteringEngine()
    return _default_engine.cluster(markers, zoom_level)
