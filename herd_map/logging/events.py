"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for structured logging of the map core.

Event Naming Convention:
    <area>.<action>

    area: cluster, geofence, color, scene, frame, config, error

Example Log Query (Loki):
    {component="clustering"} | json | event = "cluster.markers_excluded"
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - cluster.*: Clustering engine
    - geofence.* / color.*: Geofence overlay
    - scene.* / frame.*: Render plan and offscreen rendering
    - config.*: Configuration loading
    - error.*: Error conditions
    """

    # ========== Clustering Events ==========
    CLUSTER_COMPUTED = "cluster.computed"
    """Markers partitioned into cluster groups."""

    CLUSTER_MARKERS_EXCLUDED = "cluster.markers_excluded"
    """Markers with NaN or out-of-range coordinates were dropped."""

    # ========== Geofence Events ==========
    GEOFENCE_DEGENERATE = "geofence.degenerate"
    """Geofence with fewer than 3 vertices skipped."""

    COLOR_FALLBACK = "color.fallback"
    """Malformed color string replaced by fallback gray."""

    # ========== Scene Events ==========
    SCENE_BUILT = "scene.built"
    """Render plan built for a frame."""

    FRAME_RENDERED = "frame.rendered"
    """Scene drawn onto an image frame."""

    CONFIG_LOADED = "config.loaded"
    """Map configuration loaded from YAML."""

    # ========== Error Events ==========
    CONFIG_ERROR = "error.config"
    """Configuration file missing or invalid."""

    SCENE_LOAD_ERROR = "error.scene_load"
    """Scene file missing or invalid."""

