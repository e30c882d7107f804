"""
Map Entities
============

Bounded Context: Shared Data Structures

Plain data consumed by the clustering engine, the geofence utilities and
the scene builder.

Design Principles:
- Immutability: frozen=True, members stored as tuples
- Serialization: to_dict() / from_dict() for YAML and JSON export
- Sensor data is not rejected at construction; GeoPoint.is_valid reports it

Types:
- GeoPoint: latitude/longitude pair
- AlertLevel: categorical alert status of an animal
- Marker: one tracked animal on the map
- ClusterGroup: markers merged into one visual point
- GeofencePolygon: virtual containment area
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional, Tuple


@dataclass(frozen=True)
class GeoPoint:
    """
    Immutable WGS84 coordinate in degrees.

    Attributes:
        latitude: Degrees north, valid in [-90, 90]
        longitude: Degrees east, valid in [-180, 180]

    Example:
        >>> GeoPoint(-34.6037, -58.3758).is_valid
        True
        >>> GeoPoint(float("nan"), 0.0).is_valid
        False
    """
    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        """True if both coordinates are finite and within range."""
        return (
            math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
            and -90.0 <= self.latitude <= 90.0
            and -180.0 <= self.longitude <= 180.0
        )

    def to_dict(self) -> Dict[str, float]:
        return {'lat': self.latitude, 'lon': self.longitude}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GeoPoint':
        """Deserialize from {'lat': ..., 'lon': ...}.

        Raises:
            ValueError: If keys are missing or values are not numeric
        """
        try:
            return cls(latitude=float(data['lat']), longitude=float(data['lon']))
        except KeyError as e:
            raise ValueError(f"Missing required GeoPoint field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid GeoPoint data: {e}")

    @classmethod
    def from_pair(cls, pair) -> 'GeoPoint':
        """Build from a [lat, lon] sequence.

        Raises:
            ValueError: If pair is not two numeric values
        """
        try:
            lat, lon = pair
            return cls(latitude=float(lat), longitude=float(lon))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Expected [lat, lon] pair, got {pair!r}: {e}")


class AlertLevel(str, Enum):
    """Alert status reported for an animal, ordered by severity."""

    NONE = "NONE"
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"

    @classmethod
    def parse(cls, value: Any) -> 'AlertLevel':
        """Case-insensitive lookup; None maps to NONE.

        Raises:
            ValueError: If value names no alert level
        """
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            valid = [level.value for level in cls]
            raise ValueError(f"Invalid alert_level: {value!r}. Must be one of {valid}")


@dataclass(frozen=True)
class Marker:
    """
    One animal on the map.

    Owned by the caller; the engine reads it per computation and never
    mutates or retains it.

    Attributes:
        id: Tag identifier (ear tag, collar id)
        position: Last known coordinate
        alert_level: Current alert status
        is_online: False when the collar stopped reporting
        label: Optional human name
    """
    id: str
    position: GeoPoint
    alert_level: AlertLevel = AlertLevel.NONE
    is_online: bool = True
    label: Optional[str] = None

    @property
    def title(self) -> str:
        """Marker title: name if known, else tag id."""
        return self.label or self.id

    @property
    def snippet(self) -> str:
        return f"ID: {self.id}"

    @property
    def display_name(self) -> str:
        """Name shown in the animal list."""
        return self.label or f"Animal {self.id}"

    @property
    def status_text(self) -> Optional[str]:
        """Connectivity line for the animal list; None while reporting."""
        return None if self.is_online else "Offline"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'lat': self.position.latitude,
            'lon': self.position.longitude,
            'alert_level': self.alert_level.value,
            'online': self.is_online,
            'label': self.label,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Marker':
        """
        Deserialize from dict.

        Args:
            data: Keys id, lat, lon and optional alert_level, online, label

        Raises:
            ValueError: If required keys missing or invalid values
        """
        if not isinstance(data, dict):
            raise ValueError(f"Marker entry must be a mapping, got {data!r}")
        if 'id' not in data:
            raise ValueError("Missing required Marker field: 'id'")
        label = data.get('label')
        return cls(
            id=str(data['id']),
            position=GeoPoint.from_dict(data),
            alert_level=AlertLevel.parse(data.get('alert_level')),
            is_online=bool(data.get('online', True)),
            label=str(label) if label is not None else None,
        )


@dataclass(frozen=True)
class ClusterGroup:
    """
    Markers merged into one visual point.

    Derived on every clustering call, never persisted.

    Invariants:
        - members is non-empty
        - a single member means an unclustered marker
    """
    centroid: GeoPoint
    members: Tuple[Marker, ...]

    def __post_init__(self):
        if not self.members:
            raise ValueError("ClusterGroup must have at least one member")
        object.__setattr__(self, 'members', tuple(self.members))

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def is_single(self) -> bool:
        return len(self.members) == 1

    @property
    def title(self) -> str:
        return f"Group of {self.count} animals"

    @property
    def member_ids(self) -> Tuple[str, ...]:
        return tuple(m.id for m in self.members)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'centroid': self.centroid.to_dict(),
            'count': self.count,
            'members': list(self.member_ids),
        }


@dataclass(frozen=True)
class GeofencePolygon:
    """
    Polygon geofence, implicitly closed.

    Created by an external collaborator (config or backend) and consumed
    read-only. Degenerate fences (< 3 vertices) are allowed here; the
    geometry utilities answer empty/False for them.

    Attributes:
        id: Geofence identifier
        vertices: Ordered boundary points
        color: Hex color string (e.g. "#4CAF50")
        label: Optional display name
    """
    id: str
    vertices: Tuple[GeoPoint, ...]
    color: str = "#888888"
    label: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'vertices', tuple(self.vertices))

    @property
    def is_degenerate(self) -> bool:
        return len(self.vertices) < 3

    def bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """(min_lat, min_lon, max_lat, max_lon), or None without vertices."""
        if not self.vertices:
            return None
        lats = [v.latitude for v in self.vertices]
        lons = [v.longitude for v in self.vertices]
        return min(lats), min(lons), max(lats), max(lons)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'vertices': [[v.latitude, v.longitude] for v in self.vertices],
            'color': self.color,
            'label': self.label,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GeofencePolygon':
        """
        Deserialize from dict.

        Raises:
            ValueError: If id/vertices missing or a vertex is malformed
        """
        if not isinstance(data, dict):
            raise ValueError(f"GeofencePolygon entry must be a mapping, got {data!r}")
        try:
            fence_id = str(data['id'])
            raw_vertices = data['vertices']
        except KeyError as e:
            raise ValueError(f"Missing required GeofencePolygon field: {e}")
        if not isinstance(raw_vertices, (list, tuple)):
            raise ValueError(f"Geofence '{fence_id}' vertices must be a list")
        label = data.get('label')
        return cls(
            id=fence_id,
            vertices=tuple(GeoPoint.from_pair(v) for v in raw_vertices),
            color=str(data.get('color', "#888888")),
            label=str(label) if label is not None else None,
        )
