"""
Scene file loader.

Reads animals and geofences from a YAML scene file:

    animals:
      - id: "AR-0042"
        lat: -34.6037
        lon: -58.3758
        alert_level: WARNING
        online: true
        label: "Lola"

    geofences:
      - id: "north_paddock"
        color: "#4CAF50"
        vertices: [[-34.60, -58.38], [-34.60, -58.37], [-34.61, -58.37]]
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from herd_map.model.entities import Marker, GeofencePolygon


@dataclass(frozen=True)
class SceneData:
    """Animals and geofences for one map view."""

    animals: List[Marker] = field(default_factory=list)
    geofences: List[GeofencePolygon] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SceneData":
        """
        Raises:
            ValueError: If sections are not lists or entries are malformed
        """
        animals_data = data.get("animals") or []
        geofences_data = data.get("geofences") or []
        if not isinstance(animals_data, list):
            raise ValueError("'animals' must be a list")
        if not isinstance(geofences_data, list):
            raise ValueError("'geofences' must be a list")

        return cls(
            animals=[Marker.from_dict(a) for a in animals_data],
            geofences=[GeofencePolygon.from_dict(g) for g in geofences_data],
        )


def load_scene(scene_path: str | Path) -> SceneData:
    """
    Load a scene YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If YAML is invalid or entries are malformed
    """
    path = Path(scene_path)

    if not path.exists():
        raise FileNotFoundError(f"Scene file not found: {scene_path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {scene_path}: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"Scene file {scene_path} must contain a mapping")

    return SceneData.from_dict(data)
