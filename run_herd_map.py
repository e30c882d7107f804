"""
Herd Map Demo
=============

Renders the sample scene at a few zoom levels to show clustering break up
as the map zooms in.

Architecture:
- model: Marker, GeofencePolygon (scene file)
- clustering: ClusteringEngine (zoom-dependent groups)
- scene: SceneBuilder -> MapScene render plan
- rendering: MapVisualizer (offscreen frames)
"""

from datetime import datetime
from pathlib import Path

import cv2

from herd_map import (
    FrameProjection,
    MapConfig,
    MapVisualizer,
    SceneBuilder,
    load_scene,
)

CONFIG_PATH = Path("./config/map.yaml")
SCENE_PATH = Path("./config/scene_example.yaml")
ZOOM_LEVELS = [12.0, 14.0, 16.0, 18.0]


def get_target_run_folder(application_name: str) -> Path:
    """./runs/<application>/<timestamp>, created if missing."""
    folder = Path("./runs") / application_name / datetime.now().strftime('%Y%m%d_%H%M%S')
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def main():
    """Render the sample herd at several zoom levels."""

    config = MapConfig.from_yaml(CONFIG_PATH)
    data = load_scene(SCENE_PATH)
    visualizer = MapVisualizer(config.rendering)
    output_folder = get_target_run_folder(application_name="herd_map")

    print("🐄 Rendering herd map...")
    print(f"  Animals: {len(data.animals)}")
    print(f"  Geofences: {len(data.geofences)}")
    print()

    for zoom in ZOOM_LEVELS:
        scene = (
            SceneBuilder()
            .with_config(config)
            .with_animals(data.animals)
            .with_geofences(data.geofences)
            .with_zoom(zoom)
            .build()
        )
        projection = FrameProjection(
            center=config.initial_position,
            zoom=zoom,
            frame_resolution_wh=config.rendering.frame_resolution_wh,
        )
        frame = visualizer.render(scene, projection)

        output_path = f"{output_folder}/herd_z{int(zoom)}.png"
        cv2.imwrite(output_path, frame)
        print(f"  zoom {zoom:>4}: {scene.stats} -> {output_path}")

    print()
    print("✓ Done")


if __name__ == "__main__":
    main()
