"""
Herd Map CLI - Main entry point.

Runs the clustering and geofence core against YAML scene files.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import cv2

from herd_map.clustering.engine import cluster_spread_m
from herd_map.config import MapConfig
from herd_map.geometry.projection import FrameProjection
from herd_map.logging import LogEvent, StructuredLogger, create_logger
from herd_map.model.entities import GeoPoint
from herd_map.model.loader import load_scene
from herd_map.rendering.visualizer import MapVisualizer
from herd_map.scene import MapScene, SceneBuilder


def load_config(config_path: Optional[str], logger: StructuredLogger) -> MapConfig:
    """
    Load map config, or defaults when no path is given.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    if config_path is None:
        return MapConfig()

    try:
        config = MapConfig.from_yaml(Path(config_path))
    except (FileNotFoundError, ValueError) as e:
        logger.error(
            event=LogEvent.CONFIG_ERROR,
            message=f"Failed to load config {config_path}",
            metadata={'path': config_path},
            exc_info=e,
        )
        raise

    logger.info(
        event=LogEvent.CONFIG_LOADED,
        message=f"Loaded config {config_path}",
        metadata={'path': config_path},
    )
    return config


def build_scene(args: argparse.Namespace, config: MapConfig, logger: StructuredLogger) -> MapScene:
    try:
        data = load_scene(args.scene)
    except (FileNotFoundError, ValueError) as e:
        logger.error(
            event=LogEvent.SCENE_LOAD_ERROR,
            message=f"Failed to load scene {args.scene}",
            metadata={'path': args.scene},
            exc_info=e,
        )
        raise

    builder = (
        SceneBuilder()
        .with_config(config)
        .with_animals(data.animals)
        .with_geofences(data.geofences)
        .with_logger(logger)
    )
    if getattr(args, 'zoom', None) is not None:
        builder = builder.with_zoom(args.zoom)
    if getattr(args, 'no_clustering', False):
        builder = builder.with_clustering(False)
    if getattr(args, 'low_data', False):
        builder = builder.with_low_data_mode(True)
    return builder.build()


def clusters_to_dicts(scene: MapScene) -> List[Dict[str, Any]]:
    result = []
    for group in scene.clusters:
        entry = group.to_dict()
        entry['title'] = group.members[0].title if group.is_single else group.title
        entry['spread_m'] = round(cluster_spread_m(group), 2)
        result.append(entry)
    return result


def scene_to_dict(scene: MapScene) -> Dict[str, Any]:
    return {
        'zoom': scene.zoom,
        'map_type': scene.map_type.value,
        'low_data_mode': scene.low_data_mode,
        'stats': scene.stats.lines(),
        'markers': [
            {
                'title': m.title,
                'snippet': m.snippet,
                'hue': m.hue,
                'status': m.status_text,
                'position': m.position.to_dict(),
                'members': list(m.group.member_ids),
            }
            for m in scene.markers
        ],
        'polygons': [
            {
                'id': p.geofence.id,
                'ring': [[v.latitude, v.longitude] for v in p.ring],
                'stroke_color': p.stroke_color.as_hex(),
                'stroke_width': p.stroke_width,
                'fill_alpha': round(p.fill_opacity * 255),
            }
            for p in scene.polygons
        ],
    }


def cmd_cluster(args: argparse.Namespace, logger: StructuredLogger) -> int:
    config = load_config(args.config, logger)
    scene = build_scene(args, config, logger)
    print(json.dumps(clusters_to_dicts(scene), indent=2))
    return 0


def cmd_scene(args: argparse.Namespace, logger: StructuredLogger) -> int:
    config = load_config(args.config, logger)
    scene = build_scene(args, config, logger)
    print(json.dumps(scene_to_dict(scene), indent=2))
    return 0


def cmd_hit_test(args: argparse.Namespace, logger: StructuredLogger) -> int:
    config = load_config(args.config, logger)
    scene = build_scene(args, config, logger)
    point = GeoPoint(args.lat, args.lon)
    print(json.dumps([fence.id for fence in scene.geofences_at(point)]))
    return 0


def cmd_render(args: argparse.Namespace, logger: StructuredLogger) -> int:
    config = load_config(args.config, logger)
    scene = build_scene(args, config, logger)

    center = GeoPoint(*args.center) if args.center else config.initial_position
    projection = FrameProjection(
        center=center,
        zoom=scene.zoom,
        frame_resolution_wh=config.rendering.frame_resolution_wh,
        tile_size=config.clustering.tile_size,
    )
    visualizer = MapVisualizer(config.rendering, logger=logger)
    frame = visualizer.render(scene, projection)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(output), frame):
        raise ValueError(f"Could not write image to {output}")
    print(f"Wrote {output}")
    return 0


COMMANDS = {
    'cluster': cmd_cluster,
    'scene': cmd_scene,
    'hit-test': cmd_hit_test,
    'render': cmd_render,
}


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="herd-map",
        description="Herd Map CLI - cluster animals and test geofences from a scene file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Cluster groups at zoom 12
  herd-map cluster scene.yaml --zoom 12

  # Full render plan (markers, polygons, stats)
  herd-map --config map.yaml scene scene.yaml --zoom 14

  # Which geofences contain a point
  herd-map hit-test scene.yaml --lat -34.605 --lon -58.377

  # Offscreen preview
  herd-map render scene.yaml --zoom 14 --output runs/preview.png
"""
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to map config YAML (default: built-in defaults)"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Structured log level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    for name, help_text in (
        ('cluster', 'Print cluster groups as JSON'),
        ('scene', 'Print the render plan as JSON'),
        ('render', 'Render the scene to an image'),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('scene', help='Path to scene YAML')
        sub.add_argument('--zoom', type=float, default=None, help='Zoom level (default: config initial_zoom)')
        sub.add_argument('--no-clustering', action='store_true', help='One marker per animal')
        sub.add_argument('--low-data', action='store_true', help='Low data mode (normal map type)')
        if name == 'render':
            sub.add_argument('--output', required=True, help='Output image path (.png/.jpg)')
            sub.add_argument(
                '--center', nargs=2, type=float, metavar=('LAT', 'LON'),
                help='Frame center (default: config initial_position)'
            )

    hit_test = subparsers.add_parser('hit-test', help='List geofences containing a point')
    hit_test.add_argument('scene', help='Path to scene YAML')
    hit_test.add_argument('--lat', type=float, required=True)
    hit_test.add_argument('--lon', type=float, required=True)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logger = create_logger("cli", level=getattr(logging, args.log_level))

    try:
        return COMMANDS[args.command](args, logger)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
