"""
Map Visualizer Module
=====================

Draws a MapScene onto an image frame (offscreen preview of the map screen).

Design:
- Stateless rendering: projection and scene in, frame out
- No clustering or hit-test logic
- Geofences: translucent fill + stroke via supervision draw utils
- Markers: filled circles (OpenCV), clusters labelled with their count,
  offline animals ringed in gray
- Low data mode: banner in the top-right corner

Dependencies:
- supervision (draw utilities, Color, Point)
- opencv (circles)
- numpy (frames)
"""

from typing import Optional

import cv2
import numpy as np
import supervision as sv

from herd_map.config import RenderingConfig
from herd_map.geometry.projection import FrameProjection
from herd_map.logging import LogEvent, StructuredLogger, create_logger
from herd_map.scene import MapScene, MapType, MarkerSpec, PolygonSpec

LOW_DATA_TEXT = "Low data mode"

BACKGROUND_COLORS = {
    MapType.NORMAL: sv.Color(r=0xF2, g=0xEF, b=0xE9),
    MapType.SATELLITE: sv.Color(r=0x2E, g=0x3B, b=0x2C),
}


class MapVisualizer:
    """
    Stateless visualizer for map scenes.

    Usage:
        projection = FrameProjection(center, zoom=12, frame_resolution_wh=(1280, 720))
        visualizer = MapVisualizer(RenderingConfig())
        frame = visualizer.render(scene, projection)
    """

    def __init__(
        self,
        rendering: Optional[RenderingConfig] = None,
        text_color: sv.Color = sv.Color(r=255, g=255, b=255),
        text_background_color: sv.Color = sv.Color(r=0, g=0, b=0),
        outline_color: sv.Color = sv.Color(r=255, g=255, b=255),
        offline_outline_color: sv.Color = sv.Color(r=0x88, g=0x88, b=0x88),
        logger: Optional[StructuredLogger] = None,
    ):
        self.rendering = rendering or RenderingConfig()
        self.text_color = text_color
        self.text_background_color = text_background_color
        self.outline_color = outline_color
        self.offline_outline_color = offline_outline_color
        self.logger = logger or create_logger("visualizer")

    def blank_frame(self, map_type: MapType = MapType.SATELLITE) -> np.ndarray:
        """Background-filled BGR frame at the configured resolution."""
        width, height = self.rendering.frame_resolution_wh
        frame = np.zeros((height, width, 3), dtype=np.uint8)
        frame[:] = BACKGROUND_COLORS[map_type].as_bgr()
        return frame

    def render(
        self,
        scene: MapScene,
        projection: FrameProjection,
        frame: Optional[np.ndarray] = None,
        draw_stats: bool = True,
    ) -> np.ndarray:
        """
        Draw geofences, then markers, then the stats overlay.

        Args:
            scene: Render plan
            projection: lat/lon -> pixel mapping for this frame
            frame: Frame to draw on (default: blank frame for scene.map_type)
            draw_stats: Draw the statistics overlay

        Returns:
            Frame with the scene drawn
        """
        if frame is None:
            frame = self.blank_frame(scene.map_type)

        for polygon in scene.polygons:
            frame = self.draw_geofence(frame, polygon, projection)

        drawn = 0
        for marker in scene.markers:
            xy = projection.to_pixel(marker.position)
            if not projection.contains_pixel(xy):
                continue
            frame = self.draw_marker(frame, marker, xy)
            drawn += 1

        if draw_stats:
            frame = self.draw_stats(frame, scene)
            if scene.low_data_mode:
                frame = self.draw_low_data_banner(frame)

        self.logger.debug(
            event=LogEvent.FRAME_RENDERED,
            message=f"Rendered {drawn} markers and {len(scene.polygons)} geofences",
            metadata={'zoom': projection.zoom, 'markers_drawn': drawn},
        )
        return frame

    def draw_geofence(
        self,
        frame: np.ndarray,
        polygon: PolygonSpec,
        projection: FrameProjection,
    ) -> np.ndarray:
        # The ring is closed; supervision closes polygons itself
        vertices = projection.to_pixels(polygon.ring[:-1])

        frame = sv.draw_filled_polygon(
            scene=frame,
            polygon=vertices,
            color=polygon.fill_color,
            opacity=polygon.fill_opacity,
        )
        frame = sv.draw_polygon(
            scene=frame,
            polygon=vertices,
            color=polygon.stroke_color,
            thickness=polygon.stroke_width,
        )

        label = polygon.geofence.label or polygon.geofence.id
        min_x = int(np.min(vertices[:, 0]))
        min_y = int(np.min(vertices[:, 1]))
        return sv.draw_text(
            scene=frame,
            text=label,
            text_anchor=sv.Point(x=min_x, y=max(min_y - 10, 20)),
            text_color=self.text_color,
            text_scale=self.rendering.text_scale,
            text_thickness=1,
            text_padding=4,
            background_color=polygon.stroke_color,
        )

    def draw_marker(self, frame: np.ndarray, marker: MarkerSpec, xy) -> np.ndarray:
        radius = self.rendering.marker_radius_px
        if marker.is_cluster:
            radius = int(radius * 1.75)

        cv2.circle(frame, tuple(xy), radius, marker.color.as_bgr(), thickness=-1, lineType=cv2.LINE_AA)
        if marker.offline_count:
            cv2.circle(frame, tuple(xy), radius, self.offline_outline_color.as_bgr(), thickness=2, lineType=cv2.LINE_AA)
        else:
            cv2.circle(frame, tuple(xy), radius, self.outline_color.as_bgr(), thickness=1, lineType=cv2.LINE_AA)

        if marker.is_cluster:
            frame = sv.draw_text(
                scene=frame,
                text=str(marker.group.count),
                text_anchor=sv.Point(x=xy[0], y=xy[1]),
                text_color=self.text_color,
                text_scale=self.rendering.text_scale,
                text_thickness=1,
                text_padding=2,
                background_color=marker.color,
            )
        return frame

    def draw_low_data_banner(self, frame: np.ndarray) -> np.ndarray:
        """Low data mode card in the top-right corner."""
        width = frame.shape[1]
        return sv.draw_text(
            scene=frame,
            text=LOW_DATA_TEXT,
            text_anchor=sv.Point(x=max(width - 90, 0), y=20),
            text_color=self.text_color,
            text_scale=self.rendering.text_scale,
            text_thickness=1,
            text_padding=4,
            background_color=self.offline_outline_color,
        )

    def draw_stats(self, frame: np.ndarray, scene: MapScene) -> np.ndarray:
        line_height = int(30 * self.rendering.text_scale / 0.5)
        for row, line in enumerate(scene.stats.lines()):
            frame = sv.draw_text(
                scene=frame,
                text=line,
                text_anchor=sv.Point(x=70, y=20 + row * line_height),
                text_color=self.text_color,
                text_scale=self.rendering.text_scale,
                text_thickness=1,
                text_padding=4,
                background_color=self.text_background_color,
            )
        return frame
