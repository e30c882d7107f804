"""
Test Geofence Utilities
=======================

Renderable rings, point-in-polygon hit tests and color parsing.

Usage:
    pytest test_geofence.py
"""

import pytest
import supervision as sv

from herd_map.geometry import point_in_polygon, to_renderable_polygon, contains_any
from herd_map.geometry.projection import FrameProjection, degrees_per_pixel
from herd_map.model import GeoPoint, GeofencePolygon
from herd_map.rendering.colors import FALLBACK_GRAY, hue_to_color, parse_color


def fence(*pairs, fence_id="paddock", color="#4CAF50") -> GeofencePolygon:
    return GeofencePolygon(
        id=fence_id,
        vertices=tuple(GeoPoint(lat, lon) for lat, lon in pairs),
        color=color,
    )


SQUARE = fence((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))

# L-shaped paddock: the (0.75, 0.75) corner is cut out
L_SHAPE = fence(
    (0.0, 0.0), (0.0, 1.0), (0.5, 1.0), (0.5, 0.5), (1.0, 0.5), (1.0, 0.0),
)


def test_renderable_polygon_closes_the_ring():
    triangle = fence((0.0, 0.0), (0.0, 1.0), (1.0, 0.0))
    ring = to_renderable_polygon(triangle)

    assert len(ring) == 4
    assert ring[0] == ring[-1]
    assert set(ring) == set(triangle.vertices)
    assert ring[:-1] == list(triangle.vertices)


def test_renderable_polygon_keeps_already_closed_ring():
    closed = fence((0.0, 0.0), (0.0, 1.0), (1.0, 0.0), (0.0, 0.0))
    ring = to_renderable_polygon(closed)

    assert ring == list(closed.vertices)


def test_degenerate_fence_renders_nothing_and_contains_nothing():
    two_points = fence((0.0, 0.0), (1.0, 1.0))

    assert two_points.is_degenerate
    assert to_renderable_polygon(two_points) == []
    assert point_in_polygon(GeoPoint(0.5, 0.5), two_points) is False
    assert point_in_polygon(GeoPoint(0.0, 0.0), two_points) is False
    assert to_renderable_polygon(fence()) == []


@pytest.mark.parametrize("lat, lon, inside", [
    (0.5, 0.5, True),
    (0.01, 0.99, True),
    (1.5, 0.5, False),
    (-0.1, 0.5, False),
    (0.5, 1.01, False),
    (0.5, -3.0, False),
])
def test_point_in_square(lat, lon, inside):
    assert point_in_polygon(GeoPoint(lat, lon), SQUARE) is inside


def test_point_in_concave_fence():
    assert point_in_polygon(GeoPoint(0.25, 0.25), L_SHAPE)
    assert point_in_polygon(GeoPoint(0.25, 0.75), L_SHAPE)
    assert point_in_polygon(GeoPoint(0.75, 0.25), L_SHAPE)
    assert not point_in_polygon(GeoPoint(0.75, 0.75), L_SHAPE)


def test_point_in_fence_with_farm_scale_coordinates():
    paddock = fence(
        (-34.6000, -58.3800), (-34.6000, -58.3700),
        (-34.6060, -58.3700), (-34.6060, -58.3800),
    )
    assert point_in_polygon(GeoPoint(-34.6030, -58.3760), paddock)
    assert not point_in_polygon(GeoPoint(-34.6150, -58.3600), paddock)


def test_invalid_point_is_never_inside():
    assert not point_in_polygon(GeoPoint(float("nan"), 0.5), SQUARE)


def test_contains_any_mask():
    points = [GeoPoint(0.5, 0.5), GeoPoint(2.0, 2.0)]
    assert contains_any(points, SQUARE).tolist() == [True, False]


def test_fence_bounds_and_roundtrip_dict():
    assert SQUARE.bounds() == (0.0, 0.0, 1.0, 1.0)
    assert fence().bounds() is None

    restored = GeofencePolygon.from_dict(SQUARE.to_dict())
    assert restored == SQUARE


def test_fence_from_dict_rejects_bad_vertex():
    with pytest.raises(ValueError):
        GeofencePolygon.from_dict({"id": "x", "vertices": [[0.0, 0.0], [1.0]]})
    with pytest.raises(ValueError):
        GeofencePolygon.from_dict({"vertices": []})


def test_parse_color_hex():
    assert parse_color("#FF0000") == sv.Color(r=255, g=0, b=0)
    assert parse_color("#4caf50") == sv.Color(r=0x4C, g=0xAF, b=0x50)
    # Alpha channel is dropped
    assert parse_color("#80FF0000") == sv.Color(r=255, g=0, b=0)


def test_parse_color_names():
    assert parse_color("red") == sv.Color(r=255, g=0, b=0)
    assert parse_color("Teal") == sv.Color(r=0, g=0x80, b=0x80)


@pytest.mark.parametrize("bad", ["not-a-color", "", "#FFF", "FF0000", "#GG0000", " #FF0000 ", "#FF0000\n", "red ", None, 42])
def test_parse_color_falls_back_to_gray(bad):
    assert parse_color(bad) == FALLBACK_GRAY


def test_hue_to_color():
    assert hue_to_color(0) == sv.Color(r=255, g=0, b=0)
    assert hue_to_color(120) == sv.Color(r=0, g=255, b=0)
    assert hue_to_color(240) == sv.Color(r=0, g=0, b=255)


def test_projection_centers_and_scales():
    center = GeoPoint(-34.6037, -58.3758)
    projection = FrameProjection(center=center, zoom=12, frame_resolution_wh=(640, 480))

    assert projection.to_pixel(center) == (320, 240)

    east = GeoPoint(center.latitude, center.longitude + 10 * degrees_per_pixel(12))
    x, y = projection.to_pixel(east)
    assert (x, y) == (330, 240)

    north = GeoPoint(center.latitude + 0.01, center.longitude)
    assert projection.to_pixel(north)[1] < 240


def test_projection_rejects_bad_frames():
    with pytest.raises(ValueError):
        FrameProjection(center=GeoPoint(0, 0), zoom=5, frame_resolution_wh=(0, 100))
    with pytest.raises(ValueError):
        FrameProjection(center=GeoPoint(100, 0), zoom=5, frame_resolution_wh=(100, 100))


def main():
    """Run all tests."""
    raise SystemExit(pytest.main([__file__, "-v"]))


if __name__ == "__main__":
    main()
