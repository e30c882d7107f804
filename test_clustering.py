"""
Test Marker Clustering
======================

Partition, monotonicity, determinism and the concrete zoom scenarios for
the agglomerative clustering engine.

Usage:
    pytest test_clustering.py
"""

import json
import logging
import math

import numpy as np
import pytest

from herd_map.clustering import (
    ClusteringEngine,
    PixelRadius,
    ZoomRadiusTable,
    cluster,
    cluster_spread_m,
    ungrouped,
)
from herd_map.geometry.distance import DistanceMetric
from herd_map.model import AlertLevel, GeoPoint, Marker


def make_marker(marker_id: str, lat: float, lon: float, **kwargs) -> Marker:
    return Marker(id=marker_id, position=GeoPoint(lat, lon), **kwargs)


def herd(seed: int = 7, size: int = 40) -> list[Marker]:
    """Three loose herds plus stragglers around a farm."""
    rng = np.random.default_rng(seed)
    centers = [(-34.60, -58.38), (-34.62, -58.35), (-34.55, -58.40)]
    markers = []
    for i in range(size):
        lat0, lon0 = centers[i % len(centers)]
        lat = lat0 + rng.normal(scale=0.005)
        lon = lon0 + rng.normal(scale=0.005)
        markers.append(make_marker(f"tag-{i:03d}", float(lat), float(lon)))
    return markers


def ids(groups) -> list[list[str]]:
    return [list(g.member_ids) for g in groups]


def test_empty_input_gives_no_groups():
    assert cluster([], 10.0) == []


def test_concrete_scenario_coarse_and_fine_zoom():
    a = make_marker("A", 0.0, 0.0)
    b = make_marker("B", 0.0001, 0.0001)
    c = make_marker("C", 10.0, 10.0)

    coarse = cluster([a, b, c], 5.0)
    assert ids(coarse) == [["A", "B"], ["C"]]

    fine = cluster([a, b, c], 20.0)
    assert ids(fine) == [["A"], ["B"], ["C"]]
    print(f"✓ zoom 5 -> {len(coarse)} groups, zoom 20 -> {len(fine)} groups")


@pytest.mark.parametrize("zoom", [0.0, 5.0, 10.0, 15.0, 21.0, 25.0])
def test_single_marker_is_stable(zoom):
    m = make_marker("solo", -34.6, -58.38)
    groups = cluster([m], zoom)

    assert len(groups) == 1
    assert groups[0].members == (m,)
    assert groups[0].is_single
    assert groups[0].centroid == m.position


@pytest.mark.parametrize("zoom", [3.0, 8.0, 11.5, 13.0, 16.0, 19.0, 22.0])
def test_groups_partition_the_input(zoom):
    markers = herd()
    groups = cluster(markers, zoom)

    member_ids = [mid for g in groups for mid in g.member_ids]
    assert sorted(member_ids) == sorted(m.id for m in markers)
    assert len(member_ids) == len(set(member_ids))
    assert all(g.count >= 1 for g in groups)


def test_more_zoom_never_gives_fewer_groups():
    markers = herd(seed=11, size=60)
    zooms = np.arange(0.0, 23.0, 0.5)
    counts = [len(cluster(markers, float(z))) for z in zooms]

    assert counts == sorted(counts)
    assert counts[0] == 1
    assert counts[-1] == len(markers)
    print(f"✓ group counts by zoom: {counts}")


def test_repeated_calls_are_identical():
    markers = herd(seed=3)
    first = cluster(markers, 13.0)
    second = cluster(markers, 13.0)

    assert ids(first) == ids(second)
    for g1, g2 in zip(first, second):
        assert abs(g1.centroid.latitude - g2.centroid.latitude) <= 1e-9
        assert abs(g1.centroid.longitude - g2.centroid.longitude) <= 1e-9


def test_identical_coordinates_collapse_into_one_group():
    markers = [make_marker(f"m{i}", -34.6, -58.38) for i in range(5)]
    groups = cluster(markers, 15.0)

    assert len(groups) == 1
    assert groups[0].count == 5


def test_above_max_zoom_nothing_merges():
    markers = [make_marker(f"m{i}", -34.6, -58.38) for i in range(3)]
    engine = ClusteringEngine(max_zoom=18.0)

    assert len(engine.cluster(markers, 18.0)) == 1
    assert len(engine.cluster(markers, 18.5)) == 3


def test_distance_equal_to_threshold_merges():
    engine = ClusteringEngine(radius_for_zoom=ZoomRadiusTable({0: 1.0}))
    a = make_marker("A", 0.0, 0.0)
    b = make_marker("B", 1.0, 0.0)

    assert ids(engine.cluster([a, b], 10.0)) == [["A", "B"]]


def test_ties_go_to_first_pair_in_input_order():
    engine = ClusteringEngine(radius_for_zoom=lambda zoom: 1.0)
    a = make_marker("A", 0.0, 0.0)
    b = make_marker("B", 1.0, 0.0)
    c = make_marker("C", 2.0, 0.0)

    # A-B and B-C are both 1.0 apart; A-B wins, then C is 1.5 from the centroid
    groups = engine.cluster([a, b, c], 10.0)
    assert ids(groups) == [["A", "B"], ["C"]]
    assert groups[0].centroid.latitude == pytest.approx(0.5)


def test_output_follows_input_order():
    engine = ClusteringEngine(radius_for_zoom=lambda zoom: 0.5)
    markers = [
        make_marker("far", 10.0, 10.0),
        make_marker("near-1", 0.0, 0.0),
        make_marker("lonely", -10.0, -10.0),
        make_marker("near-2", 0.1, 0.1),
    ]
    assert ids(engine.cluster(markers, 10.0)) == [["far"], ["near-1", "near-2"], ["lonely"]]


def test_centroid_is_mean_of_members():
    markers = [
        make_marker("a", 0.0, 0.0),
        make_marker("b", 0.0, 0.0002),
        make_marker("c", 0.0003, 0.0001),
    ]
    (group,) = cluster(markers, 5.0)

    assert group.centroid.latitude == pytest.approx(0.0001)
    assert group.centroid.longitude == pytest.approx(0.0001)


def test_invalid_coordinates_are_excluded_and_logged(caplog):
    markers = [
        make_marker("ok-1", 0.0, 0.0),
        make_marker("nan", float("nan"), 0.0),
        make_marker("ok-2", 0.0001, 0.0),
        make_marker("out-of-range", 95.0, 0.0),
        make_marker("inf", 0.0, math.inf),
    ]
    with caplog.at_level(logging.WARNING):
        groups = cluster(markers, 5.0)

    assert ids(groups) == [["ok-1", "ok-2"]]

    entries = [json.loads(r.getMessage()) for r in caplog.records]
    excluded = [e for e in entries if e["event"] == "cluster.markers_excluded"]
    assert excluded
    assert excluded[-1]["metadata"]["excluded_ids"] == ["nan", "out-of-range", "inf"]


def test_only_invalid_markers_give_empty_output():
    assert cluster([make_marker("nan", float("nan"), float("nan"))], 10.0) == []


def test_markers_are_not_mutated():
    markers = herd(seed=5, size=10)
    snapshot = list(markers)
    cluster(markers, 8.0)
    assert markers == snapshot


def test_haversine_metric_matches_concrete_scenario():
    engine = ClusteringEngine(metric=DistanceMetric.HAVERSINE)
    a = make_marker("A", 0.0, 0.0)
    b = make_marker("B", 0.0001, 0.0001)
    c = make_marker("C", 10.0, 10.0)

    assert ids(engine.cluster([a, b, c], 5.0)) == [["A", "B"], ["C"]]
    assert ids(engine.cluster([a, b, c], 20.0)) == [["A"], ["B"], ["C"]]


def test_planar_metric_scales_longitude_by_latitude():
    # 0.1 deg of longitude at 60N is ~0.05 deg of arc
    engine = ClusteringEngine(radius_for_zoom=lambda zoom: 0.06)
    a = make_marker("A", 60.0, 0.0)
    b = make_marker("B", 60.0, 0.1)

    assert len(engine.cluster([a, b], 10.0)) == 1


def test_pixel_radius_halves_each_zoom_step():
    radius = PixelRadius(radius_px=60, tile_size=256)

    assert radius(0.0) == pytest.approx(60 * 360 / 256)
    assert radius(11.0) == pytest.approx(radius(10.0) / 2)

    with pytest.raises(ValueError):
        PixelRadius(radius_px=0)


def test_zoom_radius_table_steps():
    table = ZoomRadiusTable({5: 2.0, 10: 0.05, 15: 0.001})

    assert table(1.0) == 2.0
    assert table(5.0) == 2.0
    assert table(12.5) == 0.05
    assert table(15.0) == 0.001
    assert table(30.0) == 0.001


def test_zoom_radius_table_rejects_growing_radii():
    with pytest.raises(ValueError, match="must not grow"):
        ZoomRadiusTable({5: 0.1, 10: 0.5})

    with pytest.raises(ValueError):
        ZoomRadiusTable({})

    with pytest.raises(ValueError):
        ZoomRadiusTable({5: -1.0})


def test_zoom_radius_table_from_yaml_keys():
    table = ZoomRadiusTable.from_dict({"5": "1.0", "12": 0.01})
    assert table(6.0) == 1.0
    assert table(12.0) == 0.01


def test_ungrouped_keeps_each_marker():
    markers = [
        make_marker("a", 0.0, 0.0),
        make_marker("b", 0.0, 0.0),
        make_marker("nan", float("nan"), 0.0),
    ]
    groups = ungrouped(markers)

    assert ids(groups) == [["a"], ["b"]]
    assert groups[0].centroid == markers[0].position


def test_cluster_spread_in_meters():
    a = make_marker("A", 0.0, 0.0, alert_level=AlertLevel.WARNING)
    b = make_marker("B", 0.0, 0.001)
    (group,) = cluster([a, b], 5.0)

    # Half of 0.001 deg of longitude at the equator, ~55.6 m
    assert cluster_spread_m(group) == pytest.approx(55.6, abs=0.5)


def main():
    """Run all tests."""
    raise SystemExit(pytest.main([__file__, "-v"]))


if __name__ == "__main__":
    main()
