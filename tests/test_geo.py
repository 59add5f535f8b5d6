"""Tests for great-circle distance and map region fitting."""
import pytest

from route_navigator.models import Coordinate


def test_haversine_zero_for_same_point():
    from route_navigator.core.geo import haversine_m
    p = Coordinate(lat=30.25, lon=120.15)
    assert haversine_m(p, p) == 0.0


def test_haversine_one_degree_latitude():
    from route_navigator.core.geo import haversine_m
    d = haversine_m(Coordinate(lat=0.0, lon=0.0), Coordinate(lat=1.0, lon=0.0))
    assert d == pytest.approx(111_195, rel=1e-3)


def test_haversine_is_symmetric():
    from route_navigator.core.geo import haversine_m
    a = Coordinate(lat=39.90, lon=116.39)
    b = Coordinate(lat=31.23, lon=121.47)
    assert haversine_m(a, b) == pytest.approx(haversine_m(b, a))
    # Beijing to Shanghai is roughly 1070km
    assert haversine_m(a, b) == pytest.approx(1_067_000, rel=0.01)


def test_path_length_sums_legs():
    from route_navigator.core.geo import haversine_m, path_length_m
    pts = [
        Coordinate(lat=39.90, lon=116.39),
        Coordinate(lat=39.91, lon=116.39),
        Coordinate(lat=39.91, lon=116.40),
    ]
    expected = haversine_m(pts[0], pts[1]) + haversine_m(pts[1], pts[2])
    assert path_length_m(pts) == pytest.approx(expected)


def test_path_length_short_input():
    from route_navigator.core.geo import path_length_m
    assert path_length_m([]) == 0.0
    assert path_length_m([Coordinate(lat=1.0, lon=1.0)]) == 0.0


class TestRegionForCoordinates:
    def test_region_contains_all_points(self):
        from route_navigator.core.geo import region_for_coordinates
        pts = [
            Coordinate(lat=30.20, lon=120.10),
            Coordinate(lat=30.30, lon=120.25),
            Coordinate(lat=30.25, lon=120.15),
        ]
        region = region_for_coordinates(pts)
        assert region.center.lat == pytest.approx(30.25)
        assert region.center.lon == pytest.approx(120.175)
        for p in pts:
            assert region.south <= p.lat <= region.north
            assert region.west <= p.lon <= region.east

    def test_padding_expands_span(self):
        from route_navigator.core.geo import region_for_coordinates
        pts = [Coordinate(lat=0.0, lon=0.0), Coordinate(lat=1.0, lon=2.0)]
        region = region_for_coordinates(pts, padding_ratio=0.5)
        assert region.lat_span == pytest.approx(2.0)
        assert region.lon_span == pytest.approx(4.0)

    def test_single_point_uses_min_span(self):
        from route_navigator.core.geo import region_for_coordinates
        region = region_for_coordinates([Coordinate(lat=10.0, lon=20.0)], min_span=0.05)
        assert region.lat_span == pytest.approx(0.05)
        assert region.lon_span == pytest.approx(0.05)
        assert region.center == Coordinate(lat=10.0, lon=20.0)

    def test_empty_input_raises(self):
        from route_navigator.core.geo import region_for_coordinates
        with pytest.raises(ValueError, match="zero coordinates"):
            region_for_coordinates([])
