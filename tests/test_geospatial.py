import pytest

from rainroute.services.geospatial import bearing_degrees, haversine_km, point_in_polygon, polyline_length_km

SQUARE = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0), (0.0, 0.0)]


def test_haversine_one_degree_of_latitude():
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.01)


def test_polyline_length_sums_legs():
    points = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]

    assert polyline_length_km(points) == pytest.approx(2 * haversine_km(0.0, 0.0, 1.0, 0.0))
    assert polyline_length_km(points[:1]) == 0.0
    assert polyline_length_km([]) == 0.0


def test_bearing_cardinal_directions():
    assert bearing_degrees(0.0, 0.0, 1.0, 0.0) == pytest.approx(0.0)
    assert bearing_degrees(0.0, 0.0, 0.0, 1.0) == pytest.approx(90.0)
    assert bearing_degrees(0.0, 0.0, -1.0, 0.0) == pytest.approx(180.0)
    assert bearing_degrees(0.0, 0.0, 0.0, -1.0) == pytest.approx(270.0)


def test_point_in_polygon_uses_lat_lon_pairs():
    assert point_in_polygon(0.5, 0.5, SQUARE) is True
    assert point_in_polygon(1.5, 0.5, SQUARE) is False


def test_degenerate_rings_contain_nothing():
    assert point_in_polygon(1.0, 1.0, [(1.0, 1.0)]) is False
    assert point_in_polygon(0.5, 0.5, [(0.0, 0.0), (1.0, 1.0), (0.0, 0.0)]) is False
