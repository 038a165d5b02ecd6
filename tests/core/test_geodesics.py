from convoy_routing.core.geodesics import (
    circle_polygon,
    get_distance_km,
    get_distance_meters,
    get_leg_azimuth,
    get_length_meters,
    move_fwd,
)

from shapely.geometry import LineString

import numpy as np

import pytest

from conftest import KM_PER_DEGREE_ARC


def test_distance_one_degree_meridian():
    """One degree along a meridian is 2 pi R / 360."""
    dist = get_distance_meters(lon_start=0, lon_end=0, lat_start=0, lat_end=1)
    np.testing.assert_almost_equal(dist / 1000.0, KM_PER_DEGREE_ARC, decimal=3)


def test_distance_one_degree_equator():
    dist = get_distance_km(lon_start=10, lon_end=11, lat_start=0, lat_end=0)
    np.testing.assert_almost_equal(dist, KM_PER_DEGREE_ARC, decimal=3)


def test_distance_matches_haversine_new_york_los_angeles():
    """Sphere geodesic reproduces the haversine distance with R = 6371 km."""
    lat1, lon1, lat2, lon2 = np.deg2rad([40.7128, -74.0060, 34.0522, -118.2437])
    a = (
        np.sin((lat2 - lat1) / 2) ** 2
        + np.cos(lat1) * np.cos(lat2) * np.sin((lon2 - lon1) / 2) ** 2
    )
    haversine_km = 2 * 6371.0 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    dist = get_distance_km(
        lon_start=-74.0060, lon_end=-118.2437, lat_start=40.7128, lat_end=34.0522
    )
    assert np.isclose(dist, haversine_km, rtol=1e-6)
    assert 3900 < dist < 3970


def test_distance_is_symmetric_and_zero_on_identical_points():
    d_ab = get_distance_km(lon_start=5, lon_end=-20, lat_start=50, lat_end=10)
    d_ba = get_distance_km(lon_start=-20, lon_end=5, lat_start=10, lat_end=50)
    assert np.isclose(d_ab, d_ba)
    assert get_distance_km(lon_start=5, lon_end=5, lat_start=50, lat_end=50) == 0


def test_length_of_line_string():
    line = LineString([(0, 0), (1, 0), (2, 0)])
    np.testing.assert_almost_equal(
        get_length_meters(line) / 1000.0, 2 * KM_PER_DEGREE_ARC, decimal=3
    )


@pytest.mark.parametrize(
    "lon_end, lat_end, expected_azimuth",
    [(0, 1, 0.0), (1, 0, 90.0), (0, -1, 180.0), (-1, 0, -90.0)],
)
def test_leg_azimuth_cardinal_directions(lon_end, lat_end, expected_azimuth):
    _, fwd_az, _ = get_leg_azimuth(
        lon_start=0, lat_start=0, lon_end=lon_end, lat_end=lat_end
    )
    # compare modulo 360 so that 180 and -180 agree
    delta = (fwd_az - expected_azimuth + 180.0) % 360.0 - 180.0
    np.testing.assert_almost_equal(delta, 0.0, decimal=6)


def test_move_fwd_north_by_one_degree():
    lon, lat = move_fwd(
        lon=0, lat=0, azimuth_degrees=0, distance_meters=KM_PER_DEGREE_ARC * 1000.0
    )
    np.testing.assert_almost_equal(lon, 0.0, decimal=6)
    np.testing.assert_almost_equal(lat, 1.0, decimal=6)


def test_circle_polygon_vertices_lie_on_circle():
    polygon = circle_polygon(lon=-98.0, lat=40.0, radius_meters=100_000.0, num_vertices=16)
    lons, lats = polygon.exterior.xy
    # closed ring repeats the first vertex
    assert len(lons) == 17
    distances = [
        get_distance_meters(lon_start=-98.0, lon_end=lo, lat_start=40.0, lat_end=la)
        for lo, la in zip(lons, lats)
    ]
    np.testing.assert_allclose(distances, 100_000.0, rtol=1e-9)
    assert polygon.contains(polygon.centroid)
