import numpy as np
import pandas as pd
import pytest
from shapely.geometry import Point

from convoy_routing.core import Leg, Route, WayPoint

from conftest import KM_PER_DEGREE_ARC


def test_way_point_point_round_trip():
    wp = WayPoint(lon=-74.0, lat=40.7)
    assert WayPoint.from_point(wp.point) == wp
    assert wp.point == Point(-74.0, 40.7)


def test_way_point_lat_lon_order():
    wp = WayPoint(lon=-74.0, lat=40.7)
    assert wp.lat_lon == (40.7, -74.0)
    assert WayPoint.from_lat_lon((40.7, -74.0)) == wp


def test_way_point_data_frame():
    wp = WayPoint(lon=1.0, lat=2.0)
    df = wp.data_frame
    assert list(df.columns) == ["lon", "lat"]
    assert WayPoint.from_data_frame(df) == wp


def test_way_point_shift_degrees():
    wp = WayPoint(lon=1.0, lat=2.0).shift_degrees(dlon=0.5, dlat=-1.0)
    assert wp == WayPoint(lon=1.5, lat=1.0)


def test_way_point_move_space_east():
    wp = WayPoint(lon=0.0, lat=0.0).move_space(
        azimuth_degrees=90.0, distance_meters=KM_PER_DEGREE_ARC * 1000.0
    )
    np.testing.assert_almost_equal(wp.lon, 1.0, decimal=6)
    np.testing.assert_almost_equal(wp.lat, 0.0, decimal=6)


def test_way_point_distance():
    d = WayPoint(lon=0, lat=0).distance_km_to(WayPoint(lon=0, lat=1))
    np.testing.assert_almost_equal(d, KM_PER_DEGREE_ARC, decimal=3)


def test_leg_length_and_midpoint():
    leg = Leg(
        way_point_start=WayPoint(lon=0, lat=0), way_point_end=WayPoint(lon=2, lat=4)
    )
    assert leg.midpoint == WayPoint(lon=1.0, lat=2.0)
    np.testing.assert_almost_equal(leg.length_km, leg.length_meters / 1000.0)
    assert leg.length_meters > 0


def test_leg_azimuth_east():
    leg = Leg(
        way_point_start=WayPoint(lon=0, lat=0), way_point_end=WayPoint(lon=1, lat=0)
    )
    np.testing.assert_almost_equal(leg.fw_azimuth_degrees, 90.0)
    np.testing.assert_almost_equal(leg.azimuth_degrees, 90.0)


def test_route_needs_tuple():
    with pytest.raises(ValueError):
        Route(way_points=[WayPoint(lon=0, lat=0), WayPoint(lon=1, lat=0)])


def test_route_needs_two_way_points():
    with pytest.raises(ValueError):
        Route(way_points=(WayPoint(lon=0, lat=0),))


def test_route_identical_way_points_are_allowed():
    wp = WayPoint(lon=0, lat=0)
    route = Route(way_points=(wp, wp))
    assert route.length_meters == 0


def test_route_slicing(equator_route):
    assert len(equator_route[1:]) == 2
    with pytest.raises(ValueError):
        equator_route[:1]


def test_route_add_drops_duplicate_junction(equator_route):
    other = Route(
        way_points=(WayPoint(lon=2.0, lat=0.0), WayPoint(lon=3.0, lat=0.0))
    )
    assert len(equator_route + other) == 4


def test_route_add_keeps_distinct_junction(equator_route):
    other = Route(
        way_points=(WayPoint(lon=2.5, lat=0.0), WayPoint(lon=3.0, lat=0.0))
    )
    assert len(equator_route + other) == 5


def test_route_legs(equator_route):
    legs = equator_route.legs
    assert len(legs) == 2
    assert legs[0].way_point_end == legs[1].way_point_start
    assert legs[1].way_point_end == equator_route.way_points[-1]


def test_route_length(equator_route):
    np.testing.assert_almost_equal(
        equator_route.length_km, 2 * KM_PER_DEGREE_ARC, decimal=3
    )


def test_route_travel_time(equator_route):
    np.testing.assert_almost_equal(
        equator_route.travel_time_hours(speed_kmh=60.0),
        equator_route.length_km / 60.0,
    )


def test_route_dict_round_trip(equator_route):
    assert Route.from_dict(equator_route.to_dict()) == equator_route


def test_route_data_frame(equator_route):
    df = equator_route.data_frame
    assert isinstance(df, pd.DataFrame)
    assert len(df) == 3
    assert Route.from_data_frame(df) == equator_route


def test_route_lat_lon_round_trip(equator_route):
    assert equator_route.lat_lon[1] == (0.0, 1.0)
    assert Route.from_lat_lon(equator_route.lat_lon) == equator_route


def test_route_line_string(equator_route):
    assert list(equator_route.line_string.coords) == [(0, 0), (1, 0), (2, 0)]


def test_route_geojson_feature(equator_route):
    feature = equator_route.to_geojson_feature(name="test")
    assert feature["type"] == "Feature"
    assert feature["geometry"]["type"] == "LineString"
    assert len(feature["geometry"]["coordinates"]) == 3
    assert feature["properties"] == {"name": "test"}


def test_route_replace_waypoint(equator_route):
    new_wp = WayPoint(lon=1.0, lat=1.0)
    route = equator_route.replace_waypoint(n=1, new_way_point=new_wp)
    assert route.way_points[1] == new_wp
    route = equator_route.replace_waypoint(n=-1, new_way_point=new_wp)
    assert route.way_points[-1] == new_wp
    assert len(route) == 3
