from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.routes import Route, WayPoint


def generate_random_route(
    start: WayPoint = None,
    end: WayPoint = None,
    num_waypoints: int = 2,
    lateral_noise_degrees: float = 0.1,
    rng=None,
) -> Route:
    """Generate a route by noisy linear interpolation between two points.

    Intermediate waypoint ``i`` (1-based) sits at progress ``i / (n + 1)`` along
    the straight line in degree space, shifted by uniform noise in
    ``[-noise / 2, noise / 2)`` on each coordinate.

    Parameters
    ----------
    start : WayPoint
        First way point of the route
    end : WayPoint
        Last way point of the route
    num_waypoints : int, default=2
        Number of intermediate way points
    lateral_noise_degrees : float, default=0.1
        Full width of the uniform noise in degrees
    rng : random generator, optional
        Random number generator (defaults to a fresh ``np.random.default_rng()``)

    Returns
    -------
    Route
        Route with ``num_waypoints + 2`` way points

    Raises
    ------
    ValueError
        If num_waypoints is negative
    """
    if num_waypoints < 0:
        raise ValueError("num_waypoints must not be negative")

    rng = rng or np.random.default_rng()

    progress = np.arange(1, num_waypoints + 1) / (num_waypoints + 1)
    noise = (rng.random((num_waypoints, 2)) - 0.5) * lateral_noise_degrees
    lats = start.lat + (end.lat - start.lat) * progress + noise[:, 0]
    lons = start.lon + (end.lon - start.lon) * progress + noise[:, 1]

    intermediates = tuple(
        WayPoint(lon=float(lon), lat=float(lat)) for lon, lat in zip(lons, lats)
    )
    return Route(way_points=(start,) + intermediates + (end,))


def add_random_detours(
    route: Route = None,
    northern: bool = True,
    detour_offset_degrees: float = 0.15,
) -> Route:
    """Insert a detour point into every leg of the route.

    The detour point is the leg midpoint shifted by ``detour_offset_degrees``
    perpendicular to the leg, to the right of the direction of travel for
    ``northern=True`` and to the left otherwise. Degenerate legs get no detour
    point. Routes with fewer than three way points are returned unchanged.

    Parameters
    ----------
    route : Route
        Route to add detours to
    northern : bool, default=True
        Side of the detours
    detour_offset_degrees : float, default=0.15
        Distance of the detour point from the leg midpoint in degrees

    Returns
    -------
    Route
    """
    if len(route) < 3:
        return route

    direction = 1.0 if northern else -1.0
    way_points = [route.way_points[0]]
    for leg in route.legs:
        dlat = leg.way_point_end.lat - leg.way_point_start.lat
        dlon = leg.way_point_end.lon - leg.way_point_start.lon
        # rotate (dlat, dlon) by 90 degrees
        perp_lat, perp_lon = -dlon, dlat
        scale = np.hypot(perp_lat, perp_lon)
        if scale > 0:
            way_points.append(
                leg.midpoint.shift_degrees(
                    dlon=perp_lon / scale * detour_offset_degrees * direction,
                    dlat=perp_lat / scale * detour_offset_degrees * direction,
                )
            )
        way_points.append(leg.way_point_end)
    return Route(way_points=tuple(way_points))


def jitter_way_point(
    way_point: WayPoint = None, jitter_degrees: float = 0.02, rng=None
) -> WayPoint:
    """Shift way point by uniform noise in ``[-jitter / 2, jitter / 2)`` per coordinate."""
    rng = rng or np.random.default_rng()
    dlat, dlon = (rng.random(2) - 0.5) * jitter_degrees
    return way_point.shift_degrees(dlon=float(dlon), dlat=float(dlat))


def generate_alternative_routes(
    stops: Sequence[WayPoint] = None,
    count: int = 3,
    jitter_degrees: float = 0.02,
    min_waypoints: int = 2,
    max_waypoints: int = 4,
    lateral_noise_degrees: float = 0.1,
    detour_offset_degrees: float = 0.15,
    rng=None,
) -> list[Route]:
    """Generate alternative routes visiting all stops in order.

    For each alternative, every stop is jittered, each pair of consecutive stops
    is connected by a random route with a uniformly drawn number of intermediate
    way points, and detours are added. Detours alternate sides: even alternatives
    detour to the right, odd ones to the left.

    Parameters
    ----------
    stops : sequence of WayPoint
        Start, optional intermediate stops, and end
    count : int, default=3
        Number of alternatives
    jitter_degrees : float, default=0.02
        Full width of the stop jitter in degrees
    min_waypoints : int, default=2
        Minimum number of random way points per pair of stops
    max_waypoints : int, default=4
        Maximum number of random way points per pair of stops
    lateral_noise_degrees : float, default=0.1
        Full width of the interpolation noise in degrees
    detour_offset_degrees : float, default=0.15
        Detour offset in degrees
    rng : random generator, optional
        Random number generator (defaults to a fresh ``np.random.default_rng()``)

    Returns
    -------
    list of Route
        ``count`` routes in generation order

    Raises
    ------
    ValueError
        If fewer than two stops are given, count is smaller than one, or the
        waypoint range is invalid
    """
    if stops is None or len(stops) < 2:
        raise ValueError("At least two stops are needed.")
    if count < 1:
        raise ValueError("count must be at least 1")
    if min_waypoints < 0 or max_waypoints < min_waypoints:
        raise ValueError("Need 0 <= min_waypoints <= max_waypoints.")

    rng = rng or np.random.default_rng()

    routes = []
    for i in range(count):
        jittered = [
            jitter_way_point(way_point=s, jitter_degrees=jitter_degrees, rng=rng)
            for s in stops
        ]
        route = None
        for s0, s1 in zip(jittered[:-1], jittered[1:]):
            segment = generate_random_route(
                start=s0,
                end=s1,
                num_waypoints=int(rng.integers(min_waypoints, max_waypoints + 1)),
                lateral_noise_degrees=lateral_noise_degrees,
                rng=rng,
            )
            route = segment if route is None else route + segment
        routes.append(
            add_random_detours(
                route=route,
                northern=(i % 2 == 0),
                detour_offset_degrees=detour_offset_degrees,
            )
        )
    return routes


__all__ = [
    "generate_random_route",
    "add_random_detours",
    "jitter_way_point",
    "generate_alternative_routes",
]
