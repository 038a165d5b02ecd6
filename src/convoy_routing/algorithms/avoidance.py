from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.config import KM_PER_DEGREE
from ..core.hazards import RiskArea
from ..core.routes import Route, WayPoint
from .generation import generate_random_route

# Share of the radius that counts as hazardous for low and medium areas.
REDUCED_RADIUS_FRACTION = 0.7


def should_avoid(area: RiskArea, safety_preference: float = 50.0) -> bool:
    """Whether a risk area is avoided at the given safety preference.

    High risk areas are always avoided, medium ones only above a balanced
    preference of 50, low ones never.
    """
    return area.risk_level == "high" or (
        area.risk_level == "medium" and safety_preference > 50
    )


def effective_radius_km(area: RiskArea) -> float:
    """Radius within which way points are pushed out of the area."""
    if area.risk_level == "high":
        return area.radius_km
    return area.radius_km * REDUCED_RADIUS_FRACTION


def push_out_of_area(
    way_point: WayPoint = None,
    area: RiskArea = None,
    safety_preference: float = 50.0,
    margin_km: float = 0.05,
) -> WayPoint:
    """Move way point away from the area center if it lies inside the area.

    The move is along the unit direction from the center to the way point in
    degree space. Its length is the penetration depth plus margin, scaled by
    ``safety_preference / 50`` and converted to degrees. A way point exactly on
    the center is not moved.
    """
    radius_km = effective_radius_km(area)
    distance_km = area.distance_km_to(way_point)
    if not distance_km < radius_km:
        return way_point

    direction = np.array([way_point.lat - area.lat, way_point.lon - area.lon])
    magnitude = np.hypot(*direction)
    if magnitude == 0:
        return way_point
    normalized = direction / magnitude

    safety_factor = safety_preference / 50.0
    move_degrees = (radius_km - distance_km + margin_km) * safety_factor / KM_PER_DEGREE
    return way_point.shift_degrees(
        dlat=float(normalized[0] * move_degrees),
        dlon=float(normalized[1] * move_degrees),
    )


def avoid_risk_areas(
    route: Route = None,
    risk_areas: Sequence[RiskArea] = (),
    safety_preference: float = 50.0,
    margin_km: float = 0.05,
    pin_end_points: bool = True,
) -> Route:
    """Displace way points out of risk areas.

    Areas are processed in order; each sees the result of the previous ones.

    Parameters
    ----------
    route : Route
        Route to modify
    risk_areas : sequence of RiskArea
        Hazard zones
    safety_preference : float, default=50.0
        Safety preference on a 0-100 scale. Decides which areas are avoided
        and scales the displacement (1 at 50, 2 at 100).
    margin_km : float, default=0.05
        Extra distance added to the displacement
    pin_end_points : bool, default=True
        Keep start and end of the route in place

    Returns
    -------
    Route
        Route with displaced way points
    """
    way_points = list(route.way_points)
    movable = slice(1, -1) if pin_end_points else slice(None)
    for area in risk_areas:
        if not should_avoid(area, safety_preference=safety_preference):
            continue
        way_points[movable] = [
            push_out_of_area(
                way_point=wp,
                area=area,
                safety_preference=safety_preference,
                margin_km=margin_km,
            )
            for wp in way_points[movable]
        ]
    return Route(way_points=tuple(way_points))


def find_optimal_route(
    start: WayPoint = None,
    end: WayPoint = None,
    risk_areas: Sequence[RiskArea] = (),
    safety_preference: float = 50.0,
    num_waypoints: int = 3,
    lateral_noise_degrees: float = 0.1,
    margin_km: float = 0.05,
    pin_end_points: bool = False,
    rng=None,
) -> Route:
    """Random route from start to end with risk areas avoided.

    All way points are pushed out of avoided areas, start and end included,
    unless pin_end_points is set.
    """
    base_route = generate_random_route(
        start=start,
        end=end,
        num_waypoints=num_waypoints,
        lateral_noise_degrees=lateral_noise_degrees,
        rng=rng,
    )
    return avoid_risk_areas(
        route=base_route,
        risk_areas=risk_areas,
        safety_preference=safety_preference,
        margin_km=margin_km,
        pin_end_points=pin_end_points,
    )


__all__ = [
    "should_avoid",
    "effective_radius_km",
    "push_out_of_area",
    "avoid_risk_areas",
    "find_optimal_route",
]
