"""Core layer: Waypoints, routes, locations, hazards, risk factors, and alternatives."""

from .routes import WayPoint, Leg, Route
from .config import (
    Vehicle,
    EARTH_RADIUS_METERS,
    KM_PER_DEGREE,
    VEHICLE_DEFAULT,
)
from .geodesics import (
    move_fwd,
    get_distance_meters,
    get_distance_km,
    get_length_meters,
    get_leg_azimuth,
    circle_polygon,
)
from .units import kmh_to_ms, ms_to_kmh, estimate_travel_time_hours, format_duration
from .locations import (
    Location,
    SAMPLE_LOCATIONS,
    UnknownLocationError,
    find_location,
    get_sample_locations,
)
from .hazards import RiskArea, RISK_LEVELS, sample_risk_areas
from .risk import (
    RiskFactor,
    RiskTemplate,
    RISK_CATALOG,
    calculate_risk_score,
    get_risk_level,
    generate_risk_factors,
)
from .alternatives import RouteAlternative, AlternativeSet

__all__ = [
    "WayPoint",
    "Leg",
    "Route",
    "Vehicle",
    "EARTH_RADIUS_METERS",
    "KM_PER_DEGREE",
    "VEHICLE_DEFAULT",
    "move_fwd",
    "get_distance_meters",
    "get_distance_km",
    "get_length_meters",
    "get_leg_azimuth",
    "circle_polygon",
    "kmh_to_ms",
    "ms_to_kmh",
    "estimate_travel_time_hours",
    "format_duration",
    "Location",
    "SAMPLE_LOCATIONS",
    "UnknownLocationError",
    "find_location",
    "get_sample_locations",
    "RiskArea",
    "RISK_LEVELS",
    "sample_risk_areas",
    "RiskFactor",
    "RiskTemplate",
    "RISK_CATALOG",
    "calculate_risk_score",
    "get_risk_level",
    "generate_risk_factors",
    "RouteAlternative",
    "AlternativeSet",
]
