"""Algorithm building blocks layer: Route generation, hazard avoidance, and ranking."""

from .generation import (
    add_random_detours,
    generate_alternative_routes,
    generate_random_route,
    jitter_way_point,
)
from .avoidance import (
    avoid_risk_areas,
    effective_radius_km,
    find_optimal_route,
    push_out_of_area,
    should_avoid,
)
from .scoring import (
    adjusted_risk_score,
    blended_score,
    effective_speed_kmh,
    rank_alternatives,
    safety_preference_label,
    validate_safety_preference,
)

__all__ = [
    "generate_random_route",
    "add_random_detours",
    "jitter_way_point",
    "generate_alternative_routes",
    "should_avoid",
    "effective_radius_km",
    "push_out_of_area",
    "avoid_risk_areas",
    "find_optimal_route",
    "validate_safety_preference",
    "safety_preference_label",
    "effective_speed_kmh",
    "adjusted_risk_score",
    "blended_score",
    "rank_alternatives",
]
