from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.alternatives import RouteAlternative
from ..core.config import VEHICLE_DEFAULT, Vehicle

# Extra weight on risk when bridges are avoided.
BRIDGE_RISK_WEIGHT = 0.2


def validate_safety_preference(safety_preference: float) -> float:
    """Return safety preference as float if within [0, 100].

    Raises
    ------
    ValueError
        If the preference is not a number within [0, 100]
    """
    value = float(safety_preference)
    if not (0.0 <= value <= 100.0):
        raise ValueError(
            f"safety_preference must be within [0, 100], got {safety_preference!r}"
        )
    return value


def safety_preference_label(safety_preference: float) -> str:
    """Human-readable label of a safety preference."""
    if safety_preference < 25:
        return "Maximum Speed"
    if safety_preference < 40:
        return "Prioritize Speed"
    if safety_preference < 60:
        return "Balanced"
    if safety_preference < 80:
        return "Prioritize Safety"
    return "Maximum Safety"


def effective_speed_kmh(
    safety_preference: float = 50.0,
    avoid_bridges: bool = False,
    vehicle: Vehicle = VEHICLE_DEFAULT,
) -> float:
    """Average convoy speed for the given preferences.

    Speed-oriented preferences below the vehicle's threshold drive at fast
    speed, all others at cruise speed. Avoiding bridges slows the convoy unless
    the preference is at or below the threshold.
    """
    if safety_preference < vehicle.fast_speed_threshold:
        speed = vehicle.fast_speed_kmh
    else:
        speed = vehicle.cruise_speed_kmh
    if avoid_bridges and safety_preference > vehicle.fast_speed_threshold:
        speed *= vehicle.bridge_avoidance_speed_factor
    return speed


def adjusted_risk_score(
    risk_score: float,
    avoid_bridges: bool = False,
    vehicle: Vehicle = VEHICLE_DEFAULT,
) -> float:
    """Risk score reduced when bridges are avoided."""
    if avoid_bridges:
        return risk_score * vehicle.bridge_avoidance_risk_factor
    return risk_score


def blended_score(
    risk_score: float,
    time_hours: float,
    safety_preference: float = 50.0,
    avoid_bridges: bool = False,
) -> float:
    """Weighted blend of risk and travel time, lower is better.

    With ``w = safety_preference / 100`` (plus 0.2 when avoiding bridges), the
    score is ``risk_score * w + time_hours * (1 - w)``.
    """
    risk_weight = safety_preference / 100.0 + (
        BRIDGE_RISK_WEIGHT if avoid_bridges else 0.0
    )
    return risk_score * risk_weight + time_hours * (1.0 - risk_weight)


def rank_alternatives(
    alternatives: Sequence[RouteAlternative],
    safety_preference: float = 50.0,
    avoid_bridges: bool = False,
) -> list[RouteAlternative]:
    """Sort alternatives by blended score (ascending).

    The sort is stable, so ties keep generation order. Alternatives with
    invalid metrics are moved to the end.
    """

    def _key(alternative: RouteAlternative) -> float:
        score = blended_score(
            risk_score=alternative.risk_score,
            time_hours=alternative.time_hours,
            safety_preference=safety_preference,
            avoid_bridges=avoid_bridges,
        )
        return score if np.isfinite(score) else np.inf

    return sorted(alternatives, key=_key)


__all__ = [
    "validate_safety_preference",
    "safety_preference_label",
    "effective_speed_kmh",
    "adjusted_risk_score",
    "blended_score",
    "rank_alternatives",
]
