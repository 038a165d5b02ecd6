from __future__ import annotations

from dataclasses import dataclass

# Mean earth radius used for all great-circle computations.
EARTH_RADIUS_METERS = 6_371_000.0

# Rough conversion from kilometers to degrees of arc.
KM_PER_DEGREE = 111.0


@dataclass(frozen=True)
class Vehicle:
    """Convoy vehicle speeds, fuel consumption, and bridge avoidance factors."""

    cruise_speed_kmh: float = 60.0
    fast_speed_kmh: float = 70.0
    fast_speed_threshold: float = 30.0
    bridge_avoidance_speed_factor: float = 0.85
    bridge_avoidance_risk_factor: float = 0.8
    fuel_consumption_l_per_km: float = 0.3


VEHICLE_DEFAULT = Vehicle()
