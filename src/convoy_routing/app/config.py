from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Tuple

from ..core.config import Vehicle
from ..core.hazards import RiskArea, sample_risk_areas


@dataclass(frozen=True)
class PlanConfig:
    """Definition of the convoy trip that needs to be planned."""

    name: str = "Convoy"
    start: str = "New York"
    end: str = "Los Angeles"
    waypoints: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PreferencesConfig:
    """Trade-off between safety and speed."""

    safety_preference: float = 50.0  # 0 = speed only, 100 = safety only
    avoid_bridges: bool = False


@dataclass(frozen=True)
class HyperParams:
    """Parameters of route generation, avoidance, and risk sampling."""

    random_seed: int | None = None

    # Generation
    num_alternatives: int = 3
    jitter_degrees: float = 0.02
    lateral_noise_degrees: float = 0.1
    min_route_waypoints: int = 2
    max_route_waypoints: int = 4
    detour_offset_degrees: float = 0.15

    # Avoidance
    avoid_risk_areas: bool = True
    avoidance_margin_km: float = 0.05

    # Planning limits
    max_plan_waypoints: int = 3

    # Risk sampling
    min_risk_factors: int = 3
    max_risk_factors: int = 8
    km_per_risk_factor: float = 100.0


@dataclass(frozen=True)
class PlannerConfig:
    """Top-level configuration consumed by the convoy planner."""

    plan: PlanConfig = PlanConfig()
    preferences: PreferencesConfig = PreferencesConfig()
    vehicle: Vehicle = Vehicle()
    hyper: HyperParams = HyperParams()
    risk_areas: Tuple[RiskArea, ...] = field(default_factory=sample_risk_areas)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        data = asdict(self)
        data["plan"]["waypoints"] = list(self.plan.waypoints)
        data["risk_areas"] = [area.to_dict() for area in self.risk_areas]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlannerConfig:
        """Construct config from dict, using defaults for missing sections."""
        plan = dict(data.get("plan", {}))
        if "waypoints" in plan:
            plan["waypoints"] = tuple(plan["waypoints"])
        kwargs = {
            "plan": PlanConfig(**plan),
            "preferences": PreferencesConfig(**data.get("preferences", {})),
            "vehicle": Vehicle(**data.get("vehicle", {})),
            "hyper": HyperParams(**data.get("hyper", {})),
        }
        if "risk_areas" in data:
            kwargs["risk_areas"] = tuple(
                RiskArea.from_dict(area) for area in data["risk_areas"]
            )
        return cls(**kwargs)
