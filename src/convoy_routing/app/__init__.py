"""User-facing/app layer: Stateful convoy planning."""

from .planner import (
    PlanResult,
    StageLog,
    PlanLog,
    OptimizationSummary,
    ConvoyPlanner,
    PlanningError,
    MaxWaypointsError,
    NoAvailableLocationError,
    NotOptimizedError,
)
from .config import (
    HyperParams,
    PlanConfig,
    PreferencesConfig,
    PlannerConfig,
)
from .report import (
    RiskReport,
    analyze_route_risk,
    generate_recommendations,
    summarize_risk,
)
from .cli import build_config

__all__ = [
    "PlanResult",
    "StageLog",
    "PlanLog",
    "OptimizationSummary",
    "ConvoyPlanner",
    "PlanningError",
    "MaxWaypointsError",
    "NoAvailableLocationError",
    "NotOptimizedError",
    "HyperParams",
    "PlanConfig",
    "PreferencesConfig",
    "PlannerConfig",
    "RiskReport",
    "analyze_route_risk",
    "generate_recommendations",
    "summarize_risk",
    "build_config",
]
