from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from typing import Any, Callable, Sequence

import numpy as np
import pandas as pd
from matplotlib import pyplot as plt

from ..algorithms import (
    adjusted_risk_score,
    avoid_risk_areas,
    effective_speed_kmh,
    generate_alternative_routes,
    rank_alternatives,
    safety_preference_label,
    validate_safety_preference,
)
from .config import PlannerConfig
from .report import RiskReport, analyze_route_risk
from ..core.alternatives import AlternativeSet, RouteAlternative
from ..core.hazards import RiskArea
from ..core.locations import SAMPLE_LOCATIONS, Location, find_location
from ..core.risk import calculate_risk_score, generate_risk_factors
from ..core.routes import Route, WayPoint


class PlanningError(RuntimeError):
    """Base class of errors raised while editing or optimizing a plan."""

    pass


class MaxWaypointsError(PlanningError):
    """Raised if a waypoint is added to a plan that has the maximum number."""

    pass


class NoAvailableLocationError(PlanningError):
    """Raised if every known location is already used by the plan."""

    pass


class NotOptimizedError(PlanningError):
    """Raised if results are requested before the plan was optimized."""

    pass


@dataclass
class OptimizationSummary:
    """Metrics of the best alternative and its savings over the others."""

    distance_km: float
    time_hours: float
    fuel_usage_l: float
    risk_score: float
    fuel_savings_l: float
    time_savings_hours: float

    def to_dict(self) -> dict[str, float]:
        return {
            "distance_km": float(self.distance_km),
            "time_hours": float(self.time_hours),
            "fuel_usage_l": float(self.fuel_usage_l),
            "risk_score": float(self.risk_score),
            "fuel_savings_l": float(self.fuel_savings_l),
            "time_savings_hours": float(self.time_savings_hours),
        }

    @classmethod
    def from_dict(cls, data: dict) -> OptimizationSummary:
        return cls(**{k: float(v) for k, v in data.items()})

    @classmethod
    def from_ranked(
        cls, ranked: Sequence[RouteAlternative], fuel_consumption_l_per_km: float
    ) -> OptimizationSummary:
        """Summarize the first of the ranked alternatives.

        Savings compare against the mean of all other alternatives and are zero
        if there are no others.
        """
        best, others = ranked[0], ranked[1:]
        fuel_usage = best.fuel_usage(fuel_consumption_l_per_km)
        if others:
            mean_other_fuel = (
                np.mean([o.distance_km for o in others]) * fuel_consumption_l_per_km
            )
            mean_other_time = np.mean([o.time_hours for o in others])
            fuel_savings = float(mean_other_fuel - fuel_usage)
            time_savings = float(mean_other_time - best.time_hours)
        else:
            fuel_savings, time_savings = 0.0, 0.0
        return cls(
            distance_km=best.distance_km,
            time_hours=best.time_hours,
            fuel_usage_l=fuel_usage,
            risk_score=best.risk_score,
            fuel_savings_l=fuel_savings,
            time_savings_hours=time_savings,
        )


@dataclass
class StageLog:
    """Record of a single planning stage event."""

    name: str
    metrics: dict[str, Any]
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(timespec="seconds")
    )

    def to_record(self) -> dict[str, Any]:
        """Return a flat record with stage, timestamp, and metrics."""
        return {
            "stage": self.name,
            "timestamp": self.timestamp,
            **self.metrics,
        }


@dataclass
class PlanLog:
    """Structured record of a planning run."""

    config: dict[str, Any]
    stages: list[StageLog] = field(default_factory=list)

    def add_stage(self, name: str, **metrics: Any) -> None:
        """Append a stage log entry."""
        self.stages.append(StageLog(name=name, metrics=dict(metrics)))

    def to_dataframe(self) -> "pd.DataFrame":
        """Convert logs to a pandas DataFrame.

        Includes all stages with columns: stage, timestamp, and metric keys.
        """
        records = [s.to_record() for s in self.stages]
        if not records:
            return pd.DataFrame(columns=["stage", "timestamp"])

        df = pd.DataFrame(records)
        df["timestamp"] = pd.to_datetime(df["timestamp"], errors="coerce")
        return df

    def to_dict(self) -> dict[str, Any]:
        """Return log contents as plain dict."""
        return {
            "config": self.config,
            "stages": [
                {
                    "name": stage.name,
                    "metrics": stage.metrics,
                    "timestamp": stage.timestamp,
                }
                for stage in self.stages
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> PlanLog:
        return cls(
            config=data.get("config", {}),
            stages=[
                StageLog(
                    name=stage["name"],
                    metrics=stage.get("metrics", {}),
                    timestamp=stage.get("timestamp", ""),
                )
                for stage in data.get("stages", [])
            ],
        )


def _json_default(obj: Any):
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj)!r} is not serialisable")


@dataclass
class PlanResult:
    """Container returned by ConvoyPlanner.optimize."""

    start_name: str
    end_name: str
    waypoint_names: list[str]
    alternatives: AlternativeSet
    selected_route_index: int
    summary: OptimizationSummary
    safety_preference: float = 50.0
    avoid_bridges: bool = False
    risk_areas: tuple[RiskArea, ...] = ()
    logs: PlanLog | None = None

    @property
    def best(self) -> RouteAlternative:
        """Top-ranked alternative."""
        return self.alternatives.alternatives[0]

    @property
    def selected(self) -> RouteAlternative:
        """Currently selected alternative."""
        return self.alternatives.by_index(self.selected_route_index)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "start_name": self.start_name,
            "end_name": self.end_name,
            "waypoint_names": list(self.waypoint_names),
            "alternatives": self.alternatives.to_dict(),
            "selected_route_index": int(self.selected_route_index),
            "summary": self.summary.to_dict(),
            "safety_preference": float(self.safety_preference),
            "avoid_bridges": bool(self.avoid_bridges),
            "risk_areas": [area.to_dict() for area in self.risk_areas],
            "log": self.logs.to_dict() if self.logs else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PlanResult:
        """Reconstruct PlanResult from dictionary."""
        log_data = data.get("log")
        return cls(
            start_name=data["start_name"],
            end_name=data["end_name"],
            waypoint_names=list(data.get("waypoint_names", [])),
            alternatives=AlternativeSet.from_dict(data["alternatives"]),
            selected_route_index=int(data["selected_route_index"]),
            summary=OptimizationSummary.from_dict(data["summary"]),
            safety_preference=float(data.get("safety_preference", 50.0)),
            avoid_bridges=bool(data.get("avoid_bridges", False)),
            risk_areas=tuple(RiskArea.from_dict(a) for a in data.get("risk_areas", [])),
            logs=PlanLog.from_dict(log_data) if log_data else None,
        )

    def to_msgpack(self) -> bytes:
        """Serialize to MessagePack binary format."""
        import msgpack

        return msgpack.packb(self.to_dict(), use_bin_type=True, default=_json_default)

    @classmethod
    def from_msgpack(cls, data: bytes) -> PlanResult:
        """Deserialize from MessagePack binary format."""
        import msgpack

        return cls.from_dict(msgpack.unpackb(data, raw=False))

    def dump_json(self, path: Path | str, *, indent: int = 2) -> None:
        """Write alternatives, summary, and logs to JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(self.to_dict(), fh, indent=indent, default=_json_default)

    @classmethod
    def load_json(cls, path: Path | str) -> PlanResult:
        """Load a PlanResult from disk."""
        with Path(path).open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        return cls.from_dict(data)

    def to_geojson(self) -> dict[str, Any]:
        """FeatureCollection of all alternatives and risk areas."""
        features = [
            alt.route.to_geojson_feature(
                kind="route",
                route_index=alt.route_index,
                rank=rank,
                selected=alt.route_index == self.selected_route_index,
                distance_km=alt.distance_km,
                time_hours=alt.time_hours,
                risk_score=alt.risk_score,
            )
            for rank, alt in enumerate(self.alternatives)
        ]
        features.extend(area.to_geojson_feature() for area in self.risk_areas)
        return {"type": "FeatureCollection", "features": features}

    def dump_geojson(self, path: Path | str) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(self.to_geojson(), fh, default=_json_default)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per alternative in ranking order."""
        return pd.DataFrame(
            [
                {
                    "rank": rank,
                    "route_index": alt.route_index,
                    "distance_km": alt.distance_km,
                    "time_hours": alt.time_hours,
                    "risk_score": alt.risk_score,
                    "num_risk_factors": len(alt.risk_factors),
                    "selected": alt.route_index == self.selected_route_index,
                }
                for rank, alt in enumerate(self.alternatives)
            ]
        )

    def plot_routes(self, ax=None):
        """Plot alternatives and risk areas in lon/lat."""
        if ax is None:
            _, ax = plt.subplots(1, 1)

        for area in self.risk_areas:
            ax.fill(
                *area.polygon.exterior.xy,
                alpha=0.2,
                color={"low": "gold", "medium": "orange", "high": "red"}[
                    area.risk_level
                ],
            )
        for alt in self.alternatives:
            if alt.route_index == self.selected_route_index:
                continue
            ax.plot(*alt.route.line_string.xy, "gray")
        ax.plot(*self.selected.route.line_string.xy, "black")
        ax.set_xlabel("lon")
        ax.set_ylabel("lat")
        ax.set_title(f"{self.start_name} to {self.end_name}")
        ax.grid()
        return ax


class ConvoyPlanner:
    """Stateful planner for a convoy trip.

    Holds the stops, preferences, and the latest optimization result. The
    optional ``on_route_change`` callback receives the planner whenever the
    planned route or its selected alternative changes.
    """

    def __init__(
        self,
        config: PlannerConfig = None,
        locations: Sequence[Location] = SAMPLE_LOCATIONS,
        on_route_change: Callable[["ConvoyPlanner"], None] | None = None,
    ):
        self.config = config or PlannerConfig()
        self.locations = tuple(locations)
        self.on_route_change = on_route_change
        self.log = PlanLog(config=self.config.to_dict())
        self._rng = np.random.default_rng(self.config.hyper.random_seed)

        plan = self.config.plan
        self.start_location = find_location(plan.start, self.locations).name
        self.end_location = find_location(plan.end, self.locations).name
        if len(plan.waypoints) > self.config.hyper.max_plan_waypoints:
            raise MaxWaypointsError(
                f"Maximum {self.config.hyper.max_plan_waypoints} waypoints allowed"
            )
        self.waypoints = [find_location(w, self.locations).name for w in plan.waypoints]
        self.safety_preference = validate_safety_preference(
            self.config.preferences.safety_preference
        )
        self.avoid_bridges = bool(self.config.preferences.avoid_bridges)
        self.result: PlanResult | None = None

    def set_start_location(self, name: str) -> None:
        self.start_location = find_location(name, self.locations).name
        self._notify()

    def set_end_location(self, name: str) -> None:
        self.end_location = find_location(name, self.locations).name
        self._notify()

    def add_waypoint(self) -> str:
        """Append the first location not used by the plan yet.

        Returns
        -------
        str
            Name of the added waypoint

        Raises
        ------
        MaxWaypointsError
            If the plan already has the maximum number of waypoints
        NoAvailableLocationError
            If all locations are in use
        """
        max_waypoints = self.config.hyper.max_plan_waypoints
        if len(self.waypoints) >= max_waypoints:
            logging.warning("Maximum %d waypoints allowed", max_waypoints)
            raise MaxWaypointsError(f"Maximum {max_waypoints} waypoints allowed")

        used = {self.start_location, self.end_location, *self.waypoints}
        available = [loc for loc in self.locations if loc.name not in used]
        if not available:
            logging.error("No more available locations")
            raise NoAvailableLocationError("No more available locations")

        self.waypoints.append(available[0].name)
        self._notify()
        return available[0].name

    def remove_waypoint(self, index: int) -> str:
        """Remove and return the waypoint at index."""
        name = self.waypoints.pop(index)
        self._notify()
        return name

    def change_waypoint(self, index: int, name: str) -> None:
        """Replace the waypoint at index by another location."""
        if not -len(self.waypoints) <= index < len(self.waypoints):
            raise IndexError(f"No waypoint at index {index}")
        self.waypoints[index] = find_location(name, self.locations).name
        self._notify()

    def set_safety_preference(self, value: float) -> None:
        self.safety_preference = validate_safety_preference(value)
        self._notify()

    def set_avoid_bridges(self, flag: bool) -> None:
        self.avoid_bridges = bool(flag)
        self._notify()

    @property
    def stop_names(self) -> list[str]:
        return [self.start_location, *self.waypoints, self.end_location]

    @property
    def stops(self) -> list[WayPoint]:
        """Way points of start, intermediate stops, and end."""
        return [find_location(n, self.locations).way_point for n in self.stop_names]

    @property
    def selected_route_index(self) -> int:
        if self.result is None:
            raise NotOptimizedError("Plan has not been optimized yet.")
        return self.result.selected_route_index

    @property
    def preference_label(self) -> str:
        return safety_preference_label(self.safety_preference)

    def optimize(self) -> PlanResult:
        """Generate, score, and rank alternative routes for the current plan."""
        self.log = PlanLog(config=self._config_snapshot())
        self._log_stage_metrics(
            "plan",
            stops=self.stop_names,
            safety_preference=self.safety_preference,
            preference_label=self.preference_label,
            avoid_bridges=self.avoid_bridges,
        )

        routes = self._stage_generation()
        routes = self._stage_avoidance(routes)
        alternatives = self._stage_scoring(routes)
        ranked = self._stage_ranking(alternatives)

        summary = OptimizationSummary.from_ranked(
            ranked, self.config.vehicle.fuel_consumption_l_per_km
        )
        self.result = PlanResult(
            start_name=self.start_location,
            end_name=self.end_location,
            waypoint_names=list(self.waypoints),
            alternatives=AlternativeSet.from_alternatives(ranked),
            selected_route_index=ranked[0].route_index,
            summary=summary,
            safety_preference=self.safety_preference,
            avoid_bridges=self.avoid_bridges,
            risk_areas=tuple(self.config.risk_areas),
            logs=self.log,
        )
        self._log_stage_metrics(
            "selection",
            selected_route_index=self.result.selected_route_index,
            **summary.to_dict(),
        )
        logging.info("Routes optimized successfully")
        self._notify()
        return self.result

    def select_route(self, route_index: int) -> RouteAlternative:
        """Select the alternative with given route_index.

        Raises
        ------
        NotOptimizedError
            If the plan has not been optimized yet
        KeyError
            If no alternative carries the route_index
        """
        if self.result is None:
            raise NotOptimizedError("Plan has not been optimized yet.")
        alternative = self.result.alternatives.by_index(route_index)
        self.result.selected_route_index = route_index
        self._log_stage_metrics("selection", selected_route_index=route_index)
        self._notify()
        return alternative

    def risk_report(self, route_index: int | None = None) -> RiskReport:
        """Risk report of the selected (or given) alternative."""
        if self.result is None:
            raise NotOptimizedError("Plan has not been optimized yet.")
        if route_index is None:
            route_index = self.result.selected_route_index
        alternative = self.result.alternatives.by_index(route_index)
        return analyze_route_risk(
            start_name=self.result.start_name,
            end_name=self.result.end_name,
            factors=alternative.risk_factors,
            route_index=route_index,
            risk_score=alternative.risk_score,
        )

    def _stage_generation(self) -> list[Route]:
        params = self.config.hyper
        routes = generate_alternative_routes(
            stops=self.stops,
            count=params.num_alternatives,
            jitter_degrees=params.jitter_degrees,
            min_waypoints=params.min_route_waypoints,
            max_waypoints=params.max_route_waypoints,
            lateral_noise_degrees=params.lateral_noise_degrees,
            detour_offset_degrees=params.detour_offset_degrees,
            rng=self._rng,
        )
        self._log_stage_metrics(
            "generation",
            num_routes=len(routes),
            num_way_points=[len(r) for r in routes],
        )
        return routes

    def _stage_avoidance(self, routes: list[Route]) -> list[Route]:
        params = self.config.hyper
        if not params.avoid_risk_areas or not self.config.risk_areas:
            self._log_stage_metrics("avoidance", enabled=False)
            return routes

        avoided = [
            avoid_risk_areas(
                route=route,
                risk_areas=self.config.risk_areas,
                safety_preference=self.safety_preference,
                margin_km=params.avoidance_margin_km,
                pin_end_points=True,
            )
            for route in routes
        ]
        moved = [
            sum(w0 != w1 for w0, w1 in zip(r0.way_points, r1.way_points))
            for r0, r1 in zip(routes, avoided)
        ]
        self._log_stage_metrics("avoidance", enabled=True, moved_way_points=moved)
        return avoided

    def _stage_scoring(self, routes: list[Route]) -> list[RouteAlternative]:
        params = self.config.hyper
        vehicle = self.config.vehicle
        speed_kmh = effective_speed_kmh(
            safety_preference=self.safety_preference,
            avoid_bridges=self.avoid_bridges,
            vehicle=vehicle,
        )

        alternatives = []
        for index, route in enumerate(routes):
            factors = generate_risk_factors(
                route=route,
                rng=self._rng,
                min_factors=params.min_risk_factors,
                max_factors=params.max_risk_factors,
                km_per_factor=params.km_per_risk_factor,
            )
            alternatives.append(
                RouteAlternative(
                    route=route,
                    distance_km=route.length_km,
                    time_hours=route.travel_time_hours(speed_kmh=speed_kmh),
                    risk_score=adjusted_risk_score(
                        calculate_risk_score(factors),
                        avoid_bridges=self.avoid_bridges,
                        vehicle=vehicle,
                    ),
                    route_index=index,
                    risk_factors=tuple(factors),
                )
            )
        scored = AlternativeSet.from_alternatives(alternatives)
        scored.remove_invalid()
        num_invalid = len(alternatives) - scored.size
        if num_invalid:
            logging.warning("Dropped %d alternatives with invalid metrics", num_invalid)
        self._log_stage_metrics(
            "scoring",
            speed_kmh=speed_kmh,
            num_invalid=num_invalid,
            **self._alternative_stats(alternatives),
        )
        if not scored.size:
            raise PlanningError("No alternative with valid metrics")
        return scored.alternatives

    def _stage_ranking(
        self, alternatives: list[RouteAlternative]
    ) -> list[RouteAlternative]:
        ranked = rank_alternatives(
            alternatives,
            safety_preference=self.safety_preference,
            avoid_bridges=self.avoid_bridges,
        )
        self._log_stage_metrics(
            "ranking", ranking=[a.route_index for a in ranked]
        )
        return ranked

    def _config_snapshot(self) -> dict[str, Any]:
        config = self.config.to_dict()
        config["plan"].update(
            start=self.start_location,
            end=self.end_location,
            waypoints=list(self.waypoints),
        )
        config["preferences"].update(
            safety_preference=self.safety_preference,
            avoid_bridges=self.avoid_bridges,
        )
        return config

    def _notify(self) -> None:
        if self.on_route_change is not None:
            self.on_route_change(self)

    def _log_stage_metrics(
        self,
        name: str,
        **metrics: Any,
    ) -> None:
        """Convenience wrapper for stage-level logging."""
        timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
        logging.info("%s [%s] %s", name, timestamp, metrics)
        self.log.add_stage(name=name, **metrics)

    def _alternative_stats(
        self, alternatives: Sequence[RouteAlternative]
    ) -> dict[str, Any]:
        if not alternatives:
            return {
                "num_alternatives": 0,
                "distance_km_min": np.nan,
                "distance_km_max": np.nan,
                "time_hours_min": np.nan,
                "time_hours_max": np.nan,
                "risk_score_min": np.nan,
                "risk_score_max": np.nan,
            }
        distances = np.array([a.distance_km for a in alternatives])
        times = np.array([a.time_hours for a in alternatives])
        risks = np.array([a.risk_score for a in alternatives])
        return {
            "num_alternatives": len(alternatives),
            "distance_km_min": float(np.nanmin(distances)),
            "distance_km_max": float(np.nanmax(distances)),
            "time_hours_min": float(np.nanmin(times)),
            "time_hours_max": float(np.nanmax(times)),
            "risk_score_min": float(np.nanmin(risks)),
            "risk_score_max": float(np.nanmax(risks)),
        }
