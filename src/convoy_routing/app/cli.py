"""Command-line interface of the convoy planner.

Provides a Click-based command and a programmatic build_config() function for
creating PlannerConfig objects from individual parameters.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional
import logging
import uuid

import click

from .config import HyperParams, PlanConfig, PlannerConfig, PreferencesConfig
from .planner import ConvoyPlanner, PlanningError, PlanResult
from ..core.config import Vehicle
from ..core.locations import SAMPLE_LOCATIONS
from ..core.units import format_duration


def build_config(
    # Plan parameters
    start: Optional[str] = None,
    end: Optional[str] = None,
    waypoints: Optional[tuple[str, ...]] = None,
    plan_name: str = "Convoy",
    # Preferences
    safety_preference: float = 50.0,
    avoid_bridges: bool = False,
    # Generation parameters
    num_alternatives: int = 3,
    random_seed: Optional[int] = None,
    jitter_degrees: float = 0.02,
    lateral_noise_degrees: float = 0.1,
    min_route_waypoints: int = 2,
    max_route_waypoints: int = 4,
    detour_offset_degrees: float = 0.15,
    # Avoidance parameters
    avoid_risk_areas: bool = True,
    avoidance_margin_km: float = 0.05,
    # Config file override
    config_dict: Optional[dict[str, Any]] = None,
) -> PlannerConfig:
    """Build PlannerConfig from individual parameters.

    If config_dict is provided, it is used as the base and the plan
    parameters that are not None are overlaid.

    Parameters
    ----------
    start : str, optional
        Name of the start location
    end : str, optional
        Name of the end location
    waypoints : tuple[str, ...], optional
        Names of intermediate stops
    plan_name : str
        Human-readable name for the plan
    safety_preference : float
        Safety preference (0 = speed only, 100 = safety only)
    avoid_bridges : bool
        Whether the convoy avoids bridges
    num_alternatives : int
        Number of alternative routes
    random_seed : int, optional
        Random seed for reproducibility
    jitter_degrees : float
        Jitter of the stops in degrees
    lateral_noise_degrees : float
        Noise of the intermediate way points in degrees
    min_route_waypoints : int
        Minimum number of random way points between two stops
    max_route_waypoints : int
        Maximum number of random way points between two stops
    detour_offset_degrees : float
        Offset of the detour way points in degrees
    avoid_risk_areas : bool
        Whether way points are pushed out of risk areas
    avoidance_margin_km : float
        Extra displacement beyond the risk area edge in km
    config_dict : dict, optional
        Configuration dictionary that overrides individual parameters

    Returns
    -------
    PlannerConfig
        Configured planner configuration object
    """
    if config_dict:
        params = {k: dict(v) for k, v in config_dict.items() if isinstance(v, dict)}
        if "risk_areas" in config_dict:
            params["risk_areas"] = config_dict["risk_areas"]
        plan = params.setdefault("plan", {})
        if start is not None:
            plan["start"] = start
        if end is not None:
            plan["end"] = end
        if waypoints is not None:
            plan["waypoints"] = tuple(waypoints)
        return PlannerConfig.from_dict(params)

    plan_kwargs = {"name": plan_name}
    if start is not None:
        plan_kwargs["start"] = start
    if end is not None:
        plan_kwargs["end"] = end
    if waypoints is not None:
        plan_kwargs["waypoints"] = tuple(waypoints)

    hyper = HyperParams(
        random_seed=random_seed,
        # Generation
        num_alternatives=num_alternatives,
        jitter_degrees=jitter_degrees,
        lateral_noise_degrees=lateral_noise_degrees,
        min_route_waypoints=min_route_waypoints,
        max_route_waypoints=max_route_waypoints,
        detour_offset_degrees=detour_offset_degrees,
        # Avoidance
        avoid_risk_areas=avoid_risk_areas,
        avoidance_margin_km=avoidance_margin_km,
    )

    return PlannerConfig(
        plan=PlanConfig(**plan_kwargs),
        preferences=PreferencesConfig(
            safety_preference=safety_preference, avoid_bridges=avoid_bridges
        ),
        vehicle=Vehicle(),
        hyper=hyper,
    )


LOCATION_NAMES = [loc.name for loc in SAMPLE_LOCATIONS]


def format_alternatives(result: PlanResult) -> list[str]:
    """One line per ranked alternative."""
    lines = []
    for rank, alt in enumerate(result.alternatives, start=1):
        marker = "*" if alt.route_index == result.selected_route_index else " "
        lines.append(
            f"{marker} {rank}. route {alt.route_index}: "
            f"{alt.distance_km:.0f} km, {format_duration(alt.time_hours)}, "
            f"risk {alt.risk_score:.1f}"
        )
    return lines


@click.command()
@click.option(
    "--start",
    type=click.Choice(LOCATION_NAMES),
    default="New York",
    help="Start location.",
)
@click.option(
    "--end",
    type=click.Choice(LOCATION_NAMES),
    default="Los Angeles",
    help="End location.",
)
@click.option(
    "--waypoint",
    "waypoints",
    type=click.Choice(LOCATION_NAMES),
    multiple=True,
    help="Intermediate stop (e.g., --waypoint Chicago --waypoint Dallas).",
)
@click.option(
    "--plan-name", type=str, default="Convoy", help="Human-readable plan name."
)
@click.option(
    "--safety-preference",
    type=click.FloatRange(0, 100),
    default=50.0,
    help="0 prioritizes speed, 100 prioritizes safety.",
)
@click.option(
    "--avoid-bridges/--no-avoid-bridges",
    default=False,
    help="Whether the convoy avoids bridges.",
)
@click.option(
    "--num-alternatives",
    type=click.IntRange(min=1),
    default=3,
    help="Number of alternative routes.",
)
@click.option(
    "--random-seed", type=int, default=None, help="Random seed for reproducibility."
)
@click.option(
    "--avoid-risk-areas/--ignore-risk-areas",
    default=True,
    help="Whether way points are pushed out of risk areas.",
)
# Output parameters
@click.option(
    "--log-dir",
    type=click.Path(),
    default="runs",
    help="Directory to save plan results.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "geojson"], case_sensitive=False),
    default="json",
    help="Output file format.",
)
def main(
    start,
    end,
    waypoints,
    plan_name,
    safety_preference,
    avoid_bridges,
    num_alternatives,
    random_seed,
    avoid_risk_areas,
    log_dir,
    output_format,
) -> PlanResult:
    """Plan a convoy trip and rank alternative routes."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    config = build_config(
        start=start,
        end=end,
        waypoints=waypoints,
        plan_name=plan_name,
        safety_preference=safety_preference,
        avoid_bridges=avoid_bridges,
        num_alternatives=num_alternatives,
        random_seed=random_seed,
        avoid_risk_areas=avoid_risk_areas,
    )

    try:
        planner = ConvoyPlanner(config=config)
        result = planner.optimize()
    except PlanningError as err:
        raise click.UsageError(str(err)) from err

    click.echo(f"{result.start_name} -> {result.end_name}")
    for line in format_alternatives(result):
        click.echo(line)
    report = planner.risk_report()
    click.echo(f"Risk level: {report.risk_level}")
    click.echo(report.summary)

    run_id = datetime.now().isoformat(timespec="milliseconds").replace(":", "-")
    run_id = f"{run_id}_{uuid.uuid4()}"

    output_file = Path(log_dir) / f"run_{run_id}.{output_format.lower()}"
    if output_format.lower() == "geojson":
        result.dump_geojson(output_file)
    else:
        result.dump_json(output_file)
    click.echo(f"Results saved to {output_file}")

    return result


if __name__ == "__main__":
    main()
