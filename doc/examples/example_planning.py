"""Example planning script for experimentation.

Demonstrates how to programmatically create a PlannerConfig, run the planner,
switch to another alternative, and print its risk report.
"""

import logging
from pathlib import Path

from convoy_routing.app import ConvoyPlanner, PlanResult, build_config
from convoy_routing.core import format_duration


def run_example() -> PlanResult:
    """Configure and run a planning experiment."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    config = build_config(
        # Plan parameters
        plan_name="Example-Cross-Country-Convoy",
        start="New York",
        end="San Diego",
        waypoints=("Chicago", "Dallas"),
        # Preferences
        safety_preference=70.0,
        avoid_bridges=True,
        # Generation parameters
        num_alternatives=5,
        random_seed=345,
        detour_offset_degrees=0.3,
    )

    planner = ConvoyPlanner(config=config)
    result = planner.optimize()

    summary = result.summary
    print(
        f"Best route: {summary.distance_km:.0f} km, "
        f"{format_duration(summary.time_hours)}, "
        f"saves {format_duration(summary.time_savings_hours)}"
    )

    safest = min(result.alternatives, key=lambda alt: alt.risk_score)
    planner.select_route(safest.route_index)
    report = planner.risk_report()
    print(report.summary)
    for recommendation in report.recommendations:
        print(f"- {recommendation}")

    return result


if __name__ == "__main__":
    runs_dir = Path(__file__).resolve().parent / "runs"
    runs_dir.mkdir(exist_ok=True)
    latest_path = runs_dir / "example_planning_result.json"

    result = run_example()

    result.dump_json(latest_path)
    print(f"Dumped result to {latest_path}")
