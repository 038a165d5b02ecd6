import json
import re

from click.testing import CliRunner

from convoy_routing.app.cli import main
from convoy_routing.app.planner import PlanResult


def test_cli_writes_json_result(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        main,
        [
            "--start",
            "Chicago",
            "--end",
            "Houston",
            "--waypoint",
            "Dallas",
            "--random-seed",
            "1",
            "--log-dir",
            str(tmp_path),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Chicago -> Houston" in result.output
    assert "Results saved to" in result.output
    assert "Risk level:" in result.output

    files = list(tmp_path.glob("run_*.json"))
    assert len(files) == 1
    plan = PlanResult.load_json(files[0])
    assert plan.start_name == "Chicago"
    assert plan.waypoint_names == ["Dallas"]
    assert len(plan.alternatives) == 3


def test_cli_lists_alternatives(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["--num-alternatives", "4", "--random-seed", "2", "--log-dir", str(tmp_path)],
    )
    assert result.exit_code == 0, result.output
    lines = [
        l for l in result.output.splitlines() if re.match(r"^[* ] \d+\. route ", l)
    ]
    assert len(lines) == 4
    # the selected alternative is ranked first
    assert lines[0].startswith("* 1.")


def test_cli_writes_geojson(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        main,
        [
            "--random-seed",
            "3",
            "--avoid-bridges",
            "--ignore-risk-areas",
            "--format",
            "geojson",
            "--log-dir",
            str(tmp_path),
        ],
    )
    assert result.exit_code == 0, result.output
    files = list(tmp_path.glob("run_*.geojson"))
    assert len(files) == 1
    with files[0].open() as fh:
        data = json.load(fh)
    assert data["type"] == "FeatureCollection"


def test_cli_rejects_invalid_safety_preference(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        main, ["--safety-preference", "150", "--log-dir", str(tmp_path)]
    )
    assert result.exit_code == 2


def test_cli_unknown_location(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, ["--start", "Atlantis", "--log-dir", str(tmp_path)])
    assert result.exit_code == 2
    assert list(tmp_path.iterdir()) == []
    assert "Invalid value for '--start'" in result.output


def test_cli_unknown_waypoint(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        main, ["--waypoint", "Atlantis", "--log-dir", str(tmp_path)]
    )
    assert result.exit_code == 2
    assert "Invalid value for '--waypoint'" in result.output


def test_cli_rejects_zero_alternatives(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        main, ["--num-alternatives", "0", "--log-dir", str(tmp_path)]
    )
    assert result.exit_code == 2
    assert list(tmp_path.iterdir()) == []


def test_cli_too_many_waypoints(tmp_path):
    runner = CliRunner()
    args = []
    for name in ["Chicago", "Houston", "Phoenix", "Dallas"]:
        args += ["--waypoint", name]
    result = runner.invoke(main, args + ["--log-dir", str(tmp_path)])
    assert result.exit_code == 2
    assert "Maximum 3 waypoints allowed" in result.output
