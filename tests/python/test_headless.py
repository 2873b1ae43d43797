import csv
import json

from objectlife.app.headless import _HEADER, _summary_stats, run_headless
from objectlife.sim.core.config import SimulationConfig


def _read_csv(path):
    with path.open(newline="") as handle:
        return list(csv.reader(handle))


def test_headless_log_header_and_rows(tmp_path):
    log_path = tmp_path / "run.csv"
    world = run_headless(steps=3, seed=1, log_path=log_path, deterministic_log=True)

    rows = _read_csv(log_path)

    assert len(rows) == 4
    assert rows[0] == _HEADER
    assert [row[0] for row in rows[1:]] == ["1", "2", "3"]
    assert all(row[-1] == "0.000" for row in rows[1:])
    assert int(rows[-1][1]) == len(world.agents)


def test_deterministic_logs_match_for_identical_seeds(tmp_path):
    first = tmp_path / "a.csv"
    second = tmp_path / "b.csv"

    run_headless(steps=40, seed=8, log_path=first, deterministic_log=True)
    run_headless(steps=40, seed=8, log_path=second, deterministic_log=True)

    assert first.read_text() == second.read_text()


def test_summary_written(tmp_path):
    summary_path = tmp_path / "summary.json"
    run_headless(steps=5, seed=2, log_path=None, deterministic_log=True, summary_path=summary_path)

    summary = json.loads(summary_path.read_text())

    assert summary["steps"] == 5
    assert summary["ticks_run"] == 5
    assert summary["seed"] == 2
    assert summary["is_over"] is False
    assert summary["over_at_tick"] is None
    for key in ["births", "deaths", "final", "tick_ms", "population", "peaks"]:
        assert key in summary
    assert set(summary["final"]) == {"population", "foods", "sites"}
    assert summary["tick_ms"]["max"] == 0.0


def test_run_stops_once_the_world_is_over(tmp_path):
    config_path = tmp_path / "barren.yaml"
    config_path.write_text("initial_foods: 0\ninitial_sites: 0\n")
    log_path = tmp_path / "barren.csv"

    world = run_headless(steps=10, seed=1, log_path=log_path, config_path=config_path)

    assert world.elapsed_ticks == 1
    assert world.config.seed == 1
    rows = _read_csv(log_path)
    assert len(rows) == 2
    assert rows[1][_HEADER.index("is_over")] == "1"


def test_keep_running_ignores_the_end(tmp_path):
    config_path = tmp_path / "barren.yaml"
    config_path.write_text("initial_foods: 0\ninitial_sites: 0\n")

    world = run_headless(steps=4, seed=1, log_path=None, config_path=config_path, stop_when_over=False)

    assert world.elapsed_ticks == 4
    assert isinstance(world.config, SimulationConfig)


def test_summary_stats_percentiles():
    stats = _summary_stats([4.0, 1.0, 3.0, 2.0])

    assert stats["min"] == 1.0
    assert stats["max"] == 4.0
    assert stats["avg"] == 2.5
    assert stats["p50"] == 2.5
    assert _summary_stats([])["p99"] == 0.0
