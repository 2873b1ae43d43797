from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from pathlib import Path
from typing import Optional

from ..sim.core.config import SimulationConfig
from ..sim.core.world import World
from ..sim.types.metrics import TickMetrics

logger = logging.getLogger(__name__)

_HEADER = [
    "tick",
    "population",
    "foods",
    "sites",
    "births",
    "deaths",
    "foods_eaten",
    "foods_produced",
    "site_visits",
    "avg_hunger",
    "avg_age",
    "doodling",
    "mating",
    "eating",
    "working",
    "occupied_cells",
    "is_over",
    "tick_ms",
]


def _format_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.population,
        metrics.foods,
        metrics.sites,
        metrics.births,
        metrics.deaths,
        metrics.foods_eaten,
        metrics.foods_produced,
        metrics.site_visits,
        f"{metrics.average_hunger:.4f}",
        f"{metrics.average_age:.4f}",
        metrics.doodling,
        metrics.mating,
        metrics.eating,
        metrics.working,
        metrics.occupied_cells,
        int(metrics.is_over),
        f"{tick_ms:.3f}",
    ]


def _percentile(sorted_values: list[float], percentile: float) -> float:
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    pos = (len(sorted_values) - 1) * percentile
    low = int(math.floor(pos))
    high = int(math.ceil(pos))
    if low == high:
        return float(sorted_values[low])
    weight = pos - low
    return float(sorted_values[low] + (sorted_values[high] - sorted_values[low]) * weight)


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p90": 0.0, "p99": 0.0}
    sorted_values = sorted(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(sum(values) / len(values)),
        "p50": _percentile(sorted_values, 0.50),
        "p90": _percentile(sorted_values, 0.90),
        "p99": _percentile(sorted_values, 0.99),
    }


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    summary_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
    stop_when_over: bool = True,
) -> World:
    config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config.seed = seed
    world = World(config)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    tick_ms_series: list[float] = []
    population_series: list[float] = []
    peak_population = (-1, -1)
    total_births = 0
    total_deaths = 0
    over_at: Optional[int] = None

    try:
        for _ in range(steps):
            metrics = world.step()
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            tick_ms_series.append(tick_ms)
            population_series.append(float(metrics.population))
            total_births += metrics.births
            total_deaths += metrics.deaths
            if metrics.population > peak_population[0]:
                peak_population = (metrics.population, metrics.tick)
            if writer:
                writer.writerow(_format_row(metrics, tick_ms))
            if metrics.is_over:
                over_at = metrics.tick
                if stop_when_over:
                    break
    finally:
        if csv_file:
            csv_file.close()

    logger.info(
        "headless run finished after %d ticks (population=%d, over=%s)",
        world.elapsed_ticks,
        len(world.agents),
        over_at is not None,
    )

    if summary_path:
        summary = {
            "steps": steps,
            "ticks_run": world.elapsed_ticks,
            "seed": config.seed,
            "deterministic_log": deterministic_log,
            "is_over": world.is_over,
            "over_at_tick": over_at,
            "births": total_births,
            "deaths": total_deaths,
            "final": {
                "population": len(world.agents),
                "foods": len(world.foods),
                "sites": len(world.sites),
            },
            "tick_ms": _summary_stats(tick_ms_series),
            "population": _summary_stats(population_series),
            "peaks": {
                "population": {"value": peak_population[0], "tick": peak_population[1]},
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
    return world


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless object life simulation")
    parser.add_argument("--steps", type=int, default=3000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats for the run.",
    )
    parser.add_argument(
        "--keep-running",
        action="store_true",
        help="Keep stepping after the population or resources run out.",
    )
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log births, deaths and site production.")
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        summary_path=args.summary,
        config_path=args.config,
        stop_when_over=not args.keep_running,
    )


if __name__ == "__main__":
    main()
