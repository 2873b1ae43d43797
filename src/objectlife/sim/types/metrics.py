from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    population: int
    foods: int
    sites: int
    births: int
    deaths: int
    foods_eaten: int
    foods_produced: int
    site_visits: int
    average_hunger: float
    average_age: float
    doodling: int
    mating: int
    eating: int
    working: int
    occupied_cells: int
    is_over: bool
    tick_duration_ms: float = 0.0
