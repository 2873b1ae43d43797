from __future__ import annotations

from typing import Dict, Iterable, Tuple

from ..core.agent import Agent, AgentStatus
from ..types.metrics import TickMetrics


def population_stats(agents: Iterable[Agent]) -> Tuple[int, float, float, Dict[AgentStatus, int]]:
    population = 0
    hunger_sum = 0.0
    age_sum = 0.0
    statuses = {status: 0 for status in AgentStatus}
    for agent in agents:
        if not agent.alive:
            continue
        population += 1
        hunger_sum += agent.hunger
        age_sum += agent.age
        statuses[agent.status] += 1
    avg_hunger = 0.0 if population == 0 else hunger_sum / population
    avg_age = 0.0 if population == 0 else age_sum / population
    return population, avg_hunger, avg_age, statuses


def create_metrics(
    tick: int,
    births: int,
    deaths: int,
    foods_eaten: int,
    foods_produced: int,
    site_visits: int,
    foods: int,
    sites: int,
    occupied_cells: int,
    is_over: bool,
    duration_ms: float,
    stats: Tuple[int, float, float, Dict[AgentStatus, int]],
) -> TickMetrics:
    population, avg_hunger, avg_age, statuses = stats
    return TickMetrics(
        tick=tick,
        population=population,
        foods=foods,
        sites=sites,
        births=births,
        deaths=deaths,
        foods_eaten=foods_eaten,
        foods_produced=foods_produced,
        site_visits=site_visits,
        average_hunger=avg_hunger,
        average_age=avg_age,
        doodling=statuses[AgentStatus.DOODLE],
        mating=statuses[AgentStatus.MATE],
        eating=statuses[AgentStatus.EAT],
        working=statuses[AgentStatus.WORK],
        occupied_cells=occupied_cells,
        is_over=is_over,
        tick_duration_ms=duration_ms,
    )
