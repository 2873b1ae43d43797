from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import TYPE_CHECKING, Dict

from ..core.agent import Agent, AgentStatus
from ..core.resources import EntityKind
from ..types.events import birth_confetti, food_sparkle, site_pulse
from ..utils.math2d import _safe_normalize

if TYPE_CHECKING:
    from ..core.world import World

logger = logging.getLogger(__name__)

MATE_HUNGER = 1.2
FED_HUNGER = 0.5
HUNGER_DECAY = 0.1
BIRTH_HUNGER_DIVISOR = 3.0

_AGING_RATES: Dict[AgentStatus, float] = {
    AgentStatus.MATE: 1.2,
    AgentStatus.DOODLE: 1.0,
    AgentStatus.EAT: 0.7,
    AgentStatus.WORK: 1.5,
    AgentStatus.DEAD: 0.0,
}


def update_status(agent: Agent, food_count: int, agent_count: int) -> AgentStatus:
    """Pick the agent's behaviour for this tick from its hunger, age and births.

    The branches are checked in order and the first match wins. The death
    checks come last, so an agent past `max_age` keeps mating, eating or working
    while one of the hunger bands above still claims it. When no branch
    matches the previous status is kept.
    """
    hunger = agent.hunger
    if hunger >= MATE_HUNGER and agent.can_give_birth:
        agent.status = AgentStatus.MATE
    elif FED_HUNGER < hunger <= MATE_HUNGER:
        food_ratio = food_count / agent_count if agent_count > 0 else math.inf
        if food_ratio <= agent.factors.work_threshold and agent.ready_to_work:
            agent.status = AgentStatus.WORK
        else:
            agent.status = AgentStatus.DOODLE
    elif 0.0 < hunger <= FED_HUNGER:
        if food_count > 0:
            agent.status = AgentStatus.EAT
        else:
            agent.ready_to_work = True
            agent.status = AgentStatus.WORK
    elif hunger <= 0.0:
        agent.status = AgentStatus.DEAD
    elif agent.age >= agent.max_age:
        agent.status = AgentStatus.DEAD
    return agent.status


def reach(world: World, agent: Agent) -> bool:
    """Apply the effect of touching the agent's destination.

    The destination handle is resolved again here; if the entity was consumed
    or removed earlier in the tick nothing happens and False is returned.
    """
    target = world.resolve(agent.destination)
    if target is None:
        return False

    if target.kind is EntityKind.FOOD:
        target.mark_reached()
        agent.hunger += target.utility
        agent.ready_to_work = True
        world._foods_eaten += 1
        world._emit(food_sparkle(agent.position.x, agent.position.y))
    elif target.kind is EntityKind.AGENT:
        world._emit(birth_confetti(agent.position.x, agent.position.y))
        give_birth(world, agent)
        agent.ready_to_work = True
    elif target.kind is EntityKind.SITE:
        target.record_work()
        world._site_visits += 1
        world._emit(site_pulse(agent.position.x, agent.position.y, agent.size))
        agent.ready_to_work = False

    agent.status = AgentStatus.DOODLE
    return True


def give_birth(world: World, parent: Agent) -> Agent | None:
    if not parent.can_give_birth:
        parent.status = AgentStatus.DOODLE
        return None

    factors = parent.factors
    birth_size = parent.size + parent.age / 10.0 * parent.hunger * factors.sizing / 3.0
    offset = world._rng.next_jitter(factors.entropy)
    child = world._create_agent(
        parent.position.x + offset.x,
        parent.position.y + offset.y,
        size=birth_size,
        hunger=parent.hunger,
        factors=replace(factors),
        max_age=parent.max_age,
        max_births=parent.max_births,
    )
    parent.birth_count += 1
    parent.hunger /= BIRTH_HUNGER_DIVISOR
    world._birth_queue.append(child)
    logger.debug("agent %d gave birth to %d (births=%d)", parent.id, child.id, parent.birth_count)
    return child


def aging(agent: Agent) -> None:
    agent.age += _AGING_RATES[agent.status] * agent.factors.aging


def hungering(agent: Agent) -> None:
    agent.hunger -= HUNGER_DECAY * agent.factors.hunger


def directing(world: World, agent: Agent) -> None:
    if agent.direction is not None:
        return
    agent.direction = _safe_normalize(world._rng.next_jitter(agent.factors.entropy))


def apply_periodic_updates(world: World, agent: Agent) -> None:
    aging(agent)
    hungering(agent)
    directing(world, agent)


def seed_population(world: World) -> None:
    """Scatter the initial food and sites, then bring agents in from the arena edges.

    Agents arrive in pairs, one just outside a vertical edge and one just
    outside a horizontal edge, so an odd initial count is rounded up.
    """
    config = world._config
    rng = world._rng
    width = config.arena_width
    height = config.arena_height

    for _ in range(config.initial_foods):
        point = rng.next_point(width, height)
        world.spawn_food(point.x, point.y)
    for _ in range(config.initial_sites):
        point = rng.next_point(width, height)
        world.spawn_site(point.x, point.y)

    outside = config.agent.initial_size / 2.0
    for _ in range(math.ceil(config.initial_agents / 2)):
        world.spawn_agent(rng.sample_choice((-outside, width + outside)), rng.next_range(0.0, height))
        world.spawn_agent(rng.next_range(0.0, width), rng.sample_choice((-outside, height + outside)))
    logger.debug(
        "seeded %d agents, %d foods, %d sites",
        len(world._agents),
        len(world._foods),
        len(world._sites),
    )
