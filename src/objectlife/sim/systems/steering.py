from __future__ import annotations

import math
from typing import TYPE_CHECKING, Union

from pygame.math import Vector2

from ..core.agent import Agent, AgentStatus
from ..utils.math2d import ZERO, _heading_from_direction, _perpendicular_unit, _safe_normalize, _safe_normalize_xy
from . import lifecycle

if TYPE_CHECKING:
    from ..core.resources import Food, Site
    from ..core.world import World

    Target = Union[Agent, Food, Site]


def ease_direction(agent: Agent, target_direction: Vector2 | None, ease: float) -> None:
    """Turn the agent's heading toward `target_direction` instead of snapping to it."""
    if target_direction is None:
        return
    if agent.direction is None:
        agent.direction = Vector2(target_direction)
        return
    eased = _safe_normalize(agent.direction.lerp(target_direction, ease))
    if eased is not None:
        agent.direction = eased


def separation(world: World, agent: Agent, position: Vector2, radius: float, slide_factor: float) -> Vector2:
    """Push `position` away from crowding agents and slide it around them.

    Slides are applied as each neighbour is visited, so later neighbours see the
    already-nudged position. The accumulated push is applied at the end.
    Agents that are mating, the agent's own destination and dead agents are
    ignored.
    """
    radius_sq = radius * radius
    slide_step = agent.speed * slide_factor
    agent_id = agent.id
    destination = agent.destination
    force_x = 0.0
    force_y = 0.0
    for other in world._agents:
        if other.id == agent_id or other.id == destination:
            continue
        if other.status is AgentStatus.MATE or other.status is AgentStatus.DEAD:
            continue
        diff_x = position.x - other.position.x
        diff_y = position.y - other.position.y
        dist_sq = diff_x * diff_x + diff_y * diff_y
        if dist_sq >= radius_sq:
            continue
        slide = _perpendicular_unit(diff_x, diff_y)
        if slide is None:
            # Coincident agents: there is no direction to push along.
            continue
        dist = math.sqrt(dist_sq)
        push = (radius - dist) / dist
        force_x += diff_x * push
        force_y += diff_y * push
        position.update(position.x + slide.x * slide_step, position.y + slide.y * slide_step)
    position.update(position.x + force_x, position.y + force_y)
    return position


def reflect_direction(agent: Agent, width: float, height: float) -> bool:
    """Flip the direction component pointing out of the arena. Only one wall is handled per call."""
    direction = agent.direction
    if direction is None:
        return False
    half = agent.size / 2.0
    x = agent.position.x
    y = agent.position.y
    if x > width - half or x < half:
        direction.x = -direction.x
    elif y > height - half or y < half:
        direction.y = -direction.y
    else:
        return False
    return True


def doodle(world: World, agent: Agent) -> None:
    config = world._config
    steer = config.steering
    if agent.direction is not None:
        reflect_direction(agent, config.arena_width, config.arena_height)
        separation(
            world,
            agent,
            agent.position,
            agent.size * steer.doodle_separation_scale,
            steer.doodle_slide_factor,
        )
        agent.position.update(
            agent.position.x + agent.direction.x * agent.speed,
            agent.position.y + agent.direction.y * agent.speed,
        )
        agent.heading = _heading_from_direction(agent.direction, agent.heading)
    else:
        jitter = world._rng.next_jitter(agent.factors.entropy)
        agent.position.update(agent.position.x + jitter.x, agent.position.y + jitter.y)

    if world._tick % steer.doodle_history_interval == 0:
        agent.record_position()


def seek(world: World, agent: Agent, target: Target) -> bool:
    """Steer one step toward `target`. Returns True when the step reached it."""
    steer = world._config.steering
    to_target = _safe_normalize_xy(target.position.x - agent.position.x, target.position.y - agent.position.y)
    agent.target_direction = to_target if to_target is not None else Vector2()
    ease_direction(agent, to_target, steer.ease)

    direction = agent.direction if agent.direction is not None else ZERO
    candidate = Vector2(
        agent.position.x + direction.x * agent.speed,
        agent.position.y + direction.y * agent.speed,
    )

    combined_radius = (agent.size + target.size) / 2.0
    if candidate.distance_squared_to(target.position) < combined_radius * combined_radius:
        lifecycle.reach(world, agent)
        _slide_off(world, agent, target)
        return True

    separation(
        world,
        agent,
        candidate,
        agent.size * steer.seek_separation_scale,
        steer.seek_slide_factor,
    )
    agent.position.update(candidate)
    agent.heading = _heading_from_direction(agent.direction, agent.heading)

    if world._tick % steer.seek_history_interval == 0:
        agent.record_position()
    return False


def _slide_off(world: World, agent: Agent, target: Target) -> None:
    steer = world._config.steering
    normal = _safe_normalize_xy(agent.position.x - target.position.x, agent.position.y - target.position.y)
    if normal is None:
        return
    jitter = world._rng.next_symmetric(steer.reach_slide_jitter)
    slide = _safe_normalize_xy(-normal.y + jitter, normal.x + jitter)
    if slide is None:
        return
    step = agent.speed * steer.reach_slide_factor
    agent.position.update(agent.position.x + slide.x * step, agent.position.y + slide.y * step)
