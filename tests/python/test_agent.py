from __future__ import annotations

from pygame.math import Vector2
from pytest import approx

from objectlife.sim.core.agent import Agent, AgentFactors, AgentStatus
from objectlife.sim.core.config import SimulationConfig
from objectlife.sim.core.world import World


def _make_agent(agent_id: int) -> Agent:
    return Agent(
        id=agent_id,
        position=Vector2(),
        age=10.0,
        size=30.0,
        speed=5.0,
        hunger=0.5,
        max_age=100.0,
        max_births=3,
    )


def test_agent_and_factors_use_slots_and_isolate_defaults():
    agent_a = _make_agent(1)
    agent_b = _make_agent(2)

    assert not hasattr(agent_a, "__dict__")
    assert not hasattr(AgentFactors(), "__dict__")
    assert hasattr(Agent, "__slots__")

    assert agent_a.factors is not agent_b.factors
    agent_a.factors.entropy = 4.0
    assert agent_b.factors.entropy == 1.0
    assert agent_a.position_history is not agent_b.position_history


def test_new_agent_doodles_with_no_direction():
    agent = _make_agent(1)

    assert agent.status is AgentStatus.DOODLE
    assert agent.direction is None
    assert agent.destination is None
    assert agent.ready_to_work
    assert agent.alive


def test_display_size_grows_with_age_and_hunger():
    agent = _make_agent(1)
    agent.age = 40.0
    agent.hunger = 1.5

    assert agent.display_size == approx(30.0 + 4.0 * 1.5 * 2.0)


def test_birth_capacity_follows_birth_count():
    agent = _make_agent(1)
    agent.max_births = 1

    assert agent.can_give_birth
    agent.birth_count = 1
    assert not agent.can_give_birth


def test_position_history_is_bounded():
    config = SimulationConfig(initial_agents=0, initial_foods=0, initial_sites=0, path_history_limit=3)
    world = World(config)
    agent = world.spawn_agent(0.0, 0.0)

    for step in range(5):
        agent.position.update(step, step)
        agent.record_position()

    assert list(agent.position_history) == [(2.0, 2.0), (3.0, 3.0), (4.0, 4.0)]


def test_dead_status_is_not_alive():
    agent = _make_agent(1)
    agent.status = AgentStatus.DEAD

    assert not agent.alive
