import asyncio
import json

import pytest

from objectlife.app.server import SimulationController
from objectlife.sim.core.config import SimulationConfig


def test_snapshot_queue_ack_cleanup() -> None:
    controller = SimulationController(SimulationConfig())

    async def exercise() -> None:
        assert await controller.advance()
        assert await controller.advance()
        async with controller._queue_lock:
            queued_ticks = [item.tick for item in controller._snapshot_queue]
        assert queued_ticks == [1, 2]
        await controller.acknowledge(1)
        async with controller._queue_lock:
            remaining_ticks = [item.tick for item in controller._snapshot_queue]
        assert remaining_ticks == [2]

    asyncio.run(exercise())


def test_snapshot_payload_is_json() -> None:
    controller = SimulationController(SimulationConfig(seed=4))

    async def exercise() -> None:
        await controller.advance()

    asyncio.run(exercise())
    queued = controller._snapshot_queue[-1]
    payload = json.loads(queued.payload)

    assert payload["type"] == "snapshot"
    assert payload["tick"] == 1
    body = payload["payload"]
    assert body["metrics"]["tick"] == 1
    assert len(body["agents"]) == len(controller.world.agents)
    assert body["metadata"]["seed"] == 4
    for event in body["events"]:
        assert event["kind"] in {"food_sparkle", "birth_confetti", "site_pulse", "site_production"}


def test_broadcast_interval_skips_ticks() -> None:
    controller = SimulationController(SimulationConfig(), broadcast_interval=2)

    async def exercise() -> None:
        for _ in range(4):
            await controller.advance()

    asyncio.run(exercise())

    assert [item.tick for item in controller._snapshot_queue] == [2, 4]


def test_spawn_adds_entities_and_rejects_unknown_kinds() -> None:
    controller = SimulationController(SimulationConfig(initial_sites=0))

    async def exercise() -> None:
        site_id = await controller.spawn("site", 10, 20)
        assert controller.world.resolve(site_id) is controller.world.sites[0]
        with pytest.raises(ValueError):
            await controller.spawn("tree", 0, 0)

    asyncio.run(exercise())


def test_advance_stops_the_clock_when_over() -> None:
    controller = SimulationController(SimulationConfig(initial_agents=0))
    controller.running = True

    async def exercise() -> bool:
        return await controller.advance()

    assert asyncio.run(exercise()) is False
    assert controller.running is False
    assert [item.tick for item in controller._snapshot_queue] == [1]


def test_reset_clears_queue_and_rewinds() -> None:
    controller = SimulationController(SimulationConfig())

    async def exercise() -> None:
        for _ in range(3):
            await controller.advance()
        await controller.reset()

    asyncio.run(exercise())

    assert controller.tick == 0
    assert [item.tick for item in controller._snapshot_queue] == [0]


def test_spawn_rejects_non_finite_coordinates_and_keeps_ticking() -> None:
    controller = SimulationController(SimulationConfig(initial_foods=0))

    async def exercise() -> None:
        with pytest.raises(ValueError):
            await controller.spawn("food", float("nan"), 10)
        with pytest.raises(ValueError):
            await controller.spawn("site", 10, float("inf"))
        assert await controller.advance()

    asyncio.run(exercise())

    assert controller.world.foods == []
    assert controller.tick == 1
