from __future__ import annotations

import logging
import math
from collections import deque
from time import perf_counter
from typing import Any, Dict, List, Optional, Union

from pygame.math import Vector2

from .agent import Agent, AgentFactors, AgentStatus
from .config import SimulationConfig
from .resources import EntityKind, Food, Site
from .rng import DeterministicRng
from .spatial_grid import SpatialGrid, nearest_linear
from ..systems import lifecycle, metrics as metrics_system, resources, steering
from ..types.events import EffectEvent
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata, SnapshotWorld
from ..utils.math2d import _is_finite_vector

logger = logging.getLogger(__name__)

Entity = Union[Agent, Food, Site]


def _require_finite(x: float, y: float) -> None:
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"spawn position must be finite, got ({x}, {y})")


class World:
    """Owns the live agents, foods and sites and advances them one tick at a time.

    Membership only changes here: spawns append, and dead agents, reached food
    and exhausted sites are swept after the pass that marked them. Children born
    during a tick join the population once the agent pass is over.
    """

    def __init__(self, config: SimulationConfig):
        self._config = config
        self._rng = DeterministicRng(config.seed)
        self._grid = SpatialGrid(config.cell_size)
        self._agents: List[Agent] = []
        self._foods: List[Food] = []
        self._sites: List[Site] = []
        self._birth_queue: List[Agent] = []
        self._registry: Dict[int, Entity] = {}
        self._events: List[EffectEvent] = []
        self._next_id = 0
        self._tick = 0
        self._metrics: TickMetrics | None = None
        self._over_reported = False
        self._reset_tallies()
        lifecycle.seed_population(self)

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def agents(self) -> List[Agent]:
        return self._agents

    @property
    def foods(self) -> List[Food]:
        return self._foods

    @property
    def sites(self) -> List[Site]:
        return self._sites

    @property
    def events(self) -> List[EffectEvent]:
        return self._events

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    @property
    def elapsed_ticks(self) -> int:
        return self._tick

    @property
    def is_over(self) -> bool:
        return (not self._foods and not self._sites) or not self._agents

    def reset(self) -> None:
        self._agents.clear()
        self._foods.clear()
        self._sites.clear()
        self._birth_queue.clear()
        self._registry.clear()
        self._events.clear()
        self._grid.clear()
        self._rng.reset()
        self._next_id = 0
        self._tick = 0
        self._metrics = None
        self._over_reported = False
        self._reset_tallies()
        lifecycle.seed_population(self)

    def spawn_agent(self, x: float, y: float) -> Agent:
        _require_finite(x, y)
        species = self._config.agent
        agent = self._create_agent(
            x,
            y,
            size=species.initial_size,
            hunger=species.initial_hunger,
            factors=AgentFactors(
                aging=species.aging_factor,
                sizing=species.sizing_factor,
                hunger=species.hunger_factor,
                entropy=species.entropy_factor,
                work_threshold=species.work_threshold,
            ),
            max_age=species.max_age,
            max_births=species.max_births,
        )
        self._add(self._agents, agent)
        return agent

    def spawn_food(self, x: float, y: float) -> Food:
        _require_finite(x, y)
        resources_config = self._config.resources
        food = Food(
            id=self._allocate_id(),
            position=Vector2(x, y),
            utility=self._rng.next_range(resources_config.min_food_utility, resources_config.max_utility),
            size=resources_config.food_size,
        )
        self._add(self._foods, food)
        return food

    def spawn_site(self, x: float, y: float) -> Site:
        _require_finite(x, y)
        resources_config = self._config.resources
        site = Site(
            id=self._allocate_id(),
            position=Vector2(x, y),
            utility=resources_config.max_utility * 2,
            size=resources_config.site_size,
        )
        self._add(self._sites, site)
        return site

    def spawn(self, kind: Union[EntityKind, str], x: float, y: float) -> Entity:
        kind = EntityKind(kind)
        if kind is EntityKind.AGENT:
            return self.spawn_agent(x, y)
        if kind is EntityKind.FOOD:
            return self.spawn_food(x, y)
        return self.spawn_site(x, y)

    def resolve(self, handle: Optional[int]) -> Optional[Entity]:
        """Look up a live entity by handle; consumed, dead or unknown handles give None."""
        if handle is None:
            return None
        entity = self._registry.get(handle)
        if entity is None or not entity.alive:
            return None
        return entity

    def find_nearest(self, agent: Agent, kind: EntityKind) -> Optional[Entity]:
        found = self._grid.query_nearest(agent, kind) if self._grid.built else None
        if found is None:
            found = nearest_linear(agent, self._collection(kind))
        return found

    def step(self) -> TickMetrics:
        start = perf_counter()
        self._tick += 1
        tick = self._tick
        config = self._config
        self._events.clear()
        self._reset_tallies()

        self._grid.rebuild(self._agents, self._foods, self._sites)
        periodic = tick % config.lifecycle_interval == 0

        for agent in self._agents:
            if not agent.alive:
                continue
            lifecycle.update_status(agent, len(self._foods), len(self._agents))
            self._dispatch(agent)
            if periodic and agent.alive:
                lifecycle.apply_periodic_updates(self, agent)
            assert _is_finite_vector(agent.position), f"agent {agent.id} position is not finite: {agent.position}"
            assert math.isfinite(agent.hunger), f"agent {agent.id} hunger is not finite: {agent.hunger}"

        deaths = self._remove_dead()
        self._remove_reached_food()
        for site in self._sites:
            self._foods_produced += resources.update_site(self, site)
        self._remove_exhausted_sites()
        births = self._apply_births()

        is_over = self.is_over
        if not is_over:
            self._over_reported = False
        elif not self._over_reported:
            self._over_reported = True
            logger.info(
                "simulation over at tick %d: agents=%d foods=%d sites=%d",
                tick,
                len(self._agents),
                len(self._foods),
                len(self._sites),
            )

        elapsed_ms = (perf_counter() - start) * 1000.0
        metrics = metrics_system.create_metrics(
            tick,
            births,
            deaths,
            self._foods_eaten,
            self._foods_produced,
            self._site_visits,
            len(self._foods),
            len(self._sites),
            self._grid.occupied_cells(),
            is_over,
            elapsed_ms,
            metrics_system.population_stats(self._agents),
        )
        self._metrics = metrics
        return metrics

    def snapshot(self) -> Snapshot:
        metrics = self._metrics if self._metrics is not None else self._snapshot_metrics_from_state()
        config = self._config
        metadata = SnapshotMetadata(
            arena_width=config.arena_width,
            arena_height=config.arena_height,
            frame_rate=config.frame_rate,
            seed=config.seed,
            draw_paths=config.draw_paths,
            config_version=config.config_version,
        )
        return Snapshot(
            tick=self._tick,
            elapsed_ticks=self.elapsed_ticks,
            is_over=self.is_over,
            metrics=metrics,
            agents=[self._agent_snapshot(agent) for agent in self._agents if agent.alive],
            foods=[self._food_snapshot(food) for food in self._foods],
            sites=[self._site_snapshot(site) for site in self._sites],
            events=list(self._events),
            world=SnapshotWorld(width=config.arena_width, height=config.arena_height),
            metadata=metadata,
        )

    def _dispatch(self, agent: Agent) -> None:
        status = agent.status
        if status is AgentStatus.DOODLE:
            steering.doodle(self, agent)
        elif status is AgentStatus.MATE:
            if not self._seek(agent, EntityKind.AGENT):
                agent.status = AgentStatus.DOODLE
                steering.doodle(self, agent)
        elif status is AgentStatus.WORK:
            self._work(agent)
        elif status is AgentStatus.EAT:
            if not self._seek(agent, EntityKind.FOOD):
                agent.status = AgentStatus.WORK
                self._work(agent)
        elif status is AgentStatus.DEAD:
            pass
        else:
            raise AssertionError(f"unhandled agent status: {status!r}")

    def _work(self, agent: Agent) -> None:
        if not self._seek(agent, EntityKind.SITE):
            agent.status = AgentStatus.DOODLE
            steering.doodle(self, agent)

    def _seek(self, agent: Agent, kind: EntityKind) -> bool:
        target = self.find_nearest(agent, kind)
        if target is None:
            agent.destination = None
            return False
        agent.destination = target.id
        steering.seek(self, agent, target)
        return True

    def _create_agent(
        self,
        x: float,
        y: float,
        *,
        size: float,
        hunger: float,
        factors: AgentFactors,
        max_age: float,
        max_births: int,
    ) -> Agent:
        species = self._config.agent
        return Agent(
            id=self._allocate_id(),
            position=Vector2(x, y),
            age=species.initial_age,
            size=size,
            speed=species.initial_speed,
            hunger=hunger,
            max_age=max_age,
            max_births=max_births,
            status=AgentStatus.DOODLE,
            factors=factors,
            position_history=deque(maxlen=self._config.path_history_limit),
        )

    def _allocate_id(self) -> int:
        entity_id = self._next_id
        self._next_id += 1
        return entity_id

    def _add(self, collection: List[Any], entity: Entity) -> None:
        collection.append(entity)
        self._registry[entity.id] = entity

    def _collection(self, kind: EntityKind) -> List[Any]:
        if kind is EntityKind.AGENT:
            return self._agents
        if kind is EntityKind.FOOD:
            return self._foods
        return self._sites

    def _emit(self, event: EffectEvent) -> None:
        self._events.append(event)

    def _reset_tallies(self) -> None:
        self._foods_eaten = 0
        self._foods_produced = 0
        self._site_visits = 0

    def _apply_births(self) -> int:
        births = len(self._birth_queue)
        for agent in self._birth_queue:
            self._add(self._agents, agent)
        self._birth_queue.clear()
        return births

    def _remove_dead(self) -> int:
        survivors = []
        for agent in self._agents:
            if agent.alive:
                survivors.append(agent)
            else:
                self._registry.pop(agent.id, None)
                logger.debug(
                    "agent %d died at tick %d (age=%.1f, hunger=%.2f)", agent.id, self._tick, agent.age, agent.hunger
                )
        deaths = len(self._agents) - len(survivors)
        self._agents = survivors
        return deaths

    def _remove_reached_food(self) -> None:
        remaining = []
        for food in self._foods:
            if food.alive:
                remaining.append(food)
            else:
                self._registry.pop(food.id, None)
        self._foods = remaining

    def _remove_exhausted_sites(self) -> None:
        remaining = []
        for site in self._sites:
            if site.alive:
                remaining.append(site)
            else:
                self._registry.pop(site.id, None)
                logger.debug("site %d exhausted at tick %d", site.id, self._tick)
        self._sites = remaining

    def _agent_snapshot(self, agent: Agent) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": agent.id,
            "x": agent.position.x,
            "y": agent.position.y,
            "size": agent.size,
            "display_size": agent.display_size,
            "status": agent.status.value,
            "age": agent.age,
            "max_age": agent.max_age,
            "hunger": agent.hunger,
            "heading": agent.heading,
        }
        if self._config.draw_paths:
            payload["history"] = [list(point) for point in agent.position_history]
        return payload

    @staticmethod
    def _food_snapshot(food: Food) -> Dict[str, Any]:
        return {
            "id": food.id,
            "x": food.position.x,
            "y": food.position.y,
            "size": food.size,
            "utility": food.utility,
            "status": food.status.value if food.status is not None else None,
        }

    @staticmethod
    def _site_snapshot(site: Site) -> Dict[str, Any]:
        return {
            "id": site.id,
            "x": site.position.x,
            "y": site.position.y,
            "size": site.size,
            "utility": site.utility,
            "work_done": site.work_done,
        }

    def _snapshot_metrics_from_state(self) -> TickMetrics:
        return metrics_system.create_metrics(
            self._tick,
            0,
            0,
            0,
            0,
            0,
            len(self._foods),
            len(self._sites),
            0,
            self.is_over,
            0.0,
            metrics_system.population_stats(self._agents),
        )
