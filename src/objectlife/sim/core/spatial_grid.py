from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple, Union

from pygame.math import Vector2

from .resources import EntityKind

if TYPE_CHECKING:
    from .agent import Agent
    from .resources import Food, Site

    Entity = Union[Agent, Food, Site]


_NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple((dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1))


class _Bucket:
    __slots__ = ("agents", "foods", "sites")

    def __init__(self) -> None:
        self.agents: List["Agent"] = []
        self.foods: List["Food"] = []
        self.sites: List["Site"] = []

    def clear(self) -> None:
        self.agents.clear()
        self.foods.clear()
        self.sites.clear()

    def entries(self, kind: EntityKind) -> List["Entity"]:
        if kind is EntityKind.AGENT:
            return self.agents
        if kind is EntityKind.FOOD:
            return self.foods
        return self.sites


class SpatialGrid:
    """Uniform grid bucketing agents, foods and sites by the cell they occupy.

    The grid is rebuilt from scratch every tick and only answers queries about
    the positions entities had when it was built.
    """

    def __init__(self, cell_size: float) -> None:
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self._cell_size = cell_size
        self._cells: Dict[Tuple[int, int], _Bucket] = {}
        self._active_keys: List[Tuple[int, int]] = []
        self._built = False

    @property
    def built(self) -> bool:
        return self._built

    def clear(self) -> None:
        for key in self._active_keys:
            self._cells[key].clear()
        self._active_keys.clear()
        self._built = False

    def rebuild(
        self,
        agents: Iterable["Agent"],
        foods: Iterable["Food"],
        sites: Iterable["Site"],
    ) -> None:
        self.clear()
        for agent in agents:
            self._bucket_for(agent.position).agents.append(agent)
        for food in foods:
            self._bucket_for(food.position).foods.append(food)
        for site in sites:
            self._bucket_for(site.position).sites.append(site)
        self._built = True

    def query_nearest(self, origin: "Entity", kind: EntityKind) -> Optional["Entity"]:
        """Closest live entity of `kind` in the 3x3 cells around `origin`, excluding `origin`."""
        if not self._built:
            return None
        base_x, base_y = self.cell_key(origin.position)
        origin_id = origin.id
        origin_x = origin.position.x
        origin_y = origin.position.y
        cells = self._cells
        nearest = None
        min_dist_sq = math.inf
        for dx, dy in _NEIGHBOR_OFFSETS:
            bucket = cells.get((base_x + dx, base_y + dy))
            if bucket is None:
                continue
            for item in bucket.entries(kind):
                if item.id == origin_id or not item.alive:
                    continue
                offset_x = item.position.x - origin_x
                offset_y = item.position.y - origin_y
                dist_sq = offset_x * offset_x + offset_y * offset_y
                if dist_sq < min_dist_sq:
                    min_dist_sq = dist_sq
                    nearest = item
        return nearest

    def occupied_cells(self) -> int:
        return len(self._active_keys)

    def cell_key(self, position: Vector2) -> Tuple[int, int]:
        return (int(math.floor(position.x / self._cell_size)), int(math.floor(position.y / self._cell_size)))

    def _bucket_for(self, position: Vector2) -> _Bucket:
        key = self.cell_key(position)
        bucket = self._cells.get(key)
        if bucket is None:
            bucket = _Bucket()
            self._cells[key] = bucket
            self._active_keys.append(key)
        elif not (bucket.agents or bucket.foods or bucket.sites):
            # Bucket exists but was cleared at the start of this tick; mark it active again.
            self._active_keys.append(key)
        return bucket


def nearest_linear(origin: "Entity", candidates: Iterable["Entity"]) -> Optional["Entity"]:
    """Full scan fallback with the same exclusion and tie-break rules as the grid query."""
    origin_id = origin.id
    origin_x = origin.position.x
    origin_y = origin.position.y
    nearest = None
    min_dist_sq = math.inf
    for item in candidates:
        if item.id == origin_id or not item.alive:
            continue
        offset_x = item.position.x - origin_x
        offset_y = item.position.y - origin_y
        dist_sq = offset_x * offset_x + offset_y * offset_y
        if dist_sq < min_dist_sq:
            min_dist_sq = dist_sq
            nearest = item
    return nearest
