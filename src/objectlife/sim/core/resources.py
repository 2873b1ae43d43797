from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pygame.math import Vector2


class EntityKind(str, Enum):
    AGENT = "agent"
    FOOD = "food"
    SITE = "site"


class FoodStatus(str, Enum):
    REACHED = "reached"


@dataclass(slots=True)
class Food:
    id: int
    position: Vector2
    utility: float
    size: float = 10.0
    status: Optional[FoodStatus] = None

    kind = EntityKind.FOOD

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @property
    def alive(self) -> bool:
        return self.status is not FoodStatus.REACHED

    def mark_reached(self) -> None:
        self.status = FoodStatus.REACHED


@dataclass(slots=True)
class Site:
    id: int
    position: Vector2
    utility: int
    size: float = 10.0
    work_done: int = 0

    kind = EntityKind.SITE

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @property
    def alive(self) -> bool:
        return self.utility != 0

    def record_work(self) -> None:
        self.work_done += 1
