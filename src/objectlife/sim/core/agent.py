from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Optional, Tuple

from pygame.math import Vector2

from .resources import EntityKind


class AgentStatus(str, Enum):
    DOODLE = "doodle"
    MATE = "mate"
    EAT = "eat"
    WORK = "work"
    DEAD = "dead"


@dataclass(slots=True)
class AgentFactors:
    aging: float = 2.0
    sizing: float = 2.0
    hunger: float = 1.0
    entropy: float = 1.0
    work_threshold: float = 2.0


@dataclass(slots=True)
class Agent:
    id: int
    position: Vector2
    age: float
    size: float
    speed: float
    hunger: float
    max_age: float
    max_births: int
    status: AgentStatus = AgentStatus.DOODLE
    factors: AgentFactors = field(default_factory=AgentFactors)
    birth_count: int = 0
    ready_to_work: bool = True
    direction: Optional[Vector2] = None
    target_direction: Optional[Vector2] = None
    destination: Optional[int] = None
    heading: float = 0.0
    position_history: Deque[Tuple[float, float]] = field(default_factory=lambda: deque(maxlen=50))

    kind = EntityKind.AGENT

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @property
    def alive(self) -> bool:
        return self.status is not AgentStatus.DEAD

    @property
    def can_give_birth(self) -> bool:
        return self.birth_count < self.max_births

    @property
    def display_size(self) -> float:
        """Size drawn by renderers: grows with age and how well fed the agent is."""
        return self.size + (self.age / 10.0) * self.hunger * self.factors.sizing

    def record_position(self) -> None:
        self.position_history.append((self.position.x, self.position.y))
