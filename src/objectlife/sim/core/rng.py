from __future__ import annotations

import random
from typing import Sequence, TypeVar

from pygame.math import Vector2

T = TypeVar("T")


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_float(self) -> float:
        return self._random.random()

    def next_range(self, low: float, high: float) -> float:
        return self._random.uniform(low, high)

    def next_symmetric(self, magnitude: float) -> float:
        return self._random.uniform(-magnitude, magnitude)

    def next_jitter(self, magnitude: float) -> Vector2:
        return Vector2(self.next_symmetric(magnitude), self.next_symmetric(magnitude))

    def next_point(self, width: float, height: float) -> Vector2:
        return Vector2(self._random.uniform(0.0, width), self._random.uniform(0.0, height))

    def sample_choice(self, items: Sequence[T]) -> T:
        return self._random.choice(items)
