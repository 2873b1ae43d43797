from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

Color = Tuple[int, int, int]

FOOD_SPARKLE_COLOR: Color = (134, 239, 172)
BIRTH_CONFETTI_COLOR: Color = (244, 114, 182)
SITE_PULSE_COLOR: Color = (251, 191, 36)
SITE_PRODUCTION_COLOR: Color = (164, 159, 213)


class EffectKind(str, Enum):
    FOOD_SPARKLE = "food_sparkle"
    BIRTH_CONFETTI = "birth_confetti"
    SITE_PULSE = "site_pulse"
    SITE_PRODUCTION = "site_production"


@dataclass(frozen=True, slots=True)
class EffectEvent:
    """Semantic feedback effect for the renderer.

    `strength` is a particle count for sparkles and confetti and a starting ring
    radius for pulses. `lifetime` is in frames. `inward` marks particles that
    collapse toward the point instead of bursting out of it.
    """

    kind: EffectKind
    x: float
    y: float
    color: Color
    strength: float
    lifetime: int
    inward: bool = False


def food_sparkle(x: float, y: float) -> EffectEvent:
    return EffectEvent(EffectKind.FOOD_SPARKLE, x, y, FOOD_SPARKLE_COLOR, strength=10, lifetime=20, inward=True)


def birth_confetti(x: float, y: float) -> EffectEvent:
    return EffectEvent(EffectKind.BIRTH_CONFETTI, x, y, BIRTH_CONFETTI_COLOR, strength=16, lifetime=28)


def site_pulse(x: float, y: float, agent_size: float) -> EffectEvent:
    return EffectEvent(EffectKind.SITE_PULSE, x, y, SITE_PULSE_COLOR, strength=agent_size * 2 + 20, lifetime=20)


def site_production(x: float, y: float, site_size: float, max_utility: float) -> EffectEvent:
    return EffectEvent(
        EffectKind.SITE_PRODUCTION,
        x,
        y,
        SITE_PRODUCTION_COLOR,
        strength=site_size * max_utility + 20,
        lifetime=35,
    )
