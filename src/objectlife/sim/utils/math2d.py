from __future__ import annotations

import math

from pygame.math import Vector2

ZERO = Vector2()

_EPSILON_SQ = 1e-18


def _safe_normalize(vector: Vector2) -> Vector2 | None:
    return _safe_normalize_xy(vector.x, vector.y)


def _safe_normalize_xy(x: float, y: float) -> Vector2 | None:
    magnitude_sq = x * x + y * y
    if magnitude_sq <= _EPSILON_SQ:
        return None
    inv = 1.0 / math.sqrt(magnitude_sq)
    return Vector2(x * inv, y * inv)


def _perpendicular_unit(x: float, y: float) -> Vector2 | None:
    # Left-hand perpendicular of (x, y), i.e. (-y, x), normalized.
    return _safe_normalize_xy(-y, x)


def _heading_from_direction(vector: Vector2 | None, fallback: float = 0.0) -> float:
    if vector is None or vector.length_squared() < 1e-12:
        return fallback
    return math.atan2(vector.y, vector.x)


def _is_finite_vector(vector: Vector2) -> bool:
    return math.isfinite(vector.x) and math.isfinite(vector.y)
