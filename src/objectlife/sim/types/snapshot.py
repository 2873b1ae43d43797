from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from .events import EffectEvent
from .metrics import TickMetrics


@dataclass(slots=True)
class Snapshot:
    tick: int
    elapsed_ticks: int
    is_over: bool
    metrics: TickMetrics
    agents: List[Dict[str, Any]]
    foods: List[Dict[str, Any]]
    sites: List[Dict[str, Any]]
    events: List[EffectEvent]
    world: "SnapshotWorld"
    metadata: "SnapshotMetadata"


@dataclass(slots=True)
class SnapshotWorld:
    width: float
    height: float


@dataclass(slots=True)
class SnapshotMetadata:
    arena_width: float
    arena_height: float
    frame_rate: float
    seed: int
    draw_paths: bool
    config_version: str
