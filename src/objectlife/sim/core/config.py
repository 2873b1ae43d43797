from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class AgentConfig:
    initial_speed: float = 5.0
    initial_age: float = 10.0
    initial_size: float = 30.0
    initial_hunger: float = 0.5
    max_age: float = 100.0
    max_births: int = 3
    aging_factor: float = 2.0
    sizing_factor: float = 2.0
    hunger_factor: float = 1.0
    # Randomness used by wander jitter, birth offsets and initial directions
    entropy_factor: float = 1.0
    # Food-per-agent ratio below which fed agents go to work
    work_threshold: float = 2.0


@dataclass
class ResourceConfig:
    food_size: float = 10.0
    site_size: float = 10.0
    min_food_utility: float = 0.5
    # Upper bound of food utility; sites start with twice this utility
    max_utility: int = 3
    work_quota: int = 5
    site_infinite: bool = False


@dataclass
class SteeringConfig:
    ease: float = 0.15
    seek_separation_scale: float = 1.25
    seek_slide_factor: float = 0.3
    doodle_separation_scale: float = 1.5
    doodle_slide_factor: float = 0.2
    reach_slide_factor: float = 0.3
    reach_slide_jitter: float = 0.1
    seek_history_interval: int = 10
    doodle_history_interval: int = 5


@dataclass
class SimulationConfig:
    frame_rate: float = 30.0
    arena_width: float = 1280.0
    arena_height: float = 720.0
    cell_size: float = 96.0
    lifecycle_interval: int = 60
    initial_agents: int = 20
    initial_foods: int = 20
    initial_sites: int = 2
    draw_paths: bool = True
    path_history_limit: int = 50
    seed: int = 42
    config_version: str = "v1"
    agent: AgentConfig = field(default_factory=AgentConfig)
    resources: ResourceConfig = field(default_factory=ResourceConfig)
    steering: SteeringConfig = field(default_factory=SteeringConfig)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


def load_config(raw: dict) -> SimulationConfig:
    agent = AgentConfig(**raw.get("agent", {}))
    resources = ResourceConfig(**raw.get("resources", {}))
    steering = SteeringConfig(**raw.get("steering", {}))
    sim_values = {k: v for k, v in raw.items() if k not in {"agent", "resources", "steering"}}
    return SimulationConfig(agent=agent, resources=resources, steering=steering, **sim_values)
