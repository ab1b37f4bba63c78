from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .errors import ConfigurationError


@dataclass(frozen=True)
class AgentConfig:
    field_of_view_degrees: float = 200.0
    maximum_velocity: float = 5.0
    range: float = 10.0

    @property
    def field_of_view_half_angle(self) -> float:
        return math.radians(self.field_of_view_degrees) / 2.0


@dataclass
class ViewerConfig:
    kind: str = "command-line"
    print_interval_seconds: float = 1.0
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class SimulationConfig:
    iterations: int = 10000
    width: float = 500.0
    height: float = 500.0
    agent_count: int = 10
    behavior: str = "default"
    delay_milliseconds: int = 50
    parallel: bool = False
    max_workers: Optional[int] = None
    seed: Optional[int] = None
    agent: AgentConfig = field(default_factory=AgentConfig)
    viewer: ViewerConfig = field(default_factory=ViewerConfig)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(str(path), "top level of a config file must be a mapping")
        return load_config(data)


def _checked_values(cls: type, raw: Any, section: str) -> dict:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(section, "must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(section, f"unknown keys {', '.join(unknown)}")
    return dict(raw)


def load_config(raw: dict) -> SimulationConfig:
    agent = AgentConfig(**_checked_values(AgentConfig, raw.get("agent"), "agent"))
    viewer = ViewerConfig(**_checked_values(ViewerConfig, raw.get("viewer"), "viewer"))
    sim_values = _checked_values(
        SimulationConfig, {k: v for k, v in raw.items() if k not in {"agent", "viewer"}}, "simulation"
    )
    config = SimulationConfig(agent=agent, viewer=viewer, **sim_values)
    if config.agent.maximum_velocity < 0:
        raise ConfigurationError("agent.maximum_velocity", "must not be negative")
    if config.agent.range < 0:
        raise ConfigurationError("agent.range", "must not be negative")
    if not 0.0 <= config.agent.field_of_view_degrees <= 360.0:
        raise ConfigurationError("agent.field_of_view_degrees", "must be within [0, 360]")
    return config
