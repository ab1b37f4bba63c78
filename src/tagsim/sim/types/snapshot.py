from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from pygame.math import Vector2

from ..core.agent import Agent, AgentId


@dataclass(frozen=True, slots=True)
class WorldSnapshot:
    iteration: int
    it: AgentId
    previous_it: AgentId
    agents: Tuple[Agent, ...]
    bounds: Vector2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iteration": self.iteration,
            "it": self.it,
            "previous_it": self.previous_it,
            "bounds": {"width": self.bounds.x, "height": self.bounds.y},
            "agents": [_agent_payload(agent_id, agent) for agent_id, agent in enumerate(self.agents)],
        }


def _agent_payload(agent_id: AgentId, agent: Agent) -> Dict[str, float]:
    return {
        "id": agent_id,
        "x": agent.position.x,
        "y": agent.position.y,
        "heading": agent.heading,
        "heading_degrees": math.degrees(agent.heading),
    }
