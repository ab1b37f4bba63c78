from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from pygame.math import Vector2

from ...config import AgentConfig
from .agent import Agent, AgentId, AgentRelationship
from .rng import DeterministicRng

if TYPE_CHECKING:
    from .world import World


class WorldView:
    """The world as seen by one agent during one step.

    A view is built for a single agent's step and must not be kept around
    afterwards: it reads the live roster of the world, which is replaced
    when the step is committed. Visible and reachable agents are computed on
    first access and cached for the lifetime of the view.
    """

    def __init__(self, world: World, our_id: AgentId, rng: DeterministicRng):
        self._world = world
        self._our_id = our_id
        self._our_agent = world.agents[our_id]
        self._rng = rng
        self._visible_agents: Optional[Dict[AgentId, AgentRelationship]] = None
        self._reachable_agents: Optional[Dict[AgentId, AgentRelationship]] = None

    def our_id(self) -> AgentId:
        return self._our_id

    def our_agent(self) -> Agent:
        return self._our_agent

    def current_it(self) -> AgentId:
        return self._world.it

    def previous_it(self) -> AgentId:
        return self._world.previous_it

    @property
    def bounds(self) -> Vector2:
        return self._world.bounds

    @property
    def config(self) -> AgentConfig:
        return self._world.config

    @property
    def rng(self) -> DeterministicRng:
        return self._rng

    def visible_agents(self) -> Dict[AgentId, AgentRelationship]:
        if self._visible_agents is None:
            config = self._world.config
            visible: Dict[AgentId, AgentRelationship] = {}
            for other_id, other in enumerate(self._world.agents):
                if other_id == self._our_id:
                    continue
                relationship = self._our_agent.relate_to(other)
                if relationship.is_visible(config):
                    visible[other_id] = relationship
            self._visible_agents = visible
        return self._visible_agents

    def reachable_agents(self) -> Dict[AgentId, AgentRelationship]:
        if self._reachable_agents is None:
            config = self._world.config
            self._reachable_agents = {
                other_id: relationship
                for other_id, relationship in self.visible_agents().items()
                if relationship.is_reachable(config)
            }
        return self._reachable_agents
