from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.agent import AgentId
from ..core.rng import DeterministicRng
from ..core.world_view import WorldView

TURN_STEP = math.radians(10.0)
SCAN_TURN = math.radians(20.0)


@dataclass(frozen=True, slots=True)
class Operation:
    direction: float
    velocity: float
    tag: Optional[AgentId] = None


class Behavior(ABC):
    """Decides how one agent moves, and whom it tags, on every step.

    The world keeps one instance per agent, so implementations may keep
    state between steps. ``perform_step`` must always return an
    ``Operation``; tag requests the world cannot validate are dropped.
    """

    @abstractmethod
    def perform_step(self, world_view: WorldView) -> Operation:
        raise NotImplementedError


def random_turn(rng: DeterministicRng) -> float:
    # one of -10, 0, 10 or 20 degrees, so agents drift to one side and leave walls
    return TURN_STEP * rng.next_int_inclusive(-1, 2)


def wander(world_view: WorldView) -> Operation:
    return Operation(
        direction=world_view.our_agent().heading + random_turn(world_view.rng),
        velocity=world_view.config.maximum_velocity,
    )


def catch_reachable(world_view: WorldView, direction: float) -> Optional[Operation]:
    previous_it = world_view.previous_it()
    for agent_id in world_view.reachable_agents():
        if agent_id != previous_it:
            return Operation(
                direction=direction,
                velocity=world_view.config.maximum_velocity,
                tag=agent_id,
            )
    return None


def chase_nearest(world_view: WorldView) -> Optional[Tuple[Operation, AgentId]]:
    previous_it = world_view.previous_it()
    nearest_id: Optional[AgentId] = None
    nearest_distance = math.inf
    for agent_id, relationship in world_view.visible_agents().items():
        if agent_id == previous_it:
            continue
        # strict comparison keeps the lowest id on ties
        if relationship.distance < nearest_distance:
            nearest_id = agent_id
            nearest_distance = relationship.distance
    if nearest_id is None:
        return None
    return chase(world_view, nearest_id), nearest_id


def chase(world_view: WorldView, target: AgentId) -> Operation:
    relationship = world_view.visible_agents()[target]
    return Operation(
        direction=world_view.our_agent().heading + relationship.direction,
        velocity=world_view.config.maximum_velocity,
    )


def scan_in_place(world_view: WorldView) -> Operation:
    return Operation(direction=world_view.our_agent().heading + SCAN_TURN, velocity=0.0)
