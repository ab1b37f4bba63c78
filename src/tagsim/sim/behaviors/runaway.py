from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from ..core.rng import DeterministicRng
from ..core.world_view import WorldView
from .base import Behavior, Operation, wander
from .default import DefaultBehavior


class RunawayDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @staticmethod
    def random(rng: DeterministicRng) -> "RunawayDirection":
        return RunawayDirection.LEFT if rng.next_bool(0.5) else RunawayDirection.RIGHT

    def angle(self) -> float:
        return math.radians(90.0) if self is RunawayDirection.LEFT else math.radians(-90.0)


class RunawayBehavior(Behavior):
    """Flees sideways from "it" whenever "it" is in sight.

    With ``remember_direction`` the side is picked once and kept for the rest
    of the game; otherwise a coin is flipped on every escape.
    """

    def __init__(self, remember_direction: bool = True) -> None:
        self.remember_direction = remember_direction
        self.runaway_direction: Optional[RunawayDirection] = None
        self._it_behavior = DefaultBehavior()

    def perform_step(self, world_view: WorldView) -> Operation:
        if world_view.our_id() == world_view.current_it():
            return self._it_behavior.perform_it_step(world_view)

        operation = self.run_away(world_view)
        if operation is not None:
            return operation
        return wander(world_view)

    def run_away(self, world_view: WorldView) -> Optional[Operation]:
        # the previous "it" cannot be tagged back right away
        if world_view.our_id() == world_view.previous_it():
            return None

        it_relationship = world_view.visible_agents().get(world_view.current_it())
        if it_relationship is None:
            return None

        return Operation(
            direction=world_view.our_agent().heading + it_relationship.direction + self._pick_direction(world_view).angle(),
            velocity=world_view.config.maximum_velocity,
        )

    def _pick_direction(self, world_view: WorldView) -> RunawayDirection:
        if not self.remember_direction:
            return RunawayDirection.random(world_view.rng)
        if self.runaway_direction is None:
            self.runaway_direction = RunawayDirection.random(world_view.rng)
        return self.runaway_direction
