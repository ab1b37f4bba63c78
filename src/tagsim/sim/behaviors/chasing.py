from __future__ import annotations

from typing import Optional

from ..core.agent import AgentId
from ..core.world_view import WorldView
from .base import Behavior, Operation, catch_reachable, chase, chase_nearest, random_turn, scan_in_place
from .default import DefaultBehavior


class ChasingBehavior(Behavior):
    """Like ``DefaultBehavior``, but keeps following the same target while it stays in sight."""

    def __init__(self) -> None:
        self.chasing: Optional[AgentId] = None
        self._fallback = DefaultBehavior()

    def perform_step(self, world_view: WorldView) -> Operation:
        if world_view.our_id() != world_view.current_it():
            return self._fallback.perform_step(world_view)

        heading = world_view.our_agent().heading
        operation = catch_reachable(world_view, heading + random_turn(world_view.rng))
        if operation is not None:
            self.chasing = None
            return operation

        if self.chasing is not None and self.chasing in world_view.visible_agents():
            return chase(world_view, self.chasing)

        chased = chase_nearest(world_view)
        if chased is not None:
            operation, self.chasing = chased
            return operation

        return scan_in_place(world_view)
