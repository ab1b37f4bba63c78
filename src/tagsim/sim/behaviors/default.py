from __future__ import annotations

from ..core.world_view import WorldView
from .base import Behavior, Operation, catch_reachable, chase_nearest, random_turn, scan_in_place, wander


class DefaultBehavior(Behavior):
    """Stateless behavior.

    When not "it", wander at full speed with a drift to one side. When "it",
    tag the first reachable agent, otherwise head for the nearest visible
    one, otherwise turn on the spot to look around. The previous "it" is
    never targeted.
    """

    def perform_step(self, world_view: WorldView) -> Operation:
        if world_view.our_id() != world_view.current_it():
            return wander(world_view)
        return self.perform_it_step(world_view)

    def perform_it_step(self, world_view: WorldView) -> Operation:
        heading = world_view.our_agent().heading
        operation = catch_reachable(world_view, heading + random_turn(world_view.rng))
        if operation is not None:
            return operation

        chased = chase_nearest(world_view)
        if chased is not None:
            return chased[0]

        return scan_in_place(world_view)
