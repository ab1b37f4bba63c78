from __future__ import annotations

import math
from dataclasses import dataclass

from pygame.math import Vector2

from ...config import AgentConfig
from ..utils.math2d import (
    UNIT_X,
    _clamp_value,
    bearing,
    clamp_to_bounds,
    normalize_heading,
    rotate_by_angle,
    wrap_angle,
)
from .rng import DeterministicRng

AgentId = int

DEFAULT_AGENT_CONFIG = AgentConfig()


@dataclass(frozen=True, slots=True)
class AgentRelationship:
    """How a second agent appears from the point of view of a first one."""

    distance: float
    direction: float

    def is_visible(self, config: AgentConfig = DEFAULT_AGENT_CONFIG) -> bool:
        return abs(self.direction) <= config.field_of_view_half_angle

    def is_reachable(self, config: AgentConfig = DEFAULT_AGENT_CONFIG) -> bool:
        return self.distance <= config.range


@dataclass(frozen=True, slots=True)
class Agent:
    """Kinematic state of one player at one point in time.

    Agents are never modified; ``perform_movement`` returns a new one.
    ``heading`` is kept in ``[0, 2*pi)``.
    """

    position: Vector2
    heading: float

    @staticmethod
    def random(bounds: Vector2, rng: DeterministicRng) -> "Agent":
        position = Vector2(rng.next_range(0.0, bounds.x), rng.next_range(0.0, bounds.y))
        return Agent(position=position, heading=normalize_heading(rng.next_angle()))

    def copy(self) -> "Agent":
        return Agent(position=Vector2(self.position), heading=self.heading)

    def distance(self, other: "Agent") -> float:
        return self.position.distance_to(other.position)

    def viewing_angle(self, other: "Agent") -> float:
        if self.position == other.position:
            return 0.0
        return wrap_angle(bearing(self.position, other.position) - self.heading)

    def can_see(self, other: "Agent", config: AgentConfig = DEFAULT_AGENT_CONFIG) -> bool:
        return abs(self.viewing_angle(other)) <= config.field_of_view_half_angle

    def can_reach(self, other: "Agent", config: AgentConfig = DEFAULT_AGENT_CONFIG) -> bool:
        return self.distance(other) <= config.range

    def relate_to(self, other: "Agent") -> AgentRelationship:
        offset = other.position - self.position
        distance = math.hypot(offset.x, offset.y)
        if distance == 0.0:
            return AgentRelationship(distance=0.0, direction=0.0)
        direction = wrap_angle(math.atan2(offset.y, offset.x) - self.heading)
        return AgentRelationship(distance=distance, direction=direction)

    def perform_movement(
        self,
        bounds: Vector2,
        velocity: float,
        direction: float,
        config: AgentConfig = DEFAULT_AGENT_CONFIG,
    ) -> "Agent":
        speed = _clamp_value(velocity, 0.0, config.maximum_velocity)
        heading = normalize_heading(direction)
        movement = rotate_by_angle(UNIT_X, heading) * speed
        position = clamp_to_bounds(self.position + movement, bounds)
        return Agent(position=position, heading=heading)

    def __str__(self) -> str:
        return (
            f"Position: ({self.position.x:.2f}, {self.position.y:.2f}), "
            f"Heading: {math.degrees(self.heading):.2f}°"
        )
