from __future__ import annotations

import math

from pygame.math import Vector2

TAU = 2.0 * math.pi
UNIT_X = Vector2(1.0, 0.0)


def wrap_angle(angle: float) -> float:
    """Map ``angle`` into ``(-pi, pi]``."""
    wrapped = math.fmod(angle + math.pi, TAU)
    if wrapped <= 0.0:
        wrapped += TAU
    return wrapped - math.pi


def normalize_heading(angle: float) -> float:
    """Map ``angle`` into ``[0, 2*pi)``."""
    heading = angle % TAU
    # tiny negative inputs round up to exactly TAU
    if heading >= TAU:
        return 0.0
    return heading


def rotate_by_angle(vector: Vector2, angle: float) -> Vector2:
    return vector.rotate_rad(angle)


def bearing(origin: Vector2, target: Vector2) -> float:
    return math.atan2(target.y - origin.y, target.x - origin.x)


def _clamp_value(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def clamp_to_bounds(position: Vector2, bounds: Vector2) -> Vector2:
    return Vector2(
        _clamp_value(position.x, 0.0, bounds.x),
        _clamp_value(position.y, 0.0, bounds.y),
    )
