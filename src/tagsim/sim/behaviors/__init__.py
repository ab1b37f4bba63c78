from __future__ import annotations

from functools import partial
from typing import Callable, Dict

from ...errors import ConfigurationError
from .base import Behavior, Operation
from .chasing import ChasingBehavior
from .default import DefaultBehavior
from .runaway import RunawayBehavior

BehaviorFactory = Callable[[], Behavior]

BEHAVIORS: Dict[str, BehaviorFactory] = {
    "default": DefaultBehavior,
    "chasing": ChasingBehavior,
    "runaway": RunawayBehavior,
    "runaway-fickle": partial(RunawayBehavior, remember_direction=False),
}


def behavior_factory(name: str) -> BehaviorFactory:
    try:
        return BEHAVIORS[name.lower().strip()]
    except KeyError:
        raise ConfigurationError("behavior", f"unknown behavior '{name}', expected one of {sorted(BEHAVIORS)}") from None


__all__ = [
    "BEHAVIORS",
    "Behavior",
    "BehaviorFactory",
    "ChasingBehavior",
    "DefaultBehavior",
    "Operation",
    "RunawayBehavior",
    "behavior_factory",
]
