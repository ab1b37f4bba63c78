from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class StepMetrics:
    iteration: int
    it: int
    previous_it: int
    tag_requests: int
    accepted_tags: int
    tagged: bool
    tick_duration_ms: float = 0.0
