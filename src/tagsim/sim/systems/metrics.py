from __future__ import annotations

from typing import Sequence

from ..types.metrics import StepMetrics


def create_metrics(
    iteration: int,
    it: int,
    previous_it: int,
    tag_requests: Sequence[bool],
    accepted_tags: Sequence[bool],
    tagged: bool,
    duration_ms: float,
) -> StepMetrics:
    return StepMetrics(
        iteration=iteration,
        it=it,
        previous_it=previous_it,
        tag_requests=sum(1 for requested in tag_requests if requested),
        accepted_tags=sum(1 for accepted in accepted_tags if accepted),
        tagged=tagged,
        tick_duration_ms=duration_ms,
    )
