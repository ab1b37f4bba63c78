from __future__ import annotations

import logging
import math
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from time import perf_counter
from typing import Callable, List, Optional, Sequence, Tuple, Union

from pygame.math import Vector2

from ...config import AgentConfig
from ...errors import ConfigurationError, SimulationStateError
from ..behaviors.base import Behavior
from ..systems import metrics as metrics_system
from ..types.metrics import StepMetrics
from ..types.snapshot import WorldSnapshot
from .agent import DEFAULT_AGENT_CONFIG, Agent, AgentId
from .rng import DeterministicRng
from .world_view import WorldView

logger = logging.getLogger(__name__)

# ids are list indices, so the agent count is bounded by the largest index
MAX_AGENT_COUNT = sys.maxsize

BoundsLike = Union[Vector2, Tuple[float, float]]


class PendingTag:
    """Single slot holding the agent that becomes "it" once the current step is committed.

    Writers race during a parallel step; the last write wins.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: Optional[AgentId] = None

    def offer(self, agent_id: AgentId) -> None:
        with self._lock:
            self._value = agent_id

    def take(self) -> Optional[AgentId]:
        with self._lock:
            value, self._value = self._value, None
        return value

    def clear(self) -> None:
        with self._lock:
            self._value = None


@dataclass(frozen=True, slots=True)
class _AgentStepResult:
    agent: Agent
    tag_requested: bool
    tag_accepted: bool


class World:
    def __init__(
        self,
        agents: Sequence[Agent],
        behaviors: Sequence[Behavior],
        bounds: BoundsLike,
        it: AgentId,
        *,
        previous_it: Optional[AgentId] = None,
        parallel: bool = False,
        rng: Optional[DeterministicRng] = None,
        config: Optional[AgentConfig] = None,
        max_workers: Optional[int] = None,
    ):
        if not agents:
            raise ConfigurationError("agents", "a world needs at least one agent")
        if len(agents) != len(behaviors):
            raise ConfigurationError(
                "behaviors", f"expected one behavior per agent ({len(agents)}), got {len(behaviors)}"
            )
        bounds = Vector2(bounds)
        if bounds.x < 0 or bounds.y < 0 or math.isnan(bounds.x) or math.isnan(bounds.y):
            raise ConfigurationError("bounds", f"width and height must not be negative, got {tuple(bounds)}")
        previous_it = it if previous_it is None else previous_it
        for name, value in (("it", it), ("previous_it", previous_it)):
            if not 0 <= value < len(agents):
                raise ConfigurationError(name, f"{value} is not a valid agent id")

        self._agents: List[Agent] = list(agents)
        self._behaviors: List[Behavior] = list(behaviors)
        self._bounds = bounds
        self._it = it
        self._previous_it = previous_it
        self._iteration = 0
        self._parallel = parallel
        self._config = config if config is not None else DEFAULT_AGENT_CONFIG
        self._rng = rng if rng is not None else DeterministicRng()
        self._agent_rngs = [self._rng.spawn_agent_stream(index) for index in range(len(self._agents))]
        self._pending_tag = PendingTag()
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._metrics: Optional[StepMetrics] = None

    @classmethod
    def random(
        cls,
        bounds: BoundsLike,
        agent_count: int,
        behavior_factory: Callable[[], Behavior],
        parallel: bool = False,
        rng: Optional[DeterministicRng] = None,
        *,
        seed: Optional[int] = None,
        config: Optional[AgentConfig] = None,
        max_workers: Optional[int] = None,
    ) -> "World":
        if isinstance(agent_count, bool) or not isinstance(agent_count, int):
            raise ConfigurationError("agent_count", f"must be an integer, got {agent_count!r}")
        if agent_count <= 0:
            raise ConfigurationError("agent_count", "at least one agent is needed to pick who is 'it'")
        if agent_count > MAX_AGENT_COUNT:
            raise ConfigurationError("agent_count", f"cannot exceed {MAX_AGENT_COUNT}")
        bounds = Vector2(bounds)
        if rng is None:
            rng = DeterministicRng(seed)

        agents = [Agent.random(bounds, rng) for _ in range(agent_count)]
        behaviors = [behavior_factory() for _ in range(agent_count)]
        it = rng.next_int(agent_count)
        world = cls(
            agents,
            behaviors,
            bounds,
            it,
            parallel=parallel,
            rng=rng,
            config=config,
            max_workers=max_workers,
        )
        logger.info(
            "created world with %d agents in %.2fx%.2f (seed=%d, parallel=%s), agent %d is it",
            agent_count,
            bounds.x,
            bounds.y,
            rng.seed,
            parallel,
            it,
        )
        return world

    @property
    def agents(self) -> List[Agent]:
        return self._agents

    @property
    def behaviors(self) -> List[Behavior]:
        return self._behaviors

    @property
    def bounds(self) -> Vector2:
        return self._bounds

    @property
    def it(self) -> AgentId:
        return self._it

    @property
    def previous_it(self) -> AgentId:
        return self._previous_it

    @property
    def iteration(self) -> int:
        return self._iteration

    @property
    def parallel(self) -> bool:
        return self._parallel

    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def metrics(self) -> Optional[StepMetrics]:
        return self._metrics

    def simulate_step(self) -> None:
        """Advance the game by one step.

        Every agent decides against the roster as it was before the step;
        the new positions and the new "it" are committed together once all
        agents are done. When several agents tag in the same step only the
        last accepted tag counts: the last one in id order when running
        sequentially, an arbitrary one when running in parallel.
        """
        start = perf_counter()
        self._pending_tag.clear()

        indices = range(len(self._agents))
        if self._parallel:
            results = list(self._ensure_executor().map(self._step_agent, indices))
        else:
            results = [self._step_agent(index) for index in indices]

        self._agents = [result.agent for result in results]
        tagged = self._pending_tag.take()
        if tagged is not None:
            if not 0 <= tagged < len(self._agents):
                raise SimulationStateError(f"pending tag names unknown agent {tagged!r}")
            logger.debug("iteration %d: agent %d tagged agent %d", self._iteration, self._it, tagged)
            self._previous_it = self._it
            self._it = tagged
        self._iteration += 1

        elapsed_ms = (perf_counter() - start) * 1000.0
        self._metrics = metrics_system.create_metrics(
            self._iteration,
            self._it,
            self._previous_it,
            [result.tag_requested for result in results],
            [result.tag_accepted for result in results],
            tagged is not None,
            elapsed_ms,
        )

    def snapshot(self) -> WorldSnapshot:
        return WorldSnapshot(
            iteration=self._iteration,
            it=self._it,
            previous_it=self._previous_it,
            agents=tuple(agent.copy() for agent in self._agents),
            bounds=Vector2(self._bounds),
        )

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "World":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __str__(self) -> str:
        lines = [
            f"Bounds: {self._bounds.x:.2f}x{self._bounds.y:.2f}",
            f"It: {self._it}, previously: {self._previous_it}",
        ]
        lines.extend(f"{agent_id}: {agent}" for agent_id, agent in enumerate(self._agents))
        return "\n".join(lines)

    def _ensure_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="tagsim-step")
        return self._executor

    def _step_agent(self, index: AgentId) -> _AgentStepResult:
        world_view = WorldView(self, index, self._agent_rngs[index])
        operation = self._behaviors[index].perform_step(world_view)

        tag_requested = operation.tag is not None
        tag_accepted = tag_requested and operation.tag in world_view.reachable_agents()
        if tag_accepted:
            self._pending_tag.offer(operation.tag)

        agent = world_view.our_agent().perform_movement(
            self._bounds, operation.velocity, operation.direction, self._config
        )
        return _AgentStepResult(agent=agent, tag_requested=tag_requested, tag_accepted=tag_accepted)
