import os
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

import pytest

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from pygame.math import Vector2  # noqa: E402

from tagsim.sim.behaviors import Behavior, DefaultBehavior, Operation  # noqa: E402
from tagsim.sim.core.agent import Agent  # noqa: E402
from tagsim.sim.core.rng import DeterministicRng  # noqa: E402
from tagsim.sim.core.world import World  # noqa: E402


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run long simulations",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "slow: marks tests that run long simulations",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-slow"):
        return

    skip_marker = pytest.mark.skip(
        reason="Long simulation (use --run-slow)",
    )

    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_marker)


class IdleBehavior(Behavior):
    def perform_step(self, world_view):
        return Operation(direction=world_view.our_agent().heading, velocity=0.0)


class TagRequestBehavior(Behavior):
    """Stands still and asks to tag a fixed agent every step."""

    def __init__(self, target: int):
        self.target = target

    def perform_step(self, world_view):
        return Operation(direction=world_view.our_agent().heading, velocity=0.0, tag=self.target)


class TagAnyoneBehavior(Behavior):
    """Tags the first reachable agent that is not the previous "it", whoever is "it"."""

    def perform_step(self, world_view):
        heading = world_view.our_agent().heading
        for agent_id in world_view.reachable_agents():
            if agent_id != world_view.previous_it():
                return Operation(direction=heading, velocity=0.0, tag=agent_id)
        return Operation(direction=heading, velocity=0.0)


AgentSpec = Tuple[Tuple[float, float], float]


def build_world(
    specs: Sequence[AgentSpec],
    behaviors: Optional[Sequence[Behavior]] = None,
    it: int = 0,
    previous_it: Optional[int] = None,
    bounds: Tuple[float, float] = (100.0, 100.0),
    parallel: bool = False,
    seed: int = 1,
) -> World:
    agents = [Agent(position=Vector2(x, y), heading=heading) for (x, y), heading in specs]
    if behaviors is None:
        behaviors = [DefaultBehavior() for _ in agents]
    return World(
        agents,
        behaviors,
        bounds,
        it,
        previous_it=previous_it,
        parallel=parallel,
        rng=DeterministicRng(seed),
    )


@pytest.fixture
def make_world() -> Callable[..., World]:
    return build_world
