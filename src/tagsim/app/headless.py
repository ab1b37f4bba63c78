from __future__ import annotations

import argparse
import csv
import logging
import threading
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable, List, Optional

from ..config import SimulationConfig
from ..errors import ConfigurationError
from ..sim.behaviors import BEHAVIORS, behavior_factory
from ..sim.core.world import World
from ..sim.types.metrics import StepMetrics
from ..viewer import CommandlineViewer, Viewer
from .server import WebViewer

logger = logging.getLogger(__name__)

_METRICS_HEADER = [
    "iteration",
    "it",
    "previous_it",
    "tag_requests",
    "accepted_tags",
    "tagged",
    "tick_ms",
]

VIEWERS = ("command-line", "web")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _format_metrics_row(metrics: StepMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.iteration,
        metrics.it,
        metrics.previous_it,
        metrics.tag_requests,
        metrics.accepted_tags,
        int(metrics.tagged),
        f"{tick_ms:.3f}",
    ]


def build_world(config: SimulationConfig) -> World:
    return World.random(
        (config.width, config.height),
        config.agent_count,
        behavior_factory(config.behavior),
        config.parallel,
        seed=config.seed,
        config=config.agent,
        max_workers=config.max_workers,
    )


def build_viewer(config: SimulationConfig) -> Viewer:
    kind = config.viewer.kind.lower().strip()
    if kind == "command-line":
        return CommandlineViewer(print_interval_seconds=config.viewer.print_interval_seconds)
    if kind == "web":
        return WebViewer(host=config.viewer.host, port=config.viewer.port)
    raise ConfigurationError("viewer.kind", f"unknown viewer '{config.viewer.kind}', expected one of {VIEWERS}")


def run_simulation(
    config: SimulationConfig,
    viewer: Optional[Viewer] = None,
    world: Optional[World] = None,
    log_path: Optional[Path] = None,
    deterministic_log: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> World:
    if world is None:
        world = build_world(config)
    if viewer is None:
        viewer = build_viewer(config)
    delay = max(0, config.delay_milliseconds) / 1000.0

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_METRICS_HEADER)

    try:
        for _ in range(config.iterations):
            # a zero delay may still yield the thread, so skip the call entirely
            if delay > 0:
                sleep(delay)
            world.simulate_step()
            viewer.iteration(world)
            if writer and world.metrics is not None:
                tick_ms = 0.0 if deterministic_log else world.metrics.tick_duration_ms
                writer.writerow(_format_metrics_row(world.metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    logger.info("simulation finished after %d iterations, agent %d is it", world.iteration, world.it)
    viewer.finished(world)
    return world


def _apply_overrides(config: SimulationConfig, args: argparse.Namespace) -> SimulationConfig:
    overrides = {
        name: getattr(args, name)
        for name in ("iterations", "width", "height", "agent_count", "behavior", "delay_milliseconds", "seed")
        if getattr(args, name) is not None
    }
    if args.parallel:
        overrides["parallel"] = True
    if args.viewer is not None:
        overrides["viewer"] = replace(config.viewer, kind=args.viewer)
    return replace(config, **overrides)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulating a game of tag.")
    parser.add_argument("iterations", type=int, nargs="?", default=None, help="How many iterations to simulate")
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation settings")
    parser.add_argument("--width", type=float, default=None, help="Width of the playing field")
    parser.add_argument("--height", type=float, default=None, help="Height of the playing field")
    parser.add_argument("--agent-count", type=int, default=None, help="Number of players")
    parser.add_argument("--behavior", choices=sorted(BEHAVIORS), default=None, help="Behavior used by every agent")
    parser.add_argument(
        "--delay-milliseconds", type=int, default=None, help="Milliseconds to wait between every iteration"
    )
    parser.add_argument("--viewer", choices=VIEWERS, default=None, help="How the simulation is displayed")
    parser.add_argument("--parallel", action="store_true", help="Step agents on a thread pool")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write per-step metrics")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, default="INFO", help="Logging level"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = _parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    base = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    config = _apply_overrides(base, args)
    world = build_world(config)
    viewer = build_viewer(config)

    errors: list[BaseException] = []

    def _simulate() -> None:
        try:
            run_simulation(config, viewer, world, log_path=args.log, deterministic_log=args.deterministic_log)
        except BaseException as exc:  # re-raised on the main thread
            errors.append(exc)

    # the viewer owns the main thread, the simulation runs beside it
    simulation = threading.Thread(target=_simulate, name="tagsim-simulation", daemon=True)
    simulation.start()
    viewer.run()
    simulation.join()
    world.close()
    if errors:
        raise errors[0]


if __name__ == "__main__":
    main()
