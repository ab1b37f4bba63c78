from __future__ import annotations

import logging
import queue
import sys
import threading
from abc import ABC, abstractmethod
from time import monotonic
from typing import Callable, Optional, TextIO

from .sim.core.world import World
from .sim.types.snapshot import WorldSnapshot

logger = logging.getLogger(__name__)


class Viewer(ABC):
    """Displays the progress of a simulation.

    ``iteration`` and ``finished`` are called from the thread driving the
    simulation; ``run`` is called on the main thread and may block for as
    long as the viewer's own display loop lives.
    """

    @abstractmethod
    def iteration(self, world: World) -> None:
        raise NotImplementedError

    @abstractmethod
    def finished(self, world: World) -> None:
        raise NotImplementedError

    def run(self) -> None:
        return None


class SnapshotSlot:
    """Hands snapshots from the simulation to a viewer through a single slot.

    ``offer`` drops the snapshot while the previous one has not been taken
    yet, so a slow viewer only ever sees the latest state it had time for.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[WorldSnapshot]" = queue.Queue(maxsize=1)
        self._lock = threading.Lock()

    def offer(self, snapshot: WorldSnapshot) -> bool:
        with self._lock:
            try:
                self._queue.put_nowait(snapshot)
            except queue.Full:
                return False
            return True

    def put(self, snapshot: WorldSnapshot) -> None:
        with self._lock:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                pass
            self._queue.put_nowait(snapshot)

    def take(self, timeout: Optional[float] = None) -> Optional[WorldSnapshot]:
        try:
            if timeout is None:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def is_full(self) -> bool:
        return self._queue.full()


class CommandlineViewer(Viewer):
    """Reports the iteration about once per interval and prints the world when done."""

    def __init__(
        self,
        print_interval_seconds: float = 1.0,
        stream: Optional[TextIO] = None,
        clock: Callable[[], float] = monotonic,
    ):
        self._print_interval = print_interval_seconds
        self._stream = stream
        self._clock = clock
        self._last_print = clock()
        self._lock = threading.Lock()

    def iteration(self, world: World) -> None:
        now = self._clock()
        with self._lock:
            if now - self._last_print <= self._print_interval:
                return
            self._last_print = now
        logger.info("Iteration: %d", world.iteration)

    def finished(self, world: World) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(f"{world}\n")
        stream.flush()
