from __future__ import annotations

import asyncio
import json
import logging
import threading
from typing import Optional

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from ..sim.core.world import World
from ..sim.types.snapshot import WorldSnapshot
from ..viewer import SnapshotSlot, Viewer

logger = logging.getLogger(__name__)


class WebViewer(Viewer):
    """Serves the latest world snapshot as JSON over HTTP and a websocket.

    The simulation thread only drops snapshots into a single slot; the web
    server picks up whatever is newest when a client asks for it.
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 8000, poll_interval: float = 0.05):
        self.host = host
        self.port = port
        self.poll_interval = poll_interval
        self.finished_running = False
        self._slot = SnapshotSlot()
        self._latest: Optional[WorldSnapshot] = None
        self._latest_lock = threading.Lock()
        self.app = create_app(self)

    def iteration(self, world: World) -> None:
        # only snapshot if the previous one has been picked up
        if not self._slot.is_full():
            self._slot.offer(world.snapshot())

    def finished(self, world: World) -> None:
        self._slot.put(world.snapshot())
        self.finished_running = True

    def run(self) -> None:
        logger.info("serving snapshots on http://%s:%d", self.host, self.port)
        uvicorn.run(self.app, host=self.host, port=self.port, log_level="warning")

    def latest_snapshot(self) -> Optional[WorldSnapshot]:
        snapshot = self._slot.take()
        with self._latest_lock:
            if snapshot is not None:
                self._latest = snapshot
            return self._latest

    def serialize(self, snapshot: WorldSnapshot) -> str:
        return json.dumps({"type": "snapshot", "iteration": snapshot.iteration, "payload": snapshot.to_dict()})

    async def stream(self, websocket: WebSocket) -> None:
        last_sent = -1
        while True:
            snapshot = self.latest_snapshot()
            if snapshot is not None and snapshot.iteration > last_sent:
                await websocket.send_text(self.serialize(snapshot))
                last_sent = snapshot.iteration
            # waiting on the socket instead of sleeping notices disconnects; messages are ignored
            try:
                await asyncio.wait_for(websocket.receive_text(), timeout=self.poll_interval)
            except asyncio.TimeoutError:
                continue


def create_app(viewer: WebViewer) -> FastAPI:
    app = FastAPI(title="Tag Simulation")

    @app.get("/api/status")
    async def status() -> JSONResponse:
        snapshot = viewer.latest_snapshot()
        if snapshot is None:
            return JSONResponse({"ready": False, "finished": viewer.finished_running})
        return JSONResponse(
            {
                "ready": True,
                "finished": viewer.finished_running,
                "iteration": snapshot.iteration,
                "it": snapshot.it,
                "previous_it": snapshot.previous_it,
                "agents": len(snapshot.agents),
            }
        )

    @app.get("/api/snapshot")
    async def latest() -> JSONResponse:
        snapshot = viewer.latest_snapshot()
        if snapshot is None:
            return JSONResponse({"detail": "no snapshot available yet"}, status_code=404)
        return JSONResponse(snapshot.to_dict())

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await websocket.accept()
        try:
            await viewer.stream(websocket)
        except WebSocketDisconnect:
            logger.debug("websocket client disconnected")

    return app


__all__ = ["WebViewer", "create_app"]
