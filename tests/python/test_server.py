from fastapi.testclient import TestClient

from tagsim.app.server import WebViewer
from tagsim.sim.behaviors import DefaultBehavior
from tagsim.sim.core.world import World


def _world() -> World:
    return World.random((80.0, 60.0), 4, DefaultBehavior, seed=12)


def test_status_before_first_snapshot():
    viewer = WebViewer()
    client = TestClient(viewer.app)

    assert client.get("/api/status").json() == {"ready": False, "finished": False}
    assert client.get("/api/snapshot").status_code == 404


def test_latest_snapshot_is_served():
    viewer = WebViewer()
    client = TestClient(viewer.app)
    world = _world()

    world.simulate_step()
    viewer.iteration(world)
    world.simulate_step()
    # the first snapshot was not picked up yet, so this one is dropped
    viewer.iteration(world)

    payload = client.get("/api/snapshot").json()
    assert payload["iteration"] == 1
    assert len(payload["agents"]) == 4
    assert payload["bounds"] == {"width": 80.0, "height": 60.0}

    status = client.get("/api/status").json()
    assert status["ready"]
    assert status["iteration"] == 1
    assert status["agents"] == 4


def test_finished_snapshot_replaces_pending_one():
    viewer = WebViewer()
    client = TestClient(viewer.app)
    world = _world()

    world.simulate_step()
    viewer.iteration(world)
    for _ in range(3):
        world.simulate_step()
    viewer.finished(world)

    status = client.get("/api/status").json()
    assert status["finished"]
    assert status["iteration"] == 4


def test_websocket_pushes_latest_snapshot():
    viewer = WebViewer(poll_interval=0.01)
    client = TestClient(viewer.app)
    world = _world()
    world.simulate_step()
    viewer.finished(world)

    with client.websocket_connect("/ws") as websocket:
        message = websocket.receive_json()

    assert message["type"] == "snapshot"
    assert message["iteration"] == 1
    assert len(message["payload"]["agents"]) == 4
