"""HTTP API: a virtual-clock engine via dependency override, plus the live app lifespan."""

import asyncio
import logging
import time
from contextlib import suppress

import pytest
from fastapi.testclient import TestClient

from config import reset_settings
from src.app_layer import dependencies
from src.app_layer.dependencies import get_engine
from src.app_layer.main import app, tick_loop


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    # No context manager: the lifespan (and its tick loop) stays off
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_initial_state(client):
    data = client.get("/api/v1/simulation/state").json()
    assert data["scenario"] is None
    assert data["phase"] == "idle"
    assert len(data["trucks"]) == 5
    t001 = data["trucks"][0]
    assert t001["position"] == {"x": 5.0, "y": 70.0}
    assert t001["leg"] == {"from": "Origin 1", "to": "Checkpoint A"}
    assert t001["route_color"] == "#3B82F6"
    assert data["environment"] == {"weather": "sunny", "traffic": "smooth"}
    assert data["recommendation_available"] is False


def test_list_scenarios(client):
    data = client.get("/api/v1/simulation/scenarios").json()
    assert [item["id"] for item in data] == ["supplier-delay", "traffic-jam", "document-issue"]


def test_select_scenario_and_approve(client, scheduler):
    response = client.post("/api/v1/simulation/scenario", json={"scenario": "supplier-delay"})
    assert response.status_code == 200
    data = response.json()
    assert data["scenario"] == "supplier-delay"
    assert [a["id"] for a in data["activities"]] == ["sd-1", "sd-2"]
    assert data["pending_steps"] == ["detect-loading-delay", "assess-impact"]

    rejected = client.post("/api/v1/simulation/approve").json()
    assert rejected["approved"] is False

    scheduler.advance(2.0)
    messages = client.get("/api/v1/agents/messages").json()
    assert [m["kind"] for m in messages] == ["warning"]

    approved = client.post("/api/v1/simulation/approve").json()
    assert approved["approved"] is True
    t002 = approved["state"]["trucks"][1]
    assert t002["status"] == "on-time"
    assert t002["is_affected"] is False

    activities = client.get("/api/v1/agents/activities").json()
    assert activities[-1]["id"] == "sd-5"


def test_unknown_scenario_is_404(client):
    response = client.post("/api/v1/simulation/scenario", json={"scenario": "meteor"})
    assert response.status_code == 404
    assert "meteor" in response.json()["detail"]


def test_scenario_body_is_validated(client):
    response = client.post("/api/v1/simulation/scenario", json={})
    assert response.status_code == 422


def test_reset(client, scheduler):
    client.post("/api/v1/simulation/scenario", json={"scenario": "traffic-jam"})
    scheduler.advance(2.0)
    data = client.post("/api/v1/simulation/reset").json()
    assert data["messages"] == []
    assert data["activities"] == []
    assert data["pending_steps"] == []
    assert all(truck["status"] == "on-time" for truck in data["trucks"])


def test_manual_tick(client):
    data = client.post("/api/v1/simulation/tick", params={"count": 4}).json()
    assert data["tick"] == 4
    assert data["trucks"][0]["progress"] == 2.0

    assert client.post("/api/v1/simulation/tick", params={"count": 0}).status_code == 422


def test_routes(client):
    routes = client.get("/api/v1/routes/").json()
    assert [route["id"] for route in routes] == ["R001", "R002", "R003", "R004", "R005"]
    assert routes[0]["samples"] == []
    assert routes[1]["path_string"] == "M 15 83 Q 17.5 83 20 75 Q 35 75 50 55"

    route = client.get("/api/v1/routes/R001").json()
    assert len(route["samples"]) == 104
    assert route["points"][2] == {"name": "Central Hub", "x": 50.0, "y": 55.0, "is_checkpoint": True}

    assert client.get("/api/v1/routes/R404").status_code == 404


def test_get_truck(client):
    client.post("/api/v1/simulation/tick", params={"count": 2})
    truck = client.get("/api/v1/simulation/trucks/T003").json()
    assert truck["id"] == "T003"
    assert truck["route_id"] == "R003"
    assert truck["progress"] == 1.0
    assert truck["leg"] == {"from": "Central Hub", "to": "Checkpoint F"}

    response = client.get("/api/v1/simulation/trucks/T999")
    assert response.status_code == 404
    assert "T999" in response.json()["detail"]


def test_tick_loop_keeps_running_after_a_failed_tick(caplog):
    class FlakyEngine:
        calls = 0

        def tick(self):
            self.calls += 1
            if self.calls == 1:
                raise RuntimeError("bad tick")

    engine = FlakyEngine()

    async def run():
        task = asyncio.create_task(tick_loop(engine, 0.001))
        await asyncio.sleep(0.05)
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task

    with caplog.at_level(logging.ERROR, logger="src.app_layer.main"):
        asyncio.run(run())

    assert engine.calls > 1
    assert "Simulation tick failed" in caplog.text


def _reset_app_state():
    dependencies._engine = None
    dependencies.get_cached_settings.cache_clear()
    reset_settings()


@pytest.fixture
def live_settings(monkeypatch):
    """Real engine on the event loop: fast ticks, scripts at 1/20 speed."""
    monkeypatch.setenv("SIM_DEFAULT_SCENARIO", "supplier-delay")
    monkeypatch.setenv("SIM_AUTO_TICK", "true")
    monkeypatch.setenv("SIM_TICK_INTERVAL_S", "0.01")
    monkeypatch.setenv("SIM_SCRIPT_TIME_SCALE", "0.05")
    for name in (
        "SIM_WEATHER_CHANGE_PROBABILITY",
        "SIM_TRAFFIC_CHANGE_PROBABILITY",
        "SIM_THINKING_PROBABILITY",
    ):
        monkeypatch.setenv(name, "0")
    _reset_app_state()
    yield
    _reset_app_state()


def _wait_for(client, condition, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        state = client.get("/api/v1/simulation/state").json()
        if condition(state):
            return state
        time.sleep(0.02)
    pytest.fail("simulation state never reached the expected condition")


def test_lifespan_drives_default_scenario(live_settings):
    with TestClient(app) as live:
        state = live.get("/api/v1/simulation/state").json()
        assert state["scenario"] == "supplier-delay"

        state = _wait_for(live, lambda s: s["tick"] >= 10 and s["recommendation_available"])
        assert state["trucks"][0]["progress"] > 0
        assert [m["kind"] for m in state["messages"]] == ["warning"]

        assert live.post("/api/v1/simulation/approve").json()["approved"] is True
        state = _wait_for(live, lambda s: s["scenario_completed"])
        assert state["kpis"]["cost_saved"] == 250

        # Leave timers pending for shutdown to cancel
        live.post("/api/v1/simulation/scenario", json={"scenario": "traffic-jam"})
        engine = dependencies._engine
        assert engine.runner.armed is True

    assert engine.runner.armed is False
    assert engine.scheduler.pending == []
