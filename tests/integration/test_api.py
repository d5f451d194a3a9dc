"""Integration tests for the REST API."""

import pytest
from fastapi.testclient import TestClient

from domesky.api.routes.websocket import reset_engine
from domesky.main import app


@pytest.fixture
def client():
    reset_engine()
    return TestClient(app)


class TestHealth:
    """Tests for service endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestSkyState:
    """Tests for state and telemetry endpoints."""

    def test_initial_state(self, client):
        data = client.get("/api/sky/state").json()
        assert data["state"] == "STOPPED"
        assert data["time"] == {"dayOfYear": 172, "hourOfDay": 12.0, "moonPhaseDay": 15.0}

    def test_telemetry(self, client):
        data = client.get("/api/sky/telemetry").json()
        assert data["alignment"]["status"] in {"none", "opposition", "partial_eclipse", "full_eclipse"}
        assert data["sun"]["atmosphereSpot"]["z"] == 50.0


class TestSetTime:
    """Tests for PUT /api/sky/time."""

    def test_set_time(self, client):
        response = client.put("/api/sky/time", json={"dayOfYear": 355, "hourOfDay": 0})
        assert response.status_code == 200
        assert response.json()["time"]["dayOfYear"] == 355

        data = client.get("/api/sky/telemetry").json()
        assert data["sun"]["position"]["radius"] == pytest.approx(5000.0)

    def test_out_of_range_day_rejected(self, client):
        response = client.put("/api/sky/time", json={"dayOfYear": 400})
        assert response.status_code == 422

    def test_hour_24_rejected(self, client):
        response = client.put("/api/sky/time", json={"hourOfDay": 24})
        assert response.status_code == 422

    @pytest.mark.parametrize("body", [
        {"hourOfDay": "inf"},
        {"hourOfDay": "nan"},
        {"moonPhaseDay": "inf"},
    ])
    def test_non_finite_rejected(self, client, body):
        response = client.put("/api/sky/time", json=body)
        assert response.status_code == 422


class TestAnimationControl:
    """Tests for start/pause/stop/reset/step."""

    def test_start_then_step(self, client):
        assert client.post("/api/sky/start").json()["state"] == "RUNNING"

        data = client.post("/api/sky/step").json()

        assert data["time"]["hourOfDay"] == pytest.approx(12.1)
        assert data["steps"] == 1

    def test_step_while_stopped(self, client):
        data = client.post("/api/sky/step").json()
        assert data["time"]["hourOfDay"] == 12.0

    def test_pause_and_stop(self, client):
        client.post("/api/sky/start")
        assert client.post("/api/sky/pause").json()["state"] == "PAUSED"
        assert client.post("/api/sky/stop").json()["state"] == "STOPPED"

    def test_reset(self, client):
        client.put("/api/sky/time", json={"dayOfYear": 1})
        assert client.post("/api/sky/reset").json()["state"] == "STOPPED"
        assert client.get("/api/sky/state").json()["time"]["dayOfYear"] == 172

    def test_update_time_warp(self, client):
        response = client.put("/api/sky/config", json={"timeWarp": 4.0})
        assert response.json()["timeWarp"] == 4.0

    def test_invalid_time_warp_rejected(self, client):
        response = client.put("/api/sky/config", json={"timeWarp": 0})
        assert response.status_code == 422

    @pytest.mark.parametrize("value", ["inf", "nan"])
    def test_non_finite_time_warp_rejected(self, client, value):
        response = client.put("/api/sky/config", json={"timeWarp": value})
        assert response.status_code == 422
        assert client.get("/api/sky/state").json()["timeWarp"] == 1.0


class TestCompute:
    """Tests for the stateless compute endpoint."""

    def test_opposition(self, client):
        response = client.post(
            "/api/sky/compute",
            json={"dayOfYear": 355, "hourOfDay": 0, "moonPhaseDay": 14.75},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["alignment"]["status"] == "opposition"
        assert abs(data["alignment"]["angleDiff"]) == 180

    def test_inputs_are_wrapped(self, client):
        data = client.post(
            "/api/sky/compute",
            json={"dayOfYear": 366, "hourOfDay": 24.5, "moonPhaseDay": 29.5},
        ).json()
        assert data["time"] == {"dayOfYear": 1, "hourOfDay": 0.5, "moonPhaseDay": 0.0}

    def test_shadow_model(self, client):
        data = client.post(
            "/api/sky/compute",
            json={"dayOfYear": 1, "hourOfDay": 1, "moonPhaseDay": 1, "includeShadowModel": True},
        ).json()
        assert data["shadowModel"]["shadow"]["z"] == 4000.0

    def test_does_not_change_engine(self, client):
        client.post("/api/sky/compute", json={"dayOfYear": 5, "hourOfDay": 5, "moonPhaseDay": 5})
        assert client.get("/api/sky/state").json()["time"]["dayOfYear"] == 172

    @pytest.mark.parametrize("field", ["hourOfDay", "moonPhaseDay"])
    @pytest.mark.parametrize("value", ["inf", "-inf", "nan"])
    def test_non_finite_input_rejected(self, client, field, value):
        body = {"dayOfYear": 1, "hourOfDay": 1, "moonPhaseDay": 1}
        body[field] = value
        response = client.post("/api/sky/compute", json=body)
        assert response.status_code == 422
