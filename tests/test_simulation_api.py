"""Test the HTTP surface with an in-memory store."""
import pytest
from fastapi.testclient import TestClient
from models.simulation_models import SessionClock
from core.blackboard import SessionBlackboard
from services.observer_registry import ObserverRegistry
from data_processing.sample_data import SAMPLE_ROUTES, SAMPLE_TRUCKS, SAMPLE_CITIZENS
from api.dashboard_routes import app
from api.simulation_api import get_observer_registry

@pytest.fixture
def registry():
    blackboard = SessionBlackboard()
    blackboard.seed(SAMPLE_ROUTES, SAMPLE_TRUCKS, SessionClock('default', truck_id='truck1'))
    registry = ObserverRegistry(blackboard, citizens=SAMPLE_CITIZENS, session_id='default')

    app.dependency_overrides[get_observer_registry] = lambda: registry
    yield registry
    app.dependency_overrides.clear()
    registry.close()

@pytest.fixture
def client(registry):
    return TestClient(app)

def test_state_before_start(client):
    response = client.get("/api/simulation/state")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["session"]["is_running"] is False
    assert len(data["trucks"]) == 2
    assert {t["status"] for t in data["trucks"]} == {"paused"}
    assert len(data["citizens"]) == len(SAMPLE_CITIZENS)

def test_start_pause_reset(client):
    started = client.post("/api/simulation/start").json()
    assert started["session"]["is_running"] is True

    paused = client.post("/api/simulation/pause").json()
    assert paused["session"]["is_running"] is False
    assert paused["session"]["started_at"] is None

    reset = client.post("/api/simulation/reset").json()
    assert reset["session"]["accumulated_seconds"] == 0.0
    assert reset["session"]["reset_epoch"] == 1

    notifications = client.get("/api/simulation/state").json()["data"]["notifications"]
    assert [n["message"] for n in notifications] == ["Simulation reset"]

def test_speed(client):
    response = client.put("/api/simulation/speed", json={"multiplier": 4})
    assert response.status_code == 200
    assert response.json()["session"]["speed_multiplier"] == 4.0

    assert client.put("/api/simulation/speed", json={"multiplier": 0}).status_code == 400

def test_truck_speed(client):
    response = client.put("/api/simulation/trucks/truck2/speed", json={"speed_kmh": 20})
    assert response.status_code == 200
    assert response.json()["data"]["speed_kmh"] == 20.0

    trucks = client.get("/api/simulation/trucks").json()["data"]
    assert {t["truck_id"]: t["speed_kmh"] for t in trucks}["truck2"] == 20.0

    assert client.put("/api/simulation/trucks/ghost/speed", json={"speed_kmh": 20}).status_code == 404
    assert client.put("/api/simulation/trucks/truck1/speed", json={"speed_kmh": -3}).status_code == 400

def test_citizen_lookups(client):
    client.post("/api/simulation/start")

    citizen = client.get("/api/citizens/c1")
    assert citizen.status_code == 200
    assert citizen.json()["data"]["name"] == "Bharat Singh"

    eta = client.get("/api/citizens/c1/eta").json()
    assert eta["citizen_id"] == "c1"
    assert isinstance(eta["eta_minutes"], int)
    assert eta["distance_km"] > 0

    assert client.get("/api/citizens/zzz").status_code == 404
    assert client.get("/api/citizens/zzz/eta").status_code == 404

def test_observed_citizen(client):
    assert client.put("/api/citizens/observed", json={"citizen_id": "c2"}).status_code == 200
    assert client.put("/api/citizens/observed", json={"citizen_id": "nobody"}).status_code == 404
    assert client.put("/api/citizens/observed", json={}).status_code == 200

def test_list_citizens(client):
    response = client.get("/api/citizens", follow_redirects=False)
    assert response.status_code == 200
    assert response.json()["count"] == len(SAMPLE_CITIZENS)

def test_each_client_watches_its_own_citizen(registry, client):
    first = {"X-Observer-Id": "browser-a"}
    second = {"X-Observer-Id": "browser-b"}

    assert client.put("/api/citizens/observed", json={"citizen_id": "c1"}, headers=first).status_code == 200
    assert client.put("/api/citizens/observed", json={"citizen_id": "c2"}, headers=second).status_code == 200

    assert registry.get("browser-a").observed_citizen_id == "c1"
    assert registry.get("browser-b").observed_citizen_id == "c2"
    assert len(registry) == 2

def test_session_shared_but_notifications_are_per_client(registry, client):
    first = {"X-Observer-Id": "browser-a"}
    second = {"X-Observer-Id": "browser-b"}
    client.get("/api/simulation/state", headers=second)

    client.post("/api/simulation/start", headers=first)

    seen_by_second = client.get("/api/simulation/state", headers=second).json()["data"]
    assert seen_by_second["session"]["is_running"] is True
    assert seen_by_second["notifications"] == []

    seen_by_first = client.get("/api/simulation/state", headers=first).json()["data"]
    assert [n["message"] for n in seen_by_first["notifications"]] == ["Simulation started"]

def test_requests_without_header_share_default_observer(registry, client):
    client.put("/api/citizens/observed", json={"citizen_id": "c3"})

    assert "default" in registry
    assert registry.get().observed_citizen_id == "c3"
