"""Test the command line helpers against real stores."""
import json
from configurations.config import Config
from core.blackboard import SessionBlackboard
from storage.session_store import SessionStore
from main import build_service, build_store, run_headless, unrouted_trucks
from data_processing.sample_data import SAMPLE_ROUTES, SAMPLE_CITIZENS

def test_run_headless_against_sqlite(tmp_path):
    url = f"sqlite:///{tmp_path / 'swm.db'}"
    service = build_service(url)

    run_headless(service, ticks=2, interval=0, speed=5.0, citizen_id='c1')

    session = SessionStore(url).get_session(Config.SESSION_ID)
    assert session.is_running is False
    assert session.speed_multiplier == 5.0
    assert session.started_at is None
    assert session.accumulated_seconds >= 0.0
    assert service.observed_citizen_id == 'c1'
    assert len(service.fleet_summary()) == 2

def test_memory_url_gives_push_observer():
    service = build_service("memory://")

    assert isinstance(service.store, SessionBlackboard)
    assert len(service.citizens) == len(SAMPLE_CITIZENS)
    assert service.session is not None

def test_sample_trucks_all_have_routes():
    store = build_store("memory://", SAMPLE_ROUTES)

    assert unrouted_trucks(store) == []

def test_trucks_without_seeded_route_are_reported(tmp_path):
    path = tmp_path / "routes.geojson"
    path.write_text(json.dumps({"type": "FeatureCollection", "features": [{
        "type": "Feature",
        "properties": {"route_id": "route9", "name": "Civil Lines Loop", "total_distance": 1.8, "wards_covered": "Katra"},
        "geometry": {"type": "LineString", "coordinates": [[81.83, 25.45], [81.84, 25.46]]}
    }]}))

    service = build_service("memory://", routes_geojson=str(path))

    assert sorted(unrouted_trucks(service.store)) == ['truck1', 'truck2']
    assert list(service.routes) == ['route9']
