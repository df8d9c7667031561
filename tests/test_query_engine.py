"""Test ETA and nearest distance lookups."""
import pytest
from models.simulation_models import Citizen, TruckState, RUNNING, PAUSED, IDLE
from services.query_engine import eta_minutes, nearest_distance_km
from tools.geo_math import haversine_km

CITIZEN = Citizen('c1', 'Test Citizen', '1 Road', 'Ward', 'Mohalla', 25.0, 81.0)

def state(truck_id, lat, speed=15.0, status=RUNNING, progress=0.3):
    return TruckState(truck_id, truck_id, 'r1', speed, (81.0, lat), progress, status)

class TestEta:
    def test_running_truck(self):
        # ~1.112 km at 15 km/h is ~4.45 min
        assert eta_minutes(CITIZEN, [state('t1', 25.01)]) == 4

    def test_minimum_over_running_and_paused(self):
        trucks = [
            state('slow', 25.01, speed=15.0),
            state('fast', 25.02, speed=60.0, status=PAUSED),
        ]
        # ~2.224 km at 60 km/h is ~2.22 min
        assert eta_minutes(CITIZEN, trucks) == 2

    def test_finished_and_idle_trucks_are_excluded(self):
        trucks = [
            state('done', 25.0001, status=IDLE, progress=1.0),
            state('parked', 25.0001, status=IDLE, progress=0.0),
            state('t1', 25.01),
        ]
        assert eta_minutes(CITIZEN, trucks) == 4

    def test_zero_speed_is_unreachable(self):
        assert eta_minutes(CITIZEN, [state('stuck', 25.01, speed=0.0)]) is None

    def test_unknown_without_trucks(self):
        assert eta_minutes(CITIZEN, []) is None

    def test_rounds_to_nearest_minute(self):
        # Speeds around an ETA of 2.5 minutes
        distance = haversine_km((25.0, 81.0), (25.01, 81.0))
        speed = distance / 2.5 * 60
        assert eta_minutes(CITIZEN, [state('t1', 25.01, speed=speed * 1.001)]) == 2
        assert eta_minutes(CITIZEN, [state('t1', 25.01, speed=speed * 0.999)]) == 3

class TestNearestDistance:
    def test_includes_every_run_state(self):
        trucks = [
            state('running', 25.02),
            state('idle', 25.01, status=IDLE, progress=1.0),
        ]
        assert nearest_distance_km(CITIZEN, trucks) == pytest.approx(haversine_km((25.0, 81.0), (25.01, 81.0)))

    def test_unknown_without_trucks(self):
        assert nearest_distance_km(CITIZEN, []) is None
