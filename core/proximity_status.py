"""Citizen collection status driven by truck proximity."""
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence, Tuple
from models.simulation_models import (
    Citizen, TruckState, Notification,
    PENDING, APPROACHING, COLLECTED, SUCCESS, INFO
)
from tools.geo_math import distances_km
from core.notifications import make_notification
from configurations.config import Config

class ProximityStatusEngine:
    def __init__(self, collected_radius_km: float = None, approaching_radius_km: float = None):
        self.collected_radius_km = collected_radius_km if collected_radius_km is not None else Config.COLLECTED_RADIUS_KM
        self.approaching_radius_km = approaching_radius_km if approaching_radius_km is not None else Config.APPROACHING_RADIUS_KM

    def next_status(self, status: str, distance_km: Optional[float]) -> str:
        """
        Transition for one citizen given the distance to its nearest truck.

        pending -> approaching -> collected. Nothing leaves collected and
        nothing here produces missed.
        """
        if distance_km is None:
            return status
        if distance_km < self.collected_radius_km and status != COLLECTED:
            return COLLECTED
        if distance_km < self.approaching_radius_km and status == PENDING:
            return APPROACHING
        return status

    def update_statuses(self, citizens: Sequence[Citizen], truck_states: Sequence[TruckState],
                        observed_citizen_id: Optional[str], now: datetime
                        ) -> Tuple[List[Citizen], List[Notification]]:
        """Advance every citizen against all trucks; notify only for the observed citizen."""
        positions = [(s.position[1], s.position[0]) for s in truck_states if s.position is not None]

        updated = []
        notifications = []
        for citizen in citizens:
            nearest = None
            if positions:
                nearest = float(distances_km((citizen.latitude, citizen.longitude), positions).min())

            new_status = self.next_status(citizen.status, nearest)
            if new_status == citizen.status:
                updated.append(citizen)
                continue

            updated.append(replace(citizen, status=new_status))
            if citizen.citizen_id == observed_citizen_id:
                notifications.append(self._transition_notice(citizen, new_status, now))

        return updated, notifications

    def _transition_notice(self, citizen: Citizen, status: str, now: datetime) -> Notification:
        if status == COLLECTED:
            return make_notification(f"Garbage collected at {citizen.address}!", SUCCESS, now)
        return make_notification("Garbage truck is near your location!", INFO, now)
