"""Truck progress and position derived from simulated time."""
from datetime import datetime
from typing import Dict, List, Optional, Sequence
from loguru import logger
from models.simulation_models import (
    Route, Truck, TruckState, SessionClock, IDLE, RUNNING, PAUSED
)
from core.session_clock import elapsed_seconds
from tools.geo_math import interpolate_position
from configurations.config import Config

class RouteProgressEngine:
    def __init__(self, interpolation_mode: str = None):
        self.interpolation_mode = interpolation_mode or Config.INTERPOLATION_MODE

    def compute_progress(self, speed_kmh: float, route: Route, elapsed: float) -> float:
        """Fraction of the route covered after `elapsed` simulated seconds."""
        if route.total_distance_km <= 0:
            return 1.0
        if speed_kmh <= 0:
            return 0.0

        distance_traveled = speed_kmh * elapsed / 3600
        return max(0.0, min(distance_traveled / route.total_distance_km, 1.0))

    def run_state(self, clock: SessionClock, progress: float) -> str:
        if progress >= 1:
            return IDLE
        if clock.is_running:
            return RUNNING
        return PAUSED

    def compute_truck_state(self, truck: Truck, route: Optional[Route],
                            clock: SessionClock, now: datetime) -> TruckState:
        if route is None or not route.coordinates:
            return TruckState(
                truck_id=truck.truck_id,
                name=truck.name,
                route_id=truck.route_id,
                speed_kmh=truck.speed_kmh,
                position=truck.home_position,
                progress=0.0,
                status=IDLE
            )

        progress = self.compute_progress(truck.speed_kmh, route, elapsed_seconds(clock, now))
        position = interpolate_position(route.coordinates, progress, self.interpolation_mode)

        return TruckState(
            truck_id=truck.truck_id,
            name=truck.name,
            route_id=truck.route_id,
            speed_kmh=truck.speed_kmh,
            position=position,
            progress=progress,
            status=self.run_state(clock, progress)
        )

    def compute_truck_states(self, trucks: Sequence[Truck], routes: Dict[str, Route],
                             clock: SessionClock, now: datetime) -> List[TruckState]:
        """Recompute every truck for one instant."""
        states = []
        for truck in trucks:
            route = routes.get(truck.route_id) if truck.route_id else None
            if truck.route_id and route is None:
                logger.debug(f"Truck {truck.truck_id} references unknown route {truck.route_id}, keeping it idle")
            states.append(self.compute_truck_state(truck, route, clock, now))
        return states
