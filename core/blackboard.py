"""In-memory session store with compare-and-swap writes and a push feed."""
import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional
import threading
from models.simulation_models import Route, Truck, SessionClock

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionClock], None]

class SessionBlackboard:
    def __init__(self):
        self._routes: Dict[str, Route] = {}
        self._trucks: Dict[str, Truck] = {}
        self._sessions: Dict[str, SessionClock] = {}
        self._listeners: List[SessionListener] = []
        self._lock = threading.Lock()

    def seed(self, routes: List[Route], trucks: List[Truck], session: SessionClock) -> None:
        """Store base records once; existing records are left alone."""
        with self._lock:
            for route in routes:
                self._routes.setdefault(route.route_id, route)
            for truck in trucks:
                self._trucks.setdefault(truck.truck_id, truck)
            self._sessions.setdefault(session.session_id, session)
            logger.info(f"Seeded {len(self._routes)} routes, {len(self._trucks)} trucks")

    def load_routes(self) -> List[Route]:
        with self._lock:
            return list(self._routes.values())

    def load_trucks(self) -> List[Truck]:
        with self._lock:
            return list(self._trucks.values())

    def get_session(self, session_id: str) -> Optional[SessionClock]:
        with self._lock:
            return self._sessions.get(session_id)

    def compare_and_swap(self, session_id: str, expected_version: int,
                         clock: SessionClock) -> Optional[SessionClock]:
        """Commit `clock` only if the stored version still matches; None on conflict."""
        with self._lock:
            current = self._sessions.get(session_id)
            if current is None or current.version != expected_version:
                logger.info(f"Session {session_id} write rejected, version {expected_version} is stale")
                return None
            committed = replace(clock, session_id=session_id, version=expected_version + 1)
            self._sessions[session_id] = committed
            listeners = list(self._listeners)

        # Already committed; listener failures are only logged
        for listener in listeners:
            try:
                listener(committed)
            except Exception as e:
                logger.error(f"Session listener {listener!r} failed: {e}")
        return committed

    def update_truck_speed(self, truck_id: str, speed_kmh: float) -> Optional[Truck]:
        with self._lock:
            truck = self._trucks.get(truck_id)
            if truck is None:
                return None
            truck = replace(truck, speed_kmh=speed_kmh)
            self._trucks[truck_id] = truck
            logger.info(f"Truck {truck_id} speed set to {speed_kmh} km/h")
            return truck

    def subscribe(self, listener: SessionListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SessionListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
