"""One observer of the shared simulation session."""
import threading
import pandas as pd
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple
from loguru import logger
from models.simulation_models import (
    Citizen, Notification, Route, SessionClock, Truck, TruckState, PENDING, INFO
)
from core.session_controller import SessionController
from core.proximity_status import ProximityStatusEngine
from core.notifications import NotificationFeed, make_notification
from routing.route_progress import RouteProgressEngine
from services.query_engine import eta_minutes, nearest_distance_km
from storage.session_store import SessionStoreError, SessionConflictError
from data_processing.sample_data import SAMPLE_CITIZENS
from configurations.config import Config

@dataclass
class SimulationSnapshot:
    now: datetime
    session: Optional[SessionClock]
    trucks: List[TruckState] = field(default_factory=list)
    citizens: List[Citizen] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)

class SimulationService:
    """
    Derives truck positions and citizen statuses from the last committed
    session record and a caller supplied `now`.

    The store may be a SessionStore (polling only) or a SessionBlackboard
    (polling plus push). Admin actions are written with compare-and-swap and
    retried against the fresh record when another observer got there first.
    """

    def __init__(self, store, citizens: List[Citizen] = None, session_id: str = None,
                 progress_engine: RouteProgressEngine = None,
                 status_engine: ProximityStatusEngine = None,
                 subscribe: bool = True):
        self.store = store
        self.session_id = session_id or Config.SESSION_ID
        self.controller = SessionController()
        self.progress_engine = progress_engine or RouteProgressEngine()
        self.status_engine = status_engine or ProximityStatusEngine()
        self.notifications = NotificationFeed()

        self._seed_citizens = [replace(c, status=PENDING) for c in (citizens if citizens is not None else SAMPLE_CITIZENS)]
        self.citizens: List[Citizen] = list(self._seed_citizens)
        self.observed_citizen_id: Optional[str] = None

        self.session: Optional[SessionClock] = None
        self.routes: Dict[str, Route] = {}
        self.trucks: List[Truck] = []
        self.truck_states: List[TruckState] = []
        self._reset_epoch: Optional[int] = None
        self._lock = threading.RLock()

        if subscribe and hasattr(store, 'subscribe'):
            store.subscribe(self.on_session_change)
            logger.info(f"Observer for session {self.session_id} subscribed to push updates")

    # Sync with the store

    def refresh(self) -> bool:
        """Poll the store. On failure keep the last-known-good records."""
        try:
            session = self.store.get_session(self.session_id)
            routes = self.store.load_routes()
            trucks = self.store.load_trucks()
        except SessionStoreError as e:
            logger.warning(f"Refresh failed, keeping last known state: {e}")
            return False

        with self._lock:
            self.routes = {route.route_id: route for route in routes}
            self.trucks = trucks
            if session is None:
                logger.warning(f"Session {self.session_id} not found in store")
                return False
            self._apply_session(session)
        return True

    def on_session_change(self, session: SessionClock) -> None:
        """Push feed callback; receives the whole committed record."""
        if session.session_id != self.session_id:
            return
        with self._lock:
            self._apply_session(session)

    def close(self) -> None:
        if hasattr(self.store, 'unsubscribe'):
            self.store.unsubscribe(self.on_session_change)

    def _apply_session(self, session: SessionClock) -> None:
        if self.session is not None and session.version < self.session.version:
            logger.debug(f"Ignoring stale session version {session.version}")
            return

        if self._reset_epoch is not None and session.reset_epoch != self._reset_epoch:
            logger.info("Session was reset, restoring citizen statuses")
            self.citizens = list(self._seed_citizens)
            self.notifications.clear()

        self._reset_epoch = session.reset_epoch
        self.session = session

    # Recompute

    def tick(self, now: datetime) -> SimulationSnapshot:
        """Recompute trucks and citizens for `now` from the held records."""
        with self._lock:
            if self.session is None:
                self.refresh()
            if self.session is None:
                return SimulationSnapshot(now=now, session=None, citizens=list(self.citizens),
                                          notifications=self.notifications.items())

            self.truck_states = self.progress_engine.compute_truck_states(
                self.trucks, self.routes, self.session, now
            )
            self.citizens, notices = self.status_engine.update_statuses(
                self.citizens, self.truck_states, self.observed_citizen_id, now
            )
            self.notifications.extend(notices)

            return self.snapshot(now)

    def snapshot(self, now: datetime) -> SimulationSnapshot:
        with self._lock:
            return SimulationSnapshot(
                now=now,
                session=self.session,
                trucks=list(self.truck_states),
                citizens=list(self.citizens),
                notifications=self.notifications.items()
            )

    # Admin actions

    def start(self, now: datetime) -> SessionClock:
        session, changed = self._commit(lambda clock: self.controller.start(clock, now))
        if changed:
            self._notify("Simulation started", INFO, now)
            logger.success(f"Session {self.session_id} started")
        return session

    def pause(self, now: datetime) -> SessionClock:
        session, changed = self._commit(lambda clock: self.controller.pause(clock, now))
        if changed:
            self._notify("Simulation paused", INFO, now)
            logger.success(f"Session {self.session_id} paused at {session.accumulated_seconds:.1f}s simulated")
        return session

    def reset(self, now: datetime) -> SessionClock:
        session, _ = self._commit(self.controller.reset)
        self._notify("Simulation reset", INFO, now)
        logger.success(f"Session {self.session_id} reset")
        return session

    def set_speed(self, multiplier: float, now: datetime) -> SessionClock:
        session, changed = self._commit(lambda clock: self.controller.set_speed(clock, multiplier, now))
        if changed:
            logger.info(f"Session {self.session_id} speed multiplier set to {multiplier}x")
        return session

    def update_truck_speed(self, truck_id: str, speed_kmh: float) -> Optional[Truck]:
        """Operator speed change. Progress is speed x elapsed, so it rescales immediately."""
        if speed_kmh is None or speed_kmh < 0:
            raise ValueError(f"Truck speed must be non-negative, got {speed_kmh}")

        truck = self.store.update_truck_speed(truck_id, speed_kmh)
        if truck is None:
            logger.warning(f"Truck {truck_id} not found")
            return None

        with self._lock:
            self.trucks = [truck if t.truck_id == truck_id else t for t in self.trucks]
        return truck

    def _commit(self, transition: Callable[[SessionClock], SessionClock]) -> Tuple[SessionClock, bool]:
        for attempt in range(1, Config.MAX_COMMIT_ATTEMPTS + 1):
            current = self.store.get_session(self.session_id)
            if current is None:
                raise SessionStoreError(f"Session {self.session_id} does not exist")

            proposed = transition(current)
            if proposed == current:
                self.on_session_change(current)
                return current, False

            committed = self.store.compare_and_swap(self.session_id, current.version, proposed)
            if committed is not None:
                self.on_session_change(committed)
                return committed, True

            logger.warning(f"Session write conflict (attempt {attempt}/{Config.MAX_COMMIT_ATTEMPTS}), retrying")

        raise SessionConflictError(f"Session {self.session_id} kept changing, gave up after {Config.MAX_COMMIT_ATTEMPTS} attempts")

    def _notify(self, message: str, type: str, now: datetime) -> None:
        with self._lock:
            self.notifications.push(make_notification(message, type, now))

    # Observer and queries

    def select_citizen(self, citizen_id: Optional[str]) -> bool:
        """Set the citizen whose transitions raise notifications; None clears it."""
        if citizen_id is not None and self.get_citizen(citizen_id) is None:
            return False
        with self._lock:
            self.observed_citizen_id = citizen_id
        return True

    def get_citizen(self, citizen_id: str) -> Optional[Citizen]:
        with self._lock:
            return next((c for c in self.citizens if c.citizen_id == citizen_id), None)

    def eta_for_citizen(self, citizen_id: str) -> Optional[int]:
        citizen = self.get_citizen(citizen_id)
        if citizen is None:
            return None
        with self._lock:
            return eta_minutes(citizen, self.truck_states)

    def distance_to_truck(self, citizen_id: str) -> Optional[float]:
        citizen = self.get_citizen(citizen_id)
        if citizen is None:
            return None
        with self._lock:
            return nearest_distance_km(citizen, self.truck_states)

    def fleet_summary(self) -> pd.DataFrame:
        """One row per truck from the last tick."""
        with self._lock:
            rows = [{
                'truck_id': s.truck_id,
                'name': s.name,
                'route_id': s.route_id,
                'status': s.status,
                'progress': round(s.progress, 4),
                'speed_kmh': s.speed_kmh,
                'lon': s.longitude,
                'lat': s.latitude
            } for s in self.truck_states]
        return pd.DataFrame(rows, columns=['truck_id', 'name', 'route_id', 'status', 'progress', 'speed_kmh', 'lon', 'lat'])
