"""SQL storage for routes, trucks and the shared simulation session."""
import json
import logging
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from models.simulation_models import Route, Truck, SessionClock
from core.blackboard import SessionBlackboard
from configurations.config import Config

MEMORY_URL = "memory://"

logger = logging.getLogger(__name__)

class SessionStoreError(Exception):
    """The backing database could not be read or written."""

class SessionConflictError(Exception):
    """A session write kept losing the version race."""

def _to_text(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()

def _from_text(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

class SessionStore:
    def __init__(self, database_url: str = None):
        self.database_url = database_url or Config.DATABASE_URL
        try:
            self.engine = create_engine(self.database_url)
            self._create_tables()
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Could not open session database: {e}") from e

    def _create_tables(self):
        """Create necessary tables if they don't exist."""
        with self.engine.connect() as conn:
            conn.execute(text("""
                CREATE TABLE IF NOT EXISTS routes (
                    id VARCHAR(255) PRIMARY KEY,
                    name VARCHAR(255),
                    coordinates TEXT NOT NULL,
                    wards_covered TEXT,
                    total_distance FLOAT NOT NULL
                )
            """))

            conn.execute(text("""
                CREATE TABLE IF NOT EXISTS trucks (
                    id VARCHAR(255) PRIMARY KEY,
                    name VARCHAR(255),
                    route_id VARCHAR(255),
                    speed FLOAT NOT NULL,
                    home_position TEXT
                )
            """))

            conn.execute(text("""
                CREATE TABLE IF NOT EXISTS simulation_sessions (
                    id VARCHAR(255) PRIMARY KEY,
                    is_running BOOLEAN NOT NULL,
                    speed_multiplier FLOAT NOT NULL,
                    started_at VARCHAR(64),
                    paused_at VARCHAR(64),
                    accumulated_time FLOAT NOT NULL,
                    truck_id VARCHAR(255),
                    version INTEGER NOT NULL,
                    reset_epoch INTEGER NOT NULL
                )
            """))
            conn.commit()
            logger.info("Simulation tables ready")

    def seed(self, routes: List[Route], trucks: List[Truck], session: SessionClock) -> None:
        """Insert base records that are not stored yet."""
        try:
            with self.engine.connect() as conn:
                for route in routes:
                    exists = conn.execute(text("SELECT 1 FROM routes WHERE id = :id"), {"id": route.route_id}).first()
                    if exists:
                        continue
                    conn.execute(
                        text("""
                            INSERT INTO routes (id, name, coordinates, wards_covered, total_distance)
                            VALUES (:id, :name, :coordinates, :wards_covered, :total_distance)
                        """),
                        {
                            "id": route.route_id,
                            "name": route.name,
                            "coordinates": json.dumps([list(c) for c in route.coordinates]),
                            "wards_covered": json.dumps(list(route.wards_covered)),
                            "total_distance": route.total_distance_km
                        }
                    )

                for truck in trucks:
                    exists = conn.execute(text("SELECT 1 FROM trucks WHERE id = :id"), {"id": truck.truck_id}).first()
                    if exists:
                        continue
                    conn.execute(
                        text("""
                            INSERT INTO trucks (id, name, route_id, speed, home_position)
                            VALUES (:id, :name, :route_id, :speed, :home_position)
                        """),
                        {
                            "id": truck.truck_id,
                            "name": truck.name,
                            "route_id": truck.route_id,
                            "speed": truck.speed_kmh,
                            "home_position": json.dumps(list(truck.home_position)) if truck.home_position else None
                        }
                    )

                exists = conn.execute(
                    text("SELECT 1 FROM simulation_sessions WHERE id = :id"), {"id": session.session_id}
                ).first()
                if not exists:
                    conn.execute(
                        text("""
                            INSERT INTO simulation_sessions
                                (id, is_running, speed_multiplier, started_at, paused_at,
                                 accumulated_time, truck_id, version, reset_epoch)
                            VALUES (:id, :is_running, :speed_multiplier, :started_at, :paused_at,
                                    :accumulated_time, :truck_id, :version, :reset_epoch)
                        """),
                        self._session_params(session)
                    )
                conn.commit()
            logger.info(f"Seeded {len(routes)} routes and {len(trucks)} trucks")
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Seeding failed: {e}") from e

    def load_routes(self) -> List[Route]:
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(text(
                    "SELECT id, name, coordinates, wards_covered, total_distance FROM routes ORDER BY id"
                )).mappings().all()
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Loading routes failed: {e}") from e

        return [
            Route(
                route_id=row["id"],
                name=row["name"],
                coordinates=[tuple(c) for c in json.loads(row["coordinates"])],
                total_distance_km=float(row["total_distance"]),
                wards_covered=json.loads(row["wards_covered"]) if row["wards_covered"] else []
            )
            for row in rows
        ]

    def load_trucks(self) -> List[Truck]:
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(text(
                    "SELECT id, name, route_id, speed, home_position FROM trucks ORDER BY id"
                )).mappings().all()
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Loading trucks failed: {e}") from e

        return [
            Truck(
                truck_id=row["id"],
                name=row["name"],
                route_id=row["route_id"],
                speed_kmh=float(row["speed"]),
                home_position=tuple(json.loads(row["home_position"])) if row["home_position"] else None
            )
            for row in rows
        ]

    def get_session(self, session_id: str) -> Optional[SessionClock]:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    text("SELECT * FROM simulation_sessions WHERE id = :id"), {"id": session_id}
                ).mappings().first()
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Loading session {session_id} failed: {e}") from e

        if row is None:
            return None

        return SessionClock(
            session_id=row["id"],
            is_running=bool(row["is_running"]),
            speed_multiplier=float(row["speed_multiplier"]),
            started_at=_from_text(row["started_at"]),
            accumulated_seconds=float(row["accumulated_time"]),
            paused_at=_from_text(row["paused_at"]),
            truck_id=row["truck_id"],
            version=int(row["version"]),
            reset_epoch=int(row["reset_epoch"])
        )

    def compare_and_swap(self, session_id: str, expected_version: int,
                         clock: SessionClock) -> Optional[SessionClock]:
        """Single conditional UPDATE; returns the committed record or None if the version moved."""
        params = self._session_params(clock)
        params.update({"id": session_id, "expected": expected_version, "version": expected_version + 1})
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    text("""
                        UPDATE simulation_sessions
                        SET is_running = :is_running,
                            speed_multiplier = :speed_multiplier,
                            started_at = :started_at,
                            paused_at = :paused_at,
                            accumulated_time = :accumulated_time,
                            truck_id = :truck_id,
                            version = :version,
                            reset_epoch = :reset_epoch
                        WHERE id = :id AND version = :expected
                    """),
                    params
                )
                conn.commit()
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Writing session {session_id} failed: {e}") from e

        if result.rowcount != 1:
            logger.info(f"Session {session_id} write rejected, version {expected_version} is stale")
            return None
        return self.get_session(session_id)

    def update_truck_speed(self, truck_id: str, speed_kmh: float) -> Optional[Truck]:
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    text("UPDATE trucks SET speed = :speed WHERE id = :id"),
                    {"speed": speed_kmh, "id": truck_id}
                )
                conn.commit()
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Updating truck {truck_id} failed: {e}") from e

        if result.rowcount != 1:
            return None
        logger.info(f"Truck {truck_id} speed set to {speed_kmh} km/h")
        return next((t for t in self.load_trucks() if t.truck_id == truck_id), None)

    def _session_params(self, clock: SessionClock) -> dict:
        return {
            "id": clock.session_id,
            "is_running": clock.is_running,
            "speed_multiplier": clock.speed_multiplier,
            "started_at": _to_text(clock.started_at),
            "paused_at": _to_text(clock.paused_at),
            "accumulated_time": clock.accumulated_seconds,
            "truck_id": clock.truck_id,
            "version": clock.version,
            "reset_epoch": clock.reset_epoch
        }

def open_store(database_url: str):
    """SessionStore for SQLAlchemy URLs, SessionBlackboard for memory://."""
    if database_url.startswith(MEMORY_URL):
        logger.info("Using in-memory session blackboard")
        return SessionBlackboard()
    return SessionStore(database_url)
