"""Data models for routes, trucks, citizens and the shared session clock."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from datetime import datetime

# (longitude, latitude)
LonLat = Tuple[float, float]

# Collection status values
PENDING = "pending"
APPROACHING = "approaching"
COLLECTED = "collected"
MISSED = "missed"
COLLECTION_STATUSES = (PENDING, APPROACHING, COLLECTED, MISSED)

# Truck run states
IDLE = "idle"
RUNNING = "running"
PAUSED = "paused"

# Notification types
INFO = "info"
WARNING = "warning"
SUCCESS = "success"
ERROR = "error"

@dataclass(frozen=True)
class Route:
    route_id: str
    name: str
    coordinates: List[LonLat]
    total_distance_km: float
    wards_covered: List[str] = field(default_factory=list)

@dataclass(frozen=True)
class Truck:
    truck_id: str
    name: str
    route_id: Optional[str]
    speed_kmh: float
    home_position: Optional[LonLat] = None

@dataclass(frozen=True)
class TruckState:
    """Truck position and progress derived for one instant."""
    truck_id: str
    name: str
    route_id: Optional[str]
    speed_kmh: float
    position: Optional[LonLat]
    progress: float
    status: str

    @property
    def latitude(self) -> Optional[float]:
        return self.position[1] if self.position else None

    @property
    def longitude(self) -> Optional[float]:
        return self.position[0] if self.position else None

@dataclass(frozen=True)
class Citizen:
    citizen_id: str
    name: str
    address: str
    ward: str
    mohalla: str
    latitude: float
    longitude: float
    status: str = PENDING

@dataclass(frozen=True)
class SessionClock:
    """Persisted session record. started_at is set iff is_running."""
    session_id: str
    is_running: bool = False
    speed_multiplier: float = 1.0
    started_at: Optional[datetime] = None
    accumulated_seconds: float = 0.0
    paused_at: Optional[datetime] = None
    truck_id: Optional[str] = None
    version: int = 0
    reset_epoch: int = 0

@dataclass(frozen=True)
class Notification:
    notification_id: str
    message: str
    type: str
    timestamp: datetime
