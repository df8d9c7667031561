"""ETA and nearest-truck lookups over the latest truck states."""
import math
import numpy as np
from typing import Optional, Sequence
from models.simulation_models import Citizen, TruckState, RUNNING, PAUSED
from tools.geo_math import distances_km

def _positions(truck_states: Sequence[TruckState]):
    return [(s.position[1], s.position[0]) for s in truck_states]

def eta_minutes(citizen: Citizen, truck_states: Sequence[TruckState]) -> Optional[int]:
    """Minutes until the closest truck still on its route could arrive, or None."""
    candidates = [
        s for s in truck_states
        if s.status in (RUNNING, PAUSED) and s.progress < 1 and s.speed_kmh > 0 and s.position is not None
    ]
    if not candidates:
        return None

    distances = distances_km((citizen.latitude, citizen.longitude), _positions(candidates))
    speeds = np.array([s.speed_kmh for s in candidates], dtype=float)
    etas = distances / speeds * 60

    # Half-up rounding, not banker's
    return int(math.floor(float(etas.min()) + 0.5))

def nearest_distance_km(citizen: Citizen, truck_states: Sequence[TruckState]) -> Optional[float]:
    """Distance to the closest truck regardless of run state, or None."""
    located = [s for s in truck_states if s.position is not None]
    if not located:
        return None

    distances = distances_km((citizen.latitude, citizen.longitude), _positions(located))
    return float(distances.min())
