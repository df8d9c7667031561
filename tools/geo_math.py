"""Great-circle distance and polyline interpolation helpers."""
import math
import numpy as np
from typing import Optional, Sequence, Tuple
from shapely.geometry import LineString
from configurations.config import Config

SEGMENT = "segment"
ARC_LENGTH = "arc_length"

def haversine_km(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """Haversine distance in km between two (lat, lon) points."""
    lat1, lon1 = a
    lat2, lon2 = b
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    h = (math.sin(d_lat / 2) ** 2 +
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2)
    h = min(h, 1.0)
    return Config.EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

def distances_km(point: Tuple[float, float], positions) -> np.ndarray:
    """Vectorized haversine from one (lat, lon) point to an (n, 2) array of (lat, lon) points."""
    positions = np.asarray(positions, dtype=float).reshape(-1, 2)
    if len(positions) == 0:
        return np.empty(0)

    lat1, lon1 = np.radians(point[0]), np.radians(point[1])
    lat2 = np.radians(positions[:, 0])
    lon2 = np.radians(positions[:, 1])

    h = (np.sin((lat2 - lat1) / 2) ** 2 +
         np.cos(lat1) * np.cos(lat2) * np.sin((lon2 - lon1) / 2) ** 2)
    h = np.clip(h, 0.0, 1.0)
    return Config.EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))

def interpolate_position(coordinates: Sequence[Tuple[float, float]], progress: float,
                         mode: str = SEGMENT) -> Optional[Tuple[float, float]]:
    """
    Position along a polyline for a progress fraction.

    In segment mode every segment gets an equal share of progress regardless of
    its length, so motion is only approximately uniform over unequal segments.
    Arc-length mode paces by cumulative planar length instead.
    """
    if not coordinates:
        return None
    if len(coordinates) < 2:
        return tuple(coordinates[0])
    if progress <= 0:
        return tuple(coordinates[0])
    if progress >= 1:
        return tuple(coordinates[-1])

    if mode == ARC_LENGTH:
        line = LineString(coordinates)
        if line.length > 0:
            point = line.interpolate(progress, normalized=True)
            return (point.x, point.y)

    total_segments = len(coordinates) - 1
    target = progress * total_segments
    index = int(math.floor(target))
    fraction = target - index

    if index >= total_segments:
        return tuple(coordinates[-1])

    start = coordinates[index]
    end = coordinates[index + 1]
    if fraction == 0:
        return tuple(start)

    return (start[0] + (end[0] - start[0]) * fraction,
            start[1] + (end[1] - start[1]) * fraction)
