"""Simulated time derived from the persisted session record."""
from datetime import datetime
from models.simulation_models import SessionClock

def running_seconds(clock: SessionClock, now: datetime) -> float:
    """Simulated seconds accrued in the current running interval."""
    if not clock.is_running or clock.started_at is None:
        return 0.0
    # Observer clocks may trail the writer's clock slightly
    delta = max((now - clock.started_at).total_seconds(), 0.0)
    return delta * clock.speed_multiplier

def elapsed_seconds(clock: SessionClock, now: datetime) -> float:
    """
    Total simulated seconds for the session at `now`.

    Computed from the record alone, so every observer reading the same record
    at the same instant gets the same answer.
    """
    return clock.accumulated_seconds + running_seconds(clock, now)
