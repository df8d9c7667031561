"""Start, pause, reset and speed-change transitions over the session record."""
from dataclasses import replace
from datetime import datetime
from models.simulation_models import SessionClock
from core.session_clock import running_seconds

class SessionController:
    """Each transition returns a new record; the store bumps the version on commit."""

    def start(self, clock: SessionClock, now: datetime) -> SessionClock:
        if clock.is_running:
            return clock
        return replace(clock, is_running=True, started_at=now, paused_at=None)

    def pause(self, clock: SessionClock, now: datetime) -> SessionClock:
        if not clock.is_running:
            return clock
        return replace(
            clock,
            is_running=False,
            started_at=None,
            paused_at=now,
            accumulated_seconds=clock.accumulated_seconds + running_seconds(clock, now)
        )

    def reset(self, clock: SessionClock) -> SessionClock:
        return replace(
            clock,
            is_running=False,
            started_at=None,
            paused_at=None,
            accumulated_seconds=0.0,
            reset_epoch=clock.reset_epoch + 1
        )

    def set_speed(self, clock: SessionClock, multiplier: float, now: datetime) -> SessionClock:
        """Change the multiplier, banking time already run at the old one."""
        if multiplier is None or multiplier <= 0:
            raise ValueError(f"Speed multiplier must be positive, got {multiplier}")

        if not clock.is_running:
            return replace(clock, speed_multiplier=multiplier)

        return replace(
            clock,
            speed_multiplier=multiplier,
            started_at=now,
            accumulated_seconds=clock.accumulated_seconds + running_seconds(clock, now)
        )
