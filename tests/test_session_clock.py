"""Test simulated time and session transitions."""
import pytest
from datetime import datetime, timedelta, timezone
from models.simulation_models import SessionClock
from core.session_clock import elapsed_seconds
from core.session_controller import SessionController

T0 = datetime(2024, 1, 1, 6, 0, 0, tzinfo=timezone.utc)

def at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)

class TestElapsedSeconds:
    def test_stopped_clock_ignores_now(self):
        clock = SessionClock('s', is_running=False, accumulated_seconds=42.0)
        assert elapsed_seconds(clock, at(0)) == 42.0
        assert elapsed_seconds(clock, at(10_000)) == 42.0

    def test_running_clock_scales_by_multiplier(self):
        clock = SessionClock('s', is_running=True, speed_multiplier=2.0, started_at=T0, accumulated_seconds=10.0)
        assert elapsed_seconds(clock, at(30)) == pytest.approx(70.0)

    def test_monotonic_while_running(self):
        clock = SessionClock('s', is_running=True, speed_multiplier=1.5, started_at=T0)
        readings = [elapsed_seconds(clock, at(s)) for s in (0, 1, 5, 5, 60, 3600)]
        assert readings == sorted(readings)

    def test_idempotent(self):
        clock = SessionClock('s', is_running=True, started_at=T0, accumulated_seconds=5.0)
        assert elapsed_seconds(clock, at(12)) == elapsed_seconds(clock, at(12))

    def test_observer_behind_writer_never_loses_banked_time(self):
        clock = SessionClock('s', is_running=True, started_at=T0, accumulated_seconds=100.0)
        assert elapsed_seconds(clock, at(-3)) == 100.0

class TestSessionController:
    def setup_method(self):
        self.controller = SessionController()
        self.clock = SessionClock('s')

    def test_start_sets_started_at(self):
        started = self.controller.start(self.clock, T0)
        assert started.is_running
        assert started.started_at == T0
        assert started.accumulated_seconds == 0.0

    def test_start_when_running_is_noop(self):
        started = self.controller.start(self.clock, T0)
        assert self.controller.start(started, at(50)) is started

    def test_pause_when_stopped_is_noop(self):
        assert self.controller.pause(self.clock, T0) is self.clock

    def test_pause_banks_elapsed_time(self):
        started = self.controller.start(self.clock, T0)
        paused = self.controller.pause(started, at(100))

        assert not paused.is_running
        assert paused.started_at is None
        assert paused.paused_at == at(100)
        assert paused.accumulated_seconds == pytest.approx(100.0)

    def test_pause_start_pause_is_additive(self):
        clock = self.controller.start(self.clock, T0)
        clock = self.controller.pause(clock, at(100))
        clock = self.controller.set_speed(clock, 2.0, at(150))
        clock = self.controller.start(clock, at(200))
        clock = self.controller.pause(clock, at(250))

        assert clock.accumulated_seconds == pytest.approx(100.0 + 50.0 * 2.0)

    def test_set_speed_while_running_preserves_banked_time(self):
        clock = self.controller.start(self.clock, T0)
        switched = self.controller.set_speed(clock, 2.0, at(100))

        assert switched.is_running
        assert switched.started_at == at(100)
        assert switched.speed_multiplier == 2.0
        assert switched.accumulated_seconds == pytest.approx(100.0)
        assert elapsed_seconds(switched, at(150)) == pytest.approx(200.0)

    def test_set_speed_while_stopped_only_changes_multiplier(self):
        clock = SessionClock('s', accumulated_seconds=30.0)
        switched = self.controller.set_speed(clock, 4.0, at(10))

        assert switched.speed_multiplier == 4.0
        assert switched.accumulated_seconds == 30.0
        assert switched.started_at is None

    @pytest.mark.parametrize("multiplier", [0, -1.0])
    def test_set_speed_rejects_non_positive(self, multiplier):
        with pytest.raises(ValueError):
            self.controller.set_speed(self.clock, multiplier, T0)

    def test_reset_clears_clock(self):
        clock = self.controller.start(self.clock, T0)
        clock = self.controller.set_speed(clock, 3.0, at(10))
        reset = self.controller.reset(clock)

        assert not reset.is_running
        assert reset.started_at is None
        assert reset.accumulated_seconds == 0.0
        assert reset.reset_epoch == clock.reset_epoch + 1

    def test_started_at_set_iff_running(self):
        clock = self.clock
        steps = [
            lambda c: self.controller.start(c, at(1)),
            lambda c: self.controller.set_speed(c, 2.0, at(2)),
            lambda c: self.controller.pause(c, at(3)),
            lambda c: self.controller.start(c, at(4)),
            self.controller.reset,
        ]
        for step in steps:
            clock = step(clock)
            assert (clock.started_at is not None) == clock.is_running
