"""Test that tunables come from the environment."""
import importlib
from configurations import config

def test_limits_read_from_environment(monkeypatch):
    monkeypatch.setenv("EARTH_RADIUS_KM", "6378.1")
    monkeypatch.setenv("MAX_NOTIFICATIONS", "25")
    try:
        reloaded = importlib.reload(config).Config
        assert reloaded.EARTH_RADIUS_KM == 6378.1
        assert reloaded.MAX_NOTIFICATIONS == 25
    finally:
        monkeypatch.undo()
        importlib.reload(config)
