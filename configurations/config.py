"""Configuration settings for the live collection tracker."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Config:
    # Database settings; "memory://" keeps the session in process with push updates
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///swm_tracker.db")
    SESSION_ID: str = os.getenv("SESSION_ID", "default")

    # Proximity thresholds (km)
    COLLECTED_RADIUS_KM: float = float(os.getenv("COLLECTED_RADIUS_KM", "0.05"))
    APPROACHING_RADIUS_KM: float = float(os.getenv("APPROACHING_RADIUS_KM", "0.2"))

    EARTH_RADIUS_KM: float = float(os.getenv("EARTH_RADIUS_KM", "6371.0"))

    # "segment" (equal weight per segment) or "arc_length"
    INTERPOLATION_MODE: str = os.getenv("INTERPOLATION_MODE", "segment")

    # Notification ring buffer size
    MAX_NOTIFICATIONS: int = int(os.getenv("MAX_NOTIFICATIONS", "10"))

    # Session write retries on version conflict
    MAX_COMMIT_ATTEMPTS: int = int(os.getenv("MAX_COMMIT_ATTEMPTS", "3"))

    # Headless tick loop
    TICK_INTERVAL_SECONDS: float = float(os.getenv("TICK_INTERVAL_SECONDS", "1.0"))

    # API settings
    API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("API_PORT", "8081"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
