"""Application configuration — environment variables and defaults.

Only ambient concerns live here (logging, server, refresh cadence).
NYSE trading hours and the holiday rules are fixed and are NOT read
from the environment.
"""

import os
from pathlib import Path
from typing import Any


class Settings:
    """Central configuration pulled from environment with safe defaults."""

    # Paths
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    LOGS_DIR: Path = Path(os.getenv("MARKET_TIMER_LOGS_DIR", str(BASE_DIR / "logs")))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Market zone — fixed, every market-hours decision is made here
    MARKET_TIMEZONE: str = "America/New_York"

    # Optional IANA name for the "local" clock (display only).
    # Empty string means "use the system local zone".
    LOCAL_TIMEZONE: str = os.getenv("LOCAL_TIMEZONE", "")

    # Ticker cadence (seconds between snapshots)
    REFRESH_INTERVAL_SECONDS: int = int(os.getenv("REFRESH_INTERVAL_SECONDS", "1"))

    # Server
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8000"))

    def __init__(self) -> None:
        """Ensure runtime directories exist."""
        self.LOGS_DIR.mkdir(parents=True, exist_ok=True)

    def as_dict(self) -> dict[str, Any]:
        """Return the current settings as a dict (for the status endpoint)."""
        return {
            "market_timezone": self.MARKET_TIMEZONE,
            "local_timezone": self.LOCAL_TIMEZONE or None,
            "refresh_interval_seconds": self.REFRESH_INTERVAL_SECONDS,
            "log_level": self.LOG_LEVEL,
        }


settings = Settings()
