"""Market Ticker — APScheduler-driven once-per-second snapshot refresh.

The engine never owns a timer; this service is the caller that decides
cadence. Each tick computes a fresh ``MarketSnapshot`` and hands it to
every registered listener (terminal status line, API cache, ...).
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from market_timer.config import settings
from market_timer.models.market import MarketSnapshot
from market_timer.utils.logger import logger
from market_timer.utils.market_hours import market_snapshot

Listener = Callable[[MarketSnapshot], None]

_STATUS_DOT = "●"


def status_bar_text(snapshot: MarketSnapshot) -> str:
    """Compact one-line rendering, e.g. ``● OPEN  06:00:00``."""
    state = "OPEN" if snapshot.is_open else "CLOSED"
    return f"{_STATUS_DOT} {state}  {snapshot.menu_bar_countdown}"


class MarketTicker:
    """Polls the market engine on a fixed interval."""

    def __init__(self, interval_seconds: int | None = None) -> None:
        self.interval_seconds = interval_seconds or settings.REFRESH_INTERVAL_SECONDS
        self._listeners: list[Listener] = []
        self._scheduler: BackgroundScheduler | None = None
        self._last_open: bool | None = None
        self.last_snapshot: MarketSnapshot | None = None
        self.is_running = False

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, dt: datetime | None = None) -> MarketSnapshot:
        """Compute one snapshot and fan it out to listeners."""
        snapshot = market_snapshot(dt)

        if self._last_open is not None and snapshot.is_open != self._last_open:
            logger.info(
                "[Ticker] Market %s at %s ET (next: %s)",
                "opened" if snapshot.is_open else "closed",
                snapshot.ny_clock,
                snapshot.next_trading_day,
            )
        self._last_open = snapshot.is_open
        self.last_snapshot = snapshot

        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("[Ticker] Listener %r failed", listener)
        return snapshot

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> dict:
        """Start refreshing every ``interval_seconds``."""
        if self.is_running:
            return {"status": "already_running"}

        self._scheduler = BackgroundScheduler()
        self._scheduler.add_job(
            self.tick,
            IntervalTrigger(seconds=self.interval_seconds),
            id="market_tick",
            name="Market Snapshot Refresh",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        self.is_running = True

        # Render immediately instead of waiting a full interval
        self.tick()
        logger.info("[Ticker] Started — refreshing every %ds", self.interval_seconds)
        return {"status": "started", "interval_seconds": self.interval_seconds}

    def stop(self) -> dict:
        """Stop the refresh job."""
        if not self.is_running or not self._scheduler:
            return {"status": "not_running"}

        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        self.is_running = False
        logger.info("[Ticker] Stopped")
        return {"status": "stopped"}

    def get_status(self) -> dict:
        """Return ticker state for the status endpoint."""
        return {
            "is_running": self.is_running,
            "interval_seconds": self.interval_seconds,
            "listeners": len(self._listeners),
            "last_snapshot": (
                self.last_snapshot.model_dump(mode="json")
                if self.last_snapshot else None
            ),
        }
