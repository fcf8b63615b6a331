"""Tests for the MarketTicker refresh service.

Tests:
  1. tick() fan-out to listeners and transition logging
  2. start/stop lifecycle (APScheduler patched out)
  3. status_bar_text rendering
  4. terminal status line (scripts/market_clock.py)
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from market_timer.services.ticker import MarketTicker, status_bar_text
from market_timer.utils.market_hours import market_snapshot


# ──────────────────────────────────────────────────────────────
# Tick
# ──────────────────────────────────────────────────────────────


class TestTick:
    """Snapshot fan-out."""

    def test_listener_receives_snapshot(self, ny) -> None:
        ticker = MarketTicker(interval_seconds=1)
        seen = []
        ticker.add_listener(seen.append)
        snap = ticker.tick(ny(2024, 7, 1, 10, 0))
        assert seen == [snap]
        assert ticker.last_snapshot is snap
        assert snap.countdown == "06:00:00"

    def test_failing_listener_does_not_block_others(self, ny) -> None:
        ticker = MarketTicker(interval_seconds=1)
        broken = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        ticker.add_listener(broken)
        ticker.add_listener(healthy)
        with patch("market_timer.services.ticker.logger") as mock_logger:
            ticker.tick(ny(2024, 7, 1, 10, 0))
        broken.assert_called_once()
        healthy.assert_called_once()
        mock_logger.exception.assert_called_once()

    def test_transition_is_logged(self, ny) -> None:
        ticker = MarketTicker(interval_seconds=1)
        with patch("market_timer.services.ticker.logger") as mock_logger:
            ticker.tick(ny(2024, 7, 1, 15, 59, 59))
            mock_logger.info.assert_not_called()
            ticker.tick(ny(2024, 7, 1, 16, 0, 0))
        mock_logger.info.assert_called_once()
        assert "closed" in mock_logger.info.call_args.args

    def test_default_interval_from_settings(self) -> None:
        from market_timer.config import settings
        assert MarketTicker().interval_seconds == settings.REFRESH_INTERVAL_SECONDS


# ──────────────────────────────────────────────────────────────
# Lifecycle
# ──────────────────────────────────────────────────────────────


class TestTickerLifecycle:
    """start/stop with the scheduler patched out."""

    @pytest.fixture()
    def _mock_apscheduler(self):
        """Patch BackgroundScheduler so start() doesn't spawn a thread."""
        mock_cls = MagicMock()
        mock_instance = MagicMock()
        mock_cls.return_value = mock_instance
        with patch("market_timer.services.ticker.BackgroundScheduler", mock_cls):
            yield mock_instance

    def test_start_and_stop(self, _mock_apscheduler) -> None:
        ticker = MarketTicker(interval_seconds=1)
        result = ticker.start()
        assert result["status"] == "started"
        assert ticker.is_running
        _mock_apscheduler.add_job.assert_called_once()
        _mock_apscheduler.start.assert_called_once()
        # First frame is rendered immediately
        assert ticker.last_snapshot is not None

        result = ticker.stop()
        assert result["status"] == "stopped"
        assert not ticker.is_running
        _mock_apscheduler.shutdown.assert_called_once_with(wait=False)

    @pytest.mark.usefixtures("_mock_apscheduler")
    def test_double_start_returns_already(self) -> None:
        ticker = MarketTicker(interval_seconds=1)
        ticker.start()
        assert ticker.start()["status"] == "already_running"
        ticker.stop()

    def test_stop_when_not_running(self) -> None:
        assert MarketTicker().stop()["status"] == "not_running"

    def test_get_status_when_stopped(self) -> None:
        status = MarketTicker(interval_seconds=2).get_status()
        assert status["is_running"] is False
        assert status["interval_seconds"] == 2
        assert status["last_snapshot"] is None


# ──────────────────────────────────────────────────────────────
# Rendering
# ──────────────────────────────────────────────────────────────


class TestStatusBarText:
    def test_open(self, ny) -> None:
        assert status_bar_text(market_snapshot(ny(2024, 7, 1, 10, 0))) == "● OPEN  06:00:00"

    def test_closed(self, ny) -> None:
        text = status_bar_text(market_snapshot(ny(2024, 7, 13, 14, 0)))
        assert text == "● CLOSED  43:30:00"


class TestTerminalRender:
    """scripts/market_clock.py status line."""

    def test_render_fields(self, ny) -> None:
        from zoneinfo import ZoneInfo

        from scripts.market_clock import render

        snap = market_snapshot(ny(2024, 7, 13, 14, 0), local_tz=ZoneInfo("America/Los_Angeles"))
        line = render(snap)
        assert line == (
            "● CLOSED  43:30:00  |  TIME UNTIL MARKET OPEN  "
            "|  NEXT: MONDAY  |  NY 14:00:00  PDT 11:00:00"
        )
