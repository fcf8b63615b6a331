"""Smoke tests for the project structure, config and models."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError


class TestImports:
    """Verify all modules can be imported without errors."""

    def test_config(self) -> None:
        from market_timer.config import settings
        assert settings.MARKET_TIMEZONE == "America/New_York"
        assert settings.REFRESH_INTERVAL_SECONDS >= 1
        assert settings.LOGS_DIR.exists()

    def test_logger_writes_run_file(self) -> None:
        from market_timer.config import settings
        from market_timer.utils.logger import logger
        logger.info("smoke test")
        assert list(settings.LOGS_DIR.glob("market_timer_*.log"))

    def test_holiday_entry_model(self) -> None:
        from market_timer.models.market import HolidayEntry
        entry = HolidayEntry(day=date(2026, 7, 3), name="Independence Day", observed=True)
        assert entry.model_dump(mode="json")["day"] == "2026-07-03"

    def test_snapshot_is_frozen(self) -> None:
        from market_timer.utils.market_hours import market_snapshot
        snap = market_snapshot()
        with pytest.raises(ValidationError):
            snap.is_open = not snap.is_open

    def test_civil_date(self) -> None:
        from market_timer.models.market import CivilMoment
        moment = CivilMoment(2024, 7, 1, 2, 10, 0, 0)
        assert moment.civil_date == date(2024, 7, 1)
        assert moment.seconds_since_midnight == 36000

    def test_log_opens_with_market_zone(self) -> None:
        from market_timer.config import settings
        from market_timer.utils.logger import logger
        logger.debug("flush")
        run_logs = sorted(
            settings.LOGS_DIR.glob("market_timer_*.log"), key=lambda p: p.stat().st_mtime
        )
        text = run_logs[-1].read_text(encoding="utf-8")
        assert "market zone America/New_York" in text
