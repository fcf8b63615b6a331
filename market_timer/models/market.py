"""Models for the market-calendar engine.

CivilMoment     — an instant decomposed in a named zone (derived, never stored).
MarketSnapshot  — everything a display needs for one tick.
HolidayEntry    — one row of the yearly holiday table.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class CivilMoment:
    """Wall-clock fields of an instant in one zone.

    ``weekday`` follows the 1=Sunday … 7=Saturday convention.
    """

    year: int
    month: int
    day: int
    weekday: int
    hour: int
    minute: int
    second: int

    @property
    def seconds_since_midnight(self) -> int:
        return self.hour * 3600 + self.minute * 60 + self.second

    @property
    def civil_date(self) -> date:
        return date(self.year, self.month, self.day)


class MarketSnapshot(BaseModel):
    """Market state for one instant. Recomputed on every call."""

    model_config = ConfigDict(frozen=True)

    is_open: bool
    seconds_remaining: int
    countdown: str
    menu_bar_countdown: str
    status_label: str
    countdown_label: str
    next_trading_day: str

    # Clocks (display only)
    ny_clock: str
    local_clock: str
    local_tz_abbr: str

    as_of: datetime
    next_open: datetime | None = None
    next_close: datetime | None = None
    holiday: str | None = None


class HolidayEntry(BaseModel):
    """A market holiday inside a calendar year."""

    day: date
    name: str
    observed: bool = False
