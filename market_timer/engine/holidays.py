"""NYSE holiday rules — pure functions over civil dates.

The calendar is rule-based rather than a hardcoded per-year table, so it
never goes stale. Each rule is an independent predicate; for any real
date at most one of them matches.

Rules (all in the New York civil calendar):
  - New Year's Day      Jan 1, observed Fri Dec 31 / Mon Jan 2
  - MLK Day             3rd Monday of January
  - Presidents' Day     3rd Monday of February
  - Good Friday         Easter Sunday - 2 days
  - Memorial Day        last Monday of May
  - Juneteenth          Jun 19, observed Fri / Mon
  - Independence Day    Jul 4, observed Fri / Mon
  - Labor Day           1st Monday of September
  - Thanksgiving        4th Thursday of November
  - Christmas           Dec 25, observed Fri / Mon
"""

from __future__ import annotations

from calendar import MONDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY
from datetime import MAXYEAR, date, timedelta
from typing import Callable

from market_timer.models.market import HolidayEntry

# First full year of the Gregorian computus
MIN_GREGORIAN_YEAR = 1583


# ──────────────────────────────────────────────────────────────
# Easter / Good Friday
# ──────────────────────────────────────────────────────────────


def easter_date(year: int) -> date:
    """Gregorian Easter Sunday (anonymous Meeus/Jones/Butcher algorithm)."""
    if year < MIN_GREGORIAN_YEAR:
        raise ValueError(f"Gregorian Easter is undefined for year {year}")

    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def good_friday(year: int) -> date:
    """The Friday two days before Easter Sunday."""
    return easter_date(year) - timedelta(days=2)


# ──────────────────────────────────────────────────────────────
# Rule helpers
# ──────────────────────────────────────────────────────────────


def observed_date(nominal: date) -> date:
    """Shift a weekend holiday: Saturday → Friday before, Sunday → Monday after."""
    if nominal.weekday() == SATURDAY:
        return nominal - timedelta(days=1)
    if nominal.weekday() == SUNDAY:
        return nominal + timedelta(days=1)
    return nominal


def _fixed(month: int, day: int) -> Callable[[date], bool]:
    """Predicate for a fixed-date holiday with weekend observance."""

    def rule(d: date) -> bool:
        # A Saturday Jan 1 is observed on Dec 31 of the previous year
        year = d.year + 1 if month == 1 and d.month == 12 else d.year
        if year > MAXYEAR:
            return False
        return observed_date(date(year, month, day)) == d

    return rule


def _nth_weekday(month: int, weekday: int, first_day: int) -> Callable[[date], bool]:
    """Predicate for "the Nth <weekday> of <month>".

    ``first_day`` is the earliest day-of-month the Nth occurrence can fall
    on (1 for the 1st, 15 for the 3rd, 22 for the 4th).
    """

    def rule(d: date) -> bool:
        return (
            d.month == month
            and d.weekday() == weekday
            and first_day <= d.day <= first_day + 6
        )

    return rule


def _memorial_day(d: date) -> bool:
    return d.month == 5 and d.weekday() == MONDAY and (d + timedelta(days=7)).month != 5


def _good_friday(d: date) -> bool:
    return (
        d.weekday() == FRIDAY
        and d.year >= MIN_GREGORIAN_YEAR
        and d == good_friday(d.year)
    )


HOLIDAY_RULES: tuple[tuple[str, Callable[[date], bool]], ...] = (
    ("New Year's Day", _fixed(1, 1)),
    ("Martin Luther King Jr. Day", _nth_weekday(1, MONDAY, 15)),
    ("Presidents' Day", _nth_weekday(2, MONDAY, 15)),
    ("Good Friday", _good_friday),
    ("Memorial Day", _memorial_day),
    ("Juneteenth", _fixed(6, 19)),
    ("Independence Day", _fixed(7, 4)),
    ("Labor Day", _nth_weekday(9, MONDAY, 1)),
    ("Thanksgiving Day", _nth_weekday(11, THURSDAY, 22)),
    ("Christmas Day", _fixed(12, 25)),
)

_FIXED_NOMINAL = {
    "New Year's Day": (1, 1),
    "Juneteenth": (6, 19),
    "Independence Day": (7, 4),
    "Christmas Day": (12, 25),
}


# ──────────────────────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────────────────────


def holiday_name(d: date) -> str | None:
    """Name of the market holiday on ``d``, or None for a normal day."""
    for name, rule in HOLIDAY_RULES:
        if rule(d):
            return name
    return None


def is_market_holiday(d: date) -> bool:
    """True when US equity markets are closed on ``d`` for a named holiday."""
    return holiday_name(d) is not None


def holidays_for_year(year: int) -> list[HolidayEntry]:
    """All market holidays whose (observed) date falls inside ``year``."""
    if year < MIN_GREGORIAN_YEAR:
        raise ValueError(f"Holiday rules are undefined for year {year}")

    first = date(year, 1, 1)
    entries: list[HolidayEntry] = []
    for offset in range((date(year, 12, 31) - first).days + 1):
        day = first + timedelta(days=offset)
        name = holiday_name(day)
        if name is None:
            continue
        nominal = _FIXED_NOMINAL.get(name)
        observed = nominal is not None and (day.month, day.day) != nominal
        entries.append(HolidayEntry(day=day, name=name, observed=observed))
    return entries
