"""Market hours utilities — timezone-aware NYSE schedule helpers.

Decides whether the market is open at a given instant, finds the next
session open, and builds the ``MarketSnapshot`` a display polls once per
second. Every function is pure over its input instant; nothing is cached
between calls. Uses stdlib zoneinfo (no pytz dependency).
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from market_timer.config import settings
from market_timer.engine.holidays import holiday_name, is_market_holiday
from market_timer.models.market import CivilMoment, MarketSnapshot
from market_timer.utils.logger import logger


class MarketTimezoneError(RuntimeError):
    """A configured zone (market or local display) could not be resolved."""


class NextOpenNotFoundError(RuntimeError):
    """No trading day inside the search window (holiday rules are broken)."""


def _load_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        logger.critical("[MarketHours] Cannot resolve timezone %s: %s", name, exc)
        raise MarketTimezoneError(
            f"Timezone {name!r} is unavailable; install the tzdata package"
        ) from exc


def _resolve_local_zone(name: str) -> ZoneInfo | None:
    """Configured local display zone, or None for the system zone."""
    if not name:
        return None
    return _load_zone(name)


ET = _load_zone(settings.MARKET_TIMEZONE)
# Display only; resolved once so a bad name fails at startup
LOCAL_TZ = _resolve_local_zone(settings.LOCAL_TIMEZONE)
MARKET_OPEN = time(9, 30)
MARKET_CLOSE = time(16, 0)

# Long enough for any holiday cluster in the fixed rule set
NEXT_OPEN_SEARCH_DAYS = 14

STATUS_OPEN = "MARKET OPEN"
STATUS_CLOSED = "MARKET CLOSED"
LABEL_UNTIL_CLOSE = "TIME UNTIL MARKET CLOSE"
LABEL_UNTIL_OPEN = "TIME UNTIL MARKET OPEN"

# strftime("%A") follows the process locale; labels are always English
_WEEKDAY_NAMES = (
    "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY",
    "FRIDAY", "SATURDAY", "SUNDAY",
)


def _seconds_of_day(t: time) -> int:
    return t.hour * 3600 + t.minute * 60 + t.second


def now_et() -> datetime:
    """Current time in US Eastern."""
    return datetime.now(ET)


def to_et(dt: datetime | None = None) -> datetime:
    """Project an aware instant into New York time (``None`` → now)."""
    if dt is None:
        return now_et()
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("Naive datetime given; pass a timezone-aware instant")
    return dt.astimezone(ET)


def civil_moment(dt: datetime, tz: tzinfo = ET) -> CivilMoment:
    """Decompose ``dt`` into wall-clock fields in ``tz`` (weekday 1=Sun … 7=Sat)."""
    if dt.tzinfo is None:
        raise ValueError("Naive datetime given; pass a timezone-aware instant")
    local = dt.astimezone(tz)
    return CivilMoment(
        year=local.year,
        month=local.month,
        day=local.day,
        weekday=local.isoweekday() % 7 + 1,
        hour=local.hour,
        minute=local.minute,
        second=local.second,
    )


def is_trading_day(d: date) -> bool:
    """Mon-Fri and not an NYSE holiday."""
    return d.weekday() <= 4 and not is_market_holiday(d)


def is_market_open(dt: datetime | None = None) -> bool:
    """Check if NYSE is open (trading day, 9:30 <= t < 16:00 ET)."""
    now = civil_moment(to_et(dt))
    if not is_trading_day(now.civil_date):
        return False
    return (
        _seconds_of_day(MARKET_OPEN)
        <= now.seconds_since_midnight
        < _seconds_of_day(MARKET_CLOSE)
    )


def _session_open(d: date) -> datetime:
    return datetime.combine(d, MARKET_OPEN, tzinfo=ET)


def next_market_open(dt: datetime | None = None) -> datetime:
    """Return the next session open (9:30 ET) at or after ``dt``.

    Before 9:30 on a trading day this is today's open; otherwise the
    search walks forward one day at a time, at most
    ``NEXT_OPEN_SEARCH_DAYS`` days. If the market is currently open this
    returns the *next* session's open.
    """
    now = to_et(dt)
    today = now.date()

    if is_trading_day(today) and now.time() < MARKET_OPEN:
        return _session_open(today)

    for offset in range(1, NEXT_OPEN_SEARCH_DAYS + 1):
        candidate = today + timedelta(days=offset)
        if is_trading_day(candidate):
            return _session_open(candidate)

    logger.error(
        "[MarketHours] No trading day within %d days of %s — holiday rules broken?",
        NEXT_OPEN_SEARCH_DAYS, now.isoformat(),
    )
    raise NextOpenNotFoundError(
        f"No trading day within {NEXT_OPEN_SEARCH_DAYS} days of {now.isoformat()}"
    )


def next_market_close(dt: datetime | None = None) -> datetime:
    """Return the next session close (16:00 ET)."""
    now = to_et(dt)
    if is_market_open(now):
        return datetime.combine(now.date(), MARKET_CLOSE, tzinfo=ET)

    nxt_open = next_market_open(now)
    return datetime.combine(nxt_open.date(), MARKET_CLOSE, tzinfo=ET)


def seconds_between(start: datetime, end: datetime) -> int:
    """Whole seconds from ``start`` to ``end`` on absolute time, clamped >= 0."""
    # Same-tzinfo subtraction ignores DST offset changes; compare in UTC
    delta = end.astimezone(timezone.utc) - start.astimezone(timezone.utc)
    return max(0, int(delta.total_seconds()))


def format_countdown(total_seconds: int) -> str:
    """HH:MM:SS with uncapped hours (a long weekend reads e.g. ``65:30:00``)."""
    total_seconds = max(0, int(total_seconds))
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def next_trading_day_label(now: datetime, next_open: datetime) -> str:
    """TODAY / TOMORROW / weekday name, by NY calendar-day difference."""
    open_day = to_et(next_open).date()
    diff = (open_day - to_et(now).date()).days
    if diff == 0:
        return "TODAY"
    if diff == 1:
        return "TOMORROW"
    return _WEEKDAY_NAMES[open_day.weekday()]


def format_clock(dt: datetime) -> str:
    return dt.strftime("%H:%M:%S")


def market_snapshot(
    dt: datetime | None = None,
    local_tz: tzinfo | None = None,
) -> MarketSnapshot:
    """Full market state for one instant.

    ``local_tz`` only affects the local clock fields; all market decisions
    are made in New York time.
    """
    now = to_et(dt)
    moment = civil_moment(now)
    local_now = now.astimezone(local_tz or LOCAL_TZ)

    if is_market_open(now):
        remaining = (
            _seconds_of_day(MARKET_CLOSE) - moment.seconds_since_midnight
        )
        remaining = max(0, remaining)
        status_label = STATUS_OPEN
        countdown_label = LABEL_UNTIL_CLOSE
        next_day = "TODAY"
        nxt_open = next_market_open(now)
        nxt_close = datetime.combine(now.date(), MARKET_CLOSE, tzinfo=ET)
    else:
        nxt_open = next_market_open(now)
        remaining = seconds_between(now, nxt_open)
        status_label = STATUS_CLOSED
        countdown_label = LABEL_UNTIL_OPEN
        next_day = next_trading_day_label(now, nxt_open)
        nxt_close = datetime.combine(nxt_open.date(), MARKET_CLOSE, tzinfo=ET)

    countdown = format_countdown(remaining)
    return MarketSnapshot(
        is_open=status_label == STATUS_OPEN,
        seconds_remaining=remaining,
        countdown=countdown,
        menu_bar_countdown=countdown,
        status_label=status_label,
        countdown_label=countdown_label,
        next_trading_day=next_day,
        ny_clock=format_clock(now),
        local_clock=format_clock(local_now),
        local_tz_abbr=local_now.tzname() or "LOCAL",
        as_of=now,
        next_open=nxt_open,
        next_close=nxt_close,
        holiday=holiday_name(now.date()),
    )


def market_status(dt: datetime | None = None) -> dict:
    """Market snapshot as a JSON-ready dict for frontend display."""
    return market_snapshot(dt).model_dump(mode="json")
