"""FastAPI application — market clock endpoints.

Run: python -m market_timer.main  (host/port from HOST / PORT)
"""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from market_timer.config import settings
from market_timer.engine.holidays import (
    MIN_GREGORIAN_YEAR,
    easter_date,
    good_friday,
    holidays_for_year,
)
from market_timer.services.ticker import MarketTicker, status_bar_text
from market_timer.utils.logger import logger
from market_timer.utils.market_hours import (
    ET,
    market_snapshot,
    market_status,
    next_market_close,
    next_market_open,
    next_trading_day_label,
    now_et,
)

app = FastAPI(
    title="Market Timer",
    description="NYSE open/closed status, countdowns and holiday calendar",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

_MAX_YEAR = 9999

_ticker = MarketTicker()


def _check_year(year: int) -> None:
    if not MIN_GREGORIAN_YEAR <= year <= _MAX_YEAR:
        raise HTTPException(
            status_code=400,
            detail=f"year must be between {MIN_GREGORIAN_YEAR} and {_MAX_YEAR}",
        )


@app.on_event("startup")
async def _boot() -> None:
    """Log the resolved zone and current state on boot."""
    snap = market_snapshot()
    logger.info(
        "[Boot] Market zone %s resolved — %s (%s)",
        ET.key, snap.status_label, status_bar_text(snap),
    )


@app.on_event("shutdown")
async def _shutdown() -> None:
    _ticker.stop()


# ── Market Status ──────────────────────────────────────────────────


@app.get("/api/market/status")
async def get_market_status() -> dict:
    """Current NYSE market status (open/closed, countdown, clocks)."""
    return market_status()


@app.get("/api/market/next-open")
async def get_next_open() -> dict:
    """Next session open/close and the trading-day label."""
    now = now_et()
    nxt_open = next_market_open(now)
    return {
        "now": now.isoformat(),
        "next_open": nxt_open.isoformat(),
        "next_close": next_market_close(now).isoformat(),
        "next_trading_day": next_trading_day_label(now, nxt_open),
    }


@app.get("/api/market/holidays/{year}")
async def get_holidays(year: int) -> dict:
    """All NYSE holidays (observed dates) in a calendar year."""
    _check_year(year)
    entries = holidays_for_year(year)
    return {
        "year": year,
        "count": len(entries),
        "holidays": [e.model_dump(mode="json") for e in entries],
    }


@app.get("/api/market/easter/{year}")
async def get_easter(year: int) -> dict:
    """Easter Sunday and Good Friday for a year."""
    _check_year(year)
    return {
        "year": year,
        "easter": easter_date(year).isoformat(),
        "good_friday": good_friday(year).isoformat(),
    }


# ── Ticker ─────────────────────────────────────────────────────────


@app.post("/api/ticker/start")
async def ticker_start() -> dict:
    """Start the once-per-second snapshot refresh."""
    return _ticker.start()


@app.post("/api/ticker/stop")
async def ticker_stop() -> dict:
    return _ticker.stop()


@app.get("/api/ticker/status")
async def ticker_status() -> dict:
    status = _ticker.get_status()
    status["settings"] = settings.as_dict()
    return status


def run() -> None:
    """Serve the API on the configured host/port."""
    logger.info("[Boot] Serving on http://%s:%d", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
