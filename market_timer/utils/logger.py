"""Structured logging for the market timer.

One logger, ``market_timer``, shared by the engine, the ticker and the API.
Console output honours ``LOG_LEVEL``; the files always get DEBUG:
  - ``market_timer_<timestamp>.log``  one per process start (10 kept)
  - ``market_timer.log``              the current run, for ``tail -f``
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from market_timer.config import settings

_MAX_LOG_FILES = 10
_RUN_LOG_GLOB = "market_timer_*.log"

_FORMAT = logging.Formatter(
    "[%(asctime)s] %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _prune_old_logs(logs_dir: Path) -> None:
    """Delete the oldest run logs beyond _MAX_LOG_FILES."""
    run_logs = sorted(logs_dir.glob(_RUN_LOG_GLOB), key=lambda p: p.stat().st_mtime)
    for old in run_logs[:-_MAX_LOG_FILES]:
        try:
            old.unlink()
        except OSError:
            pass  # Another process may still hold it open


def _file_handler(path: Path, mode: str = "a") -> logging.FileHandler:
    handler = logging.FileHandler(path, mode=mode, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_FORMAT)
    return handler


def _setup_logger(name: str = "market_timer") -> logging.Logger:
    """Console + per-run file + stable current-run file."""
    log = logging.getLogger(name)
    log.setLevel(logging.DEBUG)

    # Prevent duplicate handlers on reimport
    if log.handlers:
        return log

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))
    console.setFormatter(_FORMAT)
    log.addHandler(console)

    logs_dir = settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    run_log = logs_dir / f"market_timer_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
    log.addHandler(_file_handler(run_log))

    try:
        log.addHandler(_file_handler(logs_dir / "market_timer.log", mode="w"))
    except OSError:
        pass  # Non-critical if the stable file cannot be opened

    _prune_old_logs(logs_dir)

    log.debug(
        "Log started: %s (market zone %s, local display zone %s)",
        run_log.name,
        settings.MARKET_TIMEZONE,
        settings.LOCAL_TIMEZONE or "system",
    )
    return log


logger = _setup_logger()
