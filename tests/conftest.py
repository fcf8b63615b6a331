import os
import tempfile
from datetime import datetime

import pytest

# Route the per-run log files away from the repo before the package imports
os.environ.setdefault("MARKET_TIMER_LOGS_DIR", tempfile.mkdtemp(prefix="market_timer_logs_"))

from market_timer.utils.market_hours import ET  # noqa: E402


@pytest.fixture()
def ny():
    """Build an aware New York datetime: ny(2024, 7, 1, 10)."""

    def _make(*args: int) -> datetime:
        return datetime(*args, tzinfo=ET)

    return _make
