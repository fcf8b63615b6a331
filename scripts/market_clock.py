"""Terminal market clock — prints the NYSE status line.

Usage:
  python scripts/market_clock.py            one snapshot, then exit
  python scripts/market_clock.py --watch    refresh every second until Ctrl-C
"""

import sys
import time

from market_timer.models.market import MarketSnapshot
from market_timer.services.ticker import MarketTicker, status_bar_text
from market_timer.utils.market_hours import market_snapshot


def render(snap: MarketSnapshot) -> str:
    return (
        f"{status_bar_text(snap)}  |  {snap.countdown_label}  "
        f"|  NEXT: {snap.next_trading_day}  "
        f"|  NY {snap.ny_clock}  {snap.local_tz_abbr} {snap.local_clock}"
    )


def _print_line(snap: MarketSnapshot) -> None:
    sys.stdout.write("\r" + render(snap))
    sys.stdout.flush()


def main() -> None:
    if "--watch" not in sys.argv[1:]:
        print(render(market_snapshot()))
        return

    ticker = MarketTicker()
    ticker.add_listener(_print_line)
    ticker.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print()
    finally:
        ticker.stop()


if __name__ == "__main__":
    main()
