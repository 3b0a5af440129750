"""Market open/closed evaluation."""
from __future__ import annotations

import time

from .models import SessionBounds
from .utils import setup_logger

OPEN_GLYPH = "↑"
CLOSED_GLYPH = "↓"


class SystemClock:
    """Wall clock; every call re-reads the system time."""

    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """Clock pinned to a given instant, for tests and replays."""

    def __init__(self, epoch_seconds: int) -> None:
        self.epoch_seconds = epoch_seconds

    def now(self) -> int:
        return self.epoch_seconds

    def advance(self, seconds: int) -> None:
        self.epoch_seconds += seconds


def is_market_open(now: int, gmt_offset: int, session_start: int, session_end: int) -> bool:
    """Return True strictly inside the session; the boundary instants count as closed."""
    localized_now = now + gmt_offset
    return session_start < localized_now < session_end


def status_glyph(market_open: bool) -> str:
    return OPEN_GLYPH if market_open else CLOSED_GLYPH


class MarketStatusEvaluator:
    """Evaluates session bounds against an injected clock."""

    def __init__(self, clock=None) -> None:
        self.clock = clock or SystemClock()
        self.logger = setup_logger(__name__)

    def evaluate(self, session: SessionBounds) -> bool:
        market_open = is_market_open(self.clock.now(), session.gmt_offset, session.start, session.end)
        self.logger.info("Market is %s", "open" if market_open else "closed")
        return market_open
