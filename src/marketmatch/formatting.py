# src/marketmatch/formatting.py

"""Display helpers for leaderboard rows."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from marketmatch import config

RANK_BADGES = {1: "gold", 2: "silver", 3: "bronze"}
DEFAULT_BADGE = "default"


@dataclass(frozen=True)
class ValueChange:
    """Percent change between a player's previous and current value."""

    percent: float
    direction: str  # "up" or "down"

    @property
    def display(self) -> str:
        return f"{self.percent:+.2f}%"


def parse_portfolio_value(raw: str) -> float:
    """Parse free text into a portfolio value.

    Raises:
        ValueError: If the text is not a finite, non-negative number.
    """
    number = float(raw.strip())
    if not math.isfinite(number):
        raise ValueError(f"{raw!r} is not a finite number")
    if number < 0:
        raise ValueError(f"{raw!r} is negative")
    return number


def format_currency(value: float, symbol: str | None = None) -> str:
    """Format as money with two decimals, e.g. ``$105,000.00``."""
    symbol = config.CURRENCY_SYMBOL if symbol is None else symbol
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def value_change(current: float, previous: float | None) -> ValueChange | None:
    """Compute the change indicator, or None when there is nothing to show.

    A missing or zero previous value has no meaningful percent change, so
    no indicator is produced for either.
    """
    if previous is None or previous == 0:
        return None
    percent = round((current - previous) / previous * 100, 2)
    if percent == 0:
        # avoid rendering "-0.00%"
        percent = 0.0
    return ValueChange(percent=percent, direction="up" if percent >= 0 else "down")


def rank_badge(rank: int) -> str:
    return RANK_BADGES.get(rank, DEFAULT_BADGE)


def format_date(moment: datetime) -> str:
    return moment.date().isoformat()
