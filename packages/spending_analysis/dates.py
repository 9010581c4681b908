"""Calendar-date arithmetic helpers.

All functions take and return :class:`datetime.date` values, which carry no
time of day or timezone, so day arithmetic cannot drift across DST or UTC
offsets.
"""

from __future__ import annotations

import math
from datetime import date, timedelta


def days_between(a: date, b: date) -> int:
    """Absolute number of calendar days between ``a`` and ``b``."""

    return abs((b - a).days)


def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def add_days(start: date, days: float) -> date:
    """Advance ``start`` by ``days`` rounded to the nearest whole day (halves up)."""

    return start + timedelta(days=round_half_up(days))


def parse_iso_date(raw: str) -> date:
    return date.fromisoformat(raw.strip())


__all__ = ["days_between", "round_half_up", "add_days", "parse_iso_date"]
