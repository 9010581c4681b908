"""Recurring payment detection over stored transactions.

Transactions are grouped by a normalized description (dates, reference
numbers and dollar amounts stripped, whitespace collapsed, upper-cased). For
each group with at least two members the day gaps between consecutive
occurrences are measured; the mean gap selects a frequency bucket and the
population standard deviation of the gaps must stay within
:data:`MAX_INTERVAL_STDDEV` days.

Detection is read-only and total: input records are never mutated and sparse
or irregular data simply yields fewer patterns.
"""

from __future__ import annotations

import re
import statistics
from decimal import ROUND_FLOOR, Decimal

from .dates import add_days, days_between
from .logging_setup import get_logger
from .models import UNCATEGORIZED, Frequency, RecurringPayment, Transaction, Transactions

logger = get_logger("spending_analysis.recurring")

MIN_OCCURRENCES = 2
MAX_INTERVAL_STDDEV = 10.0

# Inclusive mean-gap ranges in days, checked in order.
FREQUENCY_RANGES: tuple[tuple[Frequency, float, float], ...] = (
    ("weekly", 5, 10),
    ("monthly", 25, 38),
    ("quarterly", 80, 105),
    ("annual", 340, 400),
)

# Applied in order; ASCII digits only, as in bank exports.
_NOISE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\d{1,2}/\d{1,2}(/\d{2,4})?", re.ASCII),  # M/D, M/D/YY, M/D/YYYY
    re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII),  # YYYY-MM-DD
    re.compile(r"\b\d{4,}\b", re.ASCII),  # reference / confirmation numbers
    re.compile(r"#\d+", re.ASCII),
    re.compile(r"\$[\d,.]+", re.ASCII),
)


def normalize_description(description: str) -> str:
    """Return the grouping key for ``description`` (may be empty)."""

    s = description
    for pattern in _NOISE_PATTERNS:
        s = pattern.sub("", s)
    return " ".join(s.split()).upper()


def classify_frequency(mean_gap: float) -> Frequency | None:
    for frequency, low, high in FREQUENCY_RANGES:
        if low <= mean_gap <= high:
            return frequency
    return None


def _group_by_description(transactions: Transactions) -> dict[str, list[Transaction]]:
    groups: dict[str, list[Transaction]] = {}
    for tx in transactions:
        if not isinstance(tx.description, str):
            continue
        key = normalize_description(tx.description)
        if not key:
            continue
        groups.setdefault(key, []).append(tx)
    return groups


def _average_amount(members: list[Transaction]) -> Decimal:
    """Mean amount in cents, exact half-cents rounded toward positive infinity."""

    total = sum((tx.amount for tx in members), Decimal(0))
    cents = (total * 100 / len(members) + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)
    return (cents / 100).quantize(Decimal("0.01"))


def _summarize(key: str, members: list[Transaction]) -> RecurringPayment | None:
    ordered = sorted(members, key=lambda tx: tx.date)
    gaps = [days_between(a.date, b.date) for a, b in zip(ordered, ordered[1:])]
    mean_gap = statistics.fmean(gaps)

    frequency = classify_frequency(mean_gap)
    if frequency is None:
        return None

    if statistics.pstdev(gaps, mu=mean_gap) > MAX_INTERVAL_STDDEV:
        return None

    latest = ordered[-1]
    return RecurringPayment(
        description=key,
        category=latest.category or UNCATEGORIZED,
        frequency=frequency,
        average_amount=_average_amount(ordered),
        last_date=latest.date,
        next_expected_date=add_days(latest.date, mean_gap),
        occurrences=len(ordered),
        transactions=tuple(ordered),
    )


def detect_recurring(transactions: Transactions) -> list[RecurringPayment]:
    """Infer recurring payment schedules from ``transactions``.

    Returns patterns ordered by descending ``occurrences``; ties keep the
    order in which each group's first member was encountered.
    """

    groups = _group_by_description(transactions)

    results: list[RecurringPayment] = []
    for key, members in groups.items():
        if len(members) < MIN_OCCURRENCES:
            continue
        payment = _summarize(key, members)
        if payment is not None:
            results.append(payment)

    logger.debug("recurring: %d groups, %d patterns", len(groups), len(results))
    # sorted() is stable, which keeps equal-count groups in encounter order
    return sorted(results, key=lambda p: p.occurrences, reverse=True)


__all__ = [
    "MIN_OCCURRENCES",
    "MAX_INTERVAL_STDDEV",
    "FREQUENCY_RANGES",
    "normalize_description",
    "classify_frequency",
    "detect_recurring",
]
