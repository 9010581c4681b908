"""Data models and type aliases for ``spending_analysis``.

Two record shapes flow through the package:

- :class:`Transaction` is the canonical row produced by ingestion. It is
  created once and never mutated; detection and persistence only read it.
- :class:`RecurringPayment` is the ephemeral output of recurring-pattern
  detection. It has no stored identity and is recomputed on every call.

Amounts are :class:`~decimal.Decimal` values quantized to cents and follow a
single sign convention: negative means money leaving the account (expense),
positive means money entering it (income).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal, NamedTuple

# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

type Source = Literal["chase_checking", "chase_credit"]
"""Which bank layout produced a transaction."""

type TransactionType = Literal["debit", "credit"]
"""Display tag derived from the amount sign."""

type Frequency = Literal["weekly", "monthly", "quarterly", "annual"]
"""Recurrence bucket assigned by the detector."""

SOURCES: tuple[str, ...] = ("chase_checking", "chase_credit")
FREQUENCIES: tuple[str, ...] = ("weekly", "monthly", "quarterly", "annual")

UNCATEGORIZED = "Uncategorized"


# ---------------------------------------------------------------------------
# Core records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single canonical transaction.

    ``id`` is a pure function of ``(date, description, amount, source)`` (see
    :func:`spending_analysis.identity.transaction_id`); ``account`` is carried
    on the record but does not participate in identity.
    """

    id: str
    date: date
    description: str
    amount: Decimal
    type: TransactionType
    account: str
    source: Source
    balance: Decimal | None = None
    category: str | None = None


@dataclass(frozen=True, slots=True)
class RecurringPayment:
    """A detected recurring pattern over a group of transactions.

    ``transactions`` holds the member records sorted by date ascending. The
    records are shared with the caller's input, not copied.
    """

    description: str
    category: str
    frequency: Frequency
    average_amount: Decimal
    last_date: date
    next_expected_date: date
    occurrences: int
    transactions: tuple[Transaction, ...]


class ImportSummary(NamedTuple):
    """Outcome of storing one parsed file."""

    total: int
    imported: int
    skipped: int


class TransactionStats(NamedTuple):
    count: int
    min_date: date | None
    max_date: date | None


type Transactions = Iterable[Transaction]


__all__ = [
    "Source",
    "TransactionType",
    "Frequency",
    "SOURCES",
    "FREQUENCIES",
    "UNCATEGORIZED",
    "Transaction",
    "RecurringPayment",
    "ImportSummary",
    "TransactionStats",
    "Transactions",
]
