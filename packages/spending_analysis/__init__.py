"""Public interface for the ``spending_analysis`` package.

Re-exports the pure core (CSV ingestion, categorization, recurring detection)
and its models. Store-backed helpers live in :mod:`spending_analysis.api` and
are not imported here so the core stays usable without a database.
"""

from .categorize import categorize
from .errors import EmptyResultError, FormatError, ParseError, RowError
from .identity import transaction_id
from .ingest import parse_csv
from .models import (
    FREQUENCIES,
    SOURCES,
    UNCATEGORIZED,
    Frequency,
    ImportSummary,
    RecurringPayment,
    Source,
    Transaction,
    Transactions,
    TransactionStats,
)
from .recurring import detect_recurring

__all__ = [
    # Core operations
    "categorize",
    "parse_csv",
    "detect_recurring",
    "transaction_id",
    # Errors
    "ParseError",
    "FormatError",
    "RowError",
    "EmptyResultError",
    # Models / types
    "Transaction",
    "RecurringPayment",
    "ImportSummary",
    "TransactionStats",
    "Transactions",
    "Source",
    "Frequency",
    "SOURCES",
    "FREQUENCIES",
    "UNCATEGORIZED",
]
