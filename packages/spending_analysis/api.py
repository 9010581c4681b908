"""Public API and orchestration for the ``spending_analysis`` package.

The pure core lives in :mod:`.ingest` (CSV -> transactions) and
:mod:`.recurring` (transactions -> recurring patterns). The helpers here are
the thin store-backed callers around it: parse a file, persist it
idempotently, and run detection over everything stored.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from .config import default_account, max_upload_bytes
from .ingest import parse_csv
from .logging_setup import get_logger
from .models import FREQUENCIES, ImportSummary, RecurringPayment
from .recurring import detect_recurring

logger = get_logger("spending_analysis.api")


class UploadTooLargeError(ValueError):
    """The CSV file exceeds the configured import size limit."""


def import_csv_text(
    raw_text: str,
    account: str | None = None,
    *,
    database_url: str | None = None,
) -> ImportSummary:
    """Parse ``raw_text`` and store its transactions.

    Parsing happens before any database work, so a :class:`ParseError` leaves
    the store untouched. Inserts run in a single transactional scope.
    """

    from db.client import session_scope

    from .persistence import import_transactions

    transactions = parse_csv(raw_text, account or default_account())
    with session_scope(database_url=database_url) as session:
        return import_transactions(session, transactions)


def read_csv_file(csv_path: str | PathLike[str], *, max_bytes: int | None = None) -> str:
    """Read a CSV export as text, enforcing the upload size limit.

    Decodes as UTF-8 and drops a leading byte-order mark when present.
    """

    p = Path(csv_path)
    limit = max_bytes if max_bytes is not None else max_upload_bytes()
    size = p.stat().st_size
    if size > limit:
        raise UploadTooLargeError(f"File too large: {size} bytes (limit {limit})")
    return p.read_text(encoding="utf-8-sig")


def import_csv_file(
    csv_path: str | PathLike[str],
    account: str | None = None,
    *,
    database_url: str | None = None,
    max_bytes: int | None = None,
) -> ImportSummary:
    raw_text = read_csv_file(csv_path, max_bytes=max_bytes)
    logger.debug("importing %s (%d chars)", csv_path, len(raw_text))
    return import_csv_text(raw_text, account, database_url=database_url)


def filter_by_frequency(
    payments: list[RecurringPayment], frequency: str | None
) -> list[RecurringPayment]:
    """Keep patterns of ``frequency``; ``None`` or ``"all"`` keeps everything."""

    if frequency is None or frequency == "all":
        return payments
    if frequency not in FREQUENCIES:
        raise ValueError(
            f"Unknown frequency: {frequency!r}. Allowed: all, {', '.join(FREQUENCIES)}"
        )
    return [p for p in payments if p.frequency == frequency]


def recurring_payments(
    *,
    database_url: str | None = None,
    frequency: str | None = None,
) -> list[RecurringPayment]:
    """Run recurring detection over every stored transaction."""

    from db.client import session_scope

    from .persistence import fetch_transactions

    with session_scope(database_url=database_url) as session:
        transactions = fetch_transactions(session)
    return filter_by_frequency(detect_recurring(transactions), frequency)


__all__ = [
    "UploadTooLargeError",
    "import_csv_text",
    "read_csv_file",
    "import_csv_file",
    "filter_by_frequency",
    "recurring_payments",
]
