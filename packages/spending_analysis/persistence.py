"""Store integration for ``spending_analysis``.

Functions here read and write the shared database owned by ``libs/db``
through SQLAlchemy ORM models in ``db.models.finance``. Callers own the
session and its transaction scope (see ``db.client.session_scope``).

Idempotency: ``transactions.id`` is the identity hash computed at ingestion.
Inserts use ``ON CONFLICT (id) DO NOTHING`` so a retried or overlapping upload
reports the repeated rows as skipped instead of storing them twice.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Any

from db.models.finance import StoredTransaction
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from .logging_setup import get_logger
from .models import ImportSummary, Transaction, TransactionStats

logger = get_logger("spending_analysis.persistence")


def _insert_for(session: Session):
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert
    if dialect == "sqlite":
        return sqlite_insert
    raise RuntimeError(f"Unsupported database dialect for idempotent insert: {dialect!r}")


def _to_row_values(tx: Transaction) -> dict[str, Any]:
    return {
        "id": tx.id,
        "date": tx.date,
        "description": tx.description,
        "amount": tx.amount,
        "type": tx.type,
        "balance": tx.balance,
        "category": tx.category,
        "account": tx.account,
        "source": tx.source,
    }


def _from_row(row: StoredTransaction) -> Transaction:
    return Transaction(
        id=row.id,
        date=row.date,
        description=row.description,
        amount=row.amount,
        type=row.type,  # type: ignore[arg-type]
        account=row.account,
        source=row.source,  # type: ignore[arg-type]
        balance=row.balance,
        category=row.category,
    )


def insert_if_absent(session: Session, tx: Transaction) -> bool:
    """Insert ``tx`` unless a row with the same ``id`` exists.

    Returns ``True`` when a row was inserted.
    """

    insert = _insert_for(session)
    stmt = insert(StoredTransaction).values(_to_row_values(tx))
    stmt = stmt.on_conflict_do_nothing(index_elements=[StoredTransaction.id])
    result = session.execute(stmt)
    return result.rowcount > 0


def import_transactions(session: Session, transactions: Iterable[Transaction]) -> ImportSummary:
    """Insert each transaction if absent and count the outcome."""

    imported = 0
    skipped = 0
    for tx in transactions:
        if insert_if_absent(session, tx):
            imported += 1
        else:
            skipped += 1
    summary = ImportSummary(total=imported + skipped, imported=imported, skipped=skipped)
    logger.info(
        "import: total=%d imported=%d skipped=%d",
        summary.total,
        summary.imported,
        summary.skipped,
    )
    return summary


def fetch_transactions(
    session: Session,
    *,
    start: date | None = None,
    end: date | None = None,
    source: str | None = None,
    newest_first: bool = False,
) -> list[Transaction]:
    """Return stored transactions, optionally filtered by date range and source.

    ``start`` and ``end`` are inclusive. ``source`` of ``None`` or ``"all"``
    disables the source filter. Ordered by date ascending unless
    ``newest_first``.
    """

    stmt = select(StoredTransaction)
    if start is not None:
        stmt = stmt.where(StoredTransaction.date >= start)
    if end is not None:
        stmt = stmt.where(StoredTransaction.date <= end)
    if source is not None and source != "all":
        stmt = stmt.where(StoredTransaction.source == source)
    order = StoredTransaction.date.desc() if newest_first else StoredTransaction.date.asc()
    # Secondary key keeps same-day order deterministic across runs
    stmt = stmt.order_by(order, StoredTransaction.created_at, StoredTransaction.id)
    return [_from_row(row) for row in session.scalars(stmt).all()]


def transaction_stats(session: Session) -> TransactionStats:
    stmt = select(
        func.count(StoredTransaction.id),
        func.min(StoredTransaction.date),
        func.max(StoredTransaction.date),
    )
    count, min_date, max_date = session.execute(stmt).one()
    return TransactionStats(count=int(count or 0), min_date=min_date, max_date=max_date)


__all__ = [
    "insert_if_absent",
    "import_transactions",
    "fetch_transactions",
    "transaction_stats",
]
