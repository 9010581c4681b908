"""CSV text -> canonical :class:`~spending_analysis.models.Transaction` list.

The pipeline is: tokenize lines, detect the layout from the header row,
convert every non-blank data row, then compute each row's identity hash.
Parsing is all-or-nothing: the first bad row aborts the call with a
:class:`~spending_analysis.errors.RowError`, so callers never store a partial
file.
"""

from __future__ import annotations

from ..categorize import categorize
from ..errors import EmptyResultError, ParseError, RowError
from ..identity import transaction_id
from ..logging_setup import get_logger
from ..models import Transaction
from .csv_text import is_blank_row, tokenize
from .layouts import Layout, detect_layout
from .utils import mmddyyyy_to_date, negate, to_decimal, to_optional_decimal

logger = get_logger("spending_analysis.ingest.parser")


def _convert_row(layout: Layout, row: list[str], account: str) -> Transaction:
    if len(row) < layout.min_columns:
        raise ValueError(f"expected at least {layout.min_columns} columns, got {len(row)}")

    amount = to_decimal(row[layout.amount])
    if layout.negate_amount:
        amount = negate(amount)

    tx_date = mmddyyyy_to_date(row[layout.date])
    description = row[layout.description]

    balance = to_optional_decimal(row[layout.balance]) if layout.balance is not None else None

    if layout.auto_categorize:
        category: str | None = categorize(description)
    elif layout.category is not None:
        category = row[layout.category] or None
    else:
        category = None

    return Transaction(
        id=transaction_id(tx_date, description, amount, layout.source),
        date=tx_date,
        description=description,
        amount=amount,
        type="debit" if amount < 0 else "credit",
        account=account,
        source=layout.source,
        balance=balance,
        category=category,
    )


def parse_csv(raw_text: str, account: str) -> list[Transaction]:
    """Parse one bank CSV export.

    Parameters
    ----------
    raw_text:
        Full file contents decoded as text.
    account:
        Caller-supplied label stored on every record (not part of identity).

    Raises
    ------
    ParseError
        With one of the messages ``"CSV must have a header row and at least one
        data row"``, ``"Unrecognized CSV format. Headers: ..."``, ``"Parse error
        at row N: ..."`` or ``"No valid transactions found in CSV"``.
    """

    rows = tokenize(raw_text)
    if len(rows) < 2:
        raise ParseError("CSV must have a header row and at least one data row")

    layout = detect_layout(rows[0])
    logger.debug("detected layout %s for account %r", layout.source, account)

    transactions: list[Transaction] = []
    # Row numbers are 1-indexed with the header as row 1.
    for row_no, row in enumerate(rows[1:], start=2):
        if is_blank_row(row):
            continue
        try:
            transactions.append(_convert_row(layout, row, account))
        except ValueError as exc:
            raise RowError(row_no, str(exc)) from exc

    if not transactions:
        raise EmptyResultError()

    logger.info("parsed %d %s transactions", len(transactions), layout.source)
    return transactions


__all__ = ["parse_csv"]
