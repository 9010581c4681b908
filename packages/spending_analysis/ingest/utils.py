"""Field-level helpers shared by the ingestion layouts.

Amounts are parsed into :class:`~decimal.Decimal` and quantized to cents;
dates are parsed from the ``MM/DD/YYYY`` shape used by bank exports. Both
raise ``ValueError`` with a short reason that the parser wraps into a
:class:`~spending_analysis.errors.RowError`.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS = Decimal("0.01")


def to_decimal(raw: str | None) -> Decimal:
    """Parse a bank amount cell.

    Accepts an optional leading sign, a ``$`` symbol, thousands separators
    and accounting-style parentheses for negatives.
    """

    if raw is None:
        raise ValueError("invalid amount None")
    s = raw.strip()
    negative = False

    # Strip leading sign, currency symbol and surrounding parentheses in any order.
    while True:
        changed = False
        if s.startswith("+"):
            s = s[1:].lstrip()
            changed = True
        elif s.startswith("-"):
            negative = True
            s = s[1:].lstrip()
            changed = True
        if s.startswith("$"):
            s = s[1:].lstrip()
            changed = True
        if s.startswith("(") and s.endswith(")") and len(s) >= 2:
            negative = True
            s = s[1:-1].strip()
            changed = True
        if not changed:
            break

    s = s.replace(",", "").strip()
    try:
        d = Decimal(s)
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount {raw!r}") from exc
    if not d.is_finite():
        raise ValueError(f"invalid amount {raw!r}")
    d = d.quantize(CENTS, rounding=ROUND_HALF_UP)
    return -abs(d) if negative else d


def to_optional_decimal(raw: str | None) -> Decimal | None:
    """Like :func:`to_decimal` but returns ``None`` for blank or non-numeric cells."""

    if raw is None or not raw.strip():
        return None
    try:
        return to_decimal(raw)
    except ValueError:
        return None


def mmddyyyy_to_date(raw: str) -> date:
    s = raw.strip()
    try:
        return datetime.strptime(s, "%m/%d/%Y").date()
    except ValueError as exc:
        raise ValueError(f"Invalid date format: {raw}") from exc


def negate(amount: Decimal) -> Decimal:
    """Flip the sign of ``amount`` without producing a negative zero."""

    return -amount if amount else abs(amount)


__all__ = ["CENTS", "to_decimal", "to_optional_decimal", "mmddyyyy_to_date", "negate"]
