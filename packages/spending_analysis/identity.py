"""Deterministic transaction identity.

The identity hash is the natural dedup key used by the store. Changing its
definition changes every previously computed id, so the payload carries an
explicit version; bump :data:`IDENTITY_VERSION` only together with a data
migration of stored rows.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

IDENTITY_VERSION = 1
ID_LENGTH = 32


def _fmt_amount(amount: Decimal) -> str:
    q = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    # -0.00 and 0.00 are the same amount
    if q == 0:
        q = abs(q)
    return f"{q:.2f}"


def transaction_id(tx_date: date, description: str, amount: Decimal, source: str) -> str:
    """Return the 32-char hex identity of a canonical transaction.

    Fields used: date (YYYY-MM-DD), description (trimmed), amount (2dp
    string), source. ``account`` is deliberately not part of the key.
    """

    payload = {
        "v": IDENTITY_VERSION,
        "date": tx_date.isoformat(),
        "description": description.strip(),
        "amount": _fmt_amount(amount),
        "source": source,
    }
    data = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(data.encode("utf-8")).hexdigest()[:ID_LENGTH]


__all__ = ["IDENTITY_VERSION", "ID_LENGTH", "transaction_id"]
