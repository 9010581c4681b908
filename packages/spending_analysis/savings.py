"""Cancelled-subscription bookkeeping.

A cancellation records the user's decision to treat a recurring pattern as
cancelled so the expected yearly spend can be reported as savings. Matching a
:class:`~spending_analysis.models.RecurringPayment` to a cancellation is done
by exact ``description`` equality.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from db.models.finance import CancelledSubscriptionRow
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from .logging_setup import get_logger
from .models import Frequency, RecurringPayment

logger = get_logger("spending_analysis.savings")

OCCURRENCES_PER_YEAR: dict[str, int] = {
    "weekly": 52,
    "monthly": 12,
    "quarterly": 4,
    "annual": 1,
}


def annual_savings(average_amount: Decimal, frequency: str) -> Decimal:
    """Return ``|average_amount| * occurrences-per-year(frequency)`` in cents."""

    try:
        per_year = OCCURRENCES_PER_YEAR[frequency]
    except KeyError as exc:
        raise ValueError(f"Unknown frequency: {frequency!r}") from exc
    return (abs(average_amount) * per_year).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class CancelledSubscription(BaseModel):
    """Validated view of a stored cancellation."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str
    description: str
    average_amount: Decimal
    frequency: Frequency
    annual_savings: Decimal
    cancelled_at: datetime

    @field_validator("description")
    @classmethod
    def _description_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("description must be non-empty")
        return v

    @classmethod
    def from_row(cls, row: CancelledSubscriptionRow) -> CancelledSubscription:
        return cls(
            id=row.id,
            description=row.description,
            average_amount=row.average_amount,
            frequency=row.frequency,
            annual_savings=row.annual_savings,
            cancelled_at=row.cancelled_at,
        )


def cancel_subscription(
    session: Session,
    payment: RecurringPayment,
    *,
    cancelled_at: datetime | None = None,
) -> CancelledSubscription:
    """Record ``payment`` as cancelled and return the stored cancellation."""

    item = CancelledSubscription(
        id=uuid.uuid4().hex,
        description=payment.description,
        average_amount=payment.average_amount,
        frequency=payment.frequency,
        annual_savings=annual_savings(payment.average_amount, payment.frequency),
        cancelled_at=cancelled_at or datetime.now(UTC),
    )
    session.add(
        CancelledSubscriptionRow(
            id=item.id,
            description=item.description,
            average_amount=item.average_amount,
            frequency=item.frequency,
            annual_savings=item.annual_savings,
            cancelled_at=item.cancelled_at,
        )
    )
    session.flush()
    logger.info("cancelled %r (annual savings %s)", item.description, item.annual_savings)
    return item


def list_cancelled(session: Session) -> list[CancelledSubscription]:
    stmt = select(CancelledSubscriptionRow).order_by(
        CancelledSubscriptionRow.cancelled_at.desc(), CancelledSubscriptionRow.id
    )
    return [CancelledSubscription.from_row(row) for row in session.scalars(stmt).all()]


def restore_subscription(session: Session, cancellation_id: str) -> bool:
    """Delete a cancellation. Returns ``False`` when ``cancellation_id`` is unknown."""

    row = session.get(CancelledSubscriptionRow, cancellation_id)
    if row is None:
        return False
    session.delete(row)
    session.flush()
    return True


def total_annual_savings(items: Iterable[CancelledSubscription]) -> Decimal:
    return sum((it.annual_savings for it in items), Decimal("0.00"))


def split_active_cancelled(
    payments: Iterable[RecurringPayment],
    cancelled: Iterable[CancelledSubscription],
) -> tuple[list[RecurringPayment], list[RecurringPayment]]:
    """Partition ``payments`` into ``(active, cancelled)`` by description."""

    cancelled_descriptions = {c.description for c in cancelled}
    active: list[RecurringPayment] = []
    matched: list[RecurringPayment] = []
    for p in payments:
        (matched if p.description in cancelled_descriptions else active).append(p)
    return active, matched


__all__ = [
    "OCCURRENCES_PER_YEAR",
    "annual_savings",
    "CancelledSubscription",
    "cancel_subscription",
    "list_cancelled",
    "restore_subscription",
    "total_annual_savings",
    "split_active_cancelled",
]
