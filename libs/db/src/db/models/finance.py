from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    CHAR,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: transactions
# ---------------------------


class StoredTransaction(Base):
    __tablename__ = "transactions"

    # Identity hash computed at ingestion (see spending_analysis.identity).
    # Uniqueness on this column is what makes re-imports idempotent.
    id: Mapped[str] = mapped_column(CHAR(32), primary_key=True)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    balance: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    category: Mapped[str | None] = mapped_column(String, nullable=True)
    account: Mapped[str] = mapped_column(String, nullable=False)
    source: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )

    __table_args__ = (
        CheckConstraint("type in ('debit','credit')", name="ck_tx_type"),
        CheckConstraint("source in ('chase_checking','chase_credit')", name="ck_tx_source"),
        Index("ix_transactions_date", "date"),
    )


# ---------------------------
# Bookkeeping: cancelled_subscriptions
# ---------------------------


class CancelledSubscriptionRow(Base):
    __tablename__ = "cancelled_subscriptions"

    id: Mapped[str] = mapped_column(CHAR(32), primary_key=True)
    # Matched against RecurringPayment.description by exact equality.
    description: Mapped[str] = mapped_column(Text, nullable=False)
    average_amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    frequency: Mapped[str] = mapped_column(String, nullable=False)
    annual_savings: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    cancelled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "frequency in ('weekly','monthly','quarterly','annual')",
            name="ck_cancelled_frequency",
        ),
    )


__all__ = [
    "Base",
    "StoredTransaction",
    "CancelledSubscriptionRow",
]
