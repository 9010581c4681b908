"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the finance models used by ``spending_analysis``.
"""

from .finance import Base, CancelledSubscriptionRow, StoredTransaction

__all__ = [
    "Base",
    "CancelledSubscriptionRow",
    "StoredTransaction",
]
