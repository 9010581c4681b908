"""Declarative descriptions of the supported bank CSV layouts.

Each layout is data: the header markers that identify it, the column index of
every canonical field, and the two behavioral switches that differ between
exports (amount sign inversion and auto-categorization). Adding a layout means
adding an entry to :data:`LAYOUTS`, not another parsing branch.

Supported exports
-----------------
- Chase checking: ``Details, Posting Date, Description, Amount, Type,
  Balance, Check or Slip #``. Amounts already encode expenses as negative;
  the export has no category column, so categories come from the rule-based
  categorizer.
- Chase credit card: ``Transaction Date, Post Date, Description, Category,
  Type, Amount, Memo``. Charges are positive in the export and are negated;
  the category column is used as-is and blank categories stay empty.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..errors import FormatError
from ..models import Source


@dataclass(frozen=True, slots=True)
class Layout:
    source: Source
    # All markers must appear (case-insensitive substring) in the joined header.
    header_markers: tuple[str, ...]
    date: int
    description: int
    amount: int
    min_columns: int = 6
    balance: int | None = None
    category: int | None = None
    negate_amount: bool = False
    auto_categorize: bool = False

    def __post_init__(self) -> None:
        indices = [self.date, self.description, self.amount, self.balance, self.category]
        for idx in indices:
            if idx is not None and not 0 <= idx < self.min_columns:
                raise ValueError(
                    f"Layout {self.source}: column index {idx} outside 0..{self.min_columns - 1}"
                )

    def matches(self, headers: Sequence[str]) -> bool:
        joined = ",".join(headers).lower()
        return all(marker in joined for marker in self.header_markers)


CHASE_CHECKING = Layout(
    source="chase_checking",
    header_markers=("balance", "posting date"),
    date=1,
    description=2,
    amount=3,
    balance=5,
    auto_categorize=True,
)

CHASE_CREDIT = Layout(
    source="chase_credit",
    header_markers=("category", "transaction date"),
    date=0,
    description=2,
    amount=5,
    category=3,
    negate_amount=True,
)

# Detection order matters: the first matching layout wins.
LAYOUTS: tuple[Layout, ...] = (CHASE_CHECKING, CHASE_CREDIT)


def detect_layout(headers: Sequence[str]) -> Layout:
    """Return the layout whose markers all appear in ``headers``.

    Raises :class:`~spending_analysis.errors.FormatError` naming the headers
    when no layout matches.
    """

    for layout in LAYOUTS:
        if layout.matches(headers):
            return layout
    raise FormatError(headers)


__all__ = ["Layout", "CHASE_CHECKING", "CHASE_CREDIT", "LAYOUTS", "detect_layout"]
