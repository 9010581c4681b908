"""Ingestion error taxonomy.

Every failure raised by :func:`spending_analysis.ingest.parser.parse_csv` is a
:class:`ParseError`, so callers only need one ``except`` clause. The
subclasses carry the structured details (offending headers, row number) for
callers that want them. Ingestion is all-or-nothing per file: any of these
aborts the whole parse and no partial result is returned.
"""

from __future__ import annotations

from collections.abc import Sequence


class ParseError(ValueError):
    """A CSV export could not be converted into transactions."""


class FormatError(ParseError):
    """The header row matches none of the recognized layouts."""

    def __init__(self, headers: Sequence[str]) -> None:
        self.headers = tuple(headers)
        super().__init__(f"Unrecognized CSV format. Headers: {', '.join(self.headers)}")


class RowError(ParseError):
    """A data row is structurally invalid.

    ``row`` is the 1-indexed line number within the file (the header is row 1).
    """

    def __init__(self, row: int, reason: str) -> None:
        self.row = row
        self.reason = reason
        super().__init__(f"Parse error at row {row}: {reason}")


class EmptyResultError(ParseError):
    """The file has a header but no usable data rows."""

    def __init__(self) -> None:
        super().__init__("No valid transactions found in CSV")


__all__ = ["ParseError", "FormatError", "RowError", "EmptyResultError"]
