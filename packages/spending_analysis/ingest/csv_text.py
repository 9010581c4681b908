"""Line-oriented CSV tokenization for bank exports.

Bank exports handled here never embed newlines inside quoted fields, so the
text is split into lines first (``\\n`` or ``\\r\\n``) and each line is then
tokenized on its own with the stdlib :mod:`csv` reader: double-quoted fields
may contain commas and doubled ``""`` quotes. Every field is trimmed after
unquoting.

A bare carriage return that survives line splitting is ordinary field content,
and a single field may be as long as the whole upload.
"""

from __future__ import annotations

import csv
import re

from ..errors import RowError

_LINE_BREAK_RE = re.compile(r"\r?\n")

# Private-use code point standing in for a bare "\r" while the csv module reads
# the line; the reader treats "\r" as a record terminator.
_CR_STANDIN = "\ue000"


def split_lines(raw_text: str) -> list[str]:
    """Return the lines of ``raw_text`` after trimming surrounding whitespace."""

    trimmed = raw_text.strip()
    if not trimmed:
        return []
    return _LINE_BREAK_RE.split(trimmed)


def _ensure_field_limit(size: int) -> None:
    if size > csv.field_size_limit():
        csv.field_size_limit(size)


def tokenize_line(line: str) -> list[str]:
    _ensure_field_limit(len(line))
    has_cr = "\r" in line
    if has_cr:
        line = line.replace("\r", _CR_STANDIN)
    # One line at a time: an unbalanced quote must not swallow the next row.
    fields = next(csv.reader([line], skipinitialspace=True), [])
    if has_cr:
        fields = [f.replace(_CR_STANDIN, "\r") for f in fields]
    return [f.strip() for f in fields]


def tokenize(raw_text: str) -> list[list[str]]:
    """Split ``raw_text`` into rows of trimmed fields.

    Raises :class:`~spending_analysis.errors.RowError` (row 1 is the header)
    when the csv reader rejects a line.
    """

    rows: list[list[str]] = []
    for row_no, line in enumerate(split_lines(raw_text), start=1):
        try:
            rows.append(tokenize_line(line))
        except csv.Error as exc:
            raise RowError(row_no, f"unreadable CSV line ({exc})") from exc
    return rows


def is_blank_row(row: list[str]) -> bool:
    return len(row) == 0 or (len(row) == 1 and row[0] == "")


__all__ = ["split_lines", "tokenize_line", "tokenize", "is_blank_row"]
