"""Bank CSV ingestion: tokenization, layout detection and row conversion."""

from .layouts import CHASE_CHECKING, CHASE_CREDIT, LAYOUTS, Layout, detect_layout
from .parser import parse_csv

__all__ = [
    "Layout",
    "CHASE_CHECKING",
    "CHASE_CREDIT",
    "LAYOUTS",
    "detect_layout",
    "parse_csv",
]
