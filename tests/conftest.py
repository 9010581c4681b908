"""Pytest configuration for test isolation.

``db.client`` keeps a process-wide engine bound to the first URL it sees.
Each test that touches the store gets its own SQLite file, so the shared
engine is disposed before and after every test.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from db.client import reset_engine

from tests.helpers.db import bootstrap_sqlite_db

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _fresh_engine(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    reset_engine()
    yield
    reset_engine()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "spending.db")


@pytest.fixture
def checking_csv() -> str:
    return (DATA_DIR / "chase_checking_sample.csv").read_text(encoding="utf-8")


@pytest.fixture
def credit_csv() -> str:
    return (DATA_DIR / "chase_credit_sample.csv").read_text(encoding="utf-8")
