"""Environment-driven settings.

Values are read on each call so a ``.env`` loaded by the CLI (or a test's
``monkeypatch.setenv``) takes effect without re-importing the package.
"""

from __future__ import annotations

import os

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_ACCOUNT = "default"


def max_upload_bytes() -> int:
    """Maximum CSV size accepted for import (``SA_MAX_UPLOAD_BYTES``).

    Falls back to 10 MiB when unset, non-numeric or not positive.
    """

    env_val = os.getenv("SA_MAX_UPLOAD_BYTES")
    try:
        value = int(env_val) if env_val else None
    except ValueError:
        value = None
    if value is not None and value > 0:
        return value
    return DEFAULT_MAX_UPLOAD_BYTES


def default_account() -> str:
    """Account label used when the caller supplies none (``SA_DEFAULT_ACCOUNT``)."""

    return (os.getenv("SA_DEFAULT_ACCOUNT") or "").strip() or DEFAULT_ACCOUNT


__all__ = [
    "DEFAULT_MAX_UPLOAD_BYTES",
    "DEFAULT_ACCOUNT",
    "max_upload_bytes",
    "default_account",
]
