"""Centralized logging configuration for the ``spending_analysis`` package.

Command output (transaction listings, import counts) goes to stdout as
tab-separated lines; diagnostics go through this module to stderr so the two
never interleave in a pipe.

- ``configure_logging(...)`` attaches a single ``StreamHandler`` to the
  package root logger (``"spending_analysis"``). The CLI calls it once at
  startup.
- ``get_logger(name)`` returns a logger by name and makes sure the package
  root has at least a ``NullHandler`` while unconfigured, so library use
  (importing ``parse_csv`` from a notebook, say) stays silent.

Records carry a ``component`` attribute: the logger name relative to the
package (``ingest.parser``, ``persistence``), used by the default format.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "spending_analysis"
_LEVEL_ENV = "SPENDING_ANALYSIS_LOG_LEVEL"
DEFAULT_LEVEL = logging.INFO
DEFAULT_FORMAT = "[%(levelname)s] %(component)s: %(message)s"

_CONFIGURED = False
_HANDLER: logging.Handler | None = None


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
        return DEFAULT_LEVEL
    env_val = os.getenv(_LEVEL_ENV)
    if env_val:
        return _parse_level(env_val)
    return DEFAULT_LEVEL


class _ComponentFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == _PKG_LOGGER_NAME:
            record.component = name
        else:
            record.component = name.removeprefix(_PKG_LOGGER_NAME + ".")
        return True


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package root logger exactly once.

    Parameters
    ----------
    level:
        ``int`` or level name. ``None`` falls back to
        ``SPENDING_ANALYSIS_LOG_LEVEL``, then to ``INFO``. Unknown names also
        mean ``INFO``.
    fmt:
        Format string; defaults to :data:`DEFAULT_FORMAT`.
    stream:
        Destination of the single handler, ``sys.stderr`` by default.
    """

    global _CONFIGURED, _HANDLER
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.addFilter(_ComponentFilter())
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    # Avoid double emission via the root logger.
    logger.propagate = False

    _HANDLER = handler
    _CONFIGURED = True


def reset_logging() -> None:
    """Detach the handler installed by :func:`configure_logging`."""

    global _CONFIGURED, _HANDLER
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _HANDLER is not None:
        logger.removeHandler(_HANDLER)
        _HANDLER = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["DEFAULT_FORMAT", "configure_logging", "reset_logging", "get_logger"]
