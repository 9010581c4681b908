"""CLI for the ``spending_analysis`` package.

Command handlers (``cmd_*``) hold the logic and return a process exit code;
the Typer commands at the bottom only resolve options and delegate.
Environment variables (``DATABASE_URL``, ``SPENDING_ANALYSIS_LOG_LEVEL``,
``SA_*``) are loaded from a local ``.env`` by the root callback.
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .config import default_account
from .dates import parse_iso_date
from .errors import ParseError
from .logging_setup import configure_logging, get_logger
from .models import SOURCES

logger = get_logger("spending_analysis.cli")


def _err(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _parse_optional_date(raw: str | None, name: str) -> date | None:
    if raw is None or not raw.strip():
        return None
    try:
        return parse_iso_date(raw)
    except ValueError as exc:
        raise ValueError(f"--{name} must be YYYY-MM-DD, got {raw!r}") from exc


# ---- Command handlers ---------------------------------------------------------


def cmd_init_db(*, database_url: str | None) -> int:
    from db.client import init_db

    try:
        init_db(database_url=database_url)
    except Exception as e:
        return _err(f"database initialization failed: {e}")
    print("Database ready.")
    return 0


def cmd_import_csv(csv_path: str, *, account: str | None, database_url: str | None) -> int:
    """Import one CSV export and print ``total/imported/skipped``.

    Parse errors leave the database untouched and are reported verbatim.
    """

    from .api import UploadTooLargeError, import_csv_file

    try:
        summary = import_csv_file(
            csv_path, account or default_account(), database_url=database_url
        )
    except FileNotFoundError:
        return _err(f"File not found: {csv_path}")
    except PermissionError:
        return _err(f"Permission denied: {csv_path}")
    except UnicodeDecodeError:
        return _err(f"File is not valid UTF-8: {csv_path}")
    except UploadTooLargeError as e:
        return _err(str(e))
    except ParseError as e:
        logger.warning("import of %s rejected: %s", csv_path, e)
        return _err(str(e))
    except Exception as e:
        return _err(f"import failed: {e}")

    print(f"total={summary.total}\timported={summary.imported}\tskipped={summary.skipped}")
    return 0


def cmd_transactions(
    *,
    start: str | None,
    end: str | None,
    source: str | None,
    database_url: str | None,
) -> int:
    from db.client import session_scope

    from .persistence import fetch_transactions

    try:
        start_d = _parse_optional_date(start, "start")
        end_d = _parse_optional_date(end, "end")
    except ValueError as e:
        return _err(str(e))
    if source is not None and source != "all" and source not in SOURCES:
        return _err(f"Unknown source: {source!r}. Allowed: all, {', '.join(SOURCES)}")

    try:
        with session_scope(database_url=database_url) as session:
            rows = fetch_transactions(
                session, start=start_d, end=end_d, source=source, newest_first=True
            )
    except Exception as e:
        return _err(f"failed to load transactions: {e}")

    for tx in rows:
        print(
            f"{tx.date.isoformat()}\t{tx.amount:.2f}\t{tx.type}\t{tx.category or ''}"
            f"\t{tx.source}\t{tx.account}\t{tx.description}"
        )
    return 0


def cmd_stats(*, database_url: str | None) -> int:
    from db.client import session_scope

    from .persistence import transaction_stats

    try:
        with session_scope(database_url=database_url) as session:
            stats = transaction_stats(session)
    except Exception as e:
        return _err(f"failed to load stats: {e}")

    first = stats.min_date.isoformat() if stats.min_date else ""
    last = stats.max_date.isoformat() if stats.max_date else ""
    print(f"count={stats.count}\tmin_date={first}\tmax_date={last}")
    return 0


def cmd_recurring(*, frequency: str | None, database_url: str | None) -> int:
    """Print detected recurring payments, one per line, most frequent first."""

    from db.client import session_scope

    from .api import recurring_payments
    from .savings import list_cancelled, split_active_cancelled

    try:
        payments = recurring_payments(database_url=database_url, frequency=frequency)
        with session_scope(database_url=database_url) as session:
            _, matched = split_active_cancelled(payments, list_cancelled(session))
    except ValueError as e:
        return _err(str(e))
    except Exception as e:
        return _err(f"recurring detection failed: {e}")

    for p in payments:
        status = "cancelled" if p in matched else "active"
        print(
            f"{p.frequency}\t{p.occurrences}\t{p.average_amount:.2f}"
            f"\t{p.last_date.isoformat()}\t{p.next_expected_date.isoformat()}"
            f"\t{p.category}\t{status}\t{p.description}"
        )
    return 0


def cmd_cancel(description: str, *, database_url: str | None) -> int:
    """Mark the recurring pattern with exactly ``description`` as cancelled."""

    from db.client import session_scope

    from .api import recurring_payments
    from .savings import cancel_subscription

    try:
        payments = recurring_payments(database_url=database_url)
    except Exception as e:
        return _err(f"recurring detection failed: {e}")

    match = next((p for p in payments if p.description == description), None)
    if match is None:
        return _err(f"No recurring payment with description {description!r}")

    try:
        with session_scope(database_url=database_url) as session:
            item = cancel_subscription(session, match)
    except Exception as e:
        return _err(f"failed to record cancellation: {e}")

    print(f"{item.id}\t{item.frequency}\t{item.annual_savings:.2f}\t{item.description}")
    return 0


def cmd_restore(cancellation_id: str, *, database_url: str | None) -> int:
    from db.client import session_scope

    from .savings import restore_subscription

    try:
        with session_scope(database_url=database_url) as session:
            removed = restore_subscription(session, cancellation_id)
    except Exception as e:
        return _err(f"failed to restore subscription: {e}")
    if not removed:
        return _err(f"No cancellation with id {cancellation_id!r}")
    print(f"Restored {cancellation_id}")
    return 0


def cmd_savings(*, database_url: str | None) -> int:
    from db.client import session_scope

    from .savings import list_cancelled, total_annual_savings

    try:
        with session_scope(database_url=database_url) as session:
            items = list_cancelled(session)
    except Exception as e:
        return _err(f"failed to load cancellations: {e}")

    for it in items:
        print(
            f"{it.id}\t{it.frequency}\t{it.average_amount:.2f}\t{it.annual_savings:.2f}"
            f"\t{it.cancelled_at.date().isoformat()}\t{it.description}"
        )
    print(f"annual_savings_total={total_annual_savings(items):.2f}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Import bank CSV exports, detect recurring payments and track cancelled "
        "subscriptions. Loads DATABASE_URL from a local .env before running."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter defaults).
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,
    "--csv-path",
    help="Path to a Chase checking or credit card CSV export",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files with a clear message
)
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    "--database-url", help="Override DATABASE_URL (falls back to env var)."
)


def _exit(code: int) -> None:
    if code != 0:
        raise typer.Exit(code)


@app.command("init-db")
def init_db_cmd(database_url: Annotated[str | None, DATABASE_URL_OPTION] = None) -> None:
    """Create the database tables if they do not exist."""

    _exit(cmd_init_db(database_url=database_url))


@app.command("import-csv")
def import_csv_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    account: str | None = typer.Option(
        None, help="Account label stored on each row (default: SA_DEFAULT_ACCOUNT or 'default')."
    ),
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Parse a CSV export and store new transactions (duplicates are skipped)."""

    _exit(cmd_import_csv(str(csv_path), account=account, database_url=database_url))


@app.command("transactions")
def transactions_cmd(
    start: str | None = typer.Option(None, help="Earliest date (YYYY-MM-DD), inclusive."),
    end: str | None = typer.Option(None, help="Latest date (YYYY-MM-DD), inclusive."),
    source: str | None = typer.Option(
        None, help="chase_checking, chase_credit or all (default: all)."
    ),
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """List stored transactions, newest first."""

    _exit(cmd_transactions(start=start, end=end, source=source, database_url=database_url))


@app.command("stats")
def stats_cmd(database_url: Annotated[str | None, DATABASE_URL_OPTION] = None) -> None:
    """Show the stored transaction count and date range."""

    _exit(cmd_stats(database_url=database_url))


@app.command("recurring")
def recurring_cmd(
    frequency: str | None = typer.Option(
        None, help="weekly, monthly, quarterly, annual or all (default: all)."
    ),
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Detect recurring payments across all stored transactions."""

    _exit(cmd_recurring(frequency=frequency, database_url=database_url))


@app.command("cancel")
def cancel_cmd(
    description: str = typer.Option(..., help="Exact recurring payment description."),
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Record a recurring payment as cancelled."""

    _exit(cmd_cancel(description, database_url=database_url))


@app.command("restore")
def restore_cmd(
    cancellation_id: str = typer.Option(..., "--id", help="Cancellation id to remove."),
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Undo a cancellation."""

    _exit(cmd_restore(cancellation_id, database_url=database_url))


@app.command("savings")
def savings_cmd(database_url: Annotated[str | None, DATABASE_URL_OPTION] = None) -> None:
    """List cancellations and the total expected annual savings."""

    _exit(cmd_savings(database_url=database_url))


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Diagnostic log level on stderr (default: $SPENDING_ANALYSIS_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


def main() -> None:  # pragma: no cover - console script entry
    app()


if __name__ == "__main__":  # pragma: no cover
    app()
