"""Helpers shared by the command modules: console, error reporting and input parsing."""

import sqlite3
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn

from rich.console import Console

from billfold.config import get_currency_symbol
from billfold.dates import normalize_date
from billfold.domain.models import ISODate, Money
from billfold.domain.money import format_cents, parse_money
from billfold.errors import BillfoldError, ValidationError
from billfold.store.schema import database_exists, get_db_path

console = Console()


def fail(message: str) -> NoReturn:
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)


@contextmanager
def handled_errors() -> Iterator[None]:
    """Print billfold and database errors in red and exit with status 1."""
    try:
        yield
    except ValidationError as e:
        console.print("[red]Invalid input:[/red]", style="bold")
        for error in e.errors:
            console.print(f"  • {error}")
        sys.exit(1)
    except BillfoldError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")


def require_database() -> None:
    if not database_exists():
        fail(f"Database not found at {get_db_path()}. Run 'billfold init' first.")


def parse_amount(value: str, label: str = "amount") -> Money:
    """Parse a user-entered amount to cents or exit with an error."""
    cents = parse_money(value)
    if cents is None:
        fail(f"Invalid {label}: {value}")
    return cents


def parse_date(value: str, label: str = "date") -> ISODate:
    """Normalize a user-entered date or exit with an error."""
    try:
        return normalize_date(value)
    except ValueError:
        fail(f"Invalid {label}: {value}")


def money(cents: int | None) -> str:
    """Format cents with the configured currency symbol."""
    if cents is None:
        return "[dim]-[/dim]"
    return format_cents(cents, get_currency_symbol())


def signed_money(cents: int) -> str:
    color = "red" if cents < 0 else "green"
    return f"[{color}]{money(cents)}[/{color}]"


def yes_no(flag: bool) -> str:
    return "✓" if flag else ""
