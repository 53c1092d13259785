"""Pure functions for converting between user-entered amounts and cents."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from billfold.domain.models import Money

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_CENT = Decimal("0.01")
# SQLite stores integers in 8 bytes
_MAX_CENTS = 2**63 - 1


def dollars_to_cents(value: str) -> Money | None:
    """Convert a dollar string to cents, rounding half up.

    Currency symbols, thousands separators and spaces are ignored, so
    "$1,234.50" and "1234.5" both give 123450.

    Args:
        value: Amount as typed by the user.

    Returns:
        Amount in cents, or None if the string holds no number or one too
        large to store.
    """
    cleaned = _NON_NUMERIC.sub("", value or "")
    if not cleaned:
        return None
    try:
        cents = Decimal(cleaned).quantize(_CENT, rounding=ROUND_HALF_UP) * 100
    except InvalidOperation:
        return None
    if abs(cents) > _MAX_CENTS:
        return None
    return Money(int(cents))


def parse_money(value: str) -> Money | None:
    """Parse a non-negative money string to cents.

    Returns:
        Money amount in cents, or None if invalid or negative.
    """
    cents = dollars_to_cents(value)
    if cents is None or cents < 0:
        return None
    return cents


def cents_to_dollars(cents: int) -> str:
    """Render cents as a plain decimal string, e.g. 12345 -> "123.45"."""
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(cents), 100)
    return f"{sign}{whole}.{frac:02d}"


def format_cents(cents: int, symbol: str = "$") -> str:
    """Format cents for display, e.g. -123456 -> "-$1,234.56"."""
    sign = "-" if cents < 0 else ""
    return f"{sign}{symbol}{Decimal(abs(cents)) / 100:,.2f}"
