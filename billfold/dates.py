"""Date utilities for billfold.

Calendar arithmetic shared by the recurrence rules, savings schedules and
month snapshots. Everything except ``normalize_date`` is pure.
"""

import calendar
from datetime import date, datetime, timedelta

import pandas as pd

from billfold.domain.models import ISODate, Month


def month_range(month: Month) -> tuple[str, str, str]:
    """Calculate date range and label for a month.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        Tuple of (since_date, until_date, label) where:
        - since_date: First day of month (YYYY-MM-DD)
        - until_date: First day of next month (YYYY-MM-DD)
        - label: Human-readable month (e.g., "January 2025")
    """
    dt = datetime.strptime(month, "%Y-%m")
    since = dt.strftime("%Y-%m-01")
    next_month = (dt.replace(day=28) + timedelta(days=4)).replace(day=1)
    until = next_month.strftime("%Y-%m-%d")
    label = dt.strftime("%B %Y")
    return since, until, label


def is_valid_month(value: str | None) -> bool:
    """Check a YYYY-MM string."""
    if not value or len(value) != 7:
        return False
    try:
        datetime.strptime(value, "%Y-%m")
    except ValueError:
        return False
    return True


def parse_iso_date(value: str | None) -> date | None:
    """Parse a strict YYYY-MM-DD string, returning None when invalid."""
    if not value or len(value) != 10:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def is_valid_iso_date(value: str | None) -> bool:
    return parse_iso_date(value) is not None


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamped_date(year: int, month: int, day: int) -> date:
    """Build a date, pulling the day back to the last day of short months."""
    return date(year, month, min(day, days_in_month(year, month)))


def add_months(start: date, months: int, day: int | None = None) -> date:
    """Shift a date by whole calendar months.

    Args:
        start: Date to shift.
        months: Number of months (may be negative).
        day: Preferred day of month. Defaults to the day of ``start``.

    Returns:
        The shifted date, with the day clamped to the target month length.
    """
    index = start.year * 12 + (start.month - 1) + months
    year, month_index = divmod(index, 12)
    return clamped_date(year, month_index + 1, day if day is not None else start.day)


def month_of(value: date | str) -> Month:
    """Return the YYYY-MM month a date falls in."""
    if isinstance(value, str):
        return Month(value[:7])
    return Month(value.strftime("%Y-%m"))


def first_day(month: Month) -> date:
    return datetime.strptime(month, "%Y-%m").date()


def next_month(month: Month) -> Month:
    return month_of(add_months(first_day(month), 1))


def previous_month(month: Month) -> Month:
    return month_of(add_months(first_day(month), -1))


def normalize_date(raw_date: str) -> ISODate:
    """Normalize a user-entered date to ISO format (YYYY-MM-DD).

    ISO input is returned unchanged. Anything else goes through
    pandas.to_datetime, which accepts "5 March 2025", "05/03/2025" and
    similar spellings (day first).

    Raises:
        ValueError: If the date cannot be parsed.
    """
    if is_valid_iso_date(raw_date):
        return ISODate(raw_date)
    try:
        parsed_date = pd.to_datetime(raw_date, dayfirst=True)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e
    if pd.isna(parsed_date):
        raise ValueError(f"Could not parse date '{raw_date}'")
    return ISODate(parsed_date.strftime("%Y-%m-%d"))
