"""Pure functions for the billing-period schedule rules.

Bills, incomes and todos repeat on one of four billing periods. Monthly
items fall either on a fixed day of the month or on the Nth weekday of the
month (week 5 meaning the last one). Which mode applies is decided by
which fields are set.

Weekdays use 0=Sunday .. 6=Saturday throughout.
"""

from datetime import date, timedelta
from fractions import Fraction
from typing import Any

from billfold.dates import clamped_date, days_in_month, first_day, parse_iso_date
from billfold.domain.models import ISODate, Money, Month

# Average occurrences per month for each billing period
MONTHLY_FACTORS: dict[str, Fraction] = {
    "monthly": Fraction(1),
    "bi_weekly": Fraction(26, 12),
    "weekly": Fraction(52, 12),
    "semi_annually": Fraction(1, 6),
}

TYPICAL_OCCURRENCES: dict[str, int] = {
    "monthly": 1,
    "bi_weekly": 2,
    "weekly": 4,
    "semi_annually": 1,
}

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def _to_python_weekday(weekday: int) -> int:
    # Python counts Monday as 0
    return (weekday - 1) % 7


def nth_weekday(year: int, month: int, week: int, weekday: int) -> date | None:
    """Find the Nth given weekday of a month.

    Args:
        year: Calendar year.
        month: Calendar month (1-12).
        week: 1-4 for the first to fourth, 5 for the last.
        weekday: 0=Sunday .. 6=Saturday.

    Returns:
        The date, or None if the month has no such day.
    """
    target = _to_python_weekday(weekday)
    if week >= 5:
        last_day = days_in_month(year, month)
        back = (date(year, month, last_day).weekday() - target) % 7
        return date(year, month, last_day - back)

    first = 1 + (target - date(year, month, 1).weekday()) % 7
    day = first + 7 * (week - 1)
    if day > days_in_month(year, month):
        return None
    return date(year, month, day)


def _stepped_dates(start: date, step_days: int, month_start: date, month_end: date) -> list[date]:
    if start > month_end:
        return []
    if start >= month_start:
        current = start
    else:
        steps = -(-(month_start - start).days // step_days)
        current = start + timedelta(days=steps * step_days)
    dates = []
    while current <= month_end:
        dates.append(current)
        current += timedelta(days=step_days)
    return dates


def occurrence_dates(
    billing_period: str,
    month: Month,
    *,
    start_date: str | None = None,
    day_of_month: int | None = None,
    recurrence_week: int | None = None,
    recurrence_day: int | None = None,
) -> list[ISODate]:
    """Calculate the dates a recurring item falls on within a month.

    Args:
        billing_period: One of BILLING_PERIODS.
        month: Target month in YYYY-MM format.
        start_date: Anchor date for weekly, bi-weekly and semi-annual items.
        day_of_month: Fixed day for monthly items (clamped to the month).
        recurrence_week: Week number for Nth-weekday monthly items.
        recurrence_day: Weekday for Nth-weekday monthly items.

    Returns:
        Sorted list of YYYY-MM-DD dates (possibly empty).

    Raises:
        ValueError: If the billing period is unknown.
    """
    month_start = first_day(month)
    year, month_number = month_start.year, month_start.month
    month_end = date(year, month_number, days_in_month(year, month_number))
    start = parse_iso_date(start_date)

    if billing_period == "monthly":
        if recurrence_week is not None and recurrence_day is not None:
            found = nth_weekday(year, month_number, recurrence_week, recurrence_day)
            dates = [found] if found else []
        else:
            dates = [clamped_date(year, month_number, day_of_month or 1)]

    elif billing_period in ("weekly", "bi_weekly"):
        step = 7 if billing_period == "weekly" else 14
        if start is not None:
            dates = _stepped_dates(start, step, month_start, month_end)
        elif billing_period == "weekly":
            monday = month_start + timedelta(days=-month_start.weekday() % 7)
            dates = _stepped_dates(monday, 7, month_start, month_end)
        else:
            dates = [month_start, date(year, month_number, 15)]

    elif billing_period == "semi_annually":
        if start is not None:
            diff = (year * 12 + month_number) - (start.year * 12 + start.month)
            dates = [clamped_date(year, month_number, start.day)] if diff >= 0 and diff % 6 == 0 else []
        else:
            dates = [month_start] if month_number in (1, 7) else []

    else:
        raise ValueError(f"Unknown billing period: {billing_period}")

    return [ISODate(d.isoformat()) for d in dates]


def item_occurrence_dates(item: dict[str, Any], month: Month) -> list[ISODate]:
    """Occurrence dates for a stored bill or income row."""
    return occurrence_dates(
        item["billing_period"],
        month,
        start_date=item.get("start_date"),
        day_of_month=item.get("day_of_month"),
        recurrence_week=item.get("recurrence_week"),
        recurrence_day=item.get("recurrence_day"),
    )


def typical_occurrence_count(billing_period: str) -> int:
    return TYPICAL_OCCURRENCES.get(billing_period, 1)


def is_extra_occurrence_month(billing_period: str, count: int) -> bool:
    """True for a month with an extra weekly or bi-weekly payment.

    A bi-weekly item normally lands twice a month and a weekly one four
    times. Months with more are flagged so the extra cash flow stands out.
    """
    if billing_period in ("weekly", "bi_weekly"):
        return count > TYPICAL_OCCURRENCES[billing_period]
    return False


def monthly_average(amount: Money, billing_period: str) -> Money:
    """Average monthly cost of an amount on a billing period, rounded half up."""
    factor = MONTHLY_FACTORS.get(billing_period, Fraction(1))
    scaled = Fraction(amount) * factor
    return Money(int((scaled + Fraction(1, 2)) // 1))


def describe_schedule(item: dict[str, Any]) -> str:
    """Short human description of when an item recurs, e.g. "2nd Friday"."""
    period = item["billing_period"]
    if period == "monthly":
        week, day = item.get("recurrence_week"), item.get("recurrence_day")
        if week is not None and day is not None:
            ordinal = "last" if week >= 5 else ("1st", "2nd", "3rd", "4th")[week - 1]
            return f"{ordinal} {WEEKDAY_NAMES[day]}"
        return f"day {item.get('day_of_month') or 1}"
    label = {"weekly": "weekly", "bi_weekly": "every 2 weeks", "semi_annually": "every 6 months"}[period]
    if item.get("start_date"):
        return f"{label} from {item['start_date']}"
    return label
