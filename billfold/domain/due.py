"""Pure functions for due dates: what is overdue and what is coming up.

Every open occurrence of a bill or income has a due date (its expected
date). For the current month, anything still open before today is overdue.
Past and future months are looked at from their first day, so they never
carry overdue items of their own.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from billfold.dates import month_of, parse_iso_date
from billfold.domain.models import DUE_SOON_DAYS, ISODate, Money, Month
from billfold.domain.months import occurrence_paid


@dataclass(frozen=True)
class DueItem:
    """An open occurrence with money still outstanding."""

    name: str
    kind: str
    due_date: ISODate
    amount: Money
    instance_id: int
    occurrence_id: int


def balance_start_date(month: Month, today: date) -> ISODate:
    """Day from which a month's bank balances are assumed current.

    Today for the current month, otherwise the first of the month.
    """
    if month_of(today) == month:
        return ISODate(today.isoformat())
    return ISODate(f"{month}-01")


def days_overdue(due_date: str, today: date) -> int:
    """Days since ``due_date``. Negative when it is still ahead."""
    due = parse_iso_date(due_date)
    if due is None:
        raise ValueError(f"Invalid due date: {due_date}")
    return (today - due).days


def is_overdue(due_date: str | None, is_closed: bool, today: date) -> bool:
    if not due_date or is_closed:
        return False
    return days_overdue(due_date, today) > 0


def is_due_soon(due_date: str | None, today: date, days: int = DUE_SOON_DAYS) -> bool:
    """True when ``due_date`` is today or within the next ``days`` days."""
    if not due_date:
        return False
    return 0 <= -days_overdue(due_date, today) <= days


def occurrence_remaining(occurrence: dict[str, Any]) -> Money:
    if occurrence["is_closed"]:
        return Money(0)
    return Money(max(0, occurrence["expected_amount"] - occurrence_paid(occurrence)))


def _open_items(instances: list[dict[str, Any]]) -> list[DueItem]:
    items = []
    for instance in instances:
        for occurrence in instance.get("occurrences", []):
            remaining = occurrence_remaining(occurrence)
            if remaining <= 0:
                continue
            items.append(
                DueItem(
                    name=instance["name"],
                    kind=instance["kind"],
                    due_date=occurrence["expected_date"],
                    amount=remaining,
                    instance_id=instance["id"],
                    occurrence_id=occurrence["id"],
                )
            )
    return sorted(items, key=lambda item: (item.due_date, item.name))


def overdue_items(instances: list[dict[str, Any]], month: Month, today: date) -> list[DueItem]:
    """Open occurrences due before the month's balance start date.

    Amounts are what is still unpaid on each occurrence.
    """
    start = balance_start_date(month, today)
    return [item for item in _open_items(instances) if item.due_date < start]


def due_soon_items(instances: list[dict[str, Any]], today: date, days: int = DUE_SOON_DAYS) -> list[DueItem]:
    """Open occurrences due between today and ``days`` days from now."""
    return [item for item in _open_items(instances) if is_due_soon(item.due_date, today, days)]
