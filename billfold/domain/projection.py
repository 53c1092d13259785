"""Daily balance projection for a month.

Starting from the month's bank balances, walk each day of the month and
apply the money expected to come in and go out on that day. Days before
the balance start date (today, for the current month) are shown with
their activity but no balance, since the recorded balances already
include them.

All monetary amounts are in cents (Money type).
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from billfold.dates import days_in_month, first_day
from billfold.domain.due import DueItem, balance_start_date, overdue_items
from billfold.domain.models import ISODate, Money, Month
from billfold.domain.months import occurrence_paid


@dataclass(frozen=True)
class ProjectionEvent:
    """Money moving on one day.

    ``actual`` events are recorded payments; the rest are still scheduled.
    """

    name: str
    amount: Money
    is_income: bool
    actual: bool


@dataclass(frozen=True)
class ProjectionDay:
    date: ISODate
    balance: Money | None
    income: Money
    expense: Money
    events: tuple[ProjectionEvent, ...]

    @property
    def is_deficit(self) -> bool:
        return self.balance is not None and self.balance < 0


@dataclass(frozen=True)
class Projection:
    """Immutable day-by-day projection of a month."""

    start_date: ISODate
    end_date: ISODate
    starting_balance: Money
    days: list[ProjectionDay]
    overdue: list[DueItem]

    @property
    def lowest_balance(self) -> Money | None:
        balances = [day.balance for day in self.days if day.balance is not None]
        return min(balances) if balances else None


def _instance_events(
    instance: dict[str, Any], start: ISODate, today: ISODate
) -> list[tuple[ISODate, ProjectionEvent]]:
    """Dated events for one instance's recorded payments and open amounts."""
    is_income = instance["kind"] == "income"
    events = []
    for occurrence in instance.get("occurrences", []):
        due = occurrence["expected_date"]
        for payment in occurrence.get("payments", []):
            events.append((payment["date"], ProjectionEvent(instance["name"], payment["amount"], is_income, True)))

        if occurrence["is_closed"]:
            # Closed without a payment recorded: assume it went through on the due date
            if not occurrence.get("payments") and occurrence["expected_amount"] > 0 and due < today:
                events.append((due, ProjectionEvent(instance["name"], occurrence["expected_amount"], is_income, True)))
            continue

        remaining = occurrence["expected_amount"] - occurrence_paid(occurrence)
        if remaining <= 0:
            continue
        # Anything still open from before the balance day is expected on it
        events.append((max(due, start), ProjectionEvent(instance["name"], Money(remaining), is_income, False)))
    return events


def project_month(
    month: Month,
    today: date,
    starting_balance: Money,
    bill_instances: list[dict[str, Any]],
    income_instances: list[dict[str, Any]],
) -> Projection:
    """Project the running balance for every day of a month.

    Args:
        month: Month in YYYY-MM format.
        today: Reference date. Sets the balance start for the current month.
        starting_balance: Bank balances counted toward leftover, in cents.
        bill_instances: Bill instances with occurrences and payments.
        income_instances: Income instances with occurrences and payments.

    Returns:
        Projection with one ProjectionDay per calendar day and the overdue
        bills that were carried onto the balance start date.
    """
    start = balance_start_date(month, today)
    today_iso = ISODate(today.isoformat())

    by_date: dict[str, list[ProjectionEvent]] = {}
    for instance in [*bill_instances, *income_instances]:
        for on, event in _instance_events(instance, start, today_iso):
            by_date.setdefault(on, []).append(event)

    first = first_day(month)
    last = first.replace(day=days_in_month(first.year, first.month))
    balance = starting_balance
    days = []
    current = first
    while current <= last:
        iso = ISODate(current.isoformat())
        events = tuple(by_date.get(iso, []))
        income = sum(e.amount for e in events if e.is_income)
        expense = sum(e.amount for e in events if not e.is_income)
        has_balance = iso >= start
        if has_balance:
            balance = Money(balance + income - expense)
        days.append(
            ProjectionDay(
                date=iso,
                balance=balance if has_balance else None,
                income=Money(income),
                expense=Money(expense),
                events=events,
            )
        )
        current += timedelta(days=1)

    return Projection(
        start_date=ISODate(first.isoformat()),
        end_date=ISODate(last.isoformat()),
        starting_balance=starting_balance,
        days=days,
        overdue=overdue_items(bill_instances, month, today),
    )
