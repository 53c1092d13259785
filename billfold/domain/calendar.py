"""Calendar view of a month: every dated bill, income, goal payment and todo."""

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Any

from billfold.domain.due import is_overdue
from billfold.domain.models import ISODate, Money

EVENT_TYPES = ("bill", "income", "goal", "todo")


@dataclass(frozen=True)
class CalendarEvent:
    """One dated entry on the calendar.

    Bills paying into a savings goal are shown as ``goal`` events under the
    goal's name. Todos have no amount and no occurrence.
    """

    type: str
    date: ISODate
    title: str
    amount: Money | None
    is_closed: bool
    is_overdue: bool
    instance_id: int
    occurrence_id: int | None = None


def _occurrence_events(
    instance: dict[str, Any], event_type: str, title: str, today: date
) -> list[CalendarEvent]:
    return [
        CalendarEvent(
            type=event_type,
            date=occurrence["expected_date"],
            title=title,
            amount=occurrence["expected_amount"],
            is_closed=occurrence["is_closed"],
            is_overdue=is_overdue(occurrence["expected_date"], occurrence["is_closed"], today),
            instance_id=instance["id"],
            occurrence_id=occurrence["id"],
        )
        for occurrence in instance.get("occurrences", [])
    ]


def calendar_events(
    bill_instances: list[dict[str, Any]],
    income_instances: list[dict[str, Any]],
    todo_instances: list[dict[str, Any]],
    today: date,
    goal_names: dict[int, str] | None = None,
) -> list[CalendarEvent]:
    """Build the month's calendar events, ordered by date.

    Args:
        bill_instances: Bill instances with occurrences.
        income_instances: Income instances with occurrences.
        todo_instances: The month's todo instances.
        today: Reference date for overdue flags.
        goal_names: Savings goal id -> name, for titling goal payments.

    Returns:
        One event per occurrence and per todo, sorted by date. Events on the
        same day keep bill, income, todo order.
    """
    goal_names = goal_names or {}
    events = []
    for instance in bill_instances:
        goal_id = instance.get("goal_id")
        if goal_id:
            events += _occurrence_events(instance, "goal", goal_names.get(goal_id, instance["name"]), today)
        else:
            events += _occurrence_events(instance, "bill", instance["name"], today)
    for instance in income_instances:
        events += _occurrence_events(instance, "income", instance["name"], today)
    for todo in todo_instances:
        completed = todo["status"] == "completed"
        events.append(
            CalendarEvent(
                type="todo",
                date=todo["due_date"],
                title=todo["title"],
                amount=None,
                is_closed=completed,
                is_overdue=is_overdue(todo["due_date"], completed, today),
                instance_id=todo["id"],
            )
        )
    return sorted(events, key=lambda e: e.date)


def calendar_summary(events: list[CalendarEvent]) -> dict[str, int]:
    """Count events per type, plus ``total``."""
    counts = Counter(e.type for e in events)
    summary = {event_type: counts.get(event_type, 0) for event_type in EVENT_TYPES}
    summary["total"] = len(events)
    return summary
