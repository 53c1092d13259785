"""Pure functions for todo scheduling."""

from typing import Any

from billfold.dates import clamped_date, first_day, month_of
from billfold.domain.models import ISODate, Month
from billfold.domain.recurrence import occurrence_dates


def todo_dates_in_month(todo: dict[str, Any], month: Month) -> list[ISODate]:
    """Due dates a todo template produces in a month.

    Args:
        todo: Todo row.
        month: Target month in YYYY-MM format.

    Returns:
        Sorted YYYY-MM-DD dates. Inactive todos produce none.
    """
    if not todo.get("is_active", True):
        return []

    recurrence = todo.get("recurrence", "none")
    if recurrence == "none":
        due_date = todo.get("due_date")
        if due_date and month_of(due_date) == month:
            return [ISODate(due_date)]
        return []

    if recurrence == "monthly":
        start = first_day(month)
        return [ISODate(clamped_date(start.year, start.month, todo["day_of_month"]).isoformat())]

    return occurrence_dates(recurrence, month, start_date=todo["start_date"])


def missing_instances(
    todo: dict[str, Any], month: Month, existing: set[tuple[int, str]]
) -> list[dict[str, Any]]:
    """Todo instances for a month not already in ``existing``.

    Args:
        todo: Todo row.
        month: Target month.
        existing: (todo_id, due_date) pairs already generated.
    """
    return [
        {"todo_id": todo["id"], "month": month, "title": todo["title"], "due_date": d, "status": "pending"}
        for d in todo_dates_in_month(todo, month)
        if (todo["id"], d) not in existing
    ]
