"""Looking ahead within a month: projected balances, the calendar and due dates."""

from datetime import date
from pathlib import Path
from typing import Any

from billfold.dates import is_valid_iso_date, month_of
from billfold.domain.calendar import calendar_events, calendar_summary
from billfold.domain.due import DueItem, due_soon_items, overdue_items
from billfold.domain.models import DUE_SOON_DAYS
from billfold.domain.projection import Projection, project_month
from billfold.errors import ValidationError
from billfold.services.months import get_month_record, month_leftover
from billfold.store import goals as goal_store
from billfold.store import months as month_store
from billfold.store import todos


def _split_kinds(month: str, db_path: Path | None) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    instances = month_store.load_instances(month, db_path=db_path)
    return [i for i in instances if i["kind"] == "bill"], [i for i in instances if i["kind"] == "income"]


def month_projection(month: str, today: date | None = None, db_path: Path | None = None) -> Projection:
    """Project the month's balance day by day from its bank balances.

    Raises:
        ValidationError: If a counted account has no balance for the month.
        NotFoundError: If the month does not exist.
    """
    record = get_month_record(month, db_path)
    leftover = month_leftover(record["month"], db_path)
    if not leftover.is_valid:
        raise ValidationError([f"{leftover.error_message}. Set them with 'billfold months balance'."])
    bills, incomes = _split_kinds(record["month"], db_path)
    return project_month(record["month"], today or date.today(), leftover.bank_balances, bills, incomes)


def month_calendar(
    month: str, today: date | None = None, on_date: str | None = None, db_path: Path | None = None
) -> dict[str, Any]:
    """Calendar events for a month, or for one day of it when ``on_date`` is given.

    Returns:
        Dict with ``events`` and a per-type ``summary`` of the whole month.
    """
    record = get_month_record(month, db_path)
    if on_date is not None and (not is_valid_iso_date(on_date) or month_of(on_date) != record["month"]):
        raise ValidationError([f"Date must be a valid date in {record['month']}"])
    bills, incomes = _split_kinds(record["month"], db_path)
    goal_names = {g["id"]: g["name"] for g in goal_store.list_goals(db_path, include_archived=True)}
    events = calendar_events(
        bills, incomes, todos.list_todo_instances(record["month"], db_path), today or date.today(), goal_names
    )
    summary = calendar_summary(events)
    if on_date is not None:
        events = [e for e in events if e.date == on_date]
    return {"month": record["month"], "events": events, "summary": summary}


def overdue_bills(month: str, today: date | None = None, db_path: Path | None = None) -> list[DueItem]:
    """Bills still unpaid past their due date. Only the current month has any."""
    record = get_month_record(month, db_path)
    bills, _ = _split_kinds(record["month"], db_path)
    return overdue_items(bills, record["month"], today or date.today())


def due_soon(today: date | None = None, days: int = DUE_SOON_DAYS, db_path: Path | None = None) -> list[DueItem]:
    """Open bills and incomes in the current month due within ``days`` days.

    Returns an empty list when the current month has not been created.
    """
    if days < 0:
        raise ValidationError(["Days must be 0 or more"])
    today = today or date.today()
    instances = month_store.load_instances(month_of(today), db_path=db_path)
    return due_soon_items(instances, today, days)
