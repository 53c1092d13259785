"""Todo template operations."""

from datetime import date, datetime
from pathlib import Path
from typing import Any

import structlog

from billfold.dates import month_of
from billfold.domain.validation import validate_todo
from billfold.errors import ReadOnlyError, ValidationError, ensure_found, ensure_valid
from billfold.store import months as month_store
from billfold.store import todos as todo_store

log = structlog.get_logger(__name__)

DELETE_SCOPES = ("template_only", "current_month", "future_months")

# Fields that belong to one recurrence mode only
MODE_FIELDS = {
    "none": ("due_date",),
    "weekly": ("start_date",),
    "bi_weekly": ("start_date",),
    "monthly": ("day_of_month",),
}


def _clear_other_modes(data: dict[str, Any]) -> dict[str, Any]:
    keep = MODE_FIELDS.get(data.get("recurrence", "none"), ())
    cleared = dict(data)
    for field in ("due_date", "start_date", "day_of_month"):
        if field not in keep:
            cleared[field] = None
    return cleared


def get_todo(todo_id: int, db_path: Path | None = None) -> dict[str, Any]:
    return ensure_found(todo_store.get_todo(todo_id, db_path), "Todo", todo_id)


def list_todos(db_path: Path | None = None, active_only: bool = False) -> list[dict[str, Any]]:
    return todo_store.list_todos(db_path, active_only=active_only)


def create_todo(data: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    data = _clear_other_modes({"recurrence": "none", "status": "pending", **data})
    ensure_valid(validate_todo(data))
    todo_id = todo_store.create_todo({**data, "title": data["title"].strip()}, db_path)
    log.info("todo.created", todo_id=todo_id, recurrence=data["recurrence"])
    return get_todo(todo_id, db_path)


def update_todo(todo_id: int, updates: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    merged = _clear_other_modes({**get_todo(todo_id, db_path), **updates})
    ensure_valid(validate_todo(merged))
    todo_store.update_todo(todo_id, merged, db_path)
    return get_todo(todo_id, db_path)


def complete_todo(todo_id: int, db_path: Path | None = None) -> dict[str, Any]:
    get_todo(todo_id, db_path)
    todo_store.update_todo(todo_id, {"status": "completed", "completed_at": datetime.now().isoformat()}, db_path)
    return get_todo(todo_id, db_path)


def reopen_todo(todo_id: int, db_path: Path | None = None) -> dict[str, Any]:
    get_todo(todo_id, db_path)
    todo_store.update_todo(todo_id, {"status": "pending", "completed_at": None}, db_path)
    return get_todo(todo_id, db_path)


def set_active(todo_id: int, active: bool, db_path: Path | None = None) -> dict[str, Any]:
    get_todo(todo_id, db_path)
    todo_store.update_todo(todo_id, {"is_active": active}, db_path)
    return get_todo(todo_id, db_path)


def delete_todo(
    todo_id: int, scope: str = "template_only", today: date | None = None, db_path: Path | None = None
) -> int:
    """Delete a todo template and, depending on scope, its generated instances.

    Args:
        todo_id: Todo to delete.
        scope: "template_only" keeps every generated instance,
            "current_month" also removes this month's instances,
            "future_months" removes instances from this month onward.
        today: Reference date for the current month.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Number of generated instances removed.

    Raises:
        ValidationError: If the scope is unknown.
        ReadOnlyError: If the current month is locked and would be changed.
    """
    if scope not in DELETE_SCOPES:
        raise ValidationError([f"Scope must be one of: {', '.join(DELETE_SCOPES)}"])
    get_todo(todo_id, db_path)
    current = month_of(today or date.today())

    removed = 0
    if scope != "template_only":
        months = []
        for record in month_store.list_months(db_path):
            in_scope = record["month"] == current if scope == "current_month" else record["month"] >= current
            if not in_scope:
                continue
            if record["is_read_only"]:
                if record["month"] == current:
                    raise ReadOnlyError(record["month"])
                continue
            months.append(record["month"])
        if months:
            removed = todo_store.delete_todo_instances(todo_id, months=months, db_path=db_path)

    todo_store.delete_todo(todo_id, db_path)
    log.info("todo.deleted", todo_id=todo_id, scope=scope, instances_removed=removed)
    return removed
