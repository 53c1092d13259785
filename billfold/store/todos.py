"""Database query functions for todo templates and their monthly instances."""

import sqlite3
from pathlib import Path
from typing import Any

from billfold.domain.models import Month
from billfold.store.queries import _connect, _create, _delete, _get, _insert, _pick, _to_dict, _update

TODO_FIELDS = (
    "title",
    "notes",
    "recurrence",
    "due_date",
    "start_date",
    "day_of_month",
    "status",
    "completed_at",
    "is_active",
)
TODO_INSTANCE_FIELDS = ("month", "todo_id", "title", "due_date", "status", "completed_at")


def create_todo(data: dict[str, Any], db_path: Path | None = None) -> int:
    return _create("todos", _pick(data, TODO_FIELDS), db_path)


def get_todo(todo_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    return _get("todos", todo_id, db_path)


def list_todos(db_path: Path | None = None, active_only: bool = False) -> list[dict[str, Any]]:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = "SELECT * FROM todos"
        if active_only:
            query += " WHERE is_active = 1"
        cursor.execute(query + " ORDER BY status, COALESCE(due_date, start_date, ''), title COLLATE NOCASE")
        return [_to_dict(row) for row in cursor.fetchall()]


def update_todo(todo_id: int, updates: dict[str, Any], db_path: Path | None = None) -> bool:
    return _update("todos", todo_id, _pick(updates, TODO_FIELDS), db_path)


def delete_todo(todo_id: int, db_path: Path | None = None) -> bool:
    return _delete("todos", todo_id, db_path)


def list_todo_instances(month: Month, db_path: Path | None = None) -> list[dict[str, Any]]:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM todo_instances WHERE month = ? ORDER BY due_date, title", (month,))
        return [_to_dict(row) for row in cursor.fetchall()]


def get_todo_instance(instance_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    return _get("todo_instances", instance_id, db_path)


def insert_todo_instances(instances: list[dict[str, Any]], db_path: Path | None = None) -> int:
    """Insert generated todo instances in one transaction.

    Returns:
        Number of rows inserted.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            for instance in instances:
                _insert(cursor, "todo_instances", _pick(instance, TODO_INSTANCE_FIELDS))
            conn.commit()
            return len(instances)
        except sqlite3.Error:
            conn.rollback()
            raise


def update_todo_instance(instance_id: int, updates: dict[str, Any], db_path: Path | None = None) -> bool:
    return _update("todo_instances", instance_id, _pick(updates, TODO_INSTANCE_FIELDS), db_path, touch=False)


def delete_todo_instances(
    todo_id: int,
    months: list[Month] | None = None,
    db_path: Path | None = None,
) -> int:
    """Delete a todo's generated instances.

    Args:
        todo_id: Todo template id.
        months: Only delete instances in these months.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Number of instances deleted.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    query = "DELETE FROM todo_instances WHERE todo_id = ?"
    params: list[Any] = [todo_id]
    if months is not None:
        query += f" AND month IN ({', '.join('?' for _ in months)})"
        params.extend(months)
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(query, params)
            conn.commit()
            return cursor.rowcount
        except sqlite3.Error:
            conn.rollback()
            raise
