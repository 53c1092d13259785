"""Database query functions for savings goals."""

import sqlite3
from pathlib import Path
from typing import Any

from billfold.domain.models import Money
from billfold.store.queries import RECURRING_FIELDS, _connect, _delete, _get, _insert, _pick, _to_dict, _update

GOAL_FIELDS = (
    "name",
    "target_amount",
    "target_date",
    "linked_account_id",
    "status",
    "notes",
    "paused_at",
    "completed_at",
    "previous_status",
    "archived_at",
)


def create_goal(data: dict[str, Any], db_path: Path | None = None, schedule_bill: dict[str, Any] | None = None) -> int:
    """Insert a savings goal and, optionally, its scheduled contribution bill.

    Both rows are written in one transaction, so a goal never exists without
    the bill it was created with.

    Args:
        data: Validated goal fields.
        db_path: Path to the database file. If None, uses default location.
        schedule_bill: Validated bill fields. The bill is linked to the new goal.

    Returns:
        The new goal's id.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    values = _pick(data, GOAL_FIELDS)
    if data.get("created_at"):
        values["created_at"] = data["created_at"]
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            goal_id = _insert(cursor, "savings_goals", values)
            if schedule_bill is not None:
                bill = _pick(schedule_bill, RECURRING_FIELDS)
                _insert(cursor, "recurring", {**bill, "kind": "bill", "goal_id": goal_id})
            conn.commit()
            return goal_id
        except sqlite3.Error:
            conn.rollback()
            raise


def get_goal(goal_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    return _get("savings_goals", goal_id, db_path)


def list_goals(db_path: Path | None = None, include_archived: bool = False) -> list[dict[str, Any]]:
    """Get savings goals, open goals first then by target date.

    Args:
        db_path: Path to the database file. If None, uses default location.
        include_archived: Also return archived goals.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = "SELECT * FROM savings_goals"
        if not include_archived:
            query += " WHERE status != 'archived'"
        query += """
            ORDER BY CASE status WHEN 'saving' THEN 0 WHEN 'paused' THEN 1 ELSE 2 END,
                     target_date IS NULL, target_date, name COLLATE NOCASE
        """
        cursor.execute(query)
        return [_to_dict(row) for row in cursor.fetchall()]


def update_goal(goal_id: int, updates: dict[str, Any], db_path: Path | None = None) -> bool:
    return _update("savings_goals", goal_id, _pick(updates, GOAL_FIELDS), db_path)


def delete_goal(goal_id: int, db_path: Path | None = None) -> bool:
    return _delete("savings_goals", goal_id, db_path)


def get_saved_amount(goal_id: int, db_path: Path | None = None) -> Money:
    """Sum every payment recorded toward a goal.

    A payment counts when its bill instance belongs to the goal directly
    (contributions) or comes from one of the goal's scheduled bills.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT COALESCE(SUM(p.amount), 0)
            FROM payments p
            JOIN occurrences o ON o.id = p.occurrence_id
            JOIN instances i ON i.id = o.instance_id
            LEFT JOIN recurring r ON r.id = i.source_id
            WHERE i.kind = 'bill' AND (i.goal_id = ? OR r.goal_id = ?)
            """,
            (goal_id, goal_id),
        )
        return Money(int(cursor.fetchone()[0]))
