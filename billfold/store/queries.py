"""Database query functions for payment sources, categories, bills and incomes."""

import sqlite3
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from billfold.store.schema import get_db_path

BOOLEAN_COLUMNS = frozenset(
    {
        "is_active",
        "is_adhoc",
        "is_closed",
        "is_extra",
        "is_investment",
        "is_predefined",
        "is_read_only",
        "is_savings",
        "exclude_from_leftover",
        "pay_off_monthly",
    }
)

SOURCE_FIELDS = ("name", "type", "is_active", "pay_off_monthly", "exclude_from_leftover", "is_savings", "is_investment")
CATEGORY_FIELDS = ("name", "type", "color", "sort_order")
RECURRING_FIELDS = (
    "name",
    "amount",
    "billing_period",
    "start_date",
    "day_of_month",
    "recurrence_week",
    "recurrence_day",
    "payment_source_id",
    "category_id",
    "goal_id",
    "is_active",
    "notes",
)


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory and foreign keys on.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def _to_dict(row: sqlite3.Row) -> dict[str, Any]:
    """Convert a row to a dict, turning 0/1 flag columns into bools."""
    record = dict(row)
    for key in BOOLEAN_COLUMNS.intersection(record):
        record[key] = bool(record[key])
    return record


def _insert(cursor: sqlite3.Cursor, table: str, values: dict[str, Any]) -> int:
    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)
    cursor.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", list(values.values()))
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def _pick(data: dict[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    return {key: data[key] for key in fields if key in data}


def _update(
    table: str,
    record_id: int | str,
    updates: dict[str, Any],
    db_path: Path | None = None,
    key: str = "id",
    touch: bool = True,
) -> bool:
    """Apply column updates to one row.

    Returns:
        True if a row was updated, False if no row has that key.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    if not updates:
        return True
    assignments = [f"{column} = ?" for column in updates]
    if touch:
        assignments.append("updated_at = datetime('now')")
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                f"UPDATE {table} SET {', '.join(assignments)} WHERE {key} = ?",
                [*updates.values(), record_id],
            )
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise


def _delete(table: str, record_id: int, db_path: Path | None = None) -> bool:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise


def _get(table: str, record_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT * FROM {table} WHERE id = ?", (record_id,))
        row = cursor.fetchone()
        return _to_dict(row) if row else None


def _create(table: str, values: dict[str, Any], db_path: Path | None = None) -> int:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            new_id = _insert(cursor, table, values)
            conn.commit()
            return new_id
        except sqlite3.Error:
            conn.rollback()
            raise


# Payment sources


def create_payment_source(data: dict[str, Any], db_path: Path | None = None) -> int:
    """Insert a payment source.

    Returns:
        The new source's id.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    return _create("payment_sources", _pick(data, SOURCE_FIELDS), db_path)


def get_payment_source(source_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    return _get("payment_sources", source_id, db_path)


def list_payment_sources(db_path: Path | None = None, active_only: bool = False) -> list[dict[str, Any]]:
    """Get payment sources ordered by name.

    Args:
        db_path: Path to the database file. If None, uses default location.
        active_only: Skip deactivated sources.

    Returns:
        List of payment source dictionaries.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = "SELECT * FROM payment_sources"
        if active_only:
            query += " WHERE is_active = 1"
        cursor.execute(query + " ORDER BY name COLLATE NOCASE")
        return [_to_dict(row) for row in cursor.fetchall()]


def update_payment_source(source_id: int, updates: dict[str, Any], db_path: Path | None = None) -> bool:
    return _update("payment_sources", source_id, _pick(updates, SOURCE_FIELDS), db_path)


def delete_payment_source(source_id: int, db_path: Path | None = None) -> bool:
    return _delete("payment_sources", source_id, db_path)


def count_source_references(source_id: int, db_path: Path | None = None) -> int:
    """Count everything that points at a payment source.

    Month items count whether they are paid from the source or pay it off, so
    deleting a source never rewrites a month's snapshot.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT
                (SELECT COUNT(*) FROM recurring WHERE payment_source_id = ?)
                + (SELECT COUNT(*) FROM savings_goals WHERE linked_account_id = ?)
                + (SELECT COUNT(*) FROM instances WHERE payment_source_id = ? OR payoff_source_id = ?)
                + (SELECT COUNT(*) FROM insurance_claims WHERE payment_source_id = ?)
            """,
            (source_id, source_id, source_id, source_id, source_id),
        )
        return int(cursor.fetchone()[0])


# Categories


def create_category(data: dict[str, Any], db_path: Path | None = None) -> int:
    """Insert a category at the end of its type's ordering.

    Returns:
        The new category's id.

    Raises:
        sqlite3.Error: If database operation fails (including duplicate names).
    """
    values = _pick(data, CATEGORY_FIELDS)
    values["is_predefined"] = 1 if data.get("is_predefined") else 0
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            if "sort_order" not in values:
                cursor.execute("SELECT COALESCE(MAX(sort_order), -1) FROM categories WHERE type = ?", (values["type"],))
                values["sort_order"] = cursor.fetchone()[0] + 1
            new_id = _insert(cursor, "categories", values)
            conn.commit()
            return new_id
        except sqlite3.Error:
            conn.rollback()
            raise


def get_category(category_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    return _get("categories", category_id, db_path)


def find_category(name: str, category_type: str, db_path: Path | None = None) -> dict[str, Any] | None:
    """Look up a category by name (case-insensitive) within a type."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT * FROM categories WHERE name = ? COLLATE NOCASE AND type = ?",
            (name, category_type),
        )
        row = cursor.fetchone()
        return _to_dict(row) if row else None


def list_categories(category_type: str | None = None, db_path: Path | None = None) -> list[dict[str, Any]]:
    """Get categories in display order.

    Args:
        category_type: Restrict to one type. If None, returns all types.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        if category_type is None:
            cursor.execute("SELECT * FROM categories ORDER BY type, sort_order, name")
        else:
            cursor.execute("SELECT * FROM categories WHERE type = ? ORDER BY sort_order, name", (category_type,))
        return [_to_dict(row) for row in cursor.fetchall()]


def update_category(category_id: int, updates: dict[str, Any], db_path: Path | None = None) -> bool:
    return _update("categories", category_id, _pick(updates, CATEGORY_FIELDS), db_path)


def delete_category(category_id: int, db_path: Path | None = None) -> bool:
    return _delete("categories", category_id, db_path)


def reorder_categories(category_type: str, ordered_ids: list[int], db_path: Path | None = None) -> int:
    """Set sort_order for a type's categories from a list of ids.

    Each id gets its index in the list. Ids belonging to another type are
    left alone.

    Returns:
        Number of categories updated.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            updated = 0
            for index, category_id in enumerate(ordered_ids):
                cursor.execute(
                    "UPDATE categories SET sort_order = ?, updated_at = datetime('now') WHERE id = ? AND type = ?",
                    (index, category_id, category_type),
                )
                updated += cursor.rowcount
            conn.commit()
            return updated
        except sqlite3.Error:
            conn.rollback()
            raise


# Bills and incomes share the recurring table, split by kind


def create_recurring(kind: str, data: dict[str, Any], db_path: Path | None = None) -> int:
    """Insert a bill or income.

    Args:
        kind: "bill" or "income".
        data: Validated field values.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The new row's id.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    values = _pick(data, RECURRING_FIELDS)
    values["kind"] = kind
    return _create("recurring", values, db_path)


def get_recurring(kind: str, item_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    item = _get("recurring", item_id, db_path)
    if item is None or item["kind"] != kind:
        return None
    return item


def list_recurring(
    kind: str, db_path: Path | None = None, active_only: bool = False, goal_id: int | None = None
) -> list[dict[str, Any]]:
    """Get bills or incomes ordered by name.

    Args:
        kind: "bill" or "income".
        db_path: Path to the database file. If None, uses default location.
        active_only: Skip deactivated items.
        goal_id: Restrict to items linked to one savings goal.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = "SELECT * FROM recurring WHERE kind = ?"
        params: list[Any] = [kind]
        if active_only:
            query += " AND is_active = 1"
        if goal_id is not None:
            query += " AND goal_id = ?"
            params.append(goal_id)
        cursor.execute(query + " ORDER BY name COLLATE NOCASE", params)
        return [_to_dict(row) for row in cursor.fetchall()]


def update_recurring(item_id: int, updates: dict[str, Any], db_path: Path | None = None) -> bool:
    return _update("recurring", item_id, _pick(updates, RECURRING_FIELDS), db_path)


def set_goal_bills_active(goal_id: int, active: bool, db_path: Path | None = None) -> int:
    """Activate or deactivate every bill linked to a savings goal.

    Returns:
        Number of bills changed.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "UPDATE recurring SET is_active = ?, updated_at = datetime('now') WHERE goal_id = ? AND kind = 'bill'",
                (1 if active else 0, goal_id),
            )
            conn.commit()
            return cursor.rowcount
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_recurring(item_id: int, db_path: Path | None = None) -> bool:
    return _delete("recurring", item_id, db_path)
