"""Database query functions for month snapshots.

A snapshot is a ``months`` row plus its bill/income instances, their
occurrences and the payments recorded against those occurrences.
"""

import json
import sqlite3
from pathlib import Path
from typing import Any

from billfold.domain.models import Money, Month
from billfold.store.queries import _connect, _insert, _pick, _to_dict, _update

INSTANCE_FIELDS = (
    "month",
    "kind",
    "source_id",
    "name",
    "category_id",
    "payment_source_id",
    "goal_id",
    "billing_period",
    "is_adhoc",
    "is_extra",
    "payoff_source_id",
    "expected_amount",
)
OCCURRENCE_FIELDS = ("sequence", "expected_date", "expected_amount", "is_closed", "closed_date", "is_adhoc")


def _month_dict(row: sqlite3.Row) -> dict[str, Any]:
    record = _to_dict(row)
    record["bank_balances"] = {int(k): v for k, v in json.loads(record["bank_balances"] or "{}").items()}
    return record


def _insert_instance(cursor: sqlite3.Cursor, instance: dict[str, Any]) -> int:
    instance_id = _insert(cursor, "instances", _pick(instance, INSTANCE_FIELDS))
    for occurrence in instance.get("occurrences", []):
        values = _pick(occurrence, OCCURRENCE_FIELDS)
        values["instance_id"] = instance_id
        occurrence_id = _insert(cursor, "occurrences", values)
        for payment in occurrence.get("payments", []):
            _insert(
                cursor,
                "payments",
                {"occurrence_id": occurrence_id, "amount": payment["amount"], "date": payment["date"]},
            )
    return instance_id


def get_month(month: Month, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a month row with bank_balances decoded to {source_id: cents}."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM months WHERE month = ?", (month,))
        row = cursor.fetchone()
        return _month_dict(row) if row else None


def list_months(db_path: Path | None = None) -> list[dict[str, Any]]:
    """Get all month rows, newest first."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM months ORDER BY month DESC")
        return [_month_dict(row) for row in cursor.fetchall()]


def insert_month(
    month: Month,
    instances: list[dict[str, Any]],
    todo_instances: list[dict[str, Any]],
    db_path: Path | None = None,
) -> None:
    """Create a month snapshot with its instances in one transaction.

    Raises:
        sqlite3.IntegrityError: If the month already exists.
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("INSERT INTO months (month) VALUES (?)", (month,))
            for instance in instances:
                _insert_instance(cursor, {**instance, "month": month})
            for todo_instance in todo_instances:
                _insert(
                    cursor,
                    "todo_instances",
                    {
                        "month": month,
                        "todo_id": todo_instance["todo_id"],
                        "title": todo_instance["title"],
                        "due_date": todo_instance["due_date"],
                        "status": todo_instance.get("status", "pending"),
                    },
                )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_month(month: Month, db_path: Path | None = None) -> bool:
    """Delete a month and everything in it (instances cascade)."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM months WHERE month = ?", (month,))
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise


def set_read_only(month: Month, read_only: bool, db_path: Path | None = None) -> bool:
    return _update("months", month, {"is_read_only": 1 if read_only else 0}, db_path, key="month")


def set_bank_balances(month: Month, balances: dict[int, Money], db_path: Path | None = None) -> bool:
    encoded = json.dumps({str(k): v for k, v in sorted(balances.items())})
    return _update("months", month, {"bank_balances": encoded}, db_path, key="month")


def _load_occurrences(cursor: sqlite3.Cursor, instance_ids: list[int]) -> dict[int, list[dict[str, Any]]]:
    if not instance_ids:
        return {}
    marks = ", ".join("?" for _ in instance_ids)
    cursor.execute(
        f"SELECT * FROM occurrences WHERE instance_id IN ({marks}) ORDER BY instance_id, sequence",
        instance_ids,
    )
    occurrences = [_to_dict(row) for row in cursor.fetchall()]

    payments: dict[int, list[dict[str, Any]]] = {}
    if occurrences:
        occ_marks = ", ".join("?" for _ in occurrences)
        cursor.execute(
            f"SELECT * FROM payments WHERE occurrence_id IN ({occ_marks}) ORDER BY date, id",
            [o["id"] for o in occurrences],
        )
        for row in cursor.fetchall():
            payments.setdefault(row["occurrence_id"], []).append(dict(row))

    grouped: dict[int, list[dict[str, Any]]] = {}
    for occurrence in occurrences:
        occurrence["payments"] = payments.get(occurrence["id"], [])
        grouped.setdefault(occurrence["instance_id"], []).append(occurrence)
    return grouped


def load_instances(month: Month, kind: str | None = None, db_path: Path | None = None) -> list[dict[str, Any]]:
    """Get a month's instances with occurrences and payments nested.

    Args:
        month: Month in YYYY-MM format.
        kind: "bill" or "income". If None, returns both.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = "SELECT * FROM instances WHERE month = ?"
        params: list[Any] = [month]
        if kind is not None:
            query += " AND kind = ?"
            params.append(kind)
        cursor.execute(query + " ORDER BY kind, name COLLATE NOCASE, id", params)
        instances = [_to_dict(row) for row in cursor.fetchall()]
        occurrences = _load_occurrences(cursor, [i["id"] for i in instances])
        for instance in instances:
            instance["occurrences"] = occurrences.get(instance["id"], [])
        return instances


def get_instance(instance_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM instances WHERE id = ?", (instance_id,))
        row = cursor.fetchone()
        if row is None:
            return None
        instance = _to_dict(row)
        instance["occurrences"] = _load_occurrences(cursor, [instance_id]).get(instance_id, [])
        return instance


def get_occurrence(occurrence_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get an occurrence with its payments and the month it belongs to."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT o.*, i.month AS month, i.name AS name, i.kind AS kind
            FROM occurrences o JOIN instances i ON i.id = o.instance_id
            WHERE o.id = ?
            """,
            (occurrence_id,),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        occurrence = _to_dict(row)
        cursor.execute("SELECT * FROM payments WHERE occurrence_id = ? ORDER BY date, id", (occurrence_id,))
        occurrence["payments"] = [dict(r) for r in cursor.fetchall()]
        return occurrence


def insert_instance(instance: dict[str, Any], db_path: Path | None = None) -> int:
    """Insert one instance with its occurrences and payments.

    Returns:
        The new instance id.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            instance_id = _insert_instance(cursor, instance)
            conn.commit()
            return instance_id
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_instance(instance_id: int, db_path: Path | None = None) -> bool:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM instances WHERE id = ?", (instance_id,))
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise


def snapshot_source_ids(month: Month, db_path: Path | None = None) -> set[tuple[str, int]]:
    """(kind, source_id) pairs already present in a month."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT kind, source_id FROM instances WHERE month = ? AND source_id IS NOT NULL", (month,))
        return {(row["kind"], row["source_id"]) for row in cursor.fetchall()}


def add_payment(occurrence_id: int, amount: Money, date: str, db_path: Path | None = None) -> int:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            payment_id = _insert(cursor, "payments", {"occurrence_id": occurrence_id, "amount": amount, "date": date})
            conn.commit()
            return payment_id
        except sqlite3.Error:
            conn.rollback()
            raise


def set_occurrence_closed(
    occurrence_id: int, closed: bool, closed_date: str | None = None, db_path: Path | None = None
) -> bool:
    updates = {"is_closed": 1 if closed else 0, "closed_date": closed_date if closed else None}
    return _update("occurrences", occurrence_id, updates, db_path, touch=False)


def find_payoff_instance(month: Month, source_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get the balance payoff bill for a pay-off-monthly account, if any."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id FROM instances WHERE month = ? AND payoff_source_id = ?", (month, source_id))
        row = cursor.fetchone()
    return get_instance(row["id"], db_path) if row else None


def set_single_occurrence_amount(instance_id: int, amount: Money, db_path: Path | None = None) -> None:
    """Set the expected amount of a one-occurrence instance and its occurrence.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("UPDATE instances SET expected_amount = ? WHERE id = ?", (amount, instance_id))
            cursor.execute("UPDATE occurrences SET expected_amount = ? WHERE instance_id = ?", (amount, instance_id))
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def split_occurrence(
    occurrence_id: int,
    paid_amount: Money,
    top_up: Money,
    closed_date: str,
    remainder_date: str,
    db_path: Path | None = None,
) -> int:
    """Close an occurrence at ``paid_amount`` and move the rest to a new one.

    ``top_up`` is recorded as a payment on the closed occurrence so its
    payments add up to ``paid_amount``. The new occurrence is ad hoc and
    comes after the instance's last one.

    Returns:
        The new occurrence id.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("SELECT instance_id, expected_amount FROM occurrences WHERE id = ?", (occurrence_id,))
            row = cursor.fetchone()
            cursor.execute(
                "UPDATE occurrences SET expected_amount = ?, is_closed = 1, closed_date = ? WHERE id = ?",
                (paid_amount, closed_date, occurrence_id),
            )
            if top_up > 0:
                _insert(cursor, "payments", {"occurrence_id": occurrence_id, "amount": top_up, "date": closed_date})
            cursor.execute(
                "SELECT COALESCE(MAX(sequence), 0) + 1 FROM occurrences WHERE instance_id = ?", (row["instance_id"],)
            )
            sequence = cursor.fetchone()[0]
            new_id = _insert(
                cursor,
                "occurrences",
                {
                    "instance_id": row["instance_id"],
                    "sequence": sequence,
                    "expected_date": remainder_date,
                    "expected_amount": row["expected_amount"] - paid_amount,
                    "is_adhoc": 1,
                },
            )
            conn.commit()
            return new_id
        except sqlite3.Error:
            conn.rollback()
            raise
