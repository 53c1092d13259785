"""Whole-database export and import for JSON backups.

Rows keep their ids so references between records survive a round trip.
"""

import json
import sqlite3
from pathlib import Path
from typing import Any

from billfold.store.queries import _connect, _insert, _to_dict

# Insert order respects foreign keys; deletes run in reverse
TABLE_ORDER = (
    "payment_sources",
    "categories",
    "savings_goals",
    "recurring",
    "todos",
    "insurance_plans",
    "family_members",
    "member_plans",
    "insurance_categories",
    "insurance_claims",
    "claim_submissions",
    "months",
    "instances",
    "occurrences",
    "payments",
    "todo_instances",
)


def _rows(cursor: sqlite3.Cursor, query: str, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
    cursor.execute(query, params)
    return [_to_dict(row) for row in cursor.fetchall()]


def export_data(db_path: Path | None = None) -> dict[str, Any]:
    """Read every record into a nested, JSON-serialisable dict.

    Months carry their instances (with occurrences and payments) and todo
    instances. Family members carry their plan ids and claims carry their
    submissions.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        data: dict[str, Any] = {
            "payment_sources": _rows(cursor, "SELECT * FROM payment_sources ORDER BY id"),
            "categories": _rows(cursor, "SELECT * FROM categories ORDER BY id"),
            "bills": _rows(cursor, "SELECT * FROM recurring WHERE kind = 'bill' ORDER BY id"),
            "incomes": _rows(cursor, "SELECT * FROM recurring WHERE kind = 'income' ORDER BY id"),
            "savings_goals": _rows(cursor, "SELECT * FROM savings_goals ORDER BY id"),
            "todos": _rows(cursor, "SELECT * FROM todos ORDER BY id"),
            "insurance_plans": _rows(cursor, "SELECT * FROM insurance_plans ORDER BY id"),
            "insurance_categories": _rows(cursor, "SELECT * FROM insurance_categories ORDER BY id"),
        }

        members = _rows(cursor, "SELECT * FROM family_members ORDER BY id")
        for member in members:
            cursor.execute("SELECT plan_id FROM member_plans WHERE member_id = ? ORDER BY position", (member["id"],))
            member["plan_ids"] = [row[0] for row in cursor.fetchall()]
        data["family_members"] = members

        claims = _rows(cursor, "SELECT * FROM insurance_claims ORDER BY id")
        for claim in claims:
            claim["submissions"] = _rows(
                cursor, "SELECT * FROM claim_submissions WHERE claim_id = ? ORDER BY position", (claim["id"],)
            )
        data["insurance_claims"] = claims

        months = _rows(cursor, "SELECT * FROM months ORDER BY month")
        for month in months:
            month["bank_balances"] = json.loads(month["bank_balances"] or "{}")
            instances = _rows(cursor, "SELECT * FROM instances WHERE month = ? ORDER BY id", (month["month"],))
            for instance in instances:
                occurrences = _rows(
                    cursor, "SELECT * FROM occurrences WHERE instance_id = ? ORDER BY sequence", (instance["id"],)
                )
                for occurrence in occurrences:
                    occurrence["payments"] = _rows(
                        cursor, "SELECT * FROM payments WHERE occurrence_id = ? ORDER BY id", (occurrence["id"],)
                    )
                instance["occurrences"] = occurrences
            month["instances"] = instances
            month["todo_instances"] = _rows(
                cursor, "SELECT * FROM todo_instances WHERE month = ? ORDER BY id", (month["month"],)
            )
        data["months"] = months

        return data


def _columns(cursor: sqlite3.Cursor, table: str) -> set[str]:
    cursor.execute(f"PRAGMA table_info({table})")
    return {row[1] for row in cursor.fetchall()}


def _restore_rows(
    cursor: sqlite3.Cursor, table: str, rows: list[dict[str, Any]], columns: dict[str, set[str]], **extra: Any
) -> None:
    for row in rows:
        values = {k: v for k, v in {**row, **extra}.items() if k in columns[table]}
        _insert(cursor, table, values)


def import_data(data: dict[str, Any], db_path: Path | None = None) -> dict[str, int]:
    """Replace every record with the contents of a backup, in one transaction.

    Unknown keys in the backup are ignored, so backups from newer or older
    versions load as far as the current schema allows.

    Returns:
        Count of top-level records restored per section.

    Raises:
        sqlite3.Error: If database operation fails. Nothing is changed.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            columns = {table: _columns(cursor, table) for table in TABLE_ORDER}
            for table in reversed(TABLE_ORDER):
                cursor.execute(f"DELETE FROM {table}")

            _restore_rows(cursor, "payment_sources", data.get("payment_sources", []), columns)
            _restore_rows(cursor, "categories", data.get("categories", []), columns)
            _restore_rows(cursor, "savings_goals", data.get("savings_goals", []), columns)
            _restore_rows(cursor, "recurring", data.get("bills", []), columns, kind="bill")
            _restore_rows(cursor, "recurring", data.get("incomes", []), columns, kind="income")
            _restore_rows(cursor, "todos", data.get("todos", []), columns)
            _restore_rows(cursor, "insurance_plans", data.get("insurance_plans", []), columns)
            _restore_rows(cursor, "insurance_categories", data.get("insurance_categories", []), columns)

            for member in data.get("family_members", []):
                _restore_rows(cursor, "family_members", [member], columns)
                for position, plan_id in enumerate(member.get("plan_ids", [])):
                    link = {"member_id": member["id"], "plan_id": plan_id, "position": position}
                    _insert(cursor, "member_plans", link)

            for claim in data.get("insurance_claims", []):
                _restore_rows(cursor, "insurance_claims", [claim], columns)
                _restore_rows(cursor, "claim_submissions", claim.get("submissions", []), columns, claim_id=claim["id"])

            for month in data.get("months", []):
                balances = json.dumps(month.get("bank_balances") or {})
                _restore_rows(cursor, "months", [month], columns, bank_balances=balances)
                for instance in month.get("instances", []):
                    _restore_rows(cursor, "instances", [instance], columns, month=month["month"])
                    for occurrence in instance.get("occurrences", []):
                        _restore_rows(cursor, "occurrences", [occurrence], columns, instance_id=instance["id"])
                        _restore_rows(
                            cursor, "payments", occurrence.get("payments", []), columns, occurrence_id=occurrence["id"]
                        )
                _restore_rows(cursor, "todo_instances", month.get("todo_instances", []), columns, month=month["month"])

            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    return {
        "payment_sources": len(data.get("payment_sources", [])),
        "categories": len(data.get("categories", [])),
        "bills": len(data.get("bills", [])),
        "incomes": len(data.get("incomes", [])),
        "savings_goals": len(data.get("savings_goals", [])),
        "todos": len(data.get("todos", [])),
        "family_members": len(data.get("family_members", [])),
        "insurance_claims": len(data.get("insurance_claims", [])),
        "months": len(data.get("months", [])),
    }
