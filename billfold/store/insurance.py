"""Database query functions for family members, insurance plans and claims."""

import sqlite3
from pathlib import Path
from typing import Any

from billfold.domain.models import Money
from billfold.store.queries import _connect, _create, _delete, _get, _insert, _pick, _to_dict, _update

PLAN_FIELDS = ("name", "provider_name", "policy_number", "portal_url", "notes", "is_active")
MEMBER_FIELDS = ("name", "is_active")
INSURANCE_CATEGORY_FIELDS = ("name", "icon", "sort_order", "is_active")
CLAIM_FIELDS = (
    "family_member_id",
    "category_id",
    "description",
    "provider_name",
    "service_date",
    "total_amount",
    "status",
    "notes",
    "expected_cost",
    "expected_reimbursement",
    "payment_source_id",
)
SUBMISSION_FIELDS = (
    "plan_id",
    "plan_name",
    "status",
    "amount_claimed",
    "amount_reimbursed",
    "date_submitted",
    "date_resolved",
    "notes",
)


# Insurance plans


def create_plan(data: dict[str, Any], db_path: Path | None = None) -> int:
    return _create("insurance_plans", _pick(data, PLAN_FIELDS), db_path)


def get_plan(plan_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    return _get("insurance_plans", plan_id, db_path)


def list_plans(db_path: Path | None = None) -> list[dict[str, Any]]:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM insurance_plans ORDER BY name COLLATE NOCASE")
        return [_to_dict(row) for row in cursor.fetchall()]


def update_plan(plan_id: int, updates: dict[str, Any], db_path: Path | None = None) -> bool:
    return _update("insurance_plans", plan_id, _pick(updates, PLAN_FIELDS), db_path)


def delete_plan(plan_id: int, db_path: Path | None = None) -> bool:
    return _delete("insurance_plans", plan_id, db_path)


def count_plan_members(plan_id: int, db_path: Path | None = None) -> int:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM member_plans WHERE plan_id = ?", (plan_id,))
        return int(cursor.fetchone()[0])


# Family members


def _member_plans(cursor: sqlite3.Cursor, member_id: int) -> list[dict[str, Any]]:
    cursor.execute(
        """
        SELECT p.* FROM member_plans mp JOIN insurance_plans p ON p.id = mp.plan_id
        WHERE mp.member_id = ? ORDER BY mp.position
        """,
        (member_id,),
    )
    return [_to_dict(row) for row in cursor.fetchall()]


def create_member(data: dict[str, Any], plan_ids: list[int], db_path: Path | None = None) -> int:
    """Insert a family member with an ordered list of plans (primary first).

    Raises:
        sqlite3.IntegrityError: If the name is taken or a plan does not exist.
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            member_id = _insert(cursor, "family_members", _pick(data, MEMBER_FIELDS))
            for position, plan_id in enumerate(plan_ids):
                _insert(cursor, "member_plans", {"member_id": member_id, "plan_id": plan_id, "position": position})
            conn.commit()
            return member_id
        except sqlite3.Error:
            conn.rollback()
            raise


def get_member(member_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a family member with ``plans`` in priority order."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM family_members WHERE id = ?", (member_id,))
        row = cursor.fetchone()
        if row is None:
            return None
        member = _to_dict(row)
        member["plans"] = _member_plans(cursor, member_id)
        return member


def find_member_by_name(name: str, db_path: Path | None = None) -> dict[str, Any] | None:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM family_members WHERE name = ? COLLATE NOCASE", (name.strip(),))
        row = cursor.fetchone()
        return _to_dict(row) if row else None


def list_members(db_path: Path | None = None) -> list[dict[str, Any]]:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM family_members ORDER BY name COLLATE NOCASE")
        members = [_to_dict(row) for row in cursor.fetchall()]
        for member in members:
            member["plans"] = _member_plans(cursor, member["id"])
        return members


def update_member(
    member_id: int, updates: dict[str, Any], plan_ids: list[int] | None = None, db_path: Path | None = None
) -> bool:
    """Update a family member, optionally replacing their plan list.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("SELECT 1 FROM family_members WHERE id = ?", (member_id,))
            if cursor.fetchone() is None:
                return False
            values = _pick(updates, MEMBER_FIELDS)
            if values:
                assignments = ", ".join(f"{column} = ?" for column in values)
                cursor.execute(
                    f"UPDATE family_members SET {assignments}, updated_at = datetime('now') WHERE id = ?",
                    [*values.values(), member_id],
                )
            if plan_ids is not None:
                cursor.execute("DELETE FROM member_plans WHERE member_id = ?", (member_id,))
                for position, plan_id in enumerate(plan_ids):
                    _insert(cursor, "member_plans", {"member_id": member_id, "plan_id": plan_id, "position": position})
            conn.commit()
            return True
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_member(member_id: int, db_path: Path | None = None) -> bool:
    return _delete("family_members", member_id, db_path)


def count_member_claims(member_id: int, db_path: Path | None = None) -> int:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM insurance_claims WHERE family_member_id = ?", (member_id,))
        return int(cursor.fetchone()[0])


# Insurance categories


def create_insurance_category(data: dict[str, Any], db_path: Path | None = None) -> int:
    return _create("insurance_categories", _pick(data, INSURANCE_CATEGORY_FIELDS), db_path)


def get_insurance_category(category_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    return _get("insurance_categories", category_id, db_path)


def list_insurance_categories(db_path: Path | None = None) -> list[dict[str, Any]]:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM insurance_categories ORDER BY sort_order, name")
        return [_to_dict(row) for row in cursor.fetchall()]


def update_insurance_category(category_id: int, updates: dict[str, Any], db_path: Path | None = None) -> bool:
    return _update("insurance_categories", category_id, _pick(updates, INSURANCE_CATEGORY_FIELDS), db_path)


def delete_insurance_category(category_id: int, db_path: Path | None = None) -> bool:
    return _delete("insurance_categories", category_id, db_path)


def count_category_claims(category_id: int, db_path: Path | None = None) -> int:
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM insurance_claims WHERE category_id = ?", (category_id,))
        return int(cursor.fetchone()[0])


# Claims and submissions


def _load_submissions(cursor: sqlite3.Cursor, claim_id: int) -> list[dict[str, Any]]:
    cursor.execute("SELECT * FROM claim_submissions WHERE claim_id = ? ORDER BY position", (claim_id,))
    return [dict(row) for row in cursor.fetchall()]


def _write_submissions(cursor: sqlite3.Cursor, claim_id: int, submissions: list[dict[str, Any]]) -> None:
    cursor.execute("DELETE FROM claim_submissions WHERE claim_id = ?", (claim_id,))
    for position, submission in enumerate(submissions):
        values = _pick(submission, SUBMISSION_FIELDS)
        values.update({"claim_id": claim_id, "position": position})
        _insert(cursor, "claim_submissions", values)


def _next_claim_number(cursor: sqlite3.Cursor) -> int:
    cursor.execute("SELECT COALESCE(MAX(claim_number), 0) + 1 FROM insurance_claims")
    return int(cursor.fetchone()[0])


def create_claim(data: dict[str, Any], submissions: list[dict[str, Any]], db_path: Path | None = None) -> int:
    """Insert a claim and its submissions, numbering it after the highest claim.

    Expected expenses (status ``expected``) are stored without a number
    until they are converted.

    Returns:
        The new claim id.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            values = _pick(data, CLAIM_FIELDS)
            if values.get("status") != "expected":
                values["claim_number"] = _next_claim_number(cursor)
            claim_id = _insert(cursor, "insurance_claims", values)
            _write_submissions(cursor, claim_id, submissions)
            conn.commit()
            return claim_id
        except sqlite3.Error:
            conn.rollback()
            raise


def convert_expected(
    claim_id: int, total_amount: Money, submissions: list[dict[str, Any]], status: str, db_path: Path | None = None
) -> int:
    """Turn an expected expense into a numbered claim with submissions.

    Returns:
        The claim number assigned.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            claim_number = _next_claim_number(cursor)
            cursor.execute(
                """
                UPDATE insurance_claims
                SET claim_number = ?, total_amount = ?, status = ?,
                    converted_at = datetime('now'), updated_at = datetime('now')
                WHERE id = ?
                """,
                (claim_number, total_amount, status, claim_id),
            )
            _write_submissions(cursor, claim_id, submissions)
            conn.commit()
            return claim_number
        except sqlite3.Error:
            conn.rollback()
            raise


def get_claim(claim_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a claim with ``submissions`` in plan order."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM insurance_claims WHERE id = ?", (claim_id,))
        row = cursor.fetchone()
        if row is None:
            return None
        claim = dict(row)
        claim["submissions"] = _load_submissions(cursor, claim_id)
        return claim


def list_claims(
    db_path: Path | None = None,
    status: str | None = None,
    family_member_id: int | None = None,
    month: str | None = None,
) -> list[dict[str, Any]]:
    """Get claims newest first, each with its submissions.

    Expected expenses have no number yet and come last, by appointment date.
    ``month`` restricts to claims whose service date falls in that YYYY-MM month.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    query = "SELECT * FROM insurance_claims WHERE 1 = 1"
    params: list[Any] = []
    if status is not None:
        query += " AND status = ?"
        params.append(status)
    if family_member_id is not None:
        query += " AND family_member_id = ?"
        params.append(family_member_id)
    if month is not None:
        query += " AND substr(service_date, 1, 7) = ?"
        params.append(month)
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(query + " ORDER BY claim_number IS NULL, claim_number DESC, service_date", params)
        claims = [dict(row) for row in cursor.fetchall()]
        for claim in claims:
            claim["submissions"] = _load_submissions(cursor, claim["id"])
        return claims


def update_claim(claim_id: int, updates: dict[str, Any], db_path: Path | None = None) -> bool:
    return _update("insurance_claims", claim_id, _pick(updates, CLAIM_FIELDS), db_path)


def save_submissions(
    claim_id: int, submissions: list[dict[str, Any]], status: str, db_path: Path | None = None
) -> None:
    """Replace a claim's submissions and store its recalculated status.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            _write_submissions(cursor, claim_id, submissions)
            cursor.execute(
                "UPDATE insurance_claims SET status = ?, updated_at = datetime('now') WHERE id = ?",
                (status, claim_id),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_claim(claim_id: int, db_path: Path | None = None) -> bool:
    return _delete("insurance_claims", claim_id, db_path)
