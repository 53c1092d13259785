"""Insurance operations: plans, family members, claim categories and claims."""

import sqlite3
from datetime import date
from pathlib import Path
from typing import Any

import structlog

from billfold.domain.insurance import ClaimsSummary, cascade_submissions, claim_status, claims_summary, plan_submissions
from billfold.domain.models import SUBMISSION_STATUSES, Money
from billfold.domain.validation import (
    validate_amount,
    validate_claim,
    validate_expected_expense,
    validate_family_member,
    validate_insurance_category,
    validate_insurance_plan,
)
from billfold.errors import ConflictError, ValidationError, ensure_found, ensure_valid
from billfold.services.sources import get_source
from billfold.store import insurance as store

log = structlog.get_logger(__name__)


# Plans


def get_plan(plan_id: int, db_path: Path | None = None) -> dict[str, Any]:
    return ensure_found(store.get_plan(plan_id, db_path), "Insurance plan", plan_id)


def list_plans(db_path: Path | None = None) -> list[dict[str, Any]]:
    return store.list_plans(db_path)


def create_plan(data: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    ensure_valid(validate_insurance_plan(data))
    plan_id = store.create_plan({**data, "name": data["name"].strip()}, db_path)
    log.info("insurance_plan.created", plan_id=plan_id)
    return get_plan(plan_id, db_path)


def update_plan(plan_id: int, updates: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    ensure_valid(validate_insurance_plan({**get_plan(plan_id, db_path), **updates}))
    store.update_plan(plan_id, updates, db_path)
    return get_plan(plan_id, db_path)


def delete_plan(plan_id: int, db_path: Path | None = None) -> None:
    plan = get_plan(plan_id, db_path)
    members = store.count_plan_members(plan_id, db_path)
    if members:
        raise ConflictError(f"Plan '{plan['name']}' is assigned to {members} family member(s)")
    store.delete_plan(plan_id, db_path)
    log.info("insurance_plan.deleted", plan_id=plan_id)


# Family members


def _check_plan_ids(plan_ids: list[int], db_path: Path | None) -> None:
    if len(set(plan_ids)) != len(plan_ids):
        raise ValidationError(["A plan can only be listed once per family member"])
    for plan_id in plan_ids:
        get_plan(plan_id, db_path)


def _check_unique_name(name: str, member_id: int | None, db_path: Path | None) -> None:
    clash = store.find_member_by_name(name, db_path)
    if clash and clash["id"] != member_id:
        raise ConflictError(f"A family member named '{name.strip()}' already exists")


def get_member(member_id: int, db_path: Path | None = None) -> dict[str, Any]:
    return ensure_found(store.get_member(member_id, db_path), "Family member", member_id)


def list_members(db_path: Path | None = None) -> list[dict[str, Any]]:
    return store.list_members(db_path)


def create_member(name: str, plan_ids: list[int] | None = None, db_path: Path | None = None) -> dict[str, Any]:
    """Add a family member covered by ``plan_ids`` (primary plan first).

    Raises:
        ValidationError: If the name is blank or too long.
        ConflictError: If another member has the same name.
        NotFoundError: If a plan does not exist.
    """
    plan_ids = plan_ids or []
    ensure_valid(validate_family_member({"name": name}))
    _check_unique_name(name, None, db_path)
    _check_plan_ids(plan_ids, db_path)
    member_id = store.create_member({"name": name.strip()}, plan_ids, db_path)
    log.info("family_member.created", member_id=member_id, plans=len(plan_ids))
    return get_member(member_id, db_path)


def update_member(
    member_id: int, updates: dict[str, Any], plan_ids: list[int] | None = None, db_path: Path | None = None
) -> dict[str, Any]:
    merged = {**get_member(member_id, db_path), **updates}
    ensure_valid(validate_family_member(merged))
    if "name" in updates:
        _check_unique_name(updates["name"], member_id, db_path)
        updates = {**updates, "name": updates["name"].strip()}
    if plan_ids is not None:
        _check_plan_ids(plan_ids, db_path)
    store.update_member(member_id, updates, plan_ids, db_path)
    return get_member(member_id, db_path)


def delete_member(member_id: int, db_path: Path | None = None) -> None:
    member = get_member(member_id, db_path)
    claims = store.count_member_claims(member_id, db_path)
    if claims:
        raise ConflictError(f"'{member['name']}' has {claims} claim(s). Delete the claims first.")
    store.delete_member(member_id, db_path)
    log.info("family_member.deleted", member_id=member_id)


# Claim categories


def get_insurance_category(category_id: int, db_path: Path | None = None) -> dict[str, Any]:
    return ensure_found(store.get_insurance_category(category_id, db_path), "Insurance category", category_id)


def list_insurance_categories(db_path: Path | None = None) -> list[dict[str, Any]]:
    return store.list_insurance_categories(db_path)


def create_insurance_category(data: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    ensure_valid(validate_insurance_category(data))
    try:
        category_id = store.create_insurance_category({**data, "name": data["name"].strip()}, db_path)
    except sqlite3.IntegrityError as e:
        raise ConflictError(f"An insurance category named '{data['name'].strip()}' already exists") from e
    return get_insurance_category(category_id, db_path)


def update_insurance_category(category_id: int, updates: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    existing = get_insurance_category(category_id, db_path)
    if existing["is_predefined"] and "name" in updates and updates["name"] != existing["name"]:
        raise ConflictError("Cannot modify the name of a predefined category")
    ensure_valid(validate_insurance_category({**existing, **updates}))
    store.update_insurance_category(category_id, updates, db_path)
    return get_insurance_category(category_id, db_path)


def delete_insurance_category(category_id: int, db_path: Path | None = None) -> None:
    existing = get_insurance_category(category_id, db_path)
    if existing["is_predefined"]:
        raise ConflictError("Cannot delete a predefined category")
    if store.count_category_claims(category_id, db_path):
        raise ConflictError(f"Category '{existing['name']}' is used by existing claims")
    store.delete_insurance_category(category_id, db_path)


# Claims


def get_claim(claim_id: int, db_path: Path | None = None) -> dict[str, Any]:
    return ensure_found(store.get_claim(claim_id, db_path), "Insurance claim", claim_id)


def list_claims(
    db_path: Path | None = None, status: str | None = None, family_member_id: int | None = None
) -> list[dict[str, Any]]:
    """Claims newest first. Expected expenses are left out unless asked for by status."""
    claims = store.list_claims(db_path, status=status, family_member_id=family_member_id)
    if status is None:
        claims = [c for c in claims if c["status"] != "expected"]
    return claims


def create_claim(data: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Open a claim and queue a submission for each of the member's plans.

    Raises:
        ValidationError: If the claim is invalid.
        NotFoundError: If the member or category does not exist.
    """
    ensure_valid(validate_claim(data))
    member = get_member(data["family_member_id"], db_path)
    get_insurance_category(data["category_id"], db_path)

    submissions = plan_submissions(member["plans"], data["total_amount"])
    claim_id = store.create_claim({**data, "status": claim_status(submissions)}, submissions, db_path)
    log.info("claim.created", claim_id=claim_id, submissions=len(submissions))
    return get_claim(claim_id, db_path)


def update_claim(claim_id: int, updates: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Edit claim details. A new total flows into a submission not yet sent."""
    claim = get_claim(claim_id, db_path)
    _ensure_claim_editable(claim)
    merged = {**claim, **updates}
    ensure_valid(validate_claim(merged))
    if updates.get("family_member_id", claim["family_member_id"]) != claim["family_member_id"]:
        raise ValidationError(["A claim cannot be moved to another family member"])
    get_insurance_category(merged["category_id"], db_path)
    store.update_claim(claim_id, {k: v for k, v in updates.items() if k != "status"}, db_path)

    submissions = claim["submissions"]
    if "total_amount" in updates and submissions and submissions[0]["status"] == "draft":
        submissions = [{**submissions[0], "amount_claimed": updates["total_amount"]}, *submissions[1:]]
        store.save_submissions(claim_id, submissions, claim_status(submissions), db_path)
    return get_claim(claim_id, db_path)


def update_submission(
    claim_id: int, position: int, updates: dict[str, Any], db_path: Path | None = None
) -> dict[str, Any]:
    """Change one submission of a claim (by 1-based position).

    Sending a submission stamps ``date_submitted``. Approving or denying it
    stamps ``date_resolved`` and activates the next plan's submission for
    the amount still unpaid. The claim status is then recalculated.

    Raises:
        ValidationError: If the position, status or amounts are invalid.
    """
    claim = get_claim(claim_id, db_path)
    _ensure_claim_editable(claim)
    submissions = [dict(s) for s in claim["submissions"]]
    if not 1 <= position <= len(submissions):
        raise ValidationError([f"Submission must be between 1 and {len(submissions)}"])

    errors = []
    status = updates.get("status")
    if status is not None and status not in SUBMISSION_STATUSES:
        errors.append("Invalid submission status")
    for field in ("amount_claimed", "amount_reimbursed"):
        if updates.get(field) is not None:
            errors += validate_amount(updates[field], minimum=0, label=field.replace("_", " ").capitalize())
    ensure_valid(errors)

    index = position - 1
    submission = {**submissions[index], **updates}
    today = date.today().isoformat()
    if status == "pending" and not submission.get("date_submitted"):
        submission["date_submitted"] = today
    if status in ("approved", "denied"):
        submission["date_resolved"] = submission.get("date_resolved") or today
        if submission.get("amount_reimbursed") is None:
            submission["amount_reimbursed"] = submission["amount_claimed"] if status == "approved" else Money(0)
    submissions[index] = submission

    submissions = cascade_submissions(submissions, index, claim["total_amount"])
    new_status = claim_status(submissions)
    store.save_submissions(claim_id, submissions, new_status, db_path)
    log.info("claim.submission_updated", claim_id=claim_id, position=position, claim_status=new_status)
    return get_claim(claim_id, db_path)


def delete_claim(claim_id: int, db_path: Path | None = None) -> None:
    get_claim(claim_id, db_path)
    store.delete_claim(claim_id, db_path)
    log.info("claim.deleted", claim_id=claim_id)


def get_claims_summary(db_path: Path | None = None) -> ClaimsSummary:
    return claims_summary(store.list_claims(db_path))


# Expected expenses


EXPECTED_FIELDS = (
    "family_member_id",
    "category_id",
    "description",
    "provider_name",
    "service_date",
    "expected_cost",
    "expected_reimbursement",
    "payment_source_id",
    "notes",
)


def _ensure_claim_editable(claim: dict[str, Any]) -> None:
    if claim["status"] == "expected":
        raise ConflictError(f"Claim {claim['id']} is an expected expense. Convert it first.")


def _get_expected(claim_id: int, db_path: Path | None) -> dict[str, Any]:
    claim = get_claim(claim_id, db_path)
    if claim["status"] != "expected":
        raise ConflictError(f"Claim #{claim['claim_number']} is not an expected expense")
    return claim


def _check_expected_refs(data: dict[str, Any], db_path: Path | None) -> None:
    get_member(data["family_member_id"], db_path)
    get_insurance_category(data["category_id"], db_path)
    get_source(data["payment_source_id"], db_path)


def list_expected_expenses(month: str | None = None, db_path: Path | None = None) -> list[dict[str, Any]]:
    """Expected expenses, by appointment date, optionally only those in ``month``."""
    return store.list_claims(db_path, status="expected", month=month)


def create_expected_expense(data: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Record an upcoming appointment before there is a bill to claim.

    The expense has no claim number and no submissions until it is
    converted. Its total is the expected cost.

    Raises:
        ValidationError: If the expense is invalid.
        NotFoundError: If the member, category or payment source does not exist.
    """
    ensure_valid(validate_expected_expense(data))
    _check_expected_refs(data, db_path)
    values = {field: data.get(field) for field in EXPECTED_FIELDS}
    values.update({"status": "expected", "total_amount": data["expected_cost"]})
    claim_id = store.create_claim(values, [], db_path)
    log.info("expected_expense.created", claim_id=claim_id, service_date=data["service_date"])
    return get_claim(claim_id, db_path)


def update_expected_expense(claim_id: int, updates: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Edit an expected expense. Only possible until it is converted."""
    claim = _get_expected(claim_id, db_path)
    updates = {k: v for k, v in updates.items() if k in EXPECTED_FIELDS}
    merged = {**claim, **updates}
    ensure_valid(validate_expected_expense(merged))
    _check_expected_refs(merged, db_path)
    if "expected_cost" in updates:
        updates["total_amount"] = updates["expected_cost"]
    store.update_claim(claim_id, updates, db_path)
    return get_claim(claim_id, db_path)


def cancel_expected_expense(claim_id: int, db_path: Path | None = None) -> None:
    """Drop an appointment that did not happen."""
    _get_expected(claim_id, db_path)
    store.delete_claim(claim_id, db_path)
    log.info("expected_expense.cancelled", claim_id=claim_id)


def convert_expected_expense(claim_id: int, actual_cost: Money, db_path: Path | None = None) -> dict[str, Any]:
    """Turn an expected expense into a claim for what the visit actually cost.

    The claim gets the next claim number and a draft submission for each of
    the member's plans, as a new claim would.

    Raises:
        ValidationError: If the actual cost is negative.
        ConflictError: If the claim is not an expected expense.
    """
    ensure_valid(validate_amount(actual_cost, minimum=0, label="Actual cost"))
    claim = _get_expected(claim_id, db_path)
    member = get_member(claim["family_member_id"], db_path)
    submissions = plan_submissions(member["plans"], actual_cost)
    claim_number = store.convert_expected(claim_id, actual_cost, submissions, claim_status(submissions), db_path)
    log.info("expected_expense.converted", claim_id=claim_id, claim_number=claim_number)
    return get_claim(claim_id, db_path)
