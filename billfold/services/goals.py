"""Savings goal operations.

A goal can carry a contribution schedule. The schedule is stored as an
ordinary bill linked to the goal, so scheduled contributions land in month
snapshots like any other bill. One-off contributions are recorded as paid
ad-hoc bills in the month they were made.
"""

from datetime import date
from pathlib import Path
from typing import Any

import structlog

from billfold.dates import is_valid_iso_date, month_of, parse_iso_date
from billfold.domain.models import GOAL_CADENCES, SAVINGS_GOALS_CATEGORY, Money
from billfold.domain.savings import (
    CLOSED_STATUSES,
    PaymentSchedule,
    build_schedule,
    build_schedule_from_amount,
    cadence_billing_period,
    expected_saved_amount,
    goal_temperature,
    progress_percentage,
    transition_updates,
)
from billfold.domain.validation import validate_goal, validate_recurring
from billfold.errors import ConflictError, ValidationError, ensure_found, ensure_valid
from billfold.services.categories import ensure_category
from billfold.services.months import add_adhoc_item, ensure_unlocked
from billfold.store import goals as goal_store
from billfold.store import queries

log = structlog.get_logger(__name__)

# Bills follow the goal: paused or finished goals stop scheduling contributions
ACTION_BILLS_ACTIVE = {
    "pause": False,
    "resume": True,
    "complete": False,
    "abandon": False,
}


def get_goal(goal_id: int, db_path: Path | None = None) -> dict[str, Any]:
    return ensure_found(goal_store.get_goal(goal_id, db_path), "Savings goal", goal_id)


def plan_schedule(
    remaining: Money,
    cadence: str,
    start: date,
    target_date: date | None = None,
    amount: Money | None = None,
) -> PaymentSchedule:
    """Build a contribution schedule from a target date or a fixed amount.

    Raises:
        ValidationError: If the cadence is unknown or neither a target date
            nor a positive amount is given.
    """
    if cadence not in GOAL_CADENCES:
        raise ValidationError(["Cadence must be: weekly, biweekly, or monthly"])
    if amount is not None:
        if amount <= 0:
            raise ValidationError(["Payment amount must be greater than 0"])
        return build_schedule_from_amount(remaining, start, amount, cadence)
    if target_date is None:
        raise ValidationError(["A target date or a payment amount is needed to schedule contributions"])
    return build_schedule(remaining, start, target_date, cadence)


def _schedule_bill(goal: dict[str, Any], schedule: PaymentSchedule, start: date) -> dict[str, Any]:
    bill = {
        "name": f"Savings: {goal['name'].strip()}"[:100],
        "amount": schedule.amount,
        "billing_period": cadence_billing_period(schedule.cadence),
        "start_date": start.isoformat(),
        "payment_source_id": goal["linked_account_id"],
    }
    if schedule.cadence == "monthly":
        bill["day_of_month"] = start.day
    return bill


def create_goal(
    data: dict[str, Any],
    cadence: str | None = None,
    start: date | None = None,
    payment_amount: Money | None = None,
    db_path: Path | None = None,
) -> dict[str, Any]:
    """Create a savings goal, optionally with a scheduled contribution bill.

    Args:
        data: Goal fields (name, target_amount, target_date, linked_account_id, notes).
        cadence: Contribution cadence. If None, no schedule is created.
        start: First contribution date. Defaults to today.
        payment_amount: Fixed contribution instead of one derived from the target date.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        ValidationError: If the goal or its schedule is invalid. Nothing is written.
        NotFoundError: If the linked account does not exist.
    """
    data = {**data, "status": data.get("status", "saving")}
    ensure_valid(validate_goal(data))
    ensure_found(
        queries.get_payment_source(data["linked_account_id"], db_path), "Payment source", data["linked_account_id"]
    )

    bill = None
    if cadence is not None:
        start = start or date.today()
        schedule = plan_schedule(
            data["target_amount"],
            cadence,
            start,
            target_date=parse_iso_date(data.get("target_date")),
            amount=payment_amount,
        )
        bill = _schedule_bill(data, schedule, start)
        ensure_valid(validate_recurring(bill))

    if bill is not None:
        category = ensure_category(SAVINGS_GOALS_CATEGORY, "bill", predefined=True, db_path=db_path)
        bill["category_id"] = category["id"]

    goal_id = goal_store.create_goal({**data, "name": data["name"].strip()}, db_path, schedule_bill=bill)
    log.info("goal.created", goal_id=goal_id, target_amount=data["target_amount"], scheduled=bill is not None)

    return get_goal(goal_id, db_path)


def update_goal(goal_id: int, updates: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Edit a goal's details. Status changes go through ``apply_action``."""
    existing = get_goal(goal_id, db_path)
    if "status" in updates and updates["status"] != existing["status"]:
        raise ValidationError(["Use pause, resume, complete, abandon, archive or unarchive to change status"])
    merged = {**existing, **updates}
    ensure_valid(validate_goal(merged))
    ensure_found(
        queries.get_payment_source(merged["linked_account_id"], db_path), "Payment source", merged["linked_account_id"]
    )
    goal_store.update_goal(goal_id, updates, db_path)
    return get_goal(goal_id, db_path)


def apply_action(
    goal_id: int, action: str, restore_to: str | None = None, db_path: Path | None = None
) -> dict[str, Any]:
    """Move a goal through its lifecycle (pause, resume, complete, abandon, archive, unarchive).

    Raises:
        ConflictError: If the action is not allowed from the goal's current status.
    """
    goal = get_goal(goal_id, db_path)
    try:
        updates = transition_updates(goal, action, date.today().isoformat(), restore_to)
    except ValueError as e:
        raise ConflictError(str(e)) from e
    goal_store.update_goal(goal_id, updates, db_path)
    if action in ACTION_BILLS_ACTIVE:
        changed = queries.set_goal_bills_active(goal_id, ACTION_BILLS_ACTIVE[action], db_path)
        log.debug("goal.bills_toggled", goal_id=goal_id, active=ACTION_BILLS_ACTIVE[action], bills=changed)
    log.info("goal.transitioned", goal_id=goal_id, action=action, status=updates["status"])
    return get_goal(goal_id, db_path)


def delete_goal(goal_id: int, db_path: Path | None = None) -> None:
    """Delete a goal. Its schedule bills are deactivated and kept for history."""
    get_goal(goal_id, db_path)
    queries.set_goal_bills_active(goal_id, False, db_path)
    goal_store.delete_goal(goal_id, db_path)
    log.info("goal.deleted", goal_id=goal_id)


def contribute(goal_id: int, amount: Money, on_date: str, db_path: Path | None = None) -> dict[str, Any]:
    """Record a one-off contribution toward a goal.

    The contribution becomes a paid ad-hoc bill in the month of ``on_date``,
    drawn from the goal's linked account.

    Raises:
        ValidationError: If the amount or date is invalid.
        ConflictError: If the goal is closed.
        NotFoundError: If the month has not been created.
        ReadOnlyError: If the month is locked.
    """
    goal = get_goal(goal_id, db_path)
    errors = []
    if amount <= 0:
        errors.append("Contribution amount must be greater than 0")
    if not is_valid_iso_date(on_date):
        errors.append("Contribution date must be in YYYY-MM-DD format")
    if errors:
        raise ValidationError(errors)
    if goal["status"] in CLOSED_STATUSES:
        raise ConflictError(f"Cannot contribute to a goal with status '{goal['status']}'")

    ensure_unlocked(month_of(on_date), db_path)
    category = ensure_category(SAVINGS_GOALS_CATEGORY, "bill", predefined=True, db_path=db_path)
    instance = add_adhoc_item(
        month_of(on_date),
        "bill",
        {
            "name": f"{goal['name']} contribution",
            "amount": amount,
            "date": on_date,
            "category_id": category["id"],
            "payment_source_id": goal["linked_account_id"],
            "goal_id": goal_id,
        },
        paid=True,
        db_path=db_path,
    )
    log.info("goal.contribution_recorded", goal_id=goal_id, amount=amount, month=instance["month"])
    return instance


def goal_progress(goal: dict[str, Any], as_of: date | None = None, db_path: Path | None = None) -> dict[str, Any]:
    """Saved amount, percentage, expected amount and temperature for a goal."""
    as_of = as_of or date.today()
    saved = goal_store.get_saved_amount(goal["id"], db_path)
    return {
        "saved_amount": saved,
        "progress": progress_percentage(saved, goal["target_amount"]),
        "expected_amount": expected_saved_amount(goal, as_of),
        "temperature": goal_temperature(goal, saved, as_of),
        "schedule_bills": queries.list_recurring("bill", db_path, goal_id=goal["id"]),
    }


def list_goals(
    include_archived: bool = False, as_of: date | None = None, db_path: Path | None = None
) -> list[dict[str, Any]]:
    return [{**g, **goal_progress(g, as_of, db_path)} for g in goal_store.list_goals(db_path, include_archived)]
