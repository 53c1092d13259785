"""Month snapshot operations.

Creating a month copies every active bill and income into it, so later
edits to a bill do not rewrite history. A locked (read-only) month refuses
every change until it is unlocked.
"""

from datetime import date
from pathlib import Path
from typing import Any

import structlog

from billfold.dates import days_in_month, first_day, is_valid_iso_date, is_valid_month, month_of, next_month
from billfold.domain.models import DEBT_ACCOUNT_TYPES, Money, Month
from billfold.domain.months import (
    LeftoverBreakdown,
    all_closed,
    build_instance,
    compute_leftover,
    group_by_category,
    instance_remaining,
    instance_totals,
    is_current_or_next,
    occurrence_paid,
    section_tally,
)
from billfold.domain.todos import missing_instances
from billfold.errors import ConflictError, NotFoundError, ReadOnlyError, ValidationError, ensure_found
from billfold.services.categories import ensure_category
from billfold.store import insurance as insurance_store
from billfold.store import months as month_store
from billfold.store import queries, todos

log = structlog.get_logger(__name__)

PAYOFF_CATEGORY = "Credit Card Payoffs"


def _validate_month(month: str) -> Month:
    if not is_valid_month(month):
        raise ValidationError(["Month must be in YYYY-MM format"])
    return Month(month)


def get_month_record(month: str, db_path: Path | None = None) -> dict[str, Any]:
    month = _validate_month(month)
    record = month_store.get_month(month, db_path)
    if record is None:
        raise NotFoundError("Month", month)
    return record


def ensure_unlocked(month: str, db_path: Path | None = None, action: str = "make changes") -> dict[str, Any]:
    """Get a month row, refusing if the month is read-only.

    Raises:
        NotFoundError: If the month has not been created.
        ReadOnlyError: If the month is locked.
    """
    record = get_month_record(month, db_path)
    if record["is_read_only"]:
        raise ReadOnlyError(record["month"], action)
    return record


def _decorate(instance: dict[str, Any]) -> dict[str, Any]:
    expected, paid = instance_totals(instance["occurrences"])
    instance["expected_amount"] = expected
    instance["paid_amount"] = paid
    instance["remaining"] = instance_remaining(instance)
    instance["is_closed"] = all_closed(instance["occurrences"])
    return instance


def _generate_instances(month: Month, db_path: Path | None, skip: set[tuple[str, int]]) -> list[dict[str, Any]]:
    instances = []
    for kind in ("bill", "income"):
        for item in queries.list_recurring(kind, db_path, active_only=True):
            if (kind, item["id"]) not in skip:
                instances.append(build_instance(item, month, kind))
    return instances


def _generate_todo_instances(month: Month, db_path: Path | None) -> list[dict[str, Any]]:
    existing = {(t["todo_id"], t["due_date"]) for t in todos.list_todo_instances(month, db_path)}
    generated = []
    for todo in todos.list_todos(db_path, active_only=True):
        generated.extend(missing_instances(todo, month, existing))
    return generated


def create_month(month: str, today: date | None = None, db_path: Path | None = None) -> dict[str, Any]:
    """Create a snapshot for a month from the active bills, incomes and todos.

    Args:
        month: Month in YYYY-MM format.
        today: Reference date for the current/next month check.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        ValidationError: If the month string is malformed.
        ConflictError: If the month already exists.
    """
    month = _validate_month(month)
    today = today or date.today()
    if month_store.get_month(month, db_path) is not None:
        raise ConflictError(f"Month {month} already exists")
    if not is_current_or_next(month, today):
        log.warning("month.outside_current_window", month=month, current=month_of(today))

    instances = _generate_instances(month, db_path, skip=set())
    todo_instances = _generate_todo_instances(month, db_path)
    month_store.insert_month(month, instances, todo_instances, db_path)
    log.info("month.created", month=month, instances=len(instances), todos=len(todo_instances))
    return month_detail(month, db_path)


def sync_month(month: str, db_path: Path | None = None) -> dict[str, int]:
    """Add bills, incomes and todos created since the month was snapshotted.

    Returns:
        Counts of added instances and todo instances.
    """
    record = ensure_unlocked(month, db_path)
    month = record["month"]
    existing = month_store.snapshot_source_ids(month, db_path)
    added = 0
    for instance in _generate_instances(month, db_path, skip=existing):
        month_store.insert_instance({**instance, "month": month}, db_path)
        added += 1
    todo_instances = _generate_todo_instances(month, db_path)
    todos.insert_todo_instances([{**t, "month": month} for t in todo_instances], db_path)
    log.info("month.synced", month=month, instances=added, todos=len(todo_instances))
    return {"instances": added, "todos": len(todo_instances)}


def delete_month(month: str, db_path: Path | None = None) -> None:
    """Delete a month snapshot and everything recorded in it.

    Raises:
        NotFoundError: If the month does not exist.
        ReadOnlyError: If the month is locked.
    """
    record = ensure_unlocked(month, db_path, action="delete it")
    month_store.delete_month(record["month"], db_path)
    log.info("month.deleted", month=record["month"])


def set_locked(month: str, locked: bool, db_path: Path | None = None) -> dict[str, Any]:
    record = get_month_record(month, db_path)
    month_store.set_read_only(record["month"], locked, db_path)
    log.info("month.locked" if locked else "month.unlocked", month=record["month"])
    return get_month_record(month, db_path)


def lock_month(month: str, db_path: Path | None = None) -> dict[str, Any]:
    return set_locked(month, True, db_path)


def unlock_month(month: str, db_path: Path | None = None) -> dict[str, Any]:
    return set_locked(month, False, db_path)


def _summary(record: dict[str, Any], db_path: Path | None) -> dict[str, Any]:
    instances = month_store.load_instances(record["month"], db_path=db_path)
    bills = section_tally([i for i in instances if i["kind"] == "bill"])
    incomes = section_tally([i for i in instances if i["kind"] == "income"])
    return {
        "month": record["month"],
        "exists": True,
        "is_read_only": record["is_read_only"],
        "bill_expected": bills.expected,
        "bill_paid": bills.actual,
        "income_expected": incomes.expected,
        "income_received": incomes.actual,
        "created_at": record["created_at"],
    }


def list_months(today: date | None = None, db_path: Path | None = None) -> list[dict[str, Any]]:
    """Summaries of every month, newest first.

    The current and next month always appear. If they have not been created
    yet they show up as placeholders with ``exists`` False.
    """
    today = today or date.today()
    summaries = {r["month"]: _summary(r, db_path) for r in month_store.list_months(db_path)}
    current = month_of(today)
    for month in (current, next_month(current)):
        summaries.setdefault(month, {"month": month, "exists": False, "is_read_only": False})
    return sorted(summaries.values(), key=lambda s: s["month"], reverse=True)


def month_leftover(month: str, db_path: Path | None = None) -> LeftoverBreakdown:
    record = get_month_record(month, db_path)
    instances = month_store.load_instances(record["month"], db_path=db_path)
    return compute_leftover(
        record["bank_balances"],
        queries.list_payment_sources(db_path),
        [i for i in instances if i["kind"] == "bill"],
        [i for i in instances if i["kind"] == "income"],
    )


def month_detail(month: str, db_path: Path | None = None) -> dict[str, Any]:
    """Everything needed to show a month.

    Sections by category, tallies, leftover, todos and the expected insurance
    expenses with appointments in the month. Expected expenses are shown for
    planning only and do not change the leftover.
    """
    record = get_month_record(month, db_path)
    instances = [_decorate(i) for i in month_store.load_instances(record["month"], db_path=db_path)]
    bills = [i for i in instances if i["kind"] == "bill"]
    incomes = [i for i in instances if i["kind"] == "income"]
    return {
        **record,
        "bills": group_by_category(bills, queries.list_categories("bill", db_path)),
        "incomes": group_by_category(incomes, queries.list_categories("income", db_path)),
        "bill_tally": section_tally(bills),
        "income_tally": section_tally(incomes),
        "leftover": month_leftover(record["month"], db_path),
        "todos": todos.list_todo_instances(record["month"], db_path),
        "expected_expenses": insurance_store.list_claims(db_path, status="expected", month=record["month"]),
    }


def set_bank_balance(month: str, source_id: int, amount: Money, db_path: Path | None = None) -> dict[int, Money]:
    """Record an account balance for a month.

    For credit cards set to pay off monthly, the balance also becomes a
    payoff bill in the month so the leftover accounts for paying it.

    Returns:
        All balances recorded for the month.
    """
    record = ensure_unlocked(month, db_path)
    source = ensure_found(queries.get_payment_source(source_id, db_path), "Payment source", source_id)
    balances = dict(record["bank_balances"])
    balances[source_id] = amount
    month_store.set_bank_balances(record["month"], balances, db_path)
    if source["pay_off_monthly"] and source["type"] in DEBT_ACCOUNT_TYPES:
        _sync_payoff_bill(record["month"], source, Money(abs(amount)), db_path)
    log.info("month.balance_set", month=record["month"], source_id=source_id)
    return balances


def _sync_payoff_bill(month: Month, source: dict[str, Any], amount: Money, db_path: Path | None) -> None:
    existing = month_store.find_payoff_instance(month, source["id"], db_path)
    if existing is not None:
        month_store.set_single_occurrence_amount(existing["id"], amount, db_path)
        return
    if amount <= 0:
        return
    category = ensure_category(PAYOFF_CATEGORY, "bill", predefined=True, db_path=db_path)
    month_store.insert_instance(
        {
            "month": month,
            "kind": "bill",
            "name": f"{source['name']} Payoff",
            "category_id": category["id"],
            "payment_source_id": source["id"],
            "payoff_source_id": source["id"],
            "billing_period": "monthly",
            "expected_amount": amount,
            "occurrences": [{"sequence": 1, "expected_date": f"{month}-01", "expected_amount": amount}],
        },
        db_path,
    )


def get_occurrence(occurrence_id: int, db_path: Path | None = None) -> dict[str, Any]:
    return ensure_found(month_store.get_occurrence(occurrence_id, db_path), "Occurrence", occurrence_id)


def _occurrence_in_unlocked_month(occurrence_id: int, db_path: Path | None) -> dict[str, Any]:
    occurrence = get_occurrence(occurrence_id, db_path)
    ensure_unlocked(occurrence["month"], db_path)
    return occurrence


def record_payment(
    occurrence_id: int, amount: Money, paid_on: str | None = None, close: bool = False, db_path: Path | None = None
) -> dict[str, Any]:
    """Record a payment (or receipt, for incomes) against an occurrence.

    Args:
        occurrence_id: Occurrence being paid.
        amount: Amount in cents, greater than 0.
        paid_on: Payment date (YYYY-MM-DD). Defaults to the occurrence date.
        close: Also close the occurrence.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The updated instance.
    """
    occurrence = _occurrence_in_unlocked_month(occurrence_id, db_path)
    errors = []
    if amount <= 0:
        errors.append("Payment amount must be greater than 0")
    if paid_on is not None and not is_valid_iso_date(paid_on):
        errors.append("Payment date must be in YYYY-MM-DD format")
    if errors:
        raise ValidationError(errors)

    paid_on = paid_on or occurrence["expected_date"]
    month_store.add_payment(occurrence_id, amount, paid_on, db_path)
    if close:
        month_store.set_occurrence_closed(occurrence_id, True, paid_on, db_path)
    log.info("payment.recorded", occurrence_id=occurrence_id, amount=amount, month=occurrence["month"])
    return get_instance(occurrence["instance_id"], db_path)


def close_occurrence(occurrence_id: int, closed_on: str | None = None, db_path: Path | None = None) -> dict[str, Any]:
    occurrence = _occurrence_in_unlocked_month(occurrence_id, db_path)
    month_store.set_occurrence_closed(occurrence_id, True, closed_on or date.today().isoformat(), db_path)
    return get_instance(occurrence["instance_id"], db_path)


def reopen_occurrence(occurrence_id: int, db_path: Path | None = None) -> dict[str, Any]:
    occurrence = _occurrence_in_unlocked_month(occurrence_id, db_path)
    month_store.set_occurrence_closed(occurrence_id, False, None, db_path)
    return get_instance(occurrence["instance_id"], db_path)


def split_occurrence(
    occurrence_id: int, paid_amount: Money, closed_on: str | None = None, db_path: Path | None = None
) -> dict[str, Any]:
    """Settle part of an occurrence now and leave the rest for later in the month.

    The occurrence is closed at ``paid_amount`` (payments are topped up to
    match) and the remainder becomes a new ad hoc occurrence due on the
    last day of the month.

    Raises:
        ValidationError: If the occurrence is closed, or the amount is not
            more than what is already paid and less than what is expected.
        ReadOnlyError: If the month is locked.
    """
    occurrence = _occurrence_in_unlocked_month(occurrence_id, db_path)
    already_paid = occurrence_paid(occurrence)
    errors = []
    if occurrence["is_closed"]:
        errors.append("Cannot split a closed occurrence. Reopen it first.")
    if not 0 < paid_amount < occurrence["expected_amount"]:
        errors.append("Paid amount must be greater than 0 and less than the expected amount")
    elif paid_amount < already_paid:
        errors.append("Paid amount cannot be less than what is already paid")
    if closed_on is not None and not is_valid_iso_date(closed_on):
        errors.append("Closed date must be in YYYY-MM-DD format")
    if errors:
        raise ValidationError(errors)

    first = first_day(occurrence["month"])
    remainder_date = first.replace(day=days_in_month(first.year, first.month)).isoformat()
    new_id = month_store.split_occurrence(
        occurrence_id,
        paid_amount,
        Money(paid_amount - already_paid),
        closed_on or date.today().isoformat(),
        remainder_date,
        db_path,
    )
    log.info("occurrence.split", occurrence_id=occurrence_id, new_occurrence_id=new_id, month=occurrence["month"])
    return get_instance(occurrence["instance_id"], db_path)


def get_instance(instance_id: int, db_path: Path | None = None) -> dict[str, Any]:
    return _decorate(ensure_found(month_store.get_instance(instance_id, db_path), "Instance", instance_id))


def add_adhoc_item(
    month: str,
    kind: str,
    data: dict[str, Any],
    paid: bool = False,
    db_path: Path | None = None,
) -> dict[str, Any]:
    """Add a one-off bill or income to a month.

    Args:
        month: Month in YYYY-MM format.
        kind: "bill" or "income".
        data: name, amount, date, and optionally category_id,
            payment_source_id and goal_id.
        paid: Record the full amount as paid and close the item.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The new instance.
    """
    record = ensure_unlocked(month, db_path)
    errors = []
    if kind not in ("bill", "income"):
        errors.append("Kind must be bill or income")
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("Name is required")
    amount = data.get("amount")
    if not isinstance(amount, int) or amount <= 0:
        errors.append("Amount must be a positive number in cents")
    item_date = data.get("date")
    if not is_valid_iso_date(item_date) or month_of(item_date) != record["month"]:
        errors.append(f"Date must be a YYYY-MM-DD date in {record['month']}")
    if errors:
        raise ValidationError(errors)

    occurrence: dict[str, Any] = {"sequence": 1, "expected_date": item_date, "expected_amount": amount}
    if paid:
        occurrence["is_closed"] = True
        occurrence["closed_date"] = item_date
        occurrence["payments"] = [{"amount": amount, "date": item_date}]
    instance_id = month_store.insert_instance(
        {
            "month": record["month"],
            "kind": kind,
            "name": name.strip(),
            "category_id": data.get("category_id"),
            "payment_source_id": data.get("payment_source_id"),
            "goal_id": data.get("goal_id"),
            "is_adhoc": True,
            "expected_amount": amount,
            "occurrences": [occurrence],
        },
        db_path,
    )
    log.info("month.adhoc_added", month=record["month"], kind=kind, instance_id=instance_id)
    return get_instance(instance_id, db_path)


def remove_adhoc_item(instance_id: int, db_path: Path | None = None) -> None:
    """Delete an ad-hoc item. Scheduled items can only be closed, not removed."""
    instance = get_instance(instance_id, db_path)
    ensure_unlocked(instance["month"], db_path)
    if not instance["is_adhoc"]:
        raise ConflictError("Only ad-hoc items can be removed from a month")
    month_store.delete_instance(instance_id, db_path)
    log.info("month.adhoc_removed", month=instance["month"], instance_id=instance_id)


def set_todo_instance_status(instance_id: int, completed: bool, db_path: Path | None = None) -> dict[str, Any]:
    """Complete or reopen a month's todo."""
    instance = ensure_found(todos.get_todo_instance(instance_id, db_path), "Todo instance", instance_id)
    ensure_unlocked(instance["month"], db_path)
    if completed:
        updates = {"status": "completed", "completed_at": date.today().isoformat()}
    else:
        updates = {"status": "pending", "completed_at": None}
    todos.update_todo_instance(instance_id, updates, db_path)
    return ensure_found(todos.get_todo_instance(instance_id, db_path), "Todo instance", instance_id)
