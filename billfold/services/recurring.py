"""Bill and income operations.

Bills and incomes share one shape and one set of rules; ``kind`` says
which is meant ("bill" or "income").
"""

from pathlib import Path
from typing import Any

import structlog

from billfold.domain.recurrence import monthly_average
from billfold.domain.validation import validate_recurring
from billfold.errors import ValidationError, ensure_found, ensure_valid
from billfold.store import queries

log = structlog.get_logger(__name__)

KINDS = ("bill", "income")


def _label(kind: str) -> str:
    if kind not in KINDS:
        raise ValueError(f"Unknown kind: {kind}")
    return kind.capitalize()


def _check_references(kind: str, data: dict[str, Any], db_path: Path | None) -> None:
    source_id = data.get("payment_source_id")
    ensure_found(queries.get_payment_source(source_id, db_path), "Payment source", source_id)
    category_id = data.get("category_id")
    if category_id is not None:
        category = ensure_found(queries.get_category(category_id, db_path), "Category", category_id)
        if category["type"] != kind:
            raise ValidationError([f"Category '{category['name']}' is not a {kind} category"])


def get_recurring(kind: str, item_id: int, db_path: Path | None = None) -> dict[str, Any]:
    return ensure_found(queries.get_recurring(kind, item_id, db_path), _label(kind), item_id)


def create_recurring(kind: str, data: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Create a bill or income.

    Raises:
        ValidationError: If the data breaks a rule. Nothing is written.
        NotFoundError: If the payment source or category does not exist.
    """
    _label(kind)
    ensure_valid(validate_recurring(data))
    _check_references(kind, data, db_path)
    item_id = queries.create_recurring(kind, {**data, "name": data["name"].strip()}, db_path)
    log.info(f"{kind}.created", item_id=item_id, billing_period=data["billing_period"])
    return get_recurring(kind, item_id, db_path)


def update_recurring(kind: str, item_id: int, updates: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Change a bill or income, validating the merged result.

    Switching a monthly item between day-of-month and Nth-weekday mode
    clears the fields of the mode not chosen.
    """
    existing = get_recurring(kind, item_id, db_path)
    updates = dict(updates)
    if updates.get("day_of_month") is not None:
        updates.setdefault("recurrence_week", None)
        updates.setdefault("recurrence_day", None)
    elif updates.get("recurrence_week") is not None:
        updates.setdefault("day_of_month", None)
    merged = {**existing, **updates}
    ensure_valid(validate_recurring(merged))
    _check_references(kind, merged, db_path)
    queries.update_recurring(item_id, updates, db_path)
    log.info(f"{kind}.updated", item_id=item_id, fields=sorted(updates))
    return get_recurring(kind, item_id, db_path)


def set_active(kind: str, item_id: int, active: bool, db_path: Path | None = None) -> dict[str, Any]:
    get_recurring(kind, item_id, db_path)
    queries.update_recurring(item_id, {"is_active": active}, db_path)
    return get_recurring(kind, item_id, db_path)


def delete_recurring(kind: str, item_id: int, db_path: Path | None = None) -> None:
    """Delete a bill or income. Month snapshots keep their copies."""
    get_recurring(kind, item_id, db_path)
    queries.delete_recurring(item_id, db_path)
    log.info(f"{kind}.deleted", item_id=item_id)


def list_recurring(kind: str, db_path: Path | None = None, active_only: bool = False) -> list[dict[str, Any]]:
    """Bills or incomes, each with its ``monthly_average`` in cents."""
    _label(kind)
    items = queries.list_recurring(kind, db_path, active_only=active_only)
    for item in items:
        item["monthly_average"] = monthly_average(item["amount"], item["billing_period"])
    return items
