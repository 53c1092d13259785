"""Payment source operations."""

from pathlib import Path
from typing import Any

import structlog

from billfold.domain.validation import validate_payment_source
from billfold.errors import ConflictError, ensure_found, ensure_valid
from billfold.store import queries

log = structlog.get_logger(__name__)


def _apply_implied_flags(data: dict[str, Any]) -> dict[str, Any]:
    """Investment type implies is_investment. Savings, investments and paid-off cards stay out of leftover."""
    data = dict(data)
    if data.get("type") == "investment":
        data["is_investment"] = True
    if data.get("is_savings") or data.get("is_investment") or data.get("pay_off_monthly"):
        data["exclude_from_leftover"] = True
    return data


def create_source(data: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    data = _apply_implied_flags(data)
    ensure_valid(validate_payment_source(data))
    source_id = queries.create_payment_source(data, db_path)
    log.info("payment_source.created", source_id=source_id, type=data["type"])
    return ensure_found(queries.get_payment_source(source_id, db_path), "Payment source", source_id)


def get_source(source_id: int, db_path: Path | None = None) -> dict[str, Any]:
    return ensure_found(queries.get_payment_source(source_id, db_path), "Payment source", source_id)


def list_sources(db_path: Path | None = None, active_only: bool = False) -> list[dict[str, Any]]:
    return queries.list_payment_sources(db_path, active_only=active_only)


def update_source(source_id: int, updates: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Apply changes to a payment source, validating the merged result."""
    existing = get_source(source_id, db_path)
    merged = _apply_implied_flags({**existing, **updates})
    ensure_valid(validate_payment_source(merged))
    queries.update_payment_source(source_id, merged, db_path)
    log.info("payment_source.updated", source_id=source_id, fields=sorted(updates))
    return get_source(source_id, db_path)


def delete_source(source_id: int, db_path: Path | None = None) -> None:
    """Delete a payment source nothing refers to.

    Raises:
        NotFoundError: If the source does not exist.
        ConflictError: If bills, incomes, savings goals, month items or expected expenses still use it.
    """
    source = get_source(source_id, db_path)
    references = queries.count_source_references(source_id, db_path)
    if references:
        raise ConflictError(
            f"Payment source '{source['name']}' is used by {references} "
            "bill(s), income(s), goal(s), month item(s) or expected expense(s). Reassign or deactivate it instead."
        )
    queries.delete_payment_source(source_id, db_path)
    log.info("payment_source.deleted", source_id=source_id)
