"""Category operations, including drag-free reordering by id list."""

from pathlib import Path
from typing import Any

import structlog

from billfold.domain.models import CATEGORY_TYPES
from billfold.domain.validation import validate_category
from billfold.errors import ConflictError, ValidationError, ensure_found, ensure_valid
from billfold.store import queries

log = structlog.get_logger(__name__)


def get_category(category_id: int, db_path: Path | None = None) -> dict[str, Any]:
    return ensure_found(queries.get_category(category_id, db_path), "Category", category_id)


def list_categories(category_type: str | None = None, db_path: Path | None = None) -> list[dict[str, Any]]:
    return queries.list_categories(category_type, db_path)


def create_category(data: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    """Create a category at the end of its type's order.

    Raises:
        ValidationError: If the name, type or color is invalid.
        ConflictError: If the type already has a category with that name.
    """
    ensure_valid(validate_category(data))
    if queries.find_category(data["name"].strip(), data["type"], db_path):
        raise ConflictError(f"A {data['type']} category named '{data['name'].strip()}' already exists")
    category_id = queries.create_category({**data, "name": data["name"].strip()}, db_path)
    log.info("category.created", category_id=category_id, type=data["type"])
    return get_category(category_id, db_path)


def ensure_category(
    name: str, category_type: str, color: str | None = None, predefined: bool = False, db_path: Path | None = None
) -> dict[str, Any]:
    """Return the category with this name and type, creating it if needed."""
    existing = queries.find_category(name, category_type, db_path)
    if existing:
        return existing
    category_id = queries.create_category(
        {"name": name, "type": category_type, "color": color, "is_predefined": predefined}, db_path
    )
    log.info("category.seeded", category_id=category_id, name=name)
    return get_category(category_id, db_path)


def update_category(category_id: int, updates: dict[str, Any], db_path: Path | None = None) -> dict[str, Any]:
    existing = get_category(category_id, db_path)
    if "type" in updates and updates["type"] != existing["type"]:
        raise ValidationError(["Category type cannot be changed"])
    merged = {**existing, **updates}
    ensure_valid(validate_category(merged))
    clash = queries.find_category(merged["name"].strip(), merged["type"], db_path)
    if clash and clash["id"] != category_id:
        raise ConflictError(f"A {merged['type']} category named '{merged['name'].strip()}' already exists")
    queries.update_category(category_id, updates, db_path)
    return get_category(category_id, db_path)


def delete_category(category_id: int, db_path: Path | None = None) -> None:
    """Delete a user-created category. Bills in it become uncategorized.

    Raises:
        NotFoundError: If the category does not exist.
        ConflictError: If the category is predefined.
    """
    category = get_category(category_id, db_path)
    if category["is_predefined"]:
        raise ConflictError(f"Cannot delete predefined category '{category['name']}'")
    queries.delete_category(category_id, db_path)
    log.info("category.deleted", category_id=category_id)


def reorder_categories(category_type: str, ordered_ids: list[int], db_path: Path | None = None) -> list[dict[str, Any]]:
    """Put a type's categories in the given order.

    Each id's position in ``ordered_ids`` becomes its sort_order. Ids of
    categories of another type are ignored.

    Raises:
        ValidationError: If the type is unknown.
        NotFoundError: If an id does not exist at all.
    """
    if category_type not in CATEGORY_TYPES:
        raise ValidationError(["Category type must be: bill, income, or variable"])
    for category_id in ordered_ids:
        get_category(category_id, db_path)
    updated = queries.reorder_categories(category_type, ordered_ids, db_path)
    log.info("category.reordered", type=category_type, updated=updated)
    return queries.list_categories(category_type, db_path)
