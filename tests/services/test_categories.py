"""Tests for billfold.services.categories."""

from pathlib import Path
from typing import Any

import pytest

from billfold.errors import ConflictError, NotFoundError, ValidationError
from billfold.services import categories


class TestCreateCategory:
    """Tests for create_category."""

    def test_duplicate_name(self, db_path: Path, bill_category: dict[str, Any]) -> None:
        """Should refuse a second category with the same name and type."""
        with pytest.raises(ConflictError):
            categories.create_category({"name": " housing ", "type": "bill"}, db_path)

    def test_same_name_other_type(self, db_path: Path, bill_category: dict[str, Any]) -> None:
        """Should allow the same name under another type."""
        created = categories.create_category({"name": "Housing", "type": "income"}, db_path)
        assert created["type"] == "income"

    def test_bad_color(self, db_path: Path) -> None:
        """Should reject a color that is not a hex value."""
        with pytest.raises(ValidationError):
            categories.create_category({"name": "Fun", "type": "bill", "color": "blue"}, db_path)


class TestUpdateCategory:
    """Tests for update_category."""

    def test_type_is_fixed(self, db_path: Path, bill_category: dict[str, Any]) -> None:
        """Should refuse to change a category's type."""
        with pytest.raises(ValidationError):
            categories.update_category(bill_category["id"], {"type": "income"}, db_path)

    def test_rename_clash(self, db_path: Path, bill_category: dict[str, Any]) -> None:
        """Should refuse a rename onto an existing name."""
        other = categories.create_category({"name": "Utilities", "type": "bill"}, db_path)
        with pytest.raises(ConflictError):
            categories.update_category(other["id"], {"name": "Housing"}, db_path)


class TestDeleteCategory:
    """Tests for delete_category."""

    def test_predefined(self, db_path: Path) -> None:
        """Should refuse to delete a predefined category."""
        seeded = categories.ensure_category("Savings Goals", "bill", predefined=True, db_path=db_path)
        with pytest.raises(ConflictError):
            categories.delete_category(seeded["id"], db_path)

    def test_user_category(self, db_path: Path, bill_category: dict[str, Any]) -> None:
        """Should delete a user-created category."""
        categories.delete_category(bill_category["id"], db_path)
        with pytest.raises(NotFoundError):
            categories.get_category(bill_category["id"], db_path)


class TestEnsureCategory:
    """Tests for ensure_category."""

    def test_reuses_existing(self, db_path: Path) -> None:
        """Should return the same category on repeated calls."""
        first = categories.ensure_category("Savings Goals", "bill", predefined=True, db_path=db_path)
        second = categories.ensure_category("Savings Goals", "bill", predefined=True, db_path=db_path)
        assert first["id"] == second["id"]
        assert first["is_predefined"] is True


class TestReorderCategories:
    """Tests for reorder_categories."""

    def test_reorder(self, db_path: Path, bill_category: dict[str, Any]) -> None:
        """Should return the type's categories in the new order."""
        utilities = categories.create_category({"name": "Utilities", "type": "bill"}, db_path)
        ordered = categories.reorder_categories("bill", [utilities["id"], bill_category["id"]], db_path)
        assert [c["name"] for c in ordered] == ["Utilities", "Housing"]

    def test_unknown_id(self, db_path: Path) -> None:
        """Should raise NotFoundError for an id that does not exist."""
        with pytest.raises(NotFoundError):
            categories.reorder_categories("bill", [42], db_path)

    def test_unknown_type(self, db_path: Path) -> None:
        """Should reject an unknown category type."""
        with pytest.raises(ValidationError):
            categories.reorder_categories("expense", [], db_path)
