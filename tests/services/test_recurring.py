"""Tests for billfold.services.recurring."""

from pathlib import Path
from typing import Any

import pytest

from billfold.errors import NotFoundError, ValidationError
from billfold.services import categories, recurring


def rent(source_id: int, **overrides: Any) -> dict[str, Any]:
    data = {
        "name": "Rent",
        "amount": 150000,
        "billing_period": "monthly",
        "day_of_month": 1,
        "payment_source_id": source_id,
    }
    data.update(overrides)
    return data


class TestCreateRecurring:
    """Tests for create_recurring."""

    def test_create_bill(self, db_path: Path, checking: dict[str, Any], bill_category: dict[str, Any]) -> None:
        """Should store a bill with its category."""
        bill = recurring.create_recurring("bill", rent(checking["id"], category_id=bill_category["id"]), db_path)
        assert bill["kind"] == "bill"
        assert bill["category_id"] == bill_category["id"]
        assert bill["is_active"] is True

    def test_category_of_wrong_type(self, db_path: Path, checking: dict[str, Any]) -> None:
        """Should refuse an income category on a bill."""
        salary = categories.create_category({"name": "Salary", "type": "income"}, db_path)
        with pytest.raises(ValidationError, match="not a bill category"):
            recurring.create_recurring("bill", rent(checking["id"], category_id=salary["id"]), db_path)

    def test_unknown_source(self, db_path: Path) -> None:
        """Should raise NotFoundError when the payment source is missing."""
        with pytest.raises(NotFoundError):
            recurring.create_recurring("bill", rent(7), db_path)

    def test_weekly_needs_start(self, db_path: Path, checking: dict[str, Any]) -> None:
        """Should require a start date for weekly items."""
        with pytest.raises(ValidationError):
            recurring.create_recurring("income", rent(checking["id"], billing_period="weekly"), db_path)

    def test_unknown_kind(self, db_path: Path, checking: dict[str, Any]) -> None:
        """Should reject kinds other than bill and income."""
        with pytest.raises(ValueError):
            recurring.create_recurring("expense", rent(checking["id"]), db_path)


class TestUpdateRecurring:
    """Tests for update_recurring."""

    def test_switch_to_weekday_mode(self, db_path: Path, checking: dict[str, Any]) -> None:
        """Should clear day_of_month when switching to an Nth-weekday schedule."""
        bill = recurring.create_recurring("bill", rent(checking["id"]), db_path)
        updated = recurring.update_recurring(
            "bill", bill["id"], {"recurrence_week": 1, "recurrence_day": 5}, db_path
        )
        assert updated["day_of_month"] is None
        assert updated["recurrence_week"] == 1

    def test_wrong_kind(self, db_path: Path, checking: dict[str, Any]) -> None:
        """Should not find a bill when asked for an income."""
        bill = recurring.create_recurring("bill", rent(checking["id"]), db_path)
        with pytest.raises(NotFoundError):
            recurring.update_recurring("income", bill["id"], {"amount": 1}, db_path)


class TestListRecurring:
    """Tests for list_recurring and set_active."""

    def test_monthly_average(self, db_path: Path, checking: dict[str, Any]) -> None:
        """Should add the monthly average to each item."""
        recurring.create_recurring(
            "income",
            {
                "name": "Pay",
                "amount": 10000,
                "billing_period": "bi_weekly",
                "start_date": "2025-01-03",
                "payment_source_id": checking["id"],
            },
            db_path,
        )
        [item] = recurring.list_recurring("income", db_path)
        assert item["monthly_average"] == 21667

    def test_inactive_hidden(self, db_path: Path, checking: dict[str, Any]) -> None:
        """Should hide deactivated items from the active list."""
        bill = recurring.create_recurring("bill", rent(checking["id"]), db_path)
        recurring.set_active("bill", bill["id"], False, db_path)
        assert recurring.list_recurring("bill", db_path, active_only=True) == []
        assert len(recurring.list_recurring("bill", db_path)) == 1
