"""Tests for billfold.store.goals."""

import sqlite3
from pathlib import Path
from typing import Any

import pytest

from billfold.store import goals, queries


def goal_row(account_id: int) -> dict[str, Any]:
    return {"name": "Trip", "target_amount": 100000, "linked_account_id": account_id, "status": "saving"}


def schedule_bill(account_id: int) -> dict[str, Any]:
    return {"name": "Savings: Trip", "amount": 16667, "billing_period": "monthly", "payment_source_id": account_id}


class TestCreateGoal:
    """Tests for create_goal."""

    def test_links_schedule_bill(self, db_path: Path, checking: dict[str, Any]) -> None:
        """Should insert the bill linked to the new goal."""
        goal_id = goals.create_goal(goal_row(checking["id"]), db_path, schedule_bill=schedule_bill(checking["id"]))

        [bill] = queries.list_recurring("bill", db_path, goal_id=goal_id)
        assert bill["name"] == "Savings: Trip"
        assert bill["kind"] == "bill"

    def test_failed_bill_leaves_no_goal(self, db_path: Path, checking: dict[str, Any]) -> None:
        """Should roll back the goal when its bill cannot be written."""
        with pytest.raises(sqlite3.IntegrityError):
            goals.create_goal(goal_row(checking["id"]), db_path, schedule_bill=schedule_bill(999))

        assert goals.list_goals(db_path) == []
        assert queries.list_recurring("bill", db_path) == []
