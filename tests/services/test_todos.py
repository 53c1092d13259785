"""Tests for billfold.services.todos."""

from datetime import date
from pathlib import Path
from typing import Any

import pytest

from billfold.errors import NotFoundError, ReadOnlyError, ValidationError
from billfold.services import months, todos
from billfold.store import todos as todo_store

TODAY = date(2025, 3, 10)


@pytest.fixture
def monthly_todo(db_path: Path) -> dict[str, Any]:
    """A monthly todo generated into February, March and April."""
    todo = todos.create_todo({"title": "Check statements", "recurrence": "monthly", "day_of_month": 5}, db_path)
    for month in ("2025-02", "2025-03", "2025-04"):
        months.create_month(month, today=TODAY, db_path=db_path)
    return todo


def instance_months(db_path: Path) -> list[str]:
    return [
        instance["month"]
        for month in ("2025-02", "2025-03", "2025-04")
        for instance in todo_store.list_todo_instances(month, db_path)
    ]


class TestCreateTodo:
    """Tests for create_todo and update_todo."""

    def test_clears_other_mode_fields(self, db_path: Path) -> None:
        """Should drop fields that do not belong to the recurrence."""
        todo = todos.create_todo(
            {"title": "Water plants", "recurrence": "weekly", "start_date": "2025-03-03", "day_of_month": 4}, db_path
        )
        assert todo["start_date"] == "2025-03-03"
        assert todo["day_of_month"] is None
        assert todo["status"] == "pending"

    def test_one_time_needs_due_date(self, db_path: Path) -> None:
        """Should require a due date for one-time todos."""
        with pytest.raises(ValidationError):
            todos.create_todo({"title": "Renew passport"}, db_path)

    def test_switch_recurrence(self, db_path: Path) -> None:
        """Should clear the old mode's fields when the recurrence changes."""
        todo = todos.create_todo({"title": "Renew passport", "due_date": "2025-05-01"}, db_path)
        updated = todos.update_todo(todo["id"], {"recurrence": "monthly", "day_of_month": 1}, db_path)
        assert updated["due_date"] is None
        assert updated["day_of_month"] == 1


class TestCompleteTodo:
    """Tests for complete_todo and reopen_todo."""

    def test_complete_and_reopen(self, db_path: Path) -> None:
        """Should stamp and clear completed_at."""
        todo = todos.create_todo({"title": "Renew passport", "due_date": "2025-05-01"}, db_path)
        completed = todos.complete_todo(todo["id"], db_path)
        assert completed["status"] == "completed"
        assert completed["completed_at"]

        reopened = todos.reopen_todo(todo["id"], db_path)
        assert reopened["status"] == "pending"
        assert reopened["completed_at"] is None


class TestDeleteTodo:
    """Tests for delete_todo scopes."""

    def test_template_only(self, db_path: Path, monthly_todo: dict[str, Any]) -> None:
        """Should keep every generated instance."""
        assert todos.delete_todo(monthly_todo["id"], today=TODAY, db_path=db_path) == 0
        assert instance_months(db_path) == ["2025-02", "2025-03", "2025-04"]
        with pytest.raises(NotFoundError):
            todos.get_todo(monthly_todo["id"], db_path)

    def test_current_month(self, db_path: Path, monthly_todo: dict[str, Any]) -> None:
        """Should remove only the current month's instance."""
        assert todos.delete_todo(monthly_todo["id"], "current_month", today=TODAY, db_path=db_path) == 1
        assert instance_months(db_path) == ["2025-02", "2025-04"]

    def test_future_months(self, db_path: Path, monthly_todo: dict[str, Any]) -> None:
        """Should remove instances from the current month onward."""
        assert todos.delete_todo(monthly_todo["id"], "future_months", today=TODAY, db_path=db_path) == 2
        assert instance_months(db_path) == ["2025-02"]

    def test_skips_locked_future_month(self, db_path: Path, monthly_todo: dict[str, Any]) -> None:
        """Should leave a locked future month alone."""
        months.lock_month("2025-04", db_path)
        assert todos.delete_todo(monthly_todo["id"], "future_months", today=TODAY, db_path=db_path) == 1
        assert instance_months(db_path) == ["2025-02", "2025-04"]

    def test_locked_current_month(self, db_path: Path, monthly_todo: dict[str, Any]) -> None:
        """Should refuse when the current month is locked, keeping the template."""
        months.lock_month("2025-03", db_path)
        with pytest.raises(ReadOnlyError):
            todos.delete_todo(monthly_todo["id"], "current_month", today=TODAY, db_path=db_path)
        assert todos.get_todo(monthly_todo["id"], db_path)["title"] == "Check statements"

    def test_unknown_scope(self, db_path: Path, monthly_todo: dict[str, Any]) -> None:
        """Should reject an unknown scope."""
        with pytest.raises(ValidationError):
            todos.delete_todo(monthly_todo["id"], "everything", today=TODAY, db_path=db_path)
