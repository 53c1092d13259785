"""Tests for billfold.domain.todos pure functions."""

from typing import Any

from billfold.domain.models import Month
from billfold.domain.todos import missing_instances, todo_dates_in_month


def make_todo(**overrides: Any) -> dict[str, Any]:
    todo = {
        "id": 3,
        "title": "Check statements",
        "recurrence": "monthly",
        "due_date": None,
        "start_date": None,
        "day_of_month": 31,
        "is_active": True,
    }
    todo.update(overrides)
    return todo


class TestTodoDatesInMonth:
    """Tests for todo_dates_in_month."""

    def test_monthly_clamped(self) -> None:
        """Should clamp the monthly day to short months."""
        assert todo_dates_in_month(make_todo(), Month("2025-04")) == ["2025-04-30"]

    def test_one_time_in_month(self) -> None:
        """Should place a one-time todo in its own month only."""
        todo = make_todo(recurrence="none", due_date="2025-04-10", day_of_month=None)
        assert todo_dates_in_month(todo, Month("2025-04")) == ["2025-04-10"]
        assert todo_dates_in_month(todo, Month("2025-05")) == []

    def test_weekly(self) -> None:
        """Should repeat weekly from the start date."""
        todo = make_todo(recurrence="weekly", start_date="2025-04-01", day_of_month=None)
        assert todo_dates_in_month(todo, Month("2025-04")) == [
            "2025-04-01",
            "2025-04-08",
            "2025-04-15",
            "2025-04-22",
            "2025-04-29",
        ]

    def test_inactive(self) -> None:
        """Should produce nothing for inactive todos."""
        assert todo_dates_in_month(make_todo(is_active=False), Month("2025-04")) == []


class TestMissingInstances:
    """Tests for missing_instances."""

    def test_generates_pending(self) -> None:
        """Should create pending instances for new dates."""
        instances = missing_instances(make_todo(), Month("2025-04"), set())
        assert instances == [
            {
                "todo_id": 3,
                "month": "2025-04",
                "title": "Check statements",
                "due_date": "2025-04-30",
                "status": "pending",
            }
        ]

    def test_skips_existing(self) -> None:
        """Should not duplicate instances already generated."""
        assert missing_instances(make_todo(), Month("2025-04"), {(3, "2025-04-30")}) == []
