"""Tests for billfold.domain.projection."""

from datetime import date
from typing import Any

from billfold.domain.models import Money, Month
from billfold.domain.projection import Projection, ProjectionDay, project_month

TODAY = date(2025, 3, 10)


def occurrence(
    on: str, expected: int, payments: list[tuple[str, int]] | None = None, closed: bool = False
) -> dict[str, Any]:
    return {
        "expected_date": on,
        "expected_amount": expected,
        "is_closed": closed,
        "payments": [{"date": paid_on, "amount": amount} for paid_on, amount in payments or []],
    }


def item(name: str, kind: str, *occurrences: dict[str, Any]) -> dict[str, Any]:
    return {"name": name, "kind": kind, "occurrences": list(occurrences)}


def day(projection: Projection, iso: str) -> ProjectionDay:
    return next(d for d in projection.days if d.date == iso)


class TestProjectMonth:
    """Tests for project_month."""

    def test_every_day(self) -> None:
        """Should cover each calendar day of the month."""
        projection = project_month(Month("2025-02"), TODAY, Money(0), [], [])
        assert len(projection.days) == 28
        assert (projection.start_date, projection.end_date) == ("2025-02-01", "2025-02-28")

    def test_future_month(self) -> None:
        """Should apply scheduled income and bills from the first day."""
        bills = [item("Rent", "bill", occurrence("2025-04-01", 150000))]
        incomes = [item("Salary", "income", occurrence("2025-04-15", 300000))]

        projection = project_month(Month("2025-04"), TODAY, Money(200000), bills, incomes)

        assert day(projection, "2025-04-01").balance == 50000
        assert day(projection, "2025-04-14").balance == 50000
        assert day(projection, "2025-04-15").balance == 350000
        assert projection.days[-1].balance == 350000
        assert projection.lowest_balance == 50000

    def test_current_month_starts_today(self) -> None:
        """Should show earlier days without a balance and start from today."""
        bills = [item("Rent", "bill", occurrence("2025-03-01", 150000, [("2025-03-01", 150000)], closed=True))]

        projection = project_month(Month("2025-03"), TODAY, Money(100000), bills, [])

        first = day(projection, "2025-03-01")
        assert first.balance is None
        assert first.expense == 150000
        assert first.events[0].actual is True
        assert day(projection, "2025-03-10").balance == 100000

    def test_overdue_carried_to_today(self) -> None:
        """Should take what is still owed on overdue bills off today's balance, once."""
        bills = [item("Phone", "bill", occurrence("2025-03-05", 5000, [("2025-03-05", 2000)]))]

        projection = project_month(Month("2025-03"), TODAY, Money(100000), bills, [])

        today = day(projection, "2025-03-10")
        assert today.expense == 3000
        assert today.balance == 97000
        assert projection.days[-1].balance == 97000
        [overdue] = projection.overdue
        assert overdue.amount == 3000

    def test_closed_without_payment(self) -> None:
        """Should treat a closed, unpaid occurrence as paid on its due date."""
        bills = [item("Gym", "bill", occurrence("2025-03-03", 4000, closed=True))]
        projection = project_month(Month("2025-03"), TODAY, Money(0), bills, [])
        assert day(projection, "2025-03-03").expense == 4000
        assert day(projection, "2025-03-10").balance == 0

    def test_deficit(self) -> None:
        """Should flag days where the balance goes below zero."""
        bills = [item("Rent", "bill", occurrence("2025-04-01", 150000))]
        projection = project_month(Month("2025-04"), TODAY, Money(100000), bills, [])
        assert day(projection, "2025-04-01").is_deficit is True
        assert projection.lowest_balance == -50000
