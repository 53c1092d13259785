"""Tests for billfold.domain.savings pure functions."""

from datetime import date
from typing import Any

import pytest

from billfold.domain.models import Money
from billfold.domain.savings import (
    add_periods,
    build_schedule,
    build_schedule_from_amount,
    cadence_billing_period,
    check_transition,
    count_periods,
    expected_saved_amount,
    goal_temperature,
    progress_percentage,
    transition_updates,
)


def make_goal(**overrides: Any) -> dict[str, Any]:
    goal = {
        "id": 1,
        "name": "New laptop",
        "target_amount": 36500,
        "target_date": "2026-01-01",
        "created_at": "2025-01-01 10:00:00",
        "status": "saving",
        "previous_status": None,
    }
    goal.update(overrides)
    return goal


class TestCountPeriods:
    """Tests for count_periods and add_periods."""

    def test_weekly(self) -> None:
        """Should count whole weeks."""
        assert count_periods(date(2025, 1, 1), date(2025, 1, 29), "weekly") == 4

    def test_biweekly(self) -> None:
        """Should count whole fortnights."""
        assert count_periods(date(2025, 1, 1), date(2025, 1, 29), "biweekly") == 2

    def test_monthly_incomplete_month_not_counted(self) -> None:
        """Should not count a month that overshoots the target."""
        assert count_periods(date(2025, 1, 31), date(2025, 3, 30), "monthly") == 1

    def test_target_not_after_start(self) -> None:
        """Should return zero when the target is not in the future."""
        assert count_periods(date(2025, 5, 1), date(2025, 5, 1), "monthly") == 0

    def test_add_periods(self) -> None:
        """Should step by the cadence."""
        assert add_periods(date(2025, 1, 1), 3, "biweekly") == date(2025, 2, 12)
        assert add_periods(date(2025, 1, 31), 1, "monthly") == date(2025, 2, 28)

    def test_unknown_cadence(self) -> None:
        """Should reject unknown cadences."""
        with pytest.raises(ValueError):
            count_periods(date(2025, 1, 1), date(2025, 2, 1), "daily")


class TestBuildSchedule:
    """Tests for build_schedule."""

    def test_monthly_rounds_payment_up(self) -> None:
        """Should round the payment up and shrink the last one."""
        schedule = build_schedule(Money(100000), date(2025, 1, 1), date(2025, 7, 1), "monthly")

        assert schedule.amount == Money(16667)
        assert schedule.payments == 6
        assert schedule.final_amount == Money(16665)
        assert schedule.first_payment_date == date(2025, 1, 1)
        assert schedule.final_payment_date == date(2025, 6, 1)
        assert schedule.total == Money(100000)

    def test_rounding_can_finish_early(self) -> None:
        """Should recount payments when rounding up covers the total sooner."""
        schedule = build_schedule(Money(10), date(2025, 1, 1), date(2025, 2, 12), "weekly")

        assert schedule.amount == Money(2)
        assert schedule.payments == 5
        assert schedule.final_amount == Money(2)
        assert schedule.final_payment_date == date(2025, 1, 29)

    def test_target_in_past_single_payment(self) -> None:
        """Should ask for everything at once when the target has passed."""
        schedule = build_schedule(Money(5000), date(2025, 5, 1), date(2025, 4, 1), "monthly")

        assert schedule.payments == 1
        assert schedule.amount == Money(5000)
        assert schedule.final_payment_date == date(2025, 5, 1)

    def test_nothing_remaining(self) -> None:
        """Should produce an empty schedule when the goal is met."""
        schedule = build_schedule(Money(0), date(2025, 1, 1), date(2025, 6, 1), "monthly")

        assert schedule.payments == 0
        assert schedule.first_payment_date is None


class TestBuildScheduleFromAmount:
    """Tests for build_schedule_from_amount."""

    def test_fixed_amount(self) -> None:
        """Should count payments for a fixed contribution."""
        schedule = build_schedule_from_amount(Money(10000), date(2025, 1, 1), Money(3000), "biweekly")

        assert schedule.payments == 4
        assert schedule.final_amount == Money(1000)
        assert schedule.final_payment_date == date(2025, 2, 12)

    def test_amount_larger_than_remaining(self) -> None:
        """Should cap the payment at what is left."""
        schedule = build_schedule_from_amount(Money(500), date(2025, 1, 1), Money(1000), "monthly")

        assert schedule.amount == Money(500)
        assert schedule.payments == 1

    def test_non_positive_amount_raises(self) -> None:
        """Should reject a zero payment."""
        with pytest.raises(ValueError, match="greater than 0"):
            build_schedule_from_amount(Money(500), date(2025, 1, 1), Money(0), "monthly")

    def test_cadence_billing_period(self) -> None:
        """Should map cadences to billing periods."""
        assert cadence_billing_period("biweekly") == "bi_weekly"
        assert cadence_billing_period("monthly") == "monthly"


class TestProgress:
    """Tests for expected_saved_amount, goal_temperature and progress_percentage."""

    def test_expected_halfway(self) -> None:
        """Should follow a straight line from creation to target."""
        assert expected_saved_amount(make_goal(), date(2025, 7, 2)) == Money(18200)

    def test_expected_after_target(self) -> None:
        """Should expect the full target once the date has passed."""
        assert expected_saved_amount(make_goal(), date(2026, 2, 1)) == Money(36500)

    def test_expected_without_target_date(self) -> None:
        """Should expect nothing without a target date."""
        assert expected_saved_amount(make_goal(target_date=None), date(2025, 7, 2)) == Money(0)

    def test_temperature_on_track(self) -> None:
        """Should be green when on plan."""
        assert goal_temperature(make_goal(), Money(18200), date(2025, 7, 2)) == "green"

    def test_temperature_slightly_behind(self) -> None:
        """Should be yellow at 75% of plan."""
        assert goal_temperature(make_goal(), Money(13650), date(2025, 7, 2)) == "yellow"

    def test_temperature_far_behind(self) -> None:
        """Should be red below 75% of plan."""
        assert goal_temperature(make_goal(), Money(13649), date(2025, 7, 2)) == "red"

    def test_temperature_target_reached(self) -> None:
        """Should be green once the target is saved."""
        assert goal_temperature(make_goal(), Money(36500), date(2025, 2, 1)) == "green"

    def test_progress_percentage(self) -> None:
        """Should round and cap the percentage."""
        assert progress_percentage(Money(2500), Money(10000)) == 25
        assert progress_percentage(Money(2), Money(3)) == 67
        assert progress_percentage(Money(15000), Money(10000)) == 100
        assert progress_percentage(Money(0), Money(0)) == 0


class TestTransitions:
    """Tests for check_transition and transition_updates."""

    def test_pause(self) -> None:
        """Should pause a saving goal."""
        updates = transition_updates(make_goal(), "pause", "2025-03-01")
        assert updates == {"status": "paused", "paused_at": "2025-03-01"}

    def test_pause_twice_rejected(self) -> None:
        """Should not pause an already paused goal."""
        with pytest.raises(ValueError, match="Cannot pause goal with status 'paused'"):
            transition_updates(make_goal(status="paused"), "pause", "2025-03-01")

    def test_complete_from_paused(self) -> None:
        """Should complete a paused goal."""
        updates = transition_updates(make_goal(status="paused"), "complete", "2025-03-01")
        assert updates["status"] == "bought"
        assert updates["paused_at"] is None

    def test_archive_remembers_status(self) -> None:
        """Should remember the status before archiving."""
        updates = transition_updates(make_goal(status="abandoned"), "archive", "2025-03-01")
        assert updates["previous_status"] == "abandoned"

    def test_archive_saving_rejected(self) -> None:
        """Should only archive finished goals."""
        assert check_transition("saving", "archive") == (
            "Cannot archive goal with status 'saving'. Only 'bought' or 'abandoned' goals can be archived."
        )

    def test_unarchive_restores_previous(self) -> None:
        """Should restore the remembered status."""
        goal = make_goal(status="archived", previous_status="abandoned")
        assert transition_updates(goal, "unarchive", "2025-03-01")["status"] == "abandoned"

    def test_unarchive_to_saving_rejected(self) -> None:
        """Should not restore an archived goal to saving."""
        with pytest.raises(ValueError):
            transition_updates(make_goal(status="archived"), "unarchive", "2025-03-01", restore_to="saving")

    def test_unknown_action(self) -> None:
        """Should name unknown actions."""
        assert check_transition("saving", "fly") == "Unknown action 'fly'"
