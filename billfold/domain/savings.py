"""Pure functions for savings goals.

Covers the contribution schedule calculator (how much to put aside each
week, fortnight or month to hit a target by a date), progress tracking
against a straight-line plan, and the goal lifecycle.

All monetary amounts are in cents (Money type).
"""

from dataclasses import dataclass
from datetime import date, timedelta
from fractions import Fraction
from typing import Any

from billfold.dates import add_months, parse_iso_date
from billfold.domain.models import Money

CADENCE_BILLING_PERIODS = {
    "weekly": "weekly",
    "biweekly": "bi_weekly",
    "monthly": "monthly",
}

# action -> statuses the action is allowed from
TRANSITIONS: dict[str, tuple[str, ...]] = {
    "pause": ("saving",),
    "resume": ("paused",),
    "complete": ("saving", "paused"),
    "abandon": ("saving", "paused"),
    "archive": ("bought", "abandoned"),
    "unarchive": ("archived",),
}

TRANSITION_TARGETS = {
    "pause": "paused",
    "resume": "saving",
    "complete": "bought",
    "abandon": "abandoned",
    "archive": "archived",
}

CLOSED_STATUSES = ("bought", "abandoned", "archived")


@dataclass(frozen=True)
class PaymentSchedule:
    """Immutable contribution schedule for a savings goal."""

    cadence: str
    amount: Money  # Per regular payment
    payments: int
    first_payment_date: date | None
    final_payment_date: date | None
    final_amount: Money  # Last payment, may be smaller than amount
    total: Money


def _step_days(cadence: str) -> int:
    if cadence == "weekly":
        return 7
    if cadence == "biweekly":
        return 14
    raise ValueError(f"Unknown cadence: {cadence}")


def count_periods(start: date, target: date, cadence: str) -> int:
    """Count whole cadence periods between two dates.

    Returns:
        Number of complete weeks, fortnights or calendar months from start to
        target. Zero when the target is not after the start.
    """
    if target <= start:
        return 0
    if cadence == "monthly":
        months = (target.year - start.year) * 12 + (target.month - start.month)
        while months > 0 and add_months(start, months) > target:
            months -= 1
        return months
    return (target - start).days // _step_days(cadence)


def add_periods(start: date, periods: int, cadence: str) -> date:
    """Add whole cadence periods to a date (monthly steps clamp the day)."""
    if cadence == "monthly":
        return add_months(start, periods)
    return start + timedelta(days=periods * _step_days(cadence))


def _schedule(remaining: int, start: date, amount: int, cadence: str) -> PaymentSchedule:
    payments = -(-remaining // amount)
    return PaymentSchedule(
        cadence=cadence,
        amount=Money(amount),
        payments=payments,
        first_payment_date=start,
        final_payment_date=add_periods(start, payments - 1, cadence),
        final_amount=Money(remaining - amount * (payments - 1)),
        total=Money(remaining),
    )


def _empty_schedule(cadence: str) -> PaymentSchedule:
    return PaymentSchedule(cadence, Money(0), 0, None, None, Money(0), Money(0))


def build_schedule(remaining: Money, start: date, target_date: date, cadence: str) -> PaymentSchedule:
    """Work out the regular payment needed to save ``remaining`` by a date.

    The per-payment amount is ceil(remaining / periods), so the goal is never
    short. Rounding up can finish early, so the number of payments actually
    needed is recomputed and the last payment carries whatever is left.

    Args:
        remaining: Amount still to save in cents.
        start: Date of the first payment.
        target_date: Date the goal should be reached.
        cadence: One of GOAL_CADENCES.

    Returns:
        PaymentSchedule. A target on or before the start gives a single
        payment of the whole remaining amount on the start date.
    """
    if remaining <= 0:
        return _empty_schedule(cadence)
    periods = count_periods(start, target_date, cadence)
    if periods <= 0:
        return _schedule(remaining, start, remaining, cadence)
    amount = -(-remaining // periods)
    return _schedule(remaining, start, amount, cadence)


def build_schedule_from_amount(remaining: Money, start: date, amount: Money, cadence: str) -> PaymentSchedule:
    """Work out when a goal completes given a fixed regular payment.

    Raises:
        ValueError: If amount is not positive.
    """
    if amount <= 0:
        raise ValueError("Payment amount must be greater than 0")
    if remaining <= 0:
        return _empty_schedule(cadence)
    return _schedule(remaining, start, min(amount, remaining), cadence)


def cadence_billing_period(cadence: str) -> str:
    return CADENCE_BILLING_PERIODS[cadence]


def _created_date(goal: dict[str, Any]) -> date | None:
    created_at = goal.get("created_at")
    return parse_iso_date(created_at[:10]) if created_at else None


def expected_saved_amount(goal: dict[str, Any], as_of: date) -> Money:
    """Amount that should be saved by ``as_of`` on a straight line plan.

    The line runs from the goal's creation date (nothing saved) to its
    target date (the full target saved).
    """
    target = goal["target_amount"]
    target_date = parse_iso_date(goal.get("target_date"))
    created = _created_date(goal)
    if target_date is None or created is None:
        return Money(0)
    if as_of >= target_date:
        return Money(target)
    if as_of <= created:
        return Money(0)

    total_days = (target_date - created).days
    if total_days <= 0:
        return Money(target)
    expected = Fraction(target * (as_of - created).days, total_days)
    return Money(int((expected + Fraction(1, 2)) // 1))


def goal_temperature(goal: dict[str, Any], saved: Money, as_of: date) -> str:
    """Rate progress against the plan.

    Returns:
        "green" when on track or ahead, "yellow" when saved is 75-99% of the
        expected amount, "red" when further behind.
    """
    if saved >= goal["target_amount"]:
        return "green"
    expected = expected_saved_amount(goal, as_of)
    if expected <= 0:
        return "green"
    ratio = Fraction(saved, expected)
    if ratio >= 1:
        return "green"
    if ratio >= Fraction(3, 4):
        return "yellow"
    return "red"


def progress_percentage(saved: Money, target: Money) -> int:
    """Percentage of the target saved, rounded and capped at 100."""
    if target <= 0:
        return 0
    percent = int((Fraction(saved * 100, target) + Fraction(1, 2)) // 1)
    return max(0, min(100, percent))


def check_transition(status: str, action: str) -> str | None:
    """Check whether a lifecycle action is allowed from a status.

    Returns:
        An error message, or None if the action is allowed.
    """
    allowed = TRANSITIONS.get(action)
    if allowed is None:
        return f"Unknown action '{action}'"
    if status in allowed:
        return None
    if action == "archive":
        return f"Cannot archive goal with status '{status}'. Only 'bought' or 'abandoned' goals can be archived."
    if action == "unarchive":
        return f"Cannot unarchive goal with status '{status}'. Only 'archived' goals can be unarchived."
    return f"Cannot {action} goal with status '{status}'"


def transition_updates(goal: dict[str, Any], action: str, now: str, restore_to: str | None = None) -> dict[str, Any]:
    """Field changes for an allowed lifecycle action.

    Args:
        goal: Current goal row.
        action: One of the TRANSITIONS keys.
        now: ISO timestamp recorded on the goal.
        restore_to: Status to unarchive to. Defaults to the remembered one.

    Raises:
        ValueError: If the action is not allowed from the goal's status.
    """
    error = check_transition(goal["status"], action)
    if error:
        raise ValueError(error)

    if action == "pause":
        return {"status": "paused", "paused_at": now}
    if action == "resume":
        return {"status": "saving", "paused_at": None}
    if action in ("complete", "abandon"):
        return {"status": TRANSITION_TARGETS[action], "completed_at": now, "paused_at": None}
    if action == "archive":
        return {"status": "archived", "previous_status": goal["status"], "archived_at": now}

    status = restore_to or goal.get("previous_status") or "bought"
    if status not in ("bought", "abandoned"):
        raise ValueError("Archived goals can only be restored to 'bought' or 'abandoned'")
    return {"status": status, "previous_status": None, "archived_at": None}
