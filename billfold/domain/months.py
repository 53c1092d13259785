"""Pure functions for month snapshots.

A month snapshot copies every active bill and income into an *instance*
for that month. Each instance holds one *occurrence* per scheduled date,
and payments are recorded against occurrences. These functions build
instances and total them up. Nothing here touches the database.

All monetary amounts are in cents (Money type).
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from billfold.dates import month_of, next_month
from billfold.domain.models import DEBT_ACCOUNT_TYPES, Money, Month
from billfold.domain.recurrence import is_extra_occurrence_month, item_occurrence_dates


@dataclass(frozen=True)
class SectionTally:
    """Immutable totals for a list of bill or income instances."""

    expected: Money
    actual: Money
    remaining: Money


@dataclass(frozen=True)
class LeftoverBreakdown:
    """Immutable leftover calculation for a month.

    leftover = bank_balances + remaining_income - remaining_expenses
    """

    bank_balances: Money
    remaining_income: Money
    remaining_expenses: Money
    leftover: Money
    is_valid: bool
    missing_balances: list[int] = field(default_factory=list)

    @property
    def error_message(self) -> str | None:
        if self.is_valid:
            return None
        return f"Missing bank balances for {len(self.missing_balances)} payment source(s)"


def build_instance(item: dict[str, Any], month: Month, kind: str) -> dict[str, Any]:
    """Turn a bill or income into an instance for a month.

    Args:
        item: Bill or income row.
        month: Target month in YYYY-MM format.
        kind: "bill" or "income".

    Returns:
        Instance dict with an ``occurrences`` list, one per scheduled date.
    """
    dates = item_occurrence_dates(item, month)
    occurrences = [
        {"sequence": i, "expected_date": d, "expected_amount": item["amount"], "is_closed": False, "payments": []}
        for i, d in enumerate(dates, start=1)
    ]
    return {
        "kind": kind,
        "source_id": item["id"],
        "month": month,
        "name": item["name"],
        "category_id": item.get("category_id"),
        "payment_source_id": item.get("payment_source_id"),
        "goal_id": item.get("goal_id"),
        "billing_period": item["billing_period"],
        "is_adhoc": False,
        "is_extra": is_extra_occurrence_month(item["billing_period"], len(dates)),
        "expected_amount": Money(sum(o["expected_amount"] for o in occurrences)),
        "occurrences": occurrences,
    }


def occurrence_paid(occurrence: dict[str, Any]) -> Money:
    return Money(sum(p["amount"] for p in occurrence.get("payments", [])))


def instance_totals(occurrences: list[dict[str, Any]]) -> tuple[Money, Money]:
    """Sum expected and paid amounts across occurrences.

    Returns:
        Tuple of (expected, paid) in cents.
    """
    expected = sum(o["expected_amount"] for o in occurrences)
    paid = sum(occurrence_paid(o) for o in occurrences)
    return Money(expected), Money(paid)


def all_closed(occurrences: list[dict[str, Any]]) -> bool:
    """An instance is closed once every occurrence is. No occurrences means open."""
    return bool(occurrences) and all(o["is_closed"] for o in occurrences)


def resequence(occurrences: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Sort occurrences by date and renumber them from 1."""
    ordered = sorted(occurrences, key=lambda o: (o["expected_date"], o.get("sequence", 0)))
    return [{**o, "sequence": i} for i, o in enumerate(ordered, start=1)]


def instance_remaining(instance: dict[str, Any]) -> Money:
    """Amount still outstanding on an instance (never negative).

    A closed occurrence is settled at whatever was paid on it. Payments on the
    open occurrences are pooled, so paying ahead on one reduces the rest.
    """
    open_occurrences = [o for o in instance.get("occurrences", []) if not o["is_closed"]]
    if not open_occurrences:
        return Money(0)
    expected, paid = instance_totals(open_occurrences)
    return Money(max(0, expected - paid))


def section_tally(instances: list[dict[str, Any]]) -> SectionTally:
    """Total expected, paid and remaining across instances."""
    expected = 0
    actual = 0
    remaining = 0
    for instance in instances:
        inst_expected, inst_paid = instance_totals(instance.get("occurrences", []))
        expected += inst_expected
        actual += inst_paid
        remaining += instance_remaining(instance)
    return SectionTally(Money(expected), Money(actual), Money(remaining))


def counts_toward_leftover(source: dict[str, Any]) -> bool:
    return (
        bool(source.get("is_active", True))
        and not source.get("exclude_from_leftover")
        and not source.get("pay_off_monthly")
    )


def compute_leftover(
    bank_balances: dict[int, Money],
    sources: list[dict[str, Any]],
    bill_instances: list[dict[str, Any]],
    income_instances: list[dict[str, Any]],
) -> LeftoverBreakdown:
    """Calculate what is left at the end of the month.

    Cash accounts add their balance and debt accounts subtract what is
    owed. Accounts excluded from leftover (savings, investments, cards paid
    off monthly, flagged debts) are skipped. If any counted account has no balance recorded for
    the month, the result is marked invalid.

    Args:
        bank_balances: Payment source id -> balance in cents.
        sources: Payment source rows.
        bill_instances: Bill instances with occurrences and payments.
        income_instances: Income instances with occurrences and payments.

    Returns:
        LeftoverBreakdown.
    """
    total = 0
    missing = []
    for source in sources:
        if not counts_toward_leftover(source):
            continue
        balance = bank_balances.get(source["id"])
        if balance is None:
            missing.append(source["id"])
            continue
        if source["type"] in DEBT_ACCOUNT_TYPES:
            total -= abs(balance)
        else:
            total += balance

    remaining_income = section_tally(income_instances).remaining
    remaining_expenses = section_tally(bill_instances).remaining
    return LeftoverBreakdown(
        bank_balances=Money(total),
        remaining_income=remaining_income,
        remaining_expenses=remaining_expenses,
        leftover=Money(total + remaining_income - remaining_expenses),
        is_valid=not missing,
        missing_balances=missing,
    )


def group_by_category(
    instances: list[dict[str, Any]], categories: list[dict[str, Any]]
) -> list[tuple[str, list[dict[str, Any]]]]:
    """Group instances under their category, in category sort order.

    Instances without a known category are collected under "Uncategorized"
    at the end. Empty categories are left out.
    """
    by_id: dict[int, list[dict[str, Any]]] = {}
    uncategorized = []
    known = {c["id"] for c in categories}
    for instance in instances:
        category_id = instance.get("category_id")
        if category_id in known:
            by_id.setdefault(category_id, []).append(instance)
        else:
            uncategorized.append(instance)

    ordered = sorted(categories, key=lambda c: (c.get("sort_order", 0), c["name"]))
    sections = [(c["name"], by_id[c["id"]]) for c in ordered if c["id"] in by_id]
    if uncategorized:
        sections.append(("Uncategorized", uncategorized))
    return sections


def is_current_or_next(month: Month, today: date) -> bool:
    current = month_of(today)
    return month in (current, next_month(current))
