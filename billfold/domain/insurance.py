"""Pure functions for insurance claims.

A claim is sent to each of a family member's plans in turn: primary first,
then whatever the primary did not pay goes to the secondary, and so on.
Each plan's leg of the claim is a *submission*.
"""

from dataclasses import dataclass
from typing import Any

from billfold.domain.models import Money

PREDEFINED_INSURANCE_CATEGORIES: list[dict[str, Any]] = [
    {"name": "Dental", "icon": "🦷", "sort_order": 1},
    {"name": "Vision / Eye Care", "icon": "👁️", "sort_order": 2},
    {"name": "Massage Therapy", "icon": "💆", "sort_order": 3},
    {"name": "Physiotherapy", "icon": "🏃", "sort_order": 4},
    {"name": "Chiropractic", "icon": "🦴", "sort_order": 5},
    {"name": "Orthodontics", "icon": "🦷", "sort_order": 6},
    {"name": "Mental Health", "icon": "🧠", "sort_order": 7},
    {"name": "Prescription Drugs", "icon": "💊", "sort_order": 8},
    {"name": "Medical Equipment", "icon": "🩼", "sort_order": 9},
    {"name": "Hospital / Emergency", "icon": "🏥", "sort_order": 10},
    {"name": "Other", "icon": "📋", "sort_order": 99},
]

FINAL_SUBMISSION_STATUSES = ("approved", "denied")
UNSENT_SUBMISSION_STATUSES = ("draft", "awaiting_previous")


@dataclass(frozen=True)
class ClaimsSummary:
    """Immutable overview of all claims."""

    pending_count: int
    pending_amount: Money
    closed_count: int
    reimbursed_amount: Money


def claim_status(submissions: list[dict[str, Any]]) -> str:
    """Derive a claim's status from its submissions.

    - draft: nothing has been sent yet
    - closed: every submission has been approved or denied
    - in_progress: anything else
    """
    if all(s["status"] in UNSENT_SUBMISSION_STATUSES for s in submissions):
        return "draft"
    if all(s["status"] in FINAL_SUBMISSION_STATUSES for s in submissions):
        return "closed"
    return "in_progress"


def plan_submissions(plans: list[dict[str, Any]], total_amount: Money) -> list[dict[str, Any]]:
    """Create one submission per active plan, in the member's plan order.

    The first plan is claimed for the full amount. Later plans wait for the
    one before them and start at zero.
    """
    submissions = []
    for plan in plans:
        if not plan.get("is_active", True):
            continue
        first = not submissions
        submissions.append(
            {
                "plan_id": plan["id"],
                "plan_name": plan["name"],
                "status": "draft" if first else "awaiting_previous",
                "amount_claimed": total_amount if first else Money(0),
                "amount_reimbursed": None,
            }
        )
    return submissions


def cascade_submissions(
    submissions: list[dict[str, Any]], resolved_index: int, total_amount: Money
) -> list[dict[str, Any]]:
    """Activate the next waiting submission after one is resolved.

    When the submission at ``resolved_index`` has been approved or denied,
    the next ``awaiting_previous`` submission after it becomes a draft for
    whatever the earlier plans did not reimburse.

    Returns:
        A new list of submissions. Unchanged when there is nothing to
        activate or the resolved submission is not final.
    """
    updated = [dict(s) for s in submissions]
    if updated[resolved_index]["status"] not in FINAL_SUBMISSION_STATUSES:
        return updated

    for index in range(resolved_index + 1, len(updated)):
        if updated[index]["status"] == "awaiting_previous":
            reimbursed = sum(s.get("amount_reimbursed") or 0 for s in updated[:index])
            updated[index]["status"] = "draft"
            updated[index]["amount_claimed"] = Money(max(0, total_amount - reimbursed))
            break
    return updated


def claims_summary(claims: list[dict[str, Any]]) -> ClaimsSummary:
    """Count open and closed claims and the money in each.

    Pending amounts only count submissions actually sent and awaiting a
    decision. Reimbursed amounts only count closed claims.
    """
    pending_count = 0
    pending_amount = 0
    closed_count = 0
    reimbursed_amount = 0
    for claim in claims:
        submissions = claim.get("submissions", [])
        if claim["status"] == "in_progress":
            pending_count += 1
            pending_amount += sum(s["amount_claimed"] for s in submissions if s["status"] == "pending")
        elif claim["status"] == "closed":
            closed_count += 1
            reimbursed_amount += sum(s.get("amount_reimbursed") or 0 for s in submissions)
    return ClaimsSummary(pending_count, Money(pending_amount), closed_count, Money(reimbursed_amount))
