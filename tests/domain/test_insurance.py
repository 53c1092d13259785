"""Tests for billfold.domain.insurance pure functions."""

from typing import Any

from billfold.domain.insurance import (
    PREDEFINED_INSURANCE_CATEGORIES,
    cascade_submissions,
    claim_status,
    claims_summary,
    plan_submissions,
)
from billfold.domain.models import Money


def sub(status: str, claimed: int = 0, reimbursed: int | None = None) -> dict[str, Any]:
    return {"status": status, "amount_claimed": claimed, "amount_reimbursed": reimbursed}


class TestClaimStatus:
    """Tests for claim_status."""

    def test_fresh_claim_is_draft(self) -> None:
        """Should be draft while nothing has been sent."""
        assert claim_status([sub("draft"), sub("awaiting_previous")]) == "draft"

    def test_sent_is_in_progress(self) -> None:
        """Should be in progress once something is pending."""
        assert claim_status([sub("pending"), sub("awaiting_previous")]) == "in_progress"

    def test_primary_resolved_secondary_draft(self) -> None:
        """Should stay in progress while a later plan is still to be sent."""
        assert claim_status([sub("approved"), sub("draft")]) == "in_progress"

    def test_all_resolved_is_closed(self) -> None:
        """Should close once every plan has answered."""
        assert claim_status([sub("approved"), sub("denied")]) == "closed"


class TestPlanSubmissions:
    """Tests for plan_submissions."""

    def test_primary_gets_full_amount(self) -> None:
        """Should claim the full amount from the first active plan."""
        plans = [
            {"id": 1, "name": "Work plan", "is_active": True},
            {"id": 2, "name": "Old plan", "is_active": False},
            {"id": 3, "name": "Spouse plan", "is_active": True},
        ]
        submissions = plan_submissions(plans, Money(20000))

        assert [s["plan_id"] for s in submissions] == [1, 3]
        assert submissions[0]["status"] == "draft"
        assert submissions[0]["amount_claimed"] == Money(20000)
        assert submissions[1]["status"] == "awaiting_previous"
        assert submissions[1]["amount_claimed"] == Money(0)

    def test_no_plans(self) -> None:
        """Should produce no submissions without plans."""
        assert plan_submissions([], Money(20000)) == []


class TestCascadeSubmissions:
    """Tests for cascade_submissions."""

    def test_remainder_goes_to_next_plan(self) -> None:
        """Should claim the unpaid remainder from the next plan."""
        submissions = [sub("approved", 20000, 16000), sub("awaiting_previous")]
        updated = cascade_submissions(submissions, 0, Money(20000))

        assert updated[1]["status"] == "draft"
        assert updated[1]["amount_claimed"] == Money(4000)
        assert submissions[1]["status"] == "awaiting_previous"

    def test_denied_passes_full_amount(self) -> None:
        """Should pass the whole amount on after a denial."""
        updated = cascade_submissions([sub("denied", 20000, 0), sub("awaiting_previous")], 0, Money(20000))
        assert updated[1]["amount_claimed"] == Money(20000)

    def test_pending_does_not_cascade(self) -> None:
        """Should leave later plans waiting until a decision arrives."""
        updated = cascade_submissions([sub("pending", 20000), sub("awaiting_previous")], 0, Money(20000))
        assert updated[1]["status"] == "awaiting_previous"


class TestClaimsSummary:
    """Tests for claims_summary and the predefined categories."""

    def test_summary(self) -> None:
        """Should count open and closed claims and their money."""
        claims = [
            {"status": "in_progress", "submissions": [sub("pending", 5000), sub("awaiting_previous")]},
            {"status": "closed", "submissions": [sub("approved", 8000, 6000), sub("approved", 2000, 2000)]},
            {"status": "draft", "submissions": [sub("draft", 1000)]},
        ]
        summary = claims_summary(claims)

        assert summary.pending_count == 1
        assert summary.pending_amount == Money(5000)
        assert summary.closed_count == 1
        assert summary.reimbursed_amount == Money(8000)

    def test_other_sorts_last(self) -> None:
        """Should sort Other after every other predefined category."""
        ordered = sorted(PREDEFINED_INSURANCE_CATEGORIES, key=lambda c: c["sort_order"])
        assert ordered[-1]["name"] == "Other"
        assert len(PREDEFINED_INSURANCE_CATEGORIES) == 11
