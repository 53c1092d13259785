"""Tests for billfold.domain.validation."""

from typing import Any

import pytest

from billfold.domain.validation import (
    is_valid_url,
    validate_amount,
    validate_backup,
    validate_category,
    validate_claim,
    validate_expected_expense,
    validate_family_member,
    validate_goal,
    validate_insurance_category,
    validate_insurance_plan,
    validate_name,
    validate_payment_source,
    validate_recurring,
    validate_todo,
)


def make_bill(**overrides: Any) -> dict[str, Any]:
    bill = {"name": "Rent", "amount": 150000, "billing_period": "monthly", "day_of_month": 1, "payment_source_id": 1}
    bill.update(overrides)
    return bill


class TestValidateName:
    """Tests for validate_name."""

    def test_valid(self) -> None:
        """Should accept a normal name."""
        assert validate_name("Groceries") == []

    def test_whitespace_only(self) -> None:
        """Should reject blank names."""
        assert validate_name("   ") == ["Name cannot be blank or whitespace only"]

    def test_too_long(self) -> None:
        """Should reject names over 100 characters."""
        assert validate_name("x" * 101) == ["Name cannot exceed 100 characters"]

    def test_exactly_max(self) -> None:
        """Should accept exactly 100 characters."""
        assert validate_name("x" * 100) == []


class TestValidateAmount:
    """Tests for validate_amount."""

    def test_positive(self) -> None:
        """Should accept positive cents."""
        assert validate_amount(1) == []

    def test_zero_rejected_by_default(self) -> None:
        """Should require at least one cent by default."""
        assert validate_amount(0) == ["Amount must be a positive number in cents"]

    def test_zero_allowed_with_minimum(self) -> None:
        """Should allow zero when the minimum is zero."""
        assert validate_amount(0, minimum=0) == []
        assert validate_amount(-1, minimum=0) == ["Amount cannot be negative"]

    @pytest.mark.parametrize("value", [1.5, "100", None, True])
    def test_non_integer(self, value: Any) -> None:
        """Should reject anything but whole cents."""
        assert validate_amount(value) == ["Amount must be a whole number of cents"]


class TestValidateRecurring:
    """Tests for validate_recurring."""

    def test_valid_monthly(self) -> None:
        """Should accept a simple monthly bill."""
        assert validate_recurring(make_bill()) == []

    def test_weekly_needs_start_date(self) -> None:
        """Should require a start date outside monthly."""
        errors = validate_recurring(make_bill(billing_period="weekly", day_of_month=None))
        assert "Start date is required for bi-weekly, weekly, and semi-annual billing periods" in errors

    def test_unknown_period(self) -> None:
        """Should reject unknown periods."""
        errors = validate_recurring(make_bill(billing_period="yearly"))
        assert errors == ["Billing period must be: monthly, bi_weekly, weekly, or semi_annually"]

    def test_invalid_start_date(self) -> None:
        """Should reject malformed start dates."""
        errors = validate_recurring(make_bill(start_date="2025-13-01"))
        assert errors == ["Start date must be a valid date in YYYY-MM-DD format"]

    def test_day_out_of_range(self) -> None:
        """Should reject day 32."""
        assert validate_recurring(make_bill(day_of_month=32)) == ["Day of month must be between 1 and 31"]

    def test_week_without_weekday(self) -> None:
        """Should require week and weekday together."""
        errors = validate_recurring(make_bill(day_of_month=None, recurrence_week=2))
        assert errors == ["Recurrence week and day must be given together"]

    def test_both_monthly_modes(self) -> None:
        """Should refuse a day of month and a weekday pair together."""
        errors = validate_recurring(make_bill(recurrence_week=2, recurrence_day=5))
        assert errors == ["Use either a day of month or a week and weekday, not both"]

    def test_nth_weekday_valid(self) -> None:
        """Should accept a week and weekday pair."""
        assert validate_recurring(make_bill(day_of_month=None, recurrence_week=5, recurrence_day=0)) == []

    def test_weekday_out_of_range(self) -> None:
        """Should reject weekday 7."""
        errors = validate_recurring(make_bill(day_of_month=None, recurrence_week=1, recurrence_day=7))
        assert errors == ["Recurrence day must be between 0 (Sunday) and 6 (Saturday)"]

    def test_source_required(self) -> None:
        """Should require a payment source."""
        assert validate_recurring(make_bill(payment_source_id=None)) == ["Payment source ID is required"]

    def test_collects_every_error(self) -> None:
        """Should report all problems at once."""
        errors = validate_recurring({"name": "", "amount": 0})
        assert len(errors) == 4


class TestValidatePaymentSource:
    """Tests for validate_payment_source."""

    def test_bank_account(self) -> None:
        """Should accept a plain bank account."""
        assert validate_payment_source({"name": "Checking", "type": "bank_account"}) == []

    def test_unknown_type(self) -> None:
        """Should reject unknown types."""
        errors = validate_payment_source({"name": "Wallet", "type": "crypto"})
        assert errors == ["Payment source type must be bank_account, credit_card, line_of_credit, cash, or investment"]

    def test_pay_off_monthly_only_for_debt(self) -> None:
        """Should only allow pay_off_monthly on credit accounts."""
        errors = validate_payment_source({"name": "Checking", "type": "bank_account", "pay_off_monthly": True})
        assert errors == ["pay_off_monthly can only be enabled for credit cards and lines of credit"]
        assert validate_payment_source({"name": "Visa", "type": "credit_card", "pay_off_monthly": True}) == []

    def test_exclude_from_leftover(self) -> None:
        """Should allow exclusion for debt and savings accounts only."""
        assert validate_payment_source({"name": "Cash", "type": "cash", "exclude_from_leftover": True}) == [
            "exclude_from_leftover can only be enabled for credit cards, lines of credit, "
            "or savings/investment accounts"
        ]
        savings = {"name": "Savings", "type": "bank_account", "is_savings": True, "exclude_from_leftover": True}
        assert validate_payment_source(savings) == []

    def test_savings_only_bank_accounts(self) -> None:
        """Should only allow is_savings on bank accounts."""
        errors = validate_payment_source({"name": "Card", "type": "credit_card", "is_savings": True})
        assert errors == ["is_savings can only be enabled for bank accounts"]

    def test_savings_and_investment_exclusive(self) -> None:
        """Should refuse an account that is both savings and investment."""
        data = {"name": "Mixed", "type": "bank_account", "is_savings": True, "is_investment": True}
        assert "An account cannot be both a savings account and an investment account" in validate_payment_source(
            data
        )


class TestValidateCategory:
    """Tests for validate_category."""

    def test_valid(self) -> None:
        """Should accept a name, type and hex color."""
        assert validate_category({"name": "Utilities", "type": "bill", "color": "#3b82f6"}) == []

    def test_bad_color(self) -> None:
        """Should reject colors that are not #rrggbb."""
        assert validate_category({"name": "Utilities", "type": "bill", "color": "blue"}) == [
            "Color must be a hex value like #3b82f6"
        ]

    def test_bad_type(self) -> None:
        """Should reject unknown types."""
        assert validate_category({"name": "Misc", "type": "other"}) == [
            "Category type must be: bill, income, or variable"
        ]


class TestValidateGoal:
    """Tests for validate_goal."""

    def test_valid(self) -> None:
        """Should accept a complete goal."""
        goal = {"name": "Bike", "target_amount": 50000, "linked_account_id": 1, "target_date": "2026-06-01"}
        assert validate_goal(goal) == []

    def test_missing_fields(self) -> None:
        """Should report the name, amount and account."""
        assert validate_goal({}) == [
            "Name is required",
            "Target amount must be greater than 0",
            "Linked account is required",
        ]

    def test_bad_cadence(self) -> None:
        """Should reject unknown cadences."""
        goal = {"name": "Bike", "target_amount": 50000, "linked_account_id": 1, "cadence": "daily"}
        assert validate_goal(goal) == ["Cadence must be: weekly, biweekly, or monthly"]


class TestValidateTodo:
    """Tests for validate_todo."""

    def test_one_time_needs_due_date(self) -> None:
        """Should require a due date for one-time todos."""
        assert validate_todo({"title": "Taxes", "recurrence": "none"}) == ["Due date is required for one-time todos"]

    def test_weekly_needs_start(self) -> None:
        """Should require a start date for weekly todos."""
        assert validate_todo({"title": "Bins", "recurrence": "weekly"}) == [
            "Start date is required for weekly/bi-weekly recurrence"
        ]

    def test_monthly_day_range(self) -> None:
        """Should check the monthly day."""
        assert validate_todo({"title": "Review", "recurrence": "monthly", "day_of_month": 0}) == [
            "Day of month must be between 1 and 31"
        ]

    def test_valid_monthly(self) -> None:
        """Should accept a monthly todo with a day."""
        assert validate_todo({"title": "Review", "recurrence": "monthly", "day_of_month": 28}) == []


class TestValidateInsurance:
    """Tests for the insurance validators."""

    def test_member_name(self) -> None:
        """Should require a member name."""
        assert validate_family_member({"name": " "}) == ["Name is required and must be non-empty"]
        assert validate_family_member({"name": "Sam"}) == []

    def test_url(self) -> None:
        """Should accept only http(s) URLs with a host."""
        assert is_valid_url("https://portal.example.com/claims")
        assert not is_valid_url("portal.example.com")
        assert not is_valid_url("ftp://example.com")

    def test_plan_portal(self) -> None:
        """Should check the portal URL."""
        assert validate_insurance_plan({"name": "Dental", "portal_url": "nope"}) == ["Portal URL must be a valid URL"]

    def test_category_sort_order(self) -> None:
        """Should reject negative sort orders."""
        assert validate_insurance_category({"name": "Eyes", "sort_order": -1}) == [
            "Sort order must be a non-negative number"
        ]

    def test_claim_valid(self) -> None:
        """Should accept a complete claim."""
        claim = {"family_member_id": 1, "category_id": 2, "service_date": "2025-03-01", "total_amount": 12000}
        assert validate_claim(claim) == []

    def test_claim_missing_everything(self) -> None:
        """Should report each missing field."""
        assert validate_claim({}) == [
            "Family member is required",
            "Category is required",
            "Service date is required",
            "Total amount is required",
        ]

    def test_expected_expense_valid(self) -> None:
        """Should accept an appointment with no reimbursement expected."""
        expense = {
            "family_member_id": 1,
            "category_id": 2,
            "service_date": "2025-03-18",
            "expected_cost": 20000,
            "expected_reimbursement": 0,
            "payment_source_id": 3,
        }
        assert validate_expected_expense(expense) == []

    def test_expected_expense_errors(self) -> None:
        """Should report a bad date, a reimbursement above cost and a missing source."""
        expense = {
            "family_member_id": 1,
            "category_id": 2,
            "service_date": "2025-02-30",
            "expected_cost": 10000,
            "expected_reimbursement": 12000,
        }
        assert validate_expected_expense(expense) == [
            "Appointment date must be a valid date",
            "Expected reimbursement cannot be more than the expected cost",
            "Payment source is required",
        ]


class TestValidateBackup:
    """Tests for validate_backup."""

    def test_minimal_backup(self) -> None:
        """Should accept the four required sections."""
        data = {"export_date": "2025-01-01T00:00:00", "bills": [], "incomes": [], "payment_sources": [], "categories": []}
        assert validate_backup(data) == []

    def test_not_an_object(self) -> None:
        """Should reject non-objects."""
        assert validate_backup([]) == ["Backup must be a JSON object"]

    def test_missing_sections(self) -> None:
        """Should name every missing section."""
        assert validate_backup({}) == [
            "export_date is required",
            "bills must be an array",
            "incomes must be an array",
            "payment_sources must be an array",
            "categories must be an array",
        ]

    def test_optional_section_wrong_type(self) -> None:
        """Should reject optional sections that are not lists."""
        data = {
            "export_date": "2025-01-01",
            "bills": [],
            "incomes": [],
            "payment_sources": [],
            "categories": [],
            "months": {},
        }
        assert validate_backup(data) == ["months must be an array"]
