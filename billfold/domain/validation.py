"""Validation rules for everything a user can create or edit.

Each validator takes the record as a plain dict and returns a list of
human-readable error messages. An empty list means the record is valid.
Services refuse to write anything while the list is non-empty.
"""

import re
from typing import Any
from urllib.parse import urlparse

from billfold.dates import is_valid_iso_date
from billfold.domain.models import (
    BILLING_PERIODS,
    CATEGORY_TYPES,
    DEBT_ACCOUNT_TYPES,
    GOAL_CADENCES,
    GOAL_STATUSES,
    MAX_NAME_LENGTH,
    MIN_AMOUNT,
    PAYMENT_SOURCE_TYPES,
    TODO_RECURRENCES,
    TODO_STATUSES,
)

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_name(name: Any, label: str = "Name") -> list[str]:
    """Name must be non-blank and at most 100 characters."""
    errors = []
    if not isinstance(name, str) or not name.strip():
        errors.append(f"{label} cannot be blank or whitespace only")
    elif len(name) > MAX_NAME_LENGTH:
        errors.append(f"{label} cannot exceed {MAX_NAME_LENGTH} characters")
    return errors


def validate_amount(amount: Any, minimum: int = MIN_AMOUNT, label: str = "Amount") -> list[str]:
    """Amount must be an integer number of cents no smaller than ``minimum``."""
    if not _is_int(amount):
        return [f"{label} must be a whole number of cents"]
    if amount < minimum:
        if minimum == 0:
            return [f"{label} cannot be negative"]
        return [f"{label} must be a positive number in cents"]
    return []


def validate_recurring(data: dict[str, Any]) -> list[str]:
    """Validate a bill or income.

    Rules:
    - name and a positive amount are required
    - billing period must be one of BILLING_PERIODS
    - start_date is required for every period except monthly
    - monthly items use a day of month or a week/weekday pair, not both
    - payment_source_id is required
    """
    errors = validate_name(data.get("name"))
    errors += validate_amount(data.get("amount"))

    period = data.get("billing_period")
    if not period:
        errors.append("Billing period is required")
    elif period not in BILLING_PERIODS:
        errors.append("Billing period must be: monthly, bi_weekly, weekly, or semi_annually")

    start_date = data.get("start_date")
    if period in BILLING_PERIODS and period != "monthly" and not start_date:
        errors.append("Start date is required for bi-weekly, weekly, and semi-annual billing periods")
    elif start_date and not is_valid_iso_date(start_date):
        errors.append("Start date must be a valid date in YYYY-MM-DD format")

    day_of_month = data.get("day_of_month")
    week = data.get("recurrence_week")
    weekday = data.get("recurrence_day")
    if day_of_month is not None and (not _is_int(day_of_month) or not 1 <= day_of_month <= 31):
        errors.append("Day of month must be between 1 and 31")
    if week is not None and (not _is_int(week) or not 1 <= week <= 5):
        errors.append("Recurrence week must be between 1 and 5 (5 = last)")
    if weekday is not None and (not _is_int(weekday) or not 0 <= weekday <= 6):
        errors.append("Recurrence day must be between 0 (Sunday) and 6 (Saturday)")
    if period == "monthly":
        if (week is None) != (weekday is None):
            errors.append("Recurrence week and day must be given together")
        elif day_of_month is not None and week is not None:
            errors.append("Use either a day of month or a week and weekday, not both")

    if not data.get("payment_source_id"):
        errors.append("Payment source ID is required")

    return errors


def validate_payment_source(data: dict[str, Any]) -> list[str]:
    """Validate a payment source and its account flags."""
    errors = validate_name(data.get("name"))

    source_type = data.get("type")
    if source_type not in PAYMENT_SOURCE_TYPES:
        errors.append("Payment source type must be bank_account, credit_card, line_of_credit, cash, or investment")

    is_debt = source_type in DEBT_ACCOUNT_TYPES
    is_savings = bool(data.get("is_savings"))
    is_investment = bool(data.get("is_investment")) or source_type == "investment"
    pay_off_monthly = bool(data.get("pay_off_monthly"))

    if pay_off_monthly and source_type and not is_debt:
        errors.append("pay_off_monthly can only be enabled for credit cards and lines of credit")

    if data.get("exclude_from_leftover") and source_type and not is_debt and not (is_savings or is_investment):
        errors.append(
            "exclude_from_leftover can only be enabled for credit cards, lines of credit, "
            "or savings/investment accounts"
        )

    if is_savings and data.get("is_investment"):
        errors.append("An account cannot be both a savings account and an investment account")

    if (is_savings or is_investment) and pay_off_monthly:
        errors.append("Savings and investment accounts cannot have pay_off_monthly enabled")

    if is_savings and source_type and source_type != "bank_account":
        errors.append("is_savings can only be enabled for bank accounts")

    if data.get("is_investment") and source_type and source_type not in ("bank_account", "investment"):
        errors.append("is_investment can only be enabled for bank accounts or investment type")

    return errors


def validate_category(data: dict[str, Any]) -> list[str]:
    errors = validate_name(data.get("name"))
    if data.get("type") not in CATEGORY_TYPES:
        errors.append("Category type must be: bill, income, or variable")
    color = data.get("color")
    if color and not _HEX_COLOR.match(color):
        errors.append("Color must be a hex value like #3b82f6")
    return errors


def validate_goal(data: dict[str, Any]) -> list[str]:
    """Validate a savings goal."""
    errors = []
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("Name is required")
    elif len(name) > MAX_NAME_LENGTH:
        errors.append(f"Name cannot exceed {MAX_NAME_LENGTH} characters")

    target = data.get("target_amount")
    if not _is_int(target) or target <= 0:
        errors.append("Target amount must be greater than 0")

    if not data.get("linked_account_id"):
        errors.append("Linked account is required")

    target_date = data.get("target_date")
    if target_date and not is_valid_iso_date(target_date):
        errors.append("Target date must be in YYYY-MM-DD format")

    status = data.get("status")
    if status is not None and status not in GOAL_STATUSES:
        errors.append("Invalid status")

    cadence = data.get("cadence")
    if cadence is not None and cadence not in GOAL_CADENCES:
        errors.append("Cadence must be: weekly, biweekly, or monthly")

    return errors


def validate_todo(data: dict[str, Any]) -> list[str]:
    """Validate a todo template."""
    errors = []
    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        errors.append("Title is required")

    recurrence = data.get("recurrence", "none")
    if recurrence not in TODO_RECURRENCES:
        errors.append("Invalid recurrence type")
    elif recurrence == "none":
        due_date = data.get("due_date")
        if not due_date:
            errors.append("Due date is required for one-time todos")
        elif not is_valid_iso_date(due_date):
            errors.append("Due date must be in YYYY-MM-DD format")
    elif recurrence in ("weekly", "bi_weekly"):
        start_date = data.get("start_date")
        if not start_date:
            errors.append("Start date is required for weekly/bi-weekly recurrence")
        elif not is_valid_iso_date(start_date):
            errors.append("Start date must be in YYYY-MM-DD format")
    else:
        day = data.get("day_of_month")
        if day is None:
            errors.append("Day of month is required for monthly recurrence")
        elif not _is_int(day) or not 1 <= day <= 31:
            errors.append("Day of month must be between 1 and 31")

    status = data.get("status")
    if status is not None and status not in TODO_STATUSES:
        errors.append("Invalid status")

    return errors


def validate_family_member(data: dict[str, Any]) -> list[str]:
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        return ["Name is required and must be non-empty"]
    if len(name) > MAX_NAME_LENGTH:
        return [f"Name must be {MAX_NAME_LENGTH} characters or less"]
    return []


def is_valid_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_insurance_plan(data: dict[str, Any]) -> list[str]:
    errors = []
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("Name is required and must be non-empty")
    portal_url = data.get("portal_url")
    if portal_url and not is_valid_url(portal_url):
        errors.append("Portal URL must be a valid URL")
    return errors


def validate_insurance_category(data: dict[str, Any]) -> list[str]:
    errors = []
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("Name is required and must be non-empty")
    sort_order = data.get("sort_order")
    if sort_order is not None and (not _is_int(sort_order) or sort_order < 0):
        errors.append("Sort order must be a non-negative number")
    return errors


def validate_claim(data: dict[str, Any]) -> list[str]:
    """Validate an insurance claim header."""
    errors = []
    if not data.get("family_member_id"):
        errors.append("Family member is required")
    if not data.get("category_id"):
        errors.append("Category is required")

    service_date = data.get("service_date")
    if not service_date:
        errors.append("Service date is required")
    elif not is_valid_iso_date(service_date):
        errors.append("Service date must be a valid date")

    total = data.get("total_amount")
    if total is None:
        errors.append("Total amount is required")
    else:
        errors += validate_amount(total, minimum=0, label="Total amount")

    return errors


def validate_expected_expense(data: dict[str, Any]) -> list[str]:
    """Validate an upcoming appointment expected to become a claim.

    Cost and reimbursement may be zero. The reimbursement cannot exceed the
    cost, and a payment source is required for the out-of-pocket part.
    """
    errors = []
    if not data.get("family_member_id"):
        errors.append("Family member is required")
    if not data.get("category_id"):
        errors.append("Category is required")

    appointment = data.get("service_date")
    if not appointment:
        errors.append("Appointment date is required")
    elif not is_valid_iso_date(appointment):
        errors.append("Appointment date must be a valid date")

    cost = data.get("expected_cost")
    reimbursement = data.get("expected_reimbursement")
    cost_errors = validate_amount(cost, minimum=0, label="Expected cost")
    reimbursement_errors = validate_amount(reimbursement, minimum=0, label="Expected reimbursement")
    errors += cost_errors + reimbursement_errors
    if not cost_errors and not reimbursement_errors and reimbursement > cost:
        errors.append("Expected reimbursement cannot be more than the expected cost")

    if not data.get("payment_source_id"):
        errors.append("Payment source is required")
    return errors


def validate_backup(data: Any) -> list[str]:
    """Check a backup has the sections every restore needs.

    Goals, todos, insurance and months are optional so that backups made
    before those existed can still be restored.
    """
    if not isinstance(data, dict):
        return ["Backup must be a JSON object"]
    errors = []
    if not data.get("export_date"):
        errors.append("export_date is required")
    for section in ("bills", "incomes", "payment_sources", "categories"):
        if not isinstance(data.get(section), list):
            errors.append(f"{section} must be an array")
    for section in ("savings_goals", "todos", "insurance_plans", "family_members", "insurance_claims", "months"):
        if section in data and not isinstance(data[section], list):
            errors.append(f"{section} must be an array")
    return errors
