"""Domain type definitions for billfold.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in cents (minor units)
- Month: Month in YYYY-MM format
- ISODate: Calendar date in YYYY-MM-DD format

The tuples below are the closed vocabularies stored in the database.
"""

from typing import NewType

# Money amounts are stored as cents (minor units) to avoid floating point errors
Money = NewType("Money", int)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

# Dates are always in YYYY-MM-DD format (e.g., "2025-01-31")
ISODate = NewType("ISODate", str)

BILLING_PERIODS = ("monthly", "bi_weekly", "weekly", "semi_annually")

PAYMENT_SOURCE_TYPES = ("bank_account", "credit_card", "line_of_credit", "investment", "cash")
DEBT_ACCOUNT_TYPES = ("credit_card", "line_of_credit")

CATEGORY_TYPES = ("bill", "income", "variable")

GOAL_STATUSES = ("saving", "paused", "bought", "abandoned", "archived")
GOAL_CADENCES = ("weekly", "biweekly", "monthly")

TODO_RECURRENCES = ("none", "weekly", "bi_weekly", "monthly")
TODO_STATUSES = ("pending", "completed")

CLAIM_STATUSES = ("expected", "draft", "in_progress", "closed")
SUBMISSION_STATUSES = ("draft", "awaiting_previous", "pending", "approved", "denied")

# Name of the category that holds savings-goal bills and contributions
SAVINGS_GOALS_CATEGORY = "Savings Goals"

# Days ahead that count as "due soon"
DUE_SOON_DAYS = 3

MAX_NAME_LENGTH = 100
MIN_AMOUNT = Money(1)
