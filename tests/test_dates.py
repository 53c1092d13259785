"""Tests for billfold.dates."""

from datetime import date

import pytest

from billfold.dates import (
    add_months,
    clamped_date,
    days_in_month,
    first_day,
    is_valid_iso_date,
    is_valid_month,
    month_of,
    month_range,
    next_month,
    normalize_date,
    parse_iso_date,
    previous_month,
)
from billfold.domain.models import Month


class TestMonthRange:
    """Tests for month_range."""

    def test_january_range(self) -> None:
        """Should calculate range for January."""
        since, until, label = month_range(Month("2025-01"))

        assert since == "2025-01-01"
        assert until == "2025-02-01"
        assert label == "January 2025"

    def test_december_range_crosses_year(self) -> None:
        """Should handle December (crosses year boundary)."""
        since, until, label = month_range(Month("2025-12"))

        assert since == "2025-12-01"
        assert until == "2026-01-01"
        assert label == "December 2025"

    def test_february_non_leap_year(self) -> None:
        """Should handle February in non-leap year."""
        since, until, label = month_range(Month("2025-02"))

        assert since == "2025-02-01"
        assert until == "2025-03-01"  # 28 days in Feb 2025
        assert label == "February 2025"

    def test_february_leap_year(self) -> None:
        """Should handle February in leap year."""
        since, until, label = month_range(Month("2024-02"))

        assert since == "2024-02-01"
        assert until == "2024-03-01"  # 29 days in Feb 2024
        assert label == "February 2024"

    def test_thirty_day_month(self) -> None:
        """Should handle 30-day months."""
        since, until, label = month_range(Month("2025-04"))

        assert since == "2025-04-01"
        assert until == "2025-05-01"
        assert label == "April 2025"

    def test_thirty_one_day_month(self) -> None:
        """Should handle 31-day months."""
        since, until, label = month_range(Month("2025-03"))

        assert since == "2025-03-01"
        assert until == "2025-04-01"
        assert label == "March 2025"

    def test_all_months_of_year(self) -> None:
        """Should correctly handle all 12 months."""
        expected = [
            ("2025-01-01", "2025-02-01", "January 2025"),
            ("2025-02-01", "2025-03-01", "February 2025"),
            ("2025-03-01", "2025-04-01", "March 2025"),
            ("2025-04-01", "2025-05-01", "April 2025"),
            ("2025-05-01", "2025-06-01", "May 2025"),
            ("2025-06-01", "2025-07-01", "June 2025"),
            ("2025-07-01", "2025-08-01", "July 2025"),
            ("2025-08-01", "2025-09-01", "August 2025"),
            ("2025-09-01", "2025-10-01", "September 2025"),
            ("2025-10-01", "2025-11-01", "October 2025"),
            ("2025-11-01", "2025-12-01", "November 2025"),
            ("2025-12-01", "2026-01-01", "December 2025"),
        ]

        for month_num in range(1, 13):
            month_str = f"2025-{month_num:02d}"
            result = month_range(Month(month_str))
            assert result == expected[month_num - 1]

    def test_invalid_month_format_raises_valueerror(self) -> None:
        """Should raise ValueError for invalid month format."""
        with pytest.raises(ValueError):
            month_range(Month("invalid"))

    def test_invalid_month_number_raises_valueerror(self) -> None:
        """Should raise ValueError for invalid month number."""
        with pytest.raises(ValueError):
            month_range(Month("2025-13"))


class TestIsValidMonth:
    """Tests for is_valid_month."""

    def test_accepts_year_month(self) -> None:
        """Should accept YYYY-MM."""
        assert is_valid_month("2025-03")

    @pytest.mark.parametrize("value", [None, "", "2025-3", "2025-13", "2025-03-01", "March"])
    def test_rejects_other_shapes(self, value: str | None) -> None:
        """Should reject anything that is not a real YYYY-MM month."""
        assert not is_valid_month(value)


class TestParseIsoDate:
    """Tests for parse_iso_date and is_valid_iso_date."""

    def test_parses_strict_iso(self) -> None:
        """Should parse YYYY-MM-DD."""
        assert parse_iso_date("2024-02-29") == date(2024, 2, 29)

    def test_rejects_impossible_date(self) -> None:
        """Should return None for dates that do not exist."""
        assert parse_iso_date("2025-02-29") is None
        assert not is_valid_iso_date("2025-02-29")

    def test_rejects_unpadded(self) -> None:
        """Should require zero-padded fields."""
        assert parse_iso_date("2025-3-1") is None

    def test_none(self) -> None:
        """Should treat None as invalid."""
        assert parse_iso_date(None) is None


class TestAddMonths:
    """Tests for add_months and its helpers."""

    def test_clamps_to_short_month(self) -> None:
        """Should pull the 31st back to the end of February."""
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)

    def test_leap_february(self) -> None:
        """Should land on the 29th in a leap year."""
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_negative_crosses_year(self) -> None:
        """Should go back across a year boundary."""
        assert add_months(date(2025, 3, 15), -3) == date(2024, 12, 15)

    def test_preferred_day_restored(self) -> None:
        """Should use the preferred day when the target month has it."""
        assert add_months(date(2025, 2, 28), 1, day=31) == date(2025, 3, 31)

    def test_clamped_date(self) -> None:
        """Should clamp an out-of-range day."""
        assert clamped_date(2025, 4, 31) == date(2025, 4, 30)

    def test_days_in_month(self) -> None:
        """Should know month lengths."""
        assert days_in_month(2024, 2) == 29
        assert days_in_month(2025, 2) == 28
        assert days_in_month(2025, 12) == 31


class TestMonthNavigation:
    """Tests for month_of, first_day, next_month and previous_month."""

    def test_month_of_date(self) -> None:
        """Should format a date's month."""
        assert month_of(date(2025, 7, 4)) == "2025-07"

    def test_month_of_string(self) -> None:
        """Should take the month from an ISO string."""
        assert month_of("2025-07-04") == "2025-07"

    def test_first_day(self) -> None:
        """Should return the 1st of the month."""
        assert first_day(Month("2025-07")) == date(2025, 7, 1)

    def test_next_month_wraps_year(self) -> None:
        """Should roll December into January."""
        assert next_month(Month("2025-12")) == "2026-01"

    def test_previous_month_wraps_year(self) -> None:
        """Should roll January back into December."""
        assert previous_month(Month("2025-01")) == "2024-12"


class TestNormalizeDate:
    """Tests for normalize_date."""

    def test_iso_unchanged(self) -> None:
        """Should return ISO input as-is."""
        assert normalize_date("2025-03-05") == "2025-03-05"

    def test_day_first_slashes(self) -> None:
        """Should read slashed dates day first."""
        assert normalize_date("05/03/2025") == "2025-03-05"

    def test_written_month(self) -> None:
        """Should accept a written month name."""
        assert normalize_date("5 March 2025") == "2025-03-05"

    def test_garbage_raises_valueerror(self) -> None:
        """Should raise ValueError for text that is not a date."""
        with pytest.raises(ValueError):
            normalize_date("not a date")
