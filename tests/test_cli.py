"""End-to-end tests for the billfold command line."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from typer.testing import CliRunner

from billfold.cli import app
from billfold.logs import LOGGER_NAME

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the database and config at a temporary directory."""
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    yield tmp_path
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = True
    structlog.reset_defaults()


def invoke(*args: str) -> str:
    result = runner.invoke(app, list(args))
    assert result.exit_code == 0, result.output
    return result.output


class TestInit:
    """Tests for billfold init."""

    def test_creates_database_and_config(self, isolated_home: Path) -> None:
        """Should create the database and config file."""
        output = invoke("init")
        assert "Initialization complete" in output
        assert (isolated_home / "data" / "billfold" / "billfold.db").exists()
        assert (isolated_home / "config" / "billfold" / "config.toml").exists()

    def test_refuses_overwrite(self) -> None:
        """Should refuse to re-initialize without --force."""
        invoke("init")
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1

    def test_missing_database(self) -> None:
        """Should tell the user to run init first."""
        result = runner.invoke(app, ["sources", "list"])
        assert result.exit_code == 1
        assert "Database not found" in result.output


class TestBudgetFlow:
    """Tests for a month built from sources and bills."""

    def test_sources(self) -> None:
        """Should add and list a payment source."""
        invoke("init")
        assert "Added payment source #1: Checking" in invoke("sources", "add", "Checking")
        assert "Checking" in invoke("sources", "list")

    def test_month_shows_bills(self) -> None:
        """Should snapshot a bill into a month and show it."""
        invoke("init")
        invoke("sources", "add", "Checking")
        invoke("bills", "add", "Rent", "1500", "--source", "1", "--day", "1")

        assert "Created 2025-03 with 1 item(s)" in invoke("months", "create", "2025-03")
        assert "Rent" in invoke("months", "show", "2025-03")

    def test_duplicate_month(self) -> None:
        """Should exit with an error when the month already exists."""
        invoke("init")
        invoke("months", "create", "2025-03")
        result = runner.invoke(app, ["months", "create", "2025-03"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_invalid_amount(self) -> None:
        """Should reject an amount that is not a number."""
        invoke("init")
        invoke("sources", "add", "Checking")
        result = runner.invoke(app, ["bills", "add", "Rent", "lots", "--source", "1"])
        assert result.exit_code == 1
        assert "Invalid amount" in result.output

    def test_amount_too_large(self) -> None:
        """Should report an oversized amount instead of crashing."""
        invoke("init")
        invoke("sources", "add", "Checking")
        result = runner.invoke(app, ["bills", "add", "Rent", "1" * 30, "--source", "1"])
        assert result.exit_code == 1
        assert "Invalid amount" in result.output

    def test_backup(self, isolated_home: Path) -> None:
        """Should write a backup file to the chosen directory."""
        invoke("init")
        invoke("sources", "add", "Checking")
        invoke("backup", "--output", str(isolated_home / "backups"))
        assert len(list((isolated_home / "backups").glob("billfold_*.json"))) == 1


class TestOutlook:
    """Tests for the projection, calendar and due date commands."""

    def test_calendar(self) -> None:
        """Should list the month's bills by date."""
        invoke("init")
        invoke("sources", "add", "Checking")
        invoke("bills", "add", "Rent", "1500", "--source", "1", "--day", "1")
        invoke("months", "create", "2025-03")

        output = invoke("months", "calendar", "2025-03")

        assert "Rent" in output
        assert "1 event(s): 1 bill(s)" in output

    def test_projection_needs_balance(self) -> None:
        """Should exit with an error until balances are recorded."""
        invoke("init")
        invoke("sources", "add", "Checking")
        invoke("months", "create", "2025-03")
        result = runner.invoke(app, ["months", "projection", "2025-03"])
        assert result.exit_code == 1
        assert "Missing bank balances" in result.output

        invoke("months", "balance", "1", "2000", "--month", "2025-03")
        assert "Starting balance" in invoke("months", "projection", "2025-03")


class TestExpectedExpenses:
    """Tests for recording and converting an expected expense."""

    def test_expect_and_convert(self) -> None:
        """Should number the claim only once it is converted."""
        invoke("init")
        invoke("sources", "add", "Checking")
        invoke("plans", "add", "Work Health")
        invoke("family", "add", "Alex", "--plans", "1")

        assert "Expected expense 1 on 2025-03-18" in invoke(
            "claims", "expect", "1", "1", "2025-03-18", "200", "150", "--source", "1"
        )
        assert "Alex" in invoke("claims", "expected", "--month", "2025-03")
        assert "Converted to claim #1 for" in invoke("claims", "convert", "1", "220")
        assert "No expected expenses" in invoke("claims", "expected")
