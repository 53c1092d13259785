"""Shared fixtures."""

from pathlib import Path
from typing import Any

import pytest

from billfold.services import categories, sources
from billfold.store.schema import init_database


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """A freshly initialized database in a temporary directory."""
    path = tmp_path / "billfold.db"
    init_database(path)
    return path


@pytest.fixture
def checking(db_path: Path) -> dict[str, Any]:
    return sources.create_source({"name": "Checking", "type": "bank_account"}, db_path)


@pytest.fixture
def bill_category(db_path: Path) -> dict[str, Any]:
    return categories.create_category({"name": "Housing", "type": "bill"}, db_path)
