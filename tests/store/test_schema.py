"""Tests for billfold.store.schema."""

import sqlite3
from pathlib import Path

import pytest

from billfold.store import schema
from billfold.store.schema import TABLES, database_exists, get_db_path, init_database


def table_names(db_path: Path) -> set[str]:
    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
        return {row[0] for row in rows}
    finally:
        conn.close()


def insurance_category_count(db_path: Path) -> int:
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute("SELECT COUNT(*) FROM insurance_categories").fetchone()[0]
    finally:
        conn.close()


class TestInitDatabase:
    """Tests for init_database."""

    def test_creates_all_tables(self, tmp_path: Path) -> None:
        """Should create every table and the parent directory."""
        db_path = tmp_path / "nested" / "billfold.db"
        init_database(db_path)
        assert database_exists(db_path)
        assert set(TABLES) <= table_names(db_path)

    def test_seeds_insurance_categories(self, db_path: Path) -> None:
        """Should seed the eleven predefined claim categories."""
        assert insurance_category_count(db_path) == 11

    def test_idempotent(self, db_path: Path) -> None:
        """Should not duplicate seeds when run again."""
        init_database(db_path)
        init_database(db_path)
        assert insurance_category_count(db_path) == 11

    def test_adds_missing_columns(self, db_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should add registered columns to an existing database, once."""
        monkeypatch.setattr(schema, "MIGRATIONS", {"todos": [("priority", "INTEGER NOT NULL DEFAULT 0")]})

        init_database(db_path)
        init_database(db_path)

        conn = sqlite3.connect(db_path)
        columns = [row[1] for row in conn.execute("PRAGMA table_info(todos)").fetchall()]
        conn.close()
        assert columns.count("priority") == 1


class TestGetDbPath:
    """Tests for get_db_path."""

    def test_uses_xdg_data_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should place the database under XDG_DATA_HOME."""
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert get_db_path() == tmp_path / "billfold" / "billfold.db"

    def test_missing_database(self, tmp_path: Path) -> None:
        """Should report a missing file as not existing."""
        assert not database_exists(tmp_path / "absent.db")
