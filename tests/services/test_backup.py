"""Tests for billfold.services.backup."""

import json
from datetime import date
from pathlib import Path
from typing import Any

import pytest

from billfold.errors import ValidationError
from billfold.services import backup, insurance, months, recurring, sources
from billfold.store.schema import init_database


class TestExportBackup:
    """Tests for export_backup."""

    def test_writes_file(self, db_path: Path, checking: dict[str, Any], tmp_path: Path) -> None:
        """Should write a timestamped JSON file with every section."""
        path = backup.export_backup(tmp_path / "backups", db_path)

        assert path.parent == tmp_path / "backups"
        assert path.name.startswith("billfold_")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["version"] == backup.BACKUP_VERSION
        assert data["export_date"]
        assert [s["name"] for s in data["payment_sources"]] == ["Checking"]


class TestImportBackup:
    """Tests for import_backup."""

    def test_restore_into_new_database(self, db_path: Path, checking: dict[str, Any], tmp_path: Path) -> None:
        """Should restore records and month snapshots into another database."""
        recurring.create_recurring(
            "bill",
            {"name": "Rent", "amount": 150000, "billing_period": "monthly", "payment_source_id": checking["id"]},
            db_path,
        )
        months.create_month("2025-03", today=date(2025, 3, 1), db_path=db_path)
        path = backup.export_backup(tmp_path / "backups", db_path)

        restored = tmp_path / "restored.db"
        counts = backup.import_backup(path, restored)

        assert counts["bills"] == 1
        assert counts["months"] == 1
        assert [s["name"] for s in sources.list_sources(restored)] == ["Checking"]
        [(_, [rent])] = months.month_detail("2025-03", restored)["bills"]
        assert rent["expected_amount"] == 150000

    def test_reseeds_insurance_categories(self, tmp_path: Path) -> None:
        """Should restore the predefined claim categories missing from older backups."""
        path = tmp_path / "old.json"
        path.write_text(
            json.dumps(
                {
                    "export_date": "2024-01-01T00:00:00",
                    "bills": [],
                    "incomes": [],
                    "payment_sources": [],
                    "categories": [],
                }
            ),
            encoding="utf-8",
        )
        restored = tmp_path / "restored.db"
        init_database(restored)

        backup.import_backup(path, restored)

        assert len(insurance.list_insurance_categories(restored)) == 11

    def test_invalid_json(self, db_path: Path, checking: dict[str, Any], tmp_path: Path) -> None:
        """Should reject a broken file and leave the database untouched."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValidationError, match="not valid JSON"):
            backup.import_backup(path, db_path)
        assert len(sources.list_sources(db_path)) == 1

    def test_missing_sections(self, db_path: Path, tmp_path: Path) -> None:
        """Should list every missing required section."""
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"export_date": "2024-01-01", "bills": []}), encoding="utf-8")

        with pytest.raises(ValidationError) as exc_info:
            backup.import_backup(path, db_path)
        assert exc_info.value.errors == [
            "incomes must be an array",
            "payment_sources must be an array",
            "categories must be an array",
        ]
