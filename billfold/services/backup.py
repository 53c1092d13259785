"""JSON backup and restore."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog

from billfold.domain.validation import validate_backup
from billfold.errors import ValidationError, ensure_valid
from billfold.store import backup as backup_store
from billfold.store.schema import init_database

log = structlog.get_logger(__name__)

BACKUP_VERSION = 1


def build_backup(db_path: Path | None = None) -> dict[str, Any]:
    data = backup_store.export_data(db_path)
    return {"export_date": datetime.now().isoformat(timespec="seconds"), "version": BACKUP_VERSION, **data}


def export_backup(output_dir: Path, db_path: Path | None = None) -> Path:
    """Write every record to a timestamped JSON file.

    Args:
        output_dir: Directory for the backup file (created if missing).
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Path of the written file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = output_dir / f"billfold_{timestamp}.json"
    data = build_backup(db_path)
    with open(backup_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    log.info("backup.exported", path=str(backup_path), months=len(data["months"]))
    return backup_path


def load_backup(backup_path: Path) -> dict[str, Any]:
    """Read and validate a backup file.

    Raises:
        ValidationError: If the file is not JSON or misses required sections.
        OSError: If the file cannot be read.
    """
    try:
        with open(backup_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError([f"Backup is not valid JSON: {e}"]) from e
    ensure_valid(validate_backup(data))
    return data


def import_backup(backup_path: Path, db_path: Path | None = None) -> dict[str, int]:
    """Replace all data with a backup's contents.

    The backup is validated first; an invalid file leaves the database
    untouched.

    Returns:
        Count of restored records per section.
    """
    data = load_backup(backup_path)
    init_database(db_path)
    counts = backup_store.import_data(data, db_path)
    # Older backups may lack the predefined insurance categories
    init_database(db_path)
    log.info("backup.imported", path=str(backup_path), export_date=data["export_date"], **counts)
    return counts
