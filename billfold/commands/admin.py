"""Admin commands for init, JSON backup and restore."""

import sqlite3
import sys
from pathlib import Path

import typer

from billfold.commands.common import console, fail, handled_errors, require_database
from billfold.config import create_default_config, get_backup_dir, get_config_path
from billfold.services.backup import export_backup, import_backup
from billfold.store.schema import get_db_path, init_database


def run_migration(db_path: Path) -> None:
    """Run database migrations on existing database."""
    console.print(f"[cyan]Running migrations on {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Migrations complete")
    console.print("[dim]Database schema is up to date[/dim]")


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Initialize new database and config."""
    if db_path.exists():
        db_path.unlink()

    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Database initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(force: bool = False, migrate: bool = False) -> None:
    """Initialize billfold database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        # Migration path: update existing database only
        if migrate:
            if not db_exists:
                console.print("[red]No database found to migrate[/red]", style="bold")
                console.print(f"[dim]Expected location: {db_path}[/dim]")
                sys.exit(1)
            run_migration(db_path)
            return

        # Guard: refuse to overwrite without force flag
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'billfold init --force' to start over[/yellow]")
            console.print("[yellow]Or 'billfold init --migrate' to update database schema only[/yellow]")
            sys.exit(1)

        run_full_init(db_path, config_path)

    except sqlite3.Error as e:
        fail(f"Database error: {e}")
    except OSError as e:
        fail(f"Filesystem error: {e}")


def backup_command(output_dir: str | None = None) -> None:
    """Export every record to a JSON backup file."""
    require_database()
    backup_dir = Path(output_dir).expanduser() if output_dir else get_backup_dir()

    with handled_errors():
        try:
            backup_path = export_backup(backup_dir)
        except OSError as e:
            fail(f"Backup failed: {e}")

    console.print(f"[green]✓[/green] Backup written to: {backup_path}")


def restore_command(backup_file: str, yes: bool = False) -> None:
    """Replace all data with the contents of a JSON backup."""
    require_database()
    backup_path = Path(backup_file).expanduser()
    if not backup_path.exists():
        fail(f"Backup file not found: {backup_path}")

    if not yes and not typer.confirm("This replaces ALL current data. Continue?", default=False):
        console.print("[yellow]Restore cancelled[/yellow]")
        return

    with handled_errors():
        try:
            counts = import_backup(backup_path)
        except OSError as e:
            fail(f"Restore failed: {e}")

    console.print("[green]✓[/green] Restore complete")
    for section, count in counts.items():
        console.print(f"  {section.replace('_', ' ')}: {count}")
