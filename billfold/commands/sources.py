"""Payment source commands."""

from typing import Any

from rich.table import Table

from billfold.commands.common import console, handled_errors, require_database, yes_no
from billfold.services import sources


def list_sources_command(all: bool = False) -> None:
    """List payment sources."""
    require_database()
    with handled_errors():
        rows = sources.list_sources(active_only=not all)

    if not rows:
        console.print("[yellow]No payment sources yet. Add one with 'billfold sources add'.[/yellow]")
        return

    table = Table(title="Payment Sources")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Pay off monthly", justify="center")
    table.add_column("Excluded from leftover", justify="center")
    table.add_column("Savings", justify="center")
    table.add_column("Active", justify="center")
    for row in rows:
        table.add_row(
            str(row["id"]),
            row["name"],
            row["type"].replace("_", " "),
            yes_no(row["pay_off_monthly"]),
            yes_no(row["exclude_from_leftover"]),
            yes_no(row["is_savings"]),
            yes_no(row["is_active"]),
        )
    console.print(table)


def add_source_command(
    name: str,
    source_type: str,
    pay_off_monthly: bool = False,
    exclude_from_leftover: bool = False,
    is_savings: bool = False,
) -> None:
    """Create a payment source."""
    require_database()
    with handled_errors():
        source = sources.create_source(
            {
                "name": name,
                "type": source_type,
                "pay_off_monthly": pay_off_monthly,
                "exclude_from_leftover": exclude_from_leftover,
                "is_savings": is_savings,
            }
        )
    console.print(f"[green]✓ Added payment source #{source['id']}: {source['name']}[/green]")


def edit_source_command(
    source_id: int,
    name: str | None = None,
    pay_off_monthly: bool | None = None,
    exclude_from_leftover: bool | None = None,
    is_savings: bool | None = None,
) -> None:
    """Change a payment source."""
    require_database()
    updates: dict[str, Any] = {
        key: value
        for key, value in {
            "name": name,
            "pay_off_monthly": pay_off_monthly,
            "exclude_from_leftover": exclude_from_leftover,
            "is_savings": is_savings,
        }.items()
        if value is not None
    }
    if not updates:
        console.print("[yellow]Nothing to change[/yellow]")
        return
    with handled_errors():
        source = sources.update_source(source_id, updates)
    console.print(f"[green]✓ Updated payment source #{source['id']}: {source['name']}[/green]")


def set_source_active_command(source_id: int, active: bool) -> None:
    require_database()
    with handled_errors():
        source = sources.update_source(source_id, {"is_active": active})
    state = "activated" if active else "deactivated"
    console.print(f"[green]✓ {source['name']} {state}[/green]")


def remove_source_command(source_id: int) -> None:
    """Delete an unused payment source."""
    require_database()
    with handled_errors():
        sources.delete_source(source_id)
    console.print(f"[green]✓ Deleted payment source #{source_id}[/green]")
