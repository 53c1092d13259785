"""Bill and income commands (the same commands serve both kinds)."""

from typing import Any

from rich.table import Table

from billfold.commands.common import (
    console,
    handled_errors,
    money,
    parse_amount,
    parse_date,
    require_database,
    yes_no,
)
from billfold.domain.recurrence import describe_schedule
from billfold.services import recurring


def list_recurring_command(kind: str, all: bool = False) -> None:
    """List bills or incomes with their monthly average."""
    require_database()
    with handled_errors():
        items = recurring.list_recurring(kind, active_only=not all)

    if not items:
        console.print(f"[yellow]No {kind}s found[/yellow]")
        return

    table = Table(title=f"{kind.capitalize()}s")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Schedule")
    table.add_column("Monthly avg", justify="right", style="dim")
    table.add_column("Active", justify="center")
    total = 0
    for item in items:
        table.add_row(
            str(item["id"]),
            item["name"],
            money(item["amount"]),
            describe_schedule(item),
            money(item["monthly_average"]),
            yes_no(item["is_active"]),
        )
        if item["is_active"]:
            total += item["monthly_average"]
    console.print(table)
    console.print(f"[bold]Average per month (active):[/bold] {money(total)}")


def _fields(
    name: str | None,
    amount: str | None,
    billing_period: str | None,
    payment_source_id: int | None,
    start_date: str | None,
    day_of_month: int | None,
    week: int | None,
    weekday: int | None,
    category_id: int | None,
    notes: str | None,
) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "name": name,
        "amount": parse_amount(amount) if amount is not None else None,
        "billing_period": billing_period,
        "payment_source_id": payment_source_id,
        "start_date": parse_date(start_date, "start date") if start_date else None,
        "day_of_month": day_of_month,
        "recurrence_week": week,
        "recurrence_day": weekday,
        "category_id": category_id,
        "notes": notes,
    }
    return {key: value for key, value in fields.items() if value is not None}


def add_recurring_command(
    kind: str,
    name: str,
    amount: str,
    billing_period: str,
    payment_source_id: int,
    start_date: str | None = None,
    day_of_month: int | None = None,
    week: int | None = None,
    weekday: int | None = None,
    category_id: int | None = None,
    notes: str | None = None,
) -> None:
    """Create a bill or income."""
    require_database()
    data = _fields(
        name, amount, billing_period, payment_source_id, start_date, day_of_month, week, weekday, category_id, notes
    )
    with handled_errors():
        item = recurring.create_recurring(kind, data)
    console.print(
        f"[green]✓ Added {kind} #{item['id']}: {item['name']} {money(item['amount'])} ({describe_schedule(item)})[/green]"
    )


def edit_recurring_command(
    kind: str,
    item_id: int,
    name: str | None = None,
    amount: str | None = None,
    billing_period: str | None = None,
    payment_source_id: int | None = None,
    start_date: str | None = None,
    day_of_month: int | None = None,
    week: int | None = None,
    weekday: int | None = None,
    category_id: int | None = None,
    notes: str | None = None,
) -> None:
    """Change a bill or income."""
    require_database()
    updates = _fields(
        name, amount, billing_period, payment_source_id, start_date, day_of_month, week, weekday, category_id, notes
    )
    if not updates:
        console.print("[yellow]Nothing to change[/yellow]")
        return
    with handled_errors():
        item = recurring.update_recurring(kind, item_id, updates)
    console.print(f"[green]✓ Updated {kind} #{item['id']}: {item['name']} ({describe_schedule(item)})[/green]")


def set_recurring_active_command(kind: str, item_id: int, active: bool) -> None:
    require_database()
    with handled_errors():
        item = recurring.set_active(kind, item_id, active)
    state = "activated" if active else "deactivated"
    console.print(f"[green]✓ {item['name']} {state}[/green]")


def remove_recurring_command(kind: str, item_id: int) -> None:
    require_database()
    with handled_errors():
        recurring.delete_recurring(kind, item_id)
    console.print(f"[green]✓ Deleted {kind} #{item_id}[/green]")
