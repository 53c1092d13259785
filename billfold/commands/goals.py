"""Savings goal commands."""

from datetime import date
from typing import Any

from rich.table import Table

from billfold.commands.common import console, handled_errors, money, parse_amount, parse_date, require_database
from billfold.dates import parse_iso_date
from billfold.services import goals

TEMPERATURE_STYLES = {"green": "green", "yellow": "yellow", "red": "red"}


def list_goals_command(all: bool = False) -> None:
    """List savings goals with progress against target."""
    require_database()
    with handled_errors():
        rows = goals.list_goals(include_archived=all)

    if not rows:
        console.print("[yellow]No savings goals found[/yellow]")
        return

    table = Table(title="Savings goals")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Status", style="magenta")
    table.add_column("Saved", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Target date")
    for row in rows:
        style = TEMPERATURE_STYLES.get(row["temperature"], "white")
        table.add_row(
            str(row["id"]),
            row["name"],
            row["status"],
            money(row["saved_amount"]),
            money(row["target_amount"]),
            f"[{style}]{row['progress']}%[/{style}]",
            row["target_date"] or "",
        )
    console.print(table)


def show_goal_command(goal_id: int) -> None:
    """Show one goal, its expected progress and its schedule."""
    require_database()
    with handled_errors():
        goal = goals.get_goal(goal_id)
        progress = goals.goal_progress(goal)

    style = TEMPERATURE_STYLES.get(progress["temperature"], "white")
    console.print(f"[bold cyan]{goal['name']}[/bold cyan] [dim]#{goal['id']} ({goal['status']})[/dim]")
    console.print(f"  Saved: {money(progress['saved_amount'])} of {money(goal['target_amount'])}", end=" ")
    console.print(f"[{style}]({progress['progress']}%)[/{style}]")
    if goal["target_date"]:
        console.print(f"  Target date: {goal['target_date']}")
        console.print(f"  Expected by today: {money(progress['expected_amount'])}")
    if goal["notes"]:
        console.print(f"  Notes: {goal['notes']}")
    for bill in progress["schedule_bills"]:
        state = "" if bill["is_active"] else " [dim](inactive)[/dim]"
        console.print(f"  Schedule: {money(bill['amount'])} {bill['billing_period']} from {bill['start_date']}{state}")


def add_goal_command(
    name: str,
    target: str,
    account_id: int,
    target_date: str | None = None,
    cadence: str | None = None,
    start: str | None = None,
    payment: str | None = None,
    notes: str | None = None,
) -> None:
    """Create a goal, with a contribution schedule when a cadence is given."""
    require_database()
    data: dict[str, Any] = {
        "name": name,
        "target_amount": parse_amount(target, "target amount"),
        "linked_account_id": account_id,
        "target_date": parse_date(target_date, "target date") if target_date else None,
        "notes": notes,
    }
    start_date = parse_iso_date(parse_date(start, "start date")) if start else None
    payment_amount = parse_amount(payment, "payment amount") if payment else None
    with handled_errors():
        goal = goals.create_goal(data, cadence=cadence, start=start_date, payment_amount=payment_amount)
    console.print(f"[green]✓ Added goal #{goal['id']}: {goal['name']} ({money(goal['target_amount'])})[/green]")
    if cadence is not None:
        console.print(f"  Contributions scheduled {cadence}")


def schedule_command(
    remaining: str,
    cadence: str,
    start: str | None = None,
    target_date: str | None = None,
    payment: str | None = None,
) -> None:
    """Preview a contribution schedule without saving anything."""
    amount = parse_amount(remaining, "amount")
    start_date = parse_iso_date(parse_date(start, "start date")) if start else date.today()
    target = parse_iso_date(parse_date(target_date, "target date")) if target_date else None
    payment_amount = parse_amount(payment, "payment amount") if payment else None
    with handled_errors():
        schedule = goals.plan_schedule(amount, cadence, start_date, target_date=target, amount=payment_amount)

    table = Table(title="Contribution schedule", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Cadence", schedule.cadence)
    table.add_row("Payment", money(schedule.amount))
    table.add_row("Payments", str(schedule.payments))
    table.add_row("First payment", str(schedule.first_payment_date or "-"))
    table.add_row("Final payment", str(schedule.final_payment_date or "-"))
    table.add_row("Final amount", money(schedule.final_amount))
    table.add_row("Total", money(schedule.total))
    console.print(table)


def edit_goal_command(
    goal_id: int,
    name: str | None = None,
    target: str | None = None,
    target_date: str | None = None,
    account_id: int | None = None,
    notes: str | None = None,
) -> None:
    require_database()
    updates: dict[str, Any] = {}
    if name is not None:
        updates["name"] = name
    if target is not None:
        updates["target_amount"] = parse_amount(target, "target amount")
    if target_date is not None:
        updates["target_date"] = parse_date(target_date, "target date")
    if account_id is not None:
        updates["linked_account_id"] = account_id
    if notes is not None:
        updates["notes"] = notes
    if not updates:
        console.print("[yellow]Nothing to change[/yellow]")
        return
    with handled_errors():
        goal = goals.update_goal(goal_id, updates)
    console.print(f"[green]✓ Updated goal #{goal['id']}: {goal['name']}[/green]")


def goal_action_command(goal_id: int, action: str, restore_to: str | None = None) -> None:
    """Run a lifecycle action such as pause or archive."""
    require_database()
    with handled_errors():
        goal = goals.apply_action(goal_id, action, restore_to)
    console.print(f"[green]✓ {goal['name']} is now {goal['status']}[/green]")


def contribute_command(goal_id: int, amount: str, on_date: str | None = None) -> None:
    require_database()
    cents = parse_amount(amount)
    paid_on = parse_date(on_date) if on_date else date.today().isoformat()
    with handled_errors():
        instance = goals.contribute(goal_id, cents, paid_on)
    console.print(f"[green]✓ Recorded {money(cents)} toward goal #{goal_id} in {instance['month']}[/green]")


def remove_goal_command(goal_id: int) -> None:
    require_database()
    with handled_errors():
        goals.delete_goal(goal_id)
    console.print(f"[green]✓ Deleted goal #{goal_id}[/green]")
