"""Monthly budget commands: snapshots, payments, balances and the leftover."""

from datetime import date
from typing import Any

from rich.table import Table

from billfold.commands.common import (
    console,
    handled_errors,
    money,
    parse_amount,
    parse_date,
    require_database,
    signed_money,
    yes_no,
)
from billfold.dates import month_of, month_range
from billfold.domain.months import LeftoverBreakdown, occurrence_paid
from billfold.services import months


def resolve_month(month: str | None) -> str:
    """Default to the current month."""
    return month or month_of(date.today())


def list_months_command() -> None:
    """List months with their expected and actual totals."""
    require_database()
    with handled_errors():
        rows = months.list_months()

    table = Table(title="Months")
    table.add_column("Month", style="cyan")
    table.add_column("Income", justify="right")
    table.add_column("Received", justify="right")
    table.add_column("Bills", justify="right")
    table.add_column("Paid", justify="right")
    table.add_column("Locked", justify="center")
    for row in rows:
        if not row["exists"]:
            table.add_row(row["month"], "[dim]not created[/dim]", "", "", "", "")
            continue
        table.add_row(
            row["month"],
            money(row["income_expected"]),
            money(row["income_received"]),
            money(row["bill_expected"]),
            money(row["bill_paid"]),
            yes_no(row["is_read_only"]),
        )
    console.print(table)


def create_month_command(month: str | None = None) -> None:
    require_database()
    month = resolve_month(month)
    with handled_errors():
        detail = months.create_month(month)
    count = sum(len(items) for _, items in detail["bills"] + detail["incomes"])
    console.print(f"[green]✓ Created {detail['month']} with {count} item(s) and {len(detail['todos'])} todo(s)[/green]")


def sync_month_command(month: str | None = None) -> None:
    """Pull newly added bills, incomes and todos into an existing month."""
    require_database()
    month = resolve_month(month)
    with handled_errors():
        added = months.sync_month(month)
    console.print(f"[green]✓ Synced {month}: {added['instances']} item(s), {added['todos']} todo(s) added[/green]")


def _occurrence_lines(instance: dict[str, Any]) -> str:
    parts = []
    for occ in instance["occurrences"]:
        mark = "✓" if occ["is_closed"] else "·"
        paid = occurrence_paid(occ)
        text = f"{mark} {occ['expected_date'][8:]} [dim]#{occ['id']}[/dim]"
        if paid and paid != occ["expected_amount"]:
            text += f" ({money(paid)})"
        parts.append(text)
    return "  ".join(parts)


def _section(title: str, sections: list[tuple[str, list[dict[str, Any]]]]) -> None:
    table = Table(title=title)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Category", style="magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Expected", justify="right")
    table.add_column("Paid", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Occurrences")
    for category, instances in sections:
        for instance in instances:
            name = instance["name"]
            if instance["is_adhoc"]:
                name += " [dim](one-off)[/dim]"
            elif instance["is_extra"]:
                name += " [yellow](extra)[/yellow]"
            table.add_row(
                str(instance["id"]),
                category,
                name,
                money(instance["expected_amount"]),
                money(instance["paid_amount"]),
                money(instance["remaining"]),
                _occurrence_lines(instance),
            )
    console.print(table)


def render_leftover(leftover: LeftoverBreakdown) -> None:
    console.print(f"  Bank balances:      {money(leftover.bank_balances)}")
    console.print(f"  Remaining income: + {money(leftover.remaining_income)}")
    console.print(f"  Remaining bills:  - {money(leftover.remaining_expenses)}")
    if leftover.is_valid:
        console.print(f"[bold]  Leftover:           {signed_money(leftover.leftover)}[/bold]")
    else:
        missing = ", ".join(map(str, leftover.missing_balances))
        console.print(f"[yellow]  {leftover.error_message} (source ids: {missing})[/yellow]")


def show_month_command(month: str | None = None) -> None:
    """Show a month's bills, incomes, todos and leftover."""
    require_database()
    month = resolve_month(month)
    with handled_errors():
        detail = months.month_detail(month)

    lock = " [red](locked)[/red]" if detail["is_read_only"] else ""
    _, _, label = month_range(detail["month"])
    console.print(f"[bold cyan]{label}[/bold cyan] [dim]{detail['month']}[/dim]{lock}")
    if detail["incomes"]:
        _section("Income", detail["incomes"])
    if detail["bills"]:
        _section("Bills", detail["bills"])
    for section, tally in (("Income", detail["income_tally"]), ("Bills", detail["bill_tally"])):
        console.print(
            f"[bold]{section}:[/bold] expected {money(tally.expected)}, actual {money(tally.actual)},"
            f" remaining {money(tally.remaining)}"
        )

    if detail["todos"]:
        console.print("\n[bold]Todos[/bold]")
        for todo in detail["todos"]:
            mark = "[green]✓[/green]" if todo["status"] == "completed" else "·"
            console.print(f"  {mark} {todo['due_date']} {todo['title']} [dim]#{todo['id']}[/dim]")

    if detail["expected_expenses"]:
        console.print("\n[bold]Expected insurance expenses[/bold]")
        for expense in detail["expected_expenses"]:
            out_of_pocket = expense["expected_cost"] - expense["expected_reimbursement"]
            label = expense["description"] or "Appointment"
            console.print(
                f"  {expense['service_date']} {label}: {money(out_of_pocket)} out of pocket [dim]#{expense['id']}[/dim]"
            )

    console.print("\n[bold]Leftover[/bold]")
    render_leftover(detail["leftover"])


def leftover_command(month: str | None = None) -> None:
    require_database()
    month = resolve_month(month)
    with handled_errors():
        leftover = months.month_leftover(month)
    console.print(f"[bold]Leftover for {month}[/bold]")
    render_leftover(leftover)


def set_locked_command(month: str, locked: bool) -> None:
    require_database()
    with handled_errors():
        record = months.set_locked(month, locked)
    state = "locked" if record["is_read_only"] else "unlocked"
    console.print(f"[green]✓ {record['month']} {state}[/green]")


def delete_month_command(month: str) -> None:
    require_database()
    with handled_errors():
        months.delete_month(month)
    console.print(f"[green]✓ Deleted {month}[/green]")


def balance_command(source_id: int, amount: str, month: str | None = None) -> None:
    """Record an account balance. Debt balances may be entered as negative."""
    require_database()
    month = resolve_month(month)
    negative = amount.strip().startswith("-")
    cents = parse_amount(amount.strip().lstrip("-"), "balance")
    balance = -cents if negative else cents
    with handled_errors():
        months.set_bank_balance(month, source_id, balance)
    console.print(f"[green]✓ Balance for source #{source_id} in {month} set to {money(balance)}[/green]")


def pay_command(occurrence_id: int, amount: str | None = None, on_date: str | None = None, close: bool = True) -> None:
    """Record a payment against an occurrence; the full expected amount by default."""
    require_database()
    paid_on = parse_date(on_date) if on_date else None
    with handled_errors():
        if amount is None:
            occurrence = months.get_occurrence(occurrence_id)
            cents = occurrence["expected_amount"] - occurrence_paid(occurrence)
        else:
            cents = parse_amount(amount)
        instance = months.record_payment(occurrence_id, cents, paid_on, close=close)
    console.print(
        f"[green]✓ Recorded {money(cents)} on {instance['name']}; {money(instance['remaining'])} remaining[/green]"
    )


def close_command(occurrence_id: int) -> None:
    require_database()
    with handled_errors():
        instance = months.close_occurrence(occurrence_id)
    console.print(f"[green]✓ Closed occurrence #{occurrence_id} of {instance['name']}[/green]")


def reopen_command(occurrence_id: int) -> None:
    require_database()
    with handled_errors():
        instance = months.reopen_occurrence(occurrence_id)
    console.print(f"[green]✓ Reopened occurrence #{occurrence_id} of {instance['name']}[/green]")


def adhoc_command(
    kind: str,
    name: str,
    amount: str,
    on_date: str | None = None,
    category_id: int | None = None,
    source_id: int | None = None,
    paid: bool = False,
) -> None:
    """Add a one-off bill or income to the month of its date."""
    require_database()
    item_date = parse_date(on_date) if on_date else date.today().isoformat()
    data = {
        "name": name,
        "amount": parse_amount(amount),
        "date": item_date,
        "category_id": category_id,
        "payment_source_id": source_id,
    }
    with handled_errors():
        instance = months.add_adhoc_item(month_of(item_date), kind, data, paid=paid)
    console.print(f"[green]✓ Added one-off {kind} #{instance['id']} to {instance['month']}: {instance['name']}[/green]")


def remove_adhoc_command(instance_id: int) -> None:
    require_database()
    with handled_errors():
        months.remove_adhoc_item(instance_id)
    console.print(f"[green]✓ Removed one-off item #{instance_id}[/green]")


def todo_status_command(instance_id: int, completed: bool) -> None:
    require_database()
    with handled_errors():
        todo = months.set_todo_instance_status(instance_id, completed)
    console.print(f"[green]✓ {todo['title']} is {todo['status']}[/green]")


def split_command(occurrence_id: int, paid: str, on_date: str | None = None) -> None:
    """Close an occurrence at the amount paid and carry the rest to the month end."""
    require_database()
    cents = parse_amount(paid, "paid amount")
    closed_on = parse_date(on_date) if on_date else None
    with handled_errors():
        instance = months.split_occurrence(occurrence_id, cents, closed_on)
    remainder = instance["occurrences"][-1]
    console.print(
        f"[green]✓ Split {instance['name']}: {money(cents)} closed,"
        f" {money(remainder['expected_amount'])} due {remainder['expected_date']} (#{remainder['id']})[/green]"
    )
