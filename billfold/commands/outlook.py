"""Commands that look ahead within a month: projection, calendar and due dates."""

from rich.table import Table

from billfold.commands.common import console, handled_errors, money, parse_date, require_database, signed_money
from billfold.commands.months import resolve_month
from billfold.domain.due import DueItem
from billfold.services import outlook


def _due_table(title: str, items: list[DueItem]) -> Table:
    table = Table(title=title)
    table.add_column("Occurrence", justify="right", style="dim")
    table.add_column("Due", style="yellow")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Amount", justify="right")
    for item in items:
        table.add_row(str(item.occurrence_id), item.due_date, item.name, item.kind, money(item.amount))
    return table


def projection_command(month: str | None = None) -> None:
    """Print the running balance for each day of a month."""
    require_database()
    month = resolve_month(month)
    with handled_errors():
        projection = outlook.month_projection(month)

    table = Table(title=f"Projection for {month}")
    table.add_column("Date", style="cyan")
    table.add_column("In", justify="right", style="green")
    table.add_column("Out", justify="right", style="red")
    table.add_column("Balance", justify="right")
    table.add_column("Items")
    for day in projection.days:
        if not day.events and day.balance is None:
            continue
        items = ", ".join(e.name if e.actual else f"[dim]{e.name}[/dim]" for e in day.events)
        table.add_row(
            day.date,
            money(day.income) if day.income else "",
            money(day.expense) if day.expense else "",
            signed_money(day.balance) if day.balance is not None else "[dim]-[/dim]",
            items,
        )
    console.print(table)
    console.print(f"Starting balance: {money(projection.starting_balance)}")
    if projection.lowest_balance is not None:
        console.print(f"Lowest balance:   {signed_money(projection.lowest_balance)}")
    if projection.overdue:
        total = sum(item.amount for item in projection.overdue)
        console.print(f"[yellow]{len(projection.overdue)} overdue bill(s), {money(total)} carried to today[/yellow]")


def calendar_command(month: str | None = None, on_date: str | None = None) -> None:
    """Print a month's dated bills, incomes, goal payments and todos."""
    require_database()
    day = parse_date(on_date) if on_date else None
    month = resolve_month(month or (day[:7] if day else None))
    with handled_errors():
        calendar = outlook.month_calendar(month, on_date=day)

    table = Table(title=f"Calendar for {day or calendar['month']}")
    table.add_column("Date", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Title")
    table.add_column("Amount", justify="right")
    table.add_column("Status")
    for event in calendar["events"]:
        if event.is_closed:
            status = "[green]done[/green]"
        elif event.is_overdue:
            status = "[red]overdue[/red]"
        else:
            status = ""
        amount = money(event.amount) if event.amount is not None else ""
        table.add_row(event.date, event.type, event.title, amount, status)
    console.print(table)
    summary = calendar["summary"]
    console.print(
        f"{summary['total']} event(s): {summary['bill']} bill(s), {summary['income']} income(s),"
        f" {summary['goal']} goal payment(s), {summary['todo']} todo(s)"
    )


def overdue_command(month: str | None = None) -> None:
    require_database()
    month = resolve_month(month)
    with handled_errors():
        items = outlook.overdue_bills(month)
    if not items:
        console.print(f"[green]Nothing overdue in {month}[/green]")
        return
    console.print(_due_table(f"Overdue in {month}", items))
    console.print(f"[bold]Total overdue:[/bold] {money(sum(item.amount for item in items))}")


def due_command(days: int) -> None:
    """List open bills and incomes due in the next few days."""
    require_database()
    with handled_errors():
        items = outlook.due_soon(days=days)
    if not items:
        console.print(f"[green]Nothing due in the next {days} day(s)[/green]")
        return
    console.print(_due_table(f"Due in the next {days} day(s)", items))
