"""Todo commands."""

from typing import Any

from rich.table import Table

from billfold.commands.common import console, handled_errors, parse_date, require_database, yes_no
from billfold.services import todos


def _schedule(todo: dict[str, Any]) -> str:
    recurrence = todo["recurrence"]
    if recurrence == "none":
        return f"once on {todo['due_date']}"
    if recurrence == "monthly":
        return f"monthly on day {todo['day_of_month']}"
    return f"{recurrence.replace('_', '-')} from {todo['start_date']}"


def list_todos_command(all: bool = False) -> None:
    require_database()
    with handled_errors():
        rows = todos.list_todos(active_only=not all)

    if not rows:
        console.print("[yellow]No todos found[/yellow]")
        return

    table = Table(title="Todos")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Schedule")
    table.add_column("Status", style="magenta")
    table.add_column("Active", justify="center")
    for row in rows:
        table.add_row(str(row["id"]), row["title"], _schedule(row), row["status"], yes_no(row["is_active"]))
    console.print(table)


def add_todo_command(
    title: str,
    recurrence: str = "none",
    due_date: str | None = None,
    start_date: str | None = None,
    day_of_month: int | None = None,
    notes: str | None = None,
) -> None:
    """Create a one-time or recurring todo."""
    require_database()
    data: dict[str, Any] = {
        "title": title,
        "recurrence": recurrence,
        "due_date": parse_date(due_date, "due date") if due_date else None,
        "start_date": parse_date(start_date, "start date") if start_date else None,
        "day_of_month": day_of_month,
        "notes": notes,
    }
    with handled_errors():
        todo = todos.create_todo(data)
    console.print(f"[green]✓ Added todo #{todo['id']}: {todo['title']} ({_schedule(todo)})[/green]")


def complete_todo_command(todo_id: int) -> None:
    require_database()
    with handled_errors():
        todo = todos.complete_todo(todo_id)
    console.print(f"[green]✓ Completed: {todo['title']}[/green]")


def reopen_todo_command(todo_id: int) -> None:
    require_database()
    with handled_errors():
        todo = todos.reopen_todo(todo_id)
    console.print(f"[green]✓ Reopened: {todo['title']}[/green]")


def set_todo_active_command(todo_id: int, active: bool) -> None:
    require_database()
    with handled_errors():
        todo = todos.set_active(todo_id, active)
    state = "activated" if active else "deactivated"
    console.print(f"[green]✓ {todo['title']} {state}[/green]")


def remove_todo_command(todo_id: int, scope: str = "template_only") -> None:
    """Delete a todo, optionally removing its generated instances."""
    require_database()
    with handled_errors():
        removed = todos.delete_todo(todo_id, scope=scope)
    console.print(f"[green]✓ Deleted todo #{todo_id}[/green]")
    if removed:
        console.print(f"  Removed {removed} generated instance(s)")
