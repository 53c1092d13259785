"""Category commands."""

from rich.table import Table

from billfold.commands.common import console, fail, handled_errors, require_database, yes_no
from billfold.services import categories


def list_categories_command(category_type: str | None = None) -> None:
    """List categories in display order."""
    require_database()
    with handled_errors():
        rows = categories.list_categories(category_type)

    if not rows:
        console.print("[yellow]No categories found[/yellow]")
        return

    table = Table(title="Categories")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Type", style="magenta")
    table.add_column("Order", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Color")
    table.add_column("Predefined", justify="center")
    for row in rows:
        color = f"[{row['color']}]■[/] {row['color']}" if row["color"] else ""
        table.add_row(
            str(row["id"]), row["type"], str(row["sort_order"]), row["name"], color, yes_no(row["is_predefined"])
        )
    console.print(table)


def add_category_command(name: str, category_type: str, color: str | None = None) -> None:
    require_database()
    with handled_errors():
        category = categories.create_category({"name": name, "type": category_type, "color": color})
    console.print(f"[green]✓ Added {category['type']} category #{category['id']}: {category['name']}[/green]")


def edit_category_command(category_id: int, name: str | None = None, color: str | None = None) -> None:
    require_database()
    updates = {k: v for k, v in {"name": name, "color": color}.items() if v is not None}
    if not updates:
        console.print("[yellow]Nothing to change[/yellow]")
        return
    with handled_errors():
        category = categories.update_category(category_id, updates)
    console.print(f"[green]✓ Updated category #{category['id']}: {category['name']}[/green]")


def remove_category_command(category_id: int) -> None:
    require_database()
    with handled_errors():
        categories.delete_category(category_id)
    console.print(f"[green]✓ Deleted category #{category_id}[/green]")


def reorder_categories_command(category_type: str, ordered_ids: str) -> None:
    """Reorder a type's categories from a comma-separated id list, e.g. "3,1,2"."""
    require_database()
    try:
        ids = [int(part) for part in ordered_ids.split(",") if part.strip()]
    except ValueError:
        fail(f"Invalid id list: {ordered_ids}")
    with handled_errors():
        rows = categories.reorder_categories(category_type, ids)
    console.print(f"[green]✓ New {category_type} order:[/green] " + ", ".join(row["name"] for row in rows))
