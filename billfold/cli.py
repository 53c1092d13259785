"""CLI entry point for billfold."""

import typer

from billfold.commands import goals as goal_commands
from billfold.commands import insurance as insurance_commands
from billfold.commands import months as month_commands
from billfold.commands import outlook as outlook_commands
from billfold.commands import recurring as recurring_commands
from billfold.commands import todos as todo_commands
from billfold.commands.admin import backup_command, init_command, restore_command
from billfold.commands.categories import (
    add_category_command,
    edit_category_command,
    list_categories_command,
    remove_category_command,
    reorder_categories_command,
)
from billfold.commands.sources import (
    add_source_command,
    edit_source_command,
    list_sources_command,
    remove_source_command,
    set_source_active_command,
)
from billfold.config import load_settings
from billfold.logs import configure_logging

app = typer.Typer(
    name="billfold",
    help="billfold - Monthly bills, income, savings goals and insurance claims",
    add_completion=False,
)
sources_app = typer.Typer(help="Manage payment sources (bank accounts, cards, cash).", no_args_is_help=True)
categories_app = typer.Typer(help="Manage bill and income categories.", no_args_is_help=True)
bills_app = typer.Typer(help="Manage recurring bills.", no_args_is_help=True)
incomes_app = typer.Typer(help="Manage recurring incomes.", no_args_is_help=True)
goals_app = typer.Typer(help="Manage savings goals.", no_args_is_help=True)
todos_app = typer.Typer(help="Manage todos.", no_args_is_help=True)
months_app = typer.Typer(help="Work with monthly budgets.", no_args_is_help=True)
family_app = typer.Typer(help="Manage family members covered by insurance.", no_args_is_help=True)
plans_app = typer.Typer(help="Manage insurance plans.", no_args_is_help=True)
claims_app = typer.Typer(help="Track insurance claims.", no_args_is_help=True)

app.add_typer(sources_app, name="sources")
app.add_typer(categories_app, name="categories")
app.add_typer(bills_app, name="bills")
app.add_typer(incomes_app, name="incomes")
app.add_typer(goals_app, name="goals")
app.add_typer(todos_app, name="todos")
app.add_typer(months_app, name="months")
app.add_typer(family_app, name="family")
app.add_typer(plans_app, name="plans")
app.add_typer(claims_app, name="claims")

PERIOD_HELP = "monthly, weekly, bi_weekly or semi_annually"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
    log_json: bool = typer.Option(False, "--log-json", help="Log as JSON lines"),
) -> None:
    """billfold - Monthly bills, income, savings goals and insurance claims."""
    logging_settings = load_settings()["logging"]
    configure_logging(
        verbose=verbose or bool(logging_settings.get("verbose")),
        log_json=log_json or bool(logging_settings.get("json")),
    )


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
    migrate: bool = typer.Option(False, "--migrate", help="Upgrade an existing database in place"),
) -> None:
    """Initialize billfold database and configuration."""
    init_command(force, migrate)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: ~/.billfold/backups)"),
) -> None:
    """Export all your data to a JSON backup."""
    backup_command(output_dir)


@app.command(name="restore")
def restore(
    backup_file: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Replace all your data with a JSON backup."""
    restore_command(backup_file, yes)


# Payment sources


@sources_app.command(name="list")
def sources_list(all: bool = typer.Option(False, "--all", "-a", help="Include inactive sources")) -> None:
    """List your payment sources."""
    list_sources_command(all)


@sources_app.command(name="add")
def sources_add(
    name: str,
    source_type: str = typer.Option(
        "bank_account", "--type", "-t", help="bank_account, credit_card, line_of_credit, investment or cash"
    ),
    pay_off_monthly: bool = typer.Option(False, "--pay-off-monthly", help="Card balance is paid in full each month"),
    exclude_from_leftover: bool = typer.Option(False, "--exclude", help="Leave out of the leftover calculation"),
    is_savings: bool = typer.Option(False, "--savings", help="Account holds savings"),
) -> None:
    """Add a payment source."""
    add_source_command(name, source_type, pay_off_monthly, exclude_from_leftover, is_savings)


@sources_app.command(name="edit")
def sources_edit(
    source_id: int,
    name: str = typer.Option(None, "--name", help="New name"),
    pay_off_monthly: bool = typer.Option(None, "--pay-off-monthly/--carry-balance", help="Pay off monthly"),
    exclude_from_leftover: bool = typer.Option(None, "--exclude/--include", help="Leftover participation"),
    is_savings: bool = typer.Option(None, "--savings/--not-savings", help="Savings account"),
) -> None:
    """Change a payment source."""
    edit_source_command(source_id, name, pay_off_monthly, exclude_from_leftover, is_savings)


@sources_app.command(name="activate")
def sources_activate(source_id: int) -> None:
    """Mark a payment source active."""
    set_source_active_command(source_id, True)


@sources_app.command(name="deactivate")
def sources_deactivate(source_id: int) -> None:
    """Hide a payment source without deleting it."""
    set_source_active_command(source_id, False)


@sources_app.command(name="remove")
def sources_remove(source_id: int) -> None:
    """Delete a payment source that nothing uses."""
    remove_source_command(source_id)


# Categories


@categories_app.command(name="list")
def categories_list(
    category_type: str = typer.Option(None, "--type", "-t", help="bill, income or variable"),
) -> None:
    """List categories in display order."""
    list_categories_command(category_type)


@categories_app.command(name="add")
def categories_add(
    name: str,
    category_type: str = typer.Option("bill", "--type", "-t", help="bill, income or variable"),
    color: str = typer.Option(None, "--color", help="Hex color, e.g. #3b82f6"),
) -> None:
    """Add a category."""
    add_category_command(name, category_type, color)


@categories_app.command(name="edit")
def categories_edit(
    category_id: int,
    name: str = typer.Option(None, "--name", help="New name"),
    color: str = typer.Option(None, "--color", help="Hex color, e.g. #3b82f6"),
) -> None:
    """Rename or recolor a category."""
    edit_category_command(category_id, name, color)


@categories_app.command(name="remove")
def categories_remove(category_id: int) -> None:
    """Delete a category."""
    remove_category_command(category_id)


@categories_app.command(name="reorder")
def categories_reorder(
    category_type: str,
    ordered_ids: str = typer.Argument(..., help="Comma-separated ids in the new order, e.g. 3,1,2"),
) -> None:
    """Set the display order of a type's categories."""
    reorder_categories_command(category_type, ordered_ids)


# Bills and incomes share their commands


def _register_recurring(sub_app: typer.Typer, kind: str) -> None:
    @sub_app.command(name="list")
    def recurring_list(all: bool = typer.Option(False, "--all", "-a", help="Include inactive items")) -> None:
        """List items with their monthly average."""
        recurring_commands.list_recurring_command(kind, all)

    @sub_app.command(name="add")
    def recurring_add(
        name: str,
        amount: str,
        source_id: int = typer.Option(..., "--source", "-s", help="Payment source id"),
        billing_period: str = typer.Option("monthly", "--period", "-p", help=PERIOD_HELP),
        start_date: str = typer.Option(None, "--start", help="First date (YYYY-MM-DD)"),
        day_of_month: int = typer.Option(None, "--day", help="Day of month (1-31) for monthly items"),
        week: int = typer.Option(None, "--week", help="Week of month (1-5, 5 is last) for monthly items"),
        weekday: int = typer.Option(None, "--weekday", help="Day of week (0=Sunday) with --week"),
        category_id: int = typer.Option(None, "--category", "-c", help="Category id"),
        notes: str = typer.Option(None, "--notes", help="Notes"),
    ) -> None:
        """Add a recurring item."""
        recurring_commands.add_recurring_command(
            kind, name, amount, billing_period, source_id, start_date, day_of_month, week, weekday, category_id, notes
        )

    @sub_app.command(name="edit")
    def recurring_edit(
        item_id: int,
        name: str = typer.Option(None, "--name", help="New name"),
        amount: str = typer.Option(None, "--amount", help="New amount"),
        source_id: int = typer.Option(None, "--source", "-s", help="Payment source id"),
        billing_period: str = typer.Option(None, "--period", "-p", help=PERIOD_HELP),
        start_date: str = typer.Option(None, "--start", help="First date (YYYY-MM-DD)"),
        day_of_month: int = typer.Option(None, "--day", help="Day of month (1-31)"),
        week: int = typer.Option(None, "--week", help="Week of month (1-5, 5 is last)"),
        weekday: int = typer.Option(None, "--weekday", help="Day of week (0=Sunday)"),
        category_id: int = typer.Option(None, "--category", "-c", help="Category id"),
        notes: str = typer.Option(None, "--notes", help="Notes"),
    ) -> None:
        """Change a recurring item."""
        recurring_commands.edit_recurring_command(
            kind,
            item_id,
            name,
            amount,
            billing_period,
            source_id,
            start_date,
            day_of_month,
            week,
            weekday,
            category_id,
            notes,
        )

    @sub_app.command(name="activate")
    def recurring_activate(item_id: int) -> None:
        """Include an item in new months again."""
        recurring_commands.set_recurring_active_command(kind, item_id, True)

    @sub_app.command(name="deactivate")
    def recurring_deactivate(item_id: int) -> None:
        """Stop including an item in new months."""
        recurring_commands.set_recurring_active_command(kind, item_id, False)

    @sub_app.command(name="remove")
    def recurring_remove(item_id: int) -> None:
        """Delete an item. Months already created keep their copy."""
        recurring_commands.remove_recurring_command(kind, item_id)


_register_recurring(bills_app, "bill")
_register_recurring(incomes_app, "income")


# Savings goals


@goals_app.command(name="list")
def goals_list(all: bool = typer.Option(False, "--all", "-a", help="Include archived goals")) -> None:
    """List savings goals with progress."""
    goal_commands.list_goals_command(all)


@goals_app.command(name="show")
def goals_show(goal_id: int) -> None:
    """Show a goal in detail."""
    goal_commands.show_goal_command(goal_id)


@goals_app.command(name="add")
def goals_add(
    name: str,
    target: str,
    account_id: int = typer.Option(..., "--account", help="Linked payment source id"),
    target_date: str = typer.Option(None, "--by", help="Target date (YYYY-MM-DD)"),
    cadence: str = typer.Option(None, "--cadence", help="Schedule contributions: weekly, biweekly or monthly"),
    start: str = typer.Option(None, "--start", help="First contribution date (default: today)"),
    payment: str = typer.Option(None, "--payment", help="Fixed contribution instead of one derived from --by"),
    notes: str = typer.Option(None, "--notes", help="Notes"),
) -> None:
    """Add a savings goal."""
    goal_commands.add_goal_command(name, target, account_id, target_date, cadence, start, payment, notes)


@goals_app.command(name="schedule")
def goals_schedule(
    amount: str,
    cadence: str = typer.Option("monthly", "--cadence", help="weekly, biweekly or monthly"),
    start: str = typer.Option(None, "--start", help="First contribution date (default: today)"),
    target_date: str = typer.Option(None, "--by", help="Target date (YYYY-MM-DD)"),
    payment: str = typer.Option(None, "--payment", help="Fixed contribution amount"),
) -> None:
    """Preview a contribution schedule."""
    goal_commands.schedule_command(amount, cadence, start, target_date, payment)


@goals_app.command(name="edit")
def goals_edit(
    goal_id: int,
    name: str = typer.Option(None, "--name", help="New name"),
    target: str = typer.Option(None, "--target", help="New target amount"),
    target_date: str = typer.Option(None, "--by", help="New target date"),
    account_id: int = typer.Option(None, "--account", help="Linked payment source id"),
    notes: str = typer.Option(None, "--notes", help="Notes"),
) -> None:
    """Change a savings goal."""
    goal_commands.edit_goal_command(goal_id, name, target, target_date, account_id, notes)


@goals_app.command(name="contribute")
def goals_contribute(
    goal_id: int,
    amount: str,
    on_date: str = typer.Option(None, "--date", help="Contribution date (default: today)"),
) -> None:
    """Record a one-off contribution."""
    goal_commands.contribute_command(goal_id, amount, on_date)


@goals_app.command(name="pause")
def goals_pause(goal_id: int) -> None:
    """Pause a goal and its scheduled contributions."""
    goal_commands.goal_action_command(goal_id, "pause")


@goals_app.command(name="resume")
def goals_resume(goal_id: int) -> None:
    """Resume a paused goal."""
    goal_commands.goal_action_command(goal_id, "resume")


@goals_app.command(name="complete")
def goals_complete(goal_id: int) -> None:
    """Mark a goal as bought."""
    goal_commands.goal_action_command(goal_id, "complete")


@goals_app.command(name="abandon")
def goals_abandon(goal_id: int) -> None:
    """Abandon a goal."""
    goal_commands.goal_action_command(goal_id, "abandon")


@goals_app.command(name="archive")
def goals_archive(goal_id: int) -> None:
    """Archive a bought or abandoned goal."""
    goal_commands.goal_action_command(goal_id, "archive")


@goals_app.command(name="unarchive")
def goals_unarchive(
    goal_id: int,
    restore_to: str = typer.Option(None, "--to", help="Status to restore (default: the one before archiving)"),
) -> None:
    """Bring back an archived goal."""
    goal_commands.goal_action_command(goal_id, "unarchive", restore_to)


@goals_app.command(name="remove")
def goals_remove(goal_id: int) -> None:
    """Delete a goal."""
    goal_commands.remove_goal_command(goal_id)


# Todos


@todos_app.command(name="list")
def todos_list(all: bool = typer.Option(False, "--all", "-a", help="Include inactive todos")) -> None:
    """List todos."""
    todo_commands.list_todos_command(all)


@todos_app.command(name="add")
def todos_add(
    title: str,
    recurrence: str = typer.Option("none", "--repeat", "-r", help="none, weekly, bi_weekly or monthly"),
    due_date: str = typer.Option(None, "--due", help="Due date for one-time todos"),
    start_date: str = typer.Option(None, "--start", help="Start date for weekly todos"),
    day_of_month: int = typer.Option(None, "--day", help="Day of month for monthly todos"),
    notes: str = typer.Option(None, "--notes", help="Notes"),
) -> None:
    """Add a todo."""
    todo_commands.add_todo_command(title, recurrence, due_date, start_date, day_of_month, notes)


@todos_app.command(name="done")
def todos_done(todo_id: int) -> None:
    """Complete a todo."""
    todo_commands.complete_todo_command(todo_id)


@todos_app.command(name="reopen")
def todos_reopen(todo_id: int) -> None:
    """Reopen a completed todo."""
    todo_commands.reopen_todo_command(todo_id)


@todos_app.command(name="activate")
def todos_activate(todo_id: int) -> None:
    """Include a todo in new months again."""
    todo_commands.set_todo_active_command(todo_id, True)


@todos_app.command(name="deactivate")
def todos_deactivate(todo_id: int) -> None:
    """Stop including a todo in new months."""
    todo_commands.set_todo_active_command(todo_id, False)


@todos_app.command(name="remove")
def todos_remove(
    todo_id: int,
    scope: str = typer.Option(
        "template_only", "--scope", help="template_only, current_month or future_months instances to remove"
    ),
) -> None:
    """Delete a todo."""
    todo_commands.remove_todo_command(todo_id, scope)


# Months


@months_app.command(name="list")
def months_list() -> None:
    """List months with totals."""
    month_commands.list_months_command()


@months_app.command(name="create")
def months_create(month: str = typer.Argument(None, help="Month (YYYY-MM, default: current)")) -> None:
    """Create a month from your active bills, incomes and todos."""
    month_commands.create_month_command(month)


@months_app.command(name="show")
def months_show(month: str = typer.Argument(None, help="Month (YYYY-MM, default: current)")) -> None:
    """Show a month."""
    month_commands.show_month_command(month)


@months_app.command(name="leftover")
def months_leftover(month: str = typer.Argument(None, help="Month (YYYY-MM, default: current)")) -> None:
    """Show what is left over after remaining bills."""
    month_commands.leftover_command(month)


@months_app.command(name="sync")
def months_sync(month: str = typer.Argument(None, help="Month (YYYY-MM, default: current)")) -> None:
    """Add items created since the month was made."""
    month_commands.sync_month_command(month)


@months_app.command(name="lock")
def months_lock(month: str) -> None:
    """Make a month read-only."""
    month_commands.set_locked_command(month, True)


@months_app.command(name="unlock")
def months_unlock(month: str) -> None:
    """Allow changes to a month again."""
    month_commands.set_locked_command(month, False)


@months_app.command(name="delete")
def months_delete(
    month: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a month and its payments."""
    if not yes:
        typer.confirm(f"Delete {month} and everything recorded in it?", abort=True)
    month_commands.delete_month_command(month)


@months_app.command(name="balance")
def months_balance(
    source_id: int,
    amount: str,
    month: str = typer.Option(None, "--month", "-m", help="Month (YYYY-MM, default: current)"),
) -> None:
    """Record an account balance for a month."""
    month_commands.balance_command(source_id, amount, month)


@months_app.command(name="pay")
def months_pay(
    occurrence_id: int,
    amount: str = typer.Option(None, "--amount", help="Amount paid (default: what is still due)"),
    on_date: str = typer.Option(None, "--date", help="Payment date (default: the due date)"),
    close: bool = typer.Option(True, "--close/--partial", help="Close the occurrence after paying"),
) -> None:
    """Record a payment or receipt against an occurrence."""
    month_commands.pay_command(occurrence_id, amount, on_date, close)


@months_app.command(name="close")
def months_close(occurrence_id: int) -> None:
    """Close an occurrence without a payment."""
    month_commands.close_command(occurrence_id)


@months_app.command(name="reopen")
def months_reopen(occurrence_id: int) -> None:
    """Reopen a closed occurrence."""
    month_commands.reopen_command(occurrence_id)


@months_app.command(name="adhoc")
def months_adhoc(
    name: str,
    amount: str,
    kind: str = typer.Option("bill", "--kind", "-k", help="bill or income"),
    on_date: str = typer.Option(None, "--date", help="Date (default: today)"),
    category_id: int = typer.Option(None, "--category", "-c", help="Category id"),
    source_id: int = typer.Option(None, "--source", "-s", help="Payment source id"),
    paid: bool = typer.Option(False, "--paid", help="Already paid in full"),
) -> None:
    """Add a one-off bill or income."""
    month_commands.adhoc_command(kind, name, amount, on_date, category_id, source_id, paid)


@months_app.command(name="remove-adhoc")
def months_remove_adhoc(instance_id: int) -> None:
    """Remove a one-off bill or income."""
    month_commands.remove_adhoc_command(instance_id)


@months_app.command(name="todo-done")
def months_todo_done(instance_id: int) -> None:
    """Complete a todo in a month."""
    month_commands.todo_status_command(instance_id, True)


@months_app.command(name="todo-reopen")
def months_todo_reopen(instance_id: int) -> None:
    """Reopen a todo in a month."""
    month_commands.todo_status_command(instance_id, False)


@months_app.command(name="split")
def months_split(
    occurrence_id: int,
    paid: str = typer.Argument(..., help="Amount settled now"),
    on_date: str = typer.Option(None, "--date", help="Date it was settled (default: today)"),
) -> None:
    """Close an occurrence at the amount paid and move the rest to the month end."""
    month_commands.split_command(occurrence_id, paid, on_date)


@months_app.command(name="projection")
def months_projection(month: str = typer.Argument(None, help="Month (YYYY-MM, default: current)")) -> None:
    """Project the balance day by day."""
    outlook_commands.projection_command(month)


@months_app.command(name="calendar")
def months_calendar(
    month: str = typer.Argument(None, help="Month (YYYY-MM, default: current)"),
    on_date: str = typer.Option(None, "--date", help="Only show this day"),
) -> None:
    """Show bills, incomes, goal payments and todos by date."""
    outlook_commands.calendar_command(month, on_date)


@months_app.command(name="overdue")
def months_overdue(month: str = typer.Argument(None, help="Month (YYYY-MM, default: current)")) -> None:
    """List bills still unpaid past their due date."""
    outlook_commands.overdue_command(month)


@months_app.command(name="due")
def months_due(days: int = typer.Option(3, "--days", "-d", help="How many days ahead")) -> None:
    """List bills and incomes due in the next few days."""
    outlook_commands.due_command(days)


# Insurance


@plans_app.command(name="list")
def plans_list() -> None:
    """List insurance plans."""
    insurance_commands.list_plans_command()


@plans_app.command(name="add")
def plans_add(
    name: str,
    provider: str = typer.Option(None, "--provider", help="Insurer name"),
    policy_number: str = typer.Option(None, "--policy", help="Policy number"),
    portal_url: str = typer.Option(None, "--portal", help="Claims portal URL"),
    notes: str = typer.Option(None, "--notes", help="Notes"),
) -> None:
    """Add an insurance plan."""
    insurance_commands.add_plan_command(name, provider, policy_number, portal_url, notes)


@plans_app.command(name="edit")
def plans_edit(
    plan_id: int,
    name: str = typer.Option(None, "--name", help="New name"),
    provider: str = typer.Option(None, "--provider", help="Insurer name"),
    policy_number: str = typer.Option(None, "--policy", help="Policy number"),
    portal_url: str = typer.Option(None, "--portal", help="Claims portal URL"),
    active: bool = typer.Option(None, "--active/--inactive", help="Whether new claims use this plan"),
) -> None:
    """Change an insurance plan."""
    insurance_commands.edit_plan_command(plan_id, name, provider, policy_number, portal_url, active)


@plans_app.command(name="remove")
def plans_remove(plan_id: int) -> None:
    """Delete a plan no family member uses."""
    insurance_commands.remove_plan_command(plan_id)


@family_app.command(name="list")
def family_list() -> None:
    """List family members and their plans."""
    insurance_commands.list_members_command()


@family_app.command(name="add")
def family_add(
    name: str,
    plan_ids: str = typer.Option(None, "--plans", help="Comma-separated plan ids, primary first"),
) -> None:
    """Add a family member."""
    insurance_commands.add_member_command(name, plan_ids)


@family_app.command(name="edit")
def family_edit(
    member_id: int,
    name: str = typer.Option(None, "--name", help="New name"),
    plan_ids: str = typer.Option(None, "--plans", help="Comma-separated plan ids, primary first"),
) -> None:
    """Rename a family member or change their plans."""
    insurance_commands.edit_member_command(member_id, name, plan_ids)


@family_app.command(name="remove")
def family_remove(member_id: int) -> None:
    """Delete a family member with no claims."""
    insurance_commands.remove_member_command(member_id)


@claims_app.command(name="list")
def claims_list(
    status: str = typer.Option(None, "--status", help="expected, draft, in_progress or closed"),
    member_id: int = typer.Option(None, "--member", help="Family member id"),
) -> None:
    """List claims, newest first."""
    insurance_commands.list_claims_command(status, member_id)


@claims_app.command(name="show")
def claims_show(claim_id: int) -> None:
    """Show a claim and its submissions."""
    insurance_commands.show_claim_command(claim_id)


@claims_app.command(name="add")
def claims_add(
    member_id: int,
    category_id: int,
    service_date: str,
    total: str,
    description: str = typer.Option(None, "--description", "-d", help="What the claim is for"),
    provider: str = typer.Option(None, "--provider", help="Who provided the service"),
    notes: str = typer.Option(None, "--notes", help="Notes"),
) -> None:
    """Open a claim for a family member."""
    insurance_commands.add_claim_command(member_id, category_id, service_date, total, description, provider, notes)


@claims_app.command(name="edit")
def claims_edit(
    claim_id: int,
    category_id: int = typer.Option(None, "--category", help="Claim category id"),
    service_date: str = typer.Option(None, "--date", help="Service date"),
    total: str = typer.Option(None, "--total", help="Total amount"),
    description: str = typer.Option(None, "--description", "-d", help="What the claim is for"),
    provider: str = typer.Option(None, "--provider", help="Who provided the service"),
) -> None:
    """Change a claim."""
    insurance_commands.edit_claim_command(claim_id, category_id, service_date, total, description, provider)


@claims_app.command(name="submit")
def claims_submit(
    claim_id: int,
    position: int = typer.Argument(..., help="Submission number (1 is the primary plan)"),
    status: str = typer.Argument(..., help="pending, approved or denied"),
    claimed: str = typer.Option(None, "--claimed", help="Amount claimed"),
    reimbursed: str = typer.Option(None, "--reimbursed", help="Amount reimbursed"),
    notes: str = typer.Option(None, "--notes", help="Notes"),
) -> None:
    """Update a plan submission of a claim."""
    insurance_commands.submission_command(claim_id, position, status, claimed, reimbursed, notes)


@claims_app.command(name="remove")
def claims_remove(claim_id: int) -> None:
    """Delete a claim."""
    insurance_commands.remove_claim_command(claim_id)


@claims_app.command(name="summary")
def claims_summary() -> None:
    """Show open and reimbursed totals."""
    insurance_commands.claims_summary_command()


@claims_app.command(name="categories")
def claims_categories() -> None:
    """List claim categories."""
    insurance_commands.list_claim_categories_command()


@claims_app.command(name="add-category")
def claims_add_category(
    name: str,
    icon: str = typer.Option(None, "--icon", help="Icon"),
    sort_order: int = typer.Option(None, "--order", help="Sort position"),
) -> None:
    """Add a claim category."""
    insurance_commands.add_claim_category_command(name, icon, sort_order)


@claims_app.command(name="remove-category")
def claims_remove_category(category_id: int) -> None:
    """Delete an unused custom claim category."""
    insurance_commands.remove_claim_category_command(category_id)


@claims_app.command(name="expected")
def claims_expected(month: str = typer.Option(None, "--month", "-m", help="Only this month (YYYY-MM)")) -> None:
    """List expected expenses by appointment date."""
    insurance_commands.list_expected_command(month)


@claims_app.command(name="expect")
def claims_expect(
    member_id: int,
    category_id: int,
    appointment: str,
    cost: str,
    reimbursement: str = typer.Argument(..., help="Amount the plans should pay back"),
    source_id: int = typer.Option(..., "--source", "-s", help="Payment source id"),
    description: str = typer.Option(None, "--description", "-d", help="What the appointment is for"),
    provider: str = typer.Option(None, "--provider", help="Who provides the service"),
) -> None:
    """Record an upcoming appointment before it becomes a claim."""
    insurance_commands.add_expected_command(
        member_id, category_id, appointment, cost, reimbursement, source_id, description, provider
    )


@claims_app.command(name="edit-expected")
def claims_edit_expected(
    claim_id: int,
    appointment: str = typer.Option(None, "--date", help="Appointment date"),
    cost: str = typer.Option(None, "--cost", help="Expected cost"),
    reimbursement: str = typer.Option(None, "--reimbursement", help="Expected reimbursement"),
    source_id: int = typer.Option(None, "--source", "-s", help="Payment source id"),
    description: str = typer.Option(None, "--description", "-d", help="What the appointment is for"),
) -> None:
    """Change an expected expense."""
    insurance_commands.edit_expected_command(claim_id, appointment, cost, reimbursement, source_id, description)


@claims_app.command(name="convert")
def claims_convert(claim_id: int, actual_cost: str) -> None:
    """Turn an expected expense into a claim for the actual cost."""
    insurance_commands.convert_expected_command(claim_id, actual_cost)


@claims_app.command(name="cancel")
def claims_cancel(claim_id: int) -> None:
    """Drop an expected expense that will not happen."""
    insurance_commands.cancel_expected_command(claim_id)


if __name__ == "__main__":
    app()
