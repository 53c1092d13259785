"""Insurance commands: plans, family members, claim categories and claims."""

from typing import Any

from rich.table import Table

from billfold.commands.common import (
    console,
    fail,
    handled_errors,
    money,
    parse_amount,
    parse_date,
    require_database,
    yes_no,
)
from billfold.services import insurance

STATUS_STYLES = {
    "expected": "blue",
    "draft": "dim",
    "in_progress": "yellow",
    "closed": "green",
    "awaiting_previous": "dim",
    "pending": "yellow",
    "approved": "green",
    "denied": "red",
}


def _styled(status: str) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status}[/{style}]"


def _parse_ids(value: str | None) -> list[int] | None:
    if value is None:
        return None
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        fail(f"Invalid id list: {value}")


def _given(**fields: Any) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


# Plans


def list_plans_command() -> None:
    require_database()
    with handled_errors():
        plans = insurance.list_plans()

    if not plans:
        console.print("[yellow]No insurance plans found[/yellow]")
        return

    table = Table(title="Insurance plans")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Provider")
    table.add_column("Policy")
    table.add_column("Portal")
    table.add_column("Active", justify="center")
    for plan in plans:
        table.add_row(
            str(plan["id"]),
            plan["name"],
            plan["provider_name"] or "",
            plan["policy_number"] or "",
            plan["portal_url"] or "",
            yes_no(plan["is_active"]),
        )
    console.print(table)


def add_plan_command(
    name: str,
    provider: str | None = None,
    policy_number: str | None = None,
    portal_url: str | None = None,
    notes: str | None = None,
) -> None:
    require_database()
    data = _given(name=name, provider_name=provider, policy_number=policy_number, portal_url=portal_url, notes=notes)
    with handled_errors():
        plan = insurance.create_plan(data)
    console.print(f"[green]✓ Added plan #{plan['id']}: {plan['name']}[/green]")


def edit_plan_command(
    plan_id: int,
    name: str | None = None,
    provider: str | None = None,
    policy_number: str | None = None,
    portal_url: str | None = None,
    active: bool | None = None,
) -> None:
    require_database()
    updates = _given(
        name=name, provider_name=provider, policy_number=policy_number, portal_url=portal_url, is_active=active
    )
    if not updates:
        console.print("[yellow]Nothing to change[/yellow]")
        return
    with handled_errors():
        plan = insurance.update_plan(plan_id, updates)
    console.print(f"[green]✓ Updated plan #{plan['id']}: {plan['name']}[/green]")


def remove_plan_command(plan_id: int) -> None:
    require_database()
    with handled_errors():
        insurance.delete_plan(plan_id)
    console.print(f"[green]✓ Deleted plan #{plan_id}[/green]")


# Family members


def list_members_command() -> None:
    require_database()
    with handled_errors():
        members = insurance.list_members()

    if not members:
        console.print("[yellow]No family members found[/yellow]")
        return

    table = Table(title="Family members")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Plans (in claim order)")
    for member in members:
        plans = " → ".join(plan["name"] for plan in member["plans"]) or "[dim]none[/dim]"
        table.add_row(str(member["id"]), member["name"], plans)
    console.print(table)


def add_member_command(name: str, plan_ids: str | None = None) -> None:
    """Add a family member covered by a comma-separated list of plan ids, primary first."""
    require_database()
    ids = _parse_ids(plan_ids) or []
    with handled_errors():
        member = insurance.create_member(name, ids)
    console.print(f"[green]✓ Added family member #{member['id']}: {member['name']}[/green]")


def edit_member_command(member_id: int, name: str | None = None, plan_ids: str | None = None) -> None:
    require_database()
    ids = _parse_ids(plan_ids)
    updates = _given(name=name)
    if not updates and ids is None:
        console.print("[yellow]Nothing to change[/yellow]")
        return
    with handled_errors():
        member = insurance.update_member(member_id, updates, ids)
    console.print(f"[green]✓ Updated family member #{member['id']}: {member['name']}[/green]")


def remove_member_command(member_id: int) -> None:
    require_database()
    with handled_errors():
        insurance.delete_member(member_id)
    console.print(f"[green]✓ Deleted family member #{member_id}[/green]")


# Claim categories


def list_claim_categories_command() -> None:
    require_database()
    with handled_errors():
        rows = insurance.list_insurance_categories()

    table = Table(title="Claim categories")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Icon")
    table.add_column("Name", style="cyan")
    table.add_column("Order", justify="right")
    table.add_column("Predefined", justify="center")
    for row in rows:
        table.add_row(
            str(row["id"]), row["icon"] or "", row["name"], str(row["sort_order"]), yes_no(row["is_predefined"])
        )
    console.print(table)


def add_claim_category_command(name: str, icon: str | None = None, sort_order: int | None = None) -> None:
    require_database()
    with handled_errors():
        category = insurance.create_insurance_category(_given(name=name, icon=icon, sort_order=sort_order))
    console.print(f"[green]✓ Added claim category #{category['id']}: {category['name']}[/green]")


def remove_claim_category_command(category_id: int) -> None:
    require_database()
    with handled_errors():
        insurance.delete_insurance_category(category_id)
    console.print(f"[green]✓ Deleted claim category #{category_id}[/green]")


# Claims


def list_claims_command(status: str | None = None, member_id: int | None = None) -> None:
    require_database()
    with handled_errors():
        claims = insurance.list_claims(status=status, family_member_id=member_id)
        members = {member["id"]: member["name"] for member in insurance.list_members()}

    if not claims:
        console.print("[yellow]No claims found[/yellow]")
        return

    table = Table(title="Insurance claims")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Service date")
    table.add_column("Member", style="cyan")
    table.add_column("Description")
    table.add_column("Total", justify="right")
    table.add_column("Reimbursed", justify="right")
    table.add_column("Status")
    for claim in claims:
        reimbursed = sum(s["amount_reimbursed"] or 0 for s in claim["submissions"])
        table.add_row(
            str(claim["claim_number"] or ""),
            claim["service_date"],
            members.get(claim["family_member_id"], "?"),
            claim["description"] or "",
            money(claim["total_amount"]),
            money(reimbursed),
            _styled(claim["status"]),
        )
    console.print(table)


def show_claim_command(claim_id: int) -> None:
    """Show a claim with each plan submission."""
    require_database()
    with handled_errors():
        claim = insurance.get_claim(claim_id)
        member = insurance.get_member(claim["family_member_id"])
        category = insurance.get_insurance_category(claim["category_id"])

    title = f"Claim #{claim['claim_number']}" if claim["claim_number"] else f"Expected expense (id {claim['id']})"
    console.print(f"[bold cyan]{title}[/bold cyan] {_styled(claim['status'])}")
    console.print(f"  {member['name']} · {category['name']} · {claim['service_date']}")
    if claim["provider_name"]:
        console.print(f"  Provider: {claim['provider_name']}")
    if claim["description"]:
        console.print(f"  {claim['description']}")
    console.print(f"  Total: {money(claim['total_amount'])}")
    if claim["status"] == "expected":
        console.print(f"  Expected reimbursement: {money(claim['expected_reimbursement'])}")
        return

    if not claim["submissions"]:
        console.print("[yellow]  No plans to submit to[/yellow]")
        return
    table = Table(title="Submissions")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Plan", style="cyan")
    table.add_column("Status")
    table.add_column("Claimed", justify="right")
    table.add_column("Reimbursed", justify="right")
    table.add_column("Submitted")
    table.add_column("Resolved")
    for sub in claim["submissions"]:
        table.add_row(
            str(sub["position"] + 1),
            sub["plan_name"],
            _styled(sub["status"]),
            money(sub["amount_claimed"]),
            money(sub["amount_reimbursed"]),
            sub["date_submitted"] or "",
            sub["date_resolved"] or "",
        )
    console.print(table)


def add_claim_command(
    member_id: int,
    category_id: int,
    service_date: str,
    total: str,
    description: str | None = None,
    provider: str | None = None,
    notes: str | None = None,
) -> None:
    require_database()
    data = _given(
        family_member_id=member_id,
        category_id=category_id,
        service_date=parse_date(service_date, "service date"),
        total_amount=parse_amount(total, "total amount"),
        description=description,
        provider_name=provider,
        notes=notes,
    )
    with handled_errors():
        claim = insurance.create_claim(data)
    console.print(
        f"[green]✓ Opened claim #{claim['claim_number']} for {money(claim['total_amount'])}"
        f" with {len(claim['submissions'])} submission(s)[/green]"
    )


def edit_claim_command(
    claim_id: int,
    category_id: int | None = None,
    service_date: str | None = None,
    total: str | None = None,
    description: str | None = None,
    provider: str | None = None,
) -> None:
    require_database()
    updates = _given(
        category_id=category_id,
        service_date=parse_date(service_date, "service date") if service_date else None,
        total_amount=parse_amount(total, "total amount") if total else None,
        description=description,
        provider_name=provider,
    )
    if not updates:
        console.print("[yellow]Nothing to change[/yellow]")
        return
    with handled_errors():
        claim = insurance.update_claim(claim_id, updates)
    console.print(f"[green]✓ Updated claim #{claim['claim_number']}[/green]")


def submission_command(
    claim_id: int,
    position: int,
    status: str,
    claimed: str | None = None,
    reimbursed: str | None = None,
    notes: str | None = None,
) -> None:
    """Record progress on one plan's submission of a claim."""
    require_database()
    updates = _given(
        status=status,
        amount_claimed=parse_amount(claimed, "claimed amount") if claimed else None,
        amount_reimbursed=parse_amount(reimbursed, "reimbursed amount") if reimbursed else None,
        notes=notes,
    )
    with handled_errors():
        claim = insurance.update_submission(claim_id, position, updates)
    console.print(f"[green]✓ Submission {position} is {status}; claim is {claim['status']}[/green]")


def remove_claim_command(claim_id: int) -> None:
    require_database()
    with handled_errors():
        insurance.delete_claim(claim_id)
    console.print(f"[green]✓ Deleted claim #{claim_id}[/green]")


def claims_summary_command() -> None:
    require_database()
    with handled_errors():
        summary = insurance.get_claims_summary()

    table = Table(title="Claims summary", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Open claims", str(summary.pending_count))
    table.add_row("Awaiting reimbursement", money(summary.pending_amount))
    table.add_row("Closed claims", str(summary.closed_count))
    table.add_row("Reimbursed", money(summary.reimbursed_amount))
    console.print(table)


# Expected expenses


def list_expected_command(month: str | None = None) -> None:
    require_database()
    with handled_errors():
        expenses = insurance.list_expected_expenses(month)
        members = {member["id"]: member["name"] for member in insurance.list_members()}

    if not expenses:
        console.print("[yellow]No expected expenses[/yellow]")
        return

    table = Table(title=f"Expected expenses{f' in {month}' if month else ''}")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Date")
    table.add_column("Member", style="cyan")
    table.add_column("Description")
    table.add_column("Cost", justify="right")
    table.add_column("Covered", justify="right", style="green")
    table.add_column("Net", justify="right", style="red")
    for expense in expenses:
        table.add_row(
            str(expense["id"]),
            expense["service_date"],
            members.get(expense["family_member_id"], "?"),
            expense["description"] or "",
            money(expense["expected_cost"]),
            money(expense["expected_reimbursement"]),
            money(expense["expected_cost"] - expense["expected_reimbursement"]),
        )
    console.print(table)


def add_expected_command(
    member_id: int,
    category_id: int,
    appointment: str,
    cost: str,
    reimbursement: str,
    source_id: int,
    description: str | None = None,
    provider: str | None = None,
) -> None:
    """Record an upcoming appointment and what it should cost."""
    require_database()
    data = _given(
        family_member_id=member_id,
        category_id=category_id,
        service_date=parse_date(appointment, "appointment date"),
        expected_cost=parse_amount(cost, "expected cost"),
        expected_reimbursement=parse_amount(reimbursement, "expected reimbursement"),
        payment_source_id=source_id,
        description=description,
        provider_name=provider,
    )
    with handled_errors():
        expense = insurance.create_expected_expense(data)
    console.print(f"[green]✓ Expected expense {expense['id']} on {expense['service_date']}[/green]")


def edit_expected_command(
    claim_id: int,
    appointment: str | None = None,
    cost: str | None = None,
    reimbursement: str | None = None,
    source_id: int | None = None,
    description: str | None = None,
) -> None:
    require_database()
    updates = _given(
        service_date=parse_date(appointment, "appointment date") if appointment else None,
        expected_cost=parse_amount(cost, "expected cost") if cost else None,
        expected_reimbursement=parse_amount(reimbursement, "expected reimbursement") if reimbursement else None,
        payment_source_id=source_id,
        description=description,
    )
    if not updates:
        console.print("[yellow]Nothing to change[/yellow]")
        return
    with handled_errors():
        insurance.update_expected_expense(claim_id, updates)
    console.print(f"[green]✓ Updated expected expense {claim_id}[/green]")


def convert_expected_command(claim_id: int, actual_cost: str) -> None:
    """Turn an expected expense into a claim once the bill is in."""
    require_database()
    cents = parse_amount(actual_cost, "actual cost")
    with handled_errors():
        claim = insurance.convert_expected_expense(claim_id, cents)
    console.print(
        f"[green]✓ Converted to claim #{claim['claim_number']} for {money(claim['total_amount'])}"
        f" with {len(claim['submissions'])} submission(s)[/green]"
    )


def cancel_expected_command(claim_id: int) -> None:
    require_database()
    with handled_errors():
        insurance.cancel_expected_expense(claim_id)
    console.print(f"[green]✓ Cancelled expected expense {claim_id}[/green]")
