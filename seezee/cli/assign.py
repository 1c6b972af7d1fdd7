"""CLI commands for assigning items and tracking progress on them."""

from __future__ import annotations

import datetime

import seezee.lib.cli as click
from seezee import assignment
from seezee.model import AssignmentID, CompletionStatus, parse_item_id, RoleAudience, UserAudience, UserID, UserRole

from .user import styled_role

UserIDParamType = click.KeyParamType(UserID, "user")


@click.group("assign")
def assign():
    """Assign items to users or roles and track completion."""
    ...


@assign.command("items")
@click.argument("item_ids", nargs=-1, required=True, type=click.KeyParamType(parse_item_id, "item"))
@click.option(
    "--user",
    "-u",
    "user_ids",
    multiple=True,
    type=UserIDParamType,
    cls=click.RequiredXOROption,
    required_xor=["roles"],
    help="Assign to this user, may be given more than once",
)
@click.option(
    "--role",
    "-r",
    "roles",
    multiple=True,
    type=click.EnumType(UserRole),
    cls=click.RequiredXOROption,
    required_xor=["user_ids"],
    help="Assign to everyone holding this role, may be given more than once",
)
@click.option("--due", "due_at", type=click.UTCDateTime(), default=None, help="Due date, read as UTC")
@click.option("--by", "assigned_by", type=UserIDParamType, default=None, help="The assigning user")
def assign_items(
    item_ids: tuple[str, ...],
    user_ids: tuple[UserID, ...],
    roles: tuple[UserRole, ...],
    due_at: datetime.datetime | None,
    assigned_by: UserID | None,
) -> None:
    """Assign ITEM_IDS to users or to roles.

    Pairs that are already assigned are skipped.
    """
    audience = UserAudience(user_ids=list(user_ids)) if user_ids else RoleAudience(roles=list(roles))
    result = assignment.assign(list(item_ids), audience, due_at, assigned_by=assigned_by)

    click.echo(result.message)
    for a in result.assignments:
        target = str(a.user_id) if a.user_id else styled_role(a.role)  # type: ignore[arg-type]
        click.echo(f"  {a.assignment_id}  {a.item_id} -> {target}")
    for failure in result.failures:
        click.echo(click.style(f"  {failure.item_id}: {failure.message}", fg="yellow"), err=True)
    if result.failures and not result.created and not result.skipped:
        raise SystemExit(1)


@assign.command("status")
@click.argument("assignment_id", type=click.KeyParamType(AssignmentID, "assignment"))
@click.argument("user_id", type=UserIDParamType)
@click.argument("status", type=click.EnumType(CompletionStatus))
def assign_status(assignment_id: AssignmentID, user_id: UserID, status: CompletionStatus) -> None:
    """Set USER_ID's progress on ASSIGNMENT_ID."""
    completion = assignment.set_completion_status(assignment_id, user_id, status)
    click.echo(f"{completion.completion_id}: {completion.status.value}")
    if completion.started_at:
        click.echo(f"  Started: {completion.started_at.isoformat()}")
    if completion.completed_at:
        click.echo(f"  Completed: {completion.completed_at.isoformat()}")


@assign.command("mine")
@click.argument("user_id", type=UserIDParamType)
def assign_mine(user_id: UserID) -> None:
    """List what is assigned to USER_ID, directly or through their role."""
    views = assignment.list_assignments_for_user(user_id)
    if not views:
        click.echo("Nothing assigned.")
        return

    click.echo(f"{'Assignment':<36} {'Kind':<10} {'Status':<12} {'Due':<12} Title")
    click.echo("-" * 100)
    for v in views:
        status = v.completion.status if v.completion else CompletionStatus.NotStarted
        due = v.assignment.due_at.date().isoformat() if v.assignment.due_at else ""
        click.echo(f"{str(v.assignment.assignment_id):<36} {v.item.kind.value:<10} {status.value:<12} {due:<12} {v.item.title}")


@assign.command("overview")
def assign_overview() -> None:
    """Show completion totals, overdue work, per-role rates and the leaderboard."""
    ov = assignment.completion_overview()
    totals = ov.totals

    click.echo(
        f"Assigned: {totals.assigned}  Not started: {totals.not_started}  "
        f"In progress: {totals.in_progress}  Completed: {totals.completed}  ({totals.completion_rate}%)"
    )

    click.echo(f"\nOverdue ({ov.overdue_count}):")
    for o in ov.overdue:
        click.echo(f"  {o.days_overdue:>4}d  {o.name:<25} {o.item.title} [{o.status.value}]")

    if ov.roles:
        click.echo("\nBy role:")
        for r in ov.roles:
            click.echo(f"  {styled_role(r.role):<20} {r.completed}/{r.total} ({r.completion_rate}%)")

    if ov.leaderboard:
        click.echo("\nLeaderboard:")
        for rank, entry in enumerate(ov.leaderboard, start=1):
            click.echo(f"  {rank:>2}. {entry.name:<25} {entry.completed}/{entry.total} ({entry.completion_rate}%)")


command = assign
