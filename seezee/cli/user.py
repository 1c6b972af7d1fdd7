"""CLI commands for managing users and their roles."""

from __future__ import annotations

from sqlalchemy.orm import Session

import seezee.lib.cli as click
from seezee.core import di
from seezee.model import ROLE_STYLES, User, UserID, UserRole
from seezee.storage import user as user_storage


def styled_role(role: UserRole) -> str:
    return click.style(role.value, fg=ROLE_STYLES[role].color, bold=True)


def echo_user(u: User) -> None:
    click.echo(f"User: {u.name}")
    click.echo(f"  ID: {u.user_id}")
    click.echo(f"  Email: {u.email}")
    click.echo(f"  Role: {styled_role(u.role)} ({ROLE_STYLES[u.role].icon})")


@click.group("user")
def user():
    """Manage users and their roles."""
    ...


@user.command("create")
@click.argument("email")
@click.argument("name")
@click.option("--role", "-r", type=click.EnumType(UserRole), required=True, help="The user's role")
@di.inject
def user_create(
    email: str,
    name: str,
    role: UserRole,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Create a new user.

    EMAIL is the user's email address.
    NAME is the user's display name.
    """
    with session.begin():
        if user_storage.get(email=email, session=session):
            click.echo(f"Error: User with email '{email}' already exists.", err=True)
            raise SystemExit(1)
        new_user = user_storage.create(email=email, name=name, role=role, session=session)

    echo_user(new_user)


@user.command("set-role")
@click.argument("user_id", type=click.KeyParamType(UserID, "user"))
@click.argument("role", type=click.EnumType(UserRole))
@di.inject
def user_set_role(
    user_id: UserID,
    role: UserRole,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Change a user's role.

    Assignments made to the new role apply immediately, and those made to the
    old one stop applying.
    """
    with session.begin():
        try:
            updated = user_storage.update(user_id, role=role, session=session)
        except KeyError as e:
            click.echo(f"Error: User '{user_id}' not found.", err=True)
            raise SystemExit(1) from e

    click.echo(f"{updated.name} is now {styled_role(updated.role)}")


@user.command("list")
@click.option("--role", "-r", type=click.EnumType(UserRole), help="Filter by role")
@di.inject
def user_list(
    role: UserRole | None,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """List users, optionally filtered by role."""
    with session.begin():
        users = user_storage.find(role=role, session=session)

    if not users:
        click.echo("No users found.")
        return

    click.echo(f"{'ID':<30} {'Name':<25} {'Email':<30} Role")
    click.echo("-" * 95)
    for u in users:
        click.echo(f"{str(u.user_id):<30} {u.name:<25} {u.email:<30} {styled_role(u.role)}")


command = user
