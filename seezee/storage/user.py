from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from seezee.core import di
from seezee.lib import NotSet
from seezee.model import User, UserID, UserRole

from . import Session
from .table import users


@t.overload
def get(*, user_id: UserID, session: Session = ...) -> User | None: ...


@t.overload
def get(*, email: str, session: Session = ...) -> User | None: ...


def get(
    *,
    user_id: UserID | None = None,
    email: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> User | None:
    """Get a user by ID or email.

    Exactly one of user_id or email must be provided.
    """
    if user_id is None and email is None:
        raise ValueError("Either user_id or email must be provided")
    if user_id is not None and email is not None:
        raise ValueError("Only one of user_id or email should be provided")

    if user_id is not None:
        stmt = sqla.select(users.__table__).where(users.user_id == user_id)
    else:
        stmt = sqla.select(users.__table__).where(users.email == email)

    row = session.execute(stmt).mappings().one_or_none()
    return User(**row) if row else None


def get_many(
    user_ids: t.Iterable[UserID],
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> dict[UserID, User]:
    """Get the users that exist among user_ids, keyed by ID."""
    ids = list(user_ids)
    if not ids:
        return {}
    stmt = sqla.select(users.__table__).where(users.user_id.in_(ids))
    rows = session.execute(stmt).mappings().all()
    return {row["user_id"]: User(**row) for row in rows}


def find(
    *,
    role: UserRole | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[User, ...]:
    """Find users matching criteria, ordered by name."""
    stmt = sqla.select(users.__table__)
    if role is not None:
        stmt = stmt.where(users.role == role)
    stmt = stmt.order_by(users.name, users.user_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(User(**row) for row in rows)


def create(
    *,
    email: str,
    name: str,
    role: UserRole,
    session: Session = di.Provide["storage.persistent.session"],
) -> User:
    """Create a new user."""
    user = users(
        user_id=UserID(),
        email=email,
        name=name,
        role=role,
    )
    session.add(user)
    session.flush()
    return get(user_id=user.user_id, session=session)  # type: ignore[return-value]


def update(
    user_id: UserID,
    *,
    email: str | NotSet = NotSet(),
    name: str | NotSet = NotSet(),
    role: UserRole | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
) -> User:
    """Update a user.

    A role change takes effect on the user's role-targeted assignments at the
    next read; nothing is rewritten.

    Raises:
        KeyError: If user_id does not correspond to a user
    """
    values: dict[str, t.Any] = {}
    if not isinstance(email, NotSet):
        values["email"] = email
    if not isinstance(name, NotSet):
        values["name"] = name
    if not isinstance(role, NotSet):
        values["role"] = role

    if values:
        stmt = sqla.update(users).where(users.user_id == user_id).values(**values)
    else:
        # No-op update to verify user exists
        stmt = sqla.update(users).where(users.user_id == user_id).values(user_id=user_id)

    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"User {user_id} not found")

    session.flush()
    return get(user_id=user_id, session=session)  # type: ignore[return-value]


def delete(
    user_id: UserID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete a user.

    Returns:
        True if a user was deleted, False if not found
    """
    stmt = sqla.delete(users).where(users.user_id == user_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]
