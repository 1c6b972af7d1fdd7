from __future__ import annotations

import datetime
import typing as t

import sqlalchemy as sqla

from seezee.core import di
from seezee.lib.sql import dialect_insert
from seezee.model import Assignment, AssignmentID, AudienceTarget, AudienceType, ItemID, kind_of, parse_item_id, \
    UserID, UserRole

from . import Session
from .table import assignments, ROLE_AUDIENCE, USER_AUDIENCE


def get(
    assignment_id: AssignmentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Assignment | None:
    """Get an assignment by ID."""
    stmt = sqla.select(assignments.__table__).where(assignments.assignment_id == assignment_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Assignment(**row) if row else None


def find(
    *,
    item_id: ItemID | None = None,
    audience_type: AudienceType | None = None,
    user_id: UserID | None = None,
    role: UserRole | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Assignment, ...]:
    """Find assignments matching criteria, newest first."""
    stmt = sqla.select(assignments.__table__)
    if item_id is not None:
        stmt = stmt.where(assignments.item_id == item_id)
    if audience_type is not None:
        stmt = stmt.where(assignments.audience_type == audience_type)
    if user_id is not None:
        stmt = stmt.where(assignments.user_id == user_id)
    if role is not None:
        stmt = stmt.where(assignments.role == role)
    stmt = stmt.order_by(assignments.create_time.desc(), assignments.assignment_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(Assignment(**row) for row in rows)


def find_visible(
    user_id: UserID,
    role: UserRole,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Assignment, ...]:
    """Assignments aimed at user_id directly or at role, newest first.

    role is the user's role as of this read. Role-targeted rows are never
    expanded into per-user rows, so a role change shows up here immediately.
    """
    direct = sqla.and_(assignments.audience_type == AudienceType.User, assignments.user_id == user_id)
    by_role = sqla.and_(assignments.audience_type == AudienceType.Role, assignments.role == role)
    stmt = (
        sqla
        .select(assignments.__table__)
        .where(sqla.or_(direct, by_role))
        .order_by(assignments.create_time.desc(), assignments.assignment_id)
    )
    rows = session.execute(stmt).mappings().all()
    return tuple(Assignment(**row) for row in rows)


def is_visible_to(assignment: Assignment, user_id: UserID, role: UserRole) -> bool:
    match assignment.audience_type:
        case AudienceType.User:
            return assignment.user_id == user_id
        case AudienceType.Role:
            return assignment.role == role


def create(
    *,
    item_id: ItemID,
    target: AudienceTarget,
    assigned_by: UserID | None = None,
    due_at: datetime.datetime | None = None,
    create_time: datetime.datetime | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Assignment | None:
    """Insert one assignment row unless an equivalent row already exists.

    The insert is ON CONFLICT DO NOTHING against the partial unique index for
    the target's audience type, so concurrent callers cannot produce a
    duplicate and no read happens before the write.

    Returns:
        The new assignment, or None if the row already existed
    """
    item_id = parse_item_id(item_id)
    values: dict[str, t.Any] = {
        "assignment_id": AssignmentID(),
        "item_kind": kind_of(item_id),
        "item_id": item_id,
        "assigned_by": assigned_by,
        "due_at": due_at,
    }
    if create_time is not None:
        values["create_time"] = create_time

    if isinstance(target, UserRole):
        values.update(audience_type=AudienceType.Role, role=target)
        conflict_on, conflict_where = ["item_id", "role"], ROLE_AUDIENCE
    else:
        values.update(audience_type=AudienceType.User, user_id=UserID(target))
        conflict_on, conflict_where = ["item_id", "user_id"], USER_AUDIENCE

    stmt = dialect_insert(session, assignments.__table__).values(**values).on_conflict_do_nothing(
        index_elements=conflict_on, index_where=conflict_where
    )
    result = session.execute(stmt)
    if not result.rowcount:  # pyright: ignore[reportAttributeAccessIssue]
        return None
    session.flush()
    return get(values["assignment_id"], session=session)


def delete(
    assignment_id: AssignmentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete an assignment. Its completions go with it.

    Returns:
        True if an assignment was deleted, False if not found
    """
    stmt = sqla.delete(assignments).where(assignments.assignment_id == assignment_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]


def delete_for_item(
    item_id: ItemID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> int:
    """Delete every assignment of an item, returning how many went."""
    stmt = sqla.delete(assignments).where(assignments.item_id == item_id)
    result = session.execute(stmt)
    return result.rowcount  # pyright: ignore[reportAttributeAccessIssue]
