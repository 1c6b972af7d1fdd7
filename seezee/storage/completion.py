from __future__ import annotations

import datetime
import typing as t

import sqlalchemy as sqla

from seezee.core import di
from seezee.lib.sql import dialect_insert
from seezee.model import AssignmentID, Completion, CompletionID, CompletionStatus, UserID

from . import Session
from .table import completions


def get(
    *,
    completion_id: CompletionID | None = None,
    assignment_id: AssignmentID | None = None,
    user_id: UserID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Completion | None:
    """Get a completion by ID, or by its (assignment_id, user_id) pair."""
    if completion_id is not None:
        stmt = sqla.select(completions.__table__).where(completions.completion_id == completion_id)
    elif assignment_id is not None and user_id is not None:
        stmt = sqla.select(completions.__table__).where(
            completions.assignment_id == assignment_id,
            completions.user_id == user_id,
        )
    else:
        raise ValueError("Either completion_id or both assignment_id and user_id must be provided")
    row = session.execute(stmt).mappings().one_or_none()
    return Completion(**row) if row else None


def find(
    *,
    assignment_id: AssignmentID | t.Iterable[AssignmentID] | None = None,
    user_id: UserID | None = None,
    status: CompletionStatus | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Completion, ...]:
    stmt = sqla.select(completions.__table__)
    if isinstance(assignment_id, AssignmentID):
        stmt = stmt.where(completions.assignment_id == assignment_id)
    elif assignment_id is not None:
        stmt = stmt.where(completions.assignment_id.in_(list(assignment_id)))
    if user_id is not None:
        stmt = stmt.where(completions.user_id == user_id)
    if status is not None:
        stmt = stmt.where(completions.status == status)
    stmt = stmt.order_by(completions.update_time.desc(), completions.completion_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(Completion(**row) for row in rows)


def upsert_status(
    *,
    assignment_id: AssignmentID,
    user_id: UserID,
    status: CompletionStatus,
    now: datetime.datetime,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Create or advance the completion for (assignment_id, user_id).

    started_at is stamped on entering in_progress or complete, completed_at on
    entering complete; neither is overwritten once set. The update only applies
    while the stored status is at or below status, so a row never moves
    backwards however writers interleave.

    Returns:
        False if the stored status was ahead of status and nothing changed
    """
    started_at = now if status >= CompletionStatus.InProgress else None
    completed_at = now if status is CompletionStatus.Complete else None

    stmt = dialect_insert(session, completions.__table__).values(
        completion_id=CompletionID(),
        assignment_id=assignment_id,
        user_id=user_id,
        status=status,
        started_at=started_at,
        completed_at=completed_at,
        create_time=now,
        update_time=now,
    )
    table = completions.__table__
    stmt = stmt.on_conflict_do_update(
        index_elements=["assignment_id", "user_id"],
        set_={
            "status": stmt.excluded.status,
            "started_at": sqla.func.coalesce(table.c.started_at, stmt.excluded.started_at),
            "completed_at": sqla.func.coalesce(table.c.completed_at, stmt.excluded.completed_at),
            "update_time": stmt.excluded.update_time,
        },
        where=table.c.status.in_(status.at_most()),
    )
    result = session.execute(stmt)
    session.flush()
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]
