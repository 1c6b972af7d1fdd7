from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from seezee.core import di
from seezee.model import Activity, ActivityID, ActivityKind, UserID

from . import Session
from .table import activities


def get(
    activity_id: ActivityID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Activity | None:
    stmt = sqla.select(activities.__table__).where(activities.activity_id == activity_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Activity(**row) if row else None


def find(
    *,
    kind: ActivityKind | None = None,
    actor_id: UserID | None = None,
    limit: int | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Activity, ...]:
    """Find activity records, newest first."""
    stmt = sqla.select(activities.__table__)
    if kind is not None:
        stmt = stmt.where(activities.kind == kind)
    if actor_id is not None:
        stmt = stmt.where(activities.actor_id == actor_id)
    stmt = stmt.order_by(activities.create_time.desc(), activities.activity_id)
    if limit is not None:
        stmt = stmt.limit(limit)
    rows = session.execute(stmt).mappings().all()
    return tuple(Activity(**row) for row in rows)


def create(
    *,
    kind: ActivityKind,
    title: str,
    description: str,
    actor_id: UserID | None = None,
    metadata: t.Mapping[str, t.Any] | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Activity:
    activity = activities(
        activity_id=ActivityID(),
        kind=kind,
        title=title,
        description=description,
        actor_id=actor_id,
        metadata_=dict(metadata or {}),
    )
    session.add(activity)
    session.flush()
    return get(activity.activity_id, session=session)  # type: ignore[return-value]
