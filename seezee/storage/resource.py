from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from seezee.core import di
from seezee.model import LearningResource, LearningResourceID, normalize_tags, ResourceType

from . import Session
from .assignment import delete_for_item
from .table import learning_resources


def get(
    resource_id: LearningResourceID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> LearningResource | None:
    stmt = sqla.select(learning_resources.__table__).where(learning_resources.resource_id == resource_id)
    row = session.execute(stmt).mappings().one_or_none()
    return LearningResource(**row) if row else None


def get_many(
    resource_ids: t.Iterable[LearningResourceID],
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> dict[LearningResourceID, LearningResource]:
    ids = list(resource_ids)
    if not ids:
        return {}
    stmt = sqla.select(learning_resources.__table__).where(learning_resources.resource_id.in_(ids))
    rows = session.execute(stmt).mappings().all()
    return {row["resource_id"]: LearningResource(**row) for row in rows}


def find(
    *,
    type: ResourceType | None = None,
    category: str | None = None,
    tag: str | None = None,
    search: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[LearningResource, ...]:
    """Find resources matching criteria, newest first.

    search matches title or description, ignoring case. tag matching happens
    after the query since tags are stored as an array on PostgreSQL and as
    JSON elsewhere.
    """
    stmt = sqla.select(learning_resources.__table__)
    if type is not None:
        stmt = stmt.where(learning_resources.type == type)
    if category is not None:
        stmt = stmt.where(learning_resources.category == category)
    if search:
        stmt = stmt.where(
            sqla.or_(
                learning_resources.title.icontains(search, autoescape=True),
                learning_resources.description.icontains(search, autoescape=True),
            )
        )
    stmt = stmt.order_by(learning_resources.create_time.desc(), learning_resources.resource_id)
    rows = session.execute(stmt).mappings().all()
    found = (LearningResource(**row) for row in rows)
    if tag is not None:
        wanted = tag.strip().lower()
        found = (r for r in found if wanted in r.tags)
    return tuple(found)


def create(
    *,
    title: str,
    type: ResourceType,
    url: str,
    description: str | None = None,
    category: str | None = None,
    tags: t.Iterable[str] = (),
    session: Session = di.Provide["storage.persistent.session"],
) -> LearningResource:
    resource = learning_resources(
        resource_id=LearningResourceID(),
        title=title,
        type=type,
        url=url,
        description=description,
        category=category,
        tags=normalize_tags(tags),
    )
    session.add(resource)
    session.flush()
    return get(resource.resource_id, session=session)  # type: ignore[return-value]


def delete(
    resource_id: LearningResourceID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete a resource along with its assignments and their completions.

    Returns:
        True if a resource was deleted, False if not found
    """
    delete_for_item(resource_id, session=session)
    stmt = sqla.delete(learning_resources).where(learning_resources.resource_id == resource_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]
