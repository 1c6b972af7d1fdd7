from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from seezee.core import di
from seezee.model import normalize_tags, Tool, ToolID

from . import Session
from .assignment import delete_for_item
from .table import tools


def get(
    tool_id: ToolID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Tool | None:
    stmt = sqla.select(tools.__table__).where(tools.tool_id == tool_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Tool(**row) if row else None


def get_many(
    tool_ids: t.Iterable[ToolID],
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> dict[ToolID, Tool]:
    ids = list(tool_ids)
    if not ids:
        return {}
    stmt = sqla.select(tools.__table__).where(tools.tool_id.in_(ids))
    rows = session.execute(stmt).mappings().all()
    return {row["tool_id"]: Tool(**row) for row in rows}


def find(
    *,
    category: str | None = None,
    search: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Tool, ...]:
    """Tools by name; search matches name or description, ignoring case."""
    stmt = sqla.select(tools.__table__)
    if category is not None:
        stmt = stmt.where(tools.category == category)
    if search:
        stmt = stmt.where(
            sqla.or_(
                tools.name.icontains(search, autoescape=True),
                tools.description.icontains(search, autoescape=True),
            )
        )
    stmt = stmt.order_by(tools.name, tools.tool_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(Tool(**row) for row in rows)


def create(
    *,
    name: str,
    category: str,
    url: str,
    description: str | None = None,
    pricing: str | None = None,
    tags: t.Iterable[str] = (),
    session: Session = di.Provide["storage.persistent.session"],
) -> Tool:
    tool = tools(
        tool_id=ToolID(),
        name=name,
        category=category,
        url=url,
        description=description,
        pricing=pricing,
        tags=normalize_tags(tags),
    )
    session.add(tool)
    session.flush()
    return get(tool.tool_id, session=session)  # type: ignore[return-value]


def delete(
    tool_id: ToolID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete a tool along with its assignments and their completions."""
    delete_for_item(tool_id, session=session)
    stmt = sqla.delete(tools).where(tools.tool_id == tool_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]
