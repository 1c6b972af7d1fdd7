from __future__ import annotations

import datetime
import typing as t

import sqlalchemy as sqla

from seezee.core import di
from seezee.lib import NotSet
from seezee.model import Task, TaskID, TaskPriority, TaskStatus

from . import Session
from .assignment import delete_for_item
from .table import tasks


def get(
    task_id: TaskID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Task | None:
    stmt = sqla.select(tasks.__table__).where(tasks.task_id == task_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Task(**row) if row else None


def get_many(
    task_ids: t.Iterable[TaskID],
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> dict[TaskID, Task]:
    ids = list(task_ids)
    if not ids:
        return {}
    stmt = sqla.select(tasks.__table__).where(tasks.task_id.in_(ids))
    rows = session.execute(stmt).mappings().all()
    return {row["task_id"]: Task(**row) for row in rows}


def find(
    *,
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Task, ...]:
    stmt = sqla.select(tasks.__table__)
    if status is not None:
        stmt = stmt.where(tasks.status == status)
    if priority is not None:
        stmt = stmt.where(tasks.priority == priority)
    stmt = stmt.order_by(tasks.create_time.desc(), tasks.task_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(Task(**row) for row in rows)


def create(
    *,
    title: str,
    description: str = "",
    priority: TaskPriority = TaskPriority.Medium,
    status: TaskStatus = TaskStatus.Todo,
    due_date: datetime.datetime | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Task:
    task = tasks(
        task_id=TaskID(),
        title=title,
        description=description,
        priority=priority,
        status=status,
        due_date=due_date,
    )
    session.add(task)
    session.flush()
    return get(task.task_id, session=session)  # type: ignore[return-value]


def update(
    task_id: TaskID,
    *,
    title: str | NotSet = NotSet(),
    description: str | NotSet = NotSet(),
    priority: TaskPriority | NotSet = NotSet(),
    status: TaskStatus | NotSet = NotSet(),
    due_date: datetime.datetime | None | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
) -> Task:
    """Update a task.

    Raises:
        KeyError: If task_id does not correspond to a task
    """
    values: dict[str, t.Any] = {}
    if not isinstance(title, NotSet):
        values["title"] = title
    if not isinstance(description, NotSet):
        values["description"] = description
    if not isinstance(priority, NotSet):
        values["priority"] = priority
    if not isinstance(status, NotSet):
        values["status"] = status
    if not isinstance(due_date, NotSet):
        values["due_date"] = due_date

    if values:
        stmt = sqla.update(tasks).where(tasks.task_id == task_id).values(**values)
    else:
        stmt = sqla.update(tasks).where(tasks.task_id == task_id).values(task_id=task_id)

    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Task {task_id} not found")

    session.flush()
    return get(task_id, session=session)  # type: ignore[return-value]


def delete(
    task_id: TaskID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete a task along with its assignments and their completions."""
    delete_for_item(task_id, session=session)
    stmt = sqla.delete(tasks).where(tasks.task_id == task_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]
