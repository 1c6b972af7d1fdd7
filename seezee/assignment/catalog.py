"""Item lookup across the three assignable kinds.

The kind of an item is read from its ID prefix, so no lookup ever has to probe
more than one table.
"""

from __future__ import annotations

import collections
import typing as t

from sqlalchemy.orm import Session

from seezee.core import di
from seezee.model import Item, ItemID, ItemKind, ItemSummary, kind_of, LearningResourceID, parse_item_id, TaskID, \
    ToolID
from seezee.storage import resource as resource_storage
from seezee.storage import task as task_storage
from seezee.storage import tool as tool_storage


def get_item(
    item_id: ItemID | str,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Item | None:
    item_id = parse_item_id(item_id)
    match item_id:
        case LearningResourceID():
            return resource_storage.get(item_id, session=session)
        case ToolID():
            return tool_storage.get(item_id, session=session)
        case TaskID():
            return task_storage.get(item_id, session=session)


def get_items(
    item_ids: t.Iterable[ItemID],
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> dict[ItemID, Item]:
    """The items that exist among item_ids, one query per kind."""
    by_kind: dict[ItemKind, list[t.Any]] = collections.defaultdict(list)
    for item_id in item_ids:
        by_kind[kind_of(item_id)].append(item_id)

    found: dict[ItemID, Item] = {}
    if ids := by_kind.get(ItemKind.Resource):
        found.update(resource_storage.get_many(ids, session=session))
    if ids := by_kind.get(ItemKind.Tool):
        found.update(tool_storage.get_many(ids, session=session))
    if ids := by_kind.get(ItemKind.Task):
        found.update(task_storage.get_many(ids, session=session))
    return found


def summarize(
    item_ids: t.Iterable[ItemID],
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> dict[ItemID, ItemSummary]:
    """Display summaries for the items that still exist."""
    return {item_id: ItemSummary.of(item) for item_id, item in get_items(item_ids, session=session).items()}


def delete_item(
    item_id: ItemID | str,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete an item of any kind, with its assignments and their completions."""
    item_id = parse_item_id(item_id)
    match item_id:
        case LearningResourceID():
            return resource_storage.delete(item_id, session=session)
        case ToolID():
            return tool_storage.delete(item_id, session=session)
        case TaskID():
            return task_storage.delete(item_id, session=session)
