import datetime
import enum
import typing as t

from .base import BaseModel, WithCtime, WithTimestamps
from .enum import ItemKind
from .id import ItemID, LearningResourceID, TaskID, ToolID


class ResourceType(enum.Enum):
    Video = "video"
    Article = "article"
    Course = "course"
    Documentation = "documentation"
    Tutorial = "tutorial"
    Other = "other"


class TaskPriority(enum.Enum):
    Low = "low"
    Medium = "medium"
    High = "high"
    Urgent = "urgent"


class TaskStatus(enum.Enum):
    Todo = "todo"
    InProgress = "in_progress"
    Done = "done"


ItemIDTypes: t.Mapping[ItemKind, type[ItemID]] = {
    ItemKind.Resource: LearningResourceID,
    ItemKind.Tool: ToolID,
    ItemKind.Task: TaskID,
}


def kind_of(item_id: ItemID) -> ItemKind:
    for kind, id_type in ItemIDTypes.items():
        if isinstance(item_id, id_type):
            return kind
    raise TypeError(f"not an item id: {item_id!r}")


def parse_item_id(s: str) -> ItemID:
    """Build the typed item ID for s, picking the kind from its prefix.

    Raises:
        ValueError: if the prefix names no item kind or the key is malformed
    """
    if isinstance(s, (LearningResourceID, ToolID, TaskID)):
        return s
    for id_type in ItemIDTypes.values():
        if id_type.has_prefix(s):
            return id_type(s)
    raise ValueError(f"{s!r} is not a resource, tool or task ID")


def normalize_tags(tags: t.Iterable[str]) -> list[str]:
    """Lower-case and trim tags, dropping blanks and repeats (first one wins)."""
    normalized = (tag.strip().lower() for tag in tags)
    return list(dict.fromkeys(tag for tag in normalized if tag))


class LearningResource(WithCtime):
    resource_id: LearningResourceID
    title: str
    type: ResourceType
    url: str
    description: str | None = None
    category: str | None = None
    tags: list[str] = []


class Tool(WithCtime):
    tool_id: ToolID
    name: str
    category: str
    url: str
    description: str | None = None
    pricing: str | None = None
    tags: list[str] = []


class Task(WithTimestamps):
    task_id: TaskID
    title: str
    description: str = ""
    priority: TaskPriority = TaskPriority.Medium
    status: TaskStatus = TaskStatus.Todo
    due_date: datetime.datetime | None = None


Item = LearningResource | Tool | Task


class ItemSummary(BaseModel):
    item_id: ItemID
    kind: ItemKind
    title: str

    @classmethod
    def of(cls, item: Item) -> "ItemSummary":
        match item:
            case LearningResource():
                return cls(item_id=item.resource_id, kind=ItemKind.Resource, title=item.title)
            case Tool():
                return cls(item_id=item.tool_id, kind=ItemKind.Tool, title=item.name)
            case Task():
                return cls(item_id=item.task_id, kind=ItemKind.Task, title=item.title)
