import enum
import typing as t

from .base import BaseModel, WithCtime
from .id import ActivityID, UserID


class ActivityKind(enum.Enum):
    AssignmentCreated = "assignment.created"
    AssignmentDeleted = "assignment.deleted"


class Activity(WithCtime):
    activity_id: ActivityID
    kind: ActivityKind
    title: str
    description: str
    actor_id: UserID | None = None
    metadata: dict[str, t.Any] = {}
