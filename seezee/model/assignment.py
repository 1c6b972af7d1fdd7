import datetime

from .base import BaseModel, WithCtime
from .completion import Completion
from .enum import AudienceType, ItemKind
from .id import AssignmentID, ItemID, UserID
from .item import ItemSummary
from .user import UserRole


class Assignment(WithCtime):
    assignment_id: AssignmentID
    item_kind: ItemKind
    item_id: ItemID
    audience_type: AudienceType

    # exactly one of these is set, per audience_type
    user_id: UserID | None = None
    role: UserRole | None = None

    assigned_by: UserID | None = None
    due_at: datetime.datetime | None = None


class ItemFailure(BaseModel):
    item_id: str
    error: str
    message: str


class AssignmentResult(BaseModel):
    created: int = 0
    skipped: int = 0
    message: str = ""
    assignments: list[Assignment] = []
    failures: list[ItemFailure] = []


class AssignmentView(BaseModel):
    """An assignment as one user sees it, with that user's own progress."""

    assignment: Assignment
    item: ItemSummary
    completion: Completion | None = None
