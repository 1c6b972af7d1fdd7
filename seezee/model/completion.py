from __future__ import annotations

import datetime
import enum
import functools

from .base import BaseModel, WithTimestamps
from .id import AssignmentID, CompletionID, UserID


@functools.total_ordering
class CompletionStatus(enum.Enum):
    NotStarted = "not_started"
    InProgress = "in_progress"
    Complete = "complete"

    @property
    def rank(self) -> int:
        return list(CompletionStatus).index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CompletionStatus):
            return NotImplemented
        return self.rank < other.rank

    def at_most(self) -> tuple[CompletionStatus, ...]:
        """Statuses a completion may move from when moving into this one."""
        return tuple(s for s in CompletionStatus if s <= self)


class Completion(WithTimestamps):
    completion_id: CompletionID
    assignment_id: AssignmentID
    user_id: UserID

    status: CompletionStatus = CompletionStatus.NotStarted
    started_at: datetime.datetime | None = None
    completed_at: datetime.datetime | None = None
