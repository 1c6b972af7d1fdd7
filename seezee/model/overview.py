import datetime

from .base import BaseModel
from .completion import CompletionStatus
from .id import CompletionID, UserID
from .item import ItemSummary
from .user import UserRole


class StatusTotals(BaseModel):
    assigned: int = 0
    not_started: int = 0
    in_progress: int = 0
    completed: int = 0
    completion_rate: int = 0


class RoleCompletionRate(BaseModel):
    role: UserRole
    total: int
    completed: int
    completion_rate: int


class LeaderboardEntry(BaseModel):
    user_id: UserID
    name: str
    role: UserRole
    total: int
    completed: int
    completion_rate: int


class OverdueEntry(BaseModel):
    completion_id: CompletionID
    user_id: UserID
    name: str
    item: ItemSummary
    due_at: datetime.datetime
    status: CompletionStatus
    days_overdue: int


class CompletionOverview(BaseModel):
    totals: StatusTotals
    overdue_count: int
    overdue: list[OverdueEntry]
    roles: list[RoleCompletionRate]
    leaderboard: list[LeaderboardEntry]
