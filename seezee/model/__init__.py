__all__ = [
    # Base
    "BaseModel",
    "WithCtime",
    "WithMtime",
    "WithTimestamps",
    # Enums
    "DeploymentEnvironment",
    "ItemKind",
    "AudienceType",
    # ID Types
    "UserID",
    "LearningResourceID",
    "ToolID",
    "TaskID",
    "ItemID",
    "AssignmentID",
    "CompletionID",
    "ActivityID",
    "OnboardingPathID",
    # User
    "User",
    "UserRole",
    "RoleStyle",
    "ROLE_STYLES",
    # Items
    "LearningResource",
    "ResourceType",
    "Tool",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "Item",
    "ItemSummary",
    "kind_of",
    "parse_item_id",
    "normalize_tags",
    # Audience
    "UserAudience",
    "RoleAudience",
    "AudienceSpec",
    "AudienceTarget",
    # Assignments
    "Assignment",
    "AssignmentResult",
    "AssignmentView",
    "ItemFailure",
    # Completions
    "Completion",
    "CompletionStatus",
    # Activity
    "Activity",
    "ActivityKind",
    # Onboarding
    "OnboardingPath",
    "OnboardingStep",
    "OnboardingStepSpec",
    "ToolOnboarding",
    # Overview
    "CompletionOverview",
    "LeaderboardEntry",
    "OverdueEntry",
    "RoleCompletionRate",
    "StatusTotals",
]

from .activity import Activity, ActivityKind
from .assignment import Assignment, AssignmentResult, AssignmentView, ItemFailure
from .audience import AudienceSpec, AudienceTarget, RoleAudience, UserAudience
from .base import BaseModel, WithCtime, WithMtime, WithTimestamps
from .completion import Completion, CompletionStatus
from .enum import AudienceType, DeploymentEnvironment, ItemKind
from .id import ActivityID, AssignmentID, CompletionID, ItemID, LearningResourceID, OnboardingPathID, TaskID, ToolID, \
    UserID
from .item import Item, ItemSummary, LearningResource, ResourceType, Task, TaskPriority, TaskStatus, Tool, kind_of, \
    normalize_tags, parse_item_id
from .onboarding import OnboardingPath, OnboardingStep, OnboardingStepSpec, ToolOnboarding
from .overview import CompletionOverview, LeaderboardEntry, OverdueEntry, RoleCompletionRate, StatusTotals
from .user import ROLE_STYLES, RoleStyle, User, UserRole
