import datetime
import typing as t

from sqlalchemy import CheckConstraint, ForeignKey, func, Index, text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass
from sqlalchemy.types import JSON, String

from seezee.model import ActivityID, ActivityKind, AssignmentID, AudienceType, CompletionID, CompletionStatus, ItemID, \
    ItemKind, LearningResourceID, OnboardingPathID, ResourceType, TaskID, TaskPriority, TaskStatus, ToolID, UserID, \
    UserRole

from .type import ItemIDType, ShortUUIDKeyType, TZDateTime, value_enum

# partial unique indexes and the upserts aimed at them share these predicates
USER_AUDIENCE = text("audience_type = 'user'")
ROLE_AUDIENCE = text("audience_type = 'role'")


class base(MappedAsDataclass, DeclarativeBase):
    type_annotation_map = {
        UserID: ShortUUIDKeyType(UserID),
        LearningResourceID: ShortUUIDKeyType(LearningResourceID),
        ToolID: ShortUUIDKeyType(ToolID),
        TaskID: ShortUUIDKeyType(TaskID),
        AssignmentID: ShortUUIDKeyType(AssignmentID),
        CompletionID: ShortUUIDKeyType(CompletionID),
        ActivityID: ShortUUIDKeyType(ActivityID),
        OnboardingPathID: ShortUUIDKeyType(OnboardingPathID),
        datetime.datetime: TZDateTime(),
        list[str]: JSON().with_variant(ARRAY(String), "postgresql"),
        dict[str, t.Any]: JSON().with_variant(JSONB(), "postgresql"),
        UserRole: value_enum(UserRole),
        ItemKind: value_enum(ItemKind),
        AudienceType: value_enum(AudienceType),
        CompletionStatus: value_enum(CompletionStatus),
        ResourceType: value_enum(ResourceType),
        TaskPriority: value_enum(TaskPriority),
        TaskStatus: value_enum(TaskStatus),
        ActivityKind: value_enum(ActivityKind),
    }


# Users


class users(base):
    __tablename__ = "users"

    user_id: Mapped[UserID] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(unique=True)
    name: Mapped[str]
    role: Mapped[UserRole]
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


# Assignable items


class learning_resources(base):
    __tablename__ = "learning_resources"

    resource_id: Mapped[LearningResourceID] = mapped_column(primary_key=True)
    title: Mapped[str]
    type: Mapped[ResourceType]
    url: Mapped[str]
    description: Mapped[str | None] = mapped_column(default=None)
    category: Mapped[str | None] = mapped_column(default=None)
    tags: Mapped[list[str]] = mapped_column(default_factory=list)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


class tools(base):
    __tablename__ = "tools"

    tool_id: Mapped[ToolID] = mapped_column(primary_key=True)
    name: Mapped[str]
    category: Mapped[str]
    url: Mapped[str]
    description: Mapped[str | None] = mapped_column(default=None)
    pricing: Mapped[str | None] = mapped_column(default=None)
    tags: Mapped[list[str]] = mapped_column(default_factory=list)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


class tasks(base):
    __tablename__ = "tasks"

    task_id: Mapped[TaskID] = mapped_column(primary_key=True)
    title: Mapped[str]
    description: Mapped[str] = mapped_column(default="")
    priority: Mapped[TaskPriority] = mapped_column(default=TaskPriority.Medium)
    status: Mapped[TaskStatus] = mapped_column(default=TaskStatus.Todo)
    due_date: Mapped[datetime.datetime | None] = mapped_column(default=None)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


# Onboarding paths


class onboarding_paths(base):
    """At most one ordered path of learning resources per tool."""

    __tablename__ = "onboarding_paths"

    onboarding_path_id: Mapped[OnboardingPathID] = mapped_column(primary_key=True)
    tool_id: Mapped[ToolID] = mapped_column(ForeignKey("tools.tool_id", ondelete="CASCADE"), unique=True)
    title: Mapped[str]
    description: Mapped[str | None] = mapped_column(default=None)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


class onboarding_steps(base):
    __tablename__ = "onboarding_steps"
    __table_args__ = (
        UniqueConstraint("onboarding_path_id", "resource_id", name="uq_onboarding_steps_path_resource"),
    )

    onboarding_path_id: Mapped[OnboardingPathID] = mapped_column(
        ForeignKey("onboarding_paths.onboarding_path_id", ondelete="CASCADE"), primary_key=True
    )
    position: Mapped[int] = mapped_column(primary_key=True)
    resource_id: Mapped[LearningResourceID] = mapped_column(
        ForeignKey("learning_resources.resource_id", ondelete="CASCADE")
    )
    required: Mapped[bool] = mapped_column(default=True)


# Assignments


class assignments(base):
    """One row per (item, target). A target is a single user or a whole role.

    Items are polymorphic, so item_id carries no foreign key; the item
    storage modules remove an item's assignments when the item goes.
    """

    __tablename__ = "assignments"
    __table_args__ = (
        CheckConstraint(
            "(audience_type = 'user' AND user_id IS NOT NULL AND role IS NULL)"
            " OR (audience_type = 'role' AND role IS NOT NULL AND user_id IS NULL)",
            name="ck_assignments_single_target",
        ),
        Index(
            "uq_assignments_item_user",
            "item_id",
            "user_id",
            unique=True,
            postgresql_where=USER_AUDIENCE,
            sqlite_where=USER_AUDIENCE,
        ),
        Index(
            "uq_assignments_item_role",
            "item_id",
            "role",
            unique=True,
            postgresql_where=ROLE_AUDIENCE,
            sqlite_where=ROLE_AUDIENCE,
        ),
        Index("ix_assignments_user_id", "user_id"),
        Index("ix_assignments_role", "role"),
    )

    assignment_id: Mapped[AssignmentID] = mapped_column(primary_key=True)
    item_kind: Mapped[ItemKind]
    item_id: Mapped[ItemID] = mapped_column(ItemIDType())
    audience_type: Mapped[AudienceType]
    user_id: Mapped[UserID | None] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"), default=None)
    role: Mapped[UserRole | None] = mapped_column(default=None)
    assigned_by: Mapped[UserID | None] = mapped_column(ForeignKey("users.user_id", ondelete="SET NULL"), default=None)
    due_at: Mapped[datetime.datetime | None] = mapped_column(default=None)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


# Completions


class completions(base):
    __tablename__ = "completions"
    __table_args__ = (
        UniqueConstraint("assignment_id", "user_id", name="uq_completions_assignment_user"),
        Index("ix_completions_user_id", "user_id"),
    )

    completion_id: Mapped[CompletionID] = mapped_column(primary_key=True)
    assignment_id: Mapped[AssignmentID] = mapped_column(ForeignKey("assignments.assignment_id", ondelete="CASCADE"))
    user_id: Mapped[UserID] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"))
    status: Mapped[CompletionStatus] = mapped_column(default=CompletionStatus.NotStarted)
    started_at: Mapped[datetime.datetime | None] = mapped_column(default=None)
    completed_at: Mapped[datetime.datetime | None] = mapped_column(default=None)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


# Activity log


class activities(base):
    __tablename__ = "activities"
    __table_args__ = (Index("ix_activities_create_time", "create_time"),)

    activity_id: Mapped[ActivityID] = mapped_column(primary_key=True)
    kind: Mapped[ActivityKind]
    title: Mapped[str]
    description: Mapped[str]
    actor_id: Mapped[UserID | None] = mapped_column(ForeignKey("users.user_id", ondelete="SET NULL"), default=None)
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[dict[str, t.Any]] = mapped_column("metadata", default_factory=dict)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
