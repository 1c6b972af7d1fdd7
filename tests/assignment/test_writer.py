"""Tests for seezee.assignment.writer.assign()."""

from __future__ import annotations

import datetime
import logging
import typing as t

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from seezee.assignment import assign, NotFoundError, StorageError, ValidationError
from seezee.core import TimestampProvider
from seezee.model import ActivityKind, AudienceType, LearningResource, LearningResourceID, RoleAudience, Task, Tool, \
    User, UserAudience, UserID, UserRole
from seezee.storage import activity as activity_storage
from seezee.storage import assignment as assignment_storage
from seezee.storage import completion as completion_storage


class TestUserAudience(object):
    def test_fan_out_is_idempotent(
        self,
        db_session: Session,
        utcnow: TimestampProvider,
        user_factory: t.Callable[..., User],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        u1, u2 = user_factory(), user_factory()
        item = resource_factory()
        audience = {"type": "user", "user_ids": [str(u1.user_id), str(u2.user_id)]}

        first = assign([item.resource_id], audience, session=db_session, utcnow=utcnow)
        second = assign([item.resource_id], audience, session=db_session, utcnow=utcnow)

        with db_session.begin():
            rows = assignment_storage.find(item_id=item.resource_id, session=db_session)

        assert (first.created, first.skipped) == (2, 0)
        assert first.message == "Assigned to 2 user(s)."
        assert (second.created, second.skipped) == (0, 2)
        assert second.message == "Assigned to 0 user(s). Skipped 2 duplicate(s)."
        assert second.assignments == []
        assert len(rows) == 2
        assert {r.user_id for r in rows} == {u1.user_id, u2.user_id}

    def test_repeated_user_counts_once(
        self,
        db_session: Session,
        utcnow: TimestampProvider,
        user_factory: t.Callable[..., User],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        user = user_factory()
        item = resource_factory()

        result = assign(
            [item.resource_id, item.resource_id],
            UserAudience(user_ids=[user.user_id, user.user_id]),
            session=db_session,
            utcnow=utcnow,
        )

        assert (result.created, result.skipped) == (1, 0)

    def test_unknown_user_fails_whole_call(
        self,
        db_session: Session,
        utcnow: TimestampProvider,
        user_factory: t.Callable[..., User],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        known = user_factory()
        unknown = UserID()
        item = resource_factory()

        with pytest.raises(NotFoundError) as exc_info:
            assign(
                [item.resource_id],
                UserAudience(user_ids=[known.user_id, unknown]),
                session=db_session,
                utcnow=utcnow,
            )

        with db_session.begin():
            rows = assignment_storage.find(item_id=item.resource_id, session=db_session)

        assert exc_info.value.key == unknown
        assert rows == ()

    def test_no_completions_are_created(
        self,
        db_session: Session,
        utcnow: TimestampProvider,
        user_factory: t.Callable[..., User],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        user = user_factory()
        item = resource_factory()

        result = assign([item.resource_id], UserAudience(user_ids=[user.user_id]), session=db_session, utcnow=utcnow)

        with db_session.begin():
            completions = completion_storage.find(
                assignment_id=[a.assignment_id for a in result.assignments], session=db_session
            )

        assert completions == ()


class TestRoleAudience(object):
    def test_roles_are_not_expanded(
        self,
        db_session: Session,
        utcnow: TimestampProvider,
        user_factory: t.Callable[..., User],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        """Two resources for two roles give four role rows, whoever holds the roles."""
        user_factory(role=UserRole.CEO)
        user_factory(role=UserRole.Admin)
        user_factory(role=UserRole.Staff)
        user_factory(role=UserRole.Staff)
        r1, r2 = resource_factory(title="r1"), resource_factory(title="r2")

        result = assign(
            [r1.resource_id, r2.resource_id],
            {"type": "role", "roles": ["ADMIN", "STAFF"]},
            session=db_session,
            utcnow=utcnow,
        )

        with db_session.begin():
            rows = assignment_storage.find(session=db_session)

        assert result.created == 4
        assert result.message == "Assigned to 4 role(s)."
        assert len(rows) == 4
        assert all(r.audience_type is AudienceType.Role and r.user_id is None for r in rows)
        assert {(r.item_id, r.role) for r in rows} == {
            (r1.resource_id, UserRole.Admin),
            (r1.resource_id, UserRole.Staff),
            (r2.resource_id, UserRole.Admin),
            (r2.resource_id, UserRole.Staff),
        }

    def test_role_with_no_members_still_assigned(
        self, db_session: Session, utcnow: TimestampProvider, tool_factory: t.Callable[..., Tool]
    ) -> None:
        tool = tool_factory()

        result = assign([tool.tool_id], RoleAudience(roles=[UserRole.Partner]), session=db_session, utcnow=utcnow)

        assert result.created == 1
        assert result.assignments[0].role is UserRole.Partner

    def test_user_and_role_modes_combine(
        self,
        db_session: Session,
        utcnow: TimestampProvider,
        user_factory: t.Callable[..., User],
        task_factory: t.Callable[..., Task],
    ) -> None:
        user = user_factory(role=UserRole.Dev)
        task = task_factory()

        by_user = assign([task.task_id], UserAudience(user_ids=[user.user_id]), session=db_session, utcnow=utcnow)
        by_role = assign([task.task_id], RoleAudience(roles=[UserRole.Dev]), session=db_session, utcnow=utcnow)

        assert by_user.created == 1
        assert by_role.created == 1
        assert by_role.skipped == 0


class TestItems(object):
    def test_missing_item_does_not_block_others(
        self,
        db_session: Session,
        utcnow: TimestampProvider,
        user_factory: t.Callable[..., User],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        user = user_factory()
        valid = resource_factory()
        missing = LearningResourceID()

        result = assign(
            [valid.resource_id, missing], UserAudience(user_ids=[user.user_id]), session=db_session, utcnow=utcnow
        )

        with db_session.begin():
            rows = assignment_storage.find(item_id=valid.resource_id, session=db_session)

        assert result.created == 1
        assert len(rows) == 1
        assert len(result.failures) == 1
        assert result.failures[0].item_id == str(missing)
        assert result.failures[0].error == "NotFoundError"
        assert result.message == "Assigned to 1 user(s). 1 item(s) not found."

    def test_mixed_item_kinds(
        self,
        db_session: Session,
        utcnow: TimestampProvider,
        user_factory: t.Callable[..., User],
        resource_factory: t.Callable[..., LearningResource],
        tool_factory: t.Callable[..., Tool],
        task_factory: t.Callable[..., Task],
    ) -> None:
        user = user_factory()
        ids = [resource_factory().resource_id, tool_factory().tool_id, task_factory().task_id]

        result = assign([str(i) for i in ids], UserAudience(user_ids=[user.user_id]), session=db_session, utcnow=utcnow)

        assert result.created == 3
        assert [a.item_id for a in result.assignments] == ids

    def test_due_date_is_recorded(
        self,
        db_session: Session,
        now: datetime.datetime,
        utcnow: TimestampProvider,
        user_factory: t.Callable[..., User],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        user = user_factory()
        item = resource_factory()
        due = now + datetime.timedelta(days=14)

        result = assign([item.resource_id], UserAudience(user_ids=[user.user_id]), due, session=db_session, utcnow=utcnow)

        assert result.assignments[0].due_at == due
        assert result.assignments[0].create_time == now


class TestValidation(object):
    def test_empty_item_list(self, db_session: Session, utcnow: TimestampProvider) -> None:
        with pytest.raises(ValidationError, match="at least one item"):
            assign([], RoleAudience(roles=[UserRole.Dev]), session=db_session, utcnow=utcnow)

    def test_malformed_item_id(self, db_session: Session, utcnow: TimestampProvider) -> None:
        with pytest.raises(ValidationError):
            assign(["training$abc"], RoleAudience(roles=[UserRole.Dev]), session=db_session, utcnow=utcnow)

    def test_empty_audience(
        self, db_session: Session, utcnow: TimestampProvider, resource_factory: t.Callable[..., LearningResource]
    ) -> None:
        item = resource_factory()

        with pytest.raises(ValidationError):
            assign([item.resource_id], {"type": "role", "roles": []}, session=db_session, utcnow=utcnow)

    def test_naive_due_date(
        self, db_session: Session, utcnow: TimestampProvider, resource_factory: t.Callable[..., LearningResource]
    ) -> None:
        item = resource_factory()

        with pytest.raises(ValidationError, match="timezone-aware"):
            assign(
                [item.resource_id],
                RoleAudience(roles=[UserRole.Dev]),
                datetime.datetime(2026, 5, 1),
                session=db_session,
                utcnow=utcnow,
            )


class TestSideEffects(object):
    def test_activity_recorded_only_when_something_was_created(
        self,
        db_session: Session,
        utcnow: TimestampProvider,
        user_factory: t.Callable[..., User],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        admin = user_factory(role=UserRole.Admin)
        item = resource_factory()
        audience = RoleAudience(roles=[UserRole.Designer])

        assign([item.resource_id], audience, assigned_by=admin.user_id, session=db_session, utcnow=utcnow)
        assign([item.resource_id], audience, assigned_by=admin.user_id, session=db_session, utcnow=utcnow)

        with db_session.begin():
            activities = activity_storage.find(kind=ActivityKind.AssignmentCreated, session=db_session)

        assert len(activities) == 1
        assert activities[0].actor_id == admin.user_id
        assert activities[0].metadata["created"] == 1
        assert activities[0].metadata["audience"] == {"type": "role", "targets": ["DESIGNER"]}

    def test_database_failure_becomes_storage_error(
        self,
        db_session: Session,
        utcnow: TimestampProvider,
        resource_factory: t.Callable[..., LearningResource],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        item = resource_factory()

        def fail(**_: t.Any) -> None:
            raise OperationalError("INSERT INTO assignments", {}, Exception("database is locked"))

        monkeypatch.setattr(assignment_storage, "create", fail)

        with pytest.raises(StorageError) as exc_info:
            assign([item.resource_id], RoleAudience(roles=[UserRole.Dev]), session=db_session, utcnow=utcnow)

        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_result_is_returned_with_logging_enabled(
        self,
        db_session: Session,
        utcnow: TimestampProvider,
        user_factory: t.Callable[..., User],
        resource_factory: t.Callable[..., LearningResource],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        user = user_factory()
        item = resource_factory()

        with caplog.at_level(logging.INFO, logger="seezee.assignment.writer"):
            result = assign([item.resource_id], {"type": "user", "user_ids": [user.user_id]}, session=db_session, utcnow=utcnow)

        [record] = [r for r in caplog.records if r.name == "seezee.assignment.writer"]
        assert result.created == 1
        assert record.getMessage() == result.message
        assert getattr(record, "created_count") == 1
        assert getattr(record, "skipped_count") == 0
