"""Tests for the resource, tool and task storage modules."""

from __future__ import annotations

import datetime
import typing as t

from sqlalchemy.orm import Session

from seezee.model import LearningResource, LearningResourceID, ResourceType, Task, TaskPriority, TaskStatus, Tool, \
    ToolID
from seezee.storage import resource as resource_storage
from seezee.storage import task as task_storage
from seezee.storage import tool as tool_storage


class TestResource(object):
    def test_create_normalizes_tags(self, db_session: Session) -> None:
        with db_session.begin():
            resource = resource_storage.create(
                title="Design systems",
                type=ResourceType.Article,
                url="https://example.com/ds",
                tags=[" UI ", "design", "ui", ""],
                session=db_session,
            )

        assert resource.tags == ["ui", "design"]
        assert resource.type is ResourceType.Article

    def test_get_many(
        self, db_session: Session, resource_factory: t.Callable[..., LearningResource]
    ) -> None:
        r1 = resource_factory(title="One")
        r2 = resource_factory(title="Two")

        with db_session.begin():
            found = resource_storage.get_many([r1.resource_id, r2.resource_id, LearningResourceID()], session=db_session)

        assert set(found) == {r1.resource_id, r2.resource_id}
        assert found[r2.resource_id].title == "Two"

    def test_find_by_tag_and_category(
        self, db_session: Session, resource_factory: t.Callable[..., LearningResource]
    ) -> None:
        sql = resource_factory(title="SQL", tags=["databases"], category="backend")
        resource_factory(title="CSS", tags=["frontend"], category="frontend")

        with db_session.begin():
            by_tag = resource_storage.find(tag="Databases", session=db_session)
            by_category = resource_storage.find(category="backend", session=db_session)

        assert [r.resource_id for r in by_tag] == [sql.resource_id]
        assert [r.resource_id for r in by_category] == [sql.resource_id]

    def test_find_by_search_ignores_case(
        self, db_session: Session, resource_factory: t.Callable[..., LearningResource]
    ) -> None:
        by_title = resource_factory(title="Advanced PostgreSQL")
        resource_factory(title="CSS grids")
        with db_session.begin():
            by_description = resource_storage.create(
                title="Indexes",
                type=ResourceType.Video,
                url="https://example.com/idx",
                description="Query planning in postgresql",
                session=db_session,
            )

        with db_session.begin():
            found = resource_storage.find(search="POSTGRES", session=db_session)
            literal = resource_storage.find(search="100%", session=db_session)

        assert {r.resource_id for r in found} == {by_title.resource_id, by_description.resource_id}
        assert literal == ()

    def test_delete(self, db_session: Session, resource_factory: t.Callable[..., LearningResource]) -> None:
        resource = resource_factory()

        with db_session.begin():
            assert resource_storage.delete(resource.resource_id, session=db_session)
            assert resource_storage.get(resource.resource_id, session=db_session) is None
            assert not resource_storage.delete(resource.resource_id, session=db_session)


class TestTool(object):
    def test_create_and_get(self, db_session: Session) -> None:
        with db_session.begin():
            tool = tool_storage.create(
                name="Linear", category="project management", url="https://linear.app", pricing="free tier",
                session=db_session,
            )
            fetched = tool_storage.get(tool.tool_id, session=db_session)

        assert fetched is not None
        assert fetched.name == "Linear"
        assert fetched.pricing == "free tier"
        assert fetched.tags == []

    def test_find_by_category(self, db_session: Session, tool_factory: t.Callable[..., Tool]) -> None:
        figma = tool_factory(name="Figma", category="design")
        tool_factory(name="Postman", category="api")

        with db_session.begin():
            result = tool_storage.find(category="design", session=db_session)

        assert [x.tool_id for x in result] == [figma.tool_id]

    def test_find_by_search_matches_name_or_description(
        self, db_session: Session, tool_factory: t.Callable[..., Tool]
    ) -> None:
        figma = tool_factory(name="Figma", category="design")
        tool_factory(name="Postman", category="api")
        with db_session.begin():
            sketch = tool_storage.create(
                name="Sketch", category="design", url="https://sketch.com", description="Like figma, for macOS",
                session=db_session,
            )

        with db_session.begin():
            result = tool_storage.find(search="fIgMa", session=db_session)

        assert [x.tool_id for x in result] == [figma.tool_id, sketch.tool_id]

    def test_delete_nonexistent_returns_false(self, db_session: Session) -> None:
        with db_session.begin():
            assert not tool_storage.delete(ToolID(), session=db_session)


class TestTask(object):
    def test_create_defaults(self, db_session: Session) -> None:
        with db_session.begin():
            task = task_storage.create(title="Write release notes", session=db_session)

        assert task.priority is TaskPriority.Medium
        assert task.status is TaskStatus.Todo
        assert task.due_date is None

    def test_due_date_round_trips_as_utc(self, db_session: Session, task_factory: t.Callable[..., Task]) -> None:
        due = datetime.datetime(2026, 4, 1, 17, 0, tzinfo=datetime.timezone(datetime.timedelta(hours=-5)))
        task = task_factory(due_date=due)

        assert task.due_date == due
        assert task.due_date is not None and task.due_date.utcoffset() == datetime.timedelta(0)

    def test_update_status(self, db_session: Session, task_factory: t.Callable[..., Task]) -> None:
        task = task_factory()

        with db_session.begin():
            updated = task_storage.update(task.task_id, status=TaskStatus.Done, session=db_session)

        assert updated.status is TaskStatus.Done
        assert updated.priority is task.priority

    def test_find_by_priority(self, db_session: Session, task_factory: t.Callable[..., Task]) -> None:
        urgent = task_factory(priority=TaskPriority.Urgent)
        task_factory(priority=TaskPriority.Low)

        with db_session.begin():
            result = task_storage.find(priority=TaskPriority.Urgent, session=db_session)

        assert [x.task_id for x in result] == [urgent.task_id]
