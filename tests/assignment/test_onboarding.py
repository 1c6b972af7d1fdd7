"""Tests for seezee.assignment.onboarding."""

from __future__ import annotations

import typing as t

import pytest
from sqlalchemy.orm import Session

from seezee.assignment import create_onboarding_path, NotFoundError, tools_with_onboarding, ValidationError
from seezee.model import LearningResource, LearningResourceID, Tool, ToolID


class TestCreateOnboardingPath(object):
    def test_steps_follow_position(
        self,
        db_session: Session,
        tool_factory: t.Callable[..., Tool],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        tool = tool_factory()
        intro, advanced = resource_factory(title="Intro"), resource_factory(title="Advanced")

        path = create_onboarding_path(
            tool.tool_id,
            "  Figma for new hires ",
            [
                {"resource_id": str(advanced.resource_id), "position": 2, "required": False},
                {"resource_id": str(intro.resource_id), "position": 1},
            ],
            session=db_session,
        )

        assert path.title == "Figma for new hires"
        assert [(s.title, s.required) for s in path.steps] == [("Intro", True), ("Advanced", False)]

    def test_one_path_per_tool(
        self,
        db_session: Session,
        tool_factory: t.Callable[..., Tool],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        tool = tool_factory()
        steps = [{"resource_id": resource_factory().resource_id, "position": 0}]
        create_onboarding_path(tool.tool_id, "First", steps, session=db_session)

        with pytest.raises(ValidationError):
            create_onboarding_path(tool.tool_id, "Second", steps, session=db_session)

    @pytest.mark.parametrize(
        "title,steps",
        [
            ("   ", []),
            ("Path", [{"resource_id": "tool$not-a-resource", "position": 0}]),
            ("Path", [{"resource_id": "resource$xx", "position": -1}]),
        ],
    )
    def test_rejects_bad_input(
        self, db_session: Session, tool_factory: t.Callable[..., Tool], title: str, steps: list[dict[str, t.Any]]
    ) -> None:
        tool = tool_factory()

        with pytest.raises(ValidationError):
            create_onboarding_path(tool.tool_id, title, steps, session=db_session)

    def test_rejects_repeats(
        self,
        db_session: Session,
        tool_factory: t.Callable[..., Tool],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        tool = tool_factory()
        a, b = resource_factory(), resource_factory()

        with pytest.raises(ValidationError, match="positions"):
            create_onboarding_path(
                tool.tool_id,
                "Path",
                [{"resource_id": a.resource_id, "position": 0}, {"resource_id": b.resource_id, "position": 0}],
                session=db_session,
            )
        with pytest.raises(ValidationError, match="only once"):
            create_onboarding_path(
                tool.tool_id,
                "Path",
                [{"resource_id": a.resource_id, "position": 0}, {"resource_id": a.resource_id, "position": 1}],
                session=db_session,
            )

    def test_missing_tool_or_resource(
        self,
        db_session: Session,
        tool_factory: t.Callable[..., Tool],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        tool = tool_factory()
        resource = resource_factory()

        with pytest.raises(NotFoundError) as exc_info:
            create_onboarding_path(
                ToolID(), "Path", [{"resource_id": resource.resource_id, "position": 0}], session=db_session
            )
        assert exc_info.value.kind == "tool"

        with pytest.raises(NotFoundError) as exc_info:
            create_onboarding_path(
                tool.tool_id, "Path", [{"resource_id": LearningResourceID(), "position": 0}], session=db_session
            )
        assert exc_info.value.kind == "resource"
        assert tools_with_onboarding(session=db_session)[0].path is None


class TestToolsWithOnboarding(object):
    def test_every_tool_listed_by_name(
        self,
        db_session: Session,
        tool_factory: t.Callable[..., Tool],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        sketch, figma = tool_factory(name="Sketch"), tool_factory(name="Figma")
        resource = resource_factory()
        create_onboarding_path(
            sketch.tool_id, "Sketch path", [{"resource_id": resource.resource_id, "position": 0}], session=db_session
        )

        listing = tools_with_onboarding(session=db_session)

        assert [entry.tool.tool_id for entry in listing] == [figma.tool_id, sketch.tool_id]
        assert listing[0].path is None
        assert listing[1].path is not None
        assert listing[1].path.title == "Sketch path"
