"""Tests for seezee.storage.onboarding."""

from __future__ import annotations

import typing as t

from sqlalchemy.orm import Session

from seezee.model import LearningResource, OnboardingPathID, OnboardingStepSpec, ResourceType, Tool, ToolID
from seezee.storage import onboarding as onboarding_storage
from seezee.storage import resource as resource_storage
from seezee.storage import tool as tool_storage


class TestOnboardingStorage(object):
    def test_create_orders_steps_by_position(
        self,
        db_session: Session,
        tool_factory: t.Callable[..., Tool],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        tool = tool_factory()
        basics = resource_factory(title="Figma basics", type=ResourceType.Video)
        components = resource_factory(title="Components")

        with db_session.begin():
            path = onboarding_storage.create(
                tool_id=tool.tool_id,
                title="Getting started with Figma",
                steps=[
                    OnboardingStepSpec(resource_id=components.resource_id, position=1, required=False),
                    OnboardingStepSpec(resource_id=basics.resource_id, position=0),
                ],
                session=db_session,
            )
            by_tool = onboarding_storage.get(tool_id=tool.tool_id, session=db_session)

        assert by_tool == path
        assert [s.resource_id for s in path.steps] == [basics.resource_id, components.resource_id]
        assert [s.title for s in path.steps] == ["Figma basics", "Components"]
        assert path.steps[0].type is ResourceType.Video
        assert [s.resource_id for s in path.required_steps] == [basics.resource_id]

    def test_find_by_tool(
        self,
        db_session: Session,
        tool_factory: t.Callable[..., Tool],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        figma, postman = tool_factory(name="Figma"), tool_factory(name="Postman")
        resource = resource_factory()

        with db_session.begin():
            onboarding_storage.create(
                tool_id=figma.tool_id,
                title="Figma",
                steps=[OnboardingStepSpec(resource_id=resource.resource_id, position=0)],
                session=db_session,
            )
            found = onboarding_storage.find(tool_ids=[figma.tool_id, postman.tool_id, ToolID()], session=db_session)

        assert list(found) == [figma.tool_id]
        assert len(found[figma.tool_id].steps) == 1

    def test_deleting_tool_or_resource_cascades(
        self,
        db_session: Session,
        tool_factory: t.Callable[..., Tool],
        resource_factory: t.Callable[..., LearningResource],
    ) -> None:
        figma, sketch = tool_factory(name="Figma"), tool_factory(name="Sketch")
        first, second = resource_factory(title="First"), resource_factory(title="Second")

        with db_session.begin():
            onboarding_storage.create(
                tool_id=figma.tool_id,
                title="Figma",
                steps=[OnboardingStepSpec(resource_id=first.resource_id, position=0)],
                session=db_session,
            )
            sketch_path = onboarding_storage.create(
                tool_id=sketch.tool_id,
                title="Sketch",
                steps=[
                    OnboardingStepSpec(resource_id=first.resource_id, position=0),
                    OnboardingStepSpec(resource_id=second.resource_id, position=1),
                ],
                session=db_session,
            )

        with db_session.begin():
            tool_storage.delete(figma.tool_id, session=db_session)
            resource_storage.delete(first.resource_id, session=db_session)

        with db_session.begin():
            assert onboarding_storage.get(tool_id=figma.tool_id, session=db_session) is None
            remaining = onboarding_storage.get(onboarding_path_id=sketch_path.onboarding_path_id, session=db_session)

        assert remaining is not None
        assert [s.resource_id for s in remaining.steps] == [second.resource_id]

    def test_delete(
        self,
        db_session: Session,
        tool_factory: t.Callable[..., Tool],
    ) -> None:
        tool = tool_factory()

        with db_session.begin():
            path = onboarding_storage.create(tool_id=tool.tool_id, title="Empty", steps=[], session=db_session)
            assert path.steps == []
            assert onboarding_storage.delete(path.onboarding_path_id, session=db_session)
            assert not onboarding_storage.delete(OnboardingPathID(), session=db_session)
            assert onboarding_storage.get(tool_id=tool.tool_id, session=db_session) is None
