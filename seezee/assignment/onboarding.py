"""Onboarding paths: an ordered list of learning resources that introduces a tool."""

from __future__ import annotations

import logging
import typing as t

import pydantic as p
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from seezee.core import di
from seezee.lib import sql
from seezee.model import OnboardingPath, OnboardingStepSpec, ToolID, ToolOnboarding
from seezee.storage import onboarding as onboarding_storage
from seezee.storage import resource as resource_storage
from seezee.storage import tool as tool_storage

from .audience import describe_errors
from .errors import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

_steps_adapter: p.TypeAdapter[list[OnboardingStepSpec]] = p.TypeAdapter(list[OnboardingStepSpec])


def parse_steps(steps: t.Sequence[OnboardingStepSpec | t.Mapping[str, t.Any]]) -> list[OnboardingStepSpec]:
    """Steps sorted by position.

    Raises:
        ValidationError: a malformed step, a repeated position, or a resource
            listed twice
    """
    try:
        parsed = _steps_adapter.validate_python(
            [s.model_dump() if isinstance(s, OnboardingStepSpec) else s for s in steps]
        )
    except p.ValidationError as e:
        raise ValidationError(f"invalid onboarding steps: {describe_errors(e)}") from e

    if len({s.position for s in parsed}) != len(parsed):
        raise ValidationError("onboarding step positions must be distinct")
    if len({s.resource_id for s in parsed}) != len(parsed):
        raise ValidationError("a resource may appear only once in an onboarding path")
    return sorted(parsed, key=lambda s: s.position)


@di.inject
def create_onboarding_path(
    tool_id: ToolID,
    title: str,
    steps: t.Sequence[OnboardingStepSpec | t.Mapping[str, t.Any]],
    description: str | None = None,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> OnboardingPath:
    """Give a tool its onboarding path.

    Raises:
        ValidationError: a blank title, bad steps, or the tool already has a path
        NotFoundError: the tool or a step's resource does not exist
        StorageError: the database failed
    """
    if not title.strip():
        raise ValidationError("an onboarding path needs a title")
    parsed = parse_steps(steps)

    try:
        with sql.begin(session):
            if tool_storage.get(tool_id, session=session) is None:
                raise NotFoundError("tool", tool_id)
            if onboarding_storage.get(tool_id=tool_id, session=session) is not None:
                raise ValidationError(f"tool {tool_id} already has an onboarding path")
            known = resource_storage.get_many([s.resource_id for s in parsed], session=session)
            for step in parsed:
                if step.resource_id not in known:
                    raise NotFoundError("resource", step.resource_id)

            path = onboarding_storage.create(
                tool_id=tool_id, title=title.strip(), steps=parsed, description=description, session=session
            )
    except SQLAlchemyError as e:
        raise StorageError(f"could not write onboarding path: {e}") from e

    logger.info(
        "onboarding path created",
        extra={"tool_id": str(tool_id), "onboarding_path_id": str(path.onboarding_path_id), "steps": len(path.steps)},
    )
    return path


@di.inject
def tools_with_onboarding(
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> list[ToolOnboarding]:
    """Every tool by name, each with its onboarding path if it has one."""
    with sql.begin(session):
        tools = tool_storage.find(session=session)
        paths = onboarding_storage.find(tool_ids=[tool.tool_id for tool in tools], session=session)
    return [ToolOnboarding(tool=tool, path=paths.get(tool.tool_id)) for tool in tools]
