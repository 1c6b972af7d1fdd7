from __future__ import annotations

import collections
import typing as t

import sqlalchemy as sqla

from seezee.core import di
from seezee.model import OnboardingPath, OnboardingPathID, OnboardingStep, OnboardingStepSpec, ToolID

from . import Session
from .table import learning_resources, onboarding_paths, onboarding_steps


def _steps(
    path_ids: t.Sequence[OnboardingPathID], session: Session
) -> dict[OnboardingPathID, list[OnboardingStep]]:
    stmt = (
        sqla
        .select(
            onboarding_steps.onboarding_path_id,
            onboarding_steps.resource_id,
            onboarding_steps.position,
            onboarding_steps.required,
            learning_resources.title,
            learning_resources.type,
        )
        .join(learning_resources, learning_resources.resource_id == onboarding_steps.resource_id)
        .where(onboarding_steps.onboarding_path_id.in_(path_ids))
        .order_by(onboarding_steps.position)
    )
    steps: dict[OnboardingPathID, list[OnboardingStep]] = collections.defaultdict(list)
    for row in session.execute(stmt).mappings():
        path_id = row["onboarding_path_id"]
        steps[path_id].append(OnboardingStep(**{k: v for k, v in row.items() if k != "onboarding_path_id"}))
    return steps


def _load(stmt: sqla.Select[t.Any], session: Session) -> tuple[OnboardingPath, ...]:
    rows = session.execute(stmt).mappings().all()
    steps = _steps([row["onboarding_path_id"] for row in rows], session) if rows else {}
    return tuple(OnboardingPath(**row, steps=steps.get(row["onboarding_path_id"], [])) for row in rows)


def get(
    *,
    onboarding_path_id: OnboardingPathID | None = None,
    tool_id: ToolID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> OnboardingPath | None:
    """Get a path by its ID or by the tool it belongs to."""
    if onboarding_path_id is not None:
        stmt = sqla.select(onboarding_paths.__table__).where(onboarding_paths.onboarding_path_id == onboarding_path_id)
    elif tool_id is not None:
        stmt = sqla.select(onboarding_paths.__table__).where(onboarding_paths.tool_id == tool_id)
    else:
        raise ValueError("Either onboarding_path_id or tool_id must be provided")
    found = _load(stmt, session)
    return found[0] if found else None


def find(
    *,
    tool_ids: t.Iterable[ToolID] | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> dict[ToolID, OnboardingPath]:
    """Paths keyed by tool, with their steps in order."""
    stmt = sqla.select(onboarding_paths.__table__)
    if tool_ids is not None:
        stmt = stmt.where(onboarding_paths.tool_id.in_(list(tool_ids)))
    return {path.tool_id: path for path in _load(stmt, session)}


def create(
    *,
    tool_id: ToolID,
    title: str,
    steps: t.Sequence[OnboardingStepSpec],
    description: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> OnboardingPath:
    path = onboarding_paths(
        onboarding_path_id=OnboardingPathID(),
        tool_id=tool_id,
        title=title,
        description=description,
    )
    session.add(path)
    session.flush()
    session.add_all(
        onboarding_steps(
            onboarding_path_id=path.onboarding_path_id,
            position=step.position,
            resource_id=step.resource_id,
            required=step.required,
        )
        for step in steps
    )
    session.flush()
    return get(onboarding_path_id=path.onboarding_path_id, session=session)  # type: ignore[return-value]


def delete(
    onboarding_path_id: OnboardingPathID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete a path; its steps go with it."""
    stmt = sqla.delete(onboarding_paths).where(onboarding_paths.onboarding_path_id == onboarding_path_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]
