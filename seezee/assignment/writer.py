"""Idempotent fan-out of items onto an audience."""

from __future__ import annotations

import datetime
import logging
import typing as t

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from seezee.core import di, TimestampProvider
from seezee.lib import sql
from seezee.model import ActivityKind, Assignment, AssignmentResult, AudienceSpec, ItemFailure, ItemID, \
    parse_item_id, UserAudience, UserID
from seezee.storage import activity as activity_storage
from seezee.storage import assignment as assignment_storage
from seezee.storage import user as user_storage

from . import catalog
from .audience import parse_audience, resolve_audience
from .errors import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def parse_item_ids(item_ids: t.Sequence[ItemID | str]) -> tuple[ItemID, ...]:
    """Distinct item IDs in first-seen order.

    Raises:
        ValidationError: the list is empty or holds a malformed ID
    """
    if isinstance(item_ids, str) or not item_ids:
        raise ValidationError("at least one item ID is required")
    parsed: list[ItemID] = []
    for raw in item_ids:
        try:
            parsed.append(parse_item_id(raw))
        except ValueError as e:
            raise ValidationError(str(e)) from e
    return tuple(dict.fromkeys(parsed))


def summary_message(audience: AudienceSpec, created: int, skipped: int, missing: int) -> str:
    noun = "user(s)" if isinstance(audience, UserAudience) else "role(s)"
    parts = [f"Assigned to {created} {noun}."]
    if skipped:
        parts.append(f"Skipped {skipped} duplicate(s).")
    if missing:
        parts.append(f"{missing} item(s) not found.")
    return " ".join(parts)


@di.inject
def assign(
    item_ids: t.Sequence[ItemID | str],
    audience: AudienceSpec | t.Mapping[str, t.Any],
    due_at: datetime.datetime | None = None,
    *,
    assigned_by: UserID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> AssignmentResult:
    """Assign every item to every target of audience.

    Each (item, target) pair becomes one assignment row unless it already
    exists, in which case it is counted as skipped. Role targets are written as
    role rows and reach users when assignments are read. Items are processed
    independently: a missing item is reported in failures and does not hold
    back the others.

    Raises:
        ValidationError: no items, a malformed item ID, a bad audience, or a
            naive due_at
        NotFoundError: a user in a user audience, or assigned_by, is unknown
        StorageError: the database failed; nothing from this call is kept
    """
    parsed_ids = parse_item_ids(item_ids)
    audience = parse_audience(audience)
    targets = resolve_audience(audience)
    if due_at is not None and due_at.tzinfo is None:
        raise ValidationError("due_at must be timezone-aware")

    result = AssignmentResult()
    try:
        with sql.begin(session):
            if isinstance(audience, UserAudience):
                known = user_storage.get_many(audience.user_ids, session=session)
                if missing_users := [user_id for user_id in targets if user_id not in known]:
                    raise NotFoundError(
                        "user",
                        missing_users[0],
                        f"unknown user(s): {', '.join(str(user_id) for user_id in missing_users)}",
                    )
            if assigned_by is not None and user_storage.get(user_id=assigned_by, session=session) is None:
                raise NotFoundError("user", assigned_by)

            now = utcnow()
            found = catalog.get_items(parsed_ids, session=session)
            for item_id in parsed_ids:
                if item_id not in found:
                    logger.warning("item to assign does not exist", extra={"item_id": str(item_id)})
                    result.failures.append(
                        ItemFailure(
                            item_id=str(item_id),
                            error=NotFoundError.__name__,
                            message=str(NotFoundError(item_id.prefix, item_id)),
                        )
                    )
                    continue
                created, skipped = _assign_item(item_id, targets, due_at, assigned_by, now, session)
                result.assignments.extend(created)
                result.skipped += skipped
            result.created = len(result.assignments)

            if result.created:
                _record_activity(parsed_ids, audience, result, assigned_by, session)
    except SQLAlchemyError as e:
        raise StorageError(f"could not write assignments: {e}") from e

    result.message = summary_message(audience, result.created, result.skipped, len(result.failures))
    logger.info(
        result.message,
        extra={
            "items": [str(item_id) for item_id in parsed_ids],
            "audience_type": audience.audience_type.value,
            "created_count": result.created,
            "skipped_count": result.skipped,
            "not_found": len(result.failures),
        },
    )
    return result


def _assign_item(
    item_id: ItemID,
    targets: t.Sequence[t.Any],
    due_at: datetime.datetime | None,
    assigned_by: UserID | None,
    now: datetime.datetime,
    session: Session,
) -> tuple[list[Assignment], int]:
    created: list[Assignment] = []
    skipped = 0
    for target in targets:
        assignment = assignment_storage.create(
            item_id=item_id,
            target=target,
            assigned_by=assigned_by,
            due_at=due_at,
            create_time=now,
            session=session,
        )
        if assignment is None:
            skipped += 1
        else:
            created.append(assignment)
    return created, skipped


def _record_activity(
    item_ids: t.Sequence[ItemID],
    audience: AudienceSpec,
    result: AssignmentResult,
    actor_id: UserID | None,
    session: Session,
) -> None:
    targets = audience.user_ids if isinstance(audience, UserAudience) else audience.roles
    activity_storage.create(
        kind=ActivityKind.AssignmentCreated,
        title="Items assigned",
        description=f"{len(item_ids)} item(s) assigned. {summary_message(audience, result.created, result.skipped, 0)}",
        actor_id=actor_id,
        metadata={
            "item_ids": [str(item_id) for item_id in item_ids],
            "audience": {
                "type": audience.type,
                "targets": [str(target) if isinstance(target, UserID) else target.value for target in targets],
            },
            "created": result.created,
            "skipped": result.skipped,
        },
        session=session,
    )
