"""Per-user progress on assignments."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from seezee.core import di, TimestampProvider
from seezee.lib import sql
from seezee.model import AssignmentID, Completion, CompletionStatus, UserID
from seezee.storage import assignment as assignment_storage
from seezee.storage import completion as completion_storage
from seezee.storage import user as user_storage

from .errors import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def _regression(current: CompletionStatus, status: CompletionStatus) -> ValidationError:
    return ValidationError(f"cannot move a completion from {current.value} back to {status.value}")


@di.inject
def set_completion_status(
    assignment_id: AssignmentID,
    user_id: UserID,
    status: CompletionStatus,
    *,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> Completion:
    """Record user_id's progress on an assignment they can see.

    The first call creates the completion; later calls move it forward.
    Setting the status it already has changes nothing.

    Raises:
        NotFoundError: the assignment or the user does not exist
        ValidationError: the assignment is not aimed at the user or the
            user's current role, or status is behind the stored status
        StorageError: the database failed
    """
    try:
        with sql.begin(session):
            assignment = assignment_storage.get(assignment_id, session=session)
            if assignment is None:
                raise NotFoundError("assignment", assignment_id)
            user = user_storage.get(user_id=user_id, session=session)
            if user is None:
                raise NotFoundError("user", user_id)
            if not assignment_storage.is_visible_to(assignment, user.user_id, user.role):
                raise ValidationError(f"assignment {assignment_id} is not assigned to user {user_id}")

            existing = completion_storage.get(assignment_id=assignment_id, user_id=user_id, session=session)
            if existing is not None and existing.status == status:
                return existing
            if existing is not None and existing.status > status:
                logger.warning(
                    "rejected completion regression",
                    extra={
                        "assignment_id": str(assignment_id),
                        "user_id": str(user_id),
                        "current": existing.status.value,
                        "requested": status.value,
                    },
                )
                raise _regression(existing.status, status)

            if not completion_storage.upsert_status(
                assignment_id=assignment_id, user_id=user_id, status=status, now=utcnow(), session=session
            ):
                # another writer moved the row past status since it was read
                current = completion_storage.get(assignment_id=assignment_id, user_id=user_id, session=session)
                if current is None:
                    raise StorageError(f"completion for assignment {assignment_id} vanished during update")
                raise _regression(current.status, status)

            completion = completion_storage.get(assignment_id=assignment_id, user_id=user_id, session=session)
            if completion is None:
                raise StorageError(f"completion for assignment {assignment_id} was not written")
    except SQLAlchemyError as e:
        raise StorageError(f"could not update completion: {e}") from e

    logger.info(
        "completion status changed",
        extra={
            "assignment_id": str(assignment_id),
            "user_id": str(user_id),
            "from": existing.status.value if existing else CompletionStatus.NotStarted.value,
            "to": status.value,
        },
    )
    return completion
