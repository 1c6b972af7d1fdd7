from __future__ import annotations

from sqlalchemy.orm import Session

from seezee.core import di
from seezee.lib import sql
from seezee.model import AssignmentView, UserID
from seezee.storage import assignment as assignment_storage
from seezee.storage import completion as completion_storage
from seezee.storage import user as user_storage

from . import catalog
from .errors import NotFoundError


@di.inject
def list_assignments_for_user(
    user_id: UserID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> list[AssignmentView]:
    """Everything assigned to user_id directly or to the role they hold now, newest first.

    Each view carries the user's own completion, or None when they have not
    started. Assignments whose item has since disappeared are left out.

    Raises:
        NotFoundError: the user does not exist
    """
    with sql.begin(session):
        user = user_storage.get(user_id=user_id, session=session)
        if user is None:
            raise NotFoundError("user", user_id)

        visible = assignment_storage.find_visible(user.user_id, user.role, session=session)
        if not visible:
            return []
        items = catalog.summarize({a.item_id for a in visible}, session=session)
        completions = {
            c.assignment_id: c
            for c in completion_storage.find(
                assignment_id=[a.assignment_id for a in visible], user_id=user.user_id, session=session
            )
        }

    return [
        AssignmentView(assignment=a, item=items[a.item_id], completion=completions.get(a.assignment_id))
        for a in visible
        if a.item_id in items
    ]
