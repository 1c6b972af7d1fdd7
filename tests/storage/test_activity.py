"""Tests for seezee.storage.activity module."""

from __future__ import annotations

import typing as t

from sqlalchemy.orm import Session

from seezee.model import ActivityKind, User
from seezee.storage import activity as activity_storage
from seezee.storage import user as user_storage


class TestActivity(object):
    def test_create_and_find(self, db_session: Session, user_factory: t.Callable[..., User]) -> None:
        actor = user_factory()

        with db_session.begin():
            created = activity_storage.create(
                kind=ActivityKind.AssignmentCreated,
                title="Items assigned",
                description="1 item(s) assigned.",
                actor_id=actor.user_id,
                metadata={"created": 3, "item_ids": ["resource$x"]},
                session=db_session,
            )
            found = activity_storage.find(actor_id=actor.user_id, session=db_session)

        assert [a.activity_id for a in found] == [created.activity_id]
        assert found[0].metadata == {"created": 3, "item_ids": ["resource$x"]}
        assert found[0].kind is ActivityKind.AssignmentCreated

    def test_actor_deletion_keeps_the_record(self, db_session: Session, user_factory: t.Callable[..., User]) -> None:
        actor = user_factory()

        with db_session.begin():
            created = activity_storage.create(
                kind=ActivityKind.AssignmentCreated,
                title="Items assigned",
                description="",
                actor_id=actor.user_id,
                session=db_session,
            )
            user_storage.delete(actor.user_id, session=db_session)
            fetched = activity_storage.get(created.activity_id, session=db_session)

        assert fetched is not None
        assert fetched.actor_id is None
        assert fetched.metadata == {}
