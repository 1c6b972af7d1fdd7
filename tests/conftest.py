"""Pytest fixtures for SeeZee integration tests.

Tests run against the Test environment, an in-memory SQLite database whose
schema is created once per session. Each test runs within a transaction that
is rolled back afterwards, so tests never see each other's rows.

Usage:
    def test_assign(db_session: Session, user_factory, resource_factory, utcnow):
        u = user_factory(role=UserRole.Dev)
        r = resource_factory()
        result = assign([r.resource_id], {"type": "user", "user_ids": [u.user_id]},
                        session=db_session, utcnow=utcnow)
"""

from __future__ import annotations

import datetime
import itertools
import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest
import sqlalchemy
from sqlalchemy.orm import Session

import seezee
from seezee.core import SeeZeeContainer, TimestampProvider
from seezee.model import DeploymentEnvironment, LearningResource, ResourceType, Task, TaskPriority, Tool, User, \
    UserRole
from seezee.storage import resource as resource_storage
from seezee.storage import task as task_storage
from seezee.storage import tool as tool_storage
from seezee.storage import user as user_storage
from seezee.storage.table import base

NOW = datetime.datetime(2026, 3, 2, 9, 30, tzinfo=datetime.UTC)


@pytest.fixture(scope="session")
def container() -> t.Generator[SeeZeeContainer]:
    """Boot the DI container for the test session.

    Uses the Test environment, which keeps the database in memory.
    """
    ct = SeeZeeContainer()
    root = Path(os.path.dirname(seezee.__file__)).parent

    SeeZeeContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{root}/config"),
        override=(),
    )

    yield ct

    ct.shutdown_resources()


@pytest.fixture(scope="session")
def engine(container: SeeZeeContainer) -> sqlalchemy.Engine:
    engine = container.storage().persistent().engine()
    base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(engine: sqlalchemy.Engine) -> t.Generator[Session]:
    """Provide a database session wrapped in a transaction.

    Uses join_transaction_mode="create_savepoint" so that session.begin()
    creates savepoints instead of failing when already in a transaction,
    while the outer transaction still rolls everything back at test end.
    """
    connection = engine.connect()
    transaction = connection.begin()

    # autobegin=False matches production sessions
    session = Session(
        bind=connection,
        autobegin=False,
        join_transaction_mode="create_savepoint",
    )

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def now() -> datetime.datetime:
    return NOW


@pytest.fixture
def utcnow() -> TimestampProvider:
    """A clock standing still at NOW."""
    return lambda: NOW


@pytest.fixture
def ticking_utcnow() -> TimestampProvider:
    """A clock that moves forward one minute on every call, starting at NOW."""
    minutes = itertools.count()
    return lambda: NOW + datetime.timedelta(minutes=next(minutes))


@pytest.fixture
def user_factory(db_session: Session) -> t.Callable[..., User]:
    """Factory fixture for creating users. Emails are unique unless given."""
    counter = itertools.count(1)

    def create_user(
        email: str | None = None,
        name: str | None = None,
        role: UserRole = UserRole.Staff,
    ) -> User:
        n = next(counter)
        with db_session.begin():
            return user_storage.create(
                email=email or f"user{n}@example.com",
                name=name or f"User {n}",
                role=role,
                session=db_session,
            )

    return create_user


@pytest.fixture
def resource_factory(db_session: Session) -> t.Callable[..., LearningResource]:
    def create_resource(
        title: str = "Intro to SQL",
        type: ResourceType = ResourceType.Course,
        url: str = "https://example.com/sql",
        tags: t.Iterable[str] = (),
        category: str | None = None,
    ) -> LearningResource:
        with db_session.begin():
            return resource_storage.create(
                title=title, type=type, url=url, tags=tags, category=category, session=db_session
            )

    return create_resource


@pytest.fixture
def tool_factory(db_session: Session) -> t.Callable[..., Tool]:
    def create_tool(
        name: str = "Figma",
        category: str = "design",
        url: str = "https://figma.com",
    ) -> Tool:
        with db_session.begin():
            return tool_storage.create(name=name, category=category, url=url, session=db_session)

    return create_tool


@pytest.fixture
def task_factory(db_session: Session) -> t.Callable[..., Task]:
    def create_task(
        title: str = "Ship the landing page",
        priority: TaskPriority = TaskPriority.High,
        due_date: datetime.datetime | None = None,
    ) -> Task:
        with db_session.begin():
            return task_storage.create(title=title, priority=priority, due_date=due_date, session=db_session)

    return create_task
