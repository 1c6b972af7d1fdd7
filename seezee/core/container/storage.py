from __future__ import annotations

import typing as t
from pathlib import Path

import alembic.config
import sqlalchemy
import sqlalchemy.event
import sqlalchemy.orm
import sqlalchemy.pool
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton
from sqlalchemy.engine.url import URL as DSN

import seezee.lib.json as json
from seezee.lib.sql import DebugSession

from ..config.secrets import PostgresqlSecrets
from ..config.storage import PersistentSettings, PostgresqlSettings, SQLiteSettings, StorageSettings
from ..di import NotReady
from ..provider import LoggingProvider


def provide_dsn(config: PersistentSettings, secrets: dict[str, t.Any] | None) -> DSN:
    if config.sqlite is not None:
        return sqlite_dsn(config.sqlite)
    assert config.postgresql is not None
    return postgresql_dsn(config.postgresql, PostgresqlSecrets.model_validate(secrets or {}))


def postgresql_dsn(config: PostgresqlSettings, secrets: PostgresqlSecrets) -> DSN:
    return DSN.create(
        config.driver,
        database=config.database,
        username=secrets.username.get_secret_value() if secrets.username else None,
        password=secrets.password.get_secret_value() if secrets.password else None,
        port=config.port,
        host=str(config.host) if config.host else None,
    )


def sqlite_dsn(config: SQLiteSettings) -> DSN:
    return DSN.create(config.driver, database=str(config.database) if config.database else ":memory:")


def provide_alembic_conf(migration_path: Path, dsn: DSN, root: Path | NotReady) -> alembic.config.Config:
    if isinstance(root, NotReady):
        raise RuntimeError("root path is unavailable")

    escaped_str = dsn.render_as_string(hide_password=False).replace("%", "%%")

    ac = alembic.config.Config()
    ac.set_main_option("script_location", str(root / migration_path))
    ac.set_section_option("alembic", "sqlalchemy.url", escaped_str)
    ac.set_section_option("alembic", "file_template", "%%(year)d-%%(month).2d-%%(day).2d-%%(slug)s-%%(rev)s")
    return ac


def provide_engine(config: PersistentSettings, dsn: DSN, logging: LoggingProvider) -> sqlalchemy.Engine:
    logger = logging.get_logger()

    if config.sqlite is not None:
        kwargs: dict[str, t.Any] = {}
        if config.sqlite.database is None:
            # one connection for the whole process, or every checkout would see a fresh empty database
            kwargs.update(poolclass=sqlalchemy.pool.StaticPool, connect_args={"check_same_thread": False})
        engine = sqlalchemy.create_engine(dsn, json_serializer=json.dumps, json_deserializer=json.loads, **kwargs)
        sqlalchemy.event.listen(engine, "connect", configure_sqlite)
        sqlalchemy.event.listen(engine, "begin", begin_sqlite)
        logger.info(
            "initialized SQLAlchemy engine",
            extra={
                "driver": config.sqlite.driver,
                "database": str(config.sqlite.database or ":memory:"),
            },
        )
        return engine

    assert config.postgresql is not None
    engine = sqlalchemy.create_engine(dsn, json_serializer=json.dumps, json_deserializer=json.loads)
    sqlalchemy.event.listen(engine, "connect", register_timezone)
    logger.info(
        "initialized SQLAlchemy engine",
        extra={
            "driver": config.postgresql.driver,
            "database": config.postgresql.database,
            "host": config.postgresql.host,
            "port": config.postgresql.port,
        },
    )
    return engine


def provide_session(debug: bool, engine: sqlalchemy.Engine) -> sqlalchemy.orm.Session:
    """Create a new session. Caller is responsible for closing it."""
    if debug:
        maker = sqlalchemy.orm.sessionmaker(engine, class_=DebugSession, expire_on_commit=False, autoflush=False)
        return maker(autobegin=False)
    else:
        maker = sqlalchemy.orm.sessionmaker(engine, expire_on_commit=False, autoflush=False)
        return maker(autobegin=False)


class PersistentContainer(DeclarativeContainer):
    config = Configuration()
    secrets = Configuration()
    debug: Provider[bool] = Object()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    settings: Provider[PersistentSettings] = Singleton(PersistentSettings.model_validate, config)
    dsn: Provider[DSN] = Singleton(provide_dsn, config=settings, secrets=secrets.postgresql)
    alembic_config: Provider[alembic.config.Config] = Singleton(
        provide_alembic_conf,
        migration_path=Path("migrations/"),
        dsn=dsn,
        root=root,
    )
    engine: Provider[sqlalchemy.Engine] = Singleton(provide_engine, config=settings, dsn=dsn, logging=logging)
    session: Provider[sqlalchemy.orm.Session] = Factory(provide_session, debug=debug, engine=engine)


class StorageContainer(DeclarativeContainer):
    config: Provider[StorageSettings] = Configuration()
    secrets: Configuration = Configuration()
    debug: Provider[bool] = Object()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    persistent: Provider[PersistentContainer] = Container(
        PersistentContainer, config=config.persistent, secrets=secrets, debug=debug, logging=logging, root=root
    )


def configure_sqlite(dbapi_conn: t.Any, _: t.Any) -> None:
    """Turn on foreign keys and take transaction control away from pysqlite.

    pysqlite's own BEGIN handling breaks SAVEPOINT, which nested
    session.begin() calls depend on; begin_sqlite emits BEGIN instead.
    """
    dbapi_conn.isolation_level = None
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def begin_sqlite(conn: sqlalchemy.Connection) -> None:
    conn.exec_driver_sql("BEGIN")


def register_timezone(dbapi_conn: t.Any, _: t.Any) -> None:
    """Set connection timezone to UTC for consistent datetime handling.

    PostgreSQL TIMESTAMP WITH TIME ZONE stores timestamps in UTC but returns
    them converted to the connection's timezone. Setting UTC ensures consistent
    timezone-aware datetimes across all environments.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("SET TIMEZONE TO 'UTC'")
    cursor.close()
