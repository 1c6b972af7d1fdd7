from __future__ import annotations

import typing as t
from pathlib import Path

import pydantic as p

from .base import BaseSettings


class StorageSettings(BaseSettings):
    persistent: PersistentSettings


class PersistentSettings(BaseSettings):
    """Exactly one backend is configured per environment."""

    postgresql: PostgresqlSettings | None = None
    sqlite: SQLiteSettings | None = None

    @p.model_validator(mode="after")
    def check_one_backend(self) -> t.Self:
        if (self.postgresql is None) == (self.sqlite is None):
            raise ValueError("configure exactly one of storage.persistent.postgresql or storage.persistent.sqlite")
        return self


class PostgresqlSettings(BaseSettings):
    host: p.IPvAnyAddress | str | None = None
    port: int = 5432
    database: str
    driver: t.Literal["postgresql+psycopg"] = "postgresql+psycopg"


class SQLiteSettings(BaseSettings):
    # None keeps the database in memory, shared by every session of the engine
    database: Path | None = None
    driver: t.Literal["sqlite+pysqlite"] = "sqlite+pysqlite"
