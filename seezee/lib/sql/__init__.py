__all__ = [
    "DebugSession",
    "begin",
    "dialect_insert",
]

import sqlalchemy
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, SessionTransaction

from .session import DebugSession


def begin(session: Session) -> SessionTransaction:
    """Begin a transaction, or a savepoint when the caller already holds one."""
    return session.begin_nested() if session.in_transaction() else session.begin()


def dialect_insert(session: Session, table: sqlalchemy.Table) -> postgresql.Insert | sqlite.Insert:
    """An INSERT for the session's dialect, which brings ON CONFLICT support."""
    match session.get_bind().dialect.name:
        case "postgresql":
            return postgresql.insert(table)
        case "sqlite":
            return sqlite.insert(table)
        case other:
            raise NotImplementedError(f"ON CONFLICT is unsupported on {other}")
