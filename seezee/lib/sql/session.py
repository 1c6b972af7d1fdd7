import logging
import typing as t

import sql_formatter.core
import sqlalchemy
import sqlalchemy.orm

logger = logging.getLogger(__name__)


class DebugSession(sqlalchemy.orm.Session):
    """Session used when booted with --debug; logs each statement as formatted SQL."""

    def format_statement(self, stmt: sqlalchemy.Executable) -> str:
        """stmt compiled for this session's dialect with its parameters inlined."""
        compiled = t.cast(t.Any, stmt).compile(self.get_bind(), compile_kwargs={"literal_binds": True})
        return sql_formatter.core.format_sql(str(compiled))

    def execute(self, statement: t.Any, *args: t.Any, **kwargs: t.Any) -> t.Any:
        if logger.isEnabledFor(logging.DEBUG):
            try:
                sql = self.format_statement(statement)
            except sqlalchemy.exc.CompileError:
                # some bind types cannot be rendered inline
                sql = str(statement)
            logger.debug("executing statement\n%s", sql)
        return super().execute(statement, *args, **kwargs)
