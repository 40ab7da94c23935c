"""
Statement builders: positional parameter accumulators, one per backend.

:class:`Query` is the reference implementation of the
:class:`~sqlmeta.core.protocols.StatementBuilder` contract.  The caller
writes the SQL; the builder only collects bound values, in order, and
hands both to a connection on :meth:`Query.execute`.

Architecture::

    user.update_binds(User.query("UPDATE user SET name = ?, email = ? WHERE id = ?"))
          │
          ▼
    SqliteQuery(sql=..., arguments=("Ada", "ada@example.com", 1))
          │  execute(conn)
          ▼
    conn.execute(sql, ("Ada", "ada@example.com", 1))

Examples:
    >>> q = query_for(Database.POSTGRES, "SELECT * FROM user WHERE id = %s").bind(7)
    >>> type(q).__name__, q.arguments
    ('PostgresQuery', (7,))

Tags:
    query, statement-builder, parameters, sqlmeta
"""

from __future__ import annotations

from typing import Any, ClassVar

from sqlmeta.core.dialect import Database, Dialect, get_dialect, parse_database
from sqlmeta.core.protocols import Connection


class Query:
    """Positional parameter accumulator for one SQL statement.

    ``bind`` appends and returns the same builder, so calls chain.
    """

    database: ClassVar[Database] = Database.ANY

    def __init__(self, sql: str) -> None:
        self.sql = sql
        self._arguments: list[Any] = []

    def bind(self, value: Any) -> Query:
        self._arguments.append(value)
        return self

    @property
    def arguments(self) -> tuple[Any, ...]:
        return tuple(self._arguments)

    @property
    def dialect(self) -> Dialect:
        return get_dialect(self.database)

    def execute(self, conn: Connection) -> Any:
        """Execute the statement on *conn* with the bound arguments."""
        return conn.execute(self.sql, self.arguments)

    def __len__(self) -> int:
        return len(self._arguments)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.sql!r}, arguments={self.arguments!r})"


class AnyQuery(Query):
    database = Database.ANY


class MssqlQuery(Query):
    database = Database.MSSQL


class MySqlQuery(Query):
    database = Database.MYSQL


class PostgresQuery(Query):
    database = Database.POSTGRES


class SqliteQuery(Query):
    database = Database.SQLITE


_QUERY_TYPES: dict[Database, type[Query]] = {
    Database.ANY: AnyQuery,
    Database.MSSQL: MssqlQuery,
    Database.MYSQL: MySqlQuery,
    Database.POSTGRES: PostgresQuery,
    Database.SQLITE: SqliteQuery,
}


def query_type(database: Database | str) -> type[Query]:
    """Statement builder class for *database*."""
    return _QUERY_TYPES[parse_database(database)]


def query_for(database: Database | str, sql: str) -> Query:
    """New statement builder for *database*."""
    return query_type(database)(sql)


__all__ = [
    "Query",
    "AnyQuery",
    "MssqlQuery",
    "MySqlQuery",
    "PostgresQuery",
    "SqliteQuery",
    "query_type",
    "query_for",
]
