"""Database backends and their placeholder dialects.

Every declared type targets exactly one backend, chosen by its
``database`` annotation.  The set is closed: a type either names one of
the backends below, or names nothing and gets :attr:`Database.SQLITE`.
A name outside the set is a hard failure, never a silent fallback.

Architecture::

    annotation text          Database            Dialect placeholder
    ───────────────          ────────            ───────────────────
    (absent)         ──▶     SQLITE       ──▶    ?, ?, ?
    "Sqlite"         ──▶     SQLITE       ──▶    ?, ?, ?
    "Postgres"       ──▶     POSTGRES     ──▶    %s, %s, %s
    "MySql"          ──▶     MYSQL        ──▶    %s, %s, %s
    "Mssql"          ──▶     MSSQL        ──▶    @P1, @P2, @P3
    "Any"            ──▶     ANY          ──▶    ?, ?, ?
    "Oracle"         ──▶     UnknownDatabaseError

The backend only decides which statement builder a type's bound values go
to (see :mod:`sqlmeta.query`).  Placeholder helpers are offered to callers
writing their own SQL; sqlmeta itself never writes SQL text.

Examples:
    >>> parse_database(None)
    <Database.SQLITE: 'sqlite'>
    >>> parse_database("Postgres")
    <Database.POSTGRES: 'postgres'>
    >>> get_dialect(Database.MSSQL).placeholders(2)
    '@P1, @P2'

Tags:
    dialect, backend, database, placeholders, sqlmeta
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from sqlmeta.core.errors import UnknownDatabaseError


class Database(str, Enum):
    """Supported database backends."""

    ANY = "any"
    MSSQL = "mssql"
    MYSQL = "mysql"
    POSTGRES = "postgres"
    SQLITE = "sqlite"

    @property
    def annotation(self) -> str:
        """Spelling used in type annotations and manifests (e.g. ``MySql``)."""
        return _ANNOTATIONS[self]


_ANNOTATIONS: dict[Database, str] = {
    Database.ANY: "Any",
    Database.MSSQL: "Mssql",
    Database.MYSQL: "MySql",
    Database.POSTGRES: "Postgres",
    Database.SQLITE: "Sqlite",
}

DEFAULT_DATABASE = Database.SQLITE


def parse_database(value: str | Database | None, *, type_name: str | None = None) -> Database:
    """Resolve a backend annotation.

    Args:
        value: Annotation text spelled exactly as :attr:`Database.annotation`
               (``"Postgres"``, ``"MySql"``), a :class:`Database`, or
               ``None`` when the type carries no annotation.
        type_name: Declared type, used in the error context.

    Returns:
        The selected backend; :data:`DEFAULT_DATABASE` when *value* is None.

    Raises:
        UnknownDatabaseError: If *value* is present but not recognised.
    """
    if value is None:
        return DEFAULT_DATABASE
    if isinstance(value, Database):
        return value
    for db in Database:
        if value == db.annotation:
            return db
    raise UnknownDatabaseError(value, type_name=type_name)


@runtime_checkable
class Dialect(Protocol):
    """Placeholder style of a backend."""

    @property
    def name(self) -> str:
        """Backend name (e.g. ``'sqlite'``)."""
        ...

    def placeholder(self, index: int) -> str:
        """Single positional placeholder (0-based index).

        ``index`` is ignored by anonymous styles (``?``, ``%s``) but
        required by numbered styles (``@P1``).
        """
        ...

    def placeholders(self, count: int) -> str:
        """Comma-separated placeholder list."""
        ...


# =========================================================================
# Concrete Dialect Implementations
# =========================================================================


class _QmarkDialect:
    _name = "any"

    @property
    def name(self) -> str:
        return self._name

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return "?"

    def placeholders(self, count: int) -> str:
        return ", ".join("?" for _ in range(count))


class AnyDialect(_QmarkDialect):
    """Generic backend, ``?`` placeholders."""

    _name = "any"


class SQLiteDialect(_QmarkDialect):
    """SQLite: ``?`` placeholders (sqlite3 qmark paramstyle)."""

    _name = "sqlite"


class PostgreSQLDialect:
    """PostgreSQL: ``%s`` placeholders (psycopg format paramstyle)."""

    @property
    def name(self) -> str:
        return "postgres"

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return "%s"

    def placeholders(self, count: int) -> str:
        return ", ".join("%s" for _ in range(count))


class MySQLDialect:
    """MySQL: ``%s`` placeholders (PyMySQL / mysql.connector)."""

    @property
    def name(self) -> str:
        return "mysql"

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return "%s"

    def placeholders(self, count: int) -> str:
        return ", ".join("%s" for _ in range(count))


class MssqlDialect:
    """SQL Server: ``@P1, @P2`` numbered placeholders (TDS positional params)."""

    @property
    def name(self) -> str:
        return "mssql"

    def placeholder(self, index: int) -> str:
        return f"@P{index + 1}"

    def placeholders(self, count: int) -> str:
        return ", ".join(self.placeholder(i) for i in range(count))


# Dialects are stateless
_DIALECTS: dict[Database, Dialect] = {
    Database.ANY: AnyDialect(),
    Database.MSSQL: MssqlDialect(),
    Database.MYSQL: MySQLDialect(),
    Database.POSTGRES: PostgreSQLDialect(),
    Database.SQLITE: SQLiteDialect(),
}


def get_dialect(database: Database | str) -> Dialect:
    """Get the dialect for a backend.

    Raises:
        UnknownDatabaseError: If ``database`` is a string naming no backend.
    """
    return _DIALECTS[parse_database(database)]


__all__ = [
    "Database",
    "DEFAULT_DATABASE",
    "parse_database",
    "Dialect",
    "AnyDialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "MySQLDialect",
    "MssqlDialect",
    "get_dialect",
]
