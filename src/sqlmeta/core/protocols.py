"""
Capability contracts sqlmeta consumes from its environment.

sqlmeta binds values; it does not execute SQL.  Both contracts below are
structural (``typing.Protocol``), so any object of the right shape works:
the bundled :class:`sqlmeta.query.Query`, a thin wrapper around another
library's statement object, or a test double.

Architecture:
    ::

        StatementBuilder
        ┌────────────────────────────────────────────────────────┐
        │ bind(value) → builder   append next positional value   │
        └────────────────────────────────────────────────────────┘

        Connection
        ┌────────────────────────────────────────────────────────┐
        │ execute(sql, params) → cursor/result                   │
        └────────────────────────────────────────────────────────┘

    ``sqlite3.Connection`` satisfies :class:`Connection` as-is.

Tags:
    protocol, statement-builder, connection, sqlmeta, contracts
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

B = TypeVar("B", bound="StatementBuilder")


@runtime_checkable
class StatementBuilder(Protocol):
    """Accumulates positional parameters for a parameterized statement.

    ``bind`` returns the builder (the same object or an equivalent handle)
    so calls chain::

        query.bind(user.name).bind(user.email).bind(user.id)
    """

    def bind(self: B, value: Any) -> B:
        """Append the next positional parameter value."""
        ...


@runtime_checkable
class Connection(Protocol):
    """Minimal synchronous DB-API style connection."""

    def execute(self, sql: str, params: tuple = ()) -> Any:
        """Execute SQL statement with positional parameters."""
        ...


__all__ = [
    "StatementBuilder",
    "Connection",
]
