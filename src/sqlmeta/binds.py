"""
Bind sequences: metadata -> ordered insert/update parameter binds.

Two statement kinds are supported:

- **insert** binds every column, in declaration order.
- **update** binds every column except the primary key, in declaration
  order, then the primary key exactly once, last.  Callers write update
  statements as ``UPDATE t SET a = ?, b = ? WHERE id = ?`` and the key
  value always arrives in the trailing slot, wherever the key sits among
  the fields.

Architecture:
    ::

        Metadata(columns=(name, id, email), id_column="id")
                │
                ▼  plan_binds()
        BindPlan(insert=(name, id, email),
                 update=(name, email, id))
                │
                ▼  make_binders()
        insert_binds(self, query) -> query.bind(self.name).bind(self.id).bind(self.email)
        update_binds(self, query) -> query.bind(self.name).bind(self.email).bind(self.id)

Values are handed to the builder untouched: no conversion, validation or
None handling.  If the builder rejects a value, its exception propagates.

Examples:
    >>> from sqlmeta.schema import Metadata
    >>> meta = Metadata("User", "user", "id", "int", ("id", "name", "email"))
    >>> plan_binds(meta)
    BindPlan(insert=('id', 'name', 'email'), update=('name', 'email', 'id'))

Tags:
    binds, parameters, insert, update, sqlmeta
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from sqlmeta.core.protocols import StatementBuilder
from sqlmeta.schema import Metadata

B = TypeVar("B", bound=StatementBuilder)

FieldGetter = Callable[[Any, str], Any]
Binder = Callable[[Any, B], B]


class StatementKind:
    INSERT = "insert"
    UPDATE = "update"


@dataclass(frozen=True)
class BindPlan:
    """Ordered field names bound for each statement kind."""

    insert: tuple[str, ...]
    update: tuple[str, ...]

    def for_kind(self, kind: str) -> tuple[str, ...]:
        if kind == StatementKind.INSERT:
            return self.insert
        if kind == StatementKind.UPDATE:
            return self.update
        raise ValueError(f"unknown statement kind {kind!r}")


def plan_binds(metadata: Metadata) -> BindPlan:
    """Derive the insert and update bind sequences from *metadata*."""
    return BindPlan(
        insert=metadata.columns,
        update=metadata.non_id_columns + (metadata.id_column,),
    )


def bind_values(
    instance: Any,
    builder: B,
    sequence: tuple[str, ...],
    *,
    getter: FieldGetter = getattr,
) -> B:
    """Bind ``getter(instance, name)`` for each name of *sequence*, in order."""
    for name in sequence:
        builder = builder.bind(getter(instance, name))
    return builder


def insert_binds(instance: Any, builder: B, metadata: Metadata) -> B:
    """Bind every column value of *instance* in declaration order."""
    return bind_values(instance, builder, plan_binds(metadata).insert)


def update_binds(instance: Any, builder: B, metadata: Metadata) -> B:
    """Bind non-key column values in declaration order, then the key."""
    return bind_values(instance, builder, plan_binds(metadata).update)


def make_binders(
    plan: BindPlan,
    *,
    getter: FieldGetter = getattr,
) -> tuple[Binder, Binder]:
    """Build the ``insert_binds`` / ``update_binds`` methods for a plan.

    The sequences are captured once; the returned functions take
    ``(self, builder)`` and are meant to be attached to the record class.
    """
    insert_sequence = plan.insert
    update_sequence = plan.update

    def insert_binds(self: Any, builder: B) -> B:
        """Bind every field, in declaration order."""
        return bind_values(self, builder, insert_sequence, getter=getter)

    def update_binds(self: Any, builder: B) -> B:
        """Bind non-key fields in declaration order, then the primary key."""
        return bind_values(self, builder, update_sequence, getter=getter)

    return insert_binds, update_binds


__all__ = [
    "BindPlan",
    "StatementKind",
    "plan_binds",
    "bind_values",
    "insert_binds",
    "update_binds",
    "make_binders",
]
