"""
``@model``: resolve a record class once and attach its persistence API.

The decorator is the registration-time counterpart of code generation: it
runs when the class statement executes, resolves the class's schema, and
fails the import if the declaration is invalid.  Nothing is recomputed per
instance or per call afterwards.

Attached to the class:

==================  ===========================================================
``table_name()``    classmethod, derived table name
``id_column()``     classmethod, primary-key column name
``columns()``       classmethod, column names in declaration order
``query(sql)``      classmethod, statement builder for the class's backend
``primary_key()``   value of the primary-key field of an instance
``insert_binds(q)`` bind every field, declaration order
``update_binds(q)`` bind non-key fields, then the key last
``__sqlmeta__``     the :class:`~sqlmeta.schema.Metadata`
==================  ===========================================================

Example::

    from dataclasses import dataclass
    from typing import Annotated

    import sqlmeta

    @sqlmeta.model(database="Postgres")
    @dataclass
    class User:
        id: Annotated[int, sqlmeta.Id]
        name: str
        email: str

    User.table_name()                       # "user"
    q = User.query("UPDATE user SET name = %s, email = %s WHERE id = %s")
    User(1, "Ada", "ada@example.com").update_binds(q).arguments
    # ("Ada", "ada@example.com", 1)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar, overload

from sqlmeta.binds import BindPlan, make_binders, plan_binds
from sqlmeta.core.errors import ErrorContext, MetaError, SchemaError
from sqlmeta.core.settings import DuplicateKeyPolicy, get_settings
from sqlmeta.introspect import declare
from sqlmeta.query import Query, query_for
from sqlmeta.registry import get_schema, register
from sqlmeta.schema import Metadata, resolve_schema

T = TypeVar("T", bound=type)

RESERVED_NAMES = frozenset(
    {
        "table_name",
        "id_column",
        "columns",
        "query",
        "primary_key",
        "insert_binds",
        "update_binds",
    }
)


def _table_name(cls: type) -> str:
    """Table name of this type."""
    return cls.__sqlmeta__.table_name  # type: ignore[attr-defined]


def _id_column(cls: type) -> str:
    """Column name of the primary key."""
    return cls.__sqlmeta__.id_column  # type: ignore[attr-defined]


def _columns(cls: type) -> tuple[str, ...]:
    """Column names, in declaration order."""
    return cls.__sqlmeta__.columns  # type: ignore[attr-defined]


def _query(cls: type, sql: str) -> Query:
    """Statement builder for this type's backend."""
    return query_for(cls.__sqlmeta__.database, sql)  # type: ignore[attr-defined]


def _primary_key(self: Any) -> Any:
    """Value of the primary-key field."""
    return getattr(self, type(self).__sqlmeta__.id_column)


def _attach(cls: type, metadata: Metadata, plan: BindPlan) -> None:
    insert_binds, update_binds = make_binders(plan)
    for fn in (insert_binds, update_binds):
        fn.__qualname__ = f"{cls.__qualname__}.{fn.__name__}"
        fn.__module__ = cls.__module__

    cls.__sqlmeta__ = metadata  # type: ignore[attr-defined]
    cls.__sqlmeta_binds__ = plan  # type: ignore[attr-defined]
    cls.table_name = classmethod(_table_name)  # type: ignore[attr-defined]
    cls.id_column = classmethod(_id_column)  # type: ignore[attr-defined]
    cls.columns = classmethod(_columns)  # type: ignore[attr-defined]
    cls.query = classmethod(_query)  # type: ignore[attr-defined]
    cls.primary_key = _primary_key  # type: ignore[attr-defined]
    cls.insert_binds = insert_binds  # type: ignore[attr-defined]
    cls.update_binds = update_binds  # type: ignore[attr-defined]


@overload
def model(cls: T) -> T: ...


@overload
def model(
    cls: None = None,
    *,
    database: str | None = None,
    external_id: bool = False,
    duplicate_key_policy: DuplicateKeyPolicy | str | None = None,
) -> Callable[[T], T]: ...


def model(
    cls: Any = None,
    *,
    database: str | None = None,
    external_id: bool = False,
    duplicate_key_policy: DuplicateKeyPolicy | str | None = None,
) -> Any:
    """Class decorator resolving and registering a record type.

    Usable bare (``@model``) or with arguments (``@model(database="MySql")``).
    Apply it *above* ``@dataclass`` so it sees the finished dataclass.

    Args:
        database: Backend annotation (``Any``, ``Mssql``, ``MySql``,
            ``Postgres``, ``Sqlite``); SQLite when omitted.
        external_id: The type's identifiers are assigned outside the
            database; recorded in the metadata.
        duplicate_key_policy: Overrides ``SQLMETA_DUPLICATE_KEY_POLICY``.

    Raises:
        SchemaError: Invalid shape, no fields, duplicate key markers, or a
            field named like one of the attached methods.
        UnknownDatabaseError: ``database`` names an unsupported backend.
    """

    def decorator(cls: T) -> T:
        declaration = declare(cls, database=database, external_id=external_id)
        policy = duplicate_key_policy or get_settings().duplicate_key_policy
        try:
            metadata = resolve_schema(declaration, duplicate_key_policy=policy)
        except MetaError as e:
            e.with_context(source=declaration.source)
            raise

        clashes = sorted(RESERVED_NAMES.intersection(metadata.columns))
        if clashes:
            raise SchemaError(
                f"{declaration.name} declares field(s) {', '.join(clashes)} which "
                "collide with the generated persistence API; rename them",
                context=ErrorContext(
                    type_name=declaration.name,
                    field_name=clashes[0],
                    source=declaration.source,
                ),
            )

        _attach(cls, metadata, plan_binds(metadata))
        register(cls, metadata)
        return cls

    if cls is not None:
        return decorator(cls)
    return decorator


# ── Module-level accessors ───────────────────────────────────────────────


def schema_of(obj: Any) -> Metadata:
    """Metadata of a registered class or of an instance of one."""
    cls = obj if isinstance(obj, type) else type(obj)
    return get_schema(cls)


def table_name(cls: type) -> str:
    return schema_of(cls).table_name


def id_column(cls: type) -> str:
    return schema_of(cls).id_column


def columns(cls: type) -> tuple[str, ...]:
    return schema_of(cls).columns


def primary_key(instance: Any) -> Any:
    """Value of the primary-key field of *instance*."""
    return getattr(instance, schema_of(instance).id_column)


__all__ = [
    "RESERVED_NAMES",
    "model",
    "schema_of",
    "table_name",
    "id_column",
    "columns",
    "primary_key",
]
