"""
Schema resolution: type declaration -> immutable table metadata.

A :class:`TypeDeclaration` is the already-parsed shape of a record type
(its name, ordered fields, primary-key markers and type-level
annotations).  :func:`resolve_schema` turns it into a :class:`Metadata`,
the one canonical description every other part of sqlmeta reads from.

Resolution rules:
    - **Table name:** table-case transform of the type name, no
      pluralization (``UserAccount`` -> ``user_account``).
    - **Primary key:** the single field marked as key; the first declared
      field when none is marked.
    - **Columns:** every field name, in declaration order.
    - **Backend:** the ``database`` annotation, SQLite when absent.

Nothing here depends on field *values*, only on declarations, so the
same declaration always resolves to an equal :class:`Metadata`.

Architecture:
    ::

        TypeDeclaration                     Metadata
        ┌──────────────────────┐            ┌──────────────────────────┐
        │ name: "User"         │            │ table_name: "user"       │
        │ fields:              │  resolve   │ id_column:  "id"         │
        │   id    int   [id]   │ ─────────▶ │ columns: (id,name,email) │
        │   name  str          │            │ database: POSTGRES       │
        │   email str          │            │ schema_ident:            │
        │ database: "Postgres" │            │   "USER_SCHEMA"          │
        └──────────────────────┘            └──────────────────────────┘

Examples:
    >>> decl = TypeDeclaration(
    ...     name="User",
    ...     fields=(
    ...         FieldDeclaration("id", "int"),
    ...         FieldDeclaration("name", "str"),
    ...     ),
    ... )
    >>> meta = resolve_schema(decl)
    >>> meta.table_name, meta.id_column, meta.columns
    ('user', 'id', ('id', 'name'))

Guardrails:
    ❌ DON'T: Reorder columns (bind order is derived from them)
    ✅ DO: Keep declaration order end to end

    ❌ DON'T: Pick a key silently when several fields are marked
    ✅ DO: Raise AmbiguousPrimaryKeyError unless the ``first`` policy is set

Tags:
    schema, metadata, resolver, primary-key, sqlmeta
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlmeta.core.dialect import Database, parse_database
from sqlmeta.core.errors import (
    AmbiguousPrimaryKeyError,
    EmptyModelError,
    ErrorContext,
    InvalidConfigError,
    SchemaError,
    UnsupportedShapeError,
)
from sqlmeta.core.logging import get_logger
from sqlmeta.core.naming import to_screaming_snake_case, to_table_case
from sqlmeta.core.settings import DuplicateKeyPolicy

logger = get_logger(__name__)


class TypeKind(str, Enum):
    """Shape of a declared type."""

    RECORD = "record"  # named fields (dataclass, pydantic model)
    VARIANT = "variant"  # tagged union / enum


@dataclass(frozen=True)
class FieldDeclaration:
    """One declared field of a record type."""

    name: str
    type_name: str = "Any"
    is_id: bool = False


@dataclass(frozen=True)
class TypeDeclaration:
    """Parsed declaration of a type plus its type-level annotations.

    ``database`` is the raw annotation text (``None`` when the type has
    no backend annotation); it is validated during resolution.
    """

    name: str
    fields: tuple[FieldDeclaration, ...]
    kind: TypeKind = TypeKind.RECORD
    database: str | None = None
    external_id: bool = False
    source: str | None = None


@dataclass(frozen=True)
class Metadata:
    """Immutable schema descriptor of a declared type.

    Attributes:
        type_name: Source type identifier
        table_name: Derived table name
        id_column: Primary-key column name (always one of ``columns``)
        id_type: Declared type of the primary-key field, as text
        columns: Field names in declaration order
        database: Selected backend
        external_id: The type uses externally-assigned identifiers
        schema_ident: Name of the static descriptor in generated code
    """

    type_name: str
    table_name: str
    id_column: str
    id_type: str
    columns: tuple[str, ...]
    database: Database = Database.SQLITE
    external_id: bool = False
    schema_ident: str = ""

    def __post_init__(self) -> None:
        if self.id_column not in self.columns:
            raise SchemaError(
                f"primary key {self.id_column!r} is not one of the columns {list(self.columns)}",
                context=ErrorContext(type_name=self.type_name, field_name=self.id_column),
            )

    @property
    def id_index(self) -> int:
        """Position of the primary key in :attr:`columns`."""
        return self.columns.index(self.id_column)

    @property
    def non_id_columns(self) -> tuple[str, ...]:
        """Columns other than the primary key, in declaration order."""
        return tuple(c for c in self.columns if c != self.id_column)

    def to_dict(self) -> dict[str, object]:
        return {
            "type_name": self.type_name,
            "table_name": self.table_name,
            "id_column": self.id_column,
            "id_type": self.id_type,
            "columns": list(self.columns),
            "database": self.database.annotation,
            "external_id": self.external_id,
            "schema_ident": self.schema_ident,
        }


def _select_id_field(
    declaration: TypeDeclaration,
    policy: DuplicateKeyPolicy,
) -> FieldDeclaration:
    marked = [f for f in declaration.fields if f.is_id]
    if not marked:
        return declaration.fields[0]
    if len(marked) > 1:
        if policy is DuplicateKeyPolicy.ERROR:
            raise AmbiguousPrimaryKeyError(declaration.name, [f.name for f in marked])
        logger.warning(
            "duplicate_primary_key",
            type_name=declaration.name,
            candidates=[f.name for f in marked],
            selected=marked[0].name,
        )
    return marked[0]


def resolve_schema(
    declaration: TypeDeclaration,
    *,
    duplicate_key_policy: DuplicateKeyPolicy | str = DuplicateKeyPolicy.ERROR,
) -> Metadata:
    """Resolve a type declaration into its :class:`Metadata`.

    Args:
        declaration: Parsed type declaration.
        duplicate_key_policy: ``error`` (default) rejects several key
            markers; ``first`` keeps the first marked field.

    Raises:
        UnsupportedShapeError: The type is not a named-field record.
        EmptyModelError: The type declares no fields.
        SchemaError: Two fields share a name.
        AmbiguousPrimaryKeyError: Several key markers under the ``error`` policy.
        UnknownDatabaseError: The backend annotation names no known backend.
        InvalidConfigError: *duplicate_key_policy* is not a known policy.
    """
    try:
        policy = DuplicateKeyPolicy(duplicate_key_policy)
    except ValueError as e:
        raise InvalidConfigError(
            "duplicate_key_policy",
            duplicate_key_policy,
            f"unknown duplicate_key_policy {duplicate_key_policy!r}; expected one of: "
            + ", ".join(p.value for p in DuplicateKeyPolicy),
        ).with_context(type_name=declaration.name) from e

    if declaration.kind is not TypeKind.RECORD:
        raise UnsupportedShapeError(declaration.name, "tagged union")
    if not declaration.fields:
        raise EmptyModelError(declaration.name)

    columns = tuple(f.name for f in declaration.fields)
    seen: set[str] = set()
    for name in columns:
        if name in seen:
            raise SchemaError(
                f"{declaration.name} declares field {name!r} more than once",
                context=ErrorContext(type_name=declaration.name, field_name=name),
            )
        seen.add(name)

    id_field = _select_id_field(declaration, policy)
    database = parse_database(declaration.database, type_name=declaration.name)

    metadata = Metadata(
        type_name=declaration.name,
        table_name=to_table_case(declaration.name),
        id_column=id_field.name,
        id_type=id_field.type_name,
        columns=columns,
        database=database,
        external_id=declaration.external_id,
        schema_ident=f"{to_screaming_snake_case(declaration.name)}_SCHEMA",
    )

    logger.debug(
        "schema_resolved",
        type_name=metadata.type_name,
        table=metadata.table_name,
        id_column=metadata.id_column,
        columns=len(metadata.columns),
        database=metadata.database.value,
    )
    return metadata


__all__ = [
    "TypeKind",
    "FieldDeclaration",
    "TypeDeclaration",
    "Metadata",
    "resolve_schema",
]
