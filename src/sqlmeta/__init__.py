"""sqlmeta -- table metadata and ordered parameter binds for record types.

Declare a record once; get its table name, primary-key column, ordered
columns, and ``insert_binds`` / ``update_binds`` that feed field values to
a statement builder in the right order.

Two ways to declare a type:

* ``@sqlmeta.model`` on a dataclass or pydantic model (resolved when the
  class is defined)
* a YAML manifest rendered ahead of time with ``sqlmeta generate``

Layers::

    core/          errors, logging, settings, naming, dialects, protocols
    schema.py      TypeDeclaration -> Metadata           (resolver)
    binds.py       Metadata -> BindPlan -> binders       (generator)
    introspect.py  dataclass / pydantic class -> TypeDeclaration
    model.py       @model decorator + accessors
    registry.py    class -> Metadata registry
    query.py       per-backend statement builders
    codegen/       YAML manifest -> Python module
    cli/           ``sqlmeta`` command
"""

from sqlmeta.binds import BindPlan, bind_values, insert_binds, make_binders, plan_binds, update_binds
from sqlmeta.core.dialect import Database
from sqlmeta.core.errors import (
    AmbiguousPrimaryKeyError,
    ConfigError,
    EmptyModelError,
    MetaError,
    SchemaError,
    UnknownDatabaseError,
    UnsupportedShapeError,
)
from sqlmeta.introspect import Id, declare, id_field
from sqlmeta.model import columns, id_column, model, primary_key, schema_of, table_name
from sqlmeta.query import Query, query_for
from sqlmeta.registry import get_schema, list_models
from sqlmeta.schema import FieldDeclaration, Metadata, TypeDeclaration, TypeKind, resolve_schema

__version__ = "0.3.0"

__all__ = [
    # declaration
    "model",
    "Id",
    "id_field",
    "declare",
    "FieldDeclaration",
    "TypeDeclaration",
    "TypeKind",
    # resolution
    "Metadata",
    "resolve_schema",
    "Database",
    # binds
    "BindPlan",
    "plan_binds",
    "bind_values",
    "insert_binds",
    "update_binds",
    "make_binders",
    # accessors
    "schema_of",
    "table_name",
    "id_column",
    "columns",
    "primary_key",
    "get_schema",
    "list_models",
    # builders
    "Query",
    "query_for",
    # errors
    "MetaError",
    "SchemaError",
    "EmptyModelError",
    "UnsupportedShapeError",
    "AmbiguousPrimaryKeyError",
    "ConfigError",
    "UnknownDatabaseError",
]
