"""sqlmeta.core -- errors, logging, settings, naming and backend dialects.

Architecture::

    errors.py      Structured error hierarchy (MetaError, SchemaError, ...)
    logging.py     structlog configuration
    settings.py    SqlMetaSettings (pydantic-settings, SQLMETA_ prefix)
    naming.py      Identifier -> table case / SCREAMING_SNAKE
    dialect.py     Database enum + placeholder dialects
    protocols.py   StatementBuilder / Connection contracts
"""

from sqlmeta.core.dialect import DEFAULT_DATABASE, Database, Dialect, get_dialect, parse_database
from sqlmeta.core.errors import (
    AmbiguousPrimaryKeyError,
    ConfigError,
    EmptyModelError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    ManifestError,
    MetaError,
    ModelNotRegisteredError,
    SchemaError,
    UnknownDatabaseError,
    UnsupportedShapeError,
)
from sqlmeta.core.naming import to_screaming_snake_case, to_snake_case, to_table_case
from sqlmeta.core.protocols import Connection, StatementBuilder

__all__ = [
    # dialect
    "Database",
    "DEFAULT_DATABASE",
    "Dialect",
    "get_dialect",
    "parse_database",
    # errors
    "ErrorCategory",
    "ErrorContext",
    "MetaError",
    "SchemaError",
    "EmptyModelError",
    "UnsupportedShapeError",
    "AmbiguousPrimaryKeyError",
    "ConfigError",
    "UnknownDatabaseError",
    "InvalidConfigError",
    "ManifestError",
    "ModelNotRegisteredError",
    # naming
    "to_snake_case",
    "to_table_case",
    "to_screaming_snake_case",
    # protocols
    "Connection",
    "StatementBuilder",
]
