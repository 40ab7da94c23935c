"""
Structured error types for sqlmeta.

Every failure sqlmeta can detect happens while a type is being resolved
(decorator application or code generation) and is unrecoverable: the type
declaration has to be fixed and regenerated.  The hierarchy below keeps
that story explicit instead of raising bare ``ValueError``/``TypeError``.

Each :class:`MetaError` carries:
- **Category:** What kind of failure (schema, config, manifest, registry)
- **Context:** The type and field involved, plus free-form metadata
- **Cause:** Chained underlying exception for root cause analysis

Architecture:
    ::

        ┌────────────────────────────────────────────────────────────┐
        │                        MetaError                            │
        │              (category, context, cause)                     │
        ├────────────────────────────────────────────────────────────┤
        │                                                             │
        │  SchemaError            ConfigError          ManifestError  │
        │  (SCHEMA)               (CONFIG)             (MANIFEST)     │
        │     │                      │                                │
        │  EmptyModelError        UnknownDatabaseError                │
        │  UnsupportedShapeError  InvalidConfigError                  │
        │  AmbiguousPrimaryKeyError                                   │
        │                                                             │
        │  ModelNotRegisteredError (REGISTRY)                         │
        └────────────────────────────────────────────────────────────┘

Examples:
    >>> error = UnknownDatabaseError("Oracle", type_name="User")
    >>> error.category
    <ErrorCategory.CONFIG: 'CONFIG'>
    >>> error.context.type_name
    'User'

Guardrails:
    ❌ DON'T: Fall back to a default backend when the annotation is wrong
    ✅ DO: Raise UnknownDatabaseError, only a *missing* annotation defaults

    ❌ DON'T: Return a partially resolved Metadata
    ✅ DO: Raise the matching SchemaError subclass

Tags:
    error-handling, exception-hierarchy, error-context, sqlmeta
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for classification and reporting."""

    SCHEMA = "SCHEMA"  # Type shape, fields, primary key
    CONFIG = "CONFIG"  # Backend annotation, settings
    MANIFEST = "MANIFEST"  # YAML manifest parsing/validation
    REGISTRY = "REGISTRY"  # Registration lookups
    INTERNAL = "INTERNAL"  # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        type_name: Declared type being resolved
        field_name: Field involved in the failure, if any
        source: Where the declaration came from (class path, manifest file)
        metadata: Additional key-value pairs
    """

    type_name: str | None = None
    field_name: str | None = None
    source: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["type_name", "field_name", "source"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class MetaError(Exception):
    """
    Base exception for all sqlmeta errors.

    Subclasses set ``default_category``; callers can still override it.
    ``with_context()`` adds metadata fluently after creation::

        raise SchemaError("duplicate field").with_context(field_name="id")
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> MetaError:
        """Add context to this error (fluent API)."""
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SCHEMA ERRORS
# =============================================================================


class SchemaError(MetaError):
    """The declared type cannot be mapped to a table."""

    default_category = ErrorCategory.SCHEMA


class EmptyModelError(SchemaError):
    """The declared type has no fields."""

    def __init__(self, type_name: str):
        super().__init__(
            f"{type_name} declares no fields; at least one field is required",
            context=ErrorContext(type_name=type_name),
        )


class UnsupportedShapeError(SchemaError):
    """The declared type is not a plain named-field record."""

    def __init__(self, type_name: str, shape: str):
        self.shape = shape
        super().__init__(
            f"{type_name} is a {shape}; only records with named fields "
            "(dataclasses or pydantic models) are supported",
            context=ErrorContext(type_name=type_name),
        )


class AmbiguousPrimaryKeyError(SchemaError):
    """More than one field carries the primary-key marker."""

    def __init__(self, type_name: str, candidates: list[str]):
        self.candidates = candidates
        super().__init__(
            f"{type_name} marks {len(candidates)} fields as primary key "
            f"({', '.join(candidates)}); composite keys are not supported",
            context=ErrorContext(type_name=type_name, field_name=candidates[0]),
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(MetaError):
    """Configuration error; must be fixed at the source."""

    default_category = ErrorCategory.CONFIG


class UnknownDatabaseError(ConfigError):
    """The backend annotation names a database that is not supported."""

    def __init__(self, value: str, *, type_name: str | None = None):
        from sqlmeta.core.dialect import Database

        self.value = value
        supported = ", ".join(db.annotation for db in Database)
        super().__init__(
            f"unknown database {value!r}; expected one of: {supported}",
            context=ErrorContext(type_name=type_name),
        )


class InvalidConfigError(ConfigError):
    """A settings value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# MANIFEST / REGISTRY ERRORS
# =============================================================================


class ManifestError(MetaError):
    """The YAML manifest could not be parsed or validated."""

    default_category = ErrorCategory.MANIFEST


class ModelNotRegisteredError(MetaError):
    """A class was looked up in the registry but never registered."""

    default_category = ErrorCategory.REGISTRY

    def __init__(self, cls: type):
        super().__init__(
            f"{cls.__qualname__} is not registered; decorate it with @sqlmeta.model",
            context=ErrorContext(type_name=cls.__qualname__),
        )


__all__ = [
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
]
