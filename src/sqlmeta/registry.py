"""Process-wide registry of resolved schemas, keyed by class.

Every ``@sqlmeta.model`` class registers its :class:`Metadata` once, when
the class is created.  Lookups afterwards are read-only.
"""

from __future__ import annotations

from sqlmeta.core.errors import ErrorContext, ModelNotRegisteredError, SchemaError
from sqlmeta.core.logging import get_logger
from sqlmeta.schema import Metadata

logger = get_logger(__name__)

# Global schema registry
_registry: dict[type, Metadata] = {}


def register(cls: type, metadata: Metadata) -> Metadata:
    """Record *metadata* as the schema of *cls*.

    Registering the same class again with an equal descriptor is a no-op.

    Raises:
        SchemaError: *cls* is already registered with a different descriptor.
    """
    existing = _registry.get(cls)
    if existing is not None:
        if existing != metadata:
            raise SchemaError(
                f"{cls.__qualname__} is already registered with a different schema",
                context=ErrorContext(type_name=metadata.type_name),
            )
        return existing

    _registry[cls] = metadata
    logger.debug(
        "model_registered",
        cls=cls.__qualname__,
        table=metadata.table_name,
        schema=metadata.schema_ident,
    )
    return metadata


def get_schema(cls: type) -> Metadata:
    """Get the registered schema of *cls*.

    Raises:
        ModelNotRegisteredError: *cls* was never registered.
    """
    try:
        return _registry[cls]
    except KeyError:
        raise ModelNotRegisteredError(cls) from None


def is_registered(cls: type) -> bool:
    return cls in _registry


def list_models() -> list[type]:
    """List registered classes, sorted by table name."""
    return sorted(_registry, key=lambda c: (_registry[c].table_name, c.__qualname__))


def clear_registry() -> None:
    """Clear registry (for testing)."""
    _registry.clear()


__all__ = [
    "register",
    "get_schema",
    "is_registered",
    "list_models",
    "clear_registry",
]
