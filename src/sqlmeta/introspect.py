"""Read Python record classes into :class:`~sqlmeta.schema.TypeDeclaration`.

Supported shapes:

* ``@dataclass`` classes (fields from :func:`dataclasses.fields`)
* pydantic ``BaseModel`` subclasses (fields from ``model_fields``)

Both keep declaration order.  ``Enum`` subclasses and ``Union`` aliases are
tagged unions and are reported as :attr:`TypeKind.VARIANT`; any other
object is rejected outright.

A field is marked as primary key by either spelling::

    @dataclass
    class User:
        id: Annotated[int, Id]
        name: str

    @dataclass
    class Tag:
        label: str
        tag_id: int = id_field(default=0)

    class Account(BaseModel):
        number: str = Field(json_schema_extra={"id": True})
"""

from __future__ import annotations

import builtins
import dataclasses
import re
import sys
import types
import typing
from enum import Enum
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel

from sqlmeta.core.errors import ErrorContext, SchemaError, UnsupportedShapeError
from sqlmeta.schema import FieldDeclaration, TypeDeclaration, TypeKind

ID_METADATA_KEY = "id"

_FORWARD_REF = re.compile(r"ForwardRef\('([^']*)'[^)]*\)")


class _IdMarker:
    """Primary-key marker used inside ``Annotated[...]``."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "Id"


Id = _IdMarker()


def id_field(**kwargs: Any) -> Any:
    """``dataclasses.field`` that marks the field as primary key."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[ID_METADATA_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def _has_id_marker(annotation: Any) -> bool:
    if get_origin(annotation) is Annotated:
        return any(extra is Id for extra in get_args(annotation)[1:])
    return False


def type_name_of(annotation: Any) -> str:
    """Render an annotation as source text, ``Annotated`` extras stripped."""
    if isinstance(annotation, str):
        return annotation.strip()
    if isinstance(annotation, typing.ForwardRef):
        return annotation.__forward_arg__
    if get_origin(annotation) is Annotated:
        return type_name_of(get_args(annotation)[0])
    if annotation is type(None):
        return "None"
    if isinstance(annotation, type) and not isinstance(annotation, types.GenericAlias):
        if annotation.__module__ == "builtins":
            return annotation.__qualname__
        return f"{annotation.__module__}.{annotation.__qualname__}"
    return _FORWARD_REF.sub(r"\1", repr(annotation).replace("typing.", ""))


def _is_variant(obj: Any) -> bool:
    if isinstance(obj, type) and issubclass(obj, Enum):
        return True
    return get_origin(obj) in (Union, types.UnionType)


class _LenientNamespace(dict):
    """Class namespace where names the module cannot supply become ``ForwardRef``."""

    def __init__(self, globalns: dict[str, Any], localns: dict[str, Any]) -> None:
        super().__init__(localns)
        self._globalns = globalns

    def __missing__(self, key: str) -> Any:
        if key in self._globalns:
            return self._globalns[key]
        if hasattr(builtins, key):
            return getattr(builtins, key)
        return typing.ForwardRef(key)


def _resolve_field(cls: type, f: dataclasses.Field) -> Any:
    """Evaluate one field annotation, keeping ``Annotated`` extras.

    Names that are not defined anywhere stay forward references, so an
    ``Id`` marker next to them still counts.
    """
    annotation = f.type
    if isinstance(annotation, typing.ForwardRef):
        annotation = annotation.__forward_arg__
    if not isinstance(annotation, str):
        return annotation

    module = sys.modules.get(cls.__module__)
    globalns = vars(module) if module is not None else {}
    try:
        return eval(annotation, globalns, _LenientNamespace(globalns, dict(vars(cls))))
    except (AttributeError, NameError, SyntaxError, TypeError) as e:
        if "Annotated" not in annotation:
            return annotation
        raise SchemaError(
            f"cannot evaluate annotation {annotation!r} of field {f.name!r}; "
            "its Annotated extras would be lost",
            context=ErrorContext(
                type_name=cls.__name__,
                field_name=f.name,
                source=f"{cls.__module__}:{cls.__qualname__}",
            ),
        ) from e


def _dataclass_fields(cls: type) -> tuple[FieldDeclaration, ...]:
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except NameError:
        # some annotation names an undefined type; resolve field by field
        hints = {}

    declared = []
    for f in dataclasses.fields(cls):
        annotation = hints[f.name] if f.name in hints else _resolve_field(cls, f)
        is_id = f.metadata.get(ID_METADATA_KEY) is True or _has_id_marker(annotation)
        declared.append(FieldDeclaration(f.name, type_name_of(annotation), is_id))
    return tuple(declared)


def _pydantic_fields(cls: type[BaseModel]) -> tuple[FieldDeclaration, ...]:
    declared = []
    for name, info in cls.model_fields.items():
        extra = info.json_schema_extra
        is_id = any(m is Id for m in info.metadata) or (
            isinstance(extra, dict) and extra.get(ID_METADATA_KEY) is True
        )
        declared.append(FieldDeclaration(name, type_name_of(info.annotation), is_id))
    return tuple(declared)


def declare(
    cls: Any,
    *,
    database: str | None = None,
    external_id: bool = False,
) -> TypeDeclaration:
    """Build the :class:`TypeDeclaration` of *cls*.

    Args:
        cls: A dataclass or pydantic model class.
        database: Backend annotation text, ``None`` when absent.
        external_id: The type uses externally-assigned identifiers.

    Raises:
        UnsupportedShapeError: *cls* is neither a dataclass nor a pydantic model.
        SchemaError: An ``Annotated`` field annotation cannot be evaluated.
    """
    name = getattr(cls, "__name__", None) or repr(cls)
    source = f"{getattr(cls, '__module__', '?')}:{getattr(cls, '__qualname__', name)}"

    if _is_variant(cls):
        return TypeDeclaration(
            name=name,
            fields=(),
            kind=TypeKind.VARIANT,
            database=database,
            external_id=external_id,
            source=source,
        )

    if isinstance(cls, type) and issubclass(cls, BaseModel):
        fields = _pydantic_fields(cls)
    elif isinstance(cls, type) and dataclasses.is_dataclass(cls):
        fields = _dataclass_fields(cls)
    else:
        shape = "plain class" if isinstance(cls, type) else type(cls).__name__
        raise UnsupportedShapeError(name, shape).with_context(source=source)

    return TypeDeclaration(
        name=name,
        fields=fields,
        kind=TypeKind.RECORD,
        database=database,
        external_id=external_id,
        source=source,
    )


__all__ = [
    "Id",
    "ID_METADATA_KEY",
    "id_field",
    "declare",
    "type_name_of",
]
