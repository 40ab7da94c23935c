"""
Python source rendering for resolved types.

Output mirrors what ``@sqlmeta.model`` attaches at runtime, spelled out as
plain code: a static ``<NAME>_SCHEMA`` descriptor, a dataclass, and
unrolled ``insert_binds`` / ``update_binds`` chains.

Rendering is deterministic.  No timestamps, absolute paths or dict
iteration leak into the output, so an unchanged manifest always renders
byte-identical source and ``sqlmeta generate --check`` can gate CI.

Example output::

    USER_SCHEMA = Metadata(
        type_name="User",
        table_name="user",
        id_column="id",
        ...
    )


    @dataclass
    class User:
        id: int
        name: str

        ...

        def update_binds(self, query: Query) -> Query:
            return (
                query
                .bind(self.name)
                .bind(self.id)
            )
"""

from __future__ import annotations

import keyword
from collections.abc import Iterable, Sequence

from sqlmeta.binds import plan_binds
from sqlmeta.core.errors import ErrorContext, MetaError, SchemaError
from sqlmeta.core.logging import get_logger
from sqlmeta.core.settings import DuplicateKeyPolicy
from sqlmeta.model import RESERVED_NAMES
from sqlmeta.schema import Metadata, TypeDeclaration, resolve_schema

logger = get_logger(__name__)

INDENT = "    "


def _indent(lines: Iterable[str], depth: int = 1) -> list[str]:
    prefix = INDENT * depth
    return [f"{prefix}{line}" if line else "" for line in lines]


def _str(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _tuple(values: Sequence[str]) -> str:
    if len(values) == 1:
        return f"({_str(values[0])},)"
    return "(" + ", ".join(_str(v) for v in values) + ")"


def render_schema_constant(metadata: Metadata) -> str:
    """Render the static descriptor assignment."""
    lines = [
        f"{metadata.schema_ident} = Metadata(",
        f"    type_name={_str(metadata.type_name)},",
        f"    table_name={_str(metadata.table_name)},",
        f"    id_column={_str(metadata.id_column)},",
        f"    id_type={_str(metadata.id_type)},",
        f"    columns={_tuple(metadata.columns)},",
        f"    database=Database.{metadata.database.name},",
        f"    external_id={metadata.external_id!r},",
        f"    schema_ident={_str(metadata.schema_ident)},",
        ")",
    ]
    return "\n".join(lines)


def _bind_chain(name: str, sequence: Sequence[str]) -> list[str]:
    lines = [
        f"def {name}(self, query: Query) -> Query:",
        f"{INDENT}return (",
        f"{INDENT * 2}query",
    ]
    lines.extend(f"{INDENT * 2}.bind(self.{field})" for field in sequence)
    lines.append(f"{INDENT})")
    return lines


def render_bind_methods(metadata: Metadata) -> str:
    """Render ``insert_binds`` and ``update_binds`` as unindented method source."""
    plan = plan_binds(metadata)
    lines = _bind_chain("insert_binds", plan.insert)
    lines.append("")
    lines.extend(_bind_chain("update_binds", plan.update))
    return "\n".join(lines)


def render_class(declaration: TypeDeclaration, metadata: Metadata) -> str:
    """Render the dataclass of a resolved declaration."""
    schema = metadata.schema_ident
    body = [f"{f.name}: {f.type_name}" for f in declaration.fields]
    body += [
        "",
        "@classmethod",
        "def table_name(cls) -> str:",
        f"{INDENT}return {schema}.table_name",
        "",
        "@classmethod",
        "def id_column(cls) -> str:",
        f"{INDENT}return {schema}.id_column",
        "",
        "@classmethod",
        "def columns(cls) -> tuple[str, ...]:",
        f"{INDENT}return {schema}.columns",
        "",
        "@classmethod",
        "def query(cls, sql: str) -> Query:",
        f"{INDENT}return query_for({schema}.database, sql)",
        "",
        f"def primary_key(self) -> {metadata.id_type}:",
        f"{INDENT}return self.{metadata.id_column}",
        "",
    ]
    body += render_bind_methods(metadata).splitlines()

    lines = ["@dataclass", f"class {declaration.name}:"]
    lines += _indent(body)
    return "\n".join(lines)


def _check_identifiers(declaration: TypeDeclaration, module_names: frozenset[str]) -> None:
    names = [declaration.name] + [f.name for f in declaration.fields]
    for name in names:
        if keyword.iskeyword(name):
            raise SchemaError(
                f"{name!r} is a Python keyword and cannot be used as an identifier",
                context=ErrorContext(type_name=declaration.name, source=declaration.source),
            )
    if declaration.name in module_names:
        raise SchemaError(
            f"type name {declaration.name!r} would shadow a module-level name of the "
            "generated module; rename the type",
            context=ErrorContext(type_name=declaration.name, source=declaration.source),
        )
    clashes = sorted(RESERVED_NAMES.intersection(f.name for f in declaration.fields))
    if clashes:
        raise SchemaError(
            f"{declaration.name} declares field(s) {', '.join(clashes)} which "
            "collide with the generated persistence API; rename them",
            context=ErrorContext(
                type_name=declaration.name, field_name=clashes[0], source=declaration.source
            ),
        )


# Names bound at module level by the generated header
GENERATED_NAMES = frozenset(
    {"annotations", "Any", "dataclass", "Database", "Query", "query_for", "register", "Metadata"}
)


def resolve_all(
    declarations: Sequence[TypeDeclaration],
    *,
    imports: Sequence[str] = (),
    duplicate_key_policy: DuplicateKeyPolicy | str = DuplicateKeyPolicy.ERROR,
) -> list[Metadata]:
    """Resolve every declaration; the first failure aborts the whole batch.

    Besides the per-type schema rules, the batch must be renderable as one
    module: descriptor names are unique, and no type name shadows an import
    or another type's descriptor.
    """
    resolved: list[Metadata] = []
    owners: dict[str, str] = {}
    for declaration in declarations:
        try:
            metadata = resolve_schema(declaration, duplicate_key_policy=duplicate_key_policy)
        except MetaError as e:
            e.with_context(source=declaration.source)
            raise
        previous = owners.get(metadata.schema_ident)
        if previous is not None:
            raise SchemaError(
                f"{declaration.name} and {previous} both map to descriptor "
                f"{metadata.schema_ident}; rename one of them",
                context=ErrorContext(type_name=declaration.name, source=declaration.source),
            )
        owners[metadata.schema_ident] = declaration.name
        resolved.append(metadata)

    module_names = GENERATED_NAMES | {m.split(".")[0] for m in imports} | set(owners)
    for declaration in declarations:
        _check_identifiers(declaration, module_names)
    return resolved


def render_module(
    declarations: Sequence[TypeDeclaration],
    *,
    imports: Sequence[str] = (),
    source: str | None = None,
    duplicate_key_policy: DuplicateKeyPolicy | str = DuplicateKeyPolicy.ERROR,
) -> str:
    """Render a complete Python module for *declarations*.

    Args:
        declarations: Types to render, in output order.
        imports: Extra modules the field annotations refer to.
        source: Manifest name recorded in the header comment.
        duplicate_key_policy: Passed to the resolver.

    Raises:
        MetaError: Any declaration fails to resolve; nothing is rendered.
    """
    resolved = resolve_all(declarations, imports=imports, duplicate_key_policy=duplicate_key_policy)

    origin = f" from {source}" if source else ""
    lines = [
        f"# Generated by sqlmeta{origin}. Do not edit.",
        "from __future__ import annotations",
        "",
    ]
    lines += [f"import {module}" for module in sorted(set(imports))]
    lines += [
        "from dataclasses import dataclass",
        "from typing import Any",
        "",
        "from sqlmeta.core.dialect import Database",
        "from sqlmeta.query import Query, query_for",
        "from sqlmeta.registry import register",
        "from sqlmeta.schema import Metadata",
    ]

    for declaration, metadata in zip(declarations, resolved):
        lines += ["", "", render_schema_constant(metadata)]
        lines += ["", "", render_class(declaration, metadata)]

    lines += ["", ""]
    lines += [f"register({d.name}, {m.schema_ident})" for d, m in zip(declarations, resolved)]
    lines += [
        "",
        "__all__ = [",
        *[f"{INDENT}{_str(name)}," for d, m in zip(declarations, resolved) for name in (m.schema_ident, d.name)],
        "]",
    ]

    text = "\n".join(lines) + "\n"
    logger.debug("module_rendered", types=len(resolved), source=source, size=len(text))
    return text


__all__ = [
    "GENERATED_NAMES",
    "render_schema_constant",
    "render_bind_methods",
    "render_class",
    "resolve_all",
    "render_module",
]
