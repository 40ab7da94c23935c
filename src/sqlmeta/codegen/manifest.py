"""Pydantic models for YAML type manifests.

A manifest declares record types outside Python so their schema and bind
methods can be generated ahead of time by ``sqlmeta generate``.

Example YAML::

    apiVersion: sqlmeta/v1
    kind: Manifest
    imports:
      - datetime
    types:
      - name: User
        database: Postgres
        fields:
          - name: id
            type: int
            id: true
          - name: name
            type: str
          - name: created_at
            type: datetime.datetime

Validation here is structural (keys, types, unique names).  Schema rules
(empty types, key markers, backends) are applied by
:func:`sqlmeta.schema.resolve_schema` so both declaration paths share them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sqlmeta.core.errors import ErrorContext, ManifestError
from sqlmeta.schema import FieldDeclaration, TypeDeclaration, TypeKind

_IDENTIFIER = r"^[A-Za-z_][A-Za-z0-9_]*$"


class FieldSpec(BaseModel):
    """One field of a manifest type."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(..., pattern=_IDENTIFIER, description="Field identifier")
    type: str = Field(default="Any", min_length=1, description="Python annotation text")
    is_id: bool = Field(default=False, alias="id", description="Primary-key marker")

    def to_declaration(self) -> FieldDeclaration:
        return FieldDeclaration(name=self.name, type_name=self.type, is_id=self.is_id)


class TypeSpec(BaseModel):
    """One declared type."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., pattern=_IDENTIFIER, description="Type identifier")
    kind: TypeKind = Field(default=TypeKind.RECORD)
    database: str | None = Field(default=None, description="Backend annotation")
    external_id: bool = Field(default=False)
    fields: list[FieldSpec] = Field(default_factory=list)

    def to_declaration(self, source: str | None = None) -> TypeDeclaration:
        return TypeDeclaration(
            name=self.name,
            fields=tuple(f.to_declaration() for f in self.fields),
            kind=self.kind,
            database=self.database,
            external_id=self.external_id,
            source=source,
        )


class ManifestSpec(BaseModel):
    """Root of a YAML manifest."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    api_version: Literal["sqlmeta/v1"] = Field(default="sqlmeta/v1", alias="apiVersion")
    kind: Literal["Manifest"] = Field(default="Manifest")
    imports: list[str] = Field(default_factory=list, description="Modules imported by generated code")
    types: list[TypeSpec] = Field(..., min_length=1)

    @field_validator("types")
    @classmethod
    def validate_unique_names(cls, v: list[TypeSpec]) -> list[TypeSpec]:
        names = [t.name for t in v]
        if len(names) != len(set(names)):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            raise ValueError(f"Duplicate type names: {duplicates}")
        return v

    def to_declarations(self, source: str | None = None) -> list[TypeDeclaration]:
        return [t.to_declaration(source) for t in self.types]

    @classmethod
    def from_yaml(cls, yaml_content: str, *, source: str | None = None) -> ManifestSpec:
        """Parse and validate YAML content.

        Raises:
            ManifestError: If the YAML is malformed or fails validation.
        """
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ManifestError(
                f"Invalid YAML: {e}", context=ErrorContext(source=source), cause=e
            ) from e

        if not isinstance(data, dict):
            raise ManifestError(
                "Manifest must be a mapping with a 'types' list",
                context=ErrorContext(source=source),
            )

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ManifestError(
                f"Invalid manifest: {e.error_count()} error(s)\n{e}",
                context=ErrorContext(source=source),
                cause=e,
            ) from e

    @classmethod
    def from_yaml_file(cls, path: str | Path) -> ManifestSpec:
        """Load and validate a manifest file."""
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ManifestError(
                f"Cannot read manifest {path}: {e.strerror}",
                context=ErrorContext(source=str(path)),
                cause=e,
            ) from e
        return cls.from_yaml(content, source=str(path))


__all__ = [
    "FieldSpec",
    "TypeSpec",
    "ManifestSpec",
]
