"""Tests for YAML manifest models."""

import pytest
from pydantic import ValidationError

from sqlmeta.codegen.manifest import FieldSpec, ManifestSpec, TypeSpec
from sqlmeta.core.errors import ErrorCategory, ManifestError
from sqlmeta.schema import FieldDeclaration, TypeKind


class TestFieldSpec:
    def test_id_alias(self):
        spec = FieldSpec.model_validate({"name": "id", "type": "int", "id": True})
        assert spec.is_id is True
        assert spec.to_declaration() == FieldDeclaration("id", "int", is_id=True)

    def test_defaults(self):
        spec = FieldSpec(name="payload")
        assert spec.type == "Any"
        assert spec.is_id is False

    @pytest.mark.parametrize("name", ["1st", "with space", "dash-ed", ""])
    def test_rejects_non_identifiers(self, name):
        with pytest.raises(ValidationError):
            FieldSpec(name=name)

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            FieldSpec.model_validate({"name": "id", "primary": True})


class TestTypeSpec:
    def test_to_declaration(self):
        spec = TypeSpec.model_validate(
            {
                "name": "Event",
                "database": "MySql",
                "external_id": True,
                "fields": [{"name": "event_id", "type": "str"}],
            }
        )
        decl = spec.to_declaration(source="models.yaml")
        assert decl.name == "Event"
        assert decl.kind is TypeKind.RECORD
        assert decl.database == "MySql"
        assert decl.external_id is True
        assert decl.fields == (FieldDeclaration("event_id", "str"),)
        assert decl.source == "models.yaml"

    def test_variant_kind(self):
        spec = TypeSpec.model_validate({"name": "Color", "kind": "variant"})
        assert spec.kind is TypeKind.VARIANT
        assert spec.fields == []


class TestManifestFromYaml:
    def test_parses(self, manifest_yaml):
        manifest = ManifestSpec.from_yaml(manifest_yaml)
        assert manifest.api_version == "sqlmeta/v1"
        assert manifest.imports == ["datetime"]
        assert [t.name for t in manifest.types] == ["User", "AuditEntry"]

        user, entry = manifest.to_declarations(source="models.yaml")
        assert user.database == "Postgres"
        assert [f.name for f in user.fields] == ["id", "name", "email"]
        assert [f.is_id for f in entry.fields] == [False, True, False]
        assert entry.fields[2].type_name == "datetime.datetime"

    def test_minimal(self):
        manifest = ManifestSpec.from_yaml("types:\n  - name: Tag\n    fields:\n      - name: label\n")
        assert manifest.kind == "Manifest"
        assert manifest.types[0].fields[0].type == "Any"

    def test_invalid_yaml(self):
        with pytest.raises(ManifestError, match="Invalid YAML") as exc_info:
            ManifestSpec.from_yaml("types: [unclosed", source="bad.yaml")
        assert exc_info.value.category == ErrorCategory.MANIFEST
        assert exc_info.value.context.source == "bad.yaml"

    @pytest.mark.parametrize("content", ["", "- just\n- a list\n", "plain text"])
    def test_not_a_mapping(self, content):
        with pytest.raises(ManifestError, match="must be a mapping"):
            ManifestSpec.from_yaml(content)

    def test_missing_types(self):
        with pytest.raises(ManifestError, match="Invalid manifest"):
            ManifestSpec.from_yaml("apiVersion: sqlmeta/v1\n")

    def test_empty_types(self):
        with pytest.raises(ManifestError):
            ManifestSpec.from_yaml("types: []\n")

    def test_wrong_api_version(self):
        with pytest.raises(ManifestError):
            ManifestSpec.from_yaml("apiVersion: sqlmeta/v2\ntypes:\n  - name: Tag\n")

    def test_duplicate_type_names(self):
        content = "types:\n  - name: Tag\n  - name: Tag\n"
        with pytest.raises(ManifestError, match="Duplicate type names"):
            ManifestSpec.from_yaml(content)

    def test_validation_error_is_chained(self):
        with pytest.raises(ManifestError) as exc_info:
            ManifestSpec.from_yaml("types:\n  - name: 1Tag\n")
        assert exc_info.value.cause is not None


class TestManifestFromFile:
    def test_reads_file(self, manifest_file):
        manifest = ManifestSpec.from_yaml_file(manifest_file)
        assert len(manifest.types) == 2

    def test_missing_file(self, tmp_path):
        missing = tmp_path / "nope.yaml"
        with pytest.raises(ManifestError, match="Cannot read manifest") as exc_info:
            ManifestSpec.from_yaml_file(missing)
        assert exc_info.value.context.source == str(missing)

    def test_source_recorded_on_errors(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("types: 3\n", encoding="utf-8")
        with pytest.raises(ManifestError) as exc_info:
            ManifestSpec.from_yaml_file(path)
        assert exc_info.value.context.source == str(path)
