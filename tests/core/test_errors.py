"""Tests for sqlmeta.core.errors module."""

import pytest

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


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.type_name is None
        assert ctx.field_name is None
        assert ctx.metadata == {}

    def test_to_dict_includes_set_fields(self):
        """to_dict includes only non-None fields, metadata flattened."""
        ctx = ErrorContext(type_name="User", metadata={"line": 3})
        d = ctx.to_dict()
        assert d == {"type_name": "User", "line": 3}
        assert "field_name" not in d


class TestMetaError:
    def test_default_category_is_internal(self):
        error = MetaError("boom")
        assert error.category == ErrorCategory.INTERNAL
        assert str(error) == "boom"

    def test_category_override(self):
        error = MetaError("boom", category=ErrorCategory.SCHEMA)
        assert error.category == ErrorCategory.SCHEMA

    def test_cause_is_chained(self):
        cause = ValueError("root")
        error = MetaError("wrapped", cause=cause)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_with_context_sets_known_fields_and_metadata(self):
        error = SchemaError("bad").with_context(type_name="User", source="app.models:User", hint="x")
        assert error.context.type_name == "User"
        assert error.context.source == "app.models:User"
        assert error.context.metadata == {"hint": "x"}

    def test_with_context_returns_same_error(self):
        error = SchemaError("bad")
        assert error.with_context(field_name="id") is error

    def test_to_dict(self):
        error = SchemaError("bad", context=ErrorContext(type_name="User"), cause=KeyError("k"))
        d = error.to_dict()
        assert d["error_type"] == "SchemaError"
        assert d["message"] == "bad"
        assert d["category"] == "SCHEMA"
        assert d["context"] == {"type_name": "User"}
        assert "cause" in d

    def test_repr(self):
        assert repr(ConfigError("nope")) == "ConfigError('nope', category=CONFIG)"


class TestSchemaErrors:
    @pytest.mark.parametrize(
        "error",
        [
            EmptyModelError("Empty"),
            UnsupportedShapeError("Color", "tagged union"),
            AmbiguousPrimaryKeyError("Pair", ["a", "b"]),
        ],
    )
    def test_are_schema_errors(self, error):
        assert isinstance(error, SchemaError)
        assert isinstance(error, MetaError)
        assert error.category == ErrorCategory.SCHEMA

    def test_empty_model_names_type(self):
        error = EmptyModelError("Empty")
        assert "Empty" in error.message
        assert error.context.type_name == "Empty"

    def test_unsupported_shape_keeps_shape(self):
        error = UnsupportedShapeError("Color", "tagged union")
        assert error.shape == "tagged union"
        assert "Color is a tagged union" in error.message

    def test_ambiguous_key_lists_candidates(self):
        error = AmbiguousPrimaryKeyError("Pair", ["left", "right"])
        assert error.candidates == ["left", "right"]
        assert "left, right" in error.message
        assert error.context.field_name == "left"


class TestConfigErrors:
    def test_unknown_database_lists_supported_backends(self):
        error = UnknownDatabaseError("Oracle", type_name="User")
        assert isinstance(error, ConfigError)
        assert error.category == ErrorCategory.CONFIG
        assert error.value == "Oracle"
        assert error.context.type_name == "User"
        assert "'Oracle'" in error.message
        for name in ("Any", "Mssql", "MySql", "Postgres", "Sqlite"):
            assert name in error.message

    def test_invalid_config_default_message(self):
        error = InvalidConfigError("log_level", "LOUD")
        assert error.key == "log_level"
        assert error.message == "Invalid configuration for log_level: 'LOUD'"


class TestOtherErrors:
    def test_manifest_error_category(self):
        assert ManifestError("bad yaml").category == ErrorCategory.MANIFEST

    def test_model_not_registered(self):
        class Orphan:
            pass

        error = ModelNotRegisteredError(Orphan)
        assert error.category == ErrorCategory.REGISTRY
        assert "Orphan" in error.message
        assert "@sqlmeta.model" in error.message
