"""
Shared pytest fixtures for sqlmeta tests.

This module provides:
- Registry and settings cleanup for test isolation
- Sample declarations and manifests
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from sqlmeta.core.settings import clear_settings_cache
from sqlmeta.registry import clear_registry
from sqlmeta.schema import FieldDeclaration, TypeDeclaration


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark every test without an explicit marker as a unit test."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Clear the model registry and settings cache around each test.

    SQLMETA_* variables from the developer's shell are removed so
    defaults are what the tests see.
    """
    for key in (
        "SQLMETA_LOG_LEVEL",
        "SQLMETA_LOG_FORMAT",
        "SQLMETA_DUPLICATE_KEY_POLICY",
        "SQLMETA_MANIFEST_PATH",
        "SQLMETA_OUTPUT_PATH",
    ):
        monkeypatch.delenv(key, raising=False)
    clear_registry()
    clear_settings_cache()
    yield
    clear_registry()
    clear_settings_cache()


# =============================================================================
# Sample declarations
# =============================================================================


@pytest.fixture
def user_declaration() -> TypeDeclaration:
    """User(id [id], name, email) with no backend annotation."""
    return TypeDeclaration(
        name="User",
        fields=(
            FieldDeclaration("id", "int", is_id=True),
            FieldDeclaration("name", "str"),
            FieldDeclaration("email", "str"),
        ),
    )


@pytest.fixture
def middle_key_declaration() -> TypeDeclaration:
    """Key marked on the second of three fields."""
    return TypeDeclaration(
        name="UserAccount",
        fields=(
            FieldDeclaration("name", "str"),
            FieldDeclaration("account_id", "int", is_id=True),
            FieldDeclaration("email", "str"),
        ),
        database="Postgres",
    )


MANIFEST_YAML = """\
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
      - name: email
        type: str
  - name: AuditEntry
    external_id: true
    fields:
      - name: message
        type: str
      - name: entry_id
        type: str
        id: true
      - name: created_at
        type: datetime.datetime
"""


@pytest.fixture
def manifest_yaml() -> str:
    return MANIFEST_YAML


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    """Two-type manifest written to a temporary directory."""
    path = tmp_path / "models.yaml"
    path.write_text(MANIFEST_YAML, encoding="utf-8")
    return path
