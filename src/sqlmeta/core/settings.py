"""
Centralized settings for sqlmeta.

All fields can be set via ``SQLMETA_*`` environment variables (e.g.
``SQLMETA_DUPLICATE_KEY_POLICY=first``) or a ``.env`` file in the working
directory.

Fields
──────
log_level             : structlog log level
log_format            : ``console`` or ``json``
duplicate_key_policy  : what to do when several fields are marked as key
                        (``error`` aborts, ``first`` keeps the first marked)
manifest_path         : default manifest for ``sqlmeta generate``
output_path           : default module written by ``sqlmeta generate``

The default backend is deliberately absent: a type without a ``database``
annotation always resolves to SQLite, whatever the environment says.

Tags:
    sqlmeta, configuration, settings, pydantic
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqlmeta.core.errors import InvalidConfigError


class DuplicateKeyPolicy(str, Enum):
    """Handling of more than one primary-key marker on a type."""

    ERROR = "error"
    FIRST = "first"


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class SqlMetaSettings(BaseSettings):
    """sqlmeta configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SQLMETA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: LogFormat = Field(default=LogFormat.CONSOLE)

    # ── Resolution ───────────────────────────────────────────────
    duplicate_key_policy: DuplicateKeyPolicy = Field(default=DuplicateKeyPolicy.ERROR)

    # ── Code generation ──────────────────────────────────────────
    manifest_path: Path = Field(default=Path("sqlmeta.yaml"))
    output_path: Path = Field(default=Path("sqlmeta_models.py"))

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {v!r}")
        return level


_settings_cache: dict[str, SqlMetaSettings] = {}


def get_settings(*, _force_reload: bool = False) -> SqlMetaSettings:
    """Load, validate, and cache a :class:`SqlMetaSettings` instance.

    Raises:
        InvalidConfigError: If an environment value fails validation.
    """
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    try:
        settings = SqlMetaSettings()
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first["loc"]) or "settings"
        raise InvalidConfigError(key, first.get("input"), f"Invalid configuration for {key}: {first['msg']}") from e

    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = [
    "DuplicateKeyPolicy",
    "LogFormat",
    "SqlMetaSettings",
    "get_settings",
    "clear_settings_cache",
]
