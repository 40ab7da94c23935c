"""Manifest file -> generated Python module on disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sqlmeta.codegen.manifest import ManifestSpec
from sqlmeta.codegen.render import render_module
from sqlmeta.core.logging import LogContext, get_logger
from sqlmeta.core.settings import SqlMetaSettings, get_settings

logger = get_logger(__name__)


@dataclass(frozen=True)
class GenerateResult:
    """Outcome of one generation run."""

    output_path: Path | None
    text: str
    changed: bool
    types: int


def render_manifest(manifest_path: str | Path, settings: SqlMetaSettings | None = None) -> tuple[str, int]:
    """Render the module for a manifest file without writing it.

    Returns:
        ``(source_text, number_of_types)``
    """
    settings = settings or get_settings()
    manifest_path = Path(manifest_path)
    spec = ManifestSpec.from_yaml_file(manifest_path)
    declarations = spec.to_declarations(source=str(manifest_path))
    text = render_module(
        declarations,
        imports=spec.imports,
        source=manifest_path.name,
        duplicate_key_policy=settings.duplicate_key_policy,
    )
    return text, len(declarations)


def generate(
    manifest_path: str | Path,
    output_path: str | Path | None = None,
    *,
    settings: SqlMetaSettings | None = None,
    check: bool = False,
) -> GenerateResult:
    """Render *manifest_path* and write it to *output_path*.

    The file is only rewritten when its content changes.  With
    ``check=True`` nothing is written; ``changed`` reports whether the
    file on disk is stale.  ``output_path=None`` renders only.

    Raises:
        ManifestError: The manifest cannot be read or validated.
        SchemaError / ConfigError: A declared type fails to resolve.
    """
    with LogContext(manifest=str(manifest_path)):
        text, count = render_manifest(manifest_path, settings)
        if output_path is None:
            return GenerateResult(output_path=None, text=text, changed=True, types=count)

        output_path = Path(output_path)
        current = output_path.read_text(encoding="utf-8") if output_path.exists() else None
        changed = current != text

        if changed and not check:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text, encoding="utf-8")
            logger.info("module_written", path=str(output_path), types=count)

        return GenerateResult(output_path=output_path, text=text, changed=changed, types=count)


__all__ = [
    "GenerateResult",
    "render_manifest",
    "generate",
]
