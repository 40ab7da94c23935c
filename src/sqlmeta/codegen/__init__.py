"""Build-time code generation from YAML manifests.

    manifest.py   ManifestSpec (pydantic) loaded from YAML
    render.py     deterministic Python source for resolved types
    generate.py   manifest file -> module on disk
"""

from sqlmeta.codegen.generate import GenerateResult, generate, render_manifest
from sqlmeta.codegen.manifest import FieldSpec, ManifestSpec, TypeSpec
from sqlmeta.codegen.render import (
    render_bind_methods,
    render_class,
    render_module,
    render_schema_constant,
    resolve_all,
)

__all__ = [
    "FieldSpec",
    "TypeSpec",
    "ManifestSpec",
    "GenerateResult",
    "generate",
    "render_manifest",
    "render_bind_methods",
    "render_class",
    "render_module",
    "render_schema_constant",
    "resolve_all",
]
