"""
Shared consoles and helpers for CLI commands.
"""

from __future__ import annotations

import importlib
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from sqlmeta.core.errors import MetaError

console = Console()
err_console = Console(stderr=True)


def fail(error: MetaError) -> NoReturn:
    """Print a sqlmeta error and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {escape(error.message)}")
    context = error.context.to_dict()
    for key, value in context.items():
        err_console.print(f"  [dim]{key}:[/dim] {escape(str(value))}")
    raise typer.Exit(1)


def resolve_class_ref(ref: str) -> Any:
    """Import and return the object identified by ``'module:qualname'``.

    Raises:
        typer.BadParameter: The reference is malformed or cannot be imported.
    """
    module_path, _, attr_path = ref.partition(":")
    if not module_path or not attr_path:
        raise typer.BadParameter(f"expected 'module:Class', got {ref!r}")
    try:
        obj: Any = importlib.import_module(module_path)
        for part in attr_path.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        raise typer.BadParameter(f"cannot import {ref!r}: {e}") from e
    return obj
