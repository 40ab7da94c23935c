"""
Root Typer application for the ``sqlmeta`` CLI.

    sqlmeta generate models.yaml -o app/models.py
    sqlmeta generate models.yaml -o app/models.py --check
    sqlmeta inspect models.yaml --format json
    sqlmeta show app.models:User
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.table import Table

from sqlmeta.cli.utils import console, err_console, fail, resolve_class_ref
from sqlmeta.core.errors import MetaError

app = typer.Typer(
    name="sqlmeta",
    help="sqlmeta: table metadata and ordered parameter binds for record types.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version / logging callback ───────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from sqlmeta import __version__

        typer.echo(f"sqlmeta {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolution details."),
) -> None:
    """Generate and inspect table metadata."""
    from sqlmeta.core.logging import configure_logging
    from sqlmeta.core.settings import LogFormat, get_settings

    try:
        settings = get_settings()
    except MetaError as e:
        fail(e)
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_format=settings.log_format is LogFormat.JSON,
    )


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("generate")
def generate_cmd(
    manifest: Path | None = typer.Argument(None, help="YAML manifest (default: SQLMETA_MANIFEST_PATH)."),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output module, '-' for stdout (default: SQLMETA_OUTPUT_PATH)."
    ),
    check: bool = typer.Option(False, "--check", help="Exit 1 if the output file is out of date."),
) -> None:
    """Render a manifest into a Python module."""
    from sqlmeta.codegen import generate
    from sqlmeta.core.settings import get_settings

    settings = get_settings()
    manifest_path = manifest or settings.manifest_path
    to_stdout = output == "-"
    output_path = None if to_stdout else Path(output) if output else settings.output_path

    try:
        result = generate(manifest_path, output_path, settings=settings, check=check)
    except MetaError as e:
        fail(e)

    if to_stdout:
        typer.echo(result.text, nl=False)
        return

    if check:
        if result.changed:
            err_console.print(f"[yellow]✗[/yellow] {result.output_path} is out of date")
            raise typer.Exit(1)
        console.print(f"[green]✓[/green] {result.output_path} is up to date")
        return

    if result.changed:
        console.print(f"[green]✓[/green] Wrote {result.types} type(s) to {result.output_path}")
    else:
        console.print(f"[green]✓[/green] {result.output_path} unchanged")


@app.command("inspect")
def inspect_cmd(
    manifest: Path | None = typer.Argument(None, help="YAML manifest (default: SQLMETA_MANIFEST_PATH)."),
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json"),
) -> None:
    """Show resolved metadata and bind order for each manifest type."""
    from sqlmeta.binds import plan_binds
    from sqlmeta.codegen import ManifestSpec, resolve_all
    from sqlmeta.core.settings import get_settings

    settings = get_settings()
    manifest_path = manifest or settings.manifest_path
    try:
        spec = ManifestSpec.from_yaml_file(manifest_path)
        resolved = resolve_all(
            spec.to_declarations(source=str(manifest_path)),
            imports=spec.imports,
            duplicate_key_policy=settings.duplicate_key_policy,
        )
    except MetaError as e:
        fail(e)

    if format == "json":
        payload = []
        for metadata in resolved:
            plan = plan_binds(metadata)
            payload.append(
                {**metadata.to_dict(), "insert_binds": list(plan.insert), "update_binds": list(plan.update)}
            )
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table()
    table.add_column("Type")
    table.add_column("Table")
    table.add_column("Key")
    table.add_column("Database")
    table.add_column("Insert binds")
    table.add_column("Update binds")
    for metadata in resolved:
        plan = plan_binds(metadata)
        table.add_row(
            metadata.type_name,
            metadata.table_name,
            metadata.id_column,
            metadata.database.annotation,
            ", ".join(plan.insert),
            ", ".join(plan.update),
        )
    console.print(table)


@app.command("show")
def show_cmd(
    ref: str = typer.Argument(..., help="Registered class as 'module:Class'."),
) -> None:
    """Print the descriptor and bind methods sqlmeta derived for a class."""
    from sqlmeta.codegen import render_bind_methods, render_schema_constant
    from sqlmeta.model import schema_of

    try:
        cls = resolve_class_ref(ref)
        metadata = schema_of(cls)
    except MetaError as e:
        fail(e)

    typer.echo(render_schema_constant(metadata))
    typer.echo("")
    typer.echo(render_bind_methods(metadata))
