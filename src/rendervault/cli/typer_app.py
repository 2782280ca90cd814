"""
RenderVault Typer CLI Application

Developer tooling for inspecting render cache configuration: validating a
TOML file, looking at how props flatten into FlatKeys, and computing the
cache key a component would get for a given props file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import orjson
import typer
from rich.console import Console
from rich.table import Table

from rendervault import __version__
from rendervault.cli.error_handler import handle_cli_error
from rendervault.cli.json_formatter import format_json_output
from rendervault.config import load_settings
from rendervault.core.cache_key import build_key, shape_fingerprint
from rendervault.core.models import normalize_components
from rendervault.core.path_codec import MISSING, ShapeLog, check_collisions, flatten
from rendervault.core.template import placeholder
from rendervault.shared.constants import CLIDefaults, CLIHelp, CLIMessages
from rendervault.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from rendervault.shared.logging import setup_structured_logger

console = Console()


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


app = typer.Typer(
    name=CLIDefaults.APP_NAME,
    help=CLIHelp.APP_HELP,
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level for diagnostics."),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Configure logging before any command runs."""
    setup_structured_logger(level=log_level)


def _load_props(props_file: Path) -> Any:
    try:
        return orjson.loads(props_file.read_bytes())
    except orjson.JSONDecodeError as e:
        raise InfrastructureError(
            ErrorCode.PARSING_ERROR,
            f"Invalid JSON in {props_file}: {e}",
            ErrorContext(operation="load_props", file_path=str(props_file)),
            e,
        ) from e


def _emit_json(command: str, data: Any) -> None:
    typer.echo(format_json_output(success=True, command=command, data=data).decode("utf-8"))


@app.command("check-config")
def check_config_command(
    config_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    json_output: bool = typer.Option(False, "--json", help="Print machine-readable JSON."),
) -> None:
    """Validate a TOML configuration and list cached components."""
    try:
        settings = load_settings(config_file)
        components = normalize_components(settings.components)
        flat_keys = {
            name: check_collisions(config.template_attrs, name)
            for name, config in components.items()
        }
    except Exception as e:  # pylint: disable=broad-exception-caught
        raise typer.Exit(handle_cli_error(e, "check-config", json_output=json_output)) from e

    if json_output:
        _emit_json(
            "check-config",
            {
                "environment": settings.environment,
                "caching_allowed": settings.caching_allowed(),
                "components": {
                    name: {
                        "cache_attrs": list(config.cache_attrs),
                        "template_attrs": flat_keys[name],
                    }
                    for name, config in components.items()
                },
            },
        )
        return

    table = Table(title=f"Cached components ({settings.environment})")
    table.add_column("Component", style="cyan")
    table.add_column("Key")
    table.add_column("Template attributes")
    for name, config in sorted(components.items()):
        key_strategy = ", ".join(config.cache_attrs) if config.cache_attrs else "default"
        templates = ", ".join(f"{path} -> {flat}" for path, flat in flat_keys[name].items())
        table.add_row(name, key_strategy, templates or "-")
    console.print(table)
    if not settings.caching_allowed():
        console.print(f"[yellow]Caching is inactive in environment '{settings.environment}'.[/yellow]")
    console.print(f"[green]{CLIMessages.CONFIG_OK}[/green]")


@app.command("flatten")
def flatten_command(
    props_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    attrs: List[str] = typer.Option(..., "--attr", "-a", help="Attribute path to flatten."),
    json_output: bool = typer.Option(False, "--json", help="Print machine-readable JSON."),
) -> None:
    """Show FlatKeys, placeholders and shape fingerprint for props."""
    try:
        props = _load_props(props_file)
        check_collisions(attrs)
        shapes: ShapeLog = []
        rows: list[tuple[str, str, Any]] = []
        for path in attrs:
            for flat_key, value in flatten(props, path, shapes).items():
                rows.append((flat_key, placeholder(flat_key), value))
    except Exception as e:  # pylint: disable=broad-exception-caught
        raise typer.Exit(handle_cli_error(e, "flatten", json_output=json_output)) from e

    fingerprint = shape_fingerprint(shapes)
    if json_output:
        _emit_json(
            "flatten",
            {
                "flat_keys": {key: None if value is MISSING else value for key, _, value in rows},
                "shape_fingerprint": fingerprint,
            },
        )
        return

    table = Table(title="Flattened props")
    table.add_column("FlatKey", style="cyan")
    table.add_column("Placeholder")
    table.add_column("Value")
    for flat_key, token, value in rows:
        table.add_row(flat_key, token, "<absent>" if value is MISSING else repr(value))
    console.print(table)
    console.print(f"Shape fingerprint: {fingerprint or '<none>'}", markup=False)


@app.command("key")
def key_command(
    props_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    component: str = typer.Option(..., "--component", "-c", help="Registered component name."),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        exists=True,
        dir_okay=False,
        help="TOML configuration declaring the component.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print machine-readable JSON."),
) -> None:
    """Compute the cache key a component would use for the given props."""
    try:
        settings = load_settings(config_file)
        components = normalize_components(settings.components)
        props = _load_props(props_file)
    except Exception as e:  # pylint: disable=broad-exception-caught
        raise typer.Exit(handle_cli_error(e, "key", json_output=json_output)) from e

    config = components.get(component)
    if config is None:
        message = CLIMessages.UNREGISTERED.format(name=component)
        if json_output:
            typer.echo(
                format_json_output(success=False, command="key", errors=[message]).decode("utf-8")
            )
        else:
            typer.echo(message, err=True)
        raise typer.Exit(CLIDefaults.EXIT_ERROR)

    cache_key = build_key(component, config, props)
    if json_output:
        _emit_json("key", {"component": component, "cache_key": cache_key})
        return
    typer.echo(cache_key if cache_key is not None else CLIMessages.UNCACHEABLE)
