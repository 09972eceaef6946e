"""Typer-powered command line front end for ``pcactl``.

Only the settings inspection surface lives here. Commands that stage CA
material on disk consume :class:`~pcactl.config.PuppetConfig` directly.
"""
from __future__ import annotations

import json
import textwrap
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import get_version
from .config import ConfigError, PuppetConfig, load_puppet_config
from .exit_codes import ExitCode

console = Console()
err_console = Console(stderr=True)

CONFIG_FILE_OPTION = typer.Option(
    None,
    "--config",
    help="Override the path to puppet.conf.",
)

app = typer.Typer(
    add_completion=False,
    help=textwrap.dedent(
        """
        Puppet Server CA settings CLI.

        Reads puppet.conf, applies built-in defaults and reports the settings
        the CA uses to locate its key material.
        """
    ).strip(),
)
config_app = typer.Typer(help="Inspect resolved puppet.conf settings.")
app.add_typer(config_app, name="config")


@dataclass
class RuntimeContext:
    """Aggregated runtime objects shared by commands."""

    config_file: Path | None
    puppet: PuppetConfig | None = None


def _ensure_runtime(ctx: typer.Context, config_file: Path | None) -> RuntimeContext:
    runtime = RuntimeContext(config_file=config_file)
    ctx.obj = runtime
    return runtime


def _get_runtime(ctx: typer.Context) -> RuntimeContext:
    runtime = ctx.obj
    if isinstance(runtime, RuntimeContext):
        return runtime
    return _ensure_runtime(ctx, None)


def _load_settings(ctx: typer.Context) -> PuppetConfig:
    runtime = _get_runtime(ctx)
    if runtime.puppet is None:
        try:
            runtime.puppet = load_puppet_config(runtime.config_file)
        except ConfigError as exc:
            err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
            raise typer.Exit(code=ExitCode.ENVIRONMENT) from exc
    return runtime.puppet


def _report_errors(puppet: PuppetConfig) -> None:
    if not puppet.errors:
        return
    err_console.print(f"[bold yellow]Warning:[/bold yellow] {escape(str(puppet.config_path))}")
    for message in puppet.errors:
        err_console.print(f"    {escape(message)}")


def _render_value(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ",".join(":".join(entry) for entry in value)
    return str(value)


@app.callback(invoke_without_command=True)
def _root(  # noqa: D401 - Typer displays help for us, docstring optional.
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the pcactl version and exit.",
    ),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Entry point callback invoked for every CLI execution."""
    if version:
        console.print(f"pcactl {get_version()}")
        raise typer.Exit(code=ExitCode.OK)

    _ensure_runtime(ctx, config_file)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(code=ExitCode.OK)


@config_app.command("show")
def config_show(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit settings as JSON instead of a table.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit non-zero when any setting could not be resolved.",
    ),
) -> None:
    """Display the effective settings after defaults and interpolation."""
    puppet = _load_settings(ctx)
    _report_errors(puppet)

    if json_output:
        console.print_json(
            data={
                "config_file": str(puppet.config_path),
                "settings": puppet.settings,
                "errors": puppet.errors,
            }
        )
    else:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Setting", style="bold")
        table.add_column("Value", overflow="fold")
        for name, value in puppet.settings.items():
            table.add_row(name, escape(_render_value(value)))
        console.print(table)

    if strict and puppet.errors:
        raise typer.Exit(code=ExitCode.VALIDATION)


@config_app.command("get")
def config_get(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Setting name, e.g. cadir."),
) -> None:
    """Print a single resolved setting."""
    puppet = _load_settings(ctx)
    key = name.lower()
    if key not in puppet.settings:
        err_console.print(f"[bold red]Error:[/bold red] Unknown setting '{escape(name)}'.")
        raise typer.Exit(code=ExitCode.VALIDATION)

    _report_errors(puppet)
    value = puppet.settings[key]
    if isinstance(value, list):
        typer.echo(json.dumps(value))
    else:
        typer.echo(_render_value(value))


def main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "main"]
