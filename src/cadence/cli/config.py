"""
CLI: ``cadence config`` — inspect and mark worker configuration files.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer

from cadence.cli.utils import console, err_console, make_store
from cadence.core.errors import CadenceError

app = typer.Typer(no_args_is_help=True)

RootOption = typer.Option(None, "--root", "-r", help="Root directory (default: CADENCE_ROOT_DIR or cwd)")


@app.command("path")
def config_path(
    identity: str = typer.Argument(..., help="Worker identity"),
    root: Path | None = RootOption,  # noqa: UP007
) -> None:
    """Print the configuration file path for a worker."""
    try:
        path = make_store(root).path_for(identity)
    except CadenceError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    console.print(str(path), soft_wrap=True)


@app.command("show")
def show_config(
    identity: str = typer.Argument(..., help="Worker identity"),
    root: Path | None = RootOption,  # noqa: UP007
) -> None:
    """Show the stored configuration document for a worker."""
    try:
        data = make_store(root).read_raw(identity)
    except CadenceError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    console.print_json(json.dumps(data))
    if not data.get("Configured", False):
        err_console.print(
            "[yellow]Not configured.[/yellow] Edit the file, then run "
            f"`cadence config mark {identity}`."
        )


@app.command("mark")
def mark_configured(
    identity: str = typer.Argument(..., help="Worker identity"),
    unset: bool = typer.Option(False, "--unset", help="Mark as NOT configured"),
    root: Path | None = RootOption,  # noqa: UP007
) -> None:
    """Set ``Configured`` on an existing configuration file."""
    try:
        path = make_store(root).mark_configured(identity, value=not unset)
    except CadenceError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    state = "not configured" if unset else "configured"
    console.print(f"[green]✓[/green] {identity} marked {state} ({path})")
