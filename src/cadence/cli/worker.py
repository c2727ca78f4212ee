"""
CLI: ``cadence worker`` — run a worker once, or keep a set of workers ticking.
"""

from __future__ import annotations

import time
from pathlib import Path

import typer

from cadence.cli.utils import build_runtime, console, err_console, resolve_settings
from cadence.core.errors import CadenceError
from cadence.core.logging import configure_logging
from cadence.scheduling.service import WorkerScheduler

app = typer.Typer(no_args_is_help=True)


@app.command("run")
def run_once(
    target: str = typer.Argument(..., help="Worker class as 'package.module:Class'"),
    force: bool = typer.Option(False, "--force", "-f", help="Run even if not yet due"),
    sync: bool = typer.Option(False, "--sync", help="Run inline instead of on the background thread"),
    root: Path | None = typer.Option(None, "--root", "-r", help="Root directory"),  # noqa: UP007
) -> None:
    """Run a worker once and wait for it to finish.

    Example::

        cadence worker run myapp.workers:Mailer --force
    """
    settings = resolve_settings(root)
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")

    try:
        runtime = build_runtime(target, settings)
    except CadenceError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    with runtime:
        try:
            decision = runtime.run_sync(force=force) if sync else runtime.run_async(force=force)
            if decision.future is not None:
                decision.future.result()
        except CadenceError as e:
            err_console.print(f"[red]Run failed:[/red] {e}")
            raise typer.Exit(1) from e

    if not decision.admitted:
        console.print(f"[yellow]Skipped[/yellow] {runtime.identity}: {decision.reason.value}")
        return
    console.print(f"[green]✓[/green] {runtime.identity} completed")


@app.command("serve")
def serve(
    targets: list[str] = typer.Argument(..., help="Worker classes as 'package.module:Class'"),
    interval: float | None = typer.Option(None, "--interval", "-i", help="Seconds between ticks"),  # noqa: UP007
    root: Path | None = typer.Option(None, "--root", "-r", help="Root directory"),  # noqa: UP007
) -> None:
    """Tick the given workers until interrupted."""
    settings = resolve_settings(root)
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")

    scheduler = WorkerScheduler()
    try:
        for target in targets:
            scheduler.register(build_runtime(target, settings))
    except CadenceError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    tick_seconds = interval or settings.scheduler_interval_seconds
    console.print(
        f"[bold green]Scheduling {len(targets)} worker(s)[/bold green] (interval={tick_seconds}s)"
    )
    scheduler.start(interval_seconds=tick_seconds)
    try:
        while scheduler.is_running:
            time.sleep(0.5)
    except KeyboardInterrupt:
        console.print("\n[yellow]Scheduler stopped by user[/yellow]")
    finally:
        scheduler.stop()
