"""
Root Typer application for the cadence CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from cadence.cli.config import app as config_app
from cadence.cli.worker import app as worker_app

app = Typer(
    name="cadence",
    help="cadence — recurring workers with delay gating and configuration gates.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("cadence-workers")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"cadence {v}")
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
) -> None:
    """cadence CLI — manage worker configuration and run workers."""


app.add_typer(config_app, name="config", help="Worker configuration files.")
app.add_typer(worker_app, name="worker", help="Run and schedule workers.")
