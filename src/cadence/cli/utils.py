"""
CLI utility helpers — console output, store construction, worker import.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from cadence.config.store import ConfigurationStore
from cadence.core.settings import CadenceSettings, get_settings
from cadence.worker.base import Worker
from cadence.worker.runtime import WorkerRuntime

console = Console()
err_console = Console(stderr=True)


def resolve_settings(root: Path | None) -> CadenceSettings:
    """Settings for *root*, or from ``CADENCE_*`` env vars when not given."""
    return get_settings(root_dir=root)


def make_store(root: Path | None) -> ConfigurationStore:
    return ConfigurationStore.from_settings(resolve_settings(root))


def import_target(target: str) -> Any:
    """Import ``package.module:Name`` and return ``Name``."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter(f"Expected 'module:Class', got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"Cannot import {module_name!r}: {e}") from e
    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise typer.BadParameter(f"{module_name!r} has no attribute {attr!r}") from e


def build_runtime(target: str, settings: CadenceSettings) -> WorkerRuntime:
    """Instantiate the worker named by *target* and return its runtime.

    :class:`Worker` subclasses receive *settings*; any other class is
    instantiated without arguments and wrapped in a fresh runtime.
    """
    cls = import_target(target)
    if isinstance(cls, type) and issubclass(cls, Worker):
        return cls(settings=settings).runtime
    return WorkerRuntime(cls())
