"""
Centralized settings for cadence.

Manifesto:
    The only ambient input the framework needs is *where* configuration
    files live. ``CadenceSettings`` resolves that root once, validates it,
    and hands it to the store explicitly instead of each worker lazily
    reading the working directory on its own.

    - **Pydantic validation:** Type-checked at startup, not at first use
    - **Environment-driven:** ``CADENCE_*`` env vars and ``.env`` files
    - **Sensible defaults:** Root defaults to the process working directory

Examples:
    >>> from cadence.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.configs_dir.name
    'Configs'

Tags:
    settings, configuration, pydantic, environment, cadence
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CadenceSettings(BaseSettings):
    """Cadence configuration.

    All fields can be set via ``CADENCE_*`` environment variables (e.g.
    ``CADENCE_ROOT_DIR=/srv/app``) or through a ``.env`` file.

    Fields
    ──────
    root_dir                   : Base directory; configuration files live under it
    configs_dirname            : Name of the configuration directory under root_dir
    config_suffix              : File suffix for configuration records
    log_level                  : Structlog log level
    log_format                 : ``console`` or ``json``
    scheduler_interval_seconds : Tick interval for WorkerScheduler
    """

    model_config = SettingsConfigDict(
        env_prefix="CADENCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    root_dir: Path = Field(
        default_factory=Path.cwd,
        description="Base directory for worker configuration files",
    )
    configs_dirname: str = Field(default="Configs")
    config_suffix: str = Field(default=".localConfig")

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    # ── Scheduler ────────────────────────────────────────────────
    scheduler_interval_seconds: float = Field(default=10.0, gt=0)

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json"):
            raise ValueError(f"log_format must be 'console' or 'json', got {value!r}")
        return value

    @field_validator("config_suffix")
    @classmethod
    def _check_suffix(cls, value: str) -> str:
        if not value.startswith("."):
            raise ValueError(f"config_suffix must start with '.', got {value!r}")
        return value

    @property
    def configs_dir(self) -> Path:
        return self.root_dir / self.configs_dirname


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, CadenceSettings] = {}


def get_settings(
    *,
    root_dir: Path | None = None,
    _force_reload: bool = False,
) -> CadenceSettings:
    """Load, validate, and cache a :class:`CadenceSettings` instance.

    Parameters
    ----------
    root_dir:
        Explicit root directory. Overrides ``CADENCE_ROOT_DIR``.
    _force_reload:
        Bypass cache and reload from the environment.
    """
    cache_key = str(root_dir.resolve()) if root_dir is not None else ""

    if not _force_reload and cache_key in _settings_cache:
        return _settings_cache[cache_key]

    if root_dir is not None:
        settings = CadenceSettings(root_dir=root_dir)
    else:
        settings = CadenceSettings()

    _settings_cache[cache_key] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
