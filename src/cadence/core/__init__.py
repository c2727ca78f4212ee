"""Core primitives shared by every cadence layer: errors, logging, settings, time."""

from cadence.core.errors import (
    CadenceError,
    ConfigError,
    ConfigurationNotReadyError,
    ErrorCategory,
    ErrorContext,
    InvalidIdentityError,
    SerializationError,
    StorageError,
    WorkExecutionError,
)
from cadence.core.logging import LogContext, configure_logging, get_logger
from cadence.core.settings import CadenceSettings, clear_settings_cache, get_settings
from cadence.core.timestamps import ensure_utc, to_iso8601, utc_now

__all__ = [
    "CadenceError",
    "CadenceSettings",
    "ConfigError",
    "ConfigurationNotReadyError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidIdentityError",
    "LogContext",
    "SerializationError",
    "StorageError",
    "WorkExecutionError",
    "clear_settings_cache",
    "configure_logging",
    "ensure_utc",
    "get_logger",
    "get_settings",
    "to_iso8601",
    "utc_now",
]
