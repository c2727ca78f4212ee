"""
Structured error types for cadence.

Every failure the framework surfaces is a :class:`CadenceError` carrying a
category, a structured :class:`ErrorContext` (worker identity, file path,
free-form metadata) and an optional chained cause. Nothing in cadence is
retried: the category exists for logging and alert routing, not for retry
decisions.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                        CadenceError                              │
        │               (category, context, cause)                         │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ConfigError         SerializationError    StorageError          │
        │  (CONFIG)            (PARSE)               (STORAGE)             │
        │     │                                                            │
        │  ConfigurationNotReadyError                WorkExecutionError    │
        │  InvalidIdentityError                      (EXECUTION)           │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    Chaining a work-body failure:

    >>> try:
    ...     raise ValueError("bad row")
    ... except ValueError as e:
    ...     error = WorkExecutionError("Worker failed", cause=e).with_context(worker="Mailer")
    >>> error.context.worker
    'Mailer'
    >>> error.to_dict()["cause"]
    'bad row'

Guardrails:
    ❌ DON'T: Raise plain Exception from framework code
    ✅ DO: Use the matching CadenceError subclass

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= so the traceback chains

Tags:
    error-handling, exception-hierarchy, error-context, cadence
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    CONFIG = "CONFIG"             # Missing or unconfigured records, bad identities
    PARSE = "PARSE"               # Stored data does not decode to the record shape
    STORAGE = "STORAGE"           # Disk / file system failures
    EXECUTION = "EXECUTION"       # The work body itself raised
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        worker: Identity of the worker involved
        path: File path involved (configuration file, configs directory)
        metadata: Additional key-value pairs
    """

    worker: str | None = None
    path: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ("worker", "path"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class CadenceError(Exception):
    """
    Base exception for all cadence errors.

    Subclasses set ``default_category``; callers may override it per
    instance. ``cause`` is also stored as ``__cause__`` so tracebacks show
    the original failure.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> CadenceError:
        """
        Add context to this error (fluent API).

        Usage:
            raise StorageError("Write failed").with_context(
                worker="Mailer",
                path="/srv/app/Configs/Mailer.localConfig",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(CadenceError):
    """Configuration error (never fixed by running again)."""

    default_category = ErrorCategory.CONFIG


class ConfigurationNotReadyError(ConfigError):
    """A configuration record exists but has not been marked ``Configured``.

    Raised on purpose so an operator opens the file and reviews the default
    values before the worker is allowed to use them.
    """

    def __init__(self, worker: str, path: str, message: str | None = None):
        super().__init__(
            message or f"Configuration file not populated: {path}",
            context=ErrorContext(worker=worker, path=path),
        )


class InvalidIdentityError(ConfigError):
    """Worker identity cannot be used as a configuration key."""

    def __init__(self, identity: Any, message: str | None = None):
        super().__init__(
            message or f"Invalid worker identity: {identity!r}",
            context=ErrorContext(metadata={"identity": repr(identity)}),
        )


# =============================================================================
# SERIALIZATION / STORAGE ERRORS
# =============================================================================


class SerializationError(CadenceError):
    """Stored bytes do not decode to the expected record shape."""

    default_category = ErrorCategory.PARSE


class StorageError(CadenceError):
    """Reading or writing a configuration file failed."""

    default_category = ErrorCategory.STORAGE


# =============================================================================
# EXECUTION ERRORS
# =============================================================================


class WorkExecutionError(CadenceError):
    """The work body of a worker raised. The original error is ``cause``."""

    default_category = ErrorCategory.EXECUTION


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "CadenceError",
    "ConfigError",
    "ConfigurationNotReadyError",
    "InvalidIdentityError",
    "SerializationError",
    "StorageError",
    "WorkExecutionError",
]
