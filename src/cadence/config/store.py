"""
Configuration store — one JSON document per worker identity.

Layout on disk::

    <root_dir>/
      Configs/
        Mailer.localConfig
        Reindexer.localConfig

Each file is an indented JSON rendering of a
:class:`~cadence.config.models.WorkerConfiguration` subclass. A missing file
is created with defaults (``"Configured": false``) the first time it is
loaded, and the load then fails with
:class:`~cadence.core.errors.ConfigurationNotReadyError` until an operator
edits the file.

No locking is done here: callers must not save the same identity from
several threads at once.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import ValidationError

from cadence.config.models import WorkerConfiguration
from cadence.core.errors import (
    ConfigurationNotReadyError,
    InvalidIdentityError,
    SerializationError,
    StorageError,
)
from cadence.core.logging import get_logger
from cadence.core.settings import CadenceSettings

logger = get_logger(__name__)

T = TypeVar("T", bound=WorkerConfiguration)

CONFIGURED_KEY = "Configured"


def validate_identity(identity: Any) -> str:
    """Return *identity* if it is usable as a configuration file stem."""
    if not isinstance(identity, str) or not identity.strip():
        raise InvalidIdentityError(identity, "Worker identity must be a non-empty string")
    if identity in (".", "..") or any(c in identity for c in ("/", "\\", "\x00")):
        raise InvalidIdentityError(identity, f"Worker identity must not contain path components: {identity!r}")
    return identity


class ConfigurationStore:
    """Loads, validates, and saves configuration records keyed by worker identity."""

    def __init__(
        self,
        root_dir: Path | str,
        *,
        configs_dirname: str = "Configs",
        suffix: str = ".localConfig",
    ):
        self._root_dir = Path(root_dir)
        self._configs_dir = self._root_dir / configs_dirname
        self._suffix = suffix

        try:
            self._configs_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Cannot create configuration directory: {self._configs_dir}", cause=e
            ).with_context(path=str(self._configs_dir))

    @classmethod
    def from_settings(cls, settings: CadenceSettings) -> ConfigurationStore:
        return cls(
            settings.root_dir,
            configs_dirname=settings.configs_dirname,
            suffix=settings.config_suffix,
        )

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    @property
    def configs_dir(self) -> Path:
        return self._configs_dir

    def path_for(self, identity: str) -> Path:
        """Return the configuration file path for *identity*."""
        return self._configs_dir / f"{validate_identity(identity)}{self._suffix}"

    def exists(self, identity: str) -> bool:
        return self.path_for(identity).is_file()

    # ── Typed access ─────────────────────────────────────────────

    def load(self, identity: str, model: type[T]) -> T:
        """Load the record for *identity*, failing unless it is ``Configured``.

        Creates and persists a default ``model()`` first when no record
        exists yet, so the operator has a file to edit.

        Raises:
            ConfigurationNotReadyError: record has ``Configured == false``
            SerializationError: stored document does not match *model*
            StorageError: the file cannot be read or written
        """
        record = self.load_unchecked(identity, model)
        if not record.configured:
            path = self.path_for(identity)
            logger.warning("configuration_not_ready", worker=identity, path=str(path))
            raise ConfigurationNotReadyError(identity, str(path))
        return record

    def load_unchecked(self, identity: str, model: type[T]) -> T:
        """Like :meth:`load` but without the ``Configured`` gate."""
        path = self.path_for(identity)

        if not path.exists():
            record = self._default(identity, model)
            self._write(identity, path, record.model_dump_json(indent=2, by_alias=True))
            logger.info("configuration_created", worker=identity, path=str(path))
            return record

        text = self._read(identity, path)
        try:
            return model.model_validate_json(text)
        except ValidationError as e:
            raise SerializationError(
                f"Configuration file does not match {model.__name__}: {path}", cause=e
            ).with_context(worker=identity, path=str(path))

    def save(self, identity: str, record: WorkerConfiguration) -> Path:
        """Serialize *record* and overwrite the stored document."""
        path = self.path_for(identity)
        self._write(identity, path, record.model_dump_json(indent=2, by_alias=True))
        logger.info(
            "configuration_saved",
            worker=identity,
            path=str(path),
            configured=record.configured,
        )
        return path

    # ── Untyped access (CLI) ─────────────────────────────────────

    def read_raw(self, identity: str) -> dict[str, Any]:
        """Return the stored document as a plain dict."""
        path = self.path_for(identity)
        text = self._read(identity, path)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SerializationError(
                f"Configuration file is not valid JSON: {path}", cause=e
            ).with_context(worker=identity, path=str(path))
        if not isinstance(data, dict):
            raise SerializationError(
                f"Configuration file must hold a JSON object: {path}"
            ).with_context(worker=identity, path=str(path))
        return data

    def mark_configured(self, identity: str, value: bool = True) -> Path:
        """Set ``Configured`` on an existing document, keeping every other key."""
        data = self.read_raw(identity)
        data[CONFIGURED_KEY] = value
        path = self.path_for(identity)
        self._write(identity, path, json.dumps(data, indent=2))
        logger.info("configuration_marked", worker=identity, path=str(path), configured=value)
        return path

    # ── Internals ────────────────────────────────────────────────

    def _default(self, identity: str, model: type[T]) -> T:
        try:
            return model()
        except ValidationError as e:
            raise SerializationError(
                f"{model.__name__} cannot be created with defaults; every field needs one", cause=e
            ).with_context(worker=identity)

    def _read(self, identity: str, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise SerializationError(
                f"Configuration file is not valid UTF-8: {path}", cause=e
            ).with_context(worker=identity, path=str(path))
        except OSError as e:
            raise StorageError(
                f"Cannot read configuration file: {path}", cause=e
            ).with_context(worker=identity, path=str(path))

    def _write(self, identity: str, path: Path, text: str) -> None:
        try:
            path.write_text(text + "\n", encoding="utf-8")
        except OSError as e:
            raise StorageError(
                f"Cannot write configuration file: {path}", cause=e
            ).with_context(worker=identity, path=str(path))
