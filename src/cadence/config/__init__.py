"""Per-worker configuration records and their file store."""

from cadence.config.models import WorkerConfiguration
from cadence.config.store import ConfigurationStore, validate_identity

__all__ = [
    "ConfigurationStore",
    "WorkerConfiguration",
    "validate_identity",
]
