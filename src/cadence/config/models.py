"""Base record type for per-worker configuration files."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WorkerConfiguration(BaseModel):
    """Base class for a worker configuration record.

    Applications subclass this and add their own fields, each with a
    default so the store can write a fresh record on first access::

        class MailerConfiguration(WorkerConfiguration):
            smtp_host: str = "localhost"
            recipients: list[str] = []

    ``configured`` is serialized as ``Configured`` and starts out ``False``.
    The store refuses to hand out a record until an operator has opened the
    file, reviewed the defaults and flipped it to ``true``.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    configured: bool = Field(default=False, alias="Configured")
