"""Error taxonomy for the ingestion pipeline.

``NetworkError``, ``ContentError`` and ``SchemaError`` all derive from
``IngestError`` so the scheduler can catch a single type at the pipeline
boundary. Per-row problems are not errors; those rows are just dropped.
"""

from __future__ import annotations

from typing import Optional


class IngestError(Exception):
    """Base class for any failure of one pipeline run."""


class ContentError(IngestError):
    """A candidate answered with a success status but returned markup."""


class NetworkError(IngestError):
    """Every fetch candidate failed or the shared deadline elapsed."""

    def __init__(self, message: str, reason: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.reason = reason


class SchemaError(IngestError):
    """The header row does not resolve every required column."""


class ImportFileError(IngestError):
    """A user-supplied file could not be read or parsed."""


class ConfigError(ValueError):
    """Invalid runtime configuration."""
