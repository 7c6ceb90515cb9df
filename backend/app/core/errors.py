"""Storage error taxonomy surfaced to API callers."""

from __future__ import annotations

from typing import Iterable


class StoreError(RuntimeError):
    """Raised when the portfolio document cannot be read or written."""


class StoreConfigurationError(StoreError):
    """Raised when required remote-store settings are absent."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Missing configuration: {', '.join(self.missing)}")


class StorePermissionError(StoreError):
    """Raised when the credential is rejected by the remote store."""


class StoreConflictError(StoreError):
    """Raised when the document changed since its version token was read.

    Reload the document and retry; nothing is merged automatically.
    """


__all__ = [
    "StoreConfigurationError",
    "StoreConflictError",
    "StoreError",
    "StorePermissionError",
]
