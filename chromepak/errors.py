"""Exception hierarchy for the .pak codec."""

from __future__ import annotations

from typing import Any, Dict, Optional


class PakError(Exception):
    """Base exception for all codec errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class PakFormatError(PakError, ValueError):
    """Raised when an archive byte stream fails validation."""


class StructuralError(PakFormatError):
    """Raised when the header or index is malformed."""


class TruncationError(PakFormatError):
    """Raised when the stream ends before a field or payload was fully read."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        resource_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.field = field
        self.resource_id = resource_id
        merged = dict(details or {})
        if field is not None:
            merged["field"] = field
        if resource_id is not None:
            merged["resource_id"] = resource_id
        super().__init__(message, merged)


class ResourceBudgetExceeded(PakFormatError):
    """Raised when an archive exceeds configured decode limits."""


class PakValueError(PakError, ValueError):
    """Raised when an in-memory table holds values the format cannot carry."""


class PreconditionError(PakError, ValueError):
    """Raised when the encoder is invoked without a table."""


class PakIOError(PakError):
    """Raised when the underlying stream or file fails."""


class PakConfigError(PakError):
    """Raised when CHROMEPAK_* settings fail validation."""


__all__ = [
    "PakError",
    "PakFormatError",
    "StructuralError",
    "TruncationError",
    "ResourceBudgetExceeded",
    "PakValueError",
    "PreconditionError",
    "PakIOError",
    "PakConfigError",
]
