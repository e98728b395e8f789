"""Domain error taxonomy.

Every error carries the HTTP status the API layer answers with; the mapping
itself lives in ``magilearn.middleware.error_handler``.
"""

from __future__ import annotations

from typing import Any


class MagiLearnError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(MagiLearnError):
    """A requested entity does not exist."""

    status_code = 404
    default_message = "Not found"


class UserNotFound(NotFound):
    default_message = "User not found"


class ProgressNotFound(NotFound):
    default_message = "Progress not found"


class ValidationFailed(MagiLearnError):
    """Malformed input. Keeps field-level detail for the caller."""

    status_code = 400
    default_message = "Invalid data"

    def __init__(self, message: str | None = None, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class NoSpinsRemaining(MagiLearnError):
    """The daily spin allowance is exhausted."""

    status_code = 400
    default_message = "No spins remaining"


class StorageUnavailable(MagiLearnError):
    """The persistence layer failed (connectivity, constraint violation)."""

    status_code = 503
    default_message = "Storage unavailable"


class ExternalServiceFailed(MagiLearnError):
    """The text-generation provider failed. Never leaves the AI service."""

    status_code = 502
    default_message = "External service failed"
