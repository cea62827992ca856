"""Service error taxonomy.

Every error raised by the managers carries the HTTP status it maps to, so the
handlers in ``api/errors.py`` can translate it without a lookup table.
"""

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base class for errors surfaced to API callers.

    ``details`` are extra keys merged into the JSON error body.
    """

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(ServiceError):
    """Bad input shape, type or size."""

    status_code = 400


class PayloadTooLargeError(ValidationError):
    """Upload exceeds the configured size limit."""

    status_code = 413


class AuthenticationError(ServiceError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class ForbiddenError(ServiceError):
    """Valid credentials, but the caller does not own the resource."""

    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class DuplicateAccountError(ConflictError):
    """An account with this email already exists."""

    status_code = 400


class ExtractionInProgressError(ConflictError):
    """An extraction task for this document has not finished yet."""


class UpstreamError(ServiceError):
    """Extraction or summarization dependency failed.

    The message is kept generic so dependency internals never reach clients.
    """

    status_code = 500
