"""Domain errors raised by the Content Trust services.

Every error is recoverable by the caller. Routers translate them to HTTP
responses through ``status_code``.
"""

from fastapi import status


class ContentTrustError(Exception):
    """Base class for moderation pipeline errors."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ContentTrustError):
    """Raised when input is missing or invalid."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ContentTrustError):
    """Raised when a queue item, article, revision, profile or flag is absent."""

    status_code = status.HTTP_404_NOT_FOUND


class AlreadyResolvedError(ContentTrustError):
    """Raised when re-processing something already in a terminal state."""

    status_code = status.HTTP_409_CONFLICT


class PermissionDeniedError(ContentTrustError):
    """Raised when the acting user may not perform a gated transition."""

    status_code = status.HTTP_403_FORBIDDEN


class RateLimitedError(ContentTrustError):
    """Raised when an author exceeds an edit request window."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str, window: str):
        self.window = window
        super().__init__(message)
