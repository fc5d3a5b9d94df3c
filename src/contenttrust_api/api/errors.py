"""Translation of domain errors into HTTP responses."""

from fastapi import HTTPException

from contenttrust_api.exceptions import ContentTrustError
from contenttrust_api.exceptions import RateLimitedError

RETRY_AFTER_SECONDS = {"hour": 3600, "day": 86400}


def to_http_exception(error: ContentTrustError) -> HTTPException:
    """Build the HTTPException a router raises for a domain error."""
    headers = None
    if isinstance(error, RateLimitedError) and error.window in RETRY_AFTER_SECONDS:
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS[error.window])}

    return HTTPException(
        status_code=error.status_code, detail=error.message, headers=headers
    )
