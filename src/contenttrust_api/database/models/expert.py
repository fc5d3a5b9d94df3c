"""Expert credential verification models."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel
from pydantic import Field

from contenttrust_api.database.models.base import BaseDBModel


class ExpertStatus(str, Enum):
    """Stored and computed expert profile states.

    ``expired`` is derived from ``verified`` plus a past ``expires_at``; it
    may appear in responses without ever being written to the database.
    """

    PENDING = "pending"
    VERIFIED = "verified"
    EXPIRED = "expired"
    REVOKED = "revoked"


class ExpertProfile(BaseDBModel):
    """Expert credential record, one per user."""

    user_pk: UUID
    credential: str
    license_no: str | None = None
    region: str | None = None
    status: ExpertStatus = ExpertStatus.PENDING
    verified_at: datetime | None = None
    expires_at: datetime | None = None
    revoked_at: datetime | None = None
    reviewed_by: UUID | None = None
    review_notes: str | None = None

    def is_effectively_verified(self, now: datetime) -> bool:
        """Verified and not past its expiry at ``now``."""
        if self.status != ExpertStatus.VERIFIED:
            return False
        return self.expires_at is None or self.expires_at > now

    def effective_status(self, now: datetime) -> ExpertStatus:
        """Status with expiry applied."""
        if self.status == ExpertStatus.VERIFIED and not self.is_effectively_verified(
            now
        ):
            return ExpertStatus.EXPIRED
        return ExpertStatus(self.status)


class ExpertApplication(BaseModel):
    """Credential submission from a user."""

    credential: str = Field(..., min_length=2, max_length=200)
    license_no: str | None = Field(None, max_length=100)
    region: str | None = Field(None, max_length=100)


class ExpertReview(BaseModel):
    """Reviewer notes attached to a verify or revoke decision."""

    review_notes: str | None = Field(None, max_length=1000)


class ExpertExtend(BaseModel):
    """Extend a verification by a number of months."""

    months: int = Field(..., ge=1, le=60)


class ExpertVerificationStatus(BaseModel):
    """Answer to "may this user publish gated content right now"."""

    user_pk: UUID
    status: ExpertStatus | None
    is_effectively_verified: bool
    expires_at: datetime | None = None
