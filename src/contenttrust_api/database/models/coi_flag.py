"""Conflict-of-interest flag models."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel
from pydantic import Field

from contenttrust_api.database.models.base import BaseDBModel


class COIContentType(str, Enum):
    """Content that can carry a conflict-of-interest flag."""

    BLOG = "blog"
    WIKI = "wiki"


class COISeverity(str, Enum):
    """How strongly the conflict undermines trust in the content."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class COIFlagStatus(str, Enum):
    """COI flag status enumeration."""

    ACTIVE = "active"
    RESOLVED = "resolved"


class COIFlag(BaseDBModel):
    """A disclosed or suspected bias attached to content."""

    content_id: UUID
    content_type: COIContentType
    flagged_by: UUID
    reason: str
    details: str | None = None
    severity: COISeverity = COISeverity.MEDIUM
    status: COIFlagStatus = COIFlagStatus.ACTIVE
    related_entities: list[str] = Field(default_factory=list)
    resolved_by: UUID | None = None
    resolved_at: datetime | None = None
    resolution_notes: str | None = None


class COIFlagCreate(BaseModel):
    """Model for raising a COI flag."""

    content_id: UUID
    content_type: COIContentType
    reason: str = Field(..., min_length=3, max_length=500)
    details: str | None = Field(None, max_length=2000)
    severity: COISeverity = COISeverity.MEDIUM
    related_entities: list[str] = Field(default_factory=list)


class COIFlagUpdate(BaseModel):
    """Model for updating or resolving a COI flag."""

    reason: str | None = Field(None, min_length=3, max_length=500)
    details: str | None = Field(None, max_length=2000)
    severity: COISeverity | None = None
    status: COIFlagStatus | None = None
    related_entities: list[str] | None = None
    resolution_notes: str | None = Field(None, max_length=1000)
