"""Edit request models for community-submitted content changes."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from contenttrust_api.database.models.base import BaseDBModel


class EditRequestContentType(str, Enum):
    """Content an edit request can target."""

    BLOG = "blog"
    WIKI = "wiki"
    PET = "pet"
    USER = "user"


class EditRequestStatus(str, Enum):
    """Edit request status enumeration."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EditRequestPriority(str, Enum):
    """Edit request review priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EditRequestAuditAction(str, Enum):
    """Lifecycle events recorded against an edit request."""

    CREATED = "created"
    APPROVED = "approved"
    REJECTED = "rejected"


EDIT_PRIORITY_RANK = {
    EditRequestPriority.LOW.value: 1,
    EditRequestPriority.MEDIUM.value: 2,
    EditRequestPriority.HIGH.value: 3,
}


class EditRequest(BaseDBModel):
    """Proposed change to a piece of content awaiting review."""

    author_pk: UUID
    content_type: EditRequestContentType
    content_id: UUID
    original_data: dict[str, Any] = Field(default_factory=dict)
    edited_data: dict[str, Any] = Field(default_factory=dict)
    changes_summary: str | None = None
    status: EditRequestStatus = EditRequestStatus.PENDING
    priority: EditRequestPriority = EditRequestPriority.LOW
    reviewed_by: UUID | None = None
    reviewed_at: datetime | None = None
    reason: str | None = None


class EditRequestAuditLog(BaseDBModel):
    """Immutable record of one edit request lifecycle event."""

    edit_request_pk: UUID
    action: EditRequestAuditAction
    performed_by: UUID
    reason: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class EditRequestCreate(BaseModel):
    """Model for submitting an edit request."""

    content_type: EditRequestContentType
    content_id: UUID
    original_data: dict[str, Any] = Field(default_factory=dict)
    edited_data: dict[str, Any]
    priority: EditRequestPriority = EditRequestPriority.LOW
    reason: str | None = Field(None, max_length=1000)


class EditRequestReject(BaseModel):
    """Rejection payload; a reason is mandatory."""

    reason: str = Field(..., min_length=1, max_length=1000)


class EditRequestFilter(BaseModel):
    """Filters for edit request listings."""

    content_type: EditRequestContentType | None = None
    status: EditRequestStatus | None = None
    author_pk: UUID | None = None
    priority: EditRequestPriority | None = None
    min_age_hours: int | None = Field(None, ge=0)
    max_age_hours: int | None = Field(None, ge=0)


class EditRequestPage(BaseModel):
    """A page of edit requests."""

    items: list[EditRequest]
    total: int
    page: int
    page_size: int
    total_pages: int

    model_config = ConfigDict(from_attributes=True)


class RateLimitResult(BaseModel):
    """Result of an edit request rate limit check."""

    allowed: bool
    reason: str | None = None
    window: str | None = None
    hour_count: int = 0
    day_count: int = 0


class EditModerationStats(BaseModel):
    """Edit request review backlog and throughput."""

    total_pending: int
    total_approved: int
    total_rejected: int
    pending_by_type: dict[str, int] = Field(default_factory=dict)
    avg_processing_hours: float = 0.0
    oldest_pending_pk: UUID | None = None
