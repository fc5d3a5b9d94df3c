"""Base models and types for the Content Trust API database."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict


class UserRole(str, Enum):
    """User role enumeration."""

    MEMBER = "member"
    MODERATOR = "moderator"
    ADMIN = "admin"


class ModerationContentType(str, Enum):
    """Kinds of content that can enter the moderation queue."""

    POST = "post"
    COMMENT = "comment"
    MEDIA = "media"
    WIKI_REVISION = "wiki_revision"


class ModerationPriority(str, Enum):
    """Queue priority, lowest to highest."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Keyed by the stored string value
PRIORITY_RANK = {
    ModerationPriority.LOW.value: 1,
    ModerationPriority.MEDIUM.value: 2,
    ModerationPriority.HIGH.value: 3,
    ModerationPriority.URGENT.value: 4,
}


class QueueStatus(str, Enum):
    """Moderation queue item status enumeration."""

    PENDING = "pending"
    IN_REVIEW = "in_review"
    RESOLVED = "resolved"


class ModerationAction(str, Enum):
    """Decisions a moderator can take on a queue item."""

    APPROVE = "approve"
    REJECT = "reject"
    REDACT = "redact"
    DELETE = "delete"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class BaseDBModel(BaseModel):
    """Base model for database entities."""

    pk: UUID
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
