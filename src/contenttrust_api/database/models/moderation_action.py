"""Moderation action audit trail and soft delete models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic import Field

from contenttrust_api.database.models.base import BaseDBModel
from contenttrust_api.database.models.base import ModerationAction
from contenttrust_api.database.models.base import ModerationContentType
from contenttrust_api.database.models.moderation_queue import ModerationQueueItem


class ModerationActionLog(BaseDBModel):
    """Immutable record of one processed moderation decision."""

    queue_item_pk: UUID
    action: ModerationAction
    performed_by: UUID
    justification: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class ModerationActionRequest(BaseModel):
    """A moderator's decision on a single queue item."""

    action: ModerationAction
    justification: str = Field(..., max_length=2000)


class ModerationActionEntry(BaseModel):
    """A decision on one queue item inside a bulk request."""

    queue_item_pk: UUID
    action: ModerationAction
    justification: str = Field(..., max_length=2000)


class BulkActionItem(BaseModel):
    """One entry of a bulk moderation request."""

    queue_item_pk: UUID
    action: ModerationAction
    performed_by: UUID
    justification: str = Field(..., max_length=2000)


class BulkActionError(BaseModel):
    """Failure detail for a bulk entry."""

    queue_item_pk: UUID
    error: str


class BulkActionResult(BaseModel):
    """Outcome of a bulk moderation request."""

    succeeded: int = 0
    failed: int = 0
    errors: list[BulkActionError] = Field(default_factory=list)


class SoftDeleteRecord(BaseDBModel):
    """Time-bounded tombstone for deleted content."""

    content_type: ModerationContentType
    content_id: UUID
    deleted_by: UUID
    reason: str
    deleted_at: datetime
    expires_at: datetime
    metadata: dict[str, Any] = Field(default_factory=dict)


class ModerationDecision(BaseModel):
    """Everything a successful action wrote in its transaction."""

    item: ModerationQueueItem
    log: ModerationActionLog
    soft_delete: SoftDeleteRecord | None = None


class CleanupResult(BaseModel):
    """Result of an expired soft delete sweep."""

    removed: int
    ran_at: datetime


class BulkActionRequest(BaseModel):
    """Bulk decisions submitted by one moderator."""

    items: list[ModerationActionEntry] = Field(..., min_length=1, max_length=100)
