"""Moderation queue models for the Content Trust API."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from contenttrust_api.database.models.base import BaseDBModel
from contenttrust_api.database.models.base import ModerationContentType
from contenttrust_api.database.models.base import ModerationPriority
from contenttrust_api.database.models.base import QueueStatus
from contenttrust_api.database.models.base import SortOrder


class ModerationQueueItem(BaseDBModel):
    """One unit of moderation work, keyed by (content_type, content_id)."""

    content_type: ModerationContentType
    content_id: UUID
    reported_by: list[UUID] = Field(default_factory=list)
    report_count: int = 1
    ai_score: float | None = None
    auto_flagged: bool = False
    auto_reason: str | None = None
    priority: ModerationPriority = ModerationPriority.LOW
    status: QueueStatus = QueueStatus.PENDING
    assigned_to: UUID | None = None
    assigned_at: datetime | None = None
    justification: str | None = None
    resolved_at: datetime | None = None


class QueueReportCreate(BaseModel):
    """A report (or automated flag) against a piece of content."""

    content_type: ModerationContentType
    content_id: UUID
    ai_score: float | None = Field(None, ge=0, le=100)
    auto_flagged: bool = False
    auto_reason: str | None = Field(None, max_length=500)


class QueueSortField(str, Enum):
    """Columns the queue can be sorted by."""

    PRIORITY = "priority"
    AI_SCORE = "ai_score"
    CREATED_AT = "created_at"


class QueueQuery(BaseModel):
    """Filter, sort and page parameters for a queue listing."""

    content_type: ModerationContentType
    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1)
    status: QueueStatus | None = None
    sort_by: QueueSortField = QueueSortField.PRIORITY
    sort_order: SortOrder = SortOrder.DESC


class QueuePage(BaseModel):
    """A page of queue items with totals computed from the same snapshot."""

    items: list[ModerationQueueItem]
    total: int
    page: int
    page_size: int
    total_pages: int

    model_config = ConfigDict(from_attributes=True)


class QueueAssign(BaseModel):
    """Assign a queue item to a moderator."""

    moderator_pk: UUID


class QueueEscalate(BaseModel):
    """Manual priority override."""

    priority: ModerationPriority
    reason: str | None = Field(None, max_length=500)


class QueueCount(BaseModel):
    """Number of queue items for a content type and status."""

    content_type: ModerationContentType
    status: QueueStatus
    count: int
