"""Moderation queue API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import status

from contenttrust_api.api.errors import to_http_exception
from contenttrust_api.auth.dependencies import get_current_user
from contenttrust_api.auth.dependencies import require_moderator
from contenttrust_api.database.models.base import ModerationContentType
from contenttrust_api.database.models.base import QueueStatus
from contenttrust_api.database.models.base import SortOrder
from contenttrust_api.database.models.moderation_queue import ModerationQueueItem
from contenttrust_api.database.models.moderation_queue import QueueAssign
from contenttrust_api.database.models.moderation_queue import QueueCount
from contenttrust_api.database.models.moderation_queue import QueueEscalate
from contenttrust_api.database.models.moderation_queue import QueuePage
from contenttrust_api.database.models.moderation_queue import QueueQuery
from contenttrust_api.database.models.moderation_queue import QueueReportCreate
from contenttrust_api.database.models.moderation_queue import QueueSortField
from contenttrust_api.database.models.user import User
from contenttrust_api.exceptions import ContentTrustError
from contenttrust_api.services.moderation_queue_service import ModerationQueueService
from contenttrust_api.services.moderation_queue_service import (
    get_moderation_queue_service,
)

router = APIRouter(prefix="/moderation/queue", tags=["moderation"])


@router.post("/reports", status_code=status.HTTP_201_CREATED)
async def report_content(
    report: QueueReportCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    queue_service: Annotated[
        ModerationQueueService, Depends(get_moderation_queue_service)
    ],
) -> ModerationQueueItem:
    """Report content, creating or updating its live queue item."""
    try:
        return await queue_service.ingest(
            report.content_type,
            report.content_id,
            current_user.pk,
            ai_score=report.ai_score,
            auto_flagged=report.auto_flagged,
            auto_reason=report.auto_reason,
        )
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.get("/")
async def get_queue(
    _: Annotated[User, Depends(require_moderator)],
    queue_service: Annotated[
        ModerationQueueService, Depends(get_moderation_queue_service)
    ],
    content_type: Annotated[ModerationContentType, Query()],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
    status_filter: Annotated[QueueStatus | None, Query(alias="status")] = None,
    sort_by: Annotated[QueueSortField, Query()] = QueueSortField.PRIORITY,
    sort_order: Annotated[SortOrder, Query()] = SortOrder.DESC,
) -> QueuePage:
    """Get one page of the moderation queue (moderators only)."""
    params = QueueQuery(
        content_type=content_type,
        page=page,
        page_size=page_size,
        status=status_filter,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return await queue_service.query(params)


@router.get("/counts")
async def get_queue_counts(
    _: Annotated[User, Depends(require_moderator)],
    queue_service: Annotated[
        ModerationQueueService, Depends(get_moderation_queue_service)
    ],
) -> list[QueueCount]:
    """Live item counts by content type and status."""
    return await queue_service.get_counts()


@router.post("/{item_pk}/assign")
async def assign_queue_item(
    item_pk: UUID,
    assignment: QueueAssign,
    _: Annotated[User, Depends(require_moderator)],
    queue_service: Annotated[
        ModerationQueueService, Depends(get_moderation_queue_service)
    ],
) -> ModerationQueueItem:
    """Assign a queue item to a moderator."""
    try:
        return await queue_service.assign(item_pk, assignment.moderator_pk)
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.post("/{item_pk}/escalate")
async def escalate_queue_item(
    item_pk: UUID,
    escalation: QueueEscalate,
    current_user: Annotated[User, Depends(require_moderator)],
    queue_service: Annotated[
        ModerationQueueService, Depends(get_moderation_queue_service)
    ],
) -> ModerationQueueItem:
    """Override a queue item's priority."""
    try:
        return await queue_service.escalate(
            item_pk, escalation.priority, current_user.pk, escalation.reason
        )
    except ContentTrustError as e:
        raise to_http_exception(e) from e
