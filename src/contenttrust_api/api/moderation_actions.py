"""Moderation action API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends

from contenttrust_api.api.errors import to_http_exception
from contenttrust_api.auth.dependencies import require_admin
from contenttrust_api.auth.dependencies import require_moderator
from contenttrust_api.database.models.base import ModerationContentType
from contenttrust_api.database.models.moderation_action import BulkActionItem
from contenttrust_api.database.models.moderation_action import BulkActionRequest
from contenttrust_api.database.models.moderation_action import BulkActionResult
from contenttrust_api.database.models.moderation_action import CleanupResult
from contenttrust_api.database.models.moderation_action import ModerationActionLog
from contenttrust_api.database.models.moderation_action import (
    ModerationActionRequest,
)
from contenttrust_api.database.models.moderation_action import ModerationDecision
from contenttrust_api.database.models.moderation_action import SoftDeleteRecord
from contenttrust_api.database.models.user import User
from contenttrust_api.exceptions import ContentTrustError
from contenttrust_api.services.moderation_action_service import (
    ModerationActionService,
)
from contenttrust_api.services.moderation_action_service import (
    get_moderation_action_service,
)

router = APIRouter(prefix="/moderation/actions", tags=["moderation"])


@router.post("/bulk")
async def bulk_process(
    request: BulkActionRequest,
    current_user: Annotated[User, Depends(require_moderator)],
    action_service: Annotated[
        ModerationActionService, Depends(get_moderation_action_service)
    ],
) -> BulkActionResult:
    """Process several queue items; failures are reported per item."""
    items = [
        BulkActionItem(
            queue_item_pk=entry.queue_item_pk,
            action=entry.action,
            performed_by=current_user.pk,
            justification=entry.justification,
        )
        for entry in request.items
    ]
    return await action_service.bulk_process(items)


@router.post("/cleanup")
async def cleanup_soft_deletes(
    _: Annotated[User, Depends(require_admin)],
    action_service: Annotated[
        ModerationActionService, Depends(get_moderation_action_service)
    ],
) -> CleanupResult:
    """Purge expired soft delete records now (admins only)."""
    return await action_service.cleanup_expired_soft_deletes()


@router.get("/soft-deletes/{content_type}/{content_id}")
async def get_soft_deletes(
    content_type: ModerationContentType,
    content_id: UUID,
    _: Annotated[User, Depends(require_moderator)],
    action_service: Annotated[
        ModerationActionService, Depends(get_moderation_action_service)
    ],
) -> list[SoftDeleteRecord]:
    """Soft delete records of a piece of content."""
    return await action_service.get_soft_delete_records(content_type, content_id)


@router.post("/{item_pk}")
async def process_queue_item(
    item_pk: UUID,
    request: ModerationActionRequest,
    current_user: Annotated[User, Depends(require_moderator)],
    action_service: Annotated[
        ModerationActionService, Depends(get_moderation_action_service)
    ],
) -> ModerationDecision:
    """Resolve a queue item with a justified decision."""
    try:
        return await action_service.process(
            item_pk, request.action, current_user.pk, request.justification
        )
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.get("/{item_pk}/history")
async def get_action_history(
    item_pk: UUID,
    _: Annotated[User, Depends(require_moderator)],
    action_service: Annotated[
        ModerationActionService, Depends(get_moderation_action_service)
    ],
) -> list[ModerationActionLog]:
    """Audit trail of a queue item."""
    try:
        return await action_service.get_action_history(item_pk)
    except ContentTrustError as e:
        raise to_http_exception(e) from e
