"""Moderation action processing, audit trail and soft delete retention."""

import logging

from datetime import UTC
from datetime import datetime
from uuid import UUID

from contenttrust_api.config.moderation import ModerationSettings
from contenttrust_api.config.moderation import get_moderation_settings
from contenttrust_api.database.models.base import ModerationAction
from contenttrust_api.database.models.base import ModerationContentType
from contenttrust_api.database.models.base import QueueStatus
from contenttrust_api.database.models.moderation_action import BulkActionError
from contenttrust_api.database.models.moderation_action import BulkActionItem
from contenttrust_api.database.models.moderation_action import BulkActionResult
from contenttrust_api.database.models.moderation_action import CleanupResult
from contenttrust_api.database.models.moderation_action import ModerationActionLog
from contenttrust_api.database.models.moderation_action import ModerationDecision
from contenttrust_api.database.models.moderation_action import SoftDeleteRecord
from contenttrust_api.database.repositories.moderation_action import (
    ModerationActionRepository,
)
from contenttrust_api.database.repositories.moderation_action import (
    SoftDeleteRepository,
)
from contenttrust_api.database.repositories.moderation_queue import (
    ModerationQueueRepository,
)
from contenttrust_api.exceptions import AlreadyResolvedError
from contenttrust_api.exceptions import ContentTrustError
from contenttrust_api.exceptions import NotFoundError
from contenttrust_api.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ModerationActionService:
    """Service that resolves queue items and keeps their audit trail."""

    def __init__(
        self,
        queue_repo: ModerationQueueRepository | None = None,
        action_repo: ModerationActionRepository | None = None,
        soft_delete_repo: SoftDeleteRepository | None = None,
        settings: ModerationSettings | None = None,
    ) -> None:
        self.queue_repo = queue_repo or ModerationQueueRepository()
        self.action_repo = action_repo or ModerationActionRepository()
        self.soft_delete_repo = soft_delete_repo or SoftDeleteRepository()
        self.settings = settings or get_moderation_settings()

    async def process(
        self,
        queue_item_pk: UUID,
        action: ModerationAction,
        performed_by: UUID,
        justification: str,
    ) -> ModerationDecision:
        """Resolve a queue item with a justified decision.

        The resolve, its audit log row and, for ``delete``, the soft delete
        record are written together or not at all. Processing an item a
        second time raises AlreadyResolvedError and writes nothing.
        """
        if not justification or not justification.strip():
            raise ValidationError("Justification is required")

        item = await self.queue_repo.get_by_pk(queue_item_pk)
        if item is None:
            raise NotFoundError(f"Queue item {queue_item_pk} not found")
        if item.status == QueueStatus.RESOLVED:
            logger.warning(f"Refused {action} on resolved queue item {queue_item_pk}")
            raise AlreadyResolvedError(f"Queue item {queue_item_pk} is already resolved")

        action = ModerationAction(action)
        retention_days = (
            self.settings.soft_delete_retention_days
            if action == ModerationAction.DELETE
            else None
        )

        decision = await self.action_repo.resolve_with_audit(
            queue_item_pk,
            action,
            performed_by,
            justification.strip(),
            retention_days=retention_days,
        )
        if decision is None:
            # Lost the race to a concurrent resolve
            raise AlreadyResolvedError(f"Queue item {queue_item_pk} is already resolved")

        logger.info(
            f"Queue item {queue_item_pk} resolved with {action.value} by {performed_by}"
        )
        return decision

    async def bulk_process(self, items: list[BulkActionItem]) -> BulkActionResult:
        """Process each entry independently; one failure never blocks another."""
        result = BulkActionResult()

        for entry in items:
            try:
                await self.process(
                    entry.queue_item_pk,
                    entry.action,
                    entry.performed_by,
                    entry.justification,
                )
                result.succeeded += 1
            except ContentTrustError as e:
                result.failed += 1
                result.errors.append(
                    BulkActionError(queue_item_pk=entry.queue_item_pk, error=e.message)
                )

        logger.info(
            f"Bulk moderation finished: {result.succeeded} succeeded, "
            f"{result.failed} failed"
        )
        return result

    async def cleanup_expired_soft_deletes(
        self, now: datetime | None = None
    ) -> CleanupResult:
        """Purge soft delete records whose retention has run out."""
        ran_at = now or datetime.now(UTC)
        removed = await self.soft_delete_repo.delete_expired(ran_at)
        if removed:
            logger.info(f"Removed {removed} expired soft delete records")
        return CleanupResult(removed=removed, ran_at=ran_at)

    async def get_action_history(self, queue_item_pk: UUID) -> list[ModerationActionLog]:
        """Get the audit trail of a queue item."""
        if not await self.queue_repo.exists(queue_item_pk):
            raise NotFoundError(f"Queue item {queue_item_pk} not found")
        return await self.action_repo.get_logs_for_item(queue_item_pk)

    async def get_soft_delete_records(
        self, content_type: ModerationContentType, content_id: UUID
    ) -> list[SoftDeleteRecord]:
        """Get the soft delete records of a piece of content."""
        return await self.soft_delete_repo.get_for_content(content_type, content_id)


async def get_moderation_action_service() -> ModerationActionService:
    """Dependency injection for moderation action service."""
    return ModerationActionService()
