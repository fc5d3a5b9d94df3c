"""Moderation queue service: report ingestion, priority escalation and paging."""

import logging
import math

from uuid import UUID

from contenttrust_api.config.moderation import ModerationSettings
from contenttrust_api.config.moderation import get_moderation_settings
from contenttrust_api.database.models.base import PRIORITY_RANK
from contenttrust_api.database.models.base import ModerationContentType
from contenttrust_api.database.models.base import ModerationPriority
from contenttrust_api.database.models.base import QueueStatus
from contenttrust_api.database.models.moderation_queue import ModerationQueueItem
from contenttrust_api.database.models.moderation_queue import QueueCount
from contenttrust_api.database.models.moderation_queue import QueuePage
from contenttrust_api.database.models.moderation_queue import QueueQuery
from contenttrust_api.database.repositories.content import ContentRepository
from contenttrust_api.database.repositories.moderation_queue import (
    ModerationQueueRepository,
)
from contenttrust_api.exceptions import AlreadyResolvedError
from contenttrust_api.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def compute_priority(
    report_count: int, ai_score: float | None, settings: ModerationSettings
) -> ModerationPriority:
    """Priority implied by an item's reports and AI score.

    Never returns ``urgent``; that level is only set by a moderator.
    """
    if ai_score is not None and ai_score >= settings.ai_score_high_threshold:
        return ModerationPriority.HIGH
    if report_count >= settings.reports_high_threshold:
        return ModerationPriority.HIGH
    if report_count >= settings.reports_medium_threshold:
        return ModerationPriority.MEDIUM
    return ModerationPriority.LOW


class ModerationQueueService:
    """Service for the priority-ranked moderation queue."""

    def __init__(
        self,
        queue_repo: ModerationQueueRepository | None = None,
        content_repo: ContentRepository | None = None,
        settings: ModerationSettings | None = None,
    ) -> None:
        self.queue_repo = queue_repo or ModerationQueueRepository()
        self.content_repo = content_repo or ContentRepository()
        self.settings = settings or get_moderation_settings()

    async def ingest(
        self,
        content_type: ModerationContentType,
        content_id: UUID,
        reporter_pk: UUID,
        ai_score: float | None = None,
        auto_flagged: bool = False,
        auto_reason: str | None = None,
    ) -> ModerationQueueItem:
        """Record a report or AI flag against a piece of content.

        Creates the live queue item or folds the report into it, then moves
        its priority up if the new totals call for it. Priority never moves
        down here.
        """
        content = await self.content_repo.get_content_by_id(content_type, content_id)
        if content is None:
            raise NotFoundError(f"Content {content_type}/{content_id} not found")

        item = await self.queue_repo.upsert_report(
            content_type,
            content_id,
            reporter_pk,
            ai_score=ai_score,
            auto_flagged=auto_flagged,
            auto_reason=auto_reason,
        )

        target = compute_priority(item.report_count, item.ai_score, self.settings)
        if PRIORITY_RANK[target.value] > PRIORITY_RANK[item.priority]:
            raised = await self.queue_repo.raise_priority(item.pk, target)
            if raised is not None:
                logger.info(
                    f"Queue item {item.pk} escalated {item.priority} -> {target.value}"
                )
                item = raised
            else:
                # A concurrent report already raised it at least as far
                item = await self.queue_repo.get_by_pk(item.pk) or item

        return item

    async def query(self, params: QueueQuery) -> QueuePage:
        """Get one stable page of the queue for a content type."""
        page_size = min(params.page_size, self.settings.max_page_size)
        if page_size != params.page_size:
            params = params.model_copy(update={"page_size": page_size})

        items, total = await self.queue_repo.get_page(params)
        return QueuePage(
            items=items,
            total=total,
            page=params.page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if total else 0,
        )

    async def assign(self, queue_item_pk: UUID, moderator_pk: UUID) -> ModerationQueueItem:
        """Hand an item to a moderator and mark it in review."""
        await self._get_live_item(queue_item_pk)

        item = await self.queue_repo.assign(queue_item_pk, moderator_pk)
        if item is None:
            raise AlreadyResolvedError(f"Queue item {queue_item_pk} is already resolved")

        logger.info(f"Queue item {queue_item_pk} assigned to {moderator_pk}")
        return item

    async def escalate(
        self,
        queue_item_pk: UUID,
        priority: ModerationPriority,
        performed_by: UUID,
        reason: str | None = None,
    ) -> ModerationQueueItem:
        """Override an item's priority; the only path to ``urgent`` or down."""
        current = await self._get_live_item(queue_item_pk)

        item = await self.queue_repo.set_priority(queue_item_pk, priority)
        if item is None:
            raise AlreadyResolvedError(f"Queue item {queue_item_pk} is already resolved")

        logger.info(
            f"Queue item {queue_item_pk} priority set {current.priority} -> "
            f"{item.priority} by {performed_by}: {reason or 'no reason given'}"
        )
        return item

    async def get_counts(self) -> list[QueueCount]:
        """Item counts by content type and status."""
        return await self.queue_repo.get_counts()

    async def _get_live_item(self, queue_item_pk: UUID) -> ModerationQueueItem:
        item = await self.queue_repo.get_by_pk(queue_item_pk)
        if item is None:
            raise NotFoundError(f"Queue item {queue_item_pk} not found")
        if item.status == QueueStatus.RESOLVED:
            logger.warning(f"Refused change to resolved queue item {queue_item_pk}")
            raise AlreadyResolvedError(f"Queue item {queue_item_pk} is already resolved")
        return item


async def get_moderation_queue_service() -> ModerationQueueService:
    """Dependency injection for moderation queue service."""
    return ModerationQueueService()
