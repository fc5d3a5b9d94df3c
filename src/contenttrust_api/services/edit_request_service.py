"""Edit request submission, rate limiting and review."""

import logging
import math

from datetime import UTC
from datetime import datetime
from typing import Any
from uuid import UUID

from contenttrust_api.config.moderation import ModerationSettings
from contenttrust_api.config.moderation import get_moderation_settings
from contenttrust_api.database.models.edit_request import EditModerationStats
from contenttrust_api.database.models.edit_request import EditRequest
from contenttrust_api.database.models.edit_request import EditRequestAuditLog
from contenttrust_api.database.models.edit_request import EditRequestCreate
from contenttrust_api.database.models.edit_request import EditRequestFilter
from contenttrust_api.database.models.edit_request import EditRequestPage
from contenttrust_api.database.models.edit_request import EditRequestStatus
from contenttrust_api.database.models.edit_request import RateLimitResult
from contenttrust_api.database.repositories.edit_request import (
    EditRequestAuditRepository,
)
from contenttrust_api.database.repositories.edit_request import EditRequestRepository
from contenttrust_api.exceptions import AlreadyResolvedError
from contenttrust_api.exceptions import NotFoundError
from contenttrust_api.exceptions import RateLimitedError
from contenttrust_api.exceptions import ValidationError

logger = logging.getLogger(__name__)


def create_changes_summary(original: dict[str, Any], edited: dict[str, Any]) -> str:
    """Describe which top-level fields an edit adds, removes or modifies."""
    changes = []
    for key in sorted(set(original) | set(edited)):
        if key not in original:
            changes.append(f"Added {key}")
        elif key not in edited:
            changes.append(f"Removed {key}")
        elif original[key] != edited[key]:
            changes.append(f"Modified {key}")
    return ", ".join(changes) if changes else "No changes detected"


class EditRequestService:
    """Service for community edit requests."""

    def __init__(
        self,
        edit_request_repo: EditRequestRepository | None = None,
        audit_repo: EditRequestAuditRepository | None = None,
        settings: ModerationSettings | None = None,
    ) -> None:
        self.edit_request_repo = edit_request_repo or EditRequestRepository()
        self.audit_repo = audit_repo or EditRequestAuditRepository()
        self.settings = settings or get_moderation_settings()

    async def check_rate_limit(
        self,
        author_pk: UUID,
        per_hour: int | None = None,
        per_day: int | None = None,
        now: datetime | None = None,
    ) -> RateLimitResult:
        """Check an author against the trailing hour and trailing day windows.

        Both windows are evaluated; when both are exhausted the day window,
        the outer bound, is reported.
        """
        if per_hour is None:
            per_hour = self.settings.edit_requests_per_hour
        if per_day is None:
            per_day = self.settings.edit_requests_per_day
        hour_count, day_count = await self.edit_request_repo.count_recent(
            author_pk, now or datetime.now(UTC)
        )

        result = RateLimitResult(
            allowed=True, hour_count=hour_count, day_count=day_count
        )
        if day_count >= per_day:
            result.allowed = False
            result.window = "day"
            result.reason = f"Rate limit exceeded: {per_day} requests per day maximum"
        elif hour_count >= per_hour:
            result.allowed = False
            result.window = "hour"
            result.reason = f"Rate limit exceeded: {per_hour} requests per hour maximum"
        return result

    async def create_edit_request(
        self, author_pk: UUID, request_data: EditRequestCreate
    ) -> EditRequest:
        """Submit an edit request if the author is within their limits."""
        limit = await self.check_rate_limit(author_pk)
        if not limit.allowed:
            logger.warning(f"Edit request from {author_pk} rate limited: {limit.reason}")
            raise RateLimitedError(limit.reason or "Rate limit exceeded", limit.window)

        if not request_data.edited_data:
            raise ValidationError("Edited data is required")

        edit_request = await self.edit_request_repo.create_request(
            author_pk,
            request_data.content_type,
            request_data.content_id,
            request_data.original_data,
            request_data.edited_data,
            create_changes_summary(
                request_data.original_data, request_data.edited_data
            ),
            priority=request_data.priority,
            reason=request_data.reason,
        )

        logger.info(
            f"Edit request {edit_request.pk} created by {author_pk} for "
            f"{edit_request.content_type}/{edit_request.content_id}"
        )
        return edit_request

    async def approve(self, request_pk: UUID, reviewer_pk: UUID) -> EditRequest:
        """Approve a pending edit request."""
        return await self._review(request_pk, EditRequestStatus.APPROVED, reviewer_pk)

    async def reject(
        self, request_pk: UUID, reviewer_pk: UUID, reason: str
    ) -> EditRequest:
        """Reject a pending edit request with a reason."""
        if not reason or not reason.strip():
            raise ValidationError("Rejection reason is required")
        return await self._review(
            request_pk, EditRequestStatus.REJECTED, reviewer_pk, reason.strip()
        )

    async def list_edit_requests(
        self,
        filters: EditRequestFilter,
        page: int = 1,
        page_size: int = 20,
    ) -> EditRequestPage:
        """Get a page of edit requests, highest priority and oldest first."""
        page = max(page, 1)
        page_size = max(1, min(page_size, self.settings.max_page_size))

        items, total = await self.edit_request_repo.list_page(
            filters, page, page_size, datetime.now(UTC)
        )
        return EditRequestPage(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if total else 0,
        )

    async def get_audit_trail(self, request_pk: UUID) -> list[EditRequestAuditLog]:
        """Lifecycle events for an edit request, oldest first."""
        if await self.edit_request_repo.get_by_pk(request_pk) is None:
            raise NotFoundError(f"Edit request {request_pk} not found")
        return await self.audit_repo.get_for_request(request_pk)

    async def get_moderation_stats(self) -> EditModerationStats:
        """Review backlog and throughput figures."""
        return await self.edit_request_repo.get_stats()

    async def _review(
        self,
        request_pk: UUID,
        status: EditRequestStatus,
        reviewer_pk: UUID,
        reason: str | None = None,
    ) -> EditRequest:
        existing = await self.edit_request_repo.get_by_pk(request_pk)
        if existing is None:
            raise NotFoundError(f"Edit request {request_pk} not found")
        if existing.status != EditRequestStatus.PENDING:
            raise AlreadyResolvedError(
                f"Edit request {request_pk} is already {existing.status}"
            )

        reviewed = await self.edit_request_repo.review(
            request_pk, status, reviewer_pk, reason
        )
        if reviewed is None:
            raise AlreadyResolvedError(f"Edit request {request_pk} is already reviewed")

        logger.info(f"Edit request {request_pk} {status.value} by {reviewer_pk}")
        return reviewed


async def get_edit_request_service() -> EditRequestService:
    """Dependency injection for edit request service."""
    return EditRequestService()
