"""Conflict-of-interest flag registry."""

import logging

from datetime import UTC
from datetime import datetime
from uuid import UUID

from contenttrust_api.database.models.coi_flag import COIContentType
from contenttrust_api.database.models.coi_flag import COIFlag
from contenttrust_api.database.models.coi_flag import COIFlagCreate
from contenttrust_api.database.models.coi_flag import COIFlagStatus
from contenttrust_api.database.models.coi_flag import COIFlagUpdate
from contenttrust_api.database.models.coi_flag import COISeverity
from contenttrust_api.database.repositories.coi_flag import COIFlagRepository
from contenttrust_api.database.repositories.content import ContentRepository
from contenttrust_api.exceptions import NotFoundError
from contenttrust_api.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Columns that may be changed but never cleared
REQUIRED_COLUMNS = ("reason", "severity", "status", "related_entities")


class COIFlagService:
    """Service for raising, resolving and reading COI flags."""

    def __init__(
        self,
        flag_repo: COIFlagRepository | None = None,
        content_repo: ContentRepository | None = None,
    ) -> None:
        self.flag_repo = flag_repo or COIFlagRepository()
        self.content_repo = content_repo or ContentRepository()

    async def add_flag(self, flag_data: COIFlagCreate, flagged_by: UUID) -> COIFlag:
        """Attach a COI flag to existing content."""
        content = await self.content_repo.get_content_by_id(
            flag_data.content_type, flag_data.content_id
        )
        if content is None:
            raise NotFoundError(
                f"Content {flag_data.content_type.value}/{flag_data.content_id} not found"
            )

        flag = await self.flag_repo.create_flag(
            flag_data.content_id,
            flag_data.content_type,
            flagged_by,
            flag_data.reason,
            flag_data.severity,
            details=flag_data.details,
            related_entities=flag_data.related_entities,
        )
        logger.info(
            f"COI flag {flag.pk} ({flag.severity}) raised on "
            f"{flag.content_type}/{flag.content_id} by {flagged_by}"
        )
        return flag

    async def update_flag(
        self, flag_pk: UUID, changes: COIFlagUpdate, updated_by: UUID
    ) -> COIFlag:
        """Update a flag; resolving it stamps who resolved it and when."""
        data = changes.model_dump(exclude_unset=True, mode="json")
        cleared = [
            column
            for column in REQUIRED_COLUMNS
            if column in data and data[column] is None
        ]
        if cleared:
            raise ValidationError(
                f"Cannot clear required fields: {', '.join(cleared)}"
            )

        existing = await self.flag_repo.get_by_pk(flag_pk)
        if existing is None:
            raise NotFoundError(f"COI flag {flag_pk} not found")

        if (
            changes.status == COIFlagStatus.RESOLVED
            and existing.status != COIFlagStatus.RESOLVED
        ):
            data["resolved_by"] = updated_by
            data["resolved_at"] = datetime.now(UTC)
        elif changes.status == COIFlagStatus.ACTIVE:
            data["resolved_by"] = None
            data["resolved_at"] = None

        flag = await self.flag_repo.update_flag(flag_pk, data)
        if flag is None:
            raise NotFoundError(f"COI flag {flag_pk} not found")

        logger.info(f"COI flag {flag_pk} updated by {updated_by}")
        return flag

    async def get_active_flags(self) -> list[COIFlag]:
        """Every active flag."""
        return await self.flag_repo.get_active_flags()

    async def get_flags_by_severity(self, severity: COISeverity) -> list[COIFlag]:
        """Active flags of one severity."""
        return await self.flag_repo.get_flags_by_severity(severity)

    async def get_content_flags(
        self,
        content_type: COIContentType,
        content_id: UUID,
        active_only: bool = False,
    ) -> list[COIFlag]:
        """Flags attached to a piece of content."""
        return await self.flag_repo.get_content_flags(
            content_type, content_id, active_only
        )


async def get_coi_flag_service() -> COIFlagService:
    """Dependency injection for COI flag service."""
    return COIFlagService()
