"""Conflict-of-interest flag repository."""

from typing import Any
from uuid import UUID

from asyncpg import Record

from contenttrust_api.database.connection import get_db_connection
from contenttrust_api.database.models.coi_flag import COIContentType
from contenttrust_api.database.models.coi_flag import COIFlag
from contenttrust_api.database.models.coi_flag import COIFlagStatus
from contenttrust_api.database.models.coi_flag import COISeverity
from contenttrust_api.database.repositories.base import BaseRepository


class COIFlagRepository(BaseRepository[COIFlag]):
    """Repository for the canonical COI flag table.

    Content-scoped views are read queries over this table rather than
    copies stored on the content rows.
    """

    def __init__(self) -> None:
        super().__init__("coi_flags")

    def _record_to_model(self, record: Record) -> COIFlag:
        """Convert database record to COIFlag model."""
        return COIFlag.model_validate(dict(record))

    async def create_flag(
        self,
        content_id: UUID,
        content_type: COIContentType,
        flagged_by: UUID,
        reason: str,
        severity: COISeverity,
        details: str | None = None,
        related_entities: list[str] | None = None,
    ) -> COIFlag:
        """Store a new active flag."""
        return await self.create_from_dict(
            {
                "content_id": content_id,
                "content_type": COIContentType(content_type).value,
                "flagged_by": flagged_by,
                "reason": reason,
                "details": details,
                "severity": COISeverity(severity).value,
                "related_entities": related_entities or [],
            }
        )

    async def update_flag(self, pk: UUID, changes: dict[str, Any]) -> COIFlag | None:
        """Apply column changes to a flag."""
        return await self.update_from_dict(pk, changes)

    async def get_active_flags(self) -> list[COIFlag]:
        """Get every active flag, newest first."""
        return await self.find_by(status=COIFlagStatus.ACTIVE.value)

    async def get_flags_by_severity(self, severity: COISeverity) -> list[COIFlag]:
        """Get active flags of one severity, newest first."""
        return await self.find_by(
            status=COIFlagStatus.ACTIVE.value,
            severity=COISeverity(severity).value,
        )

    async def get_content_flags(
        self,
        content_type: COIContentType,
        content_id: UUID,
        active_only: bool = False,
    ) -> list[COIFlag]:
        """Get the flags attached to a piece of content."""
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE content_type = $1 AND content_id = $2
            AND (NOT $3 OR status = 'active')
            ORDER BY created_at DESC, pk DESC
        """  # nosec B608

        async with get_db_connection() as conn:
            records = await conn.fetch(
                query, COIContentType(content_type).value, content_id, active_only
            )
            return [self._record_to_model(r) for r in records]
