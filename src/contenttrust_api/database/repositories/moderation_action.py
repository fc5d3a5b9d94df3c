"""Moderation action audit log and soft delete repositories."""

from datetime import datetime
from uuid import UUID

from asyncpg import Record

from contenttrust_api.database.connection import get_db_connection
from contenttrust_api.database.connection import get_db_transaction
from contenttrust_api.database.models.base import ModerationAction
from contenttrust_api.database.models.base import ModerationContentType
from contenttrust_api.database.models.base import QueueStatus
from contenttrust_api.database.models.moderation_action import ModerationActionLog
from contenttrust_api.database.models.moderation_action import ModerationDecision
from contenttrust_api.database.models.moderation_action import SoftDeleteRecord
from contenttrust_api.database.models.moderation_queue import ModerationQueueItem
from contenttrust_api.database.repositories.base import BaseRepository


class ModerationActionRepository(BaseRepository[ModerationActionLog]):
    """Repository for the append-only moderation action log."""

    def __init__(self) -> None:
        super().__init__("moderation_action_logs")

    def _record_to_model(self, record: Record) -> ModerationActionLog:
        """Convert database record to ModerationActionLog model."""
        return ModerationActionLog.model_validate(dict(record))

    async def resolve_with_audit(
        self,
        queue_item_pk: UUID,
        action: ModerationAction,
        performed_by: UUID,
        justification: str,
        retention_days: int | None = None,
    ) -> ModerationDecision | None:
        """Resolve a live queue item and write its audit trail atomically.

        The resolve is conditional on the item not already being resolved, so
        of two concurrent calls exactly one writes a log row. Returns None when
        the item is missing or already resolved. A soft delete record is
        written only when ``retention_days`` is given.
        """
        async with get_db_transaction() as conn:
            item_record = await conn.fetchrow(
                """
                UPDATE moderation_queue
                SET status = $2,
                    justification = $3,
                    resolved_at = NOW(),
                    updated_at = NOW()
                WHERE pk = $1 AND status <> $2
                RETURNING *
                """,
                queue_item_pk,
                QueueStatus.RESOLVED.value,
                justification,
            )
            if item_record is None:
                return None

            item = ModerationQueueItem.model_validate(dict(item_record))
            metadata = {
                "content_type": item.content_type,
                "content_id": str(item.content_id),
                "ai_score": item.ai_score,
                "report_count": item.report_count,
            }

            log_record = await conn.fetchrow(
                f"""
                INSERT INTO {self.table_name}
                    (queue_item_pk, action, performed_by, justification, metadata)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING *
                """,  # nosec B608
                queue_item_pk,
                ModerationAction(action).value,
                performed_by,
                justification,
                metadata,
            )

            soft_delete = None
            if retention_days is not None:
                soft_delete_record = await conn.fetchrow(
                    """
                    INSERT INTO soft_delete_records (
                        content_type, content_id, deleted_by, reason,
                        deleted_at, expires_at, metadata
                    )
                    VALUES (
                        $1, $2, $3, $4,
                        NOW(), NOW() + make_interval(days => $5::int), $6
                    )
                    RETURNING *
                    """,
                    item.content_type,
                    item.content_id,
                    performed_by,
                    justification,
                    retention_days,
                    {
                        "queue_item_pk": str(queue_item_pk),
                        "action": ModerationAction(action).value,
                    },
                )
                soft_delete = SoftDeleteRecord.model_validate(dict(soft_delete_record))

            return ModerationDecision(
                item=item,
                log=self._record_to_model(log_record),
                soft_delete=soft_delete,
            )

    async def get_logs_for_item(self, queue_item_pk: UUID) -> list[ModerationActionLog]:
        """Get the audit trail for a queue item, oldest first."""
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE queue_item_pk = $1
            ORDER BY created_at ASC, pk ASC
        """  # nosec B608

        async with get_db_connection() as conn:
            records = await conn.fetch(query, queue_item_pk)
            return [self._record_to_model(r) for r in records]


class SoftDeleteRepository(BaseRepository[SoftDeleteRecord]):
    """Repository for soft delete tombstones."""

    def __init__(self) -> None:
        super().__init__("soft_delete_records")

    def _record_to_model(self, record: Record) -> SoftDeleteRecord:
        """Convert database record to SoftDeleteRecord model."""
        return SoftDeleteRecord.model_validate(dict(record))

    async def get_for_content(
        self, content_type: ModerationContentType, content_id: UUID
    ) -> list[SoftDeleteRecord]:
        """Get tombstones for a piece of content, newest first."""
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE content_type = $1 AND content_id = $2
            ORDER BY deleted_at DESC
        """  # nosec B608

        async with get_db_connection() as conn:
            records = await conn.fetch(
                query, ModerationContentType(content_type).value, content_id
            )
            return [self._record_to_model(r) for r in records]

    async def delete_expired(self, now: datetime) -> int:
        """Purge every tombstone whose retention window closed at or before now."""
        query = f"DELETE FROM {self.table_name} WHERE expires_at <= $1"  # nosec B608

        async with get_db_connection() as conn:
            result = await conn.execute(query, now)
            # asyncpg returns the command tag, e.g. "DELETE 3"
            return int(result.split()[-1])
