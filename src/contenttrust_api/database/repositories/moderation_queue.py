"""Moderation queue repository."""

from uuid import UUID

from asyncpg import Record

from contenttrust_api.database.connection import get_db_connection
from contenttrust_api.database.models.base import ModerationContentType
from contenttrust_api.database.models.base import ModerationPriority
from contenttrust_api.database.models.base import QueueStatus
from contenttrust_api.database.models.base import SortOrder
from contenttrust_api.database.models.moderation_queue import ModerationQueueItem
from contenttrust_api.database.models.moderation_queue import QueueCount
from contenttrust_api.database.models.moderation_queue import QueueQuery
from contenttrust_api.database.models.moderation_queue import QueueSortField
from contenttrust_api.database.repositories.base import BaseRepository

PRIORITY_RANK_SQL = """
    CASE {column}
        WHEN 'urgent' THEN 4
        WHEN 'high' THEN 3
        WHEN 'medium' THEN 2
        ELSE 1
    END
"""


def _order_by(sort_by: QueueSortField, sort_order: SortOrder) -> str:
    """Build a total ORDER BY so identical queries page identically."""
    direction = "ASC" if sort_order == SortOrder.ASC else "DESC"

    if sort_by == QueueSortField.PRIORITY:
        rank = PRIORITY_RANK_SQL.format(column="priority")
        return f"{rank} {direction}, created_at DESC, pk DESC"
    if sort_by == QueueSortField.AI_SCORE:
        return f"COALESCE(ai_score, 0) {direction}, created_at DESC, pk DESC"
    return f"created_at {direction}, pk {direction}"


class ModerationQueueRepository(BaseRepository[ModerationQueueItem]):
    """Repository for moderation queue operations."""

    def __init__(self) -> None:
        super().__init__("moderation_queue")

    def _record_to_model(self, record: Record) -> ModerationQueueItem:
        """Convert database record to ModerationQueueItem model."""
        data = dict(record)
        data.pop("total_count", None)
        return ModerationQueueItem.model_validate(data)

    async def upsert_report(
        self,
        content_type: ModerationContentType,
        content_id: UUID,
        reporter_pk: UUID,
        ai_score: float | None = None,
        auto_flagged: bool = False,
        auto_reason: str | None = None,
    ) -> ModerationQueueItem:
        """Create the live item for a piece of content or fold a report into it.

        A single statement against the partial unique index on live items, so
        concurrent reports on the same content neither duplicate the item nor
        lose a reporter. Repeat reporters leave ``report_count`` unchanged.
        """
        query = f"""
            INSERT INTO {self.table_name} AS q (
                content_type, content_id, reported_by, report_count,
                ai_score, auto_flagged, auto_reason
            )
            VALUES ($1, $2, ARRAY[$3::uuid], 1, $4, $5, $6)
            ON CONFLICT (content_type, content_id) WHERE status <> 'resolved'
            DO UPDATE SET
                reported_by = CASE
                    WHEN $3::uuid = ANY(q.reported_by) THEN q.reported_by
                    ELSE array_append(q.reported_by, $3::uuid)
                END,
                report_count = CASE
                    WHEN $3::uuid = ANY(q.reported_by) THEN q.report_count
                    ELSE q.report_count + 1
                END,
                ai_score = COALESCE(EXCLUDED.ai_score, q.ai_score),
                auto_flagged = q.auto_flagged OR EXCLUDED.auto_flagged,
                auto_reason = COALESCE(EXCLUDED.auto_reason, q.auto_reason),
                updated_at = NOW()
            RETURNING *
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(
                query,
                ModerationContentType(content_type).value,
                content_id,
                reporter_pk,
                ai_score,
                auto_flagged,
                auto_reason,
            )
            if record is None:
                raise ValueError("Failed to record moderation report")
            return self._record_to_model(record)

    async def raise_priority(
        self, pk: UUID, priority: ModerationPriority
    ) -> ModerationQueueItem | None:
        """Move an item up to ``priority``; never lowers it.

        Returns None when the stored priority is already at or above it.
        """
        rank_stored = PRIORITY_RANK_SQL.format(column="priority")
        rank_new = PRIORITY_RANK_SQL.format(column="$2::text")
        query = f"""
            UPDATE {self.table_name}
            SET priority = $2, updated_at = NOW()
            WHERE pk = $1 AND {rank_stored} < {rank_new}
            RETURNING *
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(query, pk, ModerationPriority(priority).value)
            return self._record_to_model(record) if record else None

    async def set_priority(
        self, pk: UUID, priority: ModerationPriority
    ) -> ModerationQueueItem | None:
        """Override the priority of a live item in either direction."""
        query = f"""
            UPDATE {self.table_name}
            SET priority = $2, updated_at = NOW()
            WHERE pk = $1 AND status <> 'resolved'
            RETURNING *
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(query, pk, ModerationPriority(priority).value)
            return self._record_to_model(record) if record else None

    async def assign(self, pk: UUID, moderator_pk: UUID) -> ModerationQueueItem | None:
        """Hand a live item to a moderator and mark it in review."""
        query = f"""
            UPDATE {self.table_name}
            SET assigned_to = $2,
                assigned_at = NOW(),
                status = $3,
                updated_at = NOW()
            WHERE pk = $1 AND status <> 'resolved'
            RETURNING *
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(
                query, pk, moderator_pk, QueueStatus.IN_REVIEW.value
            )
            return self._record_to_model(record) if record else None

    async def get_live_item(
        self, content_type: ModerationContentType, content_id: UUID
    ) -> ModerationQueueItem | None:
        """Get the non-resolved item for a piece of content, if any."""
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE content_type = $1 AND content_id = $2 AND status <> 'resolved'
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(
                query, ModerationContentType(content_type).value, content_id
            )
            return self._record_to_model(record) if record else None

    async def get_page(self, params: QueueQuery) -> tuple[list[ModerationQueueItem], int]:
        """Get one page of items and the filter's total from a single snapshot."""
        status_filter = QueueStatus(params.status).value if params.status else None
        offset = (params.page - 1) * params.page_size
        order_by = _order_by(params.sort_by, params.sort_order)

        query = f"""
            SELECT *, COUNT(*) OVER () AS total_count
            FROM {self.table_name}
            WHERE content_type = $1
            AND ($2::text IS NULL OR status = $2)
            ORDER BY {order_by}
            LIMIT $3 OFFSET $4
        """  # nosec B608

        async with get_db_connection() as conn:
            records = await conn.fetch(
                query,
                ModerationContentType(params.content_type).value,
                status_filter,
                params.page_size,
                offset,
            )
            if records:
                return [self._record_to_model(r) for r in records], records[0][
                    "total_count"
                ]

            # Past the last page: no rows carry the window count
            total = await conn.fetchval(
                f"""
                SELECT COUNT(*) FROM {self.table_name}
                WHERE content_type = $1 AND ($2::text IS NULL OR status = $2)
                """,  # nosec B608
                ModerationContentType(params.content_type).value,
                status_filter,
            )
            return [], int(total or 0)

    async def get_counts(self) -> list[QueueCount]:
        """Count live items grouped by content type and status."""
        query = f"""
            SELECT content_type, status, COUNT(*) AS count
            FROM {self.table_name}
            WHERE status <> 'resolved'
            GROUP BY content_type, status
            ORDER BY content_type, status
        """  # nosec B608

        async with get_db_connection() as conn:
            records = await conn.fetch(query)
            return [QueueCount.model_validate(dict(r)) for r in records]
