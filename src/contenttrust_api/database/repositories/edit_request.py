"""Edit request and edit request audit log repositories."""

from datetime import datetime
from datetime import timedelta
from typing import Any
from uuid import UUID

from asyncpg import Connection
from asyncpg import Record

from contenttrust_api.database.connection import get_db_connection
from contenttrust_api.database.connection import get_db_transaction
from contenttrust_api.database.models.edit_request import EditModerationStats
from contenttrust_api.database.models.edit_request import EditRequest
from contenttrust_api.database.models.edit_request import EditRequestAuditAction
from contenttrust_api.database.models.edit_request import EditRequestAuditLog
from contenttrust_api.database.models.edit_request import EditRequestContentType
from contenttrust_api.database.models.edit_request import EditRequestFilter
from contenttrust_api.database.models.edit_request import EditRequestPriority
from contenttrust_api.database.models.edit_request import EditRequestStatus
from contenttrust_api.database.repositories.base import BaseRepository

EDIT_PRIORITY_RANK_SQL = """
    CASE priority
        WHEN 'high' THEN 3
        WHEN 'medium' THEN 2
        ELSE 1
    END
"""

INSERT_AUDIT_LOG_SQL = """
    INSERT INTO edit_request_audit_logs
        (edit_request_pk, action, performed_by, reason, metadata)
    VALUES ($1, $2, $3, $4, $5)
    RETURNING *
"""


async def _insert_audit_log(
    conn: Connection,
    edit_request_pk: UUID,
    action: EditRequestAuditAction,
    performed_by: UUID,
    reason: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> Record:
    return await conn.fetchrow(
        INSERT_AUDIT_LOG_SQL,
        edit_request_pk,
        EditRequestAuditAction(action).value,
        performed_by,
        reason,
        metadata or {},
    )


class EditRequestRepository(BaseRepository[EditRequest]):
    """Repository for community edit requests."""

    def __init__(self) -> None:
        super().__init__("edit_requests")

    def _record_to_model(self, record: Record) -> EditRequest:
        """Convert database record to EditRequest model."""
        data = dict(record)
        data.pop("total_count", None)
        return EditRequest.model_validate(data)

    async def count_recent(self, author_pk: UUID, now: datetime) -> tuple[int, int]:
        """Count an author's requests in the trailing hour and trailing day."""
        query = f"""
            SELECT
                COUNT(*) FILTER (WHERE created_at > $2::timestamptz - INTERVAL '1 hour') AS hour_count,
                COUNT(*) AS day_count
            FROM {self.table_name}
            WHERE author_pk = $1
            AND created_at > $2::timestamptz - INTERVAL '24 hours'
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(query, author_pk, now)
            if record is None:
                return 0, 0
            return record["hour_count"] or 0, record["day_count"] or 0

    async def create_request(
        self,
        author_pk: UUID,
        content_type: EditRequestContentType,
        content_id: UUID,
        original_data: dict[str, Any],
        edited_data: dict[str, Any],
        changes_summary: str,
        priority: EditRequestPriority = EditRequestPriority.LOW,
        reason: str | None = None,
    ) -> EditRequest:
        """Store a new pending edit request and its ``created`` audit entry."""
        query = f"""
            INSERT INTO {self.table_name} (
                author_pk, content_type, content_id, original_data,
                edited_data, changes_summary, priority, reason
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING *
        """  # nosec B608

        async with get_db_transaction() as conn:
            record = await conn.fetchrow(
                query,
                author_pk,
                EditRequestContentType(content_type).value,
                content_id,
                original_data,
                edited_data,
                changes_summary,
                EditRequestPriority(priority).value,
                reason,
            )
            if record is None:
                raise ValueError(f"Failed to create record in {self.table_name}")

            await _insert_audit_log(
                conn,
                record["pk"],
                EditRequestAuditAction.CREATED,
                author_pk,
                reason,
                {"priority": record["priority"]},
            )
            return self._record_to_model(record)

    async def review(
        self,
        pk: UUID,
        status: EditRequestStatus,
        reviewed_by: UUID,
        reason: str | None = None,
    ) -> EditRequest | None:
        """Approve or reject a pending request and record the decision.

        The status change and its audit entry are written in one transaction.
        Returns None unless the request was still pending.
        """
        query = f"""
            UPDATE {self.table_name}
            SET status = $2,
                reviewed_by = $3,
                reviewed_at = NOW(),
                reason = COALESCE($4, reason),
                updated_at = NOW()
            WHERE pk = $1 AND status = 'pending'
            RETURNING *
        """  # nosec B608
        status_value = EditRequestStatus(status).value

        async with get_db_transaction() as conn:
            record = await conn.fetchrow(query, pk, status_value, reviewed_by, reason)
            if record is None:
                return None

            await _insert_audit_log(
                conn,
                pk,
                EditRequestAuditAction(status_value),
                reviewed_by,
                reason,
            )
            return self._record_to_model(record)

    async def list_page(
        self,
        filters: EditRequestFilter,
        page: int,
        page_size: int,
        now: datetime,
    ) -> tuple[list[EditRequest], int]:
        """Get a page of requests, highest priority first, then oldest first."""
        conditions = []
        params: list[Any] = []

        def add(condition: str, value: Any) -> None:
            params.append(value)
            conditions.append(condition.format(p=f"${len(params)}"))

        if filters.content_type:
            add("content_type = {p}", EditRequestContentType(filters.content_type).value)
        if filters.status:
            add("status = {p}", EditRequestStatus(filters.status).value)
        if filters.author_pk:
            add("author_pk = {p}", filters.author_pk)
        if filters.priority:
            add("priority = {p}", EditRequestPriority(filters.priority).value)
        if filters.min_age_hours is not None:
            add("created_at <= {p}", now - timedelta(hours=filters.min_age_hours))
        if filters.max_age_hours is not None:
            add("created_at >= {p}", now - timedelta(hours=filters.max_age_hours))

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.extend([page_size, (page - 1) * page_size])

        query = f"""
            SELECT *, COUNT(*) OVER () AS total_count
            FROM {self.table_name}
            {where}
            ORDER BY {EDIT_PRIORITY_RANK_SQL} DESC, created_at ASC, pk ASC
            LIMIT ${len(params) - 1} OFFSET ${len(params)}
        """  # nosec B608

        async with get_db_connection() as conn:
            records = await conn.fetch(query, *params)
            if records:
                return [self._record_to_model(r) for r in records], records[0][
                    "total_count"
                ]

            total = await conn.fetchval(
                f"SELECT COUNT(*) FROM {self.table_name} {where}",  # nosec B608
                *params[:-2],
            )
            return [], int(total or 0)

    async def get_stats(self) -> EditModerationStats:
        """Summarise the review backlog and average processing time."""
        totals_query = f"""
            SELECT
                COUNT(*) FILTER (WHERE status = 'pending') AS total_pending,
                COUNT(*) FILTER (WHERE status = 'approved') AS total_approved,
                COUNT(*) FILTER (WHERE status = 'rejected') AS total_rejected,
                COALESCE(
                    AVG(EXTRACT(EPOCH FROM (reviewed_at - created_at)) / 3600)
                        FILTER (WHERE reviewed_at IS NOT NULL),
                    0
                ) AS avg_processing_hours
            FROM {self.table_name}
        """  # nosec B608
        by_type_query = f"""
            SELECT content_type, COUNT(*) AS count
            FROM {self.table_name}
            WHERE status = 'pending'
            GROUP BY content_type
        """  # nosec B608
        oldest_query = f"""
            SELECT pk FROM {self.table_name}
            WHERE status = 'pending'
            ORDER BY created_at ASC, pk ASC
            LIMIT 1
        """  # nosec B608

        async with get_db_connection() as conn:
            totals = await conn.fetchrow(totals_query)
            by_type = await conn.fetch(by_type_query)
            oldest_pk = await conn.fetchval(oldest_query)

        return EditModerationStats(
            total_pending=totals["total_pending"],
            total_approved=totals["total_approved"],
            total_rejected=totals["total_rejected"],
            pending_by_type={r["content_type"]: r["count"] for r in by_type},
            avg_processing_hours=round(float(totals["avg_processing_hours"]), 2),
            oldest_pending_pk=oldest_pk,
        )


class EditRequestAuditRepository(BaseRepository[EditRequestAuditLog]):
    """Repository for the append-only edit request audit log."""

    def __init__(self) -> None:
        super().__init__("edit_request_audit_logs")

    def _record_to_model(self, record: Record) -> EditRequestAuditLog:
        """Convert database record to EditRequestAuditLog model."""
        return EditRequestAuditLog.model_validate(dict(record))

    async def get_for_request(self, edit_request_pk: UUID) -> list[EditRequestAuditLog]:
        """Get the audit trail for an edit request, oldest first."""
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE edit_request_pk = $1
            ORDER BY created_at ASC, pk ASC
        """  # nosec B608

        async with get_db_connection() as conn:
            records = await conn.fetch(query, edit_request_pk)
            return [self._record_to_model(r) for r in records]
