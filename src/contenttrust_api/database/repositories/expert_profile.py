"""Expert profile repository."""

from datetime import datetime
from uuid import UUID

from asyncpg import Record

from contenttrust_api.database.connection import get_db_connection
from contenttrust_api.database.models.expert import ExpertProfile
from contenttrust_api.database.models.expert import ExpertStatus
from contenttrust_api.database.repositories.base import BaseRepository

# A stored 'verified' row past its expiry reads as expired
_EXPIRED_SQL = "(status = 'expired' OR (status = 'verified' AND expires_at <= $1))"
_VERIFIED_SQL = "(status = 'verified' AND (expires_at IS NULL OR expires_at > $1))"


class ExpertProfileRepository(BaseRepository[ExpertProfile]):
    """Repository for expert credential profiles."""

    def __init__(self) -> None:
        super().__init__("expert_profiles")

    def _record_to_model(self, record: Record) -> ExpertProfile:
        """Convert database record to ExpertProfile model."""
        return ExpertProfile.model_validate(dict(record))

    async def get_by_user(self, user_pk: UUID) -> ExpertProfile | None:
        """Get the profile belonging to a user."""
        query = f"SELECT * FROM {self.table_name} WHERE user_pk = $1"  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(query, user_pk)
            return self._record_to_model(record) if record else None

    async def create_application(
        self,
        user_pk: UUID,
        credential: str,
        license_no: str | None = None,
        region: str | None = None,
    ) -> ExpertProfile | None:
        """Insert a pending profile; None if the user already has one."""
        query = f"""
            INSERT INTO {self.table_name} (user_pk, credential, license_no, region, status)
            VALUES ($1, $2, $3, $4, 'pending')
            ON CONFLICT (user_pk) DO NOTHING
            RETURNING *
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(query, user_pk, credential, license_no, region)
            return self._record_to_model(record) if record else None

    async def reopen_application(
        self,
        user_pk: UUID,
        credential: str,
        license_no: str | None,
        region: str | None,
        now: datetime,
    ) -> ExpertProfile | None:
        """Return a revoked or expired profile to pending with fresh credentials.

        Verification stamps are cleared. None when the profile is pending or
        still effectively verified.
        """
        query = f"""
            UPDATE {self.table_name}
            SET status = 'pending',
                credential = $3,
                license_no = $4,
                region = $5,
                verified_at = NULL,
                expires_at = NULL,
                revoked_at = NULL,
                reviewed_by = NULL,
                review_notes = NULL,
                updated_at = NOW()
            WHERE user_pk = $2
            AND (status = 'revoked' OR {_EXPIRED_SQL})
            RETURNING *
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(
                query, now, user_pk, credential, license_no, region
            )
            return self._record_to_model(record) if record else None

    async def verify(
        self,
        user_pk: UUID,
        validity_days: int,
        reviewed_by: UUID | None = None,
        review_notes: str | None = None,
    ) -> ExpertProfile | None:
        """Move a pending profile to verified; None unless it was pending."""
        query = f"""
            UPDATE {self.table_name}
            SET status = 'verified',
                verified_at = NOW(),
                expires_at = NOW() + make_interval(days => $2::int),
                reviewed_by = $3,
                review_notes = $4,
                updated_at = NOW()
            WHERE user_pk = $1 AND status = 'pending'
            RETURNING *
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(
                query, user_pk, validity_days, reviewed_by, review_notes
            )
            return self._record_to_model(record) if record else None

    async def revoke(
        self,
        user_pk: UUID,
        reviewed_by: UUID | None = None,
        review_notes: str | None = None,
    ) -> ExpertProfile | None:
        """Revoke any non-revoked profile; None if absent or already revoked."""
        query = f"""
            UPDATE {self.table_name}
            SET status = 'revoked',
                revoked_at = NOW(),
                reviewed_by = COALESCE($2, reviewed_by),
                review_notes = COALESCE($3, review_notes),
                updated_at = NOW()
            WHERE user_pk = $1 AND status <> 'revoked'
            RETURNING *
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(query, user_pk, reviewed_by, review_notes)
            return self._record_to_model(record) if record else None

    async def extend(self, user_pk: UUID, months: int) -> ExpertProfile | None:
        """Push expiry forward by calendar months from max(now, expires_at).

        Only verified or expired profiles qualify; the row returns to
        verified. None when the profile is pending, revoked or absent.
        """
        query = f"""
            UPDATE {self.table_name}
            SET status = 'verified',
                expires_at = GREATEST(NOW(), COALESCE(expires_at, NOW()))
                    + make_interval(months => $2::int),
                updated_at = NOW()
            WHERE user_pk = $1 AND status IN ('verified', 'expired')
            RETURNING *
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(query, user_pk, months)
            return self._record_to_model(record) if record else None

    async def list_profiles(
        self,
        now: datetime,
        status: ExpertStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ExpertProfile]:
        """List profiles filtered by effective status."""
        conditions = {
            ExpertStatus.PENDING.value: "status = 'pending'",
            ExpertStatus.REVOKED.value: "status = 'revoked'",
            ExpertStatus.VERIFIED.value: _VERIFIED_SQL,
            ExpertStatus.EXPIRED.value: _EXPIRED_SQL,
        }
        where = conditions[ExpertStatus(status).value] if status else "TRUE"
        # $1 stays bound for every filter so the parameter list is fixed

        query = f"""
            SELECT * FROM {self.table_name}
            WHERE $1::timestamptz IS NOT NULL AND {where}
            ORDER BY created_at DESC, pk DESC
            LIMIT $2 OFFSET $3
        """  # nosec B608

        async with get_db_connection() as conn:
            records = await conn.fetch(query, now, limit, offset)
            return [self._record_to_model(r) for r in records]

    async def get_needing_renewal(
        self, now: datetime, within_days: int
    ) -> list[ExpertProfile]:
        """Effectively verified profiles expiring within the window, soonest first."""
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE status = 'verified'
            AND expires_at > $1
            AND expires_at <= $1::timestamptz + make_interval(days => $2::int)
            ORDER BY expires_at ASC
        """  # nosec B608

        async with get_db_connection() as conn:
            records = await conn.fetch(query, now, within_days)
            return [self._record_to_model(r) for r in records]
