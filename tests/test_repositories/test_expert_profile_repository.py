"""Tests for ExpertProfileRepository."""

from datetime import UTC
from datetime import datetime
from datetime import timedelta
from unittest.mock import patch
from uuid import uuid4

import pytest

from contenttrust_api.database.models.expert import ExpertStatus
from contenttrust_api.database.repositories.expert_profile import (
    ExpertProfileRepository,
)

MODULE = "contenttrust_api.database.repositories.expert_profile"


@pytest.fixture
def profile_repo():
    return ExpertProfileRepository()


@pytest.fixture
def profile_record():
    now = datetime.now(UTC)
    return {
        "pk": uuid4(),
        "user_pk": uuid4(),
        "credential": "DVM",
        "license_no": "VET-1234",
        "region": "CA",
        "status": "verified",
        "verified_at": now,
        "expires_at": now + timedelta(days=365),
        "revoked_at": None,
        "reviewed_by": None,
        "review_notes": None,
        "created_at": now,
        "updated_at": None,
    }


class TestExpertProfileRepository:
    """Conditional state transitions and effective status filters."""

    @pytest.mark.asyncio
    async def test_create_application_conflict_returns_none(
        self, profile_repo, mock_connection
    ):
        mock_connection.fetchrow.return_value = None

        with patch(f"{MODULE}.get_db_connection") as mock_get_db:
            mock_get_db.return_value.__aenter__.return_value = mock_connection

            result = await profile_repo.create_application(uuid4(), "DVM")

        assert "ON CONFLICT (user_pk) DO NOTHING" in mock_connection.fetchrow.call_args.args[0]
        assert result is None

    @pytest.mark.asyncio
    async def test_verify_only_from_pending(
        self, profile_repo, mock_connection, profile_record
    ):
        reviewer = uuid4()
        mock_connection.fetchrow.return_value = profile_record

        with patch(f"{MODULE}.get_db_connection") as mock_get_db:
            mock_get_db.return_value.__aenter__.return_value = mock_connection

            profile = await profile_repo.verify(
                profile_record["user_pk"], 365, reviewer, "Checked"
            )

        query, *args = mock_connection.fetchrow.call_args.args
        assert "status = 'pending'" in query
        assert "make_interval(days => $2::int)" in query
        assert args == [profile_record["user_pk"], 365, reviewer, "Checked"]
        assert profile.status == ExpertStatus.VERIFIED

    @pytest.mark.asyncio
    async def test_extend_counts_from_later_of_now_and_expiry(
        self, profile_repo, mock_connection, profile_record
    ):
        mock_connection.fetchrow.return_value = profile_record

        with patch(f"{MODULE}.get_db_connection") as mock_get_db:
            mock_get_db.return_value.__aenter__.return_value = mock_connection

            await profile_repo.extend(profile_record["user_pk"], 6)

        query, *args = mock_connection.fetchrow.call_args.args
        assert "GREATEST(NOW(), COALESCE(expires_at, NOW()))" in query
        assert "status IN ('verified', 'expired')" in query
        assert args == [profile_record["user_pk"], 6]

    @pytest.mark.asyncio
    async def test_revoke_skips_revoked(self, profile_repo, mock_connection):
        mock_connection.fetchrow.return_value = None

        with patch(f"{MODULE}.get_db_connection") as mock_get_db:
            mock_get_db.return_value.__aenter__.return_value = mock_connection

            result = await profile_repo.revoke(uuid4())

        assert "status <> 'revoked'" in mock_connection.fetchrow.call_args.args[0]
        assert result is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "fragment"),
        [
            (None, "TRUE"),
            (ExpertStatus.PENDING, "status = 'pending'"),
            (ExpertStatus.VERIFIED, "expires_at > $1"),
            (ExpertStatus.EXPIRED, "expires_at <= $1"),
        ],
    )
    async def test_list_profiles_by_effective_status(
        self, profile_repo, mock_connection, status, fragment
    ):
        now = datetime.now(UTC)
        mock_connection.fetch.return_value = []

        with patch(f"{MODULE}.get_db_connection") as mock_get_db:
            mock_get_db.return_value.__aenter__.return_value = mock_connection

            await profile_repo.list_profiles(now, status, limit=10, offset=20)

        query, *args = mock_connection.fetch.call_args.args
        assert fragment in query
        assert args == [now, 10, 20]

    @pytest.mark.asyncio
    async def test_get_needing_renewal(
        self, profile_repo, mock_connection, profile_record
    ):
        now = datetime.now(UTC)
        mock_connection.fetch.return_value = [profile_record]

        with patch(f"{MODULE}.get_db_connection") as mock_get_db:
            mock_get_db.return_value.__aenter__.return_value = mock_connection

            profiles = await profile_repo.get_needing_renewal(now, 30)

        query, *args = mock_connection.fetch.call_args.args
        assert "ORDER BY expires_at ASC" in query
        assert args == [now, 30]
        assert profiles[0].user_pk == profile_record["user_pk"]
