"""Tests for ExpertVerificationService."""

from datetime import UTC
from datetime import datetime
from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from contenttrust_api.database.models.expert import ExpertApplication
from contenttrust_api.database.models.expert import ExpertProfile
from contenttrust_api.database.models.expert import ExpertStatus
from contenttrust_api.exceptions import NotFoundError
from contenttrust_api.exceptions import ValidationError
from contenttrust_api.services.expert_verification_service import (
    ExpertVerificationService,
)


@pytest.fixture
def mock_profile_repo():
    """Mock ExpertProfileRepository."""
    return AsyncMock()


@pytest.fixture
def expert_service(mock_profile_repo, moderation_settings):
    """ExpertVerificationService with mocked dependencies."""
    return ExpertVerificationService(
        profile_repo=mock_profile_repo, settings=moderation_settings
    )


@pytest.fixture
def make_profile():
    """Factory for expert profiles."""

    def _make(**overrides) -> ExpertProfile:
        data = {
            "pk": uuid4(),
            "user_pk": uuid4(),
            "credential": "DVM",
            "license_no": "VET-1234",
            "region": "CA",
            "status": ExpertStatus.PENDING,
            "created_at": datetime.now(UTC) - timedelta(days=400),
        }
        data.update(overrides)
        return ExpertProfile(**data)

    return _make


@pytest.fixture
def application():
    return ExpertApplication(credential="DVM", license_no="VET-1234", region="CA")


class TestEffectiveStatus:
    """Expiry is read off the stored row."""

    def test_verified_in_window(self, make_profile):
        now = datetime.now(UTC)
        profile = make_profile(
            status=ExpertStatus.VERIFIED, expires_at=now + timedelta(days=10)
        )

        assert profile.is_effectively_verified(now)
        assert profile.effective_status(now) == ExpertStatus.VERIFIED

    def test_verified_past_expiry_reads_expired(self, make_profile):
        now = datetime.now(UTC)
        profile = make_profile(
            status=ExpertStatus.VERIFIED, expires_at=now - timedelta(seconds=1)
        )

        assert not profile.is_effectively_verified(now)
        assert profile.effective_status(now) == ExpertStatus.EXPIRED

    def test_pending_is_not_verified(self, make_profile):
        assert not make_profile().is_effectively_verified(datetime.now(UTC))


class TestSubmitApplication:
    """Applying for verification."""

    @pytest.mark.asyncio
    async def test_first_application(
        self, expert_service, mock_profile_repo, make_profile, application
    ):
        user_pk = uuid4()
        mock_profile_repo.get_by_user.return_value = None
        mock_profile_repo.create_application.return_value = make_profile(
            user_pk=user_pk
        )

        profile = await expert_service.submit_application(user_pk, application)

        assert profile.status == "pending"
        mock_profile_repo.create_application.assert_called_once_with(
            user_pk, "DVM", "VET-1234", "CA"
        )

    @pytest.mark.asyncio
    async def test_pending_application_is_refused(
        self, expert_service, mock_profile_repo, make_profile, application
    ):
        mock_profile_repo.get_by_user.return_value = make_profile()

        with pytest.raises(ValidationError, match="already pending"):
            await expert_service.submit_application(uuid4(), application)

    @pytest.mark.asyncio
    async def test_verified_expert_cannot_reapply(
        self, expert_service, mock_profile_repo, make_profile, application
    ):
        mock_profile_repo.get_by_user.return_value = make_profile(
            status=ExpertStatus.VERIFIED,
            expires_at=datetime.now(UTC) + timedelta(days=30),
        )

        with pytest.raises(ValidationError, match="already a verified expert"):
            await expert_service.submit_application(uuid4(), application)

    @pytest.mark.asyncio
    async def test_revoked_expert_reapplies(
        self, expert_service, mock_profile_repo, make_profile, application
    ):
        user_pk = uuid4()
        mock_profile_repo.get_by_user.return_value = make_profile(
            user_pk=user_pk, status=ExpertStatus.REVOKED
        )
        mock_profile_repo.reopen_application.return_value = make_profile(
            user_pk=user_pk
        )

        profile = await expert_service.submit_application(user_pk, application)

        assert profile.status == "pending"
        mock_profile_repo.reopen_application.assert_called_once()

    @pytest.mark.asyncio
    async def test_concurrent_first_application(
        self, expert_service, mock_profile_repo, application
    ):
        mock_profile_repo.get_by_user.return_value = None
        mock_profile_repo.create_application.return_value = None

        with pytest.raises(ValidationError, match="already pending"):
            await expert_service.submit_application(uuid4(), application)


class TestTransitions:
    """verify, revoke and extend."""

    @pytest.mark.asyncio
    async def test_verify_pending(
        self, expert_service, mock_profile_repo, make_profile
    ):
        profile = make_profile()
        reviewer = uuid4()
        verified = profile.model_copy(
            update={
                "status": "verified",
                "verified_at": datetime.now(UTC),
                "expires_at": datetime.now(UTC) + timedelta(days=365),
            }
        )
        mock_profile_repo.get_by_user.return_value = profile
        mock_profile_repo.verify.return_value = verified

        result = await expert_service.verify(profile.user_pk, reviewer, "Checked")

        assert result.status == "verified"
        mock_profile_repo.verify.assert_called_once_with(
            profile.user_pk, 365, reviewer, "Checked"
        )

    @pytest.mark.asyncio
    async def test_verify_missing_profile(self, expert_service, mock_profile_repo):
        mock_profile_repo.get_by_user.return_value = None

        with pytest.raises(NotFoundError):
            await expert_service.verify(uuid4())

    @pytest.mark.asyncio
    async def test_verify_revoked_is_refused(
        self, expert_service, mock_profile_repo, make_profile
    ):
        mock_profile_repo.get_by_user.return_value = make_profile(
            status=ExpertStatus.REVOKED
        )

        with pytest.raises(ValidationError, match="Cannot verify .* revoked"):
            await expert_service.verify(uuid4())

        mock_profile_repo.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_revoke_verified(
        self, expert_service, mock_profile_repo, make_profile
    ):
        profile = make_profile(
            status=ExpertStatus.VERIFIED,
            expires_at=datetime.now(UTC) + timedelta(days=100),
        )
        mock_profile_repo.get_by_user.return_value = profile
        mock_profile_repo.revoke.return_value = profile.model_copy(
            update={"status": "revoked", "revoked_at": datetime.now(UTC)}
        )

        result = await expert_service.revoke(profile.user_pk, uuid4(), "License lapsed")

        assert result.status == "revoked"

    @pytest.mark.asyncio
    async def test_revoke_twice_is_refused(
        self, expert_service, mock_profile_repo, make_profile
    ):
        mock_profile_repo.get_by_user.return_value = make_profile(
            status=ExpertStatus.REVOKED
        )

        with pytest.raises(ValidationError):
            await expert_service.revoke(uuid4())

    @pytest.mark.asyncio
    async def test_extend_expired(
        self, expert_service, mock_profile_repo, make_profile
    ):
        now = datetime.now(UTC)
        profile = make_profile(
            status=ExpertStatus.VERIFIED, expires_at=now - timedelta(days=3)
        )
        mock_profile_repo.get_by_user.return_value = profile
        mock_profile_repo.extend.return_value = profile.model_copy(
            update={"expires_at": now + timedelta(days=180)}
        )

        result = await expert_service.extend(profile.user_pk, 6)

        assert result.is_effectively_verified(now)
        mock_profile_repo.extend.assert_called_once_with(profile.user_pk, 6)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [ExpertStatus.PENDING, ExpertStatus.REVOKED])
    async def test_extend_refused_outside_verified(
        self, expert_service, mock_profile_repo, make_profile, status
    ):
        mock_profile_repo.get_by_user.return_value = make_profile(status=status)

        with pytest.raises(ValidationError, match="Cannot extend"):
            await expert_service.extend(uuid4(), 3)

        mock_profile_repo.extend.assert_not_called()

    @pytest.mark.asyncio
    async def test_extend_needs_positive_months(
        self, expert_service, mock_profile_repo
    ):
        with pytest.raises(ValidationError, match="at least one month"):
            await expert_service.extend(uuid4(), 0)

        mock_profile_repo.get_by_user.assert_not_called()


class TestReads:
    """Effective verification reads."""

    @pytest.mark.asyncio
    async def test_no_profile_is_not_verified(self, expert_service, mock_profile_repo):
        mock_profile_repo.get_by_user.return_value = None

        assert await expert_service.is_effectively_verified(uuid4()) is False

    @pytest.mark.asyncio
    async def test_status_reports_expiry(
        self, expert_service, mock_profile_repo, make_profile
    ):
        profile = make_profile(
            status=ExpertStatus.VERIFIED,
            expires_at=datetime.now(UTC) - timedelta(days=1),
        )
        mock_profile_repo.get_by_user.return_value = profile

        status = await expert_service.get_verification_status(profile.user_pk)

        assert status.status == ExpertStatus.EXPIRED
        assert status.is_effectively_verified is False
        assert status.expires_at == profile.expires_at

    @pytest.mark.asyncio
    async def test_status_without_profile(self, expert_service, mock_profile_repo):
        mock_profile_repo.get_by_user.return_value = None

        status = await expert_service.get_verification_status(uuid4())

        assert status.status is None
        assert status.is_effectively_verified is False

    @pytest.mark.asyncio
    async def test_list_reports_lapsed_profiles_as_expired(
        self, expert_service, mock_profile_repo, make_profile
    ):
        now = datetime.now(UTC)
        current = make_profile(
            status=ExpertStatus.VERIFIED, expires_at=now + timedelta(days=5)
        )
        lapsed = make_profile(
            status=ExpertStatus.VERIFIED, expires_at=now - timedelta(days=5)
        )
        mock_profile_repo.list_profiles.return_value = [current, lapsed]

        profiles = await expert_service.list_profiles()

        assert [p.status for p in profiles] == ["verified", "expired"]

    @pytest.mark.asyncio
    async def test_renewal_window_defaults_to_settings(
        self, expert_service, mock_profile_repo
    ):
        mock_profile_repo.get_needing_renewal.return_value = []

        await expert_service.get_experts_needing_renewal()

        assert mock_profile_repo.get_needing_renewal.call_args.args[1] == 30
