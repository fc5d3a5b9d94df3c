"""Expert credential verification state machine."""

import logging

from datetime import UTC
from datetime import datetime
from typing import NoReturn
from uuid import UUID

from contenttrust_api.config.moderation import ModerationSettings
from contenttrust_api.config.moderation import get_moderation_settings
from contenttrust_api.database.models.expert import ExpertApplication
from contenttrust_api.database.models.expert import ExpertProfile
from contenttrust_api.database.models.expert import ExpertStatus
from contenttrust_api.database.models.expert import ExpertVerificationStatus
from contenttrust_api.database.repositories.expert_profile import (
    ExpertProfileRepository,
)
from contenttrust_api.exceptions import NotFoundError
from contenttrust_api.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ExpertVerificationService:
    """Service for expert applications, verification, revocation and renewal.

    ``expired`` is never written by a scheduler: it is read off ``status``
    and ``expires_at`` at call time, and ``is_effectively_verified`` is the
    only predicate gating logic should use.
    """

    def __init__(
        self,
        profile_repo: ExpertProfileRepository | None = None,
        settings: ModerationSettings | None = None,
    ) -> None:
        self.profile_repo = profile_repo or ExpertProfileRepository()
        self.settings = settings or get_moderation_settings()

    async def submit_application(
        self, user_pk: UUID, application: ExpertApplication
    ) -> ExpertProfile:
        """Open a pending verification request for a user."""
        now = datetime.now(UTC)
        existing = await self.profile_repo.get_by_user(user_pk)

        if existing is None:
            profile = await self.profile_repo.create_application(
                user_pk,
                application.credential,
                application.license_no,
                application.region,
            )
        else:
            if existing.status == ExpertStatus.PENDING:
                raise ValidationError("Expert verification request already pending")
            if existing.is_effectively_verified(now):
                raise ValidationError("User is already a verified expert")
            profile = await self.profile_repo.reopen_application(
                user_pk,
                application.credential,
                application.license_no,
                application.region,
                now,
            )

        if profile is None:
            raise ValidationError("Expert verification request already pending")

        logger.info(f"Expert application submitted for user {user_pk}")
        return profile

    async def verify(
        self,
        user_pk: UUID,
        reviewed_by: UUID | None = None,
        review_notes: str | None = None,
    ) -> ExpertProfile:
        """Approve a pending profile for the configured validity period."""
        profile = await self._get_profile(user_pk)
        if profile.status != ExpertStatus.PENDING:
            self._refuse("verify", profile)

        verified = await self.profile_repo.verify(
            user_pk, self.settings.expert_validity_days, reviewed_by, review_notes
        )
        if verified is None:
            self._refuse("verify", await self._get_profile(user_pk))

        logger.info(f"Expert {user_pk} verified until {verified.expires_at}")
        return verified

    async def revoke(
        self,
        user_pk: UUID,
        reviewed_by: UUID | None = None,
        review_notes: str | None = None,
    ) -> ExpertProfile:
        """Revoke a profile; revoked profiles cannot be extended or verified."""
        profile = await self._get_profile(user_pk)
        if profile.status == ExpertStatus.REVOKED:
            self._refuse("revoke", profile)

        revoked = await self.profile_repo.revoke(user_pk, reviewed_by, review_notes)
        if revoked is None:
            self._refuse("revoke", await self._get_profile(user_pk))

        logger.info(f"Expert {user_pk} revoked")
        return revoked

    async def extend(self, user_pk: UUID, months: int) -> ExpertProfile:
        """Push a verified or expired profile's expiry forward by calendar months.

        The new expiry counts from the later of now and the current expiry,
        so a lapsed verification never extends from a stale instant.
        """
        if months < 1:
            raise ValidationError("Extension must be at least one month")

        profile = await self._get_profile(user_pk)
        if profile.status not in (ExpertStatus.VERIFIED, ExpertStatus.EXPIRED):
            self._refuse("extend", profile)

        extended = await self.profile_repo.extend(user_pk, months)
        if extended is None:
            self._refuse("extend", await self._get_profile(user_pk))

        logger.info(f"Expert {user_pk} extended until {extended.expires_at}")
        return extended

    async def is_effectively_verified(
        self, user_pk: UUID, now: datetime | None = None
    ) -> bool:
        """True iff the user is verified and the verification has not lapsed."""
        profile = await self.profile_repo.get_by_user(user_pk)
        if profile is None:
            return False
        return profile.is_effectively_verified(now or datetime.now(UTC))

    async def get_verification_status(self, user_pk: UUID) -> ExpertVerificationStatus:
        """Effective verification status of a user."""
        now = datetime.now(UTC)
        profile = await self.profile_repo.get_by_user(user_pk)
        if profile is None:
            return ExpertVerificationStatus(
                user_pk=user_pk, status=None, is_effectively_verified=False
            )
        return ExpertVerificationStatus(
            user_pk=user_pk,
            status=profile.effective_status(now),
            is_effectively_verified=profile.is_effectively_verified(now),
            expires_at=profile.expires_at,
        )

    async def list_profiles(
        self, status: ExpertStatus | None = None, limit: int = 50, offset: int = 0
    ) -> list[ExpertProfile]:
        """List profiles, reporting lapsed verifications as expired."""
        now = datetime.now(UTC)
        profiles = await self.profile_repo.list_profiles(now, status, limit, offset)
        return [
            p.model_copy(update={"status": p.effective_status(now).value})
            for p in profiles
        ]

    async def get_experts_needing_renewal(
        self, within_days: int | None = None
    ) -> list[ExpertProfile]:
        """Verified experts whose verification lapses within the window."""
        days = within_days or self.settings.expert_renewal_window_days
        return await self.profile_repo.get_needing_renewal(datetime.now(UTC), days)

    async def _get_profile(self, user_pk: UUID) -> ExpertProfile:
        profile = await self.profile_repo.get_by_user(user_pk)
        if profile is None:
            raise NotFoundError(f"Expert profile for user {user_pk} not found")
        return profile

    def _refuse(self, transition: str, profile: ExpertProfile) -> NoReturn:
        status = profile.effective_status(datetime.now(UTC)).value
        logger.warning(f"Refused {transition} of expert {profile.user_pk} ({status})")
        raise ValidationError(f"Cannot {transition} an expert profile that is {status}")


async def get_expert_verification_service() -> ExpertVerificationService:
    """Dependency injection for expert verification service."""
    return ExpertVerificationService()
