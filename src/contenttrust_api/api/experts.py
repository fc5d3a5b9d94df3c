"""Expert verification API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import status

from contenttrust_api.api.errors import to_http_exception
from contenttrust_api.auth.dependencies import get_current_user
from contenttrust_api.auth.dependencies import require_admin
from contenttrust_api.auth.dependencies import require_moderator
from contenttrust_api.database.models.expert import ExpertApplication
from contenttrust_api.database.models.expert import ExpertExtend
from contenttrust_api.database.models.expert import ExpertProfile
from contenttrust_api.database.models.expert import ExpertReview
from contenttrust_api.database.models.expert import ExpertStatus
from contenttrust_api.database.models.expert import ExpertVerificationStatus
from contenttrust_api.database.models.user import User
from contenttrust_api.exceptions import ContentTrustError
from contenttrust_api.services.expert_verification_service import (
    ExpertVerificationService,
)
from contenttrust_api.services.expert_verification_service import (
    get_expert_verification_service,
)

router = APIRouter(prefix="/experts", tags=["experts"])

ExpertServiceDep = Annotated[
    ExpertVerificationService, Depends(get_expert_verification_service)
]


@router.post("/applications", status_code=status.HTTP_201_CREATED)
async def submit_application(
    application: ExpertApplication,
    current_user: Annotated[User, Depends(get_current_user)],
    expert_service: ExpertServiceDep,
) -> ExpertProfile:
    """Apply for expert verification."""
    try:
        return await expert_service.submit_application(current_user.pk, application)
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.get("/")
async def list_experts(
    _: Annotated[User, Depends(require_moderator)],
    expert_service: ExpertServiceDep,
    status_filter: Annotated[ExpertStatus | None, Query(alias="status")] = None,
    limit: Annotated[int, Query(le=100, ge=1)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[ExpertProfile]:
    """List expert profiles by effective status (moderators only)."""
    return await expert_service.list_profiles(status_filter, limit, offset)


@router.get("/renewals")
async def get_renewals(
    _: Annotated[User, Depends(require_moderator)],
    expert_service: ExpertServiceDep,
    days: Annotated[int | None, Query(ge=1, le=365)] = None,
) -> list[ExpertProfile]:
    """Verified experts whose verification lapses soon."""
    return await expert_service.get_experts_needing_renewal(days)


@router.get("/{user_pk}/status")
async def get_expert_status(
    user_pk: UUID,
    _: Annotated[User, Depends(get_current_user)],
    expert_service: ExpertServiceDep,
) -> ExpertVerificationStatus:
    """Whether a user is an effectively verified expert right now."""
    return await expert_service.get_verification_status(user_pk)


@router.post("/{user_pk}/verify")
async def verify_expert(
    user_pk: UUID,
    review: ExpertReview,
    current_user: Annotated[User, Depends(require_admin)],
    expert_service: ExpertServiceDep,
) -> ExpertProfile:
    """Approve a pending application (admins only)."""
    try:
        return await expert_service.verify(
            user_pk, current_user.pk, review.review_notes
        )
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.post("/{user_pk}/revoke")
async def revoke_expert(
    user_pk: UUID,
    review: ExpertReview,
    current_user: Annotated[User, Depends(require_admin)],
    expert_service: ExpertServiceDep,
) -> ExpertProfile:
    """Revoke an expert's verification (admins only)."""
    try:
        return await expert_service.revoke(
            user_pk, current_user.pk, review.review_notes
        )
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.post("/{user_pk}/extend")
async def extend_expert(
    user_pk: UUID,
    extension: ExpertExtend,
    _: Annotated[User, Depends(require_admin)],
    expert_service: ExpertServiceDep,
) -> ExpertProfile:
    """Extend a verified or expired verification (admins only)."""
    try:
        return await expert_service.extend(user_pk, extension.months)
    except ContentTrustError as e:
        raise to_http_exception(e) from e
