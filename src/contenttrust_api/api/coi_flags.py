"""Conflict-of-interest flag API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import status

from contenttrust_api.api.errors import to_http_exception
from contenttrust_api.auth.dependencies import get_current_user
from contenttrust_api.auth.dependencies import require_moderator
from contenttrust_api.database.models.coi_flag import COIContentType
from contenttrust_api.database.models.coi_flag import COIFlag
from contenttrust_api.database.models.coi_flag import COIFlagCreate
from contenttrust_api.database.models.coi_flag import COIFlagUpdate
from contenttrust_api.database.models.coi_flag import COISeverity
from contenttrust_api.database.models.user import User
from contenttrust_api.exceptions import ContentTrustError
from contenttrust_api.services.coi_flag_service import COIFlagService
from contenttrust_api.services.coi_flag_service import get_coi_flag_service

router = APIRouter(prefix="/coi-flags", tags=["coi-flags"])

COIFlagServiceDep = Annotated[COIFlagService, Depends(get_coi_flag_service)]


@router.post("/", status_code=status.HTTP_201_CREATED)
async def add_flag(
    flag_data: COIFlagCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    coi_service: COIFlagServiceDep,
) -> COIFlag:
    """Flag a conflict of interest on a blog post or wiki article."""
    try:
        return await coi_service.add_flag(flag_data, current_user.pk)
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.get("/active")
async def get_active_flags(
    _: Annotated[User, Depends(get_current_user)],
    coi_service: COIFlagServiceDep,
) -> list[COIFlag]:
    """Every active COI flag."""
    return await coi_service.get_active_flags()


@router.get("/severity/{severity}")
async def get_flags_by_severity(
    severity: COISeverity,
    _: Annotated[User, Depends(get_current_user)],
    coi_service: COIFlagServiceDep,
) -> list[COIFlag]:
    """Active COI flags of one severity."""
    return await coi_service.get_flags_by_severity(severity)


@router.get("/content/{content_type}/{content_id}")
async def get_content_flags(
    content_type: COIContentType,
    content_id: UUID,
    coi_service: COIFlagServiceDep,
    active_only: Annotated[bool, Query()] = False,
) -> list[COIFlag]:
    """COI flags attached to a piece of content."""
    return await coi_service.get_content_flags(content_type, content_id, active_only)


@router.patch("/{flag_pk}")
async def update_flag(
    flag_pk: UUID,
    changes: COIFlagUpdate,
    current_user: Annotated[User, Depends(require_moderator)],
    coi_service: COIFlagServiceDep,
) -> COIFlag:
    """Update or resolve a COI flag (moderators only)."""
    try:
        return await coi_service.update_flag(flag_pk, changes, current_user.pk)
    except ContentTrustError as e:
        raise to_http_exception(e) from e
