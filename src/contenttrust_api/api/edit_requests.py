"""Edit request API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import status

from contenttrust_api.api.errors import to_http_exception
from contenttrust_api.auth.dependencies import get_current_user
from contenttrust_api.auth.dependencies import require_moderator
from contenttrust_api.database.models.edit_request import EditModerationStats
from contenttrust_api.database.models.edit_request import EditRequest
from contenttrust_api.database.models.edit_request import EditRequestAuditLog
from contenttrust_api.database.models.edit_request import EditRequestContentType
from contenttrust_api.database.models.edit_request import EditRequestCreate
from contenttrust_api.database.models.edit_request import EditRequestFilter
from contenttrust_api.database.models.edit_request import EditRequestPage
from contenttrust_api.database.models.edit_request import EditRequestPriority
from contenttrust_api.database.models.edit_request import EditRequestReject
from contenttrust_api.database.models.edit_request import EditRequestStatus
from contenttrust_api.database.models.edit_request import RateLimitResult
from contenttrust_api.database.models.user import User
from contenttrust_api.exceptions import ContentTrustError
from contenttrust_api.services.edit_request_service import EditRequestService
from contenttrust_api.services.edit_request_service import get_edit_request_service

router = APIRouter(prefix="/edit-requests", tags=["edit-requests"])

EditRequestServiceDep = Annotated[
    EditRequestService, Depends(get_edit_request_service)
]


@router.get("/rate-limit")
async def check_rate_limit(
    current_user: Annotated[User, Depends(get_current_user)],
    edit_request_service: EditRequestServiceDep,
) -> RateLimitResult:
    """Whether the current user may submit another edit request."""
    return await edit_request_service.check_rate_limit(current_user.pk)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_edit_request(
    request_data: EditRequestCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    edit_request_service: EditRequestServiceDep,
) -> EditRequest:
    """Submit an edit request."""
    try:
        return await edit_request_service.create_edit_request(
            current_user.pk, request_data
        )
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.get("/")
async def list_edit_requests(
    _: Annotated[User, Depends(require_moderator)],
    edit_request_service: EditRequestServiceDep,
    content_type: Annotated[EditRequestContentType | None, Query()] = None,
    status_filter: Annotated[EditRequestStatus | None, Query(alias="status")] = None,
    author_pk: Annotated[UUID | None, Query()] = None,
    priority: Annotated[EditRequestPriority | None, Query()] = None,
    min_age_hours: Annotated[int | None, Query(ge=0)] = None,
    max_age_hours: Annotated[int | None, Query(ge=0)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> EditRequestPage:
    """Page through edit requests, highest priority and oldest first."""
    filters = EditRequestFilter(
        content_type=content_type,
        status=status_filter,
        author_pk=author_pk,
        priority=priority,
        min_age_hours=min_age_hours,
        max_age_hours=max_age_hours,
    )
    return await edit_request_service.list_edit_requests(filters, page, page_size)


@router.get("/stats")
async def get_edit_request_stats(
    _: Annotated[User, Depends(require_moderator)],
    edit_request_service: EditRequestServiceDep,
) -> EditModerationStats:
    """Review backlog and throughput."""
    return await edit_request_service.get_moderation_stats()


@router.post("/{request_pk}/approve")
async def approve_edit_request(
    request_pk: UUID,
    current_user: Annotated[User, Depends(require_moderator)],
    edit_request_service: EditRequestServiceDep,
) -> EditRequest:
    """Approve a pending edit request."""
    try:
        return await edit_request_service.approve(request_pk, current_user.pk)
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.post("/{request_pk}/reject")
async def reject_edit_request(
    request_pk: UUID,
    rejection: EditRequestReject,
    current_user: Annotated[User, Depends(require_moderator)],
    edit_request_service: EditRequestServiceDep,
) -> EditRequest:
    """Reject a pending edit request with a reason."""
    try:
        return await edit_request_service.reject(
            request_pk, current_user.pk, rejection.reason
        )
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.get("/{request_pk}/audit-trail")
async def get_edit_request_audit_trail(
    request_pk: UUID,
    _: Annotated[User, Depends(require_moderator)],
    edit_request_service: EditRequestServiceDep,
) -> list[EditRequestAuditLog]:
    """Lifecycle events for an edit request, oldest first."""
    try:
        return await edit_request_service.get_audit_trail(request_pk)
    except ContentTrustError as e:
        raise to_http_exception(e) from e
