"""Wiki revision and rollback API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status

from contenttrust_api.api.errors import to_http_exception
from contenttrust_api.auth.dependencies import get_current_user
from contenttrust_api.auth.dependencies import require_moderator
from contenttrust_api.database.models.user import User
from contenttrust_api.database.models.wiki import RollbackHistoryEntry
from contenttrust_api.database.models.wiki import RollbackResult
from contenttrust_api.database.models.wiki import WikiRevision
from contenttrust_api.database.models.wiki import WikiRevisionCreate
from contenttrust_api.database.models.wiki import WikiRollbackRequest
from contenttrust_api.exceptions import ContentTrustError
from contenttrust_api.services.wiki_revision_service import WikiRevisionService
from contenttrust_api.services.wiki_revision_service import get_wiki_revision_service

router = APIRouter(prefix="/wiki/articles", tags=["wiki"])

WikiServiceDep = Annotated[WikiRevisionService, Depends(get_wiki_revision_service)]


@router.post("/{article_pk}/revisions", status_code=status.HTTP_201_CREATED)
async def create_draft_revision(
    article_pk: UUID,
    revision_data: WikiRevisionCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    wiki_service: WikiServiceDep,
) -> WikiRevision:
    """Submit a draft revision of an article."""
    try:
        return await wiki_service.create_draft_revision(
            article_pk, current_user.pk, revision_data
        )
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.get("/{article_pk}/revisions")
async def list_revisions(
    article_pk: UUID,
    _: Annotated[User, Depends(get_current_user)],
    wiki_service: WikiServiceDep,
) -> list[WikiRevision]:
    """All revisions of an article in order."""
    try:
        return await wiki_service.list_revisions(article_pk)
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.post("/{article_pk}/revisions/{revision_pk}/stable")
async def mark_revision_stable(
    article_pk: UUID,
    revision_pk: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    wiki_service: WikiServiceDep,
) -> WikiRevision:
    """Publish a revision; health articles need a verified expert."""
    try:
        return await wiki_service.mark_stable(article_pk, revision_pk, current_user.pk)
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.post("/{article_pk}/rollback")
async def rollback_article(
    article_pk: UUID,
    request: WikiRollbackRequest,
    current_user: Annotated[User, Depends(require_moderator)],
    wiki_service: WikiServiceDep,
) -> RollbackResult:
    """Restore an earlier revision as a new revision (moderators only)."""
    try:
        return await wiki_service.rollback(
            article_pk, request.target_revision_pk, current_user.pk, request.reason
        )
    except ContentTrustError as e:
        raise to_http_exception(e) from e


@router.get("/{article_pk}/rollbacks")
async def get_rollback_history(
    article_pk: UUID,
    _: Annotated[User, Depends(get_current_user)],
    wiki_service: WikiServiceDep,
) -> list[RollbackHistoryEntry]:
    """Rollback ledger of an article, newest first."""
    return await wiki_service.get_rollback_history(article_pk)
