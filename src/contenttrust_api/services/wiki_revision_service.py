"""Wiki revision lifecycle: drafts, stable publication and rollback."""

import logging

from uuid import UUID

from contenttrust_api.database.models.wiki import RollbackHistoryEntry
from contenttrust_api.database.models.wiki import RollbackResult
from contenttrust_api.database.models.wiki import WikiArticle
from contenttrust_api.database.models.wiki import WikiCategory
from contenttrust_api.database.models.wiki import WikiRevision
from contenttrust_api.database.models.wiki import WikiRevisionCreate
from contenttrust_api.database.repositories.wiki import RollbackHistoryRepository
from contenttrust_api.database.repositories.wiki import WikiArticleRepository
from contenttrust_api.database.repositories.wiki import WikiRevisionRepository
from contenttrust_api.exceptions import NotFoundError
from contenttrust_api.exceptions import PermissionDeniedError
from contenttrust_api.exceptions import ValidationError
from contenttrust_api.services.expert_verification_service import (
    ExpertVerificationService,
)

logger = logging.getLogger(__name__)

HEALTH_GATE_MESSAGE = "Only verified experts can publish stable health revisions"


class WikiRevisionService:
    """Service for wiki revisions and their expert-gated publication."""

    def __init__(
        self,
        article_repo: WikiArticleRepository | None = None,
        revision_repo: WikiRevisionRepository | None = None,
        history_repo: RollbackHistoryRepository | None = None,
        expert_service: ExpertVerificationService | None = None,
    ) -> None:
        self.article_repo = article_repo or WikiArticleRepository()
        self.revision_repo = revision_repo or WikiRevisionRepository()
        self.history_repo = history_repo or RollbackHistoryRepository()
        self.expert_service = expert_service or ExpertVerificationService()

    async def create_draft_revision(
        self, article_pk: UUID, author_pk: UUID, revision_data: WikiRevisionCreate
    ) -> WikiRevision:
        """Append a draft revision; any authenticated author may do this."""
        revision = await self.revision_repo.create_revision(
            article_pk,
            author_pk,
            revision_data.content,
            revision_data.infobox,
            revision_data.summary,
        )
        if revision is None:
            raise NotFoundError(f"Wiki article {article_pk} not found")

        logger.info(f"Draft revision {revision.rev} created for article {article_pk}")
        return revision

    async def mark_stable(
        self, article_pk: UUID, revision_pk: UUID, performed_by: UUID
    ) -> WikiRevision:
        """Publish a revision as the article's stable version.

        Health articles only accept an effectively verified expert.
        """
        article = await self._get_article(article_pk)

        revision = await self.revision_repo.get_for_article(article_pk, revision_pk)
        if revision is None:
            raise NotFoundError(
                f"Revision {revision_pk} not found for article {article_pk}"
            )

        if article.category == WikiCategory.HEALTH:
            if not await self.expert_service.is_effectively_verified(performed_by):
                logger.warning(
                    f"User {performed_by} refused stable publication of "
                    f"health article {article_pk}"
                )
                raise PermissionDeniedError(HEALTH_GATE_MESSAGE)

        stable = await self.revision_repo.mark_stable(
            article_pk, revision_pk, performed_by
        )
        if stable is None:
            raise NotFoundError(
                f"Revision {revision_pk} not found for article {article_pk}"
            )

        logger.info(
            f"Revision {stable.rev} of article {article_pk} marked stable "
            f"by {performed_by}"
        )
        return stable

    async def rollback(
        self,
        article_pk: UUID,
        target_revision_pk: UUID,
        performed_by: UUID,
        reason: str,
    ) -> RollbackResult:
        """Restore an earlier revision as a new revision and record the rollback."""
        if not reason or not reason.strip():
            raise ValidationError("Rollback reason is required")

        await self._get_article(article_pk)

        result = await self.revision_repo.rollback(
            article_pk, target_revision_pk, performed_by, reason.strip()
        )
        if result is None:
            raise NotFoundError(
                f"Revision {target_revision_pk} not found for article {article_pk}"
            )

        logger.info(
            f"Article {article_pk} rolled back to {target_revision_pk} as "
            f"revision {result.revision.rev} by {performed_by}"
        )
        return result

    async def list_revisions(self, article_pk: UUID) -> list[WikiRevision]:
        """Get every revision of an article, rollbacks included."""
        await self._get_article(article_pk)
        return await self.revision_repo.list_for_article(article_pk)

    async def get_rollback_history(self, article_pk: UUID) -> list[RollbackHistoryEntry]:
        """Get the rollback ledger of an article."""
        return await self.history_repo.get_for_content(article_pk)

    async def _get_article(self, article_pk: UUID) -> WikiArticle:
        article = await self.article_repo.get_by_pk(article_pk)
        if article is None:
            raise NotFoundError(f"Wiki article {article_pk} not found")
        return article


async def get_wiki_revision_service() -> WikiRevisionService:
    """Dependency injection for wiki revision service."""
    return WikiRevisionService()
