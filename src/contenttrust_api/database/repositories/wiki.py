"""Wiki article, revision and rollback history repositories."""

from typing import Any
from uuid import UUID

from asyncpg import Connection
from asyncpg import Record

from contenttrust_api.database.connection import get_db_connection
from contenttrust_api.database.connection import get_db_transaction
from contenttrust_api.database.models.wiki import RevisionStatus
from contenttrust_api.database.models.wiki import RollbackHistoryEntry
from contenttrust_api.database.models.wiki import RollbackResult
from contenttrust_api.database.models.wiki import WikiArticle
from contenttrust_api.database.models.wiki import WikiRevision
from contenttrust_api.database.repositories.base import BaseRepository


async def _lock_article(conn: Connection, article_pk: UUID) -> Record | None:
    """Lock the article row; serialises revision numbering per article."""
    return await conn.fetchrow(
        "SELECT * FROM wiki_articles WHERE pk = $1 FOR UPDATE", article_pk
    )


async def _insert_next_revision(
    conn: Connection,
    article_pk: UUID,
    author_pk: UUID,
    content: str,
    infobox: dict[str, Any],
    summary: str | None,
) -> Record:
    """Insert the article's next revision and point the article at it.

    Must run inside a transaction holding the article lock.
    """
    record = await conn.fetchrow(
        """
        INSERT INTO wiki_revisions (article_pk, rev, author_pk, content, infobox, summary, status)
        SELECT $1, COALESCE(MAX(rev), 0) + 1, $2, $3, $4, $5, $6
        FROM wiki_revisions
        WHERE article_pk = $1
        RETURNING *
        """,
        article_pk,
        author_pk,
        content,
        infobox,
        summary,
        RevisionStatus.DRAFT.value,
    )
    await conn.execute(
        """
        UPDATE wiki_articles
        SET current_revision_pk = $2, updated_at = NOW()
        WHERE pk = $1
        """,
        article_pk,
        record["pk"],
    )
    return record


class WikiArticleRepository(BaseRepository[WikiArticle]):
    """Repository for wiki articles."""

    def __init__(self) -> None:
        super().__init__("wiki_articles")

    def _record_to_model(self, record: Record) -> WikiArticle:
        """Convert database record to WikiArticle model."""
        return WikiArticle.model_validate(dict(record))


class WikiRevisionRepository(BaseRepository[WikiRevision]):
    """Repository for wiki revisions and their lifecycle transitions."""

    def __init__(self) -> None:
        super().__init__("wiki_revisions")

    def _record_to_model(self, record: Record) -> WikiRevision:
        """Convert database record to WikiRevision model."""
        return WikiRevision.model_validate(dict(record))

    async def get_for_article(
        self, article_pk: UUID, revision_pk: UUID
    ) -> WikiRevision | None:
        """Get a revision only if it belongs to the article."""
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE pk = $1 AND article_pk = $2
        """  # nosec B608

        async with get_db_connection() as conn:
            record = await conn.fetchrow(query, revision_pk, article_pk)
            return self._record_to_model(record) if record else None

    async def list_for_article(self, article_pk: UUID) -> list[WikiRevision]:
        """Get every revision of an article in rev order."""
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE article_pk = $1
            ORDER BY rev ASC
        """  # nosec B608

        async with get_db_connection() as conn:
            records = await conn.fetch(query, article_pk)
            return [self._record_to_model(r) for r in records]

    async def create_revision(
        self,
        article_pk: UUID,
        author_pk: UUID,
        content: str,
        infobox: dict[str, Any] | None = None,
        summary: str | None = None,
    ) -> WikiRevision | None:
        """Append a draft revision; None if the article does not exist."""
        async with get_db_transaction() as conn:
            if await _lock_article(conn, article_pk) is None:
                return None

            record = await _insert_next_revision(
                conn, article_pk, author_pk, content, infobox or {}, summary
            )
            return self._record_to_model(record)

    async def mark_stable(
        self, article_pk: UUID, revision_pk: UUID, approved_by: UUID
    ) -> WikiRevision | None:
        """Publish a revision as the article's stable version.

        The previously stable revision, if any, drops back to draft so an
        article never has two stable revisions. None if the article or the
        revision is missing.
        """
        async with get_db_transaction() as conn:
            if await _lock_article(conn, article_pk) is None:
                return None

            await conn.execute(
                f"""
                UPDATE {self.table_name}
                SET status = $3, updated_at = NOW()
                WHERE article_pk = $1 AND pk <> $2 AND status = $4
                """,  # nosec B608
                article_pk,
                revision_pk,
                RevisionStatus.DRAFT.value,
                RevisionStatus.STABLE.value,
            )
            record = await conn.fetchrow(
                f"""
                UPDATE {self.table_name}
                SET status = $3,
                    approved_by = $4,
                    approved_at = NOW(),
                    updated_at = NOW()
                WHERE pk = $2 AND article_pk = $1
                RETURNING *
                """,  # nosec B608
                article_pk,
                revision_pk,
                RevisionStatus.STABLE.value,
                approved_by,
            )
            if record is None:
                return None

            await conn.execute(
                """
                UPDATE wiki_articles
                SET stable_revision_pk = $2,
                    approved_at = $3,
                    updated_at = NOW()
                WHERE pk = $1
                """,
                article_pk,
                revision_pk,
                record["approved_at"],
            )
            return self._record_to_model(record)

    async def rollback(
        self,
        article_pk: UUID,
        target_revision_pk: UUID,
        performed_by: UUID,
        reason: str,
    ) -> RollbackResult | None:
        """Restore an earlier revision's content as a brand-new revision.

        Existing revisions are never touched. The new revision is a draft that
        becomes the article's current revision; the stable pointer only moves
        through ``mark_stable``. The new revision and its rollback history
        entry are written in one transaction. None if the article or the
        target revision is missing.
        """
        async with get_db_transaction() as conn:
            article = await _lock_article(conn, article_pk)
            if article is None:
                return None

            target = await conn.fetchrow(
                f"""
                SELECT * FROM {self.table_name}
                WHERE pk = $1 AND article_pk = $2
                """,  # nosec B608
                target_revision_pk,
                article_pk,
            )
            if target is None:
                return None

            new_record = await _insert_next_revision(
                conn,
                article_pk,
                performed_by,
                target["content"],
                target["infobox"],
                f"Rollback to revision {target['rev']}: {reason}",
            )

            history_record = await conn.fetchrow(
                """
                INSERT INTO rollback_history (
                    content_pk, content_type, rolled_back_from, rolled_back_to,
                    new_revision_pk, performed_by, reason, metadata
                )
                VALUES ($1, 'wiki', $2, $3, $4, $5, $6, $7)
                RETURNING *
                """,
                article_pk,
                article["current_revision_pk"],
                target_revision_pk,
                new_record["pk"],
                performed_by,
                reason,
                {
                    "target_rev": target["rev"],
                    "new_rev": new_record["rev"],
                    "article_slug": article["slug"],
                },
            )

            return RollbackResult(
                revision=self._record_to_model(new_record),
                history_entry=RollbackHistoryEntry.model_validate(
                    dict(history_record)
                ),
            )


class RollbackHistoryRepository(BaseRepository[RollbackHistoryEntry]):
    """Read access to the append-only rollback ledger."""

    def __init__(self) -> None:
        super().__init__("rollback_history")

    def _record_to_model(self, record: Record) -> RollbackHistoryEntry:
        """Convert database record to RollbackHistoryEntry model."""
        return RollbackHistoryEntry.model_validate(dict(record))

    async def get_for_content(self, content_pk: UUID) -> list[RollbackHistoryEntry]:
        """Get rollbacks performed on a piece of content, newest first."""
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE content_pk = $1
            ORDER BY created_at DESC, pk DESC
        """  # nosec B608

        async with get_db_connection() as conn:
            records = await conn.fetch(query, content_pk)
            return [self._record_to_model(r) for r in records]
