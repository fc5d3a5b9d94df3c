"""Read-only lookups against content tables owned by the rest of the platform."""

from enum import Enum
from uuid import UUID

from contenttrust_api.database.connection import get_db_connection
from contenttrust_api.database.models.content import ContentSummary

# content type -> SELECT yielding (pk, title, author_pk)
CONTENT_LOOKUPS = {
    "post": "SELECT pk, title, author_pk FROM blog_posts WHERE pk = $1",
    "blog": "SELECT pk, title, author_pk FROM blog_posts WHERE pk = $1",
    "comment": "SELECT pk, NULL::text AS title, author_pk FROM comments WHERE pk = $1",
    "media": "SELECT pk, caption AS title, owner_pk AS author_pk FROM media_items WHERE pk = $1",
    "wiki": "SELECT pk, title, NULL::uuid AS author_pk FROM wiki_articles WHERE pk = $1",
    "wiki_revision": (
        "SELECT r.pk, a.title, r.author_pk FROM wiki_revisions r "
        "JOIN wiki_articles a ON a.pk = r.article_pk WHERE r.pk = $1"
    ),
    "pet": "SELECT pk, name AS title, owner_pk AS author_pk FROM pets WHERE pk = $1",
    "user": "SELECT pk, username AS title, pk AS author_pk FROM users WHERE pk = $1",
}


class ContentRepository:
    """Existence checks for content referenced by moderation records."""

    async def get_content_by_id(
        self, content_type: str, content_id: UUID
    ) -> ContentSummary | None:
        """Get a summary of a piece of content; None if absent or unknown type."""
        key = content_type.value if isinstance(content_type, Enum) else content_type
        query = CONTENT_LOOKUPS.get(key)
        if query is None:
            return None

        async with get_db_connection() as conn:
            record = await conn.fetchrow(query, content_id)
            if record is None:
                return None
            return ContentSummary(
                pk=record["pk"],
                content_type=key,
                title=record["title"],
                author_pk=record["author_pk"],
            )
