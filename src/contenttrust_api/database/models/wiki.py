"""Wiki article, revision and rollback history models."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic import Field

from contenttrust_api.database.models.base import BaseDBModel


class WikiCategory(str, Enum):
    """Wiki article categories.

    Only ``health`` gates stable publication on expert verification.
    """

    HEALTH = "health"
    BREEDS = "breeds"
    CARE = "care"
    TRAINING = "training"
    NUTRITION = "nutrition"
    BEHAVIOR = "behavior"
    GENERAL = "general"


class RevisionStatus(str, Enum):
    """Wiki revision status enumeration."""

    DRAFT = "draft"
    STABLE = "stable"


class WikiArticle(BaseDBModel):
    """Wiki article pointing at its latest and its published revision."""

    slug: str
    title: str
    category: WikiCategory
    current_revision_pk: UUID | None = None
    stable_revision_pk: UUID | None = None
    approved_at: datetime | None = None


class WikiRevision(BaseDBModel):
    """Immutable snapshot of an article's content.

    Only the approval columns change after insert.
    """

    article_pk: UUID
    rev: int
    author_pk: UUID
    content: str
    infobox: dict[str, Any] = Field(default_factory=dict)
    summary: str | None = None
    status: RevisionStatus = RevisionStatus.DRAFT
    approved_by: UUID | None = None
    approved_at: datetime | None = None


class WikiRevisionCreate(BaseModel):
    """Draft revision submitted by an author."""

    content: str = Field(..., min_length=1, max_length=200000)
    infobox: dict[str, Any] = Field(default_factory=dict)
    summary: str | None = Field(None, max_length=500)


class WikiRollbackRequest(BaseModel):
    """Roll an article back to an earlier revision."""

    target_revision_pk: UUID
    reason: str = Field(..., min_length=1, max_length=1000)


class RollbackHistoryEntry(BaseDBModel):
    """Append-only ledger row for a rollback."""

    content_pk: UUID
    content_type: str = "wiki"
    rolled_back_from: UUID | None = None
    rolled_back_to: UUID
    new_revision_pk: UUID
    performed_by: UUID
    reason: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class RollbackResult(BaseModel):
    """The revision a rollback produced and its ledger entry."""

    revision: WikiRevision
    history_entry: RollbackHistoryEntry
