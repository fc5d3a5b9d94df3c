"""Read-only view of platform content owned by other services."""

from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict


class ContentSummary(BaseModel):
    """Just enough of a piece of content to confirm it exists and label it."""

    pk: UUID
    content_type: str
    title: str | None = None
    author_pk: UUID | None = None

    model_config = ConfigDict(from_attributes=True)
