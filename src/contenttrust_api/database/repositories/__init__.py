"""Database repositories for the Content Trust API."""

from contenttrust_api.database.repositories.base import BaseRepository
from contenttrust_api.database.repositories.coi_flag import COIFlagRepository
from contenttrust_api.database.repositories.content import ContentRepository
from contenttrust_api.database.repositories.edit_request import (
    EditRequestAuditRepository,
)
from contenttrust_api.database.repositories.edit_request import EditRequestRepository
from contenttrust_api.database.repositories.expert_profile import (
    ExpertProfileRepository,
)
from contenttrust_api.database.repositories.moderation_action import (
    ModerationActionRepository,
)
from contenttrust_api.database.repositories.moderation_action import (
    SoftDeleteRepository,
)
from contenttrust_api.database.repositories.moderation_queue import (
    ModerationQueueRepository,
)
from contenttrust_api.database.repositories.wiki import RollbackHistoryRepository
from contenttrust_api.database.repositories.wiki import WikiArticleRepository
from contenttrust_api.database.repositories.wiki import WikiRevisionRepository

__all__ = [
    "BaseRepository",
    "COIFlagRepository",
    "ContentRepository",
    "EditRequestAuditRepository",
    "EditRequestRepository",
    "ExpertProfileRepository",
    "ModerationActionRepository",
    "ModerationQueueRepository",
    "RollbackHistoryRepository",
    "SoftDeleteRepository",
    "WikiArticleRepository",
    "WikiRevisionRepository",
]
