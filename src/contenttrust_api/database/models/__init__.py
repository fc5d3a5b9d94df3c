"""Database models for the Content Trust API."""

from contenttrust_api.database.models.base import BaseDBModel
from contenttrust_api.database.models.base import ModerationAction
from contenttrust_api.database.models.base import ModerationContentType
from contenttrust_api.database.models.base import ModerationPriority
from contenttrust_api.database.models.base import QueueStatus
from contenttrust_api.database.models.base import UserRole
from contenttrust_api.database.models.coi_flag import COIFlag
from contenttrust_api.database.models.coi_flag import COIFlagStatus
from contenttrust_api.database.models.coi_flag import COISeverity
from contenttrust_api.database.models.edit_request import EditRequest
from contenttrust_api.database.models.edit_request import EditRequestAuditLog
from contenttrust_api.database.models.edit_request import EditRequestStatus
from contenttrust_api.database.models.expert import ExpertProfile
from contenttrust_api.database.models.expert import ExpertStatus
from contenttrust_api.database.models.moderation_action import ModerationActionLog
from contenttrust_api.database.models.moderation_action import SoftDeleteRecord
from contenttrust_api.database.models.moderation_queue import ModerationQueueItem
from contenttrust_api.database.models.user import User
from contenttrust_api.database.models.wiki import RollbackHistoryEntry
from contenttrust_api.database.models.wiki import WikiArticle
from contenttrust_api.database.models.wiki import WikiRevision

__all__ = [
    "BaseDBModel",
    "COIFlag",
    "COIFlagStatus",
    "COISeverity",
    "EditRequest",
    "EditRequestAuditLog",
    "EditRequestStatus",
    "ExpertProfile",
    "ExpertStatus",
    "ModerationAction",
    "ModerationActionLog",
    "ModerationContentType",
    "ModerationPriority",
    "ModerationQueueItem",
    "QueueStatus",
    "RollbackHistoryEntry",
    "SoftDeleteRecord",
    "User",
    "UserRole",
    "WikiArticle",
    "WikiRevision",
]
