"""Service layer for the Content Trust API."""

from contenttrust_api.services.coi_flag_service import COIFlagService
from contenttrust_api.services.edit_request_service import EditRequestService
from contenttrust_api.services.expert_verification_service import (
    ExpertVerificationService,
)
from contenttrust_api.services.moderation_action_service import (
    ModerationActionService,
)
from contenttrust_api.services.moderation_queue_service import (
    ModerationQueueService,
)
from contenttrust_api.services.wiki_revision_service import WikiRevisionService

__all__ = [
    "COIFlagService",
    "EditRequestService",
    "ExpertVerificationService",
    "ModerationActionService",
    "ModerationQueueService",
    "WikiRevisionService",
]
