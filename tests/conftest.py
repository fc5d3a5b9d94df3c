"""Test configuration and fixtures for the Content Trust API tests."""

from datetime import UTC
from datetime import datetime
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from contenttrust_api.config.moderation import ModerationSettings
from contenttrust_api.database.models.base import ModerationContentType
from contenttrust_api.database.models.base import ModerationPriority
from contenttrust_api.database.models.base import QueueStatus
from contenttrust_api.database.models.moderation_queue import ModerationQueueItem


@pytest.fixture
def moderation_settings() -> ModerationSettings:
    """Moderation policy with the documented defaults."""
    return ModerationSettings(
        ai_score_high_threshold=80,
        reports_high_threshold=5,
        reports_medium_threshold=2,
        soft_delete_retention_days=90,
        expert_validity_days=365,
        expert_renewal_window_days=30,
        edit_requests_per_hour=10,
        edit_requests_per_day=50,
        max_page_size=100,
    )


@pytest.fixture
def mock_connection():
    """Mock database connection for testing."""
    connection = AsyncMock()
    connection.fetchval = AsyncMock()
    connection.fetchrow = AsyncMock()
    connection.fetch = AsyncMock()
    connection.execute = AsyncMock()
    return connection


@pytest.fixture
def make_queue_item():
    """Factory for queue items with overridable fields."""

    def _make(**overrides) -> ModerationQueueItem:
        reporter = uuid4()
        data = {
            "pk": uuid4(),
            "content_type": ModerationContentType.POST,
            "content_id": uuid4(),
            "reported_by": [reporter],
            "report_count": 1,
            "ai_score": None,
            "priority": ModerationPriority.LOW,
            "status": QueueStatus.PENDING,
            "created_at": datetime.now(UTC),
        }
        data.update(overrides)
        return ModerationQueueItem(**data)

    return _make


@pytest.fixture
def queue_item_record():
    """Raw moderation_queue row as asyncpg would return it."""
    return {
        "pk": uuid4(),
        "content_type": "post",
        "content_id": uuid4(),
        "reported_by": [uuid4()],
        "report_count": 1,
        "ai_score": None,
        "auto_flagged": False,
        "auto_reason": None,
        "priority": "low",
        "status": "pending",
        "assigned_to": None,
        "assigned_at": None,
        "justification": None,
        "resolved_at": None,
        "created_at": datetime.now(UTC),
        "updated_at": None,
    }
