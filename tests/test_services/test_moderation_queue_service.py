"""Tests for ModerationQueueService ingestion, escalation and paging."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from contenttrust_api.database.models.base import ModerationContentType
from contenttrust_api.database.models.base import ModerationPriority
from contenttrust_api.database.models.base import QueueStatus
from contenttrust_api.database.models.content import ContentSummary
from contenttrust_api.database.models.moderation_queue import QueueQuery
from contenttrust_api.exceptions import AlreadyResolvedError
from contenttrust_api.exceptions import NotFoundError
from contenttrust_api.services.moderation_queue_service import ModerationQueueService
from contenttrust_api.services.moderation_queue_service import compute_priority


@pytest.fixture
def mock_queue_repo():
    """Mock ModerationQueueRepository."""
    return AsyncMock()


@pytest.fixture
def mock_content_repo():
    """Mock ContentRepository that finds every piece of content."""
    repo = AsyncMock()
    repo.get_content_by_id.side_effect = lambda content_type, content_id: (
        ContentSummary(pk=content_id, content_type=content_type.value)
    )
    return repo


@pytest.fixture
def queue_service(mock_queue_repo, mock_content_repo, moderation_settings):
    """ModerationQueueService with mocked dependencies."""
    return ModerationQueueService(
        queue_repo=mock_queue_repo,
        content_repo=mock_content_repo,
        settings=moderation_settings,
    )


class TestComputePriority:
    """Priority rule with the default thresholds."""

    def test_single_report_is_low(self, moderation_settings):
        assert compute_priority(1, None, moderation_settings) == ModerationPriority.LOW

    def test_two_reports_is_medium(self, moderation_settings):
        assert compute_priority(2, None, moderation_settings) == ModerationPriority.MEDIUM

    def test_five_reports_is_high(self, moderation_settings):
        assert compute_priority(5, None, moderation_settings) == ModerationPriority.HIGH

    def test_ai_score_85_alone_is_high(self, moderation_settings):
        assert compute_priority(1, 85, moderation_settings) == ModerationPriority.HIGH

    def test_ai_score_threshold_is_inclusive(self, moderation_settings):
        assert compute_priority(1, 80, moderation_settings) == ModerationPriority.HIGH
        assert compute_priority(1, 79.9, moderation_settings) == ModerationPriority.LOW

    def test_never_computes_urgent(self, moderation_settings):
        assert compute_priority(1000, 100, moderation_settings) == ModerationPriority.HIGH


class TestIngest:
    """Report ingestion."""

    @pytest.mark.asyncio
    async def test_first_report_creates_low_item(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        item = make_queue_item()
        mock_queue_repo.upsert_report.return_value = item

        result = await queue_service.ingest(
            ModerationContentType.POST, item.content_id, item.reported_by[0]
        )

        assert result == item
        assert result.report_count == 1
        mock_queue_repo.raise_priority.assert_not_called()

    @pytest.mark.asyncio
    async def test_repeat_reporter_does_not_escalate(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        reporter = uuid4()
        item = make_queue_item(reported_by=[reporter], report_count=1)
        mock_queue_repo.upsert_report.return_value = item

        for _ in range(3):
            result = await queue_service.ingest(
                ModerationContentType.POST, item.content_id, reporter
            )

        assert result.report_count == 1
        mock_queue_repo.raise_priority.assert_not_called()

    @pytest.mark.asyncio
    async def test_fifth_distinct_reporter_escalates_to_high(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        reporters = [uuid4() for _ in range(5)]
        item = make_queue_item(
            reported_by=reporters,
            report_count=5,
            priority=ModerationPriority.MEDIUM,
        )
        escalated = item.model_copy(update={"priority": "high"})
        mock_queue_repo.upsert_report.return_value = item
        mock_queue_repo.raise_priority.return_value = escalated

        result = await queue_service.ingest(
            ModerationContentType.POST, item.content_id, reporters[-1]
        )

        mock_queue_repo.raise_priority.assert_called_once_with(
            item.pk, ModerationPriority.HIGH
        )
        assert result.priority == "high"

    @pytest.mark.asyncio
    async def test_high_ai_score_escalates_first_report(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        item = make_queue_item(ai_score=85)
        mock_queue_repo.upsert_report.return_value = item
        mock_queue_repo.raise_priority.return_value = item.model_copy(
            update={"priority": "high"}
        )

        result = await queue_service.ingest(
            ModerationContentType.POST, item.content_id, uuid4(), ai_score=85
        )

        assert result.priority == "high"
        mock_queue_repo.upsert_report.assert_called_once()
        assert mock_queue_repo.upsert_report.call_args.kwargs["ai_score"] == 85

    @pytest.mark.asyncio
    async def test_priority_never_downgrades(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        # Escalated earlier by a high AI score that a later report lowered
        item = make_queue_item(ai_score=10, priority=ModerationPriority.HIGH)
        mock_queue_repo.upsert_report.return_value = item

        result = await queue_service.ingest(
            ModerationContentType.POST, item.content_id, uuid4(), ai_score=10
        )

        assert result.priority == "high"
        mock_queue_repo.raise_priority.assert_not_called()

    @pytest.mark.asyncio
    async def test_urgent_item_stays_urgent(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        item = make_queue_item(report_count=7, priority=ModerationPriority.URGENT)
        mock_queue_repo.upsert_report.return_value = item

        result = await queue_service.ingest(
            ModerationContentType.POST, item.content_id, uuid4()
        )

        assert result.priority == "urgent"
        mock_queue_repo.raise_priority.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_raise_refetches_item(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        item = make_queue_item(report_count=2)
        already_raised = item.model_copy(update={"priority": "high"})
        mock_queue_repo.upsert_report.return_value = item
        mock_queue_repo.raise_priority.return_value = None
        mock_queue_repo.get_by_pk.return_value = already_raised

        result = await queue_service.ingest(
            ModerationContentType.POST, item.content_id, uuid4()
        )

        assert result.priority == "high"

    @pytest.mark.asyncio
    async def test_missing_content_is_not_found(
        self, queue_service, mock_queue_repo, mock_content_repo
    ):
        mock_content_repo.get_content_by_id.side_effect = None
        mock_content_repo.get_content_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await queue_service.ingest(ModerationContentType.POST, uuid4(), uuid4())

        mock_queue_repo.upsert_report.assert_not_called()


class TestQuery:
    """Queue paging."""

    @pytest.mark.asyncio
    async def test_page_reports_totals(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        items = [make_queue_item() for _ in range(10)]
        mock_queue_repo.get_page.return_value = (items, 25)

        page = await queue_service.query(
            QueueQuery(content_type=ModerationContentType.POST, page=1, page_size=10)
        )

        assert page.items == items
        assert page.total == 25
        assert page.page == 1
        assert page.page_size == 10
        assert page.total_pages == 3

    @pytest.mark.asyncio
    async def test_page_size_is_clamped(self, queue_service, mock_queue_repo):
        mock_queue_repo.get_page.return_value = ([], 0)

        page = await queue_service.query(
            QueueQuery(content_type=ModerationContentType.POST, page_size=500)
        )

        passed = mock_queue_repo.get_page.call_args.args[0]
        assert passed.page_size == 100
        assert page.page_size == 100
        assert page.total_pages == 0

    @pytest.mark.asyncio
    async def test_identical_queries_pass_identical_parameters(
        self, queue_service, mock_queue_repo
    ):
        mock_queue_repo.get_page.return_value = ([], 0)
        params = QueueQuery(content_type=ModerationContentType.COMMENT, page=2)

        await queue_service.query(params)
        await queue_service.query(params)

        first, second = mock_queue_repo.get_page.call_args_list
        assert first.args[0] == second.args[0]


class TestAssignAndEscalate:
    """Moderator-driven queue changes."""

    @pytest.mark.asyncio
    async def test_assign_sets_in_review(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        item = make_queue_item()
        moderator = uuid4()
        assigned = item.model_copy(
            update={"assigned_to": moderator, "status": "in_review"}
        )
        mock_queue_repo.get_by_pk.return_value = item
        mock_queue_repo.assign.return_value = assigned

        result = await queue_service.assign(item.pk, moderator)

        assert result.assigned_to == moderator
        assert result.status == "in_review"

    @pytest.mark.asyncio
    async def test_assign_missing_item(self, queue_service, mock_queue_repo):
        mock_queue_repo.get_by_pk.return_value = None

        with pytest.raises(NotFoundError):
            await queue_service.assign(uuid4(), uuid4())

    @pytest.mark.asyncio
    async def test_assign_resolved_item(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        mock_queue_repo.get_by_pk.return_value = make_queue_item(
            status=QueueStatus.RESOLVED
        )

        with pytest.raises(AlreadyResolvedError):
            await queue_service.assign(uuid4(), uuid4())

        mock_queue_repo.assign.assert_not_called()

    @pytest.mark.asyncio
    async def test_escalate_to_urgent(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        item = make_queue_item()
        mock_queue_repo.get_by_pk.return_value = item
        mock_queue_repo.set_priority.return_value = item.model_copy(
            update={"priority": "urgent"}
        )

        result = await queue_service.escalate(
            item.pk, ModerationPriority.URGENT, uuid4(), "Credible threat"
        )

        assert result.priority == "urgent"
        mock_queue_repo.set_priority.assert_called_once_with(
            item.pk, ModerationPriority.URGENT
        )

    @pytest.mark.asyncio
    async def test_escalate_resolved_item(
        self, queue_service, mock_queue_repo, make_queue_item
    ):
        mock_queue_repo.get_by_pk.return_value = make_queue_item(
            status=QueueStatus.RESOLVED
        )

        with pytest.raises(AlreadyResolvedError):
            await queue_service.escalate(uuid4(), ModerationPriority.HIGH, uuid4())
