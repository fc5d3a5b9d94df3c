"""Maintenance worker: purges soft delete records past their retention."""

import logging

from arq.cron import CronJob
from arq.cron import cron

from contenttrust_api.config.moderation import get_moderation_settings
from contenttrust_api.services.moderation_action_service import (
    get_moderation_action_service,
)
from contenttrust_api.workers.base import BaseWorker
from contenttrust_api.workers.base import create_worker_class

logger = logging.getLogger(__name__)

MAINTENANCE_QUEUE = "contenttrust_maintenance"


class SoftDeleteMaintenanceWorker(BaseWorker):
    """Worker for time-bounded soft delete retention."""

    async def cleanup_expired_soft_deletes(self, ctx: dict) -> int:
        """Remove every expired soft delete record; safe to run concurrently."""
        logger.info("Starting expired soft delete cleanup")

        service = await get_moderation_action_service()
        result = await service.cleanup_expired_soft_deletes()

        logger.info(f"Soft delete cleanup removed {result.removed} records")
        return result.removed


# Define worker functions
async def cleanup_expired_soft_deletes(ctx: dict) -> int:
    """Worker function for the expired soft delete sweep."""
    try:
        worker = SoftDeleteMaintenanceWorker()
        return await worker.cleanup_expired_soft_deletes(ctx)
    except Exception:
        logger.exception("Error in soft delete cleanup worker")
        return 0


def cleanup_schedule(interval_minutes: int) -> tuple[set[int], set[int] | None]:
    """Cron (minute, hour) sets for a sweep every ``interval_minutes``.

    Intervals under an hour run every N minutes. Longer intervals run on the
    hour every N // 60 hours, at most once a day.
    """
    if interval_minutes < 60:
        return set(range(0, 60, max(1, interval_minutes))), None

    step_hours = min(interval_minutes // 60, 24)
    return {0}, set(range(0, 24, step_hours))


def build_cron_jobs() -> list[CronJob]:
    """Cron entries for the maintenance worker, from moderation settings."""
    settings = get_moderation_settings()
    minute, hour = cleanup_schedule(settings.soft_delete_cleanup_interval_minutes)
    return [
        cron(
            cleanup_expired_soft_deletes,
            hour=hour,
            minute=minute,
            unique=True,
            run_at_startup=True,
        )
    ]


# Create the worker class
MaintenanceWorker = create_worker_class(
    functions=[cleanup_expired_soft_deletes],
    cron_jobs=build_cron_jobs(),
    max_jobs=1,  # Single job at a time
    job_timeout=300,  # 5 minutes timeout
)
