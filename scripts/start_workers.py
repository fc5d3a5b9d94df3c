#!/usr/bin/env python3
"""
Worker startup script for the Content Trust API.

This script starts the Arq maintenance worker, which runs the expired
soft delete sweep on a cron schedule.
"""

import asyncio
import logging
import signal
import sys

from pathlib import Path

# Add the src directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from arq import create_pool
from arq.worker import Worker

from contenttrust_api.workers.base import get_arq_redis_settings
from contenttrust_api.workers.maintenance_worker import MAINTENANCE_QUEUE
from contenttrust_api.workers.maintenance_worker import MaintenanceWorker

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class WorkerManager:
    """Manages the Arq workers."""

    def __init__(self):
        self.workers: list[Worker] = []
        self.tasks: list[asyncio.Task] = []
        self.redis_pool = None
        self.shutdown_event = asyncio.Event()

    async def start(self):
        """Start all workers."""
        try:
            self.redis_pool = await create_pool(get_arq_redis_settings())
            logger.info("Connected to Redis")

            hooks = MaintenanceWorker()
            worker = Worker(
                functions=list(MaintenanceWorker.functions.values()),  # type: ignore[attr-defined]
                cron_jobs=MaintenanceWorker.cron_jobs,  # type: ignore[attr-defined]
                redis_pool=self.redis_pool,
                queue_name=MAINTENANCE_QUEUE,
                max_jobs=MaintenanceWorker.max_jobs,  # type: ignore[attr-defined]
                job_timeout=MaintenanceWorker.job_timeout,  # type: ignore[attr-defined]
                keep_result=3600,  # Keep results for 1 hour
                on_startup=hooks.startup,
                on_shutdown=hooks.shutdown,
            )

            task = asyncio.create_task(self._run_worker(worker, "maintenance_worker"))
            self.workers.append(worker)
            self.tasks.append(task)
            logger.info("Started maintenance_worker worker")

            # Wait for shutdown signal
            await self.shutdown_event.wait()

        except Exception as e:
            logger.exception(f"Failed to start workers: {e}")
            raise
        finally:
            await self.cleanup()

    async def _run_worker(self, worker: Worker, name: str):
        """Run a single worker with error handling."""
        try:
            await worker.async_run()
        except Exception as e:
            logger.exception(f"Worker {name} failed: {e}")
            # Signal shutdown if any worker fails
            self.shutdown_event.set()

    async def cleanup(self):
        """Clean up resources."""
        logger.info("Shutting down workers...")

        for worker in self.workers:
            try:
                await worker.close()
            except Exception as e:
                logger.error(f"Error closing worker: {e}")

        if self.redis_pool:
            try:
                await self.redis_pool.aclose()
            except Exception as e:
                logger.error(f"Error closing Redis pool: {e}")

        logger.info("Cleanup complete")

    def handle_shutdown(self, signum, frame):
        """Handle shutdown signals."""
        logger.info(f"Received signal {signum}, initiating shutdown...")
        self.shutdown_event.set()


async def main():
    """Main entry point."""
    manager = WorkerManager()

    signal.signal(signal.SIGINT, manager.handle_shutdown)
    signal.signal(signal.SIGTERM, manager.handle_shutdown)

    try:
        await manager.start()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.exception(f"Worker manager failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
