"""Base worker classes for the Content Trust background jobs."""

import logging

from collections.abc import Callable
from typing import Any

from arq.connections import RedisSettings

from contenttrust_api.config.redis import get_redis_settings
from contenttrust_api.database.connection import close_database
from contenttrust_api.database.connection import get_db_connection
from contenttrust_api.database.connection import init_database

logger = logging.getLogger(__name__)


def get_arq_redis_settings() -> RedisSettings:
    """Convert Redis settings to Arq format."""
    settings = get_redis_settings()
    return RedisSettings(
        host=settings.host,
        port=settings.port,
        database=settings.database,
        password=settings.password,
        max_connections=settings.max_connections,
    )


class BaseWorker:
    """Base class for all Content Trust workers."""

    def __init__(self):
        self.redis_settings = get_arq_redis_settings()

    async def startup(self, ctx: dict[str, Any]) -> None:
        """Worker startup hook."""
        logger.info(f"Starting {self.__class__.__name__}")
        await init_database()
        ctx["get_db_connection"] = get_db_connection

    async def shutdown(self, ctx: dict[str, Any]) -> None:
        """Worker shutdown hook."""
        logger.info(f"Shutting down {self.__class__.__name__}")
        await close_database()


def create_worker_class(
    functions: list[Callable],
    cron_jobs: list[Any] | None = None,
    max_jobs: int = 10,
    job_timeout: int = 300,
) -> type[BaseWorker]:
    """Create a worker class with the specified functions."""

    class DynamicWorker(BaseWorker):
        pass

    # Set class attributes after class definition
    DynamicWorker.functions = {f.__name__: f for f in functions}  # type: ignore[attr-defined]
    DynamicWorker.cron_jobs = list(cron_jobs or [])  # type: ignore[attr-defined]
    DynamicWorker.max_jobs = max_jobs  # type: ignore[attr-defined]
    DynamicWorker.job_timeout = job_timeout  # type: ignore[attr-defined]

    return DynamicWorker
