"""Main application entry point for the Content Trust API."""

import logging

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contenttrust_api.api.coi_flags import router as coi_flags_router
from contenttrust_api.api.edit_requests import router as edit_requests_router
from contenttrust_api.api.experts import router as experts_router
from contenttrust_api.api.moderation_actions import router as moderation_actions_router
from contenttrust_api.api.moderation_queue import router as moderation_queue_router
from contenttrust_api.api.wiki_revisions import router as wiki_revisions_router
from contenttrust_api.config.settings import get_settings
from contenttrust_api.database.connection import close_database
from contenttrust_api.database.connection import db
from contenttrust_api.database.connection import init_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    await init_database()
    logger.info("Content Trust API started")
    yield
    # Shutdown
    await close_database()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Moderation queue, audit trail and expert-gated publishing",
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(moderation_queue_router, prefix="/api/v1")
    app.include_router(moderation_actions_router, prefix="/api/v1")
    app.include_router(experts_router, prefix="/api/v1")
    app.include_router(wiki_revisions_router, prefix="/api/v1")
    app.include_router(edit_requests_router, prefix="/api/v1")
    app.include_router(coi_flags_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""

        db_healthy = await db.health_check()
        pool_stats = await db.get_pool_stats()

        return {
            "status": "ok" if db_healthy else "error",
            "database": {
                "healthy": db_healthy,
                "pool": pool_stats,
            },
        }

    return app


app = create_app()


def main():
    """Main entry point - creates and returns the app instance."""
    return create_app()


if __name__ == "__main__":
    # Only run uvicorn when called directly, not when imported
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "contenttrust_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info",
    )
