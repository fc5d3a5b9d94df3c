"""Test configuration for API tests."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.testclient import TestClient

from contenttrust_api.api.coi_flags import router as coi_flags_router
from contenttrust_api.api.edit_requests import router as edit_requests_router
from contenttrust_api.api.experts import router as experts_router
from contenttrust_api.api.moderation_actions import router as moderation_actions_router
from contenttrust_api.api.moderation_queue import router as moderation_queue_router
from contenttrust_api.api.wiki_revisions import router as wiki_revisions_router
from contenttrust_api.auth.dependencies import get_current_user
from contenttrust_api.database.models.base import UserRole
from contenttrust_api.database.models.user import User
from contenttrust_api.services.coi_flag_service import get_coi_flag_service
from contenttrust_api.services.edit_request_service import get_edit_request_service
from contenttrust_api.services.expert_verification_service import (
    get_expert_verification_service,
)
from contenttrust_api.services.moderation_action_service import (
    get_moderation_action_service,
)
from contenttrust_api.services.moderation_queue_service import (
    get_moderation_queue_service,
)
from contenttrust_api.services.wiki_revision_service import get_wiki_revision_service


@pytest.fixture
def app():
    """Create test FastAPI app without database initialization."""
    # Create app without lifespan to avoid database initialization
    app = FastAPI(title="Content Trust API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(moderation_queue_router, prefix="/api/v1")
    app.include_router(moderation_actions_router, prefix="/api/v1")
    app.include_router(experts_router, prefix="/api/v1")
    app.include_router(wiki_revisions_router, prefix="/api/v1")
    app.include_router(edit_requests_router, prefix="/api/v1")
    app.include_router(coi_flags_router, prefix="/api/v1")

    return app


@pytest.fixture
def member_user():
    return User(pk=uuid4(), role=UserRole.MEMBER)


@pytest.fixture
def moderator_user():
    return User(pk=uuid4(), role=UserRole.MODERATOR)


@pytest.fixture
def admin_user():
    return User(pk=uuid4(), role=UserRole.ADMIN)


@pytest.fixture
def login_as(app):
    """Make every request act as the given user."""

    def _login(user: User) -> User:
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    return _login


@pytest.fixture
def mock_services(app):
    """Replace every service dependency with an AsyncMock."""
    services = {
        "queue": AsyncMock(),
        "action": AsyncMock(),
        "expert": AsyncMock(),
        "wiki": AsyncMock(),
        "edit_request": AsyncMock(),
        "coi": AsyncMock(),
    }
    app.dependency_overrides[get_moderation_queue_service] = lambda: services["queue"]
    app.dependency_overrides[get_moderation_action_service] = lambda: services["action"]
    app.dependency_overrides[get_expert_verification_service] = lambda: services[
        "expert"
    ]
    app.dependency_overrides[get_wiki_revision_service] = lambda: services["wiki"]
    app.dependency_overrides[get_edit_request_service] = lambda: services[
        "edit_request"
    ]
    app.dependency_overrides[get_coi_flag_service] = lambda: services["coi"]
    yield services
    app.dependency_overrides.clear()


@pytest.fixture
def client(app, mock_services):
    """Create test client."""
    return TestClient(app)
