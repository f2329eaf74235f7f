"""Fixtures for API endpoint tests."""

from unittest.mock import AsyncMock

import pytest

from fastapi import FastAPI
from fastapi import Request
from fastapi.testclient import TestClient

from forumtrust_api.api.admin import router as admin_router
from forumtrust_api.api.content import router as content_router
from forumtrust_api.api.moderation import router as moderation_router
from forumtrust_api.auth.dependencies import Actor
from forumtrust_api.errors import ForumTrustError
from forumtrust_api.main import forum_trust_error_handler
from forumtrust_api.services.container import get_content_service
from forumtrust_api.services.container import get_queue_service
from forumtrust_api.services.container import get_report_service
from forumtrust_api.services.container import get_settings_service


@pytest.fixture
def services():
    return {
        "content": AsyncMock(),
        "queue": AsyncMock(),
        "report": AsyncMock(),
        "settings": AsyncMock(),
    }


@pytest.fixture
def app(services):
    app = FastAPI()

    @app.middleware("http")
    async def actor_from_headers(request: Request, call_next):
        did = request.headers.get("X-Actor-Did")
        if did:
            request.state.actor = Actor(
                did=did, role=request.headers.get("X-Actor-Role", "user")
            )
        return await call_next(request)

    app.add_exception_handler(ForumTrustError, forum_trust_error_handler)
    app.include_router(content_router, prefix="/api/v1")
    app.include_router(moderation_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")

    app.dependency_overrides[get_content_service] = lambda: services["content"]
    app.dependency_overrides[get_queue_service] = lambda: services["queue"]
    app.dependency_overrides[get_report_service] = lambda: services["report"]
    app.dependency_overrides[get_settings_service] = lambda: services["settings"]
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def user_headers():
    return {"X-Actor-Did": "did:plc:user", "X-Actor-Role": "user"}


@pytest.fixture
def moderator_headers():
    return {"X-Actor-Did": "did:plc:mod", "X-Actor-Role": "moderator"}


@pytest.fixture
def admin_headers():
    return {"X-Actor-Did": "did:plc:admin", "X-Actor-Role": "admin"}
