"""Main application entry point for the Forum Trust API."""

import logging

from contextlib import asynccontextmanager

import httpx
import redis.asyncio as redis

from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse

from forumtrust_api.api.admin import router as admin_router
from forumtrust_api.api.content import router as content_router
from forumtrust_api.api.moderation import router as moderation_router
from forumtrust_api.config.settings import AppSettings
from forumtrust_api.database.connection import Database
from forumtrust_api.errors import ForumTrustError
from forumtrust_api.errors import RateLimited
from forumtrust_api.federation.client import NullRepoTracker
from forumtrust_api.federation.client import NullTrustSignal
from forumtrust_api.federation.client import UnconfiguredWriteClient
from forumtrust_api.federation.labeler import LabelerTrustSignal
from forumtrust_api.services.container import Collaborators
from forumtrust_api.services.container import build_services
from forumtrust_api.workers.redis_connection import create_task_pool

logger = logging.getLogger(__name__)


async def forum_trust_error_handler(
    request: Request, exc: ForumTrustError
) -> JSONResponse:
    """Translate domain errors into HTTP responses."""
    headers = {}
    if isinstance(exc, RateLimited):
        headers["Retry-After"] = str(exc.retry_after)

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "retryable": exc.retryable},
        headers=headers,
    )


def create_app(
    settings: AppSettings | None = None,
    collaborators: Collaborators | None = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    ``collaborators`` supplies the federation write client and trust signal;
    when omitted, writes fail as upstream errors until one is provided. The
    same collaborators go to ``create_worker_class`` for the follow-up jobs.
    """
    settings = settings or AppSettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logging.basicConfig(
            level=settings.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        db = Database(settings.database)
        await db.connect()
        redis_client = redis.from_url(
            settings.redis.redis_url,
            max_connections=settings.redis.max_connections,
            retry_on_timeout=settings.redis.retry_on_timeout,
            socket_timeout=settings.redis.socket_timeout,
            socket_connect_timeout=settings.redis.socket_connect_timeout,
        )
        http_client = httpx.AsyncClient()
        task_pool = await create_task_pool(settings.redis)

        wired = collaborators or Collaborators(
            write_client=UnconfiguredWriteClient(),
            trust_signal=NullTrustSignal(),
            repo_tracker=NullRepoTracker(),
        )
        if collaborators is None and settings.federation.labeler_url:
            wired.trust_signal = LabelerTrustSignal(
                http_client, redis_client, settings.federation
            )

        app.state.db = db
        app.state.services = build_services(
            settings, db, redis_client, task_pool, wired
        )
        logger.info(f"{settings.app_name} {settings.version} started")

        yield

        await task_pool.aclose()
        await http_client.aclose()
        await redis_client.aclose()
        await db.disconnect()

    app = FastAPI(
        title=settings.app_name,
        description="Trust and abuse layer for a federated discussion forum",
        version=settings.version,
        lifespan=lifespan,
    )

    app.add_exception_handler(ForumTrustError, forum_trust_error_handler)

    app.include_router(content_router, prefix="/api/v1")
    app.include_router(moderation_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        db_healthy = await request.app.state.db.health_check()
        return {
            "status": "ok" if db_healthy else "error",
            "database": {"healthy": db_healthy},
        }

    return app


def main():
    """Main entry point - creates and returns the app instance."""
    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "forumtrust_api.main:main",
        factory=True,
        host="0.0.0.0",  # nosec B104
        port=8000,
        log_level="info",
    )
