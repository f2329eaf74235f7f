"""Arq worker for follow-ups against the federation collaborators.

Run with ``arq forumtrust_api.workers.federation_worker.FederationWorker``.
Deployments with real collaborators build their own settings class through
:func:`create_worker_class`.
"""

import logging

from typing import Any

from arq import Retry

from forumtrust_api.config.redis import RedisSettings
from forumtrust_api.federation.client import ContentWriteClient
from forumtrust_api.federation.client import NullRepoTracker
from forumtrust_api.federation.client import NullTrustSignal
from forumtrust_api.federation.client import RepoTracker
from forumtrust_api.federation.client import UnconfiguredWriteClient
from forumtrust_api.services.container import Collaborators
from forumtrust_api.workers.redis_connection import get_arq_redis_settings

logger = logging.getLogger(__name__)

UNDO_RETRY_DELAY_SECONDS = 5


async def track_repo(ctx: dict[str, Any], did: str) -> bool:
    """Start following an author's repository unless it is already followed."""
    tracker: RepoTracker = ctx["repo_tracker"]
    if await tracker.is_tracked(did):
        return False

    await tracker.track(did)
    logger.info(f"Started tracking repository of {did}")
    return True


async def undo_write(
    ctx: dict[str, Any], identity: str, record_type: str, rkey: str
) -> None:
    """Delete an upstream record left behind by a failed local store."""
    client: ContentWriteClient = ctx["write_client"]
    try:
        await client.delete(identity, record_type, rkey)
    except Exception as e:
        logger.warning(
            f"Undo of {identity}/{record_type}/{rkey} failed "
            f"(try {ctx['job_try']}): {e}"
        )
        raise Retry(defer=ctx["job_try"] * UNDO_RETRY_DELAY_SECONDS) from e

    logger.info(f"Removed orphaned record {identity}/{record_type}/{rkey}")


def create_worker_class(
    collaborators: Collaborators | None = None,
    redis_settings: RedisSettings | None = None,
    max_jobs: int = 10,
    job_timeout: int = 60,
) -> type:
    """Create an Arq settings class that runs the follow-up jobs."""
    wired = collaborators or Collaborators(
        write_client=UnconfiguredWriteClient(),
        trust_signal=NullTrustSignal(),
        repo_tracker=NullRepoTracker(),
    )

    async def startup(ctx: dict[str, Any]) -> None:
        logger.info("Starting federation worker")
        ctx["write_client"] = wired.write_client
        ctx["repo_tracker"] = wired.repo_tracker

    async def shutdown(ctx: dict[str, Any]) -> None:
        logger.info("Shutting down federation worker")

    class WorkerSettings:
        pass

    WorkerSettings.functions = [track_repo, undo_write]  # type: ignore[attr-defined]
    WorkerSettings.on_startup = startup  # type: ignore[attr-defined]
    WorkerSettings.on_shutdown = shutdown  # type: ignore[attr-defined]
    WorkerSettings.redis_settings = get_arq_redis_settings(  # type: ignore[attr-defined]
        redis_settings or RedisSettings()
    )
    WorkerSettings.max_jobs = max_jobs  # type: ignore[attr-defined]
    WorkerSettings.job_timeout = job_timeout  # type: ignore[attr-defined]

    return WorkerSettings


FederationWorker = create_worker_class()
