"""Follow-up jobs enqueued after the primary transaction commits."""

import logging

from typing import Any

from arq.connections import ArqRedis

logger = logging.getLogger(__name__)

TRACK_REPO_JOB = "track_repo"
UNDO_WRITE_JOB = "undo_write"


class PostCommitQueue:
    """Hands best-effort follow-up work to the federation worker.

    Jobs live in Redis and outlast the process that enqueued them. A failure
    to enqueue is logged and never reaches the request that scheduled it.
    """

    def __init__(self, pool: ArqRedis):
        self.pool = pool

    async def enqueue(self, function: str, *args: Any, job_id: str) -> None:
        try:
            await self.pool.enqueue_job(function, *args, _job_id=job_id)
        except Exception as e:
            logger.error(f"Failed to enqueue {job_id}: {e}")

    async def track_repo(self, did: str) -> None:
        """Ask the ingestion side to follow a newly seen author."""
        await self.enqueue(TRACK_REPO_JOB, did, job_id=f"track-repo:{did}")

    async def undo_write(self, identity: str, record_type: str, rkey: str) -> None:
        """Remove an upstream record whose local row was never stored."""
        await self.enqueue(
            UNDO_WRITE_JOB,
            identity,
            record_type,
            rkey,
            job_id=f"undo-write:{identity}/{record_type}/{rkey}",
        )
