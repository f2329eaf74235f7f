"""Moderation queue repository."""

from typing import Any

from asyncpg import Connection
from asyncpg import Record

from forumtrust_api.database.models.base import ContentType
from forumtrust_api.database.models.base import ModerationStatus
from forumtrust_api.database.models.base import QueueReason
from forumtrust_api.database.models.queue import HoldReason
from forumtrust_api.database.models.queue import ModerationQueueEntry
from forumtrust_api.database.models.queue import QueueItem
from forumtrust_api.database.repositories.base import BaseRepository
from forumtrust_api.pagination import Cursor
from forumtrust_api.pagination import keyset_predicate


class ModerationQueueRepository(BaseRepository[ModerationQueueEntry]):
    """Repository for held-content queue rows."""

    def __init__(self, db):
        super().__init__(db, "moderation_queue")

    def _record_to_model(self, record: Record) -> ModerationQueueEntry:
        """Convert database record to ModerationQueueEntry model."""
        return ModerationQueueEntry.model_validate(dict(record))

    async def insert_reasons(
        self,
        connection: Connection,
        *,
        content_uri: str,
        content_type: ContentType,
        author_did: str,
        community_did: str,
        reasons: list[HoldReason],
    ) -> None:
        """Write one row per hold reason on the caller's transaction."""
        query = f"""
            INSERT INTO {self.table_name}
                (content_uri, content_type, author_did, community_did, queue_reason, matched_words)
            VALUES ($1, $2, $3, $4, $5, $6)
        """  # nosec B608

        await connection.executemany(
            query,
            [
                (
                    content_uri,
                    content_type.value,
                    author_did,
                    community_did,
                    reason.reason.value,
                    reason.matched_words,
                )
                for reason in reasons
            ],
        )

    async def list_pending(
        self,
        community_did: str,
        *,
        reason: QueueReason | None,
        cursor: Cursor | None,
        limit: int,
    ) -> list[QueueItem]:
        """Queue rows whose content is still held, newest first.

        Returns up to ``limit + 1`` rows.
        """
        params: list[Any] = [community_did, ModerationStatus.HELD.value]
        conditions = ["q.community_did = $1", "c.moderation_status = $2"]

        if reason is not None:
            params.append(reason.value)
            conditions.append(f"q.queue_reason = ${len(params)}")

        if cursor is not None:
            conditions.append(
                keyset_predicate(
                    ordering_column="q.created_at",
                    tiebreak_column="q.pk::text",
                    cursor=cursor,
                    params=params,
                )
            )

        params.append(limit + 1)
        query = f"""
            SELECT q.*, c.moderation_status
            FROM {self.table_name} q
            JOIN content_items c ON c.uri = q.content_uri
            WHERE {" AND ".join(conditions)}
            ORDER BY q.created_at DESC, q.pk::text DESC
            LIMIT ${len(params)}
        """  # nosec B608

        async with self.db.use(None) as conn:
            records = await conn.fetch(query, *params)
            return [QueueItem.model_validate(dict(record)) for record in records]
