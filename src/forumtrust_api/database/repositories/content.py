"""Content repository for topics and replies."""

from datetime import datetime
from typing import Any

from asyncpg import Connection
from asyncpg import Record

from forumtrust_api.database.models.base import ContentType
from forumtrust_api.database.models.base import ModerationStatus
from forumtrust_api.database.models.content import ContentItem
from forumtrust_api.database.repositories.base import BaseRepository
from forumtrust_api.pagination import Cursor
from forumtrust_api.pagination import keyset_predicate


class ContentRepository(BaseRepository[ContentItem]):
    """Repository for content item database operations."""

    def __init__(self, db):
        super().__init__(db, "content_items", key_column="uri")

    def _record_to_model(self, record: Record) -> ContentItem:
        """Convert database record to ContentItem model."""
        return ContentItem.model_validate(dict(record))

    async def insert(
        self, item: ContentItem, connection: Connection | None = None
    ) -> ContentItem:
        """Store a newly written content item."""
        return await self.create_from_dict(
            item.model_dump(mode="json", exclude={"created_at"})
            | {"created_at": item.created_at},
            connection,
        )

    async def count_recent_by_author(
        self, author_did: str, community_did: str, since: datetime
    ) -> int:
        """Count items of any status an author wrote in a community since a time."""
        query = f"""
            SELECT COUNT(*) FROM {self.table_name}
            WHERE author_did = $1
            AND community_did = $2
            AND created_at >= $3
        """  # nosec B608

        async with self.db.use(None) as conn:
            result = await conn.fetchval(query, author_did, community_did, since)
            return int(result or 0)

    async def set_status_if_held(
        self,
        uri: str,
        status: ModerationStatus,
        connection: Connection | None = None,
    ) -> ContentItem | None:
        """Move a held item to a final status; ``None`` if it was not held."""
        query = f"""
            UPDATE {self.table_name}
            SET moderation_status = $2
            WHERE uri = $1 AND moderation_status = $3
            RETURNING *
        """  # nosec B608

        async with self.db.use(connection) as conn:
            record = await conn.fetchrow(
                query, uri, status.value, ModerationStatus.HELD.value
            )
            return self._record_to_model(record) if record else None

    async def mark_mod_deleted(
        self, uri: str, connection: Connection | None = None
    ) -> ContentItem | None:
        """Soft delete an item; ``None`` if it was already deleted or absent."""
        query = f"""
            UPDATE {self.table_name}
            SET is_mod_deleted = TRUE
            WHERE uri = $1 AND NOT is_mod_deleted
            RETURNING *
        """  # nosec B608

        async with self.db.use(connection) as conn:
            record = await conn.fetchrow(query, uri)
            return self._record_to_model(record) if record else None

    async def delete_thread(
        self, uri: str, connection: Connection | None = None
    ) -> bool:
        """Remove an item and any replies rooted at it from local storage.

        Run it on a transaction so replies never outlive their topic.
        """
        replies_query = f"DELETE FROM {self.table_name} WHERE root_uri = $1"  # nosec B608
        item_query = f"DELETE FROM {self.table_name} WHERE uri = $1"  # nosec B608

        async with self.db.use(connection) as conn:
            await conn.execute(replies_query, uri)
            result = await conn.execute(item_query, uri)
            return result == "DELETE 1"

    async def list_visible(
        self,
        *,
        categories: list[tuple[str, str]],
        content_type: ContentType | None,
        root_uri: str | None,
        viewer_did: str | None,
        include_hidden: bool,
        cursor: Cursor | None,
        limit: int,
    ) -> list[ContentItem]:
        """List items in the given (community, category) pairs, newest first.

        Returns up to ``limit + 1`` rows so the caller can tell whether a
        further page exists. Unless ``include_hidden`` is set, only approved
        items that are not mod-deleted are returned, plus the viewer's own.
        """
        params: list[Any] = [
            [community for community, _ in categories],
            [category for _, category in categories],
        ]
        conditions = [
            "(community_did, category) IN "
            "(SELECT * FROM unnest($1::text[], $2::text[]))"
        ]

        if content_type is not None:
            params.append(content_type.value)
            conditions.append(f"content_type = ${len(params)}")

        if root_uri is not None:
            params.append(root_uri)
            conditions.append(f"root_uri = ${len(params)}")

        if not include_hidden:
            params.append(ModerationStatus.APPROVED.value)
            visible = f"(moderation_status = ${len(params)} AND NOT is_mod_deleted)"
            if viewer_did is not None:
                params.append(viewer_did)
                visible = f"({visible} OR author_did = ${len(params)})"
            conditions.append(visible)

        if cursor is not None:
            conditions.append(
                keyset_predicate(
                    ordering_column="created_at",
                    tiebreak_column="uri",
                    cursor=cursor,
                    params=params,
                )
            )

        params.append(limit + 1)
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE {" AND ".join(conditions)}
            ORDER BY created_at DESC, uri DESC
            LIMIT ${len(params)}
        """  # nosec B608

        async with self.db.use(None) as conn:
            records = await conn.fetch(query, *params)
            return [self._record_to_model(record) for record in records]
