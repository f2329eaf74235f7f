"""Moderator action audit log repository."""

from asyncpg import Connection
from asyncpg import Record

from forumtrust_api.database.models.moderation_action import ModerationAction
from forumtrust_api.database.models.moderation_action import ModerationActionCreate
from forumtrust_api.database.repositories.base import BaseRepository


class ModerationActionRepository(BaseRepository[ModerationAction]):
    """Repository for moderator actions."""

    def __init__(self, db):
        super().__init__(db, "moderation_actions")

    def _record_to_model(self, record: Record) -> ModerationAction:
        """Convert database record to ModerationAction model."""
        return ModerationAction.model_validate(dict(record))

    async def record(
        self, action: ModerationActionCreate, connection: Connection | None = None
    ) -> ModerationAction:
        """Append an action to the audit log."""
        return await self.create_from_dict(action.model_dump(mode="json"), connection)

    async def list_for_target(self, target_uri: str) -> list[ModerationAction]:
        """Get the audit trail of one item, oldest first."""
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE target_uri = $1
            ORDER BY created_at
        """  # nosec B608

        async with self.db.use(None) as conn:
            records = await conn.fetch(query, target_uri)
            return [self._record_to_model(record) for record in records]
