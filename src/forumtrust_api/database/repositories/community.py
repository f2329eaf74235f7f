"""Community settings and category repository."""

from asyncpg import Record

from forumtrust_api.database.models.base import MaturityRating
from forumtrust_api.database.models.community import Category
from forumtrust_api.database.models.community import CommunitySettings
from forumtrust_api.database.models.community import ModerationThresholds
from forumtrust_api.database.repositories.base import BaseRepository


class CommunityRepository(BaseRepository[CommunitySettings]):
    """Repository for per-community settings."""

    def __init__(self, db):
        super().__init__(db, "community_settings", key_column="community_did")

    def _record_to_model(self, record: Record) -> CommunitySettings:
        """Convert database record to CommunitySettings model.

        Stored thresholds may be partial or missing; defaults fill the gaps.
        """
        data = dict(record)
        data["moderation_thresholds"] = ModerationThresholds.model_validate(
            data.get("moderation_thresholds") or {}
        )
        data["word_filter"] = list(data.get("word_filter") or [])
        return CommunitySettings.model_validate(data)

    async def list_all(self) -> list[CommunitySettings]:
        """Get every configured community."""
        query = "SELECT * FROM community_settings ORDER BY community_did"

        async with self.db.use(None) as conn:
            records = await conn.fetch(query)
            return [self._record_to_model(record) for record in records]

    async def save_thresholds(
        self, community_did: str, thresholds: ModerationThresholds
    ) -> CommunitySettings:
        """Store the complete thresholds struct for a community."""
        query = """
            INSERT INTO community_settings (community_did, moderation_thresholds)
            VALUES ($1, $2)
            ON CONFLICT (community_did)
            DO UPDATE SET moderation_thresholds = EXCLUDED.moderation_thresholds
            RETURNING *
        """

        async with self.db.use(None) as conn:
            record = await conn.fetchrow(
                query, community_did, thresholds.model_dump(by_alias=True)
            )
            return self._record_to_model(record)

    async def save_word_filter(
        self, community_did: str, words: list[str]
    ) -> CommunitySettings:
        """Replace the blocklist for a community."""
        query = """
            INSERT INTO community_settings (community_did, word_filter)
            VALUES ($1, $2)
            ON CONFLICT (community_did)
            DO UPDATE SET word_filter = EXCLUDED.word_filter
            RETURNING *
        """

        async with self.db.use(None) as conn:
            record = await conn.fetchrow(query, community_did, words)
            return self._record_to_model(record)

    async def get_category(self, community_did: str, slug: str) -> Category | None:
        """Get a single category."""
        query = """
            SELECT * FROM categories
            WHERE community_did = $1 AND slug = $2
        """

        async with self.db.use(None) as conn:
            record = await conn.fetchrow(query, community_did, slug)
            return Category.model_validate(dict(record)) if record else None

    async def list_categories(
        self, community_dids: list[str], ratings: list[MaturityRating]
    ) -> list[Category]:
        """Get the categories of the given communities with an allowed rating."""
        query = """
            SELECT * FROM categories
            WHERE community_did = ANY($1::text[])
            AND maturity_rating = ANY($2::text[])
            ORDER BY community_did, slug
        """

        async with self.db.use(None) as conn:
            records = await conn.fetch(
                query, community_dids, [rating.value for rating in ratings]
            )
            return [Category.model_validate(dict(record)) for record in records]
