"""Community moderation settings with a short-lived Redis cache."""

import logging

import redis.asyncio as redis

from pydantic import ValidationError as PydanticValidationError
from redis.exceptions import RedisError

from forumtrust_api.config.federation import FederationSettings
from forumtrust_api.database.models.community import CommunitySettings
from forumtrust_api.database.models.community import ModerationThresholds
from forumtrust_api.database.models.community import ModerationThresholdsUpdate
from forumtrust_api.database.models.community import WordFilterUpdate
from forumtrust_api.database.repositories.community import CommunityRepository

logger = logging.getLogger(__name__)


class CommunitySettingsService:
    """Loads and updates per-community settings.

    Reads go through Redis for ``settings_cache_ttl`` seconds; every update
    drops the cached copy. Cache failures fall back to the database.
    """

    def __init__(
        self,
        community_repo: CommunityRepository,
        redis_client: redis.Redis,
        settings: FederationSettings,
        key_prefix: str = "ft:",
    ):
        self.community_repo = community_repo
        self.redis = redis_client
        self.settings = settings
        self.key_prefix = key_prefix

    def _cache_key(self, community_did: str) -> str:
        return f"{self.key_prefix}settings:{community_did}"

    def _defaults(self, community_did: str) -> CommunitySettings:
        return CommunitySettings(
            community_did=community_did,
            age_threshold=self.settings.default_age_threshold,
        )

    async def get_settings(self, community_did: str) -> CommunitySettings:
        """Get a community's settings, defaults applied."""
        key = self._cache_key(community_did)
        try:
            cached = await self.redis.get(key)
            if cached is not None:
                return CommunitySettings.model_validate_json(cached)
        except (RedisError, PydanticValidationError) as e:
            logger.warning(f"Settings cache read failed for {community_did}: {e}")

        stored = await self.community_repo.get(community_did)
        result = stored or self._defaults(community_did)

        try:
            await self.redis.set(
                key, result.model_dump_json(), ex=self.settings.settings_cache_ttl
            )
        except RedisError as e:
            logger.warning(f"Settings cache write failed for {community_did}: {e}")

        return result

    async def get_thresholds(self, community_did: str) -> ModerationThresholds:
        return (await self.get_settings(community_did)).moderation_thresholds

    async def list_communities(self) -> list[CommunitySettings]:
        return await self.community_repo.list_all()

    async def update_thresholds(
        self, community_did: str, update: ModerationThresholdsUpdate
    ) -> ModerationThresholds:
        """Merge a partial update onto the stored thresholds or the defaults."""
        current = await self.community_repo.get(community_did)
        base = current.moderation_thresholds if current else ModerationThresholds()
        merged = base.merged(update)

        saved = await self.community_repo.save_thresholds(community_did, merged)
        await self._invalidate(community_did)
        logger.info(f"Updated moderation thresholds for {community_did}")
        return saved.moderation_thresholds

    async def update_word_filter(
        self, community_did: str, update: WordFilterUpdate
    ) -> list[str]:
        saved = await self.community_repo.save_word_filter(
            community_did, update.normalized()
        )
        await self._invalidate(community_did)
        logger.info(
            f"Updated word filter for {community_did} ({len(saved.word_filter)} terms)"
        )
        return saved.word_filter

    async def _invalidate(self, community_did: str) -> None:
        try:
            await self.redis.delete(self._cache_key(community_did))
        except RedisError as e:
            logger.warning(f"Settings cache invalidation failed for {community_did}: {e}")
