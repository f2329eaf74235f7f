"""Tests for CommunitySettingsService."""

from unittest.mock import AsyncMock

import pytest

from redis.exceptions import ConnectionError as RedisConnectionError

from forumtrust_api.config.federation import FederationSettings
from forumtrust_api.database.models.community import CommunitySettings
from forumtrust_api.database.models.community import ModerationThresholds
from forumtrust_api.database.models.community import ModerationThresholdsUpdate
from forumtrust_api.database.models.community import WordFilterUpdate
from forumtrust_api.services.community_settings_service import (
    CommunitySettingsService,
)

COMMUNITY = "did:plc:community"


@pytest.fixture
def community_repo():
    repo = AsyncMock()
    repo.get.return_value = CommunitySettings(
        community_did=COMMUNITY,
        name="Stored",
        moderation_thresholds=ModerationThresholds(burst_post_count=8),
    )
    return repo


@pytest.fixture
def settings_service(community_repo, fake_redis):
    return CommunitySettingsService(
        community_repo, fake_redis, FederationSettings(default_age_threshold=18)
    )


class TestGetSettings:
    """Test cached reads."""

    @pytest.mark.asyncio
    async def test_second_read_served_from_cache(
        self, settings_service, community_repo
    ):
        first = await settings_service.get_settings(COMMUNITY)
        second = await settings_service.get_settings(COMMUNITY)

        assert first == second
        assert second.moderation_thresholds.burst_post_count == 8
        community_repo.get.assert_awaited_once_with(COMMUNITY)

    @pytest.mark.asyncio
    async def test_cache_entry_expires(self, settings_service, fake_redis):
        await settings_service.get_settings(COMMUNITY)

        ttl = await fake_redis.ttl(f"ft:settings:{COMMUNITY}")

        assert 0 < ttl <= 60

    @pytest.mark.asyncio
    async def test_unknown_community_gets_defaults(
        self, settings_service, community_repo
    ):
        community_repo.get.return_value = None

        settings = await settings_service.get_settings("did:plc:unknown")

        assert settings.age_threshold == 18
        assert settings.moderation_thresholds == ModerationThresholds()
        assert settings.word_filter == []

    @pytest.mark.asyncio
    async def test_cache_outage_falls_back_to_database(self, community_repo):
        redis_client = AsyncMock()
        redis_client.get.side_effect = RedisConnectionError("down")
        redis_client.set.side_effect = RedisConnectionError("down")
        service = CommunitySettingsService(
            community_repo, redis_client, FederationSettings()
        )

        settings = await service.get_settings(COMMUNITY)

        assert settings.name == "Stored"


class TestUpdates:
    """Test threshold and blocklist updates."""

    @pytest.mark.asyncio
    async def test_update_thresholds_merges_and_invalidates(
        self, settings_service, community_repo, fake_redis
    ):
        await settings_service.get_settings(COMMUNITY)
        community_repo.save_thresholds.side_effect = (
            lambda did, thresholds: CommunitySettings(
                community_did=did, moderation_thresholds=thresholds
            )
        )

        result = await settings_service.update_thresholds(
            COMMUNITY, ModerationThresholdsUpdate(warn_threshold=4)
        )

        assert result.warn_threshold == 4
        assert result.burst_post_count == 8
        assert await fake_redis.get(f"ft:settings:{COMMUNITY}") is None

    @pytest.mark.asyncio
    async def test_update_thresholds_for_unknown_community(
        self, settings_service, community_repo
    ):
        community_repo.get.return_value = None
        community_repo.save_thresholds.side_effect = (
            lambda did, thresholds: CommunitySettings(
                community_did=did, moderation_thresholds=thresholds
            )
        )

        result = await settings_service.update_thresholds(
            COMMUNITY, ModerationThresholdsUpdate(burst_window_minutes=30)
        )

        assert result.burst_window_minutes == 30
        assert result.burst_post_count == 5

    @pytest.mark.asyncio
    async def test_update_word_filter_normalizes(
        self, settings_service, community_repo
    ):
        community_repo.save_word_filter.side_effect = (
            lambda did, words: CommunitySettings(community_did=did, word_filter=words)
        )

        words = await settings_service.update_word_filter(
            COMMUNITY, WordFilterUpdate(words=[" spam ", "spam", "casino"])
        )

        assert words == ["spam", "casino"]
        community_repo.save_word_filter.assert_awaited_once_with(
            COMMUNITY, ["spam", "casino"]
        )
