"""Test configuration and fixtures for the Forum Trust API tests."""

from contextlib import asynccontextmanager
from datetime import UTC
from datetime import datetime
from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from fakeredis.aioredis import FakeRedis

from forumtrust_api.clock import FrozenClock
from forumtrust_api.config.federation import FederationSettings
from forumtrust_api.config.rate_limiting import RateLimitingSettings
from forumtrust_api.database.models.account import Account
from forumtrust_api.database.models.base import ContentType
from forumtrust_api.database.models.base import ModerationStatus
from forumtrust_api.database.models.community import Category
from forumtrust_api.database.models.community import CommunitySettings
from forumtrust_api.database.models.community import ModerationThresholds
from forumtrust_api.database.models.content import ContentItem
from forumtrust_api.federation.client import NullTrustSignal
from forumtrust_api.federation.client import WriteResult
from forumtrust_api.services.content_scanner import ContentScanner
from forumtrust_api.services.content_service import ContentService
from forumtrust_api.services.moderation_queue_service import ModerationQueueService
from forumtrust_api.services.post_commit import PostCommitQueue
from forumtrust_api.services.rate_limiting_service import RateLimitCounter
from forumtrust_api.services.trust_service import TrustService

COMMUNITY_DID = "did:plc:community"
AUTHOR_DID = "did:plc:author"
NOW = datetime(2026, 3, 2, 12, 0, 30, tzinfo=UTC)


class FakeDatabase:
    """Stand-in for ``Database`` that hands out one mock transaction connection."""

    def __init__(self):
        self.connection = AsyncMock()
        self.transactions = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def get_transaction(self):
        self.transactions += 1
        try:
            yield self.connection
        except Exception:
            self.rollbacks += 1
            raise

    @asynccontextmanager
    async def use(self, connection):
        yield connection or self.connection


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def thresholds() -> ModerationThresholds:
    return ModerationThresholds()


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest_asyncio.fixture
async def fake_redis():
    client = FakeRedis(decode_responses=True)
    try:
        yield client
    finally:
        await client.flushall()


@pytest.fixture
def make_account():
    """Factory for accounts of a given age and contribution count."""

    def _make(
        did: str = AUTHOR_DID,
        *,
        age: timedelta = timedelta(days=30),
        approved: int = 0,
        **extra,
    ) -> Account:
        return Account(
            did=did,
            account_created_at=NOW - age,
            approved_contribution_count=approved,
            **extra,
        )

    return _make


@pytest.fixture
def make_content():
    """Factory for stored content items."""

    def _make(
        rkey: str = "3kabc",
        *,
        author_did: str = AUTHOR_DID,
        content_type: ContentType = ContentType.TOPIC,
        category: str = "general",
        status: ModerationStatus = ModerationStatus.APPROVED,
        created_at: datetime = NOW,
        **extra,
    ) -> ContentItem:
        collection = (
            "community.forum.topic"
            if content_type == ContentType.TOPIC
            else "community.forum.reply"
        )
        return ContentItem(
            uri=f"at://{author_did}/{collection}/{rkey}",
            rkey=rkey,
            content_type=content_type,
            author_did=author_did,
            community_did=COMMUNITY_DID,
            category=category,
            title="A topic" if content_type == ContentType.TOPIC else None,
            body="Hello there",
            moderation_status=status,
            created_at=created_at,
            **extra,
        )

    return _make


@pytest.fixture
def community_settings() -> CommunitySettings:
    return CommunitySettings(community_did=COMMUNITY_DID, name="Test Community")


@pytest_asyncio.fixture
async def content_env(fake_db, fake_redis, clock, community_settings):
    """A ContentService wired to mock repositories and a fake Redis."""
    federation = FederationSettings(community_did=COMMUNITY_DID)

    content_repo = AsyncMock()
    content_repo.get.return_value = None
    content_repo.count_recent_by_author.return_value = 0
    content_repo.insert.side_effect = lambda item, connection=None: item

    account_repo = AsyncMock()
    account_repo.get.return_value = None
    account_repo.increment_approved.return_value = None

    community_repo = AsyncMock()
    community_repo.get_category.return_value = Category(
        community_did=COMMUNITY_DID, slug="general", name="General"
    )

    settings_service = AsyncMock()
    settings_service.get_settings.return_value = community_settings
    settings_service.get_thresholds.return_value = (
        community_settings.moderation_thresholds
    )

    queue_repo = AsyncMock()
    action_repo = AsyncMock()

    write_client = AsyncMock()
    counter = {"n": 0}

    async def _write(identity, record_type, record):
        counter["n"] += 1
        return WriteResult(
            uri=f"at://{identity}/{record_type}/rkey{counter['n']}",
            cid=f"cid{counter['n']}",
        )

    write_client.write.side_effect = _write

    trust_signal = NullTrustSignal()
    trust_service = TrustService(trust_signal, clock)
    queue_service = ModerationQueueService(
        fake_db,
        queue_repo,
        content_repo,
        account_repo,
        action_repo,
        settings_service,
        trust_service,
    )
    task_pool = AsyncMock()
    post_commit = PostCommitQueue(task_pool)

    service = ContentService(
        db=fake_db,
        content_repo=content_repo,
        account_repo=account_repo,
        community_repo=community_repo,
        action_repo=action_repo,
        settings_service=settings_service,
        trust_service=trust_service,
        rate_limiter=RateLimitCounter(fake_redis, RateLimitingSettings(), clock),
        scanner=ContentScanner(content_repo, clock),
        queue_service=queue_service,
        write_client=write_client,
        post_commit=post_commit,
        federation=federation,
        clock=clock,
    )

    return SimpleNamespace(
        service=service,
        db=fake_db,
        content_repo=content_repo,
        account_repo=account_repo,
        community_repo=community_repo,
        settings_service=settings_service,
        queue_repo=queue_repo,
        action_repo=action_repo,
        write_client=write_client,
        queue_service=queue_service,
        task_pool=task_pool,
        federation=federation,
    )

