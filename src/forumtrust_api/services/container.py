"""Construction of the service graph, once per process."""

from dataclasses import dataclass

import redis.asyncio as redis

from arq.connections import ArqRedis
from fastapi import Request

from forumtrust_api.clock import Clock
from forumtrust_api.clock import SystemClock
from forumtrust_api.config.settings import AppSettings
from forumtrust_api.database.connection import Database
from forumtrust_api.database.repositories.account import AccountRepository
from forumtrust_api.database.repositories.community import CommunityRepository
from forumtrust_api.database.repositories.content import ContentRepository
from forumtrust_api.database.repositories.moderation_action import (
    ModerationActionRepository,
)
from forumtrust_api.database.repositories.moderation_queue import (
    ModerationQueueRepository,
)
from forumtrust_api.database.repositories.report import ReportRepository
from forumtrust_api.federation.client import ContentWriteClient
from forumtrust_api.federation.client import FederationTrustSignal
from forumtrust_api.federation.client import RepoTracker
from forumtrust_api.services.community_settings_service import (
    CommunitySettingsService,
)
from forumtrust_api.services.content_scanner import ContentScanner
from forumtrust_api.services.content_service import ContentService
from forumtrust_api.services.moderation_queue_service import ModerationQueueService
from forumtrust_api.services.post_commit import PostCommitQueue
from forumtrust_api.services.rate_limiting_service import RateLimitCounter
from forumtrust_api.services.report_service import ReportService
from forumtrust_api.services.trust_service import TrustService


@dataclass
class Collaborators:
    """External systems the trust layer talks to.

    The API process uses the write client and trust signal; the federation
    worker uses the write client and repo tracker.
    """

    write_client: ContentWriteClient
    trust_signal: FederationTrustSignal
    repo_tracker: RepoTracker


@dataclass
class TrustServices:
    """Every workflow, sharing one database, one Redis client and one clock."""

    settings_service: CommunitySettingsService
    content_service: ContentService
    queue_service: ModerationQueueService
    report_service: ReportService


def build_services(
    settings: AppSettings,
    db: Database,
    redis_client: redis.Redis,
    task_pool: ArqRedis,
    collaborators: Collaborators,
    clock: Clock | None = None,
) -> TrustServices:
    clock = clock or SystemClock()

    account_repo = AccountRepository(db)
    community_repo = CommunityRepository(db)
    content_repo = ContentRepository(db)
    action_repo = ModerationActionRepository(db)
    queue_repo = ModerationQueueRepository(db)
    report_repo = ReportRepository(db)

    settings_service = CommunitySettingsService(
        community_repo,
        redis_client,
        settings.federation,
        key_prefix=settings.rate_limiting.rate_limit_key_prefix,
    )
    trust_service = TrustService(collaborators.trust_signal, clock)
    queue_service = ModerationQueueService(
        db,
        queue_repo,
        content_repo,
        account_repo,
        action_repo,
        settings_service,
        trust_service,
    )
    post_commit = PostCommitQueue(task_pool)

    content_service = ContentService(
        db=db,
        content_repo=content_repo,
        account_repo=account_repo,
        community_repo=community_repo,
        action_repo=action_repo,
        settings_service=settings_service,
        trust_service=trust_service,
        rate_limiter=RateLimitCounter(redis_client, settings.rate_limiting, clock),
        scanner=ContentScanner(content_repo, clock),
        queue_service=queue_service,
        write_client=collaborators.write_client,
        post_commit=post_commit,
        federation=settings.federation,
        clock=clock,
    )
    report_service = ReportService(report_repo, content_repo, settings_service, clock)

    return TrustServices(
        settings_service=settings_service,
        content_service=content_service,
        queue_service=queue_service,
        report_service=report_service,
    )


def get_services(request: Request) -> TrustServices:
    return request.app.state.services


def get_content_service(request: Request) -> ContentService:
    return get_services(request).content_service


def get_queue_service(request: Request) -> ModerationQueueService:
    return get_services(request).queue_service


def get_report_service(request: Request) -> ReportService:
    return get_services(request).report_service


def get_settings_service(request: Request) -> CommunitySettingsService:
    return get_services(request).settings_service
