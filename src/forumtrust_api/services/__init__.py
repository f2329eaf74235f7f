"""Service layer for the Forum Trust API."""

from forumtrust_api.services.community_settings_service import (
    CommunitySettingsService,
)
from forumtrust_api.services.content_scanner import ContentScanner
from forumtrust_api.services.content_service import ContentService
from forumtrust_api.services.moderation_queue_service import ModerationQueueService
from forumtrust_api.services.rate_limiting_service import RateLimitCounter
from forumtrust_api.services.report_service import ReportService
from forumtrust_api.services.trust_service import TrustService

__all__ = [
    "CommunitySettingsService",
    "ContentScanner",
    "ContentService",
    "ModerationQueueService",
    "RateLimitCounter",
    "ReportService",
    "TrustService",
]
