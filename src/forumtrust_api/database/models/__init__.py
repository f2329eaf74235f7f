"""Database models for the forum trust layer."""

from forumtrust_api.database.models.account import Account
from forumtrust_api.database.models.account import ViewerProfile
from forumtrust_api.database.models.base import AccountRole
from forumtrust_api.database.models.base import AppealStatus
from forumtrust_api.database.models.base import ContentType
from forumtrust_api.database.models.base import MaturityRating
from forumtrust_api.database.models.base import ModerationActionType
from forumtrust_api.database.models.base import ModerationStatus
from forumtrust_api.database.models.base import QueueReason
from forumtrust_api.database.models.base import ReportReasonType
from forumtrust_api.database.models.base import ReportStatus
from forumtrust_api.database.models.base import ResolutionType
from forumtrust_api.database.models.base import TrustStatus
from forumtrust_api.database.models.community import Category
from forumtrust_api.database.models.community import CommunitySettings
from forumtrust_api.database.models.community import ModerationThresholds
from forumtrust_api.database.models.community import ModerationThresholdsUpdate
from forumtrust_api.database.models.content import ContentCreate
from forumtrust_api.database.models.content import ContentItem
from forumtrust_api.database.models.content import ContentPage
from forumtrust_api.database.models.queue import HoldReason
from forumtrust_api.database.models.queue import ModerationQueueEntry
from forumtrust_api.database.models.queue import ScanResult
from forumtrust_api.database.models.report import Report
from forumtrust_api.database.models.report import ReportCreate

__all__ = [
    "Account",
    "AccountRole",
    "AppealStatus",
    "Category",
    "CommunitySettings",
    "ContentCreate",
    "ContentItem",
    "ContentPage",
    "ContentType",
    "HoldReason",
    "MaturityRating",
    "ModerationActionType",
    "ModerationQueueEntry",
    "ModerationStatus",
    "ModerationThresholds",
    "ModerationThresholdsUpdate",
    "QueueReason",
    "Report",
    "ReportCreate",
    "ReportReasonType",
    "ReportStatus",
    "ResolutionType",
    "ScanResult",
    "TrustStatus",
    "ViewerProfile",
]
