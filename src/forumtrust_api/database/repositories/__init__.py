"""Database repositories for the forum trust layer."""

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

__all__ = [
    "AccountRepository",
    "CommunityRepository",
    "ContentRepository",
    "ModerationActionRepository",
    "ModerationQueueRepository",
    "ReportRepository",
]
