"""Base models and types for the forum trust layer database."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict


class TrustStatus(str, Enum):
    """Trust tier of an account."""

    NEW = "new"
    ESTABLISHED = "established"
    TRUSTED = "trusted"


class AccountRole(str, Enum):
    """Role of an account within the forum."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class ModerationStatus(str, Enum):
    """Publication state of a content item."""

    APPROVED = "approved"
    HELD = "held"
    REJECTED = "rejected"


class ContentType(str, Enum):
    """Kinds of content a member can write."""

    TOPIC = "topic"
    REPLY = "reply"


class QueueReason(str, Enum):
    """Why a content item was held."""

    WORD_FILTER = "word_filter"
    FIRST_POST_QUEUE = "first_post_queue"
    LINK_HOLD = "link_hold"
    BURST = "burst"


class MaturityRating(str, Enum):
    """Maturity rating of categories, communities and viewer preferences."""

    SAFE = "safe"
    MATURE = "mature"
    ADULT = "adult"


class ReportReasonType(str, Enum):
    """Reason a user gives when filing a report."""

    SPAM = "spam"
    SEXUAL = "sexual"
    HARASSMENT = "harassment"
    VIOLATION = "violation"
    MISLEADING = "misleading"
    OTHER = "other"


class ReportStatus(str, Enum):
    """Review state of a report."""

    PENDING = "pending"
    RESOLVED = "resolved"


class ResolutionType(str, Enum):
    """Outcome recorded when a report is resolved."""

    DISMISSED = "dismissed"
    WARNED = "warned"
    LABELED = "labeled"
    REMOVED = "removed"
    BANNED = "banned"


class AppealStatus(str, Enum):
    """Appeal state of a report."""

    NONE = "none"
    PENDING = "pending"
    REJECTED = "rejected"


class ModerationActionType(str, Enum):
    """Moderator actions recorded in the audit log."""

    APPROVE = "approve"
    REJECT = "reject"
    DELETE = "delete"


class BaseDBModel(BaseModel):
    """Base model for database entities keyed by a UUID."""

    pk: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
