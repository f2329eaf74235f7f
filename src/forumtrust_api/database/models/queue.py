"""Moderation queue models."""

from pydantic import BaseModel
from pydantic import Field

from forumtrust_api.database.models.base import BaseDBModel
from forumtrust_api.database.models.base import ContentType
from forumtrust_api.database.models.base import ModerationActionType
from forumtrust_api.database.models.base import ModerationStatus
from forumtrust_api.database.models.base import QueueReason


class HoldReason(BaseModel):
    """One reason a piece of content was held."""

    reason: QueueReason
    matched_words: list[str] | None = None


class ScanResult(BaseModel):
    """Outcome of screening one piece of content."""

    reasons: list[HoldReason] = Field(default_factory=list)

    @property
    def held(self) -> bool:
        return bool(self.reasons)


class ModerationQueueEntry(BaseDBModel):
    """Immutable record of why content was held."""

    content_uri: str
    content_type: ContentType
    author_did: str
    community_did: str
    queue_reason: QueueReason
    matched_words: list[str] | None = None


class QueueItem(ModerationQueueEntry):
    """Queue entry joined with the current state of its content."""

    moderation_status: ModerationStatus


class QueuePage(BaseModel):
    """One page of the moderation queue."""

    items: list[QueueItem]
    cursor: str | None = None


class QueueReview(BaseModel):
    """Moderator decision on a held item."""

    content_uri: str = Field(..., min_length=1)
    action: ModerationActionType
    reason: str | None = Field(None, max_length=1000)
