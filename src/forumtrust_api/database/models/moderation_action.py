"""Moderator action audit log models."""

from pydantic import BaseModel

from forumtrust_api.database.models.base import BaseDBModel
from forumtrust_api.database.models.base import ModerationActionType


class ModerationAction(BaseDBModel):
    """A moderator action recorded for audit."""

    action: ModerationActionType
    target_uri: str
    target_did: str
    moderator_did: str
    community_did: str
    reason: str | None = None


class ModerationActionCreate(BaseModel):
    """Fields needed to record a moderator action."""

    action: ModerationActionType
    target_uri: str
    target_did: str
    moderator_did: str
    community_did: str
    reason: str | None = None
