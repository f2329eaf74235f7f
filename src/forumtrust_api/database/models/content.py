"""Content models (topics and replies)."""

from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator

from forumtrust_api.database.models.base import ContentType
from forumtrust_api.database.models.base import ModerationStatus


class ContentItem(BaseModel):
    """A topic or reply mirrored into local storage."""

    uri: str
    rkey: str
    content_type: ContentType
    author_did: str
    community_did: str
    category: str
    title: str | None = None
    body: str
    root_uri: str | None = None
    moderation_status: ModerationStatus = ModerationStatus.APPROVED
    is_mod_deleted: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    def visible_to(self, viewer_did: str | None, *, is_moderator: bool) -> bool:
        """Whether a reader may see this item outside of moderation tools."""
        if is_moderator or (viewer_did is not None and viewer_did == self.author_did):
            return True
        return (
            self.moderation_status == ModerationStatus.APPROVED
            and not self.is_mod_deleted
        )


class ContentCreate(BaseModel):
    """Request to create a topic or reply.

    Replies take their category from the topic they answer.
    """

    content_type: ContentType
    community_did: str | None = None
    category: str | None = Field(None, min_length=1, max_length=100)
    title: str | None = Field(None, min_length=1, max_length=200)
    body: str = Field(..., min_length=1, max_length=100_000)
    root_uri: str | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> "ContentCreate":
        if self.content_type == ContentType.TOPIC and not (self.title and self.category):
            raise ValueError("Topics require a title and a category")
        if self.content_type == ContentType.REPLY and not self.root_uri:
            raise ValueError("Replies require a root_uri")
        return self


class ContentPage(BaseModel):
    """One page of a listing."""

    items: list[ContentItem]
    cursor: str | None = None


class ModeratorDeleteRequest(BaseModel):
    """Moderator removal of an item from local listings."""

    uri: str = Field(..., min_length=1)
    reason: str | None = Field(None, max_length=1000)
