"""Community settings, categories and moderation thresholds."""

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic.alias_generators import to_camel

from forumtrust_api.database.models.base import MaturityRating


class ModerationThresholds(BaseModel):
    """Anti-spam thresholds for a single community.

    Every field carries a default so that a partially stored struct (or no
    struct at all) always validates into a complete one.

    ``topic_creation_delay_enabled`` is stored and round-tripped only; no
    write path gates on it.
    """

    auto_block_report_count: int = Field(default=5, ge=1, le=100)
    warn_threshold: int = Field(default=3, ge=1, le=50)
    first_post_queue_count: int = Field(default=3, ge=0, le=50)
    new_account_days: int = Field(default=7, ge=0, le=90)
    new_account_write_rate_per_min: int = Field(default=3, ge=1, le=30)
    established_write_rate_per_min: int = Field(default=10, ge=1, le=100)
    link_hold_enabled: bool = True
    topic_creation_delay_enabled: bool = True
    burst_post_count: int = Field(default=5, ge=2, le=50)
    burst_window_minutes: int = Field(default=10, ge=1, le=60)
    trusted_post_threshold: int = Field(default=10, ge=1, le=100)

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    def merged(self, update: "ModerationThresholdsUpdate") -> "ModerationThresholds":
        """Return a copy with the fields set on ``update`` applied."""
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        return ModerationThresholds.model_validate({**self.model_dump(), **changes})


class ModerationThresholdsUpdate(BaseModel):
    """Partial update of a community's thresholds."""

    auto_block_report_count: int | None = Field(default=None, ge=1, le=100)
    warn_threshold: int | None = Field(default=None, ge=1, le=50)
    first_post_queue_count: int | None = Field(default=None, ge=0, le=50)
    new_account_days: int | None = Field(default=None, ge=0, le=90)
    new_account_write_rate_per_min: int | None = Field(default=None, ge=1, le=30)
    established_write_rate_per_min: int | None = Field(default=None, ge=1, le=100)
    link_hold_enabled: bool | None = None
    topic_creation_delay_enabled: bool | None = None
    burst_post_count: int | None = Field(default=None, ge=2, le=50)
    burst_window_minutes: int | None = Field(default=None, ge=1, le=60)
    trusted_post_threshold: int | None = Field(default=None, ge=1, le=100)

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


class WordFilterUpdate(BaseModel):
    """Replacement blocklist for a community."""

    words: list[str] = Field(default_factory=list, max_length=500)

    def normalized(self) -> list[str]:
        seen: dict[str, None] = {}
        for word in self.words:
            cleaned = word.strip()
            if 1 <= len(cleaned) <= 100:
                seen.setdefault(cleaned, None)
        return list(seen)


class CommunitySettings(BaseModel):
    """Per-community configuration."""

    community_did: str
    name: str = "Community"
    maturity_rating: MaturityRating = MaturityRating.SAFE
    age_threshold: int = 16
    moderation_thresholds: ModerationThresholds = Field(
        default_factory=ModerationThresholds
    )
    word_filter: list[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class Category(BaseModel):
    """A category within a community."""

    community_did: str
    slug: str
    name: str
    maturity_rating: MaturityRating = MaturityRating.SAFE

    model_config = ConfigDict(from_attributes=True)
