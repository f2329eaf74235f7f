"""Federation and community configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class FederationSettings(BaseSettings):
    """Settings describing how this forum talks to the federation."""

    community_did: str = Field(
        default="did:plc:placeholder",
        description="Community used when a request does not name one",
    )
    aggregate_mode: bool = Field(
        default=False,
        description="Serve multi-community listings instead of a single community",
    )
    topic_collection: str = Field(
        default="community.forum.topic", description="Record type for topics"
    )
    reply_collection: str = Field(
        default="community.forum.reply", description="Record type for replies"
    )

    labeler_url: str | None = Field(
        default=None, description="Base URL of the label service (optional)"
    )
    labeler_timeout: float = Field(
        default=5.0, description="Label service request timeout in seconds"
    )
    label_cache_ttl: int = Field(
        default=3600, description="Seconds to cache label lookups"
    )
    settings_cache_ttl: int = Field(
        default=60, description="Seconds to cache community moderation settings"
    )
    default_age_threshold: int = Field(
        default=16, description="Age threshold for communities without settings"
    )

    model_config = SettingsConfigDict(env_prefix="FEDERATION_", case_sensitive=False)
