"""Application settings for the forum trust layer."""

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from forumtrust_api.config.database import DatabaseSettings
from forumtrust_api.config.federation import FederationSettings
from forumtrust_api.config.rate_limiting import RateLimitingSettings
from forumtrust_api.config.redis import RedisSettings


class AppSettings(BaseSettings):
    """Main application settings."""

    app_name: str = Field(default="Forum Trust API", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    log_level: str = Field(default="INFO", description="Root log level")

    # Component settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    rate_limiting: RateLimitingSettings = Field(default_factory=RateLimitingSettings)
    federation: FederationSettings = Field(default_factory=FederationSettings)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )
