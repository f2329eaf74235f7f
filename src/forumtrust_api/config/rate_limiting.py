"""Write rate limiting configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class RateLimitingSettings(BaseSettings):
    """Rate limiting configuration settings.

    Per-community limits live in ``ModerationThresholds``; these settings only
    control how the shared counter store is addressed.
    """

    rate_limit_key_prefix: str = Field(
        default="ft:", description="Redis key prefix for rate limiting"
    )
    window_seconds: int = Field(
        default=60, description="Width of one counting window in seconds"
    )
    rate_limiting_enabled: bool = Field(
        default=True, description="Enable/disable write rate limiting"
    )

    model_config = SettingsConfigDict(env_prefix="RATE_LIMIT_", case_sensitive=False)
