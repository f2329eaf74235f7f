"""Database configuration for the forum trust layer."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    # Database connection
    database_url: str = Field(
        default="",
        description="PostgreSQL database URL",
    )
    username: str = Field(default="postgres", description="Database username")
    password: str = Field(default="password", description="Database password")
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="forumtrust", description="Database name")
    ssl_mode: str = Field(default="prefer", description="SSL mode")

    # Connection pool settings
    min_pool_size: int = Field(default=5, description="Minimum connection pool size")
    max_pool_size: int = Field(default=20, description="Maximum connection pool size")
    pool_timeout: float = Field(
        default=30.0, description="Connection pool timeout in seconds"
    )
    command_timeout: float = Field(
        default=60.0, description="Command timeout in seconds"
    )

    model_config = SettingsConfigDict(env_prefix="DATABASE_", case_sensitive=False)

    def resolved_url(self) -> str:
        """Get the database URL, with environment variable override."""
        url = (
            self.database_url
            or os.getenv("DATABASE_URL")
            or os.getenv("POSTGRES_URL")
            or f"postgresql://{self.username}:{self.password}@{self.host}:{self.port}/{self.database}?sslmode={self.ssl_mode}"
        )

        # asyncpg only accepts the postgresql:// scheme
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)

        return url
