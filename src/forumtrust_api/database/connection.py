"""Database connection management for the forum trust layer."""

import json
import logging

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import asyncpg

from asyncpg import Connection
from asyncpg import Pool

from forumtrust_api.config.database import DatabaseSettings

logger = logging.getLogger(__name__)


async def _init_connection(connection: Connection) -> None:
    """Decode JSONB columns into Python objects."""
    await connection.set_type_codec(
        "jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
    )


class Database:
    """Database connection manager with connection pooling.

    One instance is constructed per process and handed to every repository.
    """

    def __init__(self, settings: DatabaseSettings):
        self._pool: Pool | None = None
        self._settings = settings

    async def connect(self) -> None:
        """Initialize the database connection pool."""
        if self._pool is not None:
            logger.warning("Database pool already initialized")
            return

        try:
            self._pool = await asyncpg.create_pool(
                self._settings.resolved_url(),
                min_size=self._settings.min_pool_size,
                max_size=self._settings.max_pool_size,
                timeout=self._settings.pool_timeout,
                command_timeout=self._settings.command_timeout,
                init=_init_connection,
                server_settings={
                    "application_name": "forumtrust-api",
                    "timezone": "UTC",
                },
            )
            logger.info("Database connection pool initialized")

        except Exception as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    async def disconnect(self) -> None:
        """Close the database connection pool."""
        if self._pool is None:
            logger.warning("Database pool not initialized")
            return

        await self._pool.close()
        self._pool = None
        logger.info("Database connection pool closed")

    @asynccontextmanager
    async def get_connection(self) -> AsyncGenerator[Connection]:
        """Get a database connection from the pool."""
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call connect() first.")

        async with self._pool.acquire() as connection:
            try:
                yield connection
            except Exception as e:
                logger.error(f"Database connection error: {e}")
                raise

    @asynccontextmanager
    async def get_transaction(self) -> AsyncGenerator[Connection]:
        """Get a database connection with an active transaction.

        The transaction commits when the block exits normally and rolls back
        on any exception, so multi-statement writes apply all or nothing.
        """
        async with self.get_connection() as connection:
            async with connection.transaction():
                yield connection

    @asynccontextmanager
    async def use(self, connection: Connection | None) -> AsyncGenerator[Connection]:
        """Reuse the caller's connection, or borrow one from the pool."""
        if connection is not None:
            yield connection
            return

        async with self.get_connection() as fresh:
            yield fresh

    async def health_check(self) -> bool:
        """Check if the database connection is healthy."""
        try:
            async with self.get_connection() as connection:
                await connection.fetchval("SELECT 1")
            return True
        except (asyncpg.PostgresError, OSError, RuntimeError) as e:
            logger.error(f"Database health check failed: {e}")
            return False
