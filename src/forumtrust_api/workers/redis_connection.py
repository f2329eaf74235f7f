"""Redis connection management for Arq workers."""

from arq import create_pool
from arq.connections import ArqRedis
from arq.connections import RedisSettings as ArqRedisSettings

from forumtrust_api.config.redis import RedisSettings


def get_arq_redis_settings(settings: RedisSettings) -> ArqRedisSettings:
    """Convert Redis settings to Arq format."""
    return ArqRedisSettings.from_dsn(settings.redis_url)


async def create_task_pool(settings: RedisSettings) -> ArqRedis:
    """Open the pool used to enqueue jobs for the workers."""
    return await create_pool(get_arq_redis_settings(settings))
