"""Per-community write rate limiting on a shared Redis counter store."""

import logging

import redis.asyncio as redis

from forumtrust_api.clock import Clock
from forumtrust_api.config.rate_limiting import RateLimitingSettings
from forumtrust_api.database.models.community import ModerationThresholds

logger = logging.getLogger(__name__)


class RateLimitCounter:
    """Fixed-window counter keyed by identity, community and minute bucket.

    A single pipelined ``INCR`` + ``EXPIRE`` both counts the attempt and
    reads the new total, so concurrent writers can never both observe a
    count under the limit. Rejected attempts stay counted.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        settings: RateLimitingSettings,
        clock: Clock,
    ):
        self.redis = redis_client
        self.settings = settings
        self.clock = clock

    def _key(self, identity: str, community_did: str) -> str:
        bucket = int(self.clock.now().timestamp()) // self.settings.window_seconds
        return (
            f"{self.settings.rate_limit_key_prefix}rate:"
            f"{community_did}:{identity}:{bucket}"
        )

    async def check_and_increment(
        self,
        identity: str,
        community_did: str,
        is_new_account: bool,
        thresholds: ModerationThresholds,
    ) -> bool:
        """Count one write attempt and report whether it is over the limit.

        Returns ``False`` when the counter store is unreachable.
        """
        if not self.settings.rate_limiting_enabled:
            return False

        limit = (
            thresholds.new_account_write_rate_per_min
            if is_new_account
            else thresholds.established_write_rate_per_min
        )
        key = self._key(identity, community_did)

        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.incr(key)
            # Buckets outlive two windows of inactivity at most
            pipe.expire(key, self.settings.window_seconds * 2)
            results = await pipe.execute()
            current = int(results[0])
        except Exception as e:
            logger.error(f"Rate limiting check failed: {e}")
            return False

        if current > limit:
            logger.info(
                f"Rate limited {identity} in {community_did}: {current}/{limit}"
            )
            return True

        return False
