"""Federation trust signal backed by a label service."""

import logging

import httpx
import redis.asyncio as redis

from forumtrust_api.config.federation import FederationSettings

logger = logging.getLogger(__name__)

SPAM_LABELS = frozenset({"spam", "!hide"})
CACHE_PREFIX = "labels:"


class LabelerTrustSignal:
    """Flags identities the label service has marked as spam.

    Answers are cached in Redis. Lookup failures are not cached and raise,
    leaving the fallback decision to the caller.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        redis_client: redis.Redis,
        settings: FederationSettings,
    ):
        if not settings.labeler_url:
            raise ValueError("A labeler URL is required")
        self.http = http_client
        self.redis = redis_client
        self.settings = settings
        self.base_url = settings.labeler_url.rstrip("/")

    async def is_flagged(self, identity: str) -> bool:
        cache_key = f"{CACHE_PREFIX}{identity}"
        cached = await self.redis.get(cache_key)
        if cached is not None:
            return cached in (b"1", "1")

        flagged = await self._query(identity)
        await self.redis.set(
            cache_key, "1" if flagged else "0", ex=self.settings.label_cache_ttl
        )
        return flagged

    async def _query(self, identity: str) -> bool:
        response = await self.http.get(
            f"{self.base_url}/xrpc/com.atproto.label.queryLabels",
            params={"uriPatterns": identity},
            timeout=self.settings.labeler_timeout,
        )
        response.raise_for_status()

        active: set[str] = set()
        for label in response.json().get("labels", []):
            if label.get("uri") != identity:
                continue
            value = label.get("val")
            if label.get("neg"):
                active.discard(value)
            else:
                active.add(value)

        flagged = bool(active & SPAM_LABELS)
        if flagged:
            logger.info(f"Label service reports {identity} as spam")
        return flagged
