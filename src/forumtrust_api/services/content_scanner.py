"""Screening of new content against community anti-spam rules."""

import logging
import re

from datetime import timedelta

from forumtrust_api.clock import Clock
from forumtrust_api.database.models.base import QueueReason
from forumtrust_api.database.models.base import TrustStatus
from forumtrust_api.database.models.community import ModerationThresholds
from forumtrust_api.database.models.queue import HoldReason
from forumtrust_api.database.models.queue import ScanResult
from forumtrust_api.database.repositories.content import ContentRepository

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"https?://[^\s]+|www\.[^\s]+", re.IGNORECASE)


def match_words(text: str, word_filter: list[str]) -> list[str]:
    """Blocklist terms found in ``text`` as whole words, in blocklist order."""
    matched: list[str] = []
    for word in word_filter:
        if word in matched:
            continue
        if re.search(rf"(?<!\w){re.escape(word)}(?!\w)", text, re.IGNORECASE):
            matched.append(word)
    return matched


def contains_url(text: str) -> bool:
    return URL_PATTERN.search(text) is not None


def evaluate_scan(
    *,
    title: str | None,
    body: str,
    word_filter: list[str],
    thresholds: ModerationThresholds,
    approved_count: int,
    trust_status: TrustStatus,
    recent_count: int,
) -> ScanResult:
    """Run every check and collect all reasons to hold.

    ``recent_count`` is the number of items the author already wrote in the
    burst window, not counting the one being scanned.
    """
    reasons: list[HoldReason] = []

    text = f"{title} {body}" if title else body
    matched = match_words(text, word_filter)
    if matched:
        reasons.append(
            HoldReason(reason=QueueReason.WORD_FILTER, matched_words=matched)
        )

    if approved_count < thresholds.first_post_queue_count:
        reasons.append(HoldReason(reason=QueueReason.FIRST_POST_QUEUE))

    if (
        thresholds.link_hold_enabled
        and trust_status != TrustStatus.TRUSTED
        and contains_url(body)
    ):
        reasons.append(HoldReason(reason=QueueReason.LINK_HOLD))

    if recent_count + 1 > thresholds.burst_post_count:
        reasons.append(HoldReason(reason=QueueReason.BURST))

    return ScanResult(reasons=reasons)


class ContentScanner:
    """Gathers the author's recent activity and screens one item."""

    def __init__(self, content_repo: ContentRepository, clock: Clock):
        self.content_repo = content_repo
        self.clock = clock

    async def scan(
        self,
        *,
        author_did: str,
        community_did: str,
        title: str | None,
        body: str,
        approved_count: int,
        trust_status: TrustStatus,
        thresholds: ModerationThresholds,
        word_filter: list[str],
    ) -> ScanResult:
        since = self.clock.now() - timedelta(minutes=thresholds.burst_window_minutes)
        recent_count = await self.content_repo.count_recent_by_author(
            author_did, community_did, since
        )

        result = evaluate_scan(
            title=title,
            body=body,
            word_filter=word_filter,
            thresholds=thresholds,
            approved_count=approved_count,
            trust_status=trust_status,
            recent_count=recent_count,
        )
        if result.held:
            logger.info(
                f"Holding content by {author_did} in {community_did}: "
                f"{[reason.reason.value for reason in result.reasons]}"
            )
        return result
