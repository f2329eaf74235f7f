"""Account trust classification."""

import logging

from datetime import datetime
from datetime import timedelta

from forumtrust_api.clock import Clock
from forumtrust_api.database.models.account import Account
from forumtrust_api.database.models.base import TrustStatus
from forumtrust_api.database.models.community import ModerationThresholds
from forumtrust_api.federation.client import FederationTrustSignal

logger = logging.getLogger(__name__)


def classify(
    account: Account,
    thresholds: ModerationThresholds,
    now: datetime,
    *,
    flagged: bool = False,
) -> TrustStatus:
    """Derive an account's trust tier.

    An account is trusted once its approved contributions reach
    ``trusted_post_threshold``; otherwise it is new until it is
    ``new_account_days`` old. A federation flag can only push the result
    down to new, never up.
    """
    if flagged:
        return TrustStatus.NEW

    if account.approved_contribution_count >= thresholds.trusted_post_threshold:
        return TrustStatus.TRUSTED

    if now - account.account_created_at < timedelta(days=thresholds.new_account_days):
        return TrustStatus.NEW

    return TrustStatus.ESTABLISHED


class TrustService:
    """Gathers the inputs of a trust classification."""

    def __init__(self, trust_signal: FederationTrustSignal, clock: Clock):
        self.trust_signal = trust_signal
        self.clock = clock

    async def is_flagged(self, did: str) -> bool:
        """Ask the federation trust signal; failures count as not flagged."""
        try:
            return await self.trust_signal.is_flagged(did)
        except Exception as e:
            logger.warning(f"Trust signal lookup failed for {did}: {e}")
            return False

    async def evaluate(
        self,
        account: Account,
        thresholds: ModerationThresholds,
        *,
        flagged: bool | None = None,
    ) -> TrustStatus:
        """Classify an account against a community's thresholds.

        The trust signal is consulted unless ``flagged`` is already known.
        """
        if flagged is None:
            flagged = await self.is_flagged(account.did)
        if flagged:
            logger.info(f"Account {account.did} downgraded by federation label")
        return classify(account, thresholds, self.clock.now(), flagged=flagged)
