"""Moderation queue: hold records and moderator review."""

import logging

from asyncpg import Connection

from forumtrust_api import pagination
from forumtrust_api.database.connection import Database
from forumtrust_api.database.models.base import ContentType
from forumtrust_api.database.models.base import ModerationActionType
from forumtrust_api.database.models.base import ModerationStatus
from forumtrust_api.database.models.base import QueueReason
from forumtrust_api.database.models.content import ContentItem
from forumtrust_api.database.models.moderation_action import ModerationActionCreate
from forumtrust_api.database.models.queue import HoldReason
from forumtrust_api.database.models.queue import QueuePage
from forumtrust_api.database.repositories.account import AccountRepository
from forumtrust_api.database.repositories.content import ContentRepository
from forumtrust_api.database.repositories.moderation_action import (
    ModerationActionRepository,
)
from forumtrust_api.database.repositories.moderation_queue import (
    ModerationQueueRepository,
)
from forumtrust_api.errors import Conflict
from forumtrust_api.errors import NotFound
from forumtrust_api.errors import ValidationError
from forumtrust_api.services.community_settings_service import (
    CommunitySettingsService,
)
from forumtrust_api.services.trust_service import TrustService

logger = logging.getLogger(__name__)

REVIEW_OUTCOMES = {
    ModerationActionType.APPROVE: ModerationStatus.APPROVED,
    ModerationActionType.REJECT: ModerationStatus.REJECTED,
}


class ModerationQueueService:
    """Records why content was held and applies moderator decisions."""

    def __init__(
        self,
        db: Database,
        queue_repo: ModerationQueueRepository,
        content_repo: ContentRepository,
        account_repo: AccountRepository,
        action_repo: ModerationActionRepository,
        settings_service: CommunitySettingsService,
        trust_service: TrustService,
    ):
        self.db = db
        self.queue_repo = queue_repo
        self.content_repo = content_repo
        self.account_repo = account_repo
        self.action_repo = action_repo
        self.settings_service = settings_service
        self.trust_service = trust_service

    async def enqueue(
        self,
        connection: Connection,
        *,
        content_uri: str,
        content_type: ContentType,
        author_did: str,
        community_did: str,
        reasons: list[HoldReason],
    ) -> None:
        """Record hold reasons inside the transaction that stored the content."""
        if not reasons:
            return
        await self.queue_repo.insert_reasons(
            connection,
            content_uri=content_uri,
            content_type=content_type,
            author_did=author_did,
            community_did=community_did,
            reasons=reasons,
        )

    async def review(
        self,
        content_uri: str,
        action: ModerationActionType,
        moderator_did: str,
        reason: str | None = None,
    ) -> ContentItem:
        """Approve or reject a held item.

        Approval counts toward the author's trust. Raises ``Conflict`` when
        another moderator already decided the item.
        """
        if action not in REVIEW_OUTCOMES:
            raise ValidationError(f"Unsupported review action: {action.value}")

        item = await self.content_repo.get(content_uri)
        if item is None:
            raise NotFound("Content not found")

        thresholds = await self.settings_service.get_thresholds(item.community_did)
        flagged = await self.trust_service.is_flagged(item.author_did)

        async with self.db.get_transaction() as conn:
            updated = await self.content_repo.set_status_if_held(
                content_uri, REVIEW_OUTCOMES[action], connection=conn
            )
            if updated is None:
                raise Conflict("Content is no longer awaiting review")

            await self.action_repo.record(
                ModerationActionCreate(
                    action=action,
                    target_uri=content_uri,
                    target_did=updated.author_did,
                    moderator_did=moderator_did,
                    community_did=updated.community_did,
                    reason=reason,
                ),
                connection=conn,
            )

            if action == ModerationActionType.APPROVE:
                account = await self.account_repo.increment_approved(
                    updated.author_did, connection=conn
                )
                if account is not None:
                    status = await self.trust_service.evaluate(
                        account, thresholds, flagged=flagged
                    )
                    await self.account_repo.set_trust_status(
                        account.did, status, connection=conn
                    )

        logger.info(f"Review of {content_uri} by {moderator_did}: {action.value}")
        return updated

    async def list_pending(
        self,
        community_did: str,
        *,
        reason: QueueReason | None = None,
        cursor: str | None = None,
        limit: int = 25,
    ) -> QueuePage:
        rows = await self.queue_repo.list_pending(
            community_did,
            reason=reason,
            cursor=pagination.decode(cursor),
            limit=limit,
        )
        items, next_cursor = pagination.paginate(
            rows, limit, lambda row: (row.created_at, str(row.pk))
        )
        return QueuePage(items=items, cursor=next_cursor)
