"""Content creation, reading and deletion through the trust layer."""

import logging

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from forumtrust_api import pagination
from forumtrust_api.clock import Clock
from forumtrust_api.config.federation import FederationSettings
from forumtrust_api.database.connection import Database
from forumtrust_api.database.models.account import Account
from forumtrust_api.database.models.account import ViewerProfile
from forumtrust_api.database.models.base import AccountRole
from forumtrust_api.database.models.base import ContentType
from forumtrust_api.database.models.base import MaturityRating
from forumtrust_api.database.models.base import ModerationActionType
from forumtrust_api.database.models.base import ModerationStatus
from forumtrust_api.database.models.base import TrustStatus
from forumtrust_api.database.models.community import CommunitySettings
from forumtrust_api.database.models.content import ContentCreate
from forumtrust_api.database.models.content import ContentItem
from forumtrust_api.database.models.content import ContentPage
from forumtrust_api.database.models.moderation_action import ModerationActionCreate
from forumtrust_api.database.models.queue import ScanResult
from forumtrust_api.database.repositories.account import AccountRepository
from forumtrust_api.database.repositories.community import CommunityRepository
from forumtrust_api.database.repositories.content import ContentRepository
from forumtrust_api.database.repositories.moderation_action import (
    ModerationActionRepository,
)
from forumtrust_api.errors import Conflict
from forumtrust_api.errors import Forbidden
from forumtrust_api.errors import NotFound
from forumtrust_api.errors import RateLimited
from forumtrust_api.errors import UpstreamWriteFailure
from forumtrust_api.errors import ValidationError
from forumtrust_api.federation.client import ContentWriteClient
from forumtrust_api.services import maturity
from forumtrust_api.services.community_settings_service import (
    CommunitySettingsService,
)
from forumtrust_api.services.content_scanner import ContentScanner
from forumtrust_api.services.moderation_queue_service import ModerationQueueService
from forumtrust_api.services.post_commit import PostCommitQueue
from forumtrust_api.services.rate_limiting_service import RateLimitCounter
from forumtrust_api.services.trust_service import TrustService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorDelete:
    """The author removes their own item from their repository and locally."""

    uri: str
    author_did: str


@dataclass(frozen=True)
class ModeratorDelete:
    """A moderator hides an item locally; the author's repository is untouched."""

    uri: str
    moderator_did: str
    reason: str | None = None


type ContentDelete = AuthorDelete | ModeratorDelete


def _position(item: ContentItem) -> tuple[datetime, str]:
    return item.created_at, item.uri


class ContentService:
    """Runs every write through trust, rate, scan and queue decisions."""

    def __init__(
        self,
        *,
        db: Database,
        content_repo: ContentRepository,
        account_repo: AccountRepository,
        community_repo: CommunityRepository,
        action_repo: ModerationActionRepository,
        settings_service: CommunitySettingsService,
        trust_service: TrustService,
        rate_limiter: RateLimitCounter,
        scanner: ContentScanner,
        queue_service: ModerationQueueService,
        write_client: ContentWriteClient,
        post_commit: PostCommitQueue,
        federation: FederationSettings,
        clock: Clock,
    ):
        self.db = db
        self.content_repo = content_repo
        self.account_repo = account_repo
        self.community_repo = community_repo
        self.action_repo = action_repo
        self.settings_service = settings_service
        self.trust_service = trust_service
        self.rate_limiter = rate_limiter
        self.scanner = scanner
        self.queue_service = queue_service
        self.write_client = write_client
        self.post_commit = post_commit
        self.federation = federation
        self.clock = clock

    def _collection(self, content_type: ContentType) -> str:
        if content_type == ContentType.TOPIC:
            return self.federation.topic_collection
        return self.federation.reply_collection

    async def viewer_profile(
        self, did: str, role: AccountRole = AccountRole.USER
    ) -> ViewerProfile:
        """Build the read profile of an authenticated caller."""
        account = await self.account_repo.get(did)
        if account is None:
            return ViewerProfile(did=did, role=role)
        return ViewerProfile(
            did=did,
            declared_age=account.declared_age,
            maturity_pref=account.maturity_pref,
            role=role,
        )

    async def _category_rating(
        self, community_did: str, slug: str
    ) -> MaturityRating | None:
        category = await self.community_repo.get_category(community_did, slug)
        return category.maturity_rating if category else None

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create(
        self, author_did: str, data: ContentCreate, role: AccountRole = AccountRole.USER
    ) -> ContentItem:
        """Publish or hold a new topic or reply.

        Raises ``RateLimited`` for untrusted authors over their write rate and
        ``UpstreamWriteFailure`` when the author's repository rejects the
        record; nothing is stored locally in either case.
        """
        community_did = data.community_did or self.federation.community_did
        community = await self.settings_service.get_settings(community_did)

        category = await self._resolve_category(community_did, data)
        rating = await self._category_rating(community_did, category)
        if rating is None:
            if data.content_type == ContentType.TOPIC:
                raise ValidationError(f"Unknown category: {category}")
            logger.warning(f"Category {category} missing in {community_did}")
            rating = MaturityRating.SAFE

        stored = await self.account_repo.get(author_did)
        account = stored or Account(
            did=author_did, account_created_at=self.clock.now(), role=role
        )

        viewer = ViewerProfile(
            did=author_did,
            declared_age=account.declared_age,
            maturity_pref=account.maturity_pref,
            role=role,
        )
        maximum = maturity.max_allowed(viewer, community.age_threshold)
        if not maturity.allows(maximum, rating):
            raise Forbidden("Content restricted by maturity settings")

        thresholds = community.moderation_thresholds
        flagged = await self.trust_service.is_flagged(author_did)
        trust_status = await self.trust_service.evaluate(
            account, thresholds, flagged=flagged
        )
        is_moderator = role in (AccountRole.MODERATOR, AccountRole.ADMIN)

        if trust_status != TrustStatus.TRUSTED:
            limited = await self.rate_limiter.check_and_increment(
                author_did,
                community_did,
                trust_status == TrustStatus.NEW,
                thresholds,
            )
            if limited:
                raise RateLimited("Too many posts. Please wait before posting again.")

        if is_moderator:
            scan = ScanResult()
        else:
            scan = await self.scanner.scan(
                author_did=author_did,
                community_did=community_did,
                title=data.title,
                body=data.body,
                approved_count=account.approved_contribution_count,
                trust_status=trust_status,
                thresholds=thresholds,
                word_filter=community.word_filter,
            )

        now = self.clock.now()
        collection = self._collection(data.content_type)
        record = self._build_record(data, community_did, category, collection, now)

        try:
            written = await self.write_client.write(author_did, collection, record)
        except Exception as e:
            logger.error(f"Upstream write failed for {author_did}: {e}")
            raise UpstreamWriteFailure("Failed to write to your repository") from e

        item = ContentItem(
            uri=written.uri,
            rkey=written.uri.rsplit("/", 1)[-1],
            content_type=data.content_type,
            author_did=author_did,
            community_did=community_did,
            category=category,
            title=data.title,
            body=data.body,
            root_uri=data.root_uri,
            moderation_status=(
                ModerationStatus.HELD if scan.held else ModerationStatus.APPROVED
            ),
            created_at=now,
        )

        try:
            item = await self._store(
                account, item, scan, trust_status, community, flagged=flagged
            )
        except Exception:
            await self.post_commit.undo_write(author_did, collection, item.rkey)
            raise

        if stored is None:
            await self.post_commit.track_repo(author_did)

        return item

    async def _resolve_category(self, community_did: str, data: ContentCreate) -> str:
        if data.content_type == ContentType.TOPIC:
            return data.category or ""

        root = await self.content_repo.get(data.root_uri)
        if (
            root is None
            or root.content_type != ContentType.TOPIC
            or root.community_did != community_did
        ):
            raise NotFound("Topic not found")
        return root.category

    def _build_record(
        self,
        data: ContentCreate,
        community_did: str,
        category: str,
        collection: str,
        now: datetime,
    ) -> dict[str, Any]:
        record: dict[str, Any] = {
            "$type": collection,
            "content": data.body,
            "community": community_did,
            "category": category,
            "createdAt": now.isoformat(),
        }
        if data.title is not None:
            record["title"] = data.title
        if data.root_uri is not None:
            record["root"] = data.root_uri
        return record

    async def _store(
        self,
        account: Account,
        item: ContentItem,
        scan: ScanResult,
        trust_status: TrustStatus,
        community: CommunitySettings,
        *,
        flagged: bool,
    ) -> ContentItem:
        """Write the account, the item and its hold reasons in one transaction."""
        async with self.db.get_transaction() as conn:
            await self.account_repo.ensure(
                account.model_copy(update={"trust_status": trust_status}),
                connection=conn,
            )
            stored = await self.content_repo.insert(item, connection=conn)

            if scan.held:
                await self.queue_service.enqueue(
                    conn,
                    content_uri=stored.uri,
                    content_type=stored.content_type,
                    author_did=stored.author_did,
                    community_did=stored.community_did,
                    reasons=scan.reasons,
                )
                await self.account_repo.set_trust_status(
                    account.did, trust_status, connection=conn
                )
            else:
                updated = await self.account_repo.increment_approved(
                    account.did, connection=conn
                )
                if updated is not None:
                    trust_status = await self.trust_service.evaluate(
                        updated, community.moderation_thresholds, flagged=flagged
                    )
                await self.account_repo.set_trust_status(
                    account.did, trust_status, connection=conn
                )

        return stored

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def list(
        self,
        viewer: ViewerProfile | None,
        *,
        community_did: str | None = None,
        category: str | None = None,
        content_type: ContentType | None = None,
        root_uri: str | None = None,
        cursor: str | None = None,
        limit: int = 25,
    ) -> ContentPage:
        """List content newest first, narrowed to what the viewer may see."""
        if self.federation.aggregate_mode and community_did is None:
            communities = await self.settings_service.list_communities()
            caps = maturity.allowed_communities(communities, viewer)
        else:
            community = await self.settings_service.get_settings(
                community_did or self.federation.community_did
            )
            caps = {
                community.community_did: maturity.max_allowed(
                    viewer, community.age_threshold
                )
            }

        if not caps:
            return ContentPage(items=[])

        widest = max(caps.values(), key=maturity.MATURITY_ORDER.__getitem__)
        categories = await self.community_repo.list_categories(
            list(caps), sorted(maturity.allowed_ratings(widest))
        )
        pairs = maturity.allowed_categories(categories, caps)
        if category is not None:
            pairs = [pair for pair in pairs if pair[1] == category]

        if not pairs:
            return ContentPage(items=[])

        rows = await self.content_repo.list_visible(
            categories=pairs,
            content_type=content_type,
            root_uri=root_uri,
            viewer_did=viewer.did if viewer else None,
            include_hidden=viewer is not None and viewer.is_moderator,
            cursor=pagination.decode(cursor),
            limit=limit,
        )
        items, next_cursor = pagination.paginate(rows, limit, _position)
        return ContentPage(items=items, cursor=next_cursor)

    async def get(self, uri: str, viewer: ViewerProfile | None) -> ContentItem:
        """Fetch one item if the viewer may see it."""
        item = await self.content_repo.get(uri)
        is_moderator = viewer is not None and viewer.is_moderator
        if item is None or not item.visible_to(
            viewer.did if viewer else None, is_moderator=is_moderator
        ):
            raise NotFound("Content not found")

        community = await self.settings_service.get_settings(item.community_did)
        rating = await self._category_rating(item.community_did, item.category)
        if rating is None:
            logger.warning(
                f"Category {item.category} missing in {item.community_did}, treating as safe"
            )
            rating = MaturityRating.SAFE

        if not maturity.allows(
            maturity.max_allowed(viewer, community.age_threshold), rating
        ):
            raise Forbidden("Content restricted by maturity settings")

        return item

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete(self, request: ContentDelete) -> None:
        match request:
            case AuthorDelete():
                await self._author_delete(request)
            case ModeratorDelete():
                await self._moderator_delete(request)

    async def _author_delete(self, request: AuthorDelete) -> None:
        item = await self.content_repo.get(request.uri)
        if item is None:
            raise NotFound("Content not found")
        if item.author_did != request.author_did:
            raise Forbidden("Can only delete your own content")

        try:
            await self.write_client.delete(
                request.author_did, self._collection(item.content_type), item.rkey
            )
        except Exception as e:
            logger.error(f"Upstream delete failed for {request.uri}: {e}")
            raise UpstreamWriteFailure("Failed to delete from your repository") from e

        async with self.db.get_transaction() as conn:
            await self.content_repo.delete_thread(request.uri, connection=conn)

        logger.info(f"{request.author_did} deleted {request.uri}")

    async def _moderator_delete(self, request: ModeratorDelete) -> None:
        async with self.db.get_transaction() as conn:
            item = await self.content_repo.mark_mod_deleted(request.uri, connection=conn)
            if item is None:
                if await self.content_repo.get(request.uri, connection=conn) is None:
                    raise NotFound("Content not found")
                raise Conflict("Content is already deleted")

            await self.action_repo.record(
                ModerationActionCreate(
                    action=ModerationActionType.DELETE,
                    target_uri=item.uri,
                    target_did=item.author_did,
                    moderator_did=request.moderator_did,
                    community_did=item.community_did,
                    reason=request.reason,
                ),
                connection=conn,
            )

        logger.info(f"{request.moderator_did} removed {request.uri}")
