"""Report intake, resolution and appeal."""

import logging

from uuid import UUID

import asyncpg

from forumtrust_api import pagination
from forumtrust_api.clock import Clock
from forumtrust_api.database.models.base import AppealStatus
from forumtrust_api.database.models.base import ReportStatus
from forumtrust_api.database.models.base import ResolutionType
from forumtrust_api.database.models.report import Report
from forumtrust_api.database.models.report import ReportCreate
from forumtrust_api.database.models.report import ReportedAccount
from forumtrust_api.database.models.report import ReportPage
from forumtrust_api.database.repositories.content import ContentRepository
from forumtrust_api.database.repositories.report import ReportRepository
from forumtrust_api.errors import AlreadyAppealed
from forumtrust_api.errors import AlreadyResolved
from forumtrust_api.errors import ConcurrentModification
from forumtrust_api.errors import Conflict
from forumtrust_api.errors import DuplicateReport
from forumtrust_api.errors import Forbidden
from forumtrust_api.errors import NotDismissed
from forumtrust_api.errors import NotResolved
from forumtrust_api.errors import ReportNotFound
from forumtrust_api.errors import SelfReport
from forumtrust_api.errors import TargetNotFound
from forumtrust_api.errors import ValidationError
from forumtrust_api.federation.uri import parse_record_uri
from forumtrust_api.services.community_settings_service import (
    CommunitySettingsService,
)

logger = logging.getLogger(__name__)


def _position(report: Report) -> tuple:
    return report.created_at, str(report.pk)


class ReportService:
    """State machine for user-filed reports.

    ``pending -> resolved``; a dismissed report may be appealed once by its
    reporter, which re-opens it as ``pending`` with ``appeal_status`` set.
    Dismissing it again rejects the appeal for good.
    """

    def __init__(
        self,
        report_repo: ReportRepository,
        content_repo: ContentRepository,
        settings_service: CommunitySettingsService,
        clock: Clock,
    ):
        self.report_repo = report_repo
        self.content_repo = content_repo
        self.settings_service = settings_service
        self.clock = clock

    async def file(self, reporter_did: str, report_data: ReportCreate) -> Report:
        """File a report against a topic or reply."""
        target = parse_record_uri(report_data.target_uri)
        if target is None:
            raise ValidationError("Invalid target URI format")

        if target.did == reporter_did:
            raise SelfReport()

        content = await self.content_repo.get(report_data.target_uri)
        if content is None:
            raise TargetNotFound()

        if await self.report_repo.has_pending(reporter_did, report_data.target_uri):
            raise DuplicateReport()

        try:
            report = await self.report_repo.create_from_dict(
                {
                    "reporter_did": reporter_did,
                    "target_uri": report_data.target_uri,
                    "target_did": target.did,
                    "reason_type": report_data.reason_type.value,
                    "description": report_data.description,
                    "community_did": content.community_did,
                }
            )
        except asyncpg.UniqueViolationError as e:
            # Lost a race with a concurrent filing of the same report
            raise DuplicateReport() from e

        logger.info(
            f"Report {report.pk} filed by {reporter_did} on {report.target_uri} "
            f"({report.reason_type.value})"
        )
        return report

    async def resolve(
        self, report_pk: UUID, resolution_type: ResolutionType, moderator_did: str
    ) -> Report:
        """Resolve a pending report, including one re-opened by appeal."""
        report = await self.report_repo.get(report_pk)
        if report is None:
            raise ReportNotFound()

        if report.status != ReportStatus.PENDING:
            raise AlreadyResolved()

        appeal_status = report.appeal_status
        if report.appeal_status == AppealStatus.PENDING:
            appeal_status = (
                AppealStatus.REJECTED
                if resolution_type == ResolutionType.DISMISSED
                else AppealStatus.NONE
            )

        updated = await self.report_repo.resolve(
            report_pk,
            resolution_type=resolution_type,
            resolved_by=moderator_did,
            resolved_at=self.clock.now(),
            expected_appeal_status=report.appeal_status,
            appeal_status=appeal_status,
        )
        if updated is None:
            raise ConcurrentModification("Report")

        logger.info(
            f"Report {report_pk} resolved by {moderator_did}: {resolution_type.value}"
        )
        return updated

    async def appeal(self, report_pk: UUID, reporter_did: str, reason: str) -> Report:
        """Appeal a dismissed report, re-opening it for review."""
        report = await self.report_repo.get(report_pk)
        if report is None:
            raise ReportNotFound()

        if report.reporter_did != reporter_did:
            raise Forbidden("Only the reporter can appeal a report")

        if report.appeal_status != AppealStatus.NONE:
            raise AlreadyAppealed()

        if report.status != ReportStatus.RESOLVED:
            raise NotResolved()

        if report.resolution_type != ResolutionType.DISMISSED:
            raise NotDismissed()

        try:
            updated = await self.report_repo.appeal(
                report_pk,
                reporter_did=reporter_did,
                reason=reason,
                appealed_at=self.clock.now(),
            )
        except asyncpg.UniqueViolationError as e:
            raise Conflict("You already have a pending report on this content") from e
        if updated is None:
            raise ConcurrentModification("Report")

        logger.info(f"Report {report_pk} appealed by {reporter_did}")
        return updated

    async def list_reports(
        self,
        community_did: str,
        *,
        status: ReportStatus | None = None,
        cursor: str | None = None,
        limit: int = 25,
    ) -> ReportPage:
        rows = await self.report_repo.list_reports(
            community_did=community_did,
            status=status,
            cursor=pagination.decode(cursor),
            limit=limit,
        )
        reports, next_cursor = pagination.paginate(rows, limit, _position)
        return ReportPage(reports=reports, cursor=next_cursor)

    async def list_my_reports(
        self, reporter_did: str, *, cursor: str | None = None, limit: int = 25
    ) -> ReportPage:
        rows = await self.report_repo.list_reports(
            reporter_did=reporter_did,
            cursor=pagination.decode(cursor),
            limit=limit,
        )
        reports, next_cursor = pagination.paginate(rows, limit, _position)
        return ReportPage(reports=reports, cursor=next_cursor)

    async def reported_accounts(
        self, community_did: str, limit: int = 25
    ) -> list[ReportedAccount]:
        """Most-reported accounts, flagged against the community thresholds."""
        thresholds = await self.settings_service.get_thresholds(community_did)
        rows = await self.report_repo.most_reported(community_did, limit)
        return [
            ReportedAccount(
                did=did,
                report_count=count,
                warn=count >= thresholds.warn_threshold,
                auto_block=count >= thresholds.auto_block_report_count,
            )
            for did, count in rows
        ]
