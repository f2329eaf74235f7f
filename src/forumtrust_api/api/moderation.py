"""Moderation API endpoints: reports, appeals and the review queue."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import status

from forumtrust_api.auth.dependencies import Actor
from forumtrust_api.auth.dependencies import get_current_actor
from forumtrust_api.auth.dependencies import require_moderator
from forumtrust_api.database.models.base import QueueReason
from forumtrust_api.database.models.base import ReportStatus
from forumtrust_api.database.models.content import ContentItem
from forumtrust_api.database.models.content import ModeratorDeleteRequest
from forumtrust_api.database.models.queue import QueuePage
from forumtrust_api.database.models.queue import QueueReview
from forumtrust_api.database.models.report import Report
from forumtrust_api.database.models.report import ReportAppeal
from forumtrust_api.database.models.report import ReportCreate
from forumtrust_api.database.models.report import ReportPage
from forumtrust_api.database.models.report import ReportResolve
from forumtrust_api.services.container import get_content_service
from forumtrust_api.services.container import get_queue_service
from forumtrust_api.services.container import get_report_service
from forumtrust_api.services.content_service import ContentService
from forumtrust_api.services.content_service import ModeratorDelete
from forumtrust_api.services.moderation_queue_service import ModerationQueueService
from forumtrust_api.services.report_service import ReportService

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.post("/reports", status_code=status.HTTP_201_CREATED)
async def file_report(
    report_data: ReportCreate,
    actor: Annotated[Actor, Depends(get_current_actor)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
) -> Report:
    """Report a topic or reply."""
    return await report_service.file(actor.did, report_data)


@router.get("/reports")
async def list_reports(
    community_did: Annotated[str, Query(min_length=1)],
    _: Annotated[Actor, Depends(require_moderator)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
    status_filter: Annotated[ReportStatus | None, Query(alias="status")] = None,
    cursor: Annotated[str | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 25,
) -> ReportPage:
    """List reports in a community (moderators only)."""
    return await report_service.list_reports(
        community_did, status=status_filter, cursor=cursor, limit=limit
    )


@router.put("/reports/{report_pk}")
async def resolve_report(
    report_pk: UUID,
    resolution: ReportResolve,
    moderator: Annotated[Actor, Depends(require_moderator)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
) -> Report:
    """Resolve a pending report (moderators only)."""
    return await report_service.resolve(
        report_pk, resolution.resolution_type, moderator.did
    )


@router.post("/reports/{report_pk}/appeal")
async def appeal_report(
    report_pk: UUID,
    appeal: ReportAppeal,
    actor: Annotated[Actor, Depends(get_current_actor)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
) -> Report:
    """Appeal the dismissal of your report."""
    return await report_service.appeal(report_pk, actor.did, appeal.reason)


@router.get("/my-reports")
async def list_my_reports(
    actor: Annotated[Actor, Depends(get_current_actor)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
    cursor: Annotated[str | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 25,
) -> ReportPage:
    """List the reports you filed."""
    return await report_service.list_my_reports(actor.did, cursor=cursor, limit=limit)


@router.get("/queue")
async def list_queue(
    community_did: Annotated[str, Query(min_length=1)],
    _: Annotated[Actor, Depends(require_moderator)],
    queue_service: Annotated[ModerationQueueService, Depends(get_queue_service)],
    reason: Annotated[QueueReason | None, Query()] = None,
    cursor: Annotated[str | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 25,
) -> QueuePage:
    """List held content awaiting review (moderators only)."""
    return await queue_service.list_pending(
        community_did, reason=reason, cursor=cursor, limit=limit
    )


@router.post("/queue/review")
async def review_content(
    review: QueueReview,
    moderator: Annotated[Actor, Depends(require_moderator)],
    queue_service: Annotated[ModerationQueueService, Depends(get_queue_service)],
) -> ContentItem:
    """Approve or reject held content (moderators only)."""
    return await queue_service.review(
        review.content_uri, review.action, moderator.did, review.reason
    )


@router.post("/delete", status_code=status.HTTP_204_NO_CONTENT)
async def moderator_delete(
    request_data: ModeratorDeleteRequest,
    moderator: Annotated[Actor, Depends(require_moderator)],
    content_service: Annotated[ContentService, Depends(get_content_service)],
) -> None:
    """Hide content from every listing (moderators only)."""
    await content_service.delete(
        ModeratorDelete(
            uri=request_data.uri,
            moderator_did=moderator.did,
            reason=request_data.reason,
        )
    )
