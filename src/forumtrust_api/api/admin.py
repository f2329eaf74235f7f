"""Admin API endpoints for community moderation settings."""

from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query

from forumtrust_api.auth.dependencies import Actor
from forumtrust_api.auth.dependencies import require_admin
from forumtrust_api.database.models.community import ModerationThresholds
from forumtrust_api.database.models.community import ModerationThresholdsUpdate
from forumtrust_api.database.models.community import WordFilterUpdate
from forumtrust_api.database.models.report import ReportedAccount
from forumtrust_api.services.community_settings_service import (
    CommunitySettingsService,
)
from forumtrust_api.services.container import get_report_service
from forumtrust_api.services.container import get_settings_service
from forumtrust_api.services.report_service import ReportService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/thresholds")
async def get_thresholds(
    community_did: Annotated[str, Query(min_length=1)],
    _: Annotated[Actor, Depends(require_admin)],
    settings_service: Annotated[
        CommunitySettingsService, Depends(get_settings_service)
    ],
) -> ModerationThresholds:
    """Get a community's anti-spam thresholds, defaults applied."""
    return await settings_service.get_thresholds(community_did)


@router.put("/thresholds")
async def update_thresholds(
    community_did: Annotated[str, Query(min_length=1)],
    update: ModerationThresholdsUpdate,
    _: Annotated[Actor, Depends(require_admin)],
    settings_service: Annotated[
        CommunitySettingsService, Depends(get_settings_service)
    ],
) -> ModerationThresholds:
    """Partially update a community's anti-spam thresholds."""
    return await settings_service.update_thresholds(community_did, update)


@router.get("/word-filter")
async def get_word_filter(
    community_did: Annotated[str, Query(min_length=1)],
    _: Annotated[Actor, Depends(require_admin)],
    settings_service: Annotated[
        CommunitySettingsService, Depends(get_settings_service)
    ],
) -> WordFilterUpdate:
    """Get a community's blocklist."""
    community = await settings_service.get_settings(community_did)
    return WordFilterUpdate(words=community.word_filter)


@router.put("/word-filter")
async def update_word_filter(
    community_did: Annotated[str, Query(min_length=1)],
    update: WordFilterUpdate,
    _: Annotated[Actor, Depends(require_admin)],
    settings_service: Annotated[
        CommunitySettingsService, Depends(get_settings_service)
    ],
) -> WordFilterUpdate:
    """Replace a community's blocklist."""
    words = await settings_service.update_word_filter(community_did, update)
    return WordFilterUpdate(words=words)


@router.get("/reported-users")
async def list_reported_users(
    community_did: Annotated[str, Query(min_length=1)],
    _: Annotated[Actor, Depends(require_admin)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
    limit: Annotated[int, Query(ge=1, le=100)] = 25,
) -> list[ReportedAccount]:
    """Most-reported accounts in a community."""
    return await report_service.reported_accounts(community_did, limit)
