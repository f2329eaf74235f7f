"""Report models for content reporting and appeals."""

from datetime import datetime

from pydantic import BaseModel
from pydantic import Field
from pydantic import model_validator

from forumtrust_api.database.models.base import AppealStatus
from forumtrust_api.database.models.base import BaseDBModel
from forumtrust_api.database.models.base import ReportReasonType
from forumtrust_api.database.models.base import ReportStatus
from forumtrust_api.database.models.base import ResolutionType


class Report(BaseDBModel):
    """A user-filed report against a topic or reply."""

    reporter_did: str
    target_uri: str
    target_did: str
    reason_type: ReportReasonType
    description: str | None = None
    community_did: str
    status: ReportStatus = ReportStatus.PENDING
    resolution_type: ResolutionType | None = None
    resolved_by: str | None = None
    resolved_at: datetime | None = None
    appeal_status: AppealStatus = AppealStatus.NONE
    appeal_reason: str | None = None
    appealed_at: datetime | None = None

    @model_validator(mode="after")
    def _resolution_matches_status(self) -> "Report":
        if (self.status == ReportStatus.RESOLVED) != (self.resolution_type is not None):
            raise ValueError("resolution_type is set if and only if status is resolved")
        return self


class ReportCreate(BaseModel):
    """Report filing request."""

    target_uri: str = Field(..., min_length=1)
    reason_type: ReportReasonType
    description: str | None = Field(None, max_length=1000)


class ReportResolve(BaseModel):
    """Moderator decision on a report."""

    resolution_type: ResolutionType


class ReportAppeal(BaseModel):
    """Reporter's appeal of a dismissed report."""

    reason: str = Field(..., min_length=1, max_length=1000)


class ReportPage(BaseModel):
    """One page of reports."""

    reports: list[Report]
    cursor: str | None = None


class ReportedAccount(BaseModel):
    """Report count against one account."""

    did: str
    report_count: int
    warn: bool = False
    auto_block: bool = False
