"""Account models for the forum trust layer."""

from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from forumtrust_api.database.models.base import AccountRole
from forumtrust_api.database.models.base import MaturityRating
from forumtrust_api.database.models.base import TrustStatus


class Account(BaseModel):
    """One row per federated identity."""

    did: str
    account_created_at: datetime
    approved_contribution_count: int = Field(default=0, ge=0)
    trust_status: TrustStatus = TrustStatus.NEW
    role: AccountRole = AccountRole.USER
    declared_age: int | None = None
    maturity_pref: MaturityRating = MaturityRating.SAFE

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_moderator(self) -> bool:
        return self.role in (AccountRole.MODERATOR, AccountRole.ADMIN)


class ViewerProfile(BaseModel):
    """The subset of an account that decides what it may read."""

    did: str
    declared_age: int | None = None
    maturity_pref: MaturityRating = MaturityRating.SAFE
    role: AccountRole = AccountRole.USER

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_moderator(self) -> bool:
        return self.role in (AccountRole.MODERATOR, AccountRole.ADMIN)
