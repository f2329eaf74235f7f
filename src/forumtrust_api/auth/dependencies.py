"""Caller identity dependencies for FastAPI endpoints.

Sessions are handled upstream; whatever authenticates the request stores an
``Actor`` on ``request.state.actor`` before it reaches these routers.
"""

import logging

from collections.abc import Callable

from fastapi import Depends
from fastapi import HTTPException
from fastapi import Request
from fastapi import status
from pydantic import BaseModel

from forumtrust_api.database.models.base import AccountRole

logger = logging.getLogger(__name__)


class Actor(BaseModel):
    """The authenticated caller."""

    did: str
    role: AccountRole = AccountRole.USER

    @property
    def is_moderator(self) -> bool:
        return self.role in (AccountRole.MODERATOR, AccountRole.ADMIN)


async def get_optional_actor(request: Request) -> Actor | None:
    """Get the caller if authenticated, otherwise None."""
    actor = getattr(request.state, "actor", None)
    if actor is None:
        return None
    if isinstance(actor, Actor):
        return actor
    return Actor.model_validate(actor)


async def get_current_actor(request: Request) -> Actor:
    """Get the authenticated caller or reject the request."""
    actor = await get_optional_actor(request)
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required"
        )
    return actor


get_current_actor_dependency = Depends(get_current_actor)


def require_role(required_role: AccountRole) -> Callable:
    """Dependency factory to require a specific role or higher."""

    async def role_dependency(actor: Actor = get_current_actor_dependency) -> Actor:
        role_hierarchy = {
            AccountRole.USER: 0,
            AccountRole.MODERATOR: 1,
            AccountRole.ADMIN: 2,
        }

        if role_hierarchy[actor.role] < role_hierarchy[required_role]:
            logger.warning(f"{actor.did} lacks role {required_role.value}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {required_role.value}",
            )

        return actor

    return role_dependency


require_moderator = require_role(AccountRole.MODERATOR)
require_admin = require_role(AccountRole.ADMIN)
