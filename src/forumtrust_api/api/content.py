"""Content API endpoints for topics and replies."""

from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import status

from forumtrust_api.auth.dependencies import Actor
from forumtrust_api.auth.dependencies import get_current_actor
from forumtrust_api.auth.dependencies import get_optional_actor
from forumtrust_api.database.models.base import ContentType
from forumtrust_api.database.models.content import ContentCreate
from forumtrust_api.database.models.content import ContentItem
from forumtrust_api.database.models.content import ContentPage
from forumtrust_api.services.container import get_content_service
from forumtrust_api.services.content_service import AuthorDelete
from forumtrust_api.services.content_service import ContentService

router = APIRouter(prefix="/content", tags=["content"])


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_content(
    content_data: ContentCreate,
    actor: Annotated[Actor, Depends(get_current_actor)],
    content_service: Annotated[ContentService, Depends(get_content_service)],
) -> ContentItem:
    """Create a topic or reply; it may be held for review."""
    return await content_service.create(actor.did, content_data, role=actor.role)


@router.get("/")
async def list_content(
    actor: Annotated[Actor | None, Depends(get_optional_actor)],
    content_service: Annotated[ContentService, Depends(get_content_service)],
    community_did: Annotated[str | None, Query()] = None,
    category: Annotated[str | None, Query()] = None,
    content_type: Annotated[ContentType | None, Query()] = None,
    root_uri: Annotated[str | None, Query()] = None,
    cursor: Annotated[str | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 25,
) -> ContentPage:
    """List content the caller may see, newest first."""
    viewer = (
        await content_service.viewer_profile(actor.did, actor.role) if actor else None
    )
    return await content_service.list(
        viewer,
        community_did=community_did,
        category=category,
        content_type=content_type,
        root_uri=root_uri,
        cursor=cursor,
        limit=limit,
    )


@router.get("/item")
async def get_content(
    uri: Annotated[str, Query(min_length=1)],
    actor: Annotated[Actor | None, Depends(get_optional_actor)],
    content_service: Annotated[ContentService, Depends(get_content_service)],
) -> ContentItem:
    """Get a single topic or reply."""
    viewer = (
        await content_service.viewer_profile(actor.did, actor.role) if actor else None
    )
    return await content_service.get(uri, viewer)


@router.delete("/item", status_code=status.HTTP_204_NO_CONTENT)
async def delete_own_content(
    uri: Annotated[str, Query(min_length=1)],
    actor: Annotated[Actor, Depends(get_current_actor)],
    content_service: Annotated[ContentService, Depends(get_content_service)],
) -> None:
    """Delete your own topic or reply everywhere."""
    await content_service.delete(AuthorDelete(uri=uri, author_did=actor.did))
