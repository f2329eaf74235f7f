"""Tests for the content API endpoints."""

from datetime import UTC
from datetime import datetime

import pytest

from forumtrust_api.database.models.account import ViewerProfile
from forumtrust_api.database.models.base import AccountRole
from forumtrust_api.database.models.base import ContentType
from forumtrust_api.database.models.base import ModerationStatus
from forumtrust_api.database.models.content import ContentItem
from forumtrust_api.database.models.content import ContentPage
from forumtrust_api.errors import NotFound
from forumtrust_api.errors import RateLimited
from forumtrust_api.errors import UpstreamWriteFailure
from forumtrust_api.services.content_service import AuthorDelete

TOPIC_URI = "at://did:plc:user/community.forum.topic/3kabc"


@pytest.fixture
def topic():
    return ContentItem(
        uri=TOPIC_URI,
        rkey="3kabc",
        content_type=ContentType.TOPIC,
        author_did="did:plc:user",
        community_did="did:plc:community",
        category="general",
        title="Hello",
        body="First post",
        moderation_status=ModerationStatus.HELD,
        created_at=datetime(2026, 3, 2, 12, tzinfo=UTC),
    )


@pytest.fixture
def topic_payload():
    return {
        "content_type": "topic",
        "community_did": "did:plc:community",
        "category": "general",
        "title": "Hello",
        "body": "First post",
    }


class TestCreateContent:
    """Test POST /api/v1/content/."""

    def test_requires_authentication(self, client, topic_payload):
        response = client.post("/api/v1/content/", json=topic_payload)

        assert response.status_code == 401

    def test_created_and_held(
        self, client, services, topic, topic_payload, user_headers
    ):
        services["content"].create.return_value = topic

        response = client.post(
            "/api/v1/content/", json=topic_payload, headers=user_headers
        )

        assert response.status_code == 201
        assert response.json()["moderation_status"] == "held"
        args = services["content"].create.call_args
        assert args.args[0] == "did:plc:user"
        assert args.kwargs["role"] == AccountRole.USER

    def test_rate_limited(self, client, services, topic_payload, user_headers):
        services["content"].create.side_effect = RateLimited("Too many posts")

        response = client.post(
            "/api/v1/content/", json=topic_payload, headers=user_headers
        )

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        assert response.json() == {"detail": "Too many posts", "retryable": True}

    def test_upstream_failure(self, client, services, topic_payload, user_headers):
        services["content"].create.side_effect = UpstreamWriteFailure("PDS down")

        response = client.post(
            "/api/v1/content/", json=topic_payload, headers=user_headers
        )

        assert response.status_code == 502
        assert response.json()["retryable"] is True

    def test_topic_without_title_rejected(self, client, services, user_headers):
        response = client.post(
            "/api/v1/content/",
            json={"content_type": "topic", "category": "general", "body": "x"},
            headers=user_headers,
        )

        assert response.status_code == 422
        services["content"].create.assert_not_called()


class TestListContent:
    """Test GET /api/v1/content/."""

    def test_anonymous_listing(self, client, services, topic):
        services["content"].list.return_value = ContentPage(items=[topic], cursor="c")

        response = client.get(
            "/api/v1/content/", params={"community_did": "did:plc:community"}
        )

        assert response.status_code == 200
        assert response.json()["cursor"] == "c"
        assert services["content"].list.call_args.args[0] is None
        services["content"].viewer_profile.assert_not_called()

    def test_authenticated_listing_uses_profile(
        self, client, services, user_headers
    ):
        viewer = ViewerProfile(did="did:plc:user", declared_age=30)
        services["content"].viewer_profile.return_value = viewer
        services["content"].list.return_value = ContentPage(items=[])

        response = client.get(
            "/api/v1/content/",
            params={"category": "general", "limit": 10},
            headers=user_headers,
        )

        assert response.status_code == 200
        call = services["content"].list.call_args
        assert call.args[0] == viewer
        assert call.kwargs["category"] == "general"
        assert call.kwargs["limit"] == 10

    def test_limit_bounds(self, client):
        assert client.get("/api/v1/content/", params={"limit": 0}).status_code == 422
        assert client.get("/api/v1/content/", params={"limit": 101}).status_code == 422


class TestItemEndpoints:
    """Test single item reads and author deletes."""

    def test_get_item(self, client, services, topic):
        services["content"].get.return_value = topic

        response = client.get("/api/v1/content/item", params={"uri": TOPIC_URI})

        assert response.status_code == 200
        assert response.json()["uri"] == TOPIC_URI

    def test_get_missing_item(self, client, services):
        services["content"].get.side_effect = NotFound("Content not found")

        response = client.get("/api/v1/content/item", params={"uri": TOPIC_URI})

        assert response.status_code == 404
        assert response.json()["retryable"] is False

    def test_delete_own(self, client, services, user_headers):
        response = client.delete(
            "/api/v1/content/item", params={"uri": TOPIC_URI}, headers=user_headers
        )

        assert response.status_code == 204
        services["content"].delete.assert_awaited_once_with(
            AuthorDelete(uri=TOPIC_URI, author_did="did:plc:user")
        )
