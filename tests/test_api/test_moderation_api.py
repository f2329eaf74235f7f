"""Tests for the moderation API endpoints."""

from datetime import UTC
from datetime import datetime
from uuid import uuid4

import pytest

from forumtrust_api.database.models.base import ModerationActionType
from forumtrust_api.database.models.base import ReportReasonType
from forumtrust_api.database.models.base import ReportStatus
from forumtrust_api.database.models.base import ResolutionType
from forumtrust_api.database.models.queue import QueuePage
from forumtrust_api.database.models.report import Report
from forumtrust_api.database.models.report import ReportPage
from forumtrust_api.errors import AlreadyAppealed
from forumtrust_api.errors import Conflict
from forumtrust_api.errors import DuplicateReport
from forumtrust_api.errors import SelfReport
from forumtrust_api.services.content_service import ModeratorDelete

TARGET_URI = "at://did:plc:author/community.forum.topic/3kabc"


@pytest.fixture
def report():
    return Report(
        pk=uuid4(),
        created_at=datetime(2026, 3, 2, tzinfo=UTC),
        reporter_did="did:plc:user",
        target_uri=TARGET_URI,
        target_did="did:plc:author",
        reason_type=ReportReasonType.SPAM,
        community_did="did:plc:community",
    )


class TestReports:
    """Test report filing, resolution and appeals."""

    def test_file_report(self, client, services, report, user_headers):
        services["report"].file.return_value = report

        response = client.post(
            "/api/v1/moderation/reports",
            json={"target_uri": TARGET_URI, "reason_type": "spam"},
            headers=user_headers,
        )

        assert response.status_code == 201
        assert response.json()["status"] == "pending"

    def test_unknown_reason_rejected(self, client, services, user_headers):
        response = client.post(
            "/api/v1/moderation/reports",
            json={"target_uri": TARGET_URI, "reason_type": "rude"},
            headers=user_headers,
        )

        assert response.status_code == 422
        services["report"].file.assert_not_called()

    @pytest.mark.parametrize(
        "error,status_code",
        [(SelfReport(), 400), (DuplicateReport(), 409)],
    )
    def test_file_errors(self, client, services, user_headers, error, status_code):
        services["report"].file.side_effect = error

        response = client.post(
            "/api/v1/moderation/reports",
            json={"target_uri": TARGET_URI, "reason_type": "spam"},
            headers=user_headers,
        )

        assert response.status_code == status_code
        assert response.json()["detail"] == error.message

    def test_listing_requires_moderator(self, client, user_headers):
        response = client.get(
            "/api/v1/moderation/reports",
            params={"community_did": "did:plc:community"},
            headers=user_headers,
        )

        assert response.status_code == 403

    def test_listing_with_status_filter(
        self, client, services, report, moderator_headers
    ):
        services["report"].list_reports.return_value = ReportPage(reports=[report])

        response = client.get(
            "/api/v1/moderation/reports",
            params={"community_did": "did:plc:community", "status": "pending"},
            headers=moderator_headers,
        )

        assert response.status_code == 200
        assert len(response.json()["reports"]) == 1
        kwargs = services["report"].list_reports.call_args.kwargs
        assert kwargs["status"] == ReportStatus.PENDING

    def test_resolve(self, client, services, report, moderator_headers):
        services["report"].resolve.return_value = report.model_copy(
            update={
                "status": ReportStatus.RESOLVED,
                "resolution_type": ResolutionType.DISMISSED,
            }
        )

        response = client.put(
            f"/api/v1/moderation/reports/{report.pk}",
            json={"resolution_type": "dismissed"},
            headers=moderator_headers,
        )

        assert response.status_code == 200
        assert response.json()["resolution_type"] == "dismissed"
        services["report"].resolve.assert_awaited_once_with(
            report.pk, ResolutionType.DISMISSED, "did:plc:mod"
        )

    def test_appeal_twice(self, client, services, report, user_headers):
        services["report"].appeal.side_effect = AlreadyAppealed()

        response = client.post(
            f"/api/v1/moderation/reports/{report.pk}/appeal",
            json={"reason": "Please look again"},
            headers=user_headers,
        )

        assert response.status_code == 409

    def test_my_reports(self, client, services, report, user_headers):
        services["report"].list_my_reports.return_value = ReportPage(
            reports=[report]
        )

        response = client.get("/api/v1/moderation/my-reports", headers=user_headers)

        assert response.status_code == 200
        assert services["report"].list_my_reports.call_args.args[0] == "did:plc:user"


class TestQueue:
    """Test the review queue endpoints."""

    def test_list_queue(self, client, services, moderator_headers):
        services["queue"].list_pending.return_value = QueuePage(items=[])

        response = client.get(
            "/api/v1/moderation/queue",
            params={"community_did": "did:plc:community", "reason": "link_hold"},
            headers=moderator_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"items": [], "cursor": None}

    def test_review_conflict(self, client, services, moderator_headers):
        services["queue"].review.side_effect = Conflict(
            "Content is no longer awaiting review"
        )

        response = client.post(
            "/api/v1/moderation/queue/review",
            json={"content_uri": TARGET_URI, "action": "approve"},
            headers=moderator_headers,
        )

        assert response.status_code == 409
        services["queue"].review.assert_awaited_once_with(
            TARGET_URI, ModerationActionType.APPROVE, "did:plc:mod", None
        )

    def test_review_requires_moderator(self, client, services, user_headers):
        response = client.post(
            "/api/v1/moderation/queue/review",
            json={"content_uri": TARGET_URI, "action": "approve"},
            headers=user_headers,
        )

        assert response.status_code == 403
        services["queue"].review.assert_not_called()

    def test_moderator_delete(self, client, services, moderator_headers):
        response = client.post(
            "/api/v1/moderation/delete",
            json={"uri": TARGET_URI, "reason": "Spam"},
            headers=moderator_headers,
        )

        assert response.status_code == 204
        services["content"].delete.assert_awaited_once_with(
            ModeratorDelete(uri=TARGET_URI, moderator_did="did:plc:mod", reason="Spam")
        )
