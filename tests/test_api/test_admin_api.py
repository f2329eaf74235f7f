"""Tests for the admin API endpoints."""

from forumtrust_api.database.models.community import CommunitySettings
from forumtrust_api.database.models.community import ModerationThresholds
from forumtrust_api.database.models.report import ReportedAccount

COMMUNITY = {"community_did": "did:plc:community"}


class TestThresholds:
    """Test threshold administration."""

    def test_requires_admin(self, client, moderator_headers):
        response = client.get(
            "/api/v1/admin/thresholds", params=COMMUNITY, headers=moderator_headers
        )

        assert response.status_code == 403

    def test_get_serializes_camel_case(self, client, services, admin_headers):
        services["settings"].get_thresholds.return_value = ModerationThresholds()

        response = client.get(
            "/api/v1/admin/thresholds", params=COMMUNITY, headers=admin_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["newAccountWriteRatePerMin"] == 3
        assert body["burstPostCount"] == 5

    def test_partial_update(self, client, services, admin_headers):
        services["settings"].update_thresholds.return_value = ModerationThresholds(
            warn_threshold=4
        )

        response = client.put(
            "/api/v1/admin/thresholds",
            params=COMMUNITY,
            json={"warnThreshold": 4},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["warnThreshold"] == 4
        update = services["settings"].update_thresholds.call_args.args[1]
        assert update.model_dump(exclude_unset=True) == {"warn_threshold": 4}

    def test_out_of_range_update(self, client, services, admin_headers):
        response = client.put(
            "/api/v1/admin/thresholds",
            params=COMMUNITY,
            json={"burstPostCount": 1},
            headers=admin_headers,
        )

        assert response.status_code == 422
        services["settings"].update_thresholds.assert_not_called()


class TestWordFilter:
    """Test blocklist administration."""

    def test_get(self, client, services, admin_headers):
        services["settings"].get_settings.return_value = CommunitySettings(
            community_did="did:plc:community", word_filter=["casino"]
        )

        response = client.get(
            "/api/v1/admin/word-filter", params=COMMUNITY, headers=admin_headers
        )

        assert response.json() == {"words": ["casino"]}

    def test_replace(self, client, services, admin_headers):
        services["settings"].update_word_filter.return_value = ["spam"]

        response = client.put(
            "/api/v1/admin/word-filter",
            params=COMMUNITY,
            json={"words": [" spam "]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"words": ["spam"]}


class TestReportedUsers:
    def test_list(self, client, services, admin_headers):
        services["report"].reported_accounts.return_value = [
            ReportedAccount(did="did:plc:a", report_count=6, warn=True, auto_block=True)
        ]

        response = client.get(
            "/api/v1/admin/reported-users", params=COMMUNITY, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()[0]["auto_block"] is True
