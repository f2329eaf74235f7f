"""Tests for record URI parsing."""

import pytest

from forumtrust_api.federation.uri import RecordUri
from forumtrust_api.federation.uri import parse_record_uri


class TestParseRecordUri:
    def test_valid(self):
        parsed = parse_record_uri("at://did:plc:abc/community.forum.topic/3kxyz")

        assert parsed == RecordUri("did:plc:abc", "community.forum.topic", "3kxyz")
        assert str(parsed) == "at://did:plc:abc/community.forum.topic/3kxyz"

    @pytest.mark.parametrize(
        "uri",
        [
            "",
            "https://example.com/a/b",
            "at://did:plc:abc/community.forum.topic",
            "at://did:plc:abc/community.forum.topic/3k/extra",
            "at://did:plc:abc//3k",
            "at://handle.example/community.forum.topic/3k",
        ],
    )
    def test_malformed(self, uri):
        assert parse_record_uri(uri) is None
