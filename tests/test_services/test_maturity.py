"""Tests for viewer maturity resolution."""

import pytest

from forumtrust_api.database.models.account import ViewerProfile
from forumtrust_api.database.models.base import MaturityRating
from forumtrust_api.database.models.community import Category
from forumtrust_api.database.models.community import CommunitySettings
from forumtrust_api.services import maturity

SAFE = MaturityRating.SAFE
MATURE = MaturityRating.MATURE
ADULT = MaturityRating.ADULT


def _viewer(age, pref):
    return ViewerProfile(did="did:plc:viewer", declared_age=age, maturity_pref=pref)


class TestMaxAllowed:
    """Test the viewer's maturity cap."""

    @pytest.mark.parametrize(
        "age,pref,threshold,expected",
        [
            (None, ADULT, 16, SAFE),
            (15, MATURE, 16, SAFE),
            (16, MATURE, 16, MATURE),
            (30, ADULT, 18, ADULT),
            (30, SAFE, 18, SAFE),
            (17, ADULT, 18, SAFE),
        ],
    )
    def test_grid(self, age, pref, threshold, expected):
        assert maturity.max_allowed(_viewer(age, pref), threshold) == expected

    def test_anonymous_viewer_is_safe(self):
        assert maturity.max_allowed(None, 0) == SAFE


class TestAllows:
    """Test rating ordering."""

    def test_order(self):
        assert maturity.allows(MATURE, SAFE)
        assert maturity.allows(MATURE, MATURE)
        assert not maturity.allows(MATURE, ADULT)
        assert not maturity.allows(SAFE, MATURE)

    @pytest.mark.parametrize("maximum", list(MaturityRating))
    @pytest.mark.parametrize("rating", list(MaturityRating))
    def test_consistent_with_total_order(self, maximum, rating):
        order = [SAFE, MATURE, ADULT]

        assert maturity.allows(maximum, rating) == (
            order.index(rating) <= order.index(maximum)
        )

    def test_allowed_ratings(self):
        assert maturity.allowed_ratings(SAFE) == {SAFE}
        assert maturity.allowed_ratings(ADULT) == {SAFE, MATURE, ADULT}


class TestAllowedCommunities:
    """Test aggregate listing eligibility."""

    def _communities(self):
        return [
            CommunitySettings(community_did="did:plc:safe"),
            CommunitySettings(
                community_did="did:plc:mature", maturity_rating=MATURE
            ),
            CommunitySettings(
                community_did="did:plc:adult", maturity_rating=ADULT
            ),
            CommunitySettings(
                community_did="did:plc:strict",
                maturity_rating=MATURE,
                age_threshold=21,
            ),
        ]

    @pytest.mark.parametrize("pref", [SAFE, MATURE, ADULT])
    def test_adult_communities_always_excluded(self, pref):
        caps = maturity.allowed_communities(self._communities(), _viewer(40, pref))

        assert "did:plc:adult" not in caps

    def test_anonymous_sees_safe_communities_only(self):
        caps = maturity.allowed_communities(self._communities(), None)

        assert caps == {"did:plc:safe": SAFE}

    def test_age_threshold_applies_per_community(self):
        caps = maturity.allowed_communities(self._communities(), _viewer(18, ADULT))

        assert caps == {"did:plc:safe": ADULT, "did:plc:mature": ADULT}


class TestAllowedCategories:
    """Test category filtering against per-community caps."""

    def test_filters_by_cap(self):
        categories = [
            Category(community_did="did:plc:a", slug="general", name="General"),
            Category(
                community_did="did:plc:a",
                slug="afterdark",
                name="After Dark",
                maturity_rating=MATURE,
            ),
            Category(community_did="did:plc:b", slug="general", name="General"),
            Category(community_did="did:plc:z", slug="general", name="General"),
        ]

        pairs = maturity.allowed_categories(
            categories, {"did:plc:a": SAFE, "did:plc:b": MATURE}
        )

        assert pairs == [("did:plc:a", "general"), ("did:plc:b", "general")]
