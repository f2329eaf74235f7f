"""Viewer maturity resolution.

Ratings are totally ordered ``safe < mature < adult``. Viewers without a
declared age, or below a community's age threshold, are capped at ``safe``
whatever their stated preference.
"""

from forumtrust_api.database.models.account import ViewerProfile
from forumtrust_api.database.models.base import MaturityRating
from forumtrust_api.database.models.community import Category
from forumtrust_api.database.models.community import CommunitySettings

MATURITY_ORDER: dict[MaturityRating, int] = {
    MaturityRating.SAFE: 0,
    MaturityRating.MATURE: 1,
    MaturityRating.ADULT: 2,
}


def max_allowed(viewer: ViewerProfile | None, age_threshold: int) -> MaturityRating:
    """Highest rating a viewer may see in a community."""
    if viewer is None or viewer.declared_age is None:
        return MaturityRating.SAFE
    if viewer.declared_age < age_threshold:
        return MaturityRating.SAFE
    return viewer.maturity_pref


def allows(maximum: MaturityRating, rating: MaturityRating) -> bool:
    return MATURITY_ORDER[rating] <= MATURITY_ORDER[maximum]


def allowed_ratings(maximum: MaturityRating) -> set[MaturityRating]:
    return {rating for rating in MaturityRating if allows(maximum, rating)}


def allowed_communities(
    communities: list[CommunitySettings], viewer: ViewerProfile | None
) -> dict[str, MaturityRating]:
    """Communities eligible for an aggregate listing, with the viewer's cap in each.

    Adult communities never appear in aggregate listings.
    """
    eligible: dict[str, MaturityRating] = {}
    for community in communities:
        if community.maturity_rating == MaturityRating.ADULT:
            continue
        maximum = max_allowed(viewer, community.age_threshold)
        if allows(maximum, community.maturity_rating):
            eligible[community.community_did] = maximum
    return eligible


def allowed_categories(
    categories: list[Category], caps: dict[str, MaturityRating]
) -> list[tuple[str, str]]:
    """(community, slug) pairs whose rating is within the viewer's cap there."""
    return [
        (category.community_did, category.slug)
        for category in categories
        if category.community_did in caps
        and allows(caps[category.community_did], category.maturity_rating)
    ]
