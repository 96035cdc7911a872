"""
Response Parsing Adapters
"""

from .brand_matcher import (
    BrandMatcher,
    EntityMention,
    matches,
    ranking_matches,
    find_ranking,
    brand_mentioned_in,
    normalize_brand_name,
    brand_variations,
)

__all__ = [
    "BrandMatcher",
    "EntityMention",
    "matches",
    "ranking_matches",
    "find_ranking",
    "brand_mentioned_in",
    "normalize_brand_name",
    "brand_variations",
]
