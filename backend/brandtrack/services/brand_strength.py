"""
AI Brand Strength Calculator
Composite 0-100 score from visibility, sentiment, share of voice and ranking
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from brandtrack.config import (
    BRAND_STRENGTH_WEIGHTS, SENTIMENT_SCORES, RANKING_TIERS,
    RANKING_FLOOR_SCORE, NO_RANKING_SCORE,
)
from brandtrack.models import SentimentPolarity
from brandtrack.schemas import CompetitorRanking
from brandtrack.utils.numbers import round_half_up


@dataclass
class StrengthBreakdown:
    """Sub-scores, each 0-100"""
    visibility: int
    sentiment: int
    share_of_voice: int
    ranking: int


@dataclass
class AIBrandStrength:
    """Composite score with its breakdown"""
    score: int
    breakdown: StrengthBreakdown


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return min(high, max(low, value))


def sentiment_to_score(sentiment) -> int:
    """positive -> 100, neutral -> 50, negative -> 0. Anything else is rejected."""
    try:
        polarity = SentimentPolarity(sentiment)
    except ValueError:
        raise ValueError(f"Unknown sentiment: {sentiment!r}") from None
    return SENTIMENT_SCORES[polarity.value]


def ranking_to_score(average_position: Optional[float]) -> int:
    """
    Tiered score for an average ranking position.

    (0, 1] -> 100, (1, 3] -> 80, (3, 5] -> 60, (5, 10] -> 40, > 10 -> 20.
    No position data (None or 0) scores a neutral 50.
    """
    if not average_position or average_position <= 0:
        return NO_RANKING_SCORE

    for upper_bound, score in RANKING_TIERS:
        if average_position <= upper_bound:
            return score
    return RANKING_FLOOR_SCORE


def calculate_ai_brand_strength(entity: CompetitorRanking) -> AIBrandStrength:
    """
    Calculate the AI Brand Strength score (0-100) for one entity.

    Weights:
    - Visibility: 35%
    - Sentiment: 25%
    - Share of Voice: 20%
    - Ranking: 20%
    """
    visibility = _clamp(entity.visibility_score)
    sentiment = sentiment_to_score(entity.sentiment)
    share_of_voice = _clamp(entity.share_of_voice)
    ranking = ranking_to_score(entity.average_position)

    composite = (
        visibility * BRAND_STRENGTH_WEIGHTS["visibility"] +
        sentiment * BRAND_STRENGTH_WEIGHTS["sentiment"] +
        share_of_voice * BRAND_STRENGTH_WEIGHTS["share_of_voice"] +
        ranking * BRAND_STRENGTH_WEIGHTS["ranking"]
    )

    return AIBrandStrength(
        score=round_half_up(_clamp(composite)),
        breakdown=StrengthBreakdown(
            visibility=round_half_up(visibility),
            sentiment=sentiment,
            share_of_voice=round_half_up(share_of_voice),
            ranking=ranking,
        ),
    )


def calculate_ai_brand_strength_for_all(
    entities: Iterable[CompetitorRanking]
) -> Dict[str, AIBrandStrength]:
    """Strength per entity name. Later entities overwrite earlier ones with the same name."""
    strengths: Dict[str, AIBrandStrength] = {}
    for entity in entities:
        strengths[entity.name] = calculate_ai_brand_strength(entity)
    return strengths
