"""
Test Suite for AI Brand Strength

Tests the composite score:
- Sentiment and ranking sub-scores
- Weighting, bounds and monotonicity
- The Acme reference scenario
"""

import pytest

from brandtrack.config import BRAND_STRENGTH_WEIGHTS
from brandtrack.schemas import CompetitorRanking
from brandtrack.services.brand_strength import (
    calculate_ai_brand_strength,
    calculate_ai_brand_strength_for_all,
    ranking_to_score,
    sentiment_to_score,
)


def _entity(**overrides) -> CompetitorRanking:
    data = {
        "name": "Acme",
        "mentions": 5,
        "visibility_score": 50.0,
        "share_of_voice": 40.0,
        "sentiment": "neutral",
        "average_position": 3,
    }
    data.update(overrides)
    return CompetitorRanking(**data)


class TestSentimentScore:

    @pytest.mark.parametrize("sentiment,expected", [
        ("positive", 100),
        ("neutral", 50),
        ("negative", 0),
    ])
    def test_known_sentiments(self, sentiment, expected):
        assert sentiment_to_score(sentiment) == expected

    def test_unknown_sentiment_raises(self):
        """Unknown categories are an upstream contract violation."""
        with pytest.raises(ValueError):
            sentiment_to_score("ecstatic")


class TestRankingScore:
    """Tier boundaries for average position."""

    @pytest.mark.parametrize("position,expected", [
        (1, 100),
        (0.5, 100),
        (1.5, 80),
        (3, 80),
        (4, 60),
        (5, 60),
        (7.5, 40),
        (10, 40),
        (11, 20),
        (42, 20),
    ])
    def test_tiers(self, position, expected):
        assert ranking_to_score(position) == expected

    @pytest.mark.parametrize("position", [None, 0, -1])
    def test_no_position_is_neutral(self, position):
        """No position data scores 50, not the worst tier."""
        assert ranking_to_score(position) == 50


class TestCompositeScore:

    def test_weights_sum_to_one(self):
        assert sum(BRAND_STRENGTH_WEIGHTS.values()) == pytest.approx(1.0)

    def test_acme_reference_scenario(self):
        """0.35*60 + 0.25*100 + 0.20*50 + 0.20*80 = 72."""
        acme = _entity(
            visibility_score=60, share_of_voice=50, sentiment="positive", average_position=2,
        )
        strength = calculate_ai_brand_strength(acme)

        assert strength.score == 72
        assert strength.breakdown.visibility == 60
        assert strength.breakdown.sentiment == 100
        assert strength.breakdown.share_of_voice == 50
        assert strength.breakdown.ranking == 80

    def test_monotonic_in_visibility(self):
        """Raising visibility alone never lowers the score."""
        scores = [
            calculate_ai_brand_strength(_entity(visibility_score=v)).score
            for v in range(0, 101, 5)
        ]
        assert scores == sorted(scores)

    @pytest.mark.parametrize("visibility,share", [
        (0, 0),
        (100, 100),
        (150, 120),
        (-20, -5),
    ])
    def test_bounded(self, visibility, share):
        """Composite and every sub-score stay within 0-100, even for out-of-range input."""
        strength = calculate_ai_brand_strength(_entity(visibility_score=visibility, share_of_voice=share))
        values = [strength.score, *vars(strength.breakdown).values()]
        assert all(0 <= v <= 100 for v in values)

    def test_score_is_integer(self):
        strength = calculate_ai_brand_strength(_entity(visibility_score=33.3))
        assert isinstance(strength.score, int)

    def test_half_composite_rounds_up(self):
        """10 * 0.35 + 100 * 0.25 + 0 * 0.2 + 50 * 0.2 = 38.5, reported as 39."""
        strength = calculate_ai_brand_strength(_entity(
            visibility_score=10, sentiment="positive", share_of_voice=0, average_position=None,
        ))
        assert strength.score == 39

    def test_half_sub_scores_round_up(self):
        strength = calculate_ai_brand_strength(_entity(visibility_score=12.5, share_of_voice=2.5))
        assert strength.breakdown.visibility == 13
        assert strength.breakdown.share_of_voice == 3


class TestStrengthForAll:

    def test_keyed_by_name(self):
        strengths = calculate_ai_brand_strength_for_all([
            _entity(name="Acme"),
            _entity(name="Rival1", visibility_score=10),
        ])
        assert set(strengths) == {"Acme", "Rival1"}
        assert strengths["Acme"].score > strengths["Rival1"].score

    def test_duplicate_names_last_wins(self):
        strengths = calculate_ai_brand_strength_for_all([
            _entity(name="Acme", visibility_score=100),
            _entity(name="Acme", visibility_score=0),
        ])
        assert strengths["Acme"].breakdown.visibility == 0
