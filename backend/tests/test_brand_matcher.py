"""
Test Suite for Brand Matching

Tests mention detection in AI response text and rankings:
- Matching strategies (substring, word boundary, compound names)
- Empty-name guard and malformed input
- Response tagging for brand and competitors
"""

import pytest

from brandtrack.adapters.parsing import (
    BrandMatcher,
    brand_mentioned_in,
    find_ranking,
    brand_variations,
    matches,
    normalize_brand_name,
    ranking_matches,
)
from brandtrack.schemas import AIResponse, RankingEntry


# =============================================================================
# TEXT MATCHING
# =============================================================================


class TestMatches:
    """Test matches() against response text."""

    @pytest.mark.parametrize("text", [
        "I recommend acme for small teams.",
        "I recommend ACME for small teams.",
        "I recommend AcMe for small teams.",
        "Top pick: Acme.",
    ])
    def test_case_insensitive(self, text):
        """Any casing of the name in the text matches."""
        assert matches(text, "Acme") is True

    def test_multi_word_name(self):
        assert matches("Many reviewers like tea burn for mornings.", "Tea Burn") is True

    def test_compound_name(self):
        """Name followed by '+' and another product still matches."""
        assert matches("Try Tea Burn + Control Coffee together.", "Tea Burn") is True

    def test_no_match(self):
        assert matches("Rival1 and Rival2 are both popular.", "Acme") is False

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_never_matches(self, name):
        """An empty name must not match arbitrary text."""
        assert matches("Any response text at all", name) is False

    def test_empty_text(self):
        assert matches("", "Acme") is False

    def test_special_characters_are_literal(self):
        """Regex metacharacters in names are escaped."""
        assert matches("We compared C++ tools and AT&T plans.", "AT&T") is True
        assert matches("Nothing relevant here.", "a.b") is False

    def test_non_string_name_raises(self):
        with pytest.raises(TypeError):
            matches("Acme is great", None)

    def test_non_string_text_raises(self):
        with pytest.raises(TypeError):
            matches(42, "Acme")


# =============================================================================
# RANKINGS
# =============================================================================


class TestRankingMatches:
    """Test matching against companies listed in response rankings."""

    def test_substring_either_direction(self):
        assert ranking_matches("Acme Corp", "Acme") is True
        assert ranking_matches("Acme", "Acme Corporation") is True

    def test_case_insensitive(self):
        assert ranking_matches("ACME", "acme") is True

    def test_unrelated(self):
        assert ranking_matches("Rival1", "Acme") is False

    def test_empty_company(self):
        assert ranking_matches("  ", "Acme") is False

    def test_find_ranking_returns_first(self):
        rankings = [
            RankingEntry(company="Rival1", position=1),
            RankingEntry(company="Acme Inc", position=2),
            RankingEntry(company="Acme Labs", position=4),
        ]
        entry = find_ranking(rankings, "Acme")
        assert entry.position == 2

    def test_find_ranking_missing(self):
        assert find_ranking([RankingEntry(company="Rival1", position=1)], "Acme") is None


class TestBrandMentionedIn:
    """The own-brand predicate: flag OR present in rankings."""

    def test_flag_set(self):
        response = AIResponse(provider="openai", brand_mentioned=True)
        assert brand_mentioned_in(response, "Acme") is True

    def test_in_rankings_without_flag(self):
        response = AIResponse(
            provider="openai",
            brand_mentioned=False,
            rankings=[RankingEntry(company="Acme", position=3)],
        )
        assert brand_mentioned_in(response, "Acme") is True

    def test_neither(self):
        """Text alone does not count for the own brand."""
        response = AIResponse(provider="openai", response="Acme is great", brand_mentioned=False)
        assert brand_mentioned_in(response, "Acme") is False


# =============================================================================
# TAGGING
# =============================================================================


class TestBrandMatcher:
    """Test per-response tagging of all tracked entities."""

    def test_entities_brand_first_and_deduplicated(self):
        matcher = BrandMatcher("Acme", ["Rival1", "acme", "rival1", "Rival2", ""])
        assert matcher.entity_names == ["Acme", "Rival1", "Rival2"]

    def test_empty_brand_rejected(self):
        with pytest.raises(ValueError):
            BrandMatcher("  ", ["Rival1"])

    def test_brand_position_from_rankings(self):
        matcher = BrandMatcher("Acme", [])
        response = AIResponse(
            provider="openai",
            brand_mentioned=True,
            brand_position=5,
            rankings=[RankingEntry(company="Acme", position=2)],
        )
        tag = matcher.tag_brand(response)
        assert tag.mentioned is True
        assert tag.in_rankings is True
        assert tag.position == 2

    def test_brand_position_falls_back(self):
        matcher = BrandMatcher("Acme", [])
        response = AIResponse(provider="openai", brand_mentioned=True, brand_position=4)
        assert matcher.tag_brand(response).position == 4

    def test_competitor_detected_in_text(self):
        matcher = BrandMatcher("Acme", ["Rival1"])
        response = AIResponse(provider="openai", response="Consider rival1 as well.")
        tag = matcher.tag_competitor(response, "Rival1")
        assert tag.mentioned is True
        assert tag.in_rankings is False
        assert tag.position is None

    def test_tag_response_covers_every_entity(self):
        matcher = BrandMatcher("Acme", ["Rival1", "Rival2"])
        response = AIResponse(
            provider="openai",
            response="Rival2 is solid.",
            rankings=[RankingEntry(company="Rival1", position=1)],
        )
        tags = matcher.tag_response(response)
        assert [t.name for t in tags] == ["Acme", "Rival1", "Rival2"]
        assert [t.mentioned for t in tags] == [False, True, True]
        assert tags[1].position == 1

    def test_competitor_found_under_corporate_suffix(self):
        """A competitor tracked as "Acme Inc" is found when the text writes "Acme, Inc." or just "Acme"."""
        matcher = BrandMatcher("Zenith", ["Acme Inc"])

        for text in ["Acme, Inc. leads the market.", "Many teams pick Acme."]:
            response = AIResponse(provider="openai", response=text)
            assert matcher.tag_competitor(response, "Acme Inc").mentioned is True

    def test_plain_matches_stays_literal(self):
        assert matches("Acme, Inc. leads the market.", "Acme Inc") is False

    def test_competitor_found_under_spelled_out_ampersand(self):
        matcher = BrandMatcher("Zenith", ["Smith & Wesson"])
        response = AIResponse(provider="openai", response="Smith and Wesson came up often.")
        assert matcher.tag_competitor(response, "Smith & Wesson").mentioned is True

    def test_configured_aliases(self):
        matcher = BrandMatcher("Acme", ["Rival1"], aliases={"rival1": ["R-One Suite"]})
        response = AIResponse(provider="openai", response="Try R-One Suite for larger teams.")

        assert matcher.aliases_for("Rival1") == ["R-One Suite"]
        assert matcher.tag_competitor(response, "Rival1").mentioned is True

    def test_add_aliases_and_ranking_position(self):
        matcher = BrandMatcher("Acme", ["Rival1"])
        matcher.add_aliases("Rival1", ["R-One Suite", "r-one suite", ""])
        response = AIResponse(
            provider="openai",
            rankings=[RankingEntry(company="R-One Suite", position=3)],
        )

        tag = matcher.tag_competitor(response, "Rival1")

        assert matcher.aliases_for("RIVAL1") == ["R-One Suite"]
        assert tag.in_rankings is True
        assert tag.position == 3

    def test_unaliased_competitor_not_found(self):
        matcher = BrandMatcher("Acme", ["Rival1"])
        response = AIResponse(provider="openai", response="Try R-One Suite for larger teams.")
        assert matcher.tag_competitor(response, "Rival1").mentioned is False

    def test_brand_aliases_do_not_count_text_mentions(self):
        """The subject brand is still counted by flag or rankings only."""
        matcher = BrandMatcher("Acme", [], aliases={"acme": ["Acme Cloud"]})
        response = AIResponse(provider="openai", response="Acme Cloud is great", brand_mentioned=False)
        assert matcher.tag_brand(response).mentioned is False


# =============================================================================
# NAME NORMALIZATION
# =============================================================================


class TestNormalizeBrandName:

    @pytest.mark.parametrize("name,expected", [
        ("Acme Inc", "acme"),
        ("Acme, Inc.", "acme"),
        ("  Acme   Labs  LLC ", "acme labs"),
        ("Acme's", "acme"),
        ("Acme Technologies", "acme"),
        ("Costco", "costco"),
        ("Tech", "tech"),
    ])
    def test_normalize(self, name, expected):
        assert normalize_brand_name(name) == expected

    def test_variations(self):
        variations = brand_variations("Tea Burn Co")
        assert variations[:2] == ["tea burn co", "tea burn"]
        assert "teaburn" in variations
        assert "tea-burn" in variations

    def test_symbol_variations(self):
        assert {"ben and jerry", "ben jerry"} <= set(brand_variations("Ben & Jerry"))
        assert {"a plus b", "a and b", "a b"} <= set(brand_variations("A+B"))

    def test_short_variations_dropped(self):
        assert "x" not in brand_variations("X Inc")
