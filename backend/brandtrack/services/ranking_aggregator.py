"""
Ranking Aggregator
Turns tagged AI responses into per-entity CompetitorRanking records,
overall and per provider. The validate endpoint uses it to rebuild
per-provider rankings that an analysis does not carry.
"""

from collections import Counter, defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from brandtrack.adapters.parsing import BrandMatcher
from brandtrack.models import SentimentPolarity
from brandtrack.schemas import AIResponse, CompetitorRanking, ProviderRankings
from brandtrack.utils.numbers import round_half_up


def _majority_sentiment(sentiments: Sequence[SentimentPolarity]) -> SentimentPolarity:
    """Most common sentiment; ties and empty input fall back to neutral"""
    if not sentiments:
        return SentimentPolarity.NEUTRAL

    counts = Counter(SentimentPolarity(s) for s in sentiments).most_common()
    if len(counts) > 1 and counts[0][1] == counts[1][1]:
        return SentimentPolarity.NEUTRAL
    return counts[0][0]


def build_competitor_rankings(
    responses: Sequence[AIResponse],
    brand_name: str,
    competitors: Iterable[str],
    aliases: Optional[Dict[str, Iterable[str]]] = None,
) -> List[CompetitorRanking]:
    """
    Aggregate mention, position and sentiment data into one CompetitorRanking
    per entity.

    Visibility is rounded to 1 decimal so that it reconciles exactly with
    mentions / total responses. Entities are returned by descending
    visibility, keeping input order (brand first) for ties.
    """
    matcher = BrandMatcher(brand_name, competitors, aliases)
    total_responses = len(responses)

    mentions: Dict[str, int] = defaultdict(int)
    positions: Dict[str, List[int]] = defaultdict(list)
    brand_sentiments: List[SentimentPolarity] = []

    for response in responses:
        for tag in matcher.tag_response(response):
            if not tag.mentioned:
                continue
            mentions[tag.name] += 1
            if tag.position:
                positions[tag.name].append(tag.position)
            if tag.name == matcher.brand_name:
                brand_sentiments.append(response.sentiment)

    total_mentions = sum(mentions.values())

    rankings = []
    for name in matcher.entity_names:
        count = mentions[name]
        entity_positions = positions[name]
        is_own = name == matcher.brand_name

        rankings.append(CompetitorRanking(
            name=name,
            is_own=is_own,
            mentions=count,
            visibility_score=round_half_up(count / total_responses * 100, 1) if total_responses else 0.0,
            share_of_voice=round_half_up(count / total_mentions * 100, 1) if total_mentions else 0.0,
            average_position=(
                round_half_up(sum(entity_positions) / len(entity_positions), 1) if entity_positions else 0
            ),
            sentiment=_majority_sentiment(brand_sentiments) if is_own else SentimentPolarity.NEUTRAL,
        ))

    return sorted(rankings, key=lambda r: -r.visibility_score)


def build_provider_rankings(
    responses: Sequence[AIResponse],
    brand_name: str,
    competitors: Iterable[str],
    aliases: Optional[Dict[str, Iterable[str]]] = None,
) -> List[ProviderRankings]:
    """Per-provider breakdown, one entry per provider in first-seen order"""
    competitors = list(competitors)
    by_provider: Dict[str, List[AIResponse]] = {}
    for response in responses:
        by_provider.setdefault(response.provider, []).append(response)

    return [
        ProviderRankings(
            provider=provider,
            competitors=[
                ranking for ranking in build_competitor_rankings(provider_responses, brand_name, competitors, aliases)
                if ranking.mentions > 0 or ranking.is_own
            ],
        )
        for provider, provider_responses in by_provider.items()
    ]
