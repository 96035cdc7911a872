"""
Data Validation
Cross-checks visibility scores, mention counts, share of voice and
per-provider rankings for consistency. Results are returned, never raised.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from brandtrack.adapters.parsing import brand_mentioned_in
from brandtrack.config import (
    VISIBILITY_TOLERANCE, SHARE_OF_VOICE_TOLERANCE, BRAND_MENTION_TOLERANCE,
)
from brandtrack.schemas import AIResponse, AnalysisResult, CompetitorRanking, ProviderRankings
from brandtrack.utils.numbers import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def extend(self, other: "ValidationResult") -> "ValidationResult":
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


def expected_visibility(mentions: int, total_responses: int) -> float:
    """Visibility implied by a mention count, rounded to 1 decimal"""
    if total_responses <= 0:
        return 0.0
    return round_half_up(mentions / total_responses * 100, 1)


def _visibility_mismatch(entity: CompetitorRanking, total_responses: int) -> Optional[float]:
    expected = expected_visibility(entity.mentions, total_responses)
    if abs(expected - entity.visibility_score) > VISIBILITY_TOLERANCE + 1e-9:
        return expected
    return None


def validate_visibility_scores(
    competitors: Iterable[CompetitorRanking],
    total_responses: int
) -> ValidationResult:
    """Each visibility score must match mentions / total responses"""
    result = ValidationResult()

    for competitor in competitors:
        expected = _visibility_mismatch(competitor, total_responses)
        if expected is not None:
            result.errors.append(
                f"{competitor.name}: Visibility score ({competitor.visibility_score}%) doesn't match "
                f"mentions ({competitor.mentions}/{total_responses} = {expected}%)"
            )

        if competitor.mentions > total_responses:
            result.warnings.append(
                f"{competitor.name}: Mentions ({competitor.mentions}) exceed total responses ({total_responses})"
            )

    return result


def validate_share_of_voice(competitors: Iterable[CompetitorRanking]) -> ValidationResult:
    """Share of voice should sum to ~100%. Drift is a warning only."""
    result = ValidationResult()

    total_share = sum(c.share_of_voice for c in competitors)
    if abs(total_share - 100) > SHARE_OF_VOICE_TOLERANCE + 1e-9:
        result.warnings.append(
            f"Share of voice percentages sum to {total_share:.1f}% (expected ~100%)"
        )

    return result


def validate_provider_consistency(
    aggregated_competitors: Sequence[CompetitorRanking],
    provider_rankings: Iterable[ProviderRankings]
) -> ValidationResult:
    """
    Compare per-provider entity lists against the aggregate.

    Missing entries are warnings: entities with zero visibility are expected
    to be absent from some providers.
    """
    result = ValidationResult()

    aggregated = {}
    for competitor in aggregated_competitors:
        aggregated.setdefault(competitor.name.lower(), competitor)

    for breakdown in provider_rankings:
        provider_names = {c.name.lower() for c in breakdown.competitors}

        for name in sorted(provider_names - aggregated.keys()):
            result.warnings.append(
                f'{breakdown.provider}: Competitor "{name}" found in provider rankings but not in aggregated list'
            )

        for name, competitor in aggregated.items():
            if name not in provider_names and competitor.visibility_score > 0:
                result.warnings.append(
                    f'{breakdown.provider}: Competitor "{name}" in aggregated list '
                    f'({competitor.visibility_score}% visibility) but missing from provider rankings'
                )

    return result


def count_brand_mentions(responses: Iterable[AIResponse], brand_name: str) -> int:
    """Responses where the brand is flagged as mentioned or appears in the rankings"""
    return sum(1 for r in responses if brand_mentioned_in(r, brand_name))


def validate_brand_mentions(
    brand_data: CompetitorRanking,
    responses: Sequence[AIResponse],
    brand_name: str
) -> ValidationResult:
    """Reconcile the brand's stored mention count with the raw responses"""
    result = ValidationResult()

    actual_mentions = count_brand_mentions(responses, brand_name)
    difference = abs(brand_data.mentions - actual_mentions)

    if difference > BRAND_MENTION_TOLERANCE:
        result.errors.append(
            f"Brand mentions mismatch: Brand data shows {brand_data.mentions} mentions, but "
            f"{actual_mentions} responses have brand mentioned (via flag or rankings) "
            f"(difference: {difference})"
        )
    elif difference > 0:
        flagged = sum(1 for r in responses if r.brand_mentioned)
        logger.warning(
            "Brand mention count within tolerance but off by %d for %r: stored=%d, recomputed=%d "
            "(flagged=%d, responses=%d)",
            difference, brand_name, brand_data.mentions, actual_mentions, flagged, len(responses),
        )
        result.warnings.append(
            f"Brand mentions slight mismatch: Brand data shows {brand_data.mentions} mentions, but "
            f"{actual_mentions} responses have brand mentioned. This may be due to brand matching "
            f"logic differences."
        )

    expected = _visibility_mismatch(brand_data, len(responses))
    if expected is not None:
        result.errors.append(
            f"Brand visibility score ({brand_data.visibility_score}%) doesn't match mention count "
            f"({brand_data.mentions}/{len(responses)} = {expected}%)"
        )

    return result


def validate_analysis_data(
    competitors: Sequence[CompetitorRanking],
    brand_data: CompetitorRanking,
    responses: Sequence[AIResponse],
    brand_name: str,
    provider_rankings: Optional[Iterable[ProviderRankings]] = None
) -> ValidationResult:
    """Run every consistency check and union the results"""
    result = ValidationResult()

    result.extend(validate_visibility_scores(competitors, len(responses)))
    result.extend(validate_share_of_voice(competitors))
    result.extend(validate_brand_mentions(brand_data, responses, brand_name))

    if provider_rankings is not None:
        result.extend(validate_provider_consistency(competitors, provider_rankings))

    if not result.is_valid:
        logger.info(
            "Analysis data for %r failed validation: %d error(s), %d warning(s)",
            brand_name, len(result.errors), len(result.warnings),
        )

    return result


def validate_analysis_result(analysis: AnalysisResult, brand_name: str) -> ValidationResult:
    """validate_analysis_data over a parsed analysis; a missing brand entry is an error"""
    brand_data = analysis.find_brand(brand_name)
    if brand_data is None:
        result = validate_visibility_scores(analysis.competitors, analysis.total_responses)
        result.extend(validate_share_of_voice(analysis.competitors))
        result.errors.append(f"Brand {brand_name!r} not found in analysis competitors")
        if analysis.provider_rankings is not None:
            result.extend(validate_provider_consistency(analysis.competitors, analysis.provider_rankings))
        return result

    return validate_analysis_data(
        analysis.competitors,
        brand_data,
        analysis.responses,
        brand_name,
        analysis.provider_rankings,
    )
