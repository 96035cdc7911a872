"""
Analysis Schemas
Typed views over the analysis blobs produced by the AI-provider pipeline
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from brandtrack.config import SENTIMENT_SCORES
from brandtrack.models import SentimentPolarity


class CamelModel(BaseModel):
    """Accepts both camelCase (upstream JSON) and snake_case field names. NaN and infinity are rejected."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        allow_inf_nan = False


class RankingEntry(CamelModel):
    """A company as ordered by one AI response"""
    company: str
    position: int


class SourceCitation(CamelModel):
    """A citation attached to an AI response"""
    url: str
    title: Optional[str] = None
    domain: Optional[str] = None
    domain_name: Optional[str] = None
    cited_text: Optional[str] = None


class AIResponse(CamelModel):
    """One AI provider answer captured during an analysis run"""
    provider: str
    prompt: str = ""
    response: str = ""
    brand_mentioned: bool = False
    brand_position: Optional[int] = None
    rankings: List[RankingEntry] = Field(default_factory=list)
    sentiment: SentimentPolarity = SentimentPolarity.NEUTRAL
    confidence: float = 0.0
    sources: List[SourceCitation] = Field(default_factory=list)
    timestamp: Optional[datetime] = None


class CompetitorRanking(CamelModel):
    """Aggregated metrics for one tracked entity (own brand or competitor)"""
    id: Optional[str] = None
    name: str
    url: Optional[str] = None
    is_own: bool = False
    mentions: int = Field(0, ge=0)
    visibility_score: float = 0.0
    sentiment: SentimentPolarity
    share_of_voice: float = 0.0
    average_position: Optional[float] = None
    weekly_change: Optional[float] = None

    @property
    def sentiment_score(self) -> int:
        return SENTIMENT_SCORES[SentimentPolarity(self.sentiment).value]


class ProviderRankings(CamelModel):
    """Entity rankings computed from a single provider's responses"""
    provider: str
    competitors: List[CompetitorRanking] = Field(default_factory=list)


class AnalysisResult(CamelModel):
    """The parts of a full analysis that scoring, validation and snapshots use"""
    competitors: List[CompetitorRanking] = Field(default_factory=list)
    responses: List[AIResponse] = Field(default_factory=list)
    provider_rankings: Optional[List[ProviderRankings]] = None

    @property
    def total_responses(self) -> int:
        return len(self.responses)

    def find_brand(self, brand_name: Optional[str] = None) -> Optional[CompetitorRanking]:
        """The subject brand's entry: flagged is_own, otherwise matched by name"""
        for competitor in self.competitors:
            if competitor.is_own:
                return competitor

        if brand_name:
            wanted = brand_name.strip().lower()
            for competitor in self.competitors:
                if competitor.name.strip().lower() == wanted:
                    return competitor
        return None


# ============================================================================
# API BODIES
# ============================================================================

class CompetitorInput(BaseModel):
    """Competitor as entered by the user"""
    name: str
    url: Optional[str] = None


class BrandAnalysisCreate(BaseModel):
    """Request body for saving an analysis"""
    url: str = Field(..., min_length=1)
    company_name: Optional[str] = None
    industry: Optional[str] = None
    analysis_data: AnalysisResult
    competitors: Optional[List[Union[CompetitorInput, str]]] = None
    prompts: Optional[List[Any]] = None
    credits_used: Optional[int] = Field(None, ge=0)

    def competitor_urls(self) -> List[str]:
        """URLs of competitors that were entered with one"""
        return [
            c.url for c in (self.competitors or [])
            if isinstance(c, CompetitorInput) and c.url
        ]


class BrandAnalysisResponse(BaseModel):
    """Saved brand analysis"""
    id: UUID
    user_id: UUID
    url: str
    company_name: Optional[str]
    industry: Optional[str]
    analysis_data: Optional[Dict[str, Any]]
    competitors: Optional[List[Any]]
    prompts: Optional[List[Any]]
    credits_used: Optional[int]
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class BrandStrengthResponse(BaseModel):
    """Composite AI Brand Strength with its sub-scores"""
    score: int
    visibility: int
    sentiment: int
    share_of_voice: int
    ranking: int


class ValidationResponse(BaseModel):
    """Consistency check outcome"""
    is_valid: bool
    errors: List[str]
    warnings: List[str]


class ValidateAnalysisRequest(BaseModel):
    """Request body for ad-hoc validation of an analysis"""
    brand_name: str = Field(..., min_length=1)
    analysis: AnalysisResult
    competitor_aliases: Optional[Dict[str, List[str]]] = None  # competitor name -> other names


class ValidateAnalysisResponse(BaseModel):
    validation: ValidationResponse
    brand_strength: Dict[str, BrandStrengthResponse]


class SideEffectResponse(BaseModel):
    name: str
    status: str  # saved, skipped or failed
    detail: Optional[str] = None


class SavedAnalysisResponse(BrandAnalysisResponse):
    """Saved analysis plus the outcome of each best-effort side effect"""
    side_effects: List[SideEffectResponse] = Field(default_factory=list)
