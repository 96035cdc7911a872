"""
Pydantic Schemas for API validation
"""

from .analysis import (
    RankingEntry,
    SourceCitation,
    AIResponse,
    CompetitorRanking,
    ProviderRankings,
    AnalysisResult,
    CompetitorInput,
    BrandAnalysisCreate,
    BrandAnalysisResponse,
    BrandStrengthResponse,
    ValidationResponse,
    ValidateAnalysisRequest,
    ValidateAnalysisResponse,
    SideEffectResponse,
    SavedAnalysisResponse,
)
from .historical import (
    SnapshotResponse,
    TrendMetricResponse,
    TrendDataResponse,
    HistoricalResponse,
)

__all__ = [
    # Analysis
    "RankingEntry",
    "SourceCitation",
    "AIResponse",
    "CompetitorRanking",
    "ProviderRankings",
    "AnalysisResult",
    "CompetitorInput",
    "BrandAnalysisCreate",
    "BrandAnalysisResponse",
    "BrandStrengthResponse",
    "ValidationResponse",
    "ValidateAnalysisRequest",
    "ValidateAnalysisResponse",
    "SideEffectResponse",
    "SavedAnalysisResponse",
    # Historical
    "SnapshotResponse",
    "TrendMetricResponse",
    "TrendDataResponse",
    "HistoricalResponse",
]
