"""
Business Logic Services
"""

from .brand_strength import (
    AIBrandStrength,
    StrengthBreakdown,
    calculate_ai_brand_strength,
    calculate_ai_brand_strength_for_all,
    sentiment_to_score,
    ranking_to_score,
)
from .data_validation import (
    ValidationResult,
    validate_analysis_data,
    validate_analysis_result,
)
from .ranking_aggregator import build_competitor_rankings, build_provider_rankings
from .historical_tracking import (
    BrandNotFoundError,
    SnapshotMetrics,
    TrendMetric,
    TrendData,
    HistoricalTrackingService,
    extract_snapshot_metrics,
    calculate_trends,
    merge_snapshot_sequences,
)
from .source_tracker import SourceTrackerService
from .analysis_service import (
    AnalysisService,
    AnalysisSaveResult,
    SideEffectOutcome,
    SideEffectStatus,
)

__all__ = [
    # Scoring
    "AIBrandStrength",
    "StrengthBreakdown",
    "calculate_ai_brand_strength",
    "calculate_ai_brand_strength_for_all",
    "sentiment_to_score",
    "ranking_to_score",
    # Validation
    "ValidationResult",
    "validate_analysis_data",
    "validate_analysis_result",
    # Aggregation
    "build_competitor_rankings",
    "build_provider_rankings",
    # History
    "BrandNotFoundError",
    "SnapshotMetrics",
    "TrendMetric",
    "TrendData",
    "HistoricalTrackingService",
    "extract_snapshot_metrics",
    "calculate_trends",
    "merge_snapshot_sequences",
    # Persistence
    "SourceTrackerService",
    "AnalysisService",
    "AnalysisSaveResult",
    "SideEffectOutcome",
    "SideEffectStatus",
]
