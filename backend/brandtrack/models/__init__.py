"""
Database Models for AI Brand Track
"""

from .database import (
    Base,
    # Enums
    SentimentPolarity,
    TrendDirection,
    # Models
    User,
    BrandAnalysis,
    BrandAnalysisSnapshot,
    SourceDomain,
    SourcePage,
)

__all__ = [
    "Base",
    # Enums
    "SentimentPolarity",
    "TrendDirection",
    # Models
    "User",
    "BrandAnalysis",
    "BrandAnalysisSnapshot",
    "SourceDomain",
    "SourcePage",
]
