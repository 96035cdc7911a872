"""
Historical Tracking Schemas
"""

from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID

from pydantic import BaseModel

from brandtrack.models import TrendDirection


class SnapshotResponse(BaseModel):
    """A stored point-in-time measurement"""
    id: UUID
    brand_analysis_id: UUID
    visibility_score: Optional[int]
    sentiment_score: Optional[int]
    share_of_voice: Optional[int]
    average_position: Optional[int]
    rank: Optional[int]
    snapshot_date: datetime

    class Config:
        from_attributes = True


class TrendMetricResponse(BaseModel):
    current: Optional[Union[int, float]]
    previous: Optional[Union[int, float]]
    change: Optional[float]
    change_percent: Optional[float]
    trend: TrendDirection

    class Config:
        from_attributes = True


class TrendDataResponse(BaseModel):
    """Direction and magnitude of change per metric"""
    visibility_score: TrendMetricResponse
    sentiment_score: TrendMetricResponse
    share_of_voice: TrendMetricResponse
    average_position: TrendMetricResponse
    rank: TrendMetricResponse
    baseline: str
    current_date: datetime
    previous_date: datetime

    class Config:
        from_attributes = True


class HistoricalResponse(BaseModel):
    """Snapshots for an analysis (optionally merged across URL spellings) with trends"""
    snapshots: List[SnapshotResponse]
    trends: Optional[TrendDataResponse]
    total_snapshots: int
    analysis_ids: List[UUID]
