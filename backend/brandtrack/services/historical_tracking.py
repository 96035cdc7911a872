"""
Historical Tracking
Point-in-time snapshots of a brand's metrics and trend calculation across them
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union
from uuid import UUID

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from brandtrack.config import TREND_EPSILON
from brandtrack.models import BrandAnalysis, BrandAnalysisSnapshot, TrendDirection
from brandtrack.schemas import AnalysisResult
from brandtrack.services.brand_strength import calculate_ai_brand_strength
from brandtrack.utils.numbers import round_half_up
from brandtrack.utils.url_normalizer import normalize_url

logger = logging.getLogger(__name__)


class BrandNotFoundError(LookupError):
    """The subject brand has no entry in the analysis competitors"""


@dataclass
class SnapshotMetrics:
    visibility_score: int
    sentiment_score: int
    share_of_voice: int
    average_position: Optional[int]
    rank: Optional[int]


@dataclass
class TrendMetric:
    current: Optional[float]
    previous: Optional[float]
    change: Optional[float]
    change_percent: Optional[float]
    trend: TrendDirection


@dataclass
class TrendData:
    visibility_score: TrendMetric
    sentiment_score: TrendMetric
    share_of_voice: TrendMetric
    average_position: TrendMetric
    rank: TrendMetric
    baseline: str
    current_date: datetime
    previous_date: datetime


# =========================================================================
# SNAPSHOT EXTRACTION
# =========================================================================

def extract_snapshot_metrics(
    analysis_data: Union[AnalysisResult, Dict[str, Any]],
    brand_name: str
) -> SnapshotMetrics:
    """
    Extract the subject brand's metrics from a full analysis.

    Rank is the brand's 1-based place when all entities are ordered by
    composite AI Brand Strength (descending), then visibility score, then
    input order.

    Raises:
        BrandNotFoundError: if no entity is flagged is_own or named brand_name
    """
    if not isinstance(analysis_data, AnalysisResult):
        analysis_data = AnalysisResult.model_validate(analysis_data)

    brand = analysis_data.find_brand(brand_name)
    if brand is None:
        raise BrandNotFoundError(f"Brand {brand_name!r} not found in analysis competitors")

    competitors = analysis_data.competitors
    scored = [
        (calculate_ai_brand_strength(c).score, c.visibility_score, index)
        for index, c in enumerate(competitors)
    ]
    ordered = sorted(scored, key=lambda item: (-item[0], -item[1]))
    brand_index = next(i for i, c in enumerate(competitors) if c is brand)
    rank = next(place for place, item in enumerate(ordered, start=1) if item[2] == brand_index)

    return SnapshotMetrics(
        visibility_score=round_half_up(brand.visibility_score),
        sentiment_score=brand.sentiment_score,
        share_of_voice=round_half_up(brand.share_of_voice),
        average_position=round_half_up(brand.average_position) if brand.average_position else None,
        rank=rank,
    )


# =========================================================================
# TRENDS
# =========================================================================

def _compare(
    current: Optional[float],
    previous: Optional[float],
    lower_is_better: bool = False
) -> TrendMetric:
    if current is None or previous is None:
        return TrendMetric(current, previous, None, None, TrendDirection.STABLE)

    change = previous - current if lower_is_better else current - previous
    if change > TREND_EPSILON:
        trend = TrendDirection.UP
    elif change < -TREND_EPSILON:
        trend = TrendDirection.DOWN
    else:
        trend = TrendDirection.STABLE

    change_percent = round(change / previous * 100, 1) if previous else None
    return TrendMetric(current, previous, round(change, 1), change_percent, trend)


def sort_snapshots(snapshots: Iterable[Any]) -> List[Any]:
    """Newest first"""
    return sorted(snapshots, key=lambda s: s.snapshot_date, reverse=True)


def merge_snapshot_sequences(*sequences: Iterable[Any]) -> List[Any]:
    """Merge snapshot sequences into one newest-first sequence, dropping repeated rows"""
    seen = set()
    merged = []
    for sequence in sequences:
        for snapshot in sequence:
            key = getattr(snapshot, "id", None)
            if key is not None:
                if key in seen:
                    continue
                seen.add(key)
            merged.append(snapshot)
    return sort_snapshots(merged)


def calculate_trends(
    snapshots: Sequence[Any],
    baseline: str = "previous"
) -> Optional[TrendData]:
    """
    Compare the newest snapshot against a baseline snapshot.

    baseline="previous" compares against the next-newest snapshot,
    baseline="oldest" against the oldest one in the sequence. For average
    position and rank lower is better, so a positive change means improvement.

    Returns None when there are fewer than two snapshots.
    """
    if baseline not in ("previous", "oldest"):
        raise ValueError(f"Unknown trend baseline: {baseline!r}")

    if len(snapshots) < 2:
        return None

    ordered = sort_snapshots(snapshots)
    current = ordered[0]
    previous = ordered[1] if baseline == "previous" else ordered[-1]

    return TrendData(
        visibility_score=_compare(current.visibility_score, previous.visibility_score),
        sentiment_score=_compare(current.sentiment_score, previous.sentiment_score),
        share_of_voice=_compare(current.share_of_voice, previous.share_of_voice),
        average_position=_compare(current.average_position, previous.average_position, lower_is_better=True),
        rank=_compare(current.rank, previous.rank, lower_is_better=True),
        baseline=baseline,
        current_date=current.snapshot_date,
        previous_date=previous.snapshot_date,
    )


# =========================================================================
# PERSISTENCE
# =========================================================================

class HistoricalTrackingService:
    """Reads and appends snapshot rows"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_analysis_snapshot(
        self,
        brand_analysis_id: UUID,
        metrics: SnapshotMetrics,
        snapshot_date: Optional[datetime] = None,
    ) -> BrandAnalysisSnapshot:
        """Append a snapshot row. Repeated calls append repeated rows."""
        snapshot = BrandAnalysisSnapshot(
            brand_analysis_id=brand_analysis_id,
            visibility_score=metrics.visibility_score,
            sentiment_score=metrics.sentiment_score,
            share_of_voice=metrics.share_of_voice,
            average_position=metrics.average_position,
            rank=metrics.rank,
            snapshot_date=snapshot_date or datetime.utcnow(),
        )

        self.db.add(snapshot)
        await self.db.flush()

        logger.info("Snapshot saved for analysis %s: %s", brand_analysis_id, metrics)
        return snapshot

    async def get_historical_snapshots(
        self,
        brand_analysis_id: UUID,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[BrandAnalysisSnapshot]:
        """Snapshots of one analysis within an inclusive date range, newest first"""
        return await self.get_snapshots_for_analyses([brand_analysis_id], start_date, end_date)

    async def get_snapshots_for_analyses(
        self,
        brand_analysis_ids: Sequence[UUID],
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[BrandAnalysisSnapshot]:
        """Snapshots of several analyses merged into one newest-first sequence"""
        if not brand_analysis_ids:
            return []

        conditions = [BrandAnalysisSnapshot.brand_analysis_id.in_(list(brand_analysis_ids))]
        if start_date:
            conditions.append(BrandAnalysisSnapshot.snapshot_date >= start_date)
        if end_date:
            conditions.append(BrandAnalysisSnapshot.snapshot_date <= end_date)

        result = await self.db.execute(
            select(BrandAnalysisSnapshot)
            .where(and_(*conditions))
            .order_by(BrandAnalysisSnapshot.snapshot_date.desc())
        )
        return list(result.scalars().all())

    async def get_related_analysis_ids(self, user_id: UUID, url: str) -> List[UUID]:
        """IDs of the user's analyses whose URL normalizes to the same domain"""
        target = normalize_url(url)
        if not target:
            return []

        result = await self.db.execute(
            select(BrandAnalysis.id, BrandAnalysis.url)
            .where(BrandAnalysis.user_id == user_id)
            .order_by(BrandAnalysis.created_at.asc())
        )
        return [row.id for row in result.all() if normalize_url(row.url) == target]

    async def get_snapshots_for_url(
        self,
        user_id: UUID,
        url: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[BrandAnalysisSnapshot]:
        """Snapshots across every analysis of the same brand, however its URL was spelled"""
        analysis_ids = await self.get_related_analysis_ids(user_id, url)
        return await self.get_snapshots_for_analyses(analysis_ids, start_date, end_date)
