"""
Analysis Service
Saves brand analyses and runs the best-effort side effects that follow a save
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from brandtrack.config import get_settings
from brandtrack.models import BrandAnalysis, User
from brandtrack.schemas import BrandAnalysisCreate
from brandtrack.services.historical_tracking import (
    BrandNotFoundError, HistoricalTrackingService, extract_snapshot_metrics,
)
from brandtrack.services.source_tracker import SourceTrackerService, collect_sources

logger = logging.getLogger(__name__)


class SideEffectStatus(str, Enum):
    SAVED = "saved"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class SideEffectOutcome:
    name: str
    status: SideEffectStatus
    detail: Optional[str] = None


@dataclass
class AnalysisSaveResult:
    analysis: BrandAnalysis
    side_effects: List[SideEffectOutcome] = field(default_factory=list)

    def outcome(self, name: str) -> Optional[SideEffectOutcome]:
        return next((o for o in self.side_effects if o.name == name), None)


class AnalysisService:
    """
    CRUD for brand analyses.

    The analysis row is committed before any side effect runs. Snapshot and
    source persistence then run one at a time; a failure rolls the session
    back to the committed state and is logged, so the saved analysis is
    returned either way.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.historical = HistoricalTrackingService(db)
        self.sources = SourceTrackerService(db)

    async def save_analysis(self, user: User, payload: BrandAnalysisCreate) -> AnalysisSaveResult:
        settings = get_settings()

        analysis = BrandAnalysis(
            user_id=user.id,
            url=payload.url,
            company_name=payload.company_name,
            industry=payload.industry,
            analysis_data=payload.analysis_data.model_dump(mode="json", by_alias=True),
            competitors=[
                c.model_dump() if isinstance(c, BaseModel) else c
                for c in (payload.competitors or [])
            ],
            prompts=payload.prompts or [],
            credits_used=(
                payload.credits_used if payload.credits_used is not None
                else settings.DEFAULT_ANALYSIS_CREDITS
            ),
        )
        self.db.add(analysis)
        await self.db.commit()
        await self.db.refresh(analysis)

        logger.info("Saved brand analysis %s for user %s (%s)", analysis.id, user.id, analysis.url)

        result = AnalysisSaveResult(analysis=analysis)
        result.side_effects.append(await self._save_snapshot(analysis, payload))
        result.side_effects.append(await self._save_sources(analysis, payload))
        return result

    async def _save_snapshot(self, analysis: BrandAnalysis, payload: BrandAnalysisCreate) -> SideEffectOutcome:
        name = "snapshot"
        if not payload.company_name:
            logger.warning("Skipping snapshot for analysis %s: no company name", analysis.id)
            return SideEffectOutcome(name, SideEffectStatus.SKIPPED, "no company name")

        try:
            metrics = extract_snapshot_metrics(payload.analysis_data, payload.company_name)
        except BrandNotFoundError as e:
            logger.warning("Skipping snapshot for analysis %s: %s", analysis.id, e)
            return SideEffectOutcome(name, SideEffectStatus.SKIPPED, str(e))
        except Exception as e:
            logger.exception("Failed to extract snapshot metrics for analysis %s", analysis.id)
            return SideEffectOutcome(name, SideEffectStatus.FAILED, str(e))

        try:
            await self.historical.save_analysis_snapshot(analysis.id, metrics)
            await self.db.commit()
        except Exception as e:
            logger.exception("Failed to save snapshot for analysis %s", analysis.id)
            await self._recover(analysis)
            return SideEffectOutcome(name, SideEffectStatus.FAILED, str(e))

        return SideEffectOutcome(name, SideEffectStatus.SAVED)

    async def _save_sources(self, analysis: BrandAnalysis, payload: BrandAnalysisCreate) -> SideEffectOutcome:
        name = "sources"
        responses = payload.analysis_data.responses
        if not collect_sources(responses):
            return SideEffectOutcome(name, SideEffectStatus.SKIPPED, "no cited sources")

        try:
            count = await self.sources.save_sources(
                analysis.id,
                responses,
                brand_url=payload.url,
                competitor_urls=payload.competitor_urls(),
            )
            await self.db.commit()
        except Exception as e:
            logger.exception("Failed to save sources for analysis %s", analysis.id)
            await self._recover(analysis)
            return SideEffectOutcome(name, SideEffectStatus.FAILED, str(e))

        return SideEffectOutcome(name, SideEffectStatus.SAVED, f"{count} domains")

    async def _recover(self, analysis: BrandAnalysis) -> None:
        await self.db.rollback()
        await self.db.refresh(analysis)

    async def list_analyses(self, user: User) -> List[BrandAnalysis]:
        """User's analyses, newest first"""
        result = await self.db.execute(
            select(BrandAnalysis)
            .where(BrandAnalysis.user_id == user.id)
            .order_by(BrandAnalysis.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_analysis(self, user: User, analysis_id: UUID) -> Optional[BrandAnalysis]:
        """None when missing or owned by someone else"""
        result = await self.db.execute(
            select(BrandAnalysis).where(
                BrandAnalysis.id == analysis_id,
                BrandAnalysis.user_id == user.id,
            )
        )
        return result.scalar_one_or_none()

    async def delete_analysis(self, user: User, analysis_id: UUID) -> bool:
        analysis = await self.get_analysis(user, analysis_id)
        if analysis is None:
            return False

        await self.db.delete(analysis)
        await self.db.commit()
        logger.info("Deleted brand analysis %s", analysis_id)
        return True
