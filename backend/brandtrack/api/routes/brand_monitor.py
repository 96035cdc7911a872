"""
Brand Monitor Routes
Saved analyses, historical snapshots with trends, and ad-hoc validation
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from brandtrack.config import AI_PROVIDERS, get_settings
from brandtrack.models import User
from brandtrack.schemas import (
    BrandAnalysisCreate, BrandAnalysisResponse, SavedAnalysisResponse, SideEffectResponse,
    HistoricalResponse, SnapshotResponse, TrendDataResponse,
    ValidateAnalysisRequest, ValidateAnalysisResponse, ValidationResponse, BrandStrengthResponse,
)
from brandtrack.services import (
    AnalysisService, HistoricalTrackingService, calculate_trends, merge_snapshot_sequences,
    build_provider_rankings, calculate_ai_brand_strength_for_all, validate_analysis_result,
)
from brandtrack.utils import get_db
from brandtrack.api.middleware.auth import get_current_user

router = APIRouter()


def _as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Snapshot dates are stored as naive UTC"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


async def _get_owned_analysis(service: AnalysisService, user: User, analysis_id: UUID):
    analysis = await service.get_analysis(user, analysis_id)
    if analysis is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return analysis


# ============================================================================
# ANALYSES
# ============================================================================

@router.get("/analyses", response_model=List[BrandAnalysisResponse])
async def list_analyses(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the user's saved analyses, newest first"""
    analyses = await AnalysisService(db).list_analyses(user)
    return [BrandAnalysisResponse.model_validate(a) for a in analyses]


@router.post("/analyses", response_model=SavedAnalysisResponse, status_code=status.HTTP_201_CREATED)
async def save_analysis(
    payload: BrandAnalysisCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Save a completed analysis.

    Snapshot and source tracking run after the save; their failures are
    reported in side_effects and never fail the request.
    """
    result = await AnalysisService(db).save_analysis(user, payload)

    response = BrandAnalysisResponse.model_validate(result.analysis)
    return SavedAnalysisResponse(
        **response.model_dump(),
        side_effects=[
            SideEffectResponse(name=o.name, status=o.status.value, detail=o.detail)
            for o in result.side_effects
        ],
    )


@router.get("/analyses/{analysis_id}", response_model=BrandAnalysisResponse)
async def get_analysis(
    analysis_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a saved analysis"""
    analysis = await _get_owned_analysis(AnalysisService(db), user, analysis_id)
    return BrandAnalysisResponse.model_validate(analysis)


@router.delete("/analyses/{analysis_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_analysis(
    analysis_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a saved analysis along with its snapshots and sources"""
    deleted = await AnalysisService(db).delete_analysis(user, analysis_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Analysis not found")


# ============================================================================
# HISTORY
# ============================================================================

@router.get("/historical", response_model=HistoricalResponse)
async def get_historical_data(
    analysis_id: UUID = Query(...),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    merge_related: bool = Query(True),
    baseline: str = Query("previous", pattern="^(previous|oldest)$"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Snapshots and trends for an analysis.

    With merge_related, snapshots from every analysis of the same brand are
    included, even when its URL was entered differently (https://, www., paths).
    """
    start_date = _as_naive_utc(start_date)
    end_date = _as_naive_utc(end_date)
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must be before end_date")

    analysis = await _get_owned_analysis(AnalysisService(db), user, analysis_id)
    historical = HistoricalTrackingService(db)

    analysis_ids = [analysis.id]
    snapshots = await historical.get_historical_snapshots(analysis.id, start_date, end_date)
    if merge_related:
        related = await historical.get_related_analysis_ids(user.id, analysis.url)
        related = [i for i in related if i != analysis.id]
        analysis_ids += related
        snapshots = merge_snapshot_sequences(
            snapshots,
            await historical.get_snapshots_for_analyses(related, start_date, end_date),
        )

    trends = calculate_trends(snapshots, baseline)

    return HistoricalResponse(
        snapshots=[SnapshotResponse.model_validate(s) for s in snapshots],
        trends=TrendDataResponse.model_validate(trends) if trends else None,
        total_snapshots=len(snapshots),
        analysis_ids=analysis_ids,
    )


# ============================================================================
# VALIDATION & PROVIDERS
# ============================================================================

@router.post("/validate", response_model=ValidateAnalysisResponse)
async def validate_analysis(
    body: ValidateAnalysisRequest,
    user: User = Depends(get_current_user),
):
    """
    Consistency check plus AI Brand Strength for every entity.

    When the analysis carries no per-provider rankings they are rebuilt from
    its responses, so provider consistency is always checked.
    """
    analysis = body.analysis
    if analysis.provider_rankings is None and analysis.responses:
        brand = analysis.find_brand(body.brand_name)
        competitors = [c.name for c in analysis.competitors if c is not brand]
        analysis = analysis.model_copy(update={
            "provider_rankings": build_provider_rankings(
                analysis.responses, body.brand_name, competitors, body.competitor_aliases,
            ),
        })

    result = validate_analysis_result(analysis, body.brand_name)
    strengths = calculate_ai_brand_strength_for_all(analysis.competitors)

    return ValidateAnalysisResponse(
        validation=ValidationResponse(
            is_valid=result.is_valid,
            errors=result.errors,
            warnings=result.warnings,
        ),
        brand_strength={
            name: BrandStrengthResponse(
                score=strength.score,
                visibility=strength.breakdown.visibility,
                sentiment=strength.breakdown.sentiment,
                share_of_voice=strength.breakdown.share_of_voice,
                ranking=strength.breakdown.ranking,
            )
            for name, strength in strengths.items()
        },
    )


@router.get("/providers")
async def list_providers(user: User = Depends(get_current_user)):
    """AI providers and whether each has an API key configured"""
    configured = get_settings().configured_providers
    return {
        "providers": [
            {"id": provider, "name": name, "configured": provider in configured}
            for provider, name in AI_PROVIDERS.items()
        ],
        "configured": configured,
    }
