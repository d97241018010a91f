"""Recommendations router: per-inspector writing advice, dismissal and draft review."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app.dependencies import get_recommendation_registry
from app.schemas.recommendation import DismissRequest, DismissResponse, RecommendationResponse
from app.schemas.report import ReportCreate
from app.services.recommendation.errors import InvalidKey, SourceUnavailable, StateStoreError
from app.services.recommendation.record_source import ReportRecord
from app.services.recommendation.registry import ActorRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=RecommendationResponse)
async def get_recommendation(
    inspector: str | None = Query(None),
    registry: ActorRegistry = Depends(get_recommendation_registry),
):
    """Get the current recommendation for an inspector's latest reports."""
    try:
        recommendation = await registry.get_recommendation(inspector)
    except InvalidKey as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (SourceUnavailable, StateStoreError) as e:
        logger.error(f"Recommendation unavailable for {inspector}: {e}")
        raise HTTPException(status_code=503, detail="Recommendation unavailable")
    return RecommendationResponse(recommendation=recommendation)


@router.post("/ignore", response_model=DismissResponse)
async def dismiss_recommendation(
    req: DismissRequest,
    registry: ActorRegistry = Depends(get_recommendation_registry),
):
    """Hide the current recommendation until new reports are submitted."""
    try:
        success = await registry.dismiss_recommendation(req.inspector)
    except InvalidKey as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StateStoreError as e:
        logger.error(f"Dismissal failed for {req.inspector}: {e}")
        raise HTTPException(status_code=503, detail="Recommendation unavailable")
    return DismissResponse(success=success)


@router.post("/analyze", response_model=RecommendationResponse)
async def analyze_draft(
    req: ReportCreate,
    registry: ActorRegistry = Depends(get_recommendation_registry),
):
    """Review an unsaved report against the inspector's latest submissions."""
    try:
        recommendation = await registry.review_draft(ReportRecord.draft(**req.model_dump()))
    except InvalidKey as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SourceUnavailable as e:
        logger.error(f"Draft review unavailable for {req.inspector_name}: {e}")
        raise HTTPException(status_code=503, detail="Recommendation unavailable")
    return RecommendationResponse(recommendation=recommendation)
