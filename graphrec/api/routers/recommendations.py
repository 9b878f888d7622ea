"""
Recommendation API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from graphrec.api.dependencies import get_recommendation_service
from graphrec.api.models.recommendation import Algorithm, RecommendationItem
from graphrec.core.errors import BackendUnavailable, NotFound
from graphrec.core.similarity.engine import RecommendationService

router = APIRouter(prefix="/api/rec", tags=["recommendations"])


@router.get("/{algorithm}/{seed_id}", response_model=list[RecommendationItem])
async def get_recommendations(
    algorithm: Algorithm,
    seed_id: str,
    limit: str | None = Query(None, description="Page size (default 6)"),
    skip: str | None = Query(None, description="Rows to skip (default 0)"),
    user_id: str | None = Query(None, description="Requesting user"),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """
    Ranked recommendations for a movie (content algorithms) or for the
    requesting user (collaborative algorithms).

    Invalid limit/skip values fall back to their defaults.
    """
    try:
        return await service.recommend(algorithm.value, seed_id, user_id=user_id, limit=limit, skip=skip)
    except NotFound:
        raise HTTPException(status_code=404, detail="Movie not found")
    except BackendUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
