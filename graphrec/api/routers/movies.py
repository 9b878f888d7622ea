"""
Movie API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from graphrec.api.dependencies import get_recommendation_service
from graphrec.api.models.recommendation import RecommendationItem
from graphrec.core.errors import BackendUnavailable, NotFound
from graphrec.core.similarity.engine import RecommendationService

router = APIRouter(prefix="/api/movies", tags=["movies"])


@router.get("/{seed_id}/similar", response_model=list[RecommendationItem])
async def get_similar_movies(
    seed_id: str,
    limit: str | None = Query(None),
    skip: str | None = Query(None),
    user_id: str | None = Query(None),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """Similar movies shown on a movie page."""
    try:
        return await service.similar_movies(seed_id, user_id=user_id, limit=limit, skip=skip)
    except NotFound:
        raise HTTPException(status_code=404, detail="Movie not found")
    except BackendUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
