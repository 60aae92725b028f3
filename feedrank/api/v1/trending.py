"""Trending topic endpoints."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from feedrank.dependencies import get_engine
from feedrank.schemas.recommendation_schema import TrendingTopicItem
from feedrank.services.recommendations.engine import ContentRecommendationEngine
from feedrank.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


# Response Models
class TrendingResponse(BaseModel):
    """Response model for trending topics."""
    success: bool
    data: dict
    message: str


@router.get("", response_model=TrendingResponse)
async def get_trending(
    limit: int = Query(10, ge=1, le=100),
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> TrendingResponse:
    """
    Get trending categories and tags from the last window (24h by default).

    Args:
        limit: Maximum number of topics to return
        engine: Recommendation engine

    Returns:
        TrendingResponse with topics sorted by trending score
    """
    topics = engine.get_trending_topics(limit=limit)
    items = [TrendingTopicItem(**topic.model_dump()).model_dump() for topic in topics]

    return TrendingResponse(
        success=True,
        data={
            "items": items,
            "total": len(items),
            "limit": limit,
        },
        message="Trending topics retrieved successfully",
    )
