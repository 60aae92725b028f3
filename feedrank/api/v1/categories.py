"""Category browsing endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from feedrank.dependencies import get_engine
from feedrank.services.recommendations.engine import ContentRecommendationEngine

router = APIRouter()


class CategoryResponse(BaseModel):
    """Response model for category aggregates."""
    success: bool
    data: dict
    message: str


@router.get("/stats", response_model=CategoryResponse)
async def get_category_stats(
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> CategoryResponse:
    """Per-category post counts, engagement and recent activity."""
    stats = engine.get_category_stats()
    return CategoryResponse(
        success=True,
        data={"categories": {name: s.to_dict() for name, s in stats.items()}},
        message="Category stats retrieved successfully",
    )


@router.get("/popular", response_model=CategoryResponse)
async def get_popular_categories(
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> CategoryResponse:
    """Top categories by posts today and day-over-day growth."""
    popular = engine.get_popular_categories()
    return CategoryResponse(
        success=True,
        data={"items": [p.to_dict() for p in popular], "total": len(popular)},
        message="Popular categories retrieved successfully",
    )


@router.get("/activity", response_model=CategoryResponse)
async def get_category_activity(
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> CategoryResponse:
    """Categories with posts in the last day, busiest first."""
    activity = engine.get_category_activity()
    return CategoryResponse(
        success=True,
        data={"items": [a.to_dict() for a in activity], "total": len(activity)},
        message="Category activity retrieved successfully",
    )
