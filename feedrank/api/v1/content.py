"""Content ranking endpoints (popular content, category listings)."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from feedrank.dependencies import get_engine
from feedrank.models.content import ContentSortOption, ContentType
from feedrank.schemas.recommendation_schema import ContentIdListResponse
from feedrank.services.recommendations.engine import ContentRecommendationEngine
from feedrank.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


# Response Models
class ContentListResponse(BaseModel):
    """Response model for content endpoints."""
    success: bool
    data: dict
    message: str


@router.get("/popular", response_model=ContentListResponse)
async def get_popular_content(
    content_type: Optional[ContentType] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> ContentListResponse:
    """
    Get globally popular content ids, optionally of one content type.

    Args:
        content_type: Only return this content type
        limit: Maximum number of ids to return
        engine: Recommendation engine
    """
    items = engine.get_popular_content(content_type=content_type, limit=limit)
    return ContentListResponse(
        success=True,
        data=ContentIdListResponse(items=items, total=len(items), limit=limit).model_dump(),
        message="Popular content retrieved successfully",
    )


@router.get("/by-category/{category}", response_model=ContentListResponse)
async def get_content_by_category(
    category: str,
    limit: int = Query(20, ge=1, le=100),
    sort: ContentSortOption = Query(ContentSortOption.TRENDING),
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> ContentListResponse:
    """
    Get visible content ids in a category.

    Args:
        category: Category label
        limit: Maximum number of ids to return
        sort: recent, popular (upvotes), trending (engagement) or top_rated (net votes)
        engine: Recommendation engine
    """
    items = engine.get_content_by_category(category, limit=limit, sort=sort)
    data = ContentIdListResponse(items=items, total=len(items), limit=limit).model_dump()
    data["category"] = category
    data["sort"] = sort.value
    return ContentListResponse(
        success=True,
        data=data,
        message="Category content retrieved successfully",
    )


@router.get("/{content_id}", response_model=ContentListResponse)
async def get_content(
    content_id: str,
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> ContentListResponse:
    """
    Get one content record from the current snapshot.

    Raises:
        ContentNotFoundError: 404 if the id is not in the snapshot
    """
    record = engine.get_content(content_id)
    return ContentListResponse(
        success=True,
        data=record.to_dict(),
        message="Content retrieved successfully",
    )
