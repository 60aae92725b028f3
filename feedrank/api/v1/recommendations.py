"""Personalized recommendation endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from feedrank.dependencies import get_engine
from feedrank.models.content import ContentType
from feedrank.models.recommendation import RecommendationReason
from feedrank.schemas.recommendation_schema import (
    RecommendationItem,
    RecommendationListResponse,
    UserPreferencesResponse,
)
from feedrank.services.recommendations.engine import ContentRecommendationEngine
from feedrank.utils.exceptions import InsufficientDataError
from feedrank.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


# Response Models
class RecommendationsResponse(BaseModel):
    """Response model for recommendations."""
    success: bool
    data: dict
    message: str


def _list_payload(engine: ContentRecommendationEngine, user_id: str, limit: int,
                  content_type: Optional[ContentType] = None,
                  reason: Optional[RecommendationReason] = None) -> dict:
    recommendations = engine.get_recommendations(
        user_id, limit=limit, content_type=content_type, reason=reason
    )
    items = [RecommendationItem(**rec.to_dict()) for rec in recommendations]
    return RecommendationListResponse(
        user_id=user_id,
        state=engine.get_recommendation_state(user_id),
        items=items,
        total=len(items),
    ).model_dump(mode="json")


@router.get("/{user_id}", response_model=RecommendationsResponse)
async def get_recommendations(
    user_id: str,
    limit: int = Query(20, ge=1, le=50),
    content_type: Optional[ContentType] = Query(None),
    reason: Optional[RecommendationReason] = Query(None),
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> RecommendationsResponse:
    """
    Get a user's recommendations, best first.

    Users without interactions get an empty list.

    Args:
        user_id: User ID
        limit: Maximum number of items, applied after filtering
        content_type: Only return posts, reviews or comments
        reason: Only return items from one strategy, e.g. trending_topic
        engine: Recommendation engine
    """
    return RecommendationsResponse(
        success=True,
        data=_list_payload(engine, user_id, limit, content_type=content_type, reason=reason),
        message="Recommendations retrieved successfully",
    )


@router.post("/{user_id}/regenerate", response_model=RecommendationsResponse)
async def regenerate_recommendations(
    user_id: str,
    limit: int = Query(20, ge=1, le=50),
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> RecommendationsResponse:
    """
    Regenerate one user's recommendations from current state.

    Users without interactions get an empty list rather than an error.
    """
    try:
        engine.generate_recommendations(user_id)
    except InsufficientDataError as e:
        logger.info(f"Skipping regeneration for {user_id}: {e.message}")
        return RecommendationsResponse(
            success=True,
            data=_list_payload(engine, user_id, limit),
            message="Not enough interactions to personalize recommendations",
        )

    return RecommendationsResponse(
        success=True,
        data=_list_payload(engine, user_id, limit),
        message="Recommendations regenerated",
    )


@router.get("/{user_id}/preferences", response_model=RecommendationsResponse)
async def get_user_preferences(
    user_id: str,
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> RecommendationsResponse:
    """Get the preference profile built from a user's interactions."""
    preferences = engine.get_user_preferences(user_id)
    data = UserPreferencesResponse(**preferences.to_dict()).model_dump(mode="json") if preferences else {}

    return RecommendationsResponse(
        success=True,
        data=data,
        message="Preferences retrieved successfully" if preferences else "No preferences recorded",
    )


@router.post("/{user_id}/{content_id}/viewed", response_model=RecommendationsResponse)
async def mark_viewed(
    user_id: str,
    content_id: str,
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> RecommendationsResponse:
    """Mark a recommendation as seen by the user."""
    updated = engine.mark_recommendation_viewed(user_id, content_id)
    return RecommendationsResponse(
        success=True,
        data={"user_id": user_id, "content_id": content_id, "updated": updated},
        message="Recommendation marked as viewed" if updated else "Recommendation not found",
    )


@router.post("/{user_id}/{content_id}/interacted", response_model=RecommendationsResponse)
async def mark_interacted(
    user_id: str,
    content_id: str,
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> RecommendationsResponse:
    """Mark a recommendation as acted on (opened, saved) without recording an interaction."""
    updated = engine.mark_recommendation_interacted(user_id, content_id)
    return RecommendationsResponse(
        success=True,
        data={"user_id": user_id, "content_id": content_id, "updated": updated},
        message="Recommendation marked as interacted" if updated else "Recommendation not found",
    )
