"""User interaction endpoints."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from feedrank.dependencies import get_engine
from feedrank.schemas.recommendation_schema import InteractionResponse, RecordInteractionRequest
from feedrank.services.recommendations.engine import ContentRecommendationEngine
from feedrank.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


# Response Models
class RecordInteractionResponse(BaseModel):
    """Response model for a recorded interaction."""
    success: bool
    data: dict
    message: str


@router.post("", response_model=RecordInteractionResponse, status_code=status.HTTP_201_CREATED)
async def record_interaction(
    request: RecordInteractionRequest,
    engine: ContentRecommendationEngine = Depends(get_engine),
) -> RecordInteractionResponse:
    """
    Record a user interaction and refresh that user's recommendations.

    Args:
        request: Interaction to record
        engine: Recommendation engine

    Returns:
        RecordInteractionResponse with the stored interaction and the size of
        the regenerated recommendation list
    """
    interaction = engine.record_interaction(
        user_id=request.user_id,
        content_id=request.content_id,
        content_type=request.content_type,
        interaction_type=request.interaction_type,
    )
    recommendations = engine.get_recommendations(request.user_id, limit=engine.settings.max_recommendations)

    return RecordInteractionResponse(
        success=True,
        data={
            "interaction": InteractionResponse(**interaction.model_dump()).model_dump(mode="json"),
            "recommendation_count": len(recommendations),
        },
        message="Interaction recorded successfully",
    )
