"""
Recommendation Request/Response Schemas
API schemas for interactions, recommendations and trending topics.
"""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from feedrank.models.content import ContentType
from feedrank.models.interaction import InteractionType
from feedrank.models.recommendation import RecommendationReason, RecommendationState


class RecordInteractionRequest(BaseModel):
    """Request to record a user interaction."""

    user_id: str = Field(min_length=1, max_length=128, description="User ID")
    content_id: str = Field(min_length=1, max_length=128, description="Content ID")
    content_type: ContentType = Field(description="Content type (post, review, comment)")
    interaction_type: InteractionType = Field(description="Interaction type")


class InteractionResponse(BaseModel):
    """Recorded interaction."""

    id: str
    user_id: str
    content_id: str
    content_type: ContentType
    interaction_type: InteractionType
    weight: float
    timestamp: datetime


class RecommendationItem(BaseModel):
    """One recommended content item."""

    content_id: str
    content_type: ContentType
    score: float
    reason: RecommendationReason
    reason_display: str
    viewed: bool = False
    interacted: bool = False


class RecommendationListResponse(BaseModel):
    """A user's recommendation list."""

    user_id: str
    state: RecommendationState
    items: List[RecommendationItem] = Field(default_factory=list)
    total: int = Field(ge=0)


class TrendingTopicItem(BaseModel):
    """Trending topic as shown in the feed."""

    label: str
    category: Optional[str] = None
    tag: Optional[str] = None
    content_count: int
    engagement_score: float
    trending_score: float


class ContentIdListResponse(BaseModel):
    """Ordered list of content ids."""

    items: List[str] = Field(default_factory=list)
    total: int = Field(ge=0)
    limit: int = Field(ge=0)


class UserPreferencesResponse(BaseModel):
    """A user's accumulated preferences."""

    user_id: str
    preferred_categories: List[str]
    preferred_tags: List[str]
    preferred_sources: List[str]
    content_type_preferences: Dict[str, float]
    last_updated: datetime
