"""
Recommendation Models
Trending topics and per-user content recommendations.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator

from feedrank.models.content import ContentType

DEFAULT_TRENDING_WINDOW_SECONDS = 24 * 60 * 60


class RecommendationReason(str, Enum):
    """Strategy that proposed a recommendation."""
    CATEGORY_PREFERENCE = "category_preference"
    TAG_PREFERENCE = "tag_preference"
    POPULAR_CONTENT = "popular_content"
    TRENDING_TOPIC = "trending_topic"
    SIMILAR_USERS = "similar_users"

    @property
    def display_name(self) -> str:
        return _REASON_DISPLAY_NAMES[self]


_REASON_DISPLAY_NAMES = {
    RecommendationReason.CATEGORY_PREFERENCE: "Matches your preferences",
    RecommendationReason.TAG_PREFERENCE: "Related to your interests",
    RecommendationReason.POPULAR_CONTENT: "Popular in community",
    RecommendationReason.TRENDING_TOPIC: "Trending now",
    RecommendationReason.SIMILAR_USERS: "Users like you also viewed",
}


class RecommendationState(str, Enum):
    """Externally visible state of a user's recommendation set."""
    EMPTY = "empty"
    READY = "ready"


class TrendingTopic(BaseModel):
    """A category or tag that is trending within the window."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Display name")
    category: Optional[str] = Field(default=None, description="Category this topic resolves to")
    tag: Optional[str] = Field(default=None, description="Tag this topic resolves to")
    content_count: int = Field(ge=0, description="Number of items in the window")
    engagement_score: float = Field(description="Summed engagement in the window")
    trending_score: float = Field(description="content_count * 0.3 + engagement_score * 0.7")
    time_window_seconds: float = Field(default=DEFAULT_TRENDING_WINDOW_SECONDS, description="Window length")
    calculated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Calculation time")

    @model_validator(mode="after")
    def check_single_key(self) -> "TrendingTopic":
        """Exactly one of category or tag must be set."""
        if (self.category is None) == (self.tag is None):
            raise ValueError("TrendingTopic needs exactly one of category or tag")
        return self

    @property
    def is_category(self) -> bool:
        return self.category is not None

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        data["calculated_at"] = self.calculated_at.isoformat()
        return data


class ContentRecommendation(BaseModel):
    """A content item recommended to a user."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(description="User ID")
    content_id: str = Field(description="Content ID")
    content_type: ContentType = Field(description="Content type")
    score: float = Field(description="Strategy score")
    reason: RecommendationReason = Field(description="Strategy that proposed the item")
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Generation time")
    viewed: bool = Field(default=False, description="User has seen the recommendation")
    interacted: bool = Field(default=False, description="User acted on the recommendation")

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        data["content_type"] = self.content_type.value
        data["reason"] = self.reason.value
        data["reason_display"] = self.reason.display_name
        data["generated_at"] = self.generated_at.isoformat()
        return data
