"""
FeedRank Schemas
Pydantic request/response schemas for API validation and documentation.
"""

from feedrank.schemas.recommendation_schema import (
    RecordInteractionRequest,
    InteractionResponse,
    RecommendationItem,
    RecommendationListResponse,
    TrendingTopicItem,
    ContentIdListResponse,
    UserPreferencesResponse,
)

__all__ = [
    "RecordInteractionRequest",
    "InteractionResponse",
    "RecommendationItem",
    "RecommendationListResponse",
    "TrendingTopicItem",
    "ContentIdListResponse",
    "UserPreferencesResponse",
]
