"""
FeedRank Models
Content snapshot records, interactions and derived recommendation state.
"""

from feedrank.models.content import ContentRecord, ContentType, PostCategory
from feedrank.models.interaction import Interaction, InteractionType
from feedrank.models.user import UserPreferences
from feedrank.models.recommendation import (
    ContentRecommendation,
    RecommendationReason,
    RecommendationState,
    TrendingTopic,
)
from feedrank.models.category import CategoryActivity, CategoryStats, PopularCategory

__all__ = [
    "ContentRecord",
    "ContentType",
    "PostCategory",
    "Interaction",
    "InteractionType",
    "UserPreferences",
    "ContentRecommendation",
    "RecommendationReason",
    "RecommendationState",
    "TrendingTopic",
    "CategoryActivity",
    "CategoryStats",
    "PopularCategory",
]
