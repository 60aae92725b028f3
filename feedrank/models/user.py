"""
User Preference Model
Accumulated taste profile derived from a user's interactions.
"""

from datetime import datetime, timezone
from typing import Dict, Any, List
from pydantic import BaseModel, Field

from feedrank.models.content import ContentType

DEFAULT_CONTENT_TYPE_WEIGHT = 1.0
MIN_CONTENT_TYPE_WEIGHT = 0.1


def _default_content_type_preferences() -> Dict[ContentType, float]:
    return {content_type: DEFAULT_CONTENT_TYPE_WEIGHT for content_type in ContentType}


class UserPreferences(BaseModel):
    """Per-user preference profile. Lists are insertion-ordered and duplicate-free."""

    user_id: str = Field(description="User ID")
    preferred_categories: List[str] = Field(default_factory=list, description="Preferred categories")
    preferred_tags: List[str] = Field(default_factory=list, description="Preferred tags")
    preferred_sources: List[str] = Field(default_factory=list, description="Preferred review sources")
    content_type_preferences: Dict[ContentType, float] = Field(
        default_factory=_default_content_type_preferences,
        description="Preference weight per content type",
    )
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Last update timestamp")

    def content_type_weight(self, content_type: ContentType) -> float:
        return self.content_type_preferences.get(content_type, DEFAULT_CONTENT_TYPE_WEIGHT)

    def to_dict(self) -> Dict[str, Any]:
        """Convert preferences to a JSON-friendly dictionary."""
        data = self.model_dump()
        data["content_type_preferences"] = {
            content_type.value: weight
            for content_type, weight in self.content_type_preferences.items()
        }
        data["last_updated"] = self.last_updated.isoformat()
        return data
