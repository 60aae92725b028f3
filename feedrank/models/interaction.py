"""
Interaction Model
Represents user interactions with content (views, votes, comments, saves).
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, Any
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from feedrank.models.content import ContentType


class InteractionType(str, Enum):
    """Type of user interaction with content."""
    VIEW = "view"
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"
    COMMENT = "comment"
    SHARE = "share"
    SAVE = "save"
    REPORT = "report"

    @property
    def weight(self) -> float:
        """Fixed interaction strength."""
        return INTERACTION_WEIGHTS[self]

    @property
    def is_positive(self) -> bool:
        """Whether the interaction grows the user's preference sets."""
        return self in (InteractionType.UPVOTE, InteractionType.COMMENT)


INTERACTION_WEIGHTS = {
    InteractionType.VIEW: 1.0,
    InteractionType.UPVOTE: 2.0,
    InteractionType.DOWNVOTE: -1.0,
    InteractionType.COMMENT: 3.0,
    InteractionType.SHARE: 2.5,
    InteractionType.SAVE: 2.5,
    InteractionType.REPORT: -2.0,
}


class Interaction(BaseModel):
    """Immutable record of a user acting on a content item."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique interaction ID")
    user_id: str = Field(description="User ID")
    content_id: str = Field(description="Content ID")
    content_type: ContentType = Field(description="Type of the content acted on")
    interaction_type: InteractionType = Field(description="Type of interaction")
    weight: float = Field(description="Interaction strength")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Interaction timestamp")

    @classmethod
    def create(
        cls,
        user_id: str,
        content_id: str,
        content_type: ContentType,
        interaction_type: InteractionType,
        timestamp: datetime,
    ) -> "Interaction":
        """Build an interaction carrying its type's fixed weight."""
        return cls(
            user_id=user_id,
            content_id=content_id,
            content_type=content_type,
            interaction_type=interaction_type,
            weight=interaction_type.weight,
            timestamp=timestamp,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert interaction to a JSON-friendly dictionary."""
        data = self.model_dump()
        data["content_type"] = self.content_type.value
        data["interaction_type"] = self.interaction_type.value
        data["timestamp"] = self.timestamp.isoformat()
        return data
