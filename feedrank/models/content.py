"""
Content Models
Read-only view of the posts, reviews and comments the engine ranks.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator

ENGAGEMENT_DECAY_SECONDS = 24 * 60 * 60
MIN_TIME_DECAY = 0.1


class ContentType(str, Enum):
    """Content type enumeration."""
    POST = "post"
    REVIEW = "review"
    COMMENT = "comment"


class PostCategory(str, Enum):
    """Known discussion post categories."""
    ADVICE = "advice"
    EXPERIENCE = "experience"
    QUESTION = "question"
    STRATEGY = "strategy"
    SUCCESS = "success"
    RANT = "rant"
    GENERAL = "general"

    @property
    def display_name(self) -> str:
        return _CATEGORY_DISPLAY_NAMES[self]


_CATEGORY_DISPLAY_NAMES = {
    PostCategory.ADVICE: "Advice",
    PostCategory.EXPERIENCE: "Experience",
    PostCategory.QUESTION: "Question",
    PostCategory.STRATEGY: "Strategy",
    PostCategory.SUCCESS: "Success Story",
    PostCategory.RANT: "Rant",
    PostCategory.GENERAL: "General Discussion",
}


class ContentSortOption(str, Enum):
    """Orderings offered when browsing a category."""
    RECENT = "recent"
    POPULAR = "popular"
    TRENDING = "trending"
    TOP_RATED = "top_rated"

    def sort(self, records: List["ContentRecord"]) -> List["ContentRecord"]:
        """Sort records best first. Python's sort is stable, so ties keep input order."""
        if self == ContentSortOption.RECENT:
            return sorted(records, key=lambda r: r.created_at, reverse=True)
        if self == ContentSortOption.POPULAR:
            return sorted(records, key=lambda r: r.upvotes, reverse=True)
        if self == ContentSortOption.TOP_RATED:
            return sorted(records, key=lambda r: r.net_score, reverse=True)
        return sorted(records, key=lambda r: r.engagement_score, reverse=True)


def category_display_name(category: str) -> str:
    """Display label for a category, falling back to the raw label."""
    try:
        return PostCategory(category).display_name
    except ValueError:
        return category


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def compute_engagement_score(
    content_type: ContentType,
    upvotes: int,
    downvotes: int,
    comment_count: int,
    created_at: datetime,
    now: Optional[datetime] = None,
) -> float:
    """Derive an engagement score from raw vote and comment counts.

    Posts: (net score + 2 * comments) * time decay, where the decay falls
    linearly over 24 hours and bottoms out at 0.1.
    Reviews and comments: net score.
    """
    net_score = upvotes - downvotes
    if content_type != ContentType.POST:
        return float(net_score)

    now = now or datetime.now(timezone.utc)
    age_seconds = (now - ensure_utc(created_at)).total_seconds()
    time_decay = max(MIN_TIME_DECAY, 1.0 - (age_seconds / ENGAGEMENT_DECAY_SECONDS))
    return float(net_score + comment_count * 2) * time_decay


class ContentRecord(BaseModel):
    """Snapshot of a content item as owned by the corpus."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique content ID")
    content_type: ContentType = Field(description="Content type (post, review, comment)")
    category: Optional[str] = Field(default=None, description="Post category label")
    tags: List[str] = Field(default_factory=list, description="Content tags")
    engagement_score: float = Field(default=0.0, description="Externally computed engagement score")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Creation timestamp")
    visible: bool = Field(default=True, description="Whether the content passed moderation")
    source: Optional[str] = Field(default=None, description="Review subject, e.g. the dating app")
    author_id: Optional[str] = Field(default=None, description="Author ID")
    upvotes: int = Field(default=0, ge=0, description="Number of upvotes")
    downvotes: int = Field(default=0, ge=0, description="Number of downvotes")
    comment_count: int = Field(default=0, ge=0, description="Number of comments")

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, v: datetime) -> datetime:
        """Normalize timestamps to UTC."""
        return ensure_utc(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        """Drop empty and duplicate tags, keeping first-seen order."""
        seen = []
        for tag in v:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

    @property
    def net_score(self) -> int:
        return self.upvotes - self.downvotes

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def to_dict(self) -> Dict[str, Any]:
        """Convert content to a JSON-friendly dictionary."""
        data = self.model_dump()
        data["content_type"] = self.content_type.value
        data["created_at"] = self.created_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], now: Optional[datetime] = None) -> "ContentRecord":
        """Create a record from a corpus dictionary.

        Records without a precomputed engagement score get one derived from
        their vote and comment counts.
        """
        data = dict(data)
        if "type" in data and "content_type" not in data:
            data["content_type"] = data.pop("type")
        if isinstance(data.get("content_type"), str):
            data["content_type"] = ContentType(data["content_type"].lower())
        if isinstance(data.get("created_at"), str):
            data["created_at"] = datetime.fromisoformat(data["created_at"].replace("Z", "+00:00"))
        if data.get("engagement_score") is None:
            data["engagement_score"] = compute_engagement_score(
                content_type=data["content_type"],
                upvotes=int(data.get("upvotes", 0)),
                downvotes=int(data.get("downvotes", 0)),
                comment_count=int(data.get("comment_count", 0)),
                created_at=data.get("created_at") or datetime.now(timezone.utc),
                now=now,
            )
        return cls(**data)
