"""
Category Browsing Models
Aggregates shown on the category browsing screens.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class CategoryStats:
    """Totals for one category."""

    category: str
    post_count: int
    recent_posts: int
    total_engagement: int
    average_rating: float
    active_users: int
    today_posts: int
    is_active: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PopularCategory:
    """A category ranked by day-over-day growth."""

    category: str
    recent_posts: int
    growth_percentage: int
    trending_score: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CategoryActivity:
    """Recent activity in a category."""

    category: str
    new_posts: int
    total_engagement: int
    last_activity: datetime

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["last_activity"] = self.last_activity.isoformat()
        return data
