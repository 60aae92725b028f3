"""Category browsing statistics: totals, day-over-day growth and recent activity."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from feedrank.models.category import CategoryActivity, CategoryStats, PopularCategory
from feedrank.models.content import ContentRecord, ContentType, PostCategory
from feedrank.services.content_store import ContentSnapshot
from feedrank.utils.logger import get_logger

logger = get_logger(__name__)

ONE_DAY = timedelta(hours=24)
MAX_POPULAR_CATEGORIES = 5
GROWTH_WEIGHT = 0.1


def growth_percentage(today: int, yesterday: int) -> int:
    """Day-over-day growth, truncated toward zero.

    With no posts yesterday, any activity today counts as 100% growth.
    """
    if yesterday > 0:
        return int(((today - yesterday) / yesterday) * 100)
    return 100 if today > 0 else 0


class CategoryStatsCalculator:
    """Aggregates discussion posts per category for the browsing screens."""

    def _posts(self, snapshot: ContentSnapshot) -> List[ContentRecord]:
        return [r for r in snapshot.records if r.content_type == ContentType.POST and r.category]

    def _categories(self, posts: List[ContentRecord]) -> List[str]:
        """Known categories first, then any other labels seen in the corpus."""
        known = [c.value for c in PostCategory]
        extra = sorted({p.category for p in posts if p.category not in known})
        return known + extra

    def calculate_category_stats(self, snapshot: ContentSnapshot,
                                 now: Optional[datetime] = None) -> Dict[str, CategoryStats]:
        now = now or datetime.now(timezone.utc)
        one_day_ago = now - ONE_DAY
        posts = self._posts(snapshot)

        stats: Dict[str, CategoryStats] = {}
        for category in self._categories(posts):
            category_posts = [p for p in posts if p.category == category]
            recent_posts = [p for p in category_posts if p.created_at > one_day_ago]
            total_engagement = sum(p.upvotes + p.comment_count for p in category_posts)
            average_rating = (
                sum(p.engagement_score for p in category_posts) / len(category_posts)
                if category_posts else 0.0
            )
            active_users = {p.author_id for p in recent_posts if p.author_id}

            stats[category] = CategoryStats(
                category=category,
                post_count=len(category_posts),
                recent_posts=len(recent_posts),
                total_engagement=total_engagement,
                average_rating=average_rating,
                active_users=len(active_users),
                today_posts=len(recent_posts),
                is_active=len(recent_posts) > 0,
            )

        return stats

    def calculate_popular_categories(self, snapshot: ContentSnapshot,
                                     now: Optional[datetime] = None) -> List[PopularCategory]:
        """Top categories by posts today plus a growth bonus."""
        now = now or datetime.now(timezone.utc)
        one_day_ago = now - ONE_DAY
        two_days_ago = now - 2 * ONE_DAY
        posts = self._posts(snapshot)

        popular: List[PopularCategory] = []
        for category in self._categories(posts):
            today = sum(1 for p in posts if p.category == category and p.created_at > one_day_ago)
            yesterday = sum(
                1 for p in posts
                if p.category == category and two_days_ago < p.created_at <= one_day_ago
            )
            growth = growth_percentage(today, yesterday)

            if today > 0 or growth > 0:
                popular.append(PopularCategory(
                    category=category,
                    recent_posts=today,
                    growth_percentage=growth,
                    trending_score=today + growth * GROWTH_WEIGHT,
                ))

        popular.sort(key=lambda p: -p.trending_score)
        return popular[:MAX_POPULAR_CATEGORIES]

    def calculate_category_activity(self, snapshot: ContentSnapshot,
                                    now: Optional[datetime] = None) -> List[CategoryActivity]:
        """Categories with posts in the last day, busiest first."""
        now = now or datetime.now(timezone.utc)
        one_day_ago = now - ONE_DAY
        posts = self._posts(snapshot)

        activities: List[CategoryActivity] = []
        for category in self._categories(posts):
            recent_posts = [p for p in posts if p.category == category and p.created_at > one_day_ago]
            if not recent_posts:
                continue
            activities.append(CategoryActivity(
                category=category,
                new_posts=len(recent_posts),
                total_engagement=sum(p.upvotes + p.downvotes + p.comment_count for p in recent_posts),
                last_activity=max(p.created_at for p in recent_posts),
            ))

        activities.sort(key=lambda a: -a.total_engagement)
        return activities
