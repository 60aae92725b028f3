"""Trending topic calculation for the recommendation feed."""

import logging
from typing import Dict, List, Optional, Tuple
from datetime import datetime, timedelta, timezone
import cachetools

from feedrank.models.content import category_display_name
from feedrank.models.recommendation import TrendingTopic
from feedrank.services.content_store import ContentSnapshot

logger = logging.getLogger(__name__)


class TrendingCalculator:
    """Computes time-windowed trending categories and tags from a content snapshot."""

    # Cache configuration
    CACHE_TTL = 900  # 15 minutes in seconds
    CACHE_MAX_SIZE = 64

    # Score weights
    WEIGHT_COUNT = 0.3
    WEIGHT_ENGAGEMENT = 0.7

    DEFAULT_WINDOW = timedelta(hours=24)
    MIN_TAG_COUNT = 3  # Tags seen fewer times than this are noise

    def __init__(self, window: timedelta = DEFAULT_WINDOW, min_tag_count: int = MIN_TAG_COUNT,
                 cache_ttl: int = CACHE_TTL):
        """Initialize trending calculator with caching."""
        self.window = window
        self.min_tag_count = min_tag_count
        self.cache_ttl = cache_ttl
        # Results per (snapshot version, window)
        self._trending_cache = cachetools.TTLCache(
            maxsize=self.CACHE_MAX_SIZE,
            ttl=cache_ttl
        )

    @classmethod
    def trending_score(cls, content_count: int, engagement_score: float) -> float:
        """Formula: content_count * 0.3 + engagement_score * 0.7"""
        return content_count * cls.WEIGHT_COUNT + engagement_score * cls.WEIGHT_ENGAGEMENT

    def calculate_trending(self, snapshot: ContentSnapshot, now: Optional[datetime] = None,
                           window: Optional[timedelta] = None) -> List[TrendingTopic]:
        """Calculate trending topics over the content created within the window.

        Args:
            snapshot: Content snapshot to aggregate
            now: Reference time (default: current UTC time)
            window: Trending window (default: calculator window, 24h)

        Returns:
            Trending topics sorted by trending score (highest first). Ties are
            ordered by label, categories before tags.
        """
        now = now or datetime.now(timezone.utc)
        window = window or self.window
        cutoff = now - window

        recent = [record for record in snapshot.records if record.created_at > cutoff]
        if not recent:
            logger.debug("No content in trending window")
            return []

        category_totals: Dict[str, Tuple[int, float]] = {}
        tag_totals: Dict[str, Tuple[int, float]] = {}

        for record in recent:
            if record.category:
                count, engagement = category_totals.get(record.category, (0, 0.0))
                category_totals[record.category] = (count + 1, engagement + record.engagement_score)
            for tag in record.tags:
                count, engagement = tag_totals.get(tag, (0, 0.0))
                tag_totals[tag] = (count + 1, engagement + record.engagement_score)

        window_seconds = window.total_seconds()
        topics: List[TrendingTopic] = []

        for category, (count, engagement) in category_totals.items():
            topics.append(TrendingTopic(
                label=category_display_name(category),
                category=category,
                content_count=count,
                engagement_score=engagement,
                trending_score=self.trending_score(count, engagement),
                time_window_seconds=window_seconds,
                calculated_at=now,
            ))

        for tag, (count, engagement) in tag_totals.items():
            if count < self.min_tag_count:
                continue
            topics.append(TrendingTopic(
                label=tag,
                tag=tag,
                content_count=count,
                engagement_score=engagement,
                trending_score=self.trending_score(count, engagement),
                time_window_seconds=window_seconds,
                calculated_at=now,
            ))

        topics.sort(key=lambda t: (-t.trending_score, t.label, 0 if t.is_category else 1))

        logger.debug(f"Trending calculated: {len(topics)} topics from {len(recent)} recent items")
        return topics

    def get_trending(self, snapshot: ContentSnapshot, now: Optional[datetime] = None) -> List[TrendingTopic]:
        """Get trending topics for a snapshot, with caching.

        The cache is keyed by snapshot version, so a new corpus snapshot always
        recomputes; use refresh_trending_cache to force a recompute.
        """
        cache_key = (snapshot.version, self.window.total_seconds())

        if cache_key in self._trending_cache:
            logger.debug("Returning cached trending results")
            return self._trending_cache[cache_key]

        trending_results = self.calculate_trending(snapshot, now=now)
        self._trending_cache[cache_key] = trending_results

        logger.info(f"Trending results computed: {len(trending_results)} topics")
        return trending_results

    def refresh_trending_cache(self, snapshot: ContentSnapshot,
                               now: Optional[datetime] = None) -> List[TrendingTopic]:
        """Drop cached results and recompute for the given snapshot."""
        self._trending_cache.clear()
        return self.get_trending(snapshot, now=now)

    def clear_cache(self) -> None:
        """Clear the trending cache completely."""
        self._trending_cache.clear()
        logger.info("Trending cache cleared")

    def get_cache_stats(self) -> Dict:
        """Get statistics about the cache.

        Returns:
            Dictionary with cache statistics
        """
        return {
            "size": len(self._trending_cache),
            "max_size": self.CACHE_MAX_SIZE,
            "ttl": self.cache_ttl,
            "window_seconds": self.window.total_seconds(),
        }
