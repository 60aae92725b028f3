"""
Content recommendation engine.

Wires the interaction log, preference model, trending calculator, popularity
ranker, similarity engine and generator together behind explicit, named
entry points: single-user regeneration after an interaction, and a two-phase
full recompute cycle.
"""

import asyncio
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from feedrank.config import Settings, get_settings
from feedrank.models.category import CategoryActivity, CategoryStats, PopularCategory
from feedrank.models.content import ContentRecord, ContentSortOption, ContentType
from feedrank.models.interaction import Interaction, InteractionType
from feedrank.models.recommendation import (
    ContentRecommendation,
    RecommendationReason,
    RecommendationState,
    TrendingTopic,
)
from feedrank.models.user import UserPreferences
from feedrank.services.content_store import ContentProvider, ContentSnapshot, load_snapshot
from feedrank.services.interaction_log import InteractionLog
from feedrank.services.preferences import PreferenceModel
from feedrank.services.ranking.popularity import PopularityRanker
from feedrank.services.recommendations.generator import GenerationContext, RecommendationGenerator
from feedrank.services.recommendations.store import RecommendationStore
from feedrank.services.similarity import SimilarityEngine
from feedrank.services.trending.category_stats import CategoryStatsCalculator
from feedrank.services.trending.trending_algorithm import TrendingCalculator
from feedrank.utils.exceptions import (
    ContentNotFoundError,
    FeedRankException,
    InsufficientDataError,
    ValidationError,
)
from feedrank.utils.logger import get_logger
from feedrank.utils.validation import validate_content_id, validate_user_id

logger = get_logger(__name__)


@dataclass(frozen=True)
class SharedRankings:
    """Trending and popularity outputs, written once per cycle."""

    trending: Tuple[TrendingTopic, ...]
    popular: Tuple[str, ...]
    snapshot_version: int
    computed_at: datetime


@dataclass
class CycleReport:
    """Outcome of one full recompute cycle."""

    snapshot_version: int
    started_at: datetime
    users_processed: int = 0
    users_failed: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "snapshot_version": self.snapshot_version,
            "started_at": self.started_at.isoformat(),
            "users_processed": self.users_processed,
            "users_failed": list(self.users_failed),
            "duration_seconds": round(self.duration_seconds, 4),
        }


def _validate_limit(limit: int) -> int:
    if limit < 0:
        raise ValidationError(message="limit must be non-negative", details={"limit": limit})
    return limit


class ContentRecommendationEngine:
    """In-memory recommendation and trending engine."""

    def __init__(
        self,
        content_provider: ContentProvider,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
        interaction_log: Optional[InteractionLog] = None,
        preference_model: Optional[PreferenceModel] = None,
        trending_calculator: Optional[TrendingCalculator] = None,
        popularity_ranker: Optional[PopularityRanker] = None,
        similarity_engine: Optional[SimilarityEngine] = None,
        generator: Optional[RecommendationGenerator] = None,
        store: Optional[RecommendationStore] = None,
        category_stats: Optional[CategoryStatsCalculator] = None,
    ):
        settings = settings or get_settings()
        self.settings = settings
        self.content_provider = content_provider
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        self.interaction_log = interaction_log or InteractionLog()
        self.preference_model = preference_model or PreferenceModel(clock=self.clock)
        self.trending_calculator = trending_calculator or TrendingCalculator(
            window=timedelta(hours=settings.trending_window_hours),
            min_tag_count=settings.trending_min_tag_count,
            cache_ttl=settings.trending_cache_ttl,
        )
        self.popularity_ranker = popularity_ranker or PopularityRanker(
            threshold=settings.popular_content_threshold,
        )
        self.generator = generator or RecommendationGenerator(
            similarity=similarity_engine or SimilarityEngine(threshold=settings.similarity_threshold),
            max_recommendations=settings.max_recommendations,
        )
        self.store = store or RecommendationStore()
        self.category_stats = category_stats or CategoryStatsCalculator()

        self._snapshot = ContentSnapshot.empty()
        self._snapshot_version = 0
        self._rankings: Optional[SharedRankings] = None
        self._rankings_lock = threading.Lock()
        self._user_locks: Dict[str, threading.Lock] = {}
        self._user_locks_guard = threading.Lock()
        self._scheduler = None

    # ── Corpus & shared rankings ──────────────────────────────────────

    @property
    def snapshot(self) -> ContentSnapshot:
        return self._snapshot

    async def refresh_corpus(self) -> ContentSnapshot:
        """Fetch a fresh content snapshot from the provider.

        Raises:
            CalculationFailedError: If the provider fails.
        """
        version = self._snapshot_version + 1
        snapshot = await load_snapshot(self.content_provider, version)
        self._snapshot_version = version
        self._snapshot = snapshot
        logger.info(f"Content snapshot v{version} loaded: {len(snapshot)} items")
        return snapshot

    def recompute_shared_rankings(self) -> SharedRankings:
        """Recompute trending topics and popular content for the current snapshot."""
        snapshot = self._snapshot
        now = self.clock()
        trending = self.trending_calculator.refresh_trending_cache(snapshot, now=now)
        popular = self.popularity_ranker.calculate_popular(snapshot)
        rankings = SharedRankings(
            trending=tuple(trending),
            popular=tuple(popular),
            snapshot_version=snapshot.version,
            computed_at=now,
        )
        with self._rankings_lock:
            self._rankings = rankings
        logger.info(
            f"Shared rankings recomputed: {len(trending)} trending topics, {len(popular)} popular items"
        )
        return rankings

    def shared_rankings(self) -> SharedRankings:
        """Current rankings, computed on first use or after a snapshot change."""
        with self._rankings_lock:
            rankings = self._rankings
        if rankings is None or rankings.snapshot_version != self._snapshot.version:
            rankings = self.recompute_shared_rankings()
        return rankings

    # ── Ingestion ─────────────────────────────────────────────────────

    def record_interaction(
        self,
        user_id: str,
        content_id: str,
        content_type: ContentType,
        interaction_type: InteractionType,
    ) -> Interaction:
        """Append an interaction, then update the user's preferences and recommendations.

        Raises:
            InvalidUserIdError: If the user id is malformed.
            ValidationError: If the content id is malformed.
        """
        validate_user_id(user_id)
        validate_content_id(content_id)

        interaction = Interaction.create(
            user_id=user_id,
            content_id=content_id,
            content_type=ContentType(content_type),
            interaction_type=InteractionType(interaction_type),
            timestamp=self.clock(),
        )
        self.interaction_log.append(interaction)
        logger.info(
            f"User {user_id} {interaction.interaction_type.value} {content_id}",
            extra={"extra_data": {"user_id": user_id, "content_id": content_id}},
        )

        self.on_interaction_recorded(interaction)
        return interaction

    def on_interaction_recorded(self, interaction: Interaction) -> List[ContentRecommendation]:
        """Fold a new interaction into the user's state and regenerate their list."""
        user_id = interaction.user_id
        with self._user_lock(user_id):
            self.preference_model.update_preferences(user_id, interaction, self._snapshot)
            return self._regenerate_locked(user_id)

    def on_corpus_changed(self) -> None:
        """Request a debounced full recompute after a corpus change."""
        if self._scheduler is None:
            logger.debug("Corpus changed but no scheduler attached")
            return
        self._scheduler.notify_corpus_changed()

    def set_scheduler(self, scheduler) -> None:
        self._scheduler = scheduler

    # ── Generation ────────────────────────────────────────────────────

    def _user_lock(self, user_id: str) -> threading.Lock:
        with self._user_locks_guard:
            lock = self._user_locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._user_locks[user_id] = lock
            return lock

    def build_context(self, user_id: str, interactions: Optional[Tuple[Interaction, ...]] = None,
                      rankings: Optional[SharedRankings] = None) -> GenerationContext:
        rankings = rankings or self.shared_rankings()
        return GenerationContext(
            user_id=user_id,
            preferences=self.preference_model.get_or_default(user_id),
            snapshot=self._snapshot,
            interactions=interactions if interactions is not None else self.interaction_log.snapshot(),
            trending=rankings.trending,
            popular=rankings.popular,
            now=self.clock(),
        )

    def _regenerate_locked(self, user_id: str, interactions: Optional[Tuple[Interaction, ...]] = None,
                           rankings: Optional[SharedRankings] = None) -> List[ContentRecommendation]:
        context = self.build_context(user_id, interactions=interactions, rankings=rankings)
        recommendations = self.generator.generate_recommendations(context)
        self.store.replace(user_id, recommendations)
        return recommendations

    def generate_recommendations(self, user_id: str) -> List[ContentRecommendation]:
        """Regenerate one user's recommendation set and return it.

        Raises:
            InvalidUserIdError: If the user id is malformed.
            InsufficientDataError: If the user has no interactions yet.
        """
        validate_user_id(user_id)
        if not self.interaction_log.content_ids_for(user_id):
            raise InsufficientDataError(
                message="No interactions recorded for user",
                details={"user_id": user_id},
            )
        with self._user_lock(user_id):
            return self._regenerate_locked(user_id)

    async def run_full_cycle(self, refresh_corpus: bool = True) -> CycleReport:
        """Refresh shared rankings once, then regenerate every known user.

        Users are taken from the log as of the cycle start; users who first
        appear mid-cycle are picked up by the next one. A failure for one user
        is logged and does not stop the others.

        Raises:
            CalculationFailedError: If the corpus cannot be loaded.
        """
        started = time.monotonic()
        if refresh_corpus:
            await self.refresh_corpus()

        rankings = self.recompute_shared_rankings()
        interactions = self.interaction_log.snapshot()
        counts: Dict[str, int] = {}
        for interaction in interactions:
            counts[interaction.user_id] = counts.get(interaction.user_id, 0) + 1

        report = CycleReport(snapshot_version=rankings.snapshot_version, started_at=self.clock())

        for user_id, count in counts.items():
            try:
                with self._user_lock(user_id):
                    # Users who interacted since the cycle snapshot read the live log
                    if len(self.interaction_log.for_user(user_id)) != count:
                        user_interactions = self.interaction_log.snapshot()
                    else:
                        user_interactions = interactions
                    self._regenerate_locked(user_id, interactions=user_interactions, rankings=rankings)
                report.users_processed += 1
            except FeedRankException as e:
                logger.warning(f"Recommendation generation failed for {user_id}: {e.error_code} - {e.message}")
                report.users_failed.append(user_id)
            except Exception as e:
                logger.error(f"Unexpected error generating recommendations for {user_id}: {e}", exc_info=True)
                report.users_failed.append(user_id)
            await asyncio.sleep(0)

        report.duration_seconds = time.monotonic() - started
        logger.info(
            f"Recompute cycle finished: {report.users_processed} users, {len(report.users_failed)} failed",
            extra={"extra_data": report.to_dict()},
        )
        return report

    # ── Queries ───────────────────────────────────────────────────────

    def get_recommendations(self, user_id: str, limit: int = 20,
                            content_type: Optional[ContentType] = None,
                            reason: Optional[RecommendationReason] = None) -> List[ContentRecommendation]:
        """A user's current recommendations, best first. Unknown users get an empty list.

        Args:
            user_id: User ID
            limit: Maximum number of items, applied after filtering
            content_type: Only keep recommendations of this content type
            reason: Only keep recommendations proposed by this strategy
        """
        validate_user_id(user_id)
        limit = _validate_limit(limit)
        if content_type is None and reason is None:
            return self.store.get(user_id, limit=limit)
        filtered = [
            rec for rec in self.store.get(user_id)
            if (content_type is None or rec.content_type == content_type)
            and (reason is None or rec.reason == reason)
        ]
        return filtered[:limit]

    def get_recommendation_state(self, user_id: str) -> RecommendationState:
        validate_user_id(user_id)
        return self.store.state(user_id)

    def get_trending_topics(self, limit: int = 10) -> List[TrendingTopic]:
        return list(self.shared_rankings().trending[:_validate_limit(limit)])

    def get_popular_content(self, content_type: Optional[ContentType] = None,
                            limit: int = 20) -> List[str]:
        popular = self.popularity_ranker.filter_by_type(
            list(self.shared_rankings().popular), self._snapshot, content_type
        )
        return popular[:_validate_limit(limit)]

    def get_content(self, content_id: str) -> ContentRecord:
        """A record from the current snapshot.

        Raises:
            ContentNotFoundError: If the id is not in the snapshot.
        """
        validate_content_id(content_id)
        record = self._snapshot.get(content_id)
        if record is None:
            raise ContentNotFoundError(details={"content_id": content_id})
        return record

    def get_content_by_category(self, category: str, limit: int = 20,
                                sort: ContentSortOption = ContentSortOption.TRENDING) -> List[str]:
        """Visible content ids in a category, in the requested order.

        Ties keep the snapshot order (engagement, then id).
        """
        records = ContentSortOption(sort).sort(self._snapshot.by_category(category))
        return [r.id for r in records][:_validate_limit(limit)]

    def get_user_preferences(self, user_id: str) -> Optional[UserPreferences]:
        validate_user_id(user_id)
        return self.preference_model.get(user_id)

    def mark_recommendation_viewed(self, user_id: str, content_id: str) -> bool:
        validate_user_id(user_id)
        validate_content_id(content_id)
        return self.store.mark_viewed(user_id, content_id)

    def mark_recommendation_interacted(self, user_id: str, content_id: str) -> bool:
        validate_user_id(user_id)
        validate_content_id(content_id)
        return self.store.mark_interacted(user_id, content_id)

    def reset_user(self, user_id: str) -> None:
        """Drop a user's preferences and recommendations. The log is kept."""
        validate_user_id(user_id)
        with self._user_lock(user_id):
            self.preference_model.reset(user_id)
            self.store.clear(user_id)

    def get_category_stats(self) -> Dict[str, CategoryStats]:
        return self.category_stats.calculate_category_stats(self._snapshot, now=self.clock())

    def get_popular_categories(self) -> List[PopularCategory]:
        return self.category_stats.calculate_popular_categories(self._snapshot, now=self.clock())

    def get_category_activity(self) -> List[CategoryActivity]:
        return self.category_stats.calculate_category_activity(self._snapshot, now=self.clock())
