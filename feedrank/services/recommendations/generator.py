"""Recommendation generation: five scoring strategies merged into one capped list per user."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from feedrank.models.content import ContentRecord, ContentType
from feedrank.models.interaction import Interaction, InteractionType
from feedrank.models.recommendation import ContentRecommendation, RecommendationReason, TrendingTopic
from feedrank.models.user import UserPreferences
from feedrank.services.content_store import ContentSnapshot
from feedrank.services.similarity import SimilarityEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationContext:
    """Everything one user's regeneration reads, captured once.

    All strategies score against the same context so a concurrent interaction
    or corpus refresh cannot leave the list half old, half new.
    """

    user_id: str
    preferences: UserPreferences
    snapshot: ContentSnapshot
    interactions: Tuple[Interaction, ...]
    trending: Tuple[TrendingTopic, ...] = ()
    popular: Tuple[str, ...] = ()
    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def interacted(self) -> FrozenSet[str]:
        return frozenset(i.content_id for i in self.interactions if i.user_id == self.user_id)


class RecommendationGenerator:
    """Combines category, tag, popularity, trending and similar-user candidates."""

    MAX_RECOMMENDATIONS = 50

    # Candidate pool sizes
    CATEGORY_ITEMS = 5
    TAG_ITEMS_PER_TYPE = 3
    POPULAR_ITEMS = 10
    TRENDING_TOPICS = 5
    TRENDING_ITEMS_PER_TOPIC = 2
    SIMILAR_USERS = 3
    SIMILAR_USER_UPVOTES = 5

    # Score multipliers
    CATEGORY_BONUS = 2.0
    TAG_MATCH_BONUS = 0.5
    SOURCE_BONUS = 1.5
    POPULARITY_BOOST = 1.2
    TRENDING_FACTOR = 0.8
    SIMILAR_USER_FACTOR = 0.6

    def __init__(self, similarity: Optional[SimilarityEngine] = None,
                 max_recommendations: int = MAX_RECOMMENDATIONS):
        self.similarity = similarity or SimilarityEngine()
        self.max_recommendations = max_recommendations

    def generate_recommendations(self, context: GenerationContext) -> List[ContentRecommendation]:
        """Build the user's deduplicated, score-sorted, capped recommendation list."""
        interacted = context.interacted

        candidates: List[ContentRecommendation] = []
        candidates += self._category_candidates(context, interacted)
        candidates += self._tag_candidates(context, interacted)
        candidates += self._popular_candidates(context, interacted)
        candidates += self._trending_candidates(context, interacted)
        candidates += self._similar_user_candidates(context, interacted)

        merged = self.merge(candidates, self.max_recommendations)
        logger.debug(
            f"Generated {len(merged)} recommendations for {context.user_id} "
            f"from {len(candidates)} candidates"
        )
        return merged

    @staticmethod
    def merge(candidates: Sequence[ContentRecommendation], limit: int) -> List[ContentRecommendation]:
        """Keep the best-scoring candidate per content id, sort by score, cap.

        Equal scores keep the first candidate seen, and the sort is stable.
        """
        best: Dict[str, ContentRecommendation] = {}
        for candidate in candidates:
            current = best.get(candidate.content_id)
            if current is None or candidate.score > current.score:
                best[candidate.content_id] = candidate

        ranked = sorted(best.values(), key=lambda r: -r.score)
        return ranked[:limit]

    def _recommend(self, context: GenerationContext, content_id: str, content_type: ContentType,
                   score: float, reason: RecommendationReason) -> ContentRecommendation:
        return ContentRecommendation(
            user_id=context.user_id,
            content_id=content_id,
            content_type=content_type,
            score=score,
            reason=reason,
            generated_at=context.now,
        )

    # ── Strategies ────────────────────────────────────────────────────

    def _category_candidates(self, context: GenerationContext,
                             interacted: FrozenSet[str]) -> List[ContentRecommendation]:
        preferences = context.preferences
        results = []
        for category in preferences.preferred_categories:
            records = [
                r for r in context.snapshot.by_category(category)
                if r.id not in interacted
            ][:self.CATEGORY_ITEMS]
            for record in records:
                results.append(self._recommend(
                    context, record.id, record.content_type,
                    self.category_score(record, preferences),
                    RecommendationReason.CATEGORY_PREFERENCE,
                ))
        return results

    def _tag_candidates(self, context: GenerationContext,
                        interacted: FrozenSet[str]) -> List[ContentRecommendation]:
        preferences = context.preferences
        results = []
        for tag in preferences.preferred_tags:
            for content_type in (ContentType.POST, ContentType.REVIEW):
                records = [
                    r for r in context.snapshot.with_tag(tag, content_type=content_type)
                    if r.id not in interacted
                ][:self.TAG_ITEMS_PER_TYPE]
                for record in records:
                    results.append(self._recommend(
                        context, record.id, record.content_type,
                        self.tag_score(record, preferences),
                        RecommendationReason.TAG_PREFERENCE,
                    ))
        return results

    def _popular_candidates(self, context: GenerationContext,
                            interacted: FrozenSet[str]) -> List[ContentRecommendation]:
        results = []
        for content_id in context.popular[:self.POPULAR_ITEMS]:
            if content_id in interacted:
                continue
            record = context.snapshot.get(content_id)
            if record is None:
                logger.debug(f"Popular content {content_id} no longer in snapshot")
                continue
            results.append(self._recommend(
                context, record.id, record.content_type,
                record.engagement_score * self.POPULARITY_BOOST,
                RecommendationReason.POPULAR_CONTENT,
            ))
        return results

    def _trending_candidates(self, context: GenerationContext,
                             interacted: FrozenSet[str]) -> List[ContentRecommendation]:
        results = []
        for topic in context.trending[:self.TRENDING_TOPICS]:
            if topic.category is not None:
                records = [
                    r for r in context.snapshot.by_category(topic.category)
                    if r.id not in interacted
                ][:self.TRENDING_ITEMS_PER_TOPIC]
            else:
                # One post and one review per tag topic
                records = []
                for content_type in (ContentType.POST, ContentType.REVIEW):
                    matches = [
                        r for r in context.snapshot.with_tag(topic.tag, content_type=content_type)
                        if r.id not in interacted
                    ]
                    records += matches[:1]

            score = topic.trending_score * self.TRENDING_FACTOR
            for record in records:
                results.append(self._recommend(
                    context, record.id, record.content_type, score,
                    RecommendationReason.TRENDING_TOPIC,
                ))
        return results

    def _similar_user_candidates(self, context: GenerationContext,
                                 interacted: FrozenSet[str]) -> List[ContentRecommendation]:
        similar_users = self.similarity.find_similar_users(context.user_id, context.interactions)
        results = []
        for similar_user_id in similar_users[:self.SIMILAR_USERS]:
            for interaction in self._recent_upvotes(similar_user_id, context.interactions):
                if interaction.content_id in interacted:
                    continue
                record = context.snapshot.get(interaction.content_id)
                if record is None or not record.visible:
                    logger.debug(f"Skipping unavailable content {interaction.content_id}")
                    continue
                results.append(self._recommend(
                    context, interaction.content_id, interaction.content_type,
                    interaction.weight * self.SIMILAR_USER_FACTOR,
                    RecommendationReason.SIMILAR_USERS,
                ))
        return results

    def _recent_upvotes(self, user_id: str, interactions: Sequence[Interaction]) -> List[Interaction]:
        """A user's most recent upvotes; later log entries win timestamp ties."""
        upvotes = [
            (position, i) for position, i in enumerate(interactions)
            if i.user_id == user_id and i.interaction_type == InteractionType.UPVOTE
        ]
        upvotes.sort(key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
        return [i for _, i in upvotes[:self.SIMILAR_USER_UPVOTES]]

    # ── Scores ────────────────────────────────────────────────────────

    def category_score(self, record: ContentRecord, preferences: UserPreferences) -> float:
        bonus = self.CATEGORY_BONUS if record.category in preferences.preferred_categories else 1.0
        return record.engagement_score * bonus * preferences.content_type_weight(record.content_type)

    def tag_score(self, record: ContentRecord, preferences: UserPreferences) -> float:
        matches = sum(1 for tag in record.tags if tag in preferences.preferred_tags)
        score = record.engagement_score * (1.0 + matches * self.TAG_MATCH_BONUS)
        if record.content_type == ContentType.REVIEW and record.source in preferences.preferred_sources:
            score *= self.SOURCE_BONUS
        return score * preferences.content_type_weight(record.content_type)
