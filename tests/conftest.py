"""Shared fixtures: a small dating-feed corpus and an engine pinned to a fixed clock."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

import pytest

from feedrank.config import Settings
from feedrank.models.content import ContentRecord, ContentType
from feedrank.services.content_store import ContentSnapshot, StaticContentProvider
from feedrank.services.recommendations.engine import ContentRecommendationEngine

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return NOW


def make_record(
    content_id: str,
    content_type: ContentType = ContentType.POST,
    category: Optional[str] = "advice",
    tags: Sequence[str] = (),
    engagement: float = 0.0,
    hours_ago: float = 1.0,
    visible: bool = True,
    source: Optional[str] = None,
    author_id: Optional[str] = None,
    upvotes: int = 0,
    downvotes: int = 0,
    comment_count: int = 0,
) -> ContentRecord:
    return ContentRecord(
        id=content_id,
        content_type=content_type,
        category=category,
        tags=list(tags),
        engagement_score=engagement,
        created_at=NOW - timedelta(hours=hours_ago),
        visible=visible,
        source=source,
        author_id=author_id,
        upvotes=upvotes,
        downvotes=downvotes,
        comment_count=comment_count,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def corpus():
    return [
        make_record("p1", category="advice", tags=["first-date", "tips"], engagement=50, hours_ago=2),
        make_record("p2", category="advice", tags=["tips"], engagement=30, hours_ago=3),
        make_record("p3", category="advice", tags=["first-date"], engagement=20, hours_ago=5),
        make_record("p4", category="experience", tags=["ghosting", "tips"], engagement=40, hours_ago=30),
        make_record("p5", category="rant", tags=["ghosting"], engagement=15, hours_ago=1),
        make_record("p6", category="advice", engagement=5, hours_ago=1, visible=False),
        make_record("r1", content_type=ContentType.REVIEW, category=None, tags=["tips", "safety"],
                    engagement=25, hours_ago=4, source="App A"),
        make_record("r2", content_type=ContentType.REVIEW, category=None, tags=["tips"],
                    engagement=12, hours_ago=6, source="App B"),
    ]


@pytest.fixture
def snapshot(corpus) -> ContentSnapshot:
    return ContentSnapshot(corpus, version=1, taken_at=NOW)


@pytest.fixture
def settings() -> Settings:
    settings = Settings()
    settings.max_recommendations = 50
    settings.trending_window_hours = 24
    settings.popular_content_threshold = 10
    settings.trending_min_tag_count = 3
    settings.similarity_threshold = 0.1
    settings.admin_api_key = "test-admin-key"
    return settings


@pytest.fixture
def provider(corpus) -> StaticContentProvider:
    return StaticContentProvider(corpus)


@pytest.fixture
def engine(provider, settings) -> ContentRecommendationEngine:
    engine = ContentRecommendationEngine(content_provider=provider, settings=settings, clock=fixed_clock)
    asyncio.run(engine.refresh_corpus())
    return engine
