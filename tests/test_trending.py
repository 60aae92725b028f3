from datetime import timedelta

import pytest

from feedrank.models.content import ContentType
from feedrank.services.content_store import ContentSnapshot
from feedrank.services.trending import TrendingCalculator

from tests.conftest import NOW, make_record


@pytest.fixture
def calculator():
    return TrendingCalculator(window=timedelta(hours=24), min_tag_count=3)


def test_trending_score_formula():
    assert TrendingCalculator.trending_score(4, 100.0) == pytest.approx(71.2)


def test_empty_window_returns_no_topics(calculator):
    snapshot = ContentSnapshot([make_record("old", engagement=100, hours_ago=48)], version=1)

    assert calculator.calculate_trending(snapshot, now=NOW) == []


def test_categories_and_frequent_tags_are_ranked(calculator, snapshot):
    topics = calculator.calculate_trending(snapshot, now=NOW)

    assert [t.label for t in topics] == ["tips", "Advice", "Rant"]

    tips, advice, rant = topics
    assert tips.tag == "tips" and tips.category is None
    assert tips.content_count == 4
    assert tips.engagement_score == pytest.approx(117.0)
    assert tips.trending_score == pytest.approx(83.1)

    # Invisible content still counts toward trending
    assert advice.category == "advice"
    assert advice.content_count == 4
    assert advice.trending_score == pytest.approx(74.7)

    assert rant.trending_score == pytest.approx(10.8)
    assert all(t.time_window_seconds == 24 * 3600 for t in topics)


def test_tags_below_minimum_count_are_filtered(calculator):
    records = [
        make_record("a", category=None, tags=["rare"], engagement=500),
        make_record("b", category=None, tags=["rare"], engagement=500),
        make_record("c", category=None, tags=["common"], engagement=1),
        make_record("d", category=None, tags=["common"], engagement=1),
        make_record("e", category=None, tags=["common"], engagement=1),
    ]
    topics = calculator.calculate_trending(ContentSnapshot(records, version=1), now=NOW)

    assert [t.label for t in topics] == ["common"]


def test_content_outside_window_is_ignored(calculator):
    records = [
        make_record("new", category="advice", engagement=10, hours_ago=23),
        make_record("old", category="advice", engagement=90, hours_ago=25),
    ]
    topics = calculator.calculate_trending(ContentSnapshot(records, version=1), now=NOW)

    assert len(topics) == 1
    assert topics[0].content_count == 1
    assert topics[0].engagement_score == pytest.approx(10.0)


def test_equal_scores_order_by_label(calculator):
    records = [
        make_record("a", category="rant", engagement=10),
        make_record("b", category="advice", engagement=10),
    ]
    topics = calculator.calculate_trending(ContentSnapshot(records, version=1), now=NOW)

    assert [t.category for t in topics] == ["advice", "rant"]


def test_reviews_without_category_contribute_only_tags(calculator):
    records = [
        make_record(f"r{i}", content_type=ContentType.REVIEW, category=None, tags=["safety"], engagement=5)
        for i in range(3)
    ]
    topics = calculator.calculate_trending(ContentSnapshot(records, version=1), now=NOW)

    assert [(t.tag, t.category) for t in topics] == [("safety", None)]


def test_results_are_cached_per_snapshot_version(calculator, corpus):
    first = ContentSnapshot(corpus, version=1)
    cached = calculator.get_trending(first, now=NOW)

    assert calculator.get_trending(first, now=NOW) is cached
    assert calculator.get_cache_stats()["size"] == 1

    second = ContentSnapshot(corpus[:1], version=2)
    fresh = calculator.get_trending(second, now=NOW)

    assert fresh is not cached
    assert calculator.get_cache_stats()["size"] == 2

    calculator.clear_cache()
    assert calculator.get_cache_stats()["size"] == 0


def test_refresh_recomputes_even_for_same_version(calculator, snapshot):
    cached = calculator.get_trending(snapshot, now=NOW)
    refreshed = calculator.refresh_trending_cache(snapshot, now=NOW)

    assert refreshed is not cached
    assert refreshed == cached
