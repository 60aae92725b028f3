import pytest

from feedrank.models.content import ContentType
from feedrank.services.content_store import ContentSnapshot
from feedrank.services.trending import CategoryStatsCalculator
from feedrank.services.trending.category_stats import growth_percentage

from tests.conftest import NOW, make_record


@pytest.fixture
def advice_snapshot():
    records = [
        make_record("a1", category="advice", hours_ago=2, upvotes=10, comment_count=5, author_id="alice"),
        make_record("a2", category="advice", hours_ago=6, upvotes=8, comment_count=3, downvotes=2,
                    author_id="bob"),
        make_record("a3", category="advice", hours_ago=30, author_id="carol"),
        make_record("e1", category="experience", hours_ago=40, upvotes=1),
        make_record("rv", content_type=ContentType.REVIEW, category="advice", hours_ago=1, upvotes=99),
    ]
    return ContentSnapshot(records, version=1)


@pytest.fixture
def calculator():
    return CategoryStatsCalculator()


def test_post_count_and_recent_posts(calculator, advice_snapshot):
    stats = calculator.calculate_category_stats(advice_snapshot, now=NOW)

    advice = stats["advice"]
    assert advice.post_count == 3
    assert advice.recent_posts == 2
    assert advice.today_posts == 2
    assert advice.active_users == 2
    assert advice.is_active


def test_total_engagement_sums_upvotes_and_comments(calculator, advice_snapshot):
    stats = calculator.calculate_category_stats(advice_snapshot, now=NOW)

    assert stats["advice"].total_engagement == 26


def test_every_known_category_is_reported(calculator, advice_snapshot):
    stats = calculator.calculate_category_stats(advice_snapshot, now=NOW)

    assert list(stats)[:7] == ["advice", "experience", "question", "strategy", "success", "rant", "general"]
    assert stats["question"].post_count == 0
    assert stats["question"].average_rating == 0.0
    assert not stats["experience"].is_active


@pytest.mark.parametrize(
    "today,yesterday,expected",
    [
        (2, 1, 100),
        (3, 0, 100),
        (0, 0, 0),
        (1, 2, -50),
        (4, 3, 33),
    ],
)
def test_growth_percentage(today, yesterday, expected):
    assert growth_percentage(today, yesterday) == expected


def test_popular_categories_use_day_over_day_growth(calculator, advice_snapshot):
    popular = calculator.calculate_popular_categories(advice_snapshot, now=NOW)

    assert [p.category for p in popular] == ["advice"]
    assert popular[0].recent_posts == 2
    assert popular[0].growth_percentage == 100
    assert popular[0].trending_score == pytest.approx(12.0)


def test_popular_categories_capped_at_five(calculator):
    categories = ["advice", "experience", "question", "strategy", "success", "rant"]
    records = [
        make_record(f"{category}-{i}", category=category, hours_ago=1)
        for n, category in enumerate(categories)
        for i in range(n + 1)
    ]
    popular = calculator.calculate_popular_categories(ContentSnapshot(records, version=1), now=NOW)

    assert len(popular) == 5
    assert popular[0].category == "rant"
    assert "advice" not in [p.category for p in popular]


def test_category_activity_busiest_first(calculator, advice_snapshot):
    records = list(advice_snapshot.records) + [
        make_record("r1", category="rant", hours_ago=1, upvotes=50),
    ]
    activity = calculator.calculate_category_activity(ContentSnapshot(records, version=2), now=NOW)

    assert [a.category for a in activity] == ["rant", "advice"]
    advice = activity[1]
    assert advice.new_posts == 2
    assert advice.total_engagement == 28
    assert advice.last_activity == make_record("x", hours_ago=2).created_at
