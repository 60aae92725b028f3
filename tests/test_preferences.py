import pytest

from feedrank.models.content import ContentType
from feedrank.models.interaction import Interaction, InteractionType
from feedrank.services.preferences import PreferenceModel

from tests.conftest import NOW, fixed_clock


def _interaction(content_id, interaction_type, content_type=ContentType.POST, user_id="u1"):
    return Interaction.create(user_id, content_id, content_type, interaction_type, NOW)


@pytest.fixture
def model():
    return PreferenceModel(clock=fixed_clock)


def test_upvote_adds_category_and_tags(model, snapshot):
    prefs = model.update_preferences("u1", _interaction("p1", InteractionType.UPVOTE), snapshot)

    assert prefs.preferred_categories == ["advice"]
    assert prefs.preferred_tags == ["first-date", "tips"]
    assert prefs.preferred_sources == []
    assert prefs.content_type_weight(ContentType.POST) == pytest.approx(1.1)
    assert prefs.last_updated == NOW


def test_view_adjusts_weight_without_growing_sets(model, snapshot):
    prefs = model.update_preferences("u1", _interaction("p1", InteractionType.VIEW), snapshot)

    assert prefs.preferred_categories == []
    assert prefs.preferred_tags == []
    assert prefs.content_type_weight(ContentType.POST) == pytest.approx(1.1)


def test_sets_stay_duplicate_free_and_insertion_ordered(model, snapshot):
    model.update_preferences("u1", _interaction("p2", InteractionType.UPVOTE), snapshot)
    model.update_preferences("u1", _interaction("p1", InteractionType.COMMENT), snapshot)
    prefs = model.update_preferences("u1", _interaction("p5", InteractionType.UPVOTE), snapshot)

    assert prefs.preferred_categories == ["advice", "rant"]
    assert prefs.preferred_tags == ["tips", "first-date", "ghosting"]


def test_positive_review_interaction_adds_source(model, snapshot):
    prefs = model.update_preferences(
        "u1", _interaction("r1", InteractionType.UPVOTE, ContentType.REVIEW), snapshot
    )

    assert prefs.preferred_sources == ["App A"]
    assert prefs.preferred_tags == ["tips", "safety"]
    assert prefs.preferred_categories == []
    assert prefs.content_type_weight(ContentType.REVIEW) == pytest.approx(1.1)


def test_negative_interactions_lower_weight_with_floor(model, snapshot):
    for _ in range(20):
        prefs = model.update_preferences("u1", _interaction("p1", InteractionType.DOWNVOTE), snapshot)

    assert prefs.content_type_weight(ContentType.POST) == pytest.approx(0.1)


def test_preference_sets_never_shrink(model, snapshot):
    model.update_preferences("u1", _interaction("p1", InteractionType.UPVOTE), snapshot)
    before = model.get("u1")

    for content_id in ("p1", "p2", "p5"):
        model.update_preferences("u1", _interaction(content_id, InteractionType.DOWNVOTE), snapshot)
        model.update_preferences("u1", _interaction(content_id, InteractionType.REPORT), snapshot)
    after = model.get("u1")

    assert set(before.preferred_categories) <= set(after.preferred_categories)
    assert set(before.preferred_tags) <= set(after.preferred_tags)


def test_missing_content_skips_growth_but_adjusts_weight(model, snapshot):
    prefs = model.update_preferences("u1", _interaction("deleted-post", InteractionType.UPVOTE), snapshot)

    assert prefs.preferred_categories == []
    assert prefs.content_type_weight(ContentType.POST) == pytest.approx(1.1)


def test_get_returns_a_copy(model, snapshot):
    model.update_preferences("u1", _interaction("p1", InteractionType.UPVOTE), snapshot)
    copy = model.get("u1")
    copy.preferred_tags.append("mutated")

    assert "mutated" not in model.get("u1").preferred_tags


def test_reset_is_the_only_way_to_shrink(model, snapshot):
    model.update_preferences("u1", _interaction("p1", InteractionType.UPVOTE), snapshot)

    assert model.reset("u1") is True
    assert model.get("u1") is None
    assert model.reset("u1") is False
    assert model.user_count() == 0


def test_rebuild_matches_incremental_updates(model, snapshot):
    interactions = [
        _interaction("p1", InteractionType.UPVOTE),
        _interaction("r1", InteractionType.COMMENT, ContentType.REVIEW),
        _interaction("p5", InteractionType.DOWNVOTE, user_id="u2"),
    ]
    for interaction in interactions:
        model.update_preferences(interaction.user_id, interaction, snapshot)
    incremental = {uid: model.get(uid) for uid in ("u1", "u2")}

    rebuilt_model = PreferenceModel(clock=fixed_clock)
    rebuilt_model.rebuild(interactions, snapshot)

    for uid, prefs in incremental.items():
        assert rebuilt_model.get(uid) == prefs
