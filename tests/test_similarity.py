import pytest

from feedrank.models.content import ContentType
from feedrank.models.interaction import Interaction, InteractionType
from feedrank.services.similarity import SimilarityEngine

from tests.conftest import NOW


def _log(pairs):
    return [
        Interaction.create(user_id, content_id, ContentType.POST, InteractionType.VIEW, NOW)
        for user_id, content_id in pairs
    ]


def test_jaccard():
    assert SimilarityEngine.jaccard({"a", "b"}, {"b", "c", "d"}) == pytest.approx(0.25)
    assert SimilarityEngine.jaccard(set(), set()) == 0.0
    assert SimilarityEngine.jaccard({"a"}, {"a"}) == 1.0


def test_one_shared_item_of_four_makes_users_mutually_similar():
    interactions = _log([
        ("u1", "p1"), ("u1", "p2"),
        ("u2", "p2"), ("u2", "p3"), ("u2", "p4"),
    ])
    engine = SimilarityEngine(threshold=0.1)

    assert engine.similarities("u1", interactions) == [("u2", pytest.approx(0.25))]
    assert engine.find_similar_users("u1", interactions) == ["u2"]
    assert engine.find_similar_users("u2", interactions) == ["u1"]


def test_similarity_at_threshold_is_excluded():
    # 1 shared of 10 distinct ids: exactly 0.1
    pairs = [("u1", "shared"), ("u2", "shared")]
    pairs += [("u1", f"a{i}") for i in range(4)]
    pairs += [("u2", f"b{i}") for i in range(5)]

    assert SimilarityEngine(threshold=0.1).find_similar_users("u1", _log(pairs)) == []


def test_repeated_interactions_count_once():
    interactions = _log([("u1", "p1"), ("u1", "p1"), ("u2", "p1")])

    assert SimilarityEngine().similarities("u1", interactions) == [("u2", 1.0)]


def test_results_sorted_by_similarity_then_user_id():
    interactions = _log([
        ("me", "p1"), ("me", "p2"),
        ("zed", "p1"), ("zed", "p2"),
        ("amy", "p1"), ("amy", "p2"),
        ("bob", "p1"), ("bob", "p9"),
    ])

    assert SimilarityEngine().find_similar_users("me", interactions) == ["amy", "zed", "bob"]


def test_unknown_user_has_no_similar_users():
    interactions = _log([("u1", "p1"), ("u2", "p1")])

    assert SimilarityEngine().find_similar_users("ghost", interactions) == []
