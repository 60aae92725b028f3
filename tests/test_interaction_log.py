from feedrank.models.content import ContentType
from feedrank.models.interaction import Interaction, InteractionType
from feedrank.services.interaction_log import InteractionLog

from tests.conftest import NOW


def _interaction(user_id, content_id, interaction_type=InteractionType.VIEW):
    return Interaction.create(user_id, content_id, ContentType.POST, interaction_type, NOW)


def test_interaction_carries_fixed_weight():
    assert _interaction("u1", "p1", InteractionType.VIEW).weight == 1.0
    assert _interaction("u1", "p1", InteractionType.UPVOTE).weight == 2.0
    assert _interaction("u1", "p1", InteractionType.COMMENT).weight == 3.0
    assert _interaction("u1", "p1", InteractionType.SHARE).weight == 2.5
    assert _interaction("u1", "p1", InteractionType.SAVE).weight == 2.5
    assert _interaction("u1", "p1", InteractionType.DOWNVOTE).weight < 0


def test_only_upvote_and_comment_are_positive():
    positive = {t for t in InteractionType if t.is_positive}
    assert positive == {InteractionType.UPVOTE, InteractionType.COMMENT}


def test_snapshot_is_not_affected_by_later_appends():
    log = InteractionLog()
    log.append(_interaction("u1", "p1"))
    snapshot = log.snapshot()

    log.append(_interaction("u2", "p2"))

    assert len(snapshot) == 1
    assert len(log) == 2


def test_user_ids_in_first_seen_order():
    log = InteractionLog([
        _interaction("u2", "p1"),
        _interaction("u1", "p1"),
        _interaction("u2", "p3"),
    ])

    assert log.user_ids() == ["u2", "u1"]
    assert [i.content_id for i in log.for_user("u2")] == ["p1", "p3"]


def test_has_interacted_tracks_any_interaction_type():
    log = InteractionLog()
    log.append(_interaction("u1", "p1", InteractionType.REPORT))

    assert log.has_interacted("u1", "p1")
    assert not log.has_interacted("u1", "p2")
    assert not log.has_interacted("u2", "p1")
    assert log.content_ids_for("u1") == {"p1"}
