"""Per-user recommendation sets with atomic replacement."""

import threading
from typing import Dict, List, Optional, Sequence, Tuple

from feedrank.models.recommendation import ContentRecommendation, RecommendationState


class RecommendationStore:
    """Holds the current recommendation list of every user.

    A user's list is only ever swapped whole, so readers see either the old
    list or the new one.
    """

    def __init__(self):
        self._sets: Dict[str, Tuple[ContentRecommendation, ...]] = {}
        self._lock = threading.Lock()

    def replace(self, user_id: str, recommendations: Sequence[ContentRecommendation]) -> None:
        """Swap in a new list. Viewed/interacted flags carry over by content id."""
        with self._lock:
            previous = {rec.content_id: rec for rec in self._sets.get(user_id, ())}
            new_set = []
            for rec in recommendations:
                old = previous.get(rec.content_id)
                if old is not None and (old.viewed or old.interacted):
                    rec = rec.model_copy(update={"viewed": old.viewed, "interacted": old.interacted})
                new_set.append(rec)
            self._sets[user_id] = tuple(new_set)

    def get(self, user_id: str, limit: Optional[int] = None) -> List[ContentRecommendation]:
        with self._lock:
            current = self._sets.get(user_id, ())
        items = list(current)
        return items[:limit] if limit is not None else items

    def state(self, user_id: str) -> RecommendationState:
        with self._lock:
            return RecommendationState.READY if user_id in self._sets else RecommendationState.EMPTY

    def _update_flags(self, user_id: str, content_id: str, **flags) -> bool:
        with self._lock:
            current = self._sets.get(user_id)
            if not current:
                return False
            updated = []
            found = False
            for rec in current:
                if rec.content_id == content_id:
                    rec = rec.model_copy(update=flags)
                    found = True
                updated.append(rec)
            if found:
                self._sets[user_id] = tuple(updated)
            return found

    def mark_viewed(self, user_id: str, content_id: str) -> bool:
        return self._update_flags(user_id, content_id, viewed=True)

    def mark_interacted(self, user_id: str, content_id: str) -> bool:
        return self._update_flags(user_id, content_id, viewed=True, interacted=True)

    def clear(self, user_id: str) -> None:
        with self._lock:
            self._sets.pop(user_id, None)

    def user_ids(self) -> List[str]:
        with self._lock:
            return list(self._sets)

    def snapshot(self) -> Dict[str, Tuple[ContentRecommendation, ...]]:
        with self._lock:
            return dict(self._sets)
