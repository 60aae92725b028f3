"""User-to-user similarity over interacted content, for collaborative recommendations."""

from typing import Dict, Iterable, List, Set, Tuple

from feedrank.models.interaction import Interaction
from feedrank.utils.logger import get_logger

logger = get_logger(__name__)


class SimilarityEngine:
    """Jaccard similarity between users' interacted-content-id sets."""

    DEFAULT_THRESHOLD = 0.1

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = threshold

    @staticmethod
    def jaccard(a: Set[str], b: Set[str]) -> float:
        union = a | b
        if not union:
            return 0.0
        return len(a & b) / len(union)

    @staticmethod
    def content_sets(interactions: Iterable[Interaction]) -> Dict[str, Set[str]]:
        sets: Dict[str, Set[str]] = {}
        for interaction in interactions:
            sets.setdefault(interaction.user_id, set()).add(interaction.content_id)
        return sets

    def similarities(self, user_id: str, interactions: Iterable[Interaction]) -> List[Tuple[str, float]]:
        """(user_id, similarity) for every other user above the threshold.

        Sorted by similarity descending, ties by user id.
        """
        sets = self.content_sets(interactions)
        target = sets.pop(user_id, set())

        scored = []
        for other_id, other_set in sets.items():
            similarity = self.jaccard(target, other_set)
            if similarity > self.threshold:
                scored.append((other_id, similarity))

        scored.sort(key=lambda pair: (-pair[1], pair[0]))
        return scored

    def find_similar_users(self, user_id: str, interactions: Iterable[Interaction]) -> List[str]:
        similar = [other_id for other_id, _ in self.similarities(user_id, interactions)]
        logger.debug(f"Found {len(similar)} similar users for {user_id}")
        return similar
