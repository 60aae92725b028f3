"""Global popularity ranking, independent of any user."""

import logging
from typing import List, Optional

from feedrank.models.content import ContentType
from feedrank.services.content_store import ContentSnapshot

logger = logging.getLogger(__name__)


class PopularityRanker:
    """Ranks visible content by engagement above a threshold."""

    DEFAULT_THRESHOLD = 10.0

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = threshold

    def calculate_popular(self, snapshot: ContentSnapshot,
                          threshold: Optional[float] = None) -> List[str]:
        """Ids of visible content with engagement >= threshold.

        Sorted by engagement descending, ties by content id ascending.
        """
        threshold = self.threshold if threshold is None else threshold
        popular = [
            record.id for record in snapshot.visible()
            if record.engagement_score >= threshold
        ]
        logger.debug(f"Popular content computed: {len(popular)} items >= {threshold}")
        return popular

    @staticmethod
    def filter_by_type(content_ids: List[str], snapshot: ContentSnapshot,
                       content_type: Optional[ContentType]) -> List[str]:
        if content_type is None:
            return list(content_ids)
        return [cid for cid in content_ids if snapshot.content_type_of(cid) == content_type]
