"""Preference model service: updates user taste profiles from interaction signals."""

import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from feedrank.models.content import ContentType
from feedrank.models.interaction import Interaction
from feedrank.models.user import MIN_CONTENT_TYPE_WEIGHT, UserPreferences
from feedrank.services.content_store import ContentSnapshot
from feedrank.utils.logger import get_logger

logger = get_logger(__name__)

CONTENT_TYPE_ADJUSTMENT = 0.1


def _append_unique(values: List[str], value: Optional[str]) -> bool:
    if value and value not in values:
        values.append(value)
        return True
    return False


class PreferenceModel:
    """Owns every user's UserPreferences for the lifetime of the process."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._preferences: Dict[str, UserPreferences] = {}
        self._lock = threading.Lock()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def get(self, user_id: str) -> Optional[UserPreferences]:
        """Copy of a user's preferences, or None if they never interacted."""
        with self._lock:
            preferences = self._preferences.get(user_id)
            return preferences.model_copy(deep=True) if preferences else None

    def get_or_default(self, user_id: str) -> UserPreferences:
        return self.get(user_id) or UserPreferences(user_id=user_id, last_updated=self._clock())

    def update_preferences(self, user_id: str, interaction: Interaction,
                           snapshot: ContentSnapshot) -> UserPreferences:
        """Fold one interaction into the user's profile.

        Positive interactions (upvote, comment) on content present in the
        snapshot add its category, tags and, for reviews, its source. Every
        interaction nudges the content type weight by 0.1 in the direction
        of its sign, never below 0.1.
        """
        with self._lock:
            preferences = self._preferences.get(user_id)
            if preferences is None:
                preferences = UserPreferences(user_id=user_id, last_updated=self._clock())
                self._preferences[user_id] = preferences

            if interaction.interaction_type.is_positive:
                record = snapshot.get(interaction.content_id)
                if record is None:
                    logger.debug(
                        f"Content {interaction.content_id} not in snapshot, "
                        f"skipping preference growth for {user_id}"
                    )
                else:
                    _append_unique(preferences.preferred_categories, record.category)
                    for tag in record.tags:
                        _append_unique(preferences.preferred_tags, tag)
                    if record.content_type == ContentType.REVIEW:
                        _append_unique(preferences.preferred_sources, record.source)

            current = preferences.content_type_weight(interaction.content_type)
            adjustment = CONTENT_TYPE_ADJUSTMENT if interaction.weight > 0 else -CONTENT_TYPE_ADJUSTMENT
            preferences.content_type_preferences[interaction.content_type] = max(
                MIN_CONTENT_TYPE_WEIGHT, round(current + adjustment, 10)
            )
            preferences.last_updated = self._clock()

            return preferences.model_copy(deep=True)

    def rebuild(self, interactions, snapshot: ContentSnapshot) -> None:
        """Recompute every profile from scratch by replaying a log."""
        with self._lock:
            self._preferences.clear()
        for interaction in interactions:
            self.update_preferences(interaction.user_id, interaction, snapshot)

    def reset(self, user_id: str) -> bool:
        """Forget a user's profile. The only way preference sets shrink."""
        with self._lock:
            removed = self._preferences.pop(user_id, None) is not None
        if removed:
            logger.info(f"Preferences reset for user {user_id}")
        return removed

    def user_count(self) -> int:
        with self._lock:
            return len(self._preferences)
