"""
Append-only log of user interactions.
All derived state (preferences, recommendations) is recomputable from it.
"""

import threading
from typing import Dict, List, Optional, Set, Tuple

from feedrank.models.interaction import Interaction


class InteractionLog:
    """Thread-safe append-only interaction log with per-user indexes."""

    def __init__(self, interactions: Optional[List[Interaction]] = None):
        self._entries: List[Interaction] = []
        self._by_user: Dict[str, List[Interaction]] = {}
        self._content_by_user: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

        for interaction in interactions or []:
            self.append(interaction)

    def append(self, interaction: Interaction) -> Interaction:
        with self._lock:
            self._entries.append(interaction)
            self._by_user.setdefault(interaction.user_id, []).append(interaction)
            self._content_by_user.setdefault(interaction.user_id, set()).add(interaction.content_id)
        return interaction

    def snapshot(self) -> Tuple[Interaction, ...]:
        """Immutable view of the log as of now."""
        with self._lock:
            return tuple(self._entries)

    def for_user(self, user_id: str) -> Tuple[Interaction, ...]:
        with self._lock:
            return tuple(self._by_user.get(user_id, ()))

    def user_ids(self) -> List[str]:
        """Distinct users with at least one interaction, in first-seen order."""
        with self._lock:
            return list(self._by_user)

    def content_ids_for(self, user_id: str) -> Set[str]:
        with self._lock:
            return set(self._content_by_user.get(user_id, ()))

    def has_interacted(self, user_id: str, content_id: str) -> bool:
        with self._lock:
            return content_id in self._content_by_user.get(user_id, ())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
