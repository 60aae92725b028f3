"""
Read-only content snapshots and the providers that load them.

The engine never mutates content; each recompute works against an immutable
ContentSnapshot fetched from a ContentProvider.
"""

import asyncio
import json
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from feedrank.models.content import ContentRecord, ContentType
from feedrank.utils.exceptions import CalculationFailedError
from feedrank.utils.logger import get_logger

logger = get_logger(__name__)


class ContentSnapshot:
    """Immutable, indexed view of the content corpus."""

    def __init__(self, records: Iterable[ContentRecord], version: int = 0,
                 taken_at: Optional[datetime] = None):
        self.version = version
        self.taken_at = taken_at or datetime.now(timezone.utc)
        self._by_id: Dict[str, ContentRecord] = {}
        for record in records:
            self._by_id[record.id] = record
        # Engagement descending, id ascending; every filtered view keeps this order
        self._ranked: Tuple[ContentRecord, ...] = tuple(
            sorted(self._by_id.values(), key=lambda r: (-r.engagement_score, r.id))
        )

    @classmethod
    def empty(cls) -> "ContentSnapshot":
        return cls([], version=0)

    def get(self, content_id: str) -> Optional[ContentRecord]:
        return self._by_id.get(content_id)

    def __contains__(self, content_id: str) -> bool:
        return content_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    @property
    def records(self) -> Tuple[ContentRecord, ...]:
        """All records ordered by engagement."""
        return self._ranked

    def visible(self) -> List[ContentRecord]:
        return [r for r in self._ranked if r.visible]

    def by_category(self, category: str, visible_only: bool = True) -> List[ContentRecord]:
        return [
            r for r in self._ranked
            if r.category == category and (r.visible or not visible_only)
        ]

    def with_tag(self, tag: str, content_type: Optional[ContentType] = None,
                 visible_only: bool = True) -> List[ContentRecord]:
        return [
            r for r in self._ranked
            if tag in r.tags
            and (content_type is None or r.content_type == content_type)
            and (r.visible or not visible_only)
        ]

    def content_type_of(self, content_id: str) -> ContentType:
        """Content type for an id; unknown ids are treated as comments."""
        record = self._by_id.get(content_id)
        return record.content_type if record else ContentType.COMMENT


class ContentProvider(ABC):
    """Source of content records. Fetching may hit I/O and can be cancelled."""

    @abstractmethod
    async def fetch_content(self) -> List[ContentRecord]:
        """Load the current corpus."""

    def has_changed(self) -> bool:
        """Whether the corpus changed since the last fetch."""
        return False


class StaticContentProvider(ContentProvider):
    """In-memory provider, used for tests and embedding."""

    def __init__(self, records: Optional[Iterable[ContentRecord]] = None):
        self._records: List[ContentRecord] = list(records or [])
        self._dirty = False

    def set_records(self, records: Iterable[ContentRecord]) -> None:
        self._records = list(records)
        self._dirty = True

    def add_record(self, record: ContentRecord) -> None:
        self._records.append(record)
        self._dirty = True

    def has_changed(self) -> bool:
        return self._dirty

    async def fetch_content(self) -> List[ContentRecord]:
        self._dirty = False
        return list(self._records)


class JsonContentProvider(ContentProvider):
    """File-backed provider reading a JSON list of content dictionaries."""

    def __init__(self, path: str):
        self._path = Path(path)
        self._last_mtime: Optional[float] = None

    def _current_mtime(self) -> Optional[float]:
        try:
            return os.path.getmtime(self._path)
        except OSError:
            return None

    def has_changed(self) -> bool:
        mtime = self._current_mtime()
        return mtime is not None and mtime != self._last_mtime

    def _load(self) -> List[ContentRecord]:
        if not self._path.exists():
            logger.warning(f"Content seed not found at {self._path}, using empty corpus")
            return []

        with open(self._path) as f:
            items = json.load(f)

        now = datetime.now(timezone.utc)
        records = []
        for item in items:
            try:
                records.append(ContentRecord.from_dict(item, now=now))
            except (ValueError, TypeError, KeyError) as e:
                logger.warning(f"Skipping malformed content item {item.get('id', '?')}: {e}")
        return records

    async def fetch_content(self) -> List[ContentRecord]:
        mtime = self._current_mtime()
        records = await asyncio.to_thread(self._load)
        self._last_mtime = mtime
        logger.info(f"Loaded {len(records)} content items from {self._path}")
        return records


async def load_snapshot(provider: ContentProvider, version: int) -> ContentSnapshot:
    """Fetch content from a provider into a new snapshot.

    Raises:
        CalculationFailedError: If the provider fails to load content.
    """
    try:
        records = await provider.fetch_content()
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.error(f"Content fetch failed: {e}")
        raise CalculationFailedError(
            message="Failed to load content snapshot",
            details={"error": str(e)},
        ) from e

    return ContentSnapshot(records, version=version)
