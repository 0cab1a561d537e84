"""Session-scoped, append-only log of generated passwords."""

import logging
import threading
from collections.abc import Iterable
from datetime import datetime, timezone

from kpwgen.models import GenerationResult, HistoryEntry

logger = logging.getLogger(__name__)


class HistoryStore:
    """Most recent batch first; a batch keeps its generation order.

    Entries are never edited.  The only mutations are prepending a whole
    batch and clearing everything.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: list[HistoryEntry] = []

    def append(
        self,
        batch: Iterable[GenerationResult],
        timestamp: datetime | None = None,
    ) -> list[HistoryEntry]:
        """Prepend *batch* as one contiguous block sharing one timestamp."""
        stamp = timestamp or datetime.now(timezone.utc)
        entries = [HistoryEntry.from_result(result, stamp) for result in batch]
        if not entries:
            return []
        with self._lock:
            self._entries = entries + self._entries
        return entries

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries = []
        logger.info("History cleared (%d entries)", count)

    def all(self) -> list[HistoryEntry]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __bool__(self) -> bool:
        with self._lock:
            return bool(self._entries)
