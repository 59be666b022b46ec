"""Recently used words, so consecutive games do not repeat themselves."""

from __future__ import annotations

import time
from typing import Callable, List, Optional

from .store import KeyValueStore
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

HISTORY_KEY = "word-history"
MAX_HISTORY_SIZE = 100
RECENT_WINDOW_SECONDS = 7 * 24 * 60 * 60


class WordHistory:
    """Rolling log of ``{word, theme, timestamp}`` entries kept in a store."""

    def __init__(
        self,
        store: KeyValueStore,
        max_size: int = MAX_HISTORY_SIZE,
        window_seconds: int = RECENT_WINDOW_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.store = store
        self.max_size = max_size
        self.window_seconds = window_seconds
        self.clock = clock or time.time

    def _entries(self) -> List[dict]:
        entries = self.store.get(HISTORY_KEY, [])
        if not isinstance(entries, list):
            LOGGER.warning("Discarding malformed word history")
            return []
        return [
            entry
            for entry in entries
            if isinstance(entry, dict)
            and isinstance(entry.get("word"), str)
            and isinstance(entry.get("timestamp"), (int, float))
        ]

    def add_words(self, words: List[str], theme: str) -> None:
        timestamp = self.clock()
        entries = self._entries() + [
            {"word": word.upper(), "theme": theme, "timestamp": timestamp} for word in words
        ]
        entries.sort(key=lambda e: e.get("timestamp", 0), reverse=True)
        self.store.set(HISTORY_KEY, entries[: self.max_size])

    def recent_words(self, theme: str, limit: int = 50) -> List[str]:
        cutoff = self.clock() - self.window_seconds
        return [
            entry["word"]
            for entry in self._entries()
            if entry.get("theme") == theme and entry.get("timestamp", 0) > cutoff
        ][:limit]

    def clear(self) -> None:
        self.store.delete(HISTORY_KEY)
