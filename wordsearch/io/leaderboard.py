"""Leaderboard collaborator: personal-best score records."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from ..data.store import KeyValueStore
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

SCORES_KEY = "scores"
GUEST_ID = "guest"
GUEST_PREFIX = "guest-"


@dataclass
class ScoreEntry:
    user_id: str
    score: int
    difficulty: str
    created_at: str = ""


class Leaderboard(Protocol):
    def best_score(self, user_id: str, difficulty: str) -> Optional[int]:
        ...

    def record(self, entry: ScoreEntry) -> None:
        ...


def is_guest(user_id: Optional[str]) -> bool:
    if not user_id:
        return True
    lowered = user_id.lower()
    return lowered == GUEST_ID or lowered.startswith(GUEST_PREFIX)


class StoreLeaderboard:
    """Keeps one best entry per (user, difficulty) inside a key-value store."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def _entries(self) -> Dict[str, dict]:
        entries = self.store.get(SCORES_KEY, {})
        return entries if isinstance(entries, dict) else {}

    @staticmethod
    def _key(user_id: str, difficulty: str) -> str:
        return f"{user_id}:{difficulty}"

    def best_score(self, user_id: str, difficulty: str) -> Optional[int]:
        entry = self._entries().get(self._key(user_id, difficulty))
        return int(entry["score"]) if entry else None

    def record(self, entry: ScoreEntry) -> None:
        entries = self._entries()
        if not entry.created_at:
            entry.created_at = datetime.now(timezone.utc).isoformat()
        entries[self._key(entry.user_id, entry.difficulty)] = asdict(entry)
        self.store.set(SCORES_KEY, entries)
        LOGGER.info(
            "Recorded best score %d for %s (%s)", entry.score, entry.user_id, entry.difficulty
        )

    def top(self, difficulty: Optional[str] = None, limit: int = 10) -> List[ScoreEntry]:
        rows = [
            ScoreEntry(**value)
            for value in self._entries().values()
            if difficulty is None or value.get("difficulty") == difficulty
        ]
        rows.sort(key=lambda row: row.score, reverse=True)
        return rows[:limit]


def submit_if_best(
    leaderboard: Leaderboard, user_id: Optional[str], score: int, difficulty: str
) -> bool:
    """Record ``score`` when it is a personal best for a signed-in user."""

    if user_id is None or is_guest(user_id) or score <= 0:
        return False
    previous = leaderboard.best_score(user_id, difficulty)
    if previous is not None and previous >= score:
        LOGGER.debug("Score %d does not beat best %d for %s", score, previous, user_id)
        return False
    leaderboard.record(ScoreEntry(user_id=user_id, score=score, difficulty=difficulty))
    return True
