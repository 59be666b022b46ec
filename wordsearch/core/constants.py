"""Shared constants and enumerations for the word search engine."""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from .exceptions import ConfigurationError


class Difficulty(str, Enum):
    """Word search difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SessionPhase(str, Enum):
    """Lifecycle phases of a game session."""

    NOT_STARTED = "not_started"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


ALPHABET = string.ascii_uppercase

ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))
DIAGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
DIRECTIONS: Tuple[Tuple[int, int], ...] = ORTHOGONAL_STEPS + DIAGONAL_STEPS


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols


@dataclass(frozen=True)
class DifficultyTier:
    """Static configuration bundle for one difficulty level."""

    difficulty: Difficulty
    label: str
    grid_rows: int
    grid_cols: int
    word_count: int
    time_limit_ms: int
    score_multiplier: float

    @property
    def bounds(self) -> Bounds:
        return Bounds(rows=self.grid_rows, cols=self.grid_cols)


DIFFICULTY_TIERS: Dict[Difficulty, DifficultyTier] = {
    Difficulty.EASY: DifficultyTier(
        difficulty=Difficulty.EASY,
        label="Beginner",
        grid_rows=8,
        grid_cols=8,
        word_count=6,
        time_limit_ms=300_000,
        score_multiplier=1.0,
    ),
    Difficulty.MEDIUM: DifficultyTier(
        difficulty=Difficulty.MEDIUM,
        label="Intermediate",
        grid_rows=10,
        grid_cols=10,
        word_count=9,
        time_limit_ms=480_000,
        score_multiplier=1.5,
    ),
    Difficulty.HARD: DifficultyTier(
        difficulty=Difficulty.HARD,
        label="Expert",
        grid_rows=12,
        grid_cols=12,
        word_count=12,
        time_limit_ms=600_000,
        score_multiplier=2.0,
    ),
}


THEMES: Dict[str, str] = {
    "technology": "Technology",
    "health": "Health",
    "education": "Education",
    "science": "Science",
    "business": "Business",
    "environment": "Environment",
}


def resolve_tier(difficulty: Difficulty | str | DifficultyTier) -> DifficultyTier:
    """Look up the tier for ``difficulty`` (enum member or its string value).

    A :class:`DifficultyTier` instance is returned as-is, which lets callers
    run sessions on custom grids or time limits.
    """

    if isinstance(difficulty, DifficultyTier):
        return difficulty
    try:
        key = Difficulty(difficulty.lower() if isinstance(difficulty, str) else difficulty)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown difficulty: {difficulty!r}") from exc
    return DIFFICULTY_TIERS[key]
