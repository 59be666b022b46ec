"""Data models supporting the word search engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(eq=False)
class Cell:
    """Represents a grid cell with selection metadata."""

    row: int
    col: int
    letter: str = ""
    is_selected: bool = False
    is_found: bool = False

    def is_empty(self) -> bool:
        return not self.letter

    def is_adjacent(self, other: "Cell") -> bool:
        row_delta = abs(self.row - other.row)
        col_delta = abs(self.col - other.col)
        return row_delta <= 1 and col_delta <= 1 and (row_delta + col_delta) > 0

    @property
    def position(self) -> Tuple[int, int]:
        return self.row, self.col


@dataclass
class Placement:
    """A word committed to the grid along one direction."""

    word: str
    start_row: int
    start_col: int
    direction: Tuple[int, int]

    @property
    def cells(self) -> List[Tuple[int, int]]:
        dr, dc = self.direction
        return [(self.start_row + i * dr, self.start_col + i * dc) for i in range(len(self.word))]


@dataclass
class TargetWord:
    """A word the player has to find, with its clue."""

    text: str
    clue: str = ""
    is_found: bool = False
    positions: List[Tuple[int, int]] = field(default_factory=list)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of resolving a finished selection."""

    matched: bool
    word: Optional[str] = None
    score: int = 0
    combo: int = 0
    cells: Tuple[Tuple[int, int], ...] = ()


@dataclass(frozen=True)
class Hint:
    word: str
    first_letter: str
    length: int


@dataclass(frozen=True)
class GameStats:
    """Immutable snapshot of a finished session."""

    victory: bool
    words_found: int
    total_words: int
    time_used_ms: int
    time_limit_ms: int
    score: int
    base_score: int
    perfect_bonus: int
    time_bonus: int
    max_combo: int
    found_words: Tuple[str, ...] = ()
    missed_words: Tuple[TargetWord, ...] = ()
