"""Grid representation and word placement."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..core.constants import ALPHABET, DIRECTIONS, Bounds
from ..core.models import Cell, Placement
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 100

Grid = List[List[Cell]]


def create_grid(rows: int, cols: int) -> Grid:
    """Build an empty ``rows`` x ``cols`` matrix of cells."""

    return [[Cell(row=r, col=c) for c in range(cols)] for r in range(rows)]


def grid_bounds(grid: Grid) -> Bounds:
    return Bounds(rows=len(grid), cols=len(grid[0]) if grid else 0)


@dataclass
class PlacementResult:
    """What the placer managed to embed into the grid."""

    placements: List[Placement] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)

    @property
    def placed_words(self) -> Set[str]:
        return {placement.word for placement in self.placements}

    def placement_for(self, word: str) -> Optional[Placement]:
        for placement in self.placements:
            if placement.word == word:
                return placement
        return None


class WordPlacer:
    """Randomized word placement over 8 directions with letter-compatible crossings."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        directions: Sequence[Tuple[int, int]] = DIRECTIONS,
        alphabet: str = ALPHABET,
    ) -> None:
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts
        self.directions = tuple(directions)
        self.alphabet = alphabet

    def place(self, grid: Grid, words: Iterable[str]) -> PlacementResult:
        bounds = grid_bounds(grid)
        result = PlacementResult()

        # Longest first: long words get the emptiest grid.
        for word in sorted(words, key=len, reverse=True):
            placement = self._try_place(grid, bounds, word)
            if placement is None:
                result.dropped.append(word)
                continue
            result.placements.append(placement)

        if result.dropped:
            LOGGER.warning(
                "Placement shortfall: dropped %d/%d words %s",
                len(result.dropped),
                len(result.dropped) + len(result.placements),
                result.dropped,
            )
        self.fill_empty(grid)
        LOGGER.info(
            "Placed %d words on %dx%d grid", len(result.placements), bounds.rows, bounds.cols
        )
        return result

    def _try_place(self, grid: Grid, bounds: Bounds, word: str) -> Optional[Placement]:
        if not word:
            return None
        for _ in range(self.max_attempts):
            direction = self.rng.choice(self.directions)
            start_row = self.rng.randrange(bounds.rows)
            start_col = self.rng.randrange(bounds.cols)
            candidate = Placement(word, start_row, start_col, direction)
            if self._can_place(grid, bounds, candidate):
                for letter, (row, col) in zip(word, candidate.cells):
                    grid[row][col].letter = letter
                return candidate
        LOGGER.debug("Gave up on '%s' after %d attempts", word, self.max_attempts)
        return None

    @staticmethod
    def _can_place(grid: Grid, bounds: Bounds, placement: Placement) -> bool:
        for letter, (row, col) in zip(placement.word, placement.cells):
            if not bounds.contains(row, col):
                return False
            existing = grid[row][col].letter
            if existing and existing != letter:
                return False
        return True

    def fill_empty(self, grid: Grid) -> None:
        for row in grid:
            for cell in row:
                if cell.is_empty():
                    cell.letter = self.rng.choice(self.alphabet)


def place_words(
    grid: Grid,
    words: Iterable[str],
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Set[str]:
    """Place ``words`` into ``grid`` and return the set that made it in."""

    return WordPlacer(rng=rng, max_attempts=max_attempts).place(grid, words).placed_words


def read_placement(grid: Grid, placement: Placement) -> str:
    """Read the letters a placement covers back out of the grid."""

    return "".join(grid[row][col].letter for row, col in placement.cells)


def cell_at(grid: Grid, row: int, col: int) -> Optional[Cell]:
    if not grid_bounds(grid).contains(row, col):
        return None
    return grid[row][col]


def to_jsonable(grid: Grid) -> List[List[Dict[str, object]]]:
    return [
        [
            {
                "letter": cell.letter,
                "row": cell.row,
                "col": cell.col,
                "selected": cell.is_selected,
                "found": cell.is_found,
            }
            for cell in row
        ]
        for row in grid
    ]
