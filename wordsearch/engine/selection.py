"""In-progress selection of grid cells."""

from __future__ import annotations

from typing import List, Optional

from ..core.models import Cell
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class SelectionTracker:
    """Tracks the player's drag path across the grid.

    Pointer movement produces plenty of transient garbage (re-entering the
    same cell, skipping over a cell), so every operation silently ignores
    input it cannot use instead of raising.
    """

    def __init__(self) -> None:
        self.cells: List[Cell] = []

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def last(self) -> Optional[Cell]:
        return self.cells[-1] if self.cells else None

    def begin(self, cell: Cell) -> None:
        self.clear()
        cell.is_selected = True
        self.cells.append(cell)

    def extend(self, cell: Cell) -> bool:
        last = self.last
        if last is None:
            return False
        if not last.is_adjacent(cell) or any(c is cell for c in self.cells):
            LOGGER.debug("Ignoring selection of (%s,%s)", cell.row, cell.col)
            return False
        cell.is_selected = True
        self.cells.append(cell)
        return True

    def clear(self) -> None:
        for cell in self.cells:
            cell.is_selected = False
        self.cells = []

    def current_word(self) -> str:
        return "".join(cell.letter for cell in self.cells)
