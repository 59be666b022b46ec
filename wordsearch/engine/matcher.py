"""Match a finished selection against the remaining target words."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ..core.models import MatchResult, TargetWord
from ..utils.logger import get_logger
from .selection import SelectionTracker


LOGGER = get_logger(__name__)

BASE_LETTER_SCORE = 10
COMBO_STEP = 0.5


def combo_factor(combo: int) -> float:
    """Multiplier for a find made while ``combo`` previous finds are chained."""

    return max(1.0, combo * COMBO_STEP + 1)


def compute_word_score(word_length: int, multiplier: float = 1.0, combo: int = 0) -> int:
    return math.floor(word_length * BASE_LETTER_SCORE * multiplier * combo_factor(combo))


def find_target(
    forward: str, target_words: Sequence[TargetWord]
) -> Optional[TargetWord]:
    """Return the unfound target spelled by ``forward``, preferring the forward reading."""

    if not forward:
        return None
    reverse = forward[::-1]
    for candidate in (forward, reverse):
        for target in target_words:
            if not target.is_found and target.text == candidate:
                return target
    return None


def resolve_selection(
    selection: SelectionTracker,
    target_words: Sequence[TargetWord],
    combo: int = 0,
    multiplier: float = 1.0,
) -> MatchResult:
    """Resolve the selection, marking the matched word and its cells as found.

    ``combo`` is the streak of consecutive finds before this selection. The
    returned result carries the streak including this find when it matches.
    """

    target = find_target(selection.current_word(), target_words)
    if target is None:
        selection.clear()
        return MatchResult(matched=False)

    target.is_found = True
    score = compute_word_score(len(target.text), multiplier, combo)
    cells = tuple(cell.position for cell in selection.cells)
    for cell in selection.cells:
        cell.is_found = True
    selection.clear()
    LOGGER.info("Found '%s' for %d points (combo %d)", target.text, score, combo + 1)
    return MatchResult(matched=True, word=target.text, score=score, combo=combo + 1, cells=cells)
