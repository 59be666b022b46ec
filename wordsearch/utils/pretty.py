"""Pretty-print helpers for word search grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Iterable, Optional

from ..core.models import GameStats, TargetWord

if TYPE_CHECKING:
    from ..engine.grid import Grid


def cell_symbol(cell) -> str:
    if cell.is_found:
        return cell.letter.lower()
    if cell.is_selected:
        return f"[{cell.letter}]"
    return cell.letter or "."


def format_grid(grid: Grid) -> str:
    width = len(grid[0]) if grid else 0
    header_cells = [f"{c:>3}" for c in range(width)]
    lines = ["    " + "".join(header_cells)]
    lines.append("    " + "-" * (3 * width))
    for r, row in enumerate(grid):
        row_render = "".join(f"{cell_symbol(cell):>3}" for cell in row)
        lines.append(f"{r:>2} |{row_render}")
    return "\n".join(lines)


def format_word_list(words: Iterable[TargetWord]) -> str:
    lines = []
    for index, word in enumerate(words, start=1):
        marker = "x" if word.is_found else " "
        shown = word.text if word.is_found else "_" * len(word.text)
        lines.append(f"[{marker}] {index:>2}. {shown:<12} {word.clue}")
    return "\n".join(lines)


def format_time(ms: int) -> str:
    seconds = max(0, ms) // 1000
    return f"{seconds // 60}:{seconds % 60:02d}"


def pretty_print_grid(grid: Grid, *, label: str | None = None, stream=None) -> None:
    """Print the letter grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid), file=stream)


def print_game_stats(stats: GameStats, *, stream: Optional[object] = None) -> None:
    """Print the end-of-game summary."""

    stream = stream or sys.stdout
    title = "Victory!" if stats.victory else "Time's up!"
    print(title, file=stream)
    print(f"Words found: {stats.words_found}/{stats.total_words}", file=stream)
    print(f"Time used:   {format_time(stats.time_used_ms)} / {format_time(stats.time_limit_ms)}", file=stream)
    print(f"Max combo:   {stats.max_combo}", file=stream)
    print(f"Base score:  {stats.base_score}", file=stream)
    if stats.perfect_bonus:
        print(f"Perfect:     +{stats.perfect_bonus}", file=stream)
    if stats.time_bonus:
        print(f"Time bonus:  +{stats.time_bonus}", file=stream)
    print(f"Final score: {stats.score}", file=stream)
    if stats.missed_words:
        print("Missed:", file=stream)
        for word in stats.missed_words:
            print(f"  {word.text}: {word.clue}", file=stream)
