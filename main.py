"""CLI entrypoint for the terminal word search game."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from wordsearch.core.constants import THEMES, Difficulty, SessionPhase
from wordsearch.data.history import WordHistory
from wordsearch.data.store import InMemoryStore, JsonFileStore, KeyValueStore
from wordsearch.data.theme import GeminiWordGenerator, UserWordListGenerator, WordGenerator
from wordsearch.engine.grid import to_jsonable
from wordsearch.engine.session import (
    GameSession,
    GiveUp,
    RequestHint,
    SelectEnd,
    SelectExtend,
    SelectStart,
    SessionConfig,
    StartGame,
    StateDelta,
    Tick,
    TogglePause,
)
from wordsearch.io.gemini_client import GeminiAPIError
from wordsearch.io.leaderboard import StoreLeaderboard
from wordsearch.utils.logger import configure_logging
from wordsearch.utils.pretty import (
    format_time,
    format_word_list,
    pretty_print_grid,
    print_game_stats,
)

HELP_TEXT = (
    "Commands:\n"
    "  R,C R,C ...     select a path of adjacent cells (row,col)\n"
    "  line R,C R,C    select the straight line between two cells\n"
    "  h               hint (first letter and length of a word)\n"
    "  p               pause / resume\n"
    "  q               give up\n"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play a themed word search in the terminal")
    parser.add_argument(
        "--theme",
        type=str,
        default="technology",
        help=f"Theme to request words for (built-in: {', '.join(THEMES)})",
    )
    parser.add_argument(
        "--difficulty",
        type=str,
        choices=[d.value for d in Difficulty],
        default=Difficulty.MEDIUM.value,
        help="Difficulty tier",
    )
    parser.add_argument(
        "--words",
        nargs="+",
        metavar="WORD",
        help="Explicit words (format: WORD or WORD:Clue)",
    )
    parser.add_argument(
        "--llm",
        action="store_true",
        help="Generate words with Gemini (requires GEMINI_API_KEY)",
    )
    parser.add_argument("--store", type=Path, help="JSON file for word history and best scores")
    parser.add_argument("--user", type=str, default=None, help="Player id (omit to play as guest)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the generated puzzle as JSON and exit",
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Ask Gemini to explain missed words at the end (with --llm)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def parse_cell(token: str) -> Optional[Tuple[int, int]]:
    row, sep, col = token.partition(",")
    if not sep:
        return None
    try:
        return int(row), int(col)
    except ValueError:
        return None


def line_between(start: Tuple[int, int], end: Tuple[int, int]) -> List[Tuple[int, int]]:
    """Cells of the straight (orthogonal or diagonal) line from start to end."""

    dr = end[0] - start[0]
    dc = end[1] - start[1]
    steps = max(abs(dr), abs(dc))
    if steps == 0:
        return [start]
    if dr and dc and abs(dr) != abs(dc):
        return []
    step_r = (dr > 0) - (dr < 0)
    step_c = (dc > 0) - (dc < 0)
    return [(start[0] + i * step_r, start[1] + i * step_c) for i in range(steps + 1)]


def puzzle_payload(session: GameSession) -> Dict[str, Any]:
    state = session.state
    return {
        "theme": state.theme,
        "difficulty": state.difficulty.value if state.difficulty else None,
        "time_limit_ms": state.time_limit_ms,
        "grid": to_jsonable(state.grid),
        "words": [
            {"word": target.text, "clue": target.clue, "positions": [list(p) for p in target.positions]}
            for target in state.target_words
        ],
    }


def select_path(session: GameSession, cells: List[Tuple[int, int]]) -> StateDelta:
    first, *rest = cells
    session.apply_event(SelectStart(*first))
    for row, col in rest:
        session.apply_event(SelectExtend(row, col))
    return session.apply_event(SelectEnd())


def report(delta: StateDelta) -> None:
    if delta.match is None:
        return
    if delta.match.matched:
        bonus = f" (combo x{delta.match.combo})" if delta.match.combo > 1 else ""
        print(f"Found {delta.match.word}! +{delta.match.score}{bonus}")
    else:
        print("No word there.")


def play(session: GameSession) -> None:
    print(HELP_TEXT)
    while session.phase in (SessionPhase.PLAYING, SessionPhase.PAUSED):
        delta = session.apply_event(Tick())
        if session.phase == SessionPhase.FINISHED:
            break
        if session.phase == SessionPhase.PLAYING:
            pretty_print_grid(session.state.grid)
            print(format_word_list(session.state.target_words))
            print(f"Score {delta.score} | combo {delta.combo} | time {format_time(delta.remaining_ms)}")
        else:
            print("Paused. Enter 'p' to resume.")

        try:
            command = input("> ").strip()
        except EOFError:
            command = "q"

        if command == "q":
            session.apply_event(GiveUp())
            print("You gave up.")
            break
        if command == "p":
            session.apply_event(TogglePause())
            continue
        if command == "h":
            hint = session.apply_event(RequestHint()).hint
            if hint is None:
                print("No hints left.")
            else:
                print(f"Hint: starts with {hint.first_letter}, {hint.length} letters")
            continue

        tokens = command.split()
        if tokens and tokens[0] == "line":
            ends = [parse_cell(token) for token in tokens[1:3]]
            cells = line_between(ends[0], ends[1]) if len(ends) == 2 and all(ends) else []
        else:
            parsed = [parse_cell(token) for token in tokens]
            cells = [cell for cell in parsed if cell is not None]
        if not cells:
            print("Could not read that selection.")
            continue
        report(select_path(session, cells))

    if session.stats is not None:
        print_game_stats(session.stats)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.WARNING)
    configure_logging(level)

    if args.explain and not args.llm:
        parser.error("--explain requires --llm")

    store: KeyValueStore = JsonFileStore(args.store) if args.store else InMemoryStore()
    gemini: Optional[GeminiWordGenerator] = GeminiWordGenerator() if args.llm else None

    primary: Optional[WordGenerator] = None
    if args.words:
        primary = UserWordListGenerator(args.words)
    elif gemini is not None:
        primary = gemini

    session = GameSession(
        word_generator=primary,
        config=SessionConfig(seed=args.seed),
        leaderboard=StoreLeaderboard(store),
        history=WordHistory(store),
    )
    delta = session.apply_event(
        StartGame(theme=args.theme, difficulty=args.difficulty, user_id=args.user)
    )
    if delta.error:
        parser.exit(1, f"error: {delta.error}\n")

    if args.dump:
        print(json.dumps(puzzle_payload(session), ensure_ascii=False, indent=2))
        return

    play(session)

    if args.explain and gemini is not None and session.stats is not None:
        for word in session.stats.missed_words:
            try:
                explanation = gemini.explain_word(word.text, args.theme)
            except GeminiAPIError as exc:
                logging.getLogger(__name__).warning("Explanation failed: %s", exc)
                explanation = word.clue
            print(f"{word.text}: {explanation}")


if __name__ == "__main__":  # pragma: no cover
    main()
