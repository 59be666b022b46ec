"""Game session orchestration.

A session is a plain state machine driven by :meth:`GameSession.apply_event`:

  NOT_STARTED -> LOADING -> PLAYING <-> PAUSED -> FINISHED

Every event returns a :class:`StateDelta` describing what changed, and the
same delta is pushed to subscribers so a presentation layer can redraw
without polling.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple, Type

from ..core.constants import Difficulty, DifficultyTier, SessionPhase, resolve_tier
from ..core.exceptions import ConfigurationError, GenerationError, WordSearchError
from ..core.models import GameStats, Hint, MatchResult, Placement, TargetWord
from ..data.history import WordHistory
from ..data.normalization import clean_word, is_valid_word
from ..data.theme import DummyWordGenerator, GeneratedWord, WordGenerator, merge_word_generators
from ..io.leaderboard import Leaderboard, submit_if_best
from ..utils.logger import get_logger
from .grid import Grid, WordPlacer, cell_at, create_grid
from .matcher import resolve_selection
from .selection import SelectionTracker
from .timer import Clock, CountdownTimer


LOGGER = get_logger(__name__)


@dataclass
class SessionConfig:
    """Tunables that are not part of a difficulty tier."""

    seed: Optional[int] = None
    max_placement_attempts: int = 100
    min_word_length: int = 3
    max_word_length: int = 12
    word_request_size: int = 15
    hints_per_game: int = 3
    perfect_bonus: int = 200
    history_limit: int = 30


# ----------------------------------------------------------------------
# Events
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class StartGame:
    theme: str
    difficulty: Difficulty | str | DifficultyTier = Difficulty.MEDIUM
    user_id: Optional[str] = None


@dataclass(frozen=True)
class SelectStart:
    row: int
    col: int


@dataclass(frozen=True)
class SelectExtend:
    row: int
    col: int


@dataclass(frozen=True)
class SelectEnd:
    pass


@dataclass(frozen=True)
class TogglePause:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class RequestHint:
    pass


@dataclass(frozen=True)
class GiveUp:
    pass


@dataclass(frozen=True)
class ResetGame:
    pass


@dataclass
class SessionState:
    theme: str = ""
    difficulty: Optional[Difficulty] = None
    user_id: Optional[str] = None
    target_words: List[TargetWord] = field(default_factory=list)
    grid: Grid = field(default_factory=list)
    placements: List[Placement] = field(default_factory=list)
    found_words: Set[str] = field(default_factory=set)
    score: int = 0
    combo: int = 0
    max_combo: int = 0
    elapsed_ms: int = 0
    time_limit_ms: int = 0
    hints_remaining: int = 0
    is_paused: bool = False
    is_finished: bool = False


@dataclass(frozen=True)
class StateDelta:
    """What a single event did to the session."""

    phase: SessionPhase
    changed: bool = False
    error: Optional[str] = None
    match: Optional[MatchResult] = None
    selection: Tuple[Tuple[int, int], ...] = ()
    hint: Optional[Hint] = None
    score: int = 0
    combo: int = 0
    remaining_ms: int = 0
    stats: Optional[GameStats] = None


class GameSession:
    """Owns one player's game from start request to final stats."""

    def __init__(
        self,
        word_generator: Optional[WordGenerator] = None,
        fallback_generators: Optional[Sequence[WordGenerator]] = None,
        config: Optional[SessionConfig] = None,
        leaderboard: Optional[Leaderboard] = None,
        history: Optional[WordHistory] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or SessionConfig()
        self.word_generator = word_generator
        self.fallback_generators: List[WordGenerator] = (
            list(fallback_generators)
            if fallback_generators is not None
            else [DummyWordGenerator(seed=self.config.seed)]
        )
        self.leaderboard = leaderboard
        self.history = history
        self.clock = clock
        self.rng = rng or random.Random(self.config.seed)
        self.phase = SessionPhase.NOT_STARTED
        self.state = SessionState()
        self.tier: Optional[DifficultyTier] = None
        self.timer: Optional[CountdownTimer] = None
        self.selection = SelectionTracker()
        self.stats: Optional[GameStats] = None
        self._score_submitted = False
        self._subscribers: List[Callable[[StateDelta], None]] = []
        self._handlers: Dict[Type, Callable] = {
            StartGame: self._on_start,
            SelectStart: self._on_select_start,
            SelectExtend: self._on_select_extend,
            SelectEnd: self._on_select_end,
            TogglePause: self._on_toggle_pause,
            Tick: self._on_tick,
            RequestHint: self._on_hint,
            ResetGame: self._on_reset,
            GiveUp: self._on_give_up,
        }

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------
    def subscribe(self, callback: Callable[[StateDelta], None]) -> Callable[[], None]:
        """Register a delta listener; returns a callable that unsubscribes it."""

        self._subscribers.append(callback)
        return lambda: self._subscribers.remove(callback)

    def apply_event(self, event: object) -> StateDelta:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported session event: {event!r}")
        delta = handler(event)
        if self.timer is not None and self.phase != SessionPhase.FINISHED:
            self.state.elapsed_ms = self.timer.elapsed_ms()
        for callback in list(self._subscribers):
            callback(delta)
        return delta

    @property
    def remaining_ms(self) -> int:
        return self.timer.remaining_ms() if self.timer is not None else 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def _on_start(self, event: StartGame) -> StateDelta:
        if self.phase == SessionPhase.LOADING:
            LOGGER.debug("Start ignored while loading")
            return self._delta()
        try:
            tier = resolve_tier(event.difficulty)
        except ConfigurationError as exc:
            return self._delta(changed=False, error=str(exc))

        self._teardown()
        self.tier = tier
        self.state = SessionState(
            theme=event.theme,
            difficulty=tier.difficulty,
            user_id=event.user_id,
            time_limit_ms=tier.time_limit_ms,
            hints_remaining=self.config.hints_per_game,
        )
        self.phase = SessionPhase.LOADING
        LOGGER.info("Loading %s game on theme '%s'", tier.difficulty.value, event.theme)

        try:
            self._load(event.theme, tier)
        except GenerationError as exc:
            LOGGER.error("Game generation failed: %s", exc)
            return self._abort_start(str(exc))
        except Exception as exc:
            LOGGER.exception("Unexpected error while loading game")
            return self._abort_start(f"Could not start the game: {exc}")

        self.timer = CountdownTimer(tier.time_limit_ms, clock=self.clock)
        self.timer.start()
        self.phase = SessionPhase.PLAYING
        LOGGER.info(
            "Game started with %d words (%d ms)",
            len(self.state.target_words),
            tier.time_limit_ms,
        )
        return self._delta(changed=True)

    def _abort_start(self, message: str) -> StateDelta:
        self.phase = SessionPhase.NOT_STARTED
        self.tier = None
        self.state = SessionState()
        return self._delta(changed=True, error=message)

    def _load(self, theme: str, tier: DifficultyTier) -> None:
        exclude: List[str] = []
        if self.history is not None:
            exclude = self.history.recent_words(theme, self.config.history_limit)

        batch = merge_word_generators(
            self.word_generator,
            self.fallback_generators,
            theme,
            target=max(self.config.word_request_size, tier.word_count),
            difficulty=tier.difficulty.value,
            exclude_words=exclude,
            normalize=self._word_normalizer(tier),
        )
        if not batch.words:
            raise GenerationError(
                "No words were generated. Please try a different theme or difficulty."
            )

        candidates: List[GeneratedWord] = list(batch.words)
        self.rng.shuffle(candidates)
        chosen = candidates[: tier.word_count]

        grid = create_grid(tier.grid_rows, tier.grid_cols)
        placer = WordPlacer(rng=self.rng, max_attempts=self.config.max_placement_attempts)
        result = placer.place(grid, [entry.text for entry in chosen])

        targets: List[TargetWord] = []
        for entry in chosen:
            placement = result.placement_for(entry.text)
            if placement is None:
                continue
            targets.append(TargetWord(text=entry.text, clue=entry.clue, positions=placement.cells))
        if not targets:
            raise GenerationError("None of the generated words fit into the grid.")

        self.state.grid = grid
        self.state.placements = result.placements
        self.state.target_words = targets
        if self.history is not None:
            self.history.add_words([target.text for target in targets], theme)

    def _word_normalizer(self, tier: DifficultyTier) -> Callable[[str], str]:
        max_length = min(self.config.max_word_length, max(tier.grid_rows, tier.grid_cols))
        min_length = self.config.min_word_length

        def normalize(text: str) -> str:
            word = clean_word(text)
            return word if is_valid_word(word, min_length, max_length) else ""

        return normalize

    def _on_reset(self, event: ResetGame) -> StateDelta:
        if self.phase == SessionPhase.LOADING:
            return self._delta()
        self._teardown()
        self.phase = SessionPhase.NOT_STARTED
        self.state = SessionState()
        self.tier = None
        return self._delta(changed=True)

    def _teardown(self) -> None:
        if self.timer is not None:
            self.timer.stop()
        self.timer = None
        self.selection.clear()
        self.stats = None
        self._score_submitted = False

    # ------------------------------------------------------------------
    # Play
    # ------------------------------------------------------------------
    def _reject_input(self) -> Optional[StateDelta]:
        """Return the delta to answer with when selection input cannot be taken."""

        if self.phase != SessionPhase.PLAYING or self.timer is None or self.tier is None:
            LOGGER.debug("Input ignored in phase %s", self.phase.value)
            return self._delta()
        if self.timer.expired():
            self._finish(victory=False)
            return self._delta(changed=True)
        return None

    def _on_select_start(self, event: SelectStart) -> StateDelta:
        rejected = self._reject_input()
        if rejected is not None:
            return rejected
        cell = cell_at(self.state.grid, event.row, event.col)
        if cell is None:
            return self._delta()
        self.selection.begin(cell)
        return self._delta(changed=True)

    def _on_select_extend(self, event: SelectExtend) -> StateDelta:
        rejected = self._reject_input()
        if rejected is not None:
            return rejected
        cell = cell_at(self.state.grid, event.row, event.col)
        if cell is None:
            return self._delta()
        return self._delta(changed=self.selection.extend(cell))

    def _on_select_end(self, event: SelectEnd) -> StateDelta:
        rejected = self._reject_input()
        if rejected is not None:
            return rejected
        if not len(self.selection):
            return self._delta()

        result = resolve_selection(
            self.selection,
            self.state.target_words,
            combo=self.state.combo,
            multiplier=self.tier.score_multiplier,
        )
        if not result.matched:
            self.state.combo = 0
            return self._delta(changed=True, match=result)

        self.state.found_words.add(result.word or "")
        self.state.score += result.score
        self.state.combo = result.combo
        self.state.max_combo = max(self.state.max_combo, result.combo)
        if all(target.is_found for target in self.state.target_words):
            self._finish(victory=True)
        return self._delta(changed=True, match=result)

    def _on_toggle_pause(self, event: TogglePause) -> StateDelta:
        if self.timer is None:
            return self._delta()
        if self.phase == SessionPhase.PLAYING:
            self.timer.pause()
            self.selection.clear()
            self.phase = SessionPhase.PAUSED
            self.state.is_paused = True
        elif self.phase == SessionPhase.PAUSED:
            self.timer.resume()
            self.phase = SessionPhase.PLAYING
            self.state.is_paused = False
        else:
            return self._delta()
        LOGGER.info("Game %s", self.phase.value)
        return self._delta(changed=True)

    def _on_tick(self, event: Tick) -> StateDelta:
        if self.phase != SessionPhase.PLAYING or self.timer is None:
            return self._delta()
        if self.timer.expired():
            self._finish(victory=False)
        return self._delta(changed=True)

    def _on_hint(self, event: RequestHint) -> StateDelta:
        if self.phase != SessionPhase.PLAYING or self.state.hints_remaining <= 0:
            return self._delta()
        unfound = [target for target in self.state.target_words if not target.is_found]
        if not unfound:
            return self._delta()
        target = self.rng.choice(unfound)
        self.state.hints_remaining -= 1
        hint = Hint(word=target.text, first_letter=target.text[0], length=len(target.text))
        return self._delta(changed=True, hint=hint)

    def _on_give_up(self, event: GiveUp) -> StateDelta:
        if self.phase not in (SessionPhase.PLAYING, SessionPhase.PAUSED):
            return self._delta()
        LOGGER.info("Player gave up")
        self._finish(victory=False)
        return self._delta(changed=True)

    # ------------------------------------------------------------------
    # Finishing
    # ------------------------------------------------------------------
    def _finish(self, victory: bool) -> None:
        if self.timer is None or self.tier is None:
            raise WordSearchError("Cannot finish a session that has no running game")
        self.timer.stop()
        self.selection.clear()
        limit = self.tier.time_limit_ms
        elapsed = min(self.timer.elapsed_ms(), limit)
        targets = self.state.target_words
        all_found = bool(targets) and all(target.is_found for target in targets)

        perfect_bonus = self.config.perfect_bonus if all_found else 0
        time_bonus = max(0, (limit - elapsed) // 1000) if victory else 0
        final_score = self.state.score + perfect_bonus + time_bonus

        self.stats = GameStats(
            victory=victory,
            words_found=sum(1 for target in targets if target.is_found),
            total_words=len(targets),
            time_used_ms=elapsed,
            time_limit_ms=limit,
            score=final_score,
            base_score=self.state.score,
            perfect_bonus=perfect_bonus,
            time_bonus=time_bonus,
            max_combo=self.state.max_combo,
            found_words=tuple(target.text for target in targets if target.is_found),
            missed_words=tuple(replace(target) for target in targets if not target.is_found),
        )
        self.state.elapsed_ms = elapsed
        self.state.is_finished = True
        self.state.is_paused = False
        self.phase = SessionPhase.FINISHED
        LOGGER.info(
            "Game finished (%s): %d/%d words, score %d",
            "victory" if victory else "defeat",
            self.stats.words_found,
            self.stats.total_words,
            final_score,
        )
        self._submit_score(final_score, self.tier.difficulty.value)

    def _submit_score(self, final_score: int, difficulty: str) -> None:
        if self.leaderboard is None or self._score_submitted:
            return
        self._score_submitted = True
        try:
            submit_if_best(self.leaderboard, self.state.user_id, final_score, difficulty)
        except Exception as exc:
            LOGGER.warning("Saving score failed: %s", exc)

    def _delta(
        self,
        changed: bool = False,
        error: Optional[str] = None,
        match: Optional[MatchResult] = None,
        hint: Optional[Hint] = None,
    ) -> StateDelta:
        return StateDelta(
            phase=self.phase,
            changed=changed,
            error=error,
            match=match,
            selection=tuple(cell.position for cell in self.selection.cells),
            hint=hint,
            score=self.state.score,
            combo=self.state.combo,
            remaining_ms=self.remaining_ms,
            stats=self.stats if self.phase == SessionPhase.FINISHED else None,
        )
