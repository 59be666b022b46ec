"""Theme word generation interfaces."""

from __future__ import annotations

import json
import random
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Sequence

from ..core.constants import Difficulty
from ..core.exceptions import ConfigurationError
from ..io.gemini_client import GeminiClient
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

FENCE_RE = re.compile(r"```(?:json)?\s*\n(.*?)\n\s*```", re.DOTALL)


@dataclass
class GeneratedWord:
    """A candidate word and its clue as returned by a generator."""

    text: str
    clue: str
    source: str = "unknown"


@dataclass
class WordBatch:
    """Wraps word generation results."""

    words: List[GeneratedWord] = field(default_factory=list)


class WordGenerator(Protocol):
    """Protocol implemented by all word providers."""

    def generate(
        self,
        theme: str,
        limit: int = 15,
        difficulty: str = "medium",
        exclude_words: Sequence[str] = (),
    ) -> WordBatch:
        ...


class GeminiWordGenerator:
    """LLM-powered generator using the Gemini API."""

    WORDS_PROMPT = (
        'Generate {limit} unique words related to the theme "{theme}" '
        'with a difficulty level of "{difficulty}".\n\n'
        "IMPORTANT RULES:\n"
        "1. Each word must be between {min_length} and {max_length} letters, A-Z only\n"
        "2. Provide only a professional clue for each word - DO NOT include the word itself in the clue\n"
        "3. The clue should be educational and help users learn while playing\n"
        "4. Make clues challenging but fair for the difficulty level\n"
        "5. Ensure variety in word types and avoid repetition"
        "{exclude_line}\n\n"
        "Difficulty guidelines:\n"
        "- easy: common, everyday words with straightforward clues\n"
        "- medium: moderately challenging words with descriptive clues\n"
        "- hard: advanced vocabulary with sophisticated clues\n\n"
        'Format as a JSON array with "word" and "clue" properties:\n'
        '[{{"word": "CLOUD", "clue": "Fluffy white formation in the sky that brings rain"}}]'
    )

    EXPLAIN_PROMPT = (
        'Explain the word "{word}" in the context of the theme "{theme}". '
        "Provide a simple and short explanation (maximum 2 sentences) that aids learning."
    )

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        min_length: int = 3,
        max_length: int = 12,
    ) -> None:
        self._client = client
        self.min_length = min_length
        self.max_length = max_length

    @property
    def client(self) -> GeminiClient:
        if self._client is None:
            self._client = GeminiClient()
        return self._client

    def generate(
        self,
        theme: str,
        limit: int = 15,
        difficulty: str = "medium",
        exclude_words: Sequence[str] = (),
    ) -> WordBatch:
        prompt = self._render_prompt(theme, limit, difficulty, exclude_words)
        return self._parse_response(self.client.generate_text(prompt))

    def explain_word(self, word: str, theme: str) -> str:
        return self.client.generate_text(self.EXPLAIN_PROMPT.format(word=word, theme=theme)).strip()

    def _render_prompt(
        self, theme: str, limit: int, difficulty: str, exclude_words: Sequence[str]
    ) -> str:
        exclude_line = ""
        if exclude_words:
            exclude_line = (
                "\n\nIMPORTANT: Avoid using these recently used words: "
                + ", ".join(exclude_words)
            )
        return self.WORDS_PROMPT.format(
            theme=theme,
            limit=limit,
            difficulty=difficulty,
            min_length=self.min_length,
            max_length=self.max_length,
            exclude_line=exclude_line,
        )

    @staticmethod
    def _parse_response(text: str) -> WordBatch:
        if not text:
            return WordBatch()
        match = FENCE_RE.search(text)
        payload = match.group(1) if match else text.strip()
        try:
            data = json.loads(payload)
        except json.JSONDecodeError:
            LOGGER.warning("Gemini word payload not JSON; falling back to empty")
            return WordBatch()
        if isinstance(data, dict):
            data = data.get("words", [])
        if not isinstance(data, list):
            LOGGER.warning("Gemini word payload has unexpected shape: %s", type(data).__name__)
            return WordBatch()

        entries: List[GeneratedWord] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            word = item.get("word")
            clue = item.get("clue") or item.get("definition") or ""
            if isinstance(word, str) and isinstance(clue, str):
                entries.append(GeneratedWord(text=word, clue=clue, source="gemini"))
        return WordBatch(words=entries)


class UserWordListGenerator:
    """Returns a user-supplied list of words (``WORD`` or ``WORD:Clue``)."""

    def __init__(self, raw_words: Iterable[str]) -> None:
        self._words: List[GeneratedWord] = []
        for item in raw_words:
            item = item.strip()
            if not item:
                continue
            word, _, clue = item.partition(":")
            self._words.append(GeneratedWord(word.strip().upper(), clue.strip(), "user"))

    def generate(
        self,
        theme: str,
        limit: int = 15,
        difficulty: str = "medium",
        exclude_words: Sequence[str] = (),
    ) -> WordBatch:
        return WordBatch(words=list(self._words))


DEFAULT_THEME_BUCKETS: Dict[str, Dict[str, List[str]]] = {
    "technology": {
        "easy": ["CODE", "DATA", "WEB", "CHIP", "MOUSE", "EMAIL", "PHONE", "CLOUD"],
        "medium": ["ROBOT", "LASER", "PIXEL", "MODEM", "SERVER", "BINARY", "ROUTER"],
        "hard": ["KERNEL", "COMPILER", "FIRMWARE", "PROTOCOL", "ALGORITHM", "ENCRYPTION"],
    },
    "health": {
        "easy": ["HEART", "SLEEP", "WATER", "NURSE", "BONE", "SKIN", "BLOOD", "FRUIT"],
        "medium": ["VACCINE", "VITAMIN", "PULSE", "TISSUE", "ORGAN", "MUSCLE", "IMMUNE"],
        "hard": ["ANTIBODY", "CARDIAC", "DIAGNOSIS", "METABOLISM", "NEURON", "PLACEBO"],
    },
    "education": {
        "easy": ["BOOK", "CLASS", "PEN", "LEARN", "TEST", "GRADE", "READ", "TEACH"],
        "medium": ["LECTURE", "THESIS", "CAMPUS", "TUTOR", "SYLLABUS", "DEGREE", "ESSAY"],
        "hard": ["PEDAGOGY", "SEMINAR", "CURRICULUM", "DOCTORATE", "LITERACY", "ACADEMIA"],
    },
    "science": {
        "easy": ["ATOM", "CELL", "STAR", "LAB", "GENE", "MASS", "HEAT", "LIGHT"],
        "medium": ["ENERGY", "PLANET", "PROTON", "ENZYME", "GRAVITY", "FOSSIL", "MAGNET"],
        "hard": ["ISOTOPE", "QUANTUM", "ENTROPY", "MOLECULE", "CATALYST", "NEUTRINO"],
    },
    "business": {
        "easy": ["SALE", "CASH", "SHOP", "DEAL", "BANK", "PROFIT", "TRADE", "PRICE"],
        "medium": ["MARKET", "BUDGET", "INVOICE", "STARTUP", "BRAND", "LEDGER", "CLIENT"],
        "hard": ["DIVIDEND", "EQUITY", "LIQUIDITY", "MERGER", "LOGISTICS", "ARBITRAGE"],
    },
    "environment": {
        "easy": ["TREE", "RAIN", "SOIL", "OCEAN", "WIND", "LEAF", "RIVER", "EARTH"],
        "medium": ["FOREST", "CLIMATE", "RECYCLE", "HABITAT", "SOLAR", "GLACIER", "WETLAND"],
        "hard": ["ECOSYSTEM", "EMISSION", "BIOMASS", "POLLUTION", "AQUIFER", "COMPOST"],
    },
    "default": {
        "easy": ["REACT", "CODE", "WEB", "API", "DATA", "TECH", "SMART", "LEARN"],
        "medium": ["PUZZLE", "SEARCH", "LETTER", "WORD", "GRID", "CLUE"],
        "hard": ["PATTERN", "DIAGONAL", "CROSSING", "SCORE", "COMBO", "TIMER"],
    },
}


class DummyWordGenerator:
    """Offline generator serving words from built-in theme buckets.

    Unknown themes are served from the ``default`` bucket so a session always
    has something to play with. Excluded words are demoted, not removed.
    """

    def __init__(
        self,
        theme_buckets: Dict[str, Dict[str, List[str]]] | None = None,
        seed: int | None = None,
        fallback_theme: str = "default",
    ) -> None:
        buckets = theme_buckets or DEFAULT_THEME_BUCKETS
        self.theme_buckets: Dict[str, Dict[str, List[str]]] = {}
        for key, tier_map in buckets.items():
            self.theme_buckets[key.lower()] = {
                tier.lower(): [w.upper() for w in words if w]
                for tier, words in tier_map.items()
            }
        self.fallback_theme = fallback_theme
        self.rng = random.Random(seed)

    def generate(
        self,
        theme: str,
        limit: int = 15,
        difficulty: str = "medium",
        exclude_words: Sequence[str] = (),
    ) -> WordBatch:
        key = (theme or "").strip().lower()
        tier = (difficulty or Difficulty.MEDIUM.value).lower()
        tier_map = self.theme_buckets.get(key)
        if tier_map is None:
            tier_map = self.theme_buckets.get(self.fallback_theme)
            if tier_map is None:
                raise ConfigurationError(
                    f"Theme '{theme}' is not in DummyWordGenerator buckets "
                    f"(known: {list(self.theme_buckets)})"
                )
            LOGGER.info("Unknown theme '%s'; serving '%s' words", theme, self.fallback_theme)

        on_tier = list(tier_map.get(tier, []))
        off_tier: List[str] = []
        for t, words in tier_map.items():
            if t != tier:
                off_tier.extend(words)
        self.rng.shuffle(on_tier)
        self.rng.shuffle(off_tier)

        excluded = {w.upper() for w in exclude_words}
        combined = on_tier + off_tier
        ordered = [w for w in combined if w not in excluded] + [w for w in combined if w in excluded]

        results = [
            GeneratedWord(text=word, clue=f"{(theme or 'Theme').title()} word", source="dummy")
            for word in ordered[:limit]
        ]
        LOGGER.info("Dummy generator produced %s words (tier=%s)", len(results), tier)
        return WordBatch(words=results)


def merge_word_generators(
    primary: WordGenerator | None,
    fallbacks: Sequence[WordGenerator],
    theme: str,
    target: int,
    difficulty: str = "medium",
    exclude_words: Sequence[str] = (),
    normalize: Optional[Callable[[str], str]] = None,
) -> WordBatch:
    """Attempt primary generator, cascaded fallbacks, and deduplicate results.

    When ``normalize`` is given every entry is rewritten through it and
    entries it maps to an empty string are dropped, so ``target`` counts
    usable words only.
    """

    collected: List[GeneratedWord] = []
    seen: set[str] = set()

    def extend(batch: WordBatch) -> None:
        for entry in batch.words:
            word_key = normalize(entry.text) if normalize else entry.text.upper()
            if not word_key or word_key in seen:
                continue
            collected.append(GeneratedWord(text=word_key, clue=entry.clue, source=entry.source))
            seen.add(word_key)
            if len(collected) >= target:
                break

    generators: List[WordGenerator] = ([primary] if primary else []) + list(fallbacks)
    for generator in generators:
        if len(collected) >= target:
            break
        try:
            extend(
                generator.generate(
                    theme, limit=target, difficulty=difficulty, exclude_words=exclude_words
                )
            )
        except Exception as exc:
            LOGGER.warning("Word generator %s failed: %s", type(generator).__name__, exc)

    return WordBatch(words=collected[:target])
