"""Shared helpers for word normalization."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable, List, Optional, Set

WORD_RE = re.compile(r"[^A-Z]")


def clean_word(text: str) -> str:
    """Return an uppercase A-Z only representation of ``text``.

    Accented letters are folded to their base letter; everything else that is
    not a letter (spaces, hyphens, digits) is dropped.
    """

    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.strip().upper())
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return WORD_RE.sub("", stripped)


def is_valid_word(word: str, min_length: int, max_length: int) -> bool:
    return bool(word) and min_length <= len(word) <= max_length and not WORD_RE.search(word)


def normalize_words(
    words: Iterable[str],
    min_length: int,
    max_length: int,
    exclude: Optional[Iterable[str]] = None,
) -> List[str]:
    """Clean, length-filter and deduplicate ``words`` preserving order."""

    excluded: Set[str] = {clean_word(word) for word in exclude or ()}
    seen: Set[str] = set()
    result: List[str] = []
    for raw in words:
        word = clean_word(raw)
        if not is_valid_word(word, min_length, max_length):
            continue
        if word in seen or word in excluded:
            continue
        seen.add(word)
        result.append(word)
    return result


__all__ = ["clean_word", "is_valid_word", "normalize_words"]
