"""Word search puzzle engine.

This package exposes the public API surface via:

- ``wordsearch.engine.session.GameSession``: drives a game from start to final stats.
- ``wordsearch.engine.grid.WordPlacer``: embeds words into a letter grid.
- ``wordsearch.data.theme`` helpers: themed word and clue generation.
"""

from .engine.session import GameSession, SessionConfig, StateDelta
from .engine.grid import WordPlacer, create_grid, place_words

__all__ = [
    "GameSession",
    "SessionConfig",
    "StateDelta",
    "WordPlacer",
    "create_grid",
    "place_words",
]

__version__ = "0.1.0"
