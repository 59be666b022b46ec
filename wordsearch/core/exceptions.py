"""Custom exception hierarchy for the word search engine."""


class WordSearchError(Exception):
    """Base exception for engine failures."""


class ConfigurationError(WordSearchError):
    """Raised when a difficulty, theme or config value cannot be resolved."""


class GenerationError(WordSearchError):
    """Raised when no usable target words can be produced for a session."""
