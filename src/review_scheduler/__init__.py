"""Spaced-repetition interval scheduling for flashcard attempts."""

__version__ = "0.1.0"
