"""Exception hierarchy for taggo."""

from __future__ import annotations


class TaggoError(Exception):
    """Base class for all taggo errors."""


class GoParseError(TaggoError):
    """A source file could not be read or contains syntax errors."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class ConfigError(TaggoError):
    """A configuration value has the wrong type or shape."""
