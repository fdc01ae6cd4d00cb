"""Configuration manager for taggo using TOML files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

import toml

from . import config
from .errors import ConfigError
from .tags import TagHeader

logger = logging.getLogger(__name__)

CONFIG_FILE = config.CONFIG_FILE


@dataclass(frozen=True)
class TagSettings:
    program_name: str = config.PROGRAM_NAME
    program_author: str = config.PROGRAM_AUTHOR
    program_url: str = config.PROGRAM_URL
    escape_patterns: bool = False
    recurse: bool = False
    extensions: FrozenSet[str] = field(default_factory=lambda: frozenset(config.SUPPORTED_EXTENSIONS))
    skip_dirs: FrozenSet[str] = field(default_factory=lambda: frozenset(config.SKIP_DIRS))

    @property
    def header(self) -> TagHeader:
        return TagHeader(
            program_name=self.program_name,
            program_author=self.program_author,
            program_url=self.program_url,
        )

    def with_overrides(self, **overrides: Any) -> "TagSettings":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def load_full_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the entire TOML config (all sections)."""
    path = path or CONFIG_FILE
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Return the ``[tags]`` section, or an empty dict."""
    section = load_full_config(path).get("tags", {})
    if not isinstance(section, dict):
        logger.warning("Ignoring [tags] config: expected a table")
        return {}
    return section


def _expect(key: str, value: Any, kind: type) -> Any:
    if not isinstance(value, kind):
        raise ConfigError(f"'{key}' must be of type {kind.__name__}, got {type(value).__name__}")
    return value


def _string_set(key: str, value: Any) -> FrozenSet[str]:
    _expect(key, value, list)
    for item in value:
        _expect(key, item, str)
    return frozenset(value)


def settings_from_dict(section: Dict[str, Any]) -> TagSettings:
    """Build :class:`TagSettings` from a ``[tags]`` table.

    Raises:
        ConfigError: if a known key holds a value of the wrong type.
    """
    values: Dict[str, Any] = {}
    for key in ("program_name", "program_author", "program_url"):
        if key in section:
            values[key] = _expect(key, section[key], str)
    for key in ("escape_patterns", "recurse"):
        if key in section:
            values[key] = _expect(key, section[key], bool)
    if "extensions" in section:
        values["extensions"] = _string_set("extensions", section["extensions"])
    if "skip_dirs" in section:
        values["skip_dirs"] = _string_set("skip_dirs", section["skip_dirs"])
    return TagSettings(**values)


def load_settings(path: Optional[Path] = None) -> TagSettings:
    """Load settings from the config file, falling back to defaults."""
    section = load_config(path)
    try:
        return settings_from_dict(section)
    except ConfigError as exc:
        logger.warning("Invalid taggo config, using defaults: %s", exc)
        return TagSettings()
