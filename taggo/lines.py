"""Recover the exact bytes of a source line for tag search patterns."""

from __future__ import annotations

import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


def _strip_terminator(raw: bytes) -> bytes:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw


def content_of_line(path: str, line: int) -> bytes:
    """Return line *line* (1-based) of *path* without its terminator.

    Returns ``b""`` when the file cannot be opened or is shorter than
    *line*; a missing pattern must never abort a run.
    """
    if line < 1:
        return b""
    try:
        with open(path, "rb") as f:
            for number, raw in enumerate(f, start=1):
                if number == line:
                    return _strip_terminator(raw)
    except OSError as exc:
        logger.debug("Cannot read %s for line %d: %s", path, line, exc)
    return b""


class LineResolver:
    """Line lookup with a cache of the most recently read file.

    Tags are synthesized file by file, so keeping a single file's lines
    avoids rescanning it once per symbol.
    """

    def __init__(self) -> None:
        self._path: Optional[str] = None
        self._lines: List[bytes] = []

    def resolve(self, path: str, line: int) -> bytes:
        if line < 1:
            return b""
        if path != self._path:
            self._load(path)
        if line > len(self._lines):
            return b""
        return _strip_terminator(self._lines[line - 1])

    def clear(self) -> None:
        self._path = None
        self._lines = []

    def _load(self, path: str) -> None:
        self._path = path
        try:
            with open(path, "rb") as f:
                self._lines = f.readlines()
        except OSError as exc:
            logger.debug("Cannot read %s: %s", path, exc)
            self._lines = []
