"""Tag synthesis and the sorted tag file.

Each record serializes to one line of the Exuberant Ctags extended format::

    name<TAB>file<TAB>/^pattern$/;"<TAB>kind<TAB>scope

Lines are kept as bytes so the search pattern is byte-for-byte the source
line and sorting is plain byte-wise ordering, which is what editors expect
from a file announcing ``!_TAG_FILE_SORTED 1``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterable, List, Tuple

from . import config
from .models import TagRecord

logger = logging.getLogger(__name__)

TAG_FILE_FORMAT = "2"
TAG_FILE_SORTED = "1"


@dataclass(frozen=True)
class TagHeader:
    program_name: str = config.PROGRAM_NAME
    program_author: str = config.PROGRAM_AUTHOR
    program_url: str = config.PROGRAM_URL

    def lines(self) -> List[bytes]:
        pragmas = [
            ("!_TAG_FILE_FORMAT", TAG_FILE_FORMAT),
            ("!_TAG_FILE_SORTED", TAG_FILE_SORTED),
            ("!_TAG_PROGRAM_AUTHOR", self.program_author),
            ("!_TAG_PROGRAM_NAME", self.program_name),
            ("!_TAG_PROGRAM_URL", self.program_url),
        ]
        return [f"{key}\t{value}".encode("utf-8") for key, value in pragmas]


def escape_pattern(line: bytes) -> bytes:
    """Escape ``\\`` and ``/`` so the line is safe inside ``/^...$/``."""
    return line.replace(b"\\", b"\\\\").replace(b"/", b"\\/")


def synthesize(record: TagRecord, escape: bool = False) -> bytes:
    """Serialize *record* into one tag line (without a trailing newline).

    The scope column is always present, empty when the symbol has no scope.
    """
    pattern = escape_pattern(record.pattern) if escape else record.pattern
    return b"\t".join(
        [
            record.name.encode("utf-8"),
            record.file_path.encode("utf-8", errors="surrogateescape"),
            b"/^" + pattern + b'$/;"',
            record.kind.value.encode("ascii"),
            str(record.scope).encode("utf-8"),
        ]
    )


@dataclass(frozen=True)
class TagFile:
    """Sorted, immutable result of one indexing run."""

    lines: Tuple[bytes, ...]
    header: TagHeader = TagHeader()

    def __len__(self) -> int:
        return len(self.lines)

    def render(self) -> bytes:
        out = self.header.lines() + list(self.lines)
        return b"".join(line + b"\n" for line in out)

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.render())


class TagBuilder:
    """Accumulates tag lines during traversal.

    Insertion order is irrelevant; :meth:`build` sorts once.  Identical
    lines are kept, there is no deduplication.
    """

    def __init__(self, escape_patterns: bool = False) -> None:
        self.escape_patterns = escape_patterns
        self._lines: List[bytes] = []

    def __len__(self) -> int:
        return len(self._lines)

    def add(self, record: TagRecord) -> None:
        self._lines.append(synthesize(record, escape=self.escape_patterns))

    def extend(self, records: Iterable[TagRecord]) -> None:
        for record in records:
            self.add(record)

    def build(self, header: TagHeader = TagHeader()) -> TagFile:
        logger.debug("Sorting %d tag lines", len(self._lines))
        return TagFile(lines=tuple(sorted(self._lines)), header=header)
