"""Core data models shared by the classifier, synthesizer and emitter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .syntax import Position


class Kind(str, Enum):
    CLASS = "c"  # interface
    CONSTANT = "d"
    FUNCTION = "f"  # functions and methods
    MEMBER = "m"  # struct field
    STRUCT = "s"
    TYPE = "t"
    VARIABLE = "v"


@dataclass(frozen=True)
class Scope:
    """Enclosing type of a method or field.

    ``kind`` is ``"class"``, ``"struct"`` or empty for no scope.
    """

    kind: str = ""
    name: str = ""

    @classmethod
    def of_class(cls, name: str) -> "Scope":
        return cls("class", name)

    @classmethod
    def of_struct(cls, name: str) -> "Scope":
        return cls("struct", name)

    def __bool__(self) -> bool:
        return bool(self.kind)

    def __str__(self) -> str:
        if not self.kind:
            return ""
        return f"{self.kind}:{self.name}"


NO_SCOPE = Scope()


@dataclass(frozen=True)
class TagSite:
    """A recognized symbol before its search pattern is resolved."""

    name: str
    pos: Position
    kind: Kind
    scope: Scope = NO_SCOPE


@dataclass(frozen=True)
class TagRecord:
    name: str
    file_path: str
    pattern: bytes
    kind: Kind
    scope: Scope = NO_SCOPE
