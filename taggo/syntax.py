"""Declaration tree consumed by the classifier.

These dataclasses mirror the handful of Go syntax nodes that matter for
tagging.  The tree-sitter parser produces them, and tests can build them by
hand without touching a real parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


@dataclass(frozen=True)
class Position:
    filename: str
    line: int
    column: int = 1


@dataclass
class Ident:
    name: str
    pos: Position


@dataclass
class StarExpr:
    """Pointer type ``*X``."""

    x: "Expr"
    pos: Position


@dataclass
class SelectorExpr:
    """Qualified reference ``X.Sel``; ``x`` may itself be a selector."""

    x: "Expr"
    sel: Ident

    @property
    def pos(self) -> Position:
        return self.x.pos


@dataclass
class Field:
    """One field group or method signature group.

    ``names`` is empty for embedded fields and embedded interfaces.
    """

    names: List[Ident] = field(default_factory=list)
    type: Optional["Expr"] = None


@dataclass
class StructType:
    pos: Position
    fields: List[Field] = field(default_factory=list)


@dataclass
class InterfaceType:
    pos: Position
    methods: List[Field] = field(default_factory=list)


@dataclass
class OtherType:
    """Any type expression that is neither a struct nor an interface."""

    pos: Position
    text: str = ""


Expr = Union[Ident, StarExpr, SelectorExpr, StructType, InterfaceType, OtherType]


class Token(str, Enum):
    CONST = "const"
    VAR = "var"
    TYPE = "type"
    IMPORT = "import"


@dataclass
class ValueSpec:
    names: List[Ident] = field(default_factory=list)


@dataclass
class TypeSpec:
    name: Ident
    type: Expr


@dataclass
class ImportSpec:
    path: str
    pos: Position


Spec = Union[ValueSpec, TypeSpec, ImportSpec]


@dataclass
class GenDecl:
    tok: Token
    pos: Position
    specs: List[Spec] = field(default_factory=list)


@dataclass
class FuncDecl:
    name: Ident
    pos: Position
    recv: Optional[List[Field]] = None


Decl = Union[FuncDecl, GenDecl]


@dataclass
class SourceFile:
    path: str
    package: str
    decls: List[Decl] = field(default_factory=list)
