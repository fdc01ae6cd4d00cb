"""Go source parsing with Tree-sitter.

The rest of taggo only consumes :mod:`taggo.syntax` trees.  This module is
the one place that knows about Tree-sitter: it discovers candidate files,
parses them with the ``tree-sitter-go`` grammar and lowers the concrete
syntax tree onto the small declaration model the classifier understands.
"""

from __future__ import annotations

import logging
import os
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional

import tree_sitter_go
from tree_sitter import Language
from tree_sitter import Parser as TSParser

from .config import SKIP_DIRS, SUPPORTED_EXTENSIONS
from .errors import GoParseError
from .syntax import (
    Decl,
    Expr,
    Field,
    FuncDecl,
    GenDecl,
    Ident,
    ImportSpec,
    InterfaceType,
    OtherType,
    Position,
    SelectorExpr,
    SourceFile,
    StarExpr,
    StructType,
    Token,
    TypeSpec,
    ValueSpec,
)

logger = logging.getLogger(__name__)


# ===================================================================
# Abstract Parser Interface
# ===================================================================

class Parser(ABC):
    """Turns one source file into a :class:`SourceFile` declaration tree."""

    @abstractmethod
    def parse_file(self, path: str, source: Optional[bytes] = None) -> SourceFile:
        """Parse *path*; raise :class:`GoParseError` on failure."""
        ...

    @abstractmethod
    def supports_extension(self, ext: str) -> bool:
        """Return True if files ending in *ext* can be parsed."""
        ...


# ===================================================================
# Tree-sitter Go Parser
# ===================================================================

class GoTreeSitterParser(Parser):
    """Go parser built on the ``tree-sitter-go`` grammar.

    Tree-sitter recovers from syntax errors, but a tree with error nodes
    would yield tags for half-parsed declarations, so such files are
    rejected the way the Go compiler's parser would reject them.
    """

    def __init__(self, extensions: Iterable[str] = SUPPORTED_EXTENSIONS) -> None:
        self.extensions = frozenset(extensions)
        self._language = Language(tree_sitter_go.language())
        self._parser = TSParser(self._language)
        logger.debug("Loaded tree-sitter parser for go")

    def supports_extension(self, ext: str) -> bool:
        return ext in self.extensions

    def parse_file(self, path: str, source: Optional[bytes] = None) -> SourceFile:
        if source is None:
            try:
                source = Path(path).read_bytes()
            except OSError as exc:
                raise GoParseError(path, exc.strerror or str(exc)) from exc

        tree = self._parser.parse(source)
        root = tree.root_node
        if root.has_error:
            raise GoParseError(path, f"syntax error near line {_first_error_line(root)}")

        return _Lowering(path).source_file(root)


def _first_error_line(node: Any) -> int:
    """Line of the first ERROR or MISSING node below *node*."""
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error:
            return _first_error_line(child)
    return node.start_point[0] + 1


def _text(node: Any) -> str:
    return node.text.decode("utf-8", errors="replace")


class _Lowering:
    """Maps Tree-sitter Go nodes onto :mod:`taggo.syntax` dataclasses."""

    def __init__(self, path: str) -> None:
        self.path = path

    def pos(self, node: Any) -> Position:
        row, column = node.start_point
        return Position(self.path, row + 1, column + 1)

    def ident(self, node: Any) -> Ident:
        return Ident(_text(node), self.pos(node))

    # ------------------------------------------------------------------
    # Top level
    # ------------------------------------------------------------------

    def source_file(self, root: Any) -> SourceFile:
        package = ""
        decls: List[Decl] = []
        for child in root.named_children:
            if child.type == "package_clause":
                for sub in child.named_children:
                    if sub.type == "package_identifier":
                        package = _text(sub)
            else:
                decl = self.decl(child)
                if decl is not None:
                    decls.append(decl)
        return SourceFile(path=self.path, package=package, decls=decls)

    def decl(self, node: Any) -> Optional[Decl]:
        if node.type == "function_declaration":
            return FuncDecl(self.ident(node.child_by_field_name("name")), self.pos(node))
        if node.type == "method_declaration":
            receiver = node.child_by_field_name("receiver")
            return FuncDecl(
                self.ident(node.child_by_field_name("name")),
                self.pos(node),
                recv=self.parameters(receiver),
            )
        if node.type == "const_declaration":
            return GenDecl(Token.CONST, self.pos(node), self.value_specs(node, "const_spec"))
        if node.type == "var_declaration":
            return GenDecl(Token.VAR, self.pos(node), self.value_specs(node, "var_spec"))
        if node.type == "type_declaration":
            return GenDecl(Token.TYPE, self.pos(node), self.type_specs(node))
        if node.type == "import_declaration":
            return GenDecl(Token.IMPORT, self.pos(node), self.import_specs(node))
        # Comments and statements that are not declarations.
        return None

    # ------------------------------------------------------------------
    # Specs
    # ------------------------------------------------------------------

    def _specs(self, node: Any, types: Iterable[str]) -> Iterator[Any]:
        """Yield spec nodes, looking through ``(...)`` group wrappers."""
        for child in node.named_children:
            if child.type in types:
                yield child
            elif child.type.endswith("_spec_list"):
                yield from self._specs(child, types)

    def value_specs(self, node: Any, spec_type: str) -> List[ValueSpec]:
        return [
            ValueSpec([self.ident(n) for n in spec.children_by_field_name("name")])
            for spec in self._specs(node, (spec_type,))
        ]

    def type_specs(self, node: Any) -> List[TypeSpec]:
        specs: List[TypeSpec] = []
        for spec in self._specs(node, ("type_spec", "type_alias")):
            name = spec.child_by_field_name("name")
            typ = spec.child_by_field_name("type")
            if name is None or typ is None:
                continue
            specs.append(TypeSpec(self.ident(name), self.type_expr(typ)))
        return specs

    def import_specs(self, node: Any) -> List[ImportSpec]:
        specs: List[ImportSpec] = []
        for spec in self._specs(node, ("import_spec",)):
            path = spec.child_by_field_name("path")
            specs.append(ImportSpec(_text(path).strip("\"`") if path is not None else "", self.pos(spec)))
        return specs

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def type_expr(self, node: Any) -> Expr:
        kind = node.type
        if kind == "type_identifier":
            return self.ident(node)
        if kind == "pointer_type":
            return StarExpr(self.type_expr(node.named_children[-1]), self.pos(node))
        if kind == "qualified_type":
            package = node.child_by_field_name("package")
            name = node.child_by_field_name("name")
            return SelectorExpr(self.ident(package), self.ident(name))
        if kind == "generic_type":
            return self.type_expr(node.child_by_field_name("type"))
        if kind == "parenthesized_type":
            return self.type_expr(node.named_children[0])
        if kind == "struct_type":
            return StructType(self.pos(node), self.struct_fields(node))
        if kind == "interface_type":
            return InterfaceType(self.pos(node), self.interface_methods(node))
        return OtherType(self.pos(node), _text(node))

    def struct_fields(self, node: Any) -> List[Field]:
        fields: List[Field] = []
        for child in node.named_children:
            if child.type != "field_declaration_list":
                continue
            for decl in child.named_children:
                if decl.type != "field_declaration":
                    continue
                typ = decl.child_by_field_name("type")
                fields.append(Field(
                    names=[self.ident(n) for n in decl.children_by_field_name("name")],
                    type=self.type_expr(typ) if typ is not None else None,
                ))
        return fields

    def interface_methods(self, node: Any) -> List[Field]:
        methods: List[Field] = []
        for child in node.named_children:
            if child.type == "method_spec_list":
                methods.extend(self.interface_methods(child))
            elif child.type in ("method_elem", "method_spec"):
                name = child.child_by_field_name("name")
                methods.append(Field(names=[self.ident(name)] if name is not None else []))
            elif child.type != "comment":
                # Embedded interfaces and type-set constraints are anonymous.
                methods.append(Field(names=[], type=OtherType(self.pos(child), _text(child))))
        return methods

    def parameters(self, node: Any) -> List[Field]:
        params: List[Field] = []
        if node is None:
            return params
        for child in node.named_children:
            if child.type not in ("parameter_declaration", "variadic_parameter_declaration"):
                continue
            typ = child.child_by_field_name("type")
            params.append(Field(
                names=[self.ident(n) for n in child.children_by_field_name("name")],
                type=self.type_expr(typ) if typ is not None else None,
            ))
        return params


# ===================================================================
# File discovery and project parsing
# ===================================================================

def _walk(top: str, extensions: Iterable[str], skip_dirs: Iterable[str]) -> Iterator[str]:
    extensions = set(extensions)
    skip_dirs = set(skip_dirs)
    for dirpath, dirnames, filenames in os.walk(top):
        dirnames[:] = sorted(d for d in dirnames if d not in skip_dirs)
        for filename in sorted(filenames):
            path = os.path.join(dirpath, filename)
            if os.path.splitext(filename)[1] in extensions and os.path.isfile(path):
                yield path


def collect_source_files(
    paths: Iterable[str],
    recurse: bool = False,
    extensions: Iterable[str] = SUPPORTED_EXTENSIONS,
    skip_dirs: Iterable[str] = SKIP_DIRS,
) -> List[str]:
    """Expand command-line *paths* into the list of source files to parse.

    Regular files with a supported extension are kept as given.
    Directories are walked only when *recurse* is set.  Paths that do not
    exist or cannot be stat'ed are dropped silently.
    """
    extensions = set(extensions)
    files: List[str] = []
    seen = set()

    def _add(path: str) -> None:
        if path not in seen:
            seen.add(path)
            files.append(path)

    for raw in paths:
        path = str(raw)
        try:
            mode = os.stat(path).st_mode
        except OSError as exc:
            logger.debug("Skipping %s: %s", path, exc)
            continue
        if stat.S_ISDIR(mode):
            if recurse:
                for found in _walk(path, extensions, skip_dirs):
                    _add(found)
            else:
                logger.debug("Skipping directory %s (recursion disabled)", path)
        elif stat.S_ISREG(mode) and os.path.splitext(path)[1] in extensions:
            _add(path)
        else:
            logger.debug("Skipping %s: not a source file", path)
    return files


@dataclass
class ParseResult:
    """Files that parsed cleanly, plus the first failure encountered."""

    files: List[SourceFile] = field(default_factory=list)
    first_error: Optional[GoParseError] = None
    failed: int = 0


def parse_files(parser: Parser, paths: Iterable[str]) -> ParseResult:
    """Parse every path; failures are logged and skipped, never fatal."""
    result = ParseResult()
    for path in paths:
        try:
            source = parser.parse_file(path)
        except GoParseError as exc:
            logger.warning("Failed to parse %s", exc)
            result.failed += 1
            if result.first_error is None:
                result.first_error = exc
            continue
        logger.debug("Parsed %s (package %s, %d decls)", path, source.package, len(source.decls))
        result.files.append(source)
    return result
