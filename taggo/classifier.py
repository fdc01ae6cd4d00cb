"""Map top-level Go declarations onto tag kinds, names and scopes.

The classifier is a pure function of the declaration tree: it never reads
files and never formats output.  Each recognized symbol becomes a
:class:`~taggo.models.TagSite`; the indexer resolves its search pattern later.
"""

from __future__ import annotations

from typing import Iterator, List

from .models import NO_SCOPE, Kind, Scope, TagSite
from .syntax import (
    Decl,
    Expr,
    FuncDecl,
    GenDecl,
    Ident,
    InterfaceType,
    SelectorExpr,
    SourceFile,
    StarExpr,
    StructType,
    Token,
    TypeSpec,
    ValueSpec,
)


def type_name(typ: Expr) -> str:
    """Name of a receiver type with one level of pointer indirection removed.

    Qualified references are joined with dots (``pkg.Type``) to any depth.
    Unknown shapes yield an empty string.
    """
    if isinstance(typ, StarExpr):
        typ = typ.x
    if isinstance(typ, Ident):
        return typ.name
    if isinstance(typ, SelectorExpr):
        return type_name(typ.x) + "." + typ.sel.name
    return ""


def classify_file(source: SourceFile) -> List[TagSite]:
    """Classify every top-level declaration of *source*, in source order."""
    sites: List[TagSite] = []
    for decl in source.decls:
        sites.extend(classify_decl(decl))
    return sites


def classify_decl(decl: Decl) -> Iterator[TagSite]:
    """Yield the tag sites of one top-level declaration.

    Unrecognized declaration variants yield nothing.
    """
    if isinstance(decl, FuncDecl):
        yield _func_decl(decl)
    elif isinstance(decl, GenDecl):
        yield from _gen_decl(decl)


def _func_decl(decl: FuncDecl) -> TagSite:
    scope = NO_SCOPE
    if decl.recv:
        # Go allows exactly one receiver.
        recv_type = decl.recv[0].type
        scope = Scope.of_class(type_name(recv_type) if recv_type is not None else "")
    return TagSite(decl.name.name, decl.pos, Kind.FUNCTION, scope)


def _gen_decl(decl: GenDecl) -> Iterator[TagSite]:
    for spec in decl.specs:
        if isinstance(spec, TypeSpec):
            yield from _type_spec(spec)
        elif isinstance(spec, ValueSpec):
            kind = Kind.CONSTANT if decl.tok is Token.CONST else Kind.VARIABLE
            for ident in spec.names:
                yield TagSite(ident.name, ident.pos, kind)


def _type_spec(spec: TypeSpec) -> Iterator[TagSite]:
    name = spec.name.name
    typ = spec.type
    if isinstance(typ, StructType):
        yield TagSite(name, typ.pos, Kind.STRUCT)
        scope = Scope.of_struct(name)
        for group in typ.fields:
            for ident in group.names:
                yield TagSite(ident.name, ident.pos, Kind.MEMBER, scope)
    elif isinstance(typ, InterfaceType):
        yield TagSite(name, typ.pos, Kind.CLASS)
        scope = Scope.of_class(name)
        for group in typ.methods:
            for ident in group.names:
                yield TagSite(ident.name, ident.pos, Kind.FUNCTION, scope)
    else:
        yield TagSite(name, typ.pos, Kind.TYPE)
