"""Syntax tree model consumed by the scanner.

A closed set of node kinds lowered from the Go parse tree. Visitors dispatch on
these classes with ``match``; anything the scanner has no special rules for is
an ``Other`` node that only carries its children.
"""
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union


@dataclass(frozen=True, order=True)
class Position:
    """Source position. Orders by file, then byte offset."""
    filename: str
    offset: int
    line: int = field(compare=False)
    column: int = field(compare=False)

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass
class Ident:
    name: str
    pos: Position


@dataclass
class Field:
    """Parameter, result or struct field. Names are never references."""
    names: List[Ident]
    type: Optional["Node"]


@dataclass
class FuncType:
    params: List[Field] = field(default_factory=list)
    results: List[Field] = field(default_factory=list)


@dataclass
class StructType:
    fields: List[Field] = field(default_factory=list)


@dataclass
class ChanType:
    value: Optional["Node"]


@dataclass
class ArrayType:
    """Array (``len`` set) or slice (``len`` is None) type."""
    len: Optional["Node"]
    elt: Optional["Node"]


@dataclass
class Block:
    stmts: List["Node"] = field(default_factory=list)


@dataclass
class Assign:
    """Assignment, short variable declaration or range clause."""
    lhs: List["Node"]
    rhs: List["Node"]


@dataclass
class KeyValue:
    key: Optional["Node"]
    value: Optional["Node"]


@dataclass
class CompositeLit:
    type: Optional["Node"]
    elts: List["Node"] = field(default_factory=list)


@dataclass
class CallExpr:
    fun: Optional["Node"]
    args: List["Node"] = field(default_factory=list)


@dataclass
class ValueSpec:
    """One line of a const or var group."""
    names: List[Ident]
    type: Optional["Node"] = None
    values: List["Node"] = field(default_factory=list)


@dataclass
class TypeSpec:
    name: Ident
    type: Optional["Node"]
    type_params: List[Field] = field(default_factory=list)


@dataclass
class GenDecl:
    """A const, var or type declaration, at file level or inside a block."""
    keyword: str
    specs: List[Union[ValueSpec, TypeSpec]] = field(default_factory=list)


@dataclass
class FuncDecl:
    name: Ident
    type: FuncType
    body: Optional[Block] = None
    recv: Optional[List[Field]] = None
    type_params: List[Field] = field(default_factory=list)


@dataclass
class Other:
    """Any node kind without dedicated handling."""
    kind: str
    children: List["Node"] = field(default_factory=list)


@dataclass
class File:
    filename: str
    package: str
    decls: List[Union[FuncDecl, GenDecl]] = field(default_factory=list)


@dataclass
class Package:
    name: str
    files: List[File] = field(default_factory=list)
    entry: bool = False


Node = Union[
    Ident, Field, FuncType, StructType, ChanType, ArrayType, Block, Assign,
    KeyValue, CompositeLit, CallExpr, ValueSpec, TypeSpec, GenDecl, FuncDecl,
    Other, File,
]


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct children of a node in source order, skipping holes."""
    match node:
        case Ident():
            children = []
        case Field(type=type_):
            children = [type_]
        case FuncType(params=params, results=results):
            children = [*params, *results]
        case StructType(fields=fields):
            children = list(fields)
        case ChanType(value=value):
            children = [value]
        case ArrayType(len=length, elt=elt):
            children = [length, elt]
        case Block(stmts=stmts):
            children = list(stmts)
        case Assign(lhs=lhs, rhs=rhs):
            children = [*lhs, *rhs]
        case KeyValue(key=key, value=value):
            children = [key, value]
        case CompositeLit(type=type_, elts=elts):
            children = [type_, *elts]
        case CallExpr(fun=fun, args=args):
            children = [fun, *args]
        case ValueSpec(names=names, type=type_, values=values):
            children = [*names, type_, *values]
        case TypeSpec(name=name, type_params=type_params, type=type_):
            children = [name, *type_params, type_]
        case GenDecl(specs=specs):
            children = list(specs)
        case FuncDecl(recv=recv, name=name, type_params=type_params, type=type_, body=body):
            children = [*(recv or []), name, *type_params, type_, body]
        case Other(children=kids):
            children = list(kids)
        case File(decls=decls):
            children = list(decls)
        case _:
            raise TypeError(f"Unknown node kind: {type(node).__name__}")
    for child in children:
        if child is not None:
            yield child
