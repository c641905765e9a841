"""Scope-tracking visitors.

Three traversal roles share one ``WalkState`` per file:

- ``StatementVisitor`` walks statements and expressions, where identifiers are
  value references;
- ``DeclarationVisitor`` walks const/var/type declaration groups;
- ``TypeVisitor`` walks type expressions, where identifiers denote types.

An identifier that no open scope declares is not an error: builtins, imported
package members and forward references all end up in the file's unresolved set,
which the scanner reconciles once the whole package has been walked.
"""
from typing import Callable, List, Optional, Set

from .nodes import (
    ArrayType,
    Assign,
    Block,
    CallExpr,
    ChanType,
    CompositeLit,
    Field,
    File,
    FuncDecl,
    FuncType,
    GenDecl,
    Ident,
    KeyValue,
    Node,
    StructType,
    TypeSpec,
    ValueSpec,
    iter_children,
)
from .policy import initially_used
from .scope import Report, ScopeStack


class WalkState:
    """Mutable state of a single file walk."""

    def __init__(self, entry: bool, trace: Optional[Callable[[str], None]] = None):
        self.stack = ScopeStack()
        self.entry = entry
        self.unresolved: Set[str] = set()
        self.reports: List[Report] = []
        self.trace = trace

    def declare(self, ident: Ident):
        used = initially_used(ident.name, self.stack.is_root(), self.entry)
        self.stack.declare(ident.name, ident.pos, used)

    def reference(self, node: Optional[Node]) -> bool:
        """Mark ``node`` if it is a plain identifier.

        Returns:
            True if nothing is left to walk (no node, or an identifier)
        """
        if node is None:
            return True
        if isinstance(node, Ident):
            if not self.stack.mark(node.name):
                self.unresolved.add(node.name)
            return True
        return False

    def push(self):
        self.stack.push()

    def pop(self):
        self.reports.extend(self.stack.pop())


class _Visitor:
    role = "node"

    def __init__(self, state: WalkState):
        self.state = state

    def visit(self, node: Optional[Node]):
        if node is None:
            return
        if self.state.trace is not None:
            self.state.trace(f"{self.role}: {type(node).__name__}")
        self.dispatch(node)

    def dispatch(self, node: Node):
        self.generic_visit(node)

    def generic_visit(self, node: Node):
        for child in iter_children(node):
            self.visit(child)


class StatementVisitor(_Visitor):
    """Walks statements and expressions, marking value references."""

    role = "stmt"

    def dispatch(self, node: Node):
        match node:
            case File(decls=decls):
                for decl in decls:
                    self.visit(decl)
            case GenDecl() | ValueSpec() | TypeSpec():
                DeclarationVisitor(self.state).visit(node)
            case FuncDecl():
                self.visit_func(node)
            case Block(stmts=stmts):
                self.state.push()
                for stmt in stmts:
                    self.visit(stmt)
                self.state.pop()
            case Assign(rhs=rhs):
                # targets are neither declarations nor uses
                for expr in rhs:
                    self.visit(expr)
            case Ident():
                self.state.reference(node)
            case KeyValue(value=value):
                self.visit(value)
            case CompositeLit(type=type_, elts=elts):
                if not self.state.reference(type_):
                    TypeVisitor(self.state).visit(type_)
                for elt in elts:
                    self.visit(elt)
            case _:
                self.generic_visit(node)

    def visit_func(self, decl: FuncDecl):
        # methods are walked for references but their names are not tracked
        if decl.recv is None:
            self.state.declare(decl.name)
        types = TypeVisitor(self.state)
        types.visit_fields(decl.type_params)
        types.visit(decl.type)
        self.visit(decl.body)


class DeclarationVisitor(_Visitor):
    """Walks const, var and type declarations."""

    role = "decl"

    def dispatch(self, node: Node):
        match node:
            case GenDecl(specs=specs):
                for spec in specs:
                    self.visit(spec)
            case ValueSpec(names=names, type=type_, values=values):
                for name in names:
                    self.state.declare(name)
                statements = StatementVisitor(self.state)
                for value in values:
                    statements.visit(value)
                if not self.state.reference(type_):
                    TypeVisitor(self.state).visit(type_)
            case TypeSpec() | StructType() | ArrayType():
                TypeVisitor(self.state).visit(node)
            case CallExpr():
                StatementVisitor(self.state).visit(node)
            case _:
                self.generic_visit(node)


class TypeVisitor(_Visitor):
    """Walks type expressions, marking type references."""

    role = "type"

    def dispatch(self, node: Node):
        match node:
            case TypeSpec(name=name, type_params=type_params, type=type_):
                self.state.declare(name)
                self.visit_fields(type_params)
                if not self.state.reference(type_):
                    self.visit(type_)
            case StructType(fields=fields):
                self.visit_fields(fields)
            case FuncType(params=params, results=results):
                self.visit_fields(params)
                self.visit_fields(results)
            case ChanType(value=value):
                if not self.state.reference(value):
                    self.visit(value)
            case ArrayType(len=length, elt=elt):
                StatementVisitor(self.state).visit(length)
                if not self.state.reference(elt):
                    self.visit(elt)
            case Ident():
                self.state.reference(node)
            case _:
                self.generic_visit(node)

    def visit_fields(self, fields: List[Field]):
        """Mark the named type of every field; field names are skipped."""
        for field in fields:
            if not self.state.reference(field.type):
                self.visit(field.type)
