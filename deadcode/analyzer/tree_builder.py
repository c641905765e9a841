"""Lowering of tree-sitter Go parse trees into scanner nodes.

Only the shapes the scanner reasons about get dedicated node kinds. Every other
construct becomes an ``Other`` node holding its lowered children, so that
references nested anywhere inside it are still visited.
"""
from typing import Callable, Dict, List, Optional
from tree_sitter import Node

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
    Other,
    Position,
    StructType,
    TypeSpec,
    ValueSpec,
)

# Identifiers that may refer to a package-level declaration
REFERENCE_NODES = {'identifier', 'type_identifier'}

# Nodes that never refer to a declaration of the scanned package
OPAQUE_NODES = {
    'comment',
    'field_identifier',
    'package_identifier',
    'label_name',
    'qualified_type',  # pkg.T lives in another package
    'import_declaration',
    'package_clause',
}

DECLARATION_NODES = {'const_declaration', 'var_declaration', 'type_declaration'}
FUNCTION_NODES = {'function_declaration', 'method_declaration'}
PARAMETER_NODES = {
    'parameter_declaration',
    'variadic_parameter_declaration',
    'type_parameter_declaration',
}


class SyntaxTreeBuilder:
    """Builds the node model of one Go source file."""

    def __init__(self, filename: str):
        self.filename = filename
        self._handlers: Dict[str, Callable[[Node], object]] = {
            'block': self.block,
            'const_declaration': self.gen_decl,
            'var_declaration': self.gen_decl,
            'type_declaration': self.gen_decl,
            'assignment_statement': self.assignment,
            'short_var_declaration': self.assignment,
            'range_clause': self.assignment,
            'receive_statement': self.assignment,
            'type_switch_statement': self.type_switch,
            'keyed_element': self.keyed_element,
            'literal_element': self.literal_element,
            'literal_value': self.literal_value,
            'composite_literal': self.composite_literal,
            'call_expression': self.call,
            'selector_expression': self.selector,
            'func_literal': self.func_literal,
            'parameter_list': self.parameter_list,
            'type_parameter_list': self.parameter_list,
            'struct_type': self.struct_type,
            'function_type': self.func_type,
            'channel_type': self.chan_type,
            'array_type': self.array_type,
            'slice_type': self.array_type,
            'implicit_length_array_type': self.array_type,
        }

    def build(self, root: Node) -> File:
        """Lower a ``source_file`` node.

        Imports and the package clause carry no declarations of interest.
        """
        package = ""
        decls = []
        for child in root.named_children:
            if child.type == 'package_clause':
                package = self._package_name(child)
            elif child.type in FUNCTION_NODES:
                decls.append(self.func_decl(child))
            elif child.type in DECLARATION_NODES:
                decls.append(self.gen_decl(child))
        return File(filename=self.filename, package=package, decls=decls)

    def lower(self, node: Optional[Node]):
        """Lower any expression, statement or type node."""
        if node is None or node.type in OPAQUE_NODES:
            return None
        if node.type in REFERENCE_NODES:
            return self.ident(node)
        handler = self._handlers.get(node.type)
        if handler is not None:
            return handler(node)
        return Other(kind=node.type, children=self.lower_all(node.named_children))

    def lower_all(self, nodes: List[Node]) -> list:
        lowered = (self.lower(node) for node in nodes)
        return [node for node in lowered if node is not None]

    # -- leaves -----------------------------------------------------------

    def position(self, node: Node) -> Position:
        row, column = node.start_point[0], node.start_point[1]
        return Position(self.filename, node.start_byte, row + 1, column + 1)

    def ident(self, node: Node) -> Ident:
        return Ident(name=_text(node), pos=self.position(node))

    def _package_name(self, node: Node) -> str:
        for child in node.named_children:
            if child.type == 'package_identifier':
                return _text(child)
        return ""

    # -- declarations -----------------------------------------------------

    def func_decl(self, node: Node) -> FuncDecl:
        receiver = node.child_by_field_name('receiver')
        body = node.child_by_field_name('body')
        return FuncDecl(
            name=self.ident(node.child_by_field_name('name')),
            type=self.func_type(node),
            body=self.block(body) if body is not None else None,
            recv=self.parameters(receiver) if receiver is not None else None,
            type_params=self.parameters(node.child_by_field_name('type_parameters')),
        )

    def gen_decl(self, node: Node) -> GenDecl:
        keyword = node.type.split('_')[0]
        return GenDecl(keyword=keyword, specs=self._specs(node))

    def _specs(self, node: Node) -> list:
        specs = []
        for child in node.named_children:
            if child.type in ('const_spec', 'var_spec'):
                specs.append(self.value_spec(child))
            elif child.type in ('type_spec', 'type_alias'):
                specs.append(self.type_spec(child))
            elif child.type == 'var_spec_list':
                specs.extend(self._specs(child))
        return specs

    def value_spec(self, node: Node) -> ValueSpec:
        return ValueSpec(
            names=[self.ident(name) for name in node.children_by_field_name('name')],
            type=self.lower(node.child_by_field_name('type')),
            values=self.expressions(node.child_by_field_name('value')),
        )

    def type_spec(self, node: Node) -> TypeSpec:
        return TypeSpec(
            name=self.ident(node.child_by_field_name('name')),
            type=self.lower(node.child_by_field_name('type')),
            type_params=self.parameters(node.child_by_field_name('type_parameters')),
        )

    def parameters(self, node: Optional[Node]) -> List[Field]:
        """Fields of a parameter, receiver or type parameter list."""
        if node is None:
            return []
        return [self.field(child) for child in node.named_children if child.type in PARAMETER_NODES]

    def field(self, node: Node) -> Field:
        return Field(
            names=[self.ident(name) for name in node.children_by_field_name('name')],
            type=self.lower(node.child_by_field_name('type')),
        )

    def parameter_list(self, node: Node) -> Other:
        # interface method signatures and the like
        return Other(kind=node.type, children=self.parameters(node))

    # -- statements -------------------------------------------------------

    def block(self, node: Node) -> Block:
        return Block(stmts=self.statements(node))

    def statements(self, node: Node) -> list:
        stmts = []
        for child in node.named_children:
            if child.type == 'statement_list':
                stmts.extend(self.statements(child))
            else:
                stmt = self.lower(child)
                if stmt is not None:
                    stmts.append(stmt)
        return stmts

    def assignment(self, node: Node) -> Assign:
        return Assign(
            lhs=self.expressions(node.child_by_field_name('left')),
            rhs=self.expressions(node.child_by_field_name('right')),
        )

    def type_switch(self, node: Node) -> Other:
        """``switch v := x.(type)``: the alias is an assignment target."""
        alias = node.child_by_field_name('alias')
        value = node.child_by_field_name('value')
        skipped = {n.id for n in (alias, value) if n is not None}
        rest = [child for child in node.named_children if child.id not in skipped]
        children = []
        if value is not None:
            children.append(Assign(lhs=self.expressions(alias), rhs=self.expressions(value)))
        children.extend(self.lower_all(rest))
        return Other(kind=node.type, children=children)

    def expressions(self, node: Optional[Node]) -> list:
        if node is None:
            return []
        if node.type == 'expression_list':
            return self.lower_all(node.named_children)
        lowered = self.lower(node)
        return [lowered] if lowered is not None else []

    # -- expressions ------------------------------------------------------

    def call(self, node: Node) -> CallExpr:
        arguments = node.child_by_field_name('arguments')
        return CallExpr(
            fun=self.lower(node.child_by_field_name('function')),
            args=self.lower_all(arguments.named_children) if arguments is not None else [],
        )

    def selector(self, node: Node) -> Other:
        # the selected field or method is resolved against the operand
        return Other(kind=node.type, children=self.lower_all([node.child_by_field_name('operand')]))

    def composite_literal(self, node: Node) -> CompositeLit:
        body = node.child_by_field_name('body')
        return CompositeLit(
            type=self.lower(node.child_by_field_name('type')),
            elts=self.lower_all(body.named_children) if body is not None else [],
        )

    def literal_value(self, node: Node) -> CompositeLit:
        """Elided literal such as the inner ``{1, 2}`` of ``[][]int{{1, 2}}``."""
        return CompositeLit(type=None, elts=self.lower_all(node.named_children))

    def literal_element(self, node: Node):
        children = self.lower_all(node.named_children)
        if len(children) == 1:
            return children[0]
        return Other(kind=node.type, children=children)

    def keyed_element(self, node: Node) -> KeyValue:
        key = node.child_by_field_name('key')
        value = node.child_by_field_name('value')
        if key is None and value is None:
            named = node.named_children
            key, value = named[0], named[-1]
        return KeyValue(key=self.lower(key), value=self.lower(value))

    def func_literal(self, node: Node) -> Other:
        body = node.child_by_field_name('body')
        children = [self.func_type(node)]
        if body is not None:
            children.append(self.block(body))
        return Other(kind=node.type, children=children)

    # -- types ------------------------------------------------------------

    def func_type(self, node: Node) -> FuncType:
        """Signature of a function declaration, literal or type."""
        result = node.child_by_field_name('result')
        if result is None:
            results = []
        elif result.type == 'parameter_list':
            results = self.parameters(result)
        else:
            results = [Field(names=[], type=self.lower(result))]
        return FuncType(params=self.parameters(node.child_by_field_name('parameters')), results=results)

    def struct_type(self, node: Node) -> StructType:
        fields = []
        for child in node.named_children:
            if child.type == 'field_declaration_list':
                fields.extend(
                    self.field(decl) for decl in child.named_children
                    if decl.type == 'field_declaration'
                )
        return StructType(fields=fields)

    def chan_type(self, node: Node) -> ChanType:
        return ChanType(value=self.lower(node.child_by_field_name('value')))

    def array_type(self, node: Node) -> ArrayType:
        return ArrayType(
            len=self.lower(node.child_by_field_name('length')),
            elt=self.lower(node.child_by_field_name('element')),
        )


def _text(node: Node) -> str:
    return node.text.decode('utf-8', errors='replace') if node.text else ""
