"""Scanner tests on hand-built syntax trees.

These exercise the visitors and the forward-reference reconciliation without
going through the Go parser.
"""
from deadcode.analyzer.nodes import (
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
    Package,
    Position,
    StructType,
    TypeSpec,
    ValueSpec,
)
from deadcode.analyzer.scanner import Reporter, Scanner, reconcile, scan_package
from deadcode.analyzer.scope import Report


def ident(name, line, column=1, filename='a.go'):
    return Ident(name, Position(filename, line * 1000 + column, line, column))


def const(name, line, value=None, filename='a.go'):
    values = [value] if value is not None else [Other('int_literal')]
    return GenDecl('const', [ValueSpec([ident(name, line, 7, filename)], values=values)])


def var(name, line, value=None, type_=None, filename='a.go'):
    values = [value] if value is not None else []
    return GenDecl('var', [ValueSpec([ident(name, line, 5, filename)], type=type_, values=values)])


def typedef(name, line, type_, filename='a.go'):
    return GenDecl('type', [TypeSpec(ident(name, line, 6, filename), type_)])


def func(name, line, *stmts, params=(), results=(), recv=None, filename='a.go'):
    return FuncDecl(
        name=ident(name, line, 6, filename),
        type=FuncType(params=list(params), results=list(results)),
        body=Block(list(stmts)),
        recv=recv,
    )


def use(name, line, filename='a.go'):
    """``_ = name``"""
    return Assign(lhs=[ident('_', line, 2, filename)], rhs=[ident(name, line, 6, filename)])


def call(name, line, filename='a.go'):
    return Other('expression_statement', [CallExpr(ident(name, line, 2, filename))])


def package(*files, entry=False, name='p'):
    return Package(name=name, files=list(files), entry=entry)


def source(*decls, filename='a.go', name='p'):
    return File(filename=filename, package=name, decls=list(decls))


def names(reports):
    return [(r.name, r.pos.line) for r in reports]


class TestBasics:
    def test_empty_package(self):
        assert scan_package(package()) == []
        assert scan_package(package(source())) == []

    def test_unused_constant_is_reported(self):
        pkg = package(source(const('unused', 3)))
        assert names(scan_package(pkg)) == [('unused', 3)]

    def test_blank_var_marks_constant(self):
        pkg = package(source(const('unused', 3), var('_', 5, value=ident('unused', 5, 9))))
        assert scan_package(pkg) == []

    def test_blank_var_in_another_file_marks_constant(self):
        pkg = package(
            source(const('unused', 3)),
            source(var('_', 3, value=ident('unused', 3, 9, 'b.go')), filename='b.go'),
        )
        assert scan_package(pkg) == []

    def test_deterministic_output(self):
        files = [
            source(const('b', 9), const('a', 4), func('f', 6)),
            source(const('c', 1, filename='z.go'), filename='z.go'),
        ]
        first = scan_package(package(*files))
        second = scan_package(package(*reversed(files)))
        assert first == second
        assert first == sorted(first)
        assert names(first) == [('a', 4), ('f', 6), ('b', 9), ('c', 1)]


class TestForwardReferences:
    def test_same_file_forward_reference(self):
        pkg = package(source(func('run', 3, use('later', 4)), const('later', 7)))
        assert names(scan_package(pkg)) == [('run', 3)]

    def test_forward_reference_is_unresolved_during_the_walk(self):
        scanner = Scanner(package())
        reports, unresolved = scanner.scan_file(source(func('Run', 3, use('later', 4)), const('later', 7)))
        assert names(reports) == [('later', 7)]
        assert unresolved == {'later'}

    def test_cross_file_reference(self):
        pkg = package(
            source(func('Run', 3, call('helper', 4))),
            source(func('helper', 3, filename='b.go'), filename='b.go'),
        )
        assert scan_package(pkg) == []

    def test_unresolved_name_hides_unrelated_symbol(self):
        # a local shares the name of an unresolved reference elsewhere
        pkg = package(
            source(func('Run', 3, GenDecl('var', [ValueSpec([ident('len', 4)])]))),
            source(func('Other', 3, call('len', 4, 'b.go'), filename='b.go'), filename='b.go'),
        )
        assert scan_package(pkg) == []


class TestEntryPoints:
    def test_init_and_main_in_entry_package(self):
        pkg = package(source(func('init', 3), func('main', 5)), entry=True, name='main')
        assert scan_package(pkg) == []

    def test_main_in_library_is_reported(self):
        pkg = package(source(func('init', 3), func('main', 5)))
        assert names(scan_package(pkg)) == [('main', 5)]

    def test_exported_function_in_entry_package(self):
        pkg = package(source(func('main', 3), func('Exported', 5)), entry=True, name='main')
        assert names(scan_package(pkg)) == [('Exported', 5)]

    def test_exported_function_in_library(self):
        pkg = package(source(func('Exported', 5)))
        assert scan_package(pkg) == []

    def test_local_init_and_main_are_reported(self):
        body = GenDecl('const', [
            ValueSpec([ident('main', 4)], values=[Other('int_literal')]),
            ValueSpec([ident('init', 5)], values=[Other('int_literal')]),
        ])
        pkg = package(source(func('Run', 3, body)), entry=True, name='main')
        assert names(scan_package(pkg)) == [('Run', 3), ('main', 4), ('init', 5)]

    def test_method_names_are_not_tracked(self):
        recv = [Field([ident('s', 3, 7)], Other('pointer_type', [ident('server', 3, 10)]))]
        method = func('stop', 3, use('timeout', 4), recv=recv)
        pkg = package(source(typedef('Server', 1, StructType()), method, const('timeout', 7)))
        assert scan_package(pkg) == []


class TestScopes:
    def test_shadowing(self):
        inner = GenDecl('var', [ValueSpec([ident('x', 6)], values=[Other('int_literal')])])
        pkg = package(source(var('x', 3, value=Other('int_literal')), func('Run', 5, inner, use('x', 7))))
        assert names(scan_package(pkg)) == [('x', 3)]

    def test_shadowed_inner_declaration_reported(self):
        inner = GenDecl('var', [ValueSpec([ident('x', 6)], values=[Other('int_literal')])])
        pkg = package(source(
            var('x', 3, value=Other('int_literal')),
            func('Run', 5, use('x', 6), Block([inner])),
        ))
        assert names(scan_package(pkg)) == [('x', 6)]

    def test_nested_block_declaration_is_local(self):
        pkg = package(source(func('Run', 3, Block([const('limit', 5)]), use('limit', 7))))
        reports = scan_package(pkg)
        # the use after the block resolves nowhere, so reconciliation drops it
        assert reports == []

    def test_assignment_targets_are_not_uses(self):
        assign = Assign(lhs=[ident('total', 4)], rhs=[Other('int_literal')])
        pkg = package(source(var('total', 1, value=Other('int_literal')), func('Run', 3, assign)))
        assert names(scan_package(pkg)) == [('total', 1)]

    def test_parameter_types_are_references(self):
        params = [Field([ident('req', 3, 10)], ident('request', 3, 14))]
        results = [Field([], Other('pointer_type', [ident('response', 3, 23)]))]
        pkg = package(source(
            typedef('request', 1, ident('int', 1, 14)),
            typedef('response', 2, ident('int', 2, 15)),
            func('Handle', 3, params=params, results=results),
        ))
        assert scan_package(pkg) == []


class TestTypes:
    def test_struct_field_type_marks_type(self):
        struct = StructType([Field([ident('f', 2)], ident('T', 2, 4))])
        pkg = package(source(typedef('T', 1, ident('int', 1, 8)), typedef('S', 2, struct)))
        assert scan_package(pkg) == []

    def test_unexported_struct_still_marks_field_types(self):
        struct = StructType([Field([ident('f', 2)], ident('T', 2, 4))])
        pkg = package(source(typedef('T', 1, ident('int', 1, 8)), typedef('s', 2, struct)))
        assert names(scan_package(pkg)) == [('s', 2)]

    def test_field_names_are_not_declared(self):
        struct = StructType([Field([ident('unused', 2)], ident('int', 2, 9))])
        pkg = package(source(typedef('S', 1, struct)))
        assert scan_package(pkg) == []

    def test_defined_type_marks_underlying(self):
        pkg = package(source(typedef('celsius', 1, ident('int', 1, 14)), typedef('Temp', 2, ident('celsius', 2, 11))))
        assert scan_package(pkg) == []

    def test_array_length_and_element(self):
        grid = ArrayType(len=ident('size', 3, 11), elt=ArrayType(len=None, elt=ident('cell', 3, 18)))
        pkg = package(source(const('size', 1), typedef('cell', 2, ident('int', 2, 11)), typedef('Grid', 3, grid)))
        assert scan_package(pkg) == []

    def test_channel_and_function_types(self):
        handler = FuncType(params=[Field([], ident('request', 4, 15))], results=[Field([], ident('response', 4, 24))])
        pkg = package(source(
            typedef('event', 1, ident('int', 1, 12)),
            typedef('request', 2, ident('int', 2, 14)),
            typedef('response', 3, ident('int', 3, 15)),
            typedef('Handler', 4, handler),
            typedef('Stream', 5, ChanType(ident('event', 5, 18))),
        ))
        assert scan_package(pkg) == []

    def test_var_type_marks_type(self):
        pkg = package(source(typedef('counter', 1, ident('int', 1, 14)), func('Run', 2, var('c', 3, type_=ident('counter', 3, 7)), use('c', 4))))
        assert scan_package(pkg) == []

    def test_map_type_in_var_is_walked(self):
        map_type = Other('map_type', [ident('string', 3, 11), ident('entry', 3, 18)])
        pkg = package(source(typedef('entry', 1, ident('int', 1, 12)), var('Index', 3, type_=map_type)))
        assert scan_package(pkg) == []


class TestCompositeLiterals:
    def test_literal_type_is_a_reference(self):
        pkg = package(source(typedef('point', 1, StructType()), func('Run', 3, use_literal(CompositeLit(ident('point', 4, 6))))))
        assert scan_package(pkg) == []

    def test_keys_are_not_references(self):
        literal = CompositeLit(ident('pair', 5, 6), [KeyValue(ident('left', 5, 11), ident('value', 5, 17))])
        pkg = package(source(
            typedef('pair', 1, StructType([Field([ident('left', 1, 15)], Other('interface_type'))])),
            func('left', 2),
            const('value', 3),
            func('Run', 4, use_literal(literal)),
        ))
        assert names(scan_package(pkg)) == [('left', 2)]

    def test_elided_element_literals(self):
        literal = CompositeLit(
            ArrayType(len=None, elt=ident('pair', 5, 9)),
            [CompositeLit(None, [CompositeLit(ident('item', 6, 4))])],
        )
        pkg = package(source(
            typedef('pair', 1, StructType()),
            typedef('item', 2, StructType()),
            func('Run', 4, use_literal(literal)),
        ))
        assert scan_package(pkg) == []


def use_literal(literal):
    return Assign(lhs=[ident('_', 4, 2)], rhs=[literal])


class TestReporter:
    def test_deduplicates_by_position(self):
        report = Report(Position('a.go', 10, 1, 11), 'x')
        reporter = Reporter()
        reporter.extend([report, Report(report.pos, 'x')])
        assert len(reporter) == 1

    def test_sorted(self):
        reporter = Reporter()
        reporter.add(Report(Position('b.go', 1, 1, 2), 'b'))
        reporter.add(Report(Position('a.go', 9, 2, 1), 'a'))
        assert [r.name for r in reporter.sorted()] == ['a', 'b']

    def test_reconcile_drops_unresolved_names(self):
        reports = [Report(Position('a.go', 1, 1, 1), 'kept'), Report(Position('a.go', 2, 2, 1), 'dropped')]
        assert reconcile(reports, {'dropped', 'other'}) == reports[:1]


class TestTrace:
    def test_trace_receives_visited_nodes(self):
        lines = []
        scan_package(package(source(const('x', 1))), trace=lines.append)
        assert 'stmt: File' in lines
        assert 'decl: ValueSpec' in lines
