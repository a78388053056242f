"""Unit tests for the generic tree walker and node helpers."""
import pytest
from tree_sitter_languages import get_parser

from codeindex_mcp.core.models import Symbol, SymbolKind
from codeindex_mcp.parsers.walker import (
    MAX_SIGNATURE_CHARS,
    build_signature,
    field_text,
    find_ancestor,
    find_parent_name,
    is_exported_by,
    line_of,
    node_text,
    truncate_signature,
    walk_tree,
)

SOURCE = b'''def a():
    def b():
        pass

def c(x) -> int:
    pass

class K:
    def m(self):
        pass
'''


@pytest.fixture
def tree():
    return get_parser('python').parse(SOURCE)


def first(root, kind):
    """First node of a kind, found with the walker itself."""
    found = []
    walk_tree(root, {kind: lambda node: found.append(node)})
    return found[0]


class TestWalkTree:

    def test_pre_order_source_order(self, tree):
        def function(node):
            return Symbol(
                name=field_text(node, 'name', SOURCE),
                kind=SymbolKind.FUNCTION,
                file='t.py',
                line=line_of(node),
            )

        symbols = walk_tree(tree.root_node, {'function_definition': function})

        # Parents before children, children before later siblings
        assert [s.name for s in symbols] == ['a', 'b', 'c', 'm']
        assert [s.line for s in symbols] == [1, 2, 5, 9]

    def test_handler_may_return_many_or_none(self, tree):
        def pair(node):
            name = field_text(node, 'name', SOURCE)
            if name != 'K':
                return None
            return [
                Symbol(name=name, kind=SymbolKind.CLASS, file='t.py', line=1),
                Symbol(name=name + '2', kind=SymbolKind.CLASS, file='t.py', line=1),
            ]

        symbols = walk_tree(tree.root_node, {'class_definition': pair, 'function_definition': lambda n: None})
        assert [s.name for s in symbols] == ['K', 'K2']

    def test_no_handlers(self, tree):
        assert walk_tree(tree.root_node, {}) == []

    def test_every_node_visited_once(self, tree):
        seen = []
        walk_tree(tree.root_node, {'identifier': lambda node: seen.append(node_text(node, SOURCE))})
        assert seen == ['a', 'b', 'c', 'x', 'int', 'K', 'm', 'self']


class TestNodeHelpers:

    def test_node_text_and_field_text(self, tree):
        node = first(tree.root_node, 'class_definition')
        assert field_text(node, 'name', SOURCE) == 'K'
        assert field_text(node, 'return_type', SOURCE) is None
        assert node_text(node, SOURCE).startswith('class K:')

    def test_find_ancestor(self, tree):
        method = [n for n in tree.root_node.children if n.type == 'class_definition'][0]
        inner = first(method, 'function_definition')

        assert find_ancestor(inner, ['class_definition']).type == 'class_definition'
        assert find_ancestor(inner, ['while_statement']) is None
        assert find_parent_name(inner, ['class_definition'], SOURCE) == 'K'

    def test_top_level_has_no_parent_name(self, tree):
        outer = first(tree.root_node, 'function_definition')
        assert find_parent_name(outer, ['class_definition'], SOURCE) is None

    def test_build_signature(self, tree):
        functions = [n for n in tree.root_node.children if n.type == 'function_definition']
        assert build_signature(functions[0], SOURCE) == '()'
        assert build_signature(functions[1], SOURCE) == '(x) -> int'

    def test_build_signature_without_parameters(self, tree):
        klass = first(tree.root_node, 'class_definition')
        assert build_signature(klass, SOURCE) is None

    def test_is_exported_by_direct_parent_only(self, tree):
        inner = first(first(tree.root_node, 'function_definition').child_by_field_name('body'), 'function_definition')
        assert is_exported_by(inner, ['block'])
        assert not is_exported_by(inner, ['module'])


class TestTruncateSignature:

    def test_short_signature_unchanged(self):
        assert truncate_signature('(a, b)') == '(a, b)'

    def test_exact_limit_unchanged(self):
        signature = 'x' * MAX_SIGNATURE_CHARS
        assert truncate_signature(signature) == signature

    def test_overflow_is_117_plus_ellipsis(self):
        result = truncate_signature('y' * 200)
        assert result == 'y' * 117 + '...'
        assert len(result) == 120

    def test_none_passthrough(self):
        assert truncate_signature(None) is None
