"""
Symbol extractor for Python.

Functions and methods whose names start with an underscore are private by
convention and are not recorded at all. A symbol counts as exported when its
name has no leading underscore and it is not a method.
"""

from typing import List

from codeindex_mcp.core.models import Symbol, SymbolKind
from codeindex_mcp.parsers.language_configs import LANGUAGE_CONFIGS
from codeindex_mcp.parsers.walker import (
    build_signature,
    field_text,
    find_parent_name,
    line_of,
    node_text,
    walk_tree,
)

_PARENT_TYPES = LANGUAGE_CONFIGS['python']['parent_types']


def _is_module_level(assignment) -> bool:
    statement = assignment.parent
    return (
        statement is not None
        and statement.type == 'expression_statement'
        and statement.parent is not None
        and statement.parent.type == 'module'
    )


def extract(tree, content: bytes, file: str) -> List[Symbol]:
    """Extract symbols from a Python syntax tree."""

    def function_definition(node):
        name = field_text(node, 'name', content)
        if not name or name.startswith('_'):
            return None

        parent = find_parent_name(node, _PARENT_TYPES, content)
        is_method = parent is not None

        return Symbol(
            name=name,
            kind=SymbolKind.METHOD if is_method else SymbolKind.FUNCTION,
            file=file,
            line=line_of(node),
            signature=build_signature(node, content, 'return_type', ' -> '),
            parent=parent,
            exported=not is_method,
        )

    def class_definition(node):
        name = field_text(node, 'name', content)
        if not name:
            return None
        parent = find_parent_name(node, _PARENT_TYPES, content)
        return Symbol(
            name=name,
            kind=SymbolKind.CLASS,
            file=file,
            line=line_of(node),
            parent=parent,
            exported=not name.startswith('_'),
        )

    # handler = lambda req: ...   /   MAX_RETRIES = 5
    def assignment(node):
        if not _is_module_level(node):
            return None
        left = node.child_by_field_name('left')
        right = node.child_by_field_name('right')
        if left is None or left.type != 'identifier' or right is None:
            return None

        name = node_text(left, content)
        if right.type == 'lambda':
            kind = SymbolKind.FUNCTION
        elif name.isupper():
            kind = SymbolKind.VARIABLE
        else:
            return None

        return Symbol(
            name=name,
            kind=kind,
            file=file,
            line=line_of(node),
            exported=not name.startswith('_'),
        )

    return walk_tree(tree.root_node, {
        'function_definition': function_definition,
        'class_definition': class_definition,
        'assignment': assignment,
    })
