"""
Symbol extractor for Rust.

Functions inside an impl block or trait become methods whose parent is the
implemented type (or the trait). Exported means the item carries a
visibility modifier such as ``pub`` or ``pub(crate)``.
"""

from typing import List, Optional

from codeindex_mcp.core.models import Symbol, SymbolKind
from codeindex_mcp.parsers.language_configs import LANGUAGE_CONFIGS
from codeindex_mcp.parsers.walker import (
    build_signature,
    field_text,
    find_ancestor,
    line_of,
    node_text,
    walk_tree,
)

_PARENT_TYPES = LANGUAGE_CONFIGS['rust']['parent_types']


def _is_public(node) -> bool:
    return any(child.type == 'visibility_modifier' for child in node.children)


def _container_name(node, content: bytes) -> Optional[str]:
    """impl Foo / impl<T> Trait for Foo<T> -> Foo; trait Bar -> Bar."""
    container = find_ancestor(node, _PARENT_TYPES)
    if container is None:
        return None
    if container.type == 'trait_item':
        return field_text(container, 'name', content)

    type_node = container.child_by_field_name('type')
    while type_node is not None and type_node.type == 'generic_type':
        type_node = type_node.child_by_field_name('type')
    if type_node is None:
        return None
    return node_text(type_node, content)


def extract(tree, content: bytes, file: str) -> List[Symbol]:
    """Extract symbols from a Rust syntax tree."""

    def item(node, kind: SymbolKind) -> Optional[Symbol]:
        name = field_text(node, 'name', content)
        if not name:
            return None
        return Symbol(
            name=name,
            kind=kind,
            file=file,
            line=line_of(node),
            exported=_is_public(node),
        )

    # fn inside impl/trait is a method; trait declarations without a body too
    def function_item(node):
        name = field_text(node, 'name', content)
        if not name:
            return None
        parent = _container_name(node, content)
        return Symbol(
            name=name,
            kind=SymbolKind.METHOD if parent else SymbolKind.FUNCTION,
            file=file,
            line=line_of(node),
            signature=build_signature(node, content, 'return_type', ' -> '),
            parent=parent,
            exported=_is_public(node),
        )

    return walk_tree(tree.root_node, {
        'function_item': function_item,
        'function_signature_item': function_item,
        'struct_item': lambda node: item(node, SymbolKind.CLASS),
        'enum_item': lambda node: item(node, SymbolKind.ENUM),
        'trait_item': lambda node: item(node, SymbolKind.INTERFACE),
        'type_item': lambda node: item(node, SymbolKind.TYPE),
        'mod_item': lambda node: item(node, SymbolKind.MODULE),
    })
