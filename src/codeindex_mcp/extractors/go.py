"""Symbol extractor for Go. Exported means the name starts with an uppercase letter."""

from typing import List, Optional

from codeindex_mcp.core.models import Symbol, SymbolKind
from codeindex_mcp.parsers.walker import (
    build_signature,
    field_text,
    line_of,
    node_text,
    walk_tree,
)

# Wrappers around the receiver's named type: *T, T[K], (T)
_RECEIVER_WRAPPERS = ('pointer_type', 'generic_type', 'parenthesized_type')


def _is_exported(name: str) -> bool:
    return name[:1].isupper()


def _receiver_type_name(node, content: bytes) -> Optional[str]:
    """Base type name of a method receiver, e.g. Server for (s *Server)."""
    receiver = node.child_by_field_name('receiver')
    if receiver is None:
        return None
    for param in receiver.named_children:
        if param.type != 'parameter_declaration':
            continue
        type_node = param.child_by_field_name('type')
        while type_node is not None and type_node.type in _RECEIVER_WRAPPERS:
            if type_node.type == 'generic_type':
                type_node = type_node.child_by_field_name('type')
            elif type_node.named_children:
                type_node = type_node.named_children[0]
            else:
                type_node = None
        if type_node is not None:
            return node_text(type_node, content)
    return None


def extract(tree, content: bytes, file: str) -> List[Symbol]:
    """Extract symbols from a Go syntax tree."""

    def function_declaration(node):
        name = field_text(node, 'name', content)
        if not name:
            return None
        return Symbol(
            name=name,
            kind=SymbolKind.FUNCTION,
            file=file,
            line=line_of(node),
            signature=build_signature(node, content, 'result', ' '),
            exported=_is_exported(name),
        )

    def method_declaration(node):
        name = field_text(node, 'name', content)
        if not name:
            return None
        return Symbol(
            name=name,
            kind=SymbolKind.METHOD,
            file=file,
            line=line_of(node),
            signature=build_signature(node, content, 'result', ' '),
            parent=_receiver_type_name(node, content),
            exported=_is_exported(name),
        )

    # type ( Server struct{...}; Handler interface{...}; ID = string )
    def type_declaration(node):
        symbols: List[Symbol] = []
        for child in node.named_children:
            if child.type not in ('type_spec', 'type_alias'):
                continue
            name = field_text(child, 'name', content)
            if not name:
                continue

            type_node = child.child_by_field_name('type')
            type_kind = type_node.type if type_node is not None else None
            if type_kind == 'interface_type':
                kind = SymbolKind.INTERFACE
            elif type_kind == 'struct_type':
                kind = SymbolKind.CLASS
            else:
                kind = SymbolKind.TYPE

            symbols.append(Symbol(
                name=name,
                kind=kind,
                file=file,
                line=line_of(child),
                exported=_is_exported(name),
            ))
        return symbols

    return walk_tree(tree.root_node, {
        'function_declaration': function_declaration,
        'method_declaration': method_declaration,
        'type_declaration': type_declaration,
    })
