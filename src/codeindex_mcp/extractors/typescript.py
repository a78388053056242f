"""
Symbol extractor for the JavaScript family (TypeScript, TSX, JavaScript).

The three grammars share node kinds for every declaration this extractor
cares about; TypeScript-only kinds (interfaces, type aliases, enums) simply
never occur in JavaScript trees.

Exported means the declaration is a direct child of an export statement.
"""

from typing import List, Optional

from codeindex_mcp.core.models import Symbol, SymbolKind
from codeindex_mcp.parsers.language_configs import LANGUAGE_CONFIGS
from codeindex_mcp.parsers.walker import (
    field_text,
    find_parent_name,
    is_exported_by,
    line_of,
    node_text,
    truncate_signature,
    walk_tree,
)

_PARENT_TYPES = LANGUAGE_CONFIGS['typescript']['parent_types']
_EXPORT_TYPES = ('export_statement',)

# Values that turn a binding into a function: const f = () => {}
_FUNCTION_VALUE_TYPES = (
    'arrow_function',
    'function_expression',
    'function',  # Older grammars name function expressions 'function'
    'generator_function',
)


def _signature(node, content: bytes) -> Optional[str]:
    """Parameter list plus return type annotation, as written."""
    params = node.child_by_field_name('parameters')
    if params is None:
        params = node.child_by_field_name('parameter')  # x => x
    if params is None:
        return None
    signature = node_text(params, content)
    returns = node.child_by_field_name('return_type')
    if returns is not None:
        text = node_text(returns, content)
        # type_annotation already includes its leading colon
        signature += text if text.startswith(':') else ': ' + text
    return truncate_signature(signature)


def _is_top_level(node) -> bool:
    parent = node.parent
    if parent is None:
        return False
    if parent.type == 'export_statement':
        parent = parent.parent
    return parent is not None and parent.type == 'program'


def extract(tree, content: bytes, file: str) -> List[Symbol]:
    """Extract symbols from a JavaScript/TypeScript syntax tree."""

    def declaration(node, kind: SymbolKind, signature: Optional[str] = None) -> Optional[Symbol]:
        name = field_text(node, 'name', content)
        if not name:
            return None
        return Symbol(
            name=name,
            kind=kind,
            file=file,
            line=line_of(node),
            signature=signature,
            exported=is_exported_by(node, _EXPORT_TYPES),
        )

    # function myFunc() {} / function* gen() {}
    def function_declaration(node):
        return declaration(node, SymbolKind.FUNCTION, _signature(node, content))

    # const myFunc = () => {}, const x = 123, var y = function() {}
    def variable_declaration(node):
        if not _is_top_level(node):
            return None
        exported = is_exported_by(node, _EXPORT_TYPES)
        symbols: List[Symbol] = []
        for child in node.named_children:
            if child.type != 'variable_declarator':
                continue
            name_node = child.child_by_field_name('name')
            if name_node is None or name_node.type != 'identifier':
                continue  # Destructuring patterns bind no single name
            value = child.child_by_field_name('value')
            if value is None:
                continue

            if value.type in _FUNCTION_VALUE_TYPES:
                kind = SymbolKind.FUNCTION
                signature = _signature(value, content)
            elif value.type == 'class':
                kind, signature = SymbolKind.CLASS, None
            else:
                kind, signature = SymbolKind.VARIABLE, None

            symbols.append(Symbol(
                name=node_text(name_node, content),
                kind=kind,
                file=file,
                line=line_of(node),
                signature=signature,
                exported=exported,
            ))
        return symbols

    def class_declaration(node):
        return declaration(node, SymbolKind.CLASS)

    # Methods are never exported on their own
    def method_definition(node):
        name = field_text(node, 'name', content)
        if not name:
            return None
        return Symbol(
            name=name,
            kind=SymbolKind.METHOD,
            file=file,
            line=line_of(node),
            signature=_signature(node, content),
            parent=find_parent_name(node, _PARENT_TYPES, content),
            exported=False,
        )

    def interface_declaration(node):
        return declaration(node, SymbolKind.INTERFACE)

    def type_alias_declaration(node):
        return declaration(node, SymbolKind.TYPE)

    def enum_declaration(node):
        return declaration(node, SymbolKind.ENUM)

    return walk_tree(tree.root_node, {
        'function_declaration': function_declaration,
        'generator_function_declaration': function_declaration,
        'lexical_declaration': variable_declaration,
        'variable_declaration': variable_declaration,
        'class_declaration': class_declaration,
        'abstract_class_declaration': class_declaration,
        'method_definition': method_definition,
        'interface_declaration': interface_declaration,
        'type_alias_declaration': type_alias_declaration,
        'enum_declaration': enum_declaration,
    })
