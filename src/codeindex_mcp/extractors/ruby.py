"""
Symbol extractor for Ruby.

Ruby has no export keyword, so classes, modules, top-level methods and
singleton methods (``def self.x`` or inside ``class << self``) count as
exported; ordinary instance methods do not.
"""

import re
from typing import List, Optional, Tuple

from codeindex_mcp.core.models import Symbol, SymbolKind
from codeindex_mcp.parsers.language_configs import LANGUAGE_CONFIGS
from codeindex_mcp.parsers.walker import (
    field_text,
    find_parent_name,
    line_of,
    node_text,
    truncate_signature,
    walk_tree,
)

_PARENT_TYPES = LANGUAGE_CONFIGS['ruby']['parent_types']
_LINE_BREAK = re.compile(r'\s*\n\s*')


def _enclosing_scope(node, content: bytes) -> Tuple[Optional[str], bool]:
    """
    Find the class/module a method belongs to.

    Returns:
        Tuple of (container name or None, whether a ``class << self`` block
        was crossed on the way up)
    """
    in_singleton = False
    current = node.parent
    while current is not None:
        if current.type == 'singleton_class':
            in_singleton = True
        elif current.type in _PARENT_TYPES:
            return field_text(current, 'name', content), in_singleton
        current = current.parent
    return None, in_singleton


def _signature(node, content: bytes) -> Optional[str]:
    params = node.child_by_field_name('parameters')
    if params is None:
        return None
    return truncate_signature(_LINE_BREAK.sub(' ', node_text(params, content)))


def extract(tree, content: bytes, file: str) -> List[Symbol]:
    """Extract symbols from a Ruby syntax tree."""

    def method(node):
        name = field_text(node, 'name', content)
        if not name:
            return None
        parent, in_singleton = _enclosing_scope(node, content)
        is_method = parent is not None or in_singleton
        return Symbol(
            name=name,
            kind=SymbolKind.METHOD if is_method else SymbolKind.FUNCTION,
            file=file,
            line=line_of(node),
            signature=_signature(node, content),
            parent=parent,
            exported=in_singleton or parent is None,
        )

    # def self.create(attrs)
    def singleton_method(node):
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
            exported=True,
        )

    def container(node, kind: SymbolKind) -> Optional[Symbol]:
        name = field_text(node, 'name', content)
        if not name:
            return None
        return Symbol(
            name=name,
            kind=kind,
            file=file,
            line=line_of(node),
            parent=find_parent_name(node, _PARENT_TYPES, content),
            exported=True,
        )

    return walk_tree(tree.root_node, {
        'method': method,
        'singleton_method': singleton_method,
        'class': lambda node: container(node, SymbolKind.CLASS),
        'module': lambda node: container(node, SymbolKind.MODULE),
    })
