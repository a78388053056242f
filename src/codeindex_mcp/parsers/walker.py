"""
Generic syntax tree traversal and node helpers shared by every extractor.

walk_tree performs a depth-first, pre-order traversal with a tree cursor,
visiting siblings left to right, and calls the handler registered for each
node's kind. Handlers never influence descent; extractors control what is
recorded only through the set of kinds they register.
"""

from typing import Callable, Dict, Iterable, List, Optional, Union

from codeindex_mcp.core.models import Symbol

MAX_SIGNATURE_CHARS = 120

HandlerResult = Union[Symbol, List[Symbol], None]
Handler = Callable[[object], HandlerResult]


def walk_tree(root, handlers: Dict[str, Handler]) -> List[Symbol]:
    """
    Walk the tree under ``root`` and collect symbols from matching node kinds.

    Args:
        root: Tree-sitter node to start from (usually tree.root_node)
        handlers: Mapping from node kind to a handler returning zero,
            one or many symbols

    Returns:
        Symbols in source order
    """
    symbols: List[Symbol] = []
    cursor = root.walk()

    while True:
        handler = handlers.get(cursor.node.type)
        if handler is not None:
            result = handler(cursor.node)
            if isinstance(result, list):
                symbols.extend(result)
            elif result is not None:
                symbols.append(result)

        if cursor.goto_first_child():
            continue
        if cursor.goto_next_sibling():
            continue

        # Climb until a later sibling exists; reaching the root ends the walk
        while True:
            if not cursor.goto_parent():
                return symbols
            if cursor.goto_next_sibling():
                break


def node_text(node, content: bytes) -> str:
    """
    Extract text content from a node.

    Args:
        node: Tree-sitter node
        content: File content as bytes

    Returns:
        Node text as string
    """
    try:
        return content[node.start_byte:node.end_byte].decode('utf-8')
    except UnicodeDecodeError:
        return content[node.start_byte:node.end_byte].decode('utf-8', errors='ignore')


def field_text(node, field_name: str, content: bytes) -> Optional[str]:
    """Text of the child stored under ``field_name``, or None."""
    child = node.child_by_field_name(field_name)
    if child is None:
        return None
    return node_text(child, content)


def line_of(node) -> int:
    """1-indexed line of the node's first character."""
    return node.start_point[0] + 1


def find_ancestor(node, types: Iterable[str]):
    """
    Return the nearest ancestor whose kind is in ``types``.

    Walks parent links up to the root; no match yields None.
    """
    wanted = set(types)
    current = node.parent
    while current is not None:
        if current.type in wanted:
            return current
        current = current.parent
    return None


def find_parent_name(node, types: Iterable[str], content: bytes) -> Optional[str]:
    """
    Name of the nearest enclosing class/module-like construct.

    Args:
        node: Node whose container is wanted
        types: Node kinds that count as containers
        content: File content as bytes

    Returns:
        The container's ``name`` field text, or None when there is no
        container or it is anonymous
    """
    ancestor = find_ancestor(node, types)
    if ancestor is None:
        return None
    return field_text(ancestor, 'name', content)


def truncate_signature(signature: Optional[str]) -> Optional[str]:
    """Clip a signature to MAX_SIGNATURE_CHARS, ending in an ellipsis marker."""
    if signature is None:
        return None
    if len(signature) > MAX_SIGNATURE_CHARS:
        return signature[:MAX_SIGNATURE_CHARS - 3] + "..."
    return signature


def build_signature(
    node,
    content: bytes,
    return_field: str = 'return_type',
    separator: str = ' -> ',
    params_field: str = 'parameters',
) -> Optional[str]:
    """
    Concatenate parameter and return type text exactly as written.

    Args:
        node: Declaration node
        content: File content as bytes
        return_field: Field holding the return/result type
        separator: Text placed between parameters and return type
        params_field: Field holding the parameter list

    Returns:
        Truncated signature, or None when the node has no parameter list
    """
    params = node.child_by_field_name(params_field)
    if params is None:
        return None
    signature = node_text(params, content)
    returns = node.child_by_field_name(return_field)
    if returns is not None:
        signature += separator + node_text(returns, content)
    return truncate_signature(signature)


def is_exported_by(node, export_types: Iterable[str]) -> bool:
    """True if the node is a direct child of one of ``export_types``."""
    parent = node.parent
    return parent is not None and parent.type in set(export_types)
