"""
CodeIndex MCP - Model Context Protocol server for structural code search.

A lightweight MCP server that indexes the symbols of a git repository with
tree-sitter and answers name searches, file/directory outlines and
repository maps, so AI assistants can navigate a codebase without reading
whole files.

Usage:
    # As an MCP server
    codeindex-mcp

    # Programmatic usage
    from codeindex_mcp import build_index
    index = asyncio.run(build_index(Path("/path/to/repo")))
    print(index.map())
"""

__version__ = "0.1.0"
__author__ = "CodeIndex Contributors"


# Lazy imports to avoid loading tree-sitter grammars at import time
def __getattr__(name: str):
    """Lazy import heavy modules only when accessed."""
    if name == "build_index":
        from codeindex_mcp.indexing.indexer import build_index

        return build_index
    elif name == "CodeIndex":
        from codeindex_mcp.indexing.code_index import CodeIndex

        return CodeIndex
    elif name == "IndexCache":
        from codeindex_mcp.indexing.cache import IndexCache

        return IndexCache
    elif name == "TreeSitterParser":
        from codeindex_mcp.parsers.treesitter_parser import TreeSitterParser

        return TreeSitterParser
    elif name == "Symbol":
        from codeindex_mcp.core.models import Symbol

        return Symbol
    elif name == "SymbolKind":
        from codeindex_mcp.core.models import SymbolKind

        return SymbolKind
    elif name == "ParsedFile":
        from codeindex_mcp.core.models import ParsedFile

        return ParsedFile
    elif name == "SearchOptions":
        from codeindex_mcp.core.models import SearchOptions

        return SearchOptions
    elif name == "IParser":
        from codeindex_mcp.core.interfaces import IParser

        return IParser
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    "__author__",
    "build_index",
    "CodeIndex",
    "IndexCache",
    "TreeSitterParser",
    "Symbol",
    "SymbolKind",
    "ParsedFile",
    "SearchOptions",
    "IParser",
]
