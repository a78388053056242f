"""
CodeIndex MCP Indexing Module.

This module builds and queries the structural symbol index:
- build_index: Async build orchestrator (discovery, cache, batched parsing)
- CodeIndex: Immutable index with tiered search, outline and map
- IndexCache: Content-hash-addressed on-disk cache

Usage:
    from codeindex_mcp.indexing import build_index, IndexCache

    index = asyncio.run(build_index(Path("/path/to/repo"), cache=IndexCache()))
    for symbol in index.search("createUser"):
        print(symbol.file, symbol.line)
"""

from codeindex_mcp.indexing.code_index import (
    CodeIndex,
    DEFAULT_SEARCH_LIMIT,
    OVER_COLLECTION_FACTOR,
)

from codeindex_mcp.indexing.cache import (
    IndexCache,
    CACHE_VERSION,
    DEFAULT_CACHE_DIR,
)

from codeindex_mcp.indexing.discovery import (
    discover_files,
    group_by_language,
    compute_content_hash,
)

from codeindex_mcp.indexing.indexer import (
    build_index,
    BATCH_SIZE,
)

__all__ = [
    # Index
    'CodeIndex',
    'DEFAULT_SEARCH_LIMIT',
    'OVER_COLLECTION_FACTOR',
    # Cache
    'IndexCache',
    'CACHE_VERSION',
    'DEFAULT_CACHE_DIR',
    # Discovery
    'discover_files',
    'group_by_language',
    'compute_content_hash',
    # Build
    'build_index',
    'BATCH_SIZE',
]
