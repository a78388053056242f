"""
MCP Server for CodeIndex - structural symbol search over a git repository.

This module exposes the in-memory symbol index through the Model Context
Protocol using stdio transport. The first build of the working directory
starts when a session opens; tools answer "still building" until it lands.

Usage:
    codeindex-mcp  # Run as stdio MCP server

Tools:
    - code_search: Find symbol definitions by name (exact, case-insensitive,
      prefix, substring)
    - code_outline: Structure of a file, or files of a directory
    - code_map: Bird's-eye overview of directories, languages and exports
    - reindex: Rebuild the index (optionally for another directory)
    - index_status: Current build state and index statistics
    - list_supported_languages: List supported file extensions
"""

from typing import Optional, List, Dict, Any, Annotated, Callable
from contextlib import asynccontextmanager
from pathlib import Path
import asyncio
import logging
import sys

from fastmcp import FastMCP, Context
from fastmcp.exceptions import ToolError
from pydantic import Field

from codeindex_mcp.core.exceptions import CodeIndexException
from codeindex_mcp.core.models import SearchOptions, SymbolKind
from codeindex_mcp.indexing.cache import IndexCache
from codeindex_mcp.indexing.code_index import (
    CodeIndex,
    DEFAULT_MAP_DEPTH,
    DEFAULT_OUTLINE_DEPTH,
    DEFAULT_SEARCH_LIMIT,
)
from codeindex_mcp.indexing.indexer import build_index
from codeindex_mcp.indexing.rendering import format_search_results
from codeindex_mcp.mcp.state import MCPSessionState, get_state
from codeindex_mcp.parsers.language_configs import EXTENSION_MAP, get_supported_extensions

logger = logging.getLogger(__name__)

# Derived supported extensions list (lightweight)
SUPPORTED_EXTENSIONS = sorted(get_supported_extensions())
BUILD_CANCELLED = "Index build was cancelled"
VALID_KINDS = [kind.value for kind in SymbolKind]


def _get_cache(state: MCPSessionState) -> IndexCache:
    if state.cache is None:
        state.cache = IndexCache()
    return state.cache


def _create_progress_callback(
    state: MCPSessionState,
    ctx: Optional[Context] = None,
    pending: Optional[List[asyncio.Task]] = None,
) -> Callable:
    """Create a progress callback that tracks state and reports to the MCP client."""
    loop = asyncio.get_running_loop()

    def callback(event_type: str, data: dict):
        state.record_progress(event_type, data)
        if ctx is None:
            return

        progress = 0
        message = ""

        if event_type == "files_found":
            progress = 5
            message = f"Found {data['total']} files..."
        elif event_type == "cache_hit":
            progress = 100
            message = f"Loaded {data['symbols']} symbols from cache"
        elif event_type == "batch_complete":
            # Scale parsing progress (5-95%)
            pct = data['processed'] / data['total'] if data['total'] > 0 else 1
            progress = 5 + int(pct * 90)
            message = f"Indexing {data['processed']}/{data['total']} files..."
        elif event_type == "complete":
            progress = 100
            message = "Indexing complete!"

        if progress > 0:
            task = loop.create_task(ctx.report_progress(progress, 100, message))
            if pending is not None:
                pending.append(task)

    return callback


async def _run_build(codebase_path: Path, ctx: Optional[Context] = None) -> Optional[CodeIndex]:
    """
    Build the index for a session whose build was already begun.

    Fatal errors are stored on the state rather than raised, so the
    session-start task never dies with an unobserved exception.
    """
    state = get_state()
    pending: List[asyncio.Task] = []
    try:
        index = await build_index(
            codebase_path,
            cache=_get_cache(state),
            progress_callback=_create_progress_callback(state, ctx, pending),
        )
    except CodeIndexException as e:
        logger.error(f"Index failed for {codebase_path}: {e}")
        state.fail_build(str(e))
        return None
    except asyncio.CancelledError:
        logger.warning(f"Index build for {codebase_path} was cancelled")
        state.fail_build(BUILD_CANCELLED)
        raise
    except Exception as e:
        logger.error(f"Unexpected error indexing {codebase_path}: {e}", exc_info=True)
        state.fail_build(str(e))
        return None
    finally:
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    state.finish_build(index)
    return index


@asynccontextmanager
async def session_lifespan(server: FastMCP):
    """Start indexing the working directory as soon as a session opens."""
    state = get_state()
    codebase_path = Path.cwd()
    task = None
    if state.begin_build(codebase_path):
        task = asyncio.create_task(_run_build(codebase_path))
    try:
        yield {}
    finally:
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            # a task cancelled before its first step never reaches _run_build
            if state.indexing:
                state.fail_build(BUILD_CANCELLED)


# Initialize FastMCP server
mcp = FastMCP(
    name="CodeIndex",
    instructions=(
        "Structural code index: find where symbols are defined, outline files "
        "and directories, and map an unfamiliar repository"
    ),
    lifespan=session_lifespan,
)


def _require_index() -> CodeIndex:
    """Return the loaded index or raise a ToolError explaining why there is none."""
    index, error = get_state().get_index_or_error()
    if index is None:
        raise ToolError(error)
    return index


@mcp.tool(
    name="code_search",
    description=(
        "Find symbol definitions (functions, classes, types, methods, interfaces, enums) by name. "
        "Supports exact, case-insensitive, prefix, and substring matching. "
        "Use this BEFORE grep or read when looking for where something is defined."
    )
)
def code_search(
    query: Annotated[str, Field(description="Symbol name or pattern to search for")],
    kind: Annotated[
        Optional[str],
        Field(description=f"Filter by kind: {', '.join(VALID_KINDS)}")
    ] = None,
    scope: Annotated[
        Optional[str],
        Field(description="File path prefix filter, e.g. 'src/api/'")
    ] = None,
    exported: Annotated[
        Optional[bool],
        Field(description="Only show symbols whose exported/public flag equals this value")
    ] = None,
    limit: Annotated[
        int,
        Field(description="Max results (default 20)", ge=1, le=500)
    ] = DEFAULT_SEARCH_LIMIT,
) -> str:
    """Search the index and render one line per hit."""
    index = _require_index()

    kind_filter = None
    if kind:
        try:
            kind_filter = SymbolKind.from_string(kind)
        except ValueError:
            raise ToolError(f"Invalid kind '{kind}'. Must be one of: {VALID_KINDS}")

    options = SearchOptions(kind=kind_filter, scope=scope, exported=exported, limit=limit)
    try:
        results = index.search(query, options)
    except CodeIndexException as e:
        raise ToolError(f"Search failed: {str(e)}")

    if not results:
        return f'No symbols found matching "{query}"'
    return format_search_results(results)


@mcp.tool(
    name="code_outline",
    description=(
        "Show the structure of a file (all symbols with hierarchy) or "
        "directory (files with their top-level exports). "
        "Use this to understand what a module contains WITHOUT reading the full file."
    )
)
def code_outline(
    path: Annotated[str, Field(description="File or directory path, relative to the repository root")],
    depth: Annotated[
        int,
        Field(description="For directories: how many levels deep (default 1)", ge=1)
    ] = DEFAULT_OUTLINE_DEPTH,
) -> str:
    """Outline a file or directory."""
    return _require_index().outline(path, depth)


@mcp.tool(
    name="code_map",
    description=(
        "Get a bird's-eye overview of the codebase: directory structure, "
        "file counts, languages, and key exports per directory. "
        "Use this FIRST when orienting in an unfamiliar codebase."
    )
)
def code_map(
    path: Annotated[
        Optional[str],
        Field(description="Subtree to map (default: repo root)")
    ] = None,
    depth: Annotated[
        int,
        Field(description="Directory depth (default 2)", ge=1)
    ] = DEFAULT_MAP_DEPTH,
) -> str:
    """Map the indexed tree."""
    return _require_index().map(path, depth)


@mcp.tool(
    name="reindex",
    description="""Rebuild the code index from scratch.

Discards the current index first; queries report "still building" until the
new one is ready. An unchanged repository is restored from the on-disk cache.
Rejected while another build is running."""
)
async def reindex(
    path: Annotated[
        Optional[str],
        Field(description="Directory to index (default: the current codebase)")
    ] = None,
    ctx: Context = None
) -> Dict[str, Any]:
    """Rebuild the index and report its statistics."""
    state = get_state()

    if path:
        codebase_path = Path(path).resolve()
        if not codebase_path.exists():
            raise ToolError(f"Path does not exist: {codebase_path}")
        if not codebase_path.is_dir():
            raise ToolError(f"Path is not a directory: {codebase_path}")
    else:
        codebase_path = state.codebase_path or Path.cwd()

    if not state.begin_build(codebase_path):
        raise ToolError("Index is already building")

    index = await _run_build(codebase_path, ctx)
    if index is None:
        raise ToolError(f"Index failed: {state.error}")

    return {
        "success": True,
        "message": f"Indexed {index.symbol_count} symbols in {index.file_count} files",
        "codebase_path": str(codebase_path),
        "symbols": index.symbol_count,
        "files": index.file_count,
        "languages": index.languages,
    }


@mcp.tool(
    name="index_status",
    description="Get the build state (building, ready, error, empty) and statistics of the code index."
)
def index_status() -> Dict[str, Any]:
    """Get index state and statistics."""
    state = get_state()
    index = state.index

    return {
        "status": state.status,
        "codebase_path": str(state.codebase_path) if state.codebase_path else None,
        "error": state.error,
        "progress": dict(state.progress) if state.indexing else None,
        "stats": {
            "symbols": index.symbol_count,
            "files": index.file_count,
            "languages": index.languages,
        } if index is not None else None,
    }


@mcp.tool(
    name="list_supported_languages",
    description="List all programming languages and file extensions supported by CodeIndex."
)
def list_supported_languages() -> Dict[str, Any]:
    """List supported file extensions and languages."""
    # Group extensions by language
    languages: Dict[str, List[str]] = {}
    for ext, lang in EXTENSION_MAP.items():
        languages.setdefault(lang, []).append(ext)

    for lang in languages:
        languages[lang] = sorted(languages[lang])

    return {
        "extensions": SUPPORTED_EXTENSIONS,
        "languages": languages
    }


def main():  # pragma: no cover
    """Run the MCP server."""
    # stdout carries the stdio transport
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run()


if __name__ == "__main__":
    main()
