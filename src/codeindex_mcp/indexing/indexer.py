"""
Build orchestrator: discovery, cache lookup, batched parsing, index assembly.

Indexing runs on the caller's event loop. Files are grouped by language and
parsed in fixed-size batches; after every batch the orchestrator awaits
``asyncio.sleep(0)`` so other tasks (tool calls answering "still building")
run between batches.

Usage:
    >>> index = asyncio.run(build_index(Path('/repo'), cache=IndexCache()))
    >>> print(f"{index.symbol_count} symbols in {index.file_count} files")
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from codeindex_mcp.core.exceptions import ConfigurationError, GrammarLoadError
from codeindex_mcp.core.interfaces import IParser
from codeindex_mcp.core.models import Symbol
from codeindex_mcp.indexing.cache import IndexCache
from codeindex_mcp.indexing.code_index import CodeIndex
from codeindex_mcp.indexing.discovery import (
    compute_content_hash,
    discover_files,
    group_by_language,
)
from codeindex_mcp.parsers.treesitter_parser import MAX_FILE_SIZE_BYTES, TreeSitterParser

logger = logging.getLogger(__name__)

BATCH_SIZE = 100

ProgressCallback = Callable[[str, Dict[str, Any]], None]


async def build_index(
    root: Path,
    cache: Optional[IndexCache] = None,
    progress_callback: Optional[ProgressCallback] = None,
    batch_size: int = BATCH_SIZE,
    max_file_size: int = MAX_FILE_SIZE_BYTES,
    parser: Optional[IParser] = None,
) -> CodeIndex:
    """
    Build a CodeIndex for the git work tree at ``root``.

    Args:
        root: Directory to index (must be inside a git work tree)
        cache: Optional cache; a record matching the repository's content
            hash is returned without parsing, and fresh builds are stored
        progress_callback: Optional callback for progress updates.
            Called with (event_type, data) where event_type is one of:
            - "files_found": data = {"total": int, "languages": Dict[str, int], "codebase_path": Path}
            - "cache_hit": data = {"symbols": int, "files": int}
            - "language_start": data = {"language": str, "files": int}
            - "grammar_error": data = {"language": str, "files": int, "error": str}
            - "parse_error": data = {"path": str, "error": str}
            - "batch_complete": data = {"processed": int, "total": int}
            - "complete": data = {"symbols": int, "files": int, "elapsed": float}
        batch_size: Files parsed between two yields to the event loop
        max_file_size: Files above this many bytes are skipped
        parser: Parser to use (default: a new TreeSitterParser)

    Returns:
        The built (or cached) index

    Raises:
        ConfigurationError: If batch_size or max_file_size is not positive
        RepositoryError: If ``root`` is not inside a git work tree
    """
    if batch_size < 1:
        raise ConfigurationError(f"batch_size must be >= 1, got {batch_size}")
    if max_file_size < 1:
        raise ConfigurationError(f"max_file_size must be >= 1, got {max_file_size}")

    def emit(event_type: str, data: dict):
        """Emit progress event to callback if provided."""
        if progress_callback:
            progress_callback(event_type, data)

    root = Path(root)
    start_time = time.time()
    logger.info(f"Indexing {root}")

    if parser is None:
        parser = TreeSitterParser(max_file_size=max_file_size)

    # Step 1: Discover files
    files = [path for path in discover_files(root) if parser.can_parse(path)]
    by_language = group_by_language(files)
    languages = {language: len(paths) for language, paths in by_language.items()}
    total = sum(languages.values())
    emit("files_found", {"total": total, "languages": languages, "codebase_path": root})

    # Step 2: Try the cache
    content_hash = None
    if cache is not None:
        content_hash = compute_content_hash(root)
        cached = cache.load(root, content_hash)
        if cached is not None:
            logger.info(
                f"Loaded cached index for {root}: {cached.symbol_count} symbols "
                f"in {cached.file_count} files"
            )
            emit("cache_hit", {"symbols": cached.symbol_count, "files": cached.file_count})
            return cached

    # Step 3: Parse, language by language, in batches
    symbols: List[Symbol] = []
    processed = 0

    for language, paths in by_language.items():
        try:
            parser.load_language(language)
        except GrammarLoadError as e:
            logger.warning(f"{e}; skipping {len(paths)} {language} files")
            processed += len(paths)
            emit("grammar_error", {"language": language, "files": len(paths), "error": e.details})
            continue

        emit("language_start", {"language": language, "files": len(paths)})

        for batch_start in range(0, len(paths), batch_size):
            for path in paths[batch_start:batch_start + batch_size]:
                parsed = parser.parse_file(root, path, language)
                if parsed.is_successful:
                    symbols.extend(parsed.symbols)
                else:
                    emit("parse_error", {"path": path, "error": parsed.error})
                processed += 1

            emit("batch_complete", {"processed": processed, "total": total})
            await asyncio.sleep(0)

    # Step 4: Assemble and cache
    index = CodeIndex(symbols, languages)
    if cache is not None:
        cache.store(root, content_hash, index)

    elapsed = time.time() - start_time
    logger.info(
        f"Indexed {index.symbol_count} symbols in {index.file_count} files "
        f"({elapsed:.1f}s)"
    )
    emit("complete", {"symbols": index.symbol_count, "files": index.file_count, "elapsed": elapsed})
    return index
