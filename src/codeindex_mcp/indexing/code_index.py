"""
CodeIndex - immutable, queryable snapshot of a repository's symbols.

The index is built once from the flat symbol stream (in file-processing
order) and never mutated afterwards. All lookup structures hold references
to the same Symbol records:

    by_name        exact name -> symbols, insertion order
    by_name_lower  lower-cased name -> symbols, insertion order
    by_file        relative path -> symbols, source order
    sorted_names   distinct names, lexicographically sorted

Usage:
    >>> index = CodeIndex(symbols, {'python': 3})
    >>> index.search('create', SearchOptions(exported=True))
    >>> print(index.outline('src/app.py'))
    >>> print(index.map())
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from codeindex_mcp.core.exceptions import SearchError
from codeindex_mcp.core.models import SearchOptions, Symbol
from codeindex_mcp.indexing.rendering import (
    format_directory_outline,
    format_file_outline,
    format_map,
    normalize_prefix,
)

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 20
# Prefix/substring scans stop gathering candidates past limit * this factor
OVER_COLLECTION_FACTOR = 3
DEFAULT_OUTLINE_DEPTH = 1
DEFAULT_MAP_DEPTH = 2


class CodeIndex:
    """
    Structural index over one build's symbols.

    Attributes:
        symbols: Every symbol, in file-processing order
        languages: Language id -> number of discovered files
        by_name: Exact name lookup
        by_name_lower: Case-folded name lookup
        by_file: Per-file symbols in source order
        sorted_names: Sorted distinct symbol names
    """

    def __init__(self, symbols: Iterable[Symbol], languages: Optional[Dict[str, int]] = None):
        self.symbols: List[Symbol] = list(symbols)
        self.languages: Dict[str, int] = dict(languages or {})

        self.by_name: Dict[str, List[Symbol]] = {}
        self.by_name_lower: Dict[str, List[Symbol]] = {}
        self.by_file: Dict[str, List[Symbol]] = {}

        for symbol in self.symbols:
            self.by_name.setdefault(symbol.name, []).append(symbol)
            self.by_name_lower.setdefault(symbol.name.lower(), []).append(symbol)
            self.by_file.setdefault(symbol.file, []).append(symbol)

        self.sorted_names: List[str] = sorted(self.by_name)

    @property
    def symbol_count(self) -> int:
        return len(self.symbols)

    @property
    def file_count(self) -> int:
        """Number of distinct files contributing at least one symbol."""
        return len(self.by_file)

    # =========================================================================
    # Search
    # =========================================================================

    def search(self, query: str, options: Optional[SearchOptions] = None) -> List[Symbol]:
        """
        Find symbols by name with a four-tier cascade.

        Tiers, in order: exact name, case-insensitive exact name,
        case-insensitive prefix, case-insensitive substring. Filters are
        applied at every tier and the first tier with at least one
        filtered result wins, so a filter can push the answer down to a
        broader tier even when a better tier had raw matches.

        Args:
            query: Symbol name or fragment
            options: Kind/scope/exported filters and result limit

        Returns:
            At most options.limit symbols

        Raises:
            SearchError: If the limit is not positive
        """
        options = options or SearchOptions()
        if options.limit < 1:
            raise SearchError(f"limit must be >= 1, got {options.limit}")

        # 1. Exact match
        results = self._apply_filters(self.by_name.get(query, []), options)
        if results:
            return results

        # 2. Case-insensitive exact match
        lower = query.lower()
        results = self._apply_filters(self.by_name_lower.get(lower, []), options)
        if results:
            return results

        # 3. Prefix match
        candidates = self._scan_names(lambda name: name.startswith(lower), options.limit)
        results = self._apply_filters(candidates, options)
        if results:
            return results

        # 4. Substring match
        candidates = self._scan_names(lambda name: lower in name, options.limit)
        return self._apply_filters(candidates, options)

    def _scan_names(self, predicate: Callable[[str], bool], limit: int) -> List[Symbol]:
        """Gather symbols whose lower-cased name matches, in sorted-name order."""
        bound = limit * OVER_COLLECTION_FACTOR
        candidates: List[Symbol] = []
        for name in self.sorted_names:
            if predicate(name.lower()):
                candidates.extend(self.by_name[name])
            if len(candidates) > bound:
                break
        return candidates

    @staticmethod
    def _apply_filters(symbols: List[Symbol], options: SearchOptions) -> List[Symbol]:
        return [s for s in symbols if options.matches(s)][:options.limit]

    # =========================================================================
    # Outline / Map
    # =========================================================================

    def outline(self, path: str, depth: int = DEFAULT_OUTLINE_DEPTH) -> str:
        """
        Render the structure of a file, or the files of a directory.

        Args:
            path: Indexed file path, or a directory prefix ('' or '.' for root)
            depth: For directories, how many path levels below it to list

        Returns:
            Outline text
        """
        file_path = path[2:] if path.startswith('./') else path
        file_symbols = self.by_file.get(file_path)
        if file_symbols is not None:
            return format_file_outline(file_path, file_symbols)
        return format_directory_outline(normalize_prefix(path), self.by_file, depth)

    def map(self, path: Optional[str] = None, depth: int = DEFAULT_MAP_DEPTH) -> str:
        """
        Render a bird's-eye overview of the indexed tree.

        Args:
            path: Optional subtree prefix (default: repository root)
            depth: Directory depth bound

        Returns:
            Map text with a header line and one line per directory
        """
        return format_map(
            self.by_file,
            symbol_count=self.symbol_count,
            languages=self.languages,
            prefix=normalize_prefix(path),
            depth=depth,
        )

    def __repr__(self) -> str:
        return (
            f"CodeIndex(symbols={self.symbol_count}, files={self.file_count}, "
            f"languages={self.languages})"
        )
