"""
On-disk cache for built indexes.

Each indexed root has one JSON record holding the format version, the
repository content hash it was built from, the full symbol stream and the
language tally. A record is used only when both version and hash match the
current values; anything else is a miss and the caller rebuilds.

The cache lives outside the repository, so writing it never changes the
repository's own status and therefore never changes the content hash.

Typical usage:
    cache = IndexCache()
    index = cache.load(root, content_hash)
    if index is None:
        index = ...  # full build
        cache.store(root, content_hash, index)
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from codeindex_mcp.core.exceptions import CacheError
from codeindex_mcp.core.models import Symbol
from codeindex_mcp.indexing.code_index import CodeIndex

logger = logging.getLogger(__name__)

# Bump whenever extractor output changes for the same source
CACHE_VERSION = 1

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "codeindex_mcp"


class IndexCache:
    """Content-hash-addressed index cache, one JSON file per indexed root."""

    def __init__(self, cache_dir: Optional[Path] = None):
        """
        Initialize the cache.

        Args:
            cache_dir: Directory to store records. Defaults to
                ~/.cache/codeindex_mcp
        """
        self.cache_dir = Path(cache_dir) if cache_dir else DEFAULT_CACHE_DIR

        # Silent failure if no permissions; store() will fail the same way
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            pass

    def load(self, root: Path, content_hash: str) -> Optional[CodeIndex]:
        """
        Return the cached index for ``root`` if it matches ``content_hash``.

        Read errors, corrupt records and version or hash mismatches are all
        misses.

        Args:
            root: Indexed root directory
            content_hash: Freshly computed repository content hash

        Returns:
            CodeIndex on a hit, None on a miss
        """
        cache_file = self._cache_path(root)
        if not cache_file.exists():
            logger.debug(f"Cache miss for {root}: no record")
            return None

        try:
            data = json.loads(cache_file.read_text(encoding="utf-8"))
            return self._deserialize(data, content_hash)
        except CacheError as e:
            logger.debug(f"Cache miss for {root}: {e}")
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError, OSError) as e:
            logger.debug(f"Cache miss for {root}: unreadable record ({e})")
        return None

    def store(self, root: Path, content_hash: str, index: CodeIndex) -> bool:
        """
        Save an index for ``root``.

        Write failures are logged and ignored; the cache is not critical.

        Returns:
            True if the record was written
        """
        cache_file = self._cache_path(root)
        try:
            payload = self._serialize(index, content_hash)
            payload["workspace"] = str(Path(root).resolve())
            cache_file.write_text(json.dumps(payload), encoding="utf-8")
        except OSError as e:
            logger.debug(f"Could not write cache for {root}: {e}")
            return False
        logger.info(f"Cached index for {root} ({index.symbol_count} symbols)")
        return True

    def clear(self, root: Optional[Path] = None) -> int:
        """
        Clear the cache.

        Args:
            root: If specified, clears only that root's record.
                  If None, clears all records.

        Returns:
            Number of cache files deleted.
        """
        targets = [self._cache_path(root)] if root is not None else self.cache_dir.glob("index_*.json")
        deleted = 0
        for cache_file in targets:
            try:
                cache_file.unlink()
                deleted += 1
            except OSError:
                pass
        return deleted

    def _cache_path(self, root: Path) -> Path:
        """Calculate the cache file path for an indexed root."""
        key = hashlib.sha256(
            str(Path(root).resolve()).encode()
        ).hexdigest()[:16]
        return self.cache_dir / f"index_{key}.json"

    def _serialize(self, index: CodeIndex, content_hash: str) -> Dict[str, Any]:
        return {
            "version": CACHE_VERSION,
            "hash": content_hash,
            "symbols": [symbol.to_dict() for symbol in index.symbols],
            "languages": index.languages,
        }

    def _deserialize(self, data: Dict[str, Any], content_hash: str) -> CodeIndex:
        """Rebuild a CodeIndex from a record, validating version and hash first."""
        if not isinstance(data, dict):
            raise CacheError("record is not an object")
        if data.get("version") != CACHE_VERSION:
            raise CacheError(f"version {data.get('version')} != {CACHE_VERSION}")
        if data.get("hash") != content_hash:
            raise CacheError("content hash changed")

        raw_symbols = data.get("symbols")
        raw_languages = data.get("languages")
        if not isinstance(raw_symbols, list):
            raise CacheError("symbols is not a list")
        if not isinstance(raw_languages, dict):
            raise CacheError("languages is not an object")

        symbols = [self._symbol_from_record(item) for item in raw_symbols]
        languages = {str(lang): int(count) for lang, count in raw_languages.items()}
        return CodeIndex(symbols, languages)

    @staticmethod
    def _symbol_from_record(item: Any) -> Symbol:
        if not isinstance(item, dict):
            raise CacheError("symbol record is not an object")
        for key in ("name", "file"):
            if not isinstance(item.get(key), str):
                raise CacheError(f"symbol {key} is not a string")
        for key in ("signature", "parent"):
            if item.get(key) is not None and not isinstance(item[key], str):
                raise CacheError(f"symbol {key} is not a string")
        if not isinstance(item.get("line"), int):
            raise CacheError("symbol line is not an integer")
        return Symbol.from_dict(item)
