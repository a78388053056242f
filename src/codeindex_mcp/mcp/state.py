"""Session state management for MCP server."""
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from codeindex_mcp.indexing.cache import IndexCache
    from codeindex_mcp.indexing.code_index import CodeIndex


@dataclass
class MCPSessionState:
    """
    Singleton state for MCP server session.

    Holds the one swappable index handle. Queries read ``index`` without
    locking; the only writes are the transitions below, each made under
    ``_lock`` so a reader sees either the old snapshot or the new one.
    """
    index: Optional["CodeIndex"] = None
    codebase_path: Optional[Path] = None
    indexing: bool = False
    error: Optional[str] = None
    progress: Dict[str, Any] = field(default_factory=dict)
    cache: Optional["IndexCache"] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def is_loaded(self) -> bool:
        """Check if an index is currently available."""
        return self.index is not None

    @property
    def status(self) -> str:
        """One of 'building', 'ready', 'error', 'empty'."""
        if self.indexing:
            return "building"
        if self.index is not None:
            return "ready"
        if self.error is not None:
            return "error"
        return "empty"

    def begin_build(self, codebase_path: Path) -> bool:
        """
        Mark a build as started, discarding the previous snapshot.

        Returns:
            False if a build is already in flight (nothing changes)
        """
        with self._lock:
            if self.indexing:
                return False
            self.indexing = True
            self.index = None
            self.error = None
            self.progress = {}
            self.codebase_path = codebase_path
            return True

    def finish_build(self, index: "CodeIndex") -> None:
        """Publish a freshly built index."""
        with self._lock:
            self.index = index
            self.indexing = False

    def fail_build(self, message: str) -> None:
        """Record a fatal build error; queries report it until the next build."""
        with self._lock:
            self.error = message
            self.indexing = False

    def record_progress(self, event_type: str, data: Dict[str, Any]) -> None:
        if event_type in ("files_found", "batch_complete"):
            self.progress = {
                "processed": data.get("processed", 0),
                "total": data["total"],
            }

    def get_index_or_error(self) -> Tuple[Optional["CodeIndex"], Optional[str]]:
        """
        Return the current index, or the reason there is none.

        Returns:
            (index, None) when ready, otherwise (None, user-facing message)
        """
        index = self.index
        if index is not None:
            return index, None
        if self.indexing:
            return None, "Index is still building. Try again in a moment."
        if self.error is not None:
            return None, f"Index failed: {self.error}"
        return None, "No index available. Are you in a git repository?"


_state: Optional[MCPSessionState] = None


def get_state() -> MCPSessionState:
    """Get or create the singleton state instance."""
    global _state
    if _state is None:
        _state = MCPSessionState()
    return _state


def reset_state() -> None:
    """Reset the singleton state (useful for testing)."""
    global _state
    _state = None
