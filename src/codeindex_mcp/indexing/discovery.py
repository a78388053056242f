"""
Git-backed file discovery and repository content hashing.

Discovery lists tracked plus untracked-but-not-ignored files, so .gitignore
is honoured without reimplementing it. The content hash combines the HEAD
commit with the uncommitted-change summary; it keys the index cache.

A missing git executable or a root outside any work tree raises
RepositoryError, which is fatal for a build.
"""

import hashlib
import logging
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from codeindex_mcp.core.exceptions import RepositoryError
from codeindex_mcp.parsers.language_configs import get_language_for_file

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 30


def _run_git(root: Path, *args: str, check: bool = True) -> Optional[str]:
    """
    Run a git command in ``root`` and return its stdout.

    Returns None for a non-zero exit when ``check`` is False.

    Raises:
        RepositoryError: If git is unavailable, times out, or (with
            ``check``) exits non-zero
    """
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=root, capture_output=True, text=True, timeout=GIT_TIMEOUT_SECONDS,
        )
    except FileNotFoundError as e:
        raise RepositoryError(f"git executable not found: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise RepositoryError(f"git {args[0]} timed out in {root}") from e
    except OSError as e:
        raise RepositoryError(f"Cannot run git in {root}: {e}") from e

    if result.returncode != 0:
        if check:
            raise RepositoryError(
                f"Not a git repository: {root}. "
                f"code indexing requires a git repo for file discovery. "
                f"({result.stderr.strip()})"
            )
        return None
    return result.stdout


def discover_files(root: Path) -> List[str]:
    """
    List repository files relative to ``root``, in git's order.

    Args:
        root: Directory inside a git work tree

    Returns:
        Tracked and untracked, non-ignored file paths

    Raises:
        RepositoryError: If ``root`` is not inside a git work tree
    """
    output = _run_git(root, "ls-files", "--cached", "--others", "--exclude-standard", "-z")
    files = [path for path in output.split("\0") if path]
    logger.debug(f"git ls-files found {len(files)} files in {root}")
    return files


def group_by_language(files: List[str]) -> Dict[str, List[str]]:
    """
    Bucket paths by language id, skipping unsupported extensions.

    Languages appear in order of their first file; files keep their order.
    """
    by_language: Dict[str, List[str]] = {}
    for path in files:
        language = get_language_for_file(path)
        if language is not None:
            by_language.setdefault(language, []).append(path)
    return by_language


def _status_paths(status: str) -> List[str]:
    """Paths from ``git status --porcelain -z`` output, renames included."""
    paths: List[str] = []
    entries = iter(status.split("\0"))
    for entry in entries:
        if len(entry) < 4:
            continue
        paths.append(entry[3:])
        if entry[0] in ("R", "C"):
            next(entries, None)  # Original path of a rename/copy
    return paths


def compute_content_hash(root: Path) -> str:
    """
    Digest of the repository's committed state plus uncommitted changes.

    Covers the HEAD commit (empty for an unborn branch), the porcelain
    status listing, and the size and mtime of every listed path, so that a
    second edit to an already-modified file still changes the hash.

    Raises:
        RepositoryError: If ``root`` is not inside a git work tree
    """
    toplevel = Path(_run_git(root, "rev-parse", "--show-toplevel").strip())
    head = (_run_git(root, "rev-parse", "HEAD", check=False) or "").strip()
    status = _run_git(root, "status", "--porcelain", "-z", "--untracked-files=all")

    digest = hashlib.sha256()
    digest.update(head.encode())
    digest.update(b"\0")
    digest.update(status.encode())

    for path in _status_paths(status):
        try:
            stat = (toplevel / path).stat()
            digest.update(f"\0{path}:{stat.st_size}:{stat.st_mtime_ns}".encode())
        except OSError:
            digest.update(f"\0{path}:missing".encode())

    return digest.hexdigest()
