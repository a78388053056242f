"""
Plain-text renderings of search results, outlines and maps.

Every function here is a pure view over symbols already held by a
CodeIndex; calling one twice on the same index yields identical text.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from codeindex_mcp.core.models import Symbol

OUTLINE_EXPORT_PREVIEW = 8
MAP_EXPORT_PREVIEW = 6
_ROOT_ALIASES = ('', '.', './')


def normalize_prefix(path: Optional[str]) -> str:
    """
    Turn a user-supplied directory into a path prefix ending in '/'.

    The repository root ('', '.', './' or None) becomes the empty prefix.
    """
    if path is None or path in _ROOT_ALIASES:
        return ''
    if path.startswith('./'):
        path = path[2:]
    return path if path.endswith('/') else path + '/'


def _preview(names: List[str], limit: int) -> str:
    """First ``limit`` names, then a ', +N more' suffix."""
    text = ", ".join(names[:limit])
    if len(names) > limit:
        text += f", +{len(names) - limit} more"
    return text


def _top_level_exports(symbols: List[Symbol]) -> List[str]:
    return [s.name for s in symbols if s.is_top_level and s.exported]


def format_search_results(symbols: List[Symbol]) -> str:
    """One line per hit: kind, qualified name, signature, location, export marker."""
    lines = []
    for s in symbols:
        exported = "  exported" if s.exported else ""
        lines.append(
            f"{s.kind.value:<10} {s.qualified_name}{s.signature or ''}  "
            f"{s.file}:{s.line}{exported}"
        )
    return "\n".join(lines)


def format_file_outline(file: str, symbols: List[Symbol]) -> str:
    """
    Outline of a single file.

    Each top-level symbol is followed by the nested symbols whose parent
    names it. Nested symbols whose parent is not a top-level symbol of this
    file are listed at the end under their bracketed parent name.
    """
    lines = [file]

    top_level = [s for s in symbols if s.is_top_level]
    by_parent: Dict[str, List[Symbol]] = {}
    for s in symbols:
        if not s.is_top_level:
            by_parent.setdefault(s.parent, []).append(s)

    shown = set()
    for s in top_level:
        exported = "  exported" if s.exported else ""
        lines.append(f"  {s.kind.value} {s.name}{s.signature or ''}{exported}")

        if s.name in by_parent and s.name not in shown:
            shown.add(s.name)
            for child in by_parent[s.name]:
                lines.append(f"    {child.kind.value} {child.name}{child.signature or ''}")

    for parent, children in by_parent.items():
        if parent in shown:
            continue
        lines.append(f"  [{parent}]")
        for child in children:
            lines.append(f"    {child.kind.value} {child.name}{child.signature or ''}")

    return "\n".join(lines)


def format_directory_outline(prefix: str, by_file: Dict[str, List[Symbol]], depth: int) -> str:
    """
    Outline of a directory: one line per file at most ``depth`` levels below it.

    Args:
        prefix: Normalized directory prefix ('' for the root)
        by_file: Per-file symbols
        depth: Path levels to include (1 = direct children only)
    """
    lines = [prefix or './']

    files = sorted(
        f for f in by_file
        if f.startswith(prefix) and len(f[len(prefix):].split('/')) <= depth
    )
    for file in files:
        symbols = by_file[file]
        relative = file[len(prefix):]
        exports = _top_level_exports(symbols)
        if exports:
            lines.append(f"  {relative} - {_preview(exports, OUTLINE_EXPORT_PREVIEW)}")
        else:
            count = len(symbols)
            lines.append(f"  {relative} - {count} symbol{'s' if count != 1 else ''}")

    if not files:
        lines.append("  (no indexed files found)")

    return "\n".join(lines)


@dataclass
class _DirStats:
    files: int = 0
    exports: List[str] = field(default_factory=list)


def format_map(
    by_file: Dict[str, List[Symbol]],
    symbol_count: int,
    languages: Dict[str, int],
    prefix: str = '',
    depth: int = 2,
) -> str:
    """
    Bird's-eye overview of the directories under ``prefix``.

    A file is counted in its own directory, or in its ancestor at ``depth``
    levels when it sits deeper. Directories are listed in path order,
    indented by their level; files directly under the prefix are summed
    into a trailing line.

    Args:
        by_file: Per-file symbols
        symbol_count: Total symbols in the index
        languages: Language id -> discovered file count
        prefix: Normalized subtree prefix ('' for the root)
        depth: Directory depth bound

    Returns:
        Map text
    """
    tally = " ".join(
        f"{language}({count})"
        for language, count in sorted(languages.items(), key=lambda item: (-item[1], item[0]))
    )
    lines = [
        f"Files: {len(by_file)} indexed | Symbols: {symbol_count} | Languages: {tally}",
        "",
    ]

    stats: Dict[str, _DirStats] = {}
    root_files = 0
    for file, symbols in by_file.items():
        if not file.startswith(prefix):
            continue
        directories = file[len(prefix):].split('/')[:-1]
        if not directories:
            root_files += 1
            continue
        directories = directories[:depth]
        if not directories:
            continue

        for level in range(1, len(directories) + 1):
            stats.setdefault('/'.join(directories[:level]) + '/', _DirStats())
        own = stats['/'.join(directories) + '/']
        own.files += 1
        own.exports.extend(_top_level_exports(symbols))

    for directory in sorted(stats):
        entry = stats[directory]
        segments = directory.rstrip('/').split('/')
        indent = "  " * (len(segments) - 1)
        line = f"{indent}{segments[-1]}/ - {entry.files} files"
        exports = list(dict.fromkeys(entry.exports))
        if exports:
            line += f", {len(exports)} exports ({_preview(exports, MAP_EXPORT_PREVIEW)})"
        lines.append(line)

    if root_files:
        lines.append(f"({root_files} root-level files)")

    return "\n".join(lines)
