"""
Per-language symbol extractors.

Each extractor is a plain function ``extract(tree, content, file)`` that walks
a parsed tree and returns the symbols it recognises. EXTRACTORS maps every
language id from parsers.language_configs to its extractor.
"""

from typing import Callable, Dict, List, Optional

from codeindex_mcp.core.models import Symbol
from codeindex_mcp.extractors import go, python, ruby, rust, typescript

SymbolExtractor = Callable[[object, bytes, str], List[Symbol]]

EXTRACTORS: Dict[str, SymbolExtractor] = {
    'typescript': typescript.extract,
    'tsx': typescript.extract,
    'javascript': typescript.extract,
    'python': python.extract,
    'go': go.extract,
    'rust': rust.extract,
    'ruby': ruby.extract,
}


def get_extractor(language: str) -> Optional[SymbolExtractor]:
    """Return the extractor for a language id, or None if there is none."""
    return EXTRACTORS.get(language)


__all__ = ['EXTRACTORS', 'SymbolExtractor', 'get_extractor']
