"""
Core data models and structures for CodeIndex MCP.

This module provides the foundational data structures used throughout
the symbol indexing system.
"""

from .models import (
    SymbolKind,
    Symbol,
    ParsedFile,
    SearchOptions,
)
from .interfaces import IParser

__all__ = [
    "SymbolKind",
    "Symbol",
    "ParsedFile",
    "SearchOptions",
    "IParser",
]
