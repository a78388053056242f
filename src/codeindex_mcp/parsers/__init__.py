"""
Parsers for CodeIndex MCP.

This module provides code parsing functionality using tree-sitter
for multi-language support, plus the tree walker shared by extractors.
"""

from .language_configs import (
    get_language_for_file,
    get_config_for_language,
    get_supported_extensions,
    EXTENSION_MAP,
    LANGUAGE_CONFIGS,
)


# TreeSitterParser imports the extractors, which import this package
def __getattr__(name: str):
    if name == "TreeSitterParser":
        from .treesitter_parser import TreeSitterParser

        return TreeSitterParser
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "TreeSitterParser",
    "get_language_for_file",
    "get_config_for_language",
    "get_supported_extensions",
    "EXTENSION_MAP",
    "LANGUAGE_CONFIGS",
]
