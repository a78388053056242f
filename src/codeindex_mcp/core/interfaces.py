"""
Abstract interfaces for CodeIndex MCP components.

The parser is the one swappable collaborator of the indexing core: it owns
grammar loading and turns a file on disk into a ParsedFile. Symbol
extraction itself is not an interface; extractors are plain functions
selected from a dispatch table keyed by language id.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from .models import ParsedFile


class IParser(ABC):
    """Abstract interface for code parsers.

    Responsibilities:
        - Detect if a file can be parsed based on its extension
        - Load (and cache) the grammar for a language
        - Read, parse and extract symbols from one file, isolating failures

    Implementation considerations:
        - Error handling: a bad file must yield ParsedFile.error, never raise
        - Grammar failures are reported per language, before any file is parsed
    """

    @abstractmethod
    def can_parse(self, filepath: str) -> bool:
        """Determine if this parser can handle the given file.

        Called for every discovered file, so it should only inspect the
        extension.

        Args:
            filepath: Path to the file to check

        Returns:
            True if this parser can parse the file, False otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def load_language(self, language: str) -> None:
        """Load the grammar for a language ahead of parsing its files.

        Args:
            language: Language id (e.g. 'python', 'tsx')

        Raises:
            GrammarLoadError: If the grammar cannot be loaded
        """
        pass  # pragma: no cover

    @abstractmethod
    def parse_file(self, root: Path, filepath: str, language: str) -> ParsedFile:
        """Parse one source file and extract its symbols.

        Args:
            root: Indexed root directory
            filepath: Path relative to root; recorded on every symbol
            language: Language id the file is parsed as

        Returns:
            ParsedFile with symbols in source order, or with error set
        """
        pass  # pragma: no cover
