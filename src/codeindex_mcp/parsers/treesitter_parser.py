"""
TreeSitterParser - multi-language symbol parser.

This module implements the IParser interface using the prebuilt grammars
shipped by tree-sitter-languages. It reads one file, parses it into a
syntax tree and hands the tree to the extractor registered for the file's
language.

Supported Languages:
    - TypeScript (.ts, .mts, .cts) and TSX (.tsx)
    - JavaScript (.js, .jsx, .mjs, .cjs)
    - Python (.py, .pyi)
    - Go (.go)
    - Rust (.rs)
    - Ruby (.rb)

Failure isolation:
    - A grammar that fails to load raises GrammarLoadError from
      load_language(); the indexer skips the whole language
    - A file that cannot be read, decoded or parsed yields a ParsedFile
      with error set and no symbols

Usage:
    >>> parser = TreeSitterParser()
    >>> parser.load_language('python')
    >>> result = parser.parse_file(Path('/repo'), 'src/app.py', 'python')
    >>> print(f"Found {result.symbol_count} symbols")
"""

import logging
import time
from pathlib import Path
from typing import Dict, Any

from tree_sitter_languages import get_parser

from codeindex_mcp.core.exceptions import GrammarLoadError, ParseError
from codeindex_mcp.core.interfaces import IParser
from codeindex_mcp.core.models import ParsedFile
from codeindex_mcp.extractors import get_extractor
from codeindex_mcp.parsers.language_configs import (
    get_language_for_file,
    get_config_for_language,
)

# Configure logging
logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 500_000


class TreeSitterParser(IParser):
    """
    Tree-sitter based symbol parser.

    Parsers are cached per language, so each grammar is loaded once per
    instance.

    Attributes:
        max_file_size: Files larger than this many bytes are skipped as
            probably generated
        _parsers: Cache of tree-sitter parsers by language

    Thread Safety:
        This class is NOT thread-safe. Create separate instances for
        concurrent parsing.
    """

    def __init__(self, max_file_size: int = MAX_FILE_SIZE_BYTES):
        """Initialize the parser with an empty parser cache."""
        self.max_file_size = max_file_size
        self._parsers: Dict[str, Any] = {}
        logger.debug("TreeSitterParser initialized")

    def can_parse(self, filepath: str) -> bool:
        """
        Determine if this parser can handle the given file.

        Example:
            >>> parser = TreeSitterParser()
            >>> parser.can_parse("example.rb")
            True
            >>> parser.can_parse("example.txt")
            False
        """
        return get_language_for_file(filepath) is not None

    def load_language(self, language: str) -> None:
        """
        Load and cache the tree-sitter parser for a language.

        Args:
            language: Language id (e.g., 'python', 'tsx')

        Raises:
            GrammarLoadError: If the language is unknown or its grammar
                cannot be loaded
        """
        if language in self._parsers:
            return
        try:
            config = get_config_for_language(language)
            logger.debug(f"Creating new parser for language: {language}")
            self._parsers[language] = get_parser(config['grammar'])
        except Exception as e:
            raise GrammarLoadError(language, str(e)) from e

    def parse_file(self, root: Path, filepath: str, language: str) -> ParsedFile:
        """
        Parse a source file and extract its symbols.

        This is the main entry point for parsing. It:
        1. Reads the file and rejects oversized or binary content
        2. Parses it into a syntax tree with the cached grammar
        3. Runs the language's extractor over the tree
        4. Returns a ParsedFile; any failure is recorded in its error field

        Args:
            root: Indexed root directory
            filepath: Path relative to root, recorded on every symbol
            language: Language id to parse the file as

        Returns:
            ParsedFile object containing symbols in source order
        """
        start_time = time.time()

        try:
            symbols = self._extract(root, filepath, language)
        except ParseError as e:
            logger.debug(str(e))
            return ParsedFile(
                filepath=filepath,
                language=language,
                parse_time=time.time() - start_time,
                error=e.details,
            )

        parse_time = time.time() - start_time
        logger.debug(
            f"Parsed {filepath} in {parse_time:.3f}s - "
            f"found {len(symbols)} symbols"
        )
        return ParsedFile(
            filepath=filepath,
            language=language,
            symbols=symbols,
            parse_time=parse_time,
        )

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _extract(self, root: Path, filepath: str, language: str):
        """Read, parse and extract; every failure surfaces as ParseError."""
        file_path = Path(root) / filepath

        try:
            size = file_path.stat().st_size
        except OSError as e:
            raise ParseError(filepath, language, f"Error reading file: {e}") from e
        if size > self.max_file_size:
            raise ParseError(
                filepath, language,
                f"File too large ({size} bytes > {self.max_file_size}), likely generated",
            )

        try:
            content = file_path.read_bytes()
        except OSError as e:
            raise ParseError(filepath, language, f"Error reading file: {e}") from e

        if self._is_binary_file(content):
            raise ParseError(filepath, language, "Binary file detected - cannot parse")

        extractor = get_extractor(language)
        if extractor is None:
            raise ParseError(filepath, language, f"No extractor for language: {language}")

        try:
            self.load_language(language)
            tree = self._parsers[language].parse(content)
            return extractor(tree, content, filepath)
        except Exception as e:
            raise ParseError(filepath, language, f"Parsing error: {e}") from e

    def _is_binary_file(self, content: bytes) -> bool:
        """
        Check if file content is binary (not text).

        Args:
            content: File content as bytes

        Returns:
            True if file appears to be binary, False otherwise
        """
        # Check first 8192 bytes for binary markers
        sample = content[:8192]

        if b'\x00' in sample:
            return True

        try:
            sample.decode('utf-8')
            return False
        except UnicodeDecodeError:
            if len(sample) == 0:
                return False
            text_chars = sum(1 for b in sample if 32 <= b < 127 or b in (9, 10, 13))
            # Less than 70% text characters means binary
            return text_chars / len(sample) < 0.7
