"""Custom exceptions for CodeIndex MCP.

This module defines a hierarchy of exceptions for better error handling
and debugging throughout the CodeIndex MCP system.

Usage:
    from codeindex_mcp.core.exceptions import RepositoryError

    try:
        index = await build_index(root)
    except RepositoryError as e:
        print(f"Cannot index {root}: {e}")
"""


class CodeIndexException(Exception):
    """Base exception for all CodeIndex operations.

    All custom exceptions in CodeIndex inherit from this class,
    allowing for broad exception catching when needed.
    """
    pass


class ParseError(CodeIndexException):
    """Raised when a single file cannot be read, decoded or parsed.

    Never escapes a build: the parser converts it into ParsedFile.error
    and the file contributes zero symbols.

    Attributes:
        filepath: Path to the file that failed to parse
        language: Detected language of the file
        details: Specific error details
    """

    def __init__(self, filepath: str, language: str, details: str):
        self.filepath = filepath
        self.language = language
        self.details = details
        super().__init__(f"Failed to parse {filepath} ({language}): {details}")


class GrammarLoadError(CodeIndexException):
    """Raised when a language's tree-sitter grammar cannot be loaded.

    Attributes:
        language: Language id whose grammar failed
        details: Underlying error message
    """

    def __init__(self, language: str, details: str):
        self.language = language
        self.details = details
        super().__init__(f"Failed to load grammar for {language}: {details}")


class IndexingError(CodeIndexException):
    """Raised when an indexing operation fails as a whole."""
    pass


class RepositoryError(IndexingError):
    """Raised when no version-control context is available.

    This is the only failure that prevents an index from being produced:
    - The root is not inside a git work tree
    - The git executable is missing
    """
    pass


class CacheError(CodeIndexException):
    """Raised when a cache record is stale or malformed.

    Covers:
    - Format version mismatch
    - Content hash mismatch
    - Missing or mistyped fields
    """
    pass


class SearchError(CodeIndexException):
    """Raised when search parameters are invalid."""
    pass


class ConfigurationError(CodeIndexException):
    """Raised when configuration is invalid.

    This covers failures related to:
    - Non-positive batch sizes or file size ceilings
    - Invalid file paths
    """
    pass
