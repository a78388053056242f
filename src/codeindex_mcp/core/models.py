"""
Core data models for CodeIndex MCP.

This module defines the fundamental data structures used throughout the system
for representing code symbols, per-file parse results and search options.

Symbols are frozen and validated on construction. Symbol.to_dict and
Symbol.from_dict define the record format of the on-disk index cache.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Dict, Optional, Any


class SymbolKind(Enum):
    """
    Enumeration of code symbol kinds that can be extracted and indexed.

    The set is closed: every extractor maps its grammar's declaration
    nodes onto one of these members.
    """
    FUNCTION = "function"
    CLASS = "class"
    METHOD = "method"
    TYPE = "type"
    INTERFACE = "interface"
    VARIABLE = "variable"
    MODULE = "module"
    ENUM = "enum"

    def __str__(self) -> str:
        """String representation for serialization."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> 'SymbolKind':
        """
        Create SymbolKind from string value.

        Args:
            value: String representation of symbol kind

        Returns:
            SymbolKind enum member

        Raises:
            ValueError: If value doesn't match any SymbolKind
        """
        for member in cls:
            if member.value == value.lower():
                return member
        raise ValueError(f"Invalid SymbolKind: {value}")


@dataclass(frozen=True)
class Symbol:
    """
    Represents one declaration occurrence in a source file.

    Symbols are produced once per extraction pass and never mutated; the
    index only groups them. ``parent`` is a weak, name-only reference to the
    lexically enclosing class/module and is never resolved to another record.

    Attributes:
        name: The identifier name of the symbol (e.g., "login_user", "UserClass")
        kind: The kind of symbol
        file: Path relative to the indexed root
        line: 1-indexed line of the declaration
        signature: Parameter/return text as written in source, truncated to 120 chars
        parent: Name of the enclosing class/impl/module, if any
        exported: Language-specific visibility heuristic
    """
    name: str
    kind: SymbolKind
    file: str
    line: int
    signature: Optional[str] = None
    parent: Optional[str] = None
    exported: bool = False

    def __post_init__(self):
        """
        Validate symbol data after initialization.

        Raises:
            ValueError: If any validation constraint is violated
        """
        if not self.name:
            raise ValueError("Symbol name cannot be empty")
        if not self.file:
            raise ValueError("Symbol file cannot be empty")
        if self.line < 1:
            raise ValueError(f"line must be >= 1, got {self.line}")
        if not isinstance(self.kind, SymbolKind):
            raise ValueError(f"kind must be SymbolKind enum, got {type(self.kind)}")

    @property
    def qualified_name(self) -> str:
        """
        Returns the name prefixed with its parent, if any.

        Returns:
            Qualified name (e.g., "MyClass.my_method" or "standalone_function")
        """
        if self.parent:
            return f"{self.parent}.{self.name}"
        return self.name

    @property
    def is_top_level(self) -> bool:
        """True when the symbol has no enclosing class/module."""
        return not self.parent

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert Symbol to dictionary for serialization.

        Returns:
            Dictionary representation with all fields
        """
        data = asdict(self)
        data['kind'] = self.kind.value  # Convert enum to string
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Symbol':
        """
        Create Symbol from dictionary.

        Args:
            data: Dictionary containing symbol data

        Returns:
            Symbol instance

        Raises:
            ValueError: If required fields are missing or invalid
        """
        if 'kind' in data and isinstance(data['kind'], str):
            data = data.copy()  # Don't modify original
            data['kind'] = SymbolKind.from_string(data['kind'])
        return cls(**data)


@dataclass(frozen=True)
class ParsedFile:
    """
    Result of extracting symbols from a single source file.

    A failed file carries an error message and no symbols; it never aborts
    the surrounding build.

    Attributes:
        filepath: Path relative to the indexed root
        language: Language id the file was parsed as
        symbols: Symbols in source order
        parse_time: Time taken to read, parse and extract (seconds)
        error: None if extraction succeeded, error message if skipped
    """
    filepath: str
    language: str
    symbols: List[Symbol] = field(default_factory=list)
    parse_time: float = 0.0
    error: Optional[str] = None

    def __post_init__(self):
        if not self.filepath:
            raise ValueError("ParsedFile filepath cannot be empty")
        if not self.language:
            raise ValueError("ParsedFile language cannot be empty")
        if self.parse_time < 0:
            raise ValueError(f"parse_time must be >= 0, got {self.parse_time}")

    @property
    def is_successful(self) -> bool:
        """True if no error occurred."""
        return self.error is None

    @property
    def symbol_count(self) -> int:
        return len(self.symbols)


@dataclass(frozen=True)
class SearchOptions:
    """
    Filters applied at every tier of the search cascade.

    Attributes:
        kind: Only symbols of this kind
        scope: Only symbols whose file path starts with this prefix
        exported: Only symbols whose exported flag equals this value
        limit: Maximum number of results
    """
    kind: Optional[SymbolKind] = None
    scope: Optional[str] = None
    exported: Optional[bool] = None
    limit: int = 20

    def matches(self, symbol: Symbol) -> bool:
        """Check a symbol against the kind/scope/exported filters."""
        if self.kind is not None and symbol.kind != self.kind:
            return False
        if self.scope and not symbol.file.startswith(self.scope):
            return False
        if self.exported is not None and symbol.exported != self.exported:
            return False
        return True
