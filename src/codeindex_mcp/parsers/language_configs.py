"""
Language-specific configurations for tree-sitter parsing.

This module maps file extensions to language ids and records, per language,
which prebuilt tree-sitter grammar to load and which node kinds act as
enclosing scopes for methods and nested declarations.

Supported Languages:
    - TypeScript (.ts, .mts, .cts) and TSX (.tsx)
    - JavaScript (.js, .jsx, .mjs, .cjs)
    - Python (.py, .pyi)
    - Go (.go)
    - Rust (.rs)
    - Ruby (.rb)

Usage:
    >>> language = get_language_for_file("example.py")
    >>> config = get_config_for_language(language)
    >>> config['grammar']
    'python'

Adding New Languages:
    1. Add file extension mappings to EXTENSION_MAP
    2. Create language config dict with required fields
    3. Register an extractor in codeindex_mcp.extractors
    4. Add tests for the new language
"""

from typing import Optional, Dict, Set, Any
from pathlib import Path


# ==============================================================================
# Extension to Language Mapping
# ==============================================================================

EXTENSION_MAP: Dict[str, str] = {
    # TypeScript
    '.ts': 'typescript',
    '.mts': 'typescript',  # TypeScript ES modules
    '.cts': 'typescript',  # TypeScript CommonJS modules
    '.tsx': 'tsx',

    # JavaScript
    '.js': 'javascript',
    '.jsx': 'javascript',
    '.mjs': 'javascript',  # ES6 modules
    '.cjs': 'javascript',  # CommonJS modules

    # Python
    '.py': 'python',
    '.pyi': 'python',  # Type stub files

    # Go
    '.go': 'go',

    # Rust
    '.rs': 'rust',

    # Ruby
    '.rb': 'ruby',
}


# ==============================================================================
# Language Configurations
# ==============================================================================

_JS_FAMILY_PARENT_TYPES = [
    'class_declaration',           # class Foo {}
    'abstract_class_declaration',  # abstract class Foo {}
    'class',                       # const Foo = class {}
]

LANGUAGE_CONFIGS: Dict[str, Dict[str, Any]] = {

    'typescript': {
        'grammar': 'typescript',
        'parent_types': _JS_FAMILY_PARENT_TYPES,
    },

    'tsx': {
        'grammar': 'tsx',
        'parent_types': _JS_FAMILY_PARENT_TYPES,
    },

    'javascript': {
        'grammar': 'javascript',
        'parent_types': _JS_FAMILY_PARENT_TYPES,
    },

    # --------------------------------------------------------------------------
    # function_definition:
    #   name: identifier, parameters: parameters, return_type: type
    # class_definition:
    #   name: identifier, superclasses: argument_list, body: block
    # --------------------------------------------------------------------------
    'python': {
        'grammar': 'python',
        'parent_types': ['class_definition'],
    },

    # --------------------------------------------------------------------------
    # method_declaration:
    #   receiver: parameter_list, name: field_identifier,
    #   parameters: parameter_list, result: type
    # --------------------------------------------------------------------------
    'go': {
        'grammar': 'go',
        'parent_types': [],  # Methods name their receiver type instead
    },

    # --------------------------------------------------------------------------
    # impl_item carries its name in the 'type' field, trait_item in 'name'
    # --------------------------------------------------------------------------
    'rust': {
        'grammar': 'rust',
        'parent_types': ['impl_item', 'trait_item'],
    },

    'ruby': {
        'grammar': 'ruby',
        'parent_types': ['class', 'module'],
    },
}


def get_language_for_file(filepath: str) -> Optional[str]:
    """
    Determine the language id from a file path.

    Args:
        filepath: Path to the file (can be relative or absolute)

    Returns:
        Language id (e.g., 'python', 'tsx') or None if not supported

    Examples:
        >>> get_language_for_file('src/app.tsx')
        'tsx'
        >>> get_language_for_file('unknown.txt')
        None
    """
    path = Path(filepath)
    extension = path.suffix.lower()
    return EXTENSION_MAP.get(extension)


def get_config_for_language(language: str) -> Dict[str, Any]:
    """
    Retrieve the tree-sitter configuration for a given language.

    Args:
        language: Language id (e.g., 'python', 'javascript')

    Returns:
        Configuration dictionary

    Raises:
        KeyError: If the language is not supported
    """
    if language not in LANGUAGE_CONFIGS:
        raise KeyError(
            f"Unsupported language: {language}. "
            f"Supported languages: {', '.join(LANGUAGE_CONFIGS.keys())}"
        )
    return LANGUAGE_CONFIGS[language]


def get_supported_extensions() -> Set[str]:
    """
    Get a set of all supported file extensions.

    Examples:
        >>> '.rs' in get_supported_extensions()
        True
    """
    return set(EXTENSION_MAP.keys())


def validate_config(language: str) -> bool:
    """
    Validate that a language configuration has all required fields.

    Args:
        language: Language id to validate

    Returns:
        True if configuration is valid

    Raises:
        ValueError: If configuration is missing required fields
    """
    required_fields = [
        'grammar',
        'parent_types',
    ]

    config = get_config_for_language(language)
    missing_fields = [field for field in required_fields if field not in config]

    if missing_fields:
        raise ValueError(
            f"Configuration for {language} is missing required fields: {', '.join(missing_fields)}"
        )

    return True


# ==============================================================================
# Configuration Validation
# ==============================================================================

# Every mapped language must have a config, and every config must be complete
for lang in set(EXTENSION_MAP.values()) | set(LANGUAGE_CONFIGS.keys()):
    try:
        validate_config(lang)
    except (KeyError, ValueError) as e:
        raise ValueError(f"Invalid configuration detected: {e}")
