"""Unit tests for extension mapping and per-language configuration."""
import pytest

from codeindex_mcp.parsers.language_configs import (
    EXTENSION_MAP,
    LANGUAGE_CONFIGS,
    get_config_for_language,
    get_language_for_file,
    get_supported_extensions,
    validate_config,
)


@pytest.mark.parametrize("path, language", [
    ("src/app.ts", "typescript"),
    ("src/app.mts", "typescript"),
    ("src/App.tsx", "tsx"),
    ("lib/util.js", "javascript"),
    ("lib/util.cjs", "javascript"),
    ("pkg/mod.py", "python"),
    ("pkg/mod.pyi", "python"),
    ("cmd/main.go", "go"),
    ("src/lib.rs", "rust"),
    ("lib/models.rb", "ruby"),
    ("LOUD.PY", "python"),
])
def test_language_for_file(path, language):
    assert get_language_for_file(path) == language


def test_unknown_extension():
    assert get_language_for_file("README.md") is None
    assert get_language_for_file("Makefile") is None


def test_supported_extensions_match_map():
    assert get_supported_extensions() == set(EXTENSION_MAP)


def test_every_config_is_valid():
    for language in LANGUAGE_CONFIGS:
        assert validate_config(language)


def test_unknown_language_raises():
    with pytest.raises(KeyError, match="Unsupported language"):
        get_config_for_language("cobol")


def test_grammar_names():
    assert get_config_for_language("tsx")['grammar'] == 'tsx'
    assert get_config_for_language("rust")['parent_types'] == ['impl_item', 'trait_item']
