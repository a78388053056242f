"""Unit tests for TreeSitterParser."""
import pytest
from unittest.mock import patch

from codeindex_mcp.core.exceptions import GrammarLoadError
from codeindex_mcp.core.models import SymbolKind
from codeindex_mcp.parsers.treesitter_parser import TreeSitterParser, MAX_FILE_SIZE_BYTES


class TestTreeSitterParser:

    @pytest.fixture
    def parser(self):
        return TreeSitterParser()

    def test_parse_python_function(self, parser, tmp_path):
        (tmp_path / "test.py").write_text("def hello(): pass")

        result = parser.parse_file(tmp_path, "test.py", "python")

        assert result.is_successful
        assert result.filepath == "test.py"
        assert any(s.name == "hello" for s in result.symbols)

    def test_symbols_carry_relative_path(self, parser, tmp_path):
        (tmp_path / "pkg").mkdir()
        (tmp_path / "pkg" / "mod.py").write_text("class MyClass:\n    def method(self): pass")

        result = parser.parse_file(tmp_path, "pkg/mod.py", "python")

        symbols = {s.name: s for s in result.symbols}
        assert symbols["MyClass"].kind == SymbolKind.CLASS
        assert symbols["method"].file == "pkg/mod.py"

    def test_parse_javascript_function(self, parser, tmp_path):
        (tmp_path / "test.js").write_text("function hello() { return 'world'; }")

        result = parser.parse_file(tmp_path, "test.js", "javascript")

        assert result.is_successful
        assert any(s.name == "hello" for s in result.symbols)

    def test_parse_go_function(self, parser, tmp_path):
        (tmp_path / "test.go").write_text("package main\n\nfunc main() {}")

        result = parser.parse_file(tmp_path, "test.go", "go")

        assert result.is_successful
        assert any(s.name == "main" for s in result.symbols)

    def test_can_parse(self, parser):
        assert parser.can_parse("lib/models.rb")
        assert not parser.can_parse("README.md")

    def test_load_language_caches_parser(self, parser):
        parser.load_language("rust")
        cached = parser._parsers["rust"]
        parser.load_language("rust")
        assert parser._parsers["rust"] is cached

    def test_load_unknown_language_raises(self, parser):
        with pytest.raises(GrammarLoadError) as exc_info:
            parser.load_language("cobol")
        assert exc_info.value.language == "cobol"

    def test_grammar_failure_raises_grammar_load_error(self, parser):
        with patch(
            "codeindex_mcp.parsers.treesitter_parser.get_parser",
            side_effect=RuntimeError("grammar binary missing"),
        ):
            with pytest.raises(GrammarLoadError, match="grammar binary missing"):
                parser.load_language("ruby")


class TestParserEdgeCases:
    """Test edge cases in parsing."""

    @pytest.fixture
    def parser(self):
        return TreeSitterParser()

    def test_empty_file(self, parser, tmp_path):
        (tmp_path / "empty.py").write_text("")

        result = parser.parse_file(tmp_path, "empty.py", "python")

        assert result.is_successful
        assert result.symbol_count == 0

    def test_syntax_error_file_is_still_parsed(self, parser, tmp_path):
        (tmp_path / "broken.py").write_text("def ok(): pass\n\ndef broken(\n")

        result = parser.parse_file(tmp_path, "broken.py", "python")

        assert result.is_successful
        assert any(s.name == "ok" for s in result.symbols)

    def test_unicode_content(self, parser, tmp_path):
        (tmp_path / "unicode.py").write_text('def greet(): return "Hello, 世界! 🌍"', encoding="utf-8")

        result = parser.parse_file(tmp_path, "unicode.py", "python")

        assert result.is_successful
        assert any(s.name == "greet" for s in result.symbols)

    def test_binary_file_returns_error(self, parser, tmp_path):
        (tmp_path / "blob.py").write_bytes(b"\x00\x01\x02\x03")

        result = parser.parse_file(tmp_path, "blob.py", "python")

        assert not result.is_successful
        assert "Binary" in result.error
        assert result.symbols == []

    def test_missing_file_returns_error(self, parser, tmp_path):
        result = parser.parse_file(tmp_path, "gone.py", "python")

        assert not result.is_successful
        assert "Error reading file" in result.error

    def test_oversized_file_skipped(self, tmp_path):
        parser = TreeSitterParser(max_file_size=10)
        (tmp_path / "big.py").write_text("def generated(): pass\n")

        result = parser.parse_file(tmp_path, "big.py", "python")

        assert not result.is_successful
        assert "too large" in result.error

    def test_default_size_ceiling(self):
        assert TreeSitterParser().max_file_size == MAX_FILE_SIZE_BYTES == 500_000

    def test_extractor_crash_is_isolated(self, parser, tmp_path):
        (tmp_path / "a.py").write_text("def f(): pass")

        with patch.dict(
            "codeindex_mcp.extractors.EXTRACTORS",
            {"python": lambda tree, content, file: 1 / 0},
        ):
            result = parser.parse_file(tmp_path, "a.py", "python")

        assert not result.is_successful
        assert "Parsing error" in result.error
