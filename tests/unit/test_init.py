import pytest


def test_version():
    import codeindex_mcp
    assert codeindex_mcp.__version__ == "0.1.0"


def test_lazy_import_treesitter_parser():
    import codeindex_mcp
    assert hasattr(codeindex_mcp, 'TreeSitterParser')


def test_lazy_import_build_index():
    import codeindex_mcp
    from codeindex_mcp.indexing.indexer import build_index
    assert codeindex_mcp.build_index is build_index


def test_lazy_import_symbol_kind():
    import codeindex_mcp
    assert hasattr(codeindex_mcp, 'SymbolKind')


def test_lazy_import_iparser():
    import codeindex_mcp
    assert hasattr(codeindex_mcp, 'IParser')


def test_lazy_import_invalid_name():
    import codeindex_mcp
    with pytest.raises(AttributeError):
        _ = codeindex_mcp.NonExistentClass


def test_all_exported_names_are_accessible():
    import codeindex_mcp
    for name in codeindex_mcp.__all__:
        assert hasattr(codeindex_mcp, name)


def test_parsers_package_lazy_parser():
    from codeindex_mcp import parsers
    from codeindex_mcp.parsers.treesitter_parser import TreeSitterParser
    assert parsers.TreeSitterParser is TreeSitterParser


def test_extractors_import_first():
    # The extractors package imports parser configs, which must not loop back
    from codeindex_mcp.extractors import EXTRACTORS
    assert set(EXTRACTORS) == {'typescript', 'tsx', 'javascript', 'python', 'go', 'rust', 'ruby'}
