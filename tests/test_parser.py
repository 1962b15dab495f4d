"""Tests for the tree-sitter parser wrapper."""

import logging
from pathlib import Path

import pytest

from vuehealth.parser import (
    create_parser,
    dialect_for_lang,
    dialect_for_path,
    get_language,
    parse_bytes,
)


def test_get_language_returns_language():
    """get_language() returns a tree-sitter Language object for each dialect."""
    for dialect in ("javascript", "typescript", "tsx", "html"):
        assert get_language(dialect)


def test_get_language_unknown_dialect():
    with pytest.raises(ValueError, match="Unsupported dialect"):
        get_language("coffeescript")


def test_create_parser_returns_parser():
    """create_parser() returns a configured Parser."""
    parser = create_parser()
    assert parser is not None
    assert parser.language is not None


def test_dialect_for_path():
    assert dialect_for_path(Path("main.js")) == "javascript"
    assert dialect_for_path(Path("store.ts")) == "typescript"
    assert dialect_for_path(Path("View.tsx")) == "tsx"
    assert dialect_for_path(Path("config.MJS")) == "javascript"
    assert dialect_for_path(Path("notes.txt")) == "javascript"


def test_dialect_for_lang():
    assert dialect_for_lang(None) == "javascript"
    assert dialect_for_lang("ts") == "typescript"
    assert dialect_for_lang(" TSX ") == "tsx"
    assert dialect_for_lang("coffee") == "javascript"


def test_parse_bytes_success(caplog):
    """Parsing valid JavaScript succeeds and logs."""
    source = b"const count = ref(0)\n"
    with caplog.at_level(logging.DEBUG):
        tree = parse_bytes(source, parser=create_parser())
    assert tree.root_node.type == "program"
    assert not tree.root_node.has_error
    assert "Parse succeeded" in caplog.text


def test_parse_bytes_typescript():
    source = b"const n: number = 1\nfunction f(x: string): void {}\n"
    tree = parse_bytes(source, parser=create_parser("typescript"))
    assert tree.root_node.type == "program"
    assert not tree.root_node.has_error


def test_parse_bytes_invalid_logs_warning(caplog):
    """Parsing broken source still produces a tree and logs a warning."""
    with caplog.at_level(logging.WARNING):
        tree = parse_bytes(b"const = = (;", parser=create_parser())
    assert tree.root_node is not None
    assert tree.root_node.has_error
    assert "with errors" in caplog.text


def test_parse_bytes_sample_vue_markup():
    """The sample component parses as markup."""
    sample_path = Path(__file__).parent / "sample.vue"
    assert sample_path.exists(), "tests/sample.vue must exist"
    tree = parse_bytes(sample_path.read_bytes(), parser=create_parser("html"))
    assert tree.root_node.type == "document"
    assert not tree.root_node.has_error
