"""Tests for the tree-sitter Java parser wrapper."""

import logging

from sift.parser import (
    create_parser,
    first_error_line,
    get_java_language,
    parse_bytes,
)


def test_get_java_language_returns_language():
    """get_java_language() returns a tree-sitter Language object."""
    lang = get_java_language()
    assert lang is not None
    assert lang


def test_create_parser_returns_parser():
    """create_parser() returns a configured Parser."""
    parser = create_parser()
    assert parser is not None
    assert parser.language is not None


def test_parse_bytes_success(caplog):
    """Parsing valid Java source succeeds and logs."""
    source = b"class Main { int answer() { return 42; } }"
    parser = create_parser()
    with caplog.at_level(logging.DEBUG):
        tree = parse_bytes(source, parser=parser)
    assert tree is not None
    assert not tree.root_node.has_error
    assert tree.root_node.type == "program"
    assert "Parse" in caplog.text


def test_parse_bytes_with_syntax_error():
    """Malformed Java still yields a tree, flagged with has_error."""
    tree = parse_bytes(b"class Broken { void m( { }")
    assert tree.root_node.has_error


def test_first_error_line_points_at_error():
    """first_error_line() returns the 1-based line of the first syntax error."""
    tree = parse_bytes(b"class Ok {\n  void m() {}\n  int x = ;\n}\n")
    assert first_error_line(tree.root_node) == 3


def test_first_error_line_none_for_valid_source():
    tree = parse_bytes(b"class Ok {}")
    assert first_error_line(tree.root_node) is None

