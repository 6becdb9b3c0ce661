"""Tests for sift.suppression: wildcard filters, rule applicability and @SuppressWarnings."""

from pathlib import Path

import pytest

from sift.context import context_from_bytes
from sift.errors import ConfigurationError
from sift.rules.boolean_method_returns_null import BooleanMethodReturnsNullRule
from sift.suppression import (
    SuppressionResolver,
    WildcardPattern,
    find_suppression_scopes,
    rule_applies_to,
)

BOOLEAN_NULL_SOURCE = b"""package Foo;

class Type {
    Boolean check() {
        return null;
    }
}
"""


def _context(source: bytes = BOOLEAN_NULL_SOURCE, relative_path: str = "src/Foo/Type.java"):
    return context_from_bytes(source, Path(relative_path), relative_path=relative_path)


class TestWildcardPattern:
    def test_star_and_question_mark(self):
        pattern = WildcardPattern("*Test.java,Legacy?.java")
        assert pattern.matches("FooTest.java")
        assert pattern.matches("Legacy1.java")
        assert not pattern.matches("Legacy12.java")
        assert not pattern.matches("Foo.java")

    def test_other_characters_are_literal(self):
        pattern = WildcardPattern("com.acme.*")
        assert pattern.matches("com.acme.Widget")
        assert not pattern.matches("comXacme.Widget")

    def test_whitespace_around_entries_is_ignored(self):
        assert WildcardPattern(" A , B ").matches("B")

    @pytest.mark.parametrize("bad", ["", "A,,B", "A,", "[ab]*"])
    def test_malformed_patterns_raise(self, bad):
        with pytest.raises(ConfigurationError):
            WildcardPattern(bad)

    def test_non_string_raises(self):
        with pytest.raises(ConfigurationError):
            WildcardPattern(42)


class TestRuleAppliesTo:
    def test_no_filters_applies(self):
        assert rule_applies_to(BooleanMethodReturnsNullRule(), _context())

    def test_do_not_apply_to_qualified_class_name(self):
        rule = BooleanMethodReturnsNullRule(do_not_apply_to_class_names="Foo.Type")
        assert not rule_applies_to(rule, _context())

    def test_apply_to_simple_class_name(self):
        assert rule_applies_to(BooleanMethodReturnsNullRule(apply_to_class_names="Ty*"), _context())
        assert not rule_applies_to(BooleanMethodReturnsNullRule(apply_to_class_names="Other"), _context())

    def test_file_name_filters(self):
        assert not rule_applies_to(BooleanMethodReturnsNullRule(apply_to_file_names="*Test.java"), _context())
        assert not rule_applies_to(BooleanMethodReturnsNullRule(do_not_apply_to_file_names="Type.java"), _context())

    def test_file_pattern_with_slash_matches_relative_path(self):
        assert rule_applies_to(BooleanMethodReturnsNullRule(apply_to_file_names="src/Foo/*"), _context())
        assert not rule_applies_to(BooleanMethodReturnsNullRule(apply_to_file_names="test/*"), _context())

    def test_class_filter_ignored_without_declared_type(self):
        ctx = _context(b"import java.util.List;\n", "Empty.java")
        assert rule_applies_to(BooleanMethodReturnsNullRule(apply_to_class_names="Nothing"), ctx)


SUPPRESSED_SOURCE = b"""
class Widget {
    @SuppressWarnings("BooleanMethodReturnsNull")
    Boolean first() {
        return null;
    }

    @SuppressWarnings({"unchecked", "all"})
    Boolean second() {
        return null;
    }

    @Deprecated
    Boolean third() {
        return null;
    }
}
"""


class TestInSourceSuppression:
    def test_scopes_found(self):
        scopes = find_suppression_scopes(_context(SUPPRESSED_SOURCE, "Widget.java").root)
        assert [sorted(s.names) for s in scopes] == [
            ["BooleanMethodReturnsNull"],
            ["all", "unchecked"],
        ]

    def test_only_unannotated_method_survives(self):
        ctx = _context(SUPPRESSED_SOURCE, "Widget.java")
        rule = BooleanMethodReturnsNullRule()
        resolver = SuppressionResolver(ctx)
        candidates = rule.apply(ctx)
        assert len(candidates) == 3
        survivors = [c for c in candidates if not resolver.is_suppressed(c, rule.name)]
        assert [c.violation.line_number for c in survivors] == [15]

    def test_other_rule_name_not_suppressed(self):
        ctx = _context(SUPPRESSED_SOURCE, "Widget.java")
        resolver = SuppressionResolver(ctx)
        candidates = BooleanMethodReturnsNullRule().apply(ctx)
        assert not resolver.is_suppressed(candidates[0], "DuplicateImport")

    def test_class_level_suppression_covers_members(self):
        source = b"""
@SuppressWarnings("BooleanMethodReturnsNull")
class Widget {
    Boolean check() { return null; }
}
"""
        ctx = _context(source, "Widget.java")
        resolver = SuppressionResolver(ctx)
        candidates = BooleanMethodReturnsNullRule().apply(ctx)
        assert all(resolver.is_suppressed(c, "BooleanMethodReturnsNull") for c in candidates)
