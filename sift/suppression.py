"""
Suppression resolution: decide whether a rule runs on a file, and whether a
candidate violation survives.

Two independent sources are consulted:

1. Rule applicability filters (``apply_to_file_names``,
   ``do_not_apply_to_file_names``, ``apply_to_class_names``,
   ``do_not_apply_to_class_names``). These are comma-separated wildcard lists
   using ``*`` and ``?``. They are evaluated once per file, before the rule's
   visitor is created, so an inapplicable rule never walks the AST.

2. In-source ``@SuppressWarnings`` annotations. A candidate is suppressed when
   its node lies inside a declaration annotated with the rule's name (or
   ``"all"``). The Analyzer consults ``SuppressionResolver.is_suppressed`` for
   each candidate.

Typical usage:
    from sift.suppression import SuppressionResolver, WildcardPattern

    WildcardPattern("*Test.java,Legacy?.java").matches("FooTest.java")  # True

    resolver = SuppressionResolver(context)
    survivors = [c for c in candidates if not resolver.is_suppressed(c, rule.name)]
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from sift.errors import ConfigurationError

if TYPE_CHECKING:
    from sift.context import FileContext
    from sift.nodes import AstNode
    from sift.rules.base import Rule
    from sift.visitor import Candidate

logger = logging.getLogger(__name__)

SUPPRESS_ALL_NAMES = frozenset({"all", "sift"})

SUPPRESS_ANNOTATION_NAMES = frozenset({"SuppressWarnings", "java.lang.SuppressWarnings"})

_ANNOTATION_KINDS = ("annotation", "marker_annotation")


class WildcardPattern:
    """
    A comma-separated list of wildcard patterns; ``*`` matches any run of
    characters and ``?`` matches exactly one. Everything else is literal.

    Raises:
        ConfigurationError: if the list has an empty entry or uses ``[``/``]``.
    """

    def __init__(self, patterns: str) -> None:
        if not isinstance(patterns, str):
            raise ConfigurationError(f"Wildcard pattern must be a string, got {patterns!r}")
        self.patterns = patterns
        self._regexes = [self._compile(entry.strip(), patterns) for entry in patterns.split(",")]

    @staticmethod
    def _compile(entry: str, whole: str) -> re.Pattern[str]:
        if not entry:
            raise ConfigurationError(f"Malformed wildcard pattern {whole!r}: empty entry")
        if "[" in entry or "]" in entry:
            raise ConfigurationError(
                f"Malformed wildcard pattern {whole!r}: only '*' and '?' wildcards are supported"
            )
        parts = []
        for ch in entry:
            if ch == "*":
                parts.append(".*")
            elif ch == "?":
                parts.append(".")
            else:
                parts.append(re.escape(ch))
        return re.compile("".join(parts) + r"\Z", re.DOTALL)

    def matches(self, value: str) -> bool:
        return any(regex.match(value) for regex in self._regexes)

    def matches_any(self, values: Iterable[Optional[str]]) -> bool:
        return any(v is not None and self.matches(v) for v in values)

    def __repr__(self) -> str:
        return f"WildcardPattern({self.patterns!r})"


def _file_candidates(pattern: WildcardPattern, context: FileContext) -> list[str]:
    # Patterns naming a directory match the relative path, otherwise the bare file name.
    if "/" in pattern.patterns:
        return [context.relative_path]
    return [context.file_name]


def rule_applies_to(rule: Rule, context: FileContext) -> bool:
    """
    Evaluate a rule's file and class name filters against one file.

    A file without a declared type never fails a class filter.
    """
    if rule.apply_to_file_names:
        pattern = WildcardPattern(rule.apply_to_file_names)
        if not pattern.matches_any(_file_candidates(pattern, context)):
            return False
    if rule.do_not_apply_to_file_names:
        pattern = WildcardPattern(rule.do_not_apply_to_file_names)
        if pattern.matches_any(_file_candidates(pattern, context)):
            return False

    if context.primary_type_name is None:
        return True
    type_names = [context.primary_type_name, context.qualified_type_name]
    if rule.apply_to_class_names:
        if not WildcardPattern(rule.apply_to_class_names).matches_any(type_names):
            return False
    if rule.do_not_apply_to_class_names:
        if WildcardPattern(rule.do_not_apply_to_class_names).matches_any(type_names):
            return False
    return True


@dataclass(frozen=True)
class SuppressionScope:
    """A declaration annotated with @SuppressWarnings and the names it suppresses."""

    declaration: AstNode
    names: frozenset[str]


def _annotation_values(annotation: AstNode) -> set[str]:
    values: set[str] = set()
    arguments = annotation.child("arguments")
    if arguments is None:
        return values
    for node in arguments.walk():
        if node.kind == "string_literal":
            values.add(node.text.strip().strip('"'))
    return values


def find_suppression_scopes(root: AstNode) -> list[SuppressionScope]:
    """Collect every declaration carrying a @SuppressWarnings annotation."""
    scopes: list[SuppressionScope] = []
    for declaration in root.walk():
        for modifiers in declaration.children_of_kind("modifiers"):
            names: set[str] = set()
            for annotation in modifiers.children_of_kind(*_ANNOTATION_KINDS):
                name = annotation.child("name")
                if name is not None and name.text in SUPPRESS_ANNOTATION_NAMES:
                    names |= _annotation_values(annotation)
            if names:
                scopes.append(SuppressionScope(declaration=declaration, names=frozenset(names)))
    return scopes


class SuppressionResolver:
    """Answers "is this candidate suppressed in source?" for one file."""

    def __init__(self, context: FileContext) -> None:
        self.scopes = find_suppression_scopes(context.root)
        if self.scopes:
            logger.debug(
                "%s: %d @SuppressWarnings scope(s)", context.relative_path, len(self.scopes)
            )

    def is_suppressed(self, candidate: Candidate, rule_name: str) -> bool:
        node = candidate.node
        if node is None:
            return False
        for scope in self.scopes:
            if (rule_name in scope.names or scope.names & SUPPRESS_ALL_NAMES) and scope.declaration.contains(node):
                return True
        return False
