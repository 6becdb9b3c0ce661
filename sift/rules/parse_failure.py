# Pseudo-rule attached to files that could not be parsed. It never runs against an AST.

from __future__ import annotations

from sift.context import FileContext
from sift.errors import ParseFailure
from sift.findings.models import Violation
from sift.rules.base import Rule
from sift.visitor import Visitor


class ParseFailureRule(Rule):
    name = "ParseFailure"
    priority = 1

    def create_visitor(self, context: FileContext) -> Visitor:
        return Visitor(self, context)

    def violation_for(self, failure: ParseFailure) -> Violation:
        return Violation(rule=self, line_number=failure.line, message=failure.reason)


PARSE_FAILURE_RULE = ParseFailureRule()
