# Error taxonomy: configuration, parse, rule execution and missing-input failures.

from __future__ import annotations

from typing import Any, Optional


class SiftError(Exception):
    """Base class for all errors raised by the analysis engine."""


class ConfigurationError(SiftError):
    """Invalid rule configuration (bad priority, malformed filter pattern, unknown rule).

    Always raised before any file is analyzed.
    """


class ParseFailure(SiftError):
    """A source file could not be turned into an AST.

    Recovered by the Analyzer: the file gets one synthetic violation and no
    rule runs against it.
    """

    def __init__(self, path: str, reason: str, line: Optional[int] = None) -> None:
        super().__init__(f"Could not parse {path}: {reason}")
        self.path = path
        self.reason = reason
        self.line = line


class RuleExecutionFailure(SiftError):
    """A rule raised while visiting one file. The rule is skipped for that file only."""

    def __init__(self, rule_name: str, path: str, cause: BaseException) -> None:
        super().__init__(f"Rule {rule_name} failed on {path}: {cause}")
        self.rule_name = rule_name
        self.path = path
        self.cause = cause


class MissingRequiredInput(SiftError, ValueError):
    """A required argument (results, rules, configuration) was None."""

    def __init__(self, argument: str) -> None:
        super().__init__(f"The {argument} argument must not be None")
        self.argument = argument


def require(value: Any, argument: str) -> Any:
    """Return value, or raise MissingRequiredInput naming the argument if it is None."""
    if value is None:
        raise MissingRequiredInput(argument)
    return value
