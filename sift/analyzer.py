"""
Analyzer: runs the active rules over a tree of Java files and builds the results tree.

Per file the analysis moves through PENDING_PARSE -> PARSED -> RULES_APPLIED ->
AGGREGATED, or ends in PARSE_FAILED. A file that cannot be parsed contributes
one ParseFailure violation and no rule runs against it. A rule that raises on
a file is skipped for that file only; the failure is logged and kept in
``Analyzer.diagnostics``. Neither case stops the run.

Files are independent, so they can be analyzed by a thread pool
(``workers > 1``). Results are funneled back in traversal order to a single
ResultsTreeBuilder, so the tree mirrors the traversal regardless of which
worker finished first.

Typical usage:
    analyzer = Analyzer(get_enabled_rules(config), workers=4)
    results = analyzer.analyze(Path("./my_project"))
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from sift.context import FileContext, context_from_bytes, create_context
from sift.errors import ParseFailure, RuleExecutionFailure, require
from sift.findings.models import Violation
from sift.parser import create_parser
from sift.results import DirectoryResults, FileResults, ResultsTreeBuilder
from sift.rules.base import Rule
from sift.rules.parse_failure import PARSE_FAILURE_RULE
from sift.suppression import SuppressionResolver
from sift.traversal import find_java_files, relative_source_path

logger = logging.getLogger(__name__)


class FileState(Enum):
    PENDING_PARSE = "pending-parse"
    PARSED = "parsed"
    RULES_APPLIED = "rules-applied"
    AGGREGATED = "aggregated"
    PARSE_FAILED = "parse-failed"


@dataclass
class FileAnalysis:
    """Outcome of analyzing one file, before it is attached to the results tree."""

    results: FileResults
    state: FileState = FileState.PENDING_PARSE
    failures: list[RuleExecutionFailure] = field(default_factory=list)
    suppressed: int = 0


class Analyzer:
    """
    Applies rules, in the given order, to files and aggregates the violations.

    Disabled rules are dropped up front. Every rule is validated on
    construction, so configuration errors surface before any file is read.
    """

    def __init__(
        self,
        rules: Sequence[Rule],
        *,
        workers: int = 1,
        use_suppressions: bool = True,
    ) -> None:
        require(rules, "rules")
        for rule in rules:
            rule.validate()
        self.rules = [r for r in rules if r.enabled]
        self.workers = max(1, workers)
        self.use_suppressions = use_suppressions
        self.diagnostics: list[RuleExecutionFailure] = []

    def analyze(self, root: Path, files: Optional[Sequence[Path]] = None) -> DirectoryResults:
        """
        Analyze every Java file under root (or the given files, which must lie
        under root) and return the finalized results tree.
        """
        require(root, "root")
        root = root.resolve()
        if files is None:
            files = find_java_files(root)
        relative = [relative_source_path(root, f) for f in files]
        logger.info("Analyzing %d file(s) under %s with %d rule(s)", len(files), root, len(self.rules))

        builder = ResultsTreeBuilder()
        if self.workers == 1:
            analyses = (self.analyze_file(f, r) for f, r in zip(files, relative))
            self._aggregate(builder, analyses)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                # map() yields in submission order, keeping traversal order in the tree.
                self._aggregate(builder, executor.map(self.analyze_file, files, relative))
        return builder.finalize()

    def _aggregate(self, builder: ResultsTreeBuilder, analyses) -> None:
        for analysis in analyses:
            builder.add_file_results(analysis.results)
            if analysis.state is not FileState.PARSE_FAILED:
                analysis.state = FileState.AGGREGATED
            self.diagnostics.extend(analysis.failures)

    def analyze_file(self, path: Path, relative_path: Optional[str] = None) -> FileAnalysis:
        """Parse one file and apply every rule; never raises for parse or rule failures."""
        relative_path = relative_path if relative_path is not None else path.as_posix()
        try:
            context = create_context(path, create_parser(), relative_path=relative_path)
        except ParseFailure as failure:
            return self._parse_failed(relative_path, failure)
        return self.analyze_context(context)

    def analyze_source(self, source: bytes, relative_path: str) -> FileAnalysis:
        """Analyze in-memory source as if it were the file at relative_path."""
        try:
            context = context_from_bytes(source, Path(relative_path), relative_path=relative_path)
        except ParseFailure as failure:
            return self._parse_failed(relative_path, failure)
        return self.analyze_context(context)

    def _parse_failed(self, relative_path: str, failure: ParseFailure) -> FileAnalysis:
        logger.warning("%s", failure)
        results = FileResults(relative_path, [PARSE_FAILURE_RULE.violation_for(failure)])
        return FileAnalysis(results=results, state=FileState.PARSE_FAILED)

    def analyze_context(self, context: FileContext) -> FileAnalysis:
        analysis = FileAnalysis(results=FileResults(context.relative_path), state=FileState.PARSED)
        resolver = SuppressionResolver(context) if self.use_suppressions else None
        violations: list[Violation] = []

        for rule in self.rules:
            if not rule.applies_to(context):
                logger.debug("Rule %s does not apply to %s", rule.name, context.relative_path)
                continue
            try:
                candidates = rule.apply(context)
            except Exception as exc:
                failure = RuleExecutionFailure(rule.name, context.relative_path, exc)
                logger.exception("%s", failure)
                analysis.failures.append(failure)
                continue
            for candidate in candidates:
                if resolver is not None and resolver.is_suppressed(candidate, rule.name):
                    analysis.suppressed += 1
                    continue
                violations.append(candidate.violation)

        analysis.results = FileResults(context.relative_path, violations)
        analysis.state = FileState.RULES_APPLIED
        logger.info(
            "%s: %d violation(s), %d suppressed",
            context.relative_path,
            len(violations),
            analysis.suppressed,
        )
        return analysis
