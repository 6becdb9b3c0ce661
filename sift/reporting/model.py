# Report model: a renderer-agnostic projection of the results tree (summary rows,
# per-file violation rows and the rule description index).

from __future__ import annotations

from typing import Mapping, Optional

from pydantic import BaseModel

from sift.errors import ConfigurationError, require
from sift.findings.models import Violation
from sift.results import DirectoryResults, FileResults
from sift.rules.base import MAX_PRIORITY, MIN_PRIORITY, Rule
from sift.rules.descriptions import resolve_description

DEFAULT_MAX_PRIORITY = 3

MAX_SOURCE_LINE_LENGTH = 70
SOURCE_LINE_LAST_SEGMENT_LENGTH = 12
TRUNCATION_MARKER = ".."

NO_VIOLATIONS_MARKER = "-"

ALL_PACKAGES_LABEL = "All Packages"


def format_source_line(source_line: Optional[str], start_column: int = 0) -> Optional[str]:
    """
    Trim a source line and fit it into MAX_SOURCE_LINE_LENGTH characters.

    Longer lines keep a prefix window starting at start_column and the last
    SOURCE_LINE_LAST_SEGMENT_LENGTH characters, joined by "..". Empty input
    gives None.
    """
    source = source_line.strip() if source_line else None
    if not source:
        return None
    if len(source) <= MAX_SOURCE_LINE_LENGTH:
        return source
    prefix_length = MAX_SOURCE_LINE_LENGTH - SOURCE_LINE_LAST_SEGMENT_LENGTH - len(TRUNCATION_MARKER)
    start = max(0, min(start_column, len(source) - SOURCE_LINE_LAST_SEGMENT_LENGTH - prefix_length))
    return (
        source[start : start + prefix_length]
        + TRUNCATION_MARKER
        + source[-SOURCE_LINE_LAST_SEGMENT_LENGTH:]
    )


def format_count(count: int) -> str:
    """Display form of a count: the number, or the no-violations marker for zero."""
    return str(count) if count else NO_VIOLATIONS_MARKER


class SummaryRow(BaseModel):
    """One row of the summary table. path is None for the all-packages row."""

    path: Optional[str]
    total_files: int
    files_with_violations: int
    priority_counts: dict[int, int]

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return ALL_PACKAGES_LABEL if self.path is None else self.path


class ViolationRow(BaseModel):
    rule_name: str
    priority: int
    line_number: Optional[int] = None
    source_line: Optional[str] = None
    message: Optional[str] = None

    model_config = {"frozen": True}


class FileSection(BaseModel):
    path: str
    display_name: str
    rows: list[ViolationRow]


class DirectorySection(BaseModel):
    path: str
    files: list[FileSection]


class RuleDescriptionRow(BaseModel):
    index: int
    rule_name: str
    priority: int
    description: str

    model_config = {"frozen": True}


class ReportModel(BaseModel):
    title: Optional[str] = None
    max_priority: int = DEFAULT_MAX_PRIORITY
    summary_rows: list[SummaryRow]
    directory_sections: list[DirectorySection]
    rule_descriptions: list[RuleDescriptionRow]

    @property
    def priorities(self) -> list[int]:
        return list(range(MIN_PRIORITY, self.max_priority + 1))


def _summary_row(directory: DirectoryResults, path: Optional[str], max_priority: int) -> SummaryRow:
    counts = directory.violation_counts()
    return SummaryRow(
        path=path,
        total_files=directory.get_total_number_of_files(),
        files_with_violations=directory.get_number_of_files_with_violations(max_priority),
        priority_counts={p: counts[p] for p in range(MIN_PRIORITY, max_priority + 1)},
    )


def _visible_violations(file_results: FileResults, max_priority: int) -> list[Violation]:
    # sorted() is stable: equal priorities keep detection order.
    visible = [v for v in file_results.violations if v.priority <= max_priority]
    return sorted(visible, key=lambda v: v.priority)


def _display_name(directory_path: Optional[str], file_path: str) -> str:
    if directory_path and file_path.startswith(directory_path + "/"):
        return file_path[len(directory_path) + 1 :]
    return file_path


def _violation_row(violation: Violation) -> ViolationRow:
    return ViolationRow(
        rule_name=violation.rule_name,
        priority=violation.priority,
        line_number=violation.line_number,
        source_line=format_source_line(violation.source_line),
        message=violation.message,
    )


def build_report_model(
    results: DirectoryResults,
    max_priority: int = DEFAULT_MAX_PRIORITY,
    title: Optional[str] = None,
    descriptions: Optional[Mapping[str, str]] = None,
) -> ReportModel:
    """
    Derive the report model from a finalized results tree.

    Pure: the tree is only read, so calling this again (with any max_priority)
    never requires re-running the analysis.

    Args:
        results: Root of the results tree.
        max_priority: Only violations with priority <= max_priority are shown.
        title: Optional report title.
        descriptions: Rule name -> description bundle; defaults to the built-in one.

    Raises:
        MissingRequiredInput: results is None.
        ConfigurationError: max_priority outside 1..4.
    """
    require(results, "results")
    if not MIN_PRIORITY <= max_priority <= MAX_PRIORITY:
        raise ConfigurationError(f"max_priority must be within {MIN_PRIORITY}..{MAX_PRIORITY}, got {max_priority}")

    summary_rows = [_summary_row(results, None, max_priority)]
    directory_sections: list[DirectorySection] = []
    fired: dict[str, Rule] = {}

    for directory in results.iter_directories():
        if directory is not results and directory.contains_files():
            summary_rows.append(_summary_row(directory, directory.path, max_priority))

        file_sections: list[FileSection] = []
        for file_results in directory.file_children:
            visible = _visible_violations(file_results, max_priority)
            if not visible:
                continue
            for violation in visible:
                fired.setdefault(violation.rule_name, violation.rule)
            file_sections.append(
                FileSection(
                    path=file_results.path,
                    display_name=_display_name(directory.path, file_results.path),
                    rows=[_violation_row(v) for v in visible],
                )
            )
        if file_sections:
            directory_sections.append(DirectorySection(path=directory.path or "", files=file_sections))

    rule_descriptions = [
        RuleDescriptionRow(
            index=index,
            rule_name=name,
            priority=fired[name].priority,
            description=resolve_description(name, fired[name].description, descriptions),
        )
        for index, name in enumerate(sorted(fired), start=1)
    ]

    return ReportModel(
        title=title,
        max_priority=max_priority,
        summary_rows=summary_rows,
        directory_sections=directory_sections,
        rule_descriptions=rule_descriptions,
    )
