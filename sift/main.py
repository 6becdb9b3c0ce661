from __future__ import annotations

"""
Typer CLI entry point and orchestration of the analysis pipeline.

The CLI:
- Accepts a file or directory path
- Finds .java files (using traversal.find_java_files for directories)
- Builds the configuration (default rules, --rule selection, --set overrides)
- Runs the Analyzer and derives the report model
- Prints the report with the Rich console renderer
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from sift.analyzer import Analyzer
from sift.config import (
    Config,
    configure_rules,
    get_default_config,
    get_enabled_rules,
    parse_property_overrides,
    select_rules,
    validate_config,
)
from sift.errors import SiftError
from sift.reporting.console import print_report
from sift.reporting.model import build_report_model
from sift.traversal import find_java_files, is_java_file

logger = logging.getLogger(__name__)

app = typer.Typer(help="Sift - rule-based static analysis for Java source trees.")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _collect_java_files(target: Path) -> tuple[Path, List[Path]]:
    """
    Resolve a target path into (root, files to analyze).

    - If target is a .java file, the root is its directory
    - If target is a directory, use traversal.find_java_files()
    - Otherwise, exit with an error.
    """
    if target.is_file():
        if not is_java_file(target):
            raise typer.BadParameter(f"Target file must have .java extension, got: {target}")
        return target.parent, [target]

    if target.is_dir():
        files = find_java_files(target)
        if not files:
            logger.warning("No .java files found under %s", target)
        return target, files

    raise typer.BadParameter(f"Target path is neither a file nor a directory: {target}")


def _build_config(
    max_priority: int,
    workers: int,
    rule_names: Optional[List[str]],
    assignments: Optional[List[str]],
) -> Config:
    config = get_default_config()
    config.max_priority = max_priority
    config.workers = workers
    if rule_names:
        select_rules(config, rule_names)
    if assignments:
        configure_rules(config, parse_property_overrides(assignments))
    return validate_config(config)


@app.command()
def analyze(
    target: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        resolve_path=True,
        help="Java file or directory to analyze.",
    ),
    max_priority: int = typer.Option(3, "--max-priority", "-p", help="Report violations with priority <= N (1-4)."),
    title: Optional[str] = typer.Option(None, "--title", help="Report title."),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of files analyzed concurrently."),
    rule_names: Optional[List[str]] = typer.Option(None, "--rule", "-r", help="Only run the named rule (repeatable)."),
    assignments: Optional[List[str]] = typer.Option(
        None, "--set", help="Override a rule property: RuleName.property=value (repeatable)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """
    Analyze a single Java file or all .java files under a directory.
    """
    _configure_logging(verbose)
    try:
        config = _build_config(max_priority, workers, rule_names, assignments)
    except SiftError as e:
        raise typer.BadParameter(str(e)) from e

    rules = list(get_enabled_rules(config))
    if not rules:
        typer.echo("No rules are enabled in the current configuration.")
        raise typer.Exit(code=1)

    root, files = _collect_java_files(target)
    analyzer = Analyzer(rules, workers=config.workers)
    results = analyzer.analyze(root, files)

    for failure in analyzer.diagnostics:
        typer.echo(f"warning: {failure}", err=True)

    report = build_report_model(
        results,
        max_priority=config.max_priority,
        title=title,
        descriptions=config.descriptions,
    )
    print_report(report)


def main() -> None:
    """Entry point for `python -m sift.main` and the `sift` script."""
    app()


if __name__ == "__main__":
    main()
