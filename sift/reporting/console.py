# Rich console output: render a ReportModel for terminal display.

from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sift.reporting.model import (
    DirectorySection,
    FileSection,
    ReportModel,
    format_count,
)

REPORT_NAME = "Sift Report"

# Priority -> Rich style
PRIORITY_STYLE = {
    1: "bold red",
    2: "bold yellow",
    3: "bold blue",
    4: "dim",
}

DEFAULT_PRIORITY_STYLE = "bold white"

SOURCE_PREFIX = "[SRC]"
MESSAGE_PREFIX = "[MSG]"


def _priority_style(priority: int) -> str:
    return PRIORITY_STYLE.get(priority, DEFAULT_PRIORITY_STYLE)


def print_report(report: ReportModel, console: Optional[Console] = None) -> None:
    """
    Print a report: the summary by package, one table per file with
    violations, and the descriptions of the rules that fired.
    """
    console = console or Console()

    heading = REPORT_NAME if not report.title else f"{REPORT_NAME}: {report.title}"
    console.print(Panel(f"[bold]{heading}[/bold]", box=box.ROUNDED, border_style="cyan"))

    _print_summary_table(report, console)

    if not report.directory_sections:
        console.print(
            Panel(
                "[green]No violations found.[/green]",
                border_style="green",
                box=box.ROUNDED,
            )
        )
        return

    for section in report.directory_sections:
        _print_directory_section(section, console)

    _print_rule_descriptions(report, console)


def _print_summary_table(report: ReportModel, console: Console) -> None:
    table = Table(
        title="Summary by Package",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("Package", style="white")
    table.add_column("Total Files", justify="right")
    table.add_column("Files with Violations", justify="right")
    for priority in report.priorities:
        table.add_column(f"Priority {priority}", justify="right", style=_priority_style(priority))

    for row in report.summary_rows:
        label = Text(row.label, style="bold" if row.path is None else "")
        table.add_row(
            label,
            str(row.total_files),
            format_count(row.files_with_violations),
            *(format_count(row.priority_counts.get(p, 0)) for p in report.priorities),
        )

    console.print()
    console.print(table)


def _print_directory_section(section: DirectorySection, console: Console) -> None:
    console.print()
    console.print(Panel(
        f"[bold cyan]Package: {section.path.replace('/', '.') or '<root>'}[/bold cyan]",
        box=box.SIMPLE_HEAD,
        border_style="blue",
        padding=(0, 1),
    ))
    for file_section in section.files:
        _print_file_table(file_section, console)


def _print_file_table(file_section: FileSection, console: Console) -> None:
    table = Table(
        title=file_section.display_name,
        title_justify="left",
        show_header=True,
        header_style="bold magenta",
        box=box.SIMPLE,
        padding=(0, 1),
        expand=False,
    )
    table.add_column("Rule Name", width=32)
    table.add_column("Priority", justify="right", width=8)
    table.add_column("Line #", justify="right", style="dim", width=6)
    table.add_column("Source Line / Message", style="white")

    for row in file_section.rows:
        info = Text()
        if row.source_line:
            info.append(f"{SOURCE_PREFIX} ", style="dim")
            info.append(row.source_line)
        if row.message:
            if info:
                info.append("\n")
            info.append(f"{MESSAGE_PREFIX} ", style="dim")
            info.append(row.message, style="italic")
        table.add_row(
            row.rule_name,
            Text(str(row.priority), style=_priority_style(row.priority)),
            "" if row.line_number is None else str(row.line_number),
            info,
        )

    console.print(table)


def _print_rule_descriptions(report: ReportModel, console: Console) -> None:
    if not report.rule_descriptions:
        return
    table = Table(
        title="Rule Descriptions",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("#", justify="right", width=3)
    table.add_column("Rule Name")
    table.add_column("Description")
    for entry in report.rule_descriptions:
        table.add_row(
            str(entry.index),
            Text(entry.rule_name, style=_priority_style(entry.priority)),
            entry.description,
        )

    console.print()
    console.print(table)
