"""Interface for diagnostic reporting."""

import os
from typing import Optional, Protocol

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from enum_raw_values.domain.entities import Diagnostic, FileReport
from enum_raw_values.domain.messages import Severity

SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.REMARK: "cyan",
}


class DiagnosticReporter(Protocol):
    """Protocol for reporting per-file results."""

    def report(self, reports: list[FileReport]) -> None:
        """Report results to the user."""
        ...


class TerminalDiagnosticReporter:
    """Compiler-style lines per diagnostic plus a rich summary table."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    @staticmethod
    def format_diagnostic(path: str, diagnostic: Diagnostic) -> str:
        """`path:line:col: severity: text [id]`, with one indented line per fix."""
        location = f"{path}:{diagnostic.line}:{diagnostic.column + 1}"
        lines = [
            f"{location}: {diagnostic.severity.value}: {diagnostic.message.text} "
            f"[{diagnostic.message.message_id}]"
        ]
        for index, fix in enumerate(diagnostic.fixes):
            label = fix.message.text.splitlines()[0]
            lines.append(f"    fix {index}: {label}")
        return "\n".join(lines)

    def report(self, reports: list[FileReport]) -> None:
        for file_report in reports:
            path = os.path.relpath(file_report.path)
            if file_report.error is not None:
                self.console.print(Text(f"{path}: {file_report.error}", style="bold red"))
                continue
            for diagnostic in file_report.diagnostics:
                self.console.print(
                    Text(
                        self.format_diagnostic(path, diagnostic),
                        style=SEVERITY_STYLES[diagnostic.severity],
                    )
                )
        self.console.print(self.summary_table(reports))

    @staticmethod
    def summary_table(reports: list[FileReport]) -> Table:
        counts = {severity: 0 for severity in Severity}
        for file_report in reports:
            for diagnostic in file_report.diagnostics:
                counts[diagnostic.severity] += 1
        table = Table(title="enum-raw-values", box=box.SIMPLE)
        table.add_column("Files", justify="right")
        table.add_column("Changed", justify="right")
        table.add_column("Unreadable", justify="right")
        for severity in Severity:
            table.add_column(severity.value.title() + "s", justify="right", style=SEVERITY_STYLES[severity])
        table.add_row(
            str(len(reports)),
            str(sum(1 for r in reports if r.changed)),
            str(sum(1 for r in reports if r.error is not None)),
            *(str(counts[severity]) for severity in Severity),
        )
        return table
