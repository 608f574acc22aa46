"""Use case: apply the suggested fix of every diagnostic in a module."""

import logging
from typing import Optional

from enum_raw_values.domain.entities import (
    Change,
    Diagnostic,
    FileReport,
    FixIt,
    TransformationPlan,
)
from enum_raw_values.domain.errors import ChangeApplicationError, SourceParseError
from enum_raw_values.domain.protocols import FileSystemProtocol, TelemetryPort
from enum_raw_values.domain.syntax import Placeholder
from enum_raw_values.use_cases.expand_module import ExpandModuleUseCase

logger = logging.getLogger(__name__)


class ApplyFixesUseCase:
    """Orchestrate analysis and textual fix application across files."""

    def __init__(
        self,
        module_expander: ExpandModuleUseCase,
        filesystem: FileSystemProtocol,
        telemetry: Optional[TelemetryPort] = None,
    ) -> None:
        self.module_expander = module_expander
        self.filesystem = filesystem
        self.telemetry = telemetry

    @staticmethod
    def select_fixes(diagnostics: tuple[Diagnostic, ...], choice: int = 0) -> list[FixIt]:
        """
        Pick fixes[choice] (clamped to the last fix) per diagnostic.

        A fix whose changes overlap an already selected fix is skipped.
        """
        selected: list[FixIt] = []
        taken: list[Change] = []
        for diagnostic in diagnostics:
            if not diagnostic.fixes:
                continue
            fix = diagnostic.fixes[min(max(choice, 0), len(diagnostic.fixes) - 1)]
            if any(
                change.old.span.overlaps(other.old.span)
                or change.old.span.start == other.old.span.start
                for change in fix.changes
                for other in taken
            ):
                logger.warning(
                    "Line %d: skipping '%s', it conflicts with an earlier fix",
                    diagnostic.line,
                    fix.message.text.splitlines()[0],
                )
                continue
            selected.append(fix)
            taken.extend(fix.changes)
        return selected

    def fix_source(
        self, source: str, path: Optional[str] = None, choice: int = 0
    ) -> tuple[str, list[FixIt], tuple[Diagnostic, ...]]:
        """Return (fixed source, applied fixes, diagnostics found before fixing)."""
        _scan, reports = self.module_expander.analyze(source, path)
        diagnostics = tuple(d for report in reports for d in report.result.diagnostics)
        fixes = self.select_fixes(diagnostics, choice)
        changes = [change for fix in fixes for change in fix.changes]
        plans: list[TransformationPlan] = []
        for plan in (plan for fix in fixes for plan in fix.plans):
            if plan not in plans:
                plans.append(plan)
        return self.module_expander.editor.apply(source, changes, plans), fixes, diagnostics

    def execute(
        self, paths: list[str], choice: int = 0, dry_run: bool = False
    ) -> list[FileReport]:
        """Fix every Python file under paths. Returns one report per file."""
        results: list[FileReport] = []
        for file_path in (f for path in paths for f in self.filesystem.glob_python_files(path)):
            source = self.filesystem.read_text(file_path)
            try:
                fixed, fixes, diagnostics = self.fix_source(source, file_path, choice)
            except (SourceParseError, ChangeApplicationError) as exc:
                logger.warning("Skipping %s: %s", file_path, exc)
                if self.telemetry:
                    self.telemetry.error(f"{file_path}: {exc}")
                results.append(FileReport(file_path, error=str(exc)))
                continue
            changed = fixed != source
            if changed and not dry_run:
                self.filesystem.write_text(file_path, fixed)
                if self.telemetry:
                    self.telemetry.step(f"Applied {len(fixes)} fix(es) to {file_path}")
            if changed and self.telemetry and Placeholder.contains(fixed):
                self.telemetry.warning(f"{file_path}: replace the <#...#> placeholders")
            results.append(
                FileReport(
                    file_path,
                    diagnostics=diagnostics,
                    changed=changed,
                    applied_fixes=tuple(fixes),
                    output=fixed,
                )
            )
        return results
