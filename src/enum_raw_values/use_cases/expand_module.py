"""Expand every @enum_raw_values usage in a module and splice the companions in."""

import logging
from typing import Optional

from enum_raw_values.domain.entities import (
    Change,
    FileReport,
    Invocation,
    InvocationReport,
    ModuleExpansion,
    ModuleScan,
    TransformationPlan,
)
from enum_raw_values.domain.errors import ChangeApplicationError, SourceParseError
from enum_raw_values.domain.protocols import (
    DeclarationReaderProtocol,
    FileSystemProtocol,
    SourceEditorProtocol,
    TelemetryPort,
)
from enum_raw_values.domain.syntax import Fragment, SourceText
from enum_raw_values.use_cases.expand import EnumRawValuesExpander

logger = logging.getLogger(__name__)

RUNTIME_MODULE = "enum_raw_values.runtime"

# Names the generated companion refers to, in import order.
COMPANION_IMPORTS = (
    (RUNTIME_MODULE, ["RawRepresentable", "extension"]),
    ("typing", ["assert_never"]),
)


class ExpandModuleUseCase:
    """Orchestrates reader, expander and editor over whole modules."""

    def __init__(
        self,
        reader: DeclarationReaderProtocol,
        expander: EnumRawValuesExpander,
        editor: SourceEditorProtocol,
        filesystem: Optional[FileSystemProtocol] = None,
        telemetry: Optional[TelemetryPort] = None,
    ) -> None:
        self.reader = reader
        self.expander = expander
        self.editor = editor
        self.filesystem = filesystem
        self.telemetry = telemetry

    def analyze(
        self, source: str, path: Optional[str] = None
    ) -> tuple[ModuleScan, tuple[InvocationReport, ...]]:
        """Expand every invocation without editing. Raises SourceParseError."""
        scan = self.reader.scan_source(SourceText(source), path)
        reports = tuple(
            InvocationReport(
                invocation,
                self.expander.expand(
                    invocation.attribute,
                    invocation.declaration,
                    invocation.target_type_name,
                    indent=invocation.indent,
                ),
            )
            for invocation in scan.invocations
        )
        return scan, reports

    def expand_source(
        self, source: str, path: Optional[str] = None, strip_attribute: bool = False
    ) -> ModuleExpansion:
        """Return the module text with companions added or refreshed."""
        text = SourceText(source)
        _scan, reports = self.analyze(source, path)
        changes: list[Change] = []
        for report in reports:
            for companion in report.result.declarations:
                changes.append(self._companion_change(report.invocation, companion, text))
            if strip_attribute and report.result.declarations:
                changes.append(Change(report.invocation.attribute.line, Fragment("")))

        plans: list[TransformationPlan] = []
        if any(report.result.declarations for report in reports):
            plans = [
                TransformationPlan.add_import(module, names) for module, names in COMPANION_IMPORTS
            ]

        return ModuleExpansion(source, self.editor.apply(source, changes, plans), reports)

    def execute(
        self, paths: list[str], write: bool = True, strip_attribute: bool = False
    ) -> list[FileReport]:
        """Expand every Python file under paths, writing changed files when write is set."""
        if self.filesystem is None:
            raise ValueError("ExpandModuleUseCase.execute requires a filesystem gateway")
        results: list[FileReport] = []
        for file_path in (f for path in paths for f in self.filesystem.glob_python_files(path)):
            results.append(self._expand_file(file_path, write, strip_attribute))
        return results

    def _expand_file(self, file_path: str, write: bool, strip_attribute: bool) -> FileReport:
        source = self.filesystem.read_text(file_path)
        try:
            expansion = self.expand_source(source, file_path, strip_attribute)
        except (SourceParseError, ChangeApplicationError) as exc:
            logger.warning("Skipping %s: %s", file_path, exc)
            if self.telemetry:
                self.telemetry.error(f"{file_path}: {exc}")
            return FileReport(file_path, error=str(exc))
        if expansion.changed and write:
            self.filesystem.write_text(file_path, expansion.expanded_source)
            if self.telemetry:
                self.telemetry.step(f"Expanded {file_path}")
        return FileReport(
            file_path,
            diagnostics=expansion.diagnostics,
            changed=expansion.changed,
            output=expansion.expanded_source,
        )

    @staticmethod
    def _companion_change(invocation: Invocation, companion: Fragment, text: SourceText) -> Change:
        if invocation.existing_companion is not None:
            return Change(invocation.existing_companion, Fragment(companion.code + "\n"))
        end = invocation.anchor.span.end
        separator = "\n\n" if not invocation.indent else "\n"
        if end > 0 and text.text[end - 1] != "\n":
            separator = "\n" + separator
        return Change(text.insertion_point(end), Fragment(separator + companion.code + "\n"))

