"""Use case: collect diagnostics for every Python file under the given paths."""

import logging
from typing import Optional

from enum_raw_values.domain.entities import FileReport
from enum_raw_values.domain.errors import SourceParseError
from enum_raw_values.domain.protocols import FileSystemProtocol, TelemetryPort
from enum_raw_values.use_cases.expand_module import ExpandModuleUseCase

logger = logging.getLogger(__name__)


class CheckSourcesUseCase:
    def __init__(
        self,
        module_expander: ExpandModuleUseCase,
        filesystem: FileSystemProtocol,
        telemetry: Optional[TelemetryPort] = None,
    ) -> None:
        self.module_expander = module_expander
        self.filesystem = filesystem
        self.telemetry = telemetry

    def execute(self, paths: list[str]) -> list[FileReport]:
        results: list[FileReport] = []
        for path in paths:
            files = self.filesystem.glob_python_files(path)
            if self.telemetry:
                self.telemetry.step(f"Checking {len(files)} file(s) in {path}")
            for file_path in files:
                results.append(self._check_file(file_path))
        return results

    def _check_file(self, file_path: str) -> FileReport:
        source = self.filesystem.read_text(file_path)
        try:
            _scan, reports = self.module_expander.analyze(source, file_path)
        except SourceParseError as exc:
            logger.warning("Skipping %s: %s", file_path, exc)
            return FileReport(file_path, error=str(exc))
        return FileReport(
            file_path,
            diagnostics=tuple(d for report in reports for d in report.result.diagnostics),
        )
