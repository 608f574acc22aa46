"""Ports implemented by Infrastructure and consumed by use cases."""

from typing import Optional, Protocol, Sequence

from enum_raw_values.domain.entities import Change, ModuleScan, TransformationPlan
from enum_raw_values.domain.syntax import SourceText


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def handshake(self) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def glob_python_files(self, path: str) -> list[str]:
        """Get all Python files in path (recursive if directory)."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        ...


class DeclarationReaderProtocol(Protocol):
    """Front end: turns module text into the invocations to expand."""

    def scan_source(self, source: SourceText, path: Optional[str] = None) -> ModuleScan:
        """Parse source and collect every decorated declaration. Raises SourceParseError."""
        ...


class SourceEditorProtocol(Protocol):
    """Applies textual changes, then structural rewrites, to a source text."""

    def apply(
        self, source: str, changes: list[Change], plans: Sequence[TransformationPlan] = ()
    ) -> str:
        """Return source with every change and plan applied. Raises ChangeApplicationError."""
        ...
