"""Terminal telemetry implementing TelemetryPort with rich."""

import logging
from typing import Optional

from rich.console import Console
from rich.style import Style
from rich.text import Text

from enum_raw_values.domain.protocols import TelemetryPort

STYLES = {
    "error": Style(color="red", bold=True),
    "warning": Style(color="yellow"),
}


class ProjectTelemetry(TelemetryPort):
    """Progress, warnings and errors on stderr, mirrored to the debug log; reports go to stdout."""

    def __init__(
        self, project_name: str, color: str = "cyan", console: Optional[Console] = None
    ) -> None:
        self.project_name = project_name
        self.color = color
        self.console = console or Console(stderr=True)
        self.logger = logging.getLogger(__name__)

    def handshake(self) -> None:
        self.console.print(Text(self.project_name, style=Style(color=self.color, bold=True)))
        self.logger.debug("%s started", self.project_name)

    def step(self, message: str) -> None:
        self.console.print(Text(message))
        self.logger.debug(message)

    def warning(self, message: str) -> None:
        self.console.print(Text(f"warning: {message}", style=STYLES["warning"]))
        self.logger.debug(message)

    def error(self, message: str) -> None:
        self.console.print(Text(f"error: {message}", style=STYLES["error"]))
        self.logger.debug(message)
